"""Command-line interface for the AES-EAX conformance harness."""

from __future__ import annotations

import contextlib
import sys
from pathlib import Path

import click

from . import __version__
from .corpus import vectors
from .interfaces import PROCEDURE_NAMES, REPORT_FORMATS, HarnessConfig, HarnessReport
from .procedures import run_harness
from .providers import PROVIDERS, get_provider, list_providers
from .reporting import (
    export_to_csv,
    export_to_json,
    export_to_markdown,
    format_results_table,
    format_summary,
    format_vectors_table,
)
from .trace import TraceRecorder


@click.group()
@click.version_option(version=__version__, prog_name="eax-kat")
def main() -> None:
    """AES-EAX known-answer conformance harness.

    Drive an AEAD provider through the EAX vector corpus, including the
    counter-overflow and late-AAD cases.
    """
    pass


@main.command(name="list")
def list_cmd() -> None:
    """List available providers."""
    click.echo("Available providers:")
    click.echo("")
    for prov in list_providers():
        click.echo(f"  {prov['name']}")
        click.echo(f"    {prov['description']}")
        click.echo("")


@main.command(name="vectors")
def vectors_cmd() -> None:
    """List the vectors in the corpus."""
    corpus = vectors()
    click.echo(format_vectors_table(corpus))
    click.echo("")
    click.echo(f"{len(corpus)} vectors, all with 128-bit tags")


@main.command()
@click.option(
    "--provider",
    type=str,
    default="reference_eax",
    help="Provider to validate (default: reference_eax)",
)
@click.option(
    "--procedure",
    "procedures",
    type=click.Choice(PROCEDURE_NAMES),
    multiple=True,
    help="Procedure to run; repeat for several (default: all)",
)
@click.option(
    "--trace",
    "trace_path",
    type=click.Path(dir_okay=False),
    default=None,
    help="Write every provider call as JSON Lines to this file",
)
@click.option(
    "--verbose", "-v",
    is_flag=True,
    help="Show every vector and provider call",
)
def validate(
    provider: str,
    procedures: tuple[str, ...],
    trace_path: str | None,
    verbose: bool,
) -> None:
    """Validate a provider against the corpus; exit 1 on any failure."""
    try:
        provider_cls = get_provider(provider)
    except KeyError as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)

    config = HarnessConfig(
        provider=provider,
        procedures=procedures or PROCEDURE_NAMES,
        verbose=verbose,
    )

    click.echo(f"Validating: {config.provider}")
    click.echo(f"Procedures: {', '.join(config.procedures)}")
    click.echo("")

    if trace_path is None:
        trace_ctx = contextlib.nullcontext(None)
    else:
        trace_ctx = click.open_file(trace_path, "w")

    with trace_ctx as trace_file:
        tracer = None
        if config.verbose or trace_file is not None:
            tracer = TraceRecorder(verbose=config.verbose, trace_file=trace_file)
        report = run_harness(provider_cls(), config.procedures, tracer=tracer)

    if config.verbose:
        for summary in report.summaries:
            for r in summary.results:
                click.echo(f"  {summary.procedure} tc{r.tc_id}: {r.outcome.value.upper()}")
        click.echo("")

    click.echo(format_summary(report))

    click.echo("")
    if report.ok:
        click.echo("VALIDATION PASSED")
        sys.exit(0)
    else:
        click.echo(f"VALIDATION FAILED: {report.failed} failures")
        sys.exit(1)


@main.command()
@click.option(
    "--provider",
    type=str,
    default="all",
    help="Providers to evaluate (comma-separated or 'all', default: all)",
)
@click.option(
    "--procedure",
    "procedures",
    type=click.Choice(PROCEDURE_NAMES),
    multiple=True,
    help="Procedure to run; repeat for several (default: all)",
)
@click.option(
    "--format",
    "formats",
    type=click.Choice(REPORT_FORMATS),
    multiple=True,
    help="Report format; repeat for several (default: all)",
)
@click.option(
    "--out",
    "output_dir",
    type=click.Path(file_okay=False),
    default="reports",
    help="Output directory (default: reports)",
)
def report(
    provider: str,
    procedures: tuple[str, ...],
    formats: tuple[str, ...],
    output_dir: str,
) -> None:
    """Evaluate several providers and write report files."""
    if provider == "all":
        providers_to_run = list(PROVIDERS.keys())
    else:
        providers_to_run = [p.strip() for p in provider.split(",")]

    for p in providers_to_run:
        if p not in PROVIDERS:
            click.echo(f"Error: Unknown provider '{p}'", err=True)
            click.echo(f"Available: {', '.join(PROVIDERS.keys())}", err=True)
            sys.exit(1)

    configs = [
        HarnessConfig(
            provider=p,
            procedures=procedures or PROCEDURE_NAMES,
            output_dir=output_dir,
            formats=formats or REPORT_FORMATS,
        )
        for p in providers_to_run
    ]

    click.echo(f"Running {len(configs)} providers over {len(vectors())} vectors")
    click.echo("")

    reports: list[HarnessReport] = []
    for config in configs:
        provider_cls = get_provider(config.provider)
        reports.append(run_harness(provider_cls(), config.procedures))

    click.echo(format_results_table(reports))

    output_path = Path(configs[0].output_dir)
    output_path.mkdir(parents=True, exist_ok=True)
    wanted = configs[0].formats

    click.echo("")
    click.echo("Reports generated:")
    if "json" in wanted:
        click.echo(f"  JSON:     {export_to_json(reports, output_path / 'summary.json')}")
    if "csv" in wanted:
        click.echo(f"  CSV:      {export_to_csv(reports, output_path / 'results.csv')}")
    if "md" in wanted:
        click.echo(f"  Markdown: {export_to_markdown(reports, output_path / 'report.md')}")


if __name__ == "__main__":
    main()

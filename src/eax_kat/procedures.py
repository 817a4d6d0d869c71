"""Procedures that drive a provider through one vector and judge the output.

Every procedure takes a vector and a provider, opens its own session for
that vector, and returns a VectorResult.  Exceptions coming out of the
provider are turned into FAIL results so that one misbehaving vector never
stops the rest of the corpus from being evaluated.
"""

from __future__ import annotations

import logging
from typing import Callable, Iterable

from .codec import bytes_to_hex
from .corpus import KnownAnswerVector, vectors
from .errors import AuthenticationError, InvalidOperationState
from .interfaces import (
    PROCEDURE_NAMES,
    AeadProvider,
    AeadSession,
    HarnessReport,
    Mode,
    Outcome,
    RunSummary,
    VectorResult,
)
from .trace import TracedSession, TraceRecorder

logger = logging.getLogger(__name__)

Procedure = Callable[
    [KnownAnswerVector, AeadProvider, TraceRecorder | None], VectorResult
]


def _open_session(
    provider: AeadProvider,
    mode: Mode,
    vector: KnownAnswerVector,
    procedure: str,
    tracer: TraceRecorder | None,
) -> AeadSession:
    """Initialize a fresh session with the vector's parameters.

    The tag length is always passed explicitly so provider defaults never
    apply.
    """
    session = provider.initialize(
        mode, vector.key, vector.nonce, vector.tag_length_bits
    )
    if tracer is None:
        return session
    tracer.record(
        procedure=procedure,
        tc_id=vector.tc_id,
        call="initialize",
        mode=mode.value,
        key=vector.key,
        nonce=vector.nonce,
        tag_length_bits=vector.tag_length_bits,
    )
    return TracedSession(session, tracer, procedure, vector.tc_id)


def _result(
    procedure: str,
    vector: KnownAnswerVector,
    outcome: Outcome,
    detail: str = "",
    expected: bytes = b"",
    produced: bytes = b"",
) -> VectorResult:
    if outcome is not Outcome.PASS:
        logger.debug(
            "%s tc%d (%s): %s %s",
            procedure, vector.tc_id, vector.comment, outcome.value, detail,
        )
    return VectorResult(
        procedure=procedure,
        tc_id=vector.tc_id,
        outcome=outcome,
        detail=detail,
        comment=vector.comment,
        expected=expected,
        produced=produced,
    )


def _compare(
    procedure: str,
    vector: KnownAnswerVector,
    expected: bytes,
    produced: bytes,
    what: str = "Ciphertext",
) -> VectorResult:
    if produced == expected:
        return _result(procedure, vector, Outcome.PASS, expected=expected, produced=produced)
    return _result(
        procedure,
        vector,
        Outcome.FAIL,
        f"{what} mismatch: expected {bytes_to_hex(expected)}, "
        f"got {bytes_to_hex(produced)}",
        expected=expected,
        produced=produced,
    )


def _provider_error(
    procedure: str,
    vector: KnownAnswerVector,
    exc: Exception,
    expected: bytes,
) -> VectorResult:
    return _result(
        procedure,
        vector,
        Outcome.FAIL,
        f"Unexpected {type(exc).__name__}: {exc}",
        expected=expected,
    )


def encrypt_and_compare(
    vector: KnownAnswerVector,
    provider: AeadProvider,
    tracer: TraceRecorder | None = None,
) -> VectorResult:
    """Encrypt in the standard order (AAD, plaintext, finalize) and compare.

    Args:
        vector: Vector to evaluate
        provider: Provider under test
        tracer: Optional recorder for the provider calls

    Returns:
        PASS on exact equality with the expected ciphertext and tag,
        FAIL otherwise
    """
    name = "encrypt_and_compare"
    expected = vector.expected_ciphertext
    try:
        session = _open_session(provider, Mode.ENCRYPT, vector, name, tracer)
        session.update_aad(vector.associated_data)
        produced = session.update(vector.plaintext)
        produced += session.finalize()
    except Exception as e:
        return _provider_error(name, vector, e, expected)
    return _compare(name, vector, expected, produced)


def late_aad_tolerance(
    vector: KnownAnswerVector,
    provider: AeadProvider,
    tracer: TraceRecorder | None = None,
) -> VectorResult:
    """Encrypt with the AAD supplied after the plaintext.

    EAX authenticates the AAD independently of the ciphertext, so a provider
    may accept it at any point before finalize.  It may also insist on
    AAD-first ordering.

    Returns:
        PASS if late AAD is accepted and the output is exact,
        SKIP if update_aad raises InvalidOperationState,
        FAIL for a wrong output or any other exception
    """
    name = "late_aad_tolerance"
    expected = vector.expected_ciphertext
    try:
        session = _open_session(provider, Mode.ENCRYPT, vector, name, tracer)
        produced = session.update(vector.plaintext)
    except Exception as e:
        return _provider_error(name, vector, e, expected)

    try:
        session.update_aad(vector.associated_data)
    except InvalidOperationState as e:
        return _result(
            name,
            vector,
            Outcome.SKIP,
            f"Provider requires AAD before plaintext: {e}",
            expected=expected,
            produced=produced,
        )
    except Exception as e:
        return _provider_error(name, vector, e, expected)

    try:
        produced += session.finalize()
    except Exception as e:
        return _provider_error(name, vector, e, expected)
    return _compare(name, vector, expected, produced)


def decrypt_and_verify(
    vector: KnownAnswerVector,
    provider: AeadProvider,
    tracer: TraceRecorder | None = None,
) -> VectorResult:
    """Decrypt the expected ciphertext, then check a forged tag is refused.

    Returns:
        PASS if the plaintext is recovered exactly and the copy with its last
        tag bit flipped raises AuthenticationError, FAIL otherwise
    """
    name = "decrypt_and_verify"
    try:
        session = _open_session(provider, Mode.DECRYPT, vector, name, tracer)
        session.update_aad(vector.associated_data)
        produced = session.update(vector.expected_ciphertext)
        produced += session.finalize()
    except Exception as e:
        return _provider_error(name, vector, e, vector.plaintext)
    if produced != vector.plaintext:
        return _compare(name, vector, vector.plaintext, produced, what="Plaintext")

    forged = bytearray(vector.expected_ciphertext)
    forged[-1] ^= 0x01
    try:
        session = _open_session(provider, Mode.DECRYPT, vector, name, tracer)
        session.update_aad(vector.associated_data)
        session.update(bytes(forged))
        session.finalize()
    except AuthenticationError:
        return _result(
            name, vector, Outcome.PASS, expected=vector.plaintext, produced=produced
        )
    except Exception as e:
        return _provider_error(name, vector, e, vector.plaintext)
    return _result(
        name,
        vector,
        Outcome.FAIL,
        "Forged tag accepted",
        expected=vector.plaintext,
        produced=produced,
    )


# Registry in the order the harness runs them
PROCEDURES: dict[str, Procedure] = {
    "encrypt_and_compare": encrypt_and_compare,
    "late_aad_tolerance": late_aad_tolerance,
    "decrypt_and_verify": decrypt_and_verify,
}


def get_procedure(name: str) -> Procedure:
    """Get procedure function by name.

    Raises:
        KeyError: If procedure not found
    """
    if name not in PROCEDURES:
        available = ", ".join(PROCEDURES.keys())
        raise KeyError(f"Unknown procedure '{name}'. Available: {available}")
    return PROCEDURES[name]


def run_procedure(
    name: str,
    provider: AeadProvider,
    corpus: Iterable[KnownAnswerVector] | None = None,
    tracer: TraceRecorder | None = None,
) -> RunSummary:
    """Evaluate one procedure over every vector, in corpus order.

    Args:
        name: Procedure name
        provider: Provider under test
        corpus: Vectors to use (default: the full corpus)
        tracer: Optional recorder for the provider calls

    Returns:
        RunSummary with one result per vector
    """
    procedure = get_procedure(name)
    summary = RunSummary(procedure=name, provider=provider.name)
    for vector in vectors() if corpus is None else corpus:
        summary.results.append(procedure(vector, provider, tracer))
    logger.debug(
        "%s on %s: %d passed, %d skipped, %d failed",
        name, provider.name, summary.passed, summary.skipped, summary.failed,
    )
    return summary


def run_harness(
    provider: AeadProvider,
    procedures: Iterable[str] = PROCEDURE_NAMES,
    corpus: Iterable[KnownAnswerVector] | None = None,
    tracer: TraceRecorder | None = None,
) -> HarnessReport:
    """Run the selected procedures against one provider.

    Returns:
        HarnessReport; its ``ok`` is True only if no vector failed
    """
    corpus = vectors() if corpus is None else tuple(corpus)
    report = HarnessReport(provider=provider.name)
    for name in procedures:
        report.summaries.append(run_procedure(name, provider, corpus, tracer))
    return report

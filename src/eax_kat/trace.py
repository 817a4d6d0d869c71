"""
Recording of the call sequence a procedure drives a provider through.

Contains:
- TraceRecorder: in-memory records, optional JSON Lines file, verbose echo
- TracedSession: AeadSession wrapper that reports every call to a recorder
"""

from __future__ import annotations

import json
from typing import Any, TextIO

import click

from .codec import bytes_to_hex
from .interfaces import AeadSession


class TraceRecorder:
    """
    Records provider calls made by the procedures.

    Supports:
    - JSON Lines file output  (when trace_file is set)
    - Compact verbose stdout  (when verbose is set)
    """

    def __init__(self, verbose: bool = False, trace_file: TextIO | None = None):
        self.verbose = verbose
        self.trace_file = trace_file
        self._records: list[dict[str, Any]] = []

    def record(self, **kwargs) -> None:
        """Record a trace entry."""
        self._records.append(kwargs)

        if self.trace_file:
            self._write_jsonl(kwargs)

        if self.verbose:
            self._print_verbose(kwargs)

    def _write_jsonl(self, record: dict[str, Any]) -> None:
        serializable = self._make_serializable(record)
        self.trace_file.write(json.dumps(serializable) + "\n")
        self.trace_file.flush()

    def _make_serializable(self, obj: Any) -> Any:
        if isinstance(obj, dict):
            return {k: self._make_serializable(v) for k, v in obj.items()}
        elif isinstance(obj, list):
            return [self._make_serializable(item) for item in obj]
        elif isinstance(obj, bytes):
            return obj.hex()
        else:
            return obj

    def _print_verbose(self, record: dict[str, Any]) -> None:
        tc_id = record.get("tc_id", 0)
        procedure = record.get("procedure", "?")
        call = record.get("call", "?")
        line = f"  tc{tc_id:03d} {procedure:20s} {call:10s}"
        if "data" in record:
            line += f" in={self._format_value(record['data'])}"
        if "output" in record:
            line += f" out={self._format_value(record['output'])}"
        if "error" in record:
            line += f" raised {record['error']}"
        click.echo(line)

    @staticmethod
    def _format_value(value: Any) -> str:
        # A faulty provider may hand back something other than bytes
        if isinstance(value, bytes):
            return bytes_to_hex(value) or "-"
        return repr(value)

    def get_records(self) -> list[dict[str, Any]]:
        return list(self._records)

    def clear(self) -> None:
        self._records.clear()


class TracedSession(AeadSession):
    """Forward every call to ``inner`` and record it."""

    def __init__(
        self,
        inner: AeadSession,
        recorder: TraceRecorder,
        procedure: str,
        tc_id: int,
    ):
        self._inner = inner
        self._recorder = recorder
        self._procedure = procedure
        self._tc_id = tc_id

    def _record(self, call: str, **kwargs) -> None:
        self._recorder.record(
            procedure=self._procedure, tc_id=self._tc_id, call=call, **kwargs
        )

    def update_aad(self, data: bytes) -> None:
        try:
            self._inner.update_aad(data)
        except Exception as e:
            self._record("update_aad", data=data, error=type(e).__name__)
            raise
        self._record("update_aad", data=data)

    def update(self, data: bytes) -> bytes:
        try:
            out = self._inner.update(data)
        except Exception as e:
            self._record("update", data=data, error=type(e).__name__)
            raise
        self._record("update", data=data, output=out)
        return out

    def finalize(self) -> bytes:
        try:
            out = self._inner.finalize()
        except Exception as e:
            self._record("finalize", error=type(e).__name__)
            raise
        self._record("finalize", output=out)
        return out

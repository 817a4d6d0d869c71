"""Core interfaces and data structures for the EAX conformance harness."""

from __future__ import annotations

import enum
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any

# Order in which the harness runs its procedures
PROCEDURE_NAMES = (
    "encrypt_and_compare",
    "late_aad_tolerance",
    "decrypt_and_verify",
)

REPORT_FORMATS = ("json", "csv", "md")


class Mode(enum.Enum):
    """Direction a provider session is initialized for."""

    ENCRYPT = "encrypt"
    DECRYPT = "decrypt"


class Outcome(enum.Enum):
    """Three-way result of evaluating one vector."""

    PASS = "pass"
    SKIP = "skip"
    FAIL = "fail"


@dataclass
class HarnessConfig:
    """Configuration object for a harness run.

    Built by the CLI from its options; the procedures themselves take no
    configuration since every vector pins its own parameters.
    """

    # Registered provider name
    provider: str = "reference_eax"

    # Procedures to run, in PROCEDURE_NAMES order
    procedures: tuple[str, ...] = PROCEDURE_NAMES

    # Echo per-vector lines and provider calls
    verbose: bool = False

    # Where report files go
    output_dir: str = "reports"
    formats: tuple[str, ...] = REPORT_FORMATS

    def __post_init__(self) -> None:
        """Validate configuration parameters."""
        if not self.provider:
            raise ValueError("provider must be a non-empty name")
        if not self.procedures:
            raise ValueError("at least one procedure must be selected")
        for name in self.procedures:
            if name not in PROCEDURE_NAMES:
                raise ValueError(f"Unknown procedure: {name}")
        for fmt in self.formats:
            if fmt not in REPORT_FORMATS:
                raise ValueError(f"Unknown report format: {fmt}")
        # Keep the canonical order regardless of how they were given
        self.procedures = tuple(p for p in PROCEDURE_NAMES if p in self.procedures)


@dataclass
class VectorResult:
    """Outcome of one procedure applied to one vector."""

    procedure: str
    tc_id: int
    outcome: Outcome
    detail: str = ""
    comment: str = ""
    expected: bytes = b""
    produced: bytes = b""

    @property
    def passed(self) -> bool:
        return self.outcome is Outcome.PASS

    @property
    def skipped(self) -> bool:
        return self.outcome is Outcome.SKIP

    @property
    def failed(self) -> bool:
        return self.outcome is Outcome.FAIL

    def to_dict(self) -> dict[str, Any]:
        """Convert result to dictionary for serialization."""
        return {
            "procedure": self.procedure,
            "tc_id": self.tc_id,
            "comment": self.comment,
            "outcome": self.outcome.value,
            "detail": self.detail,
            "expected_hex": self.expected.hex(),
            "produced_hex": self.produced.hex(),
        }


@dataclass
class RunSummary:
    """All results of one procedure over the corpus for one provider."""

    procedure: str
    provider: str
    results: list[VectorResult] = field(default_factory=list)

    @property
    def total(self) -> int:
        return len(self.results)

    @property
    def passed(self) -> int:
        return sum(1 for r in self.results if r.passed)

    @property
    def skipped(self) -> int:
        return sum(1 for r in self.results if r.skipped)

    @property
    def failed(self) -> int:
        return sum(1 for r in self.results if r.failed)

    @property
    def ok(self) -> bool:
        """True when no vector failed; skips do not count against."""
        return self.failed == 0

    def failures(self) -> list[VectorResult]:
        return [r for r in self.results if r.failed]

    def counts(self) -> tuple[int, int, int]:
        """(passed, skipped, failed)"""
        return (self.passed, self.skipped, self.failed)

    def to_dict(self) -> dict[str, Any]:
        """Convert summary to dictionary for serialization."""
        return {
            "procedure": self.procedure,
            "provider": self.provider,
            "total": self.total,
            "passed": self.passed,
            "skipped": self.skipped,
            "failed": self.failed,
            "ok": self.ok,
            "results": [r.to_dict() for r in self.results],
        }


@dataclass
class HarnessReport:
    """Aggregate of every procedure run against one provider."""

    provider: str
    summaries: list[RunSummary] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return all(s.ok for s in self.summaries)

    @property
    def failed(self) -> int:
        return sum(s.failed for s in self.summaries)

    def summary_for(self, procedure: str) -> RunSummary:
        for s in self.summaries:
            if s.procedure == procedure:
                return s
        raise KeyError(f"No results for procedure '{procedure}'")

    def to_dict(self) -> dict[str, Any]:
        return {
            "provider": self.provider,
            "ok": self.ok,
            "summaries": [s.to_dict() for s in self.summaries],
        }


class AeadSession(ABC):
    """One initialized encryption or decryption pass of a provider.

    Sessions are single use: a session that has been finalized must not be
    fed again, and the harness never reuses one across vectors.
    """

    @abstractmethod
    def update_aad(self, data: bytes) -> None:
        """Feed associated data.

        Raises:
            InvalidOperationState: If the provider requires AAD before
                any plaintext or ciphertext and some was already fed
        """
        raise NotImplementedError

    @abstractmethod
    def update(self, data: bytes) -> bytes:
        """Feed plaintext (encrypt) or ciphertext-with-tag (decrypt).

        Returns:
            Output produced so far; may be empty if the provider buffers
        """
        raise NotImplementedError

    @abstractmethod
    def finalize(self) -> bytes:
        """Finish the pass.

        Returns:
            Encrypt: remaining ciphertext followed by the tag.
            Decrypt: remaining plaintext.

        Raises:
            AuthenticationError: If the tag does not verify (decrypt)
        """
        raise NotImplementedError


class AeadProvider(ABC):
    """Abstract base class for AES-EAX implementations under test.

    All providers must inherit from this class and implement initialize().
    """

    # Class attributes to be overridden by subclasses
    name: str = "base"
    description: str = "Base provider (abstract)"

    @abstractmethod
    def initialize(
        self,
        mode: Mode,
        key: bytes,
        nonce: bytes,
        tag_length_bits: int,
    ) -> AeadSession:
        """Create a fresh session.

        Args:
            mode: Mode.ENCRYPT or Mode.DECRYPT
            key: 16, 24 or 32 byte AES key
            nonce: Nonce of any nonzero length
            tag_length_bits: Requested tag length in bits

        Returns:
            A new AeadSession

        Raises:
            InvalidKeyOrParameters: If any parameter is rejected
        """
        raise NotImplementedError

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(name={self.name!r})"

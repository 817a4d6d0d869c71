"""AES-EAX known-answer conformance harness."""

__version__ = "0.1.0"

from .corpus import KnownAnswerVector, vectors, get_vector
from .errors import (
    AuthenticationError,
    CorpusError,
    HarnessError,
    InvalidKeyOrParameters,
    InvalidOperationState,
)
from .interfaces import (
    AeadProvider,
    AeadSession,
    HarnessConfig,
    HarnessReport,
    Mode,
    Outcome,
    RunSummary,
    VectorResult,
)
from .procedures import (
    decrypt_and_verify,
    encrypt_and_compare,
    late_aad_tolerance,
    run_harness,
    run_procedure,
)

__all__ = [
    "KnownAnswerVector",
    "vectors",
    "get_vector",
    "HarnessError",
    "CorpusError",
    "InvalidOperationState",
    "InvalidKeyOrParameters",
    "AuthenticationError",
    "AeadProvider",
    "AeadSession",
    "HarnessConfig",
    "HarnessReport",
    "Mode",
    "Outcome",
    "RunSummary",
    "VectorResult",
    "encrypt_and_compare",
    "late_aad_tolerance",
    "decrypt_and_verify",
    "run_procedure",
    "run_harness",
]

"""Exceptions raised by the harness and by providers under test."""


class HarnessError(Exception):
    """Base exception for the EAX conformance harness."""


class CorpusError(HarnessError):
    """The literal vector corpus is malformed."""


class ProviderError(HarnessError):
    """Base class for signals a provider under test may raise."""


class InvalidOperationState(ProviderError):
    """Call is not allowed in the session's current state (e.g. late AAD)."""


class InvalidKeyOrParameters(ProviderError):
    """Key, nonce, mode or tag length rejected at initialization."""


class AuthenticationError(ProviderError):
    """Tag verification failed during decryption."""

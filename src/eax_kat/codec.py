"""Hex conversions used to materialize the corpus and to report results."""

from .errors import CorpusError


def hex_to_bytes(hex_str: str) -> bytes:
    """
    Convert hex string to bytes.

    Args:
        hex_str: Hex string, possibly empty

    Returns:
        bytes

    Raises:
        CorpusError: If the string is not valid hex
    """
    try:
        return bytes.fromhex(hex_str)
    except (TypeError, ValueError) as e:
        raise CorpusError(f"Invalid hex literal {hex_str!r}: {e}") from e


def bytes_to_hex(data: bytes) -> str:
    """
    Convert bytes to hex string.

    Args:
        data: bytes

    Returns:
        Lowercase hex string
    """
    return bytes(data).hex()

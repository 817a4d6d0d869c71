"""Parameter checks shared by the bundled providers."""

from __future__ import annotations

from eax_kat.errors import InvalidKeyOrParameters
from eax_kat.interfaces import Mode

AES_KEY_SIZES = (16, 24, 32)

# EAX allows any whole-byte tag up to the block size; 32 bits is our floor
MIN_TAG_BITS = 32
MAX_TAG_BITS = 128


def validate_parameters(
    mode: Mode, key: bytes, nonce: bytes, tag_length_bits: int
) -> int:
    """Check initialization parameters.

    Returns:
        Tag length in bytes

    Raises:
        InvalidKeyOrParameters: If any parameter is unusable
    """
    if not isinstance(mode, Mode):
        raise InvalidKeyOrParameters(f"Unknown mode: {mode!r}")
    if len(key) not in AES_KEY_SIZES:
        raise InvalidKeyOrParameters(f"Key must be 16, 24 or 32 bytes, got {len(key)}")
    if not nonce:
        raise InvalidKeyOrParameters("Nonce must not be empty")
    if (
        tag_length_bits % 8
        or not MIN_TAG_BITS <= tag_length_bits <= MAX_TAG_BITS
    ):
        raise InvalidKeyOrParameters(
            f"Tag length must be a multiple of 8 in {MIN_TAG_BITS}..{MAX_TAG_BITS} bits, "
            f"got {tag_length_bits}"
        )
    return tag_length_bits // 8


def split_tag(held: bytes, data: bytes, tag_length: int) -> tuple[bytes, bytes]:
    """Withhold the last ``tag_length`` bytes of a decryption stream.

    Args:
        held: Bytes withheld by the previous call
        data: Newly fed bytes
        tag_length: Tag length in bytes

    Returns:
        Tuple of (bytes safe to decrypt now, bytes to keep withholding)
    """
    buf = held + data
    if len(buf) <= tag_length:
        return b"", buf
    return buf[:-tag_length], buf[-tag_length:]

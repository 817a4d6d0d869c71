"""Adapter for PyCryptodome's AES EAX mode.

PyCryptodome only accepts ``update()`` (associated data) before the first
``encrypt()``/``decrypt()`` and signals a late call with ``TypeError``; the
adapter reports that as InvalidOperationState.
"""

from __future__ import annotations

from Crypto.Cipher import AES

from eax_kat.errors import AuthenticationError, InvalidKeyOrParameters, InvalidOperationState
from eax_kat.interfaces import AeadProvider, AeadSession, Mode

from .base import split_tag, validate_parameters


class PyCryptodomeEaxSession(AeadSession):
    """Wrap one ``AES.new(..., AES.MODE_EAX)`` cipher object."""

    def __init__(self, mode: Mode, key: bytes, nonce: bytes, tag_length: int):
        try:
            self._cipher = AES.new(key, AES.MODE_EAX, nonce=nonce, mac_len=tag_length)
        except ValueError as e:
            raise InvalidKeyOrParameters(str(e)) from e
        self._mode = mode
        self._tag_length = tag_length
        self._held = b""

    def update_aad(self, data: bytes) -> None:
        try:
            self._cipher.update(data)
        except TypeError as e:
            raise InvalidOperationState(str(e)) from e

    def update(self, data: bytes) -> bytes:
        try:
            if self._mode is Mode.ENCRYPT:
                return self._cipher.encrypt(data)
            body, self._held = split_tag(self._held, data, self._tag_length)
            return self._cipher.decrypt(body)
        except TypeError as e:
            raise InvalidOperationState(str(e)) from e

    def finalize(self) -> bytes:
        if self._mode is Mode.ENCRYPT:
            try:
                return self._cipher.digest()
            except TypeError as e:
                raise InvalidOperationState(str(e)) from e

        try:
            self._cipher.verify(self._held)
        except ValueError as e:
            raise AuthenticationError(str(e)) from e
        except TypeError as e:
            raise InvalidOperationState(str(e)) from e
        return b""


class PyCryptodomeEax(AeadProvider):
    """PyCryptodome's native EAX."""

    name = "pycryptodome_eax"
    description = "PyCryptodome AES.MODE_EAX; requires AAD first"

    def initialize(
        self,
        mode: Mode,
        key: bytes,
        nonce: bytes,
        tag_length_bits: int,
    ) -> AeadSession:
        tag_length = validate_parameters(mode, key, nonce, tag_length_bits)
        return PyCryptodomeEaxSession(mode, key, nonce, tag_length)

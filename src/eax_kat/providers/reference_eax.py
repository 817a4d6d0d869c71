"""Streaming pure-Python AES-EAX.

OMAC and CTR are written in the online style, so plaintext, ciphertext and
associated data may arrive in pieces of any size and in any order before
finalize.  The block cipher itself comes from PyCryptodome's AES-ECB.

EAX over key K, nonce N, header H and message M::

    N' = OMAC_0(N)    H' = OMAC_1(H)    C = CTR(N', M)    C' = OMAC_2(C)
    tag = N' ^ H' ^ C'
"""

from __future__ import annotations

import hmac
from typing import Callable

from Crypto.Cipher import AES

from eax_kat.errors import AuthenticationError, InvalidOperationState
from eax_kat.interfaces import AeadProvider, AeadSession, Mode

from .base import split_tag, validate_parameters

BLOCKSIZE = 16
BLOCKSIZE_MASK = (1 << 128) - 1
ENDIAN = "big"


def gf_double(a: int) -> int:
    """Multiply by x in GF(2^128) with the 0x87 reduction."""
    if a >> 127:
        a = (a << 1) ^ 0x87
    else:
        a = a << 1
    return a & BLOCKSIZE_MASK


def xorstrings(b0: bytes, b1: bytes) -> bytes:
    return bytes([a ^ b for a, b in zip(b0, b1)])


class OmacStream:
    """OMAC1 with the EAX tweak block prepended, fed incrementally."""

    def __init__(self, ecb, tweak: int):
        L = int.from_bytes(ecb.encrypt(bytes(BLOCKSIZE)), ENDIAN)
        L2 = gf_double(L)
        L4 = gf_double(L2)

        self._ecb = ecb
        self._l2 = L2.to_bytes(BLOCKSIZE, ENDIAN)
        self._l4 = L4.to_bytes(BLOCKSIZE, ENDIAN)
        # The last full block is held back until we know whether it is final
        self._ready = bytes(BLOCKSIZE - 1) + bytes([tweak])
        self._mac = bytes(BLOCKSIZE)
        self._buf = b""

    def update(self, data: bytes) -> None:
        self._buf += data
        while len(self._buf) >= BLOCKSIZE:
            self._mac = self._ecb.encrypt(xorstrings(self._ready, self._mac))
            self._ready = self._buf[:BLOCKSIZE]
            self._buf = self._buf[BLOCKSIZE:]

    def digest(self) -> bytes:
        """MAC of everything fed so far; the stream stays usable."""
        ready = self._ready
        buf = self._buf

        if not buf:
            ready = xorstrings(ready, self._l2)

        mac = self._ecb.encrypt(xorstrings(ready, self._mac))

        if buf:
            buf = (buf + b"\x80").ljust(BLOCKSIZE, b"\0")
            mac = self._ecb.encrypt(xorstrings(xorstrings(buf, self._l4), mac))

        return mac


class CtrStream:
    """CTR keystream whose counter is the full 128-bit block."""

    def __init__(self, ecb, initial: bytes):
        self._ecb = ecb
        self._initial = int.from_bytes(initial, ENDIAN)
        self._pos = 0
        self._keystream = b""

    def counter_block(self, index: int) -> bytes:
        """Counter for the ``index``-th keystream block."""
        return ((self._initial + index) & BLOCKSIZE_MASK).to_bytes(BLOCKSIZE, ENDIAN)

    def process(self, data: bytes) -> bytes:
        out = bytearray()
        for byte in data:
            offset = self._pos % BLOCKSIZE
            if offset == 0:
                self._keystream = self._ecb.encrypt(
                    self.counter_block(self._pos // BLOCKSIZE)
                )
            out.append(byte ^ self._keystream[offset])
            self._pos += 1
        return bytes(out)


CtrFactory = Callable[[object, bytes], CtrStream]


class ReferenceEaxSession(AeadSession):
    """One EAX pass.  The three OMACs run side by side, so AAD can be fed
    before, between or after message chunks."""

    def __init__(
        self,
        mode: Mode,
        key: bytes,
        nonce: bytes,
        tag_length: int,
        strict_aad_order: bool = False,
        ctr_factory: CtrFactory = CtrStream,
    ):
        ecb = AES.new(key, AES.MODE_ECB)

        nonce_mac = OmacStream(ecb, 0)
        nonce_mac.update(nonce)
        self._n = nonce_mac.digest()
        self._header = OmacStream(ecb, 1)
        self._ct_mac = OmacStream(ecb, 2)
        self._ctr = ctr_factory(ecb, self._n)

        self._mode = mode
        self._tag_length = tag_length
        self._strict_aad_order = strict_aad_order
        self._started = False
        self._finalized = False
        self._held = b""

    def _check_open(self) -> None:
        if self._finalized:
            raise InvalidOperationState("Session already finalized")

    def update_aad(self, data: bytes) -> None:
        self._check_open()
        if self._strict_aad_order and self._started:
            raise InvalidOperationState(
                "Associated data must be supplied before any message data"
            )
        self._header.update(data)

    def update(self, data: bytes) -> bytes:
        self._check_open()
        self._started = True
        if self._mode is Mode.ENCRYPT:
            out = self._ctr.process(data)
            self._ct_mac.update(out)
            return out

        body, self._held = split_tag(self._held, data, self._tag_length)
        self._ct_mac.update(body)
        return self._ctr.process(body)

    def _tag(self) -> bytes:
        tag = xorstrings(xorstrings(self._n, self._ct_mac.digest()), self._header.digest())
        return tag[: self._tag_length]

    def finalize(self) -> bytes:
        self._check_open()
        self._finalized = True
        if self._mode is Mode.ENCRYPT:
            return self._tag()

        if len(self._held) < self._tag_length:
            raise AuthenticationError("Input shorter than the tag")
        if not hmac.compare_digest(self._tag(), self._held):
            raise AuthenticationError("Tag mismatch")
        return b""


class ReferenceEax(AeadProvider):
    """Pure-Python EAX that accepts associated data at any time."""

    name = "reference_eax"
    description = "Streaming pure-Python EAX; accepts late AAD"

    strict_aad_order = False

    def make_ctr(self, ecb, initial: bytes) -> CtrStream:
        return CtrStream(ecb, initial)

    def initialize(
        self,
        mode: Mode,
        key: bytes,
        nonce: bytes,
        tag_length_bits: int,
    ) -> AeadSession:
        tag_length = validate_parameters(mode, key, nonce, tag_length_bits)
        return ReferenceEaxSession(
            mode,
            key,
            nonce,
            tag_length,
            strict_aad_order=self.strict_aad_order,
            ctr_factory=self.make_ctr,
        )


class StrictReferenceEax(ReferenceEax):
    """Same as ReferenceEax but refuses AAD once message data was fed."""

    name = "reference_eax_strict"
    description = "Streaming pure-Python EAX; requires AAD first"

    strict_aad_order = True

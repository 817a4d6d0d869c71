"""Deliberately defective EAX variants for exercising the overflow vectors.

These increment only the low 32 or 64 bits of the counter block and drop
the carry into the rest of it, which is how a CTR implementation borrowed
from GCM or from a 64-bit counter mode typically goes wrong inside EAX.
They agree with a correct EAX whenever no carry leaves the low bits.
"""

from __future__ import annotations

from .reference_eax import BLOCKSIZE, BLOCKSIZE_MASK, ENDIAN, CtrStream, ReferenceEax


class NarrowCtrStream(CtrStream):
    """CtrStream that wraps within the low ``counter_bits`` bits."""

    def __init__(self, ecb, initial: bytes, counter_bits: int):
        super().__init__(ecb, initial)
        self._mask = (1 << counter_bits) - 1

    def counter_block(self, index: int) -> bytes:
        fixed = self._initial & ~self._mask & BLOCKSIZE_MASK
        counter = fixed | ((self._initial + index) & self._mask)
        return counter.to_bytes(BLOCKSIZE, ENDIAN)


class NarrowCounterEax(ReferenceEax):
    """Base for the narrow-counter variants."""

    counter_bits: int = 128

    def make_ctr(self, ecb, initial: bytes) -> CtrStream:
        return NarrowCtrStream(ecb, initial, self.counter_bits)


class NarrowCtr32Eax(NarrowCounterEax):
    name = "narrow_ctr32_eax"
    description = "DEFECTIVE: EAX with a 32-bit counter increment (for demonstration)"

    counter_bits = 32


class NarrowCtr64Eax(NarrowCounterEax):
    name = "narrow_ctr64_eax"
    description = "DEFECTIVE: EAX with a 64-bit counter increment (for demonstration)"

    counter_bits = 64

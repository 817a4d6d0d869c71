"""Known-answer vectors for AES-EAX with 128-bit tags.

The first ten vectors are the reference vectors published with the EAX
mode.  The counter-overflow vectors were generated so that the CTR counter
(the OMAC of the nonce) sits on or next to a 32-, 63/64- or 128-bit carry
boundary; an implementation that increments only part of the counter block
gets the second or third keystream block wrong.  Their comments describe the
counter read in little-endian byte order, not the big-endian EAX counter, so
"overflow at the 32-bit boundary" does not carry out of the low 32 bits of
the counter EAX actually increments.  The remaining vectors cover 192- and
256-bit keys and nonces that are not 16 bytes long.
"""

from __future__ import annotations

from dataclasses import dataclass

from .codec import hex_to_bytes
from .errors import CorpusError

# Every vector uses a 128-bit tag, even where a provider defaults shorter
TAG_LENGTH_BITS = 128

AES_KEY_SIZES = (16, 24, 32)

_OVERFLOW_KEY = "000102030405060708090a0b0c0d0e0f"
_TWO_BLOCKS = "0000000000000000000000000000000011111111111111111111111111111111"
_FOUR_BLOCKS = (
    _TWO_BLOCKS
    + "2222222222222222222222222222222233333333333333333333333333333333"
)
_FIVE_BLOCKS = _FOUR_BLOCKS + "44444444444444444444444444444444"
_KEY_192 = "03dd258601c1d4872a52b27892db0356911b2df1436dc7f4"
_KEY_256 = "0172acf299142c001d0c231287c1182784554ca3a21908276ac2c92af1294612"

# Format: (comment, plaintext, key, nonce, aad, ciphertext || tag)
_RAW_VECTORS: tuple[tuple[str, str, str, str, str, str], ...] = (
    (
        "reference vector 1",
        "",
        "233952dee4d5ed5f9b9c6d6ff80ff478",
        "62ec67f9c3a4a407fcb2a8c49031a8b3",
        "6bfb914fd07eae6b",
        "e037830e8389f27b025a2d6527e79d01",
    ),
    (
        "reference vector 2",
        "f7fb",
        "91945d3f4dcbee0bf45ef52255f095a4",
        "becaf043b0a23d843194ba972c66debd",
        "fa3bfd4806eb53fa",
        "19dd5c4c9331049d0bdab0277408f67967e5",
    ),
    (
        "reference vector 3",
        "1a47cb4933",
        "01f74ad64077f2e704c0f60ada3dd523",
        "70c3db4f0d26368400a10ed05d2bff5e",
        "234a3463c1264ac6",
        "d851d5bae03a59f238a23e39199dc9266626c40f80",
    ),
    (
        "reference vector 4",
        "481c9e39b1",
        "d07cf6cbb7f313bdde66b727afd3c5e8",
        "8408dfff3c1a2b1292dc199e46b7d617",
        "33cce2eabff5a79d",
        "632a9d131ad4c168a4225d8e1ff755939974a7bede",
    ),
    (
        "reference vector 5",
        "40d0c07da5e4",
        "35b6d0580005bbc12b0587124557d2c2",
        "fdb6b06676eedc5c61d74276e1f8e816",
        "aeb96eaebe2970e9",
        "071dfe16c675cb0677e536f73afe6a14b74ee49844dd",
    ),
    (
        "reference vector 6",
        "4de3b35c3fc039245bd1fb7d",
        "bd8e6e11475e60b268784c38c62feb22",
        "6eac5c93072d8e8513f750935e46da1b",
        "d4482d1ca78dce0f",
        "835bb4f15d743e350e728414abb8644fd6ccb86947c5e10590210a4f",
    ),
    (
        "reference vector 7",
        "8b0a79306c9ce7ed99dae4f87f8dd61636",
        "7c77d6e813bed5ac98baa417477a2e7d",
        "1a8c98dcd73d38393b2bf1569deefc19",
        "65d2017990d62528",
        "02083e3979da014812f59f11d52630da30137327d10649b0aa6e1c181db617d7"
        "f2",
    ),
    (
        "reference vector 8",
        "1bda122bce8a8dbaf1877d962b8592dd2d56",
        "5fff20cafab119ca2fc73549e20f5b0d",
        "dde59b97d722156d4d9aff2bc7559826",
        "54b9f04e6a09189a",
        "2ec47b2c4954a489afc7ba4897edcdae8cc33b60450599bd02c96382902aef7f"
        "832a",
    ),
    (
        "reference vector 9",
        "6cf36720872b8513f6eab1a8a44438d5ef11",
        "a4a4782bcffd3ec5e7ef6d8c34a56123",
        "b781fcf2f75fa5a8de97a9ca48e522ec",
        "899a175897561d7e",
        "0de18fd0fdd91e7af19f1d8ee8733938b1e8e7f6d2231618102fdb7fe55ff199"
        "1700",
    ),
    (
        "reference vector 10",
        "ca40d7446e545ffaed3bd12a740a659ffbbb3ceab7",
        "8395fcf1e95bebd697bd010bc766aac3",
        "22e7add93cfc6393c57ec0b3c17d6b44",
        "126735fcc320d25a",
        "cb8920f87a6c75cff39627b56e3ed197c552d295a7cfc46afc253b4652b1af37"
        "95b124ab6e",
    ),
    (
        "counter overflow: initial counter 2^128-1",
        _TWO_BLOCKS,
        _OVERFLOW_KEY,
        "3c8cc2970a008f75cc5beae2847258c2",
        "",
        "3c441f32ce07822364d7a2990e50bb13d7b02a26969e4a937e5e9073b0d9c968"
        "db90bdb3da3d00afd0fc6a83551da95e",
    ),
    (
        "counter overflow at the 64-bit boundary",
        _TWO_BLOCKS,
        _OVERFLOW_KEY,
        "aef03d00598494e9fb03cd7d8b590866",
        "",
        "d19ac59849026a91aa1b9aec29b11a202a4d739fd86c28e3ae3d588ea21d70c6"
        "c30f6cd9202074ed6e2a2a360eac8c47",
    ),
    (
        "no overflow, top 64 counter bits set",
        _TWO_BLOCKS,
        _OVERFLOW_KEY,
        "55d12511c696a80d0514d1ffba49cada",
        "",
        "2108558ac4b2c2d5cc66cea51d6210e046177a67631cd2dd8f09469733acb517"
        "fc355e87a267be3ae3e44c0bf3f99b2b",
    ),
    (
        "counter overflow at the 32-bit boundary",
        _TWO_BLOCKS,
        _OVERFLOW_KEY,
        "79422ddd91c4eee2deaef1f968305304",
        "",
        "4d2c1524ca4baa4eefcce6b91b227ee83abaff8105dcafa2ab191f5df2575035"
        "e2c865ce2d7abdac024c6f991a848390",
    ),
    (
        "no overflow, counter bits 32-64 and 96-128 set",
        _TWO_BLOCKS,
        _OVERFLOW_KEY,
        "0af5aa7a7676e28306306bcd9bf2003a",
        "",
        "8eb01e62185d782eb9287a341a6862ac5257d6f9adc99ee0a24d9c22b3e9b38a"
        "39c339bc8a74c75e2c65c6119544d61e",
    ),
    (
        "no overflow, low 64 counter bits 2^63-1",
        _TWO_BLOCKS,
        _OVERFLOW_KEY,
        "af5a03ae7edd73471bdcdfac5e194a60",
        "",
        "94c5d2aca6dbbce8c24513a25e095c0e54a942860d327a222a815cc713b163b4"
        "f50b30304e45c9d411e8df4508a98612",
    ),
    (
        "counter overflow between block 2 and block 3",
        _FOUR_BLOCKS,
        _OVERFLOW_KEY,
        "b37087680f0edd5a52228b8c7aaea664",
        "",
        "3bb6173e3772d4b62eef37f9ef0781f360b6c74be3bf6b371067bc1b090d9d66"
        "22a1fbec6ac471b3349cd4277a101d40890fbf27dfdcd0b4e3781f9806daabb6"
        "a0498745e59999ddc32d5b140241124e",
    ),
    (
        "no overflow, low 64 counter bits 2^63-4",
        _FIVE_BLOCKS,
        _OVERFLOW_KEY,
        "4f802da62a384555a19bc2b382eb25af",
        "",
        "e9b0bb8857818ce3201c3690d21daa7f264fb8ee93cc7a4674ea2fc32bf182fb"
        "2a7e8ad51507ad4f31cefc2356fe7936a7f6e19f95e88fdbf17620916d3a6f3d"
        "01fc17d358672f777fd4099246e436e167910be744b8315ae0eb6124590c5d8b",
    ),
    (
        "192-bit key, empty message",
        "",
        _KEY_192,
        "723cb2022102113018dcd2d204022114",
        "",
        "c472b1c6c22b4f2b7e02409499aa2ade",
    ),
    (
        "192-bit key, 19-byte nonce",
        "abcdef",
        _KEY_192,
        "025f3d2286c143976412022102696708231208",
        "8917328de211",
        "520f4f2cf1b893ae3ba8ecbac3a08ea57de2cd",
    ),
    (
        "256-bit key, 20-byte nonce, 20-byte aad",
        "1111111111111111111111111111111122222222222222222222222222222222",
        _KEY_256,
        "000102030405060708090a0b0c0d0e0f1a1b1c1d",
        "77922d34e452e0a40962873d22901dd22ad1c303",
        "5917879b9fa85f4007b7bd0cd46f067d5a7bf287f19dfcc5475c95a4acce520a"
        "4c5df804bc091a3b5d6c838b7e494571",
    ),
    (
        "256-bit key, 6-byte nonce, empty message",
        "",
        _KEY_256,
        "696708231208",
        "",
        "7c8f86f837a4f72c574678d92f637f07",
    ),
    (
        "256-bit key, 6-byte nonce",
        "abcdef",
        _KEY_256,
        "696708231208",
        "8917328de211",
        "12486c87bf9a7f22fa65a9493ec0f57f8070f5",
    ),
    (
        "256-bit key, 20-byte nonce, 14-byte aad",
        "1111111111111111111111111111111122222222222222222222222222222222",
        _KEY_256,
        "000102030405060708090a0b0c0d0e0f1a1b1c1d",
        "92d3e42e0409273291d2dc034450",
        "5917879b9fa85f4007b7bd0cd46f067d5a7bf287f19dfcc5475c95a4acce520a"
        "e632946e4999be20159977431bef0454",
    ),
)


@dataclass(frozen=True)
class KnownAnswerVector:
    """One AES-EAX encryption with its expected output.

    ``expected_ciphertext`` is the ciphertext followed by the full tag.
    """

    tc_id: int
    comment: str
    plaintext: bytes
    associated_data: bytes
    key: bytes
    nonce: bytes
    expected_ciphertext: bytes
    tag_length_bits: int = TAG_LENGTH_BITS

    def __post_init__(self) -> None:
        """Check the structural invariants of a vector."""
        if len(self.key) not in AES_KEY_SIZES:
            raise CorpusError(
                f"tc {self.tc_id}: key must be 16, 24 or 32 bytes, got {len(self.key)}"
            )
        if not self.nonce:
            raise CorpusError(f"tc {self.tc_id}: nonce must not be empty")
        if self.tag_length_bits != TAG_LENGTH_BITS:
            raise CorpusError(
                f"tc {self.tc_id}: tag length must be {TAG_LENGTH_BITS} bits, "
                f"got {self.tag_length_bits}"
            )
        if len(self.expected_ciphertext) != len(self.plaintext) + self.tag_length:
            raise CorpusError(
                f"tc {self.tc_id}: ciphertext is {len(self.expected_ciphertext)} bytes, "
                f"expected {len(self.plaintext) + self.tag_length}"
            )

    @property
    def tag_length(self) -> int:
        """Tag length in bytes."""
        return self.tag_length_bits // 8

    @property
    def ciphertext(self) -> bytes:
        """Expected ciphertext without the tag."""
        return self.expected_ciphertext[: len(self.plaintext)]

    @property
    def tag(self) -> bytes:
        return self.expected_ciphertext[len(self.plaintext):]


def build_corpus(
    raw: tuple[tuple[str, str, str, str, str, str], ...],
) -> tuple[KnownAnswerVector, ...]:
    """Decode literal vectors into an immutable corpus.

    Args:
        raw: Tuples of (comment, plaintext, key, nonce, aad, ciphertext) hex

    Returns:
        Tuple of vectors numbered from 1 in input order

    Raises:
        CorpusError: If any literal is malformed
    """
    corpus = []
    for tc_id, (comment, pt, key, nonce, aad, ct) in enumerate(raw, start=1):
        corpus.append(
            KnownAnswerVector(
                tc_id=tc_id,
                comment=comment,
                plaintext=hex_to_bytes(pt),
                associated_data=hex_to_bytes(aad),
                key=hex_to_bytes(key),
                nonce=hex_to_bytes(nonce),
                expected_ciphertext=hex_to_bytes(ct),
            )
        )
    return tuple(corpus)


EAX_TEST_VECTORS = build_corpus(_RAW_VECTORS)


def vectors() -> tuple[KnownAnswerVector, ...]:
    """Return the corpus; the same tuple, in the same order, on every call."""
    return EAX_TEST_VECTORS


def get_vector(tc_id: int) -> KnownAnswerVector:
    """Look up a vector by its 1-based id.

    Raises:
        KeyError: If no vector has that id
    """
    if not 1 <= tc_id <= len(EAX_TEST_VECTORS):
        raise KeyError(f"Unknown vector id {tc_id}. Valid: 1..{len(EAX_TEST_VECTORS)}")
    return EAX_TEST_VECTORS[tc_id - 1]

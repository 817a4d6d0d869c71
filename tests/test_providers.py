"""Tests for the bundled providers."""

import pytest
from Crypto.Cipher import AES

from eax_kat.corpus import get_vector
from eax_kat.errors import AuthenticationError, InvalidKeyOrParameters, InvalidOperationState
from eax_kat.interfaces import Mode, Outcome
from eax_kat.procedures import encrypt_and_compare, run_harness, run_procedure
from eax_kat.providers import (
    CONFORMING_PROVIDERS,
    PROVIDERS,
    NarrowCtr32Eax,
    NarrowCtr64Eax,
    PyCryptodomeEax,
    ReferenceEax,
    StrictReferenceEax,
    get_provider,
    list_providers,
)
from eax_kat.providers.reference_eax import OmacStream, gf_double

REFERENCE_VECTOR_IDS = range(1, 11)


class TestProviderRegistry:
    """Tests for provider registry."""

    def test_all_providers_registered(self) -> None:
        assert "reference_eax" in PROVIDERS
        assert "reference_eax_strict" in PROVIDERS
        assert "pycryptodome_eax" in PROVIDERS
        assert "narrow_ctr32_eax" in PROVIDERS
        assert "narrow_ctr64_eax" in PROVIDERS

    def test_get_provider_valid(self) -> None:
        assert get_provider("reference_eax") is ReferenceEax
        assert get_provider("pycryptodome_eax") is PyCryptodomeEax

    def test_get_provider_invalid(self) -> None:
        with pytest.raises(KeyError, match="Unknown provider"):
            get_provider("nonexistent")

    def test_list_providers(self) -> None:
        provs = list_providers()
        assert len(provs) == len(PROVIDERS)
        for p in provs:
            assert "name" in p
            assert "description" in p

    def test_registry_names_match_class_names(self) -> None:
        for name, cls in PROVIDERS.items():
            assert cls.name == name


class TestConformingProviders:
    """The correct providers pass, or legitimately skip, the whole corpus."""

    @pytest.mark.parametrize("name", CONFORMING_PROVIDERS)
    def test_no_failures(self, name: str) -> None:
        report = run_harness(get_provider(name)())
        failures = [
            f"{s.procedure} tc{r.tc_id}: {r.detail}"
            for s in report.summaries
            for r in s.failures()
        ]
        assert report.ok, failures

    @pytest.mark.parametrize("name", CONFORMING_PROVIDERS)
    def test_known_answers(self, name: str) -> None:
        summary = run_procedure("encrypt_and_compare", get_provider(name)())
        assert summary.counts() == (24, 0, 0)

    def test_pycryptodome_requires_aad_first(self) -> None:
        summary = run_procedure("late_aad_tolerance", PyCryptodomeEax())
        assert summary.counts() == (0, 24, 0)

    def test_reference_accepts_late_aad(self) -> None:
        summary = run_procedure("late_aad_tolerance", ReferenceEax())
        assert summary.counts() == (24, 0, 0)


class TestOverflowScenarios:
    """Literal overflow and key-size scenarios encrypted by each provider."""

    @pytest.fixture(params=CONFORMING_PROVIDERS)
    def provider(self, request):
        return get_provider(request.param)()

    def _encrypt(self, provider, key: str, nonce: str, aad: str, pt: bytes) -> bytes:
        session = provider.initialize(
            Mode.ENCRYPT, bytes.fromhex(key), bytes.fromhex(nonce), 128
        )
        session.update_aad(bytes.fromhex(aad))
        return session.update(pt) + session.finalize()

    def test_reference_vector(self, provider) -> None:
        out = self._encrypt(
            provider,
            "233952dee4d5ed5f9b9c6d6ff80ff478",
            "62ec67f9c3a4a407fcb2a8c49031a8b3",
            "6bfb914fd07eae6b",
            b"",
        )
        assert out.hex() == "e037830e8389f27b025a2d6527e79d01"

    def test_counter_starting_at_all_ones(self, provider) -> None:
        out = self._encrypt(
            provider,
            "000102030405060708090a0b0c0d0e0f",
            "3c8cc2970a008f75cc5beae2847258c2",
            "",
            bytes(16) + b"\x11" * 16,
        )
        assert out.hex().startswith("3c441f32ce07822364d7a2990e50bb13d7b02a2")

    def test_overflow_between_block_2_and_3(self, provider) -> None:
        pt = bytes(16) + b"\x11" * 16 + b"\x22" * 16 + b"\x33" * 16
        out = self._encrypt(
            provider,
            "000102030405060708090a0b0c0d0e0f",
            "b37087680f0edd5a52228b8c7aaea664",
            "",
            pt,
        )
        assert out.hex().startswith("3bb6173e3772d4b62eef37f9ef0781f36")

    def test_192_bit_key(self, provider) -> None:
        out = self._encrypt(
            provider,
            "03dd258601c1d4872a52b27892db0356911b2df1436dc7f4",
            "723cb2022102113018dcd2d204022114",
            "",
            b"",
        )
        assert out.hex() == "c472b1c6c22b4f2b7e02409499aa2ade"


class TestNarrowCounterDetection:
    """The overflow vectors catch counters narrower than the block."""

    # Vectors whose big-endian counter carries out of the low 32 / 64 bits
    CTR32_CAUGHT = {11, 13, 15, 16, 17, 18}
    CTR64_CAUGHT = {11, 13, 17}

    def _failed_ids(self, provider) -> set[int]:
        summary = run_procedure("encrypt_and_compare", provider)
        return {r.tc_id for r in summary.failures()}

    def test_ctr32_fails_carrying_vectors(self) -> None:
        assert self._failed_ids(NarrowCtr32Eax()) == self.CTR32_CAUGHT

    def test_ctr64_fails_carrying_vectors(self) -> None:
        assert self._failed_ids(NarrowCtr64Eax()) == self.CTR64_CAUGHT

    @pytest.mark.parametrize("tc_id", [12, 14])
    def test_little_endian_labels_do_not_carry(self, tc_id: int) -> None:
        """Labelled as overflows, but the big-endian counter never carries."""
        assert encrypt_and_compare(get_vector(tc_id), NarrowCtr32Eax()).passed
        assert encrypt_and_compare(get_vector(tc_id), NarrowCtr64Eax()).passed

    @pytest.mark.parametrize("provider_cls", [NarrowCtr32Eax, NarrowCtr64Eax])
    def test_reference_vectors_still_pass(self, provider_cls) -> None:
        """Without a carry the defect is invisible, hence the extra vectors."""
        for tc_id in REFERENCE_VECTOR_IDS:
            result = encrypt_and_compare(get_vector(tc_id), provider_cls())
            assert result.passed, f"tc{tc_id}: {result.detail}"

    @pytest.mark.parametrize("provider_cls", [NarrowCtr32Eax, NarrowCtr64Eax])
    def test_harness_verdict(self, provider_cls) -> None:
        report = run_harness(provider_cls())
        assert not report.ok

    def test_first_block_is_still_correct(self) -> None:
        """Only blocks after the carry differ."""
        vec = get_vector(11)
        result = encrypt_and_compare(vec, NarrowCtr32Eax())
        assert result.produced[:16] == vec.expected_ciphertext[:16]
        assert result.produced[16:32] != vec.expected_ciphertext[16:32]


class TestReferenceEaxSession:
    """Streaming behaviour of the pure-Python EAX."""

    def test_chunked_input(self) -> None:
        """Feeding one byte at a time gives the same output."""
        vec = get_vector(24)
        session = ReferenceEax().initialize(Mode.ENCRYPT, vec.key, vec.nonce, 128)
        for i in range(len(vec.associated_data)):
            session.update_aad(vec.associated_data[i:i + 1])
        out = b"".join(session.update(vec.plaintext[i:i + 1]) for i in range(len(vec.plaintext)))
        out += session.finalize()
        assert out == vec.expected_ciphertext

    def test_aad_split_around_message(self) -> None:
        vec = get_vector(21)
        session = ReferenceEax().initialize(Mode.ENCRYPT, vec.key, vec.nonce, 128)
        session.update_aad(vec.associated_data[:7])
        out = session.update(vec.plaintext[:10])
        session.update_aad(vec.associated_data[7:])
        out += session.update(vec.plaintext[10:])
        out += session.finalize()
        assert out == vec.expected_ciphertext

    def test_strict_rejects_late_aad(self) -> None:
        vec = get_vector(2)
        session = StrictReferenceEax().initialize(Mode.ENCRYPT, vec.key, vec.nonce, 128)
        session.update(vec.plaintext)
        with pytest.raises(InvalidOperationState):
            session.update_aad(vec.associated_data)

    def test_finalized_session_is_closed(self) -> None:
        vec = get_vector(1)
        session = ReferenceEax().initialize(Mode.ENCRYPT, vec.key, vec.nonce, 128)
        session.finalize()
        with pytest.raises(InvalidOperationState):
            session.update(b"x")

    def test_shorter_tag(self) -> None:
        vec = get_vector(5)
        session = ReferenceEax().initialize(Mode.ENCRYPT, vec.key, vec.nonce, 64)
        session.update_aad(vec.associated_data)
        out = session.update(vec.plaintext) + session.finalize()
        assert out == vec.expected_ciphertext[: len(vec.plaintext) + 8]

    def test_gf_double(self) -> None:
        assert gf_double(1) == 2
        assert gf_double(1 << 127) == 0x87

    def test_omac_digest_is_repeatable(self) -> None:
        omac = OmacStream(AES.new(bytes(16), AES.MODE_ECB), 1)
        omac.update(b"abc")
        assert omac.digest() == omac.digest()


class TestDecryption:
    @pytest.mark.parametrize("name", CONFORMING_PROVIDERS)
    def test_streamed_decryption(self, name: str) -> None:
        """The trailing tag is held back across update calls."""
        vec = get_vector(17)
        session = get_provider(name)().initialize(Mode.DECRYPT, vec.key, vec.nonce, 128)
        session.update_aad(vec.associated_data)
        ct = vec.expected_ciphertext
        out = session.update(ct[:40]) + session.update(ct[40:70]) + session.update(ct[70:])
        out += session.finalize()
        assert out == vec.plaintext

    @pytest.mark.parametrize("name", CONFORMING_PROVIDERS)
    def test_bad_tag(self, name: str) -> None:
        vec = get_vector(3)
        session = get_provider(name)().initialize(Mode.DECRYPT, vec.key, vec.nonce, 128)
        session.update_aad(vec.associated_data + b"\x00")
        session.update(vec.expected_ciphertext)
        with pytest.raises(AuthenticationError):
            session.finalize()


class TestParameterValidation:
    @pytest.mark.parametrize("name", CONFORMING_PROVIDERS)
    @pytest.mark.parametrize(
        "key,nonce,tag_bits",
        [
            (bytes(15), bytes(16), 128),
            (bytes(16), b"", 128),
            (bytes(16), bytes(16), 129),
            (bytes(16), bytes(16), 136),
            (bytes(16), bytes(16), 0),
        ],
    )
    def test_rejected(self, name: str, key: bytes, nonce: bytes, tag_bits: int) -> None:
        with pytest.raises(InvalidKeyOrParameters):
            get_provider(name)().initialize(Mode.ENCRYPT, key, nonce, tag_bits)

    def test_unknown_mode(self) -> None:
        with pytest.raises(InvalidKeyOrParameters, match="Unknown mode"):
            ReferenceEax().initialize("encrypt", bytes(16), bytes(16), 128)

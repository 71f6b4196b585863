"""
Module 01 - Secret Derivation Unit Tests
Tests for wormhole/crypto/secret.py

Covers:
1. The production-difficulty test secret passes the proof-of-work gate
2. Derivations are deterministic and domain-separated
3. Strict parsing of user-supplied secrets
4. Secret search and its budgets
"""
import pytest

from wormhole.constants import MAGIC_NULLIFIER, MAGIC_POW, POW_LOG_DIFFICULTY
from wormhole.crypto.hashing import sha256, to_le32
from wormhole.crypto.secret import (
    WormholeSecret,
    check_pow,
    deposit_address,
    generate_secret,
    iter_candidate_secrets,
    nullifier,
    parse_secret,
    proof_of_work_hash,
)
from wormhole.schemas.errors import (
    ErrorCodes,
    InputMalformedException,
    ProofOfWorkException,
    SecretSearchExhausted,
)

from fixtures import TEST_SECRET


class TestProofOfWork:
    """Tests for the proof-of-work predicate."""

    def test_test_secret_is_valid(self):
        assert check_pow(TEST_SECRET, POW_LOG_DIFFICULTY)
        assert WormholeSecret(TEST_SECRET).is_valid()

    def test_pow_hash_low_bits_are_zero(self):
        pow_hash = proof_of_work_hash(TEST_SECRET)
        assert pow_hash == sha256(bytes([MAGIC_POW]) + TEST_SECRET)
        assert pow_hash[-3:] == b"\x00\x00\x00"

    def test_short_secret_is_invalid(self):
        assert not check_pow(b"\x01\x02\x03", POW_LOG_DIFFICULTY)

    def test_difficulty_zero_accepts_anything(self):
        assert check_pow(b"anything", 0)

    def test_difficulty_out_of_range(self):
        with pytest.raises(ValueError, match="difficulty"):
            check_pow(TEST_SECRET, 257)


class TestDerivations:
    """Tests for address and nullifier derivation."""

    def test_deposit_address_is_20_bytes(self):
        assert len(deposit_address(TEST_SECRET)) == 20

    def test_deposit_address_deterministic(self):
        assert deposit_address(TEST_SECRET) == deposit_address(TEST_SECRET)
        assert WormholeSecret(TEST_SECRET).deposit_address() == deposit_address(TEST_SECRET)

    def test_nullifier_definition(self):
        expected = sha256(bytes([MAGIC_NULLIFIER]) + TEST_SECRET + to_le32(3))
        assert nullifier(TEST_SECRET, 3) == expected

    def test_nullifiers_differ_by_index(self):
        assert nullifier(TEST_SECRET, 0) != nullifier(TEST_SECRET, 1)

    def test_nullifier_and_address_are_domain_separated(self):
        assert deposit_address(TEST_SECRET) != nullifier(TEST_SECRET, 0)[12:]

    def test_repr_hides_secret(self):
        secret = WormholeSecret(TEST_SECRET)
        assert TEST_SECRET.hex() not in repr(secret)
        assert TEST_SECRET.hex() not in str(secret)


class TestParseSecret:
    """Tests for strict secret parsing."""

    def test_parse_hex(self, secret):
        parsed = parse_secret(secret.to_hex(), difficulty=4)
        assert parsed == secret

    def test_wrong_length_rejected(self):
        with pytest.raises(InputMalformedException, match="32 bytes") as exc_info:
            parse_secret(TEST_SECRET, difficulty=None)
        assert exc_info.value.details["field_path"] == "secret"

    def test_bad_hex_rejected(self):
        with pytest.raises(InputMalformedException):
            parse_secret("0xnothex", difficulty=None)

    def test_failing_pow_rejected(self):
        candidate = next(
            bytes([i]) * 32 for i in range(256) if not check_pow(bytes([i]) * 32, 4)
        )
        with pytest.raises(ProofOfWorkException) as exc_info:
            parse_secret(candidate, difficulty=4)
        assert exc_info.value.code == ErrorCodes.PROOF_OF_WORK_FAILED

    def test_difficulty_none_skips_pow(self):
        assert parse_secret(b"\x11" * 32, difficulty=None).value == b"\x11" * 32


class TestGenerateSecret:
    """Tests for secret search."""

    def test_generated_secret_is_valid(self):
        secret = generate_secret(6)
        assert len(secret.value) == 32
        assert secret.is_valid(6)

    def test_deterministic_rng(self):
        counter = iter(range(1 << 16))

        def rng(n):
            return next(counter).to_bytes(n, "big")

        secret = generate_secret(4, rng=rng)
        assert check_pow(secret.value, 4)

    def test_attempt_budget(self):
        with pytest.raises(SecretSearchExhausted) as exc_info:
            generate_secret(64, max_attempts=10)
        assert exc_info.value.attempts == 10
        assert exc_info.value.code == ErrorCodes.SECRET_SEARCH_EXHAUSTED

    def test_time_budget(self):
        with pytest.raises(SecretSearchExhausted, match="within 0"):
            generate_secret(64, max_seconds=0)

    def test_candidates_are_lazy_and_sized(self):
        calls = []

        def rng(n):
            calls.append(n)
            return bytes(n)

        candidates = iter_candidate_secrets(length=16, rng=rng)
        assert calls == []
        assert next(candidates) == bytes(16)
        assert next(candidates) == bytes(16)
        assert calls == [16, 16]

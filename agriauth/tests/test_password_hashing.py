from __future__ import annotations

import pytest

from agriauth.application.services.password_hashing import DEFAULT_ROUNDS, BcryptPasswordHasher


@pytest.fixture(scope="module")
def hasher() -> BcryptPasswordHasher:
    return BcryptPasswordHasher(rounds=4)


def test_default_work_factor_is_twelve() -> None:
    assert DEFAULT_ROUNDS == 12
    assert BcryptPasswordHasher().rounds == 12


def test_hash_embeds_cost_and_never_equals_plaintext(hasher: BcryptPasswordHasher) -> None:
    hashed = hasher.hash("Str0ng!Pass")

    assert hashed != "Str0ng!Pass"
    assert hashed.startswith("$2b$04$")


def test_hash_uses_fresh_salt_per_call(hasher: BcryptPasswordHasher) -> None:
    assert hasher.hash("Str0ng!Pass") != hasher.hash("Str0ng!Pass")


def test_verify_accepts_original_and_rejects_single_character_mutations(
    hasher: BcryptPasswordHasher,
) -> None:
    password = "Str0ng!Pass"
    hashed = hasher.hash(password)

    assert hasher.verify(password, hashed) is True
    for i in range(len(password)):
        mutated = password[:i] + chr(ord(password[i]) ^ 1) + password[i + 1 :]
        assert hasher.verify(mutated, hashed) is False
    assert hasher.verify(password[:-1], hashed) is False
    assert hasher.verify(password + "x", hashed) is False


def test_long_passwords_keep_every_character_significant(
    hasher: BcryptPasswordHasher,
) -> None:
    password = "Aa1!" * 32
    hashed = hasher.hash(password)

    assert hasher.verify(password, hashed) is True
    assert hasher.verify(password[:-1] + "?", hashed) is False


@pytest.mark.parametrize("bad_hash", ["", "not-a-hash", "$2b$04$short", "plaintext"])
def test_verify_returns_false_on_malformed_hash(
    hasher: BcryptPasswordHasher, bad_hash: str
) -> None:
    assert hasher.verify("Str0ng!Pass", bad_hash) is False


def test_needs_rehash_tracks_work_factor(hasher: BcryptPasswordHasher) -> None:
    hashed = hasher.hash("Str0ng!Pass")

    assert hasher.needs_rehash(hashed) is False
    assert BcryptPasswordHasher(rounds=5).needs_rehash(hashed) is True
    assert hasher.needs_rehash("garbage") is True


def test_rejects_out_of_range_rounds() -> None:
    with pytest.raises(ValueError):
        BcryptPasswordHasher(rounds=3)

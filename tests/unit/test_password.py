"""Unit tests for password hashing."""

import pytest

from webauth.exceptions import InvalidInput
from webauth.kernel.identity.password import (
    PasswordHasher,
    compute_hash,
    generate_salt,
    hashes_match,
)


class TestPasswordHasher:
    """Tests for PasswordHasher."""

    def test_salts_are_fresh(self):
        """Every call yields a new salt."""
        salts = {PasswordHasher.generate_salt() for _ in range(20)}
        assert len(salts) == 20

    def test_salt_uses_configured_cost(self):
        salt = PasswordHasher.generate_salt()
        assert salt.startswith("$2b$04$")

    def test_hash_is_deterministic(self):
        """Same password and salt always give the same hash."""
        salt = generate_salt()
        assert compute_hash("TestPassword123", salt) == compute_hash("TestPassword123", salt)

    def test_different_salts_give_different_hashes(self):
        password = "TestPassword123"
        assert compute_hash(password, generate_salt()) != compute_hash(password, generate_salt())

    def test_different_passwords_give_different_hashes(self):
        salt = generate_salt()
        assert compute_hash("TestPassword123", salt) != compute_hash("TestPassword124", salt)

    def test_hash_does_not_contain_password(self):
        hashed = compute_hash("TestPassword123", generate_salt())
        assert "TestPassword123" not in hashed

    @pytest.mark.parametrize("password", ["", None])
    def test_empty_password_rejected(self, password):
        with pytest.raises(InvalidInput):
            compute_hash(password, generate_salt())

    def test_malformed_salt_rejected(self):
        with pytest.raises(InvalidInput):
            compute_hash("TestPassword123", "not-a-salt")

    def test_hashes_match(self):
        salt = generate_salt()
        stored = compute_hash("TestPassword123", salt)

        assert hashes_match(compute_hash("TestPassword123", salt), stored) is True
        assert hashes_match(compute_hash("WrongPassword", salt), stored) is False

    def test_needs_rehash(self):
        assert PasswordHasher.needs_rehash(generate_salt()) is False
        assert PasswordHasher.needs_rehash(generate_salt(rounds=5)) is True
        assert PasswordHasher.needs_rehash("garbage") is True

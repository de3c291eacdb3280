"""Unit tests for identity key normalization and account kind descriptors."""

import pytest

from webauth.exceptions import InvalidInput
from webauth.kernel.identity.account_kinds import (
    JWT_ACCOUNT,
    SIMPLE_ACCOUNT,
    is_email,
    normalize_key,
)
from webauth.kernel.models import JwtUser, User


class TestNormalizeKey:

    def test_trims_and_lowercases(self):
        assert normalize_key("  Alice@Example.com ") == "alice@example.com"

    def test_lower_mode_keeps_sharp_s(self):
        assert normalize_key("Straße") == "straße"

    def test_casefold_mode(self):
        assert normalize_key("STRASSE", mode="casefold") == normalize_key("Straße", mode="casefold")

    def test_casefold_applies_nfkc(self):
        # Fullwidth "ＡＢＣ" folds onto plain ascii
        assert normalize_key("ＡＢＣ", mode="casefold") == "abc"

    @pytest.mark.parametrize("raw", [None, "", "   "])
    def test_blank_key_rejected(self, raw):
        with pytest.raises(InvalidInput):
            normalize_key(raw)

    def test_unknown_mode(self):
        with pytest.raises(ValueError):
            normalize_key("alice", mode="upper")


class TestEmailValidation:

    @pytest.mark.parametrize(
        "key",
        ["alice@example.com", "a.b+tag@sub.example.org", "x_y%z@host-name.io"],
    )
    def test_valid(self, key):
        assert is_email(key)

    @pytest.mark.parametrize(
        "key",
        ["alice", "alice@", "@example.com", "alice@example", "alice@example.c", "al ice@example.com"],
    )
    def test_invalid(self, key):
        assert not is_email(key)


class TestAccountKinds:

    def test_simple_account(self):
        assert SIMPLE_ACCOUNT.model is User
        assert SIMPLE_ACCOUNT.key_attr == "email"
        assert SIMPLE_ACCOUNT.issues_token is False

    def test_jwt_account(self):
        assert JWT_ACCOUNT.model is JwtUser
        assert JWT_ACCOUNT.key_attr == "name"
        assert JWT_ACCOUNT.issues_token is True

    def test_email_kind_validates_key(self):
        with pytest.raises(InvalidInput) as exc_info:
            SIMPLE_ACCOUNT.validate_key("not-an-email")
        assert exc_info.value.message == "Invalid email format."

    def test_name_kind_accepts_any_key(self):
        JWT_ACCOUNT.validate_key("any name at all")

    def test_profile_drops_none_values(self):
        profile = SIMPLE_ACCOUNT.validate_profile(
            {"first_name": "Alice", "last_name": "Liddell", "two_fa_key": None}
        )
        assert profile == {"first_name": "Alice", "last_name": "Liddell"}

    def test_profile_missing_required_field(self):
        with pytest.raises(InvalidInput):
            SIMPLE_ACCOUNT.validate_profile({"first_name": "Alice"})

    def test_profile_unknown_field(self):
        with pytest.raises(InvalidInput):
            JWT_ACCOUNT.validate_profile({"first_name": "Alice"})

"""Unit tests for the User aggregate and IAM value objects."""

import pytest

from iam.domain.aggregates import User
from iam.domain.value_objects import EmailAddress, UserId


class TestEmailAddress:
    """Tests for EmailAddress normalization."""

    def test_trims_and_lowercases(self):
        assert EmailAddress.parse("  Ada@Example.COM ").value == "ada@example.com"

    def test_differently_cased_addresses_are_equal(self):
        assert EmailAddress.parse("ADA@example.com") == EmailAddress.parse("ada@example.com")

    @pytest.mark.parametrize("raw", ["", "ada", "ada@", "@example.com", "a b@c.de", "ada@example"])
    def test_rejects_malformed(self, raw):
        with pytest.raises(ValueError, match="valid email"):
            EmailAddress.parse(raw)


class TestUserId:
    def test_generate_is_ulid(self):
        user_id = UserId.generate()

        assert len(user_id.value) == 26
        assert UserId.from_string(user_id.value) == user_id

    def test_from_string_rejects_garbage(self):
        with pytest.raises(ValueError):
            UserId.from_string("not-a-ulid")


class TestUser:
    """Tests for User."""

    def test_register_trims_names(self, password_hash):
        user = User.register(
            email=EmailAddress.parse("ada@example.com"),
            password_hash=password_hash,
            first_name="  Ada ",
            last_name=" Lovelace",
        )

        assert user.full_name == "Ada Lovelace"
        assert user.onboarding_completed is False

    @pytest.mark.parametrize(("first", "last"), [("", "Lovelace"), ("Ada", "   ")])
    def test_names_are_required(self, password_hash, first, last):
        with pytest.raises(ValueError, match="required"):
            User.register(
                email=EmailAddress.parse("ada@example.com"),
                password_hash=password_hash,
                first_name=first,
                last_name=last,
            )

    def test_change_password(self, user):
        before = user.updated_at

        user.change_password("new-hash")

        assert user.password_hash == "new-hash"
        assert user.updated_at >= before

    def test_change_password_rejects_empty_hash(self, user):
        with pytest.raises(ValueError):
            user.change_password("")

    def test_complete_onboarding_is_idempotent(self, user):
        user.complete_onboarding()
        first = user.updated_at

        user.complete_onboarding()

        assert user.onboarding_completed is True
        assert user.updated_at == first

    def test_identity_equality(self, user):
        same = User(
            id=user.id,
            email=EmailAddress.parse("other@example.com"),
            password_hash="x",
            first_name="Other",
            last_name="Person",
        )

        assert user == same
        assert len({user, same}) == 1

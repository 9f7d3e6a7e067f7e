"""Unit tests for identity value objects."""

import pytest
from pydantic import ValidationError

from idbridge.domain.value import IdentityAttributes, IdentityQuery


class TestIdentityAttributes:
    """Tests for IdentityAttributes."""

    def test_options_is_accepted_for_custom_claims(self):
        """The options key should populate custom claims."""
        attributes = IdentityAttributes.model_validate({"options": {"admin": True}})

        assert attributes.claims == {"admin": True}

    def test_changes_holds_only_given_fields(self):
        """Fields not given must not be sent, even as None."""
        attributes = IdentityAttributes.model_validate(
            {"email": "a@ex.com", "photo_url": None, "custom_claims": {"a": 1}}
        )

        assert attributes.changes() == {"email": "a@ex.com", "photo_url": None}

    def test_unknown_keys_are_ignored(self):
        attributes = IdentityAttributes.model_validate({"role": "admin"})

        assert attributes.changes() == {}

    def test_empty_claims_are_not_applied(self):
        attributes = IdentityAttributes.model_validate({"custom_claims": {}})

        assert attributes.claims is None


class TestIdentityQuery:
    """Tests for IdentityQuery."""

    def test_defaults(self):
        query = IdentityQuery()

        assert query.limit is None
        assert query.offset == 0

    def test_rejects_more_than_one_filter(self):
        with pytest.raises(ValidationError):
            IdentityQuery(uid="u1", email="a@ex.com")

    def test_rejects_non_positive_limit(self):
        with pytest.raises(ValidationError):
            IdentityQuery(limit=0)

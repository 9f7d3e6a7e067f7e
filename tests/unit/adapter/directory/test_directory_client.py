"""Unit tests for IdentityDirectoryClient."""

from unittest.mock import AsyncMock
from urllib.parse import parse_qs, urlparse

import pytest

from idbridge.adapter.directory import IdentityDirectoryClient
from idbridge.adapter.error import IdentityToolkitError
from idbridge.adapter.identitytoolkit import IdentityToolkitClient
from idbridge.domain.error import DirectoryError, NotFoundError, ValidationError
from idbridge.domain.model import Account, IdentityRecord
from idbridge.domain.repository import RESET_LINK_SENT
from idbridge.domain.value import IdentityKey, IdentityQuery
from idbridge.util.signing import verify_signature


def record(uid: str, **fields) -> IdentityRecord:
    return IdentityRecord(uid=IdentityKey(uid), **fields)


def not_found() -> IdentityToolkitError:
    return IdentityToolkitError("USER_NOT_FOUND", "USER_NOT_FOUND", 400)


@pytest.fixture
def toolkit() -> AsyncMock:
    return AsyncMock(spec=IdentityToolkitClient)


@pytest.fixture
def client(toolkit, identity_cache, directory_settings) -> IdentityDirectoryClient:
    return IdentityDirectoryClient(
        toolkit=toolkit, identity_cache=identity_cache, settings=directory_settings
    )


class TestFind:
    """Tests for single lookups."""

    @pytest.mark.asyncio
    async def test_find_returns_record(self, client, toolkit):
        toolkit.get_users.return_value = [record("u1", email="a@ex.com")]

        result = await client.find("u1")

        assert result.email == "a@ex.com"
        toolkit.get_users.assert_awaited_once_with(uids=["u1"])

    @pytest.mark.asyncio
    async def test_find_missing_returns_none(self, client, toolkit):
        toolkit.get_users.return_value = []

        assert await client.find("ghost") is None

    @pytest.mark.asyncio
    async def test_find_by_email_not_found_code_returns_none(self, client, toolkit):
        toolkit.get_users.side_effect = IdentityToolkitError(
            "EMAIL_NOT_FOUND", "EMAIL_NOT_FOUND", 400
        )

        assert await client.find_by_email("b@ex.com") is None

    @pytest.mark.asyncio
    async def test_find_by_phone(self, client, toolkit):
        toolkit.get_users.return_value = [record("u1", phone_number="+111")]

        result = await client.find_by_phone("+111")

        assert result.uid == "u1"
        toolkit.get_users.assert_awaited_once_with(phone_numbers=["+111"])

    @pytest.mark.asyncio
    async def test_transport_failure_raises_directory_error(self, client, toolkit):
        toolkit.get_users.side_effect = IdentityToolkitError(
            "NETWORK_ERROR", "connection refused"
        )

        with pytest.raises(DirectoryError) as exc_info:
            await client.find("u1")

        assert exc_info.value.code == "NETWORK_ERROR"


class TestFindMany:
    """Tests for find_many."""

    @pytest.mark.asyncio
    async def test_order_and_null_fill(self, client, toolkit):
        """Results follow input order with None for missing uids."""
        # Arrange
        toolkit.get_users.return_value = [record("m1"), record("m2")]

        # Act
        result = await client.find_many(["m2", "missing", "m1"])

        # Assert
        assert [r.uid if r else None for r in result] == ["m2", None, "m1"]

    @pytest.mark.asyncio
    async def test_empty_input_skips_remote(self, client, toolkit):
        assert await client.find_many([]) == []
        toolkit.get_users.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_result_is_cached_unless_bypassed(self, client, toolkit):
        toolkit.get_users.return_value = [record("m1")]

        await client.find_many(["m1"])
        await client.find_many(["m1"])
        await client.find_many(["m1"], use_cache=False)

        assert toolkit.get_users.await_count == 2


class TestCreate:
    """Tests for create."""

    @pytest.mark.asyncio
    async def test_claims_applied_in_second_call(self, client, toolkit):
        """options should be sent with set_custom_claims after creation."""
        # Arrange
        toolkit.create_user.return_value = "u1"
        toolkit.get_users.return_value = [record("u1", custom_claims={"admin": True})]

        # Act
        result = await client.create({"email": "a@ex.com", "options": {"admin": True}})

        # Assert
        toolkit.create_user.assert_awaited_once_with({"email": "a@ex.com"})
        toolkit.set_custom_claims.assert_awaited_once_with("u1", {"admin": True})
        assert result.custom_claims == {"admin": True}

    @pytest.mark.asyncio
    async def test_no_claims_call_without_claims(self, client, toolkit):
        toolkit.create_user.return_value = "u1"
        toolkit.get_users.return_value = [record("u1")]

        await client.create({"email": "a@ex.com"})

        toolkit.set_custom_claims.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_create_drops_cached_identity(
        self, client, toolkit, identity_cache
    ):
        """Creating under an explicit uid should replace any stale entry."""
        # Arrange
        await identity_cache.remember_identity("u1", AsyncMock(return_value="stale"))
        toolkit.create_user.return_value = "u1"
        toolkit.get_users.return_value = [record("u1", email="a@ex.com")]

        # Act
        await client.create({"uid": "u1", "email": "a@ex.com"})

        # Assert
        fresh = await identity_cache.remember_identity(
            "u1", AsyncMock(return_value="new")
        )
        assert fresh == "new"

    @pytest.mark.asyncio
    async def test_rejection_raises_directory_error(self, client, toolkit):
        toolkit.create_user.side_effect = IdentityToolkitError(
            "EMAIL_EXISTS", "EMAIL_EXISTS", 400
        )

        with pytest.raises(DirectoryError) as exc_info:
            await client.create({"email": "taken@ex.com"})

        assert exc_info.value.code == "EMAIL_EXISTS"


class TestUpdateAndUpsert:
    """Tests for update and upsert."""

    @pytest.mark.asyncio
    async def test_update_unknown_uid_returns_none(self, client, toolkit):
        toolkit.update_user.side_effect = not_found()

        assert await client.update("ghost", {"display_name": "X"}) is None

    @pytest.mark.asyncio
    async def test_update_without_uid_returns_none(self, client, toolkit):
        assert await client.update(None, {"display_name": "X"}) is None
        toolkit.update_user.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_update_drops_cached_identity(
        self, client, toolkit, identity_cache
    ):
        """The per-identity entry should be gone after a write."""
        # Arrange
        await identity_cache.remember_identity("u1", AsyncMock(return_value="old"))
        toolkit.get_users.return_value = [record("u1", display_name="New")]

        # Act
        await client.update("u1", {"display_name": "New"})

        # Assert
        fresh = await identity_cache.remember_identity(
            "u1", AsyncMock(return_value="new")
        )
        assert fresh == "new"

    @pytest.mark.asyncio
    async def test_upsert_existing_updates(self, client, toolkit):
        toolkit.get_users.return_value = [record("u1", display_name="Beta")]

        result = await client.upsert("u1", {"display_name": "Beta"})

        assert result.uid == "u1"
        toolkit.create_user.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_upsert_unknown_falls_through_to_create(self, client, toolkit):
        toolkit.update_user.side_effect = not_found()
        toolkit.create_user.return_value = "new"
        toolkit.get_users.return_value = [record("new")]

        result = await client.upsert("stale", {"email": "a@ex.com"})

        assert result.uid == "new"

    @pytest.mark.asyncio
    async def test_upsert_without_uid_creates(self, client, toolkit):
        toolkit.create_user.return_value = "new"
        toolkit.get_users.return_value = [record("new")]

        result = await client.upsert(None, {"email": "a@ex.com"})

        assert result.uid == "new"
        toolkit.update_user.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_disable(self, client, toolkit):
        toolkit.get_users.return_value = [record("u1", disabled=True)]

        result = await client.disable("u1")

        toolkit.update_user.assert_awaited_once_with("u1", {"disabled": True})
        assert result.disabled is True


class TestDelete:
    """Tests for delete and delete_all."""

    @pytest.mark.asyncio
    async def test_delete_absent_is_success(self, client, toolkit):
        toolkit.delete_user.side_effect = not_found()

        assert await client.delete("ghost") is True

    @pytest.mark.asyncio
    async def test_delete_provider_failure_raises(self, client, toolkit):
        toolkit.delete_user.side_effect = IdentityToolkitError(
            "INTERNAL", "INTERNAL", 500
        )

        with pytest.raises(DirectoryError):
            await client.delete("u1")

    @pytest.mark.asyncio
    async def test_batch_true_when_any_succeeded(self, client, toolkit):
        """A partial batch still counts as success."""
        toolkit.delete_users.return_value = 1

        assert await client.delete(["u1", "u2", "u3"]) is True

    @pytest.mark.asyncio
    async def test_batch_false_when_none_succeeded(self, client, toolkit):
        toolkit.delete_users.return_value = 0

        assert await client.delete(["u1"]) is False

    @pytest.mark.asyncio
    async def test_empty_batch_is_false(self, client, toolkit):
        assert await client.delete([]) is False
        toolkit.delete_users.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_delete_all_loops_until_empty(self, client, toolkit):
        # Arrange
        toolkit.query_users.side_effect = [
            [record("u1"), record("u2")],
            [record("u3")],
            [],
        ]
        toolkit.delete_users.side_effect = [2, 1]

        # Act
        removed = await client.delete_all()

        # Assert
        assert removed == 3
        toolkit.query_users.assert_awaited_with(limit=2)
        assert toolkit.delete_users.await_count == 2


class TestUpdatePassword:
    """Tests for update_password."""

    @pytest.mark.asyncio
    async def test_unknown_email_raises_validation_error(self, client, toolkit):
        toolkit.get_users.return_value = []

        with pytest.raises(ValidationError) as exc_info:
            await client.update_password("ghost@ex.com", "secret1")

        assert exc_info.value.field == "email"
        assert isinstance(exc_info.value.__cause__, NotFoundError)

    @pytest.mark.asyncio
    async def test_provider_failure_raises_directory_error(self, client, toolkit):
        toolkit.get_users.return_value = [record("u1", email="a@ex.com")]
        toolkit.update_user.side_effect = IdentityToolkitError(
            "WEAK_PASSWORD", "WEAK_PASSWORD : Password should be at least 6 characters"
        )

        with pytest.raises(DirectoryError, match="Failed to update password") as exc_info:
            await client.update_password("a@ex.com", "123")

        assert exc_info.value.code == "WEAK_PASSWORD"

    @pytest.mark.asyncio
    async def test_success(self, client, toolkit):
        toolkit.get_users.return_value = [record("u1", email="a@ex.com")]

        result = await client.update_password("a@ex.com", "secret1")

        toolkit.update_user.assert_awaited_once_with("u1", {"password": "secret1"})
        assert result.uid == "u1"


class TestListing:
    """Tests for query, all, count and search."""

    @pytest.mark.asyncio
    async def test_search_floors_and_filters(self, client, toolkit):
        # Arrange
        toolkit.query_users.return_value = [
            record("u1", display_name="Alpha", email="a@ex.com", phone_number="+1555"),
            record("u2", display_name="Beta", email="b@ex.com", phone_number="+1666"),
        ]

        # Act
        result = await client.search("alp", offset=-3, limit=0)

        # Assert
        assert [r.uid for r in result] == ["u1"]
        kwargs = toolkit.query_users.await_args.kwargs
        assert kwargs["offset"] == 0
        assert kwargs["limit"] == 1

    @pytest.mark.asyncio
    async def test_search_empty_term_returns_page(self, client, toolkit):
        toolkit.query_users.return_value = [record("u1"), record("u2")]

        assert len(await client.search("", 0, 2)) == 2

    @pytest.mark.asyncio
    async def test_query_translates_filter(self, client, toolkit):
        toolkit.query_users.return_value = [record("u1")]

        await client.query(IdentityQuery(email="a@ex.com", limit=5))

        kwargs = toolkit.query_users.await_args.kwargs
        assert kwargs["expression"] == {"email": "a@ex.com"}
        assert kwargs["limit"] == 5

    @pytest.mark.asyncio
    async def test_all_pages_through(self, client, toolkit):
        toolkit.query_users.side_effect = [[record("u1"), record("u2")], [record("u3")]]

        result = await client.all()

        assert [r.uid for r in result] == ["u1", "u2", "u3"]

    @pytest.mark.asyncio
    async def test_count(self, client, toolkit):
        toolkit.count_users.return_value = 7

        assert await client.count() == 7


class TestNotifications:
    """Tests for reset and verification e-mails."""

    @pytest.mark.asyncio
    async def test_send_reset_link(self, client, toolkit):
        result = await client.send_reset_link("a@ex.com")

        assert result == RESET_LINK_SENT
        toolkit.send_oob_code.assert_awaited_once_with(
            "PASSWORD_RESET", "a@ex.com", continue_url="http://app.test/login"
        )

    @pytest.mark.asyncio
    async def test_send_verification_email_builds_signed_url(
        self, client, toolkit, directory_settings
    ):
        """The continue URL should carry the uid and a valid signature."""
        # Arrange
        account = Account.new(uid="u1", email="a@ex.com")

        # Act
        result = await client.send_verification_email(account, {"lang": "en"})

        # Assert
        assert result is None
        args = toolkit.send_oob_code.await_args
        assert args.args == ("VERIFY_EMAIL", "a@ex.com")
        assert args.kwargs["extra"] == {"lang": "en"}
        url = urlparse(args.kwargs["continue_url"])
        params = parse_qs(url.query)
        assert params["uid"] == ["u1"]
        payload = verify_signature(params["signature"][0], directory_settings)
        assert payload.uid == "u1"

    @pytest.mark.asyncio
    async def test_send_verification_email_needs_email(self, client):
        with pytest.raises(ValidationError):
            await client.send_verification_email(Account.new(uid="u1"))

    def test_message(self, client):
        assert client.message("EMAIL_EXISTS").startswith("The email address")
        assert client.message("SOMETHING_NEW", "Fallback") == "Fallback"
        assert client.message("SOMETHING_NEW") == "SOMETHING_NEW"


class TestCredentials:
    """Tests for check and attempt."""

    @pytest.mark.asyncio
    async def test_check_true_on_sign_in(self, client, toolkit):
        toolkit.sign_in_with_password.return_value = "u1"

        assert await client.check("a@ex.com", "pw") is True

    @pytest.mark.asyncio
    async def test_check_false_on_rejection(self, client, toolkit):
        toolkit.sign_in_with_password.side_effect = IdentityToolkitError(
            "INVALID_LOGIN_CREDENTIALS", "INVALID_LOGIN_CREDENTIALS", 400
        )

        assert await client.check("a@ex.com", "bad") is False

    @pytest.mark.asyncio
    async def test_attempt_returns_record(self, client, toolkit):
        toolkit.sign_in_with_password.return_value = "u1"
        toolkit.get_users.return_value = [record("u1", email="a@ex.com")]

        result = await client.attempt({"email": "a@ex.com", "password": "pw"})

        assert result.uid == "u1"

    @pytest.mark.asyncio
    async def test_attempt_missing_one_credential(self, client, toolkit):
        assert await client.attempt({"email": "a@ex.com"}) is None
        toolkit.sign_in_with_password.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_attempt_without_credentials_raises(self, client):
        with pytest.raises(ValidationError):
            await client.attempt({})

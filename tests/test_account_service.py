"""
Tests for the account lifecycle service.

Tests:
- Sign up publishes exactly one user-created event
- Provider failures map to generic error results
- Deletion request always returns a result
- Deletion confirmation removes the Firebase user and the profile
"""

import time

import pytest
from conftest import FakeArqPool, FakeAuthProvider, dispatcher_for

from signalist.auth import AuthSession
from signalist.config import APP_BASE_URL
from signalist.domain.accounts.schemas import SignInRequest, SignUpRequest
from signalist.domain.accounts.service import AccountService
from signalist.domain.events import USER_CREATED
from signalist.domain.users.repository import UserRepository
from signalist.domain.watchlist.repository import WatchlistRepository
from signalist.models import WatchlistItem


class TestSignUp:
    """Tests for registration."""

    @pytest.mark.asyncio
    async def test_success_publishes_one_user_created_event(
        self, auth_provider, dispatcher, arq_pool, max_sign_up
    ):
        service = AccountService(auth_provider, dispatcher)
        result = await service.sign_up(max_sign_up)

        assert result.success
        assert result.error is None
        assert result.data["uid"] == "uid-123"
        assert result.event.success
        assert len(arq_pool.jobs) == 1
        payload = arq_pool.jobs[0]["args"][0]
        assert payload["name"] == USER_CREATED
        assert payload["data"] == {
            "email": "max@example.com",
            "name": "Max Mustermann",
            "country": "US",
            "investmentGoals": "Growth",
            "riskTolerance": "Medium",
            "preferredIndustry": "Technology",
        }

    @pytest.mark.asyncio
    async def test_repeated_sign_up_queues_one_welcome(
        self, auth_provider, dispatcher, arq_pool, max_sign_up
    ):
        service = AccountService(auth_provider, dispatcher)
        first = await service.sign_up(max_sign_up)
        second = await service.sign_up(max_sign_up)

        assert first.event.job_id == "app/user.created:uid-123"
        assert not first.event.duplicate
        assert second.event.duplicate
        assert len(arq_pool.jobs) == 1

    @pytest.mark.asyncio
    async def test_provider_failure_publishes_nothing(self, dispatcher, arq_pool, max_sign_up):
        service = AccountService(FakeAuthProvider(fail=True), dispatcher)
        result = await service.sign_up(max_sign_up)

        assert not result.success
        assert result.error == "Sign up failed"
        assert result.event is None
        assert arq_pool.jobs == []

    @pytest.mark.asyncio
    async def test_publish_failure_keeps_sign_up_successful(self, auth_provider, max_sign_up):
        service = AccountService(auth_provider, dispatcher_for(FakeArqPool(fail=True)))
        result = await service.sign_up(max_sign_up)

        assert result.success
        assert not result.event.success

    @pytest.mark.asyncio
    async def test_profile_persisted(self, auth_provider, dispatcher, max_sign_up, db_session):
        service = AccountService(auth_provider, dispatcher, db_session)
        await service.sign_up(max_sign_up)

        user = UserRepository.get_user_by_firebase_uid(db_session, "uid-123")
        assert user is not None
        assert user.email == "max@example.com"
        assert user.investment_goals == "Growth"
        assert user.preferred_industry == "Technology"

    @pytest.mark.asyncio
    async def test_existing_profile_not_duplicated(
        self, auth_provider, dispatcher, max_sign_up, db_session
    ):
        service = AccountService(auth_provider, dispatcher, db_session)
        await service.sign_up(max_sign_up)
        result = await service.sign_up(max_sign_up)

        assert result.success
        assert len(UserRepository.get_users_for_news_email(db_session)) == 1

    def test_request_normalizes_email_and_country(self):
        request = SignUpRequest(
            fullName="  Erika   Musterfrau ",
            email=" Erika@Example.COM ",
            password="pw12345678",
            country="de",
        )
        assert request.email == "erika@example.com"
        assert request.country == "DE"
        assert request.fullName == "Erika Musterfrau"

    def test_short_password_rejected(self):
        with pytest.raises(ValueError):
            SignUpRequest(fullName="Max Mustermann", email="max@example.com", password="short")

    def test_unknown_goal_rejected(self):
        with pytest.raises(ValueError):
            SignUpRequest(
                fullName="Max Mustermann",
                email="max@example.com",
                password="pw12345678",
                investmentGoals="Speculation",
            )


class TestSessions:
    """Tests for sign in and sign out."""

    @pytest.mark.asyncio
    async def test_sign_in_success(self, auth_provider, dispatcher):
        service = AccountService(auth_provider, dispatcher)
        result = await service.sign_in(SignInRequest(email="max@example.com", password="pw12345678"))

        assert result.success
        assert result.data["idToken"] == "token"

    @pytest.mark.asyncio
    async def test_sign_in_failure(self, dispatcher):
        service = AccountService(FakeAuthProvider(fail=True), dispatcher)
        result = await service.sign_in(SignInRequest(email="max@example.com", password="wrong"))

        assert not result.success
        assert result.error == "Sign in failed"

    @pytest.mark.asyncio
    async def test_sign_out_success(self, auth_provider, dispatcher, session):
        result = await AccountService(auth_provider, dispatcher).sign_out(session)

        assert result.success
        assert ("sign_out", "uid-123") in auth_provider.calls

    @pytest.mark.asyncio
    async def test_sign_out_failure(self, dispatcher, session):
        result = await AccountService(FakeAuthProvider(fail=True), dispatcher).sign_out(session)

        assert not result.success
        assert result.error == "Sign out failed"


class TestRequestDeleteAccount:
    """Tests for the two-phase account deletion request."""

    @pytest.mark.asyncio
    async def test_sends_link_to_goodbye_page(self, auth_provider, dispatcher, session):
        result = await AccountService(auth_provider, dispatcher).request_delete_account(session)

        assert result.success is True
        assert auth_provider.calls == [("delete", "uid-123", f"{APP_BASE_URL.rstrip('/')}/goodbye")]

    @pytest.mark.asyncio
    async def test_failure_returns_result(self, dispatcher, session):
        result = await AccountService(
            FakeAuthProvider(fail=True), dispatcher
        ).request_delete_account(session)

        assert result.success is False
        assert result.error == "Failed to send verification email"


class TestConfirmDeleteAccount:
    """Tests for the second phase of account deletion."""

    @pytest.mark.asyncio
    async def test_deletes_firebase_user_profile_and_watchlist(
        self, auth_provider, dispatcher, fresh_session, db_session
    ):
        user = UserRepository.create_user(
            db_session, "uid-123", full_name="Max Mustermann", email="max@example.com"
        )
        WatchlistRepository.add_item(db_session, user.id, "AAPL", "Apple Inc")

        result = await AccountService(auth_provider, dispatcher, db_session).confirm_delete_account(
            fresh_session
        )

        assert result.success is True
        assert auth_provider.calls == [("delete_account", "uid-123")]
        assert UserRepository.get_user_by_firebase_uid(db_session, "uid-123") is None
        assert db_session.query(WatchlistItem).count() == 0

    @pytest.mark.asyncio
    async def test_stale_session_rejected(self, auth_provider, dispatcher, db_session):
        UserRepository.create_user(db_session, "uid-123", email="max@example.com")
        stale = AuthSession(uid="uid-123", email="max@example.com", auth_time=int(time.time()) - 3600)

        result = await AccountService(auth_provider, dispatcher, db_session).confirm_delete_account(
            stale
        )

        assert result.success is False
        assert result.error == "Please confirm from the link in your email"
        assert auth_provider.calls == []
        assert UserRepository.get_user_by_firebase_uid(db_session, "uid-123") is not None

    @pytest.mark.asyncio
    async def test_session_without_auth_time_rejected(self, auth_provider, dispatcher, session):
        result = await AccountService(auth_provider, dispatcher).confirm_delete_account(session)

        assert result.success is False
        assert auth_provider.calls == []

    @pytest.mark.asyncio
    async def test_provider_failure_keeps_profile(self, dispatcher, fresh_session, db_session):
        UserRepository.create_user(db_session, "uid-123", email="max@example.com")

        result = await AccountService(
            FakeAuthProvider(fail=True), dispatcher, db_session
        ).confirm_delete_account(fresh_session)

        assert result.success is False
        assert result.error == "Failed to delete account"
        assert UserRepository.get_user_by_firebase_uid(db_session, "uid-123") is not None

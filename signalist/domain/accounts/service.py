"""Account service - sign up, sign in, sign out and two-phase account deletion"""

import logging
import time
from typing import Optional

from sqlalchemy.orm import Session

from ...auth import AuthSession
from ...config import APP_BASE_URL, DELETE_ACCOUNT_MAX_SESSION_AGE_SECONDS
from ..events.dispatcher import EventDispatcher
from ..events.schemas import USER_CREATED, user_created_key
from ..users.repository import UserRepository
from .providers import AuthProvider
from .schemas import AccountActionResult, SignInRequest, SignUpRequest, SignUpResult, UserProfile

logger = logging.getLogger(__name__)

SIGN_UP_FAILED = "Sign up failed"
SIGN_IN_FAILED = "Sign in failed"
SIGN_OUT_FAILED = "Sign out failed"
DELETE_VERIFICATION_FAILED = "Failed to send verification email"
DELETE_CONFIRMATION_EXPIRED = "Please confirm from the link in your email"
DELETE_ACCOUNT_FAILED = "Failed to delete account"

DELETE_ACCOUNT_CALLBACK_PATH = "/goodbye"


class AccountService:
    """
    Account operations. Every method returns a result object and never raises,
    underlying errors are logged and replaced by a generic message.
    """

    def __init__(
        self,
        auth_provider: AuthProvider,
        dispatcher: EventDispatcher,
        db: Optional[Session] = None,
    ):
        self.auth_provider = auth_provider
        self.dispatcher = dispatcher
        self.db = db
        self.repo = UserRepository()

    def _save_profile(self, firebase_uid: Optional[str], profile: UserProfile) -> None:
        """Persist the profile row. Sign-up does not depend on this succeeding."""
        if self.db is None or not firebase_uid:
            return
        try:
            if self.repo.get_user_by_firebase_uid(self.db, firebase_uid):
                return
            self.repo.create_user(
                self.db,
                firebase_uid,
                full_name=profile.full_name,
                email=profile.email,
                country=profile.country,
                investment_goals=profile.investment_goals.value,
                risk_tolerance=profile.risk_tolerance.value,
                preferred_industry=profile.preferred_industry.value,
            )
            logger.info(f"✅ Profile saved for {profile.email}")
        except Exception as e:
            self.db.rollback()
            logger.error(f"❌ Failed to save profile for {profile.email}: {e}")

    async def sign_up(self, data: SignUpRequest) -> SignUpResult:
        """
        Register a user and publish the user-created event.

        The event outcome is reported on the result but never turns a
        successful registration into a failure.
        """
        profile = data.to_profile()
        logger.info(f"📥 Sign up requested for {profile.email}")

        try:
            response = await self.auth_provider.sign_up(
                email=profile.email, password=data.password, name=profile.full_name
            )
        except Exception as e:
            logger.error(f"❌ Sign up failed for {profile.email}: {e}")
            return SignUpResult(success=False, error=SIGN_UP_FAILED)

        uid = response.get("uid")
        self._save_profile(uid, profile)

        event = await self.dispatcher.publish(
            USER_CREATED,
            profile.event_payload(),
            idempotency_key=user_created_key(uid) if uid else None,
        )
        if not event.success:
            logger.warning(f"⚠️ User created but event publish failed for {profile.email}: {event.error}")

        return SignUpResult(success=True, data=response, event=event)

    async def sign_in(self, data: SignInRequest) -> AccountActionResult:
        try:
            response = await self.auth_provider.sign_in(email=data.email, password=data.password)
        except Exception as e:
            logger.error(f"❌ Sign in failed for {data.email}: {e}")
            return AccountActionResult(success=False, error=SIGN_IN_FAILED)
        return AccountActionResult(success=True, data=response)

    async def sign_out(self, session: AuthSession) -> AccountActionResult:
        try:
            await self.auth_provider.sign_out(session)
        except Exception as e:
            logger.error(f"❌ Sign out failed for {session.uid}: {e}")
            return AccountActionResult(success=False, error=SIGN_OUT_FAILED)
        return AccountActionResult(success=True)

    async def request_delete_account(self, session: AuthSession) -> AccountActionResult:
        """Email a confirmation link. The account is only deleted once the link is followed."""
        callback_url = f"{APP_BASE_URL.rstrip('/')}{DELETE_ACCOUNT_CALLBACK_PATH}"
        try:
            await self.auth_provider.send_delete_account_verification(session, callback_url)
        except Exception as e:
            logger.error(f"❌ Failed to send delete verification for {session.uid}: {e}")
            return AccountActionResult(success=False, error=DELETE_VERIFICATION_FAILED)
        return AccountActionResult(success=True)

    async def confirm_delete_account(self, session: AuthSession) -> AccountActionResult:
        """
        Second phase of the delete: the client signs in with the emailed link
        and calls this with the resulting session.

        Only a session issued within DELETE_ACCOUNT_MAX_SESSION_AGE_SECONDS is
        accepted. The Firebase user goes first, then the profile row and its
        watchlist.
        """
        age = time.time() - session.auth_time if session.auth_time else None
        if age is None or age > DELETE_ACCOUNT_MAX_SESSION_AGE_SECONDS:
            logger.warning(f"⚠️ Delete confirmation for {session.uid} with a stale session (age {age})")
            return AccountActionResult(success=False, error=DELETE_CONFIRMATION_EXPIRED)

        try:
            await self.auth_provider.delete_account(session)
        except Exception as e:
            logger.error(f"❌ Failed to delete account {session.uid}: {e}")
            return AccountActionResult(success=False, error=DELETE_ACCOUNT_FAILED)

        if self.db is not None:
            try:
                user = self.repo.get_user_by_firebase_uid(self.db, session.uid)
                if user:
                    self.repo.delete_user(self.db, user)
            except Exception as e:
                self.db.rollback()
                logger.error(f"❌ Firebase user {session.uid} deleted but profile removal failed: {e}")
                return AccountActionResult(success=False, error=DELETE_ACCOUNT_FAILED)

        logger.info(f"👋 Account deleted for {session.uid}")
        return AccountActionResult(success=True)

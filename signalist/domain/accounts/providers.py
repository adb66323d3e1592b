"""
Authentication providers
Firebase Admin SDK for account management, Identity Toolkit REST for password sign-in
"""

import asyncio
import logging
from abc import ABC, abstractmethod
from collections.abc import Awaitable, Callable
from typing import Any, Optional

import httpx
from firebase_admin import auth as firebase_auth

from ...auth import AuthSession, get_firebase_app
from ...config import FIREBASE_AUTH_BASE_URL, FIREBASE_WEB_API_KEY
from ...email_service import send_delete_account_confirmation
from ...exceptions import ExternalServiceError

logger = logging.getLogger(__name__)


class AuthProvider(ABC):
    """Operations the account service needs from an identity backend"""

    @abstractmethod
    async def sign_up(self, email: str, password: str, name: str) -> dict[str, Any]:
        ...

    @abstractmethod
    async def sign_in(self, email: str, password: str) -> dict[str, Any]:
        ...

    @abstractmethod
    async def sign_out(self, session: AuthSession) -> None:
        ...

    @abstractmethod
    async def send_delete_account_verification(
        self, session: AuthSession, callback_url: str
    ) -> None:
        ...

    @abstractmethod
    async def delete_account(self, session: AuthSession) -> None:
        ...


class FirebaseAuthProvider(AuthProvider):
    def __init__(
        self,
        web_api_key: Optional[str] = FIREBASE_WEB_API_KEY,
        base_url: str = FIREBASE_AUTH_BASE_URL,
        http_client: Optional[httpx.AsyncClient] = None,
        send_confirmation: Callable[[str, str], Awaitable[Any]] = send_delete_account_confirmation,
    ):
        self.web_api_key = web_api_key
        self.base_url = base_url.rstrip("/")
        self._http_client = http_client
        self._send_confirmation = send_confirmation

    async def sign_up(self, email: str, password: str, name: str) -> dict[str, Any]:
        app = get_firebase_app()
        try:
            record = await asyncio.to_thread(
                firebase_auth.create_user,
                email=email,
                password=password,
                display_name=name,
                app=app,
            )
        except firebase_auth.EmailAlreadyExistsError as e:
            raise ExternalServiceError("Email already registered") from e
        except Exception as e:
            raise ExternalServiceError(f"Firebase create_user failed: {e}") from e

        logger.info(f"✅ Firebase user created: {record.uid}")
        return {"uid": record.uid, "email": record.email, "name": record.display_name}

    async def sign_in(self, email: str, password: str) -> dict[str, Any]:
        """Exchange email and password for Firebase ID and refresh tokens"""
        if not self.web_api_key:
            raise ExternalServiceError("FIREBASE_WEB_API_KEY not configured")

        url = f"{self.base_url}/accounts:signInWithPassword"
        body = {"email": email, "password": password, "returnSecureToken": True}
        try:
            if self._http_client is not None:
                response = await self._http_client.post(
                    url, params={"key": self.web_api_key}, json=body
                )
            else:
                async with httpx.AsyncClient(timeout=15) as client:
                    response = await client.post(url, params={"key": self.web_api_key}, json=body)
        except httpx.HTTPError as e:
            raise ExternalServiceError(f"Identity Toolkit request failed: {e}") from e

        if response.status_code != 200:
            try:
                reason = response.json().get("error", {}).get("message", "unknown")
            except ValueError:
                reason = response.text[:200]
            raise ExternalServiceError(f"Password sign-in rejected: {reason}")

        data = response.json()
        return {
            "uid": data.get("localId"),
            "email": data.get("email"),
            "idToken": data.get("idToken"),
            "refreshToken": data.get("refreshToken"),
            "expiresIn": data.get("expiresIn"),
        }

    async def sign_out(self, session: AuthSession) -> None:
        """Revoke every refresh token of the user, ending all sessions"""
        await asyncio.to_thread(
            firebase_auth.revoke_refresh_tokens, session.uid, app=get_firebase_app()
        )
        logger.info(f"🔒 Revoked refresh tokens for {session.uid}")

    async def send_delete_account_verification(
        self, session: AuthSession, callback_url: str
    ) -> None:
        app = get_firebase_app()
        email = session.email
        if not email:
            record = await asyncio.to_thread(firebase_auth.get_user, session.uid, app=app)
            email = record.email
        if not email:
            raise ExternalServiceError(f"User {session.uid} has no email address")

        settings = firebase_auth.ActionCodeSettings(url=callback_url, handle_code_in_app=True)
        link = await asyncio.to_thread(
            firebase_auth.generate_sign_in_with_email_link, email, settings, app=app
        )
        await self._send_confirmation(email, link)
        logger.info(f"📧 Delete account confirmation sent to {email}")

    async def delete_account(self, session: AuthSession) -> None:
        """Delete the Firebase user. A user that is already gone counts as deleted."""
        try:
            await asyncio.to_thread(
                firebase_auth.delete_user, session.uid, app=get_firebase_app()
            )
        except firebase_auth.UserNotFoundError:
            logger.warning(f"⚠️ Firebase user {session.uid} already deleted")
            return
        except Exception as e:
            raise ExternalServiceError(f"Firebase delete_user failed: {e}") from e
        logger.info(f"🗑️ Firebase user deleted: {session.uid}")

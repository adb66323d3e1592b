import logging
from dataclasses import dataclass
from typing import Optional

import firebase_admin
from fastapi import Depends, HTTPException
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from firebase_admin import auth as firebase_auth
from firebase_admin import credentials
from sqlalchemy.orm import Session

from .config import FIREBASE_PROJECT_ID
from .database import get_db
from .domain.users.repository import UserRepository
from .models import User

logger = logging.getLogger(__name__)

security = HTTPBearer()


@dataclass(frozen=True)
class AuthSession:
    """Verified Firebase session for the current request"""

    uid: str
    email: Optional[str]
    name: Optional[str] = None
    # Seconds since epoch of the sign-in that issued the token
    auth_time: Optional[int] = None


def get_firebase_app() -> firebase_admin.App:
    """Initialize the Firebase Admin SDK once and return the default app"""
    try:
        return firebase_admin.get_app()
    except ValueError:
        try:
            cred = credentials.ApplicationDefault()
            app = firebase_admin.initialize_app(cred, {"projectId": FIREBASE_PROJECT_ID})
            logger.info("Firebase Admin initialized with default credentials")
        except Exception:
            # Initialize without credentials (limited functionality)
            app = firebase_admin.initialize_app(options={"projectId": FIREBASE_PROJECT_ID})
            logger.info("Firebase Admin initialized with project ID only")
        return app


async def get_current_session(
    credentials: HTTPAuthorizationCredentials = Depends(security),
) -> AuthSession:
    """Verify the Bearer Firebase ID token and return the session"""
    if not credentials:
        raise HTTPException(
            status_code=401,
            detail="Not authenticated. Please provide a valid Bearer token in the Authorization header.",
        )

    token = credentials.credentials
    if len(token.split(".")) != 3:
        logger.warning(f"⚠️ Malformed token received, length: {len(token)}")
        raise HTTPException(
            status_code=401, detail="Invalid token format. Expected a valid JWT token."
        )

    try:
        decoded = firebase_auth.verify_id_token(token, app=get_firebase_app(), check_revoked=True)
    except firebase_auth.RevokedIdTokenError as e:
        raise HTTPException(
            status_code=401,
            detail="Session has been signed out. Please sign in again.",
        ) from e
    except firebase_auth.ExpiredIdTokenError as e:
        raise HTTPException(
            status_code=401,
            detail="Token has expired. Please refresh your session.",
            headers={"X-Token-Expired": "true"},
        ) from e
    except Exception as e:
        logger.error(f"❌ Token verification failed: {type(e).__name__}: {str(e)}")
        raise HTTPException(status_code=401, detail="Token verification failed") from e

    uid = decoded.get("uid") or decoded.get("sub")
    if not uid:
        logger.error(f"❌ Token missing user ID claim. Available claims: {list(decoded.keys())}")
        raise HTTPException(status_code=401, detail="Invalid token claims")

    logger.debug(f"✅ Token verified for user: {decoded.get('email')}")
    return AuthSession(
        uid=uid,
        email=decoded.get("email"),
        name=decoded.get("name"),
        auth_time=decoded.get("auth_time"),
    )


async def get_current_user(
    session: AuthSession = Depends(get_current_session),
    db: Session = Depends(get_db),
) -> User:
    """Get the persisted profile for the current session"""
    user = UserRepository.get_user_by_firebase_uid(db, session.uid)
    if not user:
        logger.warning(f"⚠️ No profile found for Firebase UID {session.uid}")
        raise HTTPException(status_code=404, detail="User profile not found")
    return user

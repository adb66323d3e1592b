"""Account router - FastAPI endpoints for authentication"""

import logging
from functools import lru_cache

from fastapi import APIRouter, Depends, Request
from sqlalchemy.orm import Session

from ...auth import AuthSession, get_current_session
from ...database import get_db
from ..events.dispatcher import EventDispatcher
from .providers import AuthProvider, FirebaseAuthProvider
from .schemas import AccountActionResult, SignInRequest, SignUpRequest, SignUpResult
from .service import AccountService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/auth", tags=["Auth"])


@lru_cache
def get_auth_provider() -> AuthProvider:
    return FirebaseAuthProvider()


def get_event_dispatcher(request: Request) -> EventDispatcher:
    return request.app.state.dispatcher


def get_account_service(
    db: Session = Depends(get_db),
    auth_provider: AuthProvider = Depends(get_auth_provider),
    dispatcher: EventDispatcher = Depends(get_event_dispatcher),
) -> AccountService:
    """Dependency injection for AccountService"""
    return AccountService(auth_provider, dispatcher, db)


@router.post("/sign-up", response_model=SignUpResult)
async def sign_up(data: SignUpRequest, service: AccountService = Depends(get_account_service)):
    """Register with email, password and investment preferences"""
    return await service.sign_up(data)


@router.post("/sign-in", response_model=AccountActionResult)
async def sign_in(data: SignInRequest, service: AccountService = Depends(get_account_service)):
    return await service.sign_in(data)


@router.post("/sign-out", response_model=AccountActionResult)
async def sign_out(
    session: AuthSession = Depends(get_current_session),
    service: AccountService = Depends(get_account_service),
):
    return await service.sign_out(session)


@router.post("/delete-account/request", response_model=AccountActionResult)
async def request_delete_account(
    session: AuthSession = Depends(get_current_session),
    service: AccountService = Depends(get_account_service),
):
    """Send the account deletion confirmation email"""
    return await service.request_delete_account(session)


@router.post("/delete-account/confirm", response_model=AccountActionResult)
async def confirm_delete_account(
    session: AuthSession = Depends(get_current_session),
    service: AccountService = Depends(get_account_service),
):
    """Delete the account with the session from the emailed confirmation link"""
    return await service.confirm_delete_account(session)

"""
登入狀態 API 路由

登入、註冊、登出與目前用戶查詢。
"""

import logging

from fastapi import APIRouter, Depends, HTTPException, status

from stockdesk.api.deps import get_locale, get_session
from stockdesk.schemas.common import ApiResponse
from stockdesk.schemas.user import LoginForm, RegisterForm, SessionInfo
from stockdesk.services.forms import submit_login, submit_register
from stockdesk.services.locale import LocaleStore
from stockdesk.services.session import SessionStore

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/session", tags=["登入"])


def _session_info(session: SessionStore, locale: LocaleStore) -> SessionInfo:
    user = session.user
    greeting = None
    if user is not None:
        greeting = locale.format("header.hello", {"name": user.name}, default="你好，{name}")
    return SessionInfo(
        user=user,
        is_logged_in=session.is_logged_in,
        loading=session.loading,
        greeting=greeting,
    )


@router.get("", response_model=ApiResponse[SessionInfo])
async def get_session_info(
    session: SessionStore = Depends(get_session),
    locale: LocaleStore = Depends(get_locale),
):
    """目前登入狀態"""
    return ApiResponse(data=_session_info(session, locale))


@router.post("/login", response_model=ApiResponse[SessionInfo])
async def login(
    form: LoginForm,
    session: SessionStore = Depends(get_session),
    locale: LocaleStore = Depends(get_locale),
):
    """用戶登入"""
    result = await submit_login(session, form)
    if not result.ok:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=result.error)
    return ApiResponse(data=_session_info(session, locale))


@router.post("/register", response_model=ApiResponse[SessionInfo])
async def register(
    form: RegisterForm,
    session: SessionStore = Depends(get_session),
    locale: LocaleStore = Depends(get_locale),
):
    """用戶註冊（成功後自動登入）"""
    result = await submit_register(session, form)
    if not result.ok:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=result.error)
    return ApiResponse(data=_session_info(session, locale))


@router.post("/logout", response_model=ApiResponse[SessionInfo])
async def logout(
    session: SessionStore = Depends(get_session),
    locale: LocaleStore = Depends(get_locale),
):
    """用戶登出"""
    await session.logout()
    return ApiResponse(data=_session_info(session, locale))

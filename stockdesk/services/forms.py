"""
登入 / 註冊表單送出流程

表單欄位已由 Schema 驗證；此處只負責呼叫登入狀態服務，
並把後端錯誤轉為可直接顯示的訊息。
"""

from dataclasses import dataclass

from stockdesk.client.errors import ApiError
from stockdesk.schemas.user import LoginForm, RegisterForm
from stockdesk.services.session import SessionStore


@dataclass
class FormResult:
    """表單送出結果"""
    ok: bool
    error: str | None = None


async def submit_login(session: SessionStore, form: LoginForm) -> FormResult:
    try:
        await session.login(form.email, form.password)
    except ApiError as e:
        return FormResult(ok=False, error=str(e))
    return FormResult(ok=True)


async def submit_register(session: SessionStore, form: RegisterForm) -> FormResult:
    try:
        await session.register(form.to_payload())
    except ApiError as e:
        return FormResult(ok=False, error=str(e))
    return FormResult(ok=True)

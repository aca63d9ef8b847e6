"""
語系 API 路由
"""

from fastapi import APIRouter, Depends, HTTPException, status

from stockdesk.api.deps import get_locale
from stockdesk.schemas.common import ApiResponse
from stockdesk.schemas.locale import LocaleInfo, LocaleSwitch
from stockdesk.services.locale import LocaleStore, UnsupportedLocaleError

router = APIRouter(prefix="/locale", tags=["語系"])


def _locale_info(locale: LocaleStore) -> LocaleInfo:
    return LocaleInfo(
        locale=locale.locale,
        supported_locales=list(locale.supported_locales),
        messages=dict(locale.messages),
    )


@router.get("", response_model=ApiResponse[LocaleInfo])
async def get_locale_info(locale: LocaleStore = Depends(get_locale)):
    """目前語系與訊息目錄"""
    return ApiResponse(data=_locale_info(locale))


@router.put("", response_model=ApiResponse[LocaleInfo])
async def switch_locale(data: LocaleSwitch, locale: LocaleStore = Depends(get_locale)):
    """切換語系"""
    try:
        locale.switch_locale(data.locale)
    except UnsupportedLocaleError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    return ApiResponse(data=_locale_info(locale))

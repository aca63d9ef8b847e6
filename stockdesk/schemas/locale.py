"""
語系相關 Schema
"""

from pydantic import BaseModel


class LocaleSwitch(BaseModel):
    """切換語系請求"""
    locale: str


class LocaleInfo(BaseModel):
    """目前語系與訊息目錄"""
    locale: str
    supported_locales: list[str]
    messages: dict[str, str]

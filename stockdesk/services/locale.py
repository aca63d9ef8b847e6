"""
語系服務層

保存目前語系與對應的訊息目錄，切換語系時整份目錄一次替換，不做合併。
"""

import json
import logging
from dataclasses import dataclass
from pathlib import Path
from types import MappingProxyType
from typing import Any, Mapping

from stockdesk.services.message_format import MessageFormatter

logger = logging.getLogger(__name__)

SUPPORTED_LOCALES: tuple[str, ...] = ("zh-TW", "en")
DEFAULT_LOCALE = "zh-TW"

LANG_DIR = Path(__file__).resolve().parent.parent / "lang"


class UnsupportedLocaleError(ValueError):
    """不支援的語系代碼"""
    pass


def load_catalog(code: str) -> dict[str, str]:
    """讀取 lang/<code>.json 訊息目錄"""
    path = LANG_DIR / f"{code}.json"
    with path.open(encoding="utf-8") as f:
        return json.load(f)


@dataclass(frozen=True)
class _LocaleState:
    code: str
    messages: Mapping[str, str]
    formatter: MessageFormatter


class LocaleStore:
    """
    語系狀態容器

    使用方式：
        locale = LocaleStore()
        locale.format("header.hello", {"name": "Amy"}, default="你好，{name}")
        locale.switch_locale("en")
    """

    def __init__(
        self,
        locale: str = DEFAULT_LOCALE,
        catalogs: Mapping[str, Mapping[str, str]] | None = None,
    ):
        if catalogs is None:
            catalogs = {code: load_catalog(code) for code in SUPPORTED_LOCALES}
        self._catalogs = {code: dict(messages) for code, messages in catalogs.items()}
        self._state = self._build_state(locale)

    def _build_state(self, code: str) -> _LocaleState:
        messages = self._catalogs.get(code)
        if messages is None:
            raise UnsupportedLocaleError(f"不支援的語系: {code}")
        return _LocaleState(
            code=code,
            messages=MappingProxyType(messages),
            formatter=MessageFormatter(code),
        )

    @property
    def locale(self) -> str:
        return self._state.code

    @property
    def messages(self) -> Mapping[str, str]:
        """目前語系的訊息目錄（唯讀）"""
        return self._state.messages

    @property
    def supported_locales(self) -> tuple[str, ...]:
        return tuple(self._catalogs)

    def switch_locale(self, code: str) -> None:
        """
        切換語系。

        Raises:
            UnsupportedLocaleError: 語系不在支援清單中，狀態不變
        """
        # 先建好新狀態再一次替換，語系代碼與目錄不會出現不一致
        self._state = self._build_state(code)
        logger.info("語系切換為 %s", code)

    def format(
        self,
        key: str,
        values: Mapping[str, Any] | None = None,
        default: str | None = None,
    ) -> str:
        """
        依目前語系格式化訊息。

        目錄缺少該 key 時改用呼叫端提供的 default 樣板；
        兩者皆無時回傳 key 本身。
        """
        state = self._state
        template = state.messages.get(key)
        if template is None:
            if default is None:
                logger.debug("缺少翻譯且無預設樣板: %s (%s)", key, state.code)
                return key
            template = default
        return state.formatter.format(template, values)

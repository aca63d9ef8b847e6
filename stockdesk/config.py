"""
StockDesk 設定模組

使用 Pydantic Settings 管理環境變數，自動驗證型別與預設值。
"""

from functools import lru_cache
from typing import Literal

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """應用程式設定，透過環境變數或 .env 載入"""

    # === 應用程式 ===
    app_env: Literal["development", "production", "testing"] = "development"
    app_name: str = "StockDesk"
    app_version: str = "0.1.0"
    debug: bool = True

    # === 後端 API ===
    api_url: str = "http://localhost:3000"
    http_timeout: float | None = None  # None 表示不設逾時，交由底層連線處理

    # === 本地儲存 ===
    # 預設使用 SQLite 保存 user / token，設定 Redis 時優先使用 Redis
    storage_url: str = "sqlite+aiosqlite:///./stockdesk.db"
    redis_url: str | None = None
    storage_prefix: str = "stockdesk:"

    # === 語系 ===
    default_locale: str = "zh-TW"

    # === CORS ===
    cors_origins: list[str] = [
        "http://localhost:5173",
        "http://localhost:8081",
    ]

    model_config = {
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "case_sensitive": False,
    }

    @property
    def is_development(self) -> bool:
        return self.app_env == "development"

    @property
    def use_sqlite(self) -> bool:
        """判斷本地儲存是否使用 SQLite"""
        return "sqlite" in self.storage_url


@lru_cache
def get_settings() -> Settings:
    """取得快取的設定實例"""
    return Settings()

"""
StockDesk 本地儲存模組

提供類似瀏覽器 localStorage 的鍵值介面，保存登入狀態。
支援 Redis；若 Redis 不可用，自動降級為 SQLite（SQLAlchemy）儲存。
"""

import logging
from abc import ABC, abstractmethod

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from stockdesk.config import Settings
from stockdesk.models.storage_entry import StorageEntry

logger = logging.getLogger(__name__)

# 固定的儲存鍵
USER_KEY = "user"
TOKEN_KEY = "token"


class LocalStorage(ABC):
    """本地鍵值儲存介面，值一律為字串"""

    @abstractmethod
    async def get_item(self, key: str) -> str | None:
        ...

    @abstractmethod
    async def set_item(self, key: str, value: str) -> None:
        ...

    @abstractmethod
    async def remove_item(self, key: str) -> None:
        ...

    async def close(self) -> None:
        """釋放連線資源"""
        return None


class MemoryLocalStorage(LocalStorage):
    """記憶體儲存（測試或不需持久化時使用）"""

    def __init__(self, initial: dict[str, str] | None = None):
        self._items: dict[str, str] = dict(initial or {})

    async def get_item(self, key: str) -> str | None:
        return self._items.get(key)

    async def set_item(self, key: str, value: str) -> None:
        self._items[key] = value

    async def remove_item(self, key: str) -> None:
        self._items.pop(key, None)

    def snapshot(self) -> dict[str, str]:
        """回傳目前內容的副本"""
        return dict(self._items)


class SqlLocalStorage(LocalStorage):
    """SQLAlchemy 鍵值儲存，預設寫入本地 SQLite 檔案"""

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]):
        self._session_factory = session_factory

    async def get_item(self, key: str) -> str | None:
        async with self._session_factory() as session:
            entry = await session.get(StorageEntry, key)
            return entry.value if entry else None

    async def set_item(self, key: str, value: str) -> None:
        async with self._session_factory() as session:
            await session.merge(StorageEntry(key=key, value=value))
            await session.commit()

    async def remove_item(self, key: str) -> None:
        async with self._session_factory() as session:
            entry = await session.get(StorageEntry, key)
            if entry:
                await session.delete(entry)
                await session.commit()


class RedisLocalStorage(LocalStorage):
    """Redis 鍵值儲存，不設 TTL"""

    def __init__(self, client, prefix: str = ""):
        self._client = client
        self._prefix = prefix

    def _make_key(self, key: str) -> str:
        return f"{self._prefix}{key}"

    async def get_item(self, key: str) -> str | None:
        return await self._client.get(self._make_key(key))

    async def set_item(self, key: str, value: str) -> None:
        await self._client.set(self._make_key(key), value)

    async def remove_item(self, key: str) -> None:
        await self._client.delete(self._make_key(key))

    async def close(self) -> None:
        await self._client.aclose()


async def create_storage(settings: Settings) -> LocalStorage:
    """依設定建立儲存後端，Redis 連線失敗時改用 SQL 儲存"""
    if settings.redis_url:
        client = None
        try:
            import redis.asyncio as aioredis
            client = aioredis.from_url(
                settings.redis_url,
                encoding="utf-8",
                decode_responses=True,
            )
            # 測試連線
            await client.ping()
            logger.info("Redis 連線成功: %s", settings.redis_url)
            return RedisLocalStorage(client, prefix=settings.storage_prefix)
        except Exception as e:
            logger.warning("Redis 連線失敗，改用 SQL 儲存: %s", e)
            if client is not None:
                await client.aclose()

    from stockdesk.database import async_session, init_db

    await init_db()
    logger.info("使用 SQL 本地儲存: %s", settings.storage_url)
    return SqlLocalStorage(async_session)

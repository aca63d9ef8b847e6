"""
StockDesk 本地資料庫連線模組

以 SQLAlchemy 2.0 async engine 保存登入狀態（user / token）。
預設使用 SQLite，亦可透過 STORAGE_URL 指向其他資料庫。
"""

from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.orm import DeclarativeBase

from stockdesk.config import get_settings

settings = get_settings()

_engine_kwargs: dict = {
    "echo": False,
}

if settings.use_sqlite:
    # SQLite 需要特殊的 connect_args，允許跨執行緒存取
    _engine_kwargs["connect_args"] = {"check_same_thread": False}

engine = create_async_engine(settings.storage_url, **_engine_kwargs)

async_session = async_sessionmaker(
    engine,
    class_=AsyncSession,
    expire_on_commit=False,
)


class Base(DeclarativeBase):
    """所有 ORM Model 的基礎類別"""
    pass


async def init_db(bind: AsyncEngine | None = None) -> None:
    """初始化資料庫（自動建立所有表）"""
    # 確保 Model 已註冊到 metadata
    import stockdesk.models  # noqa: F401

    async with (bind or engine).begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

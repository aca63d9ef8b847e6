"""
本地儲存資料模型

等同瀏覽器 localStorage 的鍵值表，保存 user（JSON）與 token（原始字串）。
"""

from datetime import datetime

from sqlalchemy import String, Text, DateTime, func
from sqlalchemy.orm import Mapped, mapped_column

from stockdesk.database import Base


class StorageEntry(Base):
    __tablename__ = "local_storage"

    key: Mapped[str] = mapped_column(String(100), primary_key=True)
    value: Mapped[str] = mapped_column(Text, nullable=False)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), onupdate=func.now()
    )

    def __repr__(self) -> str:
        return f"<StorageEntry {self.key}>"

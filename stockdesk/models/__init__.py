"""
ORM Model 匯出

確保所有 Model 在 init_db() 建表前已註冊。
"""

from stockdesk.models.storage_entry import StorageEntry

__all__ = [
    "StorageEntry",
]

"""
登入狀態服務層

保存目前用戶與 token，並同步寫入本地儲存（user 為 JSON、token 為原始字串）。
所有需呼叫後端的操作只有兩種結果：記憶體與儲存一併更新，或完全不變並拋出錯誤。
"""

import asyncio
import logging

from pydantic import ValidationError

from stockdesk.client.backend import BackendClient
from stockdesk.schemas.user import RegisterData, User
from stockdesk.storage import TOKEN_KEY, USER_KEY, LocalStorage

logger = logging.getLogger(__name__)


class SessionStore:
    """
    登入狀態容器

    使用方式：
        session = SessionStore(client, storage)
        await session.initialize()
        await session.login("demo@example.com", "secret123")
    """

    def __init__(self, client: BackendClient, storage: LocalStorage):
        self._client = client
        self._storage = storage
        self._user: User | None = None
        self._loading = True
        self._initialized = False
        # 本地寫入依序執行，避免同時登入/購買互相覆蓋一半的狀態
        self._lock = asyncio.Lock()

    @property
    def user(self) -> User | None:
        return self._user

    @property
    def loading(self) -> bool:
        return self._loading

    @property
    def is_logged_in(self) -> bool:
        return self._user is not None

    async def token(self) -> str | None:
        """讀取已保存的 token"""
        return await self._storage.get_item(TOKEN_KEY)

    async def initialize(self) -> None:
        """
        從本地儲存還原登入狀態（每個程序只執行一次）

        user 與 token 都存在時才還原 user；不呼叫後端，
        已保存的資料在下一次操作前視為有效。
        """
        if self._initialized:
            return
        self._initialized = True

        try:
            stored_user = await self._storage.get_item(USER_KEY)
            stored_token = await self._storage.get_item(TOKEN_KEY)

            if stored_user and stored_token:
                try:
                    self._user = User.model_validate_json(stored_user)
                    logger.info("已還原登入狀態: %s", self._user.email)
                except ValidationError as e:
                    logger.warning("本地 user 資料無法解析，視為未登入: %s", e)
        finally:
            self._loading = False

    async def login(self, email: str, password: str) -> User:
        """
        登入並保存 user 與 token。

        Raises:
            LoginFailedError: 後端拒絕或連線失敗，狀態不變
        """
        # 鎖只保護本地寫入，等待後端時不阻擋登出
        user, token = await self._client.login(email, password)
        async with self._lock:
            await self._persist_session(user, token)
            self._user = user
            logger.info("登入成功: %s", user.email)
            return user

    async def register(self, data: RegisterData) -> User:
        """
        註冊後立即以相同帳密登入。

        Raises:
            RegistrationFailedError: 註冊失敗，狀態不變
            LoginFailedError: 註冊成功但後續登入失敗，狀態不變
        """
        await self._client.register(data)
        logger.info("註冊成功: %s", data.email)
        return await self.login(data.email, data.password)

    async def logout(self) -> None:
        """清除 user 與 token，不呼叫後端"""
        async with self._lock:
            self._user = None
            await self._storage.remove_item(TOKEN_KEY)
            await self._storage.remove_item(USER_KEY)
            logger.info("已登出")

    async def update_user(self, user: User) -> None:
        """以後端回傳的用戶資料整筆取代目前用戶（token 不變）"""
        async with self._lock:
            await self._storage.set_item(USER_KEY, user.to_storage())
            self._user = user

    async def _persist_session(self, user: User, token: str) -> None:
        """同時寫入 token 與 user，任一失敗則還原先前的值"""
        previous_token = await self._storage.get_item(TOKEN_KEY)
        previous_user = await self._storage.get_item(USER_KEY)
        try:
            await self._storage.set_item(TOKEN_KEY, token)
            await self._storage.set_item(USER_KEY, user.to_storage())
        except Exception:
            await self._restore(TOKEN_KEY, previous_token)
            await self._restore(USER_KEY, previous_user)
            raise

    async def _restore(self, key: str, value: str | None) -> None:
        if value is None:
            await self._storage.remove_item(key)
        else:
            await self._storage.set_item(key, value)

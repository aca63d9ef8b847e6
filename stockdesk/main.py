"""
StockDesk FastAPI 應用程式入口

包含 CORS 設定、全域錯誤處理中介軟體，
啟動時依序建立本地儲存、後端客戶端、登入狀態與語系狀態。
"""

import logging
import time
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from stockdesk.api.router import api_router
from stockdesk.client.backend import BackendClient
from stockdesk.config import get_settings
from stockdesk.database import engine
from stockdesk.schemas.common import ErrorResponse
from stockdesk.services.catalog import StockCatalog
from stockdesk.services.locale import LocaleStore
from stockdesk.services.session import SessionStore
from stockdesk.storage import create_storage

# 設定日誌
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)

settings = get_settings()


@asynccontextmanager
async def lifespan(app: FastAPI):
    """應用程式生命週期管理"""
    # === 啟動時 ===
    logger.info("🚀 StockDesk 啟動中...")
    logger.info("環境: %s, 後端: %s", settings.app_env, settings.api_url)

    storage = await create_storage(settings)
    client = BackendClient(settings.api_url, storage, timeout=settings.http_timeout)
    session = SessionStore(client, storage)
    await session.initialize()
    logger.info("✅ 登入狀態已還原 (已登入: %s)", session.is_logged_in)

    app.state.storage = storage
    app.state.client = client
    app.state.session = session
    app.state.locale = LocaleStore(settings.default_locale)
    app.state.catalog = StockCatalog(client)

    yield

    # === 關閉時 ===
    logger.info("StockDesk 關閉中...")
    await client.close()
    await storage.close()
    await engine.dispose()
    logger.info("👋 StockDesk 已關閉")


def create_app() -> FastAPI:
    """建立 FastAPI 應用"""
    app = FastAPI(
        title=settings.app_name,
        version=settings.app_version,
        description="股票瀏覽與購買前端服務",
        docs_url="/docs",
        redoc_url="/redoc",
        debug=settings.debug,
        lifespan=lifespan,
    )

    # === CORS 中介軟體 ===
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # === 全域錯誤處理 ===

    @app.middleware("http")
    async def error_handling_middleware(request: Request, call_next):
        """
        全域錯誤處理與請求日誌中介軟體

        - 記錄每個請求的處理時間
        - 捕獲未預期的例外並回傳統一格式
        """
        start_time = time.time()

        try:
            response = await call_next(request)

            process_time = time.time() - start_time
            logger.info(
                "%s %s - %d (%.3fs)",
                request.method,
                request.url.path,
                response.status_code,
                process_time,
            )

            response.headers["X-Process-Time"] = f"{process_time:.3f}"
            return response

        except Exception as e:
            process_time = time.time() - start_time
            logger.error(
                "%s %s - 500 (%.3fs) Error: %s",
                request.method,
                request.url.path,
                process_time,
                str(e),
            )
            return JSONResponse(
                status_code=500,
                content=ErrorResponse(
                    error="Internal Server Error",
                    detail=str(e) if settings.is_development else None,
                ).model_dump(),
            )

    # === 註冊路由 ===
    app.include_router(api_router)

    # === 健康檢查 ===

    @app.get("/health", tags=["系統"])
    async def health_check():
        """健康檢查"""
        return {
            "status": "healthy",
            "version": settings.app_version,
            "environment": settings.app_env,
        }

    return app


app = create_app()

"""
FastAPI应用主入口
"""
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from contextlib import asynccontextmanager

from api.routes import storage as storage_routes
from api.middleware import RequestIDMiddleware, LoggingMiddleware
from core.config import settings
from core.exceptions import register_exception_handlers
from core.response import success_response
from core.logging_config import get_logger, configure_logging
from infrastructure.external.messaging import init_messaging, shutdown_messaging
from infrastructure.external.storage import (
    init_storage_client,
    shutdown_storage_client,
)


# 初始化日志：在入口处显式配置，避免模块导入时的副作用
configure_logging()
logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """应用生命周期管理"""
    # 存储客户端初始化失败时直接终止启动
    await init_storage_client()

    # 通知失败不影响删除，初始化失败同样只记录日志
    try:
        init_messaging()
    except Exception as exc:
        logger.error("messaging_init_failed", error=str(exc))

    yield

    shutdown_messaging()
    await shutdown_storage_client()
    logger.info("application_shutdown", message="Application shutdown")


app = FastAPI(
    title=settings.PROJECT_NAME,
    version=settings.VERSION,
    debug=settings.DEBUG,
    lifespan=lifespan,
    description="S3 对象存储网关：上传、下载、列表与生命周期删除",
)

# 后添加的中间件先执行：CORS -> RequestID -> Logging
app.add_middleware(LoggingMiddleware)
app.add_middleware(RequestIDMiddleware)
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# 注册全局异常处理器
register_exception_handlers(app)

app.include_router(storage_routes.router)


@app.get("/", tags=["Root"])
async def root():
    return success_response(data={"name": settings.PROJECT_NAME, "version": settings.VERSION})


@app.get("/health", tags=["Health"])
async def health_check():
    """健康检查端点"""
    return success_response(data={"status": "healthy"})


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "main:app",
        host="0.0.0.0",
        port=8000,
        reload=settings.DEBUG,
        log_level="debug" if settings.DEBUG else "info"
    )

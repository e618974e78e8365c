"""
BranchWrite FastAPI Application Entry Point
FastAPI 应用入口
"""

from fastapi import Depends, FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from branchwrite import __version__
from branchwrite.config import config_section, settings
from branchwrite.dependencies import get_store
from branchwrite.exceptions import (
    BranchWriteError,
    EntityNotFoundError,
    StorageParseError,
    ValidationError,
)
from branchwrite.routers import books_router, documents_router, projects_router
from branchwrite.store import BranchWriteStore
from branchwrite.utils.logger import get_logger

logger = get_logger(__name__)

DEFAULT_CORS_ORIGINS = [
    "http://localhost:5173",
    "http://127.0.0.1:5173",
    f"http://127.0.0.1:{settings.port}",
]
CORS_ORIGINS = list(config_section("server").get("cors_origins") or DEFAULT_CORS_ORIGINS)

app = FastAPI(
    title="BranchWrite API",
    description="File-backed storage for writing projects and books / 写作项目与书籍的文件存储",
    version=__version__,
    debug=settings.debug,
)


def _error_response(request: Request, status_code: int, exc: Exception) -> JSONResponse:
    logger.warning("%s %s -> %d: %s", request.method, request.url.path, status_code, exc)
    return JSONResponse(status_code=status_code, content={"detail": str(exc)})


# Storage errors become {"detail": message}; lookup walks the exception MRO,
# so the most specific handler wins.
@app.exception_handler(EntityNotFoundError)
async def not_found_handler(request: Request, exc: EntityNotFoundError):
    return _error_response(request, 404, exc)


@app.exception_handler(StorageParseError)
async def parse_error_handler(request: Request, exc: StorageParseError):
    return _error_response(request, 422, exc)


@app.exception_handler(ValidationError)
async def validation_error_handler(request: Request, exc: ValidationError):
    return _error_response(request, 400, exc)


@app.exception_handler(BranchWriteError)
async def storage_error_handler(request: Request, exc: BranchWriteError):
    logger.error("Storage failure on %s %s: %s", request.method, request.url.path, exc, exc_info=True)
    return JSONResponse(status_code=500, content={"detail": str(exc)})


@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    """Catch all unhandled exceptions and return a safe 500 response."""
    logger.error(
        "Unhandled exception on %s %s: %s",
        request.method,
        request.url.path,
        exc,
        exc_info=True,
    )
    return JSONResponse(
        status_code=500,
        content={"detail": "Internal server error"},
    )


# 前端开发服务器与本机访问 / Local front-end origins, overridable via server.cors_origins
app.add_middleware(
    CORSMiddleware,
    allow_origins=CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# 双挂载 / Mounted at "/" (dev proxy strips /api) and at "/api"
routers = [
    projects_router,
    books_router,
    documents_router,
]

for router in routers:
    app.include_router(router)
    app.include_router(router, prefix="/api")


@app.get("/health")
async def health_check(store: BranchWriteStore = Depends(get_store)):
    """Health check endpoint / 健康检查"""
    return {
        "status": "ok",
        "version": app.version,
        "storage_accessible": store.data_dir.exists(),
        "lock": store.lock.get_stats(),
    }


if __name__ == "__main__":
    import uvicorn

    logger.info("Serving BranchWrite API on %s:%s (data: %s)", settings.host, settings.port, get_store().data_dir)
    uvicorn.run(
        "branchwrite.main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.debug,
    )

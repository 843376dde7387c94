"""FastAPI application for the taskboard REST API"""

import time
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException
from starlette.types import ASGIApp, Message, Receive, Scope, Send

from taskboard.app import TaskboardApp
from taskboard.utils.config import Settings
from taskboard.utils.exceptions import TaskboardError
from taskboard.utils.logger import get_logger

from .admin_routes import router as admin_router
from .auth_routes import router as auth_router
from .todo_routes import router as todo_router

logger = get_logger(__name__)


class RequestLogMiddlewareASGI:
    """Raw ASGI access log; avoids the request stream wrapping of BaseHTTPMiddleware."""

    def __init__(self, app: ASGIApp):
        self.app = app

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope.get("type") != "http":
            await self.app(scope, receive, send)
            return
        start = time.perf_counter()
        status_code = 500

        async def send_wrapper(message: Message) -> None:
            nonlocal status_code
            if message["type"] == "http.response.start":
                status_code = message["status"]
            await send(message)

        try:
            await self.app(scope, receive, send_wrapper)
        finally:
            logger.info(
                "HTTP request",
                method=scope.get("method"),
                path=scope.get("path"),
                status_code=status_code,
                duration_ms=round((time.perf_counter() - start) * 1000, 2),
            )


def _validation_message(exc: RequestValidationError) -> str:
    errors = exc.errors()
    if not errors:
        return "Invalid request"
    first = errors[0]
    location = ".".join(str(part) for part in first.get("loc", ())[1:])
    return f"{location}: {first.get('msg')}" if location else str(first.get("msg"))


def register_exception_handlers(app: FastAPI) -> None:
    @app.exception_handler(TaskboardError)
    async def taskboard_error_handler(request: Request, exc: TaskboardError):
        if exc.status_code >= 500:
            logger.error("Request failed", path=request.url.path, error=exc.message)
        return JSONResponse(status_code=exc.status_code, content={"message": exc.message})

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(request: Request, exc: RequestValidationError):
        return JSONResponse(
            status_code=400,
            content={
                "message": _validation_message(exc),
                "errors": [
                    {"loc": list(e.get("loc", ())), "msg": e.get("msg"), "type": e.get("type")}
                    for e in exc.errors()
                ],
            },
        )

    @app.exception_handler(StarletteHTTPException)
    async def http_error_handler(request: Request, exc: StarletteHTTPException):
        return JSONResponse(
            status_code=exc.status_code,
            content={"message": exc.detail},
            headers=getattr(exc, "headers", None),
        )


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    """Build the API around a freshly initialized TaskboardApp."""
    taskboard = TaskboardApp(settings).initialize()
    config = taskboard.settings

    app = FastAPI(
        title=f"{config.app.name} API",
        description="Multi-tenant to-do list backend",
        version=config.app.version,
    )
    app.state.taskboard = taskboard

    app.add_middleware(
        CORSMiddleware,
        allow_origins=config.server.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.add_middleware(RequestLogMiddlewareASGI)

    register_exception_handlers(app)

    app.include_router(auth_router)
    # before todo_router: PUT /api/todos/updateEmail vs PUT /api/todos/{task_id}
    app.include_router(admin_router)
    app.include_router(todo_router)

    @app.get("/api/health")
    def health():
        return {"status": "ok"}

    return app

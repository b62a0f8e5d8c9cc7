"""
Task Tracker API
Handles: registration, login, and per-user task CRUD
Port: 3001

Every task route resolves the bearer token to a user id first and only ever
touches tasks owned by that user.
"""

import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import Depends, FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy.orm import Session
from starlette.exceptions import HTTPException as StarletteHTTPException

from . import tasks
from .auth import AuthService
from .config import Settings
from .database import init_db, make_session_factory
from .dependencies import get_auth, get_db, require_user_id
from .models import (
    HealthResponse,
    LoginResponse,
    MessageResponse,
    PublicUser,
    RegisterResponse,
    TaskCreate,
    TaskListResponse,
    TaskOut,
    TaskUpdate,
    UserLogin,
    UserRegister,
)

log = logging.getLogger(__name__)


# ── Error handlers ────────────────────────────────────────────────────────────

async def http_error(request: Request, exc: StarletteHTTPException):
    return JSONResponse(
        status_code=exc.status_code,
        content={"message": exc.detail},
        headers=getattr(exc, "headers", None),
    )


async def validation_error(request: Request, exc: RequestValidationError):
    errors = exc.errors()
    first = errors[0] if errors else {}
    field = ".".join(str(p) for p in first.get("loc", ())[1:])
    message = f"{field}: {first.get('msg')}" if field else "Invalid request body"
    return JSONResponse(status_code=400, content={"message": message})


async def server_error(request: Request, exc: Exception):
    log.error("Unhandled error on %s %s", request.method, request.url.path, exc_info=exc)
    return JSONResponse(status_code=500, content={"message": "Internal server error"})


# ── App ───────────────────────────────────────────────────────────────────────

def create_app(settings: Optional[Settings] = None) -> FastAPI:
    settings = settings or Settings.from_env()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        init_db(app.state.session_factory)
        log.info("[task-tracker] Started on port %d", settings.port)
        yield
        log.info("[task-tracker] Shutting down")

    app = FastAPI(title="Task Tracker", version="1.0.0", lifespan=lifespan)
    app.state.settings = settings
    app.state.auth = AuthService(settings)
    app.state.session_factory = make_session_factory(settings.database_url)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.add_exception_handler(StarletteHTTPException, http_error)
    app.add_exception_handler(RequestValidationError, validation_error)
    app.add_exception_handler(Exception, server_error)

    # ── Auth endpoints ──

    @app.post("/register", status_code=201, response_model=RegisterResponse)
    def register(
        body: UserRegister,
        db: Session = Depends(get_db),
        auth: AuthService = Depends(get_auth),
    ):
        user = auth.register(db, body.username, body.email, body.password)
        return RegisterResponse(message="User successfully created", user=PublicUser.model_validate(user))

    @app.post("/login", response_model=LoginResponse)
    def login(
        body: UserLogin,
        db: Session = Depends(get_db),
        auth: AuthService = Depends(get_auth),
    ):
        token, user = auth.login(db, body.email, body.password)
        return LoginResponse(
            success=True,
            message="Successfully logged in",
            token=token,
            user=PublicUser.model_validate(user),
        )

    # ── Task endpoints ──

    @app.get("/getTasks", response_model=TaskListResponse)
    def get_tasks(
        userId: Optional[str] = None,
        subject: str = Depends(require_user_id),
        db: Session = Depends(get_db),
    ):
        rows = tasks.list_tasks(db, userId, subject)
        return TaskListResponse(userTasks=[TaskOut.model_validate(t) for t in rows])

    @app.post("/tasks", status_code=201, response_model=TaskOut)
    def create_task(
        body: TaskCreate,
        subject: str = Depends(require_user_id),
        db: Session = Depends(get_db),
    ):
        return TaskOut.model_validate(tasks.create_task(db, body, subject))

    @app.put("/tasks/{task_id}", response_model=TaskOut)
    def update_task(
        task_id: str,
        body: TaskUpdate,
        subject: str = Depends(require_user_id),
        db: Session = Depends(get_db),
    ):
        return TaskOut.model_validate(tasks.update_task(db, task_id, body, subject))

    @app.delete("/tasks/{task_id}", response_model=MessageResponse)
    def delete_task(
        task_id: str,
        subject: str = Depends(require_user_id),
        db: Session = Depends(get_db),
    ):
        tasks.delete_task(db, task_id, subject)
        return MessageResponse(message="Task deleted successfully")

    @app.get("/health", response_model=HealthResponse)
    def health():
        return HealthResponse(status="ok", service="tasks")

    return app


_app: Optional[FastAPI] = None


def __getattr__(name: str):
    # `uvicorn tasktracker.main:app` builds the app from the environment on first access
    global _app
    if name == "app":
        if _app is None:
            _app = create_app()
        return _app
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")


if __name__ == "__main__":
    import uvicorn

    logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s %(name)s: %(message)s")
    uvicorn.run("tasktracker.main:create_app", factory=True, host="0.0.0.0", port=Settings.from_env().port)

"""
Application Factory

Composition root: builds the repository, the user service and the FastAPI
application, and maps domain errors onto HTTP responses.
"""
import logging
from contextlib import asynccontextmanager
from typing import Optional
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from userhub import __version__
from userhub.config import Settings, get_settings
from userhub.logging_setup import configure_logging
from userhub.modules.database import ConnectionManager
from userhub.modules.users.api import user_router
from userhub.modules.users.api.formatters import render_field_errors, render_problem
from userhub.modules.users.domain.exceptions import (
    BadRequestError,
    UnprocessableEntityError,
    UserNotFoundError,
)
from userhub.modules.users.repositories.user_repository import (
    UserRepository,
    InMemoryUserRepository,
    DatabaseUserRepository,
)
from userhub.modules.users.services.user_service import UserService

logger = logging.getLogger("userhub.app")


async def handle_bad_request(request: Request, exc: BadRequestError):
    logger.debug(f"[app] 400 | path={request.url.path}, detail={exc}")
    return render_problem(request, 400, str(exc))


async def handle_unprocessable(request: Request, exc: UnprocessableEntityError):
    logger.debug(f"[app] 422 | path={request.url.path}, fields={sorted(exc.errors)}")
    return render_field_errors(request, exc.errors)


async def handle_not_found(request: Request, exc: UserNotFoundError):
    return render_problem(request, 404, str(exc))


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(BadRequestError, handle_bad_request)
    app.add_exception_handler(UnprocessableEntityError, handle_unprocessable)
    app.add_exception_handler(UserNotFoundError, handle_not_found)


def create_app(
    settings: Optional[Settings] = None,
    repository: Optional[UserRepository] = None,
) -> FastAPI:
    """
    Build the application.

    `repository` overrides the store chosen from settings: a SQL store when
    DATABASE_URL is set, otherwise an in-memory one.
    """
    settings = settings or get_settings()
    configure_logging(settings.log_level)

    connection: Optional[ConnectionManager] = None
    if repository is None:
        if settings.database_url:
            connection = ConnectionManager(settings.database_url)
            repository = DatabaseUserRepository(connection.database)
        else:
            repository = InMemoryUserRepository()
    logger.info(f"[create_app] repository={type(repository).__name__}")

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        # Startup
        if connection:
            await connection.connect()
            await connection.init_schema()
        yield
        # Shutdown
        if connection:
            await connection.disconnect()

    app = FastAPI(title=settings.app_title, version=__version__, lifespan=lifespan)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
        expose_headers=["Location", "X-Pagination", "Allow"],
    )

    app.state.user_service = UserService(repository)
    register_exception_handlers(app)
    app.include_router(user_router)

    @app.get("/")
    async def root():
        return {"status": "online", "system": settings.app_title}

    return app

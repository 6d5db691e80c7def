"""FastAPI application entry point.

Use ``create_app`` to build an application around an explicitly constructed
TaskStore; nothing here keeps a module-level store.
"""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from typing import Literal

from fastapi import FastAPI, HTTPException, Query, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from task_tracker.config import Settings, load_settings
from task_tracker.errors import StoreError
from task_tracker.health import HealthMonitor
from task_tracker.middleware import install_request_logging
from task_tracker.models import (
    Envelope,
    ErrorResponse,
    HealthResponse,
    Task,
    TaskCreate,
    TaskListEnvelope,
    TaskStats,
    TaskUpdate,
)
from task_tracker.stats import derive_stats
from task_tracker.store import TaskStore
from task_tracker.utils import (
    DEFAULT_PAGE_SIZE,
    filter_by_status,
    paginate,
    search_tasks,
    sort_tasks,
)
from task_tracker.validation import sanitize_input

logger = logging.getLogger(__name__)


def _error(status_code: int, message: str, error: str | None = None) -> JSONResponse:
    body = ErrorResponse(message=message, error=error)
    return JSONResponse(
        status_code=status_code,
        content=body.model_dump(by_alias=True, exclude_none=True),
    )


def _install_error_handlers(app: FastAPI, settings: Settings) -> None:
    """Translate failures into the uniform ``{success: false, message}`` envelope."""

    @app.exception_handler(StoreError)
    async def _store_error(request: Request, exc: StoreError) -> JSONResponse:
        logger.warning("%s %s rejected: %s", request.method, request.url.path, exc.message)
        return _error(status.HTTP_400_BAD_REQUEST, exc.message)

    @app.exception_handler(RequestValidationError)
    async def _validation_error(request: Request, exc: RequestValidationError) -> JSONResponse:
        errors = exc.errors()
        detail = errors[0].get("msg", "Invalid request") if errors else "Invalid request"
        return _error(status.HTTP_400_BAD_REQUEST, f"Validation error: {detail}")

    @app.exception_handler(StarletteHTTPException)
    async def _http_error(request: Request, exc: StarletteHTTPException) -> JSONResponse:
        message = str(exc.detail)
        if exc.status_code == status.HTTP_404_NOT_FOUND and exc.detail == "Not Found":
            logger.warning("404 Not Found: %s %s", request.method, request.url.path)
            message = f"Route {request.url.path} not found"
        elif exc.status_code == status.HTTP_405_METHOD_NOT_ALLOWED:
            message = f"Method {request.method} not allowed on {request.url.path}"
        return _error(exc.status_code, message)

    @app.exception_handler(Exception)
    async def _unhandled(request: Request, exc: Exception) -> JSONResponse:
        # the server logs the traceback after this response is sent
        return _error(
            status.HTTP_500_INTERNAL_SERVER_ERROR,
            "Internal server error",
            error=str(exc) if settings.debug_mode else None,
        )


def create_app(
    store: TaskStore | None = None,
    settings: Settings | None = None,
    health: HealthMonitor | None = None,
) -> FastAPI:
    """Build the API around the given collaborators, constructing any that are omitted."""
    settings = settings if settings is not None else load_settings()
    store = store if store is not None else TaskStore()
    health = health if health is not None else HealthMonitor(settings.version)

    @asynccontextmanager
    async def lifespan(_: FastAPI) -> AsyncIterator[None]:
        logger.info("%s %s started (%s)", settings.app_name, settings.version, settings.environment)
        yield
        logger.info("%s shutting down", settings.app_name)

    app = FastAPI(
        title=settings.app_name,
        description="A minimal in-memory task tracking API.",
        version=settings.version,
        lifespan=lifespan,
    )
    app.state.store = store
    app.state.health = health
    app.state.settings = settings

    # Configure CORS for frontend access
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    install_request_logging(app)
    _install_error_handlers(app, settings)

    if settings.enable_health_check:

        @app.get("/health", response_model=HealthResponse, tags=["System"])
        async def health_check() -> HealthResponse:
            """Health check endpoint."""
            return health.status()

    @app.get(
        "/api/tasks",
        response_model=TaskListEnvelope,
        response_model_exclude_none=True,
        tags=["Tasks"],
    )
    async def list_tasks(
        status_filter: str | None = Query(default=None, alias="status"),
        search: str | None = None,
        sort_by: Literal["createdAt", "title"] | None = Query(default=None, alias="sortBy"),
        order: Literal["asc", "desc"] | None = None,
        page: int | None = None,
        page_size: int | None = Query(default=None, alias="pageSize"),
    ) -> TaskListEnvelope:
        """List tasks in creation order, optionally filtered, sorted and paginated."""
        tasks = store.list_all()
        tasks = filter_by_status(tasks, status_filter)
        tasks = search_tasks(tasks, sanitize_input(search))
        tasks = sort_tasks(tasks, sort_by, order)

        if page is None and page_size is None:
            return TaskListEnvelope(
                message="Tasks retrieved successfully",
                data=tasks,
                count=len(tasks),
            )

        result = paginate(tasks, page or 1, page_size or DEFAULT_PAGE_SIZE)
        return TaskListEnvelope(
            message="Tasks retrieved successfully",
            data=result.items,
            count=len(result.items),
            pagination=result.pagination,
        )

    @app.post(
        "/api/tasks",
        response_model=Envelope[Task],
        status_code=status.HTTP_201_CREATED,
        tags=["Tasks"],
    )
    async def create_task(data: TaskCreate) -> Envelope[Task]:
        """Create a new task."""
        task = store.create(data.title)
        return Envelope[Task](message="Task created successfully", data=task)

    @app.get("/api/tasks/{task_id}", response_model=Envelope[Task], tags=["Tasks"])
    async def get_task(task_id: str) -> Envelope[Task]:
        """Get a specific task by ID."""
        task = store.get(task_id)
        if task is None:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail=f"Task with ID {task_id} not found",
            )
        return Envelope[Task](message="Task retrieved successfully", data=task)

    @app.put("/api/tasks/{task_id}", response_model=Envelope[Task], tags=["Tasks"])
    @app.patch("/api/tasks/{task_id}", response_model=Envelope[Task], tags=["Tasks"])
    async def update_task(task_id: str, data: TaskUpdate) -> Envelope[Task]:
        """Update a task's status."""
        task = store.update_status(task_id, data.status)
        return Envelope[Task](message="Task updated successfully", data=task)

    @app.delete("/api/tasks/{task_id}", response_model=Envelope[Task], tags=["Tasks"])
    async def delete_task(task_id: str) -> Envelope[Task]:
        """Delete a task."""
        task = store.delete(task_id)
        return Envelope[Task](message="Task deleted successfully", data=task)

    @app.get("/api/stats", response_model=Envelope[TaskStats], tags=["Stats"])
    async def get_stats() -> Envelope[TaskStats]:
        """Aggregate completion statistics, recomputed on every request."""
        return Envelope[TaskStats](
            message="Statistics retrieved successfully",
            data=derive_stats(store),
        )

    return app

"""FastAPI routes for Checkmate.

Each route calls one application service and translates its Result:
Ok values are returned as JSON, Err values become HTTP errors by kind.
"""

from typing import Optional, TypeVar

from fastapi import APIRouter, Depends, FastAPI, HTTPException, Request
from fastapi.middleware.cors import CORSMiddleware

from checkmate import __version__
from checkmate.domain.shared import DomainError, Err, ErrorKind, Result
from checkmate.domain.sprint import SprintHealthReport
from checkmate.domain.tag import Tag
from checkmate.domain.task import Task
from checkmate.domain.types import BACKLOG, BacklogLocation, SprintLocation, sprint_location
from checkmate.interfaces.api.schemas import (
    ActiveRoutineResponse,
    CancelTaskRequest,
    CommentRequest,
    CreateTaskRequest,
    EndSessionRequest,
    FocusResponse,
    MoveTaskRequest,
    SkipTaskRequest,
    StartSessionRequest,
)
from checkmate.interfaces.services import Services, build_services

T = TypeVar("T")

STATUS_BY_KIND = {
    ErrorKind.NOT_FOUND: 404,
    ErrorKind.VALIDATION: 422,
    ErrorKind.INVALID_TRANSITION: 409,
    ErrorKind.FORBIDDEN: 403,
}


def unwrap(result: Result[T, DomainError]) -> T:
    """Return the Ok value or raise the HTTP error matching the error kind."""
    if isinstance(result, Err):
        raise HTTPException(
            status_code=STATUS_BY_KIND[result.error.kind],
            detail={"kind": result.error.kind.value, "message": result.error.message},
        )
    return result.value


def get_services(request: Request) -> Services:
    return request.app.state.services


def _location(location: Optional[str]) -> BacklogLocation | SprintLocation | None:
    if location is None:
        return None
    if location == "backlog":
        return BACKLOG
    return unwrap(sprint_location(location))


# =============================================================================
# Router
# =============================================================================


router = APIRouter(prefix="/api")


# =============================================================================
# Focus
# =============================================================================


@router.get("/focus", response_model=FocusResponse)
def get_focus(
    location: Optional[str] = None,
    use_routine: bool = True,
    routine_id: Optional[str] = None,
    services: Services = Depends(get_services),
):
    """Focus queue for 'backlog', a sprint id, or every task when omitted."""
    view = unwrap(
        services.focus.get_focus(_location(location), use_routine=use_routine, routine_id=routine_id)
    )
    return FocusResponse(
        focus_task=view.queue.focus_task,
        up_next=view.queue.up_next,
        hidden_count=view.queue.hidden_count,
        routine=view.routine,
        filtered_out=view.filtered_out,
    )


@router.get("/routines/active", response_model=ActiveRoutineResponse)
def get_active_routine(services: Services = Depends(get_services)):
    return ActiveRoutineResponse(routine=unwrap(services.routines.active_routine()))


# =============================================================================
# Tasks
# =============================================================================


@router.get("/tasks", response_model=list[Task])
def list_tasks(
    location: Optional[str] = None,
    include_closed: bool = False,
    services: Services = Depends(get_services),
):
    return services.tasks.list_tasks(_location(location), include_closed=include_closed)


@router.post("/tasks", response_model=Task, status_code=201)
def create_task(req: CreateTaskRequest, services: Services = Depends(get_services)):
    task, _ = unwrap(
        services.tasks.create_task(
            req.title,
            req.tag_points,
            description=req.description,
            sprint_id=req.sprint_id,
            recurrence=req.recurrence,
        )
    )
    return task


@router.get("/tasks/{task_id}", response_model=Task)
def get_task(task_id: str, services: Services = Depends(get_services)):
    return unwrap(services.tasks.get_task(task_id))


@router.post("/tasks/{task_id}/complete", response_model=Task)
def complete_task(task_id: str, services: Services = Depends(get_services)):
    task, _ = unwrap(services.tasks.complete_task(task_id))
    return task


@router.post("/tasks/{task_id}/cancel", response_model=Task)
def cancel_task(task_id: str, req: CancelTaskRequest, services: Services = Depends(get_services)):
    task, _ = unwrap(services.tasks.cancel_task(task_id, req.justification))
    return task


@router.post("/tasks/{task_id}/skip", response_model=Task)
def skip_task(task_id: str, req: SkipTaskRequest, services: Services = Depends(get_services)):
    task, _ = unwrap(
        services.tasks.skip_task(task_id, for_day=req.for_day, justification=req.justification)
    )
    return task


@router.post("/tasks/{task_id}/move", response_model=Task)
def move_task(task_id: str, req: MoveTaskRequest, services: Services = Depends(get_services)):
    if req.sprint_id is None:
        task, _ = unwrap(services.tasks.move_to_backlog(task_id))
    else:
        task, _ = unwrap(services.tasks.move_to_sprint(task_id, req.sprint_id))
    return task


@router.post("/tasks/{task_id}/comments", response_model=Task, status_code=201)
def add_comment(task_id: str, req: CommentRequest, services: Services = Depends(get_services)):
    task, _ = unwrap(services.tasks.add_comment(task_id, req.content))
    return task


@router.delete("/tasks/{task_id}/comments/{comment_id}", response_model=Task)
def delete_comment(task_id: str, comment_id: str, services: Services = Depends(get_services)):
    return unwrap(services.tasks.delete_comment(task_id, comment_id))


# =============================================================================
# Sessions
# =============================================================================


@router.post("/tasks/{task_id}/sessions", response_model=Task, status_code=201)
def start_session(
    task_id: str, req: StartSessionRequest, services: Services = Depends(get_services)
):
    task, _ = unwrap(services.tasks.start_session(task_id, req.minutes))
    return task


@router.post("/tasks/{task_id}/sessions/end", response_model=Task)
def end_session(task_id: str, req: EndSessionRequest, services: Services = Depends(get_services)):
    task, _ = unwrap(services.tasks.end_session(task_id, req.focus_level, note=req.note))
    return task


# =============================================================================
# Sprints and Tags
# =============================================================================


@router.get("/sprints/current/health", response_model=SprintHealthReport)
def current_sprint_health(services: Services = Depends(get_services)):
    return unwrap(services.sprints.health())


@router.get("/sprints/{sprint_id}/health", response_model=SprintHealthReport)
def sprint_health(sprint_id: str, services: Services = Depends(get_services)):
    return unwrap(services.sprints.health(sprint_id))


@router.get("/tags", response_model=list[Tag])
def list_tags(services: Services = Depends(get_services)):
    return services.tags.list_tags()


# =============================================================================
# App
# =============================================================================


def create_app(services: Optional[Services] = None) -> FastAPI:
    """Create the FastAPI application.

    Args:
        services: Pre-built services (tests pass in-memory ones). Defaults
            to services over the configured data directory.
    """
    if services is None:
        services = build_services()
    services.tags.ensure_untagged()

    app = FastAPI(
        title="Checkmate",
        description="Weekly sprints, focus queues and capacity for one person",
        version=__version__,
    )
    app.state.services = services

    # CORS for frontend
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["http://localhost:5173", "http://localhost:3000"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(router)

    @app.get("/")
    def root():
        return {"name": "Checkmate", "version": __version__}

    return app

from contextlib import asynccontextmanager
from datetime import date as _date
from typing import Optional
import logging

from fastapi import FastAPI, Query, Request, Depends, Response
from fastapi.responses import JSONResponse

from planner.api.dependencies import get_engine, week_payload
from planner.api.routes import backup as backup_routes, templates as template_routes
from planner.domain.errors import InvalidImportError, InvalidTaskFieldError, InvalidWeekIdError, NotFoundError
from planner.events.web_observers import start as start_event_observers, get_events as get_web_events
from planner.infra.pdf_utils import generate_pdf_for_week
from planner.logic.reporting.analytics import compute_week_analytics
from planner.logic.templates.engine import TemplateInstanceEngine
from planner.logic.week.clock import (
    current_week_id,
    get_next_week_id,
    get_previous_week_id,
    get_week_identifier,
)
from planner.utilities.validators import GoalInput, TaskInput, TaskUpdateInput

# Logging
logger = logging.getLogger("planner_app")


@asynccontextmanager
async def lifespan(_app: FastAPI):
    """Register event bus subscribers for web notifications when the app starts."""
    start_event_observers()
    logger.info("Web observers for planner events started")
    yield


# Initialize FastAPI app
app = FastAPI(title="Weekly Planner API", lifespan=lifespan)

# Include routers
app.include_router(template_routes.router)
app.include_router(backup_routes.router)


# -------------------- Error mapping --------------------
@app.exception_handler(InvalidWeekIdError)
@app.exception_handler(InvalidTaskFieldError)
@app.exception_handler(InvalidImportError)
async def _invalid_input(request: Request, exc: Exception):
    logger.info("Rejected %s %s: %s", request.method, request.url.path, exc)
    return JSONResponse(status_code=400, content={"detail": str(exc)})


@app.exception_handler(NotFoundError)
async def _not_found(request: Request, exc: NotFoundError):
    return JSONResponse(status_code=404, content={"detail": str(exc)})


# -------------------- Weeks --------------------
@app.get("/api/week-id")
def week_id_for_date(date: _date):
    return {"weekId": str(get_week_identifier(date))}


@app.get("/api/weeks/current")
def current_week(today: Optional[_date] = Query(default=None),
                 engine: TemplateInstanceEngine = Depends(get_engine)):
    return week_payload(engine.materialize(current_week_id(today)))


@app.get("/api/weeks/{week_id}")
def get_week(week_id: str, engine: TemplateInstanceEngine = Depends(get_engine)):
    return week_payload(engine.materialize(week_id))


@app.get("/api/weeks/{week_id}/previous")
def previous_week(week_id: str):
    return {"weekId": str(get_previous_week_id(week_id))}


@app.get("/api/weeks/{week_id}/next")
def next_week(week_id: str):
    return {"weekId": str(get_next_week_id(week_id))}


@app.post("/api/weeks/{week_id}/tasks", status_code=201)
def add_task(week_id: str, payload: TaskInput, engine: TemplateInstanceEngine = Depends(get_engine)):
    return engine.add_task(week_id, payload.to_fields()).to_dict()


@app.post("/api/weeks/{week_id}/copy-previous")
def copy_previous_week(week_id: str, engine: TemplateInstanceEngine = Depends(get_engine)):
    copied = engine.copy_from_previous_week(week_id)
    return {"copied": copied, "week": week_payload(engine.materialize(week_id))}


@app.post("/api/weeks/{week_id}/reset")
def reset_week(week_id: str, engine: TemplateInstanceEngine = Depends(get_engine)):
    """Discard the week's tasks and rebuild it from the current templates."""
    return week_payload(engine.reset_week_to_templates(week_id))


@app.get("/api/weeks/{week_id}/analytics")
def week_analytics(week_id: str, engine: TemplateInstanceEngine = Depends(get_engine)):
    return compute_week_analytics(engine.materialize(week_id))


# -------------------- Tasks --------------------
@app.get("/api/tasks/{instance_id}")
def get_task(instance_id: int, engine: TemplateInstanceEngine = Depends(get_engine)):
    week_id, task = engine.find_task(instance_id)
    return {"weekId": str(week_id), "task": task.to_dict()}


@app.patch("/api/tasks/{instance_id}")
def update_task(instance_id: int, payload: TaskUpdateInput,
                engine: TemplateInstanceEngine = Depends(get_engine)):
    return engine.update_task(instance_id, payload.to_fields()).to_dict()


@app.delete("/api/tasks/{instance_id}")
def delete_task(instance_id: int, engine: TemplateInstanceEngine = Depends(get_engine)):
    task = engine.delete_task(instance_id)
    return {"deleted": task.instance_id}


@app.post("/api/tasks/{instance_id}/toggle")
def toggle_task(instance_id: int, engine: TemplateInstanceEngine = Depends(get_engine)):
    return engine.toggle_complete(instance_id).to_dict()


@app.post("/api/tasks/{instance_id}/advance")
def advance_task(instance_id: int, engine: TemplateInstanceEngine = Depends(get_engine)):
    task, advanced = engine.advance_progress(instance_id)
    return {"task": task.to_dict(), "advanced": advanced}


@app.post("/api/tasks/{instance_id}/promote", status_code=201)
def promote_task(instance_id: int, link: bool = Query(default=False),
                 engine: TemplateInstanceEngine = Depends(get_engine)):
    return engine.promote_to_template(instance_id, link=link).to_dict()


# -------------------- Goals --------------------
@app.get("/api/goals")
def list_goals(engine: TemplateInstanceEngine = Depends(get_engine)):
    return engine.get_goals()


@app.put("/api/goals/{day}")
def save_goal(day: str, payload: GoalInput, engine: TemplateInstanceEngine = Depends(get_engine)):
    return engine.save_goal(day, payload.goal)


# -------------------- Events / export --------------------
@app.get("/api/events")
def api_events(since: Optional[int] = Query(default=None)):
    """Poll planner events (day completed, week created) recorded since the given cursor."""
    return get_web_events(since)


@app.get("/export_pdf")
def export_pdf(week_id: Optional[str] = Query(default=None),
               engine: TemplateInstanceEngine = Depends(get_engine)):
    week = engine.materialize(week_id or current_week_id())
    pdf_bytes = generate_pdf_for_week(week)

    return Response(
        content=pdf_bytes,
        media_type="application/pdf",
        headers={
            "Content-Disposition": f"attachment; filename=weekly_plan_{week.week_id}.pdf"
        },
    )

import logging

from fastapi import APIRouter, Depends

from planner.api.dependencies import get_engine
from planner.logic.templates.engine import TemplateInstanceEngine
from planner.utilities.validators import TemplateUpdateInput

router = APIRouter(prefix="/api/templates", tags=["templates"])
logger = logging.getLogger(__name__)


@router.get("")
def list_templates(engine: TemplateInstanceEngine = Depends(get_engine)):
    return [t.to_dict() for t in engine.list_templates()]


@router.get("/{template_id}")
def get_template(template_id: int, engine: TemplateInstanceEngine = Depends(get_engine)):
    return engine.get_template(template_id).to_dict()


@router.patch("/{template_id}")
def edit_template(template_id: int, payload: TemplateUpdateInput,
                  engine: TemplateInstanceEngine = Depends(get_engine)):
    # Weeks already materialized keep their copies; only future weeks see the change
    return engine.edit_template(template_id, payload.to_fields()).to_dict()


@router.delete("/{template_id}")
def delete_template(template_id: int, engine: TemplateInstanceEngine = Depends(get_engine)):
    template = engine.delete_template(template_id)
    return {"deleted": template.id}


@router.post("/from-week/{week_id}")
def replace_templates_from_week(week_id: str, engine: TemplateInstanceEngine = Depends(get_engine)):
    """Use the week's tasks as the new template set; later weeks will re-materialize from it."""
    return [t.to_dict() for t in engine.replace_templates_from_week(week_id)]

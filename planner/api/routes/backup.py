import logging
from typing import Any, Dict

from fastapi import APIRouter, Body, Depends, Query
from fastapi.responses import JSONResponse

from planner.api.dependencies import get_engine
from planner.logic.templates.engine import TemplateInstanceEngine
from planner.utilities.export_import import DataExporter, DataImporter

router = APIRouter(prefix="/api", tags=["backup"])
logger = logging.getLogger(__name__)


@router.get("/export")
def export_data(engine: TemplateInstanceEngine = Depends(get_engine)):
    payload = DataExporter(engine.store).export_data()
    filename = f"weekly-planner-backup-{payload['exportedAt'][:10]}.json"
    return JSONResponse(content=payload, headers={"Content-Disposition": f"attachment; filename={filename}"})


@router.post("/import")
def import_data(payload: Dict[str, Any] = Body(...), merge: bool = Query(default=False),
                engine: TemplateInstanceEngine = Depends(get_engine)):
    return DataImporter(engine.store).import_data(payload, merge=merge)

"""
Input validation schemas using Pydantic for the planner API.

The schemas check shape and types and accept the camelCase keys used by the
stored JSON. Range and format rules (duration bounds, day names, HH:MM
times, hierarchy depth) stay with the domain normalizers so the engine
enforces them for every caller.
"""
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel


class _PlannerInput(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra='forbid')

    def to_fields(self) -> Dict[str, Any]:
        """Only the fields the client actually sent, keyed by domain attribute name."""
        return self.model_dump(exclude_unset=True)


class TemplateUpdateInput(_PlannerInput):
    """Schema for partial template edits."""
    title: Optional[str] = Field(None, max_length=200)
    goal: Optional[str] = None
    hierarchy: Optional[List[str]] = None
    duration: Optional[int] = None
    notes: Optional[str] = None
    scheduled_day: Optional[str] = None
    scheduled_time: Optional[str] = None

    @field_validator('title', 'scheduled_day', 'scheduled_time')
    @classmethod
    def strip_whitespace(cls, v):
        """Remove leading/trailing whitespace."""
        if isinstance(v, str):
            return v.strip()
        return v

    @field_validator('hierarchy')
    @classmethod
    def validate_hierarchy(cls, v):
        """Drop empty category labels."""
        if v is None:
            return v
        return [label.strip() for label in v if label and label.strip()]


class TaskInput(TemplateUpdateInput):
    """Schema for a new one-off task. Title is required."""
    title: str = Field(..., min_length=1, max_length=200)

    @field_validator('title')
    @classmethod
    def validate_title(cls, v):
        if not v.strip():
            raise ValueError('Task title cannot be empty')
        return v.strip()


class TaskUpdateInput(TemplateUpdateInput):
    """Schema for partial task edits, completion flag included."""
    completed: Optional[bool] = None


class GoalInput(_PlannerInput):
    """Schema for a weekday goal. An empty goal clears it."""
    goal: str = Field("", max_length=500)

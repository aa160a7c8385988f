"""Planner exceptions.

Validation errors derive from ValueError and lookup errors from LookupError so
callers that only know the builtin hierarchy still catch them. The API layer
maps them to 400 and 404 responses.
"""


class PlannerError(Exception):
    """Base class for every error raised by the planner core."""


class InvalidWeekIdError(PlannerError, ValueError):
    def __init__(self, value, reason: str = "expected 'YYYY-Www'"):
        self.value = value
        self.reason = reason
        super().__init__(f"Invalid week identifier {value!r}: {reason}")


class InvalidTaskFieldError(PlannerError, ValueError):
    def __init__(self, field: str, value, reason: str):
        self.field = field
        self.value = value
        self.reason = reason
        super().__init__(f"Invalid value for {field}: {value!r} ({reason})")


class NotFoundError(PlannerError, LookupError):
    kind = "item"

    def __init__(self, item_id):
        self.item_id = item_id
        super().__init__(f"{self.kind} {item_id!r} not found")


class TemplateNotFoundError(NotFoundError):
    kind = "Template"


class TaskNotFoundError(NotFoundError):
    kind = "Task instance"


class InvalidImportError(PlannerError, ValueError):
    def __init__(self, reason: str):
        self.reason = reason
        super().__init__(f"Cannot import planner data: {reason}")

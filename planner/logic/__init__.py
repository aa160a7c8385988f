"""Core business logic layer.

Subpackages:
- week: week identifiers and navigation arithmetic
- templates: template-to-week materialization engine
- tasks: checklist helpers for task notes
- reporting: weekly analytics
"""
__all__ = ["week", "templates", "tasks", "reporting"]

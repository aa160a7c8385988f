"""Checklist helpers for task notes.

A checklist line is any line containing "[ ]" (open) or "[x]" (done).
"""
from typing import Tuple

from planner.utilities.constants import CHECKBOX_OPEN, CHECKBOX_DONE


def count_checklist(notes: str) -> Tuple[int, int]:
    """Return (total, done) checklist items in the notes."""
    total = done = 0
    for line in (notes or "").split("\n"):
        if not line.strip():
            continue
        if CHECKBOX_OPEN in line or CHECKBOX_DONE in line:
            total += 1
            if CHECKBOX_DONE in line:
                done += 1
    return total, done


def has_open_items(notes: str) -> bool:
    return any(CHECKBOX_OPEN in line for line in (notes or "").split("\n"))


def advance_checklist(notes: str) -> Tuple[str, bool]:
    """Tick the first open item. Returns (new notes, whether an item was ticked)."""
    lines = (notes or "").split("\n")
    for i, line in enumerate(lines):
        if CHECKBOX_OPEN in line:
            lines[i] = line.replace(CHECKBOX_OPEN, CHECKBOX_DONE, 1)
            return "\n".join(lines), True
    return notes or "", False


__all__ = ["count_checklist", "has_open_items", "advance_checklist"]

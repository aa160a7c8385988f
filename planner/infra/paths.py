from pathlib import Path

from planner.utilities.config import DATA_DIR as _CONFIGURED_DATA_DIR, PLANNER_FILE as _CONFIGURED_PLANNER_FILE

# Centralized paths for data files (single source of truth)
DATA_DIR: Path = _CONFIGURED_DATA_DIR.resolve()
PLANNER_FILE: Path = _CONFIGURED_PLANNER_FILE.resolve()

__all__ = ['DATA_DIR', 'PLANNER_FILE']

"""Planner persistence: the load/save contract and its JSON-file and in-memory implementations."""
import json
import logging
import os
import tempfile
from contextlib import contextmanager
from pathlib import Path
from threading import RLock
from typing import Iterator, Optional

from planner.domain.PlannerState import PlannerState
from planner.infra.paths import PLANNER_FILE

logger = logging.getLogger(__name__)


class PlannerStore:
    """Synchronous key-value contract consumed by TemplateInstanceEngine.

    Subclasses implement load() and save(); edit() and allocate_id() are built on them.
    Writers sharing one store instance (e.g. requests in uvicorn's thread pool) are
    serialized by `lock`. Separate processes are not coordinated: the last write wins.
    """

    def __init__(self):
        self.lock = RLock()

    def load(self) -> PlannerState:
        raise NotImplementedError

    def save(self, state: PlannerState) -> None:
        raise NotImplementedError

    @contextmanager
    def edit(self) -> Iterator[PlannerState]:
        """Scoped read-modify-write: the state is saved only if the block finishes without error."""
        with self.lock:
            state = self.load()
            yield state
            self.save(state)

    def allocate_id(self) -> int:
        with self.edit() as state:
            return state.allocate_id()


class MemoryPlannerStore(PlannerStore):
    """Keeps the serialized form only, so every load() hands out independent objects."""

    def __init__(self, data: Optional[dict] = None):
        super().__init__()
        self._data = data

    def load(self) -> PlannerState:
        if self._data is None:
            return PlannerState.empty()
        return PlannerState.from_dict(self._data)

    def save(self, state: PlannerState) -> None:
        self._data = state.to_dict()


class JsonPlannerStore(PlannerStore):
    def __init__(self, path: Path = PLANNER_FILE):
        super().__init__()
        self.path = Path(path)

    def load(self) -> PlannerState:
        """Read the planner file, falling back to an empty planner when it is missing or corrupt."""
        if not self.path.exists():
            logger.info("Planner file not found: %s. Starting with an empty planner.", self.path)
            return PlannerState.empty()
        try:
            with open(self.path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            logger.warning("Could not read planner file %s (%s). Starting with an empty planner.", self.path, e)
            return PlannerState.empty()
        try:
            return PlannerState.from_dict(data)
        except ValueError as e:
            logger.warning("Planner file %s has an invalid structure (%s). Starting with an empty planner.",
                           self.path, e)
            return PlannerState.empty()

    def save(self, state: PlannerState) -> None:
        """Write atomically: dump to a temp file in the same directory, then replace."""
        self.path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp_path = tempfile.mkstemp(dir=str(self.path.parent), prefix=".planner_", suffix=".json")
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as tmp:
                json.dump(state.to_dict(), tmp, indent=2, ensure_ascii=False)
            os.replace(tmp_path, self.path)
        finally:
            if os.path.exists(tmp_path):
                os.remove(tmp_path)
        logger.debug("Planner saved to %s (nextId=%s)", self.path, state.next_id)

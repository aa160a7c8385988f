"""
Export and Import functionality for the planner data (weeks, templates, goals).

Exports are a versioned envelope around the persisted planner root:
    {"version": "1.0", "exportedAt": "...Z", "data": {"weeklyInstances": ..., "templates": ...,
                                                      "goals": ..., "nextId": ...}}
"""
import argparse
import json
import logging
import sys
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, Optional

from planner.domain.PlannerState import PlannerState
from planner.domain.WeeklyInstance import WeeklyInstance
from planner.domain.errors import InvalidImportError
from planner.infra.Planner_Repository import JsonPlannerStore, PlannerStore
from planner.infra.paths import PLANNER_FILE
from planner.utilities.constants import EXPORT_VERSION

logger = logging.getLogger(__name__)


class DataExporter:
    """Export planner data as a JSON document."""

    def __init__(self, store: PlannerStore):
        self.store = store

    def export_data(self) -> Dict[str, Any]:
        return {
            "version": EXPORT_VERSION,
            "exportedAt": datetime.now(timezone.utc).isoformat().replace("+00:00", "Z"),
            "data": self.store.load().to_dict(),
        }

    def export_to_file(self, output_path: Optional[Path] = None) -> Path:
        """Write the export to output_path (default: a timestamped file in the working directory)."""
        if output_path is None:
            timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
            output_path = Path(f"weekly_planner_backup_{timestamp}.json")
        output_path = Path(output_path)
        payload = self.export_data()
        with open(output_path, "w", encoding="utf-8") as f:
            json.dump(payload, f, indent=2, ensure_ascii=False)
        logger.info("Exported %d week(s) and %d template(s) to %s",
                    len(payload["data"]["weeklyInstances"]), len(payload["data"]["templates"]), output_path)
        return output_path


class DataImporter:
    """Import planner data exported by DataExporter."""

    def __init__(self, store: PlannerStore):
        self.store = store

    def import_data(self, payload, merge: bool = False) -> Dict[str, Any]:
        """
        Import an export envelope.

        Args:
            payload: dict produced by DataExporter.export_data()
            merge: If True, add the imported templates, tasks and goals to the current
                   planner with fresh ids; if False, replace the planner contents.

        The id counter never moves backwards, so ids handed out before the import
        are not reused afterwards. Raises InvalidImportError for unusable payloads.
        """
        incoming = _parse_payload(payload)
        with self.store.edit() as state:
            if merge:
                summary = _merge_into(state, incoming)
            else:
                state.weekly_instances = incoming.weekly_instances
                state.templates = incoming.templates
                state.goals = incoming.goals
                state.next_id = max(state.next_id, incoming.next_id)
                summary = {
                    "weeks": len(incoming.weekly_instances),
                    "templates": len(incoming.templates),
                    "tasks": sum(len(w.tasks) for w in incoming.weekly_instances.values()),
                    "goals": len(incoming.goals),
                }
        summary["mode"] = "merge" if merge else "replace"
        logger.info("Imported planner data (%s): %s", summary["mode"], summary)
        return summary

    def import_from_file(self, input_path: Path, merge: bool = False) -> Dict[str, Any]:
        try:
            with open(input_path, "r", encoding="utf-8") as f:
                payload = json.load(f)
        except json.JSONDecodeError as e:
            raise InvalidImportError(f"{input_path} is not valid JSON ({e})") from e
        return self.import_data(payload, merge=merge)


def _parse_payload(payload) -> PlannerState:
    if not isinstance(payload, dict) or not isinstance(payload.get("data"), dict):
        raise InvalidImportError("expected an export with a 'data' object")
    version = payload.get("version")
    if version is not None and version != EXPORT_VERSION:
        logger.warning("Importing export version %r (current is %s)", version, EXPORT_VERSION)
    try:
        return PlannerState.from_dict(payload["data"])
    except ValueError as e:
        raise InvalidImportError(str(e)) from e


def _merge_into(state: PlannerState, incoming: PlannerState) -> Dict[str, int]:
    # Imported ids come from another counter: re-key everything
    template_ids = {}
    for template in incoming.templates:
        new_id = state.allocate_id()
        template_ids[template.id] = new_id
        template.id = new_id
        state.templates.append(template)

    added = 0
    for week_id, week in sorted(incoming.weekly_instances.items()):
        target = state.get_week(week_id)
        if target is None:
            target = WeeklyInstance(week_id)
            state.weekly_instances[week_id] = target
        for task in week.sorted_tasks():
            if any(existing.same_slot(task) for existing in target.tasks):
                continue
            task.instance_id = state.allocate_id()
            task.template_id = template_ids.get(task.template_id)
            target.add(task)
            added += 1

    state.goals.update(incoming.goals)
    return {
        "weeks": len(incoming.weekly_instances),
        "templates": len(incoming.templates),
        "tasks": added,
        "goals": len(incoming.goals),
    }


# CLI interface
def main(argv=None) -> int:
    parser = argparse.ArgumentParser(description="Export/Import Weekly Planner data")
    parser.add_argument("action", choices=["export", "import"], help="Action to perform")
    parser.add_argument("--file", help="Input/output file path")
    parser.add_argument("--merge", action="store_true", help="Merge with existing data on import")
    parser.add_argument("--data-file", default=str(PLANNER_FILE), help="Planner JSON file to read/write")
    args = parser.parse_args(argv)

    store = JsonPlannerStore(Path(args.data_file))
    if args.action == "export":
        result = DataExporter(store).export_to_file(Path(args.file) if args.file else None)
        print(f"Exported to: {result}")
        return 0

    if not args.file:
        print("Error: --file is required for import", file=sys.stderr)
        return 2
    try:
        summary = DataImporter(store).import_from_file(Path(args.file), merge=args.merge)
    except (OSError, InvalidImportError) as e:
        print(f"Import failed: {e}", file=sys.stderr)
        return 1
    print(f"Imported from {args.file}: {summary['weeks']} week(s), {summary['templates']} template(s), "
          f"{summary['tasks']} task(s)")
    return 0


if __name__ == "__main__":
    sys.exit(main())

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Dict

logger = logging.getLogger(__name__)


def _detect_format(path: Path) -> str:
    ext = path.suffix.lower().lstrip(".")
    if ext in {"json", "yaml", "yml"}:
        return ext
    # Default to JSON for unknown extensions.
    return "json"


def load_state(path: str) -> Dict[str, Any]:
    p = Path(path)
    if not p.exists():
        return {}

    fmt = _detect_format(p)
    data: Dict[str, Any]

    if fmt in {"yaml", "yml"}:
        try:
            import yaml  # type: ignore
        except Exception as e:  # pragma: no cover
            raise RuntimeError(
                "YAML run report requested but PyYAML is not available. "
                "Use a .json report path or install PyYAML."
            ) from e
        data = yaml.safe_load(p.read_text(encoding="utf-8")) or {}
    else:
        data = json.loads(p.read_text(encoding="utf-8"))

    if not isinstance(data, dict):
        raise ValueError(f"Run report must be an object/dict, got {type(data)}")

    return data


def save_state(path: str, state: Dict[str, Any]) -> None:
    p = Path(path)
    p.parent.mkdir(parents=True, exist_ok=True)

    fmt = _detect_format(p)
    if fmt in {"yaml", "yml"}:
        try:
            import yaml  # type: ignore
        except Exception as e:  # pragma: no cover
            raise RuntimeError(
                "YAML run report requested but PyYAML is not available. "
                "Use a .json report path or install PyYAML."
            ) from e
        p.write_text(yaml.safe_dump(state, sort_keys=False) + "\n", encoding="utf-8")
    else:
        p.write_text(json.dumps(state, indent=2, sort_keys=True) + "\n", encoding="utf-8")


def new_run(state: Dict[str, Any], *, version: str) -> Dict[str, Any]:
    """Reset the per-run section; earlier runs only keep their last report."""

    state["version"] = version
    state["execution"] = {
        "current_step": None,
        "mode": None,
        "installation": None,
        "outcomes": {},
        "warnings": [],
        "errors": [],
        "paths": {},
    }
    return state


def record_outcome(state: Dict[str, Any], step_id: str, outcome: str) -> None:
    state.setdefault("execution", {}).setdefault("outcomes", {})[step_id] = outcome


def record_warning(state: Dict[str, Any], step_id: str, message: str) -> None:
    state.setdefault("execution", {}).setdefault("warnings", []).append(
        {"step": step_id, "warning": message}
    )

from __future__ import annotations

import json
import logging
from dataclasses import asdict, dataclass, fields
from pathlib import Path
from typing import Any, Dict, Optional

logger = logging.getLogger(__name__)

_CONFIG_PATH = Path("data/roaming/viewer.json")
_DEFAULT_MIN_SCREEN_TICK_DISTANCE = 20.0


@dataclass(frozen=True)
class ViewerConfig:
    """Policy options of a viewer. Contains no view state."""

    flipped_vertically: bool = False
    maintain_aspect_ratio: bool = True
    resizing_contents: bool = False
    transforming_labels: bool = True
    min_screen_tick_distance: float = _DEFAULT_MIN_SCREEN_TICK_DISTANCE


def config_from_dict(data: Dict[str, Any]) -> ViewerConfig:
    defaults = ViewerConfig()
    values: Dict[str, Any] = {}
    for f in fields(ViewerConfig):
        default = getattr(defaults, f.name)
        raw = data.get(f.name, default)
        if isinstance(default, bool):
            values[f.name] = raw if isinstance(raw, bool) else default
        elif isinstance(raw, (int, float)) and not isinstance(raw, bool) and raw > 0:
            values[f.name] = float(raw)
        else:
            values[f.name] = default
    return ViewerConfig(**values)


def load_config(path: Optional[Path] = None) -> ViewerConfig:
    path = path or _CONFIG_PATH
    if not path.exists():
        return ViewerConfig()
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, ValueError) as exc:
        logger.warning("viewer config unreadable at %s: %s", path, exc)
        return ViewerConfig()
    if not isinstance(data, dict):
        logger.warning("viewer config at %s is not an object", path)
        return ViewerConfig()
    return config_from_dict(data)


def save_config(cfg: ViewerConfig, path: Optional[Path] = None) -> None:
    path = path or _CONFIG_PATH
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(asdict(cfg), indent=2), encoding="utf-8")

from __future__ import annotations

import json
from pathlib import Path

from isoplate.config.sim import PlateConfig


def load_plate_config(path: Path) -> PlateConfig:
    if not path.exists():
        raise FileNotFoundError(f"Config file not found: {path}")

    with path.open("r") as f:
        data = json.load(f)

    return PlateConfig.model_validate(data)

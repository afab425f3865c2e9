from __future__ import annotations

import json
from pathlib import Path

from isoplate.config.sim import PlateConfig


def create_run_directory(out: Path, config: PlateConfig) -> None:
    """
    Create a fresh run directory and store the validated config in it.

    Raises FileExistsError if the directory is already there.
    """
    out.mkdir(parents=True, exist_ok=False)

    with (out / "config.json").open("w") as f:
        json.dump(config.model_dump(), f, indent=2)

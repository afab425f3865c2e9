from __future__ import annotations

import numpy as np

COLUMN_SEPARATOR = "   "


def iteration_label(n: int) -> str:
    if n == 0:
        return "Initial Temperatures:"
    return f"Temperature Iteration #{n}:"


def format_grid(T: np.ndarray) -> str:
    """
    Render a temperature grid as text, one line per row, one decimal place.
    """
    return "\n".join(
        COLUMN_SEPARATOR.join(f"{value:5,.1f}" for value in row) for row in T
    )

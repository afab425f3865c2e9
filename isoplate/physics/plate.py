from __future__ import annotations

import logging

import numpy as np

from isoplate.config.sim import PlateConfig

logger = logging.getLogger(__name__)

MIN_DIMENSION = 3


class InvalidDimensionsError(ValueError):
    """Raised when a grid has no interior cell to relax."""


class EquilibriumNotReachedError(RuntimeError):
    """Raised when the sweep cap is hit before the plate settles."""


class GridSolver:
    """
    Relaxes the interior of an isothermal plate towards equilibrium.

    Boundary cells are written once at construction. Each sweep replaces every
    interior cell, row by row and left to right, with the mean of its four
    neighbours, writing back immediately so later cells see the earlier updates.
    """

    def __init__(
        self,
        rows: int,
        cols: int,
        top: float,
        bottom: float,
        left: float,
        right: float,
        interior_start: float,
        tolerance: float,
    ) -> None:
        if rows < MIN_DIMENSION or cols < MIN_DIMENSION:
            raise InvalidDimensionsError(
                f"Grid must be at least {MIN_DIMENSION}x{MIN_DIMENSION}, "
                f"got {rows}x{cols}"
            )

        self.rows = rows
        self.cols = cols
        self.tolerance = tolerance

        self.sweeps = 0
        self.max_change = 0.0
        self.converged = False

        T = np.full((rows, cols), interior_start, dtype=np.float64)

        # Corners belong to the top and bottom rows
        T[0, :] = top
        T[-1, :] = bottom
        T[1:-1, 0] = left
        T[1:-1, -1] = right

        self._grid = T

        logger.info(
            "Initialized %dx%d plate (top=%s, bottom=%s, left=%s, right=%s, "
            "interior=%s, tolerance=%s)",
            rows, cols, top, bottom, left, right, interior_start, tolerance,
        )

    @classmethod
    def from_config(cls, config: PlateConfig) -> GridSolver:
        return cls(
            rows=config.grid.rows,
            cols=config.grid.cols,
            top=config.boundary.top,
            bottom=config.boundary.bottom,
            left=config.boundary.left,
            right=config.boundary.right,
            interior_start=config.boundary.interior_start,
            tolerance=config.boundary.tolerance,
        )

    def sweep(self) -> bool:
        """
        Run one in-place relaxation pass over the interior.

        Returns True when no interior cell moved by more than the tolerance.
        """
        T = self._grid
        equilibrium = True
        max_change = 0.0

        for r in range(1, self.rows - 1):
            for c in range(1, self.cols - 1):
                new = (T[r - 1, c] + T[r + 1, c] + T[r, c - 1] + T[r, c + 1]) / 4.0
                change = abs(new - T[r, c])

                if change > self.tolerance:
                    equilibrium = False
                max_change = max(max_change, change)

                T[r, c] = new

        self.sweeps += 1
        self.max_change = float(max_change)
        self.converged = equilibrium

        logger.debug("Sweep %d: max change %.6g", self.sweeps, self.max_change)
        if equilibrium:
            logger.info("Equilibrium reached after %d sweeps", self.sweeps)

        return equilibrium

    def snapshot(self) -> np.ndarray:
        """Read-only copy of the current temperatures."""
        view = self._grid.copy()
        view.flags.writeable = False
        return view


def initialize(
    rows: int,
    cols: int,
    top: float,
    bottom: float,
    left: float,
    right: float,
    interior_start: float,
    tolerance: float,
) -> GridSolver:
    return GridSolver(
        rows=rows,
        cols=cols,
        top=top,
        bottom=bottom,
        left=left,
        right=right,
        interior_start=interior_start,
        tolerance=tolerance,
    )


def solve_plate(config: PlateConfig, max_sweeps: int | None = None) -> np.ndarray:
    """
    Sweep a freshly initialized plate until equilibrium.

    Returns the snapshot history with shape (n_sweeps + 1, rows, cols); the first
    entry is the initial grid.
    """
    solver = GridSolver.from_config(config)
    history = [solver.snapshot()]

    while not solver.converged:
        if max_sweeps is not None and solver.sweeps >= max_sweeps:
            raise EquilibriumNotReachedError(
                f"No equilibrium after {solver.sweeps} sweeps "
                f"(last max change {solver.max_change:.3e}, "
                f"tolerance {solver.tolerance:.3e})"
            )
        solver.sweep()
        history.append(solver.snapshot())

    return np.stack(history)

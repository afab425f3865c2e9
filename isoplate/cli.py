from __future__ import annotations

import json
from enum import Enum
from pathlib import Path
from typing import Annotated, Optional

import numpy as np
import typer
from pydantic import ValidationError
from rich import print

from isoplate import __version__
from isoplate.config.load import load_plate_config
from isoplate.config.sim import PlateConfig
from isoplate.log_config import setup_logging
from isoplate.physics.plate import GridSolver
from isoplate.render.console import format_grid, iteration_label
from isoplate.run.create import create_run_directory

app = typer.Typer(
    name="isoplate",
    help="Isoplate: steady-state temperatures of a plate with isothermal edges.",
)


class LogLevel(str, Enum):
    debug = "DEBUG"
    info = "INFO"
    warning = "WARNING"
    error = "ERROR"


@app.callback(invoke_without_command=True)
def main_callback(ctx: typer.Context) -> None:
    """
    Isoplate CLI entrypoint.
    """
    if ctx.invoked_subcommand is None:
        # If no subcommand is provided, show help.
        print(ctx.get_help())


@app.command()
def version() -> None:
    """
    Print the installed Isoplate version.
    """
    print(f"[bold]isoplate[/bold] v{__version__}")


def _show(n: int, T: np.ndarray) -> None:
    typer.echo()
    typer.echo(iteration_label(n))
    typer.echo(format_grid(T))


@app.command()
def solve(
    config: Annotated[
        Optional[Path],
        typer.Option(
            "--config",
            "-c",
            exists=True,
            file_okay=True,
            dir_okay=False,
            readable=True,
            help="Path to plate config JSON file (defaults to the 4x4 reference plate)",
        ),
    ] = None,
    out: Annotated[
        Optional[Path],
        typer.Option(
            "--out",
            "-o",
            help="Output directory for run artifacts",
        ),
    ] = None,
    max_sweeps: Annotated[
        Optional[int],
        typer.Option(
            "--max-sweeps",
            min=1,
            help="Give up after this many sweeps",
        ),
    ] = None,
    quiet: Annotated[
        bool,
        typer.Option("--quiet", "-q", help="Only print the final temperatures"),
    ] = False,
    log_level: Annotated[
        LogLevel,
        typer.Option("--log-level", help="Logging level for solver diagnostics"),
    ] = LogLevel.warning,
) -> None:
    """
    Relax the plate interior until equilibrium, printing every iteration.
    """
    setup_logging(log_level.value)

    # 1. Load + validate config
    if config is None:
        plate_config = PlateConfig()
    else:
        try:
            plate_config = load_plate_config(config)
        except ValidationError as e:
            typer.echo("Error: Validation failed for plate config", err=True)
            typer.echo(e, err=True)
            raise typer.Exit(code=1) from e

    # 2. Create run directory before solving
    if out is not None:
        try:
            create_run_directory(out, plate_config)
        except FileExistsError as e:
            typer.echo(f"Error: Output directory already exists: {out}", err=True)
            raise typer.Exit(code=1) from e
        typer.echo(f"✔ Created run directory: {out}")

    # 3. Sweep until equilibrium
    solver = GridSolver.from_config(plate_config)
    history = [solver.snapshot()]
    if not quiet:
        _show(0, history[0])

    while not solver.converged:
        if max_sweeps is not None and solver.sweeps >= max_sweeps:
            typer.echo(
                (
                    f"Error: No equilibrium after {solver.sweeps} sweeps\n"
                    f"  max change = {solver.max_change:.3e}\n"
                    f"  tolerance  = {solver.tolerance:.3e}"
                ),
                err=True,
            )
            raise typer.Exit(code=1)

        solver.sweep()
        history.append(solver.snapshot())
        if not quiet:
            _show(solver.sweeps, history[-1])

    if quiet:
        _show(solver.sweeps, history[-1])

    typer.echo()
    typer.echo("Equilibrium reached.")

    # 4. Write outputs
    if out is not None:
        T = np.stack(history)
        np.save(out / "field.npy", T[-1])
        np.save(out / "history.npy", T)

        metrics = {
            "n_sweeps": solver.sweeps,
            "tolerance": solver.tolerance,
            "final_max_change": solver.max_change,
            "min_temperature": float(T[-1].min()),
            "max_temperature": float(T[-1].max()),
        }

        with (out / "metrics.json").open("w") as f:
            json.dump(metrics, f, indent=2)

        typer.echo(f"✔ Wrote results to {out}")


def main() -> None:
    app()

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field


class GridConfig(BaseModel):
    model_config = ConfigDict(frozen=True)

    rows: int = Field(4, ge=3, description="Number of grid rows (edges included)")
    cols: int = Field(4, ge=3, description="Number of grid columns (edges included)")


class BoundaryConfig(BaseModel):
    model_config = ConfigDict(frozen=True)

    top: float = Field(100.0, allow_inf_nan=False, description="Top edge temperature")
    bottom: float = Field(
        200.0, allow_inf_nan=False, description="Bottom edge temperature"
    )
    left: float = Field(100.0, allow_inf_nan=False, description="Left edge temperature")
    right: float = Field(
        200.0, allow_inf_nan=False, description="Right edge temperature"
    )
    interior_start: float = Field(
        0.0, allow_inf_nan=False, description="Starting temperature of interior cells"
    )
    tolerance: float = Field(
        0.2,
        ge=0,
        allow_inf_nan=False,
        description="Largest per-cell change still counted as equilibrium",
    )


class PlateConfig(BaseModel):
    model_config = ConfigDict(frozen=True)

    grid: GridConfig = Field(default_factory=GridConfig)
    boundary: BoundaryConfig = Field(default_factory=BoundaryConfig)

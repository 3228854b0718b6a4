from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field, model_validator


class WorldConfig(BaseModel):
    """Dimensions and physics constants of the obstacle course.

    Positions are in world units with the origin at the top-left corner;
    vertical positions grow downwards, so gravity is positive.
    """

    width: float = Field(default=800.0, gt=0, description="World width")
    height: float = Field(default=600.0, gt=0, description="World height")

    horizontal_speed: float = Field(
        default=0.8, gt=0, description="Distance obstacles move per tick"
    )
    gravity: float = Field(
        default=0.02, ge=0, description="Vertical acceleration per tick"
    )
    lift: float = Field(
        default=2.0, ge=0, description="Upward impulse applied by a flap"
    )
    max_speed: float = Field(
        default=2.0, gt=0, description="Absolute bound on vertical velocity"
    )

    spawn_probability: float = Field(
        default=0.002,
        ge=0,
        le=1,
        description="Per-tick probability of spawning an obstacle",
    )
    obstacle_width: float = Field(default=40.0, gt=0)
    min_aperture: float = Field(default=80.0, gt=0)
    max_aperture: float = Field(default=160.0, gt=0)
    min_distance: float = Field(
        default=160.0,
        ge=0,
        description="Minimum distance between consecutive obstacles",
    )
    gap_top_min: float = Field(default=100.0, ge=0)
    gap_top_max: float = Field(default=200.0, ge=0)

    agent_x: float = Field(
        default=40.0, ge=0, description="Fixed horizontal position of agents"
    )
    agent_radius: float = Field(default=20.0, gt=0)
    start_height_fraction: float = Field(
        default=1.0 / 3.0,
        ge=0,
        le=1,
        description="Initial vertical position as a fraction of the height",
    )

    model_config = ConfigDict(frozen=True)

    @model_validator(mode="after")
    def _check_bands(self) -> "WorldConfig":
        if self.min_aperture > self.max_aperture:
            raise ValueError(
                f"min_aperture ({self.min_aperture}) exceeds max_aperture ({self.max_aperture})"
            )
        if self.gap_top_min > self.gap_top_max:
            raise ValueError(
                f"gap_top_min ({self.gap_top_min}) exceeds gap_top_max ({self.gap_top_max})"
            )
        return self

    @property
    def start_height(self) -> float:
        return self.height * self.start_height_fraction

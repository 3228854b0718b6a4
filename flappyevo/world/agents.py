from __future__ import annotations

import math
import uuid

from pydantic import BaseModel, ConfigDict, Field

from flappyevo.controllers.base import OUTPUT_COUNT, Controller
from flappyevo.exceptions import ContractViolationError
from flappyevo.world.config import WorldConfig
from flappyevo.world.obstacles import Obstacle

__all__ = ["Agent", "collides", "nearest_obstacle_ahead", "observe", "step"]


class Agent(BaseModel):
    """One evolving individual flying at a fixed horizontal position."""

    id: str = Field(
        default_factory=lambda: str(uuid.uuid4()),
        description="Unique agent identifier",
    )
    parent_id: str | None = Field(
        default=None,
        description="Id of the agent whose controller this one was cloned from",
    )
    vertical_position: float
    vertical_velocity: float = 0.0
    controller: Controller
    alive: bool = True
    ticks_survived: int = Field(default=0, ge=0)

    model_config = ConfigDict(arbitrary_types_allowed=True)

    @classmethod
    def spawn(
        cls,
        controller: Controller,
        world: WorldConfig,
        parent_id: str | None = None,
    ) -> "Agent":
        """Create an agent in the default starting state."""
        return cls(
            vertical_position=world.start_height,
            controller=controller,
            parent_id=parent_id,
        )

    def kill(self, tick_index: int) -> None:
        self.alive = False
        self.ticks_survived = tick_index


def nearest_obstacle_ahead(
    obstacles: list[Obstacle], world: WorldConfig
) -> Obstacle | None:
    """First obstacle whose leading edge has not yet passed the agents."""
    return next((o for o in obstacles if o.x > world.agent_x), None)


def observe(agent: Agent, obstacle: Obstacle, world: WorldConfig) -> list[float]:
    """Normalized controller input for ``agent`` facing ``obstacle``."""
    return [
        agent.vertical_position / world.height,
        agent.vertical_velocity / world.max_speed,
        obstacle.x / world.width,
        obstacle.gap_top / world.height,
        obstacle.gap_bottom / world.height,
    ]


def collides(agent: Agent, obstacle: Obstacle, world: WorldConfig) -> bool:
    if abs(obstacle.x - world.agent_x) >= world.agent_radius:
        return False
    return (
        agent.vertical_position - world.agent_radius < obstacle.gap_top
        or agent.vertical_position + world.agent_radius > obstacle.gap_bottom
    )


def step(
    agent: Agent, obstacles: list[Obstacle], tick_index: int, world: WorldConfig
) -> None:
    """Advance ``agent`` by one tick against the current obstacle snapshot.

    Dead agents are left untouched. Leaving the world vertically or touching
    an obstacle outside its gap kills the agent and records ``tick_index`` as
    its survival time.
    """
    if not agent.alive:
        return

    obstacle = nearest_obstacle_ahead(obstacles, world)
    if obstacle is not None:
        output = agent.controller.predict(observe(agent, obstacle, world))
        if len(output) != OUTPUT_COUNT:
            raise ContractViolationError(
                f"Controller returned {len(output)} outputs, expected {OUTPUT_COUNT}"
            )
        if output[0] > output[1]:
            agent.vertical_velocity -= world.lift

    velocity = min(
        max(agent.vertical_velocity + world.gravity, -world.max_speed),
        world.max_speed,
    )
    position = agent.vertical_position + velocity
    if not (math.isfinite(velocity) and math.isfinite(position)):
        raise ContractViolationError(
            f"Non-finite state for agent {agent.id}: position={position}, velocity={velocity}"
        )
    agent.vertical_velocity = velocity
    agent.vertical_position = position

    if position < 0.0 or position > world.height:
        agent.kill(tick_index)
        return

    for candidate in obstacles:
        if collides(agent, candidate, world):
            agent.kill(tick_index)
            return

from flappyevo.world.agents import Agent, collides, nearest_obstacle_ahead, observe, step
from flappyevo.world.config import WorldConfig
from flappyevo.world.obstacles import Obstacle, advance, spawn_allowed

__all__ = [
    "Agent",
    "Obstacle",
    "WorldConfig",
    "advance",
    "collides",
    "nearest_obstacle_ahead",
    "observe",
    "spawn_allowed",
    "step",
]

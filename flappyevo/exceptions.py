class FlappyEvoError(Exception):
    """Base for all FlappyEvo exceptions."""

    pass


# High-level families
class ConfigurationError(FlappyEvoError):
    """Invalid or inconsistent configuration."""

    pass


class SimulationError(FlappyEvoError):
    """Simulation step failures."""

    pass


class EvolutionError(FlappyEvoError):
    """Selection and reproduction failures."""

    pass


# Simulation subtypes
class ContractViolationError(SimulationError):
    """A collaborator or the physics broke an interface guarantee.

    Raised for controllers returning the wrong number of outputs and for
    non-finite positions or velocities. Never recovered from.
    """

    pass

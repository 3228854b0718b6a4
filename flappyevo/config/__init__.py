from flappyevo.config.helpers import build_runner, make_rng
from flappyevo.config.resolvers import register_resolvers

__all__ = [
    "build_runner",
    "make_rng",
    "register_resolvers",
]

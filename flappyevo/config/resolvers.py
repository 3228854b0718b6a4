import math

import hydra
from omegaconf import OmegaConf


def _ceil_frac(total, fraction) -> int:
    """``ceil(total * fraction)``, the way elite and offspring counts are derived."""
    return math.ceil(float(total) * float(fraction))


def register_resolvers() -> None:
    OmegaConf.register_new_resolver("eval", eval, replace=True)
    OmegaConf.register_new_resolver(
        "get_object", lambda obj: hydra.utils.get_object(obj), replace=True
    )
    OmegaConf.register_new_resolver("ceil_frac", _ceil_frac, replace=True)

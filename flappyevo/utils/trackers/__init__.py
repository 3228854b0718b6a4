from flappyevo.utils.trackers.backends.tensorboard import TBBackend
from flappyevo.utils.trackers.base import LogWriter
from flappyevo.utils.trackers.configs import TBConfig
from flappyevo.utils.trackers.core import BoundLogger, GenericLogger, LoggerBackend


def init_tb(
    cfg: TBConfig, *, queue_size: int = 8192, flush_secs: float = 3.0
) -> GenericLogger:
    return GenericLogger(TBBackend(cfg), queue_size=queue_size, flush_secs=flush_secs)


__all__ = [
    "BoundLogger",
    "GenericLogger",
    "LogWriter",
    "LoggerBackend",
    "TBBackend",
    "TBConfig",
    "init_tb",
]

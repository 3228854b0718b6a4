from abc import ABC, abstractmethod


class LogWriter(ABC):
    """Sink for numeric run statistics, addressed by a tag path."""

    @abstractmethod
    def bind(self, path: list[str]) -> "LogWriter":
        """Return a writer that prefixes every tag with ``path``."""

    @abstractmethod
    def scalar(self, metric: str, value: float, *, step: int | None = None) -> None:
        pass

    @abstractmethod
    def hist(self, metric: str, values: list[float], *, step: int | None = None) -> None:
        pass

    @abstractmethod
    def close(self) -> None:
        pass

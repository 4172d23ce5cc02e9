"""UI notification hooks for application layer."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable


def _ignore(_message: str) -> None:
    return None


@dataclass(frozen=True)
class UiHooks:
    warn: Callable[[str], None] = _ignore
    info: Callable[[str], None] = _ignore

    @classmethod
    def from_logger(cls, logger) -> "UiHooks":
        return cls(warn=logger.warning, info=logger.info)

from . import (
    forms,
    health,
    settings,
)

__all__ = [
    "forms",
    "health",
    "settings",
]

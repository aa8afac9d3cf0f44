"""Domain entities."""

from src.domain.entities.actor import Actor

__all__ = [
    "Actor",
]

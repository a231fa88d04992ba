"""Abstract interfaces for external collaborators."""

from kardex.core.interfaces.movement_repository import IMovementRepository

__all__ = ["IMovementRepository"]

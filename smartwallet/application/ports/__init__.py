"""Application ports package."""

from .database import DatabaseEnginePort
from .repository import RepositoryPort

__all__ = [
    "DatabaseEnginePort",
    "RepositoryPort",
]

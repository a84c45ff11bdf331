"""
Implementations SQLModel des repositories.

Ce module contient l'implementation concrete de l'interface repository
definie dans src/core/ports/repositories.py, utilisant SQLModel pour
la persistance SQLite.

Le repository :
- Herite de l'interface ABC du domaine
- Recoit une session SQLModel (une par operation, via RepositoryScope)
- Convertit entre entites de domaine (dataclass) et modeles DB (SQLModel)
"""

from src.infrastructure.persistence.repositories.processing_repository import (
    RepositoryScope,
    SQLModelProcessingRepository,
)

__all__ = [
    "RepositoryScope",
    "SQLModelProcessingRepository",
]

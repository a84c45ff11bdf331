"""
Interface port pour les notifications sortantes.

Les appels sont de type "fire and forget" pour le pipeline : une
implémentation peut être désactivée ou limitée en débit, et ne doit
jamais lever d'exception.
"""

from abc import ABC, abstractmethod


class INotifier(ABC):
    """Interface des notifications de traitement."""

    @abstractmethod
    async def notify_success(self, title: str, source_path: str, destination_path: str) -> None:
        """Signale un fichier organisé avec succès."""
        ...

    @abstractmethod
    async def notify_error(self, title: str, source_path: str, message: str) -> None:
        """Signale un échec de traitement."""
        ...

    @abstractmethod
    async def notify_batch_completion(self, total: int, success: int, error: int) -> None:
        """Signale la fin d'un scan de répertoire."""
        ...

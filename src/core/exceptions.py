"""
Exceptions du domaine.

Les erreurs techniques (OSError, httpx.HTTPError) sont propagees telles
quelles ; ces exceptions couvrent les cas metier que les services
doivent distinguer.
"""


class PlexOrgError(Exception):
    """Exception de base de l'application."""


class MetadataNotFoundError(PlexOrgError):
    """Aucun fournisseur n'a retourne de metadonnees pour ce titre."""

    def __init__(self, title: str, year: int | None = None) -> None:
        self.title = title
        self.year = year
        label = f"{title} ({year})" if year else title
        super().__init__(f"Metadonnees introuvables pour {label}")


class ProviderUnavailableError(PlexOrgError):
    """Un fournisseur de metadonnees est indisponible (authentification echouee)."""

    def __init__(self, source: str, reason: str) -> None:
        self.source = source
        super().__init__(f"Fournisseur {source} indisponible: {reason}")

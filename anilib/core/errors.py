"""
Erreurs du domaine AniLib.

Deux familles :
- IngestionError : echec local a une entree du systeme de fichiers (un dossier,
  un fichier). Collectee et signalee sans interrompre le lot en cours.
- Erreurs d'infrastructure partagee (StoreError, ProviderUnavailableError) :
  propagees, elles arretent le lot.
"""

from pathlib import Path
from typing import Optional


class AniLibError(Exception):
    """Base de toutes les erreurs AniLib."""


class NotFoundError(AniLibError):
    """Chemin ou identifiant absent du catalogue."""

    def __init__(self, kind: str, key: str) -> None:
        self.kind = kind
        self.key = key
        super().__init__(f"{kind} introuvable: {key}")


class IngestionError(AniLibError):
    """
    Echec limite a une seule entree (dossier ou fichier).

    Attributes:
        message: Description de l'echec
        path: Chemin de l'entree concernee, si connu de l'emetteur
    """

    def __init__(self, message: str, path: Optional[Path] = None) -> None:
        self.message = message
        self.path = path
        super().__init__(f"{path}: {message}" if path else message)


class ExternalLookupError(IngestionError):
    """Le fournisseur de metadonnees a echoue ou n'a retourne aucun resultat."""


class ProbeError(IngestionError):
    """L'inspection des codecs/conteneur d'un fichier a echoue."""


class TranscodeError(IngestionError):
    """La conversion d'un fichier a echoue (aucun episode n'est cree)."""


class DuplicatePathError(IngestionError):
    """
    Une entite existe deja pour ce chemin.

    Resultat benin d'une course check-then-act : l'entree est ignoree.
    """


class StoreError(AniLibError):
    """Erreur de la base de donnees (fatale pour l'operation en cours)."""


class StoreWriteError(StoreError):
    """L'ecriture en base a echoue : l'entite ne doit pas etre consideree creee."""


class ProviderUnavailableError(AniLibError):
    """
    Le fournisseur de metadonnees est injoignable.

    Attributes:
        retry_after: Secondes a attendre si le fournisseur l'a indique
    """

    def __init__(self, message: str, retry_after: Optional[int] = None) -> None:
        self.retry_after = retry_after
        super().__init__(message)


class UpdateInProgressError(AniLibError):
    """Une mise a jour de la bibliotheque est deja en cours."""

    def __init__(self) -> None:
        super().__init__("Une mise a jour de la bibliotheque est deja en cours")

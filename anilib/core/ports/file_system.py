"""
Interfaces ports pour le système de fichiers.

Interface abstraite (port) définissant les opérations fichiers dont les
services d'ingestion et de réconciliation ont besoin.
"""

from abc import ABC, abstractmethod
from collections.abc import Iterable, Iterator
from pathlib import Path


class IFileSystem(ABC):
    """
    Interface pour les opérations sur le système de fichiers.

    Définit la vérification d'existence, le listage des dossiers,
    le parcours récursif des fichiers vidéo et la suppression.
    """

    @abstractmethod
    def exists(self, path: Path) -> bool:
        """Vérifie si un chemin existe."""
        ...

    @abstractmethod
    def list_subdirectories(self, directory: Path) -> list[Path]:
        """
        Liste les sous-dossiers immédiats d'un répertoire.

        Retourne une liste vide si le répertoire n'existe pas.
        """
        ...

    @abstractmethod
    def walk_files(self, folder: Path, extensions: Iterable[str]) -> Iterator[Path]:
        """
        Parcourt récursivement un dossier et produit les fichiers dont
        l'extension appartient à extensions.

        Args:
            folder: Dossier racine du parcours
            extensions: Extensions acceptées (ex: {".mkv", ".mp4"})

        Yields:
            Chemins des fichiers trouvés, à plat
        """
        ...

    @abstractmethod
    def delete(self, path: Path) -> bool:
        """
        Supprime un fichier.

        Retourne True si supprimé, False sinon.
        """
        ...

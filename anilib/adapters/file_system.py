"""
Adaptateur pour les operations sur le systeme de fichiers.

Implementation concrete de IFileSystem pour les operations fichiers reelles.
Le parcours recursif utilise une pile explicite plutot qu'une recursion,
ce qui produit une sequence plate et paresseuse de chemins.
"""

from collections.abc import Iterable, Iterator
from pathlib import Path

from loguru import logger

from anilib.core.ports.file_system import IFileSystem


class FileSystemAdapter(IFileSystem):
    """
    Implementation de IFileSystem pour le systeme de fichiers reel.

    Les dossiers illisibles sont ignores (journalises en DEBUG) sans
    interrompre le parcours.
    """

    def exists(self, path: Path) -> bool:
        """Verifie si un chemin existe."""
        return path.exists()

    def list_subdirectories(self, directory: Path) -> list[Path]:
        """Liste les sous-dossiers immediats, tries par nom."""
        if not directory.is_dir():
            return []
        try:
            return sorted(child for child in directory.iterdir() if child.is_dir())
        except OSError as e:
            logger.debug(f"Lecture impossible de {directory}: {e}")
            return []

    def walk_files(self, folder: Path, extensions: Iterable[str]) -> Iterator[Path]:
        """
        Parcourt un dossier en profondeur avec une pile de travail.

        Les fichiers d'un meme dossier sont produits par ordre alphabetique,
        avant ceux des sous-dossiers. L'extension est comparee sans tenir
        compte de la casse.
        """
        accepted = {ext.lower() for ext in extensions}
        stack = [folder]

        while stack:
            current = stack.pop()
            try:
                entries = sorted(current.iterdir())
            except OSError as e:
                logger.debug(f"Lecture impossible de {current}: {e}")
                continue

            subdirectories = []
            for entry in entries:
                if entry.is_dir():
                    subdirectories.append(entry)
                elif entry.is_file() and entry.suffix.lower() in accepted:
                    yield entry

            # Ordre inverse pour depiler les sous-dossiers alphabetiquement
            stack.extend(reversed(subdirectories))

    def delete(self, path: Path) -> bool:
        """Supprime un fichier."""
        try:
            path.unlink()
            return True
        except OSError:
            return False

"""
Interfaces ports pour l'inspection et la conversion des vidéos.

Les sondes de codecs sont asynchrones (elles peuvent lancer un processus
externe), la vérification du conteneur est locale et synchrone.
"""

from abc import ABC, abstractmethod
from pathlib import Path


class IMediaProbe(ABC):
    """
    Interface d'inspection de compatibilité d'un fichier vidéo.

    Les méthodes async lèvent ProbeError si l'inspection échoue.
    """

    @abstractmethod
    async def is_video_codec_supported(self, path: Path) -> bool:
        """Indique si le codec vidéo est lisible tel quel."""
        ...

    @abstractmethod
    async def is_audio_codec_supported(self, path: Path) -> bool:
        """Indique si le codec audio est lisible tel quel."""
        ...

    @abstractmethod
    def is_video_container_supported(self, path: Path) -> bool:
        """Indique si le conteneur est lisible tel quel (d'après l'extension)."""
        ...


class ITranscoder(ABC):
    """
    Interface de conversion vidéo et d'extraction d'images.

    Les méthodes lèvent TranscodeError en cas d'échec.
    """

    @abstractmethod
    async def extract_cover_image(
        self,
        path: Path,
        at_second: int,
        output_name: str,
        scale_width: int,
    ) -> Path:
        """
        Extrait une image JPEG de la vidéo.

        Args:
            path: Fichier vidéo source
            at_second: Position de l'image dans la vidéo
            output_name: Suffixe du nom de l'image produite
            scale_width: Largeur de l'image (hauteur proportionnelle)

        Returns:
            Chemin de l'image produite
        """
        ...

    @abstractmethod
    async def transcode_to_mp4(
        self,
        path: Path,
        output_dir: Path,
        output_name: str,
        use_hardware_accel: bool,
    ) -> Path:
        """
        Convertit une vidéo en MP4 lisible (H.264 + AAC).

        Args:
            path: Fichier vidéo source (jamais supprimé par cette opération)
            output_dir: Répertoire du fichier produit
            output_name: Nom du fichier produit, sans extension
            use_hardware_accel: Utiliser l'encodeur matériel

        Returns:
            Chemin du fichier MP4 produit
        """
        ...

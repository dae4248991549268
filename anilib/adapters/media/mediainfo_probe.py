"""
Implementation de la sonde de compatibilite video avec pymediainfo.

Ce module fournit MediaInfoProbe qui implemente IMediaProbe : il lit les
formats des pistes video et audio et les compare aux codecs lisibles par
un navigateur.
"""

import asyncio
from collections import OrderedDict
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from pymediainfo import MediaInfo as PyMediaInfo

from anilib.core.errors import ProbeError
from anilib.core.ports.media import IMediaProbe
from anilib.utils.constants import (
    SUPPORTED_AUDIO_CODECS,
    SUPPORTED_VIDEO_CODECS,
    SUPPORTED_VIDEO_CONTAINERS,
)


@dataclass(frozen=True)
class TrackFormats:
    """
    Formats des premieres pistes video et audio d'un fichier.

    Attributs:
        video: Format mediainfo de la piste video en minuscules (ex: "avc", "hevc")
        audio: Format mediainfo de la piste audio en minuscules (ex: "aac", "flac")
    """

    video: Optional[str] = None
    audio: Optional[str] = None


class MediaInfoProbe(IMediaProbe):
    """
    Sonde de compatibilite utilisant pymediainfo.

    L'analyse mediainfo est bloquante : elle est executee dans un thread
    pour ne pas geler la boucle asyncio. Le resultat est memorise par
    (chemin, date de modification, taille), les deux sondes de codecs d'un
    meme fichier n'analysent donc le fichier qu'une fois. Un fichier
    remplace au meme chemin est analyse de nouveau. Seuls les max_cached
    derniers fichiers sont conserves.
    """

    def __init__(
        self,
        video_codecs: frozenset[str] = SUPPORTED_VIDEO_CODECS,
        audio_codecs: frozenset[str] = SUPPORTED_AUDIO_CODECS,
        containers: frozenset[str] = SUPPORTED_VIDEO_CONTAINERS,
        max_cached: int = 64,
    ) -> None:
        self._video_codecs = video_codecs
        self._audio_codecs = audio_codecs
        self._containers = containers
        self._max_cached = max_cached
        self._formats: OrderedDict[tuple[Path, int, int], TrackFormats] = OrderedDict()

    async def is_video_codec_supported(self, path: Path) -> bool:
        """Vrai si la premiere piste video utilise un codec lisible."""
        formats = await self._read_formats(path)
        return formats.video in self._video_codecs

    async def is_audio_codec_supported(self, path: Path) -> bool:
        """
        Vrai si la premiere piste audio utilise un codec lisible.

        Un fichier sans piste audio n'a rien a convertir cote audio.
        """
        formats = await self._read_formats(path)
        return formats.audio is None or formats.audio in self._audio_codecs

    def is_video_container_supported(self, path: Path) -> bool:
        """Verification locale par extension."""
        return path.suffix.lower() in self._containers

    async def _read_formats(self, path: Path) -> TrackFormats:
        key = await asyncio.to_thread(self._signature, path)
        cached = self._formats.get(key)
        if cached is not None:
            self._formats.move_to_end(key)
            return cached

        formats = await asyncio.to_thread(self._parse, path)
        self._formats[key] = formats
        while len(self._formats) > self._max_cached:
            self._formats.popitem(last=False)
        return formats

    @staticmethod
    def _signature(path: Path) -> tuple[Path, int, int]:
        """
        Identifie le contenu d'un fichier sans le lire.

        Raises:
            ProbeError: fichier absent
        """
        try:
            stat = path.stat()
        except OSError as e:
            raise ProbeError("fichier introuvable", path) from e
        return (path, stat.st_mtime_ns, stat.st_size)

    @staticmethod
    def _parse(path: Path) -> TrackFormats:
        """
        Analyse le fichier avec mediainfo.

        Raises:
            ProbeError: fichier illisible ou sans piste video
        """
        try:
            media_info = PyMediaInfo.parse(str(path))
        except Exception as e:
            raise ProbeError(f"analyse mediainfo impossible: {e}", path) from e

        video_tracks = [t for t in media_info.tracks if t.track_type == "Video"]
        audio_tracks = [t for t in media_info.tracks if t.track_type == "Audio"]

        if not video_tracks or not video_tracks[0].format:
            raise ProbeError("aucune piste video detectee", path)

        audio_format = audio_tracks[0].format if audio_tracks else None
        return TrackFormats(
            video=str(video_tracks[0].format).lower(),
            audio=str(audio_format).lower() if audio_format else None,
        )

"""
Adaptateurs media pour AniLib.

Ce package contient les implementations concretes des ports media:
- MediaInfoProbe: Compatibilite des codecs et du conteneur avec pymediainfo
- FFmpegTranscoder: Conversion MP4 et extraction d'images avec ffmpeg
"""

from anilib.adapters.media.ffmpeg_transcoder import FFmpegTranscoder
from anilib.adapters.media.mediainfo_probe import MediaInfoProbe

__all__ = ["FFmpegTranscoder", "MediaInfoProbe"]

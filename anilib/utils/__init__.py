"""
Utilitaires et constantes pour AniLib.

Ce module contient les constantes et fonctions utilitaires partagees.
"""

from anilib.utils.constants import (
    COMPATIBLE_FILE_SUFFIX,
    EPISODE_FILE_EXTENSIONS,
    SUPPORTED_AUDIO_CODECS,
    SUPPORTED_VIDEO_CODECS,
    SUPPORTED_VIDEO_CONTAINERS,
)

__all__ = [
    "COMPATIBLE_FILE_SUFFIX",
    "EPISODE_FILE_EXTENSIONS",
    "SUPPORTED_AUDIO_CODECS",
    "SUPPORTED_VIDEO_CODECS",
    "SUPPORTED_VIDEO_CONTAINERS",
]

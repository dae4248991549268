"""
Constantes globales pour AniLib.

Ce module contient les constantes utilisees dans l'application:
- Extensions des fichiers d'episodes
- Codecs et conteneurs lisibles sans conversion
- Expressions de nettoyage des noms de dossiers et de fichiers
- Noms des reglages persistes
"""

import re

# Extensions des fichiers d'episodes
EPISODE_FILE_EXTENSIONS = frozenset({".mp4", ".mkv"})

# Conteneurs lisibles par un navigateur (verification par extension)
SUPPORTED_VIDEO_CONTAINERS = frozenset({".mp4"})

# Codecs lisibles par un navigateur, noms de format mediainfo en minuscules
SUPPORTED_VIDEO_CODECS = frozenset({"avc"})
SUPPORTED_AUDIO_CODECS = frozenset({"aac", "mpeg audio"})

# Suffixe des fichiers produits par la conversion
COMPATIBLE_FILE_SUFFIX = " [ANILIB COMPATIBLE]"

# Image de couverture des episodes
EPISODE_COVER_NAME = "episode_cover"

# Contenus entre crochets, parentheses, accolades (tags de release, resolution...)
SQUARE_BRACKET_CONTENT = re.compile(r"\[[^\]]*\]")
PARENTHESES_CONTENT = re.compile(r"\([^)]*\)")
BRACES_CONTENT = re.compile(r"\{[^}]*\}")
NOT_ALPHANUMERIC = re.compile(r"[\W_]+")
NUMBERS = re.compile(r"\d+")

# Reglages persistes et leurs valeurs initiales
USE_HARDWARE_ACCELERATION = "use_hardware_acceleration"
DEFAULT_SETTINGS = {
    USE_HARDWARE_ACCELERATION: False,
}

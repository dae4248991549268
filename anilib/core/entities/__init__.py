"""
Entités métier représentant les concepts du domaine.

Exports:
- Anime: Série liée à un dossier local, enrichie via AniList
- AnimeTitle: Variantes de titre (romaji, anglais, natif)
- Episode: Fichier vidéo lisible d'un anime
- Subtitle: Sous-titres externes d'un épisode
- WatchDirectory: Répertoire racine surveillé
- Setting: Réglage booléen nommé
"""

from anilib.core.entities.library import (
    Anime,
    AnimeTitle,
    Episode,
    Setting,
    Subtitle,
    WatchDirectory,
)

__all__ = [
    "Anime",
    "AnimeTitle",
    "Episode",
    "Setting",
    "Subtitle",
    "WatchDirectory",
]

"""
AniLib - Bibliothèque locale d'animes.

Ce package scanne les répertoires surveillés, identifie les dossiers d'animes
via AniList, crée les épisodes à partir des fichiers vidéo et convertit en MP4
les fichiers illisibles par un navigateur.

Architecture : Hexagonale (Ports et Adaptateurs)
- core/ : Couche domaine (entités, ports, erreurs)
- services/ : Couche application (ingestion, réconciliation, orchestration)
- adapters/ : Couche infrastructure (API AniList, mediainfo/ffmpeg, fichiers)
- infrastructure/ : Persistance SQLModel
- web/ : API FastAPI
"""

__version__ = "0.1.0"

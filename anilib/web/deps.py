"""
Dépendances partagées de l'application web.

Fournit le LibraryService du container attaché à l'application.
"""

from fastapi import Request

from anilib.services.library import LibraryService


def get_library(request: Request) -> LibraryService:
    """Retourne le service de bibliothèque (singleton du container)."""
    return request.app.state.container.library_service()

"""
Ports (interfaces abstraites) définissant les contrats pour les adaptateurs.

Les ports sont les frontières de l'architecture hexagonale. Ils définissent
ce dont le domaine a besoin du monde extérieur sans spécifier
comment ces besoins sont satisfaits.

Ports repository : Contrats de persistance des données
- IAnimeRepository, IEpisodeRepository, ISubtitleRepository
- IWatchDirectoryRepository, ISettingRepository

Port fournisseur de métadonnées :
- IMetadataProvider : Recherche textuelle d'animes
- MediaMatch : Candidat retourné par le fournisseur

Ports média :
- IMediaProbe : Compatibilité des codecs et du conteneur
- ITranscoder : Conversion MP4 et extraction d'images

Port système de fichiers :
- IFileSystem : Listage, parcours récursif, suppression
"""

from anilib.core.ports.api_clients import IMetadataProvider, MediaMatch
from anilib.core.ports.file_system import IFileSystem
from anilib.core.ports.media import IMediaProbe, ITranscoder
from anilib.core.ports.repositories import (
    IAnimeRepository,
    IEpisodeRepository,
    ISettingRepository,
    ISubtitleRepository,
    IWatchDirectoryRepository,
)

__all__ = [
    # Repositories
    "IAnimeRepository",
    "IEpisodeRepository",
    "ISettingRepository",
    "ISubtitleRepository",
    "IWatchDirectoryRepository",
    # Fournisseur de métadonnées
    "IMetadataProvider",
    "MediaMatch",
    # Média
    "IMediaProbe",
    "ITranscoder",
    # Système de fichiers
    "IFileSystem",
]

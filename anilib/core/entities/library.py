"""
Entités de la bibliothèque d'animes.

Entités représentant les séries (Anime), leurs fichiers lisibles (Episode),
les sous-titres, les répertoires surveillés et les réglages persistés.
"""

from dataclasses import dataclass, field
from datetime import date
from pathlib import Path
from typing import Optional


@dataclass(frozen=True)
class AnimeTitle:
    """
    Variantes de titre d'un anime.

    Attributs :
        romaji : Titre romanisé (ex: "Shingeki no Kyojin")
        english : Titre anglais (ex: "Attack on Titan")
        native : Titre natif (ex: "進撃の巨人")

    Chaque variante peut être absente, au moins une est renseignée
    pour un anime issu du fournisseur de métadonnées.
    """

    romaji: Optional[str] = None
    english: Optional[str] = None
    native: Optional[str] = None

    @property
    def variants(self) -> tuple[Optional[str], ...]:
        """Retourne les trois variantes dans l'ordre romaji, anglais, natif."""
        return (self.romaji, self.english, self.native)

    @property
    def display(self) -> str:
        """Premier titre disponible pour l'affichage."""
        return self.romaji or self.english or self.native or "Unknown Title"


@dataclass
class Anime:
    """
    Série d'animes liée à un dossier local.

    Attributs :
        id : ID interne (attribué à la création, jamais réutilisé)
        anilist_id : ID AniList de la série
        title : Variantes de titre
        cover_url : URL de l'image de couverture (grande taille)
        description : Synopsis
        episodes : Nombre total d'épisodes (None si inconnu)
        release_date : Date de début de diffusion
        status : Statut de diffusion (FINISHED, RELEASING, ...)
        genres : Genres dans l'ordre du fournisseur
        format : Format (TV, MOVIE, OVA, ...)
        folder_path : Dossier propriétaire, unique par anime
    """

    folder_path: Path
    title: AnimeTitle = field(default_factory=AnimeTitle)
    id: Optional[str] = None
    anilist_id: Optional[int] = None
    cover_url: Optional[str] = None
    description: Optional[str] = None
    episodes: Optional[int] = None
    release_date: Optional[date] = None
    status: Optional[str] = None
    genres: tuple[str, ...] = ()
    format: Optional[str] = None


@dataclass
class Episode:
    """
    Fichier vidéo lisible rattaché à un anime.

    Attributs :
        id : ID interne
        anime_id : Référence vers l'Anime propriétaire
        title : Titre dérivé du nom de fichier
        file_path : Fichier actuellement servi (transcodé le cas échéant)
        original_file_path : Fichier source avant conversion, None si aucune
                             conversion n'a eu lieu
        cover_image_path : Image extraite de la vidéo
    """

    anime_id: str
    title: str
    file_path: Path
    id: Optional[str] = None
    original_file_path: Optional[Path] = None
    cover_image_path: Optional[Path] = None

    @property
    def is_converted(self) -> bool:
        """Indique si le fichier servi provient d'une conversion."""
        return self.original_file_path is not None


@dataclass
class Subtitle:
    """Piste de sous-titres externe rattachée à un épisode."""

    episode_id: str
    file_path: Path
    label: str = ""
    id: Optional[str] = None


@dataclass
class WatchDirectory:
    """Répertoire racine surveillé (les doublons sont tolérés)."""

    path: Path
    id: Optional[str] = None


@dataclass
class Setting:
    """Réglage booléen nommé (ex: use_hardware_acceleration)."""

    name: str
    value: bool = False
    id: Optional[str] = None

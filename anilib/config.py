"""
Configuration de l'application via pydantic-settings.

La configuration est chargée depuis les variables d'environnement avec le préfixe ANILIB_,
et peut optionnellement être fournie via un fichier .env.

Les réglages modifiables à chaud (accélération matérielle) sont stockés en base
dans la table settings, pas ici.
"""

from pathlib import Path

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

# Trouver le fichier .env à la racine du projet (parent de anilib/)
_PROJECT_ROOT = Path(__file__).parent.parent
_ENV_FILE = _PROJECT_ROOT / ".env"


class Settings(BaseSettings):
    """Paramètres de l'application avec support des variables d'environnement.

    Tous les paramètres peuvent être surchargés via des variables d'environnement
    avec le préfixe ANILIB_.
    Exemple : ANILIB_LOG_LEVEL=DEBUG

    Les chemins sont automatiquement étendus (~ -> répertoire home).
    """

    model_config = SettingsConfigDict(
        env_prefix="ANILIB_",
        env_file=_ENV_FILE if _ENV_FILE.exists() else ".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
    )

    # Base de données
    database_url: str = Field(default="sqlite:///anilib.db")

    # Répertoires de travail
    covers_dir: Path = Field(default=Path("~/.anilib/covers"))
    cache_dir: Path = Field(default=Path("~/.anilib/cache"))

    # Fournisseur de métadonnées
    anilist_url: str = Field(default="https://graphql.anilist.co")
    metadata_candidates: int = Field(default=5, ge=1, le=50)

    # Conversion vidéo
    max_concurrent_transcodes: int = Field(default=2, ge=1)
    episode_cover_second: int = Field(default=5, ge=0)
    episode_cover_width: int = Field(default=1920, ge=16)
    delete_converted_originals: bool = Field(default=True)
    ffmpeg_bin: str = Field(default="ffmpeg")
    transcode_timeout_seconds: int = Field(default=6 * 60 * 60, ge=1)

    # Logging (fichier + stderr, rotation 10MB, 5 fichiers de rétention)
    log_level: str = Field(default="INFO")
    log_file: Path = Field(default=Path("logs/anilib.log"))
    log_rotation_size: str = Field(default="10 MB")
    log_retention_count: int = Field(default=5)

    @field_validator("covers_dir", "cache_dir", "log_file", mode="before")
    @classmethod
    def expand_path(cls, v: str | Path) -> Path:
        """Étend ~ vers le répertoire home dans les chemins."""
        return Path(v).expanduser()

"""
Configuration de l'application via pydantic-settings.

La configuration est chargée depuis les variables d'environnement avec le préfixe MOVIECATALOG_,
et peut optionnellement être fournie via un fichier .env.

La clé API TMDB est OBLIGATOIRE : son absence fait échouer la construction de Settings,
donc le démarrage de l'application, et non chaque requête.
"""

from pathlib import Path
from typing import Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

# Trouver le fichier .env à la racine du projet (parent de moviecatalog/)
_PROJECT_ROOT = Path(__file__).parent.parent
_ENV_FILE = _PROJECT_ROOT / ".env"


class Settings(BaseSettings):
    """Paramètres de l'application avec support des variables d'environnement.

    Tous les paramètres peuvent être surchargés via des variables d'environnement
    avec le préfixe MOVIECATALOG_.
    Exemple : MOVIECATALOG_TMDB_API_KEY=xxx MOVIECATALOG_LOG_LEVEL=DEBUG

    Les timeouts (transport 30s, résilience 10s) sont des constantes de politique,
    volontairement absentes d'ici.
    """

    model_config = SettingsConfigDict(
        env_prefix="MOVIECATALOG_",
        env_file=_ENV_FILE if _ENV_FILE.exists() else ".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
    )

    # API TMDB (clé obligatoire)
    tmdb_api_key: str = Field(min_length=1)
    tmdb_base_url: str = Field(default="https://api.themoviedb.org/3")
    tmdb_image_base_url: str = Field(default="https://image.tmdb.org/t/p/")

    # Cache (en mémoire de processus, répertoire temporaire si cache_dir absent)
    cache_expiration_minutes: int = Field(default=15, ge=1)
    genre_cache_hours: int = Field(default=24, ge=1)
    cache_dir: Optional[Path] = Field(default=None)

    # Web
    cors_allowed_origins: list[str] = Field(default=["http://localhost:3000"])

    # Logging (fichier + stderr, rotation 10MB, 5 fichiers de rétention)
    log_level: str = Field(default="INFO")
    log_file: Path = Field(default=Path("logs/moviecatalog.log"))
    log_rotation_size: str = Field(default="10 MB")
    log_retention_count: int = Field(default=5)

    @field_validator("tmdb_api_key", mode="before")
    @classmethod
    def strip_api_key(cls, v: str) -> str:
        """Une clé composée uniquement d'espaces est considérée comme absente."""
        return v.strip() if isinstance(v, str) else v

    @field_validator("cache_dir", "log_file", mode="before")
    @classmethod
    def expand_path(cls, v: Optional[str | Path]) -> Optional[Path]:
        """Étend ~ vers le répertoire home dans les chemins."""
        if v is None or v == "":
            return None
        return Path(v).expanduser()

    @property
    def cache_ttl_seconds(self) -> int:
        """TTL général des réponses en secondes."""
        return self.cache_expiration_minutes * 60

    @property
    def genre_cache_ttl_seconds(self) -> int:
        """TTL de la liste des genres en secondes."""
        return self.genre_cache_hours * 60 * 60

"""Application settings and configuration management.

This module provides Pydantic-based settings management that loads
configuration from environment variables or a .env file. Settings include
the boundary data directory, the GeoJSON file backing each district layer,
the configured chambers, CORS origins, the load-failure policy, and logging.

Example:
    Settings can be accessed via the cached get_settings() function:
        >>> from district_lookup.core.config import get_settings
        >>> settings = get_settings()
        >>> print(settings.layer_path("house"))

    Environment variables can override defaults:
        >>> BOUNDARY_DIR=/srv/boundaries
        >>> LAYERS='["house", "senate"]'
        >>> STRICT_LAYERS=false
"""

import functools
import pathlib

import pydantic_settings

from district_lookup.boundaries import models


class Settings(pydantic_settings.BaseSettings):
    """Runtime configuration pulled from environment variables or defaults.

    All settings can be overridden via environment variables or .env file.

    Attributes:
        boundary_dir: Directory holding the boundary GeoJSON files.
        layer_files: File name of the FeatureCollection for each chamber,
            relative to boundary_dir.
        layers: Chambers resolved by the lookup endpoint, in response order.
        allow_origins: List of allowed CORS origins (["*"] allows all).
        strict_layers: Fail the whole request when any layer cannot be
            loaded. When False, the failing layer resolves to null.
        log_level: Root log level name.
        log_json: Emit single-line JSON log records instead of plain text.

    Example:
        Create settings with custom values:
            >>> settings = Settings(
            ...     boundary_dir=Path("/srv/boundaries"),
            ...     layers=["house", "senate"],
            ...     strict_layers=False,
            ... )
    """

    boundary_dir: pathlib.Path = pathlib.Path("data")
    layer_files: dict[str, str] = {
        "house": "tx-house-2025.geojson",
        "senate": "tx-senate-2025.geojson",
        "sboe": "tx-sboe-2025.geojson",
    }
    layers: list[models.Chamber] = ["house", "senate", "sboe"]
    allow_origins: list[str] = ["*"]
    strict_layers: bool = True
    log_level: str = "INFO"
    log_json: bool = False

    model_config = pydantic_settings.SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
    )

    def layer_path(self, name: str) -> pathlib.Path | None:
        """Resolve the boundary file backing a layer.

        Args:
            name: Layer (chamber) name.

        Returns:
            Absolute or boundary_dir-relative path of the layer's GeoJSON
            file, or None if no file is configured for the name.
        """
        filename = self.layer_files.get(name)
        if filename is None:
            return None

        return self.boundary_dir / filename


@functools.lru_cache
def get_settings() -> Settings:
    """Get cached settings instance.

    Settings are loaded from environment variables or .env file and cached
    for the lifetime of the application. Subsequent calls return the same
    cached instance.

    Returns:
        Settings instance with all configuration values populated.

    Example:
        The settings are cached, so multiple calls return the same instance:
            >>> settings1 = get_settings()
            >>> settings2 = get_settings()
            >>> assert settings1 is settings2  # Same instance
    """
    return Settings()

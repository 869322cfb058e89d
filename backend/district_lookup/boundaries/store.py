"""Boundary sources and the process-wide boundary layer store."""

from __future__ import annotations

import functools
import logging
import threading
from typing import TYPE_CHECKING, Protocol

from district_lookup.boundaries import models
from district_lookup.core import config
from district_lookup.utils import geojson_helpers

if TYPE_CHECKING:
    from collections.abc import Mapping

logger = logging.getLogger(__name__)


class BoundarySourceProtocol(Protocol):
    """Protocol interface for reading raw boundary content per layer.

    Implementations supply the bytes of a GeoJSON FeatureCollection, backed
    by files on disk (production) or an in-memory mapping (testing).
    """

    def read(self, name: str) -> bytes: ...

    def describe(self, name: str) -> str: ...


class InMemoryBoundarySource(BoundarySourceProtocol):
    """Simple in-memory source for tests and local development.

    Serves boundary content from a dictionary keyed by layer name.
    """

    def __init__(self, payloads: Mapping[str, bytes] | None = None) -> None:
        """Initialize the source with optional layer payloads.

        Args:
            payloads: Raw GeoJSON bytes keyed by layer name.
        """
        self._payloads: dict[str, bytes] = dict(payloads or {})

    def add(self, name: str, content: bytes) -> None:
        self._payloads[name] = content

    def read(self, name: str) -> bytes:
        """Return the stored payload for a layer.

        Raises:
            LoadError: If no payload is registered under the name.
        """
        try:
            return self._payloads[name]
        except KeyError:
            raise geojson_helpers.LoadError(
                name, f"No boundary source registered for layer '{name}'"
            ) from None

    def describe(self, name: str) -> str:
        return f"memory:{name}"


class FileBoundarySource(BoundarySourceProtocol):
    """Reads boundary GeoJSON files from the configured boundary directory."""

    def __init__(self, settings: config.Settings) -> None:
        """Initialize the source with file settings.

        Args:
            settings: Application settings holding boundary_dir and
                layer_files.
        """
        self.settings = settings

    def read(self, name: str) -> bytes:
        """Read the layer's file from disk.

        Raises:
            LoadError: If the layer has no configured file, or the file is
                missing or unreadable.
        """
        path = self.settings.layer_path(name)
        if path is None:
            raise geojson_helpers.LoadError(
                name, f"No boundary file configured for layer '{name}'"
            )

        if not path.is_file():
            raise geojson_helpers.LoadError(
                name, f"Boundary file for layer '{name}' not found: {path}"
            )

        try:
            return path.read_bytes()
        except OSError as exc:
            raise geojson_helpers.LoadError(
                name, f"Boundary file for layer '{name}' is unreadable: {exc}"
            ) from exc

    def describe(self, name: str) -> str:
        return str(self.settings.layer_path(name) or "")


class BoundaryLayerStore:
    """Lazily loads boundary layers once and caches them for reuse.

    Each layer is read and parsed on its first request and then served from
    memory for the remainder of the process. A lock per layer name serializes
    concurrent first requests, so a layer is loaded exactly once; callers
    that arrive while a load is in flight wait for it and reuse its result.
    Failed loads are not cached, so a later request retries.
    """

    def __init__(self, source: BoundarySourceProtocol) -> None:
        self.source = source
        self._layers: dict[str, models.BoundaryLayer] = {}
        self._locks: dict[str, threading.Lock] = {}
        self._locks_guard = threading.Lock()

    def _lock_for(self, name: str) -> threading.Lock:
        with self._locks_guard:
            return self._locks.setdefault(name, threading.Lock())

    def get_layer(self, name: str) -> models.BoundaryLayer:
        """Return the cached layer, loading it on first use.

        Args:
            name: Layer (chamber) name.

        Returns:
            The BoundaryLayer for the name. Repeated calls return the same
            object.

        Raises:
            LoadError: If the layer's source is missing, unreadable, or
                malformed.
        """
        layer = self._layers.get(name)
        if layer is not None:
            return layer

        with self._lock_for(name):
            layer = self._layers.get(name)
            if layer is None:
                layer = self._load(name)
                self._layers[name] = layer

        return layer

    def _load(self, name: str) -> models.BoundaryLayer:
        try:
            content = self.source.read(name)
            polygons, bbox = geojson_helpers.parse_feature_collection(
                name, content
            )
        except geojson_helpers.LoadError:
            logger.warning("Failed to load boundary layer %s", name, exc_info=True)
            raise

        layer = models.BoundaryLayer(
            name=name,  # type: ignore[arg-type]
            polygons=polygons,
            bbox=bbox,
            source=self.source.describe(name),
        )
        logger.info(
            "Loaded boundary layer %s with %d polygons",
            name,
            len(polygons),
            extra={"layer": name, "polygon_count": len(polygons)},
        )
        return layer

    def loaded_layers(self) -> list[str]:
        """Names of the layers currently held in the cache."""
        return list(self._layers)


@functools.lru_cache
def get_layer_store() -> BoundaryLayerStore:
    """Get the process-wide layer store backed by the configured files.

    Returns:
        BoundaryLayerStore reading from FileBoundarySource. The same instance
        is returned on every call, so loaded layers are shared by all
        requests.
    """
    return BoundaryLayerStore(FileBoundarySource(config.get_settings()))

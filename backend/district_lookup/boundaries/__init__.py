"""Boundary layer models and the layer store.

This package holds the in-memory representation of district boundary layers
(models) and the lazily populated, process-wide cache that loads them from
their sources (store).

Example:
    Load a layer through the shared store:
        >>> from district_lookup.boundaries import store
        >>> layer = store.get_layer_store().get_layer("house")
"""

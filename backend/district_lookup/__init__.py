"""App package initializer for the district lookup FastAPI service.

This package resolves a WGS84 coordinate to the Texas House, Texas Senate
and State Board of Education districts that contain it. District boundaries
are read from static GeoJSON files on first use and kept in memory for the
life of the process.

- Loads each boundary layer once, safely under concurrent first requests
- Rejects out-of-region points with a per-layer bounding box check
- Resolves district numbers from heterogeneous attribute schemas using an
  ordered precedence policy
- Serves results to browser clients behind a CORS allow-list

See README and module sub-docstrings for details on architecture and usage.
"""

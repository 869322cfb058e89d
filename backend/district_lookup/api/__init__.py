"""API router subpackage for the district lookup backend.

Each module exposes its own APIRouter for composition in the application's
main FastAPI instance.

Submodules:
    - lookup: Endpoint resolving a lat/lng pair to district identifiers.
    - layers: Endpoints describing the configured boundary layers.
"""

"""API routers for the sync server."""

from api.routers import authors, books  # noqa: F401

"""
Domain core for the library catalog.

This package holds the in-memory entity store, the typed query directives
and the pure filter/search/sort/paginate pipeline that the HTTP layer in
``api`` drives. Nothing in here knows about FastAPI.
"""

"""
FastAPI binding for the library catalog.

This package exposes the catalog over HTTP:
- Author and book CRUD
- Book search, filtering, sorting and pagination
- Whole-collection book statistics
- A uniform success/error response envelope
"""

"""
HTTP layer for the bookstore: FastAPI app factory, routes, middleware and
dependency wiring.
"""

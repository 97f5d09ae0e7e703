"""
Bookstore API Test Suite

Tests are organized into:
- unit/: Services, repositories, sweeper and helpers against a SQLite file
- integration/: HTTP endpoints through the FastAPI app
"""

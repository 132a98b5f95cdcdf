"""User accounts API.

This package contains the account service: user entities and their
repository, JWT issuing and verification, request validation, and the
FastAPI application that exposes them.
"""

__version__ = "0.1.0"

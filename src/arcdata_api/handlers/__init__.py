"""Handler layer for HTTP endpoints.

This layer contains request routing and the HTTP request/response handler.
Handlers depend on services (business logic), not directly on repositories.

Architecture:
    Handler -> Service -> Repository
    (HTTP)  -> (Business) -> (Data Access)
"""

from .data_handler import DataHandler
from .router import Router

__all__ = [
    "DataHandler",
    "Router",
]

"""
HTTP Client Module

Synchronous HTTP client for the off-chain collaborators.
"""

from .client import HttpClient, HttpError, HttpResponse

__all__ = [
    "HttpClient",
    "HttpError",
    "HttpResponse",
]

"""Dependency injection for FastAPI endpoints"""

from fastapi import Request
from nalo_connector.infrastructure.clients.nalo import NaloClient


def get_request_id(request: Request) -> str:
    """Extract request ID from request state"""
    return getattr(request.state, "request_id", "unknown")


def get_nalo_client() -> NaloClient:
    """Provide Nalo API client instance (one cookie session per request)"""
    return NaloClient()

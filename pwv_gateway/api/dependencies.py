# pwv_gateway/api/dependencies.py
from fastapi import Request

from pwv_gateway.services.fetch_service import FetchService


def get_fetch_service(request: Request) -> FetchService:
    """Service built at app construction around the injected configuration and invoker"""
    return request.app.state.fetch_service

"""Dependency injection for FastAPI endpoints"""

from fastapi import Request
from maxcontrol.config import settings


def get_request_id(request: Request) -> str:
    """Extract request ID from request state"""
    return getattr(request.state, "request_id", "unknown")


def get_surcharge_percentage() -> float:
    """Card surcharge applied to quote totals"""
    return settings.card_surcharge_percentage

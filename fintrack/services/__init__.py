"""
External collaborators: market price feeds and the AI assistant proxy.
"""

from fintrack.services.assistant import AssistantService, get_assistant_service
from fintrack.services.prices import build_price_sources, get_price_sources

__all__ = [
    "AssistantService",
    "get_assistant_service",
    "build_price_sources",
    "get_price_sources",
]

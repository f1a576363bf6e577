"""
Service layer for ideabracket.

Services combine the pure bracket engine with storage and locking:
- bracket_service: create, progress and reseed tournament brackets
"""

from ideabracket.services.bracket_service import BracketChangeSummary, BracketService

__all__ = [
    "BracketChangeSummary",
    "BracketService",
]

"""In-process models for proxy sessions."""

from .session import DomainVariant, SessionRecord

__all__ = [
    "DomainVariant",
    "SessionRecord",
]

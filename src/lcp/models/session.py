"""Server-side session record bound to one pasted browser cookie."""

import enum
from dataclasses import dataclass, field
from typing import Any, Optional

SECONDARY_DOMAIN_SUFFIX = "leetcode.cn"


class DomainVariant(str, enum.Enum):
    """Which deployment of the platform a domain belongs to."""

    primary = "primary"
    secondary = "secondary"

    @classmethod
    def of(cls, domain: Optional[str]) -> "DomainVariant":
        if str(domain or "").strip().lower().endswith(SECONDARY_DOMAIN_SUFFIX):
            return cls.secondary
        return cls.primary


@dataclass
class SessionRecord:
    """Credentials and cached profile for one signed-in browser."""

    domain: str
    raw_cookie: str = ""
    csrf_token: str = ""
    preferred_language_header: Optional[str] = None
    cached_user: Optional[dict[str, Any]] = field(default=None)

    @classmethod
    def anonymous(
        cls, domain: str, preferred_language_header: Optional[str] = None
    ) -> "SessionRecord":
        """Credential-less record for public lookups."""
        return cls(domain=domain, preferred_language_header=preferred_language_header)

    @property
    def variant(self) -> DomainVariant:
        return DomainVariant.of(self.domain)

    @property
    def is_secondary(self) -> bool:
        return self.variant is DomainVariant.secondary

"""Configuration settings for the LeetCode proxy."""

from functools import lru_cache
from typing import Optional

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_prefix="LCP_",
        case_sensitive=False,
        env_file=".env",
        env_file_encoding="utf-8",
    )

    # Application
    app_name: str = "LeetCode Proxy"
    debug: bool = False
    environment: str = "development"
    log_level: str = "INFO"

    # Upstream
    primary_domain: str = "leetcode.com"
    secondary_domain: str = "leetcode.cn"
    localized_accept_language: str = "zh-CN,zh;q=0.9,en;q=0.8"
    user_agent: str = (
        "Mozilla/5.0 (Macintosh; Intel Mac OS X 10_15_7) AppleWebKit/537.36 "
        "(KHTML, like Gecko) Chrome/120.0.0.0 Safari/537.36"
    )
    upstream_timeout: Optional[float] = None  # None disables the timeout

    # Problem catalog
    problem_list_limit: int = 2000
    default_category: str = "algorithms"

    # Session cookie
    session_cookie_name: str = "lc_sid"
    session_cookie_max_age: int = 60 * 60 * 24 * 7  # seconds
    session_cookie_secure: bool = False
    session_cookie_samesite: str = "lax"

    # CORS
    cors_origins: list[str] = [
        "http://localhost:5173",
        "http://localhost:3000",
    ]


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()

"""
Configuration module for the OpenAlex graph adapter.
Centralized configuration management, overridable from the environment or a .env file.
"""

import os
from dataclasses import dataclass, field
from typing import Optional

from dotenv import load_dotenv

load_dotenv()


@dataclass
class APIConfig:
    """OpenAlex API configuration"""

    base_url: str = "https://api.openalex.org"
    email: Optional[str] = None  # polite pool
    timeout: int = 30
    max_retries: int = 3
    backoff_factor: float = 0.5
    per_page: int = 25  # page size for listing fetches
    user_agent: str = "openalex-graph-adapter/0.1"


@dataclass
class LoggingConfig:
    """Logging configuration for CLI entry points"""

    level: str = "WARNING"
    log_file: Optional[str] = None


@dataclass
class Config:
    """Central configuration manager"""

    api: APIConfig = field(default_factory=APIConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)

    def __post_init__(self):
        # Load from environment variables if available
        self._load_from_env()

    def _load_from_env(self):
        """Load configuration from environment variables"""
        self.api.email = os.getenv("OPENALEX_EMAIL", self.api.email)
        self.api.base_url = os.getenv("OPENALEX_BASE_URL", self.api.base_url).rstrip("/")
        self.api.user_agent = os.getenv("OPENALEX_USER_AGENT", self.api.user_agent)

        if os.getenv("OPENALEX_TIMEOUT"):
            self.api.timeout = int(os.getenv("OPENALEX_TIMEOUT"))
        if os.getenv("OPENALEX_MAX_RETRIES"):
            self.api.max_retries = int(os.getenv("OPENALEX_MAX_RETRIES"))
        if os.getenv("OPENALEX_PER_PAGE"):
            self.api.per_page = int(os.getenv("OPENALEX_PER_PAGE"))

        self.logging.level = os.getenv("LOG_LEVEL", self.logging.level).upper()
        self.logging.log_file = os.getenv("LOG_FILE", self.logging.log_file)


# Global config instance
config = Config()

"""FieldFlowPM configuration management.

Loads configuration from environment variables with sensible defaults.
Every setting has a development-friendly default; production deployments
are validated for insecure combinations at load time.
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field

from dotenv import load_dotenv

# Load .env file if present
load_dotenv()

DEFAULT_ADMIN_PASSWORD = "admin123"
DEFAULT_CLIENT_PASSWORD = "client123"


def _env_bool(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    return raw.strip().lower() in {"1", "true", "yes", "on"}


@dataclass
class SessionConfig:
    """Session lifetime and cookie transport settings."""

    ttl_hours: int = 24
    cookie_name: str = "sessionId"
    cookie_secure: bool = False
    backend: str = "memory"  # memory or redis
    redis_url: str = "redis://localhost:6379/0"

    @property
    def ttl_seconds(self) -> int:
        return self.ttl_hours * 3600


@dataclass
class SecurityConfig:
    """Credential hashing settings."""

    bcrypt_rounds: int = 12


@dataclass
class SeedConfig:
    """Demo data loaded into the in-memory store at startup."""

    enabled: bool = True
    admin_password: str = DEFAULT_ADMIN_PASSWORD
    client_password: str = DEFAULT_CLIENT_PASSWORD


@dataclass
class AppConfig:
    """Root application configuration."""

    environment: str = "development"
    log_level: str = "INFO"
    log_format: str = "console"  # console or json
    enable_metrics: bool = True

    session: SessionConfig = field(default_factory=SessionConfig)
    security: SecurityConfig = field(default_factory=SecurityConfig)
    seed: SeedConfig = field(default_factory=SeedConfig)

    @property
    def is_production(self) -> bool:
        return self.environment.lower() == "production"

    @classmethod
    def from_env(cls) -> AppConfig:
        """Load configuration from environment variables.

        Optional (with defaults):
        - ENVIRONMENT: deployment environment (default: "development")
        - LOG_LEVEL / LOG_FORMAT: logging verbosity and renderer
        - SESSION_*: session lifetime, cookie name/flags and backend
        - SEED_*: demo data toggle and seeded passwords

        Raises:
            KeyError: If production is configured with the default demo
                admin password.
        """
        environment = os.getenv("ENVIRONMENT", "development")
        production = environment.lower() == "production"

        seed = SeedConfig(
            enabled=_env_bool("SEED_DEMO_DATA", True),
            admin_password=os.getenv("SEED_ADMIN_PASSWORD", DEFAULT_ADMIN_PASSWORD),
            client_password=os.getenv("SEED_CLIENT_PASSWORD", DEFAULT_CLIENT_PASSWORD),
        )
        if production and seed.enabled and seed.admin_password == DEFAULT_ADMIN_PASSWORD:
            raise KeyError(
                "SEED_ADMIN_PASSWORD must be set (or SEED_DEMO_DATA disabled) in production."
            )

        return cls(
            environment=environment,
            log_level=os.getenv("LOG_LEVEL", "INFO"),
            log_format=os.getenv("LOG_FORMAT", "json" if production else "console"),
            enable_metrics=_env_bool("ENABLE_METRICS", True),
            session=SessionConfig(
                ttl_hours=int(os.getenv("SESSION_TTL_HOURS", "24")),
                cookie_name=os.getenv("SESSION_COOKIE_NAME", "sessionId"),
                cookie_secure=_env_bool("SESSION_COOKIE_SECURE", production),
                backend=os.getenv("SESSION_BACKEND", "memory").lower(),
                redis_url=os.getenv("REDIS_URL", "redis://localhost:6379/0"),
            ),
            security=SecurityConfig(
                bcrypt_rounds=int(os.getenv("BCRYPT_ROUNDS", "12")),
            ),
            seed=seed,
        )


# Singleton instance (lazy-loaded)
_config: AppConfig | None = None


def get_config() -> AppConfig:
    """Get or create singleton AppConfig instance from environment.

    Returns:
        AppConfig: Application configuration
    """
    global _config
    if _config is None:
        _config = AppConfig.from_env()
    return _config

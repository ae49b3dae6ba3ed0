"""Configuration system for the payroll service."""
from __future__ import annotations

from dataclasses import dataclass
from functools import lru_cache
import os
from pathlib import Path

from dotenv import load_dotenv

# Load .env file from project root
env_path = Path(__file__).parent.parent.parent / ".env"
load_dotenv(dotenv_path=env_path)

_FALSE_VALUES = {"0", "false", "False", "no", ""}


@dataclass(slots=True)
class DatabaseSettings:
    """Connection details for the payroll database."""

    driver: str
    host: str
    port: int
    user: str
    password: str
    name: str
    url_override: str | None = None

    @property
    def sqlalchemy_url(self) -> str:
        """Build a SQLAlchemy compatible URL."""

        if self.url_override:
            return self.url_override
        if self.password:
            credentials = f"{self.user}:{self.password}"
        else:
            credentials = self.user
        return f"{self.driver}://{credentials}@{self.host}:{self.port}/{self.name}"


@dataclass(slots=True)
class AuthSettings:
    """Bearer token verification settings."""

    secret_key: str
    algorithm: str
    access_token_expire_minutes: int
    enabled: bool = True


@dataclass(slots=True)
class MailSettings:
    """SMTP transport used for payroll notifications."""

    host: str
    port: int
    username: str | None
    password: str | None
    use_tls: bool
    sender: str
    timeout: float = 10.0


@dataclass(slots=True)
class NotificationSettings:
    """Message composition and retry policy."""

    institution: str = "ERP System"
    max_attempts: int = 0


@dataclass(slots=True)
class Settings:
    """Top-level application configuration container."""

    database: DatabaseSettings
    auth: AuthSettings
    mail: MailSettings
    notifications: NotificationSettings
    sqlalchemy_echo: bool = False
    log_level: str = "INFO"
    log_dir: str | None = "logs"

    @classmethod
    def from_env(cls) -> "Settings":
        """Load configuration values from environment variables."""

        def _get_env(name: str, default: str) -> str:
            return os.getenv(name, default)

        def _get_flag(name: str, default: str) -> bool:
            return _get_env(name, default) not in _FALSE_VALUES

        db = DatabaseSettings(
            driver=_get_env("DB_DRIVER", "mysql+pymysql"),
            host=_get_env("DB_HOST", "127.0.0.1"),
            port=int(_get_env("DB_PORT", "3306")),
            user=_get_env("DB_USER", "payroll"),
            password=_get_env("DB_PASSWORD", "payroll"),
            name=_get_env("DB_NAME", "payroll"),
            url_override=os.getenv("DATABASE_URL") or None,
        )
        auth = AuthSettings(
            secret_key=_get_env("JWT_SECRET_KEY", "change-me"),
            algorithm=_get_env("JWT_ALGORITHM", "HS256"),
            access_token_expire_minutes=int(_get_env("JWT_EXPIRE_MINUTES", "120")),
            enabled=_get_flag("AUTH_ENABLED", "1"),
        )
        mail = MailSettings(
            host=_get_env("SMTP_HOST", "localhost"),
            port=int(_get_env("SMTP_PORT", "587")),
            username=os.getenv("SMTP_USERNAME") or None,
            password=os.getenv("SMTP_PASSWORD") or None,
            use_tls=_get_flag("SMTP_USE_TLS", "1"),
            sender=_get_env("MAIL_FROM", "payroll@localhost"),
            timeout=float(_get_env("SMTP_TIMEOUT", "10")),
        )
        max_attempts = int(_get_env("NOTIFY_MAX_ATTEMPTS", "0"))
        if max_attempts < 0:
            raise ValueError("NOTIFY_MAX_ATTEMPTS must be zero (unbounded) or positive.")
        notifications = NotificationSettings(
            institution=_get_env("PAYROLL_INSTITUTION", "ERP System"),
            max_attempts=max_attempts,
        )
        return cls(
            database=db,
            auth=auth,
            mail=mail,
            notifications=notifications,
            sqlalchemy_echo=_get_flag("SQLALCHEMY_ECHO", "0"),
            log_level=_get_env("LOG_LEVEL", "INFO"),
            log_dir=os.getenv("LOG_DIR", "logs") or None,
        )


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Return a cached ``Settings`` instance."""

    settings = Settings.from_env()

    # Import locally to avoid circular dependencies during module import time.
    from .logger import get_logger

    logger = get_logger(__name__)
    logger.debug(
        "Settings initialised",
        extra={
            "sqlalchemy_echo": settings.sqlalchemy_echo,
            "database": {
                "driver": settings.database.driver,
                "host": settings.database.host,
                "port": settings.database.port,
                "name": settings.database.name,
                "user": settings.database.user,
                "url_override": bool(settings.database.url_override),
            },
            "mail": {
                "host": settings.mail.host,
                "port": settings.mail.port,
                "use_tls": settings.mail.use_tls,
            },
            "notifications": {
                "institution": settings.notifications.institution,
                "max_attempts": settings.notifications.max_attempts,
            },
        },
    )
    return settings

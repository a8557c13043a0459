"""Request logger configuration.

Two layers:
- RequestLogConfig: immutable options handed to the middleware once at
  construction time
- Settings: environment-driven application settings that can build a
  RequestLogConfig for the bundled application
"""

from collections.abc import Callable, Iterable
from functools import lru_cache
from typing import Annotated, Any

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator
from pydantic_settings import BaseSettings, NoDecode, SettingsConfigDict
from starlette.requests import Request

from request_logger.infrastructure.constants import (
    DEFAULT_USERNAME_KEY,
    RESERVED_FIELD_NAMES,
    Headers,
)


SkipPredicate = Callable[[Request], bool]

_BOOLEAN_WORDS = {
    "true": True,
    "yes": True,
    "on": True,
    "1": True,
    "false": False,
    "no": False,
    "off": False,
    "0": False,
}


def _split_names(v: Any) -> list[str]:
    if v is None:
        return []
    if isinstance(v, str):
        return [name.strip() for name in v.split(",") if name.strip()]
    return [str(name) for name in v]


def _unique_names(names: Iterable[str], lower: bool) -> tuple[str, ...]:
    result: list[str] = []
    for raw in names:
        name = raw.strip()
        if not name:
            raise ValueError("Names must not be blank")
        if lower:
            name = name.lower()
        if name not in result:
            result.append(name)
    return tuple(result)


def skip_paths(*paths: str) -> SkipPredicate:
    """Build a skip predicate matching exact request paths.

    Example:
        >>> config = RequestLogConfig(skip=skip_paths("/private", "/health"))
    """
    excluded = frozenset(paths)

    def predicate(request: Request) -> bool:
        return request.url.path in excluded

    return predicate


class RequestLogConfig(BaseModel):
    """Options of the request logging middleware.

    Every toggle defaults to disabled. Header names are matched
    case-insensitively and logged under their lower-case form.
    """

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True, extra="forbid")

    skip: SkipPredicate | None = Field(
        default=None,
        description="Predicate over the request; when it returns True the request is not logged",
    )
    logger: Any | None = Field(
        default=None,
        description="structlog-compatible logger receiving the records (default: module logger)",
    )
    log_host: bool = Field(default=False, description="Log the resolved host name")
    log_user_agent: bool = Field(default=False, description="Log the User-Agent header")
    log_forwarded_for: bool = Field(
        default=False,
        description="Log X-Forwarded-For, falling back to the remote address",
    )
    log_username: str | None = Field(
        default=None,
        description="Request state attribute logged as username (True means 'username')",
    )
    tag_request_headers: tuple[str, ...] = Field(
        default=(), description="Request headers logged verbatim when present"
    )
    tag_response_headers: tuple[str, ...] = Field(
        default=(), description="Response headers logged verbatim when present"
    )
    tags: tuple[str, ...] = Field(
        default=(), description="Request state attributes logged with their native type"
    )
    request_id_header: str = Field(
        default=Headers.REQUEST_ID, description="Header carrying the correlation id"
    )

    @field_validator("log_username", mode="before")
    @classmethod
    def parse_log_username(cls, v: Any) -> str | None:
        """Accept a state attribute name or a boolean switch.

        Boolean words coming from the environment (``true``, ``false``, ...)
        are treated like the matching boolean.
        """
        if isinstance(v, str):
            v = _BOOLEAN_WORDS.get(v.strip().lower(), v)
        if v is True:
            return DEFAULT_USERNAME_KEY
        if v is None or v is False:
            return None
        name = str(v).strip()
        return name or None

    @field_validator("tag_request_headers", "tag_response_headers", mode="before")
    @classmethod
    def normalize_header_names(cls, v: Any) -> tuple[str, ...]:
        """Lower-case, de-duplicate and validate header names."""
        if isinstance(v, str):
            v = v.split(",")
        return _unique_names(v or (), lower=True)

    @field_validator("tags", mode="before")
    @classmethod
    def normalize_tags(cls, v: Any) -> tuple[str, ...]:
        """De-duplicate and validate tag names."""
        if isinstance(v, str):
            v = v.split(",")
        return _unique_names(v or (), lower=False)

    @field_validator("request_id_header")
    @classmethod
    def validate_request_id_header(cls, v: str) -> str:
        """Reject a blank correlation id header name."""
        v = v.strip()
        if not v:
            raise ValueError("request_id_header must not be blank")
        return v

    @model_validator(mode="after")
    def validate_field_names(self) -> "RequestLogConfig":
        """Reject tag and header names that would overwrite another record field."""
        seen: dict[str, str] = {}
        for option in ("tag_request_headers", "tag_response_headers", "tags"):
            for name in getattr(self, option):
                if name in RESERVED_FIELD_NAMES:
                    raise ValueError(f"{option}: '{name}' is a reserved record field")
                if name in seen:
                    raise ValueError(
                        f"{option}: '{name}' is already logged by {seen[name]}"
                    )
                seen[name] = option
        return self


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
        populate_by_name=True,
    )

    # Application
    app_name: str = Field(default="request-logger", alias="APP_NAME")
    app_version: str = Field(default="0.1.0", alias="APP_VERSION")
    app_env: str = Field(default="development", alias="APP_ENV")
    log_level: str = Field(default="INFO", alias="LOG_LEVEL")

    # Server
    host: str = Field(default="0.0.0.0", alias="HOST")
    port: int = Field(default=3000, alias="PORT")

    # Request logging
    request_log_host: bool = Field(default=False, alias="REQUEST_LOG_HOST")
    request_log_user_agent: bool = Field(default=False, alias="REQUEST_LOG_USER_AGENT")
    request_log_forwarded_for: bool = Field(default=False, alias="REQUEST_LOG_FORWARDED_FOR")
    request_log_username: str | None = Field(default=None, alias="REQUEST_LOG_USERNAME")
    request_log_request_headers: Annotated[list[str], NoDecode] = Field(
        default_factory=list, alias="REQUEST_LOG_REQUEST_HEADERS"
    )
    request_log_response_headers: Annotated[list[str], NoDecode] = Field(
        default_factory=list, alias="REQUEST_LOG_RESPONSE_HEADERS"
    )
    request_log_tags: Annotated[list[str], NoDecode] = Field(
        default_factory=list, alias="REQUEST_LOG_TAGS"
    )
    request_log_skip_paths: Annotated[list[str], NoDecode] = Field(
        default_factory=list, alias="REQUEST_LOG_SKIP_PATHS"
    )
    request_id_header: str = Field(default=Headers.REQUEST_ID, alias="REQUEST_ID_HEADER")

    @field_validator(
        "request_log_request_headers",
        "request_log_response_headers",
        "request_log_tags",
        "request_log_skip_paths",
        mode="before",
    )
    @classmethod
    def parse_name_list(cls, v: Any) -> list[str]:
        """Parse comma-separated names from string or list."""
        return _split_names(v)

    @property
    def is_development(self) -> bool:
        """Check if running in development environment."""
        return self.app_env.lower() == "development"

    def request_log_config(self, logger: Any | None = None) -> RequestLogConfig:
        """Build the middleware options from these settings.

        Args:
            logger: Optional sink overriding the default module logger

        Returns:
            Immutable middleware configuration
        """
        return RequestLogConfig(
            skip=skip_paths(*self.request_log_skip_paths) if self.request_log_skip_paths else None,
            logger=logger,
            log_host=self.request_log_host,
            log_user_agent=self.request_log_user_agent,
            log_forwarded_for=self.request_log_forwarded_for,
            log_username=self.request_log_username,
            tag_request_headers=tuple(self.request_log_request_headers),
            tag_response_headers=tuple(self.request_log_response_headers),
            tags=tuple(self.request_log_tags),
            request_id_header=self.request_id_header,
        )


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()

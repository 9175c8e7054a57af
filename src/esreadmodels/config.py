"""
Connection configuration for the Elasticsearch client.

Values default to environment variables so deployments can configure the
client without code changes:

    ES_URL               Elasticsearch URL (default http://localhost:9200)
    ES_USERNAME          HTTP basic auth user (optional)
    ES_PASSWORD          HTTP basic auth password (optional)
    ES_API_KEY           API key, takes precedence over basic auth (optional)
    ES_VERIFY_CERTS      "true"/"false" (default true)
    ES_REQUEST_TIMEOUT   Request timeout in seconds (default 30)
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field

from esreadmodels.exceptions import ConfigurationError


def _env_bool(name: str, default: str) -> bool:
    return os.getenv(name, default).strip().lower() in ("1", "true", "yes", "on")


@dataclass(frozen=True)
class ElasticsearchConfig:
    """
    Elasticsearch connection settings.

    Attributes:
        url: Elasticsearch server URL (e.g. http://localhost:9200)
        username: HTTP basic auth user name (optional)
        password: HTTP basic auth password (optional)
        api_key: API key; used instead of basic auth when set
        verify_certs: Whether TLS certificates are verified
        request_timeout: Per-request timeout in seconds

    Example:
        >>> config = ElasticsearchConfig(url="http://search:9200", request_timeout=10.0)
        >>> client = create_client(config)
    """

    url: str = field(default_factory=lambda: os.getenv("ES_URL", "http://localhost:9200"))
    username: str | None = field(default_factory=lambda: os.getenv("ES_USERNAME"))
    password: str | None = field(default_factory=lambda: os.getenv("ES_PASSWORD"))
    api_key: str | None = field(default_factory=lambda: os.getenv("ES_API_KEY"))
    verify_certs: bool = field(default_factory=lambda: _env_bool("ES_VERIFY_CERTS", "true"))
    request_timeout: float = field(
        default_factory=lambda: float(os.getenv("ES_REQUEST_TIMEOUT", "30"))
    )

    def __post_init__(self) -> None:
        """Validate configuration values."""
        if not self.url:
            raise ConfigurationError("url must not be empty. Set ES_URL or pass url explicitly.")

        if self.request_timeout <= 0:
            raise ConfigurationError(
                f"request_timeout must be positive, got {self.request_timeout}."
            )

        if bool(self.username) != bool(self.password):
            raise ConfigurationError(
                "username and password must be given together for basic auth."
            )

    @property
    def uses_api_key(self) -> bool:
        return bool(self.api_key)

    @property
    def uses_basic_auth(self) -> bool:
        return not self.uses_api_key and bool(self.username)

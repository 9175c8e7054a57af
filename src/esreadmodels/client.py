"""Elasticsearch client factory."""

from __future__ import annotations

import logging

from elastic_transport import TransportError
from elasticsearch import AsyncElasticsearch

from esreadmodels.config import ElasticsearchConfig

logger = logging.getLogger(__name__)


def create_client(config: ElasticsearchConfig | None = None) -> AsyncElasticsearch:
    """
    Create an async Elasticsearch client.

    Args:
        config: Connection settings. Defaults to ``ElasticsearchConfig()``,
            which reads the ES_* environment variables.

    Returns:
        AsyncElasticsearch client instance. The caller owns it and should
        ``await client.close()`` on shutdown.
    """
    if config is None:
        config = ElasticsearchConfig()

    if config.uses_api_key:
        return AsyncElasticsearch(
            hosts=[config.url],
            api_key=config.api_key,
            verify_certs=config.verify_certs,
            request_timeout=config.request_timeout,
        )

    if config.uses_basic_auth:
        return AsyncElasticsearch(
            hosts=[config.url],
            basic_auth=(config.username, config.password),  # type: ignore[arg-type]
            verify_certs=config.verify_certs,
            request_timeout=config.request_timeout,
        )

    # No auth (local development)
    return AsyncElasticsearch(
        hosts=[config.url],
        verify_certs=config.verify_certs,
        request_timeout=config.request_timeout,
    )


async def check_connection(client: AsyncElasticsearch) -> bool:
    """
    Check whether the cluster answers a ping.

    Returns:
        True if the ping succeeded, False on any transport failure.
    """
    try:
        return bool(await client.ping())
    except TransportError as e:
        logger.warning("Elasticsearch ping failed: %s", e)
        return False

from __future__ import annotations

import logging

from viewtrail.config import Settings
from viewtrail.domain.services.store import EntryStore

logger = logging.getLogger(__name__)


def build_store(settings: Settings) -> EntryStore:
    """Create the store selected by ``STORE_BACKEND``; called once at startup."""
    if settings.store_backend == "memory":
        from viewtrail.infrastructure.database.stores.memory_store import MemoryStore

        logger.warning("Using in-memory store; entries are lost on restart")
        return MemoryStore()
    if settings.store_backend == "postgres":
        from viewtrail.infrastructure.database.postgres_client import PostgresClient, PostgresConfig
        from viewtrail.infrastructure.database.stores.postgres_store import PostgresStore

        config = PostgresConfig.from_env()
        logger.info("Using PostgreSQL store at %s:%s/%s", config.host, config.port, config.database)
        return PostgresStore(PostgresClient(config))

    from viewtrail.infrastructure.database.stores.json_store import JsonFileStore

    logger.info("Using JSON store at %s", settings.database_path)
    return JsonFileStore(settings.database_path)

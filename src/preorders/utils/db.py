"""Schema management for SQL-backed providers.

The in-memory provider needs no schema, so only ``sqlite`` and ``postgresql``
providers are touched.
"""

from protean.domain import Domain
from sqlalchemy import create_engine

from preorders.utils.logging import get_logger

logger = get_logger(__name__)

SQL_PROVIDERS = ("sqlite", "postgresql")


def _sql_providers(domain: Domain):
    for name, provider in domain.providers.items():
        if provider.conn_info["provider"] in SQL_PROVIDERS:
            yield name, provider


def _register_tables(domain: Domain, provider_name: str):
    """Build each DAO once so its table lands in the provider's metadata."""
    records = list(domain.registry.aggregates.values()) + list(domain.registry.entities.values())
    for record in records:
        if record.cls.meta_.provider == provider_name:
            domain.repository_for(record.cls)._dao  # noqa: B018

    # Outbox tables are registered internally by protean
    if provider_name in getattr(domain, "_outbox_repos", {}):
        domain._outbox_repos[provider_name]._dao  # noqa: B018


def setup_db(domain: Domain):
    """Create tables for every SQL provider of ``domain``."""
    with domain.domain_context():
        for name, provider in _sql_providers(domain):
            _register_tables(domain, name)
            provider._metadata.create_all(create_engine(provider.conn_info["database_uri"]))
            logger.info("Schema created", provider=name)


def drop_db(domain: Domain):
    """Drop tables for every SQL provider of ``domain``."""
    with domain.domain_context():
        for name, provider in _sql_providers(domain):
            provider._metadata.drop_all(create_engine(provider.conn_info["database_uri"]))
            logger.info("Schema dropped", provider=name)

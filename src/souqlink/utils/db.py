"""Schema management for the SQL providers behind the souqlink domain.

The in-memory provider used in development and tests has no schema, so
both operations skip it.
"""

from protean.domain import Domain
from sqlalchemy import create_engine

SQL_PROVIDERS = ("sqlite", "postgresql")


def _sql_providers(domain: Domain):
    for provider in domain.providers.values():
        if provider.conn_info["provider"] in SQL_PROVIDERS:
            yield provider, create_engine(provider.conn_info["database_uri"])


def _register_models(domain: Domain, provider) -> None:
    # A repository builds its SQLAlchemy model lazily, on first DAO access
    records = list(domain.registry.aggregates.values()) + list(domain.registry.entities.values())
    for record in records:
        if record.cls.meta_.provider == provider.name:
            domain.repository_for(record.cls)._dao  # noqa: B018


def setup_db(domain: Domain):
    """Create the users, products, orders and order item tables."""
    with domain.domain_context():
        for provider, engine in _sql_providers(domain):
            _register_models(domain, provider)
            provider._metadata.create_all(engine)


def drop_db(domain: Domain):
    with domain.domain_context():
        for provider, engine in _sql_providers(domain):
            provider._metadata.drop_all(engine)

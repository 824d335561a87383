import os

import pytest


@pytest.fixture(scope="session")
def _souqlink_domain(request):
    """Initialize the souqlink domain once per session."""
    os.environ["PROTEAN_ENV"] = request.config.option.env

    from souqlink.domain import souqlink

    souqlink.init()
    return souqlink


@pytest.fixture(scope="session", autouse=True)
def setup_db(_souqlink_domain):
    from souqlink.utils.db import drop_db, setup_db

    setup_db(_souqlink_domain)

    yield

    drop_db(_souqlink_domain)


@pytest.fixture(autouse=True)
def run_around_tests(_souqlink_domain):
    """Push domain context before each test, cleanup after."""
    from souqlink.media import reset_image_store

    ctx = _souqlink_domain.domain_context()
    ctx.push()

    yield

    from protean import current_domain

    for _, provider in current_domain.providers.items():
        provider._data_reset()

    for _, broker in current_domain.brokers.items():
        broker._data_reset()

    current_domain.event_store.store._data_reset()
    reset_image_store()
    ctx.pop()

import os

import pytest

# Test directory name -> marker applied to every test collected under it
LAYER_MARKERS = {
    "domain": "domain",
    "application": "application",
    "bdd": "application",
    "integration": "integration",
}


def pytest_addoption(parser):
    parser.addoption(
        "--env",
        action="store",
        default="test",
        help="Protean config overlay to run the tests against (see domain.toml)",
    )


def pytest_sessionstart(session):
    """Select the config overlay before the domain is imported and keep uploads in memory."""
    os.environ["PROTEAN_ENV"] = session.config.option.env
    os.environ.setdefault("IMAGE_STORE", "fake")


def pytest_collection_modifyitems(config, items):
    for item in items:
        layers = [LAYER_MARKERS[part] for part in item.path.parts if part in LAYER_MARKERS]
        if not layers:
            continue
        item.add_marker(getattr(pytest.mark, layers[-1]))
        if layers[-1] == "integration" and item.get_closest_marker("fast") is None:
            item.add_marker(pytest.mark.slow)

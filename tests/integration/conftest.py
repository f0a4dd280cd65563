"""Integration test fixtures and configuration."""

import pytest

from media_shelf.core.interfaces import IMetadataProvider
from media_shelf.infrastructure import Container


@pytest.fixture
def integration_container(config_manager, fake_provider):
    """Fully wired container with TMDb replaced by the in-memory provider."""
    container = Container(config_manager)
    container.configure_default_services()
    container.register_instance(IMetadataProvider, fake_provider)
    return container

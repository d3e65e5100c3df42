from __future__ import annotations

import pytest

from sensorconsole.core.config import Config, set_core_config
from sensorconsole.modules.protocols.a2ui import set_component_registry


@pytest.fixture(autouse=True)
def _isolated_globals():
    """Fresh config and component registry for every test."""
    set_core_config(Config())
    set_component_registry(None)
    yield
    set_core_config(None)
    set_component_registry(None)

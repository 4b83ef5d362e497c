import pytest

from transact import logging as tlog
from transact.config import get_config


@pytest.fixture(autouse=True)
def _fresh_config_and_log_context():
    """
    Every test sees configuration resolved from its own environment and starts
    with an empty logging context.
    """
    get_config.cache_clear()
    tlog.clear_context()
    yield
    get_config.cache_clear()
    tlog.clear_context()

"""
Common fixtures for all test modules.
"""

import pytest
from dotenv import load_dotenv

from petals_api_client.settings import get_settings

# Load environment variables from .env file
load_dotenv()


@pytest.fixture(autouse=True)
def clear_settings_cache():
    """
    Drops cached settings so each test sees the environment it configures.
    """
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()

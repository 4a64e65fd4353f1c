import pytest

from src.core.config import Settings
from stubs import make_settings


@pytest.fixture
def settings() -> Settings:
    return make_settings()

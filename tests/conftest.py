"""Shared test configuration and fixtures."""

import os

import pytest

# Keep tests independent of the developer's environment / .env
os.environ.setdefault("CLINICALC_LOG_LEVEL", "DEBUG")
os.environ.setdefault("CLINICALC_LOG_FORMAT", "text")
os.environ.setdefault("CLINICALC_WARN_ON_OVERWRITE", "true")

from clinicalc.config import Settings  # noqa: E402
from clinicalc.service import build_default_service  # noqa: E402


@pytest.fixture
def settings():
    return Settings(_env_file=None)


@pytest.fixture
def service(settings):
    return build_default_service(settings)

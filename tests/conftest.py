"""Shared pytest fixtures."""

from pathlib import Path

import pytest

from adaptive_bezier.utils import logging_config


@pytest.fixture(scope="session")
def project_root():
    """Project root directory."""
    return Path(__file__).parent.parent


@pytest.fixture(autouse=True)
def _isolated_logging():
    """Detach handlers and context left behind by setup_logging()."""
    logging_config.reset_logging()
    yield
    logging_config.reset_logging()

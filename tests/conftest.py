"""Shared fixtures for Hyphen Toggle tests."""

import os
from unittest.mock import patch

import pytest

HYPHEN_ENV_VARS = ("HYPHEN_PUBLIC_API_KEY", "HYPHEN_APPLICATION_ID", "HYPHEN_ENVIRONMENT")


@pytest.fixture(autouse=True)
def clean_env():
    """Run every test without HYPHEN_* variables in the environment."""
    env = {k: v for k, v in os.environ.items() if k not in HYPHEN_ENV_VARS}
    with patch.dict(os.environ, env, clear=True):
        yield

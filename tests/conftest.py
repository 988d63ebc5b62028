"""
Shared pytest fixtures for stepdata tests.

This file is automatically loaded by pytest. Fixtures defined here are
available to all test files without explicit imports.
"""

import logging as _logging
import os as _os
import pathlib as _pathlib
import typing as _typing

import pytest as _pytest

import stepdata.parsing.registry as registry

# =============================================================================
# Isolation
# =============================================================================


@_pytest.fixture(autouse=True)
def isolated_environment(
    tmp_path: _pathlib.Path,
    monkeypatch: _pytest.MonkeyPatch,
) -> _typing.Iterator[None]:
    """
    Keep tests away from the developer's real configuration and from
    each other's handler registrations.

    - Clears STEPDATA_* environment variables
    - Points the user config directory at an empty temp directory
    - Runs each test from an empty temp working directory
    - Rebuilds the default handler registry before and after the test
    """
    for key in list(_os.environ):
        if key.startswith("STEPDATA_"):
            monkeypatch.delenv(key)

    user_dir = tmp_path / "user-config"
    user_dir.mkdir()
    monkeypatch.setenv("STEPDATA_CONFIG_DIR", str(user_dir))

    workdir = tmp_path / "work"
    workdir.mkdir()
    monkeypatch.chdir(workdir)

    registry.reset_default_registry()
    yield
    registry.reset_default_registry()

    # configure_logging() attaches handlers to the package logger
    logger = _logging.getLogger("stepdata")
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
    logger.setLevel(_logging.NOTSET)


# =============================================================================
# Sample data
# =============================================================================


@_pytest.fixture
def sample_config() -> dict[str, _typing.Any]:
    """A config collection shaped like a harness environment file."""
    return {
        "api": {
            "base_url": "https://api.example.test",
            "port": 8443,
            "retries": "3",
        },
        "users": [
            {"name": "alice", "roles": ["admin", "dev"]},
            {"name": "bob", "roles": ["dev"]},
        ],
        "flags": '{"beta": true, "regions": ["eu", "us"]}',
        "alias": "config:api.port",
    }


@_pytest.fixture
def sample_state() -> dict[str, _typing.Any]:
    """A state collection shaped like per-scenario world state."""
    return {
        "response": {
            "status": 201,
            "body": '{"id": 42, "items": [{"sku": "A-1"}, {"sku": "B-2"}]}',
        },
        "token": "abc123",
    }

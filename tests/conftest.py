from __future__ import annotations

import logging
from pathlib import Path
from typing import Iterator

import pytest

from tests._fixtures.registry_builder import RegistryBuilder


@pytest.fixture
def registry_builder(tmp_path: Path) -> RegistryBuilder:
    """Provide a reusable local registry rooted at the pytest tmp_path."""
    return RegistryBuilder(tmp_path)


@pytest.fixture
def project_root(tmp_path: Path) -> Path:
    """Empty target project directory."""
    root = tmp_path / "project"
    root.mkdir()
    return root


@pytest.fixture(autouse=True)
def _reset_registrykit_logger() -> Iterator[None]:
    """Drop handlers installed by configure_logging so they never outlive a test."""
    yield
    logger = logging.getLogger("registrykit")
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()
    logger.propagate = True
    logger.setLevel(logging.NOTSET)

"""Shared fixtures for CLI tests."""

from __future__ import annotations

from typing import TYPE_CHECKING

import pytest
from typer.testing import CliRunner

from kvmodel.cli import app

# Reuse the model types from the main conftest
from tests.conftest import Widget

if TYPE_CHECKING:
    from click.testing import Result


@pytest.fixture
def runner():
    """Create a CLI test runner."""
    return CliRunner()


@pytest.fixture
def seeded_store(store):
    """Two widgets in the store the CLI reads from."""
    Widget.create(name="bolt", count=3)
    Widget.create(name="nut")
    return store


def invoke(runner: CliRunner, args: list[str]) -> "Result":
    """Invoke the CLI against the store configured by the test fixtures."""
    return runner.invoke(app, args, catch_exceptions=False)

"""Tests for kvmodel info."""

import json

from kvmodel.cli import app
from tests.cli.conftest import invoke
from tests.conftest import Widget


def test_info(runner, seeded_store):
    result = invoke(runner, ["info", "widget"])
    assert result.exit_code == 0
    assert "kvmodel_test:widget_id_seq" in result.stdout


def test_info_json(runner, seeded_store):
    result = invoke(runner, ["--json", "info", "widget"])
    assert result.exit_code == 0
    assert json.loads(result.stdout) == {
        "namespace": "kvmodel_test:widget",
        "index_key": "kvmodel_test:widget:all",
        "sequence_key": "kvmodel_test:widget_id_seq",
        "records": 2,
        "last_id": 2,
    }


def test_info_counts_live_records(runner, seeded_store):
    Widget.find(1).destroy()
    data = json.loads(invoke(runner, ["--json", "info", "widget"]).stdout)
    assert data["records"] == 1
    assert data["last_id"] == 2


def test_info_empty_type(runner, store):
    data = json.loads(invoke(runner, ["--json", "info", "gizmo"]).stdout)
    assert data["records"] == 0
    assert data["last_id"] == 0


def test_no_command_prints_help(runner):
    result = invoke(runner, [])
    assert "Usage" in result.output


def test_bad_redis_url(runner):
    result = runner.invoke(app, ["--redis-url", "bogus://x", "ids", "widget"])
    assert result.exit_code != 0


def test_version(runner):
    result = invoke(runner, ["--version"])
    assert result.exit_code == 0
    assert "kvmodel 0.1.0" in result.stdout

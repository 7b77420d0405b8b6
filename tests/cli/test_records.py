"""Tests for kvmodel ids and show."""

import json
import pickle

from tests.cli.conftest import invoke
from tests.conftest import Widget


def test_ids(runner, seeded_store):
    result = invoke(runner, ["ids", "widget"])
    assert result.exit_code == 0
    assert result.stdout.split() == ["1", "2"]


def test_ids_json(runner, seeded_store):
    result = invoke(runner, ["--json", "ids", "widget"])
    assert result.exit_code == 0
    assert json.loads(result.stdout) == [1, 2]


def test_ids_unknown_type(runner, seeded_store):
    result = invoke(runner, ["--json", "ids", "gizmo"])
    assert result.exit_code == 0
    assert json.loads(result.stdout) == []


def test_ids_other_namespace(runner, seeded_store):
    result = invoke(runner, ["--json", "--namespace", "elsewhere", "ids", "widget"])
    assert result.exit_code == 0
    assert json.loads(result.stdout) == []


def test_show(runner, seeded_store):
    result = invoke(runner, ["show", "widget", "1"])
    assert result.exit_code == 0
    assert "bolt" in result.stdout
    assert "count" in result.stdout


def test_show_json(runner, seeded_store):
    result = invoke(runner, ["--json", "show", "widget", "1"])
    assert result.exit_code == 0
    assert json.loads(result.stdout) == {"count": 3, "name": "bolt"}


def test_show_formats(runner, seeded_store):
    seeded_store.hset("kvmodel_test:widget:1", "legacy", pickle.dumps("old", protocol=2))
    result = invoke(runner, ["--json", "show", "widget", "1", "--formats"])
    assert result.exit_code == 0
    data = json.loads(result.stdout)
    assert data["name"] == {"format": "msgpack", "value": "bolt"}
    assert data["legacy"] == {"format": "pickle", "value": "old"}


def test_show_default_only_record(runner, store):
    Widget.create()
    result = invoke(runner, ["--json", "show", "widget", "1"])
    assert result.exit_code == 0
    assert json.loads(result.stdout) == {}


def test_show_missing(runner, seeded_store):
    result = invoke(runner, ["show", "widget", "99"])
    assert result.exit_code == 1
    assert "No record" in result.output


def test_store_error(runner, seeded_store):
    seeded_store.set("kvmodel_test:gizmo:all", "not a set")
    result = invoke(runner, ["ids", "gizmo"])
    assert result.exit_code == 2

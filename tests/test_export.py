from __future__ import annotations

import json

from conftest import CENTRAL, DIST_URL
from depsnap.config import HarvestConfig
from depsnap.export import build_model_to_dict, dump_json
from depsnap.model import MODEL_NAME
from depsnap.plugin import DepsnapPlugin


def _model(build):
    DepsnapPlugin(config=HarvestConfig(ignore_local=True)).apply(build)
    build.evaluate()
    return build.build_model(MODEL_NAME)


def test_model_to_dict(build):
    data = build_model_to_dict(_model(build))

    assert data["gradle"] == {
        "version": "6.8",
        "type": "bin",
        "url": DIST_URL,
        "sha256": "abc123",
        "nativeVersion": "0.22",
    }
    assert data["includedBuilds"] == [{"name": "tools", "projectDir": "../tools"}]

    root = data["rootProject"]
    assert root["projectDir"] == ""
    assert root["projectDependencies"]["repositories"] == {"maven": [{"urls": [CENTRAL]}]}
    assert root["buildscriptDependencies"]["artifacts"][0] == {
        "groupId": "org.gradle",
        "artifactId": "internal",
        "version": "2.0",
        "classifier": "",
        "extension": "jar",
    }
    assert root["children"][0]["children"][0]["path"] == ":app:core"


def test_dump_json(build, tmp_path):
    out = tmp_path / "out" / "model.json"
    model = _model(build)
    dump_json(model, out)
    assert json.loads(out.read_text()) == build_model_to_dict(model)
    assert out.read_text().endswith("\n")


def test_dump_json_stdout(build, capsys):
    dump_json(_model(build))
    assert json.loads(capsys.readouterr().out)["rootProject"]["name"] == "root"

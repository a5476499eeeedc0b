from __future__ import annotations

import json

import pytest
import yaml

from depsnap.config import HarvestConfig
from depsnap.errors import SnapshotError
from depsnap.hosts.snapshot import load_snapshot, snapshot_from_dict
from depsnap.model import MODEL_NAME, ModuleVersion
from depsnap.plugin import DepsnapPlugin


def test_load_yaml(tmp_path, snapshot_data):
    path = tmp_path / "build.yaml"
    path.write_text(yaml.safe_dump(snapshot_data))
    build = load_snapshot(path)
    assert build.root_project.project_dir == tmp_path.resolve()
    assert list(build.root_project.child_projects) == ["app"]
    assert build.wrapper.distribution_sha256_sum == "abc123"


def test_load_json(tmp_path, snapshot_data):
    path = tmp_path / "build.json"
    path.write_text(json.dumps(snapshot_data))
    assert load_snapshot(path).root_project.name == "root"


def test_invalid_yaml(tmp_path):
    path = tmp_path / "broken.yaml"
    path.write_text("project: [unclosed")
    with pytest.raises(SnapshotError):
        load_snapshot(path)


@pytest.mark.parametrize(
    "document",
    [
        {},
        {"project": {"name": "x"}},
        {"project": {"name": "x"}, "gradle": {"version": "6.8", "wrapper": {}}},
        {
            "project": {"name": "x", "configurations": [{"name": "c", "components": [{"id": "bad"}]}]},
            "gradle": {"version": "6.8", "wrapper": {"distributionUrl": "https://x"}},
        },
    ],
)
def test_malformed_documents(tmp_path, document):
    with pytest.raises(SnapshotError):
        snapshot_from_dict(document, tmp_path)


def test_project_links(build):
    core = build.root_project.child_projects["app"].child_projects["core"]
    assert core.root_project is build.root_project
    assert core.gradle is build


def test_descriptor_lookup(build):
    scope = build.root_project
    descriptor = scope.resolve_descriptor(ModuleVersion("junit", "junit", "4.13"))
    assert str(descriptor) == "junit:junit:4.13@pom"
    assert scope.resolve_descriptor(ModuleVersion("not", "here", "1")) is None


def test_plugin_classpath_needs_evaluation(build):
    with pytest.raises(SnapshotError):
        build.plugin_classpath()
    build.evaluate()
    assert build.plugin_classpath().configurations[0].name == "classpath"


def test_lifecycle_order(build):
    events = []
    build.projects_loaded(lambda project: events.append(("projects", project.name)))
    build.settings_evaluated(lambda settings: events.append(("settings", len(settings.plugin_requests))))
    build.evaluate()
    assert events == [("settings", 3), ("projects", "root")]


def test_unknown_model(build):
    build.evaluate()
    with pytest.raises(SnapshotError, match=MODEL_NAME):
        build.build_model(MODEL_NAME)


UNQUOTED_VERSIONS = """\
gradle:
  version: 6.10
  home: dist/gradle-6.8
  wrapper:
    version: 6.10
    distributionUrl: https://services.gradle.org/distributions/gradle-6.10-bin.zip
    sha256: abc123
settings:
  plugins:
    - id: com.example.foo
      version: 1.10
pluginClasspath:
  configurations:
    - name: classpath
      components:
        - id: com.example:foo:1.10
project:
  name: root
  version: 2.0
  buildscript:
    configurations:
      - name: classpath
        components:
          - id: com.example:foo:1.10
"""


def test_unquoted_versions_keep_trailing_zeros(tmp_path, gradle_home):
    path = tmp_path / "build.yaml"
    path.write_text(UNQUOTED_VERSIONS)
    build = load_snapshot(path)
    assert build.gradle_version == "6.10"
    assert build.wrapper.gradle_version == "6.10"
    assert build.settings.plugin_requests[0].version == "1.10"
    assert build.root_project.version == "2.0"

    DepsnapPlugin(config=HarvestConfig()).apply(build)
    build.evaluate()
    model = build.build_model(MODEL_NAME)

    assert model.gradle.version == "6.10"
    assert {(a.name, a.version) for a in model.plugin_dependencies.artifacts} == {
        ("foo", "1.10")
    }
    assert model.root_project.buildscript_dependencies.artifacts == ()


@pytest.mark.parametrize(
    "edit",
    [
        lambda d: d["gradle"].update(version=6.1),
        lambda d: d["gradle"]["wrapper"].update(version=6.1),
        lambda d: d["settings"]["plugins"][0].update(version=1.1),
        lambda d: d["project"].update(version=1.1),
    ],
)
def test_float_versions_rejected(make_build, edit):
    with pytest.raises(SnapshotError, match="quoted"):
        make_build(edit)


def test_missing_file(tmp_path):
    with pytest.raises(SnapshotError, match="Could not read"):
        load_snapshot(tmp_path / "missing.yaml")


def test_undecodable_file(tmp_path):
    path = tmp_path / "build.yaml"
    path.write_bytes(b"project:\n  name: \xff\xfe\x80\n")
    with pytest.raises(SnapshotError, match="Could not read"):
        load_snapshot(path)


def test_duplicate_child_names(make_build):
    def duplicate_app(data):
        children = data["project"]["children"]
        children.append({"name": "app", "version": "2.0"})

    with pytest.raises(SnapshotError, match="Duplicate child project :app"):
        make_build(duplicate_app)

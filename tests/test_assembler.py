from __future__ import annotations

import pytest

from depsnap.assembler import BuildModelProvider
from depsnap.config import HarvestConfig
from depsnap.errors import ConfigurationResolutionError, NativeVersionNotFoundError
from depsnap.model import MODEL_NAME, BuildModel, IncludedBuildRef
from depsnap.plugin import DepsnapPlugin


def _extract(build, config=None) -> BuildModel:
    DepsnapPlugin(config=config or HarvestConfig()).apply(build)
    build.evaluate()
    return build.build_model(MODEL_NAME)


def test_full_model(build):
    model = _extract(build)

    assert model.gradle.native_version == "0.22"
    assert [str(a) for a in model.plugin_dependencies.artifacts] == [
        "com.example:foo:1.0@jar",
        "com.example:foo:1.0@pom",
    ]
    assert model.root_project.name == "root"
    assert [c.name for c in model.root_project.children] == ["app"]
    assert model.included_builds == (IncludedBuildRef("tools", "../tools"),)


def test_provider_answers_only_its_model_name():
    provider = BuildModelProvider(HarvestConfig(), ())
    assert provider.can_build(MODEL_NAME)
    assert not provider.can_build("org.gradle.tooling.model.GradleProject")


def test_plugin_requests_are_captured_before_registration(build):
    plugin = DepsnapPlugin(config=HarvestConfig())
    plugin.apply(build)
    assert plugin.provider is None
    assert build.model_registry.providers == []

    build.evaluate()

    assert [r.id.id for r in plugin.plugin_requests] == ["com.example.foo"]
    assert build.model_registry.providers == [plugin.provider]
    assert plugin.provider.assembler.plugin_requests == plugin.plugin_requests


def test_explicit_configuration_allowlist(build):
    model = _extract(build, HarvestConfig(configurations=("runtime",)))
    app = model.root_project.children[0]
    assert {a.name for a in app.project_dependencies.artifacts} == {"commons-lang3"}
    assert model.root_project.project_dependencies.artifacts == ()


def test_resolution_failure_aborts_extraction(make_build):
    def break_runtime(data):
        data["project"]["configurations"][0]["components"][0]["error"] = "Connection refused"

    with pytest.raises(ConfigurationResolutionError, match="Connection refused"):
        _extract(make_build(break_runtime))


def test_missing_native_platform_aborts_extraction(make_build):
    def drop_home(data):
        del data["gradle"]["home"]

    with pytest.raises(NativeVersionNotFoundError):
        _extract(make_build(drop_home))

from __future__ import annotations

import copy
from pathlib import Path

import pytest

from depsnap.hosts.snapshot import snapshot_from_dict

CENTRAL = "https://repo.maven.apache.org/maven2/"
PLUGIN_PORTAL = "https://plugins.gradle.org/m2/"
DIST_URL = "https://services.gradle.org/distributions/gradle-6.8-bin.zip"


def component(notation: str, *deps: str, **extra) -> dict:
    return {"id": notation, "dependencies": list(deps), **extra}


def repository(name: str, url: str, kind: str = "maven", artifact_urls=()) -> dict:
    return {"name": name, "kind": kind, "url": url, "artifactUrls": list(artifact_urls)}


@pytest.fixture
def gradle_home(tmp_path: Path) -> Path:
    """A fake distribution home with a native-platform jar in lib/."""
    home = tmp_path / "dist" / "gradle-6.8"
    lib = home / "lib"
    lib.mkdir(parents=True)
    for name in (
        "gradle-core-6.8.jar",
        "native-platform-linux-amd64-0.22.jar",
        "native-platform-0.22.jar",
    ):
        (lib / name).touch()
    return home


@pytest.fixture
def snapshot_data(tmp_path: Path, gradle_home: Path) -> dict:
    """A three-level build: root -> app -> core, plus one plugin request."""
    return {
        "gradle": {
            "version": "6.8",
            "home": str(gradle_home.relative_to(tmp_path)),
            "wrapper": {
                "version": "6.8",
                "distributionType": "BIN",
                "distributionUrl": DIST_URL,
                "sha256": "abc123",
            },
        },
        "settings": {
            "plugins": [
                {"id": "com.example.foo", "version": "1.0"},
                {"id": "org.gradle.java-library"},
                {"id": "java"},
            ]
        },
        "pluginClasspath": {
            "repositories": [repository("Gradle Central Plugin Repository", PLUGIN_PORTAL)],
            "configurations": [
                {
                    "name": "classpath",
                    "components": [
                        component("com.example:foo:1.0"),
                        component("org.gradle:internal:2.0"),
                    ],
                }
            ],
        },
        "includedBuilds": [{"name": "tools", "dir": "../tools"}],
        "project": {
            "name": "root",
            "version": "1.0",
            "repositories": [
                repository("MavenRepo", CENTRAL),
                repository("MavenLocal", "file:/home/user/.m2/repository/"),
            ],
            "buildscript": {
                "repositories": [repository("Gradle Central Plugin Repository", PLUGIN_PORTAL)],
                "configurations": [
                    {
                        "name": "classpath",
                        "components": [
                            component("com.example:foo:1.0"),
                            component("org.gradle:internal:2.0"),
                        ],
                    }
                ],
            },
            "configurations": [
                {
                    "name": "runtimeClasspath",
                    "components": [
                        component("org.slf4j:slf4j-api:1.7.30"),
                        component("com.google.guava:guava:30.0-jre", "com.google.guava:failureaccess:1.0.1"),
                        component("com.google.guava:failureaccess:1.0.1"),
                    ],
                },
                {
                    "name": "testRuntimeClasspath",
                    "components": [component("junit:junit:4.13"), component("org.slf4j:slf4j-api:1.7.30")],
                },
                {
                    "name": "implementation",
                    "resolvable": False,
                    "components": [component("org.unused:declared-only:1.0")],
                },
            ],
            "children": [
                {
                    "name": "app",
                    "version": "1.0",
                    "repositories": [repository("MavenRepo", CENTRAL)],
                    "configurations": [
                        {"name": "runtime", "components": [component("org.apache.commons:commons-lang3:3.11")]},
                        {"name": "compileClasspath", "components": [component("javax.inject:javax.inject:1")]},
                    ],
                    "children": [
                        {
                            "name": "core",
                            "version": "1.0",
                            "configurations": [
                                {"name": "runtime", "components": [component("joda-time:joda-time:2.10")]},
                            ],
                        }
                    ],
                }
            ],
        },
    }


@pytest.fixture
def make_build(tmp_path: Path, snapshot_data: dict):
    """Factory: a SnapshotBuild from the default document, optionally edited first."""

    def _make_build(edit=None):
        data = copy.deepcopy(snapshot_data)
        if edit is not None:
            edit(data)
        return snapshot_from_dict(data, tmp_path)

    return _make_build


@pytest.fixture
def build(make_build):
    return make_build()

"""Smoke tests: every module imports and the public API is exported."""

import importlib

import pytest

MODULES = [
    "visual_migrate",
    "visual_migrate.aggregate",
    "visual_migrate.config",
    "visual_migrate.errors",
    "visual_migrate.types",
    "visual_migrate.detector",
    "visual_migrate.detector.anchors",
    "visual_migrate.detector.candidates",
    "visual_migrate.detector.classify",
    "visual_migrate.detector.config_files",
    "visual_migrate.detector.content",
    "visual_migrate.detector.orchestrator",
    "visual_migrate.detector.package_json",
    "visual_migrate.detector.signatures",
    "visual_migrate.detector.jvm",
    "visual_migrate.detector.jvm.artifacts",
    "visual_migrate.detector.jvm.gradle",
    "visual_migrate.detector.jvm.maven",
    "visual_migrate.detector.python",
    "visual_migrate.detector.python.packages",
    "visual_migrate.detector.python.pyproject",
    "visual_migrate.detector.python.requirements",
    "visual_migrate.transform",
    "visual_migrate.transform.base",
    "visual_migrate.transform.edits",
    "visual_migrate.transform.emulation",
    "visual_migrate.transform.engine",
    "visual_migrate.transform.java",
    "visual_migrate.transform.javascript",
    "visual_migrate.transform.python",
    "visual_migrate.transform.robot",
    "visual_migrate.transform.rules",
    "visual_migrate.transform.settings",
    "visual_migrate.transform.syntax",
]


@pytest.mark.parametrize("module", MODULES)
def test_module_imports(module):
    importlib.import_module(module)


def test_public_api():
    import visual_migrate

    for name in visual_migrate.__all__:
        assert hasattr(visual_migrate, name), name
    assert visual_migrate.__version__

"""
fn_chain/tests/conftest.py — Shared pytest fixtures for the fn_chain test suite.

Fixtures:
    make_functions    — Factory: build a function map from {name: [deps]}.
    free_functions    — Four dependency-free functions with pass-through fields.
    backend_dir       — Temp directory with backend-config.json and one
                        template per function.

Author: Jay Gutierrez, PhD
"""

import json
import os

import pytest


def function_item(*targets: str, category: str = "function", **extra) -> dict:
    """A config item depending on each of `targets` in `category`."""
    item = {
        "build": True,
        "providerPlugin": "awscloudformation",
        "service": "Lambda",
    }
    if targets:
        item["dependsOn"] = [
            {"attributes": ["Name"], "category": category, "resourceName": t}
            for t in targets
        ]
    item.update(extra)
    return item


def template_document() -> dict:
    return {
        "AWSTemplateFormatVersion": "2010-09-09",
        "Parameters": {"env": {"Type": "String"}},
        "Resources": {},
    }


@pytest.fixture
def make_functions():
    """Factory fixture: make_functions({'A': ['B'], 'B': []}) → function map."""
    def _make(spec: dict[str, list[str]]) -> dict:
        return {name: function_item(*deps) for name, deps in spec.items()}
    return _make


@pytest.fixture
def free_functions() -> dict:
    return {name: function_item() for name in ["A", "B", "C", "D"]}


@pytest.fixture
def backend_dir(tmp_path):
    """
    A backend directory laid out like the serverless CLI leaves it:

        backend-config.json            {"function": {...}, "api": {...}}
        function/<name>/<name>-cloudformation-template.json

    fetchUser already depends on authLayer; the other three are free.
    """
    functions = {
        "authLayer": function_item(),
        "fetchUser": function_item("authLayer"),
        "sendMail": function_item(
            "uploads", category="storage", environmentMap={"REGION": "eu-west-1"}
        ),
        "resizeImage": function_item(),
    }
    document = {
        "api": {"restApi": {"service": "API Gateway"}},
        "function": functions,
    }
    config_path = tmp_path / "backend-config.json"
    config_path.write_text(json.dumps(document, indent=2), encoding="utf-8")

    for name in functions:
        fn_dir = tmp_path / "function" / name
        fn_dir.mkdir(parents=True)
        (fn_dir / f"{name}-cloudformation-template.json").write_text(
            json.dumps(template_document(), indent=2), encoding="utf-8"
        )

    return tmp_path


def read_json(path) -> dict:
    with open(path, "r", encoding="utf-8") as fh:
        return json.load(fh)


def template_path(root, name: str) -> str:
    return os.path.join(str(root), "function", name, f"{name}-cloudformation-template.json")

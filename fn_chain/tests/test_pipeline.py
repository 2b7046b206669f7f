"""
fn_chain/tests/test_pipeline.py — End-to-end tests for fn_chain.pipeline.

The backend_dir fixture holds four functions in this key order:
    authLayer (free), fetchUser → authLayer, sendMail (storage only), resizeImage (free)

At 100% this gives total_to_serialize = 4 - 1 = 3 and the synthetic chain
authLayer → sendMail → resizeImage, so the full chain is
fetchUser → authLayer → sendMail → resizeImage.
"""

import dataclasses
import json

import pandas as pd
import pytest

from conftest import read_json, template_path
from fn_chain.config import DEFAULT_CONFIG
from fn_chain.graph.model import function_dependencies
from fn_chain.io.backend_config import BackendConfigError
from fn_chain.pipeline import check_backend_config, run_serialization
from fn_chain.serialization.synthesizer import CircularDependencyError


def config_file(root) -> str:
    return str(root / "backend-config.json")


# ── run_serialization ─────────────────────────────────────────────────────────

def test_serialization_end_to_end(backend_dir):
    result = run_serialization(config_file(backend_dir))

    assert result.added_edges == [("authLayer", "sendMail"), ("sendMail", "resizeImage")]
    assert result.metrics.total_to_serialize == 3
    assert result.endpoints.first == "resizeImage"
    assert result.endpoints.last == "fetchUser"
    assert result.written is True

    document = read_json(config_file(backend_dir))
    assert document["api"] == {"restApi": {"service": "API Gateway"}}
    functions = document["function"]
    assert function_dependencies(functions["authLayer"]) == ["sendMail"]
    assert function_dependencies(functions["sendMail"]) == ["resizeImage"]
    assert functions["sendMail"]["environmentMap"] == {"REGION": "eu-west-1"}

    templates = result.template_result
    assert templates.skipped is False
    assert templates.updated == ["authLayer", "fetchUser", "sendMail"]
    params = read_json(template_path(backend_dir, "fetchUser"))["Parameters"]
    assert params["functionauthLayerName"]["Default"] == "functionauthLayerName"


def test_dry_run_writes_nothing(backend_dir):
    before = (backend_dir / "backend-config.json").read_text()
    template_before = read_json(template_path(backend_dir, "authLayer"))

    result = run_serialization(config_file(backend_dir), dry_run=True)

    assert result.added_edges
    assert result.written is False
    assert result.template_result is None
    assert (backend_dir / "backend-config.json").read_text() == before
    assert read_json(template_path(backend_dir, "authLayer")) == template_before


def test_skip_templates(backend_dir):
    result = run_serialization(config_file(backend_dir), update_template_files=False)
    assert result.written is True
    assert result.template_result is None


def test_missing_template_keeps_written_config(backend_dir):
    (backend_dir / "function" / "sendMail" / "sendMail-cloudformation-template.json").unlink()

    result = run_serialization(config_file(backend_dir))

    assert result.written is True
    assert result.template_result.skipped is True
    assert result.template_result.missing == ["sendMail"]
    params = read_json(template_path(backend_dir, "authLayer"))["Parameters"]
    assert "functionsendMailName" not in params


def test_custom_function_root(backend_dir, tmp_path_factory):
    other_root = tmp_path_factory.mktemp("elsewhere")
    result = run_serialization(config_file(backend_dir), function_root=str(other_root))
    assert result.template_result.skipped is True
    assert len(result.template_result.missing) == 4


def test_attribute_label_flows_to_templates(backend_dir):
    config = dataclasses.replace(DEFAULT_CONFIG, attribute="Arn")
    run_serialization(config_file(backend_dir), config=config)
    params = read_json(template_path(backend_dir, "authLayer"))["Parameters"]
    assert "functionsendMailArn" in params


def test_cycle_aborts_before_writing(backend_dir):
    path = backend_dir / "backend-config.json"
    document = json.loads(path.read_text())
    document["function"]["authLayer"]["dependsOn"] = [
        {"category": "function", "resourceName": "fetchUser", "attributes": ["Name"]}
    ]
    path.write_text(json.dumps(document))
    before = path.read_text()

    with pytest.raises(CircularDependencyError) as excinfo:
        run_serialization(str(path))

    assert excinfo.value.path == ["authLayer", "fetchUser", "authLayer"]
    assert path.read_text() == before


def test_bad_input_raises(tmp_path):
    with pytest.raises(BackendConfigError):
        run_serialization(str(tmp_path / "backend-config.json"))


def test_summary_csv_export(backend_dir):
    csv_path = backend_dir / "reports" / "summary.csv"
    result = run_serialization(config_file(backend_dir), dry_run=True, summary_csv=str(csv_path))
    exported = pd.read_csv(csv_path)
    assert list(exported["function"]) == list(result.summary["function"])
    assert exported.set_index("function").loc["authLayer", "dependents"] == 1


# ── check_backend_config ──────────────────────────────────────────────────────

def test_check_reports_without_writing(backend_dir):
    before = (backend_dir / "backend-config.json").read_text()
    result = check_backend_config(config_file(backend_dir))
    assert result.cycle is None
    assert result.metrics.dependency_free == 3
    assert result.metrics.current_percentage == pytest.approx(25.0)
    assert result.endpoints.first == "authLayer"
    assert result.endpoints.last == "fetchUser"
    assert result.added_edges == []
    assert (backend_dir / "backend-config.json").read_text() == before


def test_check_reports_cycle(backend_dir):
    path = backend_dir / "backend-config.json"
    document = json.loads(path.read_text())
    document["function"]["authLayer"]["dependsOn"] = [
        {"category": "function", "resourceName": "fetchUser", "attributes": ["Name"]}
    ]
    path.write_text(json.dumps(document))

    result = check_backend_config(str(path))
    assert result.cycle == ["authLayer", "fetchUser", "authLayer"]

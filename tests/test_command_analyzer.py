"""Tests for the external analyzer command adapter."""
import json
import sys

import pytest

from analysis.models import (
    AnalysisRequest,
    ConflictWithSuggestions,
    Fatal,
    Modified,
    Resolved,
    Unavailable,
    outcome_from_dict,
)
from analysis.scanner import AnalyzerError, CommandAnalyzer, SchemaError, validate_outcome
from config.features import FeatureSet


def python_command(script):
    return [sys.executable, "-c", script]


def request(**overrides):
    values = dict(
        existing_features=FeatureSet(["servlet-4.0", "CDI-2.0"]),
        class_files=None,
        class_directories=["/app/classes"],
        log_location="/tmp/logs",
        ee_version="ee8",
        mp_version=None,
    )
    values.update(overrides)
    return AnalysisRequest(**values)


ECHO_FEATURES = (
    "import json, sys\n"
    "req = json.load(sys.stdin)\n"
    "print(json.dumps({'outcome': 'resolved', 'features': req['existingFeatures'] + [req['eeVersion']]}))\n"
)


def test_request_is_sent_as_json():
    payload = request().to_dict()
    assert payload == {
        "existingFeatures": ["CDI-2.0", "servlet-4.0"],
        "classFiles": None,
        "classDirectories": ["/app/classes"],
        "logLocation": "/tmp/logs",
        "eeVersion": "ee8",
        "mpVersion": None,
        "optimize": True,
    }


def test_resolved_round_trip_through_process():
    outcome = CommandAnalyzer(python_command(ECHO_FEATURES)).analyze(request())
    assert isinstance(outcome, Resolved)
    assert outcome.features == FeatureSet(["servlet-4.0", "cdi-2.0", "ee8"])


def test_invalid_json_is_fatal():
    outcome = CommandAnalyzer(python_command("print('not json')")).analyze(request())
    assert isinstance(outcome, Fatal)
    assert isinstance(outcome.cause, ValueError)


def test_schema_violation_is_fatal():
    script = "print('{\"outcome\": \"resolved\", \"features\": [1, 2]}')"
    outcome = CommandAnalyzer(python_command(script)).analyze(request())
    assert isinstance(outcome, Fatal)
    assert isinstance(outcome.cause, SchemaError)


def test_nonzero_exit_reports_stderr():
    script = "import sys\nsys.stderr.write('license missing')\nsys.exit(5)\n"
    outcome = CommandAnalyzer(python_command(script)).analyze(request())
    assert isinstance(outcome, Fatal)
    assert isinstance(outcome.cause, AnalyzerError)
    assert "status 5" in str(outcome.cause)
    assert "license missing" in str(outcome.cause)


def test_missing_executable_is_fatal(tmp_path):
    outcome = CommandAnalyzer([str(tmp_path / "no-such-analyzer")]).analyze(request())
    assert isinstance(outcome, Fatal)
    assert isinstance(outcome.cause, OSError)


def test_timeout_is_fatal():
    outcome = CommandAnalyzer(python_command("import time\ntime.sleep(5)\n"), timeout=0.2).analyze(request())
    assert isinstance(outcome, Fatal)


def test_empty_command_rejected():
    with pytest.raises(ValueError):
        CommandAnalyzer([])


class TestOutcomeParsing:
    def test_recommendation(self):
        outcome = outcome_from_dict({
            "outcome": "recommendation",
            "conflicts": ["jaxrs-2.0", "jaxrs-2.1"],
            "suggestions": ["jaxrs-2.1"],
            "existingFeaturesConflict": True,
        })
        assert isinstance(outcome, ConflictWithSuggestions)
        assert outcome.existing_features_conflict is True
        assert outcome.suggestions == FeatureSet(["jaxrs-2.1"])

    def test_modified_and_unavailable(self):
        modified = outcome_from_dict({"outcome": "modified", "features": ["cdi-2.0"], "message": "changed"})
        assert isinstance(modified, Modified)
        assert modified.message == "changed"
        assert len(modified.suggestions) == 0

        unavailable = outcome_from_dict({
            "outcome": "unavailable",
            "conflicts": ["mpHealth-4.0"],
            "mpLevel": "mp3.3",
            "eeLevel": None,
            "unavailableFeatures": ["mpHealth-4.0"],
        })
        assert isinstance(unavailable, Unavailable)
        assert unavailable.mp_level == "mp3.3"
        assert unavailable.unavailable == FeatureSet(["mpHealth-4.0"])

    def test_fatal(self):
        outcome = outcome_from_dict({"outcome": "fatal", "message": "no license"})
        assert isinstance(outcome, Fatal)
        assert str(outcome.cause) == "no license"

    def test_unknown_tag(self):
        with pytest.raises(ValueError):
            outcome_from_dict({"outcome": "maybe"})

    def test_schema_requires_outcome(self):
        with pytest.raises(SchemaError):
            validate_outcome({"features": []})
        with pytest.raises(SchemaError):
            validate_outcome(json.loads('{"outcome": "bogus"}'))
        validate_outcome({"outcome": "conflict", "conflicts": ["a-1.0"]})

"""Analyzer contract and the external-command adapter.

The analyzer inspects compiled classes and reports the features they need.
``CommandAnalyzer`` runs it as a separate process: the request is written to
stdin as JSON and a single JSON outcome object is read back from stdout.
"""

from __future__ import annotations

import json
import logging
import subprocess
from abc import ABC, abstractmethod
from typing import Any, Dict, List, Optional, Sequence

from jsonschema import Draft7Validator

from common.logging_utils import Timer, extra_context, is_debug_enabled
from .models import AnalysisOutcome, AnalysisRequest, Fatal, outcome_from_dict

logger = logging.getLogger(__name__)

_FEATURE_LIST = {"type": "array", "items": {"type": "string"}}

OUTCOME_SCHEMA: Dict[str, Any] = {
    "$schema": "http://json-schema.org/draft-07/schema#",
    "type": "object",
    "required": ["outcome"],
    "properties": {
        "outcome": {
            "enum": ["resolved", "conflict", "recommendation", "modified", "unavailable", "fatal"],
        },
        "features": _FEATURE_LIST,
        "conflicts": _FEATURE_LIST,
        "suggestions": _FEATURE_LIST,
        "unavailableFeatures": _FEATURE_LIST,
        "existingFeaturesConflict": {"type": "boolean"},
        "mpLevel": {"type": ["string", "null"]},
        "eeLevel": {"type": ["string", "null"]},
        "message": {"type": ["string", "null"]},
    },
}


class SchemaError(ValueError):
    """Raised when the analyzer reply does not match OUTCOME_SCHEMA."""


class AnalyzerError(RuntimeError):
    """Raised when the analyzer process cannot produce an outcome."""


def validate_outcome(data: Any) -> None:
    """Validate an analyzer reply strictly and raise on the first error."""
    validator = Draft7Validator(OUTCOME_SCHEMA)
    errs = sorted(validator.iter_errors(data), key=lambda e: list(e.path))
    if errs:
        first = errs[0]
        path = "/".join([str(p) for p in first.path])
        raise SchemaError(f"Invalid analyzer output at '{path}': {first.message}")


class Analyzer(ABC):
    """Computes the features an application needs."""

    @abstractmethod
    def analyze(self, request: AnalysisRequest) -> AnalysisOutcome:
        """Run the analysis; failures are reported as a Fatal outcome."""


class CommandAnalyzer(Analyzer):
    """Analyzer backed by an external command speaking JSON over stdio."""

    def __init__(self, command: Sequence[str], timeout: Optional[float] = None):
        if not command:
            raise ValueError("analyzer command must not be empty")
        self.command: List[str] = list(command)
        self.timeout = timeout

    def analyze(self, request: AnalysisRequest) -> AnalysisOutcome:
        payload = json.dumps(request.to_dict())
        with Timer() as t:
            try:
                proc = subprocess.run(
                    self.command,
                    input=payload,
                    capture_output=True,
                    text=True,
                    timeout=self.timeout,
                    check=False,
                )
            except (OSError, subprocess.SubprocessError) as exc:
                logger.debug("Analyzer could not be run", exc_info=True)
                return Fatal(exc, f"Could not run the analyzer {self.command[0]}.")

        if is_debug_enabled(logger):
            logger.debug("Analyzer finished", extra=extra_context(
                event="analyzer_exit", component="scanner", action="analyze",
                returncode=proc.returncode, duration_ms=t.duration_ms()
            ))
        for line in (proc.stderr or "").splitlines():
            logger.debug("analyzer: %s", line)

        try:
            data = json.loads(proc.stdout)
            validate_outcome(data)
            return outcome_from_dict(data)
        except (ValueError, TypeError) as exc:
            if proc.returncode != 0:
                exc = AnalyzerError(
                    f"analyzer exited with status {proc.returncode}: {(proc.stderr or '').strip()}"
                )
            logger.debug("Analyzer output could not be used: %s", exc)
            return Fatal(exc, "The analyzer did not return a usable result.")

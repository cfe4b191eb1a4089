"""Analyzer request and outcome models.

An analysis returns exactly one of the outcome variants below; the
interpreter dispatches on the variant type.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Union

from config.features import FeatureSet


@dataclass
class AnalysisRequest:
    """Input handed to the analyzer."""
    existing_features: FeatureSet
    class_files: Optional[List[str]]
    class_directories: List[str]
    log_location: str
    ee_version: Optional[str] = None
    mp_version: Optional[str] = None
    optimize: bool = True

    def to_dict(self) -> Dict[str, Any]:
        return {
            "existingFeatures": self.existing_features.sorted(),
            "classFiles": list(self.class_files) if self.class_files else None,
            "classDirectories": sorted(self.class_directories),
            "logLocation": self.log_location,
            "eeVersion": self.ee_version,
            "mpVersion": self.mp_version,
            "optimize": self.optimize,
        }


@dataclass
class Resolved:
    """A working feature set was found."""
    features: FeatureSet


@dataclass
class Conflict:
    """Conflicting features with no usable recommendation."""
    conflicts: FeatureSet


@dataclass
class ConflictWithSuggestions:
    """Conflicting features plus a suggested working set."""
    conflicts: FeatureSet
    suggestions: FeatureSet
    existing_features_conflict: bool = False


@dataclass
class Modified:
    """The analyzer changed some features to reach a working set."""
    features: FeatureSet
    suggestions: FeatureSet
    message: str = ""


@dataclass
class Unavailable:
    """Features are not available at the resolved platform levels."""
    conflicts: FeatureSet
    mp_level: Optional[str]
    ee_level: Optional[str]
    unavailable: FeatureSet


@dataclass
class Fatal:
    """The analysis failed for a reason other than a feature conflict."""
    cause: BaseException
    message: str = field(default="")


AnalysisOutcome = Union[Resolved, Conflict, ConflictWithSuggestions, Modified, Unavailable, Fatal]


def outcome_from_dict(data: Dict[str, Any]) -> AnalysisOutcome:
    """Build an outcome from the analyzer's JSON reply.

    Raises:
        ValueError: If the ``outcome`` tag is unknown.
    """
    kind = data.get("outcome")

    def features(key: str) -> FeatureSet:
        return FeatureSet(data.get(key) or [])

    if kind == "resolved":
        return Resolved(features("features"))
    if kind == "conflict":
        return Conflict(features("conflicts"))
    if kind == "recommendation":
        return ConflictWithSuggestions(
            features("conflicts"),
            features("suggestions"),
            bool(data.get("existingFeaturesConflict", False)),
        )
    if kind == "modified":
        return Modified(features("features"), features("suggestions"), data.get("message") or "")
    if kind == "unavailable":
        return Unavailable(
            features("conflicts"),
            data.get("mpLevel"),
            data.get("eeLevel"),
            features("unavailableFeatures"),
        )
    if kind == "fatal":
        message = data.get("message") or "analyzer reported an error"
        return Fatal(RuntimeError(message), message)
    raise ValueError(f"Unknown analysis outcome: {kind!r}")

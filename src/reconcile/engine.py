"""Decide what the generated features file must contain.

The engine subtracts the user's declared features from the scanned ones and
compares the result with the previous generated file, so that repeated runs
on an unchanged application leave the file untouched.
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field
from enum import Enum

from common.logging_utils import extra_context, is_debug_enabled
from config.features import FeatureSet
from .collector import FeatureCollector

logger = logging.getLogger(__name__)


class PlanAction(Enum):
    """What the writer has to do with the generated file."""

    WRITE = "write"  # replace the file with the missing features
    CLEAR = "clear"  # rewrite an existing file as an empty placeholder
    REGENERATED = "regenerated"  # file already holds exactly the missing features
    NONE = "none"  # nothing missing and no file to clear


@dataclass
class ReconciliationPlan:
    action: PlanAction
    artifact_path: str
    features: FeatureSet = field(default_factory=FeatureSet)


def missing_features(scanned: FeatureSet, user_defined: FeatureSet) -> FeatureSet:
    """Scanned features the user has not declared."""
    return scanned.difference(user_defined)


class ReconciliationEngine:
    """Computes the reconciliation plan for one server configuration."""

    def __init__(self, collector: FeatureCollector):
        self.collector = collector

    def user_defined_features(self, existing_features: FeatureSet, optimize: bool) -> FeatureSet:
        """Features declared by the user, never counting the generated file."""
        if optimize:
            return existing_features
        return self.collector.collect(exclude_generated=True)

    def reconcile(self, scanned: FeatureSet, existing_features: FeatureSet, optimize: bool) -> ReconciliationPlan:
        artifact_path = self.collector.generated_file
        user_defined = self.user_defined_features(existing_features, optimize)
        logger.debug("User defined features: %s", user_defined)

        missing = missing_features(scanned, user_defined)
        logger.debug("Features detected by the analyzer which are not in server.xml: %s", missing)

        if not missing:
            action = PlanAction.CLEAR if os.path.exists(artifact_path) else PlanAction.NONE
            return ReconciliationPlan(action, artifact_path)

        previous = self.collector.generated_features()
        if is_debug_enabled(logger):
            logger.debug("Compared with previous generated features", extra=extra_context(
                event="decision", component="engine", action="reconcile",
                previous=str(previous), missing=str(missing)
            ))
        if missing == previous:
            return ReconciliationPlan(PlanAction.REGENERATED, artifact_path, missing)
        return ReconciliationPlan(PlanAction.WRITE, artifact_path, missing)

"""Turn an analysis outcome into the scanned feature set or a terminal error."""

from __future__ import annotations

import logging
from typing import Callable

from config.features import FeatureSet
from .errors import FeatureGenerationError
from .models import (
    AnalysisOutcome,
    Conflict,
    ConflictWithSuggestions,
    Fatal,
    Modified,
    Resolved,
    Unavailable,
)

logger = logging.getLogger(__name__)


def interpret_outcome(
    outcome: AnalysisOutcome,
    optimize: bool,
    existing_features: FeatureSet,
    recompute: Callable[[], FeatureSet],
) -> FeatureSet:
    """Return the scanned features for a successful analysis.

    Args:
        outcome: Result of the analyzer call.
        optimize: Whether the request was made in optimize mode.
        existing_features: Features collected for the request.
        recompute: Re-reads the user's declared features; used for a
            Modified outcome outside optimize mode.

    Raises:
        FeatureGenerationError: For every outcome other than Resolved, and for
            a Modified outcome that changed user-declared features.
    """
    if isinstance(outcome, Resolved):
        return outcome.features

    if isinstance(outcome, Conflict):
        raise FeatureGenerationError.conflict(outcome.conflicts)

    if isinstance(outcome, ConflictWithSuggestions):
        if outcome.existing_features_conflict:
            raise FeatureGenerationError.conflict_existing(outcome.conflicts, outcome.suggestions)
        raise FeatureGenerationError.conflict_general(outcome.conflicts, outcome.suggestions)

    if isinstance(outcome, Modified):
        return _interpret_modified(outcome, optimize, existing_features, recompute)

    if isinstance(outcome, Unavailable):
        raise FeatureGenerationError.unavailable(
            outcome.conflicts, outcome.mp_level, outcome.ee_level, outcome.unavailable
        )

    if isinstance(outcome, Fatal):
        cause = outcome.cause
        logger.debug("Caused by exception: %s", type(cause).__name__)
        logger.debug("Caused by exception message: %s", cause)
        raise FeatureGenerationError.fatal(cause, outcome.message) from cause

    raise TypeError(f"Unsupported analysis outcome: {type(outcome).__name__}")


def _interpret_modified(
    outcome: Modified,
    optimize: bool,
    existing_features: FeatureSet,
    recompute: Callable[[], FeatureSet],
) -> FeatureSet:
    user_features = existing_features if optimize else recompute()
    modified_set = outcome.features

    if modified_set.issuperset(user_features):
        # only features generated by an earlier run were changed
        logger.debug("Modified set contains all user features, using it as the scanned features")
        if outcome.message:
            logger.warning("%s", outcome.message)
        else:
            logger.warning("Features were modified to obtain a working set: %s", modified_set)
        return modified_set

    all_app_features = outcome.suggestions.union(user_features)
    logger.debug("Modified set dropped user features, reporting suggestions plus user features")
    raise FeatureGenerationError.conflict_general(all_app_features, modified_set)

"""Generate the features used by an application and add them to the server configuration.

Pipeline: collect declared features, resolve platform versions, run the
analyzer, interpret its outcome, reconcile against the previous generated
file, and write. Any failure aborts before the generated file is touched.
Runs against the same configuration directory must not overlap.
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field
from typing import List, Optional

from analysis.interpreter import interpret_outcome
from analysis.models import AnalysisRequest, Fatal
from analysis.scanner import Analyzer
from common.logging_utils import extra_context, is_debug_enabled
from config.features import FeatureSet
from constants import Constants
from versioning.models import Dependency, PlatformVersions
from versioning.umbrella import resolve_platform_versions
from .collector import FeatureCollector
from .engine import ReconciliationEngine, ReconciliationPlan
from .writer import GeneratedArtifactWriter, WriteOutcome

logger = logging.getLogger(__name__)


@dataclass
class GenerateOptions:
    """Inputs for one generation run."""
    config_dir: str
    server_xml: Optional[str] = None
    classes_dirs: List[str] = field(default_factory=list)
    class_files: Optional[List[str]] = None
    log_location: str = "."
    dependencies: List[Dependency] = field(default_factory=list)
    optimize: bool = Constants.DEFAULT_OPTIMIZE


@dataclass
class GenerationResult:
    plan: ReconciliationPlan
    outcome: WriteOutcome
    versions: PlatformVersions
    scanned: FeatureSet


def existing_class_directories(classes_dirs: List[str]) -> List[str]:
    """Absolute paths of the configured class directories that exist."""
    return [os.path.abspath(d) for d in classes_dirs if os.path.isdir(d)]


def generate_features(options: GenerateOptions, analyzer: Analyzer) -> GenerationResult:
    """Run feature generation for ``options.config_dir``.

    Raises:
        FeatureGenerationError: On analyzer conflicts or failures, and when the
            generated file cannot be written.
    """
    optimize = options.optimize
    logger.debug("optimize generate features: %s", optimize)
    if options.class_files:
        logger.debug("Generate features for the following class files: %s", options.class_files)

    collector = FeatureCollector(options.config_dir, options.server_xml)
    # in optimize mode the analyzer must not see previously generated features
    existing = collector.collect(exclude_generated=optimize)
    logger.debug("Existing features: %s", existing)
    non_custom = existing.platform_features()
    logger.debug("Non-custom features: %s", non_custom)

    directories = existing_class_directories(options.classes_dirs)
    if not directories and not options.class_files:
        # still run the analyzer to detect conflicts in user specified features
        logger.warning(Constants.NO_CLASS_FILES_WARNING)

    versions = resolve_platform_versions(options.dependencies)
    request = AnalysisRequest(
        existing_features=non_custom,
        class_files=options.class_files,
        class_directories=directories,
        log_location=os.path.abspath(options.log_location),
        ee_version=versions.ee,
        mp_version=versions.mp,
        optimize=optimize,
    )
    if is_debug_enabled(logger):
        logger.debug("Invoking analyzer", extra=extra_context(
            event="analyzer_call", component="generate", action="analyze",
            ee_version=versions.ee, mp_version=versions.mp, directories=len(directories)
        ))

    try:
        outcome = analyzer.analyze(request)
    except Exception as exc:  # pylint: disable=broad-exception-caught
        outcome = Fatal(exc, "The analyzer failed unexpectedly.")

    scanned = interpret_outcome(
        outcome,
        optimize,
        existing,
        lambda: collector.collect(exclude_generated=True),
    )

    plan = ReconciliationEngine(collector).reconcile(scanned, existing, optimize)
    write_outcome = GeneratedArtifactWriter(options.config_dir, options.server_xml).write(plan)
    return GenerationResult(plan=plan, outcome=write_outcome, versions=versions, scanned=scanned)

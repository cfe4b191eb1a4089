"""Persist a reconciliation plan to the generated features file."""

from __future__ import annotations

import logging
import os
import xml.etree.ElementTree as ET
from enum import Enum
from typing import Optional

from analysis.errors import FeatureGenerationError
from config.server_xml import ServerConfigDocument, add_feature_manager_comment
from constants import Constants
from .engine import PlanAction, ReconciliationPlan

logger = logging.getLogger(__name__)


class WriteOutcome(Enum):
    WRITTEN = "written"
    CLEARED = "cleared"
    UNCHANGED = "unchanged"
    SKIPPED = "skipped"


class GeneratedArtifactWriter:
    """Writes the generated features file and points server.xml at it."""

    def __init__(self, config_dir: str, server_xml: Optional[str] = None):
        self.config_dir = config_dir
        self.server_xml = server_xml

    def write(self, plan: ReconciliationPlan) -> WriteOutcome:
        """Carry out ``plan``.

        Raises:
            FeatureGenerationError: ARTIFACT_WRITE_FAILED if the generated file
                cannot be written.
        """
        if plan.action is PlanAction.REGENERATED:
            logger.info("Regenerated the following features: %s", plan.features)
            return WriteOutcome.UNCHANGED

        if plan.action is PlanAction.NONE:
            logger.info("No additional features were generated.")
            return WriteOutcome.SKIPPED

        if plan.action is PlanAction.CLEAR:
            logger.info("No additional features were generated.")
            self._write_document(plan.artifact_path, Constants.NO_NEW_FEATURES_COMMENT, [])
            return WriteOutcome.CLEARED

        features = plan.features.sorted()
        for feature in features:
            logger.debug("Adding missing feature %s to %s.", feature, Constants.GENERATED_FEATURES_FILE_PATH)
        # announce before writing; file watchers may react to the new file immediately
        logger.info("Generated the following features: %s", plan.features)
        self._write_document(plan.artifact_path, Constants.GENERATED_FEATURES_COMMENT, features)
        logger.debug("Created file %s", plan.artifact_path)
        self._add_generation_comment()
        return WriteOutcome.WRITTEN

    @staticmethod
    def _write_document(path: str, comment: str, features) -> None:
        try:
            document = ServerConfigDocument.new_instance()
            document.create_comment(Constants.HEADER)
            manager = document.create_feature_manager()
            document.create_comment(comment, manager)
            for feature in features:
                document.create_feature(feature)
            document.write(path)
        except (OSError, ValueError, TypeError) as exc:
            logger.debug("Exception creating the server features file", exc_info=True)
            raise FeatureGenerationError.write_failed(exc) from exc

    def find_server_xml(self) -> Optional[str]:
        """Return the explicit server.xml if it exists, else <config_dir>/server.xml, else None."""
        if self.server_xml and os.path.isfile(self.server_xml):
            return self.server_xml
        if not self.config_dir:
            return None
        candidate = os.path.join(self.config_dir, Constants.SERVER_XML_FILE)
        return candidate if os.path.isfile(candidate) else None

    def _add_generation_comment(self) -> None:
        server_xml = self.find_server_xml()
        if server_xml is None:
            return
        try:
            if add_feature_manager_comment(server_xml, Constants.FEATURES_FILE_MESSAGE):
                logger.debug("Added generation comment to %s", server_xml)
        except (OSError, ET.ParseError, ValueError, LookupError) as exc:
            logger.warning("Unable to add a comment about generated features to %s: %s", server_xml, exc)

"""Collect the features currently declared in the server configuration."""

from __future__ import annotations

import logging
import os
from typing import Optional

from config.features import FeatureSet
from config.server_xml import ServerConfigReader
from constants import Constants

logger = logging.getLogger(__name__)


class FeatureCollector:
    """Reads declared features for one server configuration directory."""

    def __init__(
        self,
        config_dir: str,
        server_xml: Optional[str] = None,
        reader: Optional[ServerConfigReader] = None,
    ):
        self.config_dir = config_dir
        self.server_xml = server_xml
        self.reader = reader or ServerConfigReader()

    @property
    def generated_file(self) -> str:
        return os.path.join(self.config_dir, Constants.GENERATED_FEATURES_FILE_PATH)

    def collect(self, exclude_generated: bool) -> FeatureSet:
        """Return the declared features, optionally ignoring the generated file.

        Never fails for a missing configuration; an empty set is returned.
        """
        excludes = {Constants.GENERATED_FEATURES_FILE_NAME} if exclude_generated else None
        features = self.reader.read_features(
            self.config_dir, self.server_xml, excludes=excludes, lower_case=False
        )
        if features is None:
            logger.debug("No server configuration found in %s", self.config_dir)
            return FeatureSet()
        return features

    def generated_features(self) -> FeatureSet:
        """Return the features recorded in the generated file by a previous run."""
        return self.reader.read_file_features(self.config_dir, self.generated_file, lower_case=False)

"""Error kinds raised while generating features."""

from __future__ import annotations

from enum import Enum
from typing import Optional

from config.features import FeatureSet
from constants import Constants, ExitCodes

CONFLICT_GENERAL_MESSAGE = (
    "A working set of features could not be generated due to conflicts between configured features "
    "and the application's API usage: {0}. Review and update your server configuration and application "
    "to ensure they are not using conflicting features and APIs from different levels of MicroProfile, "
    "Java EE, or Jakarta EE. Refer to the following set of suggested features for guidance: {1}."
)
CONFLICT_EXISTING_MESSAGE = (
    "A working set of features could not be generated due to conflicts in your server configuration: {0}. "
    "Review and update your server configuration to ensure it is not using conflicting features from "
    "different levels of MicroProfile, Java EE, or Jakarta EE. Refer to the following set of suggested "
    "features for guidance: {1}."
)
CONFLICT_MESSAGE = (
    "A working set of features could not be generated due to conflicts in your application's API usage: {0}. "
    "Review and update your application to ensure it is not using conflicting APIs from different levels "
    "of MicroProfile, Java EE, or Jakarta EE."
)
UNAVAILABLE_MESSAGE = (
    "A working set of features could not be generated due to conflicts between configured features: {0}. "
    "The following features are not available at MicroProfile level {1} and Java EE or Jakarta EE "
    "level {2}: {3}. Review and update your server configuration and application dependencies."
)
FATAL_MESSAGE = "Failed to generate a working set of features. {0}"
WRITE_FAILED_MESSAGE = (
    "Automatic generation of features failed. Error attempting to create the "
    + Constants.GENERATED_FEATURES_FILE_NAME
    + ". Ensure your id has write permission to the server configuration directory. {0}"
)


class ErrorKind(Enum):
    """Kinds of terminal failures."""

    CONFLICT = "conflict"
    CONFLICT_EXISTING = "conflict_existing"
    CONFLICT_GENERAL = "conflict_general"
    FEATURE_UNAVAILABLE = "feature_unavailable"
    FATAL = "fatal"
    ARTIFACT_WRITE_FAILED = "artifact_write_failed"

    @property
    def exit_code(self) -> int:
        if self is ErrorKind.FATAL:
            return ExitCodes.ANALYZER_ERROR.value
        if self is ErrorKind.ARTIFACT_WRITE_FAILED:
            return ExitCodes.WRITE_ERROR.value
        return ExitCodes.FEATURE_CONFLICT.value


class FeatureGenerationError(Exception):
    """Raised when features cannot be generated; ``kind`` says why."""

    def __init__(
        self,
        kind: ErrorKind,
        message: str,
        conflicts: Optional[FeatureSet] = None,
        suggestions: Optional[FeatureSet] = None,
    ):
        super().__init__(message)
        self.kind = kind
        self.conflicts = conflicts if conflicts is not None else FeatureSet()
        self.suggestions = suggestions if suggestions is not None else FeatureSet()
        self.unavailable_features = FeatureSet()

    @property
    def message(self) -> str:
        return str(self)

    @classmethod
    def conflict(cls, conflicts: FeatureSet) -> "FeatureGenerationError":
        return cls(ErrorKind.CONFLICT, CONFLICT_MESSAGE.format(conflicts), conflicts)

    @classmethod
    def conflict_existing(cls, conflicts: FeatureSet, suggestions: FeatureSet) -> "FeatureGenerationError":
        return cls(
            ErrorKind.CONFLICT_EXISTING,
            CONFLICT_EXISTING_MESSAGE.format(conflicts, suggestions),
            conflicts,
            suggestions,
        )

    @classmethod
    def conflict_general(cls, conflicts: FeatureSet, suggestions: FeatureSet) -> "FeatureGenerationError":
        return cls(
            ErrorKind.CONFLICT_GENERAL,
            CONFLICT_GENERAL_MESSAGE.format(conflicts, suggestions),
            conflicts,
            suggestions,
        )

    @classmethod
    def unavailable(
        cls,
        conflicts: FeatureSet,
        mp_level: Optional[str],
        ee_level: Optional[str],
        unavailable: FeatureSet,
    ) -> "FeatureGenerationError":
        err = cls(
            ErrorKind.FEATURE_UNAVAILABLE,
            UNAVAILABLE_MESSAGE.format(conflicts, mp_level, ee_level, unavailable),
            conflicts,
        )
        err.unavailable_features = unavailable
        return err

    @classmethod
    def fatal(cls, cause: BaseException, detail: str = "") -> "FeatureGenerationError":
        reason = f"{type(cause).__name__}: {cause}"
        text = f"{detail} Caused by {reason}" if detail and detail != str(cause) else reason
        return cls(ErrorKind.FATAL, FATAL_MESSAGE.format(text))

    @classmethod
    def write_failed(cls, cause: BaseException) -> "FeatureGenerationError":
        return cls(
            ErrorKind.ARTIFACT_WRITE_FAILED,
            WRITE_FAILED_MESSAGE.format(f"{type(cause).__name__}: {cause}"),
        )

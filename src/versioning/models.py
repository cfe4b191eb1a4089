"""Data models for dependency descriptors and resolved platform versions."""

from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class Dependency:
    """A build dependency coordinate as declared by the project."""
    group: str
    name: str
    version: Optional[str] = None

    @property
    def coordinate(self) -> str:
        return f"{self.group}:{self.name}"


@dataclass(frozen=True)
class PlatformVersions:
    """EE and MicroProfile levels handed to the analyzer; None means unconstrained."""
    ee: Optional[str] = None
    mp: Optional[str] = None

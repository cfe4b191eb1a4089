"""Detect the EE and MicroProfile levels implied by umbrella dependencies.

Each track is resolved independently by walking the dependency list in order.
"Newest" is decided by ``is_latest_version``, a plain string comparison of
the level labels (mp4 > mp3.3 > mp3.0 > mp3), so mixed-length labels order
lexicographically rather than numerically.
"""

from typing import Iterable, Optional

from constants import Constants, EELevels, MPLevels
from .models import Dependency, PlatformVersions


def is_latest_version(current: Optional[str], candidate: str) -> bool:
    """Return True if ``candidate`` should replace ``current``."""
    if not current:
        return True
    return current < candidate


def resolve_ee_version(dependencies: Iterable[Dependency]) -> Optional[str]:
    """Return the newest EE level declared by an EE umbrella dependency, or None."""
    ee_version = None
    for dep in dependencies:
        version = dep.version or ""
        if dep.group == Constants.JAVAEE_GROUP and dep.name == Constants.JAVAEE_ARTIFACT:
            if version.startswith("8."):
                ee_version = EELevels.EE8.value
            elif version.startswith("7.") and is_latest_version(ee_version, EELevels.EE7.value):
                ee_version = EELevels.EE7.value
            elif version.startswith("6.") and is_latest_version(ee_version, EELevels.EE6.value):
                ee_version = EELevels.EE6.value
        elif (dep.group == Constants.JAKARTAEE_GROUP
              and dep.name == Constants.JAKARTAEE_ARTIFACT
              and version.startswith("8.")):
            ee_version = EELevels.EE8.value
    return ee_version


def resolve_mp_version(dependencies: Iterable[Dependency]) -> Optional[str]:
    """Return the newest MicroProfile level declared by the umbrella dependency, or None.

    A 'm.n' version with a known level is used as is; otherwise the major digit
    selects mp1..mp4. A 4.x dependency always selects mp4.
    """
    mp_version = None
    for dep in dependencies:
        if dep.group != Constants.MICROPROFILE_GROUP or dep.name != Constants.MICROPROFILE_ARTIFACT:
            continue
        version = dep.version or ""
        level = Constants.MP_LEVELS.get(version) if len(version) == 3 else None
        if level is not None and is_latest_version(mp_version, level):
            mp_version = level
        elif version.startswith("1") and is_latest_version(mp_version, MPLevels.MP1.value):
            mp_version = MPLevels.MP1.value
        elif version.startswith("2") and is_latest_version(mp_version, MPLevels.MP2.value):
            mp_version = MPLevels.MP2.value
        elif version.startswith("3") and is_latest_version(mp_version, MPLevels.MP3.value):
            mp_version = MPLevels.MP3.value
        elif version.startswith("4"):
            mp_version = MPLevels.MP4.value
    return mp_version


def resolve_platform_versions(dependencies: Iterable[Dependency]) -> PlatformVersions:
    deps = list(dependencies)
    return PlatformVersions(ee=resolve_ee_version(deps), mp=resolve_mp_version(deps))

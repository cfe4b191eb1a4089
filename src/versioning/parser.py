"""Token parsing utilities for dependency coordinates."""

from typing import Optional, Tuple

from .models import Dependency


def tokenize_rightmost_colon(s: str) -> Tuple[str, Optional[str]]:
    """Return (identifier, version or None) using the rightmost-colon rule."""
    s = s.strip()
    if ':' not in s:
        return s, None
    identifier, version_part = s.rsplit(':', 1)
    version_part = version_part.strip()
    return identifier.strip(), version_part if version_part else None


def parse_dependency_token(token: str) -> Dependency:
    """Parse "groupId:artifactId[:version]" into a Dependency.

    Raises:
        ValueError: If the token has no groupId or artifactId.
    """
    token = token.strip()
    colon_count = token.count(':')
    if colon_count == 1:
        identifier, version = token, None
    elif colon_count == 2:
        identifier, version = tokenize_rightmost_colon(token)
    else:
        raise ValueError(f"Invalid dependency '{token}'. Expected 'groupId:artifactId[:version]'.")

    group, _, name = identifier.partition(':')
    if not group.strip() or not name.strip():
        raise ValueError(f"Invalid dependency '{token}'. Expected 'groupId:artifactId[:version]'.")
    return Dependency(group=group.strip(), name=name.strip(), version=version)

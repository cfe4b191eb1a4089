"""Feature tokens and case-insensitive feature sets."""

from __future__ import annotations

from collections.abc import Set
from typing import Dict, Iterable, Iterator, List, Optional


def is_custom_feature(feature: str) -> bool:
    """Custom features are namespaced, i.e. "usr:feature-1.0" or "myExt:feature-2.0"."""
    return ":" in feature


def _fold(feature: str) -> str:
    return feature.strip().lower()


class FeatureSet(Set):
    """Set of feature names compared case-insensitively.

    The first spelling seen for a feature is the one kept for display and
    serialization; iteration follows insertion order.
    """

    def __init__(self, features: Optional[Iterable[str]] = None):
        self._items: Dict[str, str] = {}
        for feature in features or ():
            self.add(feature)

    def add(self, feature: str) -> None:
        """Add a feature; blank names and case variants of known names are ignored."""
        if not isinstance(feature, str):
            raise TypeError(f"feature names must be strings, got {type(feature).__name__}")
        key = _fold(feature)
        if key and key not in self._items:
            self._items[key] = feature.strip()

    def update(self, features: Iterable[str]) -> None:
        for feature in features:
            self.add(feature)

    def __contains__(self, feature: object) -> bool:
        return isinstance(feature, str) and _fold(feature) in self._items

    def __iter__(self) -> Iterator[str]:
        return iter(list(self._items.values()))

    def __len__(self) -> int:
        return len(self._items)

    def __eq__(self, other: object) -> bool:
        if isinstance(other, (set, frozenset, list, tuple)):
            other = FeatureSet(other)
        if not isinstance(other, FeatureSet):
            return NotImplemented
        return self._items.keys() == other._items.keys()

    __hash__ = None  # type: ignore[assignment]

    def issuperset(self, other: Iterable[str]) -> bool:
        return all(feature in self for feature in other)

    def difference(self, other: Iterable[str]) -> "FeatureSet":
        """Return the features of this set that are not in ``other``."""
        exclude = other if isinstance(other, FeatureSet) else FeatureSet(other)
        return FeatureSet(f for f in self if f not in exclude)

    def union(self, other: Iterable[str]) -> "FeatureSet":
        result = FeatureSet(self)
        result.update(other)
        return result

    def platform_features(self) -> "FeatureSet":
        """Return only the features the analyzer understands (no custom features)."""
        return FeatureSet(f for f in self if not is_custom_feature(f))

    def sorted(self) -> List[str]:
        return sorted(self, key=str.lower)

    def __str__(self) -> str:
        return "[" + ", ".join(self.sorted()) + "]"

    def __repr__(self) -> str:
        return f"FeatureSet({self.sorted()!r})"

"""Component lookup backed by a name → target mapping."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

_NOT_CACHED = object()


@dataclass
class ComponentRegistry:
    """Resolves component names for the transform's lookup callback.

    Keys are ``"tag"`` for global components and ``"namespace:tag"`` for
    namespaced ones. A namespaced name never falls back to a global entry.
    """

    components: dict[str, Any] = field(default_factory=dict)
    _cache: dict[str, Any] = field(default_factory=dict, init=False)

    def register(self, name: str, target: Any) -> None:
        self.components[name] = target
        self._cache.clear()

    def lookup(self, tag: str, namespace: str | None = None) -> Any:
        """Return the target for a component, or None. Results are cached."""
        name = f"{namespace}:{tag}" if namespace else tag
        cached = self._cache.get(name, _NOT_CACHED)
        if cached is not _NOT_CACHED:
            return cached
        result = self.components.get(name)
        self._cache[name] = result
        return result

    def __call__(self, tag: str, namespace: str | None = None) -> Any:
        return self.lookup(tag, namespace)

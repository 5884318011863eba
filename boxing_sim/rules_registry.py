"""Versioned model parameters.

Parameter documents live under ``rules/model/<version>/<category>.json``.
:func:`load_parameter_store` reads one version into an immutable
:class:`ParameterStore`; overrides never touch the loaded store but
produce a new one layered on top of it.
"""

from __future__ import annotations

import copy
import json
import logging
import re
from collections.abc import Mapping
from functools import lru_cache
from pathlib import Path
from types import MappingProxyType
from typing import Any

from boxing_sim.constants import CURRENT_VERSION, DEFAULTS_VERSION, PARAMETER_CATEGORIES
from boxing_sim.parameter_defaults import DEFAULT_PARAMETERS

logger = logging.getLogger(__name__)

PROJECT_ROOT = Path(__file__).resolve().parents[1]
RULES_DIR = PROJECT_ROOT / "rules"
MODEL_DIR = RULES_DIR / "model"

_MISSING = object()
_EMPTY: Mapping[str, Any] = MappingProxyType({})


# ---------------------------------------------------------------------------
# Tree helpers
# ---------------------------------------------------------------------------

def _split_path(path: str) -> list[str]:
    parts = [part for part in str(path).split(".") if part]
    if not parts:
        raise ValueError(f"Parameter path must not be empty: {path!r}")
    return parts


def _freeze(value: Any) -> Any:
    if isinstance(value, Mapping):
        return MappingProxyType({str(key): _freeze(item) for key, item in value.items()})
    if isinstance(value, (list, tuple)):
        return tuple(_freeze(item) for item in value)
    return value


def _thaw(value: Any) -> Any:
    if isinstance(value, Mapping):
        return {key: _thaw(item) for key, item in value.items()}
    if isinstance(value, tuple):
        return [_thaw(item) for item in value]
    return value


def _assign(tree: dict[str, Any], parts: list[str], value: Any) -> None:
    node = tree
    for part in parts[:-1]:
        child = node.get(part)
        if not isinstance(child, dict):
            child = {}
            node[part] = child
        node = child
    node[parts[-1]] = copy.deepcopy(value)


def _walk(tree: Mapping[str, Any], parts: list[str]) -> Any:
    node: Any = tree
    for part in parts:
        if not isinstance(node, Mapping) or part not in node:
            return _MISSING
        node = node[part]
    return node


# ---------------------------------------------------------------------------
# Store
# ---------------------------------------------------------------------------

class ParameterStore:
    """Read-only view of one parameter version plus an override layer.

    The overlay always wins over the loaded tree.  Lookups resolve
    against a tree built once at construction, so they never re-read or
    re-parse anything.
    """

    def __init__(
        self,
        tree: Mapping[str, Any],
        *,
        version: str = DEFAULTS_VERSION,
        overlay: Mapping[str, Any] | None = None,
    ) -> None:
        self._base = _freeze(tree)
        self._overlay: dict[str, Any] = dict(overlay or {})
        self._version = version

        effective = _thaw(self._base)
        for path, value in self._overlay.items():
            _assign(effective, _split_path(path), value)
        self._effective: Mapping[str, Any] = _freeze(effective)

        self._sections: dict[str, Mapping[str, Any]] = {}
        self._warned: set[str] = set()

    def __repr__(self) -> str:
        return f"ParameterStore(version={self._version!r}, overrides={len(self._overlay)})"

    @property
    def version(self) -> str:
        return self._version

    @property
    def overrides(self) -> Mapping[str, Any]:
        return MappingProxyType(dict(self._overlay))

    def _warn_missing(self, path: str) -> None:
        if path in self._warned:
            return
        self._warned.add(path)
        logger.warning("Parameter %s missing from version %s; using default", path, self._version)

    def get(self, path: str, default: Any = None) -> Any:
        """Return the value at dot-separated *path*, or *default* if unset."""
        value = _walk(self._effective, _split_path(path))
        if value is _MISSING:
            self._warn_missing(path)
            return default
        return value

    def section(self, path: str) -> Mapping[str, Any]:
        """Return the read-only subtree at *path* (empty if unset)."""
        cached = self._sections.get(path)
        if cached is not None:
            return cached
        value = _walk(self._effective, _split_path(path))
        if value is _MISSING or not isinstance(value, Mapping):
            self._warn_missing(path)
            value = _EMPTY
        self._sections[path] = value
        return value

    def with_override(self, path: str, value: Any) -> ParameterStore:
        """Return a new store where *path* resolves to *value*."""
        return self.with_overrides({path: value})

    def with_overrides(self, overrides: Mapping[str, Any]) -> ParameterStore:
        """Return a new store with every entry of *overrides* layered on top."""
        merged = dict(self._overlay)
        for path, value in overrides.items():
            _split_path(path)
            merged[path] = value
        return ParameterStore(self._base, version=self._version, overlay=merged)

    def to_dict(self) -> dict[str, Any]:
        """Deep copy of the effective tree, overrides applied."""
        return _thaw(self._effective)


# ---------------------------------------------------------------------------
# Loading
# ---------------------------------------------------------------------------

def _version_key(name: str) -> tuple[int, ...]:
    return tuple(int(chunk) for chunk in re.findall(r"\d+", name))


def available_versions(model_dir: Path = MODEL_DIR) -> list[str]:
    """Return every ``v*`` version directory, oldest first."""
    if not model_dir.is_dir():
        return []
    names = [
        entry.name
        for entry in model_dir.iterdir()
        if entry.is_dir() and entry.name.startswith("v")
    ]
    return sorted(names, key=_version_key)


def _load_category(path: Path, category: str) -> dict[str, Any]:
    fallback = copy.deepcopy(DEFAULT_PARAMETERS.get(category, {}))
    if not path.exists():
        return fallback
    try:
        with path.open("r", encoding="utf-8") as handle:
            payload = json.load(handle)
        if not isinstance(payload, dict):
            raise ValueError(f"expected a JSON object, got {type(payload).__name__}")
    except (OSError, ValueError) as exc:
        logger.error("Could not load parameter file %s: %s; using built-in defaults", path, exc)
        return fallback
    return payload


def build_parameter_store(model_dir: Path, version: str = CURRENT_VERSION) -> ParameterStore:
    """Load *version* from *model_dir* without caching."""
    if version == CURRENT_VERSION:
        versions = available_versions(model_dir)
        if not versions:
            logger.warning("No parameter versions under %s; using built-in defaults", model_dir)
            return ParameterStore(DEFAULT_PARAMETERS, version=DEFAULTS_VERSION)
        resolved = versions[-1]
    else:
        resolved = version

    version_dir = model_dir / resolved
    if not version_dir.is_dir():
        logger.warning("Parameter version %s not found in %s; using built-in defaults", resolved, model_dir)
        return ParameterStore(DEFAULT_PARAMETERS, version=DEFAULTS_VERSION)

    categories = list(PARAMETER_CATEGORIES)
    for extra in sorted(version_dir.glob("*.json")):
        if extra.stem not in categories:
            categories.append(extra.stem)

    tree = {
        category: _load_category(version_dir / f"{category}.json", category)
        for category in categories
    }
    return ParameterStore(tree, version=resolved)


@lru_cache(maxsize=8)
def load_parameter_store(version: str = CURRENT_VERSION) -> ParameterStore:
    """Return the shared store for *version*, loading it on first use."""
    return build_parameter_store(MODEL_DIR, version)

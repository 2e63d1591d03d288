"""
Relation configuration: hierarchy, colors and synonym groups.

A Configuration is an explicit value. It is produced once (built-in
defaults merged with an optional external document) and passed by
parameter into the graph builder. There is no module-level mutable state.

Document format (JSON, or YAML for .yml/.yaml sources), every field optional:

    {
        "hierarchy": ["amour", "meilleur ami", ...],
        "colors": {"amour": "#FF00DC", ...},
        "relationGroups": {"ami": ["pote", "copain"], ...}
    }

Missing fields fall back to the base configuration field by field.
"""

from __future__ import annotations

import asyncio
import json
import logging
from dataclasses import dataclass, field
from pathlib import Path
from types import MappingProxyType
from typing import Any, Callable, Dict, List, Mapping, Optional, Sequence, Tuple

import httpx
import yaml

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_CANDIDATES = ("relation-config.json",)

DEFAULT_HIERARCHY: Tuple[str, ...] = (
    "amour",
    "meilleur ami",
    "ami ++",
    "ami",
    "entre ami et neutre",
    "neutre",
    "entre neutre et haine",
    "haine",
    "dégoût",
    "famille",
    "famille conjoint",
    "connaît pas",
)

DEFAULT_COLORS: Dict[str, str] = {
    "amour": "#FF00DC",
    "meilleur ami": "#0026FF",
    "ami ++": "#5A8CFF",
    "ami": "#00AA00",
    "entre ami et neutre": "#AAAA00",
    "neutre": "#808080",
    "entre neutre et haine": "#FF8800",
    "haine": "#FF0000",
    "dégoût": "#A80000",
    "famille": "#00FFD0",
    "famille conjoint": "#00FFF0",
    "connaît pas": "#C0C0C0",
}

# Color of an edge whose category has no entry in the color table
DEFAULT_EDGE_COLOR = "#808080"


class ConfigurationError(Exception):
    """Raised when a configuration document has the wrong shape."""
    pass


@dataclass(frozen=True)
class Configuration:
    """
    Relation settings used to build a graph.

    Properties:
        hierarchy:
            Relation categories, most favorable first. Index defines rank.
        colors:
            Category -> display color.
        relation_groups:
            Canonical category -> list of free-text variants (synonyms).
            Empty by default: no synonym merging unless a document provides it.
    """

    hierarchy: Tuple[str, ...] = DEFAULT_HIERARCHY
    # Mappings are read-only proxies and left out of the hash
    colors: Mapping[str, str] = field(default_factory=lambda: dict(DEFAULT_COLORS), hash=False)
    relation_groups: Mapping[str, Tuple[str, ...]] = field(default_factory=dict, hash=False)

    def __post_init__(self):
        object.__setattr__(self, "hierarchy", tuple(self.hierarchy))
        object.__setattr__(self, "colors", MappingProxyType(dict(self.colors)))
        object.__setattr__(
            self,
            "relation_groups",
            MappingProxyType({k: tuple(v) for k, v in self.relation_groups.items()}),
        )

    def color_for(self, category: Optional[str]) -> str:
        """Display color of a canonical category, neutral gray if unknown."""
        if category is None:
            return DEFAULT_EDGE_COLOR
        return self.colors.get(category, DEFAULT_EDGE_COLOR)


DEFAULT_CONFIG = Configuration()


def _check_hierarchy(value: Any) -> Tuple[str, ...]:
    if not isinstance(value, list) or not all(isinstance(v, str) for v in value):
        raise ConfigurationError("'hierarchy' must be a list of strings")
    return tuple(value)


def _check_colors(value: Any) -> Dict[str, str]:
    if not isinstance(value, dict) or not all(
        isinstance(k, str) and isinstance(v, str) for k, v in value.items()
    ):
        raise ConfigurationError("'colors' must map category names to color strings")
    return dict(value)


def _check_relation_groups(value: Any) -> Dict[str, Tuple[str, ...]]:
    if not isinstance(value, dict):
        raise ConfigurationError("'relationGroups' must map categories to lists of variants")
    groups: Dict[str, Tuple[str, ...]] = {}
    for canon, variants in value.items():
        if not isinstance(variants, list) or not all(isinstance(v, str) for v in variants):
            raise ConfigurationError(f"Variants of '{canon}' must be a list of strings")
        groups[str(canon)] = tuple(variants)
    return groups


def merge_configuration(base: Configuration, override: Optional[Mapping[str, Any]]) -> Configuration:
    """
    Merge an external configuration document into a base configuration.

    Each of hierarchy / colors / relationGroups is taken from the document
    when present and not null, otherwise kept from the base.

    Raises:
        ConfigurationError: If the document or one of its fields has the wrong type
    """
    if override is None:
        return base
    if not isinstance(override, Mapping):
        raise ConfigurationError("Configuration document must be a mapping")

    hierarchy = base.hierarchy
    colors = base.colors
    relation_groups = base.relation_groups

    if override.get("hierarchy") is not None:
        hierarchy = _check_hierarchy(override["hierarchy"])
    if override.get("colors") is not None:
        colors = _check_colors(override["colors"])
    if override.get("relationGroups") is not None:
        relation_groups = _check_relation_groups(override["relationGroups"])

    return Configuration(hierarchy=hierarchy, colors=colors, relation_groups=relation_groups)


def configuration_to_dict(config: Configuration) -> Dict[str, Any]:
    return {
        "hierarchy": list(config.hierarchy),
        "colors": dict(config.colors),
        "relationGroups": {k: list(v) for k, v in config.relation_groups.items()},
    }


def parse_configuration_document(text: str, source: str = "") -> Dict[str, Any]:
    """Parse a configuration document, YAML when the source says so, JSON otherwise."""
    try:
        if source.lower().endswith((".yml", ".yaml")):
            data = yaml.safe_load(text)
        else:
            data = json.loads(text)
    except (ValueError, yaml.YAMLError) as e:
        raise ConfigurationError(f"Invalid configuration document {source!r}: {e}")
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigurationError(f"Configuration document {source!r} is not a mapping")
    return data


def load_configuration_file(path: str, base: Configuration = DEFAULT_CONFIG) -> Configuration:
    """
    Read a configuration document from disk and merge it into ``base``.

    Raises:
        FileNotFoundError: If the file doesn't exist
        ConfigurationError: If the document is malformed
    """
    with open(path, "r", encoding="utf-8") as f:
        text = f.read()
    return merge_configuration(base, parse_configuration_document(text, source=str(path)))


def _is_url(source: str) -> bool:
    return source.startswith(("http://", "https://"))


class ConfigurationLoader:
    """
    One-shot, cancellable loader for an optional external configuration.

    Candidates are tried in order; the first one that can be fetched and
    parsed wins. Any failure (missing file, HTTP error, bad document) is
    silent: the loader moves to the next candidate and finally falls back to
    the base configuration.

    Usage:
        loader = ConfigurationLoader(["relation-config.json"])
        loader.start(session.apply_configuration)
        ...
        loader.cancel()   # consumer torn down; late results are discarded
    """

    def __init__(
        self,
        candidates: Sequence[str] = DEFAULT_CONFIG_CANDIDATES,
        base: Configuration = DEFAULT_CONFIG,
        timeout: float = 5.0,
        client: Optional[httpx.AsyncClient] = None,
    ):
        self.candidates: List[str] = list(candidates)
        self.base = base
        self.timeout = timeout
        self._client = client
        self._cancelled = False
        self._task: Optional[asyncio.Task] = None

    @property
    def cancelled(self) -> bool:
        return self._cancelled

    async def _fetch(self, source: str) -> str:
        if _is_url(source):
            headers = {"Cache-Control": "no-store"}
            if self._client is not None:
                resp = await self._client.get(source, headers=headers)
                resp.raise_for_status()
                return resp.text
            async with httpx.AsyncClient(timeout=self.timeout, follow_redirects=True) as client:
                resp = await client.get(source, headers=headers)
                resp.raise_for_status()
                return resp.text
        return await asyncio.to_thread(Path(source).read_text, encoding="utf-8")

    async def load(self) -> Configuration:
        """Try every candidate and return the merged configuration (or the base)."""
        for source in self.candidates:
            try:
                text = await self._fetch(source)
                return merge_configuration(self.base, parse_configuration_document(text, source))
            except (OSError, ValueError, httpx.HTTPError, httpx.InvalidURL, ConfigurationError) as e:
                logger.debug("Configuration candidate %s skipped: %s", source, e)
                continue
        return self.base

    async def load_into(self, apply: Callable[[Configuration], None]) -> Optional[Configuration]:
        """
        Load, then hand the result to ``apply`` unless the loader was cancelled
        in the meantime. Returns the applied configuration, or None if discarded.
        """
        config = await self.load()
        if self._cancelled:
            logger.debug("Configuration load finished after cancel, result discarded")
            return None
        apply(config)
        return config

    def start(self, apply: Callable[[Configuration], None]) -> asyncio.Task:
        """Schedule ``load_into`` on the running event loop."""
        self._task = asyncio.get_running_loop().create_task(self.load_into(apply))
        return self._task

    def cancel(self) -> None:
        self._cancelled = True
        if self._task is not None and not self._task.done():
            self._task.cancel()


__all__ = [
    "Configuration",
    "ConfigurationError",
    "ConfigurationLoader",
    "DEFAULT_CONFIG",
    "DEFAULT_COLORS",
    "DEFAULT_EDGE_COLOR",
    "DEFAULT_HIERARCHY",
    "configuration_to_dict",
    "load_configuration_file",
    "merge_configuration",
    "parse_configuration_document",
]

"""Value patterns and name lexicons for semantic type inference.

Patterns and keyword lists are defined in ``config/patterns.yaml`` inside the
package (overridable through ``KOWALSKI_PATTERNS_PATH``). Value patterns
match cell text; keyword lists match lowercase column names by substring.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from functools import lru_cache
from pathlib import Path
from typing import Any, cast

import yaml

from kowalski.core.config import get_settings


@dataclass
class Pattern:
    """A single value pattern."""

    name: str
    pattern: str
    case_sensitive: bool = True
    examples: list[str] | None = None

    # Compiled regex (set in __post_init__)
    _regex: re.Pattern[str] = field(init=False, repr=False)

    def __post_init__(self) -> None:
        flags = 0 if self.case_sensitive else re.IGNORECASE
        self._regex = re.compile(self.pattern, flags)

    def matches(self, value: str) -> bool:
        """Check if a value matches this pattern."""
        if not value:
            return False
        return self._regex.match(value) is not None


class PatternConfig:
    """Pattern and lexicon configuration loaded from YAML."""

    def __init__(self, config_dict: dict[str, object]):
        self._config = config_dict
        self._patterns: dict[str, Pattern] = {}
        self._keywords: dict[str, tuple[str, ...]] = {}
        self.boolean_values: frozenset[str] = frozenset()
        self._load()

    def _load(self) -> None:
        patterns_list = cast(list[dict[str, Any]], self._config.get("value_patterns", []))
        for pattern_dict in patterns_list:
            try:
                pattern = Pattern(
                    name=pattern_dict["name"],
                    pattern=pattern_dict["pattern"],
                    case_sensitive=pattern_dict.get("case_sensitive", True),
                    examples=pattern_dict.get("examples"),
                )
            except KeyError:
                # Skip incomplete entries
                continue
            self._patterns[pattern.name] = pattern

        keywords = cast(dict[str, list[str]], self._config.get("keywords", {}))
        self._keywords = {
            group: tuple(k.lower() for k in words) for group, words in keywords.items()
        }

        booleans = cast(list[Any], self._config.get("boolean_values", []))
        self.boolean_values = frozenset(str(v).lower() for v in booleans)

    def get_patterns(self) -> list[Pattern]:
        return list(self._patterns.values())

    def get_pattern(self, name: str) -> Pattern:
        """Look up a pattern by name (KeyError when it is not configured)."""
        return self._patterns[name]

    def matches(self, name: str, value: str) -> bool:
        pattern = self._patterns.get(name)
        return pattern is not None and pattern.matches(value)

    def keywords(self, group: str) -> tuple[str, ...]:
        return self._keywords.get(group, ())

    def name_has_keyword(self, name_lower: str, group: str) -> bool:
        """True when the lowercase column name contains any keyword of ``group``."""
        return any(keyword in name_lower for keyword in self.keywords(group))

    def is_date_like(self, value: str) -> bool:
        return any(self.matches(name, value) for name in ("date_iso", "date_us", "date_eu"))


def load_pattern_config(config_path: Path | None = None) -> PatternConfig:
    """Load pattern configuration from YAML.

    Args:
        config_path: Optional path to a config file. If None, uses the path from settings.
    """
    if config_path is None:
        config_path = get_settings().patterns_path

    with open(config_path) as f:
        config_dict = yaml.safe_load(f)

    return PatternConfig(config_dict or {})


@lru_cache
def get_pattern_config() -> PatternConfig:
    """The default pattern configuration, loaded once."""
    return load_pattern_config()

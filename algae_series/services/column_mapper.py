from __future__ import annotations

import logging
import re
from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field
from enum import Enum

from ..errors import MissingRequiredColumnError
from ..models.role_map import REQUIRED_ROLES, Role, RoleMap

"""Semantic column mapping.

Header names drift between workbook revisions ("Date Sampled", "SampleDate",
"date_sampled", ...). Each role owns an ordered list of MatchRules; the rule
table below is plain data so new header variants can be added (or supplied
from config) without touching the matching engine.
"""

__all__ = [
    "MatchKind",
    "MatchRule",
    "ROLE_RULES",
    "normalize_label",
    "build_extra_rules",
    "resolve_roles",
    "require_roles",
]

logger = logging.getLogger(__name__)

_COLLAPSE_RE = re.compile(r"[\s_]+")


def normalize_label(label: str) -> str:
    """Case-fold and collapse whitespace/underscore runs to a single space."""
    return _COLLAPSE_RE.sub(" ", label.casefold()).strip()


class MatchKind(Enum):
    EXACT = "exact"  # normalized label equals the (normalized) pattern
    LOOSE = "loose"  # regex search on normalized label, then on raw label
    RAW = "raw"  # case-insensitive regex search on raw label only


@dataclass(frozen=True)
class MatchRule:
    kind: MatchKind
    pattern: str
    _regex: re.Pattern[str] = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        if self.kind is MatchKind.EXACT:
            object.__setattr__(self, "pattern", normalize_label(self.pattern))
        source = re.escape(self.pattern) if self.kind is MatchKind.EXACT else self.pattern
        object.__setattr__(self, "_regex", re.compile(source, re.IGNORECASE))

    def find(self, labels: Sequence[str], normalized: Sequence[str]) -> str | None:
        """Return the first label (in header order) this rule accepts."""
        if self.kind is MatchKind.EXACT:
            for label, norm in zip(labels, normalized):
                if norm == self.pattern:
                    return label
            return None
        if self.kind is MatchKind.LOOSE:
            for label, norm in zip(labels, normalized):
                if self._regex.search(norm):
                    return label
        for label in labels:
            if self._regex.search(label):
                return label
        return None


def exact(pattern: str) -> MatchRule:
    return MatchRule(MatchKind.EXACT, pattern)


def loose(pattern: str) -> MatchRule:
    return MatchRule(MatchKind.LOOSE, pattern)


def raw(pattern: str) -> MatchRule:
    return MatchRule(MatchKind.RAW, pattern)


# Most specific first. Order within a role is the resolution priority.
ROLE_RULES: dict[Role, tuple[MatchRule, ...]] = {
    Role.DATE: (
        exact("date sampled"),
        exact("sample date"),
        exact("sampledate"),
        exact("collection date"),
        exact("date"),
        loose(r"date"),
        loose(r"\b(sampled|collected)\b"),
    ),
    Role.TAXON: (
        exact("taxon"),
        exact("taxa"),
        exact("taxon name"),
        exact("species"),
        loose(r"taxon|taxa"),
        loose(r"species"),
        loose(r"scientific ?name"),
        loose(r"organism"),
        loose(r"alga(e|l)"),
    ),
    Role.PRIMARY_METRIC: (
        exact("cells per ml"),
        exact("cells/ml"),
        exact("cellsperml"),
        loose(r"cells? ?(per|/) ?ml"),
        loose(r"cells? ?(per|/) ?l\b"),
        loose(r"cell (count|density)"),
        loose(r"\bcells?\b"),
        loose(r"density|abundance|count"),
    ),
    Role.SECONDARY_METRIC: (
        exact("biovolume"),
        loose(r"bio ?volume"),
        loose(r"\bum3\b"),
        raw(r"[µμ]m(³|3)"),
    ),
    Role.TERTIARY_METRIC: (
        exact("units per ml"),
        exact("natural units per ml"),
        loose(r"(natural )?units? ?(per|/) ?ml"),
        loose(r"\bnu ?(per|/) ?ml"),
        loose(r"colonies|filaments"),
    ),
    Role.SITE: (
        exact("site"),
        exact("station"),
        exact("site/depth"),
        loose(r"\bsite\b"),
        loose(r"site|station"),
        loose(r"location"),
        loose(r"depth"),
        loose(r"lake|reservoir|waterbody"),
    ),
    Role.GENUS: (
        exact("genus"),
        loose(r"\bgenus\b"),
        loose(r"genera"),
    ),
}


def build_extra_rules(patterns: Mapping[str, Sequence[str]] | None) -> dict[Role, tuple[MatchRule, ...]]:
    """Turn ``{role_name: [regex, ...]}`` (e.g. from config) into LOOSE rules."""
    extra: dict[Role, tuple[MatchRule, ...]] = {}
    for role_name, regexes in (patterns or {}).items():
        try:
            role = Role(role_name)
        except ValueError as e:
            raise ValueError(f"unknown role in role_patterns: {role_name}") from e
        extra[role] = tuple(loose(p) for p in regexes)
    return extra


def resolve_roles(
    labels: Sequence[str],
    extra_rules: Mapping[Role, Sequence[MatchRule]] | None = None,
) -> RoleMap:
    """Bind every role to the first header label its rules accept.

    Rules from ``extra_rules`` are tried before the built-in ones. A label may
    end up bound to more than one role; no exclusivity is enforced.
    """
    normalized = [normalize_label(label) for label in labels]
    bindings: dict[Role, str | None] = {}
    for role in Role:
        rules = tuple((extra_rules or {}).get(role, ())) + ROLE_RULES[role]
        bound = None
        for rule in rules:
            bound = rule.find(labels, normalized)
            if bound is not None:
                break
        bindings[role] = bound
        logger.debug(f"role {role.value} -> {bound!r}")
    return RoleMap.from_bindings(bindings)


def require_roles(role_map: RoleMap, required: Sequence[Role] = REQUIRED_ROLES) -> RoleMap:
    """Raise MissingRequiredColumnError naming every unbound required role."""
    missing = role_map.missing(required)
    if missing:
        raise MissingRequiredColumnError(role.value for role in missing)
    return role_map

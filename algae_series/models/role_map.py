from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass, fields
from enum import Enum

"""Semantic roles and the RoleMap binding them to header labels."""

__all__ = [
    "Role",
    "RoleMap",
    "REQUIRED_ROLES",
    "METRIC_ROLES",
    "METRIC_LABELS",
]


class Role(Enum):
    """Semantic meaning a worksheet column may fulfil."""
    DATE = "date"
    TAXON = "taxon"
    PRIMARY_METRIC = "primary_metric"  # count per volume, e.g. cells/mL
    SECONDARY_METRIC = "secondary_metric"
    TERTIARY_METRIC = "tertiary_metric"
    SITE = "site"
    GENUS = "genus"


REQUIRED_ROLES: tuple[Role, ...] = (Role.DATE, Role.TAXON, Role.PRIMARY_METRIC, Role.SITE)

METRIC_ROLES: tuple[Role, ...] = (Role.PRIMARY_METRIC, Role.SECONDARY_METRIC, Role.TERTIARY_METRIC)

# Chart label per requested metric
METRIC_LABELS: dict[Role, str] = {
    Role.PRIMARY_METRIC: "Cells per mL",
    Role.SECONDARY_METRIC: "Biovolume (um3/mL)",
    Role.TERTIARY_METRIC: "Natural units per mL",
}


@dataclass(frozen=True)
class RoleMap:
    """Role -> header label bindings for one loaded dataset.

    Resolved once from the header row; any role may be None when no header
    matched it.
    """
    date: str | None = None
    taxon: str | None = None
    primary_metric: str | None = None
    secondary_metric: str | None = None
    tertiary_metric: str | None = None
    site: str | None = None
    genus: str | None = None

    @classmethod
    def from_bindings(cls, bindings: dict[Role, str | None]) -> RoleMap:
        return cls(**{role.value: label for role, label in bindings.items()})

    def label_for(self, role: Role) -> str | None:
        return getattr(self, role.value)

    def missing(self, roles: Iterable[Role] = REQUIRED_ROLES) -> list[Role]:
        """Return the roles from ``roles`` that have no bound label, in order."""
        return [role for role in roles if self.label_for(role) is None]

    def as_dict(self) -> dict[str, str | None]:
        return {f.name: getattr(self, f.name) for f in fields(self)}

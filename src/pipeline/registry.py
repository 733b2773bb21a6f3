# src/pipeline/registry.py — v1
"""Domain registry — static catalogue of report sections.

Loads DomainSpec entries from the DOMAIN_TABLE config, validates that keys
and section ordinals are unique, and resolves source-data labels (including
aliases) to their canonical domain.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from typing import Any

from neuroreport.config.domains import DOMAIN_TABLE
from neuroreport.core.errors import DomainNotFound, RegistryError
from neuroreport.core.models import AgeClass, DomainSpec

logger = logging.getLogger(__name__)


class DomainRegistry:
    """Registry of all report domains.

    A label may be shared by several domains only when those domains apply
    to disjoint age classes; ``resolve`` then needs the age class to pick
    one. Every other label maps to exactly one domain.
    """

    def __init__(self, specs: Iterable[DomainSpec] = ()) -> None:
        self._specs: dict[str, DomainSpec] = {}
        self._by_label: dict[str, list[DomainSpec]] = {}
        self._ordinals: dict[int, str] = {}
        for spec in specs:
            self.register(spec)

    @classmethod
    def from_table(cls, table: list[dict[str, Any]] | None = None) -> DomainRegistry:
        """Build a registry from a declarative table (default: DOMAIN_TABLE)."""
        rows = DOMAIN_TABLE if table is None else table
        registry = cls(DomainSpec(**row) for row in rows)
        logger.debug("Registry loaded %d domains", len(registry))
        return registry

    def __len__(self) -> int:
        return len(self._specs)

    def __contains__(self, key: object) -> bool:
        return key in self._specs

    @property
    def keys(self) -> list[str]:
        """Domain keys in section order."""
        return [spec.key for spec in self.list_specs()]

    def register(self, spec: DomainSpec) -> None:
        """Add a domain, rejecting duplicate keys, ordinals and ambiguous aliases."""
        if spec.key in self._specs:
            raise RegistryError(f"Duplicate domain key '{spec.key}'")

        owner = self._ordinals.get(spec.section_ordinal)
        if owner is not None:
            raise RegistryError(
                f"Section ordinal {spec.section_ordinal} of '{spec.key}' "
                f"is already used by '{owner}'"
            )

        for label in spec.labels:
            for other in self._by_label.get(label, []):
                if spec.age_classes & other.age_classes:
                    raise RegistryError(
                        f"Label '{label}' maps to both '{other.key}' and "
                        f"'{spec.key}' for overlapping age classes"
                    )

        self._specs[spec.key] = spec
        self._ordinals[spec.section_ordinal] = spec.key
        for label in spec.labels:
            self._by_label.setdefault(label, []).append(spec)

    def get(self, key: str) -> DomainSpec | None:
        """Get domain by key, or None if not registered."""
        return self._specs.get(key)

    def resolve(self, label: str, age_class: AgeClass | None = None) -> DomainSpec:
        """Map a source-data label to its domain.

        Matching is exact. When several domains share the label (one per age
        class) the age class selects among them.

        Raises:
            DomainNotFound: If no domain matches.
            RegistryError: If the label is shared and no age class was given.
        """
        candidates = self._by_label.get(label, [])
        if age_class is not None:
            candidates = [s for s in candidates if age_class in s.age_classes]
        if not candidates:
            raise DomainNotFound(label, age_class)
        if len(candidates) > 1:
            keys = ", ".join(s.key for s in candidates)
            raise RegistryError(
                f"Label '{label}' is shared by {keys}; an age class is required"
            )
        return candidates[0]

    def discover(
        self, labels: Iterable[str], age_class: AgeClass | None = None
    ) -> list[DomainSpec]:
        """Domains referenced by a set of source labels, in section order.

        Aliases of the same domain collapse to one entry. Labels that match
        no domain are logged and ignored.
        """
        found: dict[str, DomainSpec] = {}
        for label in labels:
            try:
                spec = self.resolve(label, age_class)
            except RegistryError as exc:
                logger.debug("Ignoring label %r: %s", label, exc)
                continue
            found[spec.key] = spec
        return sorted(found.values(), key=lambda s: s.section_ordinal)

    def list_specs(self) -> list[DomainSpec]:
        """All domains sorted by section ordinal."""
        return sorted(self._specs.values(), key=lambda s: s.section_ordinal)

"""
Translation of snapshot identifiers to the identifiers assigned on import.
"""

from dataclasses import dataclass
from typing import Dict, Union

from budgetvault.services.store import EntityType


@dataclass(frozen=True)
class Mapped:
    """The snapshot id was imported and received ``value``."""

    value: str


@dataclass(frozen=True)
class Unmapped:
    """No record with this snapshot id was imported; ``value`` is passed through."""

    value: str


Resolution = Union[Mapped, Unmapped]

REMAPPED_TYPES = (
    EntityType.TEMPLATE,
    EntityType.TEMPLATE_LINE,
    EntityType.MONTHLY_BUDGET,
    EntityType.SAVINGS_GOAL,
)


class IdRemapper:
    """
    Per-entity-type tables of old id -> new id, built while importing.

    Only the types referenced by other records are tracked. Resolving an id
    that was never recorded returns it unchanged, wrapped in ``Unmapped``,
    so callers can tell the two cases apart.
    """

    def __init__(self) -> None:
        self._maps: Dict[EntityType, Dict[str, str]] = {
            entity: {} for entity in REMAPPED_TYPES
        }

    def record(self, entity: EntityType, old_id: str, new_id: str) -> None:
        """Remember that ``old_id`` was stored as ``new_id``."""
        self._maps[entity][old_id] = new_id

    def resolve(self, entity: EntityType, old_id: str) -> Resolution:
        """Translate a snapshot id of the given type."""
        new_id = self._maps[entity].get(old_id)
        if new_id is None:
            return Unmapped(old_id)
        return Mapped(new_id)

    def __len__(self) -> int:
        return sum(len(mapping) for mapping in self._maps.values())

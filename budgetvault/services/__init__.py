"""Business logic services package"""

from budgetvault.services.data_transfer import DataTransferService
from budgetvault.services.deletion import DeletionPlanner, DeletionStep
from budgetvault.services.export import SnapshotBuilder
from budgetvault.services.id_remapper import IdRemapper, Mapped, Unmapped
from budgetvault.services.importer import ImportOrchestrator, ResultAccumulator, assign_owner
from budgetvault.services.store import ENTITY_SPECS, EntityStore, EntityType

__all__ = [
    "DataTransferService",
    "DeletionPlanner",
    "DeletionStep",
    "SnapshotBuilder",
    "IdRemapper",
    "Mapped",
    "Unmapped",
    "ImportOrchestrator",
    "ResultAccumulator",
    "assign_owner",
    "ENTITY_SPECS",
    "EntityStore",
    "EntityType",
]

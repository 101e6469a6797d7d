from __future__ import annotations

from pathlib import Path

from seatbooking.application.exceptions import BranchNotFoundError
from seatbooking.application.ports.inventory import InventoryPort
from seatbooking.domain.entities.inventory import InventorySnapshot
from seatbooking.infrastructure.catalog_file import deserialize_snapshot, load_catalog


class MemoryInventoryProvider(InventoryPort):
    def __init__(self, snapshots: list[InventorySnapshot] | None = None) -> None:
        self._snapshots = {s.branch.id: s for s in snapshots or []}

    @classmethod
    def from_json(cls, path: str | Path) -> "MemoryInventoryProvider":
        data = load_catalog(path)
        return cls([deserialize_snapshot(branch) for branch in data.get("branches", [])])

    def get_snapshot(self, branch_id: str) -> InventorySnapshot:
        snapshot = self._snapshots.get(branch_id)
        if snapshot is None:
            raise BranchNotFoundError("Branch not found")
        return snapshot

    def put_snapshot(self, snapshot: InventorySnapshot) -> None:
        self._snapshots[snapshot.branch.id] = snapshot

from __future__ import annotations

from abc import ABC, abstractmethod

from seatbooking.domain.entities.inventory import InventorySnapshot


class InventoryPort(ABC):
    @abstractmethod
    def get_snapshot(self, branch_id: str) -> InventorySnapshot:
        """
        Return plans, additional fees, seats and lockers (with occupancy) for a branch.

        Raises CollaboratorError if the branch is unknown or the source is unavailable.
        """
        raise NotImplementedError

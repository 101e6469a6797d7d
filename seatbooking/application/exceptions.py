class BookingValidationError(ValueError):
    """Raised when a selection or step gate fails (missing plan, seat, locker, amount)."""
    pass


class CollaboratorError(RuntimeError):
    """Raised when an external collaborator (inventory, coupons, bookings, students) fails or rejects."""
    pass


class BranchNotFoundError(CollaboratorError):
    """Raised by inventory providers for an unknown branch id."""
    pass

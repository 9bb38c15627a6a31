"""Domain errors raised by services and stores.

Routers translate these into HTTP responses; services never raise
HTTPException themselves.
"""


class OrderDeskError(Exception):
    """Base class for domain errors."""


class NotFoundError(OrderDeskError):
    def __init__(self, entity: str, entity_id):
        self.entity = entity
        self.entity_id = entity_id
        super().__init__(f"{entity} {entity_id} not found")


class StoreFailure(OrderDeskError):
    """A persistence call failed (connection, constraint, timeout)."""


class DuplicateDerivation(StoreFailure):
    """An automatic task with the same derivation key already exists."""

    def __init__(self, derivation_key: str):
        self.derivation_key = derivation_key
        super().__init__(f"Task already derived: {derivation_key}")


class ConflictError(OrderDeskError):
    """The operation is refused because of dependent records or current state."""

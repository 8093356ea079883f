"""Domain exceptions raised by ledger lookups."""


class TourNotFoundError(LookupError):
    """Raised when no tour has the requested id."""

    def __init__(self, tour_id: int) -> None:
        super().__init__(f"Tour {tour_id} not found")
        self.tour_id = tour_id


class RecordNotFoundError(LookupError):
    """Raised when a tour has no entry or preparation item with the requested id."""

    def __init__(self, kind: str, tour_id: int, record_id: int) -> None:
        super().__init__(f"No {kind} {record_id} in tour {tour_id}")
        self.kind = kind
        self.tour_id = tour_id
        self.record_id = record_id

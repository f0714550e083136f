"""
Domain errors raised by the slot, booking, user and settings managers.

Each carries the HTTP status the API answers with; the FastAPI app turns
them into ``{"detail": ...}`` responses.
"""


class GymError(Exception):
    status_code = 400

    def __init__(self, detail: str):
        super().__init__(detail)
        self.detail = detail


class ValidationError(GymError):
    """Malformed or out-of-range input (non-weekday date, bad settings)."""
    status_code = 400


class ForbiddenError(GymError):
    """Acting on a slot or booking owned by someone else."""
    status_code = 403


class NotFoundError(GymError):
    status_code = 404


class ConflictError(GymError):
    """Duplicate slot, or deletion blocked by active bookings."""
    status_code = 409


class CapacityError(ConflictError):
    pass


class AlreadyBookedError(ConflictError):
    pass


class AlreadyCancelledError(ConflictError):
    pass

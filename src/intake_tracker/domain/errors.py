"""Domain errors."""

from intake_tracker.domain.tracking import IntakeStatus


class StorageError(RuntimeError):
    """Raised when a write to the backing store fails."""


class IntakeRejectedError(Exception):
    """Raised when a submitted entry would push a total into unsafe territory."""

    def __init__(self, status: IntakeStatus) -> None:
        super().__init__(f"Intake rejected: {status.value}")
        self.status = status

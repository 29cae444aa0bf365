"""Registration record store interface."""

from __future__ import annotations

from abc import ABC, abstractmethod

from app.schemas.registration import Registration


class AbstractRegistrationStore(ABC):
    """Append-only store of accepted registrations."""

    @abstractmethod
    def append(self, registration: Registration) -> None:
        """Durably append one registration.

        Raises:
            RecordPersistenceAppError: If the registration could not be written.
        """
        raise NotImplementedError

"""Errors raised by the journal and its storage backends."""


class JournalError(Exception):
    """Base class for journal errors."""

    pass


class BackendUnavailable(JournalError):
    """The storage backend could not be reached. Retrying may succeed."""

    pass


class NotFound(JournalError):
    """The referenced entry does not exist."""

    def __init__(self, entry_id: str):
        super().__init__(f"Entry not found: {entry_id}")
        self.entry_id = entry_id


class PersistenceError(JournalError):
    """The backend was reachable but the data could not be stored or read back."""

    pass


class ProfileNotSet(JournalError):
    """No child profile has been saved yet."""

    pass

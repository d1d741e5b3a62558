"""Storage backend interface."""

from typing import Protocol

from keepsake.core.entries import ChildProfile, JournalEntry, Photo


class BackendAdapter(Protocol):
    """
    Interface for durable journal storage.

    Every call either fully succeeds or raises ``BackendUnavailable`` /
    ``PersistenceError``; a failed call leaves nothing half-written.
    """

    def read_profile(self) -> ChildProfile | None:
        """Read the child profile. Returns None if none was saved."""
        ...

    def write_profile(self, profile: ChildProfile) -> None:
        """Replace the child profile."""
        ...

    def read_tags(self) -> list[str]:
        """Read the tag vocabulary (ordered, unique)."""
        ...

    def write_tags(self, tags: list[str]) -> None:
        """Replace the tag vocabulary."""
        ...

    def read_entries(self) -> list[JournalEntry]:
        """Read all entries, newest-inserted first."""
        ...

    def write_entry(self, entry: JournalEntry) -> None:
        """Upsert an entry by id. New ids go to the front, known ids keep their place."""
        ...

    def delete_entry(self, entry_id: str) -> None:
        """Delete an entry by id. Unknown ids are ignored."""
        ...

    def store_photo(self, data: bytes, media_type: str) -> Photo:
        """Durably store photo bytes and return a reference to them."""
        ...

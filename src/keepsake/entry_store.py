"""Entry store - the journal's in-session list of entries, kept in step with a backend."""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable
from datetime import date

from .core.age import compute_age
from .core.entries import ChildProfile, EntryDraft, EntryUpdate, JournalEntry, Photo, normalize_tags
from .core.ids import new_id
from .errors import NotFound, ProfileNotSet
from .ports.backend import BackendAdapter

logger = logging.getLogger(__name__)

DEFAULT_TAGS = ["Happy", "Milestone", "Funny", "Sleeping", "Family"]


class EntryStore:
    """
    Owns the list of journal entries for one session.

    The cached list only changes after the backend call behind it succeeds,
    so a failed operation leaves it untouched. Backend errors propagate
    unchanged and nothing is retried.

    Not safe for concurrent use: issue one operation at a time and wait for
    it to finish before the next.
    """

    def __init__(
        self,
        backend: BackendAdapter,
        id_factory: Callable[[], str] = new_id,
    ):
        self.backend = backend
        self._new_id = id_factory
        self._entries: list[JournalEntry] = []
        self._loaded = False

    @property
    def entries(self) -> list[JournalEntry]:
        """Cached entries, newest-inserted first. No backend call."""
        return list(self._entries)

    def _ensure_loaded(self) -> None:
        if not self._loaded:
            self.list()

    def _index_of(self, entry_id: str) -> int | None:
        return next((i for i, e in enumerate(self._entries) if e.id == entry_id), None)

    # ============== Entries ==============

    def list(self) -> list[JournalEntry]:
        """Fetch all entries from the backend, replacing the cached list."""
        entries = self.backend.read_entries()
        self._entries = list(entries)
        self._loaded = True
        return list(self._entries)

    def get(self, entry_id: str) -> JournalEntry:
        """Return a cached entry by id."""
        self._ensure_loaded()
        index = self._index_of(entry_id)
        if index is None:
            raise NotFound(entry_id)
        return self._entries[index]

    def create(self, draft: EntryDraft, birth_date: date) -> JournalEntry:
        """Assign an id, compute the age, persist, and put the entry first."""
        self._ensure_loaded()
        entry = JournalEntry(
            id=self._new_id(),
            date=draft.date,
            notes=draft.notes,
            tags=draft.tags,
            photos=draft.photos,
            age_at_time=compute_age(birth_date, draft.date),
        )
        self.backend.write_entry(entry)
        self._entries.insert(0, entry)
        logger.info(f"Created entry {entry.id} for {entry.date.isoformat()}")
        return entry

    def update(self, entry_id: str, draft: EntryDraft, birth_date: date) -> JournalEntry:
        """
        Replace an existing entry's fields, keeping its id and position.

        The age is recomputed from the draft date and the given birth date.
        Raises NotFound if the id is unknown; nothing is written in that case.
        """
        self._ensure_loaded()
        index = self._index_of(entry_id)
        if index is None:
            raise NotFound(entry_id)

        entry = JournalEntry(
            id=entry_id,
            date=draft.date,
            notes=draft.notes,
            tags=draft.tags,
            photos=draft.photos,
            age_at_time=compute_age(birth_date, draft.date),
        )
        self.backend.write_entry(entry)
        self._entries[index] = entry
        logger.info(f"Updated entry {entry_id}")
        return entry

    def save(self, change: EntryDraft | EntryUpdate, birth_date: date) -> JournalEntry:
        """Create a new entry from a draft, or update one from an EntryUpdate."""
        if isinstance(change, EntryUpdate):
            return self.update(change.id, change.draft, birth_date)
        return self.create(change, birth_date)

    def delete(self, entry_id: str) -> None:
        """Delete an entry. Unknown ids are a no-op. Photo bytes are left in storage."""
        self.backend.delete_entry(entry_id)
        index = self._index_of(entry_id)
        if index is not None:
            del self._entries[index]
            logger.info(f"Deleted entry {entry_id}")

    # ============== Profile, tags, photos ==============

    def load_profile(self) -> ChildProfile | None:
        return self.backend.read_profile()

    def require_profile(self) -> ChildProfile:
        """Load the profile, raising ProfileNotSet if there is none."""
        profile = self.backend.read_profile()
        if profile is None:
            raise ProfileNotSet("No child profile yet. Run 'keepsake init' first.")
        return profile

    def save_profile(self, profile: ChildProfile) -> None:
        self.backend.write_profile(profile)

    def load_tags(self) -> list[str]:
        """Tag vocabulary, or the default tags if none was saved."""
        return self.backend.read_tags() or list(DEFAULT_TAGS)

    def remember_tags(self, tags: Iterable[str]) -> list[str]:
        """Add new tags to the vocabulary. Writes only when something was added."""
        current = self.load_tags()
        merged = list(normalize_tags([*current, *tags]))
        if merged != current:
            self.backend.write_tags(merged)
        return merged

    def attach_photo(self, data: bytes, media_type: str) -> Photo:
        """Store photo bytes in the backend."""
        return self.backend.store_photo(data, media_type)

"""Journal domain models and their storage records - no I/O dependencies."""

from collections.abc import Iterable
from dataclasses import dataclass
from datetime import date

from .age import AgeDuration, parse_date


def normalize_tags(tags: Iterable[str]) -> tuple[str, ...]:
    """Strip, drop blanks and de-duplicate tags, keeping first-seen order."""
    seen: dict[str, None] = {}
    for tag in tags:
        tag = tag.strip()
        if tag:
            seen.setdefault(tag, None)
    return tuple(seen)


@dataclass(frozen=True)
class ChildProfile:
    """The child a journal is about."""

    name: str
    birth_date: date

    def __post_init__(self):
        if not self.name or not self.name.strip():
            raise ValueError("Profile name must be a non-empty string")

    def to_record(self) -> dict:
        return {"name": self.name, "birthDate": self.birth_date.isoformat()}

    @classmethod
    def from_record(cls, data: dict) -> "ChildProfile":
        return cls(name=data["name"], birth_date=parse_date(data["birthDate"]))


@dataclass(frozen=True)
class Photo:
    """A stored photo. The bytes live in the backend; this is the reference."""

    id: str
    locator: str
    media_type: str

    def to_record(self) -> dict:
        return {"id": self.id, "locator": self.locator, "mediaType": self.media_type}

    @classmethod
    def from_record(cls, data: dict) -> "Photo":
        # Older records used "url" / "mimeType"
        return cls(
            id=data["id"],
            locator=data.get("locator") or data.get("url", ""),
            media_type=data.get("mediaType") or data.get("mimeType", ""),
        )


@dataclass(frozen=True)
class EntryDraft:
    """Caller-supplied entry fields, before an id is assigned."""

    date: date
    notes: str = ""
    tags: tuple[str, ...] = ()
    photos: tuple[Photo, ...] = ()

    def __post_init__(self):
        object.__setattr__(self, "tags", normalize_tags(self.tags))
        object.__setattr__(self, "photos", tuple(self.photos))


@dataclass(frozen=True)
class EntryUpdate:
    """Replacement fields for an entry that already exists."""

    id: str
    draft: EntryDraft


@dataclass(frozen=True)
class JournalEntry:
    """
    A saved journal entry.

    ``age_at_time`` is a cached value derived from the profile birth date
    and ``date``. New entries are only built by the entry store, which
    recomputes it on every write.
    """

    id: str
    date: date
    notes: str
    tags: tuple[str, ...]
    photos: tuple[Photo, ...]
    age_at_time: AgeDuration

    def to_record(self) -> dict:
        return {
            "id": self.id,
            "date": self.date.isoformat(),
            "photos": [p.to_record() for p in self.photos],
            "notes": self.notes,
            "tags": list(self.tags),
            "ageAtTime": self.age_at_time.to_record(),
        }

    @classmethod
    def from_record(cls, data: dict) -> "JournalEntry":
        """Rebuild an entry from a stored record, trusting its cached age."""
        return cls(
            id=data["id"],
            date=parse_date(data["date"]),
            notes=data.get("notes", ""),
            tags=normalize_tags(data.get("tags", [])),
            photos=tuple(Photo.from_record(p) for p in data.get("photos", [])),
            age_at_time=AgeDuration.from_record(data.get("ageAtTime", {})),
        )

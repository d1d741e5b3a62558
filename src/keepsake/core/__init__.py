"""Functional core - pure business logic with no I/O."""

from .age import AgeDuration, compute_age, parse_date
from .ids import new_id
from .entries import ChildProfile, Photo, EntryDraft, EntryUpdate, JournalEntry
from .filters import filter_entries, unique_tags, unique_age_years

__all__ = [
    # Age
    "AgeDuration",
    "compute_age",
    "parse_date",
    # Identifiers
    "new_id",
    # Entries
    "ChildProfile",
    "Photo",
    "EntryDraft",
    "EntryUpdate",
    "JournalEntry",
    # Filters
    "filter_entries",
    "unique_tags",
    "unique_age_years",
]

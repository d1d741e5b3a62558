"""Filtering over a materialized entry list - pure functions, no I/O."""

from .entries import JournalEntry


def filter_entries(
    entries: list[JournalEntry],
    search: str = "",
    tag: str | None = None,
    age_years: int | None = None,
) -> list[JournalEntry]:
    """
    Filter entries by notes text, tag and age in years.

    All given criteria must match. Order is preserved.
    """
    needle = search.lower()
    return [
        e
        for e in entries
        if needle in e.notes.lower()
        and (tag is None or tag in e.tags)
        and (age_years is None or e.age_at_time.years == age_years)
    ]


def unique_tags(entries: list[JournalEntry]) -> list[str]:
    """Tags used across entries, in first-seen order."""
    seen: dict[str, None] = {}
    for e in entries:
        for t in e.tags:
            seen.setdefault(t, None)
    return list(seen)


def unique_age_years(entries: list[JournalEntry]) -> list[int]:
    """Distinct age-in-years values, ascending."""
    return sorted({e.age_at_time.years for e in entries})

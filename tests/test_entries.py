"""Tests for journal models, identifiers and filters."""

from datetime import date

import pytest

from keepsake.core.age import AgeDuration
from keepsake.core.entries import ChildProfile, EntryDraft, JournalEntry, Photo
from keepsake.core.filters import filter_entries, unique_age_years, unique_tags
from keepsake.core.ids import new_id


def make_entry(id, notes="", tags=(), years=0, entry_date=date(2024, 1, 1)):
    return JournalEntry(
        id=id,
        date=entry_date,
        notes=notes,
        tags=tuple(tags),
        photos=(),
        age_at_time=AgeDuration(years, 0, 0),
    )


@pytest.fixture
def entries():
    return [
        make_entry("c", notes="First steps in the garden", tags=["Milestone", "Happy"], years=1),
        make_entry("b", notes="Fell asleep on the dog", tags=["Sleeping", "Funny"], years=0),
        make_entry("a", notes="Ultrasound", tags=["Family"], years=0),
    ]


class TestNewId:
    def test_ten_thousand_distinct(self):
        ids = {new_id() for _ in range(10_000)}
        assert len(ids) == 10_000

    def test_safe_as_key(self):
        assert new_id().isalnum()


class TestChildProfile:
    def test_rejects_empty_name(self):
        with pytest.raises(ValueError):
            ChildProfile(name="  ", birth_date=date(2023, 1, 15))

    def test_record(self):
        profile = ChildProfile(name="Mali", birth_date=date(2023, 1, 15))
        assert profile.to_record() == {"name": "Mali", "birthDate": "2023-01-15"}
        assert ChildProfile.from_record(profile.to_record()) == profile

    def test_from_record_with_timestamp(self):
        profile = ChildProfile.from_record({"name": "Mali", "birthDate": "2023-01-15T00:00:00.000Z"})
        assert profile.birth_date == date(2023, 1, 15)


class TestEntryDraft:
    def test_tags_are_deduplicated_in_order(self):
        draft = EntryDraft(date=date(2024, 1, 1), tags=["Happy", " Funny ", "Happy", ""])
        assert draft.tags == ("Happy", "Funny")

    def test_photos_become_tuple(self):
        photo = Photo(id="p1", locator="file:///p1.jpg", media_type="image/jpeg")
        draft = EntryDraft(date=date(2024, 1, 1), photos=[photo])
        assert draft.photos == (photo,)


class TestJournalEntryRecord:
    def test_cached_age_is_required(self):
        with pytest.raises(TypeError):
            JournalEntry(id="e1", date=date(2024, 4, 20), notes="", tags=(), photos=())

    def test_field_named_record(self):
        entry = JournalEntry(
            id="e1",
            date=date(2024, 4, 20),
            notes="Park",
            tags=("Happy",),
            photos=(Photo(id="p1", locator="https://example.com/p1", media_type="image/png"),),
            age_at_time=AgeDuration(1, 3, 5),
        )
        assert entry.to_record() == {
            "id": "e1",
            "date": "2024-04-20",
            "photos": [{"id": "p1", "locator": "https://example.com/p1", "mediaType": "image/png"}],
            "notes": "Park",
            "tags": ["Happy"],
            "ageAtTime": {"years": 1, "months": 3, "days": 5},
        }

    def test_reads_legacy_photo_keys(self):
        entry = JournalEntry.from_record(
            {
                "id": "e1",
                "date": "2024-04-20T10:00:00.000Z",
                "photos": [{"id": "p1", "url": "blob:abc", "mimeType": "image/jpeg"}],
                "notes": "",
                "tags": ["Happy"],
                "ageAtTime": {"years": 1, "months": 3, "days": 5},
            }
        )
        assert entry.date == date(2024, 4, 20)
        assert entry.photos[0].locator == "blob:abc"
        assert entry.photos[0].media_type == "image/jpeg"
        assert entry.age_at_time == AgeDuration(1, 3, 5)


class TestFilterEntries:
    def test_no_criteria_returns_all(self, entries):
        assert filter_entries(entries) == entries

    def test_search_is_case_insensitive(self, entries):
        assert [e.id for e in filter_entries(entries, search="GARDEN")] == ["c"]

    def test_tag(self, entries):
        assert [e.id for e in filter_entries(entries, tag="Funny")] == ["b"]

    def test_age_years(self, entries):
        assert [e.id for e in filter_entries(entries, age_years=0)] == ["b", "a"]

    def test_criteria_combine(self, entries):
        assert filter_entries(entries, search="garden", age_years=0) == []

    def test_unique_tags_first_seen_order(self, entries):
        assert unique_tags(entries) == ["Milestone", "Happy", "Sleeping", "Funny", "Family"]

    def test_unique_age_years_ascending(self, entries):
        assert unique_age_years(entries) == [0, 1]

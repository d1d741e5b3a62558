"""Tests for the local file backend."""

import json
from datetime import date
from pathlib import Path
from unittest.mock import patch

import pytest

from keepsake.adapters.local_store import LocalBackend
from keepsake.core.age import AgeDuration
from keepsake.core.entries import ChildProfile, JournalEntry
from keepsake.errors import BackendUnavailable, PersistenceError


def make_entry(id, notes=""):
    return JournalEntry(
        id=id,
        date=date(2024, 4, 20),
        notes=notes,
        tags=("Happy",),
        photos=(),
        age_at_time=AgeDuration(1, 3, 5),
    )


@pytest.fixture
def backend(tmp_path):
    return LocalBackend(tmp_path / "data")


class TestLocalBackend:
    def test_empty_store(self, backend):
        assert backend.read_profile() is None
        assert backend.read_tags() == []
        assert backend.read_entries() == []

    def test_profile_round_trip(self, backend):
        profile = ChildProfile(name="Mali", birth_date=date(2023, 1, 15))
        backend.write_profile(profile)
        assert backend.read_profile() == profile
        assert json.loads(backend.profile_path.read_text()) == {
            "name": "Mali",
            "birthDate": "2023-01-15",
        }

    def test_tags_round_trip(self, backend):
        backend.write_tags(["Happy", "Bath"])
        assert backend.read_tags() == ["Happy", "Bath"]

    def test_new_entries_are_prepended(self, backend):
        backend.write_entry(make_entry("a"))
        backend.write_entry(make_entry("b"))
        assert [e.id for e in backend.read_entries()] == ["b", "a"]

    def test_write_existing_id_replaces_in_place(self, backend):
        backend.write_entry(make_entry("a"))
        backend.write_entry(make_entry("b"))
        backend.write_entry(make_entry("a", notes="changed"))

        entries = backend.read_entries()
        assert [e.id for e in entries] == ["b", "a"]
        assert entries[1].notes == "changed"

    def test_delete_entry(self, backend):
        backend.write_entry(make_entry("a"))
        backend.write_entry(make_entry("b"))
        backend.delete_entry("a")
        assert [e.id for e in backend.read_entries()] == ["b"]

    def test_delete_unknown_is_noop(self, backend):
        backend.write_entry(make_entry("a"))
        backend.delete_entry("missing")
        assert [e.id for e in backend.read_entries()] == ["a"]

    def test_entries_file_is_field_named_json(self, backend):
        backend.write_entry(make_entry("a", notes="Park"))
        records = json.loads(backend.entries_path.read_text())
        assert records == [
            {
                "id": "a",
                "date": "2024-04-20",
                "photos": [],
                "notes": "Park",
                "tags": ["Happy"],
                "ageAtTime": {"years": 1, "months": 3, "days": 5},
            }
        ]

    def test_skips_malformed_records(self, backend):
        backend.data_dir.mkdir(parents=True)
        backend.entries_path.write_text(
            json.dumps([{"id": "bad"}, make_entry("good").to_record()])
        )
        assert [e.id for e in backend.read_entries()] == ["good"]

    def test_corrupt_file_raises_persistence_error(self, backend):
        backend.data_dir.mkdir(parents=True)
        backend.entries_path.write_text("{not json")
        with pytest.raises(PersistenceError):
            backend.read_entries()

    def test_non_list_document_raises_persistence_error(self, backend):
        backend.data_dir.mkdir(parents=True)
        backend.entries_path.write_text(json.dumps({"a": 1}))
        with pytest.raises(PersistenceError):
            backend.read_entries()
        with pytest.raises(PersistenceError):
            backend.write_entry(make_entry("b"))

    def test_skips_records_that_are_not_objects(self, backend):
        backend.data_dir.mkdir(parents=True)
        backend.entries_path.write_text(json.dumps(["junk", 3, make_entry("good").to_record()]))
        assert [e.id for e in backend.read_entries()] == ["good"]
        backend.delete_entry("good")
        assert backend.read_entries() == []

    def test_unreadable_file_raises_backend_unavailable(self, backend):
        backend.write_entry(make_entry("a"))
        with patch.object(Path, "read_text", side_effect=PermissionError("denied")):
            with pytest.raises(BackendUnavailable):
                backend.read_entries()

    def test_failed_write_keeps_previous_file(self, backend):
        backend.write_entry(make_entry("a"))
        with patch("keepsake.adapters.local_store.os.replace", side_effect=OSError("disk full")):
            with pytest.raises(PersistenceError):
                backend.write_entry(make_entry("b"))

        assert [e.id for e in backend.read_entries()] == ["a"]
        leftovers = [p for p in backend.data_dir.iterdir() if p.name.startswith(".")]
        assert leftovers == []

    def test_store_photo(self, backend):
        photo = backend.store_photo(b"\x89PNG data", "image/png")
        path = backend.photos_dir / f"{photo.id}.png"
        assert path.read_bytes() == b"\x89PNG data"
        assert photo.locator == path.resolve().as_uri()
        assert photo.media_type == "image/png"

    def test_delete_entry_keeps_photo_bytes(self, backend):
        photo = backend.store_photo(b"bytes", "image/jpeg")
        entry = JournalEntry(
            id="a",
            date=date(2024, 1, 1),
            notes="",
            tags=(),
            photos=(photo,),
            age_at_time=AgeDuration(0, 11, 17),
        )
        backend.write_entry(entry)
        backend.delete_entry("a")
        assert len(list(backend.photos_dir.iterdir())) == 1

"""Local file-based storage adapter."""

import json
import logging
import mimetypes
import os
import tempfile
from pathlib import Path

from keepsake.core.entries import ChildProfile, JournalEntry, Photo
from keepsake.core.ids import new_id
from keepsake.errors import BackendUnavailable, PersistenceError

logger = logging.getLogger(__name__)


class LocalBackend:
    """
    Local JSON storage.

    Implements BackendAdapter protocol. Profile, tags and entries each live
    in one JSON document under ``data_dir``; photo bytes go to ``photos/``.
    """

    def __init__(self, data_dir: Path | str):
        self.data_dir = Path(data_dir).expanduser()
        self.photos_dir = self.data_dir / "photos"

    @property
    def profile_path(self) -> Path:
        return self.data_dir / "profile.json"

    @property
    def tags_path(self) -> Path:
        return self.data_dir / "tags.json"

    @property
    def entries_path(self) -> Path:
        return self.data_dir / "entries.json"

    def _read_json(self, path: Path):
        """Read a JSON document. Returns None if the file does not exist."""
        try:
            if not path.exists():
                return None
            text = path.read_text()
        except OSError as e:
            raise BackendUnavailable(f"Cannot read {path}: {e}") from e
        try:
            return json.loads(text)
        except json.JSONDecodeError as e:
            raise PersistenceError(f"Corrupt journal file {path}: {e}") from e

    def _write_bytes(self, path: Path, data: bytes) -> None:
        """Write a file atomically: temp file in the same directory, then rename."""
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(dir=path.parent, prefix=f".{path.name}.")
            try:
                with os.fdopen(fd, "wb") as f:
                    f.write(data)
                os.replace(tmp_name, path)
            except BaseException:
                Path(tmp_name).unlink(missing_ok=True)
                raise
        except OSError as e:
            raise PersistenceError(f"Cannot write {path}: {e}") from e

    def _write_json(self, path: Path, data) -> None:
        self._write_bytes(path, json.dumps(data, indent=2, ensure_ascii=False).encode("utf-8"))

    def _read_records(self) -> list[dict]:
        records = self._read_json(self.entries_path) or []
        if not isinstance(records, list):
            raise PersistenceError(f"Corrupt journal file {self.entries_path}: expected a list of entries")
        return records

    def read_profile(self) -> ChildProfile | None:
        """Read the child profile. Returns None if none was saved."""
        data = self._read_json(self.profile_path)
        if not data:
            return None
        try:
            return ChildProfile.from_record(data)
        except (KeyError, ValueError) as e:
            raise PersistenceError(f"Invalid profile record: {e}") from e

    def write_profile(self, profile: ChildProfile) -> None:
        """Replace the child profile."""
        self._write_json(self.profile_path, profile.to_record())
        logger.info(f"Saved profile for {profile.name}")

    def read_tags(self) -> list[str]:
        """Read the tag vocabulary."""
        return list(self._read_json(self.tags_path) or [])

    def write_tags(self, tags: list[str]) -> None:
        """Replace the tag vocabulary."""
        self._write_json(self.tags_path, list(tags))

    def read_entries(self) -> list[JournalEntry]:
        """Read all entries, newest-inserted first."""
        entries = []
        for record in self._read_records():
            try:
                entries.append(JournalEntry.from_record(record))
            except (KeyError, ValueError, TypeError, AttributeError) as e:
                record_id = record.get("id", "?") if isinstance(record, dict) else "?"
                logger.warning(f"Skipping malformed entry record {record_id}: {e}")
        logger.debug(f"Read {len(entries)} entries from {self.entries_path}")
        return entries

    def write_entry(self, entry: JournalEntry) -> None:
        """Upsert an entry by id."""
        records = self._read_records()
        record = entry.to_record()
        index = next((i for i, r in enumerate(records) if isinstance(r, dict) and r.get("id") == entry.id), None)
        if index is None:
            records.insert(0, record)
        else:
            records[index] = record
        self._write_json(self.entries_path, records)
        logger.info(f"Wrote entry {entry.id}")

    def delete_entry(self, entry_id: str) -> None:
        """Delete an entry by id. Unknown ids are ignored."""
        records = self._read_records()
        remaining = [r for r in records if not (isinstance(r, dict) and r.get("id") == entry_id)]
        if len(remaining) == len(records):
            return
        self._write_json(self.entries_path, remaining)
        logger.info(f"Deleted entry {entry_id}")

    def store_photo(self, data: bytes, media_type: str) -> Photo:
        """Save photo bytes under photos/ and return a file:// reference."""
        photo_id = new_id()
        ext = mimetypes.guess_extension(media_type) or ".bin"
        path = self.photos_dir / f"{photo_id}{ext}"
        self._write_bytes(path, data)
        return Photo(id=photo_id, locator=path.resolve().as_uri(), media_type=media_type)

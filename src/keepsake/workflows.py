"""Shared workflow layer for the CLI.

Builds the configured backend and entry store, and turns command-line
input (file paths, partial edits) into entry drafts.
"""

import mimetypes
from collections.abc import Iterable
from datetime import date
from pathlib import Path

from .adapters.google_drive import GoogleDriveBackend
from .adapters.local_store import LocalBackend
from .config import Config
from .core.entries import EntryDraft, JournalEntry, Photo
from .entry_store import EntryStore
from .errors import BackendUnavailable
from .ports.backend import BackendAdapter


def get_backend(config: Config) -> BackendAdapter:
    """Resolve the storage backend from config."""
    if config.backend == "google":
        if not config.spreadsheet_id or not config.drive_folder_id:
            raise BackendUnavailable(
                "Google backend needs SPREADSHEET_ID and DRIVE_FOLDER_ID in keepsake.conf"
            )
        return GoogleDriveBackend(
            spreadsheet_id=config.spreadsheet_id,
            folder_id=config.drive_folder_id,
            token_file=config.google_token_file,
            client_secret_file=config.google_client_secret_file,
        )
    return LocalBackend(Path(config.data_dir).expanduser())


def open_store(config: Config) -> EntryStore:
    """Create an entry store over the configured backend."""
    return EntryStore(get_backend(config))


def upload_photos(store: EntryStore, paths: Iterable[Path | str]) -> list[Photo]:
    """Store local image files and return their photo references."""
    photos = []
    for path in paths:
        path = Path(path).expanduser()
        media_type = mimetypes.guess_type(path.name)[0] or "application/octet-stream"
        photos.append(store.attach_photo(path.read_bytes(), media_type))
    return photos


def add_entry(
    store: EntryStore,
    entry_date: date,
    notes: str = "",
    tags: Iterable[str] = (),
    photo_paths: Iterable[Path | str] = (),
) -> JournalEntry:
    """Create an entry for the profile's child and grow the tag vocabulary."""
    profile = store.require_profile()
    photos = upload_photos(store, photo_paths)
    draft = EntryDraft(date=entry_date, notes=notes, tags=tuple(tags), photos=tuple(photos))
    entry = store.create(draft, profile.birth_date)
    store.remember_tags(entry.tags)
    return entry


def edit_entry(
    store: EntryStore,
    entry_id: str,
    entry_date: date | None = None,
    notes: str | None = None,
    tags: Iterable[str] | None = None,
    photo_paths: Iterable[Path | str] = (),
    clear_photos: bool = False,
) -> JournalEntry:
    """
    Update an entry, keeping any field not given.

    New photos are appended to the existing ones unless clear_photos is set.
    """
    profile = store.require_profile()
    current = store.get(entry_id)
    new_photos = upload_photos(store, photo_paths)
    kept = () if clear_photos else current.photos
    draft = EntryDraft(
        date=entry_date or current.date,
        notes=current.notes if notes is None else notes,
        tags=current.tags if tags is None else tuple(tags),
        photos=(*kept, *new_photos),
    )
    entry = store.update(entry_id, draft, profile.birth_date)
    store.remember_tags(entry.tags)
    return entry

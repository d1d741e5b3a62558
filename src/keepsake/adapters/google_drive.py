"""Google Sheets + Google Drive storage adapter."""

import json
import logging
import mimetypes
from pathlib import Path

from keepsake.core.entries import ChildProfile, JournalEntry, Photo
from keepsake.core.ids import new_id
from keepsake.errors import BackendUnavailable, PersistenceError

logger = logging.getLogger(__name__)

SCOPES = [
    "https://www.googleapis.com/auth/spreadsheets",
    "https://www.googleapis.com/auth/drive.file",
]

PROFILE_RANGE = "Profile!A1:B2"
TAGS_RANGE = "Tags!A1"
ENTRIES_SHEET = "Entries"
ENTRIES_RANGE = f"{ENTRIES_SHEET}!A:B"
ENTRY_IDS_RANGE = f"{ENTRIES_SHEET}!A:A"


class GoogleDriveBackend:
    """
    Google storage.

    Implements BackendAdapter protocol. Records live in a spreadsheet:
    ``Profile`` holds key/value rows, ``Tags!A1`` a JSON array, and
    ``Entries`` one row per entry (id, JSON record) in insertion order.
    Photo bytes are uploaded to a Drive folder.

    The spreadsheet and folder must already exist.
    """

    def __init__(
        self,
        spreadsheet_id: str,
        folder_id: str,
        token_file: Path | str,
        client_secret_file: str = "",
    ):
        self.spreadsheet_id = spreadsheet_id
        self.folder_id = folder_id
        self.client_secret_file = client_secret_file
        self._token_path = Path(token_file).expanduser()
        self._services: dict[str, object] = {}

    def _get_credentials(self):
        """Load credentials from token.json, refreshing if needed."""
        from google.auth.exceptions import RefreshError, TransportError
        from google.auth.transport.requests import Request
        from google.oauth2.credentials import Credentials

        if not self._token_path.exists():
            logger.warning(f"No token at {self._token_path} — run 'keepsake auth'")
            return None

        try:
            creds = Credentials.from_authorized_user_file(str(self._token_path), SCOPES)
        except ValueError as e:
            raise BackendUnavailable(f"Invalid Google token, run 'keepsake auth': {e}") from e

        if creds.expired and creds.refresh_token:
            try:
                creds.refresh(Request())
            except (RefreshError, TransportError) as e:
                raise BackendUnavailable(f"Failed to refresh Google token: {e}") from e
            self._token_path.write_text(creds.to_json())
            self._token_path.chmod(0o600)

        return creds

    def _build_service(self, name: str, version: str):
        """Build a Google API service client."""
        from googleapiclient.discovery import build

        creds = self._get_credentials()
        if not creds:
            raise BackendUnavailable("Not authenticated with Google. Run 'keepsake auth' first.")
        return build(name, version, credentials=creds, cache_discovery=False)

    def _service(self, name: str, version: str):
        if name not in self._services:
            self._services[name] = self._build_service(name, version)
        return self._services[name]

    @property
    def _values(self):
        return self._service("sheets", "v4").spreadsheets().values()

    def _execute(self, request, action: str):
        """Run an API request, translating failures into journal errors."""
        from google.auth.exceptions import TransportError
        from googleapiclient.errors import HttpError
        from httplib2 import HttpLib2Error

        try:
            return request.execute()
        except HttpError as e:
            status = int(e.resp.status)
            if status == 429 or status >= 500:
                raise BackendUnavailable(f"Google API unavailable while {action}: {e}") from e
            raise PersistenceError(f"Google API rejected {action}: {e}") from e
        except (TransportError, HttpLib2Error, OSError) as e:
            raise BackendUnavailable(f"Cannot reach Google while {action}: {e}") from e

    def _get_values(self, range_: str, action: str) -> list[list[str]]:
        result = self._execute(
            self._values.get(spreadsheetId=self.spreadsheet_id, range=range_),
            action,
        )
        return result.get("values", [])

    def _update_values(self, range_: str, values: list[list[str]], action: str) -> None:
        self._execute(
            self._values.update(
                spreadsheetId=self.spreadsheet_id,
                range=range_,
                valueInputOption="RAW",
                body={"values": values},
            ),
            action,
        )

    def authenticate(self) -> bool:
        """Run OAuth flow and save the token. Returns True on success."""
        from google_auth_oauthlib.flow import InstalledAppFlow

        if not self.client_secret_file:
            logger.error("No client secret file configured")
            return False

        secret_path = Path(self.client_secret_file).expanduser()
        if not secret_path.exists():
            logger.error(f"Client secret file not found: {secret_path}")
            return False

        flow = InstalledAppFlow.from_client_secrets_file(str(secret_path), SCOPES)
        creds = flow.run_local_server(port=0)

        self._token_path.parent.mkdir(parents=True, exist_ok=True)
        self._token_path.write_text(creds.to_json())
        self._token_path.chmod(0o600)
        return True

    def read_profile(self) -> ChildProfile | None:
        """Read the child profile. Returns None if none was saved."""
        rows = self._get_values(PROFILE_RANGE, "reading profile")
        data = {row[0]: row[1] for row in rows if len(row) >= 2}
        if not data:
            return None
        try:
            return ChildProfile.from_record(data)
        except (KeyError, ValueError) as e:
            raise PersistenceError(f"Invalid profile record: {e}") from e

    def write_profile(self, profile: ChildProfile) -> None:
        """Replace the child profile."""
        record = profile.to_record()
        self._update_values(PROFILE_RANGE, [[k, v] for k, v in record.items()], "saving profile")
        logger.info(f"Saved profile for {profile.name}")

    def read_tags(self) -> list[str]:
        """Read the tag vocabulary."""
        rows = self._get_values(TAGS_RANGE, "reading tags")
        if not rows or not rows[0]:
            return []
        try:
            return list(json.loads(rows[0][0]))
        except json.JSONDecodeError as e:
            raise PersistenceError(f"Invalid tags cell: {e}") from e

    def write_tags(self, tags: list[str]) -> None:
        """Replace the tag vocabulary."""
        self._update_values(TAGS_RANGE, [[json.dumps(list(tags), ensure_ascii=False)]], "saving tags")

    def read_entries(self) -> list[JournalEntry]:
        """Read all entries, newest-inserted first."""
        rows = self._get_values(ENTRIES_RANGE, "reading entries")
        entries = []
        for row in reversed(rows):
            if len(row) < 2:
                continue
            try:
                entries.append(JournalEntry.from_record(json.loads(row[1])))
            except (json.JSONDecodeError, KeyError, ValueError, TypeError) as e:
                logger.warning(f"Skipping malformed entry row {row[0]}: {e}")
        logger.debug(f"Read {len(entries)} entries from sheet")
        return entries

    def _find_row(self, entry_id: str) -> int | None:
        """1-based sheet row holding an entry id."""
        rows = self._get_values(ENTRY_IDS_RANGE, "looking up entry")
        for i, row in enumerate(rows, start=1):
            if row and row[0] == entry_id:
                return i
        return None

    def _entries_sheet_id(self) -> int:
        spreadsheet = self._execute(
            self._service("sheets", "v4")
            .spreadsheets()
            .get(spreadsheetId=self.spreadsheet_id, fields="sheets.properties"),
            "reading spreadsheet",
        )
        for sheet in spreadsheet.get("sheets", []):
            props = sheet.get("properties", {})
            if props.get("title") == ENTRIES_SHEET:
                return props["sheetId"]
        raise PersistenceError(f"Spreadsheet has no '{ENTRIES_SHEET}' sheet")

    def write_entry(self, entry: JournalEntry) -> None:
        """Upsert an entry by id."""
        row_values = [[entry.id, json.dumps(entry.to_record(), ensure_ascii=False)]]
        row = self._find_row(entry.id)
        if row is None:
            self._execute(
                self._values.append(
                    spreadsheetId=self.spreadsheet_id,
                    range=ENTRIES_RANGE,
                    valueInputOption="RAW",
                    insertDataOption="INSERT_ROWS",
                    body={"values": row_values},
                ),
                "saving entry",
            )
        else:
            self._update_values(f"{ENTRIES_SHEET}!A{row}:B{row}", row_values, "saving entry")
        logger.info(f"Wrote entry {entry.id}")

    def delete_entry(self, entry_id: str) -> None:
        """Delete an entry row by id. Unknown ids are ignored."""
        row = self._find_row(entry_id)
        if row is None:
            return
        sheet_id = self._entries_sheet_id()
        self._execute(
            self._service("sheets", "v4")
            .spreadsheets()
            .batchUpdate(
                spreadsheetId=self.spreadsheet_id,
                body={
                    "requests": [
                        {
                            "deleteDimension": {
                                "range": {
                                    "sheetId": sheet_id,
                                    "dimension": "ROWS",
                                    "startIndex": row - 1,
                                    "endIndex": row,
                                }
                            }
                        }
                    ]
                },
            ),
            "deleting entry",
        )
        logger.info(f"Deleted entry {entry_id}")

    def store_photo(self, data: bytes, media_type: str) -> Photo:
        """Upload photo bytes to the Drive folder."""
        from googleapiclient.http import MediaInMemoryUpload

        ext = mimetypes.guess_extension(media_type) or ""
        media = MediaInMemoryUpload(data, mimetype=media_type)
        created = self._execute(
            self._service("drive", "v3")
            .files()
            .create(
                body={"name": f"photo_{new_id()}{ext}", "parents": [self.folder_id]},
                media_body=media,
                fields="id, webViewLink",
            ),
            "uploading photo",
        )
        file_id = created["id"]
        locator = created.get("webViewLink") or f"https://drive.google.com/file/d/{file_id}/view"
        logger.info(f"Uploaded photo {file_id}")
        return Photo(id=file_id, locator=locator, media_type=media_type)

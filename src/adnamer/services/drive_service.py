"""Google Drive service for listing, downloading and renaming ad videos."""

import json
import logging
import os
import tempfile
from pathlib import Path
from typing import Iterable, List, Optional

from googleapiclient.discovery import build
from googleapiclient.errors import HttpError
from googleapiclient.http import MediaIoBaseDownload
from google.auth.exceptions import RefreshError
from google.auth.transport.requests import Request
from google.oauth2.credentials import Credentials
from google_auth_oauthlib.flow import InstalledAppFlow

from adnamer.models.video import (
    BatchRenameResult,
    DriveFolder,
    RenameOutcome,
    RenameRequest,
    VideoCandidate,
)
from adnamer.utils.errors import Unauthenticated
from adnamer.utils.retry import retry_api_call, translate_drive_error

logger = logging.getLogger(__name__)

SCOPES = ["https://www.googleapis.com/auth/drive"]

FOLDER_MIME_TYPE = "application/vnd.google-apps.folder"
PAGE_SIZE = 100


class DriveService:
    """Service for browsing a Drive folder and renaming the videos in it."""

    def __init__(self, client_id: Optional[str], client_secret: Optional[str],
                 token_path: str = "token.json", service=None):
        """Initialize Google Drive service.

        Args:
            client_id: Google OAuth client ID
            client_secret: Google OAuth client secret
            token_path: Where the authorized user token is cached
            service: Pre-built Drive API resource (skips authentication)
        """
        self.client_id = client_id
        self.client_secret = client_secret
        self.token_path = token_path
        self.service = service
        if self.service is None:
            self._authenticate()

    def _authenticate(self) -> None:
        """Authenticate with Google Drive API."""
        creds = None

        # Load existing token
        if os.path.exists(self.token_path):
            creds = Credentials.from_authorized_user_file(self.token_path, SCOPES)

        # If no valid credentials, get new ones
        if not creds or not creds.valid:
            if creds and creds.expired and creds.refresh_token:
                try:
                    creds.refresh(Request())
                except RefreshError as e:
                    raise Unauthenticated(
                        f"Stored Google token could not be refreshed, delete {self.token_path} and sign in again: {e}"
                    )
            else:
                creds = self._run_consent_flow()

            # Save credentials for next run
            with open(self.token_path, "w") as token:
                token.write(creds.to_json())

        self.service = build("drive", "v3", credentials=creds)
        logger.info("Google Drive service authenticated successfully")

    def _run_consent_flow(self) -> Credentials:
        if not self.client_id or not self.client_secret:
            raise Unauthenticated(
                "GOOGLE_CLIENT_ID and GOOGLE_CLIENT_SECRET are required to sign in to Google Drive"
            )

        credentials_config = {
            "installed": {
                "client_id": self.client_id,
                "client_secret": self.client_secret,
                "auth_uri": "https://accounts.google.com/o/oauth2/auth",
                "token_uri": "https://oauth2.googleapis.com/token",
                "auth_provider_x509_cert_url": "https://www.googleapis.com/oauth2/v1/certs",
                "redirect_uris": ["http://localhost:8080/"],
            }
        }

        # Write temporary credentials file
        fd, temp_creds_file = tempfile.mkstemp(suffix=".json")
        with os.fdopen(fd, "w") as f:
            json.dump(credentials_config, f)

        try:
            flow = InstalledAppFlow.from_client_secrets_file(temp_creds_file, SCOPES)
            # Ensure we get a refresh token
            flow.run_local_server(port=8080, prompt="consent")
            return flow.credentials
        finally:
            if os.path.exists(temp_creds_file):
                os.remove(temp_creds_file)

    def _list_all(self, query: str, fields: str, order_by: Optional[str] = "name") -> List[dict]:
        """Run a files.list query and follow every page."""
        files: List[dict] = []
        page_token = None
        while True:
            params = {
                "q": query,
                "fields": f"nextPageToken, files({fields})",
                "pageSize": PAGE_SIZE,
            }
            if order_by:
                params["orderBy"] = order_by
            if page_token:
                params["pageToken"] = page_token

            try:
                response = self.service.files().list(**params).execute()
            except HttpError as e:
                raise translate_drive_error(e)

            files.extend(response.get("files", []))
            page_token = response.get("nextPageToken")
            if not page_token:
                return files

    @retry_api_call(max_retries=3, base_delay=2.0)
    def list_folders(self, parent_id: str = "root") -> List[DriveFolder]:
        """List the subfolders of a folder, ordered by name.

        Args:
            parent_id: Folder to browse, "root" for My Drive

        Returns:
            Subfolders of the parent folder
        """
        files = self._list_all(
            f"'{parent_id}' in parents and mimeType = '{FOLDER_MIME_TYPE}' and trashed = false",
            "id, name",
        )
        folders = [DriveFolder(id=f["id"], name=f.get("name", "")) for f in files]
        logger.debug(f"Found {len(folders)} folders under {parent_id}")
        return folders

    @retry_api_call(max_retries=3, base_delay=2.0)
    def list_videos(self, folder_id: str) -> List[VideoCandidate]:
        """List the video files in a folder, ordered by name.

        Args:
            folder_id: Drive folder ID

        Returns:
            VideoCandidates with Drive-reported duration when available
        """
        files = self._list_all(
            f"'{folder_id}' in parents and mimeType contains 'video/' and trashed = false",
            "id, name, mimeType, videoMediaMetadata(durationMillis)",
        )

        videos = []
        for f in files:
            duration_ms = (f.get("videoMediaMetadata") or {}).get("durationMillis")
            try:
                duration = int(int(duration_ms) / 1000 + 0.5) if duration_ms else 0
            except (TypeError, ValueError):
                duration = 0
            videos.append(VideoCandidate(
                id=f["id"],
                display_name=f.get("name", ""),
                media_type=f.get("mimeType", ""),
                known_duration_seconds=duration,
            ))

        logger.info(f"Found {len(videos)} videos in folder {folder_id}")
        return videos

    @retry_api_call(max_retries=3, base_delay=2.0)
    def list_file_names(self, folder_id: str) -> List[str]:
        """Return the name of every file in a folder (existing-name snapshot)."""
        files = self._list_all(
            f"'{folder_id}' in parents and trashed = false",
            "name",
            order_by=None,
        )
        return [f["name"] for f in files if f.get("name")]

    @retry_api_call(max_retries=3, base_delay=2.0)
    def download_file(self, file_id: str, destination: str) -> str:
        """Download a file's content to a local path.

        Args:
            file_id: Drive file ID
            destination: Local file path to write

        Returns:
            The destination path
        """
        destination_path = Path(destination)
        destination_path.parent.mkdir(parents=True, exist_ok=True)

        try:
            request = self.service.files().get_media(fileId=file_id)
            with open(destination_path, "wb") as f:
                downloader = MediaIoBaseDownload(f, request)
                done = False
                while not done:
                    _, done = downloader.next_chunk()
        except HttpError as e:
            destination_path.unlink(missing_ok=True)
            raise translate_drive_error(e)

        size_mb = destination_path.stat().st_size / 1024 / 1024
        logger.debug(f"Downloaded {file_id} ({size_mb:.2f}MB) to {destination_path}")
        return str(destination_path)

    @retry_api_call(max_retries=3, base_delay=2.0)
    def rename_file(self, file_id: str, new_name: str) -> None:
        """Rename a single Drive file."""
        try:
            self.service.files().update(
                fileId=file_id, body={"name": new_name}, fields="id, name"
            ).execute()
        except HttpError as e:
            raise translate_drive_error(e)
        logger.debug(f"Renamed {file_id} -> {new_name}")

    def rename_files(self, requests: Iterable[RenameRequest]) -> BatchRenameResult:
        """Rename files one after another, tolerating individual failures.

        Already renamed files are kept when a later item fails.

        Args:
            requests: File ID / new name pairs

        Returns:
            Count of renamed files and the IDs that failed

        Raises:
            Unauthenticated: If Drive rejects the credentials mid-batch
        """
        outcomes = []
        for request in requests:
            try:
                self.rename_file(request.file_id, request.new_name)
                outcomes.append(RenameOutcome(request.file_id, True))
                logger.info(f"Renamed file {request.file_id} to {request.new_name}")
            except Unauthenticated:
                raise
            except Exception as e:
                logger.error(f"Error renaming file {request.file_id}: {e}")
                outcomes.append(RenameOutcome(request.file_id, False))

        return BatchRenameResult.from_outcomes(outcomes)

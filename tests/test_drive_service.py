import httplib2
import pytest
from googleapiclient.errors import HttpError

from adnamer.models.video import RenameRequest
from adnamer.services.drive_service import DriveService
from adnamer.utils.errors import Unauthenticated


class DummyRequest:
    def __init__(self, result=None, error=None):
        self.result = result
        self.error = error

    def execute(self):
        if self.error:
            raise self.error
        return self.result


class DummyFiles:
    def __init__(self, pages, missing_ids=(), revoked_ids=()):
        self.pages = pages
        self.missing_ids = set(missing_ids)
        self.revoked_ids = set(revoked_ids)
        self.list_calls = []
        self.updates = []

    def list(self, **params):
        self.list_calls.append(params)
        page_token = params.get("pageToken")
        return DummyRequest(self.pages[page_token])

    def update(self, fileId, body, fields=None):
        if fileId in self.missing_ids:
            response = httplib2.Response({"status": "404"})
            error = HttpError(response, b'{"error": {"message": "File not found"}}')
            return DummyRequest(error=error)
        if fileId in self.revoked_ids:
            response = httplib2.Response({"status": "401"})
            error = HttpError(response, b'{"error": {"message": "Invalid Credentials"}}')
            return DummyRequest(error=error)
        self.updates.append((fileId, body["name"]))
        return DummyRequest({"id": fileId, "name": body["name"]})


class DummyDriveResource:
    def __init__(self, files):
        self._files = files

    def files(self):
        return self._files


def make_service(pages, missing_ids=(), revoked_ids=()):
    files = DummyFiles(pages, missing_ids, revoked_ids)
    return DriveService(None, None, service=DummyDriveResource(files)), files


def test_list_videos_follows_pages_and_reads_duration():
    pages = {
        None: {
            "files": [
                {"id": "v1", "name": "a.mp4", "mimeType": "video/mp4",
                 "videoMediaMetadata": {"durationMillis": "29600"}},
            ],
            "nextPageToken": "p2",
        },
        "p2": {
            "files": [{"id": "v2", "name": "b.mov", "mimeType": "video/quicktime"}],
        },
    }
    drive, files = make_service(pages)

    videos = drive.list_videos("FOLDER1")

    assert [v.id for v in videos] == ["v1", "v2"]
    assert videos[0].known_duration_seconds == 30
    assert videos[1].known_duration_seconds == 0
    assert videos[1].media_type == "video/quicktime"
    assert "'FOLDER1' in parents" in files.list_calls[0]["q"]
    assert "video/" in files.list_calls[0]["q"]
    assert files.list_calls[1]["pageToken"] == "p2"


def test_list_folders_and_file_names():
    pages = {None: {"files": [{"id": "f1", "name": "Ads"}, {"id": "f2", "name": "Raw"}]}}
    drive, files = make_service(pages)

    folders = drive.list_folders()
    assert [(f.id, f.name) for f in folders] == [("f1", "Ads"), ("f2", "Raw")]
    assert "'root' in parents" in files.list_calls[0]["q"]
    assert "application/vnd.google-apps.folder" in files.list_calls[0]["q"]

    assert drive.list_file_names("f1") == ["Ads", "Raw"]
    assert "orderBy" not in files.list_calls[1]


def test_rename_files_tolerates_individual_failures():
    drive, files = make_service({}, missing_ids={"gone"})

    result = drive.rename_files([
        RenameRequest("v1", "300001.TTS.0.Ad.5sec.mp4"),
        RenameRequest("gone", "300002.TTS.0.Ad.5sec.mp4"),
        RenameRequest("v3", "300003.TTS.0.Ad.5sec.mp4"),
    ])

    assert result.renamed_count == 2
    assert result.failed_ids == {"gone"}
    assert files.updates == [
        ("v1", "300001.TTS.0.Ad.5sec.mp4"),
        ("v3", "300003.TTS.0.Ad.5sec.mp4"),
    ]


def test_rename_files_stops_on_revoked_credentials():
    drive, files = make_service({}, revoked_ids={"v2"})

    with pytest.raises(Unauthenticated):
        drive.rename_files([
            RenameRequest("v1", "300001.TTS.0.Ad.5sec.mp4"),
            RenameRequest("v2", "300002.TTS.0.Ad.5sec.mp4"),
            RenameRequest("v3", "300003.TTS.0.Ad.5sec.mp4"),
        ])

    # earlier renames are kept, later ones are never attempted
    assert files.updates == [("v1", "300001.TTS.0.Ad.5sec.mp4")]


def test_list_videos_rounds_half_seconds_up():
    pages = {
        None: {
            "files": [
                {"id": "v1", "name": "a.mp4", "mimeType": "video/mp4",
                 "videoMediaMetadata": {"durationMillis": "30500"}},
                {"id": "v2", "name": "b.mp4", "mimeType": "video/mp4",
                 "videoMediaMetadata": {"durationMillis": "28500"}},
            ],
        },
    }
    drive, _ = make_service(pages)

    videos = drive.list_videos("FOLDER1")

    assert [v.known_duration_seconds for v in videos] == [31, 29]

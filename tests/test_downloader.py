import aiohttp
import pytest

from qobuz_api.core.downloader import download_file
from qobuz_api.core.errors import DownloadError


class FakeContent:
    def __init__(self, chunks):
        self._chunks = chunks

    async def iter_chunked(self, size):
        for chunk in self._chunks:
            yield chunk


class FakeResponse:
    def __init__(self, status, chunks):
        self.status = status
        self.content = FakeContent(chunks)

    def raise_for_status(self):
        if self.status >= 400:
            raise aiohttp.ClientError(f"HTTP {self.status}")

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc, tb):
        return False


class FakeSession:
    """Answers each request with the next status in `statuses` (the last one repeats)."""

    def __init__(self, status=200, chunks=(b"abc", b"def"), statuses=None):
        self.statuses = list(statuses or [status])
        self.chunks = list(chunks)
        self.headers = []

    def get(self, url, headers=None):
        self.headers.append(headers or {})
        status = self.statuses.pop(0) if len(self.statuses) > 1 else self.statuses[0]
        return FakeResponse(status, self.chunks)


@pytest.mark.asyncio
async def test_fresh_download(tmp_path):
    dest = tmp_path / "nested" / "song.flac"
    session = FakeSession()
    written = await download_file("https://cdn.example/song", dest, session=session)

    assert written == 6
    assert dest.read_bytes() == b"abcdef"
    assert not (tmp_path / "nested" / "song.flac.part").exists()
    assert session.headers == [{}]


@pytest.mark.asyncio
async def test_resume_partial_download(tmp_path):
    dest = tmp_path / "song.flac"
    (tmp_path / "song.flac.part").write_bytes(b"abc")
    session = FakeSession(status=206, chunks=[b"def"])

    written = await download_file("https://cdn.example/song", dest, session=session)

    assert written == 6
    assert dest.read_bytes() == b"abcdef"
    assert session.headers == [{"Range": "bytes=3-"}]


@pytest.mark.asyncio
async def test_range_ignored_restarts(tmp_path):
    dest = tmp_path / "song.flac"
    (tmp_path / "song.flac.part").write_bytes(b"stale")
    session = FakeSession(status=200, chunks=[b"abc", b"def"])

    await download_file("https://cdn.example/song", dest, session=session)
    assert dest.read_bytes() == b"abcdef"


@pytest.mark.asyncio
async def test_http_error_becomes_download_error(tmp_path):
    dest = tmp_path / "song.flac"
    with pytest.raises(DownloadError):
        await download_file("https://cdn.example/song", dest, session=FakeSession(status=404))
    assert not dest.exists()


@pytest.mark.asyncio
async def test_unsatisfiable_range_restarts_from_scratch(tmp_path):
    # a .part file that already holds the whole body gets 416 on resume
    dest = tmp_path / "song.flac"
    (tmp_path / "song.flac.part").write_bytes(b"abcdef")
    session = FakeSession(statuses=[416, 200], chunks=[b"abcdef"])

    written = await download_file("https://cdn.example/song", dest, session=session)

    assert written == 6
    assert dest.read_bytes() == b"abcdef"
    assert not (tmp_path / "song.flac.part").exists()
    assert session.headers == [{"Range": "bytes=6-"}, {}]


@pytest.mark.asyncio
async def test_416_without_partial_file_is_an_error(tmp_path):
    dest = tmp_path / "song.flac"
    with pytest.raises(DownloadError):
        await download_file("https://cdn.example/song", dest, session=FakeSession(status=416))
    assert not dest.exists()

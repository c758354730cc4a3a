"""
Asynchronous file downloader.

`download_file` streams a URL to disk with `aiohttp`. Data goes to a `.part`
file next to the destination which is renamed into place once the stream
completes, so a finished path never holds a truncated file. An existing
`.part` file is resumed with a Range request when the server allows it; a
416 reply to that request discards the `.part` file and starts over.
"""

import logging
import os
from pathlib import Path

import aiohttp

from .errors import DownloadError

logger = logging.getLogger(__name__)

CHUNK_SIZE = 8192


async def _stream_to_file(
    session: aiohttp.ClientSession, url: str, dest_path: Path, temp_path: Path
) -> int:
    resume_pos = temp_path.stat().st_size if temp_path.exists() else 0
    headers = {"Range": f"bytes={resume_pos}-"} if resume_pos else {}

    async with session.get(url, headers=headers) as response:
        # 416: the range starts past the end, so the .part file is full or stale
        unsatisfiable = bool(resume_pos) and response.status == 416
        if not unsatisfiable:
            response.raise_for_status()
            written = await _write_body(response, url, dest_path, temp_path, resume_pos)

    if unsatisfiable:
        logger.warning(
            "downloader.restart",
            extra={"url": url, "dest": str(dest_path), "resume_pos": resume_pos},
        )
        temp_path.unlink()
        return await _stream_to_file(session, url, dest_path, temp_path)
    return written


async def _write_body(
    response: aiohttp.ClientResponse, url: str, dest_path: Path, temp_path: Path, resume_pos: int
) -> int:
    # 200 instead of 206 means the server ignored the Range header
    if resume_pos and response.status != 206:
        resume_pos = 0
    if resume_pos:
        logger.info(
            "downloader.resume",
            extra={"url": url, "dest": str(dest_path), "resume_pos": resume_pos},
        )
    written = resume_pos
    with open(temp_path, "ab" if resume_pos else "wb") as f:
        async for chunk in response.content.iter_chunked(CHUNK_SIZE):
            if chunk:
                f.write(chunk)
                written += len(chunk)
    return written


async def download_file(
    url: str,
    dest_path: Path,
    *,
    session: aiohttp.ClientSession | None = None,
) -> int:
    """Download `url` to `dest_path` and return the file size in bytes.

    Args:
        url: The URL of the file to download.
        dest_path: Where the finished file is placed. Parent directories are
            created as needed.
        session: Session to reuse; a short-lived one is opened when omitted.
    """
    dest_path = Path(dest_path)
    dest_path.parent.mkdir(parents=True, exist_ok=True)
    temp_path = dest_path.with_suffix(dest_path.suffix + ".part")

    try:
        if session is not None:
            written = await _stream_to_file(session, url, dest_path, temp_path)
        else:
            async with aiohttp.ClientSession() as own_session:
                written = await _stream_to_file(own_session, url, dest_path, temp_path)
    except aiohttp.ClientError as e:
        raise DownloadError(f"Failed to download {dest_path.name}: {e}") from e
    except OSError as e:
        raise DownloadError(f"Failed to write {temp_path}: {e}") from e

    os.replace(temp_path, dest_path)
    logger.info("downloader.done", extra={"url": url, "dest": str(dest_path), "bytes": written})
    return written

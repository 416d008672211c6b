"""
Filesystem access for the media directory.

Three operations, all re-done on every request so the server always
reflects what is on disk right now:

    list_available_files(media_dir)      → names of the regular files
    find_media_file(media_dir, filename) → path, if the name is listed
    read_media_file(path)                → bytes of that file

find_media_file() only hands out names that list_available_files() returned.
The client-supplied name is compared against that listing and is never
joined onto a path first. "../etc/passwd", "sub/file.mp3" and absolute
paths can't match because the listing only holds plain names of files
directly in the directory.
"""

import logging
import os
from pathlib import Path

from ..http.errors import NotFound, ServerError


logger = logging.getLogger(__name__)


def _is_utf8(name: str) -> bool:
    # os.listdir() smuggles undecodable bytes through as lone surrogates
    try:
        name.encode("utf-8")
    except UnicodeEncodeError:
        return False
    return True


def list_available_files(media_dir: str) -> list[str]:
    """
    Names of the regular files directly inside `media_dir`.

    Subdirectories are skipped. Symlinks count if they point at a regular
    file. Names that cannot be represented as UTF-8 are skipped since they
    could never be requested.

    Returns:
        Sorted list of file names.

    Raises:
        ServerError: If the directory cannot be read.
    """
    try:
        with os.scandir(media_dir) as it:
            entries = list(it)
    except OSError as e:
        raise ServerError(f"Unable to read media directory {media_dir!r}: {e}") from e

    files = []
    for entry in entries:
        try:
            if not entry.is_file():
                continue
        except OSError:
            # Vanished or unreadable between scandir() and stat()
            continue

        if _is_utf8(entry.name):
            files.append(entry.name)
        else:
            logger.debug(f"Skipping non UTF-8 file name {entry.name!r}")

    return sorted(files)


def find_media_file(media_dir: str, filename: str) -> Path:
    """
    Resolve a requested name to a file in the media directory.

    Args:
        media_dir: The media directory.
        filename: Decoded name from the request.

    Returns:
        Path of the file inside `media_dir`.

    Raises:
        NotFound: If `filename` is not one of list_available_files().
        ServerError: If the directory cannot be read.
    """
    if filename not in list_available_files(media_dir):
        raise NotFound(f"{filename!r} not in media directory")
    return Path(media_dir) / filename


def read_media_file(path: Path) -> bytes:
    """
    Read a whole file found by find_media_file().

    Raises:
        NotFound: If the file disappeared after it was listed.
        ServerError: For any other I/O failure.
    """
    try:
        return path.read_bytes()
    except FileNotFoundError as e:
        raise NotFound(f"{path.name!r} removed before it could be read") from e
    except OSError as e:
        raise ServerError(f"Unable to read {path.name!r}: {e}") from e

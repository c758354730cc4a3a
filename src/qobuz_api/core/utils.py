import hashlib
import time

_INVALID_FILENAME_CHARS = '<>:"|?*/\\\0'
MAX_FILENAME_LENGTH = 200


def get_md5_hash(value: str) -> str:
    return hashlib.md5(value.encode("utf-8")).hexdigest()


def get_current_timestamp() -> str:
    """Whole seconds since the epoch, as the API expects in `request_ts`."""
    return str(int(time.time()))


def sanitize_filename(name: str) -> str:
    """Make `name` safe as a single path component on Windows and Unix."""
    for ch in _INVALID_FILENAME_CHARS:
        name = name.replace(ch, "_")
    name = name.strip().strip(".")
    if len(name) > MAX_FILENAME_LENGTH:
        name = name[:MAX_FILENAME_LENGTH].rstrip()
    return name

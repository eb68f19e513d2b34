import os
from pathlib import Path

def normalize_path(path: str) -> str:
    """
    Returns a canonical absolute POSIX path.
    On Windows, it ensures the drive letter is consistently lowercased so
    template identifiers compare equal across lookups.
    """
    if not path:
        return ""

    p = Path(path).resolve()
    path_str = p.as_posix()

    # Path.resolve() might return C:/ or c:/ depending on environment
    if os.name == 'nt' and len(path_str) > 1 and path_str[1] == ':':
        path_str = path_str[0].lower() + path_str[1:]

    return path_str

def parent_prefix(path: str) -> str:
    """
    Drops the last segment of a slash-separated logical path.
    "stylesheets/admin/_forms" -> "stylesheets/admin", "colors" -> "".
    """
    if not path:
        return ""
    segments = path.rstrip("/").split("/")
    return "/".join(segments[:-1])

def join_virtual(*parts: str) -> str:
    """Joins logical path segments, skipping empty ones."""
    segments = []
    for part in parts:
        if part:
            segments.extend(s for s in part.split("/") if s)
    return "/".join(segments)

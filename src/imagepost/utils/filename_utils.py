# src/imagepost/utils/filename_utils.py

import posixpath


def get_file_extension(filename: str) -> str:
    """
    Extract the extension of a client filename, verbatim ("cat.JPG" -> ".JPG").
    Only the last path element is considered. Returns empty string if none.
    """
    name = posixpath.basename((filename or "").replace("\\", "/"))
    _, ext = posixpath.splitext(name)
    return ext

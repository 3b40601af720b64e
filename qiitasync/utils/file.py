"""
Local file helpers. Content is read and written as UTF-8 without newline
translation so files keep their exact byte layout.
"""

import os


def ensure_dir(path: str) -> None:
    """Create ``path`` and any missing parents."""
    os.makedirs(path, exist_ok=True)


def file_exists(path: str) -> bool:
    return os.path.isfile(path)


def read_file(path: str) -> str:
    with open(path, "r", encoding="utf-8", newline="") as f:
        return f.read()


def write_file(path: str, content: str) -> None:
    """
    Write ``content`` to ``path``, creating parent directories first.

    Args:
        path: Destination file
        content: Text to write
    """
    directory = os.path.dirname(path)
    if directory:
        ensure_dir(directory)
    with open(path, "w", encoding="utf-8", newline="") as f:
        f.write(content)


def remove_file(path: str) -> None:
    os.remove(path)

"""
Shell rc file helpers.

Hooks are installed by appending text only when the exact text is not
already in the file, so running `envtool init` twice leaves a single copy.
"""

from pathlib import Path
from typing import Union


PathLike = Union[str, Path]


def file_exists(path: PathLike) -> bool:
    """Check whether a file exists."""
    return Path(path).exists()


def read_file(path: PathLike) -> str:
    """Read a whole file. Undecodable bytes are kept as surrogates."""
    with open(path, 'r', errors='surrogateescape') as f:
        return f.read()


def write_file(path: PathLike, content: str) -> None:
    """Write a whole file, replacing any existing content."""
    with open(path, 'w') as f:
        f.write(content)


def contains_content(path: PathLike, content: str) -> bool:
    """
    Check whether a file already contains some text.

    A missing file contains nothing.
    """
    try:
        return content in read_file(path)
    except FileNotFoundError:
        return False


def append_to_file(path: PathLike, content: str) -> bool:
    """
    Append content unless it is already present.

    Args:
        path: File to append to (created if missing)
        content: Text to append

    Returns:
        True if the content was written, False if it was already there
    """
    if contains_content(path, content):
        return False

    with open(path, 'a') as f:
        f.write(content)
    return True


def ensure_hook_installed(rc_path: PathLike, hook_body: str) -> bool:
    """
    Install a hook into a shell rc file.

    Creates the rc file and its parent directories when missing.

    Args:
        rc_path: Shell configuration file
        hook_body: Hook text from hooks.build_hook()

    Returns:
        True if the hook was appended, False if it was already installed

    Raises:
        OSError: If the file or its directory cannot be created or written
        UnicodeError: If the hook text cannot be encoded for the file
    """
    path = Path(rc_path)

    if not file_exists(path):
        path.parent.mkdir(parents=True, exist_ok=True)
        write_file(path, "")

    return append_to_file(path, hook_body)

"""
Line-oriented .env file parser.

Every line is read on its own:
    KEY=value          -> ("KEY", "value")
    KEY = "two words"  -> ("KEY", "two words")
    # comment          -> skipped
    no equals sign     -> skipped

Values are opaque strings. There is no escape processing and no variable
expansion; only one matching pair of outer quotes is removed.
"""

from pathlib import Path
from typing import Dict, Optional, Tuple, Union


COMMENT_PREFIX = "#"
QUOTE_CHARS = ('"', "'")


def unquote(value: str) -> str:
    """
    Strip a single pair of matching outer quotes.

    Args:
        value: Trimmed value text

    Returns:
        Value without its outer quotes, or unchanged if not wrapped
    """
    if len(value) >= 2 and value[0] in QUOTE_CHARS and value[-1] == value[0]:
        return value[1:-1]
    return value


def parse_line(line: str) -> Optional[Tuple[str, str]]:
    """
    Parse a single .env line.

    Args:
        line: Raw line, with or without its line ending

    Returns:
        (key, value) tuple, or None if the line carries no assignment
    """
    stripped = line.strip()

    if not stripped or stripped.startswith(COMMENT_PREFIX):
        return None

    if '=' not in stripped:
        return None

    key, _, value = stripped.partition('=')
    key = key.strip()
    if not key:
        return None

    return key, unquote(value.strip())


def parse(content: str) -> Dict[str, str]:
    """
    Parse .env file content into a mapping.

    Later assignments of the same key overwrite earlier ones.

    Args:
        content: String content of a .env file

    Returns:
        Dictionary of key-value pairs
    """
    env_vars: Dict[str, str] = {}

    for line in content.splitlines():
        entry = parse_line(line)
        if entry is None:
            continue
        key, value = entry
        env_vars[key] = value

    return env_vars


def parse_file(path: Union[str, Path]) -> Dict[str, str]:
    """
    Read and parse a .env file.

    Args:
        path: Path to the .env file

    Returns:
        Dictionary of key-value pairs

    Raises:
        OSError: If the file cannot be opened or read
        UnicodeDecodeError: If the file is not valid text
    """
    with open(path, 'r') as f:
        return parse(f.read())

"""Per-directory directive files.

A directive is the first line of a `.shellcolor` file. The nearest file
walking up from the current directory wins.
"""

from pathlib import Path
from typing import Optional

from .tempfiles import write_line_atomic


DIRECTIVE_FILENAME = '.shellcolor'


def find_directive_file(cwd=None) -> Optional[Path]:
    """Find the nearest directive file at or above cwd.

    Args:
        cwd: Starting directory. Uses the process CWD if None.

    Returns:
        Path to the directive file, or None if no ancestor has one.
    """
    start = Path(cwd) if cwd else Path.cwd()
    for directory in (start, *start.parents):
        candidate = directory / DIRECTIVE_FILENAME
        if candidate.is_file():
            return candidate
    return None


def read_directive(path: Path) -> str:
    """Read the first line of a directive file, stripped.

    Returns:
        Directive string, or '' if the file can't be read.
    """
    try:
        with open(path, encoding='utf-8', errors='replace') as f:
            return f.readline().strip()
    except OSError:
        return ''


def find_directive(cwd=None) -> str:
    """Get the directive governing cwd, or '' if none is set."""
    path = find_directive_file(cwd)
    if path is None:
        return ''
    return read_directive(path)


def write_directive(directory, value: str) -> Path:
    """Write a directive for directory, replacing any existing one.

    Raises:
        ValueError: If value is empty or spans several lines.
    """
    if not value or not value.strip():
        raise ValueError("Directive must be non-empty string")

    path = Path(directory) / DIRECTIVE_FILENAME
    write_line_atomic(path, value.strip())
    return path


def remove_directive(directory) -> bool:
    """Delete the directive file in directory (ancestors untouched).

    Returns:
        True if a file was removed.
    """
    path = Path(directory) / DIRECTIVE_FILENAME
    try:
        path.unlink()
    except FileNotFoundError:
        return False
    return True


def ensure_gitignored(directory) -> bool:
    """Add the directive file to .gitignore at a git work tree root.

    Only touches directories that contain `.git`.

    Returns:
        True if .gitignore was modified.

    Raises:
        OSError: If .gitignore cannot be read or appended to.
    """
    directory = Path(directory)
    if not (directory / '.git').exists():
        return False

    gitignore = directory / '.gitignore'
    content = ''
    if gitignore.exists():
        content = gitignore.read_text(encoding='utf-8', errors='replace')
    entries = {line.strip() for line in content.splitlines()}
    if DIRECTIVE_FILENAME in entries or f'/{DIRECTIVE_FILENAME}' in entries:
        return False

    with open(gitignore, 'a', encoding='utf-8') as f:
        if content and not content.endswith('\n'):
            f.write('\n')
        f.write(f'{DIRECTIVE_FILENAME}\n')
    return True

"""Secure state files and atomic writes for Shell Color."""

import os
import sys
import tempfile
import traceback
from pathlib import Path


def debug_log(message: str, config=None, error: Exception = None) -> None:
    """Emit a diagnostic when debug mode is on.

    Writes to stderr and appends to the configured log file.

    Args:
        message: Diagnostic text
        config: Config object. Nothing is logged if None or debug is off.
        error: Optional exception whose traceback is appended to the log
    """
    if config is None or not config.debug:
        return

    print(f"[shellcolor] {message}", file=sys.stderr)
    try:
        log_file = config.log_file
        log_file.parent.mkdir(parents=True, exist_ok=True)
        with open(log_file, 'a') as f:
            f.write(f"{message}\n")
            if error is not None:
                f.write(''.join(traceback.format_exception(
                    type(error), error, error.__traceback__)))
    except Exception:
        # Don't fail if logging fails
        pass


def get_state_dir() -> Path:
    """Get secure state directory for Shell Color.

    Uses XDG_RUNTIME_DIR if available, falls back to ~/.cache/shellcolor.
    Creates directory with mode 700 if it doesn't exist.

    Returns:
        Path to state directory.
    """
    # Try XDG_RUNTIME_DIR first (cleaned on logout)
    xdg_runtime = os.environ.get('XDG_RUNTIME_DIR')
    if xdg_runtime:
        state_dir = Path(xdg_runtime) / 'shellcolor'
    else:
        state_dir = Path.home() / '.cache' / 'shellcolor'

    if not state_dir.exists():
        state_dir.mkdir(parents=True, mode=0o700, exist_ok=True)
    else:
        state_dir.chmod(0o700)

    return state_dir


def get_lock_file_path(pid: int) -> Path:
    """Get path to the ticker lock file for a shell.

    Args:
        pid: Shell process ID (must be positive integer).

    Raises:
        ValueError: If pid is invalid.
    """
    if not isinstance(pid, int) or pid <= 0:
        raise ValueError(f"Invalid pid: {pid}")

    return get_state_dir() / f'ticker-{pid}.pid'


def write_line_atomic(path: Path, line: str, mode: int = 0o644) -> None:
    """Atomically replace a file with a single line.

    Args:
        path: Target file.
        line: Content, written with a trailing newline.
        mode: Permissions for the new file.

    Raises:
        ValueError: If line spans more than one line.
    """
    if '\n' in line or '\r' in line:
        raise ValueError("Value must be a single line")

    path = Path(path)
    # Write to temp file in the same directory, then atomic rename
    temp_fd, temp_path = tempfile.mkstemp(
        dir=path.parent,
        prefix=f'{path.name}.',
        suffix='.tmp'
    )

    try:
        os.write(temp_fd, f"{line}\n".encode('utf-8'))
        os.close(temp_fd)
        os.chmod(temp_path, mode)
        os.replace(temp_path, path)
    except Exception:
        # Clean up temp file on error
        try:
            os.close(temp_fd)
        except OSError:
            pass
        try:
            os.unlink(temp_path)
        except OSError:
            pass
        raise


def cleanup_state_files() -> int:
    """Remove ticker lock files whose process is gone.

    Returns:
        Number of files removed.
    """
    removed = 0
    state_dir = get_state_dir()
    for lock_file in state_dir.glob('ticker-*.pid'):
        try:
            pid = int(lock_file.read_text().strip())
            os.kill(pid, 0)
        except ProcessLookupError:
            lock_file.unlink()
            removed += 1
        except (ValueError, OSError):
            # Unreadable or not ours; leave it
            continue
    return removed

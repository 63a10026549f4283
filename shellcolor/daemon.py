#!/usr/bin/env python3
"""Background ticker for Shell Color.

Re-applies time-driven directives (@cycle, @time) to one shell's terminal
every N seconds, for as long as that shell is alive. One ticker runs per
shell, so @cycle's last-color memory lives here between ticks.
"""

import atexit
import os
import signal
import subprocess
import time
from pathlib import Path
from typing import Optional, TextIO

from .config import Config
from .colors import normalize
from .core import TIME_DRIVEN_TOKENS, apply, resolve
from .directive import find_directive
from .tempfiles import cleanup_state_files, debug_log, get_lock_file_path

# Global shutdown flag for signal handling
_shutdown_requested = False

# Last value emitted by this ticker, to skip identical re-emits
_last_applied = None


def signal_handler(signum, frame):
    """Handle shutdown signals by setting a flag for the main loop."""
    global _shutdown_requested
    _shutdown_requested = True


def process_alive(pid: int) -> bool:
    """Check whether a process exists."""
    try:
        os.kill(pid, 0)
    except ProcessLookupError:
        return False
    except PermissionError:
        return True
    return True


def get_process_cwd(pid: int) -> Optional[str]:
    """Get actual CWD of a process by reading from /proc or lsof.

    Args:
        pid: Process ID

    Returns:
        Current working directory of process, or None if detection fails.
    """
    # Try /proc/$PID/cwd (Linux)
    proc_cwd = Path(f'/proc/{pid}/cwd')
    if proc_cwd.exists():
        try:
            cwd = os.readlink(proc_cwd)
            if cwd and cwd.startswith('/'):
                return cwd
        except OSError:
            pass

    # Try lsof (macOS/BSD)
    try:
        result = subprocess.run(
            ['lsof', '-p', str(pid), '-a', '-d', 'cwd', '-Fn'],
            capture_output=True,
            text=True,
            timeout=0.5
        )
        if result.returncode == 0:
            # Lines starting with 'n' contain the path
            for line in result.stdout.split('\n'):
                if line.startswith('n') and len(line) > 1:
                    cwd = line[1:]
                    if cwd.startswith('/'):
                        return cwd
    except (subprocess.TimeoutExpired, OSError):
        pass

    return None


def acquire_lock(pid: int) -> Path:
    """Acquire the per-shell lock file so only one ticker runs per shell.

    Args:
        pid: Shell process ID the ticker serves.

    Returns:
        Path to lock file.

    Raises:
        RuntimeError: If another live ticker already serves this shell.
    """
    lock_file = get_lock_file_path(pid)

    if lock_file.exists():
        try:
            owner = int(lock_file.read_text().strip())
        except (ValueError, OSError):
            owner = None
        if owner is not None and owner != os.getpid() and process_alive(owner):
            raise RuntimeError(
                f"Ticker already running for shell {pid} (PID {owner}). "
                f"If not running, remove {lock_file}"
            )
        lock_file.unlink(missing_ok=True)

    lock_file.write_text(str(os.getpid()))
    lock_file.chmod(0o600)

    def cleanup():
        try:
            if lock_file.exists() and int(lock_file.read_text().strip()) == os.getpid():
                lock_file.unlink()
        except (ValueError, OSError):
            pass

    atexit.register(cleanup)
    return lock_file


def tick(pid: int, stream: TextIO, config: Config) -> bool:
    """Run one ticker iteration.

    Args:
        pid: Shell process ID whose CWD governs the directive
        stream: Terminal to write escape sequences to
        config: Configuration object

    Returns:
        True if escape sequences were written.
    """
    global _last_applied

    cwd = get_process_cwd(pid)
    if not cwd:
        debug_log(f"Could not determine cwd of shell {pid}", config)
        return False

    directive = normalize(find_directive(cwd) or config.default_color)
    if directive not in TIME_DRIVEN_TOKENS:
        _last_applied = None
        return False

    resolved = resolve(cwd, config, directive=directive)
    if resolved == _last_applied:
        return False

    if apply(resolved, config, stream):
        _last_applied = resolved
        return True
    return False


def run_daemon(pid: int, tty: str, config: Config = None):
    """Tick until the shell exits or a shutdown signal arrives.

    Args:
        pid: Shell process ID to follow
        tty: Path of the shell's terminal device
        config: Configuration object. Loads default config if None.
    """
    if config is None:
        config = Config()

    if config.interval <= 0:
        debug_log("Ticker disabled (interval is 0)", config)
        return

    signal.signal(signal.SIGTERM, signal_handler)
    signal.signal(signal.SIGINT, signal_handler)

    cleanup_state_files()
    acquire_lock(pid)
    debug_log(f"Ticker started for shell {pid} on {tty}, interval {config.interval}s", config)

    with open(tty, 'w') as stream:
        while not _shutdown_requested and process_alive(pid):
            try:
                tick(pid, stream, config)
            except Exception as e:
                # Continue running even on error
                debug_log(f"Error in ticker: {e}", config, error=e)

            # Sleep in short steps so shutdown stays responsive
            deadline = time.monotonic() + config.interval
            while not _shutdown_requested and time.monotonic() < deadline:
                time.sleep(max(0.0, min(1.0, deadline - time.monotonic())))

    debug_log(f"Ticker for shell {pid} shutting down", config)

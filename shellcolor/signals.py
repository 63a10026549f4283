"""Context-derived colors for dynamic directives."""

import random
import subprocess
import zlib
from datetime import datetime
from pathlib import Path
from typing import Callable, Mapping, Optional

from .colors import lookup_color


FALLBACK_BRANCH = 'main'

# (start_hour, end_hour, color), half-open intervals
TIME_COLORS = [
    (6, 12, '#FFFAE3'),   # morning
    (12, 18, '#D1F0FF'),  # afternoon
    (18, 21, '#FFD1DC'),  # evening
]
NIGHT_COLOR = '#1E1E2E'

STATUS_OK_COLOR = '#00FF00'
STATUS_FAIL_COLOR = '#FF0000'

# Pastel generation: base luminance in [0, 150), per-channel jitter in [-25, 25)
RANDOM_BASE_MAX = 150
RANDOM_JITTER = 25

# Last color emitted in @cycle mode, for this process only
_last_cycle_color: Optional[str] = None


def current_branch(cwd=None) -> str:
    """Get the active git branch for cwd.

    Returns:
        Branch name, or 'main' outside a repository, on detached HEAD,
        or if git is unavailable.
    """
    try:
        result = subprocess.run(
            ['git', 'branch', '--show-current'],
            cwd=cwd,
            capture_output=True,
            text=True
        )
    except (OSError, subprocess.SubprocessError):
        return FALLBACK_BRANCH

    branch = result.stdout.strip() if result.returncode == 0 else ''
    return branch or FALLBACK_BRANCH


def branch_color(branch: str) -> str:
    """Map a branch name to a stable color via CRC32."""
    checksum = zlib.crc32((branch or FALLBACK_BRANCH).encode('utf-8'))
    return f"#{checksum % 0xFFFFFF:06x}"


def time_color(hour: Optional[int] = None) -> str:
    """Get the color for an hour of the day (0-23), local clock if None."""
    if hour is None:
        hour = datetime.now().hour

    for start, end, color in TIME_COLORS:
        if start <= hour < end:
            return color
    return NIGHT_COLOR


def project_color(cwd, projects: Mapping[str, str], default: str) -> str:
    """Get the color for a project folder by its base name.

    Args:
        cwd: Current directory
        projects: Folder name -> color (name or hex)
        default: Color used when the folder isn't listed

    Returns:
        Hex color string, or '' if the matched entry is not a valid color.
    """
    name = Path(cwd).name if cwd else Path.cwd().name
    return lookup_color(projects.get(name, default))


def status_color(exit_code: int) -> str:
    """Green for a successful last command, red otherwise."""
    return STATUS_OK_COLOR if exit_code == 0 else STATUS_FAIL_COLOR


def random_color(rng: random.Random = None) -> str:
    """Generate a low-saturation color from OS entropy.

    Args:
        rng: Random source. Uses a fresh SystemRandom if None.

    Returns:
        Lowercase hex color string.
    """
    if rng is None:
        rng = random.SystemRandom()

    base = rng.randrange(RANDOM_BASE_MAX)
    channels = []
    for _ in range(3):
        value = base + rng.randrange(-RANDOM_JITTER, RANDOM_JITTER)
        channels.append(min(max(value, 0), 255))

    return '#{:02x}{:02x}{:02x}'.format(*channels)


def cycle_color(generate: Callable[[], str] = random_color) -> str:
    """Get a new random color, avoiding the previous one if possible.

    Only a single regeneration is attempted, so an immediate repeat is
    unlikely but not impossible.
    """
    global _last_cycle_color

    color = generate()
    if color == _last_cycle_color:
        color = generate()

    _last_cycle_color = color
    return color


def reset_cycle_state():
    """Forget the last cycle color."""
    global _last_cycle_color
    _last_cycle_color = None

"""Directive resolution and color application for Shell Color."""

import sys
from pathlib import Path
from typing import Optional, TextIO, Union

from .config import Config
from .colors import (
    Theme,
    contrast_color,
    is_hex_color,
    lookup_color,
    lookup_theme,
    normalize,
)
from .directive import (
    ensure_gitignored,
    find_directive,
    remove_directive,
    write_directive,
)
from .signals import (
    branch_color,
    current_branch,
    cycle_color,
    project_color,
    status_color,
    time_color,
)
from .tempfiles import debug_log


ResolvedColor = Union[str, Theme]

DYNAMIC_TOKENS = ('@git', '@time', '@project', '@cycle', '@status')

# Directives whose color changes with the clock alone
TIME_DRIVEN_TOKENS = ('@cycle', '@time')

OSC_BACKGROUND = '\033]11;{}\007'
OSC_FOREGROUND = '\033]10;{}\007'


def is_valid_directive(value: str) -> bool:
    """Check whether value can be stored as a directive."""
    token = normalize(value)
    return (
        token in DYNAMIC_TOKENS
        or lookup_theme(token) is not None
        or bool(lookup_color(token))
    )


def resolve(cwd=None, config: Config = None, exit_code: Optional[int] = None,
            directive: Optional[str] = None) -> ResolvedColor:
    """Resolve the active directive into a color or theme pair.

    Args:
        cwd: Directory to resolve for. Uses the process CWD if None.
        config: Configuration object. Loads default config if None.
        exit_code: Exit status of the last command, for @status.
        directive: Directive to use instead of searching for a file.

    Returns:
        Hex color string, Theme pair, or '' if the directive names no
        known color.
    """
    if config is None:
        config = Config()
    if cwd is None:
        cwd = Path.cwd()

    if directive is None:
        directive = find_directive(cwd)
    if not directive:
        directive = config.default_color

    token = normalize(directive)

    if token == '@git':
        return branch_color(current_branch(cwd))
    if token == '@time':
        return time_color()
    if token == '@project':
        return project_color(cwd, config.projects, config.default_color)
    if token == '@cycle':
        return cycle_color()
    if token == '@status':
        return status_color(exit_code or 0)

    theme = lookup_theme(token)
    if theme is not None:
        return theme

    return lookup_color(directive)


def _emit(stream: TextIO, background: Optional[str], foreground: Optional[str]):
    if background:
        stream.write(OSC_BACKGROUND.format(background))
    if foreground:
        stream.write(OSC_FOREGROUND.format(foreground))
    stream.flush()


def apply(resolved: ResolvedColor, config: Config = None, stream: TextIO = None) -> bool:
    """Emit terminal escape sequences for a resolved color.

    Theme halves are validated independently and applied partially if one
    is malformed. An invalid single color falls back once to the default
    color.

    Args:
        resolved: Hex color string, Theme pair, or ''
        config: Configuration object. Loads default config if None.
        stream: Output stream. Uses stdout if None.

    Returns:
        True if any sequence was written.
    """
    if config is None:
        config = Config()
    if stream is None:
        stream = sys.stdout

    if isinstance(resolved, Theme):
        background = resolved.background if is_hex_color(resolved.background) else None
        foreground = resolved.foreground if is_hex_color(resolved.foreground) else None
        if background is None:
            debug_log(f"Invalid theme background: '{resolved.background}'", config)
        if foreground is None:
            debug_log(f"Invalid theme foreground: '{resolved.foreground}'", config)
        if background is None and foreground is None:
            return False
        _emit(stream, background, foreground)
        return True

    if is_hex_color(resolved):
        _emit(stream, resolved, contrast_color(resolved))
        return True

    debug_log(f"Invalid color name or hex: '{resolved}'", config)

    fallback = lookup_color(config.default_color)
    if not is_hex_color(fallback):
        debug_log(f"Invalid default color: '{config.default_color}'", config)
        return False

    _emit(stream, fallback, contrast_color(fallback))
    return True


def refresh(cwd=None, config: Config = None, exit_code: Optional[int] = None,
            stream: TextIO = None) -> bool:
    """Resolve the directive for cwd and apply it."""
    if config is None:
        config = Config()
    resolved = resolve(cwd, config, exit_code=exit_code)
    return apply(resolved, config, stream)


def preview(value: str, cwd=None, config: Config = None, stream: TextIO = None) -> bool:
    """Apply value as if it were the directive, without saving it."""
    if config is None:
        config = Config()
    resolved = resolve(cwd, config, directive=value or config.default_color)
    return apply(resolved, config, stream)


def set_directive(value: str, cwd=None, config: Config = None, stream: TextIO = None) -> bool:
    """Save value as the directive for cwd and apply it.

    Returns:
        False if value is not a color, theme or dynamic token.
    """
    if config is None:
        config = Config()
    if cwd is None:
        cwd = Path.cwd()

    if not is_valid_directive(value):
        debug_log(f"Refusing to set unknown color: '{value}'", config)
        return False

    # Hex keeps its digit case; everything else is stored normalized
    token = normalize(value)
    if is_hex_color(token):
        token = lookup_color(value)

    path = write_directive(cwd, token)
    debug_log(f"Set {path} to: {token}", config)

    if config.manage_gitignore:
        gitignore = Path(cwd) / '.gitignore'
        try:
            if ensure_gitignored(cwd):
                debug_log(f"Added {path.name} to {gitignore}", config)
        except OSError as e:
            debug_log(f"Could not update {gitignore}: {e}", config, error=e)

    refresh(cwd, config, stream=stream)
    return True


def unset_directive(cwd=None, config: Config = None, stream: TextIO = None) -> bool:
    """Remove the directive for cwd and re-apply whatever now governs it.

    Returns:
        True if a directive file was removed.
    """
    if config is None:
        config = Config()
    if cwd is None:
        cwd = Path.cwd()

    removed = remove_directive(cwd)
    if not removed:
        debug_log(f"No directive to remove in {cwd}", config)

    refresh(cwd, config, stream=stream)
    return removed

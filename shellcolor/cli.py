"""Command-line interface for Shell Color.

    shellcolor set light blue      # save directive for this directory
    shellcolor preview dracula     # try a color without saving it
    shellcolor unset               # drop this directory's directive
    shellcolor refresh --status 1  # re-apply (called from shell hooks)
    shellcolor list                # show names, themes and modes
    shellcolor init zsh            # print hook script
"""

import argparse
import configparser
import sys
from pathlib import Path
from typing import List, Optional

from .config import Config
from .colors import COLOR_NAMES, THEMES, lookup_color
from .core import DYNAMIC_TOKENS, preview, refresh, set_directive, unset_directive
from .daemon import run_daemon
from .directive import DIRECTIVE_FILENAME, read_directive
from .hooks import detect_shell, get_shell_rc_path, hook_script, install_hook, remove_hook
from .tempfiles import debug_log


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog='shellcolor',
        description='Set terminal background color per directory.'
    )
    common = argparse.ArgumentParser(add_help=False)
    common.add_argument('--debug', action='store_true', help='print diagnostics')

    sub = parser.add_subparsers(dest='command', required=True)

    p = sub.add_parser('set', parents=[common], help='save a color for this directory')
    p.add_argument('value', nargs='+', help='color name, hex, theme or @mode')

    p = sub.add_parser('preview', parents=[common], help='apply a color without saving')
    p.add_argument('value', nargs='+', help='color name, hex, theme or @mode')

    sub.add_parser('unset', parents=[common], help="remove this directory's color")

    p = sub.add_parser('refresh', parents=[common], help='re-apply the active color')
    p.add_argument('--status', type=int, default=None, help='exit code of the last command')

    sub.add_parser('list', parents=[common], help='list colors, themes and modes')

    p = sub.add_parser('init', parents=[common], help='print the shell hook script')
    p.add_argument('shell', choices=['zsh', 'bash'])

    p = sub.add_parser('install', parents=[common], help='add the hook to your shell RC file')
    p.add_argument('shell', nargs='?', choices=['zsh', 'bash'])

    sub.add_parser('uninstall', parents=[common], help='remove the hook from shell RC files')

    p = sub.add_parser('daemon', parents=[common], help='run the periodic ticker')
    p.add_argument('--pid', type=int, required=True, help='shell process ID to follow')
    p.add_argument('--tty', required=True, help="path of the shell's terminal")

    return parser


def print_available(stream=None):
    """Print known color names, themes and dynamic modes."""
    if stream is None:
        stream = sys.stdout
    stream.write(f"Available colors: {', '.join(sorted(COLOR_NAMES))}\n")
    stream.write(f"Available themes: {', '.join(sorted(THEMES))}\n")
    stream.write(f"Dynamic modes: {', '.join(DYNAMIC_TOKENS)}\n")


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point.

    Args:
        argv: Command-line arguments, sys.argv[1:] if None

    Returns:
        Process exit code.
    """
    args = build_parser().parse_args(argv)

    try:
        config = Config()
        if args.debug:
            config.parser.set('debug', 'enabled', 'true')
        if config.load_error:
            debug_log(f"Ignoring {config.config_path}: {config.load_error}", config)

        if args.command == 'set':
            value = ''.join(args.value)
            if not set_directive(value, config=config):
                print(f"[shellcolor] Error: Unknown color '{' '.join(args.value)}'", file=sys.stderr)
                print_available(sys.stderr)
                return 1
            token = read_directive(Path.cwd() / DIRECTIVE_FILENAME)
            hex_value = lookup_color(token)
            if hex_value:
                print(f"[shellcolor] Set {DIRECTIVE_FILENAME} to: {token} → {hex_value}", file=sys.stderr)
            else:
                print(f"[shellcolor] Set {DIRECTIVE_FILENAME} to: {token}", file=sys.stderr)

        elif args.command == 'preview':
            preview(''.join(args.value), config=config)

        elif args.command == 'unset':
            if not unset_directive(config=config):
                print(f"[shellcolor] No {DIRECTIVE_FILENAME} in {Path.cwd()}", file=sys.stderr)

        elif args.command == 'refresh':
            refresh(config=config, exit_code=args.status)

        elif args.command == 'list':
            print_available()

        elif args.command == 'init':
            sys.stdout.write(hook_script(args.shell))

        elif args.command == 'install':
            shell = args.shell or detect_shell()
            if not shell:
                print("Error: Unsupported shell. Only zsh and bash are supported.", file=sys.stderr)
                return 1
            rc_file = get_shell_rc_path(shell)
            if install_hook(shell, rc_file):
                print(f"✓ Shell hook installed in {rc_file}")
            else:
                print(f"⚠️  Shell hook already installed in {rc_file}")

        elif args.command == 'uninstall':
            for name in ('.zshrc', '.bashrc', '.bash_profile'):
                rc_file = Path.home() / name
                if remove_hook(rc_file):
                    print(f"✓ Removed shell hook from {rc_file}")

        elif args.command == 'daemon':
            run_daemon(args.pid, args.tty, config)

    except (ValueError, RuntimeError, OSError, configparser.Error) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    return 0

"""Configuration management for Shell Color."""

import configparser
import os
from pathlib import Path
from typing import Dict, Mapping, Optional


DEFAULT_CONFIG = {
    'colors': {
        'default': '#000000',
    },
    'behavior': {
        'interval': '60',
        'manage_gitignore': 'true',
    },
    'debug': {
        'enabled': 'false',
        'log_file': '~/.cache/shellcolor/debug.log',
    },
    'projects': {
        'dotfiles': '#2E3440',
        'notes': '#FFFAE3',
        'sandbox': '#3B2F2F',
    },
}

# Environment variable -> (section, key). Later names win.
ENV_OVERRIDES = [
    ('DEFAULT_SHELLCOLOR', 'colors', 'default'),
    ('SHELLCOLOR_DEFAULT', 'colors', 'default'),
    ('SHELLCOLOR_DEBUG', 'debug', 'enabled'),
    ('SHELLCOLOR_INTERVAL', 'behavior', 'interval'),
]


class Config:
    """Configuration manager for Shell Color."""

    def __init__(self, config_path: Path = None, environ: Optional[Mapping[str, str]] = None):
        """Initialize config from defaults, file, then environment.

        Args:
            config_path: Path to config file. Uses default location if None.
            environ: Environment mapping. Uses os.environ if None.
        """
        if config_path is None:
            config_path = Path.home() / '.config/shellcolor/shellcolor.conf'
        if environ is None:
            environ = os.environ

        self.config_path = config_path
        self.load_error = None
        self.parser = self._default_parser()

        # Override with user config if exists
        if config_path.exists():
            try:
                self.parser.read(config_path, encoding='utf-8')
            except (configparser.Error, UnicodeDecodeError) as e:
                # A broken file is ignored as a whole, keeping the defaults
                self.load_error = e
                self.parser = self._default_parser()

        for var, section, key in ENV_OVERRIDES:
            value = environ.get(var)
            if value is not None and value.strip():
                self.parser.set(section, key, value.strip())

    @staticmethod
    def _default_parser() -> configparser.ConfigParser:
        parser = configparser.ConfigParser()
        # Keep project folder names case-sensitive
        parser.optionxform = str
        parser.read_dict(DEFAULT_CONFIG)
        return parser

    def get_bool(self, section: str, key: str) -> bool:
        """Get boolean value from config, False if unparseable."""
        try:
            return self.parser.getboolean(section, key)
        except ValueError:
            return DEFAULT_CONFIG[section][key] == 'true'

    def get_int(self, section: str, key: str) -> int:
        """Get integer value from config, default if unparseable."""
        try:
            return self.parser.getint(section, key)
        except ValueError:
            return int(DEFAULT_CONFIG[section][key])

    def get_str(self, section: str, key: str) -> str:
        """Get string value from config."""
        return self.parser.get(section, key)

    @property
    def default_color(self) -> str:
        return self.get_str('colors', 'default')

    @property
    def debug(self) -> bool:
        return self.get_bool('debug', 'enabled')

    @property
    def log_file(self) -> Path:
        return Path(self.get_str('debug', 'log_file')).expanduser()

    @property
    def interval(self) -> int:
        return max(self.get_int('behavior', 'interval'), 0)

    @property
    def manage_gitignore(self) -> bool:
        return self.get_bool('behavior', 'manage_gitignore')

    @property
    def projects(self) -> Dict[str, str]:
        """Project folder name -> color mapping."""
        return dict(self.parser.items('projects'))

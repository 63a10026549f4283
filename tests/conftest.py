"""Pytest fixtures for Shell Color tests."""

import io
import pytest

from shellcolor import daemon, signals
from shellcolor.config import Config


@pytest.fixture(autouse=True)
def reset_process_state():
    """Clear module-level cycle and ticker state between tests."""
    signals.reset_cycle_state()
    daemon._last_applied = None
    daemon._shutdown_requested = False
    yield
    signals.reset_cycle_state()
    daemon._last_applied = None
    daemon._shutdown_requested = False


@pytest.fixture
def default_config(tmp_path):
    """Provide default Config instance without reading user config or env."""
    # Use non-existent path to force Config to use built-in defaults
    nonexistent = tmp_path / "nonexistent.conf"
    return Config(nonexistent, environ={})


@pytest.fixture
def debug_config(tmp_path):
    """Provide Config with debug output enabled and logging under tmp_path."""
    config = Config(tmp_path / "nonexistent.conf", environ={'SHELLCOLOR_DEBUG': '1'})
    config.parser.set('debug', 'log_file', str(tmp_path / 'debug.log'))
    return config


@pytest.fixture
def temp_config_file(tmp_path):
    """Create temporary config file."""
    config_path = tmp_path / "shellcolor.conf"
    config_content = """[colors]
default = lightblue

[behavior]
interval = 5
manage_gitignore = false

[projects]
website = #123456
API = orange
"""
    config_path.write_text(config_content)
    return config_path


@pytest.fixture
def custom_config(temp_config_file):
    """Provide Config instance with custom settings."""
    return Config(temp_config_file, environ={})


@pytest.fixture
def terminal():
    """In-memory terminal stream capturing escape sequences."""
    return io.StringIO()


@pytest.fixture
def state_dir(tmp_path, monkeypatch):
    """Point the state directory at tmp_path."""
    monkeypatch.setenv('XDG_RUNTIME_DIR', str(tmp_path))
    return tmp_path / 'shellcolor'


@pytest.fixture
def directory_tree(tmp_path):
    """Create /a/b/c under tmp_path with directives at a and a/b."""
    a = tmp_path / 'a'
    b = a / 'b'
    c = b / 'c'
    c.mkdir(parents=True)
    (a / '.shellcolor').write_text('red\n')
    (b / '.shellcolor').write_text('blue\n')
    return a, b, c

"""Tests for directive resolution and color application."""

import pytest
from unittest.mock import patch

from shellcolor import core
from shellcolor.colors import Theme
from shellcolor.core import (
    apply,
    is_valid_directive,
    preview,
    refresh,
    resolve,
    set_directive,
    unset_directive,
)


def bg(color):
    return f'\033]11;{color}\007'


def fg(color):
    return f'\033]10;{color}\007'


@pytest.mark.unit
class TestIsValidDirective:
    """Tests for is_valid_directive function."""

    def test_dynamic_tokens(self):
        for token in ['@git', '@time', '@project', '@cycle', '@status', ' @GIT ']:
            assert is_valid_directive(token)

    def test_colors_and_themes(self):
        assert is_valid_directive('Light Blue')
        assert is_valid_directive('#A1B2C3')
        assert is_valid_directive('Dracula')

    def test_invalid(self):
        assert not is_valid_directive('notacolor')
        assert not is_valid_directive('@weather')
        assert not is_valid_directive('')


@pytest.mark.unit
class TestResolve:
    """Tests for resolve function."""

    def test_nearest_directive_wins(self, directory_tree, default_config):
        a, b, c = directory_tree
        assert resolve(c, default_config) == '#0000FF'

    def test_directive_in_cwd(self, directory_tree, default_config):
        a, b, c = directory_tree
        assert resolve(a, default_config) == '#FF0000'

    def test_no_directive_uses_default(self, tmp_path, default_config):
        assert resolve(tmp_path, default_config) == '#000000'

    def test_no_directive_uses_configured_default(self, tmp_path, custom_config):
        assert resolve(tmp_path, custom_config) == '#ADD8E6'

    def test_empty_directive_uses_default(self, tmp_path, default_config):
        (tmp_path / '.shellcolor').write_text('\n')
        assert resolve(tmp_path, default_config) == '#000000'

    def test_only_first_line_used(self, tmp_path, default_config):
        (tmp_path / '.shellcolor').write_text('  Light Blue  \nred\n')
        assert resolve(tmp_path, default_config) == '#ADD8E6'

    def test_hex_directive_keeps_case(self, tmp_path, default_config):
        (tmp_path / '.shellcolor').write_text('#AbCdEf\n')
        assert resolve(tmp_path, default_config) == '#AbCdEf'

    def test_theme_directive(self, tmp_path, default_config):
        (tmp_path / '.shellcolor').write_text('nord\n')
        assert resolve(tmp_path, default_config) == Theme('#2E3440', '#D8DEE9')

    def test_invalid_directive_propagates(self, tmp_path, default_config):
        (tmp_path / '.shellcolor').write_text('notacolor\n')
        assert resolve(tmp_path, default_config) == ''

    def test_explicit_directive_skips_file(self, directory_tree, default_config):
        a, b, c = directory_tree
        assert resolve(c, default_config, directive='green') == '#00FF00'

    def test_git_token(self, tmp_path, default_config):
        with patch.object(core, 'current_branch', return_value='develop') as mock_branch:
            result = resolve(tmp_path, default_config, directive='@git')
        mock_branch.assert_called_once_with(tmp_path)
        assert result == core.branch_color('develop')

    def test_time_token(self, tmp_path, default_config):
        with patch.object(core, 'time_color', return_value='#FFFAE3'):
            assert resolve(tmp_path, default_config, directive='@TIME') == '#FFFAE3'

    def test_project_token(self, tmp_path, custom_config):
        project = tmp_path / 'website'
        project.mkdir()
        (project / '.shellcolor').write_text('@project\n')
        assert resolve(project, custom_config) == '#123456'

    def test_project_token_unlisted(self, tmp_path, custom_config):
        (tmp_path / '.shellcolor').write_text('@project\n')
        assert resolve(tmp_path, custom_config) == '#ADD8E6'

    def test_status_token(self, tmp_path, default_config):
        assert resolve(tmp_path, default_config, exit_code=0, directive='@status') == '#00FF00'
        assert resolve(tmp_path, default_config, exit_code=2, directive='@status') == '#FF0000'

    def test_status_token_unknown_exit_code(self, tmp_path, default_config):
        assert resolve(tmp_path, default_config, directive='@status') == '#00FF00'

    def test_cycle_token(self, tmp_path, default_config):
        with patch.object(core, 'cycle_color', return_value='#101010'):
            assert resolve(tmp_path, default_config, directive='@cycle') == '#101010'


@pytest.mark.unit
class TestApply:
    """Tests for apply function."""

    def test_single_color_with_contrast(self, default_config, terminal):
        assert apply('#FFFFFF', default_config, terminal) is True
        assert terminal.getvalue() == bg('#FFFFFF') + fg('#000000')

    def test_dark_color_gets_white_text(self, default_config, terminal):
        apply('#1E1E2E', default_config, terminal)
        assert terminal.getvalue() == bg('#1E1E2E') + fg('#FFFFFF')

    def test_theme_applied_as_is(self, default_config, terminal):
        apply(Theme('#FDF6E3', '#657B83'), default_config, terminal)
        assert terminal.getvalue() == bg('#FDF6E3') + fg('#657B83')

    def test_theme_partial_foreground_only(self, default_config, terminal):
        assert apply(Theme('bogus', '#657B83'), default_config, terminal) is True
        assert terminal.getvalue() == fg('#657B83')

    def test_theme_partial_background_only(self, default_config, terminal):
        apply(Theme('#FDF6E3', '#12'), default_config, terminal)
        assert terminal.getvalue() == bg('#FDF6E3')

    def test_theme_fully_invalid_emits_nothing(self, custom_config, terminal):
        """No default fallback for themes, even with a valid default."""
        assert apply(Theme('x', 'y'), custom_config, terminal) is False
        assert terminal.getvalue() == ''

    def test_invalid_color_falls_back_to_default(self, custom_config, terminal):
        assert apply('', custom_config, terminal) is True
        assert terminal.getvalue() == bg('#ADD8E6') + fg('#000000')

    def test_invalid_default_emits_nothing(self, tmp_path, terminal):
        from shellcolor.config import Config
        config = Config(tmp_path / 'none.conf', environ={'SHELLCOLOR_DEFAULT': 'notacolor'})
        assert apply('', config, terminal) is False
        assert terminal.getvalue() == ''

    def test_invalid_color_debug_diagnostic(self, debug_config, terminal, capsys):
        apply('notacolor', debug_config, terminal)
        captured = capsys.readouterr()
        assert "[shellcolor] Invalid color name or hex: 'notacolor'" in captured.err
        # Diagnostics never go to the terminal stream
        assert terminal.getvalue() == bg('#000000') + fg('#FFFFFF')

    def test_no_diagnostic_without_debug(self, default_config, terminal, capsys):
        apply('notacolor', default_config, terminal)
        assert capsys.readouterr().err == ''


@pytest.mark.integration
class TestCommands:
    """Tests for refresh, preview, set and unset."""

    def test_status_end_to_end(self, tmp_path, default_config, terminal):
        """Pure green is below the brightness threshold, so text is white."""
        (tmp_path / '.shellcolor').write_text('@status\n')
        refresh(tmp_path, default_config, exit_code=0, stream=terminal)
        assert terminal.getvalue() == bg('#00FF00') + fg('#FFFFFF')

    def test_status_failure_end_to_end(self, tmp_path, default_config, terminal):
        (tmp_path / '.shellcolor').write_text('@status\n')
        refresh(tmp_path, default_config, exit_code=1, stream=terminal)
        assert terminal.getvalue() == bg('#FF0000') + fg('#FFFFFF')

    def test_refresh_invalid_directive_uses_default(self, tmp_path, custom_config, terminal):
        (tmp_path / '.shellcolor').write_text('notacolor\n')
        refresh(tmp_path, custom_config, stream=terminal)
        assert terminal.getvalue() == bg('#ADD8E6') + fg('#000000')

    def test_preview_does_not_write(self, tmp_path, default_config, terminal):
        assert preview('yellow', tmp_path, default_config, terminal) is True
        assert terminal.getvalue() == bg('#FFFF00') + fg('#000000')
        assert not (tmp_path / '.shellcolor').exists()

    def test_preview_theme(self, tmp_path, default_config, terminal):
        preview('Gruvbox', tmp_path, default_config, terminal)
        assert terminal.getvalue() == bg('#282828') + fg('#EBDBB2')

    def test_set_writes_normalized_and_applies(self, tmp_path, default_config, terminal):
        assert set_directive(' Light Blue ', tmp_path, default_config, terminal) is True
        assert (tmp_path / '.shellcolor').read_text() == 'lightblue\n'
        assert terminal.getvalue() == bg('#ADD8E6') + fg('#000000')

    def test_set_hex_keeps_case(self, tmp_path, default_config, terminal):
        set_directive('#D1F0FF', tmp_path, default_config, terminal)
        assert (tmp_path / '.shellcolor').read_text() == '#D1F0FF\n'

    def test_set_dynamic_token(self, tmp_path, default_config, terminal):
        set_directive('@Status', tmp_path, default_config, terminal)
        assert (tmp_path / '.shellcolor').read_text() == '@status\n'

    def test_set_rejects_unknown(self, tmp_path, default_config, terminal):
        assert set_directive('notacolor', tmp_path, default_config, terminal) is False
        assert not (tmp_path / '.shellcolor').exists()
        assert terminal.getvalue() == ''

    def test_set_overwrites(self, tmp_path, default_config, terminal):
        set_directive('red', tmp_path, default_config, terminal)
        set_directive('blue', tmp_path, default_config, terminal)
        assert (tmp_path / '.shellcolor').read_text() == 'blue\n'

    def test_set_adds_gitignore_entry(self, tmp_path, default_config, terminal):
        (tmp_path / '.git').mkdir()
        set_directive('red', tmp_path, default_config, terminal)
        assert (tmp_path / '.gitignore').read_text() == '.shellcolor\n'

    def test_set_respects_manage_gitignore(self, tmp_path, custom_config, terminal):
        (tmp_path / '.git').mkdir()
        set_directive('red', tmp_path, custom_config, terminal)
        assert not (tmp_path / '.gitignore').exists()

    def test_set_with_non_utf8_gitignore(self, tmp_path, default_config, terminal):
        (tmp_path / '.git').mkdir()
        (tmp_path / '.gitignore').write_bytes(b'caf\xe9\n')
        assert set_directive('red', tmp_path, default_config, terminal) is True
        assert (tmp_path / '.shellcolor').read_text() == 'red\n'
        assert terminal.getvalue() == bg('#FF0000') + fg('#FFFFFF')
        assert (tmp_path / '.gitignore').read_bytes() == b'caf\xe9\n.shellcolor\n'

    def test_set_survives_unwritable_gitignore(self, tmp_path, default_config, terminal):
        (tmp_path / '.git').mkdir()
        # A directory in place of the file makes both read and append fail
        (tmp_path / '.gitignore').mkdir()
        assert set_directive('red', tmp_path, default_config, terminal) is True
        assert (tmp_path / '.shellcolor').read_text() == 'red\n'
        assert terminal.getvalue() == bg('#FF0000') + fg('#FFFFFF')

    def test_unset_falls_back_to_ancestor(self, directory_tree, default_config, terminal):
        a, b, c = directory_tree
        assert unset_directive(b, default_config, terminal) is True
        assert not (b / '.shellcolor').exists()
        assert (a / '.shellcolor').exists()
        assert terminal.getvalue() == bg('#FF0000') + fg('#FFFFFF')

    def test_unset_without_directive(self, tmp_path, default_config, terminal):
        assert unset_directive(tmp_path, default_config, terminal) is False
        # Still re-applies the default
        assert terminal.getvalue() == bg('#000000') + fg('#FFFFFF')

"""Shell integration hooks for Shell Color."""

import os
from pathlib import Path
from typing import Optional


BEGIN_MARKER = '# >>> shellcolor shell integration >>>'
END_MARKER = '# <<< shellcolor shell integration <<<'

ZSH_HOOK = r'''_shellcolor_precmd() {
  shellcolor refresh --status "$?"
}
_shellcolor_chpwd() {
  shellcolor refresh
}
autoload -Uz add-zsh-hook
add-zsh-hook precmd _shellcolor_precmd
add-zsh-hook chpwd _shellcolor_chpwd
if [[ -t 1 ]]; then
  (shellcolor daemon --pid $$ --tty "$(tty)" >/dev/null 2>&1 &)
fi
'''

BASH_HOOK = r'''_shellcolor_prompt() {
  local last_status=$?
  shellcolor refresh --status "$last_status"
  return $last_status
}
if [[ ";${PROMPT_COMMAND};" != *";_shellcolor_prompt;"* ]]; then
  PROMPT_COMMAND="_shellcolor_prompt${PROMPT_COMMAND:+;$PROMPT_COMMAND}"
fi
if [[ -t 1 ]]; then
  (shellcolor daemon --pid $$ --tty "$(tty)" >/dev/null 2>&1 &)
fi
'''

HOOKS = {
    'zsh': ZSH_HOOK,
    'bash': BASH_HOOK,
}


def hook_script(shell: str) -> str:
    """Get the integration script for a shell.

    Raises:
        ValueError: If the shell is not supported.
    """
    if shell not in HOOKS:
        raise ValueError(f"Unsupported shell: {shell} (expected zsh or bash)")
    return HOOKS[shell]


def detect_shell() -> Optional[str]:
    """Detect user's shell.

    Returns:
        'zsh', 'bash', or None if unsupported
    """
    shell_env = os.environ.get('SHELL', '')
    if 'zsh' in shell_env:
        return 'zsh'
    elif 'bash' in shell_env:
        return 'bash'
    return None


def get_shell_rc_path(shell: str) -> Optional[Path]:
    """Get path to shell RC file.

    Args:
        shell: 'zsh' or 'bash'

    Returns:
        Path to RC file
    """
    home = Path.home()
    if shell == 'zsh':
        return home / '.zshrc'
    elif shell == 'bash':
        # Check for .bash_profile first, then .bashrc
        bash_profile = home / '.bash_profile'
        if bash_profile.exists():
            return bash_profile
        return home / '.bashrc'
    return None


def install_hook(shell: str, rc_file: Path = None) -> bool:
    """Append the integration block to a shell RC file.

    Args:
        shell: 'zsh' or 'bash'
        rc_file: RC file to modify. Uses the shell's default if None.

    Returns:
        True if the block was added, False if already installed.

    Raises:
        ValueError: If the shell is not supported.
    """
    script = hook_script(shell)
    if rc_file is None:
        rc_file = get_shell_rc_path(shell)

    rc_content = rc_file.read_text() if rc_file.exists() else ''
    if BEGIN_MARKER in rc_content:
        return False

    with open(rc_file, 'a') as f:
        if rc_content and not rc_content.endswith('\n'):
            f.write('\n')
        f.write(f'\n{BEGIN_MARKER}\n')
        f.write(script)
        f.write(f'{END_MARKER}\n')
    return True


def remove_hook(rc_file: Path) -> bool:
    """Remove the integration block from a shell RC file.

    Returns:
        True if a block was removed.
    """
    if not rc_file.exists():
        return False

    lines = rc_file.read_text().split('\n')
    if BEGIN_MARKER not in lines:
        return False

    new_lines = []
    skip = False
    for line in lines:
        if line == BEGIN_MARKER:
            skip = True
            # Drop the blank separator written on install
            if new_lines and new_lines[-1] == '':
                new_lines.pop()
            continue
        if skip:
            if line == END_MARKER:
                skip = False
            continue
        new_lines.append(line)

    rc_file.write_text('\n'.join(new_lines))
    return True

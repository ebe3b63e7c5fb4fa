"""
Shell hook templates.

Each hook defines _envtool_hook, which evaluates `envtool env <shell>`, and
registers it ahead of any hooks already present:
- bash: PROMPT_COMMAND
- zsh: precmd_functions and chpwd_functions
"""

import shlex
from enum import Enum
from typing import Optional


PROGRAM_NAME = "envtool"
HOOK_FUNCTION = "_envtool_hook"


class ShellType(Enum):
    """Shells with hook support."""
    BASH = "bash"
    ZSH = "zsh"

    @property
    def label(self) -> str:
        return self.value.capitalize()


def env_command(shell: ShellType, env_file: Optional[str] = None) -> str:
    """
    Build the `envtool env` invocation embedded in a hook.

    Args:
        shell: Target shell
        env_file: Optional .env path passed through --env-file

    Returns:
        Command line text
    """
    command = f"{PROGRAM_NAME} env {shell.value}"
    if env_file:
        command += f" --env-file {shlex.quote(env_file)}"
    return command


def _bash_hook(command: str) -> str:
    return f"""
{HOOK_FUNCTION}() {{
  local previous_exit_status=$?;
  trap -- '' SIGINT;
  eval "$({command})";
  trap - SIGINT;
  return $previous_exit_status;
}};
if ! [[ "${{PROMPT_COMMAND:-}}" =~ {HOOK_FUNCTION} ]]; then
  PROMPT_COMMAND="{HOOK_FUNCTION}${{PROMPT_COMMAND:+;$PROMPT_COMMAND}}"
fi
"""


def _zsh_hook(command: str) -> str:
    return f"""
{HOOK_FUNCTION}() {{
  trap -- '' SIGINT;
  eval "$({command})";
  trap - SIGINT;
}}
typeset -ag precmd_functions;
if [[ -z "${{precmd_functions[(r){HOOK_FUNCTION}]+1}}" ]]; then
  precmd_functions=( {HOOK_FUNCTION} ${{precmd_functions[@]}} )
fi
typeset -ag chpwd_functions;
if [[ -z "${{chpwd_functions[(r){HOOK_FUNCTION}]+1}}" ]]; then
  chpwd_functions=( {HOOK_FUNCTION} ${{chpwd_functions[@]}} )
fi
"""


_TEMPLATES = {
    ShellType.BASH: _bash_hook,
    ShellType.ZSH: _zsh_hook,
}


def build_hook(shell: ShellType, env_file: Optional[str] = None) -> str:
    """
    Render the rc-file hook for a shell.

    Args:
        shell: Target shell
        env_file: Optional .env path baked into the hook

    Returns:
        Hook body to append to the shell's rc file
    """
    return _TEMPLATES[shell](env_command(shell, env_file))

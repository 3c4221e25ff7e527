from __future__ import annotations

from collections.abc import Mapping

from .commands import COMMANDS, CommandSpec

MAX_SUGGESTIONS = 5


def suggest(
    partial: str,
    registry: Mapping[str, CommandSpec] = COMMANDS,
    *,
    limit: int = MAX_SUGGESTIONS,
) -> list[str]:
    """Completions for a partially typed command line.

    Until a space follows the command name the matches are command names, in
    registry order. After it they are ``"<cmd> <arg>"`` completions for
    commands with a closed argument set, so accepting one never drops what
    was already typed.
    """

    if not partial.strip():
        return []

    out: list[str] = []
    text = partial.lstrip()
    if " " not in text:
        needle = text.lower()
        for name in registry:
            if name.startswith(needle):
                out.append(name)
    else:
        cmd_name, arg_text = text.split(" ", 1)
        cmd_name = cmd_name.lower()
        arg_text = arg_text.lstrip().lower()
        spec = registry.get(cmd_name)
        if spec is not None and spec.valid_args:
            for arg in spec.valid_args:
                if arg.startswith(arg_text):
                    out.append(f"{cmd_name} {arg}")

    return out[:limit]

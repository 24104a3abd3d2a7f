"""
CLI utilities for command line reconstruction and introspection.
"""

from pathlib import Path

import click

PROGRAM_NAME = "remember_codegen"


def _display_value(value) -> str:
    """Show paths by file name only, so the output does not depend on the checkout location."""
    if isinstance(value, (str, Path)):
        path_obj = Path(str(value))
        return path_obj.name if path_obj.is_absolute() or path_obj.exists() else str(value)
    return str(value)


def reconstruct_command_line(click_command: click.Command) -> str:
    """
    Reconstruct command line from current Click context using introspection.

    Args:
        click_command: Click command object for introspection

    Returns:
        Reconstructed command line string
    """
    try:
        ctx = click.get_current_context()
        cli_args = ctx.params
    except RuntimeError:
        # No active context
        return PROGRAM_NAME

    if not cli_args:
        return PROGRAM_NAME

    arguments = []
    options = []

    for param in click_command.params:
        param_name = param.name
        if param_name not in cli_args:
            continue

        value = cli_args[param_name]
        if value is None or value == () or value == "":
            continue

        if isinstance(param, click.Argument):
            values = value if isinstance(value, tuple) else (value,)
            arguments.extend(_display_value(v) for v in values)

        elif isinstance(param, click.Option):
            # Skip defaults and verbosity, which does not change the output
            if value == param.default or param_name == "verbose":
                continue

            if param.is_flag:
                if param.secondary_opts and not value:
                    options.append(param.secondary_opts[0])
                elif value:
                    options.append(param.opts[0])
                continue

            flag = param.opts[0] if param.opts else f"--{param_name}"
            options.extend([flag, _display_value(value)])

    return " ".join([PROGRAM_NAME, *arguments, *options])

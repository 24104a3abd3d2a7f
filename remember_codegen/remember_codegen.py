import json
import logging
import sys
from pathlib import Path

import click

from .cli_utils import reconstruct_command_line
from .pipeline import (
    CodeGeneratorConfig,
    InjectionMode,
    OutputMode,
    OutputValidationError,
    OutputWriter,
    PipelineGenerator,
    load_declarations,
)


def infer_language(inputs) -> str:
    """Python when every input is a Python source file, Kotlin otherwise."""
    if inputs and all(Path(p).suffix == ".py" for p in inputs):
        return "python"
    return "kotlin"


@click.command()
@click.option("--language", "-l", default=None, type=click.Choice(["kotlin", "python"]))
@click.option("--config", "-c", default=None, type=click.Path(exists=True, resolve_path=True))
@click.option(
    "--injection-mode",
    default=None,
    type=click.Choice([mode.value for mode in InjectionMode]),
    help="Whether framework injection calls may be emitted (overrides config file)",
)
@click.option("--force/--no-force", default=None, help="Overwrite existing files (default) or fail if any exists")
@click.option("--format", "format_", is_flag=True, default=False, help="Format Python output with black")
@click.option("--timestamp", is_flag=True, default=False, help="Append a generation timestamp to each file")
@click.option("--verbose", "-v", is_flag=True, default=False)
@click.argument("inputs", nargs=-1, required=True, type=click.Path(exists=True, dir_okay=False, resolve_path=True))
@click.argument("output", type=click.Path(file_okay=False, resolve_path=True))
def remember_codegen(language, config, injection_mode, force, format_, timestamp, verbose, inputs, output):
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    if config is not None:
        with open(config) as f:
            config = CodeGeneratorConfig.from_dict(json.load(f))
    else:
        config = CodeGeneratorConfig()

    # CLI flags override the config file
    if injection_mode is not None:
        config.injection_mode = InjectionMode(injection_mode)
    if force is not None:
        config.output.mode = OutputMode.FORCE if force else OutputMode.ERROR_IF_EXISTS
    if format_:
        config.formatter.enabled = True
    if timestamp:
        config.include_timestamp = True

    if language is None:
        language = infer_language(inputs)

    parsed = load_declarations(Path(p) for p in inputs)

    codegen = PipelineGenerator(config, language, command_line=reconstruct_command_line(remember_codegen))
    result = codegen.generate(parsed.declarations)
    failures = [*parsed.errors, *result.failures]

    try:
        report = OutputWriter(config).write(result.units, Path(output))
    except (FileExistsError, OutputValidationError, ValueError) as e:
        raise click.ClickException(str(e)) from e

    for path in report.written:
        click.echo(f"wrote {path}")
    for error in failures:
        click.secho(str(error), fg="red", err=True)

    click.echo(
        f"{len(report.written)} written, {len(report.unchanged)} unchanged, {len(failures)} failed",
        err=bool(failures),
    )
    if failures:
        sys.exit(1)

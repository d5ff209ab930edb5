import logging
import sys
from pathlib import Path

import rich_click as click
import yaml
from rich.traceback import install

from protoc_gen_types import __version__, log
from protoc_gen_types.descriptors import load_descriptor_set
from protoc_gen_types.errors import DescriptorError, OptionError
from protoc_gen_types.exporters.typescript import translate_to_typescript
from protoc_gen_types.options import load_options_file, parse_parameter, split_parameter
from protoc_gen_types.plugin import main as plugin_main

descriptor_set_option = click.option(
    "--descriptor-set",
    "-d",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    required=True,
    help="Binary FileDescriptorSet, e.g. from 'protoc --include_imports --descriptor_set_out=...'",
)


output_directory_option = click.option(
    "--output",
    "-o",
    type=click.Path(file_okay=False, writable=True, path_type=Path),
    required=True,
    help="Output directory",
)


parameter_option = click.option(
    "--parameter",
    "-p",
    type=str,
    default="",
    help="Plugin parameter, e.g. 'target=dts,json_types=true'",
)


options_file_option = click.option(
    "--options",
    "options_file",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    help="YAML file containing plugin options. Values from --parameter take precedence.",
)


@click.group(context_settings={"auto_envvar_prefix": "PROTOC_TYPES"})
@click.option(
    "-l",
    "--log-level",
    type=click.Choice(["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"], case_sensitive=False),
    default="WARNING",
    help="Log level",
    show_default=True,
)
@click.option(
    "--log-file",
    type=click.Path(dir_okay=False, writable=True, path_type=Path),
    help="Log file",
)
@click.version_option(__version__)
def cli(log_level: str, log_file: Path | None) -> None:
    if log_file:
        file_handler = logging.FileHandler(log_file, mode="w")
        file_handler.setFormatter(logging.Formatter("%(asctime)s:%(levelname)s:%(message)s"))
        log.addHandler(file_handler)

    log.setLevel(log_level.upper())
    if log_level.upper() == "DEBUG":
        _ = install(show_locals=True)


# generate -> typescript
# ----------
@cli.command
@descriptor_set_option
@click.option(
    "--file",
    "-f",
    "file_names",
    type=str,
    multiple=True,
    help=(
        "Proto file to generate, as named in the descriptor set (e.g. 'foo/bar.proto'). "
        "Can be specified multiple times. Defaults to every file outside google/protobuf."
    ),
)
@output_directory_option
@parameter_option
@options_file_option
def generate(
    descriptor_set: Path,
    file_names: tuple[str, ...],
    output: Path,
    parameter: str,
    options_file: Path | None,
) -> None:
    """Generate TypeScript JSON type declarations from a descriptor set."""
    try:
        pairs = load_options_file(options_file) + split_parameter(parameter)
        framework, options = parse_parameter(pairs)
        _, files = load_descriptor_set(descriptor_set.read_bytes(), list(file_names))
        generated = translate_to_typescript(
            options, files, framework, ",".join(f"{key}={value}" for key, value in pairs)
        )
    except OptionError as e:
        log.error(f"Invalid options: {e}")
        sys.exit(1)
    except DescriptorError as e:
        log.error(f"Invalid descriptor set: {e}")
        sys.exit(1)
    except yaml.YAMLError as e:
        log.error(f"Invalid options file: {e}")
        sys.exit(1)
    except OSError as e:
        log.error(f"File I/O error: {e}")
        sys.exit(1)

    for name, content in generated.items():
        path = output / name
        path.parent.mkdir(parents=True, exist_ok=True)
        _ = path.write_text(content, encoding="utf-8")
        log.list_item(str(path), style="dim")

    log.success(f"Generated {len(generated)} files in {output}")


# plugin
# ----------
@cli.command
def plugin() -> None:
    """Run as a protoc plugin: read a CodeGeneratorRequest from stdin, write the response to stdout."""
    plugin_main()


if __name__ == "__main__":
    cli()

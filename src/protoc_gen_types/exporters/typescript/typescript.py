from collections.abc import Sequence

from protoc_gen_types import log
from protoc_gen_types.descriptors.models import SchemaFile
from protoc_gen_types.options import FrameworkOptions, Options

from .printer import GeneratedFile
from .transformer import TypeScriptTransformer


def generate(
    options: Options,
    files: Sequence[SchemaFile],
    framework: FrameworkOptions | None = None,
    parameter: str = "",
) -> list[GeneratedFile]:
    """
    Generate TypeScript declarations for a set of schema files.

    Args:
        options: Parsed generator options
        files: The files to generate, with their dependencies already loaded
        framework: Framework options (target, import extension, empty files)
        parameter: The raw parameter string, echoed in each file's preamble

    Returns:
        list[GeneratedFile]: One generated file per schema file that declares types
    """
    if options.json_types:
        log.debug("json_types is set; JSON shapes are always generated")

    transformer = TypeScriptTransformer(files, options, framework, parameter)
    return transformer.transform()


def translate_to_typescript(
    options: Options,
    files: Sequence[SchemaFile],
    framework: FrameworkOptions | None = None,
    parameter: str = "",
) -> dict[str, str]:
    """
    Translate schema files to TypeScript declaration sources.

    Args:
        options: Parsed generator options
        files: The files to generate
        framework: Framework options (target, import extension, empty files)
        parameter: The raw parameter string, echoed in each file's preamble

    Returns:
        dict[str, str]: Mapping of output file names to their content
    """
    return {f.name: f.content() for f in generate(options, files, framework, parameter)}

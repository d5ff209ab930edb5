"""Plugin parameter parsing.

The raw ``protoc`` parameter (``json_types=true,target=dts``) is split into
key/value pairs. Framework keys are consumed first; whatever remains belongs to
the type-shape generator and goes through :func:`parse_options`.
"""

from collections.abc import Iterable, Sequence
from enum import Enum
from pathlib import Path
from typing import Any, cast

import yaml
from pydantic import BaseModel, ConfigDict

from protoc_gen_types import log
from protoc_gen_types.errors import InvalidOptionValueError, OptionError, UnknownOptionError

OptionPair = tuple[str, str]

TRUE_VALUES = ("true", "1")
FALSE_VALUES = ("false", "0")


class Target(str, Enum):
    TS = "ts"
    DTS = "dts"


class ImportExtension(str, Enum):
    NONE = "none"
    JS = "js"
    TS = "ts"


class Options(BaseModel):
    """Options understood by the type-shape generator."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    json_types: bool = False


class FrameworkOptions(BaseModel):
    """Options consumed by the plugin framework before the generator sees the parameter."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    target: Target = Target.TS
    import_extension: ImportExtension = ImportExtension.NONE
    keep_empty_files: bool = False

    @property
    def file_suffix(self) -> str:
        return "_pb.d.ts" if self.target == Target.DTS else "_pb.ts"

    @property
    def declaration_only(self) -> bool:
        return self.target == Target.DTS


def split_parameter(parameter: str) -> list[OptionPair]:
    """Split a comma separated ``key=value`` parameter string into pairs.

    Args:
        parameter: The raw parameter string from the CodeGeneratorRequest

    Returns:
        list[OptionPair]: Pairs in the order they appear. A part without ``=``
        becomes ``(key, "")``.
    """
    pairs: list[OptionPair] = []
    for part in parameter.split(","):
        part = part.strip()
        if not part:
            continue
        key, _, value = part.partition("=")
        pairs.append((key.strip(), value.strip()))
    return pairs


def parse_options(pairs: Iterable[OptionPair]) -> Options:
    """
    Parse the generator's own options.

    Args:
        pairs: Key/value pairs left over after framework options were consumed

    Returns:
        Options: The parsed options record

    Raises:
        InvalidOptionValueError: If ``json_types`` has a value other than true, 1, false or 0
        UnknownOptionError: If any other key is present
    """
    json_types = False
    for key, value in pairs:
        if key == "json_types":
            if value not in TRUE_VALUES + FALSE_VALUES:
                raise InvalidOptionValueError(key, value, "please provide true or false")
            json_types = value in TRUE_VALUES
        else:
            raise UnknownOptionError(key)
    return Options(json_types=json_types)


def _parse_bool(key: str, value: str) -> bool:
    if value in TRUE_VALUES:
        return True
    if value in FALSE_VALUES:
        return False
    raise InvalidOptionValueError(
        key, value, f'invalid value "{value}" for option "{key}", please provide true or false'
    )


def _parse_choice(key: str, value: str, choices: type[Enum]) -> Any:
    try:
        return choices(value)
    except ValueError:
        accepted = ", ".join(str(choice.value) for choice in choices)
        raise InvalidOptionValueError(
            key, value, f'invalid value "{value}" for option "{key}", please provide one of: {accepted}'
        ) from None


def parse_framework_options(pairs: Iterable[OptionPair]) -> tuple[FrameworkOptions, list[OptionPair]]:
    """
    Consume the framework-level keys from a list of pairs.

    Args:
        pairs: All key/value pairs of the parameter

    Returns:
        tuple: The framework options and the pairs that were not consumed, in order

    Raises:
        InvalidOptionValueError: If a framework key has an invalid value
    """
    values: dict[str, Any] = {}
    remaining: list[OptionPair] = []
    for key, value in pairs:
        if key == "target":
            values["target"] = _parse_choice(key, value, Target)
        elif key == "import_extension":
            values["import_extension"] = _parse_choice(key, value, ImportExtension)
        elif key == "keep_empty_files":
            values["keep_empty_files"] = _parse_bool(key, value)
        else:
            remaining.append((key, value))
    return FrameworkOptions(**values), remaining


def parse_parameter(parameter: str | Sequence[OptionPair]) -> tuple[FrameworkOptions, Options]:
    """
    Parse a full plugin parameter into framework and generator options.

    Args:
        parameter: Either the raw parameter string or already split pairs

    Returns:
        tuple: (framework options, generator options)
    """
    pairs = split_parameter(parameter) if isinstance(parameter, str) else list(parameter)
    framework, remaining = parse_framework_options(pairs)
    options = parse_options(remaining)
    log.debug(f"Parsed options: target={framework.target.value}, json_types={options.json_types}")
    return framework, options


def _stringify(key: str, value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, str | int | float):
        return str(value)
    raise OptionError(f'option "{key}" must be a scalar value, got {type(value).__name__}')


def load_options_file(path: Path | None) -> list[OptionPair]:
    """
    Load option pairs from a YAML mapping.

    Args:
        path: Path to the YAML file, or None to skip loading

    Returns:
        list[OptionPair]: The options as string pairs, in file order

    Raises:
        OSError: If the file cannot be read
        yaml.YAMLError: If the file is not valid YAML
        OptionError: If the root is not a mapping or a value is not a scalar
    """
    if path is None:
        return []

    with path.open("r", encoding="utf-8") as f:
        raw = yaml.safe_load(f)

    log.debug(f"Loaded options from {path}")

    if raw is None:
        return []
    if not isinstance(raw, dict):
        raise OptionError(f"Options file root must be a mapping (YAML object), got {type(raw).__name__}")

    raw_dict = cast(dict[str, Any], raw)
    return [(str(key), _stringify(str(key), value)) for key, value in raw_dict.items()]

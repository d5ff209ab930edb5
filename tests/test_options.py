from pathlib import Path

import pytest

from protoc_gen_types.errors import InvalidOptionValueError, OptionError, UnknownOptionError
from protoc_gen_types.options import (
    FrameworkOptions,
    ImportExtension,
    Options,
    Target,
    load_options_file,
    parse_framework_options,
    parse_options,
    parse_parameter,
    split_parameter,
)


class TestSplitParameter:
    def test_empty_parameter(self) -> None:
        assert split_parameter("") == []

    def test_pairs_in_order(self) -> None:
        assert split_parameter("json_types=true,target=dts") == [("json_types", "true"), ("target", "dts")]

    def test_key_without_value(self) -> None:
        assert split_parameter("keep_empty_files") == [("keep_empty_files", "")]

    def test_whitespace_and_empty_parts_are_ignored(self) -> None:
        assert split_parameter(" json_types = 1 ,, ") == [("json_types", "1")]


class TestParseOptions:
    def test_defaults(self) -> None:
        assert parse_options([]) == Options(json_types=False)

    @pytest.mark.parametrize("value,expected", [("true", True), ("1", True), ("false", False), ("0", False)])
    def test_json_types(self, value: str, expected: bool) -> None:
        assert parse_options([("json_types", value)]).json_types is expected

    def test_last_value_wins(self) -> None:
        assert parse_options([("json_types", "true"), ("json_types", "false")]).json_types is False

    @pytest.mark.parametrize("value", ["yes", "TRUE", "", "2"])
    def test_invalid_json_types_value(self, value: str) -> None:
        with pytest.raises(InvalidOptionValueError, match="please provide true or false") as exc_info:
            parse_options([("json_types", value)])
        assert exc_info.value.key == "json_types"
        assert exc_info.value.value == value

    def test_unknown_key(self) -> None:
        with pytest.raises(UnknownOptionError) as exc_info:
            parse_options([("foo", "bar")])
        assert exc_info.value.key == "foo"
        assert str(exc_info.value) == 'unknown option "foo"'

    def test_option_errors_share_a_base(self) -> None:
        with pytest.raises(OptionError):
            parse_options([("foo", "bar")])
        with pytest.raises(ValueError):
            parse_options([("json_types", "maybe")])


class TestParseFrameworkOptions:
    def test_consumes_framework_keys(self) -> None:
        framework, remaining = parse_framework_options(
            [("target", "dts"), ("json_types", "true"), ("import_extension", "js"), ("keep_empty_files", "1")]
        )
        assert framework == FrameworkOptions(
            target=Target.DTS, import_extension=ImportExtension.JS, keep_empty_files=True
        )
        assert remaining == [("json_types", "true")]

    def test_defaults(self) -> None:
        framework, remaining = parse_framework_options([])
        assert framework.target == Target.TS
        assert framework.import_extension == ImportExtension.NONE
        assert framework.keep_empty_files is False
        assert remaining == []

    def test_file_suffix(self) -> None:
        assert FrameworkOptions(target=Target.TS).file_suffix == "_pb.ts"
        assert FrameworkOptions(target=Target.DTS).file_suffix == "_pb.d.ts"

    def test_invalid_target(self) -> None:
        with pytest.raises(InvalidOptionValueError, match="please provide one of: ts, dts"):
            parse_framework_options([("target", "js")])

    def test_invalid_bool(self) -> None:
        with pytest.raises(InvalidOptionValueError, match="keep_empty_files"):
            parse_framework_options([("keep_empty_files", "yes")])


class TestParseParameter:
    def test_string_parameter(self) -> None:
        framework, options = parse_parameter("target=dts,json_types=true")
        assert framework.target == Target.DTS
        assert options.json_types is True

    def test_pairs_parameter(self) -> None:
        framework, options = parse_parameter([("import_extension", "ts")])
        assert framework.import_extension == ImportExtension.TS
        assert options == Options()

    def test_unknown_key_after_framework_keys(self) -> None:
        with pytest.raises(UnknownOptionError, match='unknown option "ts_nocheck"'):
            parse_parameter("target=ts,ts_nocheck=true")


class TestLoadOptionsFile:
    def test_none(self) -> None:
        assert load_options_file(None) == []

    def test_mapping(self, tmp_path: Path) -> None:
        path = tmp_path / "options.yaml"
        path.write_text("target: dts\njson_types: true\nkeep_empty_files: false\n")
        assert load_options_file(path) == [("target", "dts"), ("json_types", "true"), ("keep_empty_files", "false")]

    def test_empty_file(self, tmp_path: Path) -> None:
        path = tmp_path / "options.yaml"
        path.write_text("")
        assert load_options_file(path) == []

    def test_root_must_be_mapping(self, tmp_path: Path) -> None:
        path = tmp_path / "options.yaml"
        path.write_text("- target\n- dts\n")
        with pytest.raises(OptionError, match="must be a mapping"):
            load_options_file(path)

    def test_values_must_be_scalars(self, tmp_path: Path) -> None:
        path = tmp_path / "options.yaml"
        path.write_text("target:\n  - dts\n")
        with pytest.raises(OptionError, match="must be a scalar value"):
            load_options_file(path)

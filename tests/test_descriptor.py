"""Tests for the command spec builder."""

import pytest

from clikernel.descriptor import CommandSpec
from clikernel.errors import InvalidDeclaration, MissingCommandName
from clikernel.models import CommandOptions, FlagsParserOptions


def test_define_argument_defaults():
    spec = CommandSpec("greet").define_argument("userName", type="string")
    arg = spec.args[0]
    assert arg.name == "userName"
    assert arg.argument_name == "user-name"
    assert arg.required is True
    assert arg.allow_empty_value is False


def test_argument_with_default_is_optional():
    spec = CommandSpec("greet").define_argument("name", type="string", default="world")
    assert spec.args[0].required is False


def test_spread_argument_is_optional():
    spec = CommandSpec("greet").define_argument("names", type="spread")
    assert spec.args[0].required is False


def test_argument_requires_a_type():
    with pytest.raises(InvalidDeclaration, match="Specify the argument type"):
        CommandSpec("greet").define_argument("name")


def test_argument_unsupported_type():
    with pytest.raises(InvalidDeclaration, match='Unsupported type "number"'):
        CommandSpec("greet").define_argument("name", type="number")


def test_argument_after_spread_fails():
    spec = CommandSpec("greet").define_argument("names", type="spread")
    with pytest.raises(InvalidDeclaration, match="Spread argument should be the last one"):
        spec.define_argument("age", type="string", required=False)
    assert len(spec.args) == 1


def test_required_argument_after_optional_fails():
    spec = CommandSpec("greet").define_argument("name", type="string", required=False)
    with pytest.raises(InvalidDeclaration, match='Cannot define required argument "greet.age"'):
        spec.define_argument("age", type="string")


def test_flag_defaults():
    spec = CommandSpec("serve").define_flag("dryRun", type="boolean", alias="d")
    flag = spec.flags[0]
    assert flag.flag_name == "dry-run"
    assert flag.required is False
    assert flag.alias == ("d",)


def test_flag_requires_a_type():
    with pytest.raises(InvalidDeclaration, match="Specify the flag type"):
        CommandSpec("serve").define_flag("port")


def test_flag_redeclaration_replaces():
    spec = (
        CommandSpec("serve")
        .define_flag("port", type="string")
        .define_flag("host", type="string")
        .define_flag("port", type="number", default=3333)
    )
    assert [flag.flag_name for flag in spec.flags] == ["port", "host"]
    assert spec.flags[0].type == "number"


def test_namespace():
    assert CommandSpec("make:controller").namespace == "make"
    assert CommandSpec("serve").namespace is None
    assert CommandSpec("make:").namespace is None


def test_help_lines_are_joined():
    spec = CommandSpec("serve", help=["line 1", "line 2"])
    assert spec.help == "line 1\nline 2"


def test_serialize():
    spec = (
        CommandSpec("make:controller", description="Make", aliases=["mc", "mc"], options=CommandOptions(stays_alive=True))
        .define_argument("name", type="string")
        .define_flag("resource", type="boolean")
    )
    metadata = spec.serialize()
    assert metadata.command_name == "make:controller"
    assert metadata.namespace == "make"
    assert metadata.aliases == ("mc",)
    assert metadata.options.stays_alive is True
    assert [arg.name for arg in metadata.args] == ["name"]
    assert metadata.file_path is None
    assert metadata.with_file_path("make/controller.py").file_path == "make/controller.py"


def test_serialize_without_name():
    with pytest.raises(MissingCommandName, match='Cannot serialize command "MyCommand"'):
        CommandSpec().serialize("MyCommand")


def test_to_dict_drops_parse():
    metadata = CommandSpec("serve").define_flag("port", type="number", parse=int).serialize()
    data = metadata.to_dict()
    assert data["flags"][0]["flag_name"] == "port"
    assert "parse" not in data["flags"][0]
    assert "file_path" not in data


def test_parser_options():
    spec = (
        CommandSpec("serve")
        .define_argument("entry", type="string", default="server.py")
        .define_flag("port", type="number", alias=["p"], default=3333, parse=int)
        .define_flag("watch", type="boolean")
        .define_flag("env", type="array")
    )
    global_flags = FlagsParserOptions(all=["help"], boolean=["help"])
    options = spec.get_parser_options(global_flags)

    assert options.flags.all == ["help", "port", "watch", "env"]
    assert options.flags.boolean == ["help", "watch"]
    assert options.flags.number == ["port"]
    assert options.flags.array == ["env"]
    assert options.flags.alias == {"port": ["p"]}
    assert options.flags.default == {"port": 3333}
    assert options.flags.coerce == {"port": int}
    assert options.arguments[0].type == "string"
    assert options.arguments[0].default == "server.py"
    # the given options are left untouched
    assert global_flags.all == ["help"]

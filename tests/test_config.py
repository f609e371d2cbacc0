import tomllib

import pytest

from clikernel.config import ConfigField, Configuration, coerce_to_bool, load_config, validate_config


def test_config_access(test_logger):
    conf = Configuration({"a": 1, "b": "test"}, logger=test_logger)
    assert conf["a"] == 1
    assert conf.get("b") == "test"
    assert conf.get("c", 3) == 3


def test_schema_defaults(test_logger):
    conf = Configuration(logger=test_logger)
    assert conf.get_str("binary") == "clikernel"
    assert conf.get_list("commands_paths") == []
    assert conf.get_bool("debug") is False


def test_get_bool(test_logger):
    conf = Configuration({"t1": True, "t2": "yes", "f1": "off", "f2": "0", "invalid": "foo", "empty": ""}, logger=test_logger)
    assert conf.get_bool("t1") is True
    assert conf.get_bool("t2") is True
    assert conf.get_bool("f1") is False
    assert conf.get_bool("f2") is False
    # Non-empty unrecognized strings are truthy
    assert conf.get_bool("invalid") is True
    assert conf.get_bool("empty") is False
    assert conf.get_bool("missing", default=True) is True


def test_get_int(test_logger):
    conf = Configuration({"a": 1, "b": "2", "c": "invalid"}, logger=test_logger)
    assert conf.get_int("a") == 1
    assert conf.get_int("b") == 2
    assert conf.get_int("c", default=10) == 10
    assert conf.get_int("missing", default=5) == 5


def test_get_list(test_logger):
    conf = Configuration({"a": ["x"], "b": "y"}, logger=test_logger)
    assert conf.get_list("a") == ["x"]
    assert conf.get_list("b") == ["y"]
    assert conf.get_list("missing", ["z"]) == ["z"]


def test_coerce_to_bool():
    assert coerce_to_bool(None, default=True) is True
    assert coerce_to_bool(" disabled ") is False
    assert coerce_to_bool(1) is True


def test_validate_config():
    assert validate_config({"binary": "acme", "debug": "yes"}) == []
    errors = validate_config({"comands_paths": [], "debug": 3})
    assert errors == [
        "[clikernel] Config error for 'comands_paths': Unknown option -> did you mean 'commands_paths'?",
        "[clikernel] Config error for 'debug': Expected bool, got int",
    ]


def test_validate_custom_schema():
    schema = (ConfigField("port", int, default=3333),)
    assert validate_config({"port": "80"}, schema) == ["[clikernel] Config error for 'port': Expected int, got str"]
    assert validate_config({"zzz": 1}, schema) == ["[clikernel] Config error for 'zzz': Unknown option -> will be ignored"]


def test_load_missing_file(tmp_path, test_logger):
    conf = load_config(tmp_path / "missing.toml", logger=test_logger)
    assert conf == {}
    assert conf.get_str("binary") == "clikernel"


def test_load_file(tmp_path, test_logger):
    path = tmp_path / "clikernel.toml"
    path.write_text('[clikernel]\nbinary = "acme"\ncommands_paths = ["commands"]\n')
    conf = load_config(path, logger=test_logger)
    assert conf.get_str("binary") == "acme"
    assert conf.get_list("commands_paths") == ["commands"]


def test_load_pyproject(tmp_path, test_logger):
    path = tmp_path / "pyproject.toml"
    path.write_text('[project]\nname = "acme"\n\n[tool.clikernel]\nbinary = "acme"\n')
    assert load_config(path, logger=test_logger).get_str("binary") == "acme"


def test_load_from_environment(tmp_path, monkeypatch, test_logger):
    path = tmp_path / "custom.toml"
    path.write_text('[clikernel]\nversion = "1.0.0"\n')
    monkeypatch.setenv("CLIKERNEL_CONFIG", str(path))
    assert load_config(logger=test_logger).get_str("version") == "1.0.0"


def test_load_invalid_file(tmp_path, test_logger):
    path = tmp_path / "clikernel.toml"
    path.write_text("[clikernel\n")
    with pytest.raises(tomllib.TOMLDecodeError):
        load_config(path, logger=test_logger)


def test_load_warns_about_unknown_options(tmp_path, mocker):
    path = tmp_path / "clikernel.toml"
    path.write_text("[clikernel]\nbinnary = 'acme'\n")
    logger = mocker.Mock()
    load_config(path, logger=logger)
    logger.warning.assert_called_once_with(
        "[clikernel] Config error for 'binnary': Unknown option -> did you mean 'binary'?"
    )

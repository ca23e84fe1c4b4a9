"""Tests for argument parsing and run configuration layering."""

import logging

import pytest

from args import parse_args
from cli_config import RunConfig
from constants import Constants, SemverLimit, _load_yaml_config


class TestParseArgs:
    """Test CLI argument parsing."""

    def test_defaults(self):
        ns = parse_args([])
        assert ns.PATH is None
        assert ns.UPDATE is False
        assert ns.INTERACTIVE is False
        assert ns.DRY_RUN is False
        assert ns.SEMVER is None
        assert ns.INCLUDE is None
        assert ns.SKIP_RANGES is None
        assert ns.UPDATE_ANY is None

    def test_flags(self):
        ns = parse_args(["-u", "-i", "-p", "app/package.json", "-s", "MINOR", "--skip-ranges", "--update-any"])
        assert ns.UPDATE and ns.INTERACTIVE
        assert ns.PATH == "app/package.json"
        assert ns.SEMVER == "minor"
        assert ns.SKIP_RANGES is True
        assert ns.UPDATE_ANY is True

    def test_include_list(self):
        assert parse_args(["--include", "dev,peer"]).INCLUDE == ["dev", "peer"]
        assert parse_args(["--include", "Dev"]).INCLUDE == ["dev"]

    def test_invalid_include(self):
        with pytest.raises(SystemExit):
            parse_args(["--include", "dev,optional"])

    def test_invalid_semver(self):
        with pytest.raises(SystemExit):
            parse_args(["--semver", "huge"])

    def test_invalid_timeout(self):
        with pytest.raises(SystemExit):
            parse_args(["--timeout", "0"])

    def test_loglevel_uppercased(self):
        assert parse_args(["--loglevel", "debug"]).LOG_LEVEL == "DEBUG"


class TestRunConfig:
    """Test CLI > config file > defaults precedence."""

    def test_defaults(self, monkeypatch):
        monkeypatch.delenv("NO_COLOR", raising=False)
        config = RunConfig.from_args(parse_args([]), {})

        assert config.registry_url == Constants.REGISTRY_URL_NPM
        assert config.timeout == Constants.REQUEST_TIMEOUT
        assert config.preserve_range is True
        assert config.update_any is False
        assert config.semver_limit is None
        assert not config.include_dev and not config.include_peer
        assert config.color is True

    def test_file_values_apply(self):
        file_config = {
            "registry": "https://mirror.example.org/",
            "timeout": 5,
            "include": "dev",
            "semver": "patch",
            "skip_ranges": True,
            "update_any": True,
        }

        config = RunConfig.from_args(parse_args([]), file_config)

        assert config.registry_url == "https://mirror.example.org/"
        assert config.timeout == 5.0
        assert config.include_dev and not config.include_peer
        assert config.semver_limit is SemverLimit.PATCH
        assert config.preserve_range is False
        assert config.update_any is True

    def test_cli_overrides_file(self):
        file_config = {"registry": "https://file.example.org/", "include": ["dev"], "semver": "patch"}
        args = parse_args(["--registry", "https://cli.example.org/", "--include", "peer", "-s", "major"])

        config = RunConfig.from_args(args, file_config)

        assert config.registry_url == "https://cli.example.org/"
        assert config.include_peer and not config.include_dev
        assert config.semver_limit is SemverLimit.MAJOR

    def test_bad_file_values_are_ignored(self, caplog):
        with caplog.at_level(logging.WARNING):
            config = RunConfig.from_args(
                parse_args([]),
                {"semver": "huge", "timeout": "soon", "include": ["dev", "optional"]},
            )

        assert config.semver_limit is None
        assert config.timeout == Constants.REQUEST_TIMEOUT
        assert config.include_dev
        assert "semver" in caplog.text
        assert "timeout" in caplog.text

    def test_no_color(self, monkeypatch):
        monkeypatch.delenv("NO_COLOR", raising=False)
        assert RunConfig.from_args(parse_args(["--no-color"]), {}).color is False
        monkeypatch.setenv("NO_COLOR", "1")
        assert RunConfig.from_args(parse_args([]), {}).color is False


class TestLoadYamlConfig:
    """Test reading the optional config file."""

    def test_default_file_in_working_directory(self, tmp_path, monkeypatch):
        monkeypatch.chdir(tmp_path)
        (tmp_path / Constants.CONFIG_FILE).write_text("semver: minor\ninclude: [dev, peer]\n")

        assert _load_yaml_config() == {"semver": "minor", "include": ["dev", "peer"]}

    def test_absent_default_file(self, tmp_path, monkeypatch):
        monkeypatch.chdir(tmp_path)

        assert _load_yaml_config() == {}

    def test_explicit_missing_file_warns(self, tmp_path, caplog):
        with caplog.at_level(logging.WARNING):
            assert _load_yaml_config(str(tmp_path / "nope.yml")) == {}
        assert "Config file not found" in caplog.text

    def test_non_mapping_ignored(self, tmp_path):
        path = tmp_path / "cfg.yml"
        path.write_text("- just\n- a list\n")

        assert _load_yaml_config(str(path)) == {}

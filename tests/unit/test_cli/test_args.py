# SPDX-License-Identifier: LGPL-3.0-or-later
"""Tests for the two-phase CLI parse: config files as defaults, flags on top."""
from __future__ import annotations

import json

import pytest
from fakes.fake_logger import FakeLogger

from debian2pve.cli.args import build_parser, parse_args_with_config
from debian2pve.core.exceptions import Fatal


def _parse(*argv):
    args, conf, _logger = parse_args_with_config(list(argv), logger=FakeLogger())
    return args, conf


@pytest.mark.unit
class TestDefaults:
    def test_defaults(self):
        args, conf = _parse()

        assert conf == {}
        assert args.root == "/"
        assert args.bridge == "vmbr0"
        assert args.interfaces == "/etc/network/interfaces"
        assert args.reboot_delay == 5.0
        assert args.dry_run is False
        assert args.reset_on_any_iface is False
        assert args.supported_codenames is None
        assert args.extra_packages == []
        assert "{codename}" in args.key_url_template

    def test_repeatable_flags(self):
        args, _ = _parse("--extra-package", "vim", "--extra-package", "htop", "--supported-codename", "trixie")

        assert args.extra_packages == ["vim", "htop"]
        assert args.supported_codenames == ["trixie"]

    def test_help_renders(self, capsys):
        with pytest.raises(SystemExit) as ei:
            build_parser().parse_args(["--help"])
        assert ei.value.code == 0
        assert "--reset-on-any-iface" in capsys.readouterr().out


@pytest.mark.unit
class TestConfigMerge:
    def test_yaml_sets_defaults(self, tmp_path):
        cfg = tmp_path / "node.yaml"
        cfg.write_text("bridge: br0\nreboot-delay: 10\nextra_packages: [vim]\nno_reboot: true\n", encoding="utf-8")

        args, conf = _parse("--config", str(cfg))

        assert conf["reboot_delay"] == 10
        assert args.bridge == "br0"
        assert args.reboot_delay == 10
        assert args.extra_packages == ["vim"]
        assert args.no_reboot is True

    def test_cli_overrides_config(self, tmp_path):
        cfg = tmp_path / "node.yaml"
        cfg.write_text("bridge: br0\n", encoding="utf-8")

        args, _ = _parse("--config", str(cfg), "--bridge", "vmbr1")

        assert args.bridge == "vmbr1"

    def test_later_config_wins(self, tmp_path):
        base = tmp_path / "base.yaml"
        base.write_text("bridge: br0\nkeep_os_prober: true\n", encoding="utf-8")
        node = tmp_path / "node.json"
        node.write_text(json.dumps({"bridge": "br9"}), encoding="utf-8")

        args, _ = _parse("--config", str(base), "--config", str(node))

        assert args.bridge == "br9"
        assert args.keep_os_prober is True

    def test_unknown_keys_are_reported(self, tmp_path):
        cfg = tmp_path / "node.yaml"
        cfg.write_text("bridge: br0\nfrobnicate: 1\n", encoding="utf-8")
        log = FakeLogger()

        args, _conf, _ = parse_args_with_config(["--config", str(cfg)], logger=log)

        assert args.bridge == "br0"
        assert any("frobnicate" in m for m in log.messages("warning"))

    def test_missing_config_is_fatal(self, tmp_path):
        with pytest.raises(Fatal, match="Config file not found"):
            _parse("--config", str(tmp_path / "absent.yaml"))

    def test_dump_config(self, tmp_path, capsys):
        cfg = tmp_path / "node.yaml"
        cfg.write_text("bridge: br0\n", encoding="utf-8")

        with pytest.raises(SystemExit) as ei:
            _parse("--config", str(cfg), "--dump-config")

        assert ei.value.code == 0
        assert json.loads(capsys.readouterr().out) == {"bridge": "br0"}

    def test_dump_args(self, capsys):
        with pytest.raises(SystemExit):
            _parse("--dump-args", "--bridge", "br5")
        assert json.loads(capsys.readouterr().out)["bridge"] == "br5"


@pytest.mark.unit
class TestValidation:
    @pytest.mark.parametrize(
        "argv",
        [
            ["--network-only", "--skip-network"],
            ["--bridge", "this-name-is-far-too-long"],
            ["--bridge", "br 0"],
            ["--reboot-delay", "-1"],
            ["--key-url-template", "https://example.org/release.gpg"],
        ],
    )
    def test_rejected(self, argv):
        with pytest.raises(SystemExit) as ei:
            _parse(*argv)
        assert ei.value.code not in (0, None)

    def test_missing_root_dir(self, tmp_path):
        with pytest.raises(SystemExit, match="--root directory not found"):
            _parse("--root", str(tmp_path / "nope"))

    def test_codenames_from_config_must_be_a_list(self, tmp_path):
        cfg = tmp_path / "node.yaml"
        cfg.write_text("supported_codenames: bookworm\n", encoding="utf-8")

        with pytest.raises(SystemExit, match="supported_codenames"):
            _parse("--config", str(cfg))

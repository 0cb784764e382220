import pytest

from desksetup import __version__
from desksetup.common.state import InstallState
from desksetup.main import build_parser, main, show_status


def test_parser_commands():
    parser = build_parser()

    args = parser.parse_args(["cura", "--version", "5.8.1"])
    assert args.command == "cura"
    assert args.cura_version == "5.8.1"

    args = parser.parse_args(["bambu-studio", "-u", "https://example.com/b.zip"])
    assert args.url == "https://example.com/b.zip"

    args = parser.parse_args(["--debug", "rubymine", "-y"])
    assert args.debug and args.yes

    args = parser.parse_args(["workstation", "--select", "1,3"])
    assert args.select == "1,3"
    assert args.source_dir is None


def test_parser_requires_command():
    with pytest.raises(SystemExit):
        build_parser().parse_args([])


def test_version_flag(capsys):
    with pytest.raises(SystemExit) as excinfo:
        build_parser().parse_args(["--version"])

    assert excinfo.value.code == 0
    assert __version__ in capsys.readouterr().out


def test_show_status(settings, capsys):
    assert show_status(settings) == 0
    assert "Nothing installed" in capsys.readouterr().out

    InstallState(settings['state_file']).record_install("cura", "5.9.0", "/home/u/.local/bin/Ultimaker-Cura.AppImage")
    assert show_status(settings) == 0

    out = capsys.readouterr().out
    assert out.startswith("cura: 5.9.0 (/home/u/.local/bin/Ultimaker-Cura.AppImage) installed ")


def test_main_status(home, monkeypatch, capsys):
    monkeypatch.setenv("DESKSETUP_HOME", str(home))
    monkeypatch.delenv("DESKSETUP_CONFIG", raising=False)

    assert main(["status"]) == 0
    assert "Nothing installed" in capsys.readouterr().out


def test_main_missing_config_file(home, monkeypatch, tmp_path):
    monkeypatch.setenv("DESKSETUP_HOME", str(home))

    assert main(["--config", str(tmp_path / "missing.yaml"), "status"]) == 1


def test_main_invalid_yaml(home, monkeypatch, tmp_path):
    monkeypatch.setenv("DESKSETUP_HOME", str(home))
    config_file = tmp_path / "config.yaml"
    config_file.write_text("pin_to_dock: [unclosed\n")

    assert main(["--config", str(config_file), "status"]) == 1

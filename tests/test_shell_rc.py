import os

from desksetup.desktop.shell_rc import ensure_snippet, get_shell_config_file, write_launcher


def test_shell_config_file_selection(tmp_path):
    assert get_shell_config_file(tmp_path, "/usr/bin/zsh") == tmp_path / ".zshrc"
    assert get_shell_config_file(tmp_path, "/bin/bash") == tmp_path / ".bashrc"
    assert get_shell_config_file(tmp_path, None) == tmp_path / ".bashrc"
    assert (tmp_path / ".zshrc").exists()


def test_ensure_snippet_appends_once(tmp_path):
    rc = tmp_path / ".bashrc"
    rc.write_text("alias ll='ls -l'\n")
    snippet = 'eval "$(mise activate bash)"'

    assert ensure_snippet(rc, snippet, snippet)
    assert not ensure_snippet(rc, snippet, snippet)

    assert rc.read_text() == "alias ll='ls -l'\n\n" + snippet + "\n"


def test_ensure_snippet_detects_marker_only(tmp_path):
    rc = tmp_path / ".bashrc"
    rc.write_text("source ~/.bash_git\n")

    assert not ensure_snippet(rc, "bash_git", "if [ -f ~/.bash_git ]; then\n   . ~/.bash_git\nfi")


def test_write_launcher(tmp_path):
    launcher = write_launcher(tmp_path / "bin/rubymine", "/opt/rubymine/bin/rubymine.sh")

    content = launcher.read_text()
    assert content.startswith("#!/bin/bash\n")
    assert 'exec "/opt/rubymine/bin/rubymine.sh" "$@"' in content
    assert os.access(launcher, os.X_OK)

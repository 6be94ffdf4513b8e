"""Tests for reading recent shell commands."""

from petcli.shell_history import RecentCommands, clean_history_line, load_recent_commands


def test_clean_zsh_extended_line():
    assert clean_history_line(": 1700000000:0;git status\n") == "git status"
    assert clean_history_line(": 1700000000:0;echo a; echo b") == "echo a; echo b"


def test_clean_plain_line():
    assert clean_history_line("  ls -la  \n") == "ls -la"


def test_load_prefers_zsh_and_keeps_newest(tmp_path):
    (tmp_path / ".zsh_history").write_text(
        "".join(f": 17000000{i:02d}:0;cmd{i}\n" for i in range(10))
    )
    (tmp_path / ".bash_history").write_text("bash-cmd\n")
    assert load_recent_commands(3, home=tmp_path) == ["cmd7", "cmd8", "cmd9"]


def test_load_falls_back_to_bash(tmp_path):
    (tmp_path / ".bash_history").write_text("ls\n\ncd /tmp\n")
    assert load_recent_commands(10, home=tmp_path) == ["ls", "cd /tmp"]


def test_load_without_history(tmp_path):
    assert load_recent_commands(10, home=tmp_path) == []


def test_recent_commands_bounded():
    recent = RecentCommands(limit=2, commands=["a"])
    recent.add("b")
    recent.add("  ")
    recent.add("c")
    assert recent.latest() == ["b", "c"]
    assert recent.latest(1) == ["c"]
    assert recent.latest(0) == []
    assert len(recent) == 2

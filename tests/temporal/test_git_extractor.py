"""Tests for reading churn history from git."""

import os
import shutil
import subprocess

import pytest

from pulse_risk.exceptions import HistoryError
from pulse_risk.temporal.git_extractor import GitHistoryProvider


GIT = shutil.which("git")


def git(cwd, *args):
    subprocess.run(
        ["git", "-c", "user.name=Test", "-c", "user.email=test@example.com", *args],
        cwd=cwd,
        check=True,
        capture_output=True,
    )


class TestParseLog:
    """Test git log output parsing."""

    def test_groups_files_under_commits(self, tmp_path):
        top = os.path.realpath(tmp_path)
        raw = (
            "commit:1111111111111111111111111111111111111111\n"
            "\n"
            "src/a.ts\n"
            "src/b.ts\n"
            "\n"
            "commit:2222222222222222222222222222222222222222\n"
            "\n"
            "src/a.ts\n"
        )
        commits = GitHistoryProvider(top)._parse_log(raw, top)
        assert [c.hash for c in commits] == ["1" * 40, "2" * 40]
        assert commits[0].files == (
            os.path.join(top, "src", "a.ts"),
            os.path.join(top, "src", "b.ts"),
        )

    def test_commits_without_files_dropped(self, tmp_path):
        top = os.path.realpath(tmp_path)
        raw = "commit:abcdef0\n\ncommit:1234567\nx.py\n"
        commits = GitHistoryProvider(top)._parse_log(raw, top)
        assert [c.hash for c in commits] == ["1234567"]

    def test_lines_before_first_header_ignored(self, tmp_path):
        top = os.path.realpath(tmp_path)
        raw = "stray.py\ncommit:1234567\nx.py\n"
        commits = GitHistoryProvider(top)._parse_log(raw, top)
        assert len(commits) == 1
        assert commits[0].files == (os.path.join(top, "x.py"),)

    def test_empty_output(self, tmp_path):
        assert GitHistoryProvider(str(tmp_path))._parse_log("", str(tmp_path)) == []


@pytest.mark.skipif(GIT is None, reason="git not installed")
class TestGitRepository:
    """Against a real repository."""

    def test_log_since_in_subdirectory(self, tmp_path):
        """Paths are absolute even when the project is below the repo root."""
        repo = tmp_path / "repo"
        app = repo / "app"
        app.mkdir(parents=True)
        (app / "main.ts").write_text("export const x = 1;\n")
        git(repo, "init", "-q")
        git(repo, "add", ".")
        git(repo, "commit", "-q", "-m", "init")
        (app / "main.ts").write_text("export const x = 2;\n")
        git(repo, "commit", "-q", "-am", "change")

        commits = GitHistoryProvider(str(app)).log_since(30)

        expected = os.path.realpath(app / "main.ts")
        assert len(commits) == 2
        assert all(c.files == (expected,) for c in commits)

    def test_not_a_repository(self, tmp_path):
        with pytest.raises(HistoryError):
            GitHistoryProvider(str(tmp_path)).log_since(30)

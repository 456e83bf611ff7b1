"""Tests for git/repository.py."""

from __future__ import annotations

import subprocess
from pathlib import Path
from unittest.mock import MagicMock, patch

from gitver.core.result import Err, Ok
from gitver.git.repository import CommitLine, GitError, Repository, commit_range


def make_completed_process(
    stdout: str = "",
    stderr: str = "",
    returncode: int = 0,
) -> subprocess.CompletedProcess[str]:
    """Create a mock CompletedProcess."""
    return subprocess.CompletedProcess(
        args=["git"],
        returncode=returncode,
        stdout=stdout,
        stderr=stderr,
    )


def git_args(mock_run: MagicMock) -> list[str]:
    """Arguments after ``git -C <path>`` of the last call."""
    cmd = mock_run.call_args.args[0]
    return list(cmd[3:])


# =============================================================================
# Value types
# =============================================================================


class TestCommitLine:
    def test_short_sha(self) -> None:
        line = CommitLine(sha="0123456789abcdef", subject="s")
        assert line.short_sha == "01234567"

    def test_defaults(self) -> None:
        line = CommitLine(sha="abc", subject="s")
        assert (line.author, line.date) == ("", "")


class TestCommitRange:
    def test_bounded(self) -> None:
        assert commit_range("v1.0.0", "HEAD") == "v1.0.0..HEAD"

    def test_whole_history(self) -> None:
        assert commit_range(None, "main") == "main"


# =============================================================================
# Repository
# =============================================================================


class TestRepositoryBasics:
    def test_exists_with_git_dir(self, tmp_path: Path) -> None:
        (tmp_path / ".git").mkdir()
        assert Repository(tmp_path).exists() is True

    def test_exists_no_git(self, tmp_path: Path) -> None:
        assert Repository(tmp_path).exists() is False

    @patch("subprocess.run")
    def test_runs_git_in_repo_with_c_locale(self, mock_run: MagicMock, tmp_path: Path) -> None:
        mock_run.return_value = make_completed_process(stdout="main\n")

        Repository(tmp_path).current_branch()

        cmd = mock_run.call_args.args[0]
        assert list(cmd[:3]) == ["git", "-C", str(tmp_path)]
        assert mock_run.call_args.kwargs["env"]["LC_ALL"] == "C"
        assert mock_run.call_args.kwargs["timeout"] == 30.0

    @patch("subprocess.run")
    def test_toplevel(self, mock_run: MagicMock, tmp_path: Path) -> None:
        mock_run.return_value = make_completed_process(stdout=f"{tmp_path}\n")

        assert Repository(tmp_path / "sub").toplevel() == Ok(tmp_path)
        assert git_args(mock_run) == ["rev-parse", "--show-toplevel"]

    @patch("subprocess.run")
    def test_toplevel_not_a_repo(self, mock_run: MagicMock, tmp_path: Path) -> None:
        mock_run.return_value = make_completed_process(
            stderr="fatal: not a git repository (or any of the parent directories): .git\n",
            returncode=128,
        )

        result = Repository(tmp_path).toplevel()

        assert isinstance(result, Err)
        assert result.error.returncode == 128
        assert result.error.message.startswith("fatal: not a git repository")

    @patch("subprocess.run", side_effect=FileNotFoundError("git"))
    def test_git_missing(self, mock_run: MagicMock, tmp_path: Path) -> None:
        result = Repository(tmp_path).toplevel()

        assert isinstance(result, Err)
        assert result.error.returncode == -1


class TestNearestTag:
    @patch("subprocess.run")
    def test_annotated(self, mock_run: MagicMock, tmp_path: Path) -> None:
        mock_run.return_value = make_completed_process(stdout="v1.2.3\n")

        result = Repository(tmp_path).nearest_tag("HEAD", include_lightweight=False)

        assert result == Ok("v1.2.3")
        assert git_args(mock_run) == ["describe", "--abbrev=0", "HEAD"]

    @patch("subprocess.run")
    def test_lightweight_adds_tags_flag(self, mock_run: MagicMock, tmp_path: Path) -> None:
        mock_run.return_value = make_completed_process(stdout="nightly\n")

        result = Repository(tmp_path).nearest_tag("main", include_lightweight=True)

        assert result == Ok("nightly")
        assert git_args(mock_run) == ["describe", "--abbrev=0", "--tags", "main"]

    @patch("subprocess.run")
    def test_no_names_found(self, mock_run: MagicMock, tmp_path: Path) -> None:
        mock_run.return_value = make_completed_process(
            stderr="fatal: No names found, cannot describe anything.\n",
            returncode=128,
        )

        assert Repository(tmp_path).nearest_tag("HEAD", include_lightweight=False) == Ok(None)

    @patch("subprocess.run")
    def test_no_annotated_tags_can_describe(self, mock_run: MagicMock, tmp_path: Path) -> None:
        mock_run.return_value = make_completed_process(
            stderr="fatal: No annotated tags can describe 'abc'.\nHowever, there were ...\n",
            returncode=128,
        )

        assert Repository(tmp_path).nearest_tag("HEAD", include_lightweight=False) == Ok(None)

    @patch("subprocess.run")
    def test_other_failure(self, mock_run: MagicMock, tmp_path: Path) -> None:
        mock_run.return_value = make_completed_process(
            stderr="fatal: Not a valid object name nope\n",
            returncode=128,
        )

        result = Repository(tmp_path).nearest_tag("nope", include_lightweight=False)

        assert result == Err(
            GitError(
                command="describe",
                message="fatal: Not a valid object name nope",
                returncode=128,
            )
        )


class TestNearestRefName:
    @patch("subprocess.run")
    def test_strips_namespace(self, mock_run: MagicMock, tmp_path: Path) -> None:
        repo = Repository(tmp_path)
        for output, expected in [
            ("heads/main\n", "main"),
            ("tags/v1.0\n", "v1.0"),
            ("remotes/origin/dev\n", "origin/dev"),
        ]:
            mock_run.return_value = make_completed_process(stdout=output)
            assert repo.nearest_ref_name("HEAD") == Ok(expected)

        assert git_args(mock_run) == ["describe", "--all", "--abbrev=0", "HEAD"]

    @patch("subprocess.run")
    def test_nothing_found(self, mock_run: MagicMock, tmp_path: Path) -> None:
        mock_run.return_value = make_completed_process(
            stderr="fatal: No names found, cannot describe anything.\n",
            returncode=128,
        )

        assert Repository(tmp_path).nearest_ref_name("HEAD") == Ok(None)


class TestCurrentBranch:
    @patch("subprocess.run")
    def test_on_branch(self, mock_run: MagicMock, tmp_path: Path) -> None:
        mock_run.return_value = make_completed_process(stdout="feature/x\n")

        assert Repository(tmp_path).current_branch() == Ok("feature/x")
        assert git_args(mock_run) == ["symbolic-ref", "--quiet", "--short", "HEAD"]

    @patch("subprocess.run")
    def test_detached(self, mock_run: MagicMock, tmp_path: Path) -> None:
        mock_run.return_value = make_completed_process(returncode=1)

        assert Repository(tmp_path).current_branch() == Ok(None)

    @patch("subprocess.run")
    def test_failure(self, mock_run: MagicMock, tmp_path: Path) -> None:
        mock_run.return_value = make_completed_process(stderr="fatal: boom\n", returncode=128)

        result = Repository(tmp_path).current_branch()

        assert isinstance(result, Err)
        assert result.error.command == "symbolic-ref"


class TestRefExists:
    @patch("subprocess.run")
    def test_tag_exists(self, mock_run: MagicMock, tmp_path: Path) -> None:
        mock_run.return_value = make_completed_process(stdout="abc123\n")

        assert Repository(tmp_path).tag_exists("v1.0") == Ok(True)
        assert git_args(mock_run) == ["rev-parse", "--verify", "--quiet", "refs/tags/v1.0"]

    @patch("subprocess.run")
    def test_tag_missing(self, mock_run: MagicMock, tmp_path: Path) -> None:
        mock_run.return_value = make_completed_process(returncode=1)

        assert Repository(tmp_path).tag_exists("nope") == Ok(False)

    @patch("subprocess.run")
    def test_branch_exists(self, mock_run: MagicMock, tmp_path: Path) -> None:
        mock_run.return_value = make_completed_process(stdout="abc123\n")

        assert Repository(tmp_path).branch_exists("feature/x") == Ok(True)
        assert git_args(mock_run) == [
            "rev-parse",
            "--verify",
            "--quiet",
            "refs/heads/feature/x",
        ]

    @patch("subprocess.run")
    def test_failure(self, mock_run: MagicMock, tmp_path: Path) -> None:
        mock_run.return_value = make_completed_process(stderr="fatal: boom\n", returncode=128)

        result = Repository(tmp_path).branch_exists("x")

        assert isinstance(result, Err)
        assert result.error.message == "fatal: boom"


class TestCounting:
    @patch("subprocess.run")
    def test_non_merge_count_range(self, mock_run: MagicMock, tmp_path: Path) -> None:
        mock_run.return_value = make_completed_process(stdout="7\n")

        assert Repository(tmp_path).non_merge_count("v1.0", "HEAD") == Ok(7)
        assert git_args(mock_run) == ["rev-list", "--count", "--no-merges", "v1.0..HEAD"]

    @patch("subprocess.run")
    def test_non_merge_count_whole_history(self, mock_run: MagicMock, tmp_path: Path) -> None:
        mock_run.return_value = make_completed_process(stdout="42\n")

        assert Repository(tmp_path).non_merge_count(None, "main") == Ok(42)
        assert git_args(mock_run)[-1] == "main"

    @patch("subprocess.run")
    def test_non_merge_count_garbage(self, mock_run: MagicMock, tmp_path: Path) -> None:
        mock_run.return_value = make_completed_process(stdout="lots\n")

        result = Repository(tmp_path).non_merge_count(None, "HEAD")

        assert isinstance(result, Err)
        assert "unexpected output" in result.error.message

    @patch("subprocess.run")
    def test_count_tags_with_prefix(self, mock_run: MagicMock, tmp_path: Path) -> None:
        mock_run.return_value = make_completed_process(stdout="v1.2.0-rc1\nv1.2.0-rc2\n\n")

        assert Repository(tmp_path).count_tags_with_prefix("v1.2.0") == Ok(2)
        assert git_args(mock_run) == ["tag", "--list", "v1.2.0*"]

    @patch("subprocess.run")
    def test_count_tags_none(self, mock_run: MagicMock, tmp_path: Path) -> None:
        mock_run.return_value = make_completed_process(stdout="")

        assert Repository(tmp_path).count_tags_with_prefix("v9") == Ok(0)


class TestCommits:
    @patch("subprocess.run")
    def test_commit_hash(self, mock_run: MagicMock, tmp_path: Path) -> None:
        mock_run.return_value = make_completed_process(stdout="0123456789abcdef\n")

        assert Repository(tmp_path).commit_hash("v1.0") == Ok("0123456789abcdef")
        assert git_args(mock_run) == ["rev-parse", "--verify", "v1.0^{commit}"]

    @patch("subprocess.run")
    def test_parent_commit(self, mock_run: MagicMock, tmp_path: Path) -> None:
        mock_run.return_value = make_completed_process(stdout="fedcba\n")

        assert Repository(tmp_path).parent_commit("v1.0") == Ok("fedcba")
        assert git_args(mock_run) == ["rev-parse", "--verify", "--quiet", "v1.0^"]

    @patch("subprocess.run")
    def test_parent_of_root_commit(self, mock_run: MagicMock, tmp_path: Path) -> None:
        mock_run.return_value = make_completed_process(returncode=1)

        assert Repository(tmp_path).parent_commit("root") == Ok(None)

    @patch("subprocess.run")
    def test_non_merge_commits(self, mock_run: MagicMock, tmp_path: Path) -> None:
        mock_run.return_value = make_completed_process(
            stdout=(
                "aaa\x1fSecond: with | odd chars\x1fAda\x1f2024-05-02\x1e\n"
                "bbb\x1fFirst\x1fGrace\x1f2024-05-01\x1e\n"
            )
        )

        result = Repository(tmp_path).non_merge_commits("v1.0", "HEAD")

        assert result == Ok(
            (
                CommitLine(
                    sha="aaa", subject="Second: with | odd chars", author="Ada", date="2024-05-02"
                ),
                CommitLine(sha="bbb", subject="First", author="Grace", date="2024-05-01"),
            )
        )
        args = git_args(mock_run)
        assert args[:2] == ["log", "--no-merges"]
        assert args[-1] == "v1.0..HEAD"

    @patch("subprocess.run")
    def test_non_merge_commits_empty(self, mock_run: MagicMock, tmp_path: Path) -> None:
        mock_run.return_value = make_completed_process(stdout="")

        assert Repository(tmp_path).non_merge_commits(None, "HEAD") == Ok(())

    @patch("subprocess.run")
    def test_non_merge_commits_failure(self, mock_run: MagicMock, tmp_path: Path) -> None:
        mock_run.return_value = make_completed_process(
            stderr="fatal: bad revision 'x..HEAD'\n", returncode=128
        )

        result = Repository(tmp_path).non_merge_commits("x", "HEAD")

        assert isinstance(result, Err)
        assert result.error.command == "log"

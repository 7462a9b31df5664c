"""
Git diff action: numstat/patch parsing and subprocess failure handling.
"""

import shutil
import subprocess

import pytest

from brain import brain
from brain.actions import git_diff
from brain.actions.git_diff import GitCommandError, get_git_diffs, parse_git_diff, parse_numstat
from brain.core.types import GitDiffPayload

NUMSTAT = "3\t1\tsrc/app.py\n5\t0\tdocs/new.md\n0\t7\told.txt\n-\t-\tlogo.png\n"

DIFF = """diff --git a/src/app.py b/src/app.py
index 1111111..2222222 100644
--- a/src/app.py
+++ b/src/app.py
@@ -1,3 +1,5 @@
-print("old")
+print("new")
+print("more")
+print("even more")
diff --git a/docs/new.md b/docs/new.md
new file mode 100644
index 0000000..3333333
--- /dev/null
+++ b/docs/new.md
@@ -0,0 +1,5 @@
+# New
diff --git a/old.txt b/old.txt
deleted file mode 100644
index 4444444..0000000
--- a/old.txt
+++ /dev/null
@@ -1,7 +0,0 @@
-gone
diff --git a/logo.png b/logo.png
index 5555555..6666666 100644
Binary files a/logo.png and b/logo.png differ
"""


def test_parse_numstat():
    stats = parse_numstat(NUMSTAT)

    assert stats["src/app.py"] == {"additions": 3, "deletions": 1}
    assert stats["old.txt"] == {"additions": 0, "deletions": 7}
    # Binary files count as zero
    assert stats["logo.png"] == {"additions": 0, "deletions": 0}


def test_parse_numstat_skips_malformed_lines():
    assert parse_numstat("garbage\n\n1\t2\n") == {}


def test_parse_git_diff():
    summary = parse_git_diff(NUMSTAT, DIFF)

    assert summary["total_files"] == 4
    assert summary["total_additions"] == 8
    assert summary["total_deletions"] == 8

    by_name = {f["filename"]: f for f in summary["files"]}
    assert by_name["src/app.py"]["status"] == "modified"
    assert by_name["docs/new.md"]["status"] == "added"
    assert by_name["old.txt"]["status"] == "deleted"
    assert by_name["src/app.py"]["additions"] == 3
    assert by_name["src/app.py"]["patch"].startswith("a/src/app.py b/src/app.py")
    assert "print(\"more\")" in by_name["src/app.py"]["patch"]


def test_parse_empty_diff():
    assert parse_git_diff("", "") == {
        "files": [], "total_files": 0, "total_additions": 0, "total_deletions": 0,
    }


@pytest.mark.asyncio
async def test_git_failure_yields_empty_summary(monkeypatch):
    async def failing_git(args, cwd):
        raise GitCommandError("not a git repository")

    monkeypatch.setattr(git_diff, "run_git", failing_git)

    result = await get_git_diffs(GitDiffPayload())
    assert result["files"] == []
    assert result["total_files"] == 0


@pytest.mark.asyncio
async def test_missing_repo_directory_yields_empty_summary(monkeypatch, tmp_path):
    monkeypatch.setenv("GIT_REPO_PATH", str(tmp_path / "does-not-exist"))

    result = await get_git_diffs(GitDiffPayload())
    assert result["total_files"] == 0


@pytest.mark.asyncio
async def test_git_diff_dispatch_is_audited(deps, monkeypatch):
    outputs = {("diff", "--numstat"): NUMSTAT, ("diff",): DIFF}

    async def fake_git(args, cwd):
        return outputs[tuple(args)]

    monkeypatch.setattr(git_diff, "run_git", fake_git)

    result = await brain({"kind": "git_diff", "payload": {}}, deps)

    assert result["total_files"] == 4
    events = await deps.store.query_nodes({"type": "event"})
    assert events[0].metadata["action"] == "git_diff"
    assert events[0].metadata["status"] == "success"


@pytest.mark.skipif(shutil.which("git") is None, reason="git not installed")
@pytest.mark.asyncio
async def test_real_repository(monkeypatch, tmp_path):
    repo = tmp_path / "repo"
    repo.mkdir()

    def git(*args):
        subprocess.run(
            ["git", "-c", "user.email=dev@example.com", "-c", "user.name=Dev", *args],
            cwd=repo, check=True, capture_output=True,
        )

    git("init")
    (repo / "notes.txt").write_text("one\n")
    git("add", "notes.txt")
    git("commit", "-m", "initial")
    (repo / "notes.txt").write_text("one\ntwo\n")

    monkeypatch.setenv("GIT_REPO_PATH", str(repo))
    result = await get_git_diffs(GitDiffPayload())

    assert result["total_files"] == 1
    assert result["files"][0]["filename"] == "notes.txt"
    assert result["files"][0]["status"] == "modified"
    assert result["total_additions"] == 1
    assert result["total_deletions"] == 0


if __name__ == "__main__":
    pytest.main([__file__, "-v"])

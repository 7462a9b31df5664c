"""
Git diff action: summarises the working tree's unstaged changes.

Shells out to ``git diff --numstat`` and ``git diff`` in the configured
repository. Any subprocess failure yields an empty summary.
"""

import asyncio
import re
from typing import Any, Dict, List, Optional

from ..core.config import GIT_DIFF_MAX_BYTES, get_git_repo_path
from ..core.types import BrainDependencies, GitDiffPayload
from ..util.logging import logger

DIFF_SECTION_RE = re.compile(r"^diff --git ", re.MULTILINE)
FILE_HEADER_RE = re.compile(r"^a/(.+?) b/(.+?)$", re.MULTILINE)


class GitCommandError(Exception):
    """A git subprocess exited non-zero or produced too much output."""


async def run_git(args: List[str], cwd: str) -> str:
    """Run a git command and return its stdout."""
    process = await asyncio.create_subprocess_exec(
        "git", *args,
        cwd=cwd,
        stdout=asyncio.subprocess.PIPE,
        stderr=asyncio.subprocess.PIPE,
    )
    stdout, stderr = await process.communicate()

    if process.returncode != 0:
        raise GitCommandError(f"git {' '.join(args)} failed: {stderr.decode(errors='replace').strip()}")
    if len(stdout) > GIT_DIFF_MAX_BYTES:
        raise GitCommandError(f"git {' '.join(args)} output exceeds {GIT_DIFF_MAX_BYTES} bytes")

    return stdout.decode(errors="replace")


def parse_numstat(numstat_output: str) -> Dict[str, Dict[str, int]]:
    """Parse ``git diff --numstat`` lines into per-file addition/deletion counts."""
    file_stats = {}
    for line in numstat_output.strip().splitlines():
        parts = line.split("\t")
        if len(parts) < 3 or not all(parts[:3]):
            continue

        additions, deletions, filename = parts[0], parts[1], parts[2]
        # Binary files report "-" for both counts
        file_stats[filename] = {
            "additions": int(additions) if additions.isdigit() else 0,
            "deletions": int(deletions) if deletions.isdigit() else 0,
        }
    return file_stats


def parse_git_diff(numstat_output: str, diff_output: str) -> Dict[str, Any]:
    """Combine numstat statistics and patch text into a diff summary."""
    file_stats = parse_numstat(numstat_output)
    total_additions = sum(stats["additions"] for stats in file_stats.values())
    total_deletions = sum(stats["deletions"] for stats in file_stats.values())

    files = []
    for section in DIFF_SECTION_RE.split(diff_output):
        if not section:
            continue

        file_match = FILE_HEADER_RE.search(section)
        if not file_match:
            continue

        filename = file_match.group(2)
        stats = file_stats.get(filename, {"additions": 0, "deletions": 0})

        status = "modified"
        if "new file mode" in section:
            status = "added"
        elif "deleted file mode" in section:
            status = "deleted"

        files.append({
            "filename": filename,
            "status": status,
            "additions": stats["additions"],
            "deletions": stats["deletions"],
            "patch": section,
        })

    return {
        "files": files,
        "total_files": len(files),
        "total_additions": total_additions,
        "total_deletions": total_deletions,
    }


def empty_diff() -> Dict[str, Any]:
    return {"files": [], "total_files": 0, "total_additions": 0, "total_deletions": 0}


async def get_git_diffs(payload: GitDiffPayload, deps: Optional[BrainDependencies] = None) -> Dict[str, Any]:
    repo_path = get_git_repo_path()
    try:
        numstat_output = await run_git(["diff", "--numstat"], cwd=repo_path)
        diff_output = await run_git(["diff"], cwd=repo_path)
    except (GitCommandError, OSError) as e:
        logger.error(f"Error getting git diff in {repo_path}: {e}")
        return empty_diff()

    return parse_git_diff(numstat_output, diff_output)

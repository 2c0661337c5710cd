"""Thin wrappers around the git and gh command-line tools."""

import shutil
import subprocess


def ensure_git_repository() -> None:
    result = subprocess.run(["git", "rev-parse", "--git-dir"], capture_output=True, text=True)
    if result.returncode != 0:
        raise RuntimeError("Not in a Git repository. Run this command from within a Git repository.")


def current_branch() -> str:
    result = subprocess.run(["git", "branch", "--show-current"], capture_output=True, text=True)
    if result.returncode != 0 or not result.stdout.strip():
        return "unknown"
    return result.stdout.strip()


def branch_exists(name: str) -> bool:
    result = subprocess.run(["git", "rev-parse", "--verify", "--quiet", f"refs/heads/{name}"], capture_output=True)
    return result.returncode == 0


def create_branch(name: str) -> None:
    result = subprocess.run(["git", "checkout", "-b", name], capture_output=True, text=True)
    if result.returncode != 0:
        raise RuntimeError(f"git checkout -b {name} failed: {result.stderr.strip()}")


def commit_subjects(base: str) -> list[str]:
    """Return commit subjects on HEAD that are not on base, oldest first."""
    result = subprocess.run(
        ["git", "log", "--reverse", "--pretty=format:%s", f"{base}..HEAD"],
        capture_output=True,
        text=True,
    )
    if result.returncode != 0:
        raise RuntimeError(f"git log {base}..HEAD failed: {result.stderr.strip()}")
    return [line for line in result.stdout.splitlines() if line.strip()]


def gh_available() -> bool:
    return shutil.which("gh") is not None


def create_pull_request(title: str, head: str) -> None:
    # gh prompts for the body and base branch interactively.
    result = subprocess.run(["gh", "pr", "create", "--title", title, "--head", head], check=False)
    if result.returncode != 0:
        raise RuntimeError("gh pr create failed")

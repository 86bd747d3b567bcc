"""Which repository a bare `--pr N` refers to, and where the log file lives.

Resolution order: GITHUB_REPOSITORY (set by GitHub Actions), the first
pull request listed in prconsensus.yaml, then the checkout's origin remote.
"""

from __future__ import annotations

import logging
import os
import re
import subprocess
from dataclasses import dataclass
from pathlib import Path

from .models import PullRequestTarget

logger = logging.getLogger(__name__)

# git@host:owner/repo, ssh://git@host/owner/repo, http(s)://host/owner/repo; optional .git
_REMOTE_URL = re.compile(r"^(?:git@[\w.-]+:|ssh://git@[\w.-]+/|https?://[\w.-]+/)([^/]+)/([^/]+?)(?:\.git)?$")


@dataclass
class RepoInfo:
    owner: str
    name: str

    def target(self, pr_number: int) -> PullRequestTarget:
        return PullRequestTarget(owner=self.owner, repo=self.name, pr_number=pr_number)


def get_cache_dir() -> Path:
    xdg_cache = os.environ.get("XDG_CACHE_HOME")
    if xdg_cache:
        return Path(xdg_cache) / "prconsensus"
    return Path.home() / ".cache" / "prconsensus"


def get_log_file() -> Path:
    return get_cache_dir() / "prconsensus.log"


def parse_git_remote_url(url: str) -> RepoInfo | None:
    match = _REMOTE_URL.match(url)
    if match is None:
        return None
    return RepoInfo(owner=match.group(1), name=match.group(2))


def get_git_remote_url(remote: str = "origin") -> str | None:
    try:
        result = subprocess.run(
            ["git", "remote", "get-url", remote],
            capture_output=True,
            text=True,
            check=True,
        )
        return result.stdout.strip()
    except (subprocess.CalledProcessError, FileNotFoundError):
        return None


def detect_repo_from_git() -> RepoInfo | None:
    url = get_git_remote_url("origin")
    return parse_git_remote_url(url) if url else None


def get_repo_from_config(config_path: Path | str | None = None) -> RepoInfo | None:
    """Use the repository of the first configured pull request."""
    from .report_config import ReportConfig

    config = ReportConfig.load(config_path)
    if config.targets:
        first = config.targets[0]
        return RepoInfo(owner=first.owner, name=first.repo)
    return None


def get_repo_from_env() -> RepoInfo | None:
    """Read GITHUB_REPOSITORY ("owner/name")."""
    value = os.environ.get("GITHUB_REPOSITORY", "").strip()
    if not value:
        return None

    owner, _, name = value.partition("/")
    if not owner or not name or "/" in name:
        logger.warning(f"Ignoring malformed GITHUB_REPOSITORY={value!r}, expected owner/name")
        return None
    return RepoInfo(owner=owner, name=name)


def get_repo(config_path: Path | str | None = None) -> RepoInfo:
    """Repository for pull request numbers given without one.

    Raises ValueError if no source names a repository.
    """
    sources = (
        ("GITHUB_REPOSITORY", get_repo_from_env),
        ("config", lambda: get_repo_from_config(config_path)),
        ("git remote", detect_repo_from_git),
    )
    for source, resolve in sources:
        repo = resolve()
        if repo:
            logger.debug(f"Repository {repo.owner}/{repo.name} from {source}")
            return repo

    raise ValueError(
        "Could not determine repository. Either:\n"
        "  1. Run from a git checkout with a GitHub origin remote, or\n"
        "  2. Set GITHUB_REPOSITORY=owner/name, or\n"
        "  3. List pull requests in prconsensus.yaml:\n"
        "     pull_requests:\n"
        "       - owner: your-org\n"
        "         repo: your-repo\n"
        "         number: 42"
    )

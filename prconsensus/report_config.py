"""Report configuration: which pull requests to score and how.

Example `prconsensus.yaml`:

    pull_requests:
      - owner: your-org
        repo: your-repo
        number: 42
    report:
      body_char_limit: 300
      unresolved_approval: pending   # or "approved"
      output: PR_Comments_Reactions.xlsx
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml

from .models import PullRequestTarget
from .scoring.aggregator import DEFAULT_BODY_CHAR_LIMIT
from .scoring.classifier import UnresolvedApprovalPolicy

CONFIG_CANDIDATES = ["prconsensus.yaml", ".prconsensus.yaml", "prconsensus.yml", ".prconsensus.yml"]
DEFAULT_OUTPUT = "PR_Comments_Reactions.xlsx"


class ConfigError(ValueError):
    """Config file content is invalid."""


@dataclass
class ReportConfig:
    """Targets and scoring options for a report run."""

    targets: list[PullRequestTarget] = field(default_factory=list)
    body_char_limit: int = DEFAULT_BODY_CHAR_LIMIT
    unresolved_approval: UnresolvedApprovalPolicy = UnresolvedApprovalPolicy.PENDING
    output: Path = field(default_factory=lambda: Path(DEFAULT_OUTPUT))

    @classmethod
    def load(cls, path: Path | str | None = None) -> ReportConfig:
        """Load config from YAML file or return defaults."""
        if path is None:
            for candidate in CONFIG_CANDIDATES:
                if Path(candidate).exists():
                    path = candidate
                    break

        if path is None or not Path(path).exists():
            return cls.default()

        with open(path) as f:
            data = yaml.safe_load(f)

        return cls.from_dict(data or {})

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> ReportConfig:
        """Create config from dictionary (e.g., parsed YAML)."""
        targets = []
        for entry in data.get("pull_requests", []) or []:
            try:
                targets.append(
                    PullRequestTarget(
                        owner=entry["owner"],
                        repo=entry["repo"],
                        pr_number=int(entry["number"]),
                    )
                )
            except (KeyError, TypeError, ValueError) as e:
                raise ConfigError(f"Invalid pull_requests entry {entry!r}: {e}") from e

        report_data = data.get("report", {}) or {}

        body_char_limit = report_data.get("body_char_limit", DEFAULT_BODY_CHAR_LIMIT)
        if not isinstance(body_char_limit, int) or body_char_limit < 1:
            raise ConfigError(f"body_char_limit must be a positive integer, got {body_char_limit!r}")

        policy_value = report_data.get("unresolved_approval", UnresolvedApprovalPolicy.PENDING.value)
        try:
            policy = UnresolvedApprovalPolicy(policy_value)
        except ValueError as e:
            choices = ", ".join(p.value for p in UnresolvedApprovalPolicy)
            raise ConfigError(f"unresolved_approval must be one of {choices}, got {policy_value!r}") from e

        return cls(
            targets=targets,
            body_char_limit=body_char_limit,
            unresolved_approval=policy,
            output=Path(report_data.get("output", DEFAULT_OUTPUT)),
        )

    @classmethod
    def default(cls) -> ReportConfig:
        """No targets; pass PR numbers on the command line or run `prconsensus init`."""
        return cls()

    def to_yaml(self) -> str:
        """Serialize config to YAML."""
        data: dict[str, Any] = {
            "pull_requests": [
                {"owner": t.owner, "repo": t.repo, "number": t.pr_number} for t in self.targets
            ],
            "report": {
                "body_char_limit": self.body_char_limit,
                "unresolved_approval": self.unresolved_approval.value,
                "output": str(self.output),
            },
        }
        return yaml.dump(data, default_flow_style=False, sort_keys=False)

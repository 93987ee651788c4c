"""
Commit descriptors from a CI pull request event payload.

On ``pull_request`` events no ``head_commit`` is available, so the head and
base commits are reconstructed from the pull request object. The payload is
the JSON document the CI runner stores at ``$GITHUB_EVENT_PATH``.
"""

import json
import os
from pathlib import Path
from typing import Any, Dict, Optional, Union
from urllib.parse import quote

from benchcompare import logger
from benchcompare.exceptions import CommitInfoError
from benchcompare.models import Commit, CommitUser

EVENT_PATH_ENV = "GITHUB_EVENT_PATH"

# Characters encodeURIComponent leaves alone besides those quote() never escapes
_URI_COMPONENT_SAFE = "!'()*"


def load_event_payload(path: Optional[Union[str, Path]] = None) -> Dict[str, Any]:
    """
    Load the CI event payload.

    Args:
        path: Payload file; defaults to ``$GITHUB_EVENT_PATH``

    Raises:
        CommitInfoError: If no path is known or the file is not readable JSON
    """
    path = path or os.environ.get(EVENT_PATH_ENV)
    if not path:
        raise CommitInfoError(
            f"Event payload path is not given and ${EVENT_PATH_ENV} is not set",
            error_code="GIT_003",
        )

    try:
        with open(path, encoding="utf-8") as f:
            payload = json.load(f)
    except (OSError, ValueError) as e:
        raise CommitInfoError(
            f"Cannot load event payload from '{path}': {e}",
            error_code="GIT_003",
            context={'event_path': str(path)},
        ) from e

    logger.debug(f"Loaded event payload from {path}")
    return payload


def _pull_request(payload: Dict[str, Any]) -> Dict[str, Any]:
    pr = payload.get("pull_request")
    if not pr:
        raise CommitInfoError(
            f"No commit information is found in payload: {json.dumps(payload, indent=2)}",
            error_code="GIT_001",
        )
    return pr


def _require(obj: Dict[str, Any], *keys: str) -> Any:
    for key in keys:
        if not isinstance(obj, dict) or key not in obj:
            raise CommitInfoError(
                f"Pull request payload has no '{'.'.join(keys)}' field",
                error_code="GIT_001",
            )
        obj = obj[key]
    return obj


def _user(login: str) -> CommitUser:
    # The payload only carries the login; it stands in for both name and username.
    return CommitUser(name=login, username=login)


def get_latest_pr_commit(payload: Dict[str, Any]) -> Commit:
    """
    Build the head commit of the pull request in ``payload``.

    Raises:
        CommitInfoError: If the payload has no pull request
    """
    pr = _pull_request(payload)
    head = _require(pr, "head")
    sha = _require(head, "sha")
    user = _user(_require(head, "user", "login"))

    return Commit(
        id=sha,
        message=pr.get("title", ""),
        timestamp=head.get("repo", {}).get("updated_at", ""),
        url=f"{pr.get('html_url', '')}/commits/{sha}",
        author=user,
        committer=user,
    )


def get_base_commit(payload: Dict[str, Any]) -> Commit:
    """
    Build the base commit the pull request in ``payload`` targets.

    Raises:
        CommitInfoError: If the payload has no pull request
    """
    pr = _pull_request(payload)
    base = _require(pr, "base")
    sha = _require(base, "sha")
    repo = base.get("repo", {})
    user = _user(_require(base, "user", "login"))

    return Commit(
        id=sha,
        message=base.get("label", ""),
        timestamp=repo.get("updated_at", ""),
        url=f"{repo.get('html_url', '')}/commits/{sha}",
        author=user,
        committer=user,
    )


def get_current_repo(payload: Dict[str, Any]) -> Dict[str, Any]:
    """
    Return the repository object of ``payload``.

    Raises:
        CommitInfoError: If the payload carries no repository
    """
    repo = payload.get("repository")
    if not repo:
        raise CommitInfoError(
            f"Repository information is not available in payload: {json.dumps(payload, indent=2)}",
            error_code="GIT_002",
        )
    return repo


def workflow_run_url(repo_url: str, workflow: str) -> str:
    """
    Link to the runs of ``workflow`` in the repository's actions page.

    >>> workflow_run_url("https://github.com/user/repo", "Workflow name")
    'https://github.com/user/repo/actions?query=workflow%3AWorkflow%20name'
    """
    return f"{repo_url}/actions?query=workflow%3A{quote(workflow, safe=_URI_COMPONENT_SAFE)}"


def workflow_url_from_payload(payload: Dict[str, Any], workflow: str) -> str:
    """Footer link for reports, built from the repository in ``payload``."""
    repo = get_current_repo(payload)
    return workflow_run_url(repo.get("html_url") or "", workflow)

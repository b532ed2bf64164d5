"""Pull request comment with the coverage report."""

import json
import logging
import os
from collections.abc import Mapping
from pathlib import Path

import aiohttp

from phpci.test_action.coverage.reporter import format_for_pr_comment
from phpci.test_action.models.coverage import CoverageData
from phpci.test_action.models.github_config import GitHubApiConfig
from phpci.test_action.models.test_result import TestResult

logger = logging.getLogger(__name__)

COMMENT_MARKER = "<!-- php-test-action:coverage-report -->"


def pull_request_number(env: Mapping[str, str] = os.environ) -> int | None:
    """Return the number of the pull request this run belongs to, if any."""
    event_path = env.get("GITHUB_EVENT_PATH")
    if event_path:
        try:
            event = json.loads(Path(event_path).read_text(encoding="utf-8"))
        except (OSError, json.JSONDecodeError) as e:
            logger.debug(f"Cannot read event payload {event_path}: {e}")
        else:
            number = (event.get("pull_request") or {}).get("number")
            if isinstance(number, int):
                return number

    # refs/pull/<number>/merge
    parts = env.get("GITHUB_REF", "").split("/")
    if len(parts) >= 3 and parts[:2] == ["refs", "pull"] and parts[2].isdigit():
        return int(parts[2])
    return None


def build_comment(result: TestResult, coverage: CoverageData) -> str:
    """Render the comment body, tagged with the marker used to find it again."""
    icon = "✅" if result.status == "success" else "❌"
    tests_line = (
        f"{icon} **{result.framework}**: {result.passed} passed, "
        f"{result.failed} failed, {result.skipped} skipped "
        f"({result.total} total)"
    )
    return f"{COMMENT_MARKER}\n{tests_line}\n\n{format_for_pr_comment(coverage)}"


class PRCommentReporter:
    """Creates or updates the coverage comment on a pull request."""

    def __init__(self, config: GitHubApiConfig, pr_number: int) -> None:
        """Initialize reporter for one pull request."""
        self.config = config
        self.pr_number = pr_number
        self.base_url = config.base_url.rstrip("/")

    @property
    def _headers(self) -> dict[str, str]:
        return {
            "Authorization": f"Bearer {self.config.token}",
            "Accept": "application/vnd.github+json",
        }

    async def report(self, result: TestResult, coverage: CoverageData) -> str:
        """Post the comment, replacing an earlier one from this action.

        Returns:
            URL of the created or updated comment

        """
        body = build_comment(result, coverage)

        async with aiohttp.ClientSession() as session:
            comment_id = await self._find_existing_comment(session)
            if comment_id is None:
                url = (
                    f"{self.base_url}/repos/{self.config.owner}/{self.config.repo}/"
                    f"issues/{self.pr_number}/comments"
                )
                request = session.post(url, headers=self._headers, json={"body": body})
                expected = 201
            else:
                url = (
                    f"{self.base_url}/repos/{self.config.owner}/{self.config.repo}/"
                    f"issues/comments/{comment_id}"
                )
                request = session.patch(url, headers=self._headers, json={"body": body})
                expected = 200

            async with request as response:
                if response.status != expected:
                    text = await response.text()
                    raise RuntimeError(
                        f"Failed to post PR comment: {response.status} {text}"
                    )
                data: Mapping[str, object] = await response.json()

        html_url = str(data.get("html_url", ""))
        logger.info(f"Coverage comment posted: {html_url}")
        return html_url

    async def _find_existing_comment(self, session: aiohttp.ClientSession) -> int | None:
        url = (
            f"{self.base_url}/repos/{self.config.owner}/{self.config.repo}/"
            f"issues/{self.pr_number}/comments"
        )
        params = {"per_page": "100"}

        async with session.get(url, headers=self._headers, params=params) as response:
            if response.status != 200:
                text = await response.text()
                raise RuntimeError(
                    f"Failed to list PR comments: {response.status} {text}"
                )
            comments = await response.json()

        if not isinstance(comments, list):
            return None
        for comment in comments:
            if not isinstance(comment, dict):
                continue
            comment_id = comment.get("id")
            if COMMENT_MARKER in str(comment.get("body", "")) and isinstance(
                comment_id, int
            ):
                return comment_id
        return None

"""Connection settings for GitHub services."""

import os
from collections.abc import Mapping

from pydantic import BaseModel, Field


class GitHubCacheConfig(BaseModel):
    """Configuration for the GitHub Actions cache service."""

    results_url: str = Field(..., description="ACTIONS_RESULTS_URL of the runner")
    runtime_token: str = Field(..., description="ACTIONS_RUNTIME_TOKEN of the runner")

    @classmethod
    def from_env(cls, env: Mapping[str, str] = os.environ) -> "GitHubCacheConfig | None":
        """Read the runner-provided settings, or None outside a runner."""
        results_url = env.get("ACTIONS_RESULTS_URL")
        runtime_token = env.get("ACTIONS_RUNTIME_TOKEN")
        if not results_url or not runtime_token:
            return None
        return cls(results_url=results_url, runtime_token=runtime_token)


class GitHubApiConfig(BaseModel):
    """Configuration for the GitHub REST API."""

    token: str = Field(..., description="GitHub token allowed to comment on PRs")
    owner: str = Field(..., description="Repository owner")
    repo: str = Field(..., description="Repository name")
    base_url: str = Field(
        default="https://api.github.com", description="GitHub API base URL"
    )

    @classmethod
    def from_env(
        cls, token: str, env: Mapping[str, str] = os.environ
    ) -> "GitHubApiConfig | None":
        """Build config from GITHUB_REPOSITORY, or None when unavailable."""
        repository = env.get("GITHUB_REPOSITORY", "")
        owner, _, repo = repository.partition("/")
        if not token or not owner or not repo:
            return None
        return cls(
            token=token,
            owner=owner,
            repo=repo,
            base_url=env.get("GITHUB_API_URL", "https://api.github.com"),
        )

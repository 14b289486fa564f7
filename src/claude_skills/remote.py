"""claude-skills catalog client — list and fetch skills from GitHub.

Catalog protocol:
    GET https://api.github.com/repos/{owner}/{repo}/contents/{path}?ref={ref}
        -> JSON array of entries; every entry with type == "dir" is a skill
    GET https://raw.githubusercontent.com/{owner}/{repo}/{ref}/{path}/{dir}/SKILL.md
        -> the skill body

Authentication is optional. A token only raises the API rate limit, so
every way of finding one fails quietly into anonymous access.
"""

from __future__ import annotations

import asyncio
import logging
import os
import subprocess
from typing import Any, Optional

import httpx
from pydantic import ValidationError

from .errors import CatalogUnreachable, RateLimited
from .models import CatalogResult, CatalogSource, FetchFailure, SkillDescriptor

logger = logging.getLogger("claude_skills.remote")

USER_AGENT = "claude-skills-cli"
TOKEN_ENV_VARS = ("GITHUB_TOKEN", "GH_TOKEN")
GH_TOKEN_TIMEOUT_S = 5
RATE_LIMIT_STATUSES = (403, 429)


def _gh_cli_token(timeout: float = GH_TOKEN_TIMEOUT_S) -> Optional[str]:
    """Ask the GitHub CLI for its token; any failure means no token."""
    try:
        result = subprocess.run(
            ["gh", "auth", "token"],
            capture_output=True,
            text=True,
            timeout=timeout,
        )
    except (OSError, subprocess.SubprocessError) as exc:
        logger.debug("gh auth token unavailable: %s", exc)
        return None

    if result.returncode != 0:
        logger.debug("gh auth token exited %d", result.returncode)
        return None
    return result.stdout.strip() or None


def resolve_token() -> tuple[Optional[str], Optional[str]]:
    """Find a GitHub token for catalog requests.

    Checks GITHUB_TOKEN, then GH_TOKEN, then ``gh auth token``.

    Returns:
        tuple: (token, source) where source is the env var name or ``"gh"``;
        (None, None) when running anonymously.
    """
    for env_name in TOKEN_ENV_VARS:
        token = (os.environ.get(env_name) or "").strip()
        if token:
            return token, env_name

    token = _gh_cli_token()
    if token:
        return token, "gh"
    return None, None


class CatalogClient:
    """Client for a GitHub-hosted skill catalog.

    The credential is resolved once, when the client is created.

    Args:
        source: Catalog coordinates (default: Spardutti/claude-skills@main).
        token: Explicit token; skips resolution when given.
        transport: Optional httpx transport, mainly for tests.
    """

    def __init__(
        self,
        source: Optional[CatalogSource] = None,
        token: Optional[str] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self.source = source or CatalogSource()
        if token:
            self.token, self.token_source = token, "explicit"
        else:
            self.token, self.token_source = resolve_token()
        self._transport = transport

    @property
    def headers(self) -> dict[str, str]:
        headers = {
            "User-Agent": USER_AGENT,
            "Accept": "application/vnd.github+json",
        }
        if self.token:
            headers["Authorization"] = f"Bearer {self.token}"
        return headers

    def _client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(
            headers=self.headers,
            follow_redirects=True,
            transport=self._transport,
        )

    async def list_skill_dirs(self, client: httpx.AsyncClient) -> list[str]:
        """List catalog directory names in the order GitHub returns them.

        Raises:
            RateLimited: On HTTP 403/429.
            CatalogUnreachable: On any other failure.
        """
        url = self.source.contents_url
        try:
            resp = await client.get(url)
        except httpx.HTTPError as exc:
            raise CatalogUnreachable(f"Failed to list skills at {url}: {exc}") from exc

        if resp.status_code in RATE_LIMIT_STATUSES:
            raise RateLimited(resp.status_code)
        if not resp.is_success:
            raise CatalogUnreachable(
                f"Failed to list skills: {resp.status_code} {resp.reason_phrase}"
            )

        try:
            entries: Any = resp.json()
        except ValueError as exc:
            raise CatalogUnreachable(f"Catalog listing is not JSON: {exc}") from exc
        if not isinstance(entries, list):
            raise CatalogUnreachable(f"Catalog listing at {url} is not a directory")

        return [
            e["name"]
            for e in entries
            if isinstance(e, dict) and e.get("type") == "dir" and e.get("name")
        ]

    async def fetch_skill(
        self, client: httpx.AsyncClient, dir_name: str
    ) -> SkillDescriptor | FetchFailure:
        """Fetch one skill body. Failures are returned, never raised."""
        try:
            resp = await client.get(self.source.raw_url(dir_name))
        except httpx.HTTPError as exc:
            logger.warning("Failed to fetch %s, skipping: %s", dir_name, exc)
            return FetchFailure(dir_name=dir_name, reason=str(exc) or type(exc).__name__)

        if not resp.is_success:
            logger.warning("No SKILL.md found in %s (HTTP %d), skipping", dir_name, resp.status_code)
            return FetchFailure(dir_name=dir_name, reason=f"HTTP {resp.status_code}")

        try:
            return SkillDescriptor.from_content(dir_name, resp.text)
        except ValidationError as exc:
            logger.warning("Invalid skill directory %r, skipping: %s", dir_name, exc)
            return FetchFailure(dir_name=dir_name, reason="invalid directory name")

    async def fetch_catalog(self) -> CatalogResult:
        """List the catalog and fetch every skill body concurrently.

        Returns:
            CatalogResult: Skills in listing order plus per-skill failures.

        Raises:
            RateLimited: If the listing hit the rate limit.
            CatalogUnreachable: If the listing failed otherwise.
        """
        async with self._client() as client:
            dirs = await self.list_skill_dirs(client)
            logger.debug(
                "Catalog %s lists %d directories (auth: %s)",
                self.source.slug, len(dirs), self.token_source or "anonymous",
            )
            fetched = await asyncio.gather(*(self.fetch_skill(client, d) for d in dirs))

        result = CatalogResult()
        for item in fetched:
            if isinstance(item, FetchFailure):
                result.failures.append(item)
            else:
                result.skills.append(item)
        return result

    def fetch_skills(self) -> CatalogResult:
        """Blocking wrapper around :meth:`fetch_catalog`."""
        return asyncio.run(self.fetch_catalog())

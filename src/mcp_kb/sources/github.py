"""GitHub REST API content provider."""

import base64
from functools import partial
from typing import Any
from urllib.parse import quote

import httpx
import structlog
from tenacity import (
    AsyncRetrying,
    RetryCallState,
    retry_if_exception,
    stop_after_attempt,
    wait_exponential,
)

from mcp_kb.core.exceptions import (
    PermanentProviderError,
    ProviderError,
    TransientProviderError,
)
from mcp_kb.core.models.repository import RepositoryStub, TreeEntry, TreeEntryKind

logger = structlog.get_logger(__name__)

DEFAULT_API_URL = "https://api.github.com"
API_VERSION = "2022-11-28"
PAGE_SIZE = 100


def _is_transient(error: BaseException) -> bool:
    return isinstance(error, ProviderError) and error.transient


def _log_retry(url: str, retry_state: RetryCallState) -> None:
    error = retry_state.outcome.exception() if retry_state.outcome else None
    logger.warning(
        "Retrying GitHub request",
        url=url,
        attempt=retry_state.attempt_number,
        delay=retry_state.next_action.sleep if retry_state.next_action else None,
        error=str(error),
    )


class GitHubContentProvider:
    """Lists trees, fetches blobs and discovers repositories on GitHub.

    Transient failures (transport errors, 429, 5xx, exhausted rate
    limit) are retried with exponential backoff; everything else is
    raised as PermanentProviderError on the first attempt.
    """

    def __init__(
        self,
        token: str | None,
        api_url: str = DEFAULT_API_URL,
        timeout: float = 30.0,
        max_retries: int = 3,
        backoff_seconds: float = 1.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        headers = {
            "Accept": "application/vnd.github+json",
            "X-GitHub-Api-Version": API_VERSION,
            "User-Agent": "mcp-kb",
        }
        if token:
            headers["Authorization"] = f"Bearer {token}"

        self._client = httpx.AsyncClient(
            base_url=api_url,
            headers=headers,
            timeout=timeout,
            transport=transport,
        )
        self._max_retries = max_retries
        self._backoff_seconds = backoff_seconds

    async def __aenter__(self) -> "GitHubContentProvider":
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._client.aclose()

    # --- Provider operations ---

    async def list_tree(self, owner: str, name: str, ref: str) -> list[TreeEntry]:
        """Recursive tree listing at ``ref``."""
        response = await self._get(
            f"/repos/{owner}/{name}/git/trees/{quote(ref, safe='')}",
            params={"recursive": "1"},
        )
        payload = response.json()
        if payload.get("truncated"):
            logger.warning(
                "Tree listing truncated by GitHub",
                repo=f"{owner}/{name}",
                ref=ref,
                entries=len(payload.get("tree", [])),
            )

        entries = []
        for item in payload.get("tree", []):
            path = item.get("path")
            sha = item.get("sha")
            if not path or not sha:
                continue
            try:
                kind = TreeEntryKind(item.get("type", "blob"))
            except ValueError:
                continue
            entries.append(
                TreeEntry(path=path, kind=kind, size=item.get("size") or 0, content_hash=sha)
            )
        return entries

    async def fetch_blob(self, owner: str, name: str, content_hash: str) -> bytes:
        """Blob content by SHA, decoded from the API's base64 payload."""
        response = await self._get(f"/repos/{owner}/{name}/git/blobs/{content_hash}")
        payload = response.json()
        content = payload.get("content", "")
        if payload.get("encoding", "base64") == "base64":
            try:
                return base64.b64decode(content)
            except ValueError as e:
                raise PermanentProviderError(
                    f"Undecodable blob {content_hash}",
                    details={"repo": f"{owner}/{name}", "sha": content_hash},
                ) from e
        return content.encode("utf-8")

    async def discover_user_repositories(self, user: str | None = None) -> list[RepositoryStub]:
        """Repositories owned by ``user``, or by the authenticated user."""
        if user:
            response = await self._get(f"/users/{quote(user, safe='')}")
        else:
            response = await self._get("/user")
        login = response.json()["login"]

        stubs: list[RepositoryStub] = []
        url: str | None = f"/users/{quote(login, safe='')}/repos"
        params: dict[str, Any] | None = {"type": "owner", "per_page": PAGE_SIZE}
        while url:
            response = await self._get(url, params=params)
            for repo in response.json():
                stubs.append(
                    RepositoryStub(
                        owner=repo["owner"]["login"],
                        name=repo["name"],
                        default_branch=repo.get("default_branch") or "main",
                    )
                )
            # The next link already carries the query string
            url = response.links.get("next", {}).get("url")
            params = None

        logger.info("Discovered user repositories", user=login, count=len(stubs))
        return stubs

    async def has_marker(self, owner: str, name: str, marker_path: str) -> bool:
        try:
            await self._get(f"/repos/{owner}/{name}/contents/{quote(marker_path)}")
        except PermanentProviderError as e:
            if e.status_code == 404:
                return False
            raise
        return True

    # --- HTTP plumbing ---

    async def _get(self, url: str, params: dict[str, Any] | None = None) -> httpx.Response:
        retrying = AsyncRetrying(
            stop=stop_after_attempt(self._max_retries + 1),
            wait=wait_exponential(multiplier=self._backoff_seconds),
            retry=retry_if_exception(_is_transient),
            before_sleep=partial(_log_retry, url),
            reraise=True,
        )
        return await retrying(self._get_once, url, params)

    async def _get_once(self, url: str, params: dict[str, Any] | None) -> httpx.Response:
        try:
            response = await self._client.get(url, params=params)
        except httpx.TransportError as e:
            raise TransientProviderError(f"GitHub request failed: {e}", details={"url": url}) from e
        if not response.is_success:
            raise self._classify(response, url)
        return response

    @staticmethod
    def _classify(response: httpx.Response, url: str) -> ProviderError:
        try:
            payload = response.json()
        except ValueError:
            payload = None
        message = response.reason_phrase
        if isinstance(payload, dict) and payload.get("message"):
            message = payload["message"]
        details = {"url": url, "status": response.status_code}
        text = f"GitHub API error {response.status_code}: {message}"

        status = response.status_code
        rate_limited = status == 403 and response.headers.get("x-ratelimit-remaining") == "0"
        if status == 429 or status >= 500 or rate_limited:
            return TransientProviderError(text, details=details, status_code=status)
        return PermanentProviderError(text, details=details, status_code=status)

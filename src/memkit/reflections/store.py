"""GitHub contents API client used as the remote content store.

Two operations are consumed: listing a directory and fetching a file's raw
text. A 404 is a first-class outcome (``None``), never an exception; every
other failure raises :class:`memkit.errors.RetrievalError`.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any, Protocol

import httpx

import memkit.errors

if TYPE_CHECKING:
    from memkit.reflections.config import ReflectionsConfig

logger = logging.getLogger("memkit.reflections.store")

_JSON_ACCEPT = "application/vnd.github+json"
_RAW_ACCEPT = "application/vnd.github.raw+json"


class RemoteStore(Protocol):
    def list_directory(self, path: str) -> list[dict[str, Any]] | None: ...

    def get_raw(self, path: str) -> str | None: ...


class GitHubStore:
    """Read-only view of one ``{owner, repo, ref}`` on the contents API."""

    def __init__(
        self,
        owner: str,
        repo: str,
        ref: str,
        *,
        client: httpx.Client | None = None,
        api_url: str = "https://api.github.com",
        token: str = "",
        timeout: float = 10.0,
    ) -> None:
        self.owner = owner
        self.repo = repo
        self.ref = ref
        if client is None:
            headers = {"X-GitHub-Api-Version": "2022-11-28"}
            if token:
                headers["Authorization"] = f"Bearer {token}"
            client = httpx.Client(base_url=api_url, headers=headers, timeout=timeout)
        self._client = client

    @classmethod
    def from_config(cls, cfg: ReflectionsConfig) -> GitHubStore:
        return cls(
            cfg.organization,
            cfg.name,
            cfg.branch,
            api_url=cfg.api_url,
            token=cfg.token,
            timeout=cfg.timeout,
        )

    def close(self) -> None:
        self._client.close()

    def __enter__(self) -> GitHubStore:
        return self

    def __exit__(self, *exc: object) -> None:
        self.close()

    def _contents_url(self, path: str) -> str:
        return f"/repos/{self.owner}/{self.repo}/contents/{path}"

    def _get(self, url: str, accept: str, code: str, **kwargs: Any) -> httpx.Response | None:
        try:
            resp = self._client.get(url, headers={"Accept": accept}, **kwargs)
        except httpx.HTTPError as exc:
            raise memkit.errors.RetrievalError(f"GitHub API error: {exc}", code) from exc
        if resp.status_code == 404:
            logger.debug("Not found: %s", url)
            return None
        if resp.is_error:
            raise memkit.errors.RetrievalError(
                f"GitHub API error: {resp.status_code} {resp.reason_phrase} for {url}",
                code,
            )
        return resp

    def list_directory(self, path: str) -> list[dict[str, Any]] | None:
        """Return ``[{name, type, ...}]`` for *path*, following pagination.

        Returns ``None`` when *path* does not exist or names a file rather
        than a directory.
        """
        items: list[dict[str, Any]] = []
        url: str | None = self._contents_url(path)
        params: dict[str, str] | None = {"ref": self.ref}
        while url is not None:
            resp = self._get(url, _JSON_ACCEPT, "ERR_API_REQUEST", params=params)
            if resp is None:
                return items or None
            try:
                data = resp.json()
            except ValueError as exc:
                raise memkit.errors.RetrievalError(
                    f"GitHub API error: invalid JSON for {path}", "ERR_API_REQUEST"
                ) from exc
            if not isinstance(data, list):
                return None
            items.extend(data)
            # The next link already carries the query string
            url = resp.links.get("next", {}).get("url")
            params = None
        return items

    def get_raw(self, path: str) -> str | None:
        """Return the file's raw text, or ``None`` when it does not exist."""
        resp = self._get(
            self._contents_url(path), _RAW_ACCEPT, "ERR_RAW_REQUEST", params={"ref": self.ref}
        )
        if resp is None:
            return None
        return resp.text

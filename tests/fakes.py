"""In-memory content provider for tests."""

import asyncio
import hashlib

from mcp_kb.core.exceptions import PermanentProviderError
from mcp_kb.core.models.repository import RepositoryStub, TreeEntry, TreeEntryKind


def blob_hash(raw: bytes) -> str:
    return hashlib.sha1(raw).hexdigest()


class FakeContentProvider:
    """Serves repositories registered with ``add_repository``.

    Unknown repositories raise a 404 PermanentProviderError. Errors can
    be injected per repository, per blob, for discovery and for marker
    probes. When ``gate`` is set, ``list_tree`` waits on it.
    """

    def __init__(self) -> None:
        self.trees: dict[tuple[str, str, str], dict[str, bytes]] = {}
        self.blobs: dict[str, bytes] = {}
        self.directories: dict[tuple[str, str, str], list[str]] = {}
        self.stubs: list[RepositoryStub] = []
        self.markers: set[tuple[str, str]] = set()
        self.tree_errors: dict[tuple[str, str], Exception] = {}
        self.blob_errors: dict[str, Exception] = {}
        self.marker_errors: dict[tuple[str, str], Exception] = {}
        self.discovery_error: Exception | None = None
        self.gate: asyncio.Event | None = None
        self.tree_calls: list[tuple[str, str, str]] = []
        self.blob_calls: list[str] = []
        self.closed = False

    def add_repository(
        self, owner: str, name: str, files: dict[str, str], branch: str = "main"
    ) -> None:
        tree = {}
        for path, content in files.items():
            raw = content.encode("utf-8")
            self.blobs[blob_hash(raw)] = raw
            tree[path] = raw
        self.trees[(owner, name, branch)] = tree

    def hash_of(self, owner: str, name: str, path: str, branch: str = "main") -> str:
        return blob_hash(self.trees[(owner, name, branch)][path])

    async def list_tree(self, owner: str, name: str, ref: str) -> list[TreeEntry]:
        self.tree_calls.append((owner, name, ref))
        if self.gate is not None:
            await self.gate.wait()
        error = self.tree_errors.get((owner, name))
        if error is not None:
            raise error
        tree = self.trees.get((owner, name, ref))
        if tree is None:
            raise PermanentProviderError(f"Not Found: {owner}/{name}@{ref}", status_code=404)

        entries = [
            TreeEntry(path=path, kind=TreeEntryKind.TREE, content_hash=blob_hash(path.encode()))
            for path in self.directories.get((owner, name, ref), [])
        ]
        entries.extend(
            TreeEntry(path=path, kind=TreeEntryKind.BLOB, size=len(raw), content_hash=blob_hash(raw))
            for path, raw in tree.items()
        )
        return entries

    async def fetch_blob(self, owner: str, name: str, content_hash: str) -> bytes:
        self.blob_calls.append(content_hash)
        error = self.blob_errors.get(content_hash)
        if error is not None:
            raise error
        return self.blobs[content_hash]

    async def discover_user_repositories(self, user: str | None = None) -> list[RepositoryStub]:
        if self.discovery_error is not None:
            raise self.discovery_error
        return list(self.stubs)

    async def has_marker(self, owner: str, name: str, marker_path: str) -> bool:
        error = self.marker_errors.get((owner, name))
        if error is not None:
            raise error
        return (owner, name) in self.markers

    async def aclose(self) -> None:
        self.closed = True

"""URL resolver for indexed documents."""

from urllib.parse import quote

from mcp_kb.core.models.document import IndexedDocument


class URLResolver:
    """Resolves an indexed document to its blob URL on the GitHub web UI.

    Example: https://github.com/org/repo/blob/main/doc.md
    """

    def __init__(self, web_url: str = "https://github.com") -> None:
        self._web_url = web_url.rstrip("/")

    def resolve(self, document: IndexedDocument) -> str:
        path = quote(document.path)
        branch = quote(document.branch)
        return f"{self._web_url}/{document.owner}/{document.name}/blob/{branch}/{path}"

"""Local mirror of indexed file content."""

from pathlib import Path


class ContentCache:
    """Stores fetched content under ``repos/{owner}/{name}/{path}``.

    Keyed by (owner, name, path); the branch is not part of the key.
    """

    def __init__(self, repos_dir: Path) -> None:
        self._repos_dir = repos_dir

    def repo_path(self, owner: str, name: str) -> Path:
        return self._repos_dir / owner / name

    def _file_path(self, owner: str, name: str, path: str) -> Path:
        root = self._repos_dir.resolve()
        repo_root = self.repo_path(owner, name).resolve()
        target = (repo_root / path).resolve()
        if not repo_root.is_relative_to(root) or not target.is_relative_to(repo_root):
            raise ValueError(f"Path escapes the cache directory: {owner}/{name}/{path}")
        return target

    def write(self, owner: str, name: str, path: str, content: str) -> Path:
        target = self._file_path(owner, name, path)
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_text(content, encoding="utf-8")
        return target

    def read(self, owner: str, name: str, path: str) -> str | None:
        """Cached content, or None when the file was never cached."""
        target = self._file_path(owner, name, path)
        try:
            return target.read_text(encoding="utf-8")
        except FileNotFoundError:
            return None

"""CLI for MCP-KB."""

import asyncio
import json
import sys
from typing import Any, Awaitable, Callable

import click
import structlog

from mcp_kb.config.logging import configure_logging
from mcp_kb.core.models.operation import OperationResult

logger = structlog.get_logger(__name__)


def run_async(coro):
    """Run an async function synchronously."""
    return asyncio.run(coro)


async def _with_knowledge_base(action: Callable[[Any], Awaitable[Any]]) -> Any:
    """Build the knowledge base, run ``action`` on it, then release it."""
    from mcp_kb.config.settings import get_settings
    from mcp_kb.services.builder import build_knowledge_base

    knowledge_base = build_knowledge_base(get_settings())
    try:
        return await action(knowledge_base)
    finally:
        await knowledge_base.aclose()


def _data_or_exit(result: OperationResult) -> Any:
    if result.ok:
        return result.data
    click.echo(f"Error [{result.error.code}]: {result.error.message}", err=True)
    sys.exit(1)


@click.group()
@click.option("--verbose", "-v", is_flag=True, help="Enable verbose logging")
def cli(verbose: bool) -> None:
    """MCP-KB: searchable knowledge base of MCP repositories."""
    log_level = "DEBUG" if verbose else "INFO"
    configure_logging(log_level=log_level)


@cli.command()
@click.option("--host", default=None, help="Bind address (default: settings.api_host)")
@click.option("--port", type=int, default=None, help="Port (default: settings.api_port)")
@click.option("--no-sync", is_flag=True, help="Do not schedule the periodic sync")
def serve(host: str | None, port: int | None, no_sync: bool) -> None:
    """Serve the HTTP API with periodic sync."""
    import uvicorn

    from mcp_kb.api.main import create_app
    from mcp_kb.config.settings import get_settings

    settings = get_settings()
    uvicorn.run(
        create_app(start_sync=not no_sync),
        host=host or settings.api_host,
        port=port or settings.api_port,
    )


@cli.command()
@click.option("--force", "-f", is_flag=True, help="Rebuild the index from scratch")
def sync(force: bool) -> None:
    """Run one sync pass over all configured repositories."""

    async def _sync(kb):
        return await kb.service.trigger_sync(force=force)

    data = _data_or_exit(run_async(_with_knowledge_base(_sync)))
    click.echo(
        f"Sync complete: {data['documents_indexed']} documents "
        f"({data['documents_unchanged']} unchanged) from "
        f"{data['repositories_touched']} repositories in {data['duration_seconds']:.1f}s"
    )
    if data["repositories_failed"] or data["files_failed"]:
        click.echo(
            f"  {data['repositories_failed']} repositories failed, "
            f"{data['files_failed']} files failed"
        )


@cli.command()
@click.argument("query")
@click.option("--limit", "-l", default=10, help="Max results (1 to 50)")
@click.option("--no-sync", is_flag=True, help="Search without syncing first")
def search(query: str, limit: int, no_sync: bool) -> None:
    """Search the knowledge base.

    The index lives in memory, so a non-forced sync runs first unless
    --no-sync is given.
    """

    async def _search(kb):
        if not no_sync and kb.orchestrator is not None:
            await kb.service.trigger_sync()
        return await kb.service.search(query, max_results=limit)

    data = _data_or_exit(run_async(_with_knowledge_base(_search)))
    if not data["results"]:
        click.echo("No results found.")
        return

    click.echo(f"Found {data['results_count']} results ({data['processing_time_ms']:.0f}ms):\n")
    for i, ref in enumerate(data["results"], 1):
        click.echo(f"  {i}. [{ref['score']:.2f}] {ref['url']}")
        snippet = " ".join(ref["snippet"].split())
        if snippet:
            snippet = snippet[:120] + "..." if len(snippet) > 120 else snippet
            click.echo(f"     {snippet}")
        click.echo()


@cli.group(invoke_without_command=True)
@click.pass_context
def repos(ctx: click.Context) -> None:
    """List configured repositories, or add/remove explicit ones."""
    if ctx.invoked_subcommand is not None:
        return

    from mcp_kb.config.settings import get_settings
    from mcp_kb.repositories.config_store import ConfigStore

    config = ConfigStore(get_settings().base_dir).load()
    click.echo("Explicit repositories:")
    if not config.repositories:
        click.echo("  (none)")
    for repo in config.repositories:
        state = "enabled" if repo.indexing_enabled else "disabled"
        click.echo(f"  {repo.full_name}@{repo.branch} [{state}]")
        click.echo(f"    include: {', '.join(repo.include_patterns)}")
        if repo.exclude_patterns:
            click.echo(f"    exclude: {', '.join(repo.exclude_patterns)}")
    click.echo(f"Auto-discover user repositories: {config.sync.auto_discover_user_repos}")
    click.echo(f"Official repositories: {config.sync.include_official_repos}")
    click.echo(f"Community repositories: {config.sync.include_community_repos}")


def _split_full_name(full_name: str) -> tuple[str, str]:
    owner, _, name = full_name.partition("/")
    if not owner or not name or "/" in name:
        raise click.BadParameter("expected OWNER/NAME", param_hint="REPOSITORY")
    return owner, name


@repos.command("add")
@click.argument("repository")
@click.option("--branch", "-b", default="main", help="Branch to index")
@click.option("--pattern", "-p", multiple=True, help="Include glob patterns")
@click.option("--exclude", "-e", multiple=True, help="Exclude glob patterns")
def repos_add(repository: str, branch: str, pattern: tuple[str, ...], exclude: tuple[str, ...]) -> None:
    """Add an explicit repository (OWNER/NAME) to the configuration."""
    from mcp_kb.config.settings import get_settings
    from mcp_kb.core.models.repository import RepositoryDescriptor
    from mcp_kb.repositories.config_store import ConfigStore

    owner, name = _split_full_name(repository)
    fields: dict[str, Any] = {"owner": owner, "name": name, "branch": branch}
    if pattern:
        fields["include_patterns"] = list(pattern)
    if exclude:
        fields["exclude_patterns"] = list(exclude)

    ConfigStore(get_settings().base_dir).add_repository(RepositoryDescriptor(**fields))
    click.echo(f"Added {owner}/{name}@{branch}")


@repos.command("remove")
@click.argument("repository")
@click.option("--branch", "-b", default="main", help="Branch of the entry to remove")
def repos_remove(repository: str, branch: str) -> None:
    """Remove an explicit repository (OWNER/NAME) from the configuration."""
    from mcp_kb.config.settings import get_settings
    from mcp_kb.repositories.config_store import ConfigStore

    owner, name = _split_full_name(repository)
    if not ConfigStore(get_settings().base_dir).remove_repository(owner, name, branch):
        click.echo(f"Error: {owner}/{name}@{branch} is not configured", err=True)
        sys.exit(1)
    click.echo(f"Removed {owner}/{name}@{branch}")


@cli.command()
def status() -> None:
    """Show the state of the knowledge base."""
    from mcp_kb.config.settings import get_settings

    settings = get_settings()

    async def _status(kb):
        return await kb.service.get_stats()

    data = _data_or_exit(run_async(_with_knowledge_base(_status)))
    click.echo("MCP-KB Status")
    click.echo(f"  Storage:     {settings.base_dir}")
    click.echo(f"  Sync:        {'available' if data['sync_state'] else 'unavailable'}")
    if data["blocklist_entries"] is not None:
        click.echo(
            f"  Blocklist:   {data['blocklist_entries']} entries, "
            f"{data['integrity_violations']} integrity violations"
        )
    for subsystem, reason in sorted(data["unavailable"].items()):
        click.echo(f"  [{subsystem}] {reason}")


@cli.command()
def spec() -> None:
    """Print the stored protocol specification metadata."""

    async def _spec(kb):
        return await kb.service.get_specification()

    data = _data_or_exit(run_async(_with_knowledge_base(_spec)))
    click.echo(json.dumps(data, indent=2))


@cli.group()
def blocklist() -> None:
    """Manage the append-only blocklist."""


@blocklist.command("add")
@click.option("--server", "server_name", help="Server name to block")
@click.option("--pattern", help="File pattern to block")
@click.option("--reason", "-r", required=True, help="Why this is blocked")
@click.option("--version", "server_version", help="Server version")
def blocklist_add(
    server_name: str | None, pattern: str | None, reason: str, server_version: str | None
) -> None:
    """Append a server or file-pattern entry."""
    if bool(server_name) == bool(pattern):
        raise click.UsageError("Give exactly one of --server or --pattern")
    kind = "server" if server_name else "file_pattern"

    async def _add(kb):
        return await kb.service.add_blocklist_entry(
            kind=kind,
            reason=reason,
            server_name=server_name,
            pattern=pattern,
            version=server_version,
        )

    data = _data_or_exit(run_async(_with_knowledge_base(_add)))
    click.echo(f"Blocked {server_name or pattern} ({data['hash']})")


@blocklist.command("check")
@click.option("--server", "server_name", help="Server name to check")
@click.option("--pattern", help="File pattern to check")
def blocklist_check(server_name: str | None, pattern: str | None) -> None:
    """Check whether a server or pattern is blocked."""

    async def _check(kb):
        return await kb.service.check_blocklist(server_name=server_name, pattern=pattern)

    data = _data_or_exit(run_async(_with_knowledge_base(_check)))
    if data["blocked"]:
        click.echo(f"Blocked: {data.get('reason', '')}")
    else:
        click.echo("Not blocked")


if __name__ == "__main__":
    cli()

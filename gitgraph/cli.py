"""CLI entry point for gitgraph."""

import json
from pathlib import Path
from typing import Annotated, Any

import typer
from rich.console import Console
from rich.progress import BarColumn, Progress, SpinnerColumn, TaskProgressColumn, TextColumn

from gitgraph.config import Settings, load_settings
from gitgraph.core.discovery import find_git_dir, iter_object_paths, objects_dir
from gitgraph.core.exceptions import GitGraphError
from gitgraph.core.graph import ObjectGraph, RepoGraph, TreeNode, build_graph, graph_to_dict
from gitgraph.core.graph.analysis import dangling_edges, get_root_commits
from gitgraph.core.graph.export import error_to_dict, node_to_dict
from gitgraph.core.graph.traversal import first_parent_history, get_tree_listing
from gitgraph.core.loader import load_objects
from gitgraph.core.models import ObjectKind
from gitgraph.core.refs import current_branch, read_head, resolve_head
from gitgraph.core.storage import GraphRepository
from gitgraph.logging_config import setup_logging

app = typer.Typer(
    name="gitgraph",
    help="Object graph extraction from git loose object stores.",
    no_args_is_help=True,
)
console = Console()
err_console = Console(stderr=True)

_SHORT_ID = 10

_settings = Settings()


@app.callback()
def main(
    log_level: Annotated[
        str | None, typer.Option("--log-level", help="Console log level (default from env)")
    ] = None,
) -> None:
    """Configure settings and logging before any command runs."""
    global _settings
    _settings = load_settings().with_overrides(log_level=log_level.upper() if log_level else None)
    setup_logging(_settings)


def _fail(message: str) -> typer.Exit:
    err_console.print(f"[red]Error:[/red] {message}")
    return typer.Exit(code=1)


def get_git_dir(path: Path) -> Path:
    """Find the git directory for ``path`` or exit with an error."""
    try:
        return find_git_dir(path)
    except GitGraphError as e:
        raise _fail(str(e)) from e


def build(git_dir: Path, workers: int | None, quiet: bool = False) -> RepoGraph:
    """Load every loose object under ``git_dir`` and build the graph."""
    paths = list(iter_object_paths(objects_dir(git_dir)))
    workers = workers or _settings.workers

    with Progress(
        SpinnerColumn(),
        TextColumn("[progress.description]{task.description}"),
        BarColumn(),
        TaskProgressColumn(),
        console=err_console,
        disable=quiet,
    ) as progress:
        task = progress.add_task("Loading objects", total=len(paths))

        def on_progress(path: Path, current: int, total: int) -> None:
            progress.update(task, total=total, completed=current)
            progress.update(task, description=f"[cyan]{path.parent.name}{path.name[:8]}[/]")

        result = load_objects(paths, workers=workers, on_progress=on_progress)

    return build_graph(result)


def resolve(graph: ObjectGraph, prefix: str) -> str:
    """Expand an abbreviated identifier to exactly one object."""
    matches = graph.match_prefix(prefix)
    if not matches:
        raise _fail(f"No object matches '{prefix}'")
    if len(matches) > 1:
        raise _fail(f"'{prefix}' is ambiguous ({len(matches)} objects)")
    return matches[0]


def print_failures(graph: RepoGraph) -> None:
    if not graph.failures:
        return
    console.print(f"  [red]Failed: {len(graph.failures)}[/]")
    for kind, count in sorted(graph.failure_counts().items(), key=lambda kv: kv[0].value):
        console.print(f"    [dim]{kind.value}: {count}[/]")


@app.command()
def graph(
    path: Annotated[Path, typer.Argument(help="Repository path")] = Path("."),
    output: Annotated[
        Path | None, typer.Option("--output", "-o", help="Write JSON to a file instead of stdout")
    ] = None,
    workers: Annotated[int | None, typer.Option("--workers", "-w", help="Loader threads")] = None,
    indent: Annotated[int | None, typer.Option("--indent", help="JSON indentation")] = None,
) -> None:
    """Print the object graph as a JSON document of nodes and edges."""
    git_dir = get_git_dir(path)
    repo_graph = build(git_dir, workers, quiet=output is None)
    document = json.dumps(graph_to_dict(repo_graph), indent=indent)

    if output is None:
        print(document)
        return

    output.write_text(document, encoding="utf-8")
    console.print(f"[green]Wrote[/green] {output}")
    console.print(f"  Nodes: {len(repo_graph.nodes)}")
    console.print(f"  Edges: {len(repo_graph.edges)}")
    print_failures(repo_graph)


@app.command()
def export(
    path: Annotated[Path, typer.Argument(help="Repository path")] = Path("."),
    db: Annotated[Path | None, typer.Option("--db", help="SQLite database to write")] = None,
    workers: Annotated[int | None, typer.Option("--workers", "-w", help="Loader threads")] = None,
) -> None:
    """Export the object graph to a SQLite database."""
    git_dir = get_git_dir(path)
    repo_graph = build(git_dir, workers)
    db_path = db or _settings.resolve_db_path(git_dir.parent)

    with GraphRepository(db_path) as repo:
        with Progress(
            SpinnerColumn(),
            TextColumn("[progress.description]{task.description}"),
            BarColumn(),
            TaskProgressColumn(),
            console=console,
        ) as progress:
            task = progress.add_task("Writing objects", total=len(repo_graph.nodes))

            def on_progress(current: int, total: int) -> None:
                progress.update(task, total=total, completed=current)

            repo.save_graph(repo_graph, source=objects_dir(git_dir), on_progress=on_progress)

    console.print("[green]Done![/green]")
    console.print(f"  Database: {db_path}")
    console.print(f"  Objects written: {len(repo_graph.nodes)}")
    console.print(f"  Edges written: {len(repo_graph.edges)}")
    print_failures(repo_graph)


@app.command()
def stats(
    path: Annotated[Path, typer.Argument(help="Repository path")] = Path("."),
    output_json: Annotated[bool, typer.Option("--json", "-j", help="Output as JSON")] = False,
    workers: Annotated[int | None, typer.Option("--workers", "-w", help="Loader threads")] = None,
) -> None:
    """Show object counts, edge counts and failures."""
    git_dir = get_git_dir(path)
    repo_graph = build(git_dir, workers, quiet=output_json)
    object_graph = ObjectGraph.from_repo_graph(repo_graph)

    result: dict[str, Any] = {
        "objects": len(repo_graph.nodes),
        "edges": len(repo_graph.edges),
        "types": {k.value: n for k, n in sorted(repo_graph.kind_counts().items(), key=_by_value)},
        "root_commits": len(get_root_commits(object_graph)),
        "dangling": len(dangling_edges(object_graph)),
        "failures": {
            k.value: n for k, n in sorted(repo_graph.failure_counts().items(), key=_by_value)
        },
    }

    if output_json:
        print(json.dumps(result))
        return

    console.print(f"Objects: {result['objects']}")
    for kind, count in result["types"].items():
        console.print(f"  [dim]{kind}: {count}[/]")
    console.print(f"Edges: {result['edges']}")
    console.print(f"Root commits: {result['root_commits']}")
    if result["dangling"]:
        console.print(f"[yellow]Dangling references: {result['dangling']}[/]")
    print_failures(repo_graph)


def _by_value(item: tuple[Any, int]) -> str:
    return item[0].value


@app.command()
def show(
    identifier: Annotated[str, typer.Argument(help="Object identifier or unique prefix")],
    path: Annotated[Path, typer.Option("--repo", "-C", help="Repository path")] = Path("."),
    output_json: Annotated[bool, typer.Option("--json", "-j", help="Output as JSON")] = False,
) -> None:
    """Show one decoded object and what references it."""
    git_dir = get_git_dir(path)
    object_graph = ObjectGraph.from_repo_graph(build(git_dir, None, quiet=True))
    full_id = resolve(object_graph, identifier)
    node = object_graph.get_node(full_id)
    if node is None:
        raise _fail(f"No object matches '{identifier}'")
    referrers = object_graph.get_referrers(full_id)

    if output_json:
        data = node_to_dict(node)
        data["referrers"] = [e.src for e in referrers]
        print(json.dumps(data))
        return

    console.print(f"[bold cyan]{node.identifier}[/] ({node.kind.value})")
    if node.error:
        console.print(f"  [red]{node.error.kind.value}[/red]: {node.error.message}")
    elif node.kind is ObjectKind.COMMIT:
        console.print(f"  tree   {node.view['tree']}")
        for parent in node.view["parents"]:
            console.print(f"  parent {parent}")
    elif node.kind is ObjectKind.TREE:
        for entry in node.view["entries"]:
            marker = "" if entry["hash"] in object_graph else " [yellow](missing)[/]"
            console.print(f"  {entry['mode']:>6} {entry['hash']} {entry['name']}{marker}")
    else:
        console.print(f"  [dim]{node.view.get('length', 0)} bytes[/]")

    if referrers:
        console.print("  [green]Referenced by:[/]")
        for edge in referrers:
            console.print(f"    [cyan]{edge.src[:_SHORT_ID]}[/] [dim]({edge.label})[/]")


@app.command()
def log(
    rev: Annotated[str | None, typer.Argument(help="Commit to start from (default: HEAD)")] = None,
    path: Annotated[Path, typer.Option("--repo", "-C", help="Repository path")] = Path("."),
    max_count: Annotated[
        int | None, typer.Option("--max-count", "-n", help="Limit the number of commits")
    ] = None,
    output_json: Annotated[bool, typer.Option("--json", "-j", help="Output as JSON")] = False,
) -> None:
    """Show first-parent history."""
    git_dir = get_git_dir(path)
    object_graph = ObjectGraph.from_repo_graph(build(git_dir, None, quiet=True))

    if rev is None:
        start = resolve_head(git_dir)
        if start is None:
            raise _fail("HEAD does not point at a commit yet")
    else:
        start = resolve(object_graph, rev)

    history = first_parent_history(object_graph, start, max_count)

    if output_json:
        print(json.dumps([node_to_dict(n) for n in history]))
        return

    if not history:
        console.print(f"No commits reachable from '[cyan]{start[:_SHORT_ID]}[/cyan]'")
        return
    for node in history:
        parents = node.view.get("parents", [])
        merge = " [yellow](merge)[/]" if len(parents) > 1 else ""
        console.print(f"[cyan]{node.identifier}[/]{merge}")
        console.print(f"  [dim]tree {node.view['tree']}[/]")


@app.command()
def head(
    path: Annotated[Path, typer.Argument(help="Repository path")] = Path("."),
    output_json: Annotated[bool, typer.Option("--json", "-j", help="Output as JSON")] = False,
) -> None:
    """Show the current branch and the commit HEAD points at."""
    git_dir = get_git_dir(path)
    head_ref = read_head(git_dir)
    result = {
        "ref": head_ref.ref,
        "branch": current_branch(git_dir),
        "commit": resolve_head(git_dir),
        "detached": head_ref.is_detached,
    }

    if output_json:
        print(json.dumps(result))
        return

    if head_ref.is_detached:
        console.print("[yellow]HEAD detached[/]")
    else:
        console.print(f"Branch: [cyan]{result['branch']}[/]")
    console.print(f"Commit: {result['commit'] or '[dim](unborn)[/]'}")


@app.command()
def ls(
    rev: Annotated[
        str | None, typer.Argument(help="Commit or tree to list (default: HEAD)")
    ] = None,
    path: Annotated[Path, typer.Option("--repo", "-C", help="Repository path")] = Path("."),
    max_depth: Annotated[int, typer.Option("--depth", "-d", help="Maximum depth")] = 32,
) -> None:
    """List the files of a commit or tree recursively."""
    git_dir = get_git_dir(path)
    object_graph = ObjectGraph.from_repo_graph(build(git_dir, None, quiet=True))

    if rev is None:
        start = resolve_head(git_dir)
        if start is None:
            raise _fail("HEAD does not point at a commit yet")
    else:
        start = resolve(object_graph, rev)

    node = object_graph.get_node(start)
    if node is not None and node.kind is ObjectKind.COMMIT:
        start = node.view["tree"]

    listing = get_tree_listing(object_graph, start, max_depth)
    if listing is None:
        raise _fail(f"'{start[:_SHORT_ID]}' is not a tree in this store")

    def print_entries(tree_node: TreeNode, prefix: str = "") -> None:
        for i, child in enumerate(tree_node.children):
            is_last = i == len(tree_node.children) - 1
            branch = "└─" if is_last else "├─"
            if child.is_missing:
                style = "yellow"
            elif child.kind is ObjectKind.TREE:
                style = "blue"
            else:
                style = "cyan"
            console.print(
                f"{prefix}{branch} [{style}]{child.name}[/] [dim]{child.identifier[:_SHORT_ID]}[/]"
            )
            print_entries(child, prefix + ("   " if is_last else "│  "))

    console.print(f"[bold]{listing.identifier}[/]")
    print_entries(listing)


@app.command()
def failures(
    path: Annotated[Path, typer.Argument(help="Repository path")] = Path("."),
    output_json: Annotated[bool, typer.Option("--json", "-j", help="Output as JSON")] = False,
) -> None:
    """List objects that could not be loaded or decoded."""
    git_dir = get_git_dir(path)
    repo_graph = build(git_dir, None, quiet=True)

    if output_json:
        print(json.dumps([error_to_dict(f) for f in repo_graph.failures]))
        return

    if repo_graph.ok:
        console.print("[green]All objects decoded[/green]")
        return
    for failure in repo_graph.failures:
        console.print(f"[red]{failure.identifier}[/] {failure.kind.value}")
        console.print(f"  [dim]{failure.message}[/]")


if __name__ == "__main__":
    app()

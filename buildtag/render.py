"""
Rendering functions for buildtag output.

Core functions return data, this module makes it human-readable.
"""

from rich.table import Table
from rich.console import Console
from rich import box
from typing import Any, List, Optional

from .domain import BuildSnapshot, TagBuild
from .services import VersionResolution

console = Console()


def render_table(headers: List[str], rows: List[List[Any]], title: Optional[str] = None) -> None:
    """
    Render a generic table with the given headers and rows.

    Args:
        headers: List of column headers
        rows: List of rows, where each row is a list of values
        title: Optional table title
    """
    if not rows:
        console.print("[yellow]No data to display.[/yellow]")
        return

    table = Table(
        title=title,
        box=box.ROUNDED,
        show_header=True,
        header_style="bold magenta"
    )

    for header in headers:
        table.add_column(header)

    for row in rows:
        table.add_row(*["" if val is None else str(val) for val in row])

    console.print(table)


_SOURCE_STYLES = {
    'tag': 'green',
    'stub': 'yellow',
    'static': 'cyan',
    'default': 'cyan',
    'empty': 'red',
}


def render_resolution_table(results: List[VersionResolution]) -> None:
    """Render resolved versions, one row per variant."""
    rows = []
    for result in results:
        style = _SOURCE_STYLES.get(result.source.value, 'white')
        tag = result.tag_build
        rows.append([
            result.variant,
            f"[{style}]{result.source.value}[/{style}]",
            result.version_name,
            result.version_code,
            tag.name if tag else None,
            tag.commit_sha[:10] if tag else None,
        ])

    render_table(
        ["Variant", "Source", "Version Name", "Version Code", "Tag", "Commit"],
        rows,
        title="Build Versions"
    )


def _tag_row(label: str, tag: Optional[TagBuild]) -> List[Any]:
    if tag is None:
        return [label, "[dim]none[/dim]", None, None, None]
    return [label, tag.name, tag.build_version, tag.build_number, tag.commit_sha[:10]]


def render_snapshot_table(snapshot: BuildSnapshot) -> None:
    """Render the current tag and the tags preceding it."""
    rows = [
        _tag_row("current", snapshot.current),
        _tag_row("previous in order", snapshot.previous_in_order),
        _tag_row("previous on different commit", snapshot.previous_on_different_commit),
    ]
    render_table(
        ["", "Tag", "Build Version", "Build Number", "Commit"],
        rows,
        title=f"Snapshot: {snapshot.current.build_variant}"
    )
    console.print(f"Changelog range: [bold]{snapshot.as_commit_range().to_rev_range()}[/bold]")

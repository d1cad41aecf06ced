"""
Snapshot command: write the tag document consumed by the build pipeline.
"""

import logging
import sys

import click

from ..cli_utils import add_common_options, create_service, load_runtime_config, standard_command
from ..config import build_request
from ..domain import BuildSnapshot
from ..infra import DocumentStore
from ..render import console, render_snapshot_table

logger = logging.getLogger(__name__)


@click.command(name='snapshot')
@click.argument('variant')
@click.option('-o', '--output', required=True, type=click.Path(dir_okay=False),
              help='Document path, e.g. build/tag-build-debug.json')
@click.option('--flat', is_flag=True, help='Write only the current tag instead of a snapshot')
@add_common_options('config', 'repo', 'ref', 'verbose')
@click.option('--table/--no-table', default=None, help='Display as formatted table (auto-detected by default)')
@standard_command
def snapshot_handler(variant, output, flat, config_path, repo, ref, verbose, table):
    """Resolve VARIANT and write its tag document.

    \b
    The snapshot document holds the current tag plus the previous tag in
    build number order and the previous tag on a different commit.
    With a stub fallback the previous entries are null. When tag versions
    are disabled for the variant nothing is written.
    """
    config = load_runtime_config(config_path, verbose)
    service = create_service(config, repo)
    ref = ref or (config.get('repository') or {}).get('ref', 'HEAD')

    result = service.resolve(build_request(config, variant), ref=ref, snapshot=True)

    if result.tag_build is None:
        logger.warning(f"No tag for '{variant}' ({result.source.value} versions), no document written")
        return {"variant": variant, "source": result.source.value, "output": None}

    snapshot = result.snapshot or BuildSnapshot(current=result.tag_build)
    store = DocumentStore(output)
    store.write(snapshot.current if flat else snapshot)

    if table is None:
        table = sys.stdout.isatty()

    if table:
        render_snapshot_table(snapshot)
        console.print(f"Written to {store.path}")
        return None

    return {
        "variant": variant,
        "source": result.source.value,
        "output": str(store.path),
        "tag": snapshot.current.name,
        "range": snapshot.as_commit_range().to_rev_range(),
    }

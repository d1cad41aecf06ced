"""
Resolve command: build versions for one or more variants.

Output format:
- Interactive terminal: table
- Piped/redirected: one JSON object per variant
"""

import sys
import click

from ..cli_utils import add_common_options, create_service, load_runtime_config, standard_command
from ..config import build_request
from ..render import render_resolution_table


@click.command(name='resolve')
@click.argument('variants', nargs=-1, required=True)
@add_common_options('config', 'repo', 'ref', 'verbose')
@click.option('--table/--no-table', default=None, help='Display as formatted table (auto-detected by default)')
@standard_command
def resolve_handler(variants, config_path, repo, ref, verbose, table):
    """Resolve version name and code for build variants.

    VARIANTS: Build variant names, e.g. debug googleRelease

    Examples:

    \b
        buildtag resolve debug release
        buildtag resolve debug --ref origin/main --no-table
    """
    config = load_runtime_config(config_path, verbose)
    service = create_service(config, repo)
    ref = ref or (config.get('repository') or {}).get('ref', 'HEAD')

    requests = [build_request(config, variant) for variant in variants]
    results = service.resolve_many(requests, ref=ref)

    if table is None:
        table = sys.stdout.isatty()  # Use table format for interactive terminals

    if table:
        render_resolution_table(results)
        return None
    return [result.to_dict() for result in results]

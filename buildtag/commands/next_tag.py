"""
Next tag command: name of the tag for the following build.
"""

import click

from ..cli_utils import add_common_options, load_runtime_config, standard_command
from ..infra import DocumentStore
from ..services import compile_pattern, next_tag_name


@click.command(name='next-tag')
@click.argument('document', type=click.Path(dir_okay=False))
@add_common_options('config', 'verbose')
@standard_command
def next_tag_handler(document, config_path, verbose):
    """Print the next tag name for a stored tag DOCUMENT.

    Works with both snapshot and flat documents. The build number is
    located with the configured tag pattern.

    Examples:

    \b
        buildtag next-tag build/tag-build-debug.json
        git tag "$(buildtag next-tag build/tag-build-debug.json)"
    """
    config = load_runtime_config(config_path, verbose)
    pattern = compile_pattern(config.get('tag_pattern'))

    tag_build = DocumentStore(document).read_tag_build()
    click.echo(next_tag_name(tag_build, pattern))

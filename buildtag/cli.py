#!/usr/bin/env python3

import click

from buildtag import __version__
from buildtag.commands.resolve import resolve_handler
from buildtag.commands.snapshot import snapshot_handler
from buildtag.commands.next_tag import next_tag_handler


@click.group()
@click.version_option(version=__version__, prog_name='buildtag')
def cli():
    """buildtag - Build versions from git tags.

    Resolves the version name, build number and commit of a build variant
    from tags such as v1.0.42-debug, with stub and default fallbacks when
    no tag exists.
    """
    pass


cli.add_command(resolve_handler, name='resolve')
cli.add_command(snapshot_handler, name='snapshot')
cli.add_command(next_tag_handler, name='next-tag')


def main():
    cli()

if __name__ == "__main__":
    main()

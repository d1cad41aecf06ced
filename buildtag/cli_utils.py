"""
Common CLI utilities and decorators for consistent command behavior.
"""

import json
import sys
import click
from functools import wraps
from typing import Any, Dict, Generator, Optional

from .config import (
    build_defaults,
    configure_logging,
    get_strategies,
    load_config,
)
from .errors import BuildTagError
from .exit_codes import SUCCESS, INTERRUPTED, get_exit_code_for_exception
from .infra import GitHistory, RepositoryHistory
from .services import ResolutionService


def _error_object(exc: BaseException) -> Dict[str, Any]:
    message = exc.message if isinstance(exc, BuildTagError) else str(exc)
    return {
        "error": message,
        "type": type(exc).__name__,
        "exit_code": get_exit_code_for_exception(exc),
    }


def standard_command(func):
    """
    Decorator that provides standard CLI behavior:
    - Data on stdout (JSON lines for dicts, lists and generators)
    - Errors on stderr as a JSON object, exit code from the error
    - KeyboardInterrupt exits with INTERRUPTED
    """
    @wraps(func)
    def wrapper(*args, **kwargs):
        try:
            result = func(*args, **kwargs)
            output_result(result)
            sys.exit(SUCCESS)

        except KeyboardInterrupt:
            click.echo(json.dumps({"error": "Interrupted by user", "exit_code": INTERRUPTED}), err=True)
            sys.exit(INTERRUPTED)
        except click.ClickException:
            # Click exceptions already have their exit code
            raise
        except Exception as e:
            error_obj = _error_object(e)
            click.echo(json.dumps(error_obj, ensure_ascii=False), err=True)
            sys.exit(error_obj["exit_code"])

    return wrapper


def output_result(result: Any) -> None:
    """
    Standard output handler for results.

    Args:
        result: The result to output (dict, list, or generator); None
            when the command printed its own output
    """
    if result is None:
        return
    if isinstance(result, (Generator, list, tuple)):
        for item in result:
            click.echo(json.dumps(item, ensure_ascii=False))
    elif isinstance(result, dict):
        click.echo(json.dumps(result, ensure_ascii=False))
    else:
        click.echo(result)


def load_runtime_config(config_path: Optional[str], verbose: bool = False) -> Dict[str, Any]:
    """Load config and set up logging; --verbose forces DEBUG."""
    config = load_config(config_path)
    log = config.get('logging') or {}
    configure_logging(
        'DEBUG' if verbose else log.get('level', 'WARNING'),
        log.get('format', '%(levelname)s: %(message)s')
    )
    return config


def create_service(
    config: Dict[str, Any],
    repo: Optional[str] = None,
    history: Optional[RepositoryHistory] = None
) -> ResolutionService:
    """ResolutionService configured from the loaded config."""
    repository = config.get('repository') or {}
    if history is None:
        history = GitHistory(
            repo or repository.get('path', '.'),
            timeout=repository.get('timeout', 30)
        )
    name_strategy, code_strategy = get_strategies(config)
    return ResolutionService(
        history,
        pattern=config.get('tag_pattern'),
        defaults=build_defaults(config),
        name_strategy=name_strategy,
        code_strategy=code_strategy,
    )


# Standard options that many commands share
common_options = {
    'config': click.option('-c', '--config', 'config_path', type=click.Path(dir_okay=False),
                           help='Config file (default: discovered, see BUILDTAG_CONFIG)'),
    'repo': click.option('--repo', type=click.Path(file_okay=False),
                         help='Repository path (default: repository.path from config)'),
    'ref': click.option('--ref', help='Build reference (default: repository.ref from config)'),
    'verbose': click.option('-v', '--verbose', is_flag=True,
                            help='Log resolution details to stderr'),
}


def add_common_options(*option_names):
    """
    Decorator to add common options to a command.

    Example:
        @add_common_options('config', 'verbose')
        def my_command(config_path, verbose):
            ...
    """
    def decorator(func):
        for name in reversed(option_names):
            func = common_options[name](func)
        return func
    return decorator

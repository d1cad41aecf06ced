"""
Configuration for buildtag.

Configuration is looked up in order:
1. BUILDTAG_CONFIG environment variable
2. ./buildtag.yaml, ./buildtag.yml, ./buildtag.toml, ./buildtag.json
3. ~/.buildtag/config.yaml (or .yml, .toml, .json)

File values are merged over get_default_config(), then BUILDTAG_*
environment variables are applied, e.g.
BUILDTAG_OUTPUT_COMMON_USE_STUBS_FOR_TAG_AS_FALLBACK=false.
"""

import os
import json
import tomllib
from pathlib import Path
from typing import Any, Dict, Optional
import logging
import sys

import yaml

from .errors import ConfigurationError
from .services.fallback import FallbackDefaults, FallbackSwitches, VariantRequest
from .services.versioning import VersionCodeStrategy, VersionNameStrategy

logger = logging.getLogger(__name__)

CONFIG_FILENAMES = ['buildtag.yaml', 'buildtag.yml', 'buildtag.toml', 'buildtag.json']
HOME_FILENAMES = ['config.yaml', 'config.yml', 'config.toml', 'config.json']

# Config key -> FallbackSwitches field
SWITCH_KEYS = {
    'use_versions_from_tag': 'use_versions_from_tag',
    'use_stubs_for_tag_as_fallback': 'use_stubs',
    'use_defaults_for_versions_as_fallback': 'use_defaults',
}


def configure_logging(level: str = "WARNING", fmt: str = "%(levelname)s: %(message)s") -> None:
    """Send buildtag log records to stderr."""
    numeric = logging.getLevelName(str(level).upper())
    if not isinstance(numeric, int):
        raise ConfigurationError(f"Unknown logging level '{level}'")

    root = logging.getLogger("buildtag")
    for handler in list(root.handlers):
        root.removeHandler(handler)

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(logging.Formatter(fmt))
    root.addHandler(handler)
    root.setLevel(numeric)


def get_config_path() -> Optional[Path]:
    """
    Get the path to the configuration file.

    Returns:
        The first existing candidate, or None when there is no config file
    """
    if 'BUILDTAG_CONFIG' in os.environ:
        path = Path(os.environ['BUILDTAG_CONFIG']).expanduser()
        if path.exists():
            return path
        logger.warning(f"BUILDTAG_CONFIG points to a missing file: {path}")

    for filename in CONFIG_FILENAMES:
        path = Path.cwd() / filename
        if path.exists():
            return path

    home_dir = Path.home() / '.buildtag'
    for filename in HOME_FILENAMES:
        path = home_dir / filename
        if path.exists():
            return path

    return None


def get_default_config() -> Dict[str, Any]:
    """Get default configuration."""
    return {
        "logging": {
            "level": "WARNING",
            "format": "%(levelname)s: %(message)s"
        },
        "repository": {
            "path": ".",
            "ref": "HEAD",
            "timeout": 30
        },
        # List of pattern tokens; None selects the built-in pattern
        "tag_pattern": None,
        "output": {
            "common": {
                "use_versions_from_tag": True,
                "use_stubs_for_tag_as_fallback": True,
                "use_defaults_for_versions_as_fallback": True,
                "version_name": None,
                "version_code": None,
                "version_name_strategy": VersionNameStrategy.BUILD_VERSION.value,
                "version_code_strategy": VersionCodeStrategy.BUILD_NUMBER.value
            },
            "variants": {}
        },
        "fallback": {
            "version_name": "0.0",
            "version_code": 1,
            "stub_name": "v0.0.1-%s",
            "stub_commit_sha": "hardcoded_default_stub_commit_sha",
            "stub_message": "hardcoded_default_stub_commit_message",
            "stub_build_version": "0.0",
            "stub_build_number": 1
        }
    }


def read_config_file(path: Path) -> Dict[str, Any]:
    """
    Parse a YAML, TOML or JSON config file.

    Raises:
        ConfigurationError: If the file cannot be read or parsed
    """
    suffix = path.suffix.lower()
    try:
        if suffix == '.toml':
            with open(path, 'rb') as f:
                data = tomllib.load(f)
        elif suffix in ('.yaml', '.yml'):
            with open(path, 'r', encoding='utf-8') as f:
                data = yaml.safe_load(f)
        else:
            with open(path, 'r', encoding='utf-8') as f:
                data = json.load(f)
    except (OSError, ValueError, yaml.YAMLError) as e:
        raise ConfigurationError(f"Error loading config from {path}: {e}") from e

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigurationError(f"Config file {path} must contain a mapping at the top level")
    return data


def load_config(path: Optional[Path] = None) -> Dict[str, Any]:
    """
    Load configuration.

    Args:
        path: Explicit config file; discovered with get_config_path() if None

    Raises:
        ConfigurationError: If an explicit path is missing or any file is invalid
    """
    config = get_default_config()

    if path is not None:
        path = Path(path).expanduser()
        if not path.exists():
            raise ConfigurationError(f"Config file not found: {path}")
    else:
        path = get_config_path()

    if path is not None:
        logger.debug(f"Loading config from {path}")
        config = merge_configs(config, read_config_file(path))

    return apply_env_overrides(config)


def merge_configs(base_config, override_config):
    """
    Recursively merge two configuration dictionaries.

    Args:
        base_config (dict): Base configuration
        override_config (dict): Configuration to merge/override with

    Returns:
        dict: Merged configuration
    """
    merged = base_config.copy()

    for key, value in override_config.items():
        if key in merged and isinstance(merged[key], dict) and isinstance(value, dict):
            merged[key] = merge_configs(merged[key], value)
        else:
            merged[key] = value

    return merged


def _typed(value: str) -> Any:
    if value.lower() in ('true', 'yes', 'on'):
        return True
    if value.lower() in ('false', 'no', 'off'):
        return False
    if value.isascii() and value.isdigit():
        return int(value)
    return value


def apply_env_overrides(config, environ=None):
    """
    Apply environment variable overrides to configuration.

    Environment variables follow the pattern: BUILDTAG_SECTION_SUBSECTION_KEY
    For example: BUILDTAG_REPOSITORY_REF=main
    Multi-word keys are matched greedily against the existing keys.
    """
    env_prefix = "BUILDTAG_"
    environ = os.environ if environ is None else environ

    for env_key, value in environ.items():
        if not env_key.startswith(env_prefix) or env_key == 'BUILDTAG_CONFIG':
            continue

        key_parts = env_key[len(env_prefix):].lower().split('_')
        typed_value = _typed(value)

        current_level = config
        i = 0
        while i < len(key_parts):
            # Longest existing key that prefixes the remaining parts
            best_match_len = 0
            matched_key = None
            for config_key in current_level.keys():
                config_key_parts = config_key.split('_')
                if key_parts[i:i + len(config_key_parts)] == config_key_parts:
                    if len(config_key_parts) > best_match_len:
                        best_match_len = len(config_key_parts)
                        matched_key = config_key

            if matched_key is None:
                logger.debug(f"Ignoring {env_key}: no matching config key")
                break

            if i + best_match_len == len(key_parts):
                current_level[matched_key] = typed_value
                break

            if not isinstance(current_level[matched_key], dict):
                break
            current_level = current_level[matched_key]
            i += best_match_len

    return config


def _switches(section: Dict[str, Any], where: str) -> FallbackSwitches:
    values = {}
    for key, field_name in SWITCH_KEYS.items():
        value = section.get(key)
        if value is not None and not isinstance(value, bool):
            raise ConfigurationError(f"{where}.{key} must be true or false, got {value!r}")
        values[field_name] = value
    return FallbackSwitches(**values)


def _version_code(value: Any, where: str) -> Optional[int]:
    if value is None:
        return None
    if isinstance(value, bool) or not isinstance(value, int):
        raise ConfigurationError(f"{where}.version_code must be an integer, got {value!r}")
    return value


def build_request(config: Dict[str, Any], variant: str) -> VariantRequest:
    """
    Build the request for one variant: common output settings with the
    variant's own settings on top.
    """
    output = config.get('output') or {}
    common = output.get('common') or {}
    override = (output.get('variants') or {}).get(variant) or {}
    if not isinstance(override, dict):
        raise ConfigurationError(f"output.variants.{variant} must be a mapping")

    switches = _switches(common, 'output.common').merged(
        _switches(override, f'output.variants.{variant}')
    )

    version_name = override.get('version_name', common.get('version_name'))
    if version_name is not None:
        version_name = str(version_name)
    version_code = _version_code(
        override.get('version_code', common.get('version_code')),
        f'output.variants.{variant}' if 'version_code' in override else 'output.common'
    )

    return VariantRequest(
        variant=variant,
        switches=switches,
        version_name=version_name,
        version_code=version_code,
    )


def build_defaults(config: Dict[str, Any]) -> FallbackDefaults:
    """FallbackDefaults from the 'fallback' section."""
    section = dict(config.get('fallback') or {})
    try:
        return FallbackDefaults(**section)
    except TypeError as e:
        raise ConfigurationError(f"Invalid 'fallback' section: {e}") from e


def get_strategies(config: Dict[str, Any]):
    """(VersionNameStrategy, VersionCodeStrategy) from output.common."""
    common = (config.get('output') or {}).get('common') or {}
    return (
        VersionNameStrategy.parse(common.get('version_name_strategy', 'build_version')),
        VersionCodeStrategy.parse(common.get('version_code_strategy', 'build_number')),
    )

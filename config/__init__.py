"""
Runtime configuration for the docs edge site and the Webflow sync job.

This module loads `config.json` that lives alongside it and exposes the result as the
CONFIG dictionary, the single configuration surface the rest of the codebase reads from.
Values can be overridden per process through environment variables ("env" comes from
environment) using the `get_config_value` helper, which resolves an env var first, then
the JSON value, then a default. Relative filesystem paths in the JSON file (the asset
directory served by the edge app and the documents directory written by the sync job)
are resolved against PROJECT_ROOT so both entrypoints behave the same regardless of the
current working directory.

Secrets such as the Webflow API token are deliberately NOT read here. They are read at
call time by the sync job after optional dot-env files have been loaded (see
`config.env_files`), because a missing token is a soft no-op for that job rather than a
configuration error for the whole application.
"""

import os
import json
from pathlib import Path
from typing import Any, Dict, List, Optional

# Get the config directory path (where this file is located)
CONFIG_DIR = Path(__file__).parent

# The repository root is the parent of the config package
PROJECT_ROOT = CONFIG_DIR.parent

config_path = CONFIG_DIR / 'config.json'
with open(config_path, 'r', encoding='utf-8') as f:
    CONFIG: Dict[str, Any] = json.load(f)

CONFIG['project_root'] = str(PROJECT_ROOT)


def get_config_value(json_keys: List[str], env_var_name: Optional[str], default_value: Any = None) -> Any:
    """
    Retrieves a configuration value.
    Priority:
    1. Environment variable (if env_var_name is provided and variable is set).
    2. Value from CONFIG dictionary (using json_keys).
    3. default_value.
    """
    if env_var_name:
        env_value = os.getenv(env_var_name)
        if env_value is not None:
            # Attempt to match type of default_value if it's int or bool
            if isinstance(default_value, bool):
                if env_value.lower() == 'true': return True
                if env_value.lower() == 'false': return False
            elif isinstance(default_value, int):
                try:
                    return int(env_value)
                except ValueError:
                    pass  # Fall through to JSON or default if not a valid int
            elif isinstance(default_value, list):
                return [part.strip() for part in env_value.split(',') if part.strip()]
            return env_value

    current_level: Any = CONFIG
    try:
        for key in json_keys:
            current_level = current_level[key]
        if isinstance(default_value, bool) and isinstance(current_level, bool):
            return current_level
        if isinstance(default_value, int) and isinstance(current_level, int):
            return current_level
        if isinstance(current_level, (str, int, bool, float, list, dict)):
            return current_level
    except (KeyError, TypeError):
        pass

    return default_value


def resolve_project_path(value: str) -> Path:
    """Resolve a configured path against PROJECT_ROOT unless it is already absolute."""
    path = Path(value)
    if not path.is_absolute():
        path = PROJECT_ROOT / path
    return path


# --- Logging Configuration ---
# Environment variables take precedence over config.json.
CONFIG['logging'] = {
    'level': get_config_value(['logging', 'level'], 'LOG_LEVEL', 'INFO'),
    'file_path': get_config_value(['logging', 'file_path'], 'LOG_FILE_PATH', ''),
    'max_bytes': get_config_value(['logging', 'max_bytes'], 'LOG_MAX_BYTES', 5*1024*1024),  # 5MB
    'backup_count': get_config_value(['logging', 'backup_count'], 'LOG_BACKUP_COUNT', 3),
    'date_format': get_config_value(['logging', 'date_format'], 'LOG_DATE_FORMAT', '%Y-%m-%d %H:%M:%S'),
}

# --- Site (edge app) ---
CONFIG['site'] = {
    'assets_dir': str(resolve_project_path(get_config_value(['site', 'assets_dir'], 'SITE_ASSETS_DIR', 'dist'))),
    'client_prefix': get_config_value(['site', 'client_prefix'], 'SITE_CLIENT_PREFIX', '/client') or None,
    'not_found_page': get_config_value(['site', 'not_found_page'], 'SITE_NOT_FOUND_PAGE', '404.html'),
}

CONFIG['rewrite'] = {
    'enabled': get_config_value(['rewrite', 'enabled'], 'REWRITE_ENABLED', True),
    'namespace_prefix': get_config_value(['rewrite', 'namespace_prefix'], 'REWRITE_NAMESPACE_PREFIX', '/webflow'),
    'static_prefixes': get_config_value(['rewrite', 'static_prefixes'], 'REWRITE_STATIC_PREFIXES', []),
}

# --- Webflow sync job ---
CONFIG['webflow'] = {
    'api_base': get_config_value(['webflow', 'api_base'], 'WEBFLOW_API_BASE', 'https://api.webflow.com/v2'),
    'api_version': get_config_value(['webflow', 'api_version'], 'WEBFLOW_API_VERSION', '2.0.0'),
    'page_size': get_config_value(['webflow', 'page_size'], None, 100),
    'timeout_s': get_config_value(['webflow', 'timeout_s'], 'WEBFLOW_TIMEOUT_S', 30),
}

CONFIG['sync'] = {
    'docs_dir': str(resolve_project_path(get_config_value(['sync', 'docs_dir'], 'WEBFLOW_DOCS_DIR', 'src/content/docs'))),
    'manifest_filename': get_config_value(['sync', 'manifest_filename'], None, '.webflow-sync-manifest.json'),
    'env_files': get_config_value(['sync', 'env_files'], None, ['.env', '.env.local']),
}

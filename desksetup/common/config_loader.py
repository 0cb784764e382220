"""
Config Loader Module - Handles configuration loading and validation
"""

import copy
import os
import logging
from pathlib import Path
from typing import Any, Dict, Optional

import yaml

from desksetup import config as config_module
from desksetup.common.errors import InstallError

logger = logging.getLogger(__name__)


TRUE_VALUES = ('1', 'true', 'yes', 'on')


class ConfigLoader:
    """Handles configuration loading and validation"""

    @staticmethod
    def merge(base: Dict[str, Any], override: Dict[str, Any]) -> Dict[str, Any]:
        """Recursively merge override into a copy of base; nested mappings are merged, everything else replaced"""
        merged = copy.deepcopy(base)
        for key, value in (override or {}).items():
            if isinstance(value, dict) and isinstance(merged.get(key), dict):
                merged[key] = ConfigLoader.merge(merged[key], value)
            else:
                merged[key] = copy.deepcopy(value)
        return merged

    @staticmethod
    def load_yaml(path: Path) -> Dict[str, Any]:
        """
        Load YAML overrides from a file.

        Returns:
            Mapping of overrides ({} when the file does not exist)

        Raises:
            InstallError: when the file is not valid YAML or not a mapping
        """
        path = Path(path)
        if not path.exists():
            logger.debug(f"CONFIG_YAML_MISSING path={path}")
            return {}

        try:
            with open(path, 'r', encoding='utf-8') as f:
                data = yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise InstallError(f"Invalid YAML in {path}: {e}")

        if data is None:
            return {}
        if not isinstance(data, dict):
            raise InstallError(f"Configuration file {path} must contain a mapping at the top level")

        logger.info(f"CONFIG_YAML_LOADED path={path} keys={len(data)}")
        return data

    @staticmethod
    def load_from_python_config() -> Dict[str, Any]:
        """Load defaults from desksetup/config.py"""
        return {
            'local_bin_dir': getattr(config_module, 'LOCAL_BIN_DIR', '.local/bin'),
            'applications_dir': getattr(config_module, 'APPLICATIONS_DIR', '.local/share/applications'),
            'icons_dir': getattr(config_module, 'ICONS_DIR', '.local/share/icons'),
            'mime_dir': getattr(config_module, 'MIME_DIR', '.local/share/mime'),
            'extensions_dir': getattr(config_module, 'EXTENSIONS_DIR', '.local/share/gnome-shell/extensions'),
            'cache_dir': getattr(config_module, 'CACHE_DIR', '.cache'),
            'state_file': getattr(config_module, 'STATE_FILE', '.local/state/desksetup/state.json'),
            'log_file': getattr(config_module, 'LOG_FILE', '.cache/desksetup/desksetup.log'),
            'debug_mode': getattr(config_module, 'DEBUG_MODE', False),
            'pin_to_dock': getattr(config_module, 'PIN_TO_DOCK', True),
            'restart_file_manager': getattr(config_module, 'RESTART_FILE_MANAGER', True),
            'replace_system_icons': getattr(config_module, 'REPLACE_SYSTEM_ICONS', True),
            'http_timeout': getattr(config_module, 'HTTP_TIMEOUT', 60),
            'apps': {
                'cursor': dict(config_module.CURSOR, mime_types=list(config_module.CURSOR_MIME_TYPES)),
                'bambu_studio': dict(config_module.BAMBU_STUDIO, mime_types=dict(config_module.BAMBU_STL_TYPES),
                                     stl_globs=list(config_module.STL_GLOBS)),
                'cura': dict(config_module.CURA, mime_types=dict(config_module.CURA_STL_TYPES)),
                'rubymine': dict(config_module.RUBYMINE, mime_types=list(config_module.RUBY_MIME_TYPES)),
                'dock_from_dash': dict(config_module.DOCK_FROM_DASH),
            },
            'nfs': copy.deepcopy(config_module.NFS),
            'workstation': copy.deepcopy(config_module.WORKSTATION),
        }

    @staticmethod
    def load_environment_config(environ=None) -> Dict[str, Any]:
        """Load overrides from environment variables"""
        environ = os.environ if environ is None else environ
        overrides = {}

        if environ.get('DESKSETUP_HOME'):
            overrides['home'] = environ['DESKSETUP_HOME']
        if environ.get('DESKSETUP_DEBUG'):
            overrides['debug_mode'] = environ['DESKSETUP_DEBUG'].strip().lower() in TRUE_VALUES
        if environ.get('DESKSETUP_LOG_FILE'):
            overrides['log_file'] = environ['DESKSETUP_LOG_FILE']

        return overrides

    @staticmethod
    def _resolve_paths(settings: Dict[str, Any]) -> Dict[str, Any]:
        """Turn home-relative path settings into absolute Paths"""
        home = Path(settings.get('home') or Path.home()).expanduser()
        settings['home'] = home

        path_keys = {
            'local_bin_dir': 'local_bin',
            'applications_dir': 'applications_dir',
            'icons_dir': 'icons_dir',
            'mime_dir': 'mime_dir',
            'extensions_dir': 'extensions_dir',
            'cache_dir': 'cache_dir',
            'state_file': 'state_file',
            'log_file': 'log_file',
        }
        for source_key, target_key in path_keys.items():
            value = Path(str(settings[source_key])).expanduser()
            settings[target_key] = value if value.is_absolute() else home / value

        return settings

    @staticmethod
    def load(config_file: Optional[str] = None, environ=None) -> Dict[str, Any]:
        """
        Build the settings dictionary.

        Precedence (lowest to highest):
        1. desksetup/config.py defaults
        2. YAML file (config_file, $DESKSETUP_CONFIG or ~/.config/desksetup/config.yaml)
        3. Environment variables (DESKSETUP_HOME, DESKSETUP_DEBUG, DESKSETUP_LOG_FILE)
        """
        environ = os.environ if environ is None else environ

        settings = ConfigLoader.load_from_python_config()
        env_overrides = ConfigLoader.load_environment_config(environ)

        home = Path(env_overrides.get('home') or Path.home()).expanduser()
        yaml_path = config_file or environ.get('DESKSETUP_CONFIG')
        if yaml_path:
            source = 'explicit'
            yaml_path = Path(yaml_path).expanduser()
            if not yaml_path.exists():
                raise InstallError(f"Configuration file not found: {yaml_path}")
        else:
            source = 'default'
            yaml_path = home / getattr(config_module, 'USER_CONFIG_FILE', '.config/desksetup/config.yaml')

        settings = ConfigLoader.merge(settings, ConfigLoader.load_yaml(yaml_path))
        settings = ConfigLoader.merge(settings, env_overrides)
        settings['config_file'] = yaml_path if yaml_path.exists() else None

        logger.debug(f"CONFIG_SOURCE={source} path={yaml_path}")
        return ConfigLoader._resolve_paths(settings)

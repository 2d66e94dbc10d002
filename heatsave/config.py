import copy
import os

import yaml

from heatsave.errors import ConfigError, InputInvalidError

CONFIG_FILE = "config.yaml"

# Installation layout
SAVEGAME_DIR_NAME = "savegame"
WRAPS_DIR_NAME = "wraps"
MARKER_FILE_NAME = "active_profile.txt"
PROFILES_DIR_NAME = "Profiles"
BACKUP_DIR_NAME = ".backup"

# Default install location below the user's Documents folder
GAME_DIR_NAME = "Need for speed heat"
GAME_SAVE_DIR_NAME = "SaveGame"

DEFAULT_CONFIG = {
    'paths': {
        'savegame': '',
        'profiles': '',
    },
    'logging': {
        'level': 'INFO',
    },
}


def default_config():
    return copy.deepcopy(DEFAULT_CONFIG)


def load_config(path=CONFIG_FILE):
    """Loads config.yaml on top of the defaults. A missing file means defaults."""
    cfg = default_config()
    if not os.path.exists(path):
        return cfg

    try:
        with open(path, 'r', encoding='utf-8') as f:
            data = yaml.safe_load(f) or {}
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML format in {path}: {e}") from e

    if not isinstance(data, dict):
        raise ConfigError(f"{path} must contain a mapping at the top level")

    for section, values in data.items():
        if isinstance(values, dict) and isinstance(cfg.get(section), dict):
            cfg[section].update(values)
        else:
            cfg[section] = values
    return cfg


def save_config(cfg, path=CONFIG_FILE):
    parent = os.path.dirname(path)
    if parent:
        os.makedirs(parent, exist_ok=True)
    with open(path, 'w', encoding='utf-8') as f:
        yaml.safe_dump(cfg, f, default_flow_style=False, sort_keys=False)


def default_documents_root():
    return os.path.join(os.path.expanduser("~"), "Documents")


def locate_default_paths(documents_root):
    """Returns (savegame_path, profiles_path) for a Documents folder."""
    if not documents_root or not documents_root.strip():
        raise InputInvalidError("documents root is required")

    savegame_path = os.path.join(documents_root.strip(), GAME_DIR_NAME, GAME_SAVE_DIR_NAME)
    return savegame_path, os.path.join(savegame_path, PROFILES_DIR_NAME)


def resolve_paths(cfg, documents_root=None):
    """Picks the configured paths, falling back to the default install location."""
    paths = cfg.get('paths') or {}
    savegame = str(paths.get('savegame') or '').strip()
    profiles = str(paths.get('profiles') or '').strip()

    if not savegame:
        savegame, default_profiles = locate_default_paths(documents_root or default_documents_root())
        if not profiles:
            profiles = default_profiles
    elif not profiles:
        profiles = os.path.join(savegame, PROFILES_DIR_NAME)

    return savegame, profiles

import logging
import os
from dataclasses import dataclass

from heatsave.config import SAVEGAME_DIR_NAME, WRAPS_DIR_NAME
from heatsave.errors import (
    InvalidProfileLayoutError,
    ProfileNameInvalidError,
    ProfileNameRequiredError,
    ProfilesPathRequiredError,
)

logger = logging.getLogger("ProfileCatalog")

# Characters Windows does not allow in folder names
INVALID_NAME_CHARS = '<>:"/\\|?*'


@dataclass(frozen=True)
class Profile:
    name: str
    path: str


def validate_profile_name(profile_name):
    """Returns the trimmed name, or raises if it cannot be used as a folder name."""
    name = (profile_name or "").strip()
    if not name:
        raise ProfileNameRequiredError()

    if any(c in INVALID_NAME_CHARS for c in name):
        raise ProfileNameInvalidError(name)

    # Trailing spaces are already trimmed; dots are not
    if name.endswith(".") or name.endswith(" "):
        raise ProfileNameInvalidError(name)

    return name


def validate_layout(profile_path):
    """Raises InvalidProfileLayoutError unless both savegame and wraps folders exist."""
    for name in (SAVEGAME_DIR_NAME, WRAPS_DIR_NAME):
        if not os.path.isdir(os.path.join(profile_path, name)):
            raise InvalidProfileLayoutError(profile_path)


class ProfileCatalog:
    def __init__(self, profiles_path):
        self.profiles_path = profiles_path

    def list(self):
        """Returns the valid profiles, sorted by name.

        Folders without the savegame/wraps layout are left out silently.
        """
        if not self.profiles_path:
            raise ProfilesPathRequiredError()

        os.makedirs(self.profiles_path, exist_ok=True)

        profiles = []
        with os.scandir(self.profiles_path) as entries:
            for entry in entries:
                # symlinked folders are not profiles, even when they point at one
                if not entry.is_dir(follow_symlinks=False):
                    continue
                try:
                    validate_layout(entry.path)
                except InvalidProfileLayoutError:
                    logger.debug(f"Skipping '{entry.name}': not a profile folder")
                    continue
                profiles.append(Profile(name=entry.name, path=entry.path))

        return sorted(profiles, key=lambda p: p.name)

import logging
import os

from heatsave.catalog import validate_profile_name
from heatsave.config import SAVEGAME_DIR_NAME, WRAPS_DIR_NAME
from heatsave.errors import (
    CannotDeleteActiveProfileError,
    CollaboratorRequiredError,
    ExpectedDirectoryError,
    MarkerNotFoundError,
    ProfileAlreadyExistsError,
    ProfileNotFoundError,
    ProfileRenameIncompleteError,
    ProfilesPathRequiredError,
    RootSavegameMissingError,
    RootWrapsMissingError,
    SaveGamePathRequiredError,
)

logger = logging.getLogger("ProfileLifecycle")


class ProfileLifecycle:
    """Creates, renames and deletes stored profiles.

    Shares the marker (read_active/write_active) and the tree operations
    with the switcher.
    """

    def __init__(self, savegame_path, profiles_path, marker, ops):
        self.savegame_path = savegame_path
        self.profiles_path = profiles_path
        self.marker = marker
        self.ops = ops

    def prepare_fresh_profile(self, profile_name):
        """Clears the live folders and marks a new, not yet saved profile as active."""
        name = validate_profile_name(profile_name)
        self._validate_dependencies()

        self.ops.remove_tree(os.path.join(self.savegame_path, SAVEGAME_DIR_NAME))
        self.ops.remove_tree(os.path.join(self.savegame_path, WRAPS_DIR_NAME))
        self.marker.write_active(name)
        logger.info(f"Prepared fresh profile '{name}'")

    def save_current_profile(self, profile_name=""):
        """Stores the live folders as a profile.

        Without a name the current marker decides which profile gets
        overwritten. The marker itself is not changed.
        """
        self._validate_dependencies()
        name = self._resolve_profile_name(profile_name)

        live_savegame = os.path.join(self.savegame_path, SAVEGAME_DIR_NAME)
        live_wraps = os.path.join(self.savegame_path, WRAPS_DIR_NAME)
        if not os.path.exists(live_savegame):
            raise RootSavegameMissingError()
        _ensure_dir(live_savegame)
        if not os.path.exists(live_wraps):
            raise RootWrapsMissingError()
        _ensure_dir(live_wraps)

        os.makedirs(self.profiles_path, exist_ok=True)

        target_root = os.path.join(self.profiles_path, name)
        self.ops.replace_tree(live_savegame, os.path.join(target_root, SAVEGAME_DIR_NAME))
        self.ops.replace_tree(live_wraps, os.path.join(target_root, WRAPS_DIR_NAME))
        logger.info(f"Saved current state as profile '{name}'")
        return name

    def rename_profile(self, old_name, new_name):
        self._validate_dependencies()
        old = validate_profile_name(old_name)
        new = validate_profile_name(new_name)

        old_path = os.path.join(self.profiles_path, old)
        new_path = os.path.join(self.profiles_path, new)

        if not os.path.exists(old_path):
            raise ProfileNotFoundError(old)
        _ensure_dir(old_path)
        if os.path.exists(new_path):
            raise ProfileAlreadyExistsError(new)

        # Read before renaming so a broken marker leaves the folder alone
        renames_active = self._active_profile() == old

        os.rename(old_path, new_path)

        if renames_active:
            try:
                self.marker.write_active(new)
            except Exception as marker_error:
                logger.warning(f"Marker update failed, renaming '{new}' back to '{old}'")
                try:
                    os.rename(new_path, old_path)
                except OSError as e:
                    logger.error(f"Could not rename '{new}' back to '{old}': {e}")
                    raise ProfileRenameIncompleteError(old_path, new_path, marker_error, e) from marker_error
                raise

        logger.info(f"Renamed profile '{old}' to '{new}'")

    def delete_profile(self, profile_name):
        self._validate_dependencies()
        name = validate_profile_name(profile_name)

        if self._active_profile() == name:
            raise CannotDeleteActiveProfileError(name)

        profile_path = os.path.join(self.profiles_path, name)
        if not os.path.exists(profile_path):
            raise ProfileNotFoundError(name)
        _ensure_dir(profile_path)

        self.ops.remove_tree(profile_path)
        logger.info(f"Deleted profile '{name}'")

    def _active_profile(self):
        """Current marker value, or None when there is no marker yet."""
        try:
            return self.marker.read_active().strip()
        except MarkerNotFoundError:
            return None

    def _resolve_profile_name(self, profile_name):
        if (profile_name or "").strip():
            return validate_profile_name(profile_name)
        return validate_profile_name(self.marker.read_active())

    def _validate_dependencies(self):
        if not (self.savegame_path or "").strip():
            raise SaveGamePathRequiredError()
        if not (self.profiles_path or "").strip():
            raise ProfilesPathRequiredError()
        if self.marker is None:
            raise CollaboratorRequiredError("marker store")
        if self.ops is None:
            raise CollaboratorRequiredError("file operations")


def _ensure_dir(path):
    if not os.path.isdir(path):
        raise ExpectedDirectoryError(path)

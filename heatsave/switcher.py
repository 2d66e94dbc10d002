import logging
import os
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Optional

from heatsave.catalog import validate_layout, validate_profile_name
from heatsave.config import BACKUP_DIR_NAME, SAVEGAME_DIR_NAME, WRAPS_DIR_NAME
from heatsave.errors import (
    CollaboratorRequiredError,
    ExpectedDirectoryError,
    ProfilesPathRequiredError,
    SaveGamePathRequiredError,
    SwitchRolledBackError,
    SwitchUnrecoverableError,
)

logger = logging.getLogger("ProfileSwitcher")

BACKUP_TIMESTAMP_FORMAT = "%Y%m%d-%H%M%S-%f"


@dataclass
class SwitchResult:
    profile_name: str
    switched_at: Optional[datetime] = None
    rolled_back: bool = False


def _utc_now():
    return datetime.now(timezone.utc)


class ProfileSwitcher:
    """Swaps the live savegame/wraps folders for those of a stored profile.

    Steps: validate, back up the live folders, replace savegame, replace
    wraps, write the marker, drop the backup. If replacing wraps or writing
    the marker fails, both live folders are restored from the backup so the
    installation never ends up half switched. If replacing savegame fails,
    only savegame is restored and the original error is raised.
    The backup is only dropped once every restore succeeded.

    marker needs write_active(name); ops needs copy_tree, replace_tree and
    remove_tree (see fsops.LocalTreeOps).
    """

    def __init__(self, savegame_path, profiles_path, marker, ops, clock=None):
        self.savegame_path = savegame_path
        self.profiles_path = profiles_path
        self.marker = marker
        self.ops = ops
        self.clock = clock or _utc_now

    def switch(self, profile_name):
        name = self._validate(profile_name)
        profile_root = os.path.join(self.profiles_path, name)
        validate_layout(profile_root)

        live_savegame = os.path.join(self.savegame_path, SAVEGAME_DIR_NAME)
        live_wraps = os.path.join(self.savegame_path, WRAPS_DIR_NAME)

        backup_root = os.path.join(
            self.savegame_path, BACKUP_DIR_NAME, self.clock().strftime(BACKUP_TIMESTAMP_FORMAT)
        )
        backup_savegame = os.path.join(backup_root, SAVEGAME_DIR_NAME)
        backup_wraps = os.path.join(backup_root, WRAPS_DIR_NAME)

        logger.info(f"Switching to profile '{name}'")

        # --- BACKUP ---
        try:
            had_savegame = self._backup_if_exists(live_savegame, backup_savegame)
            had_wraps = self._backup_if_exists(live_wraps, backup_wraps)
        except Exception:
            self._discard_backup(backup_root)
            raise

        # --- SWAP ---
        try:
            self.ops.replace_tree(os.path.join(profile_root, SAVEGAME_DIR_NAME), live_savegame)
        except Exception as e:
            # replace_tree may already have removed the live savegame; put it
            # back before the backup goes. wraps is untouched.
            logger.warning(f"Replacing savegame failed, restoring it: {e}")
            self._restore(name, e, [(live_savegame, backup_savegame, had_savegame)], backup_root)
            raise

        try:
            self.ops.replace_tree(os.path.join(profile_root, WRAPS_DIR_NAME), live_wraps)
            self.marker.write_active(name)
        except Exception as e:
            logger.warning(f"Switch to '{name}' failed, rolling back: {e}")
            restores = [
                (live_savegame, backup_savegame, had_savegame),
                (live_wraps, backup_wraps, had_wraps),
            ]
            self._roll_back(name, e, restores, backup_root)

        # --- CLEANUP ---
        self._discard_backup(backup_root)

        logger.info(f"Profile '{name}' is now active")
        return SwitchResult(profile_name=name, switched_at=self.clock(), rolled_back=False)

    def _validate(self, profile_name):
        name = validate_profile_name(profile_name)

        if not (self.savegame_path or "").strip():
            raise SaveGamePathRequiredError()
        if not (self.profiles_path or "").strip():
            raise ProfilesPathRequiredError()
        if self.marker is None:
            raise CollaboratorRequiredError("marker store")
        if self.ops is None:
            raise CollaboratorRequiredError("file operations")

        return name

    def _backup_if_exists(self, source, destination):
        if not os.path.exists(source):
            logger.info(f"No {os.path.basename(source)} folder to back up")
            return False
        if not os.path.isdir(source):
            raise ExpectedDirectoryError(source)

        self.ops.copy_tree(source, destination)
        return True

    def _roll_back(self, name, error, restores, backup_root):
        result = self._restore(name, error, restores, backup_root)
        raise SwitchRolledBackError(result, error) from error

    def _restore(self, name, error, restores, backup_root):
        result = SwitchResult(profile_name=name, rolled_back=True)

        # Restore every folder even if an earlier restore fails
        rollback_error = None
        for target, backup, had_original in restores:
            try:
                if had_original:
                    self.ops.replace_tree(backup, target)
                else:
                    self.ops.remove_tree(target)
            except Exception as e:
                logger.error(f"Could not restore {target}: {e}")
                if rollback_error is None:
                    rollback_error = e

        if rollback_error is not None:
            logger.error(f"Rollback incomplete, backup kept at {backup_root}")
            raise SwitchUnrecoverableError(result, error, rollback_error, backup_root) from error

        self._discard_backup(backup_root)
        logger.info("Rollback complete, installation restored")
        return result

    def _cleanup_backup_tree(self, backup_root):
        self.ops.remove_tree(backup_root)

        backup_parent = os.path.dirname(backup_root)
        try:
            entries = os.listdir(backup_parent)
        except FileNotFoundError:
            return

        if not entries:
            self.ops.remove_tree(backup_parent)

    def _discard_backup(self, backup_root):
        try:
            self._cleanup_backup_tree(backup_root)
        except Exception as e:
            logger.warning(f"Could not clean up backup {backup_root}: {e}")

import logging
import os
import threading

from heatsave.catalog import ProfileCatalog
from heatsave.config import PROFILES_DIR_NAME, resolve_paths
from heatsave.errors import SaveGamePathRequiredError
from heatsave.fsops import LocalTreeOps
from heatsave.lifecycle import ProfileLifecycle
from heatsave.marker import MarkerStore
from heatsave.switcher import ProfileSwitcher

logger = logging.getLogger("SaveManagerApp")


class SaveManagerApp:
    """Entry point for a UI or the command line.

    Holds the configured paths and builds the services for every call, so a
    path change takes effect immediately. Calls that change files are
    serialized with one lock; other processes are not coordinated.
    """

    def __init__(self, savegame_path="", profiles_path=""):
        self.savegame_path = savegame_path
        self.profiles_path = profiles_path
        self._lock = threading.Lock()

    @classmethod
    def from_config(cls, cfg, documents_root=None):
        savegame_path, profiles_path = resolve_paths(cfg, documents_root)
        return cls(savegame_path, profiles_path)

    # --- PATHS ---

    def set_savegame_path(self, savegame_path):
        trimmed = (savegame_path or "").strip()
        if not trimmed:
            raise SaveGamePathRequiredError()

        self.savegame_path = trimmed
        self.profiles_path = os.path.join(trimmed, PROFILES_DIR_NAME)
        logger.info(f"Savegame path set to {trimmed}")

    def get_paths(self):
        return {'savegame': self.savegame_path, 'profiles': self.profiles_path}

    # --- READS ---

    def list_profiles(self):
        return [p.name for p in ProfileCatalog(self.profiles_path).list()]

    def get_active_profile(self):
        if not (self.savegame_path or "").strip():
            raise SaveGamePathRequiredError()
        return self._marker().read_active()

    # --- CHANGES ---

    def switch_profile(self, profile_name):
        with self._lock:
            switcher = ProfileSwitcher(self.savegame_path, self.profiles_path, self._marker(), LocalTreeOps())
            return switcher.switch(profile_name)

    def prepare_fresh_profile(self, profile_name):
        with self._lock:
            self._lifecycle().prepare_fresh_profile(profile_name)

    def save_current_profile(self, profile_name=""):
        with self._lock:
            return self._lifecycle().save_current_profile(profile_name)

    def rename_profile(self, old_name, new_name):
        with self._lock:
            self._lifecycle().rename_profile(old_name, new_name)

    def delete_profile(self, profile_name):
        with self._lock:
            self._lifecycle().delete_profile(profile_name)

    def _lifecycle(self):
        return ProfileLifecycle(self.savegame_path, self.profiles_path, self._marker(), LocalTreeOps())

    def _marker(self):
        return MarkerStore(self.savegame_path)

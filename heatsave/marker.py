import logging
import os

from heatsave.config import MARKER_FILE_NAME
from heatsave.errors import MarkerNotFoundError, ProfileNameRequiredError

logger = logging.getLogger("Marker")


class MarkerStore:
    """Name of the active profile, kept in one text file under the savegame folder.

    Nothing is cached; every call goes to disk.
    """

    def __init__(self, savegame_path):
        self.savegame_path = savegame_path

    def path(self):
        return os.path.join(self.savegame_path, MARKER_FILE_NAME)

    def read_active(self):
        try:
            with open(self.path(), 'r', encoding='utf-8') as f:
                return f.read().strip()
        except FileNotFoundError as e:
            raise MarkerNotFoundError(self.path()) from e

    def write_active(self, profile_name):
        name = (profile_name or "").strip()
        if not name:
            raise ProfileNameRequiredError()

        with open(self.path(), 'w', encoding='utf-8') as f:
            f.write(name + "\n")
        logger.info(f"Active profile set to '{name}'")

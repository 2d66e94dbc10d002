import os
from dataclasses import dataclass

import pytest


@dataclass
class Layout:
    savegame_path: str
    profiles_path: str

    def live(self, *parts):
        return os.path.join(self.savegame_path, *parts)

    def profile(self, *parts):
        return os.path.join(self.profiles_path, *parts)


@pytest.fixture
def layout(tmp_path):
    savegame_path = str(tmp_path / "SaveGame")
    return Layout(savegame_path, os.path.join(savegame_path, "Profiles"))

import os
from collections import Counter

from heatsave.errors import MarkerNotFoundError
from heatsave.fsops import LocalTreeOps
from heatsave.marker import MarkerStore


def write_file(path, content):
    os.makedirs(os.path.dirname(path), exist_ok=True)
    with open(path, "w", encoding="utf-8") as f:
        f.write(content)


def read_file(path):
    with open(path, "r", encoding="utf-8") as f:
        return f.read()


def make_profile(profiles_path, name, save_content, wrap_content):
    root = os.path.join(profiles_path, name)
    write_file(os.path.join(root, "savegame", "slot.sav"), save_content)
    write_file(os.path.join(root, "wraps", "wrap.txt"), wrap_content)
    return root


def make_live(savegame_path, save_content, wrap_content):
    write_file(os.path.join(savegame_path, "savegame", "slot.sav"), save_content)
    write_file(os.path.join(savegame_path, "wraps", "wrap.txt"), wrap_content)


def list_files(root):
    """Relative path -> content for every file below root."""
    found = {}
    for dirpath, _, files in os.walk(root):
        for f in files:
            path = os.path.join(dirpath, f)
            found[os.path.relpath(path, root).replace(os.sep, "/")] = read_file(path)
    return found


class FaultyTreeOps:
    """Real tree operations that fail on chosen calls, e.g. {("replace_tree", 2)}."""

    def __init__(self, fail_on=()):
        self.base = LocalTreeOps()
        self.fail_on = set(fail_on)
        self.calls = Counter()

    def _call(self, method, *args):
        self.calls[method] += 1
        if (method, self.calls[method]) in self.fail_on:
            raise OSError(f"forced {method} failure")
        return getattr(self.base, method)(*args)

    def copy_tree(self, source, destination):
        return self._call("copy_tree", source, destination)

    def replace_tree(self, source, destination):
        return self._call("replace_tree", source, destination)

    def remove_tree(self, path):
        return self._call("remove_tree", path)


class FailingWriteMarker(MarkerStore):
    """Reads the real marker file, refuses to write it."""

    def write_active(self, profile_name):
        raise OSError("marker write failure")


class FixedMarker:
    """In-memory marker for services that only need read/write."""

    def __init__(self, active=None, write_error=None, read_error=None):
        self.active = active
        self.write_error = write_error
        self.read_error = read_error
        self.writes = []

    def read_active(self):
        if self.read_error is not None:
            raise self.read_error
        if self.active is None:
            raise MarkerNotFoundError("<memory>")
        return self.active

    def write_active(self, profile_name):
        if self.write_error is not None:
            raise self.write_error
        self.writes.append(profile_name)
        self.active = profile_name.strip()

import logging
import os
import shutil
import time

from heatsave.errors import StagedCopyLeftBehindError, SymlinkNotSupportedError

logger = logging.getLogger("TreeOps")


class LocalTreeOps:
    """Directory tree operations on the local disk.

    The switcher and the lifecycle service never touch tree contents
    themselves, they go through an object with these three methods.
    """

    def copy_tree(self, source, destination):
        """Copies every file and folder below source into destination.

        File permission bits are kept. A symbolic link anywhere in the tree
        fails the whole copy.
        """
        if os.path.islink(source):
            raise SymlinkNotSupportedError(source)
        if not os.path.exists(source):
            raise FileNotFoundError(f"source does not exist: {source}")
        if not os.path.isdir(source):
            raise NotADirectoryError(f"source must be a directory: {source}")

        os.makedirs(destination, exist_ok=True)

        for root, dirs, files in os.walk(source):
            rel_path = os.path.relpath(root, source)
            target_root = os.path.normpath(os.path.join(destination, rel_path))

            for d in dirs:
                s_dir = os.path.join(root, d)
                if os.path.islink(s_dir):
                    raise SymlinkNotSupportedError(s_dir)
                os.makedirs(os.path.join(target_root, d), exist_ok=True)

            for f in files:
                s_file = os.path.join(root, f)
                if os.path.islink(s_file):
                    raise SymlinkNotSupportedError(s_file)
                shutil.copyfile(s_file, os.path.join(target_root, f))
                shutil.copymode(s_file, os.path.join(target_root, f))

    def replace_tree(self, source, destination):
        """Makes destination an exact copy of source.

        The copy is staged next to destination first, so the old tree is only
        removed once the new one is complete.
        """
        staging = f"{destination}.tmp-{time.time_ns()}"

        self.remove_tree(staging)
        parent = os.path.dirname(destination)
        if parent:
            os.makedirs(parent, exist_ok=True)

        try:
            self.copy_tree(source, staging)
        except Exception:
            self._discard(staging)
            raise

        try:
            self.remove_tree(destination)
        except Exception:
            self._discard(staging)
            raise

        try:
            os.rename(staging, destination)
        except OSError as e:
            # destination is gone; the staged copy is the only one left
            logger.error(f"Staged copy kept at {staging}, rename into {destination} failed: {e}")
            raise StagedCopyLeftBehindError(destination, staging, e) from e

    def remove_tree(self, path):
        """Removes path recursively. A missing path is not an error."""
        try:
            if os.path.islink(path) or os.path.isfile(path):
                os.remove(path)
            else:
                shutil.rmtree(path)
        except FileNotFoundError:
            pass

    def _discard(self, staging):
        try:
            self.remove_tree(staging)
        except OSError as e:
            logger.warning(f"Could not remove staging folder {staging}: {e}")

"""Error kinds raised by the save manager.

Every error derives from SaveManagerError so the command line and any UI layer
can catch one type. Plain OSErrors from the filesystem are not wrapped and
propagate as they are.
"""


class SaveManagerError(Exception):
    pass


# --- INPUT ---

class InputInvalidError(SaveManagerError, ValueError):
    pass


class ProfileNameRequiredError(InputInvalidError):
    def __init__(self, message="profile name is required"):
        super().__init__(message)


class ProfileNameInvalidError(InputInvalidError):
    def __init__(self, name):
        super().__init__(f"profile name contains invalid characters: {name!r}")
        self.name = name


class SaveGamePathRequiredError(InputInvalidError):
    def __init__(self, message="savegame path is required"):
        super().__init__(message)


class ProfilesPathRequiredError(InputInvalidError):
    def __init__(self, message="profiles path is required"):
        super().__init__(message)


class CollaboratorRequiredError(InputInvalidError):
    def __init__(self, what):
        super().__init__(f"{what} is required")
        self.what = what


class InvalidProfileLayoutError(InputInvalidError):
    def __init__(self, path):
        super().__init__(f"profile must contain savegame and wraps folders: {path}")
        self.path = path


class ConfigError(InputInvalidError):
    pass


# --- NOT FOUND ---

class NotFoundError(SaveManagerError, LookupError):
    pass


class MarkerNotFoundError(NotFoundError):
    def __init__(self, path):
        super().__init__(f"no active profile marker at {path}")
        self.path = path


class ProfileNotFoundError(NotFoundError):
    def __init__(self, name):
        super().__init__(f"profile not found: {name}")
        self.name = name


class RootSavegameMissingError(NotFoundError):
    def __init__(self, message="root savegame folder is missing"):
        super().__init__(message)


class RootWrapsMissingError(NotFoundError):
    def __init__(self, message="root wraps folder is missing"):
        super().__init__(message)


# --- CONFLICT ---

class ConflictError(SaveManagerError):
    pass


class ProfileAlreadyExistsError(ConflictError):
    def __init__(self, name):
        super().__init__(f"profile already exists: {name}")
        self.name = name


class CannotDeleteActiveProfileError(ConflictError):
    def __init__(self, name):
        super().__init__(f"cannot delete active profile: {name}")
        self.name = name


# --- IO ---

class IOFailureError(SaveManagerError, OSError):
    pass


class SymlinkNotSupportedError(IOFailureError):
    def __init__(self, path):
        super().__init__(f"symbolic links are not supported: {path}")
        self.path = path


class ExpectedDirectoryError(IOFailureError):
    def __init__(self, path):
        super().__init__(f"expected directory: {path}")
        self.path = path


class StagedCopyLeftBehindError(IOFailureError):
    """The destination was removed but the staged copy could not be moved in.

    The staged copy is kept at staging_path so nothing is lost.
    """

    def __init__(self, destination, staging_path, error):
        super().__init__(
            f"could not move staged copy {staging_path} into {destination}: {error}"
        )
        self.destination = destination
        self.staging_path = staging_path
        self.error = error


class ProfileRenameIncompleteError(IOFailureError):
    """A profile folder was renamed for the active profile, the marker could
    not follow and the folder could not be renamed back either.

    The profile now lives at new_path while the marker still names the old one.
    """

    def __init__(self, old_path, new_path, error, restore_error):
        super().__init__(
            f"marker update failed ({error}) and {new_path} could not be renamed back "
            f"to {old_path}: {restore_error}"
        )
        self.old_path = old_path
        self.new_path = new_path
        self.error = error
        self.restore_error = restore_error


# --- TRANSACTIONS ---

class TransactionError(SaveManagerError):
    def __init__(self, message, result, error):
        super().__init__(message)
        self.result = result
        self.error = error


class SwitchRolledBackError(TransactionError):
    """The switch failed and the installation was restored."""

    def __init__(self, result, error):
        super().__init__(f"switch to {result.profile_name!r} failed and was rolled back: {error}", result, error)


class SwitchUnrecoverableError(TransactionError):
    """The switch failed and restoring the installation failed as well.

    The backup is left at backup_path for manual recovery.
    """

    def __init__(self, result, error, rollback_error, backup_path):
        super().__init__(
            f"switch to {result.profile_name!r} failed: {error}; rollback failed: {rollback_error}",
            result,
            error,
        )
        self.rollback_error = rollback_error
        self.backup_path = backup_path

"""Error kinds raised by the revision kernel.

Every error means the requested action did not happen: nothing is written
before validation passes, and store transactions are rolled back in full.
"""


class RevisorError(Exception):
    kind = "error"
    retryable = False


class ValidationError(RevisorError):
    """Bad input (negative counts, correct > total, missing self-evaluation)."""

    kind = "validation"


class ThemeNotFound(RevisorError):
    kind = "not_found"

    def __init__(self, theme_id):
        super().__init__(f"Theme {theme_id} not found")
        self.theme_id = theme_id


class NotReversible(RevisorError):
    """Undo requested for a review that is not today's latest one."""

    kind = "not_reversible"


class ConcurrentModification(RevisorError):
    """Another write to the same theme is in flight; retry the whole operation."""

    kind = "concurrent_modification"
    retryable = True


class StorageUnavailable(RevisorError):
    kind = "storage_unavailable"
    retryable = True

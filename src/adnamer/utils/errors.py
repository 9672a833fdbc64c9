"""Error taxonomy for adnamer."""


class AdNamerError(Exception):
    """Base class for adnamer errors."""
    pass


class InvalidReference(AdNamerError, ValueError):
    """Raised when a folder reference is neither a folder URL nor a bare ID."""

    def __init__(self, reference: str):
        self.reference = reference
        super().__init__(f"Not a Drive folder URL or ID: '{reference}'")


class ClassificationUnavailable(AdNamerError):
    """Raised when a transcript could not be produced for a video."""
    pass


class PartialRenameFailure(AdNamerError):
    """Raised when some files in a rename batch could not be renamed."""

    def __init__(self, result):
        self.result = result
        failed = ", ".join(sorted(result.failed_ids))
        super().__init__(
            f"Renamed {result.renamed_count} files; {len(result.failed_ids)} failed: {failed}"
        )


class Unauthenticated(AdNamerError):
    """Raised when Drive credentials are missing, expired or revoked."""
    pass

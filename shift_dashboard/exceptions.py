"""Exceptions raised by the CSV ingestors."""


class IngestError(Exception):
    """Base exception for export ingestion errors."""

    pass


class EmptyFileError(IngestError):
    """Raised when a file has no header or no data lines."""

    pass


class InsufficientTimePointsError(IngestError):
    """Raised when fewer than two distinct time points were parsed."""

    pass


class MissingColumnsError(IngestError):
    """Raised when essential columns cannot be matched in the header."""

    def __init__(self, missing: list[str]) -> None:
        self.missing = list(missing)
        super().__init__(
            f"Essential columns not found in header: {', '.join(self.missing)}"
        )

"""Common exceptions for the harness."""


class HarnessError(RuntimeError):
    """Custom harness error for clearer exception handling."""


class MetadataNotFound(HarnessError, LookupError):
    """Error raised when resource output metadata lacks a requested entry."""

    def __init__(self, name: str):
        super().__init__(f"name not found: {name}")
        self.name = name

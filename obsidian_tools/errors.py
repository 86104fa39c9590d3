"""Exceptions raised to the immediate caller.

Per-file problems are reported through result objects instead; only misuse
preconditions surface as exceptions.
"""


class NoVaultSetError(ValueError):
    """Raised when an operation needs a vault but none was given or selected."""

    def __init__(self, message: str = "No vault path specified and no current vault set.") -> None:
        super().__init__(message)


class DestinationExistsError(FileExistsError):
    """Raised when a move or rename target is already occupied."""

    def __init__(self, destination) -> None:
        super().__init__(f"Destination already exists: {destination}")
        self.destination = destination

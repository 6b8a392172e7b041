# User value: This file names every way a ClothSwap job can fail so each failure reaches the user as one clear message.


class ClothSwapError(Exception):
    status_code = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class RelayValidationError(ClothSwapError):
    """A required file is missing; raised before any network call."""

    status_code = 400


class UpstreamTransportError(ClothSwapError):
    """The worker (or storage) could not be reached or answered unusably."""

    status_code = 500


class StorageUploadError(UpstreamTransportError):
    pass


class InvalidTransitionError(ClothSwapError):
    def __init__(self, current: str, target: str):
        super().__init__(f"Invalid job state transition {current} -> {target}")
        self.current = current
        self.target = target

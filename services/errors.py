class MedetechError(Exception):
    """Base class for every error raised by the identification pipeline."""


class IdentificationError(MedetechError):
    """An identification request failed; the message is shown to the user."""


class NoConnectivityError(IdentificationError):
    def __init__(self, message: str = "No internet connection. Please check your network settings."):
        super().__init__(message)


class MissingCredentialError(IdentificationError):
    def __init__(self, message: str = "Gemini API key not configured"):
        super().__init__(message)


class MalformedResponseError(IdentificationError):
    """The model answered, but not with a JSON object we can read."""


class UpstreamFailureError(IdentificationError):
    """Network or model-side failure. The upstream message is passed through."""


class StorageFailureError(MedetechError):
    """A key-value store read or write failed."""

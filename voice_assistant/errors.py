"""Exception types raised by the assistant core."""


class AssistantError(Exception):
    """Base class for errors the web layer reports to clients."""

    status_code = 500


class ProviderError(AssistantError):
    """A remote provider answered with an error or could not be reached."""

    status_code = 502


class VisionAPIError(ProviderError):
    """The remote vision model was unavailable and a mock description was used."""


class CameraUnavailableError(AssistantError):
    status_code = 503


class InvalidTransitionError(AssistantError):
    """A scan loop control call is not valid in the current state."""

    status_code = 409


class InvalidSettingError(AssistantError):
    status_code = 400

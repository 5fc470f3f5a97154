from typing import Any


class ArcGISHubError(Exception):
    """Base class for failures the dispatcher knows how to classify."""


class ClientInputError(ArcGISHubError):
    """A required field is missing or a caller value is unusable.

    Always raised before any outbound call is made.
    """


class RemoteServiceError(ArcGISHubError):
    """The remote service answered, but the payload reports an error or lacks
    the collection the intent needs."""

    def __init__(self, detail: Any):
        self.detail = detail
        super().__init__(detail if isinstance(detail, str) else str(detail))

"""Exceptions raised by the sidecar."""


class SidecarError(Exception):
    """Base class for sidecar errors."""


class SinkUnavailableError(SidecarError):
    """A telemetry sink endpoint could not be reached or written to.

    Raised from inside an emitter tick and left to propagate: it ends the
    owning emitter's loop without affecting the other emitter.
    """

    def __init__(self, endpoint: str, reason: str) -> None:
        super().__init__(f"Sink endpoint {endpoint!r} unavailable: {reason}")
        self.endpoint = endpoint
        self.reason = reason

class ClientError(ValueError):
    """Request problem the caller can fix. Maps to a 4xx response."""

    status_code = 400


class QuestionValidationError(ClientError):
    """An uploaded question broke one of the upload rules."""


class InternalError(RuntimeError):
    """Storage or parse failure. The message is never shown to clients."""

    status_code = 500

"""Error taxonomy shared by the services and the HTTP layer.

Every error subclasses ``ValueError`` so callers that only care about
"the operation was rejected" can keep catching that.
"""


class InterviewAssistantError(ValueError):
    """Base class for errors surfaced to API callers."""


class InputMalformedError(InterviewAssistantError):
    """The caller sent something we cannot work with. Do not retry."""


class UnsupportedDocumentError(InputMalformedError):
    pass


class DocumentParseError(InputMalformedError):
    pass


class NotFoundError(InterviewAssistantError):
    """A referenced candidate or interview session does not exist."""


class InvalidTransitionError(InterviewAssistantError):
    """The operation is not allowed in the current state.

    Retrying without changing the state repeats the failure.
    """

"""Exception hierarchy for the analysis pipeline and its collaborators."""


class ScoutError(Exception):
    """Base class for every error raised by creatorscout."""


class EmptyInputError(ScoutError):
    """No video records were supplied; nothing can be computed."""


class OracleError(ScoutError):
    """The external LLM capability failed. Recovered locally, never fatal."""


class OracleUnavailable(OracleError):
    """Transport failure, timeout or missing credentials."""


class OracleMalformedResponse(OracleError):
    """The oracle answered, but not in the agreed schema."""


class CollaboratorError(ScoutError):
    """An outbound collaborator (video source, record store) failed."""


class VideoSourceError(CollaboratorError):
    pass


class RecordStoreError(CollaboratorError):
    pass


class CollaboratorUnavailableError(ScoutError):
    """No downstream collaborator accepted the analysis result."""


class InvalidMessageError(ScoutError):
    """A queue message is missing required fields."""

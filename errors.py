class DrawError(Exception):
    """Base for every error the draw core reports to a caller."""
    status_code = 400

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ConfigurationError(DrawError):
    status_code = 500


class InvalidSource(DrawError):
    """The roster source reference could not be parsed. The user fixes the input."""
    status_code = 400


class SourceUnavailable(DrawError):
    """A provider failed or answered garbage. Retrying may help."""
    status_code = 502


class EmptyRoster(DrawError):
    status_code = 409


class NoEligibleParticipants(EmptyRoster):
    """Entries existed but all of them were filtered out as automated accounts."""
    status_code = 422


class InvalidRoster(DrawError):
    # caller bug: selection asked for an index into nothing
    status_code = 500


class DrawInProgress(DrawError):
    status_code = 409


class RosterLocked(DrawError):
    status_code = 409

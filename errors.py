"""Exceptions raised by the purge pipeline.

Every PurgeError is fatal for the current run. Components raise them and
main.py turns them into a non-zero exit with a message naming the stage
that failed.
"""


class PurgeError(Exception):
    """Base class for failures that end a purge run."""

    stage = 'purge'

    def __init__(self, message, stage=None):
        super().__init__(message)
        if stage is not None:
            self.stage = stage


class ConfigError(PurgeError):
    """Client secrets or command-line values are missing or invalid."""

    stage = 'configuration'


class AuthError(PurgeError):
    """Authorization could not be completed or the token could not be kept."""

    stage = 'authorization'


class ListenerError(PurgeError):
    """The local redirect listener could not run to completion."""

    stage = 'authorization'


class NetworkError(PurgeError):
    """A Gmail API call failed."""

    stage = 'network'


class DeletionError(PurgeError):
    """A batch delete failed part way through the run.

    Chunks deleted before the failure stay deleted; the counters say how far
    the run got.
    """

    stage = 'deletion'

    def __init__(self, cause, deleted, chunks_done, chunks_total):
        self.cause = cause
        self.deleted = deleted
        self.chunks_done = chunks_done
        self.chunks_total = chunks_total
        super().__init__(
            f"Unable to delete messages: {cause} "
            f"({chunks_done} of {chunks_total} chunks deleted, {deleted} messages removed)"
        )


class TokenNotFound(Exception):
    """No usable credential record is stored. Callers fall back to the browser flow."""


class UserAbort(Exception):
    """The user declined a confirmation prompt."""

"""
Errors — Exception types shared across gulp

Taxonomy:
- PhaseError: an initialization phase entered twice or out of context
- InitializationAborted: the component join was interrupted
- JobCancelled: a running shell job observed its cancellation request
- StoreError: the resource store was misused (not open, unknown partition)

Command-not-found and updates of missing rules are NOT errors;
they are reported as output or ignored.
"""


class GulpError(Exception):
    """Base class for gulp errors."""


class PhaseError(GulpError, RuntimeError):
    """
    Precondition violation on an initialization phase.

    Programmer error: raised when a phase is re-entered or entered
    before its prerequisites. Never retried.
    """


class InitializationAborted(GulpError, RuntimeError):
    """
    Component initialization was interrupted while joining.

    Always chained from the KeyboardInterrupt that caused it, so the
    surrounding runtime can still see the interruption.
    """

    interrupted = True


class JobCancelled(GulpError):
    """Raised inside a job when it observes its cancellation token."""


class StoreError(GulpError):
    """Resource store used before open_at() or with an unknown partition."""

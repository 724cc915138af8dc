"""
Fatal error hierarchy.

Everything here aborts the whole session. Candidate-local failures are never
raised; they travel as ``VerificationOutcome`` values instead.
"""

from __future__ import annotations


class SweepError(Exception):
    """Base class for session-aborting failures."""

    exit_code = 1


class ConfigError(SweepError):
    exit_code = 2


class ManifestError(SweepError):
    pass


class WorkspaceError(SweepError):
    pass


class DirtyWorkspaceError(SweepError):
    pass


class ToolNotFoundError(SweepError):
    pass


class BaselineError(SweepError):
    pass


class RollbackError(SweepError):
    pass

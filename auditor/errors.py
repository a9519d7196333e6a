"""
Audit pipeline errors.

Only failures that end a run are raised. Research and capture problems
are logged and absorbed by the orchestrator.
"""


class AuditError(RuntimeError):
    """Base for errors that abort an audit run."""


class SynthesisError(AuditError):
    """The synthesis model returned nothing usable."""

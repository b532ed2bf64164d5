"""Exception taxonomy for the PHP test action."""


class ActionError(Exception):
    """Base class for errors raised by the action."""


class PipelineFatalError(ActionError):
    """Raised when the run cannot continue at all."""


class ComposerManifestNotFoundError(PipelineFatalError):
    """Raised when no composer.json exists for the project under test."""


class ExternalToolError(ActionError):
    """Raised when an external tool (composer, mysql, codecov) fails."""


class MalformedDocumentError(ActionError, ValueError):
    """Raised when a JUnit or Clover document cannot be decoded."""

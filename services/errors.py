"""
Collaborator failures.

Every error raised by the AI-backed services derives from ServiceError so
sessions can catch one type at the boundary and turn it into a message.
"""


class ServiceError(Exception):
    """A generative-AI collaborator failed or returned something unusable."""


class ServiceUnavailable(ServiceError):
    """No API key configured; AI features are switched off."""


class NarrationError(ServiceError):
    """Narration could not be produced (timeout, malformed reply, …)."""


class RecognitionError(ServiceError):
    """An image could not be turned into a legal 9×9 grid."""


class ServiceTimeout(ServiceError):
    """A request did not answer within its deadline."""

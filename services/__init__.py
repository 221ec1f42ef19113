"""
services/
---------
Generative-AI collaborators, consumed only at their interface boundary.

    from services import GeminiClient, Narrator, GridRecognizer
"""

from services.errors      import (
    ServiceError,
    ServiceUnavailable,
    ServiceTimeout,
    NarrationError,
    RecognitionError,
)
from services.gemini      import GeminiClient
from services.narration   import Narrator, Narration
from services.recognition import GridRecognizer

__all__ = [
    "ServiceError",
    "ServiceUnavailable",
    "ServiceTimeout",
    "NarrationError",
    "RecognitionError",
    "GeminiClient",
    "Narrator",
    "Narration",
    "GridRecognizer",
]

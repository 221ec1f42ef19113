"""
recognition.py — Sudoku Grid Recognition from an Image
=======================================================
Sends a photo / screenshot of a puzzle to the vision model and turns the
reply into a legal 9×9 grid.

Pipeline:
  1. model reply            → strip code fences, keep the outer [...] block
  2. JSON array of arrays   → must be 9 rows × 9 cells
  3. cell normalisation     → anything that is not a whole number 1‥9 is 0
  4. legality               → same rules as the solver (grid.validate_grid)

Any failure, including a reply that misses its `timeout` deadline,
raises RecognitionError; the caller's board is never touched here.
"""

import json
import logging
from typing import Any, List

from grid import InvalidGridError, validate_grid
from services.errors import ServiceError, ServiceTimeout, RecognitionError
from services.gemini import GeminiClient, strip_code_fences

logger = logging.getLogger(__name__)

RECOGNITION_PROMPT = """Analyze this Sudoku puzzle image and return ONLY a 9x9 array representing the grid.
Use 0 for empty cells. Format the response as a valid JSON array of arrays.
Example format: [[1,2,3,0,0,0,7,8,9],[...],...]
Do not include any other text in your response.
IMPORTANT: Make sure there are no duplicate numbers in any row, column, or 3x3 box."""

ACCEPTED_MIME_TYPES = ("image/jpeg", "image/png", "image/webp", "image/heic", "image/heif")


def _cell(value: Any) -> int:
    if isinstance(value, bool):
        return 0
    try:
        number = float(value)
    except (TypeError, ValueError):
        return 0
    if number.is_integer() and 1 <= number <= 9:
        return int(number)
    return 0


def parse_grid_text(text: str) -> List[List[int]]:
    """Model reply → 9×9 ints.  Raises RecognitionError on bad structure."""
    body  = strip_code_fences(text)
    start = body.find("[")
    end   = body.rfind("]")
    if start == -1 or end <= start:
        raise RecognitionError("Failed to parse Sudoku grid from AI response")
    try:
        grid = json.loads(body[start:end + 1])
    except ValueError as exc:
        raise RecognitionError("Failed to parse Sudoku grid from AI response") from exc

    if (
        not isinstance(grid, list)
        or len(grid) != 9
        or not all(isinstance(row, list) and len(row) == 9 for row in grid)
    ):
        raise RecognitionError("Invalid grid structure: expected 9 rows of 9 cells")
    return [[_cell(v) for v in row] for row in grid]


class GridRecognizer:

    def __init__(self, client: GeminiClient, timeout: float = 30.0):
        self.client  = client
        self.timeout = timeout

    @property
    def available(self) -> bool:
        return self.client.available

    def recognize(self, image: bytes, mime_type: str = "image/jpeg") -> List[List[int]]:
        if not image:
            raise RecognitionError("No image supplied")
        if mime_type not in ACCEPTED_MIME_TYPES:
            raise RecognitionError(f"Unsupported image type: {mime_type}")

        try:
            text = self.client.generate_from_image(RECOGNITION_PROMPT, image, mime_type, timeout=self.timeout)
        except ServiceTimeout as exc:
            raise RecognitionError(f"Image recognition timed out after {self.timeout:g} seconds") from exc
        except ServiceError as exc:
            raise RecognitionError(f"Failed to recognize Sudoku grid from image: {exc}") from exc

        grid = parse_grid_text(text)
        try:
            grid = validate_grid(grid)
        except InvalidGridError as exc:
            logger.warning("recognized grid rejected: %s", exc)
            raise RecognitionError(f"Invalid Sudoku grid configuration: {exc}") from exc

        logger.info("recognized grid with %d givens", sum(1 for r in grid for v in r if v))
        return grid

"""
narration.py — AI Narration of Completed Runs
==============================================
Turns the metrics of a finished run into a short explanation.

    narrator = Narrator(gemini_client, timeout=20)
    narration = narrator.analyze_run("sorting", sorting_metrics)

Per kind:
  • sorting      three headed sections
                 (Performance Analysis / Algorithm Recommendations /
                 Theoretical vs Actual)
  • pathfinding  JSON object; numbered plain text accepted as fallback
  • sudoku       three headed sections about the solve

Design decisions:
  - analyze_run never raises.  Unavailability, timeouts, request errors
    and replies that do not parse all produce a Narration with
    degraded=True and a placeholder summary naming the reason.
  - Each request carries its own `timeout` deadline (see gemini.py), so
    a stalled reply never delays the narration requested after it.
"""

import json
import logging
import re
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Sequence, Tuple

from algorithms import get_algorithm
from services.errors import ServiceError, ServiceTimeout, NarrationError
from services.gemini import GeminiClient, strip_code_fences

logger = logging.getLogger(__name__)

KIND_SORTING     = "sorting"
KIND_PATHFINDING = "pathfinding"
KIND_SUDOKU      = "sudoku"

SORTING_HEADINGS = ("Performance Analysis", "Algorithm Recommendations", "Theoretical vs Actual")
SUDOKU_HEADINGS  = ("Solving Summary", "Difficulty Assessment", "Search Behaviour")
PATH_HEADINGS    = ("Algorithm Analysis", "Comparison", "Recommendation")

DEGRADED_SUMMARY = "AI analysis is unavailable right now."


# ---------------------------------------------------------------------------
# Result
# ---------------------------------------------------------------------------
@dataclass(frozen=True)
class Narration:
    """
    Attributes:
        summary_text    : First section, or the placeholder when degraded.
        detail_sections : (heading, body) pairs in display order.
        degraded        : True when the text is a placeholder.
    """

    summary_text:    str
    detail_sections: Tuple[Tuple[str, str], ...] = field(default_factory=tuple)
    degraded:        bool = False

    @classmethod
    def placeholder(cls, reason: str) -> "Narration":
        return cls(summary_text=DEGRADED_SUMMARY, detail_sections=(("Reason", reason),), degraded=True)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "summary_text":    self.summary_text,
            "detail_sections": [{"heading": h, "body": b} for h, b in self.detail_sections],
            "degraded":        self.degraded,
        }


# ---------------------------------------------------------------------------
# Prompts
# ---------------------------------------------------------------------------
def _metric(metrics: Any, name: str, default: Any = 0) -> Any:
    if isinstance(metrics, dict):
        return metrics.get(name, default)
    return getattr(metrics, name, default)


def sorting_prompt(metrics: Any) -> str:
    key  = _metric(metrics, "algorithm", "")
    info = get_algorithm(key)
    label      = info.label if info else key
    complexity = info.complexity_time if info else "O(n log n)"
    size        = _metric(metrics, "array_size")
    comparisons = _metric(metrics, "comparisons")
    swaps       = _metric(metrics, "swaps")
    seconds     = _metric(metrics, "execution_time_ms", 0.0) / 1000

    return f"""Analyze the sorting algorithm performance with these metrics:
Algorithm: {label}
Array size: {size}
Comparisons: {comparisons}
Swaps: {swaps}
Time: {seconds:.2f} seconds

Provide a detailed analysis in exactly three sections. Start each section with its exact heading:

Performance Analysis:
Analyze if this performance is good or poor. Consider the number of comparisons ({comparisons}) and swaps ({swaps}) relative to array size ({size}).

Algorithm Recommendations:
Based on these metrics, suggest which sorting algorithm would be more efficient and explain why.

Theoretical vs Actual:
Compare these metrics with {label}'s theoretical time complexity {complexity}. Is it performing as expected? Explain any deviations."""


def pathfinding_prompt(metrics: Any) -> str:
    total   = max(1, _metric(metrics, "total_nodes", 1))
    walls   = _metric(metrics, "wall_nodes")
    visited = _metric(metrics, "visited_nodes")
    return f"""Analyze this pathfinding scenario and return a JSON response with this exact structure:
{{
  "algorithmAnalysis": {{
    "performance": "Brief performance summary",
    "reasoning": "Detailed explanation"
  }},
  "comparison": {{
    "A*": {{ "performance": "summary", "reasoning": "explanation" }},
    "Dijkstra": {{ "performance": "summary", "reasoning": "explanation" }},
    "BFS": {{ "performance": "summary", "reasoning": "explanation" }}
  }},
  "recommendation": {{
    "algorithm": "recommended algorithm name",
    "reasoning": "detailed explanation why"
  }}
}}

Current Algorithm: {str(_metric(metrics, "algorithm", "")).upper()}
Maze Stats:
- Grid Size: {total} nodes
- Wall Density: {walls / total * 100:.1f}%
- Nodes Explored: {visited / total * 100:.1f}%
- Path Length: {_metric(metrics, "path_length")} nodes
- Time: {_metric(metrics, "execution_time_ms", 0.0)}ms

Focus on performance metrics and maze characteristics in your analysis."""


def sudoku_prompt(metrics: Any) -> str:
    outcome = "solved" if _metric(metrics, "solved", False) else "found to have no solution"
    return f"""A backtracking Sudoku solver (most-constrained cell first) {outcome} a puzzle.
Difficulty: {_metric(metrics, "difficulty", "") or "custom"}
Empty cells at start: {_metric(metrics, "empty_cells")}
Tries: {_metric(metrics, "tries")}
Placements: {_metric(metrics, "placements")}
Backtracks: {_metric(metrics, "backtracks")}
Time: {_metric(metrics, "execution_time_ms", 0.0) / 1000:.2f} seconds

Provide an analysis in exactly three sections. Start each section with its exact heading:

Solving Summary:
Summarize how the search went.

Difficulty Assessment:
Judge how hard this puzzle was for the solver from the backtrack count.

Search Behaviour:
Explain what the ratio of tries to backtracks says about the search."""


def hint_prompt(grid: Sequence[Sequence[int]], row: int, col: int, candidates: Optional[Sequence[int]] = None) -> str:
    rows = "\n".join(" ".join(str(v) for v in r) for r in grid)
    legal = ""
    if candidates is not None:
        legal = f"\nDigits legal by the rules at this cell: {', '.join(map(str, candidates)) or 'none'}\n"
    return f"""Analyze this Sudoku position at row {row + 1}, column {col + 1}:

Current grid state (0 represents empty cells):
{rows}
{legal}
Explain why certain numbers can or cannot go in position ({row + 1},{col + 1}).
Consider:
1. Row constraints
2. Column constraints
3. 3x3 box constraints
4. Strategic implications

Keep the explanation clear and concise."""


# ---------------------------------------------------------------------------
# Reply parsing
# ---------------------------------------------------------------------------
def format_response(text: str) -> str:
    """Trim, drop wrapping quotes and code fences, unescape \\n."""
    text = strip_code_fences(text.strip())
    text = re.sub(r"^[\"']|[\"']$", "", text)
    return text.replace("\\n", "\n")


def cleanup_text(text: str) -> str:
    text = text.strip()
    text = re.sub(r"^[:\"'\s]+|[:\"'\s]+$", "", text)
    text = re.sub(r"\s+", " ", text)
    text = text.replace("\\n", " ")
    return re.sub(r"[{}]", "", text).strip()


def split_sections(text: str, headings: Sequence[str]) -> List[Tuple[str, str]]:
    """
    Cut `text` at each "Heading:" in order.  Raises NarrationError when
    any heading is missing or has an empty body.
    """
    sections = []
    for i, heading in enumerate(headings):
        stop = rf"(?={re.escape(headings[i + 1])}:)" if i + 1 < len(headings) else r"$"
        match = re.search(rf"{re.escape(heading)}:\s*([\s\S]*?){stop}", text, re.IGNORECASE)
        body = match.group(1).strip() if match else ""
        if not body:
            raise NarrationError(f"Incomplete response from AI service: missing '{heading}'")
        sections.append((heading, body))
    return sections


def _object(value: Any) -> Dict[str, Any]:
    return value if isinstance(value, dict) else {}


def _text(value: Any) -> str:
    return value.strip() if isinstance(value, str) else ""


def parse_pathfinding(text: str, algorithm: str = "") -> List[Tuple[str, str]]:
    try:
        parsed = json.loads(format_response(text))
    except ValueError:
        parsed = None

    if isinstance(parsed, dict):
        analysis       = _object(parsed.get("algorithmAnalysis"))
        comparison     = _object(parsed.get("comparison"))
        recommendation = _object(parsed.get("recommendation"))
        if not (analysis or comparison or recommendation):
            raise NarrationError("Malformed response from AI service: no analysis fields")

        comparison_lines = []
        for algo, data in comparison.items():
            data = _object(data)
            if _text(data.get("reasoning")):
                comparison_lines.append(f"{algo}: {_text(data['reasoning'])}")
            elif _text(data.get("performance")):
                comparison_lines.append(_text(data["performance"]))
        bodies = [
            _text(analysis.get("reasoning")) or _text(analysis.get("performance")) or "Analysis not available",
            "\n\n".join(comparison_lines),
            _text(recommendation.get("reasoning"))
            or f"Recommended Algorithm: {_text(recommendation.get('algorithm')) or algorithm}",
        ]
    else:
        logger.warning("pathfinding narration was not JSON, falling back to numbered text")
        parts = re.split(r"\d+[.)]", text)
        bodies = [cleanup_text(parts[i]) if i < len(parts) else "" for i in (1, 2, 3)]
        if not any(bodies):
            raise NarrationError("Malformed response from AI service")

    return list(zip(PATH_HEADINGS, bodies))


# ---------------------------------------------------------------------------
# Narrator
# ---------------------------------------------------------------------------
class Narrator:
    """
    Attributes:
        client  : GeminiClient used for every request.
        timeout : Seconds to wait for one reply before degrading.
    """

    def __init__(self, client: GeminiClient, timeout: float = 20.0):
        self.client  = client
        self.timeout = timeout

    @property
    def available(self) -> bool:
        return self.client.available

    # ------------------------------------------------------------------
    # Public
    # ------------------------------------------------------------------
    def analyze_run(self, kind: str, metrics: Any) -> Narration:
        try:
            if kind == KIND_SORTING:
                sections = split_sections(self._ask(sorting_prompt(metrics)), SORTING_HEADINGS)
            elif kind == KIND_PATHFINDING:
                sections = parse_pathfinding(self._ask(pathfinding_prompt(metrics)), _metric(metrics, "algorithm", ""))
            elif kind == KIND_SUDOKU:
                sections = split_sections(self._ask(sudoku_prompt(metrics)), SUDOKU_HEADINGS)
            else:
                raise NarrationError(f"Unknown run kind: {kind}")
        except ServiceError as exc:
            logger.warning("%s narration degraded: %s", kind, exc)
            return Narration.placeholder(str(exc))

        return Narration(summary_text=sections[0][1], detail_sections=tuple(sections))

    def sudoku_hint(
        self,
        grid: Sequence[Sequence[int]],
        row: int,
        col: int,
        candidates: Optional[Sequence[int]] = None,
    ) -> Narration:
        try:
            text = format_response(self._ask(hint_prompt(grid, row, col, candidates)))
        except ServiceError as exc:
            logger.warning("sudoku hint degraded: %s", exc)
            return Narration.placeholder(str(exc))
        return Narration(summary_text=text, detail_sections=(("Hint", text),))

    # ------------------------------------------------------------------
    # Internal
    # ------------------------------------------------------------------
    def _ask(self, prompt: str) -> str:
        try:
            return self.client.generate_text(prompt, timeout=self.timeout)
        except ServiceTimeout as exc:
            raise NarrationError(f"AI analysis timed out after {self.timeout:g} seconds") from exc

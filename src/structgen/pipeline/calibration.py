"""Rule-based score calibration for graded essays.

Model-assigned essay scores drift: the same essay can land a band apart on
different calls, and strong essays tend to stall just below the top band.
`calibrate_essay_scores` stabilizes the four sub-scores with explainable
essay features, keeps the model's total as the anchor, and guarantees that
the sub-scores sum to ``totalScore`` in half-point steps.
"""

from __future__ import annotations

from collections.abc import Mapping
import dataclasses
import math
import re
from typing import Any

DIMENSIONS: tuple[str, ...] = ("content", "organization", "proficiency", "clarity")
MAX_SCORES: Mapping[str, float] = {
    "content": 4.0,
    "organization": 3.0,
    "proficiency": 5.0,
    "clarity": 3.0,
}
MAX_TOTAL = 15.0

CONNECTORS: tuple[str, ...] = (
    "first",
    "second",
    "third",
    "however",
    "therefore",
    "moreover",
    "in addition",
    "on the one hand",
    "on the other hand",
    "finally",
    "in conclusion",
)
STOP_WORDS = frozenset(
    "the a an to of and or in on for with is are be by as at from".split()
)

_WORD_RE = re.compile(r"[a-zA-Z]+")


def round_half(value: float) -> float:
    """Round to the nearest 0.5, halves rounding up."""
    return math.floor(value * 2 + 0.5) / 2


def _clamp(value: float, lo: float, hi: float) -> float:
    return max(lo, min(hi, value))


@dataclasses.dataclass(frozen=True, slots=True)
class EssayFeatures:
    """Cheap, explainable signals extracted from an essay and its critiques."""

    word_count: int
    sentence_count: int
    paragraph_count: int
    connector_hits: int
    topic_coverage: float
    proficiency_critical: int
    proficiency_general: int
    clarity_critical: int

    @property
    def basic_structure(self) -> bool:  # noqa: D102
        return self.sentence_count >= 6 and (
            self.paragraph_count >= 2 or self.connector_hits >= 2
        )

    @property
    def strong_evidence(self) -> bool:
        """Evidence strong enough to lift the total above the model's."""
        return (
            self.topic_coverage >= 0.5
            and self.basic_structure
            and self.word_count >= 150
            and self.proficiency_critical <= 1
            and self.clarity_critical == 0
            and self.connector_hits >= 2
        )


def extract_features(
    essay: str, topic: str | None, critiques: list[Any]
) -> EssayFeatures:
    """Compute `EssayFeatures` for `essay`."""
    text = (essay or "").lower()
    sentences = [s for s in re.split(r"[.!?]+", text) if s.strip()]
    paragraphs = [p for p in re.split(r"\n\s*\n", text) if p.strip()]

    topic_tokens = {
        t
        for t in _WORD_RE.findall((topic or "").lower())
        if len(t) > 2 and t not in STOP_WORDS
    }
    coverage = (
        sum(1 for t in topic_tokens if t in text) / len(topic_tokens)
        if topic_tokens
        else 0.5
    )

    def count(category: str, severity: str) -> int:
        return sum(
            1
            for c in critiques
            if isinstance(c, dict)
            and c.get("category") == category
            and c.get("severity") == severity
        )

    return EssayFeatures(
        word_count=len(_WORD_RE.findall(text)),
        sentence_count=len(sentences),
        paragraph_count=len(paragraphs) or 1,
        connector_hits=sum(1 for c in CONNECTORS if c in text),
        topic_coverage=coverage,
        proficiency_critical=count("Proficiency", "critical"),
        proficiency_general=count("Proficiency", "general"),
        clarity_critical=count("Clarity", "critical"),
    )


def calibrate_essay_scores(
    data: Mapping[str, Any], *, essay: str, topic: str | None = None
) -> dict[str, Any]:
    """Return a copy of a graded result with calibrated scores.

    The model's raw sub-scores are preserved under ``modelSubScores``.
    """
    result = dict(data)
    raw = data.get("subScores") if isinstance(data.get("subScores"), Mapping) else {}
    critiques = data.get("critiques") if isinstance(data.get("critiques"), list) else []
    features = extract_features(essay, topic, critiques)

    # Caps hold through every later adjustment.
    ceilings = _ceilings(features)
    scores = {
        d: min(round_half(_clamp(_as_number(raw.get(d)), 0.0, MAX_SCORES[d])), ceilings[d])
        for d in DIMENSIONS
    }
    _apply_floors(scores, features, ceilings)

    model_total = round_half(_clamp(_as_number(data.get("totalScore")), 0.0, MAX_TOTAL))
    _rebalance(scores, _target_total(scores, model_total, features), ceilings)

    overview = data.get("issueOverview") if isinstance(data.get("issueOverview"), Mapping) else {}
    _lift_high_band(scores, features, overview, ceilings)

    result["modelSubScores"] = {d: _as_number(raw.get(d)) for d in DIMENSIONS}
    result["subScores"] = scores
    result["totalScore"] = round_half(sum(scores.values()))
    return result


def _as_number(value: Any) -> float:
    if isinstance(value, bool) or not isinstance(value, int | float):
        return 0.0
    try:
        number = float(value)
    except OverflowError:
        return 0.0
    return number if math.isfinite(number) else 0.0


def _ceilings(f: EssayFeatures) -> dict[str, float]:
    """Upper bounds: scores the features cannot justify."""
    ceilings = dict(MAX_SCORES)
    if f.topic_coverage < 0.2:
        ceilings["content"] = 1.5
    elif f.topic_coverage < 0.3:
        ceilings["content"] = 2.5

    if f.sentence_count < 4 or (f.paragraph_count < 2 and f.connector_hits < 1):
        ceilings["organization"] = 1.5
    elif f.connector_hits < 1:
        ceilings["organization"] = 2.0

    if f.proficiency_critical >= 4:
        ceilings["proficiency"] = 2.5
    elif f.proficiency_critical >= 2 or f.proficiency_general >= 6:
        ceilings["proficiency"] = 3.5

    if f.clarity_critical >= 2:
        ceilings["clarity"] = 1.5
    return ceilings


def _apply_floors(
    scores: dict[str, float], f: EssayFeatures, ceilings: Mapping[str, float]
) -> None:
    """Lower bounds, applied only with evidence."""
    if not (f.topic_coverage >= 0.35 and f.basic_structure and f.proficiency_critical <= 1):
        return
    floors = {"content": 2.5, "organization": 2.0, "clarity": 2.0}
    if f.word_count >= 120:
        floors["proficiency"] = 3.0
    for dim, floor in floors.items():
        scores[dim] = min(max(scores[dim], floor), ceilings[dim])


def _target_total(scores: dict[str, float], model_total: float, f: EssayFeatures) -> float:
    """Move toward the rule sum, at most 1 point (2 up with strong evidence)."""
    rules_sum = round_half(sum(scores.values()))
    if abs(rules_sum - model_total) <= 1:
        return rules_sum
    if rules_sum > model_total:
        return round_half(model_total + (2 if f.strong_evidence else 1))
    return round_half(model_total - 1)


def _rebalance(
    scores: dict[str, float], target: float, ceilings: Mapping[str, float]
) -> None:
    """Adjust sub-scores in 0.5 steps toward `target`, within their ceilings."""
    assigned = round_half(sum(scores.values()))
    while assigned < target:
        room = sorted(DIMENSIONS, key=lambda d: ceilings[d] - scores[d], reverse=True)
        dim = next((d for d in room if ceilings[d] - scores[d] >= 0.5), None)
        if dim is None:
            break
        scores[dim] = round_half(scores[dim] + 0.5)
        assigned = round_half(assigned + 0.5)
    while assigned > target:
        largest = sorted(DIMENSIONS, key=lambda d: scores[d], reverse=True)
        dim = next((d for d in largest if scores[d] >= 0.5), None)
        if dim is None:
            break
        scores[dim] = round_half(scores[dim] - 0.5)
        assigned = round_half(assigned - 0.5)


def _lift_high_band(
    scores: dict[str, float],
    f: EssayFeatures,
    overview: Mapping[str, Any],
    ceilings: Mapping[str, float],
) -> None:
    """Lift strong essays stuck at 12.5-14 toward the top band."""
    critical = len(overview.get("critical") or [])
    general = len(overview.get("general") or [])
    total = round_half(sum(scores.values()))
    others_high = (
        scores["content"] >= 3.5 and scores["organization"] >= 2.5 and scores["clarity"] >= 2.5
    )
    if not (
        12.5 <= total <= 14
        and critical <= 1
        and general <= 4
        and f.topic_coverage >= 0.4
        and f.basic_structure
        and (scores["proficiency"] >= 3.0 or others_high)
    ):
        return

    target = 15 if critical == 0 and general <= 2 and f.strong_evidence else 14
    bonus = _clamp(round_half(target - total), 0.5, 2.5)
    for dim in ("proficiency", "content", "organization", "clarity"):
        if bonus <= 0:
            break
        add = min(round_half(ceilings[dim] - scores[dim]), bonus, 1.0)
        if add > 0:
            scores[dim] = round_half(scores[dim] + add)
            bonus = round_half(bonus - add)

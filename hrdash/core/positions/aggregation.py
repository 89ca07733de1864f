"""Candidate aggregation and classification for positions.

Everything here is a pure function over already-loaded responses: counts per
position, the display record for each candidate, list filters, and summary
statistics. Nothing is cached between calls.
"""

import math
from collections.abc import Iterable, Sequence

from ..models.enums import CandidateStatus, DisplayStatus, FilterType, PerformanceRating
from ..models.interview import InterviewResponse
from ..models.position import CandidateDisplayRecord, PositionAggregate, PositionStats
from ...observability.logger import get_logger

logger = get_logger(__name__)

# Raw status -> display status. Case-sensitive; anything else is no_status.
STATUS_DISPLAY_MAP: dict[str, DisplayStatus] = {
    CandidateStatus.SELECTED.value: DisplayStatus.SELECTED,
    CandidateStatus.POTENTIAL.value: DisplayStatus.POTENTIAL,
    CandidateStatus.NOT_SELECTED.value: DisplayStatus.NOT_SELECTED,
}

# Lower bound of each tier, checked top down.
PERFORMANCE_TIERS: list[tuple[int, PerformanceRating]] = [
    (90, PerformanceRating.EXCELLENT),
    (80, PerformanceRating.GOOD),
    (70, PerformanceRating.AVERAGE),
]

TOP_N_FILTERS: dict[FilterType, int] = {
    FilterType.TOP_5: 5,
    FilterType.TOP_10: 10,
}

TOP_PERFORMERS_COUNT = 5


def map_status(raw_status: str | None) -> DisplayStatus:
    """Translate a stored candidate status into its display form.

    Args:
        raw_status: Value of ``candidate_status`` (may be None)

    Returns:
        Display status; unknown or missing values map to ``no_status``
    """
    if raw_status is None:
        return DisplayStatus.NO_STATUS
    return STATUS_DISPLAY_MAP.get(raw_status, DisplayStatus.NO_STATUS)


def round_score(value: float | None) -> int:
    """Round half up, so 89.5 becomes 90 and 70.5 becomes 71.

    Missing and non-finite values round to 0.
    """
    if value is None or not math.isfinite(value):
        return 0
    return int(math.floor(value + 0.5))


def performance_rating(score: int) -> PerformanceRating:
    """Map a score to its performance tier (lower bounds inclusive)."""
    for threshold, rating in PERFORMANCE_TIERS:
        if score >= threshold:
            return rating
    return PerformanceRating.BELOW_AVERAGE


def aggregate_responses(responses: Iterable[InterviewResponse] | None) -> PositionAggregate:
    """Count candidates per display status.

    Each response adds one to the total and one to exactly one status bucket,
    so the result does not depend on input order.

    Args:
        responses: Responses for a single position (None is treated as empty)

    Returns:
        PositionAggregate with all five counters
    """
    counts = {status: 0 for status in DisplayStatus}
    total = 0
    for response in responses or []:
        total += 1
        counts[map_status(response.candidate_status)] += 1

    return PositionAggregate(
        total_candidates=total,
        hired_count=counts[DisplayStatus.SELECTED],
        interviewed_count=counts[DisplayStatus.POTENTIAL],
        pending_count=counts[DisplayStatus.NO_STATUS],
        rejected_count=counts[DisplayStatus.NOT_SELECTED],
    )


def to_display_record(
    response: InterviewResponse, interview_id: str | None = None
) -> CandidateDisplayRecord:
    """Build the candidate list entry for one response.

    Args:
        response: Validated response
        interview_id: Position the record is listed under (defaults to the
            response's own interview id)

    Returns:
        CandidateDisplayRecord
    """
    score = round_score(response.analytics.overall_score)
    return CandidateDisplayRecord(
        id=response.id,
        name=response.name,
        email=response.email,
        score=score,
        status=map_status(response.candidate_status),
        performance_rating=performance_rating(score),
        interview_date=response.created_at.date().isoformat(),
        skills=list(response.analytics.skills),
        interview_id=interview_id or response.interview_id or "",
        call_id=response.call_id,
        duration=response.duration,
        tab_switch_count=response.tab_switch_count,
    )


def build_candidate_list(
    responses: Iterable[InterviewResponse] | None, interview_id: str | None = None
) -> list[CandidateDisplayRecord]:
    """Convert responses to display records, keeping input order."""
    return [to_display_record(response, interview_id) for response in responses or []]


def _by_score_desc(candidates: Sequence[CandidateDisplayRecord]) -> list[CandidateDisplayRecord]:
    # sorted() is stable with reverse=True, ties keep their original order
    return sorted(candidates, key=lambda c: c.score, reverse=True)


def filter_candidates(
    candidates: Sequence[CandidateDisplayRecord],
    filter_type: FilterType | str = FilterType.ALL,
) -> list[CandidateDisplayRecord]:
    """Apply a candidate list filter.

    Args:
        candidates: Candidate records in display order
        filter_type: One of the FilterType tokens; unknown tokens show all

    Returns:
        New list; the input sequence is never reordered in place
    """
    try:
        token = FilterType(filter_type)
    except ValueError:
        logger.warning("unknown_candidate_filter", filter_type=str(filter_type))
        token = FilterType.ALL

    if token in TOP_N_FILTERS:
        return _by_score_desc(candidates)[: TOP_N_FILTERS[token]]
    if token == FilterType.ALL:
        return list(candidates)
    return [c for c in candidates if c.status == token.value]


def compute_stats(candidates: Sequence[CandidateDisplayRecord]) -> PositionStats:
    """Summarize a candidate list.

    Args:
        candidates: Display records for one position

    Returns:
        PositionStats with counts, rounded average score and top performers
    """
    by_status = {status: 0 for status in DisplayStatus}
    for candidate in candidates:
        by_status[DisplayStatus(candidate.status)] += 1

    average = round_score(sum(c.score for c in candidates) / len(candidates)) if candidates else 0

    return PositionStats(
        total_candidates=len(candidates),
        hired_count=by_status[DisplayStatus.SELECTED],
        interviewed_count=by_status[DisplayStatus.POTENTIAL],
        pending_count=by_status[DisplayStatus.NO_STATUS],
        rejected_count=by_status[DisplayStatus.NOT_SELECTED],
        average_score=average,
        top_performers=_by_score_desc(candidates)[:TOP_PERFORMERS_COUNT],
    )

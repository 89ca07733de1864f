"""Color helpers for rendering positions and candidates.

Styles are rich color names. The score color bands are kept separate from
``performance_rating`` even though the thresholds currently line up.
"""

from ..models.enums import DisplayStatus, PerformanceRating

STATUS_STYLES: dict[str, str] = {
    DisplayStatus.SELECTED.value: "green",
    DisplayStatus.POTENTIAL.value: "blue",
    DisplayStatus.NOT_SELECTED.value: "red",
    DisplayStatus.NO_STATUS.value: "bright_black",
}

PERFORMANCE_STYLES: dict[str, str] = {
    PerformanceRating.EXCELLENT.value: "green",
    PerformanceRating.GOOD.value: "blue",
    PerformanceRating.AVERAGE.value: "yellow",
}


def score_color(score: int) -> str:
    if score >= 90:
        return "green"
    if score >= 80:
        return "blue"
    if score >= 70:
        return "yellow"
    return "red"


def status_color(status: str) -> str:
    return STATUS_STYLES.get(status, "bright_black")


def performance_color(rating: str) -> str:
    return PERFORMANCE_STYLES.get(rating, "red")


def ratio_color(count: int, total: int) -> str:
    """Color for a status count relative to the position total."""
    if total == 0:
        return "bright_black"
    percentage = count / total * 100
    if percentage >= 50:
        return "green"
    if percentage >= 25:
        return "blue"
    return "yellow"

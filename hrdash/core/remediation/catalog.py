"""Static course catalog used for learning roadmaps."""

from typing import Any

from ..config.loader import get_setting
from ..models.feedback import Course

DEFAULT_COURSES: tuple[Course, ...] = (
    Course(
        title="Full Stack Web Development",
        duration="6 months",
        level="Beginner to Advanced",
        skills=["React", "Node.js", "JavaScript", "MongoDB", "Express"],
        description="Master modern web development with hands-on projects and industry mentorship.",
        rating=4.8,
    ),
    Course(
        title="Data Science & Machine Learning",
        duration="8 months",
        level="Intermediate",
        skills=["Python", "Machine Learning", "Data Analysis", "Statistics", "AI"],
        description="Become a data scientist with real-world projects and expert guidance.",
        rating=4.7,
    ),
    Course(
        title="Software Engineering Fundamentals",
        duration="4 months",
        level="Beginner",
        skills=["Programming", "Algorithms", "System Design", "Problem Solving"],
        description="Build strong programming foundations with industry best practices.",
        rating=4.6,
    ),
    Course(
        title="Cloud Computing & DevOps",
        duration="5 months",
        level="Intermediate",
        skills=["AWS", "Docker", "Kubernetes", "CI/CD", "Cloud Architecture"],
        description="Master cloud technologies and deployment strategies.",
        rating=4.5,
    ),
    Course(
        title="Product Management",
        duration="6 months",
        level="Beginner to Intermediate",
        skills=["Product Strategy", "User Research", "Analytics", "Leadership"],
        description="Learn to build and manage successful products from ideation to launch.",
        rating=4.4,
    ),
)


def load_catalog(config: dict[str, Any] | None = None) -> list[Course]:
    """Return the course catalog, honoring a ``roadmap.courses`` override.

    Args:
        config: Loaded configuration dictionary

    Returns:
        Courses in catalog order
    """
    overrides = get_setting(config or {}, "roadmap.courses")
    if overrides:
        return [Course.model_validate(entry) for entry in overrides]
    return list(DEFAULT_COURSES)

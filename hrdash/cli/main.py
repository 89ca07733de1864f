"""CLI interface for hrdash using Typer."""

import asyncio
import json
from pathlib import Path
from typing import Annotated

import typer
from openai import OpenAIError
from pydantic import ValidationError
from rich.console import Console
from rich.table import Table

from ..core.config.loader import get_setting, load_config
from ..core.models.enums import CandidateStatus, FilterType
from ..core.models.interview import Interview, InterviewResponse
from ..core.positions.display import (
    performance_color,
    ratio_color,
    score_color,
    status_color,
)
from ..core.storage.object_store import ObjectStore
from ..observability.logger import get_logger, setup_logging_from_config
from ..services.feedback import FeedbackService, FeedbackUnavailableError, RoadmapService
from ..services.positions import PositionService

logger = get_logger(__name__)
console = Console()

app = typer.Typer(
    name="hrdash",
    help="Recruiting dashboard - positions, candidates, AI feedback and learning roadmaps",
    add_completion=False,
)


@app.callback()
def main() -> None:
    """Configure logging from the loaded config before any command runs."""
    setup_logging_from_config(load_config())


def _get_store() -> ObjectStore:
    """Get file-based object store from config."""
    return ObjectStore(get_setting(load_config(), "storage.object_store_dir", "data/store"))


def _get_feedback_service() -> FeedbackService:
    return FeedbackService(_get_store(), config=load_config())


def _default_filter() -> FilterType:
    configured = get_setting(load_config(), "dashboard.default_filter", FilterType.ALL.value)
    try:
        return FilterType(configured)
    except ValueError:
        logger.warning("unknown_default_filter", value=configured)
        return FilterType.ALL


def _format_duration(seconds: int | None) -> str:
    if seconds is None:
        return "-"
    minutes, secs = divmod(seconds, 60)
    return f"{minutes}m {secs:02d}s"


@app.command()
def init_store():
    """Initialize the object store."""
    console.print("[bold blue]Initializing object store...[/bold blue]")
    store = _get_store()
    console.print("[green]Object store ready at[/green]", store.base_dir)


@app.command()
def load_data(
    data_file: Annotated[
        Path,
        typer.Option(
            "--file",
            "-f",
            help='JSON export with "interviews" and "responses" arrays',
            exists=True,
            file_okay=True,
            dir_okay=False,
        ),
    ],
):
    """Import interviews and responses into the object store."""
    try:
        payload = json.loads(data_file.read_text(encoding="utf-8"))
    except (IOError, UnicodeDecodeError, json.JSONDecodeError) as e:
        console.print(f"[red]! Error reading data file:[/red] {e}")
        raise typer.Exit(code=1)

    store = _get_store()
    try:
        interviews = [Interview.model_validate(row) for row in payload.get("interviews", [])]
        responses = [InterviewResponse.model_validate(row) for row in payload.get("responses", [])]
        for interview in interviews:
            store.save_interview(interview)
        for response in responses:
            store.save_response(response)
    except (ValidationError, ValueError) as e:
        console.print(f"[red]! Invalid record:[/red] {e}")
        raise typer.Exit(code=1)

    logger.info("data_loaded", interviews=len(interviews), responses=len(responses))
    console.print(
        f"[green]> Loaded {len(interviews)} interviews and {len(responses)} responses[/green]"
    )


@app.command()
def positions(
    organization_id: Annotated[
        str | None, typer.Option("--org", "-o", help="Organization identifier")
    ] = None,
    user_id: Annotated[str | None, typer.Option("--user", "-u", help="User identifier")] = None,
):
    """List positions with candidate counts."""
    service = PositionService(_get_store())
    rows = service.list_positions(organization_id=organization_id, user_id=user_id)

    if not rows:
        console.print("[yellow]No positions found[/yellow]")
        return

    table = Table(show_header=True, header_style="bold magenta")
    table.add_column("Position ID", style="dim")
    table.add_column("Name")
    table.add_column("Total", justify="right")
    table.add_column("Selected", justify="right")
    table.add_column("Potential", justify="right")
    table.add_column("Not Selected", justify="right")
    table.add_column("No Status", justify="right")

    for position in rows:
        hired_style = ratio_color(position.hired_count, position.total_candidates)
        table.add_row(
            position.id,
            position.name,
            str(position.total_candidates),
            f"[{hired_style}]{position.hired_count}[/]",
            f"[blue]{position.interviewed_count}[/]",
            f"[red]{position.rejected_count}[/]",
            str(position.pending_count),
        )

    console.print(table)


@app.command()
def candidates(
    position_id: Annotated[str, typer.Option("--position-id", "-p", help="Position identifier")],
    filter_type: Annotated[
        FilterType | None,
        typer.Option("--filter", "-f", help="Candidate filter (defaults to dashboard.default_filter)"),
    ] = None,
    export: Annotated[
        Path | None,
        typer.Option("--export", "-e", help="Export the candidate list to JSON"),
    ] = None,
):
    """List candidates for a position."""
    if filter_type is None:
        filter_type = _default_filter()
    service = PositionService(_get_store())
    position = service.get_position(position_id)
    if position is None:
        console.print(f"[yellow]Position not found:[/yellow] {position_id}")
        raise typer.Exit(code=1)

    rows = service.get_candidates(position_id, filter_type)
    console.print(f"\n[bold blue]{position.name}[/bold blue] [dim]({filter_type.value})[/dim]")

    if not rows:
        console.print("[yellow]No candidates found[/yellow]")
        return

    table = Table(show_header=True, header_style="bold magenta")
    table.add_column("Name")
    table.add_column("Score", justify="right")
    table.add_column("Status")
    table.add_column("Performance")
    table.add_column("Date")
    table.add_column("Duration", justify="right")
    table.add_column("Call ID", style="dim")

    for candidate in rows:
        table.add_row(
            candidate.name,
            f"[{score_color(candidate.score)}]{candidate.score}[/]",
            f"[{status_color(candidate.status)}]{candidate.status}[/]",
            f"[{performance_color(candidate.performance_rating)}]{candidate.performance_rating}[/]",
            candidate.interview_date,
            _format_duration(candidate.duration),
            candidate.call_id or "-",
        )

    console.print(table)

    if export:
        try:
            export.parent.mkdir(parents=True, exist_ok=True)
            export.write_text(
                json.dumps([c.model_dump(mode="json") for c in rows], indent=2),
                encoding="utf-8",
            )
            console.print(f"\n[green]Candidates exported to:[/green] {export}")
        except (IOError, TypeError) as e:
            console.print(f"\n[red]! Error exporting candidates:[/red] {e}")


@app.command()
def stats(
    position_id: Annotated[str, typer.Option("--position-id", "-p", help="Position identifier")],
):
    """Show summary statistics for a position."""
    service = PositionService(_get_store())
    summary = service.get_position_stats(position_id)

    table = Table(show_header=False)
    table.add_column("Field", style="bold")
    table.add_column("Value")
    table.add_row("Total Candidates", str(summary.total_candidates))
    table.add_row("Selected", str(summary.hired_count))
    table.add_row("Potential", str(summary.interviewed_count))
    table.add_row("Not Selected", str(summary.rejected_count))
    table.add_row("No Status", str(summary.pending_count))
    table.add_row("Average Score", f"[{score_color(summary.average_score)}]{summary.average_score}[/]")
    console.print(table)

    if summary.top_performers:
        console.print("\n[bold]Top Performers:[/bold]")
        for rank, candidate in enumerate(summary.top_performers, start=1):
            console.print(f"  {rank}. {candidate.name} ({candidate.score})")


@app.command()
def set_status(
    call_id: Annotated[str, typer.Option("--call-id", "-c", help="Call identifier")],
    status: Annotated[CandidateStatus, typer.Option("--status", "-s", help="New candidate status")],
):
    """Record a recruiter decision for a call."""
    response = _get_store().update_candidate_status(call_id, status)
    if response is None:
        console.print(f"[yellow]No response found for call:[/yellow] {call_id}")
        raise typer.Exit(code=1)
    logger.info("candidate_status_updated", call_id=call_id, status=status.value)
    console.print(f"[green]> {response.name} marked {status.value}[/green]")


@app.command()
def delete_response(
    call_id: Annotated[str, typer.Option("--call-id", "-c", help="Call identifier")],
):
    """Delete the response recorded for a call."""
    if not _get_store().delete_response(call_id):
        console.print(f"[yellow]No response found for call:[/yellow] {call_id}")
        raise typer.Exit(code=1)
    logger.info("response_deleted", call_id=call_id)
    console.print(f"[green]> Response for call {call_id} deleted[/green]")


@app.command()
def feedback(
    call_id: Annotated[str, typer.Option("--call-id", "-c", help="Call identifier")],
    refresh: Annotated[
        bool, typer.Option("--refresh/--cached", help="Regenerate instead of using the cache")
    ] = False,
    as_json: Annotated[bool, typer.Option("--json", help="Print raw JSON")] = False,
):
    """Show AI feedback (ATS score, topics, overall assessment) for a call."""
    service = _get_feedback_service()

    try:
        result = asyncio.run(service.get_feedback(call_id, refresh=refresh))
    except FeedbackUnavailableError as e:
        console.print(f"[red]! {e}[/red]")
        raise typer.Exit(code=1)
    except (OpenAIError, ValueError) as e:
        console.print(f"[red]! Failed to generate feedback:[/red] {e}")
        raise typer.Exit(code=1)

    if as_json:
        console.print_json(result.model_dump_json())
        return

    ats = result.ats_score
    if ats is not None and ats.score is not None:
        console.print(f"\n[bold]ATS Score:[/bold] {ats.score:.0f}/{ats.max_score:.0f}")
        for suggestion in ats.improvement_suggestions:
            console.print(f"  - {suggestion}")

    if result.topic_wise_feedback:
        table = Table(show_header=True, header_style="bold magenta")
        table.add_column("Topic")
        table.add_column("Rating", justify="right")
        table.add_column("Alignment")
        table.add_column("Feedback")
        for topic in result.topic_wise_feedback:
            rating = f"{topic.performance_rating:.0f}/5" if topic.performance_rating is not None else "-"
            table.add_row(topic.topic, rating, topic.resume_alignment, topic.feedback)
        console.print(table)

    overall = result.overall_assessment
    if overall is not None:
        if overall.resume_interview_consistency is not None:
            console.print(
                f"\n[bold]Resume/interview consistency:[/bold] {overall.resume_interview_consistency:.0f}%"
            )
        console.print(f"[bold]Recommendation:[/bold] {overall.recommendation or 'N/A'}")
        for strength in overall.strengths:
            console.print(f"  [green]+[/green] {strength}")
        for weakness in overall.weaknesses:
            console.print(f"  [red]-[/red] {weakness}")


@app.command()
def roadmap(
    call_id: Annotated[str, typer.Option("--call-id", "-c", help="Call identifier")],
):
    """Show the personalized learning roadmap for a call, if one applies."""
    service = RoadmapService(_get_feedback_service())
    result = asyncio.run(service.get_roadmap(call_id))

    if not result.success:
        console.print(f"[red]! Unable to generate roadmap:[/red] {result.error}")
        raise typer.Exit(code=1)

    plan = result.data
    if plan is None:
        console.print("[green]Strong performance across all areas - no roadmap needed.[/green]")
        return

    console.print("\n[bold]Areas for Improvement[/bold]")
    for area in plan.improvement_areas:
        rating = f"{area.performance_rating:.0f}/5" if area.performance_rating is not None else "-"
        console.print(f"  [yellow]{area.topic}[/yellow] ({rating})")
        for item in area.areas:
            console.print(f"    > {item}")
    if plan.general_weaknesses:
        console.print("  [red]General Areas[/red]")
        for weakness in plan.general_weaknesses:
            console.print(f"    > {weakness}")

    table = Table(title="Recommended Courses", show_header=True, header_style="bold magenta")
    table.add_column("Course")
    table.add_column("Duration")
    table.add_column("Level")
    table.add_column("Rating", justify="right")
    table.add_column("Skills")
    for course in plan.courses:
        table.add_row(
            course.title,
            course.duration,
            course.level,
            f"{course.rating:.1f}",
            ", ".join(course.skills),
        )
    console.print(table)


@app.command()
def cache_status(
    call_id: Annotated[str | None, typer.Option("--call-id", "-c", help="Call identifier")] = None,
    interview_id: Annotated[
        str | None, typer.Option("--interview-id", "-i", help="Interview identifier")
    ] = None,
):
    """Check cached feedback for a call or count it for an interview."""
    service = _get_feedback_service()

    if call_id:
        entry = service.cached_feedback(call_id)
        if entry is None:
            console.print(f"[yellow]No cached feedback for call:[/yellow] {call_id}")
        else:
            console.print(f"[green]Cached[/green] call {call_id} (updated {entry.updated_at.isoformat()})")
        return

    if interview_id:
        entries = service.cached_feedback_for_interview(interview_id)
        console.print(f"{len(entries)} cached feedback entries for interview {interview_id}")
        return

    console.print("[red]! Provide --call-id or --interview-id[/red]")
    raise typer.Exit(code=1)


@app.command()
def cache_clear(
    call_id: Annotated[str, typer.Option("--call-id", "-c", help="Call identifier")],
):
    """Delete cached feedback for a call."""
    if _get_feedback_service().clear_cached_feedback(call_id):
        console.print(f"[green]Cache cleared for call[/green] {call_id}")
    else:
        console.print(f"[yellow]Nothing cached for call:[/yellow] {call_id}")


@app.command()
def resume_map(
    interview_id: Annotated[str, typer.Argument(help="Interview identifier")],
    file_path: Annotated[
        str | None, typer.Argument(help="Resume file path to record (omit to look up)")
    ] = None,
    remove: Annotated[bool, typer.Option("--remove", help="Delete the mapping")] = False,
):
    """Record, look up or remove the resume file for an interview."""
    store = _get_store()

    if remove:
        removed = store.remove_resume_mapping(interview_id)
        console.print("[green]Mapping removed[/green]" if removed else "[yellow]No mapping found[/yellow]")
        return

    if file_path:
        store.save_resume_mapping(interview_id, file_path)
        logger.info("resume_mapping_saved", interview_id=interview_id, file_path=file_path)
        console.print(f"[green]{interview_id}[/green] -> {file_path}")
        return

    mapped = store.load_resume_mapping(interview_id)
    if mapped is None:
        console.print(f"[yellow]No resume mapped for interview:[/yellow] {interview_id}")
        raise typer.Exit(code=1)
    console.print(mapped)


if __name__ == "__main__":
    app()

"""
Command-line interface for SEO Content Intelligence.

Provides commands for keyword research, content analysis, strategy plans,
and managing the locally stored keyword projects.
"""

import logging
import sys
from datetime import datetime
from pathlib import Path
from typing import NoReturn, Optional, TypeVar

import click
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape
from rich.markdown import Markdown
from rich.panel import Panel
from rich.table import Table

from .config import PipelineConfig
from .constants import DEFAULT_COUNTRY
from .document_normalizer import UploadedFile, normalize
from .errors import PipelineError, Result
from .keyword_io import KeywordFileError, export_keywords
from .models import ContentAnalysis, KeywordResult, SmartSEOAnalysis, TextInput, User
from .pipeline import ContentIntelligencePipeline, create_pipeline
from .store import ProjectStore, create_project_store

console = Console()

T = TypeVar("T")


def _fail(message: str, label: str = "Error") -> NoReturn:
    console.print(f"[red]{label}:[/red] {escape(message)}")
    sys.exit(1)


def _unwrap(result: Result[T], label: str) -> T:
    """Return a successful value, or print the failure and exit."""
    if not result.ok:
        _fail(result.error.message, label)  # type: ignore[union-attr]
    return result.value  # type: ignore[return-value]


def _get_pipeline(ctx: click.Context) -> ContentIntelligencePipeline:
    obj = ctx.obj
    if "pipeline" not in obj:
        obj["pipeline"] = create_pipeline(obj["config"])
    return obj["pipeline"]


def _get_store(ctx: click.Context) -> ProjectStore:
    obj = ctx.obj
    if "pipeline" in obj:
        return obj["pipeline"].store
    if "store" not in obj:
        obj["store"] = create_project_store(obj["config"])
    return obj["store"]


def _read_text_source(text: Optional[str], file: Optional[Path]):
    """Resolve the --text/--file pair into a normalizer source."""
    if not text and not file:
        _fail("Must provide either --text or --file")
    if text and file:
        _fail("Provide only one of --text or --file")
    if text:
        return text
    try:
        return UploadedFile.from_path(file)  # type: ignore[arg-type]
    except PipelineError as e:
        _fail(e.message, "File error")


@click.group()
@click.option(
    "--api-key",
    type=str,
    envvar="ANTHROPIC_API_KEY",
    help="Anthropic API key. Can also be set via ANTHROPIC_API_KEY env var.",
)
@click.option(
    "--store-dir",
    type=click.Path(file_okay=False, path_type=Path),
    envvar="SEO_INTEL_STORE_DIR",
    help="Directory for saved projects (default: ~/.seo_intelligence).",
)
@click.option(
    "--verbose",
    "-v",
    is_flag=True,
    default=False,
    help="Enable verbose output.",
)
@click.pass_context
def main(
    ctx: click.Context,
    api_key: Optional[str],
    store_dir: Optional[Path],
    verbose: bool,
) -> None:
    """
    SEO Content Intelligence - keyword research and content optimization.

    Examples:

        seo-intel research "running shoes" --country "United Kingdom"

        seo-intel analyze --file draft.docx --type "Blog Post" --audience runners

        seo-intel strategy --domain example.com --business-type SaaS --goals "More signups"
    """
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=console, show_path=False)],
    )

    ctx.ensure_object(dict)
    if "config" not in ctx.obj:
        try:
            ctx.obj["config"] = PipelineConfig.from_env(api_key=api_key, store_dir=store_dir)
        except ValueError as e:
            _fail(str(e), "Configuration error")


# =============================================================================
# Generation commands
# =============================================================================


@main.command()
@click.argument("seed")
@click.option(
    "--country",
    "-c",
    default=DEFAULT_COUNTRY,
    show_default=True,
    help="Target market.",
)
@click.option(
    "--project",
    "-p",
    "project_id",
    type=str,
    help="Save the results into this project.",
)
@click.pass_context
def research(ctx: click.Context, seed: str, country: str, project_id: Optional[str]) -> None:
    """Generate keyword opportunities for SEED."""
    pipeline = _get_pipeline(ctx)

    with console.status("[bold green]Researching keywords..."):
        keywords = _unwrap(pipeline.research_keywords(seed, country), "Keyword research failed")

    _display_keywords(keywords, title=f"Keywords for '{escape(seed)}' ({escape(country)})")

    if project_id:
        before = pipeline.store.get_project(project_id)
        project = _unwrap(pipeline.save_keywords(project_id, keywords), "Save failed")
        added = project.keyword_count - (before.keyword_count if before else 0)
        console.print(
            f"\n[bold green]Saved![/bold green] {added} new keywords added to "
            f"'{escape(project.name)}' ({project.keyword_count} total)"
        )


@main.command()
@click.option("--text", "-t", type=str, help="Content to analyze.")
@click.option(
    "--file",
    "-f",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    help="PDF, DOCX, TXT or MD file to analyze.",
)
@click.option("--type", "content_type", default="general", show_default=True, help="Content type.")
@click.option("--audience", default="general", show_default=True, help="Target audience.")
@click.option("--goal", default="optimize", show_default=True, help="Primary goal.")
@click.option("--json", "as_json", is_flag=True, default=False, help="Print raw JSON.")
@click.pass_context
def analyze(
    ctx: click.Context,
    text: Optional[str],
    file: Optional[Path],
    content_type: str,
    audience: str,
    goal: str,
    as_json: bool,
) -> None:
    """Run the smart SEO analysis on text or a document."""
    source = _read_text_source(text, file)
    pipeline = _get_pipeline(ctx)

    with console.status("[bold green]Analyzing content..."):
        result = pipeline.analyze_document(source, content_type, audience, goal)
    analysis = _unwrap(result, "Analysis failed")

    if as_json:
        console.print_json(data=analysis.to_dict())
    else:
        _display_analysis(analysis)


@main.command()
@click.option("--text", "-t", type=str, help="Content to analyze.")
@click.option(
    "--file",
    "-f",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    help="DOCX, TXT or MD file to analyze.",
)
@click.option("--keyword", "-k", required=True, help="Target keyword.")
@click.pass_context
def quick(ctx: click.Context, text: Optional[str], file: Optional[Path], keyword: str) -> None:
    """Score content against a single target keyword."""
    source = _read_text_source(text, file)
    try:
        normalized = normalize(source)
    except PipelineError as e:
        _fail(e.message, "File error")
    if not isinstance(normalized, TextInput):
        _fail("Quick analysis needs text content (DOCX, TXT or MD)")

    pipeline = _get_pipeline(ctx)
    with console.status("[bold green]Analyzing content..."):
        result = pipeline.quick_analysis(normalized.content, keyword)
    _display_quick_analysis(_unwrap(result, "Analysis failed"), keyword)


@main.command()
@click.option("--domain", "-d", required=True, help="Client domain.")
@click.option("--business-type", "-b", required=True, help="Type of business.")
@click.option("--goals", "-g", required=True, help="Primary SEO goal.")
@click.option(
    "--output",
    "-o",
    type=click.Path(dir_okay=False, path_type=Path),
    help="Write the HTML strategy to this file.",
)
@click.pass_context
def strategy(
    ctx: click.Context,
    domain: str,
    business_type: str,
    goals: str,
    output: Optional[Path],
) -> None:
    """Generate a 3-month SEO strategy."""
    pipeline = _get_pipeline(ctx)

    with console.status("[bold green]Building strategy..."):
        plan = _unwrap(
            pipeline.generate_strategy(domain, business_type, goals),
            "Strategy generation failed",
        )

    if output:
        output.write_text(plan.strategy, encoding="utf-8")
        console.print(
            f"[bold green]Success![/bold green] Strategy saved to: {escape(str(output))}"
        )
    else:
        console.print(plan.strategy, markup=False, highlight=False)


# =============================================================================
# Projects
# =============================================================================


@main.group()
def projects() -> None:
    """Manage saved keyword projects."""


@projects.command("list")
@click.pass_context
def list_projects(ctx: click.Context) -> None:
    """List saved projects."""
    store = _get_store(ctx)
    saved = store.get_projects()

    if not saved:
        console.print("[dim]No projects yet. Create one with 'seo-intel projects create'.[/dim]")
        return

    table = Table(title="Projects", show_header=True)
    table.add_column("ID", style="dim")
    table.add_column("Name", style="cyan")
    table.add_column("Domain", style="green")
    table.add_column("Keywords", justify="right")
    table.add_column("Created")

    for project in saved:
        created = datetime.fromtimestamp(project.created_at / 1000).strftime("%Y-%m-%d")
        table.add_row(
            project.id,
            escape(project.name),
            escape(project.domain),
            str(project.keyword_count),
            created,
        )

    console.print(table)
    stats = store.stats()
    console.print(f"\n[cyan]{stats['projects']} projects, {stats['keywords']} keywords[/cyan]")


@projects.command("create")
@click.argument("name")
@click.argument("domain")
@click.pass_context
def create_project(ctx: click.Context, name: str, domain: str) -> None:
    """Create an empty project NAME for DOMAIN."""
    try:
        project = _get_store(ctx).create_project(name, domain)
    except PipelineError as e:
        _fail(e.message)
    console.print(f"[bold green]Created[/bold green] '{escape(project.name)}' ({project.id})")


@projects.command("delete")
@click.argument("project_id")
@click.pass_context
def delete_project(ctx: click.Context, project_id: str) -> None:
    """Delete a project by id."""
    if not _get_store(ctx).delete_project(project_id):
        _fail(f"Project not found: '{project_id}'")
    console.print(f"[bold green]Deleted[/bold green] {escape(project_id)}")


@projects.command("export")
@click.argument("project_id")
@click.argument("output", type=click.Path(dir_okay=False, path_type=Path))
@click.pass_context
def export_project(ctx: click.Context, project_id: str, output: Path) -> None:
    """Export a project's keywords to CSV or Excel."""
    project = _get_store(ctx).get_project(project_id)
    if project is None:
        _fail(f"Project not found: '{project_id}'")

    try:
        path = export_keywords(project, output)
    except KeywordFileError as e:
        _fail(str(e), "Export error")
    console.print(
        f"[bold green]Success![/bold green] {project.keyword_count} keywords exported to: "
        f"{escape(str(path))}"
    )


@projects.command("import")
@click.argument("project_id")
@click.argument("keyword_file", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.pass_context
def import_project(ctx: click.Context, project_id: str, keyword_file: Path) -> None:
    """Import keywords from a CSV or Excel file into a project."""
    pipeline = _get_pipeline(ctx)
    project = _unwrap(pipeline.import_keywords(project_id, keyword_file), "Import failed")
    console.print(
        f"[bold green]Imported![/bold green] '{escape(project.name)}' now has "
        f"{project.keyword_count} keywords"
    )


# =============================================================================
# User
# =============================================================================


@main.command()
@click.argument("email")
@click.option("--name", "-n", type=str, help="Display name (default: part of the email before '@').")
@click.pass_context
def login(ctx: click.Context, email: str, name: Optional[str]) -> None:
    """Sign in locally as EMAIL."""
    try:
        user = User.create(email, name)
    except PipelineError as e:
        _fail(e.message)
    _get_store(ctx).save_user(user)
    console.print(f"Signed in as [bold]{escape(user.name)}[/bold] <{escape(user.email)}>")


@main.command()
@click.pass_context
def logout(ctx: click.Context) -> None:
    """Sign out."""
    _get_store(ctx).clear_user()
    console.print("Signed out.")


@main.command()
@click.pass_context
def whoami(ctx: click.Context) -> None:
    """Show the signed-in user."""
    user = _get_store(ctx).get_user()
    if user is None:
        console.print("[dim]Not signed in.[/dim]")
        return
    console.print(f"[bold]{escape(user.name)}[/bold] <{escape(user.email)}> ({user.id})")


# =============================================================================
# Display helpers
# =============================================================================


def _display_keywords(keywords: list[KeywordResult], title: str) -> None:
    """Display keyword results as a table."""
    table = Table(title=title, show_header=True)
    table.add_column("Keyword", style="green")
    table.add_column("Volume", justify="right")
    table.add_column("Difficulty", justify="right")
    table.add_column("Intent", style="cyan")
    table.add_column("Competition")

    for kw in keywords:
        table.add_row(
            escape(kw.keyword),
            escape(kw.volume),
            str(kw.difficulty),
            escape(kw.intent),
            escape(kw.competition),
        )

    console.print(table)


def _display_analysis(analysis: SmartSEOAnalysis) -> None:
    """Display a smart analysis."""
    console.print(Panel.fit(
        f"[bold blue]SEO Score: {analysis.seo_score}/100[/bold blue]",
        border_style="blue",
    ))

    meta_table = Table(title="Meta Tags", show_header=True)
    meta_table.add_column("Element", style="cyan")
    meta_table.add_column("Value")
    meta_table.add_row("Title", escape(analysis.meta.title))
    meta_table.add_row("Description", escape(analysis.meta.description))
    meta_table.add_row("Slug", escape(analysis.meta.slug))
    console.print(meta_table)

    if analysis.critical_issues:
        console.print("\n[bold red]Critical Issues[/bold red]")
        for issue in analysis.critical_issues:
            console.print(f"  - {issue}", markup=False)

    if analysis.insights:
        console.print("\n[bold cyan]Insights[/bold cyan]")
        for insight in analysis.insights:
            console.print(f"  - {insight}", markup=False)

    if analysis.internal_links:
        link_table = Table(title="Internal Link Suggestions", show_header=True)
        link_table.add_column("Anchor", style="green")
        link_table.add_column("Context")
        for link in analysis.internal_links:
            link_table.add_row(escape(link.anchor), escape(link.context))
        console.print(link_table)

    console.print(Panel(Markdown(analysis.optimized_content), title="Optimized Content"))


def _display_quick_analysis(analysis: ContentAnalysis, keyword: str) -> None:
    """Display a legacy quick analysis."""
    table = Table(title=f"Quick Analysis: '{escape(keyword)}'", show_header=True)
    table.add_column("Metric", style="cyan")
    table.add_column("Value")
    table.add_row("Score", f"{analysis.score}/100")
    table.add_row("Readability", escape(analysis.readability))
    table.add_row("Word count", str(analysis.word_count))
    table.add_row("Heading structure", escape(analysis.heading_structure))
    console.print(table)

    if analysis.suggestions:
        console.print("\n[bold]Suggestions[/bold]")
        for suggestion in analysis.suggestions:
            console.print(f"  - {suggestion}", markup=False)


def run_cli() -> None:
    """Entry point for the CLI."""
    main()


if __name__ == "__main__":
    run_cli()

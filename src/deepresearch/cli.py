"""
deepresearch CLI - Command-line interface for recursive web research.

Commands:
- init: Write a research.toml configuration file
- run: Research a topic and write a markdown report
"""

import asyncio
from pathlib import Path
from typing import Optional

import typer
from rich.console import Console
from rich.panel import Panel
from rich.progress import Progress, SpinnerColumn, TextColumn

from .config import (
    DEFAULT_CONFIG_PATH,
    ResearchConfig,
    ResearchSettings,
    create_default_config,
    load_config,
)
from .utils.logging import setup_logging

app = typer.Typer(
    name="deepresearch",
    help="Recursive web research agent that writes a report from what it learns",
    no_args_is_help=True,
    add_completion=False,
)

console = Console()


@app.command()
def init(
    path: Path = typer.Option(Path.cwd(), "--path", "-p", help="Project directory"),
) -> None:
    """
    Write a research.toml with the default settings.

    Example:
        deepresearch init
        deepresearch init --path ./my-research
    """
    try:
        path.mkdir(parents=True, exist_ok=True)
        config_path = path / DEFAULT_CONFIG_PATH.name

        if config_path.exists():
            console.print(f"[yellow]Warning:[/yellow] {config_path} already exists.")
            raise typer.Exit(1)

        create_default_config(config_path)

        console.print(Panel.fit(
            f"[green]✓[/green] Wrote {config_path}\n\n"
            "[dim]Next steps:[/dim]\n"
            "1. Set API keys in environment (OPENAI_API_KEY, FIRECRAWL_API_KEY, etc.)\n"
            "2. Edit research.toml to pick providers and budgets\n"
            '3. Run: deepresearch run "your topic"',
            title="Config Initialized",
            border_style="green",
        ))

    except typer.Exit:
        raise
    except Exception as e:
        console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(1)


@app.command()
def run(
    topic: str = typer.Argument(..., help="What to research"),
    breadth: Optional[int] = typer.Option(None, "--breadth", "-b", help="Queries per level (1-10)"),
    depth: Optional[int] = typer.Option(None, "--depth", "-d", help="Research rounds (1-5)"),
    config: Path = typer.Option(DEFAULT_CONFIG_PATH, "--config", "-c", help="Config file path"),
    output: Optional[Path] = typer.Option(None, "--output", "-o", help="Report file path"),
    log_level: str = typer.Option("INFO", "--log-level", "-l", help="Log level"),
    no_feedback: bool = typer.Option(False, "--no-feedback", help="Skip clarifying questions"),
) -> None:
    """
    Research a topic and write a markdown report.

    Example:
        deepresearch run "Solid-state battery startups"
        deepresearch run "EU AI Act enforcement" -b 3 -d 2 -o ai-act.md
    """
    try:
        research_config = load_config(config)
        overrides = {}
        if breadth is not None:
            overrides["breadth"] = breadth
        if depth is not None:
            overrides["depth"] = depth
        if overrides:
            research_config.research = ResearchSettings.model_validate(
                {**research_config.research.model_dump(), **overrides}
            )
        if output is not None:
            research_config.output.report_path = output

        setup_logging(level=log_level, log_file=research_config.output.log_file)
        asyncio.run(_run_research(research_config, topic, ask_feedback=not no_feedback))
    except KeyboardInterrupt:
        console.print("\n[yellow]Interrupted by user[/yellow]")
        raise typer.Exit(0)
    except Exception as e:
        console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(1)


async def _ask_clarifying_questions(config: ResearchConfig, model, topic: str) -> str:
    """Ask the model's clarifying questions and fold the answers into the topic."""
    from .research.feedback import FeedbackError, FeedbackGenerator, build_research_brief

    try:
        questions = await FeedbackGenerator(model).generate_questions(
            topic, max_questions=config.research.feedback_questions
        )
    except FeedbackError as e:
        console.print(f"[yellow]Skipping clarifying questions:[/yellow] {e}")
        return topic

    if not questions:
        return topic

    console.print("\n[bold]To better understand your research needs, please answer:[/bold]")
    answers = []
    for question in questions:
        answers.append((question, typer.prompt(question)))

    return build_research_brief(topic, answers)


async def _run_research(config: ResearchConfig, topic: str, ask_feedback: bool) -> None:
    """Build the pipeline from config, research, write the report."""
    from .llm.adapters import build_language_model
    from .research import (
        ContentDistiller,
        ContextBudgeter,
        QueryPlanner,
        RecursiveCharacterTextSplitter,
        ReportComposer,
        ResearchOrchestrator,
        SearchExecutor,
        TiktokenTokenizer,
    )
    from .search import build_search_provider

    model = build_language_model(config)
    provider = build_search_provider(config)

    budgeter = ContextBudgeter(
        TiktokenTokenizer(config.budget.encoding),
        RecursiveCharacterTextSplitter(),
        min_chunk_chars=config.budget.min_chunk_chars,
        chars_per_token=config.budget.chars_per_token,
    )

    if ask_feedback and config.research.feedback_questions > 0:
        topic = await _ask_clarifying_questions(config, model, topic)

    orchestrator = ResearchOrchestrator(
        planner=QueryPlanner(model),
        executor=SearchExecutor(
            provider,
            timeout=config.search.timeout_seconds,
            result_limit=config.search.result_limit,
            formats=config.search.formats,
        ),
        distiller=ContentDistiller(model, budgeter, config.budget.document_tokens),
        concurrency_limit=config.research.concurrency_limit,
        limiter_scope=config.research.limiter_scope,
        max_learnings=config.research.max_learnings,
    )

    with Progress(
        SpinnerColumn(),
        TextColumn("[progress.description]{task.description}"),
        console=console,
        transient=True,
    ) as progress:
        task = progress.add_task(
            f"Researching (breadth {config.research.breadth}, depth {config.research.depth})..."
        )
        result = await orchestrator.research(
            topic,
            breadth=config.research.breadth,
            depth=config.research.depth,
        )

        progress.update(task, description="Writing final report...")
        report = await ReportComposer(model, budgeter, config.budget.report_tokens).compose(
            topic, result.learnings, result.visited_urls
        )

    report_path = config.output.report_path
    report_path.parent.mkdir(parents=True, exist_ok=True)
    report_path.write_text(report, encoding="utf-8")

    console.print(Panel.fit(
        f"[green]✓[/green] Report written to [bold]{report_path}[/bold]\n\n"
        f"Learnings: {len(result.learnings)}\n"
        f"Sources: {len(result.visited_urls)}\n"
        f"Model: {model.name}",
        title="Research Complete",
        border_style="green",
    ))


def main() -> None:
    """CLI entry point."""
    app()


if __name__ == "__main__":
    main()

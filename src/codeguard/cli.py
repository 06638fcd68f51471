"""CodeGuard CLI interface.

Commands:
- profile: Show the project profile (no model call)
- analyze: Run a full analysis and write the report
- score: Score an existing audit report against the quality rubric
- init: Initialize CodeGuard configuration

Global options:
- --config: Path to configuration file
- --verbose: Enable verbose output with timestamps
- --quiet: Suppress info messages
- --ci: Enable CI mode with JSON log output
- --version: Show version and exit
"""

import json
import logging
from pathlib import Path
from typing import Annotated

import typer

from codeguard import __version__
from codeguard.config import CodeGuardConfig, create_default_config, load_config
from codeguard.models import AnalysisReport, Complexity, ReportKind
from codeguard.utils.logging import configure_from_cli

# Create Typer app
app = typer.Typer(
    name="codeguard",
    help="Adaptive code audit: project profiling, prompt composition and report quality scoring",
    add_completion=False,
    no_args_is_help=True,
)

# Global state
_config: CodeGuardConfig | None = None
_logger = logging.getLogger(__name__)


def _get_config() -> CodeGuardConfig:
    return _config or CodeGuardConfig()


def version_callback(value: bool) -> None:
    """Print version and exit."""
    if value:
        typer.echo(f"codeguard {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    config: Annotated[
        Path | None,
        typer.Option(
            "--config",
            "-c",
            help="Path to configuration file",
            exists=True,
            dir_okay=False,
        ),
    ] = None,
    verbose: Annotated[
        bool,
        typer.Option(
            "--verbose",
            "-v",
            help="Enable verbose output with timestamps",
        ),
    ] = False,
    quiet: Annotated[
        bool,
        typer.Option(
            "--quiet",
            "-q",
            help="Suppress info messages (warnings and errors only)",
        ),
    ] = False,
    ci: Annotated[
        bool,
        typer.Option(
            "--ci",
            help="Enable CI mode with JSON output",
        ),
    ] = False,
    version: Annotated[
        bool,
        typer.Option(
            "--version",
            callback=version_callback,
            is_eager=True,
            help="Show version and exit",
        ),
    ] = False,
) -> None:
    """CodeGuard - adaptive code audit.

    Profiles a codebase, composes a model request tailored to it, and scores
    the returned report against a quality rubric.
    """
    global _config

    configure_from_cli(verbose=verbose, quiet=quiet, ci=ci)

    try:
        _config = load_config(config_path=config)
        if _config.config_path:
            _logger.debug(f"Loaded config from: {_config.config_path}")
    except FileNotFoundError as e:
        _logger.error(str(e))
        raise typer.Exit(1)
    except ValueError as e:
        _logger.error(f"Invalid configuration: {e}")
        raise typer.Exit(1)


# =============================================================================
# profile command
# =============================================================================


@app.command()
def profile(
    path: Annotated[
        Path,
        typer.Argument(
            help="Project directory to profile",
            exists=True,
            file_okay=False,
        ),
    ],
    json_output: Annotated[
        bool,
        typer.Option(
            "--json",
            help="Output the profile as JSON",
        ),
    ] = False,
) -> None:
    """Show the project profile.

    Detects analysis modules, complexity, language and architecture without
    calling a model.
    """
    from codeguard.analyzers import ProjectProfiler
    from codeguard.ingest import load_directory

    files = load_directory(path)
    result = ProjectProfiler(_get_config().analysis).profile(files)

    if json_output:
        typer.echo(json.dumps(result.to_dict(), indent=2))
        return

    typer.echo(f"\n🔍 Project Profile: {path.resolve().name}\n")
    typer.echo(f"  Files:         {result.total_files}")
    typer.echo(f"  Complexity:    {result.complexity.value}")
    typer.echo(f"  Depth:         {result.analysis_depth.value}")
    typer.echo(f"  Language:      {result.primary_language}")
    typer.echo(f"  Architecture:  {result.architecture}")
    typer.echo("\n  Modules:")
    for module in result.detected_modules:
        typer.echo(f"    • {module.name} (priority {module.priority})")
    typer.echo()


# =============================================================================
# analyze command
# =============================================================================


@app.command()
def analyze(
    path: Annotated[
        Path,
        typer.Argument(
            help="Project directory to analyze",
            exists=True,
            file_okay=False,
        ),
    ],
    output: Annotated[
        Path | None,
        typer.Option(
            "--output",
            "-o",
            help="Report output path (overrides config)",
        ),
    ] = None,
    kind: Annotated[
        ReportKind,
        typer.Option(
            "--kind",
            "-k",
            help="Report kind",
            case_sensitive=False,
        ),
    ] = ReportKind.AUDIT,
    instructions: Annotated[
        str | None,
        typer.Option(
            "--instructions",
            "-i",
            help="Extra instructions for the analysis (highest priority)",
        ),
    ] = None,
    name: Annotated[
        str | None,
        typer.Option(
            "--name",
            "-n",
            help="Project name shown in the report (defaults to directory name)",
        ),
    ] = None,
) -> None:
    """Analyze a project and write the report.

    Exit codes:
        0: Report written and quality threshold met
        1: Error during analysis
        2: Report written but quality below threshold
    """
    from codeguard.ingest import load_directory
    from codeguard.llm import AnalysisCancelledError, AnalysisFailedError
    from codeguard.pipeline import AnalysisPipeline
    from codeguard.quality import render_quality_report

    config = _get_config()
    project_path = path.resolve()
    project_name = name or project_path.name
    output_path = output or Path(config.output.path)

    _logger.info(f"Analyzing project: {project_path}")
    files = load_directory(project_path)
    if not files:
        _logger.warning("No supported source files found")

    for warning in config.llm.validate():
        _logger.warning(f"LLM config: {warning}")

    try:
        pipeline = AnalysisPipeline(config)
        outcome = pipeline.run(files, project_name, instructions=instructions, kind=kind)
    except (AnalysisFailedError, AnalysisCancelledError) as e:
        _logger.error(f"Analysis failed: {e}")
        raise typer.Exit(1)
    except ValueError as e:
        _logger.error(f"Invalid configuration: {e}")
        raise typer.Exit(1)

    if outcome.truncated:
        _logger.warning(f"{outcome.omitted_files} files did not fit in the context")

    output_path.parent.mkdir(parents=True, exist_ok=True)
    output_path.write_text(json.dumps(outcome.to_dict(), indent=2))
    typer.echo(f"\n📄 Report written to: {output_path}")

    if outcome.metrics is None:
        raise typer.Exit(0)

    if config.output.quality_report:
        quality_path = output_path.with_suffix(".quality.md")
        quality_path.write_text(
            render_quality_report(outcome.metrics, config.analysis.quality.pass_threshold)
        )
        typer.echo(f"📊 Quality report written to: {quality_path}")

    score = outcome.metrics.overall_score
    if outcome.metrics.passes_threshold:
        typer.echo(f"✅ Quality score: {score:.1f}/100")
        raise typer.Exit(0)

    typer.echo(f"⚠️  Quality score: {score:.1f}/100 (below threshold)")
    raise typer.Exit(2)


# =============================================================================
# score command
# =============================================================================


@app.command()
def score(
    report: Annotated[
        Path,
        typer.Argument(
            help="Audit report JSON file",
            exists=True,
            dir_okay=False,
        ),
    ],
    complexity: Annotated[
        Complexity,
        typer.Option(
            "--complexity",
            "-t",
            help="Complexity tier used for minimum finding counts",
            case_sensitive=False,
        ),
    ] = Complexity.MEDIUM,
    json_output: Annotated[
        bool,
        typer.Option(
            "--json",
            help="Output metrics as JSON",
        ),
    ] = False,
) -> None:
    """Score an audit report against the quality rubric.

    Accepts a bare report or the output of the analyze command.

    Exit codes:
        0: Quality threshold met
        1: Report could not be read
        2: Quality below threshold
    """
    from codeguard.quality import QualityValidator, render_quality_report

    config = _get_config()

    try:
        data = json.loads(report.read_text())
    except (OSError, json.JSONDecodeError) as e:
        _logger.error(f"Failed to read report: {e}")
        raise typer.Exit(1)

    if not isinstance(data, dict):
        _logger.error("Report must be a JSON object")
        raise typer.Exit(1)

    # Output of the analyze command wraps the report
    if isinstance(data.get("report"), dict):
        data = data["report"]

    audit = AnalysisReport.from_dict(data).with_default_categories()
    metrics = QualityValidator(config.analysis.quality).validate(audit, complexity)

    if json_output:
        typer.echo(json.dumps(metrics.to_dict(), indent=2))
    else:
        typer.echo(render_quality_report(metrics, config.analysis.quality.pass_threshold))

    raise typer.Exit(0 if metrics.passes_threshold else 2)


# =============================================================================
# init command
# =============================================================================


@app.command()
def init(
    force: Annotated[
        bool,
        typer.Option(
            "--force",
            "-f",
            help="Overwrite existing configuration",
        ),
    ] = False,
) -> None:
    """Initialize CodeGuard configuration.

    Creates .codeguard/config.yaml in the current directory.
    """
    config_dir = Path.cwd() / ".codeguard"
    config_file = config_dir / "config.yaml"

    if config_file.exists() and not force:
        _logger.error(f"Config already exists: {config_file} (use --force to overwrite)")
        raise typer.Exit(1)

    config_dir.mkdir(parents=True, exist_ok=True)
    config_file.write_text(create_default_config())
    _logger.info(f"Created config: {config_file}")

    typer.echo("\n✅ CodeGuard configuration initialized")
    typer.echo(f"   Config: {config_file}")
    raise typer.Exit(0)


if __name__ == "__main__":
    app()

"""Split command for gitsage."""

import questionary
import typer

from gitsage import config, output
from gitsage.git.exceptions import GitError
from gitsage.git.runner import get_repo_root
from gitsage.llm import LLMError, classify_diff
from gitsage.split.models import CommitGroup, SelectionChoice
from gitsage.split.orchestrator import RunState, split_changes
from gitsage.split.stager import StagingStrategy


def select_files(choices: list[SelectionChoice]) -> list[str]:
    """Ask which changed files to stage.

    Returns:
        Selected paths. Empty if nothing was chosen or the prompt was cancelled.
    """
    typer.echo("No staged changes found.")
    selected = questionary.checkbox(
        "Select files to stage:",
        choices=[questionary.Choice(title=c.label, value=c.path) for c in choices],
    ).ask()
    return selected or []


def show_groups(groups: list[CommitGroup]) -> None:
    """Print the proposed commits as "[n] TYPE: message"."""
    typer.echo("Proposed commits:")
    typer.echo()
    for i, group in enumerate(groups, 1):
        typer.echo(f"[{i}] {group.type.value.upper()}: {group.message}")
    typer.echo()


def confirm_groups(groups: list[CommitGroup]) -> bool:
    """Show the proposed commits and ask whether to apply them."""
    show_groups(groups)
    return typer.confirm("Do you want to apply these commits?", default=True)


def classify_chunks(chunks: list[str]) -> list[CommitGroup]:
    typer.echo("Analyzing changes...", err=True)
    return classify_diff(chunks)


def split_command() -> None:
    """Split the current changes into several commits, one per concern.

    When nothing is staged you are asked which changed files to stage.
    The staged diff is grouped by the configured LLM, and after
    confirmation each group becomes one commit.
    """
    config.load_config()

    try:
        repo_root = get_repo_root()
        result = split_changes(
            repo_root,
            select_files=select_files,
            classify=classify_chunks,
            confirm=confirm_groups,
            max_chunk_length=config.MAX_CHUNK_LENGTH,
            strategy=StagingStrategy(config.STAGING_STRATEGY),
            dependency_manifests=config.DEPENDENCY_MANIFESTS,
        )
    except GitError as e:
        output.error(str(e))
        raise typer.Exit(1)
    except LLMError as e:
        output.error(str(e))
        raise typer.Exit(1)

    if result.state == RunState.ABORTED:
        typer.echo(result.summary, err=True)
        return

    typer.echo()
    typer.echo(result.summary)

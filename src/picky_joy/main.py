"""
Picky Joy - CLI Entry Point.

Usage:
    picky-joy serve              Start the API server
    picky-joy chat               Chat through the same pipeline as the API
    picky-joy extract reply.md   Show the recipe found in a saved reply
    picky-joy health             Check configuration
"""

import asyncio
import logging
from pathlib import Path

import typer
from rich.console import Console
from rich.live import Live
from rich.panel import Panel
from rich.spinner import Spinner

app = typer.Typer(
    name="picky-joy",
    help="Picky Joy - AI nutrition assistant for parents of picky eaters.",
    add_completion=False,
)
console = Console()


def configure_logging(level: str) -> None:
    logging.basicConfig(
        level=level,
        format="%(asctime)s | %(levelname)-8s | %(name)-28s | %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )


@app.command()
def chat(
    token: str = typer.Option(None, "--token", "-t", help="Supabase access token (defaults to DEV_ACCESS_TOKEN)"),
    profile_id: str = typer.Option(None, "--profile", "-p", help="Child profile id to tailor replies to"),
    log_prompts: bool = typer.Option(False, "--log-prompts", "-l", help="Log all LLM prompts to prompt_logs/"),
) -> None:
    """Start an interactive chat session."""
    from picky_joy.config import get_settings
    from picky_joy.conversation.state import ConversationState
    from picky_joy.llm.prompt_logger import enable_prompt_logging, get_session_log_dir
    from picky_joy.web.dependencies import get_conversation_handler

    settings = get_settings()
    configure_logging(settings.log_level)

    access_token = token or settings.dev_access_token
    if not access_token:
        console.print("[red]No access token. Pass --token or set DEV_ACCESS_TOKEN.[/red]")
        raise typer.Exit(1)

    if log_prompts:
        enable_prompt_logging(True)
        console.print("[dim]Prompt logging enabled. Check prompt_logs/ after the session.[/dim]")

    console.print(
        Panel.fit(
            "[bold green]Picky Joy[/bold green]\n"
            "Ask for a recipe for your picky eater.\n\n"
            "[dim]Type 'exit' or 'quit' to end the session.[/dim]\n"
            "[dim]Type 'recipes' to list recipes found so far.[/dim]",
            title="Welcome",
            border_style="green",
        )
    )

    handler = get_conversation_handler()
    state = ConversationState()

    async def send(text: str) -> str:
        reply = await handler.handle(
            f"Bearer {access_token}",
            {"message": text, "selectedProfileId": profile_id},
        )
        return reply.message

    while True:
        try:
            user_input = console.input("\n[bold blue]You:[/bold blue] ").strip()
        except (KeyboardInterrupt, EOFError):
            console.print("\n[dim]Goodbye![/dim]")
            break

        if user_input.lower() in ("exit", "quit", "q"):
            console.print("\n[dim]Goodbye![/dim]")
            break

        if not user_input:
            continue

        if user_input.lower() == "recipes":
            _show_recipes(state)
            continue

        with Live(Spinner("dots", text="Thinking..."), console=console, transient=True):
            asyncio.run(state.submit(user_input, send))

        last = state.messages[-1]
        console.print(f"\n[bold green]Picky Joy:[/bold green] {last.content}")
        if last.recipe is not None:
            console.print(f"[yellow]Recipe detected:[/yellow] {last.recipe.title}")

    if log_prompts:
        log_dir = get_session_log_dir()
        if log_dir:
            console.print(f"\n[dim]Prompts logged to: {log_dir}[/dim]")


def _show_recipes(state) -> None:
    found = state.recipe_messages()
    if not found:
        console.print("[dim]No recipes yet.[/dim]")
        return
    for _, recipe in found:
        console.print(f"  • {recipe.title} ({len(recipe.ingredients)} ingredients)")


@app.command()
def extract(
    path: Path = typer.Argument(..., exists=True, dir_okay=False, help="File holding an assistant reply"),
) -> None:
    """Show the recipe the extractor finds in a text file."""
    from picky_joy.recipes import extract_recipe

    recipe = extract_recipe(path.read_text(encoding="utf-8"))
    if recipe is None:
        console.print("[yellow]No recipe found.[/yellow]")
        raise typer.Exit(1)

    console.print(f"\n[bold]{recipe.title}[/bold] [dim](pattern: {recipe.pattern})[/dim]\n")
    console.print("[bold]Ingredients[/bold]")
    for item in recipe.ingredients:
        console.print(f"  • {item}")
    if recipe.instructions:
        console.print(f"\n[bold]Instructions[/bold]\n{recipe.instructions}")


@app.command()
def health() -> None:
    """Check system health and configuration."""
    from picky_joy.config import get_settings

    console.print("\n[bold]Picky Joy Health Check[/bold]\n")

    settings = get_settings()
    console.print("[green]OK[/green] Configuration loaded")
    console.print(f"   Environment: {settings.picky_env}")
    console.print(f"   Log level: {settings.log_level}")
    console.print(f"   Model: {settings.openai_model}")

    missing = settings.missing_chat_settings()
    for name in ("SUPABASE_URL", "SUPABASE_SERVICE_ROLE_KEY", "OPENAI_API_KEY"):
        if name in missing:
            console.print(f"[red]FAIL[/red] {name} missing")
        else:
            console.print(f"[green]OK[/green] {name} configured")

    if missing:
        console.print("\n[dim]Make sure you have a .env file with required variables.[/dim]")
        raise typer.Exit(1)

    console.print("\n[green]All checks passed![/green]")


@app.command()
def version() -> None:
    """Show version information."""
    from picky_joy import __version__

    console.print(f"Picky Joy version {__version__}")


@app.command()
def serve(
    port: int = typer.Option(8000, "--port", "-p", help="Port to run on"),
    reload: bool = typer.Option(False, "--reload", "-r", help="Enable auto-reload for development"),
) -> None:
    """Start the API server."""
    import os

    import uvicorn

    from picky_joy.config import get_settings

    configure_logging(get_settings().log_level)

    # Hosting platforms set PORT
    actual_port = int(os.environ.get("PORT", port))

    console.print("\n[bold green]Picky Joy API[/bold green]")
    console.print(f"Starting server on http://localhost:{actual_port}")
    console.print("[dim]Press Ctrl+C to stop[/dim]\n")

    uvicorn.run(
        "picky_joy.web.app:app",
        host="0.0.0.0",
        port=actual_port,
        reload=reload,
    )


if __name__ == "__main__":
    app()

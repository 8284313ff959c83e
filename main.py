"""Main entry point for the maps agent.

Usage:
    python main.py                                  # Interactive chat mode
    python main.py "Best order to visit ..."        # Single query mode
    python main.py search "Brandenburg Gate"        # Run places_text_search directly
    python main.py route 52.52,13.405 52.39,13.06 52.51,13.37,Office
                                                    # Run routes_optimize directly
                                                    # (origin, destination, waypoints...)
"""

import asyncio
import json
import logging
import sys

from dotenv import load_dotenv
from rich.console import Console
from rich.logging import RichHandler
from rich.panel import Panel
from rich.prompt import Prompt
from rich.syntax import Syntax

from maps_agent.agents import create_maps_agent
from maps_agent.config import settings
from maps_agent.tools import places_text_search, routes_optimize


console = Console()


def setup_logging():
    """Route log records through the rich console."""
    logging.basicConfig(
        level=settings.log_level,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=console, rich_tracebacks=True)],
    )


def parse_point(text: str) -> dict:
    """Parse 'lat,lng' or 'lat,lng,label' into a point dict."""
    parts = text.split(",", 2)
    if len(parts) < 2:
        raise ValueError(f"Invalid point '{text}'. Use 'lat,lng' or 'lat,lng,label'")
    point = {"lat": float(parts[0]), "lng": float(parts[1])}
    if len(parts) == 3 and parts[2].strip():
        point["label"] = parts[2].strip()
    return point


async def chat_loop():
    """Run an interactive chat session with the maps agent."""

    # Check configuration
    missing = settings.validate_required()
    if missing:
        console.print(Panel(
            f"[red]Missing required configuration:[/red]\n" +
            "\n".join(f"  • {m}" for m in missing) +
            "\n\n[dim]Copy .env.example to .env and fill in your API keys.[/dim]",
            title="Configuration Error",
            border_style="red",
        ))
        sys.exit(1)

    console.print("\n[bold blue]🗺️  Maps Agent[/bold blue]\n")
    console.print("[dim]Initializing agent...[/dim]")

    try:
        agent = create_maps_agent()
    except Exception as e:
        console.print(f"[red]Failed to create agent: {e}[/red]")
        sys.exit(1)

    console.print("[green]✓ Agent ready![/green]\n")

    console.print(Panel(
        "I can help you plan multi-stop drives:\n\n"
        "• Find places from free text and tell you when a name is ambiguous\n"
        "• Put your stops in the fastest or shortest order\n"
        "• Per-leg distances and driving times\n\n"
        "[dim]Type 'quit' or 'exit' to end the session.[/dim]",
        title="Welcome",
        border_style="blue",
    ))

    # Create a thread for conversation continuity
    thread = agent.get_new_thread()

    while True:
        try:
            console.print()
            user_input = Prompt.ask("[bold green]You[/bold green]")

            if user_input.lower() in ["quit", "exit", "q"]:
                console.print("\n[dim]Goodbye! Drive safe! 🚗[/dim]\n")
                break

            if not user_input.strip():
                continue

            console.print("\n[bold blue]Agent[/bold blue]:", end=" ")

            async for chunk in agent.run_stream(user_input, thread=thread):
                if chunk.text:
                    console.print(chunk.text, end="")

            console.print()

        except KeyboardInterrupt:
            console.print("\n\n[dim]Session interrupted. Goodbye![/dim]\n")
            break
        except Exception as e:
            console.print(f"\n[red]Error: {e}[/red]")
            console.print("[dim]Please try again.[/dim]")


async def single_query(query: str):
    """Run a single query and print the response."""

    agent = create_maps_agent()

    console.print(f"\n[bold green]Query:[/bold green] {query}\n")
    console.print("[bold blue]Agent:[/bold blue]", end=" ")

    async for chunk in agent.run_stream(query):
        if chunk.text:
            console.print(chunk.text, end="")

    console.print()


async def run_tool(command: str, args: list[str]) -> int:
    """Invoke a tool directly, without the LLM, and print its JSON output."""
    if settings.validate_required(for_agent=False):
        console.print("[red]GOOGLE_MAPS_API_KEY is not set.[/red]")
        return 1

    if command == "search":
        if not args:
            console.print("[red]Usage: main.py search <query>[/red]")
            return 1
        output = await places_text_search(" ".join(args))
    else:
        if len(args) < 2:
            console.print("[red]Usage: main.py route <origin> <destination> [waypoint ...][/red]")
            return 1
        try:
            points = [parse_point(arg) for arg in args]
        except ValueError as e:
            console.print(f"[red]{e}[/red]")
            return 1
        output = await routes_optimize(
            origin=points[0],
            destination=points[1],
            waypoints=points[2:],
        )

    console.print(Syntax(output, "json"))
    return 1 if "error" in json.loads(output) else 0


def main():
    """Main entry point."""
    load_dotenv()
    setup_logging()

    if len(sys.argv) > 1 and sys.argv[1] in ("search", "route"):
        sys.exit(asyncio.run(run_tool(sys.argv[1], sys.argv[2:])))
    elif len(sys.argv) > 1:
        # Single query mode
        query = " ".join(sys.argv[1:])
        asyncio.run(single_query(query))
    else:
        # Interactive chat mode
        asyncio.run(chat_loop())


if __name__ == "__main__":
    main()

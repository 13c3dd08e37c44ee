#!/usr/bin/env python3
"""Ad hoc search runner for the recipe search core.

Run searches from the terminal against the configured search API.

Usage:
    python search.py "chicken curry"
    python search.py --pages 3 "chicken"      # follow the continuation cursor twice
    python search.py --suggest "chick"        # show autocomplete suggestions only
    python search.py --debug "chicken"        # show the full result set as JSON

Features:
- Same SearchEngine / AutocompleteFeed code paths the UI uses
- Pagination through the opaque next-page cursor
- Notifications (throttling, network errors) printed as they are raised
"""

import asyncio
import sys

from rich.console import Console
from rich.table import Table

from recipe_search.clients.edamam import RecipeSearchClient
from recipe_search.models.models import SearchResultSet, SearchStatus
from recipe_search.search.autocomplete import AutocompleteFeed
from recipe_search.search.engine import SearchEngine
from recipe_search.utils.logger import logger
from recipe_search.utils.notifications import Notification, NotificationLevel, Notifier

console = Console()


def render_notification(notification: Notification) -> None:
    style = "red" if notification.level == NotificationLevel.ERROR else "green"
    console.print(f"[{style}]{notification.message}[/{style}]")


def build_results_table(results: SearchResultSet) -> Table:
    """Render the result set as a rich table (index, name, link)."""
    table = Table(title=f"{len(results.items)} of {results.total_count} results")
    table.add_column("#", justify="right", style="dim")
    table.add_column("Recipe", style="bold")
    table.add_column("Link", style="blue")
    for index, recipe in enumerate(results.items, start=1):
        table.add_row(str(index), recipe.name, recipe.identity)
    return table


async def run_search(query: str, pages: int = 1, debug: bool = False) -> SearchStatus:
    """Search `query`, load up to `pages` pages and print the results."""
    notifier = Notifier()
    notifier.subscribe(render_notification)
    engine = SearchEngine(RecipeSearchClient(), notifier=notifier)

    status = await engine.search(query)
    if status not in (SearchStatus.APPLIED, SearchStatus.MERGED):
        return status

    for _ in range(pages - 1):
        if not engine.has_next_page:
            break
        status = await engine.load_next_page()
        if status != SearchStatus.APPLIED:
            break

    console.print(build_results_table(engine.results))
    if debug:
        console.print_json(data=engine.results.model_dump(by_alias=True))
    if engine.has_next_page:
        console.print("[dim]More results available[/dim]")
    return status


async def run_suggest(partial_query: str) -> list[str]:
    notifier = Notifier()
    notifier.subscribe(render_notification)
    feed = AutocompleteFeed(RecipeSearchClient(), notifier=notifier)
    suggestions = await feed.suggest(partial_query)
    if suggestions:
        for suggestion in suggestions:
            console.print(f"• {suggestion}")
    else:
        console.print("[yellow]No suggestions[/yellow]")
    return suggestions


if __name__ == "__main__":
    if len(sys.argv) < 2:
        print("Usage: python search.py [--debug] [--pages N] [--suggest] \"<query>\"")
        sys.exit(1)

    debug_mode = False
    suggest_mode = False
    pages = 1
    argv_start = 1

    while argv_start < len(sys.argv) and sys.argv[argv_start].startswith("--"):
        if sys.argv[argv_start] == "--debug":
            debug_mode = True
            argv_start += 1
        elif sys.argv[argv_start] == "--suggest":
            suggest_mode = True
            argv_start += 1
        elif sys.argv[argv_start] == "--pages":
            argv_start += 1
            if argv_start >= len(sys.argv) or not sys.argv[argv_start].isdigit():
                print("Error: --pages requires a positive number")
                sys.exit(1)
            pages = max(int(sys.argv[argv_start]), 1)
            argv_start += 1
        else:
            print(f"Unknown flag: {sys.argv[argv_start]}")
            sys.exit(1)

    if argv_start >= len(sys.argv):
        print("Error: No query provided")
        sys.exit(1)

    query = " ".join(sys.argv[argv_start:])

    try:
        if suggest_mode:
            asyncio.run(run_suggest(query))
        else:
            result = asyncio.run(run_search(query, pages=pages, debug=debug_mode))
            if result in (SearchStatus.FAILED, SearchStatus.THROTTLED, SearchStatus.REJECTED):
                sys.exit(2)
    except KeyboardInterrupt:
        logger.info("Search interrupted by user.")
        sys.exit(0)

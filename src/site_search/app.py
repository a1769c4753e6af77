from __future__ import annotations

import asyncio
import json
import logging
from pathlib import Path

import aiohttp
import click

from site_search.core.config import AppConfig
from site_search.core.index import IndexStore
from site_search.core.logging_config import configure_logging
from site_search.core.models import type_icon, type_label
from site_search.core.presentation import display_excerpt, found_in_text, results_count_text
from site_search.core.session import ViewState, outcome_for

logger = logging.getLogger(__name__)


async def _load_from_url(store: IndexStore, url: str, config: AppConfig) -> bool:
    async with aiohttp.ClientSession() as session:
        return await store.load(
            session,
            url,
            user_agent=config.search.user_agent,
            timeout_seconds=config.search.fetch_timeout_seconds,
        )


def _load_store(config: AppConfig, index_path: Path | None, url: str | None) -> IndexStore:
    store = IndexStore()
    if index_path is not None:
        store.load_file(index_path)
    elif url:
        asyncio.run(_load_from_url(store, url, config))
    elif config.search.index_path:
        store.load_file(Path(config.search.index_path).expanduser())
    else:
        asyncio.run(_load_from_url(store, config.search.resolved_index_url(), config))
    return store


_index_option = click.option(
    "--index",
    "-i",
    "index_path",
    help="Local index.json to search.",
    type=click.Path(dir_okay=False, file_okay=True, path_type=Path),
    default=None,
)
_url_option = click.option("--url", "-u", help="URL of the index document.", default=None)


@click.group("site-search")
@click.option("--verbose", "-v", is_flag=True, help="Log to the console as well as the log file.")
@click.pass_context
def main(ctx: click.Context, verbose: bool):
    """
    Search a site's content index from the command line.
    """
    config = AppConfig.load()
    configure_logging(config, level=logging.DEBUG if verbose else logging.INFO, console=verbose)
    ctx.obj = config


@main.command("query")
@click.argument("query")
@_index_option
@_url_option
@click.option("--json", "as_json", is_flag=True, help="Print results as JSON.")
@click.option("--limit", "-n", type=click.IntRange(min=1), default=None, help="Show at most N results.")
@click.pass_obj
def query_cmd(config: AppConfig, query: str, index_path: Path | None, url: str | None, as_json: bool, limit: int | None):
    """
    Rank the index against QUERY.
    """
    q = query.strip()
    if not q:
        click.echo("Enter a search term.")
        return

    store = _load_store(config, index_path, url)
    outcome = outcome_for(q, store.search(q))
    shown = outcome.results[:limit] if limit else outcome.results

    if as_json:
        click.echo(json.dumps([r.to_dict() for r in shown], indent=2, ensure_ascii=False))
        return

    if outcome.state is ViewState.NO_RESULTS:
        click.echo("No results found")
        return

    click.echo(results_count_text(outcome.results))
    for r in shown:
        click.echo(f"{type_icon(r.record.type)} {r.record.title or r.record.permalink} [{type_label(r.record.type)}] score={r.score}")
        click.echo(f"   {r.record.permalink}")
        excerpt = display_excerpt(r, config.search.excerpt_length)
        if excerpt:
            click.echo(f"   {excerpt}")
        click.echo(f"   {found_in_text(r)}")


@main.command("stats")
@_index_option
@_url_option
@click.pass_obj
def stats_cmd(config: AppConfig, index_path: Path | None, url: str | None):
    """
    Show how many records of each type the index holds.
    """
    store = _load_store(config, index_path, url)
    counts = store.index.type_counts()
    click.echo(f"{len(store.index)} searchable items")
    for t, n in counts.items():
        click.echo(f"  {t or '(none)'}: {n}")


@main.command("config")
@click.pass_obj
def config_cmd(config: AppConfig):
    """
    Print the effective configuration.
    """
    click.echo(json.dumps(config.to_dict(), indent=2, sort_keys=True))


if __name__ == "__main__":
    main()

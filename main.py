import sys
import asyncio

from loguru import logger
from rich import print
from rich.panel import Panel

from player_number.clients.league_client import LeagueClient
from player_number.config.settings import AppSettings, get_settings
from player_number.logging.setup import setup_logging
from player_number.pipeline.orchestrator import IngestionPipeline
from player_number.storage.supabase_client import SupabaseObjectStore


async def run_ingestion(settings: AppSettings) -> IngestionPipeline:
    """Runs one full snapshot refresh."""
    store = await SupabaseObjectStore.from_settings(settings)
    league_client = LeagueClient(settings)
    pipeline = IngestionPipeline(settings, league_client, store)
    try:
        await pipeline.run()
    finally:
        await league_client.close()
    return pipeline


def summary_panel(pipeline: IngestionPipeline) -> Panel:
    counts = pipeline.diagnostics.counts()
    lines = [
        f"[bold]Leagues:[/bold] {', '.join(league.value for league in pipeline.leagues)}",
    ]
    lines += [
        f"[bold]{name.capitalize()}:[/bold] {total}" for name, total in pipeline.totals.items()
    ]
    lines += [f"{kind.replace('_', ' ')}: {count}" for kind, count in counts.items()]
    return Panel("\n".join(lines), title="Ingestion complete", border_style="green")


def main() -> int:
    """Entry point for the scheduler. Exit code 0 only if every leg succeeded."""
    settings = get_settings()
    setup_logging(settings)
    logger.info("Starting snapshot ingestion")
    try:
        pipeline = asyncio.run(run_ingestion(settings))
    except KeyboardInterrupt:
        logger.info("Execution interrupted by user (KeyboardInterrupt).")
        return 130
    except Exception:
        logger.exception("Ingestion run failed.")
        return 1
    print(summary_panel(pipeline))
    return 0


if __name__ == "__main__":
    sys.exit(main())

"""Entry point: import streaming history and print the listening report"""
import json
import logging
import sys
import traceback

from listening_report.config import settings
from listening_report.db import db
from listening_report.analytics.reports import LEADERBOARDS, ReportEngine
from listening_report.models.report import ReportFilter
from listening_report.services.importer import ImportService
from listening_report.services.reporter import LEADERBOARD_FORMATTERS, Reporter
from listening_report.services.storage import StorageService

logging.basicConfig(level=getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO), format='%(message)s')
logger = logging.getLogger(__name__)

def run_reports(storage: StorageService) -> None:
    """Import new batches into the store, then print the summary and every leaderboard"""
    importer = ImportService(
        storage,
        settings.INPUT_DIR,
        suffix=settings.FILE_SUFFIX,
        marker=settings.FILE_MARKER,
        skip_imported=settings.SKIP_IMPORTED_FILES
    )
    importer.import_all()

    engine = ReportEngine(storage, ReportFilter.from_settings(settings), limit=settings.LEADERBOARD_LIMIT)
    reporter = Reporter(color=settings.COLOR_OUTPUT)

    reporter.print_summary(engine.get_total_mins_played(), engine.get_total_unique_tracks_played())
    for title, pipeline in LEADERBOARDS.items():
        reporter.print_leaderboard(title, engine.run(pipeline), LEADERBOARD_FORMATTERS[title])

def run() -> None:
    """Import all batches in INPUT_DIR, then print every report."""
    try:
        db.init()

        logger.info("Using configuration:")
        logger.info(json.dumps(settings.model_dump(exclude={'DATABASE_URL'}, mode='json'), indent=2))

        try:
            with db.session() as session:
                run_reports(StorageService(session))
        finally:
            db.dispose()

    except Exception as e:
        logger.error(f"Error during report generation: {e}")
        traceback.print_exc()
        sys.exit(1)

if __name__ == "__main__":
    run()

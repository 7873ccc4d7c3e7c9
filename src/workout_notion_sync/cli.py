"""
Command line entry point.

    workout-notion-sync create-week --sheet-owner me@example.com --sheet-title "Plan" --cell-range B2:E5
    workout-notion-sync create-day --session-cell B2 [--dry-run]
    workout-notion-sync post-workout --session-cell B2 --notion-page "10/14/2026" [--test]

Sheet owner, title and range fall back to the defaults block of config.json.
"""
import argparse
import json
import logging
import sys
from typing import List, Optional

from workout_notion_sync.auth import GoogleSheetsAuth
from workout_notion_sync.config import SyncConfig, bump_week, load_sync_config, settings
from workout_notion_sync.errors import ConfigurationMissingError, NotFoundError, SyncError
from workout_notion_sync.parsers.excel_parser import WorkbookCellSource
from workout_notion_sync.parsers.section_parser import SectionParser
from workout_notion_sync.services import sync_service
from workout_notion_sync.services.notion_service import NotionService
from workout_notion_sync.services.sheets_service import GoogleSheetsService

logger = logging.getLogger("workout_notion_sync")

DRY_RUN_OUTPUT = "dry-run-output.json"


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="workout-notion-sync",
        description="Sync workout plans between Google Sheets and Notion",
    )
    parser.add_argument("--config", default=None, help="Path to config.json")
    sub = parser.add_subparsers(dest="command", required=True)

    week = sub.add_parser("create-week", help="Create a weekly workout page from a cell range")
    week.add_argument("--sheet-owner", help="Google Sheets owner email")
    week.add_argument("--sheet-title", help="Google Sheets document title")
    week.add_argument("--cell-range", help="Cell range to extract (e.g., B2:E5)")
    week.add_argument("--workbook", help="Read the range from a local .xlsx instead of Google Sheets")

    day = sub.add_parser("create-day", help="Create a daily workout page from a single cell")
    day.add_argument("--sheet-owner", help="Google Sheets owner email")
    day.add_argument("--sheet-title", help="Google Sheets document title")
    day.add_argument("--session-cell", help="Single cell reference (e.g., B2)")
    day.add_argument("--dry-run", action="store_true",
                     help=f"Write parsed data to {DRY_RUN_OUTPUT} instead of creating a page")

    post = sub.add_parser("post-workout", help="Post Notion workout feedback to a sheet cell note")
    post.add_argument("--session-cell", help="Cell reference (e.g., B2)")
    post.add_argument("--notion-page", help="Title of the nested Notion page")
    post.add_argument("--sheet-owner", help="Google Sheets owner email")
    post.add_argument("--sheet-title", help="Google Sheets document title")
    post.add_argument("--test", action="store_true", help="Print the content instead of posting it")

    return parser


def _require(**values: Optional[str]) -> None:
    missing = [name.replace("_", "-") for name, value in values.items() if not value]
    if missing:
        raise ConfigurationMissingError(
            "Missing required arguments: " + ", ".join(f"--{m}" for m in missing)
            + " (sheet-owner, sheet-title and cell-range can be set as defaults in config.json)"
        )


def run_create_week(args: argparse.Namespace, config: SyncConfig) -> str:
    sheet_owner = args.sheet_owner or config.defaults.sheet_owner
    sheet_title = args.sheet_title or config.defaults.sheet_title
    cell_range = args.cell_range or config.defaults.cell_range

    if args.workbook:
        _require(sheet_title=sheet_title, cell_range=cell_range)
        if not WorkbookCellSource.can_read(args.workbook):
            raise ConfigurationMissingError(f"Unsupported workbook type: {args.workbook}")
        logger.info(f"Extracting data from {args.workbook} range: {cell_range}")
        grid = WorkbookCellSource().get_range(args.workbook, cell_range)
    else:
        _require(sheet_owner=sheet_owner, sheet_title=sheet_title, cell_range=cell_range)
        sheets = GoogleSheetsService(GoogleSheetsAuth())
        sheet = sync_service.locate_sheet(sheets, sheet_owner, sheet_title)
        logger.info(f"Extracting data from range: {cell_range}")
        grid = sheets.get_range(sheet.id, cell_range)

    sessions = sync_service.read_week_sessions(grid)
    logger.info(f"Found {len(sessions)} workout sessions")

    notion = NotionService.from_config(config)
    page_id = sync_service.create_week_page(notion, sheet_title, sessions, week=config.week + 1)
    bump_week(args.config)
    return page_id


def run_create_day(args: argparse.Namespace, config: SyncConfig) -> Optional[str]:
    sheet_owner = args.sheet_owner or config.defaults.sheet_owner
    sheet_title = args.sheet_title or config.defaults.sheet_title
    _require(sheet_owner=sheet_owner, sheet_title=sheet_title, session_cell=args.session_cell)

    sheets = GoogleSheetsService(GoogleSheetsAuth())
    sheet = sync_service.locate_sheet(sheets, sheet_owner, sheet_title)

    logger.info(f"Extracting data from cell: {args.session_cell}")
    cell_text = sync_service.first_cell_text(sheets.get_range(sheet.id, args.session_cell))
    if cell_text is None:
        raise NotFoundError(f"No data found in cell {args.session_cell}")

    session = SectionParser.parse_single_cell(cell_text)
    logger.info(f"Found workout session with {len(session.sections)} sections")

    if args.dry_run:
        output = {"raw_content": cell_text, "parsed": session.model_dump(mode="json")}
        with open(DRY_RUN_OUTPUT, "w", encoding="utf-8") as f:
            json.dump(output, f, indent=2)
        logger.info(f"Dry run complete. Output written to {DRY_RUN_OUTPUT}")
        return None

    notion = NotionService.from_config(config)
    return sync_service.create_day_page(notion, session)


def run_post_workout(args: argparse.Namespace, config: SyncConfig) -> Optional[str]:
    sheet_owner = args.sheet_owner or config.defaults.sheet_owner
    sheet_title = args.sheet_title or config.defaults.sheet_title
    _require(sheet_owner=sheet_owner, sheet_title=sheet_title,
             notion_page=args.notion_page, session_cell=args.session_cell)

    notion = NotionService.from_config(config)
    content = sync_service.collect_feedback(notion, args.notion_page)

    if args.test:
        print("\n=== TEST MODE OUTPUT ===")
        for part in (content.overall_notes, content.lower_body, content.upper_body):
            if part:
                print(f"\n{part}")
        print("\n=== End Test Output ===")
        return None

    sheets = GoogleSheetsService(GoogleSheetsAuth())
    sheet = sync_service.locate_sheet(sheets, sheet_owner, sheet_title)
    return sync_service.post_feedback(sheets, sheet.id, args.session_cell, content)


COMMANDS = {
    "create-week": run_create_week,
    "create-day": run_create_day,
    "post-workout": run_post_workout,
}


def main(argv: Optional[List[str]] = None) -> int:
    logging.basicConfig(
        level=getattr(logging, settings.LOG_LEVEL, logging.INFO),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )
    args = build_parser().parse_args(argv)

    try:
        config = load_sync_config(args.config)
        result = COMMANDS[args.command](args, config)
    except (SyncError, ValueError) as e:
        logger.error(str(e))
        return 1

    if result and args.command != "post-workout":
        logger.info(f"Successfully created Notion page: {result}")
    elif result:
        logger.info("Successfully posted workout content as a cell note")
    return 0


if __name__ == "__main__":
    sys.exit(main())

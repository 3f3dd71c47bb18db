#!/usr/bin/env python3
"""
Google Drive Folder Cleaner
===========================
A command-line tool to find a Drive folder and permanently remove every
file underneath it, leaving the folder hierarchy in place.

Usage:
    python3 drive_cleaner.py --list --name "Backup"     # Search folders by name
    python3 drive_cleaner.py --plan <FOLDER_ID>         # Show the delete plan
    python3 drive_cleaner.py --clear <FOLDER_ID>        # Remove the planned files
    python3 drive_cleaner.py --clear <ID> --simulate    # Dry run
"""

import argparse
import sys

from config import load_config
from core.executor import PlanExecutor
from core.indexer import FolderIndexer
from core.planner import PlanBuilder
from core.report import (
    format_folders, format_plan, format_log, summarize_plan, summarize_log, save_report
)
from core.safety import SafetyMonitor, SafetyException, NothingToDeleteError
from logger_setup import setup_logger, format_api_error
from providers.google_provider import GoogleDriveClient
from providers.interface import TransportError
from providers.local_provider import LocalDriveClient
from utils import ProgressBar

logger, _ = setup_logger("drive_cleaner")


def print_header():
    """Print application header."""
    print()
    print("╔══════════════════════════════════════════════════════════════╗")
    print("║        📁 GOOGLE DRIVE FOLDER CLEANER                        ║")
    print("╚══════════════════════════════════════════════════════════════╝")
    print()


def print_section(title):
    """Print a section header."""
    print(f"\n{'─' * 60}")
    print(f"  {title}")
    print(f"{'─' * 60}")


def connect(args, config):
    """Return a Drive client, or None if it could not be created."""
    if args.local:
        print(f"📂 Using local folder: {args.local}")
        return LocalDriveClient(args.local, page_size=config["page_size"])

    # Imported lazily, the auth module is only needed for the real Drive
    from google_service import connect_google

    service, message = connect_google(config)
    if service is None:
        print(f"❌ Error: {message}")
        return None
    print(f"✅ {message}")
    return GoogleDriveClient(service, page_size=config["page_size"])


def list_folders(client, config, search_name, search_id):
    indexer = FolderIndexer(client, max_folders=config["max_folders"])
    listing = indexer.list_folders(search_name, search_id)

    print_section("FOLDERS")
    if not listing.entries:
        print("\n   Search found no folders")
    else:
        print()
        for line in format_folders(listing.entries):
            print(f"   {line}")
        print(f"\n   Total: {len(listing.entries)} folder(s)")

    if listing.truncated:
        print(f"\n⚠️  The number of folders exceeds the allowed maximum of {indexer.max_folders}. "
              "You may need to refine the search criteria")
    return listing


def resolve_folder_name(client, config, folder_id, folder_name):
    if folder_name:
        return folder_name
    indexer = FolderIndexer(client, max_folders=config["max_folders"])
    listing = indexer.list_folders(search_id=folder_id)
    if listing.entries:
        return listing.entries[0].name
    if listing.truncated:
        # the folder may exist beyond the index cap, let the plan decide
        print(f"\n⚠️  Folder not among the first {indexer.max_folders} indexed folders, "
              "using its id as name. Pass --folder-name to set one")
        return folder_id
    return None


def build_plan(client, folder_name, folder_id):
    progress = ProgressBar("Examining folder contents")
    plan = PlanBuilder(client).build_plan(folder_name, folder_id, progress)
    summary = summarize_plan(plan)
    progress.finish(f"Examined {summary.folders_examined:,} folders")

    print_section("DELETE PLAN")
    print()
    for line in format_plan(plan):
        print(f"   {line}")
    print(f"\n   Number of files to be removed: {summary.files_to_delete}  "
          f"({summary.folders_examined} folders examined)")
    return plan


def confirm_deletion(count):
    """Get user confirmation for deletion."""
    print_section("⚠️  DELETION WARNING")

    print(f"""
   You are about to remove {count} file(s).

   • Files are deleted permanently, they do NOT go to the Drive trash
   • Folders are kept
   • This action requires explicit confirmation
""")

    print("   Type 'DELETE' to confirm (or anything else to cancel): ", end="")
    response = input().strip()

    return response == "DELETE"


def clear_files(client, plan, simulate):
    print_section("SIMULATING" if simulate else "REMOVING FILES")
    progress = ProgressBar("Clearing folder contents per plan")
    log = PlanExecutor(client).execute(plan, simulate=simulate, progress=progress)
    summary = summarize_log(log)
    progress.finish(f"Processed {len(log):,} files")

    print()
    for line in format_log(log):
        print(f"   {line}")

    print_section("SUMMARY")
    print(f"\n   ✅ Removed: {summary.deleted}")
    if summary.failed:
        print(f"   ❌ {summary.failed} issues found. Please review the issues")
    else:
        print("   Clean up operation is successful")
    return log


def main(argv=None):
    parser = argparse.ArgumentParser(
        description="Remove every file underneath a Google Drive folder",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  python3 drive_cleaner.py --list                          # List all folders
  python3 drive_cleaner.py --list --name "Old"             # Search by name
  python3 drive_cleaner.py --plan 1AbC...                  # Show delete plan
  python3 drive_cleaner.py --clear 1AbC... --simulate      # Dry run
  python3 drive_cleaner.py --clear /tmp --local ~/scratch  # Local folder
        """
    )

    group = parser.add_mutually_exclusive_group(required=True)
    group.add_argument("--list", action="store_true", help="Search folders")
    group.add_argument("--plan", metavar="FOLDER_ID", help="Build and show the delete plan for a folder")
    group.add_argument("--clear", metavar="FOLDER_ID", help="Build the plan and remove its files")

    parser.add_argument("--name", help="Folder name contains (case-sensitive), for --list")
    parser.add_argument("--id", dest="search_id", help="Exact folder id, for --list")
    parser.add_argument("--folder-name", help="Display name of the selected folder")
    parser.add_argument("--simulate", action="store_true", help="Do not actually delete anything")
    parser.add_argument("--yes", action="store_true", help="Skip the confirmation prompt")
    parser.add_argument("--local", metavar="PATH", help="Work on a local directory instead of Google Drive")
    parser.add_argument("--config", default="config.json", help="Configuration file")

    args = parser.parse_args(argv)
    config = load_config(args.config)

    print_header()
    client = connect(args, config)
    if client is None:
        return 1

    try:
        if args.list:
            list_folders(client, config, args.name or None, args.search_id or None)
            return 0

        folder_id = args.plan if args.plan is not None else args.clear
        folder_name = resolve_folder_name(client, config, folder_id, args.folder_name)
        if folder_name is None:
            print(f"\n❌ Invalid folder: {folder_id}")
            return 1

        plan = build_plan(client, folder_name, folder_id)
        SafetyMonitor(
            max_deletions=config["max_deletions"],
            protected_names=config["protected_names"]
        ).analyze_plan(plan)
        plan_report = save_report("plan", folder_name, format_plan(plan), config["report_dir"])
        print(f"\n📄 Report saved: {plan_report}")

        if args.plan is not None:
            print("\n💡 To remove these files, run:")
            print(f'   python3 drive_cleaner.py --clear "{folder_id}"')
            return 0

        if not args.simulate and not args.yes:
            if not confirm_deletion(summarize_plan(plan).files_to_delete):
                print("\n❌ Deletion cancelled.")
                return 0

        log = clear_files(client, plan, args.simulate)
        log_report = save_report("log", folder_name, format_log(log), config["report_dir"])
        print(f"\n📄 Report saved: {log_report}")
        return 0

    except NothingToDeleteError as e:
        print(f"\n✅ {e}")
        return 0
    except SafetyException as e:
        print(f"\n❌ {e}")
        return 1
    except TransportError as e:
        logger.error(format_api_error(e))
        print(f"\n❌ Unable to complete the operation: {e}")
        return 1


if __name__ == "__main__":
    sys.exit(main())

"""Command-line entry point for adnamer."""

import argparse
import asyncio
import logging
import sys
from typing import List, Optional

from rich.console import Console
from rich.markup import escape
from rich.prompt import Confirm, Prompt
from rich.table import Table

from adnamer.models.naming import Multiplier
from adnamer.models.video import ProcessingStatus, VideoProposal
from adnamer.services.drive_service import DriveService
from adnamer.services.filename_composer import NAMING_CONVENTION
from adnamer.services.folder_reference import resolve_folder_reference
from adnamer.utils.config import (
    CREATOR_CODES,
    build_naming_config,
    build_naming_rules,
    load_config,
    setup_logging,
    validate_config,
)
from adnamer.utils.errors import InvalidReference, PartialRenameFailure, Unauthenticated
from adnamer.utils.media import check_ffmpeg

logger = logging.getLogger(__name__)

console = Console()

EXIT_OK = 0
EXIT_FAILURE = 1
EXIT_USAGE = 2
EXIT_UNAUTHENTICATED = 3


def build_parser() -> argparse.ArgumentParser:
    """Construct the CLI entry point with subcommands."""
    parser = argparse.ArgumentParser(
        prog="adnamer",
        description="Name ad videos in a Google Drive folder from their transcripts.",
    )
    parser.add_argument("--log-level", default=None, help="Logging level (default: LOG_LEVEL or INFO).")
    subparsers = parser.add_subparsers(dest="command")

    folders_parser = subparsers.add_parser("folders", help="List the subfolders of a Drive folder.")
    folders_parser.add_argument(
        "--parent",
        default="root",
        help="Folder URL or ID to browse (default: My Drive).",
    )

    subparsers.add_parser("codes", help="Show the naming convention, creator and multiplier codes.")
    subparsers.add_parser("check", help="Check configuration, credentials and ffmpeg.")

    process_parser = subparsers.add_parser(
        "process",
        help="Propose names for the videos in a folder and optionally rename them.",
    )
    process_parser.add_argument("folder", help="Drive folder URL or ID.")
    process_parser.add_argument(
        "-c",
        "--creator",
        choices=sorted(CREATOR_CODES),
        help="Creator code (default: CREATOR_CODE).",
    )
    process_parser.add_argument(
        "-s",
        "--start",
        type=int,
        help="Lowest sequence number to hand out (default: STARTING_SEQUENCE).",
    )
    process_parser.add_argument(
        "-m",
        "--multiplier",
        choices=[m.value for m in Multiplier],
        help="Multiplier used when the transcript mentions none (default: DEFAULT_MULTIPLIER).",
    )
    process_parser.add_argument(
        "-w",
        "--width",
        type=int,
        help="Zero-padding width of the sequence number (default: SEQUENCE_WIDTH).",
    )
    process_parser.add_argument(
        "--edit",
        action="store_true",
        help="Review and edit each proposed name before renaming.",
    )
    process_parser.add_argument(
        "--rename",
        action="store_true",
        help="Rename the files in Drive after proposing names.",
    )
    process_parser.add_argument(
        "-y",
        "--yes",
        action="store_true",
        help="Do not ask for confirmation before renaming.",
    )

    return parser


def render_proposals(proposals: List[VideoProposal]) -> Table:
    table = Table(title="Proposed names")
    table.add_column("Original Name")
    table.add_column("Suggested Name", style="cyan")
    table.add_column("Duration", justify="right")
    table.add_column("TTS", justify="center")
    table.add_column("Status")

    for proposal in proposals:
        classification = proposal.classification
        if proposal.error:
            suggested = f"[red]{escape(proposal.error)}[/red]"
        else:
            suggested = escape(proposal.suggested_name or "-")
            if proposal.proposed_name and proposal.proposed_name.manually_edited:
                suggested += " [yellow](edited)[/yellow]"

        tts = "-"
        if classification is not None:
            tts = "[green]✓[/green]" if classification.is_safe else "[red]✕[/red]"

        status = proposal.status.value
        if proposal.warning:
            status += f" [yellow]({escape(proposal.warning)})[/yellow]"

        table.add_row(
            escape(proposal.current_name),
            suggested,
            f"{proposal.duration_seconds}s" if proposal.duration_seconds else "-",
            tts,
            status,
        )
    return table


def edit_proposals(proposals: List[VideoProposal]) -> None:
    """Let the user override proposed names one by one."""
    for proposal in proposals:
        if proposal.status != ProcessingStatus.READY or proposal.proposed_name is None:
            continue
        console.print(f"\n[bold]{escape(proposal.current_name)}[/bold]")
        new_name = Prompt.ask("New name", default=proposal.suggested_name, console=console)
        try:
            proposal.proposed_name.edit(new_name)
        except ValueError as e:
            console.print(f"[red]{escape(str(e))}[/red] keeping {escape(proposal.suggested_name)}")


def cmd_codes(args: argparse.Namespace, config: dict) -> int:
    rules = build_naming_rules(config)
    console.print(f"[bold]Naming convention:[/bold] {NAMING_CONVENTION}")
    unsafe = rules.unsafe_label or "omitted"
    console.print(f"Safety label: '{rules.safe_label}' when TikTok safe, {unsafe} otherwise")

    creators = Table(title="Creator codes")
    creators.add_column("Code")
    creators.add_column("Creator")
    for code, label in CREATOR_CODES.items():
        creators.add_row(code, label)
    console.print(creators)

    multipliers = Table(title="Multiplier codes")
    multipliers.add_column("Code")
    multipliers.add_column("Meaning")
    for multiplier in Multiplier:
        multipliers.add_row(multiplier.value, multiplier.label)
    console.print(multipliers)
    return EXIT_OK


def cmd_check(args: argparse.Namespace, config: dict) -> int:
    errors = validate_config(config)
    tools = check_ffmpeg()

    table = Table(title="adnamer health check")
    table.add_column("Check")
    table.add_column("Status")
    has_credentials = bool(config.get("google_client_id") and config.get("google_client_secret"))
    table.add_row("Google OAuth client", "ok" if has_credentials else "missing")
    table.add_row("Whisper model", config.get("whisper_model", "base"))
    for tool, available in tools.items():
        table.add_row(tool, "ok" if available else "not found on PATH")
    console.print(table)

    for error in errors:
        console.print(f"[red]{error}[/red]")
    if errors or not all(tools.values()):
        return EXIT_USAGE
    return EXIT_OK


def cmd_folders(args: argparse.Namespace, config: dict) -> int:
    parent_id = resolve_folder_reference(args.parent)
    drive = DriveService(
        config.get("google_client_id"),
        config.get("google_client_secret"),
        config.get("google_token_path", "token.json"),
    )
    folders = drive.list_folders(parent_id)
    if not folders:
        console.print("No folders found")
        return EXIT_OK

    table = Table(title=f"Folders in {parent_id}")
    table.add_column("ID")
    table.add_column("Name")
    for folder in folders:
        table.add_row(folder.id, escape(folder.name))
    console.print(table)
    return EXIT_OK


async def run_process(args: argparse.Namespace, config: dict) -> int:
    from adnamer.rename_processor import RenameProcessor

    # Reject a bad folder before loading Whisper or signing in
    resolve_folder_reference(args.folder)
    naming_config = build_naming_config(
        config,
        creator_code=args.creator,
        starting_sequence=args.start,
        default_multiplier=args.multiplier,
    )
    processor = RenameProcessor(config, rules=build_naming_rules(config, args.width))

    proposals = await processor.process_folder(args.folder, naming_config)
    if not proposals:
        console.print("No videos found in folder")
        return EXIT_OK

    console.print(render_proposals(proposals))

    if args.edit:
        edit_proposals(proposals)
        console.print(render_proposals(proposals))

    if not args.rename:
        return EXIT_OK

    pending = [p for p in proposals if p.is_renamable]
    if not pending:
        console.print("Nothing to rename")
        return EXIT_OK
    if not args.yes and not Confirm.ask(f"Rename {len(pending)} files?", console=console):
        return EXIT_OK

    result = processor.rename_all(proposals)
    try:
        result.raise_for_failures()
    except PartialRenameFailure as e:
        console.print(f"[red]{escape(str(e))}[/red]")
        if args.yes or not Confirm.ask("Retry the failed files?", console=console):
            return EXIT_FAILURE
        result = processor.retry_failed(proposals, e.result.failed_ids)
        if result.has_failures:
            console.print(f"[red]Still failing: {', '.join(sorted(result.failed_ids))}[/red]")
            return EXIT_FAILURE

    console.print(f"[green]Successfully renamed {result.renamed_count} files![/green]")
    return EXIT_OK


def run_cli(args: argparse.Namespace, config: dict) -> int:
    try:
        if args.command == "codes":
            return cmd_codes(args, config)
        if args.command == "check":
            return cmd_check(args, config)
        if args.command == "folders":
            return cmd_folders(args, config)
        if args.command == "process":
            return asyncio.run(run_process(args, config))
    except InvalidReference as e:
        logger.error(str(e))
        return EXIT_USAGE
    except Unauthenticated as e:
        logger.error(f"Authentication required: {e}")
        return EXIT_UNAUTHENTICATED
    except ValueError as e:
        logger.error(str(e))
        return EXIT_USAGE
    return EXIT_USAGE


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point."""
    parser = build_parser()
    args = parser.parse_args(argv)
    if not args.command:
        parser.print_help()
        return EXIT_USAGE

    config = load_config()
    setup_logging(args.log_level or config.get("log_level", "INFO"))

    try:
        return run_cli(args, config)
    except KeyboardInterrupt:
        logger.info("Interrupted by user")
        return EXIT_FAILURE
    except Exception as e:
        logger.error(f"Application error: {e}")
        return EXIT_FAILURE


if __name__ == "__main__":
    sys.exit(main())

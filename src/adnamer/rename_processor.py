"""Main adnamer class for orchestrating the naming workflow."""

import asyncio
import logging
import mimetypes
import time
from pathlib import Path
from typing import Dict, Iterable, List, Optional, Set

from adnamer.models.naming import NamingConfig, NamingRules
from adnamer.models.video import (
    BatchRenameResult,
    ClassificationResult,
    ProcessingStatus,
    ProposedName,
    RenameRequest,
    VideoCandidate,
    VideoProposal,
)
from adnamer.services.classifier import TranscriptClassifier
from adnamer.services.filename_composer import FilenameComposer
from adnamer.services.folder_reference import resolve_folder_reference
from adnamer.services.sequence_allocator import SequenceAllocator
from adnamer.utils.config import (
    build_naming_rules,
    get_supported_video_formats,
    load_config,
    validate_config,
)
from adnamer.utils.errors import ClassificationUnavailable, Unauthenticated
from adnamer.utils.media import probe_duration

logger = logging.getLogger(__name__)


class RenameProcessor:
    """Central orchestrator for adnamer."""

    def __init__(self, config: Optional[Dict] = None, drive_service=None,
                 transcription_service=None, rules: Optional[NamingRules] = None):
        """Initialize the processor with configuration.

        Collaborators that are not passed in are built from the configuration.
        """
        self.config = config or load_config()

        if drive_service is None:
            config_errors = validate_config(self.config)
            if config_errors:
                error_msg = "Configuration errors: " + "; ".join(config_errors)
                logger.error(error_msg)
                raise ValueError(error_msg)

            from adnamer.services.drive_service import DriveService
            drive_service = DriveService(
                self.config.get("google_client_id"),
                self.config.get("google_client_secret"),
                self.config.get("google_token_path", "token.json"),
            )
        self.drive_service = drive_service

        if transcription_service is None:
            from adnamer.services.transcription import TranscriptionService
            transcription_service = TranscriptionService(self.config.get("whisper_model", "base"))
        self.transcription_service = transcription_service

        self.rules = rules or build_naming_rules(self.config)
        self.classifier = TranscriptClassifier(self.rules)
        self.composer = FilenameComposer(self.rules)

        self.download_dir = Path(self.config.get("download_dir") or "downloads")
        self.max_concurrent_videos = max(int(self.config.get("max_concurrent_videos", 2)), 1)

        logger.info("adnamer initialized successfully")

    async def process_folder(self, folder_reference: str,
                             naming_config: NamingConfig) -> List[VideoProposal]:
        """Propose a new name for every video in a folder.

        Args:
            folder_reference: Folder URL or ID typed by the user
            naming_config: Creator code, starting sequence and default multiplier

        Returns:
            One VideoProposal per listed video, in listing order

        Raises:
            InvalidReference: If the folder reference cannot be parsed
        """
        folder_id = resolve_folder_reference(folder_reference)
        start_time = time.time()
        logger.info(f"Processing folder: {folder_id}")

        loop = asyncio.get_running_loop()
        candidates = await loop.run_in_executor(None, self.drive_service.list_videos, folder_id)
        proposals = [VideoProposal(candidate=c) for c in candidates]
        if not proposals:
            logger.warning(f"No videos found in folder {folder_id}")
            return proposals

        semaphore = asyncio.Semaphore(self.max_concurrent_videos)

        async def bounded(proposal: VideoProposal) -> None:
            async with semaphore:
                try:
                    await self.classify_video(proposal, naming_config)
                except Unauthenticated:
                    raise
                except Exception as e:
                    logger.error(f"Failed to process {proposal.current_name}: {e}")
                    proposal.update_status(ProcessingStatus.FAILED, f"Failed to process: {e}")

        await asyncio.gather(*(bounded(p) for p in proposals))

        await self.assign_names(proposals, naming_config, folder_id)

        ready = sum(1 for p in proposals if p.status == ProcessingStatus.READY)
        logger.info(
            f"Proposed names for {ready}/{len(proposals)} videos in "
            f"{self._format_processing_time(time.time() - start_time)}"
        )
        return proposals

    async def classify_video(self, proposal: VideoProposal, naming_config: NamingConfig) -> None:
        """Download, measure, transcribe and classify one video.

        A failed download marks the video failed; a failed transcription only
        falls back to the safe default classification.
        """
        candidate = proposal.candidate
        proposal.update_status(ProcessingStatus.PROCESSING)
        logger.info(f"Processing video: {candidate.display_name}")

        loop = asyncio.get_running_loop()
        local_path = self._download_path(candidate)
        try:
            try:
                await loop.run_in_executor(
                    None, self.drive_service.download_file, candidate.id, str(local_path)
                )
            except Unauthenticated:
                raise
            except Exception as e:
                logger.error(f"Error downloading video {candidate.display_name}: {e}")
                proposal.update_status(ProcessingStatus.FAILED, f"Failed to download video: {e}")
                return

            proposal.duration_seconds = candidate.known_duration_seconds
            if not proposal.duration_seconds:
                proposal.duration_seconds = await loop.run_in_executor(
                    None, probe_duration, str(local_path)
                )

            try:
                proposal.transcript = await self.transcription_service.transcribe_audio(str(local_path))
                proposal.classification = self.classifier.classify(
                    proposal.transcript, naming_config.default_multiplier
                )
            except ClassificationUnavailable as e:
                logger.warning(f"No transcript for {candidate.display_name}, using defaults: {e}")
                proposal.transcript = ""
                proposal.warning = f"Transcription unavailable: {e}"
                proposal.classification = ClassificationResult.default(
                    naming_config.default_multiplier, self.rules.fallback_description
                )

            proposal.update_status(ProcessingStatus.READY)
            logger.info(
                f"Classified {candidate.display_name}: multiplier={proposal.classification.multiplier_code} "
                f"safe={proposal.classification.is_safe} description={proposal.classification.description}"
            )

        finally:
            local_path.unlink(missing_ok=True)

    async def assign_names(self, proposals: List[VideoProposal], naming_config: NamingConfig,
                           folder_id: str) -> None:
        """Allocate sequences and compose names for every classified video.

        The existing-name snapshot is fetched right before allocation and
        grows with each allocation so videos in the batch never collide.
        """
        loop = asyncio.get_running_loop()
        existing_names = await loop.run_in_executor(
            None, self.drive_service.list_file_names, folder_id
        )
        allocator = SequenceAllocator(existing_names, naming_config.starting_sequence)

        for proposal in proposals:
            if proposal.status != ProcessingStatus.READY or proposal.classification is None:
                continue
            classification = proposal.classification
            proposal.sequence = allocator.allocate(classification.multiplier)
            name = self.composer.compose(
                classification.multiplier,
                proposal.sequence,
                classification.is_safe,
                naming_config.creator_code,
                classification.description,
                proposal.duration_seconds,
            )
            # Regeneration replaces any manual edit
            proposal.proposed_name = ProposedName(source_id=proposal.file_id, composed_string=name)

    async def regenerate(self, proposals: List[VideoProposal], naming_config: NamingConfig,
                         folder_reference: str) -> List[VideoProposal]:
        """Re-derive names from a fresh snapshot, discarding manual edits."""
        folder_id = resolve_folder_reference(folder_reference)
        await self.assign_names(proposals, naming_config, folder_id)
        return proposals

    def rename_all(self, proposals: Iterable[VideoProposal],
                   only_ids: Optional[Set[str]] = None) -> BatchRenameResult:
        """Apply every ready proposal whose name changed.

        Args:
            proposals: Proposals from process_folder, possibly edited
            only_ids: Restrict the batch to these file IDs (manual retry)

        Returns:
            Rename count and the IDs that failed
        """
        by_id = {}
        requests = []
        for proposal in proposals:
            if not proposal.is_renamable:
                continue
            if only_ids is not None and proposal.file_id not in only_ids:
                continue
            by_id[proposal.file_id] = proposal
            requests.append(RenameRequest(proposal.file_id, proposal.suggested_name))

        if not requests:
            logger.info("Nothing to rename")
            return BatchRenameResult()

        logger.info(f"Renaming {len(requests)} files")
        result = self.drive_service.rename_files(requests)

        for file_id, proposal in by_id.items():
            if file_id in result.failed_ids:
                continue
            proposal.candidate = VideoCandidate(
                id=proposal.candidate.id,
                display_name=proposal.suggested_name,
                media_type=proposal.candidate.media_type,
                known_duration_seconds=proposal.candidate.known_duration_seconds,
            )
            proposal.update_status(ProcessingStatus.RENAMED)

        if result.has_failures:
            logger.warning(
                f"Renamed {result.renamed_count} files, {len(result.failed_ids)} failed"
            )
        else:
            logger.info(f"Successfully renamed {result.renamed_count} files")
        return result

    def retry_failed(self, proposals: Iterable[VideoProposal],
                     failed_ids: Set[str]) -> BatchRenameResult:
        """Re-send only the renames that failed in a previous batch."""
        return self.rename_all(proposals, only_ids=set(failed_ids))

    def _download_path(self, candidate: VideoCandidate) -> Path:
        suffix = Path(candidate.display_name).suffix.lower()
        if suffix not in get_supported_video_formats():
            suffix = mimetypes.guess_extension(candidate.media_type or "") or ".mp4"
            if suffix not in get_supported_video_formats():
                suffix = ".mp4"
        return self.download_dir / f"video-{candidate.id}-{int(time.time() * 1000)}{suffix}"

    def _format_processing_time(self, seconds: float) -> str:
        """Format processing time in human-readable format."""
        if seconds < 60:
            return f"{seconds:.1f} seconds"
        elif seconds < 3600:
            return f"{seconds/60:.1f} minutes"
        else:
            return f"{seconds/3600:.1f} hours"

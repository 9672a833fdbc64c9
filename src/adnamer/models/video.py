"""Video-related data models."""

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional, Set

from adnamer.models.naming import Multiplier
from adnamer.utils.errors import PartialRenameFailure


class ProcessingStatus(Enum):
    """Status enumeration for a video within one naming session."""
    PENDING = "pending"
    PROCESSING = "processing"
    READY = "ready"
    FAILED = "failed"
    RENAMED = "renamed"


@dataclass(frozen=True)
class DriveFolder:
    """A folder entry returned while browsing Drive."""

    id: str
    name: str


@dataclass(frozen=True)
class VideoCandidate:
    """Represents a video file listed from a Drive folder."""

    id: str
    display_name: str
    media_type: str
    known_duration_seconds: int = 0  # 0 when Drive has no media metadata


@dataclass(frozen=True)
class ClassificationResult:
    """Transcript-derived naming facts."""

    is_safe: bool
    description: str
    multiplier: Multiplier

    @property
    def multiplier_code(self) -> str:
        return self.multiplier.value

    @classmethod
    def default(cls, multiplier: Multiplier = Multiplier.EVERGREEN,
                description: str = "Ad") -> 'ClassificationResult':
        """Safe fallback used when no transcript is available."""
        return cls(is_safe=True, description=description, multiplier=multiplier)


@dataclass
class ProposedName:
    """A composed filename, optionally overridden by hand before commit."""

    source_id: str
    composed_string: str
    manually_edited: bool = False

    def edit(self, new_name: str) -> None:
        new_name = new_name.strip()
        if not new_name:
            raise ValueError("Filename must not be empty")
        if "/" in new_name or "\\" in new_name:
            raise ValueError(f"Filename must not contain path separators: {new_name}")
        if new_name != self.composed_string:
            self.composed_string = new_name
            self.manually_edited = True


@dataclass
class VideoProposal:
    """Per-video session state from listing through rename."""

    candidate: VideoCandidate
    status: ProcessingStatus = ProcessingStatus.PENDING
    duration_seconds: int = 0
    transcript: Optional[str] = None
    classification: Optional[ClassificationResult] = None
    sequence: Optional[int] = None
    proposed_name: Optional[ProposedName] = None
    warning: Optional[str] = None  # soft error, naming still proceeds
    error: Optional[str] = None  # hard error, excluded from rename

    @property
    def file_id(self) -> str:
        return self.candidate.id

    @property
    def current_name(self) -> str:
        return self.candidate.display_name

    @property
    def suggested_name(self) -> Optional[str]:
        return self.proposed_name.composed_string if self.proposed_name else None

    @property
    def is_renamable(self) -> bool:
        return (
            self.status == ProcessingStatus.READY
            and self.proposed_name is not None
            and self.suggested_name != self.current_name
        )

    def update_status(self, new_status: ProcessingStatus, error: Optional[str] = None) -> None:
        self.status = new_status
        if error:
            self.error = error


@dataclass(frozen=True)
class RenameRequest:
    """One `{id, newName}` pair sent to the storage provider."""

    file_id: str
    new_name: str


@dataclass(frozen=True)
class RenameOutcome:
    source_id: str
    succeeded: bool


@dataclass
class BatchRenameResult:
    """Aggregated result of a rename batch."""

    renamed_count: int = 0
    failed_ids: Set[str] = field(default_factory=set)

    @classmethod
    def from_outcomes(cls, outcomes) -> 'BatchRenameResult':
        result = cls()
        for outcome in outcomes:
            if outcome.succeeded:
                result.renamed_count += 1
            else:
                result.failed_ids.add(outcome.source_id)
        return result

    @property
    def has_failures(self) -> bool:
        return bool(self.failed_ids)

    def raise_for_failures(self) -> None:
        """Raise PartialRenameFailure if any item in the batch failed."""
        if self.failed_ids:
            raise PartialRenameFailure(self)

from adnamer.main import EXIT_OK, EXIT_USAGE, build_parser, render_proposals, run_cli
from adnamer.models.naming import Multiplier
from adnamer.models.video import (
    ClassificationResult,
    ProcessingStatus,
    ProposedName,
    VideoCandidate,
    VideoProposal,
)


def test_parser_process_options():
    args = build_parser().parse_args([
        "process", "https://drive.google.com/drive/folders/ABC123",
        "--creator", "6", "--start", "4", "--multiplier", "0001", "--width", "4", "--rename", "-y",
    ])
    assert args.command == "process"
    assert args.creator == "6"
    assert args.start == 4
    assert args.multiplier == "0001"
    assert args.width == 4
    assert args.rename and args.yes and not args.edit


def test_codes_command(capsys):
    args = build_parser().parse_args(["codes"])
    assert run_cli(args, {}) == EXIT_OK
    out = capsys.readouterr().out
    assert "0001" in out
    assert "LAZ" in out


def test_folders_with_invalid_parent_is_usage_error():
    args = build_parser().parse_args(["folders", "--parent", "not a url"])
    assert run_cli(args, {}) == EXIT_USAGE


def test_render_proposals_rows():
    ready = VideoProposal(
        candidate=VideoCandidate("a", "IMG_[1].mp4", "video/mp4", 30),
        status=ProcessingStatus.READY,
        duration_seconds=30,
        classification=ClassificationResult(True, "BestDeal", Multiplier.DOUBLE),
        proposed_name=ProposedName("a", "200001.TTS.0.BestDeal.30sec.mp4"),
    )
    failed = VideoProposal(
        candidate=VideoCandidate("b", "IMG_2.mp4", "video/mp4"),
        status=ProcessingStatus.FAILED,
        error="Failed to download video: [Errno 104]",
    )
    table = render_proposals([ready, failed])
    assert table.row_count == 2


def test_process_with_zero_start_is_usage_error():
    args = build_parser().parse_args(["process", "FOLDER1", "--start", "0"])
    assert run_cli(args, {}) == EXIT_USAGE

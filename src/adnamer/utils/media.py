"""ffmpeg helpers for media inspection."""

import logging
import shutil
import subprocess
from pathlib import Path
from typing import Dict

logger = logging.getLogger(__name__)


def check_ffmpeg() -> Dict[str, bool]:
    """Report whether the ffmpeg and ffprobe binaries are on PATH."""
    return {
        "ffmpeg": shutil.which("ffmpeg") is not None,
        "ffprobe": shutil.which("ffprobe") is not None,
    }


def probe_duration(file_path: str) -> int:
    """Return a media file's duration in whole seconds, or 0 if unknown."""
    cmd = [
        "ffprobe",
        "-v",
        "error",
        "-show_entries",
        "format=duration",
        "-of",
        "default=noprint_wrappers=1:nokey=1",
        str(file_path),
    ]
    try:
        result = subprocess.run(cmd, capture_output=True, text=True, check=True)
        return int(max(float(result.stdout.strip()), 0) + 0.5)
    except (subprocess.CalledProcessError, ValueError, OSError) as e:
        logger.warning(f"Could not read duration of {Path(file_path).name}: {e}")
        return 0

"""Audio transcription service using OpenAI Whisper."""

import asyncio
import logging
import subprocess
import tempfile
from pathlib import Path
import whisper

from adnamer.utils.errors import ClassificationUnavailable
from adnamer.utils.retry import retry_file_operation
from adnamer.utils.config import get_supported_video_formats, get_supported_audio_formats

logger = logging.getLogger(__name__)


class TranscriptionService:
    """Service for transcribing ad audio using OpenAI Whisper."""

    def __init__(self, model_name: str = "base"):
        self.model_name = model_name
        self.model = None
        self._transcription_lock = asyncio.Lock()
        self._load_model()

    def _load_model(self) -> None:
        try:
            logger.info(f"Loading Whisper model: {self.model_name}")
            self.model = whisper.load_model(self.model_name)

            is_multilingual = (
                "multilingual" if self.model.is_multilingual else "English-only"
            )
            logger.info(f"Loaded {is_multilingual} Whisper model '{self.model_name}'")

        except Exception as e:
            logger.error(f"Failed to load Whisper model '{self.model_name}': {e}")
            raise

    async def transcribe_audio(self, input_file_path: str) -> str:
        """Transcribe audio file to text.

        Args:
            input_file_path: Path to audio or video file

        Returns:
            Transcribed text content

        Raises:
            ClassificationUnavailable: If audio extraction or transcription fails
        """
        file_path = Path(input_file_path)

        if not file_path.exists():
            raise ClassificationUnavailable(f"File not found: {file_path}")
        if not self.is_supported_file(str(file_path)):
            raise ClassificationUnavailable(f"Unsupported file format: {file_path.suffix}")

        logger.info(f"Starting transcription of: {file_path.name}")

        audio_path = None
        try:
            if self._is_video_file(file_path):
                audio_path = await asyncio.to_thread(self._extract_audio_from_video, file_path)
            source = audio_path or str(file_path)

            async with self._transcription_lock:
                return await asyncio.to_thread(self._transcribe_with_whisper, source)

        except ClassificationUnavailable:
            raise
        except Exception as e:
            logger.error(f"Transcription failed for {file_path.name}: {e}")
            raise ClassificationUnavailable(f"Transcription failed: {e}") from e

        finally:
            if audio_path:
                Path(audio_path).unlink(missing_ok=True)

    def _transcribe_with_whisper(self, audio_path: str) -> str:
        if not self.model:
            raise ClassificationUnavailable("Whisper model not loaded")
        result = self.model.transcribe(
            str(audio_path),
            language=None,
            task="transcribe",
            fp16=False,
            verbose=False,
        )

        text = result.get("text", "")
        if isinstance(text, str):
            return text.strip()
        raise ClassificationUnavailable("Transcription result is not a string")

    @retry_file_operation(max_retries=3, base_delay=1.0)
    def _extract_audio_from_video(self, video_path: Path) -> str:
        """Extract audio from video file using ffmpeg.

        Args:
            video_path: Path to video file

        Returns:
            Path to extracted audio file
        """
        logger.debug(f"Extracting audio from video: {video_path.name}")

        with tempfile.NamedTemporaryFile(suffix=".wav", delete=False) as temp_file:
            audio_path = temp_file.name

        cmd = [
            "ffmpeg",
            "-i",
            str(video_path),
            "-vn",
            "-acodec",
            "pcm_s16le",
            "-ar",
            "16000",
            "-ac",
            "1",
            "-y",
            audio_path,
        ]

        try:
            subprocess.run(cmd, capture_output=True, text=True, check=True)
        except subprocess.CalledProcessError as e:
            # Videos without an audio stream end up here too
            Path(audio_path).unlink(missing_ok=True)
            raise ClassificationUnavailable(f"Audio extraction failed: {e.stderr}")
        except Exception:
            Path(audio_path).unlink(missing_ok=True)
            raise

        logger.debug(f"Audio extraction completed: {audio_path}")
        return audio_path

    def _is_video_file(self, file_path: Path) -> bool:
        return file_path.suffix.lower() in get_supported_video_formats()

    def _is_audio_file(self, file_path: Path) -> bool:
        return file_path.suffix.lower() in get_supported_audio_formats()

    def is_supported_file(self, file_path: str) -> bool:
        """Check if file format is supported for transcription."""
        path = Path(file_path)
        return self._is_video_file(path) or self._is_audio_file(path)

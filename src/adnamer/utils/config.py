"""Configuration loading and validation for adnamer."""

import os
import logging
import tempfile
from typing import Dict, List, Optional
from pathlib import Path
from dotenv import load_dotenv
from rich.logging import RichHandler

from adnamer.models.naming import Multiplier, NamingConfig, NamingRules

# Project root (parent of src)
PROJECT_ROOT = Path(__file__).parent.parent.parent.parent

# Load environment variables from .env file in project root
load_dotenv(PROJECT_ROOT / '.env')

CREATOR_CODES: Dict[str, str] = {
    "0": "Chris Carter [FORGED] or Chris Hedgecock [RM]",
    "6": "LAZ",
    "9": "Lindsay or Alex",
    "5": "Outside social media creator",
}


def load_config() -> Dict:
    """Load configuration from environment variables."""
    # Helper function to resolve paths relative to project root
    def resolve_path(path: Optional[str], default: Path) -> str:
        if not path:
            return str(default)
        if Path(path).is_absolute():
            return path
        return str(PROJECT_ROOT / path)

    config = {
        # Google Drive OAuth
        'google_client_id': os.getenv('GOOGLE_CLIENT_ID'),
        'google_client_secret': os.getenv('GOOGLE_CLIENT_SECRET'),
        'google_token_path': resolve_path(os.getenv('GOOGLE_TOKEN_PATH'), PROJECT_ROOT / 'token.json'),

        # Transcription
        'whisper_model': os.getenv('WHISPER_MODEL', 'base'),

        # Naming defaults (overridable per run from the CLI)
        'creator_code': os.getenv('CREATOR_CODE', '0'),
        'starting_sequence': int(os.getenv('STARTING_SEQUENCE', '1')),
        'default_multiplier': os.getenv('DEFAULT_MULTIPLIER', Multiplier.EVERGREEN.value),
        'sequence_width': int(os.getenv('SEQUENCE_WIDTH', '2')),
        'safe_label': os.getenv('SAFE_LABEL', 'TTS'),
        'unsafe_label': os.getenv('UNSAFE_LABEL', ''),
        'video_extension': os.getenv('VIDEO_EXTENSION', 'mp4'),

        # Processing settings
        'max_concurrent_videos': int(os.getenv('MAX_CONCURRENT_VIDEOS', '2')),
        'download_dir': resolve_path(
            os.getenv('DOWNLOAD_DIR'), Path(tempfile.gettempdir()) / 'adnamer'
        ),

        'log_level': os.getenv('LOG_LEVEL', 'INFO'),
    }

    return config


def validate_config(config: Dict, require_drive: bool = True) -> List[str]:
    """Validate configuration and return list of errors."""
    errors = []

    if require_drive:
        if not config.get('google_client_id') or not config.get('google_client_secret'):
            errors.append("GOOGLE_CLIENT_ID and GOOGLE_CLIENT_SECRET required for Google Drive integration")

    creator_code = str(config.get('creator_code', ''))
    if creator_code not in CREATOR_CODES:
        errors.append(
            f"Unknown creator code '{creator_code}' (expected one of: {', '.join(CREATOR_CODES)})"
        )

    if config.get('starting_sequence', 1) < 1:
        errors.append("STARTING_SEQUENCE must be at least 1")

    if config.get('sequence_width', 2) < 1:
        errors.append("SEQUENCE_WIDTH must be at least 1")

    try:
        Multiplier.parse(config.get('default_multiplier', Multiplier.EVERGREEN.value))
    except ValueError as e:
        errors.append(str(e))

    if config.get('max_concurrent_videos', 1) < 1:
        errors.append("MAX_CONCURRENT_VIDEOS must be at least 1")

    for key in ('safe_label', 'unsafe_label', 'video_extension'):
        value = config.get(key) or ''
        if any(ch in value for ch in './\\'):
            errors.append(f"{key.upper()} must not contain '.', '/' or '\\': {value}")

    if not config.get('safe_label'):
        errors.append("SAFE_LABEL must not be empty")

    if not config.get('video_extension'):
        errors.append("VIDEO_EXTENSION must not be empty")

    download_dir = config.get('download_dir')
    if download_dir:
        try:
            Path(download_dir).mkdir(parents=True, exist_ok=True)
        except Exception as e:
            errors.append(f"Cannot create download folder: {e}")

    return errors


def build_naming_rules(config: Dict, sequence_width: Optional[int] = None) -> NamingRules:
    """Create NamingRules from configuration, with an optional width override."""
    return NamingRules(
        sequence_width=sequence_width if sequence_width is not None else config.get('sequence_width', 2),
        safe_label=config.get('safe_label', 'TTS'),
        unsafe_label=config.get('unsafe_label', ''),
        extension=config.get('video_extension', 'mp4'),
    )


def build_naming_config(
    config: Dict,
    creator_code: Optional[str] = None,
    starting_sequence: Optional[int] = None,
    default_multiplier: Optional[str] = None,
) -> NamingConfig:
    """Create the session NamingConfig; explicit arguments win over configuration."""
    return NamingConfig(
        creator_code=creator_code if creator_code is not None else config.get('creator_code', '0'),
        starting_sequence=(
            starting_sequence if starting_sequence is not None else config.get('starting_sequence', 1)
        ),
        default_multiplier=Multiplier.parse(
            default_multiplier if default_multiplier is not None
            else config.get('default_multiplier', Multiplier.EVERGREEN.value)
        ),
    )


def setup_logging(log_level: str = "INFO") -> None:
    """Set up logging configuration with Rich for terminal output."""
    # Clear any existing handlers
    logging.root.handlers.clear()

    rich_handler = RichHandler(
        show_time=True,
        show_level=True,
        show_path=False,
        rich_tracebacks=True,
        markup=False  # Disable markup to avoid conflicts
    )

    # File handler for plain text logging
    log_file = PROJECT_ROOT / 'adnamer.log'
    file_handler = logging.FileHandler(log_file)
    file_handler.setFormatter(logging.Formatter(
        '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
    ))

    logging.basicConfig(
        level=getattr(logging, log_level.upper(), logging.INFO),
        handlers=[rich_handler, file_handler],
        format="%(message)s"
    )

    # Suppress noisy third-party loggers
    noisy_loggers = [
        'googleapiclient.discovery_cache',
        'google_auth_oauthlib.flow',
        'urllib3.connectionpool',
        'requests.packages.urllib3.connectionpool'
    ]

    for logger_name in noisy_loggers:
        logging.getLogger(logger_name).setLevel(logging.WARNING)


def get_supported_video_formats() -> List[str]:
    """Return list of supported video file extensions."""
    return ['.mp4', '.avi', '.mov', '.mkv', '.wmv', '.flv', '.webm', '.m4v']


def get_supported_audio_formats() -> List[str]:
    """Return list of supported audio file extensions."""
    return ['.mp3', '.wav', '.flac', '.aac', '.ogg', '.m4a', '.wma']

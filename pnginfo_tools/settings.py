"""
Decoder configuration with environment overrides
"""
from dataclasses import dataclass
import logging
import os

logger = logging.getLogger("pnginfo_settings")

DEFAULT_MAX_TEXT_SIZE = 64 * 1024 * 1024
DEFAULT_BATCH_WORKERS = 4

_TRUTHY = {'1', 'true', 'yes', 'on'}


def _env_int(name: str, default: int) -> int:
    """Positive integer from the environment; a bad value falls back to the default."""
    raw = os.environ.get(name)
    if raw is None or not raw.strip():
        return default
    try:
        value = int(raw)
    except ValueError:
        logger.warning(f"Ignoring {name}={raw!r}: not an integer, using {default}")
        return default
    if value < 1:
        logger.warning(f"Ignoring {name}={raw!r}: must be positive, using {default}")
        return default
    return value


@dataclass(frozen=True)
class DecoderSettings:
    """
    Tunables for ChunkStreamDecoder and BatchDecoder.

    Attributes:
        max_text_size: Largest inflated zTXt payload accepted, in bytes.
        verify_crc: Check each chunk's trailing CRC and report mismatches
                    as diagnostics. Off by default; a mismatch never stops
                    the walk.
        batch_workers: Number of threads used for batch decoding.
    """
    max_text_size: int = DEFAULT_MAX_TEXT_SIZE
    verify_crc: bool = False
    batch_workers: int = DEFAULT_BATCH_WORKERS

    @classmethod
    def from_env(cls) -> 'DecoderSettings':
        """Build settings from PNGINFO_* environment variables."""
        return cls(
            max_text_size=_env_int('PNGINFO_MAX_TEXT_SIZE', DEFAULT_MAX_TEXT_SIZE),
            verify_crc=os.environ.get('PNGINFO_VERIFY_CRC', '').strip().lower() in _TRUTHY,
            batch_workers=_env_int('PNGINFO_BATCH_WORKERS', DEFAULT_BATCH_WORKERS),
        )

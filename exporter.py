"""
WAV export of the current buffer. Read-only with respect to playback.
"""
import io
import logging
from datetime import datetime
from pathlib import Path

import soundfile as sf

logger = logging.getLogger(__name__)


def to_wav_bytes(buffer, subtype="PCM_16"):
    """Returns the buffer as an uncompressed PCM WAV file in memory."""
    out = io.BytesIO()
    sf.write(out, buffer.copy_samples(), buffer.sample_rate, format="WAV", subtype=subtype)
    return out.getvalue()


def save_wav(buffer, path, subtype="PCM_16"):
    """Encodes in memory, then writes the file."""
    path = Path(path)
    path.write_bytes(to_wav_bytes(buffer, subtype=subtype))
    logger.info("Exported %d samples to %s", len(buffer), path)
    return path


def export_filename(now=None):
    now = now or datetime.now()
    return f"wavemutator-{now.strftime('%Y%m%d-%H%M%S')}.wav"

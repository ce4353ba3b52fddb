"""Video metadata extraction using ffprobe."""

from __future__ import annotations

import json
import logging
import math
import shutil
import subprocess
import threading
from dataclasses import dataclass
from pathlib import Path
from typing import Any

logger = logging.getLogger(__name__)

FFPROBE = "ffprobe"

# How often a running ffprobe is checked against the cancellation event.
_POLL_SECS = 0.2


@dataclass(frozen=True)
class MediaInfo:
    """Video characteristics of a probed file."""

    width: int
    height: int
    codec_name: str
    duration_secs: float | None = None
    frame_rate: float | None = None


def ffprobe_executable(ffprobe_path: Path | None) -> str:
    """Return the ffprobe command for a configured tool location.

    The location may be the executable itself or the directory holding it.
    """
    if ffprobe_path is None:
        return FFPROBE
    if ffprobe_path.is_dir():
        return str(ffprobe_path / FFPROBE)
    return str(ffprobe_path)


def check_ffprobe_available(ffprobe_path: Path | None = None) -> None:
    """Verify that ffprobe can be found. Raises RuntimeError if not."""
    executable = ffprobe_executable(ffprobe_path)
    if shutil.which(executable) is None:
        raise RuntimeError(
            f"ffprobe not found ({executable}). Install ffmpeg or pass --ffprobe."
        )


def probe_media(
    file_path: Path,
    ffprobe_path: Path | None = None,
    cancel: threading.Event | None = None,
) -> MediaInfo | None:
    """Probe a file for video metadata.

    Returns None whenever ffprobe is missing, fails, times out on
    cancellation, or finds no usable video stream. Never raises.
    Duration and frame rate are only reported for a positive duration.
    """
    if cancel is not None and cancel.is_set():
        return None

    cmd = [
        ffprobe_executable(ffprobe_path),
        "-v", "quiet",
        "-print_format", "json",
        "-show_format",
        "-show_streams",
        str(file_path),
    ]
    completed = _run_ffprobe(cmd, cancel)
    if completed is None:
        return None

    returncode, stdout = completed
    if returncode != 0:
        logger.debug("ffprobe exited %d for %s", returncode, file_path)
        return None

    try:
        probe_data = json.loads(stdout)
    except json.JSONDecodeError:
        logger.debug("ffprobe returned invalid JSON for %s", file_path)
        return None

    if not isinstance(probe_data, dict):
        return None
    return _summarize(probe_data, file_path)


def _run_ffprobe(
    cmd: list[str], cancel: threading.Event | None
) -> tuple[int, str] | None:
    """Run ffprobe, killing it if ``cancel`` is set while it runs."""
    try:
        proc = subprocess.Popen(
            cmd,
            stdout=subprocess.PIPE,
            stderr=subprocess.PIPE,
            text=True,
        )
    except OSError as e:
        logger.debug("ffprobe error: %s", e)
        return None

    while True:
        try:
            stdout, _ = proc.communicate(timeout=_POLL_SECS)
        except subprocess.TimeoutExpired:
            if cancel is not None and cancel.is_set():
                proc.kill()
                proc.communicate()
                logger.debug("ffprobe cancelled: %s", cmd[-1])
                return None
            continue
        return proc.returncode, stdout or ""


def _summarize(probe_data: dict[str, Any], file_path: Path) -> MediaInfo | None:
    """Build MediaInfo from ffprobe JSON, or None without a video stream."""
    streams = probe_data.get("streams") or []
    if not isinstance(streams, list):
        streams = []
    video_streams = [
        s for s in streams
        if isinstance(s, dict) and s.get("codec_type") == "video"
    ]
    if not video_streams:
        logger.debug("No video stream in %s", file_path)
        return None

    # Prefer the largest picture when a file carries several video streams
    video = max(
        video_streams,
        key=lambda s: (_to_int(s.get("width")) or 0) * (_to_int(s.get("height")) or 0),
    )
    width = _to_int(video.get("width"))
    height = _to_int(video.get("height"))
    if width is None or height is None:
        logger.debug("No frame size for %s", file_path)
        return None

    duration = _extract_duration(probe_data, video)
    if duration is None or not (math.isfinite(duration) and duration > 0):
        return MediaInfo(
            width=width,
            height=height,
            codec_name=str(video.get("codec_name") or ""),
        )

    frame_rate = _parse_ratio(video.get("avg_frame_rate")) or _parse_ratio(
        video.get("r_frame_rate")
    )
    if frame_rate is None:
        logger.debug("No frame rate for %s", file_path)
    return MediaInfo(
        width=width,
        height=height,
        codec_name=str(video.get("codec_name") or ""),
        duration_secs=duration,
        frame_rate=frame_rate,
    )


def _extract_duration(
    probe_data: dict[str, Any], video: dict[str, Any]
) -> float | None:
    """Extract duration in seconds, preferring the format-level value."""
    fmt = probe_data.get("format", {})
    if isinstance(fmt, dict):
        duration = _to_float(fmt.get("duration"))
        if duration is not None:
            return duration
    return _to_float(video.get("duration"))


def _parse_ratio(value: Any) -> float | None:
    """Parse an ffprobe rate such as ``30000/1001`` into a float."""
    if value is None:
        return None
    text = str(value)
    if "/" in text:
        num, _, den = text.partition("/")
        numerator = _to_float(num)
        denominator = _to_float(den)
        if numerator is None or not denominator:
            return None
        rate = numerator / denominator
    else:
        rate = _to_float(text)
        if rate is None:
            return None
    return rate if math.isfinite(rate) and rate > 0 else None


def _to_float(value: Any) -> float | None:
    if value is None:
        return None
    try:
        return float(str(value))
    except (TypeError, ValueError):
        return None


def _to_int(value: Any) -> int | None:
    if value is None:
        return None
    try:
        return int(value)
    except (TypeError, ValueError):
        return None

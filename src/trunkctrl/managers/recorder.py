"""Audio recorder writing recordable call audio to WAV files.

``receive`` only enqueues packets; a background thread owns the files so a
slow disk never delays audio delivery to the other listeners.
"""

from __future__ import annotations

import logging
import queue
import re
import threading
import wave
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path

from trunkctrl.models.audio import SAMPLE_RATE, SAMPLE_WIDTH, AudioPacket

logger = logging.getLogger(__name__)

_UNSAFE_CHARS = re.compile(r"[^A-Za-z0-9._-]+")

# Worker wakeup interval for shutdown checks
_QUEUE_TIMEOUT_SEC = 0.2


@dataclass(frozen=True, slots=True)
class _Close:
    """Queue command: close the recording of a channel."""

    channel_id: int


class RecorderManager:
    """Record audio packets flagged ``recordable``.

    Example:
        recorder = RecorderManager(recordings_folder)
        recorder.start()
        channel_processing_manager.add_audio_packet_listener(recorder)
        ...
        recorder.stop()
    """

    def __init__(self, recording_folder: Path | None) -> None:
        """Initialize the recorder.

        Args:
            recording_folder: Directory for recordings, or None to disable.
        """
        self._recording_folder = recording_folder
        self._queue: queue.Queue[AudioPacket | _Close] = queue.Queue()
        self._recordings: dict[int, tuple[Path, wave.Wave_write]] = {}
        self._completed: list[Path] = []
        self._completed_lock = threading.Lock()
        self._running = False
        self._thread: threading.Thread | None = None
        if recording_folder is None:
            logger.warning("No recordings folder available; audio recording disabled")

    @property
    def recording_folder(self) -> Path | None:
        """Return the recordings directory."""
        return self._recording_folder

    @property
    def completed_recordings(self) -> list[Path]:
        """Return the files of finished recordings."""
        with self._completed_lock:
            return list(self._completed)

    @property
    def is_running(self) -> bool:
        """Return True while the writer thread runs."""
        return self._running

    def start(self) -> None:
        """Start the writer thread."""
        if self._running or self._recording_folder is None:
            return
        self._running = True
        self._thread = threading.Thread(target=self._write_loop, name="recorder", daemon=True)
        self._thread.start()

    def stop(self) -> None:
        """Drain pending audio, close open recordings and stop the thread."""
        if not self._running:
            return
        self._running = False
        if self._thread:
            self._thread.join(timeout=5.0)
            self._thread = None
        self._drain()
        for channel_id in list(self._recordings):
            self._close(channel_id)

    def receive(self, packet: AudioPacket) -> None:
        """Queue a packet for recording; never blocks.

        Packets are dropped while the writer thread is not running.
        """
        if not self._running:
            return
        if packet.recordable or packet.is_end:
            self._queue.put_nowait(packet)

    def close_channel(self, channel_id: int) -> None:
        """Queue closing of a channel's recording."""
        if self._running:
            self._queue.put_nowait(_Close(channel_id))

    def _write_loop(self) -> None:
        """Background thread: write queued packets."""
        while self._running:
            try:
                item = self._queue.get(timeout=_QUEUE_TIMEOUT_SEC)
            except queue.Empty:
                continue
            self._handle(item)

    def _drain(self) -> None:
        while True:
            try:
                item = self._queue.get_nowait()
            except queue.Empty:
                return
            self._handle(item)

    def _handle(self, item: AudioPacket | _Close) -> None:
        try:
            if isinstance(item, _Close) or item.is_end:
                self._close(item.channel_id)
            else:
                self._write(item)
        except Exception:
            # Keep the writer thread alive for the other channels
            logger.exception("Error recording channel %d", item.channel_id)

    def _write(self, packet: AudioPacket) -> None:
        recording = self._recordings.get(packet.channel_id)
        if recording is None:
            recording = self._open(packet)
            if recording is None:
                return
        path, writer = recording
        try:
            writer.writeframes(packet.samples)
        except OSError as e:
            logger.error("Couldn't write recording [%s]: %s", path, e)
            self._close(packet.channel_id)

    def _open(self, packet: AudioPacket) -> tuple[Path, wave.Wave_write] | None:
        assert self._recording_folder is not None
        name = _UNSAFE_CHARS.sub("_", packet.channel_name).strip("_") or f"channel_{packet.channel_id}"
        path = self._recording_folder / f"{datetime.now():%Y%m%d_%H%M%S_%f}_{name}.wav"
        try:
            writer = wave.open(str(path), "wb")  # noqa: SIM115
            writer.setnchannels(1)
            writer.setsampwidth(SAMPLE_WIDTH)
            writer.setframerate(SAMPLE_RATE)
        except OSError as e:
            logger.error("Couldn't create recording [%s]: %s", path, e)
            return None
        logger.debug("Started recording [%s]", path)
        self._recordings[packet.channel_id] = (path, writer)
        return path, writer

    def _close(self, channel_id: int) -> None:
        recording = self._recordings.pop(channel_id, None)
        if recording is None:
            return
        path, writer = recording
        try:
            writer.close()
        except OSError as e:
            logger.error("Couldn't finish recording [%s]: %s", path, e)
            return
        with self._completed_lock:
            self._completed.append(path)
        logger.info("Finished recording [%s]", path)

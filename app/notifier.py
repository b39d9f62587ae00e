"""Local audible notification for firing alerts."""
from __future__ import annotations

import asyncio
import logging
import sys
from pathlib import Path
from typing import Set

LOGGER = logging.getLogger(__name__)

DEFAULT_SOUNDS_DIR = "/System/Library/Sounds"


class SoundNotifier:
    """Plays a system sound with ``afplay`` without blocking the caller."""

    def __init__(self, sound: str, volume: str, sounds_dir: str = DEFAULT_SOUNDS_DIR) -> None:
        self.sound = sound
        self.volume = volume
        self._sounds_dir = Path(sounds_dir)
        self._tasks: Set[asyncio.Task] = set()

    @property
    def sound_path(self) -> str:
        return str(self._sounds_dir / f"{self.sound}.aiff")

    def is_supported(self) -> bool:
        return sys.platform == "darwin"

    async def play(self) -> None:
        """Run ``afplay`` and log, rather than raise, any failure."""

        try:
            process = await asyncio.create_subprocess_exec(
                "afplay",
                "-v",
                self.volume,
                self.sound_path,
                stdout=asyncio.subprocess.DEVNULL,
                stderr=asyncio.subprocess.PIPE,
            )
            _, stderr = await process.communicate()
        except OSError as exc:
            LOGGER.error("Unable to play alert sound", extra={"detail": str(exc)})
            return
        if process.returncode != 0:
            LOGGER.error(
                "Unable to play alert sound",
                extra={"detail": stderr.decode("utf-8", "replace").strip() or f"exit status {process.returncode}"},
            )

    def dispatch(self) -> None:
        """Schedule playback and return immediately."""

        task = asyncio.get_running_loop().create_task(self.play())
        self._tasks.add(task)
        task.add_done_callback(self._forget)

    def _forget(self, task: asyncio.Task) -> None:
        self._tasks.discard(task)
        if task.cancelled():
            return
        exc = task.exception()
        if exc is not None:
            LOGGER.error("Alert sound task failed", exc_info=exc)

    async def wait_idle(self) -> None:
        if self._tasks:
            await asyncio.gather(*list(self._tasks), return_exceptions=True)

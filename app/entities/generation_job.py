from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field
from typing import Literal


AspectRatio = Literal["16:9", "9:16"]
SUPPORTED_ASPECT_RATIOS: tuple[str, ...] = ("16:9", "9:16")


@dataclass
class GenerationJob:
    """
    Client-side view of a long-running video generation operation.

    Only the poller mutates it, from the status it re-fetches upstream.
    The job is terminal once ``done`` is True.
    """

    name: str
    done: bool = False
    result_uri: str | None = None
    error: str | None = None
    status_checks: int = 0


@dataclass
class VideoResource:
    """Downloaded video held in a local temporary file."""

    path: str
    mime_type: str
    source_uri: str
    size_bytes: int
    _released: bool = field(default=False, repr=False)

    @property
    def released(self) -> bool:
        return self._released

    def read_bytes(self) -> bytes:
        if self._released:
            raise ValueError("Video resource has already been released")
        with open(self.path, "rb") as handle:
            return handle.read()

    def release(self) -> None:
        """Delete the backing file. Safe to call more than once."""
        if self._released:
            return
        self._released = True
        try:
            os.unlink(self.path)
        except FileNotFoundError:
            pass
        except OSError as e:
            logging.getLogger(__name__).warning(
                "Failed to remove video file %s: %s", self.path, e
            )

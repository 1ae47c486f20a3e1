# world/paths.py
from __future__ import annotations

import logging
from typing import List, Optional, Sequence

import pygame

from core.events import Signal

log = logging.getLogger(__name__)

Path = List[pygame.Vector2]


class PathProvider:
    """
    Ordered waypoint sequences, one per lane.
    set_paths() swaps the whole topology and fires changed() so lanes
    re-read their path.
    """

    def __init__(self, paths: Optional[Sequence[Sequence]] = None):
        self._paths: List[Optional[Path]] = []
        self.version = 0
        self.changed = Signal("paths.changed")
        if paths is not None:
            self._store(paths)

    def _store(self, paths: Sequence[Sequence]):
        self._paths = [self._to_path(p) for p in paths]

    @staticmethod
    def _to_path(raw) -> Optional[Path]:
        if not raw:
            return None
        return [pygame.Vector2(p) for p in raw]

    def paths(self) -> List[Optional[Path]]:
        return list(self._paths)

    def path_for(self, index: int) -> Optional[Path]:
        if not (0 <= index < len(self._paths)):
            return None
        p = self._paths[index]
        return list(p) if p else None

    def __len__(self) -> int:
        return len(self._paths)

    def set_paths(self, paths: Sequence[Sequence]):
        self._store(paths)
        self.version += 1
        log.info("path topology changed (version %d, %d lanes)", self.version, len(self._paths))
        self.changed.emit(self.version)


def demo_paths(width: int, height: int) -> List[List[tuple]]:
    """Three lanes converging on the tower in the middle of the screen."""
    cx, cy = width * 0.5, height * 0.5
    return [
        [(0, height * 0.2), (width * 0.25, height * 0.2), (width * 0.3, cy - 40), (cx - 30, cy)],
        [(width, height * 0.3), (width * 0.75, height * 0.3), (width * 0.7, cy), (cx + 30, cy)],
        [(width * 0.4, height), (width * 0.4, height * 0.8), (cx, height * 0.7), (cx, cy + 30)],
    ]

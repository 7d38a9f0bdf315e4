"""Placement of sessions on the weekly time grid.

Sessions that overlap on the same day are spread over parallel lanes so
none hides another. Lane counts are shared by every session of an
overlap cluster (a connected component of the overlap graph), since
overlap is not transitive.
"""

from collections import defaultdict, deque
from dataclasses import dataclass
from datetime import time
from typing import Iterable

from .view import ViewEntry


@dataclass(frozen=True)
class TimeWindow:
    """Visible hours of a grid day."""
    
    start_hour: int = 7
    end_hour: int = 20
    
    def __post_init__(self) -> None:
        if self.start_hour >= self.end_hour:
            raise ValueError("Window start hour must be before end hour")
    
    def fraction(self, value: time) -> float:
        """Position of a clock time along the window, 0 at start, 1 at end.
        
        Times outside the window map outside [0, 1].
        """
        minutes = value.hour * 60 + value.minute - self.start_hour * 60
        return minutes / ((self.end_hour - self.start_hour) * 60)


@dataclass(frozen=True)
class SessionBlock:
    """A session of a view entry positioned on the time axis."""
    
    entry: ViewEntry
    session_index: int
    day_of_week: int
    top: float
    bottom: float
    
    def overlaps(self, other: "SessionBlock") -> bool:
        return self.top < other.bottom and other.top < self.bottom


@dataclass(frozen=True)
class LaidOutSession:
    """A session block with its lane in its overlap cluster."""
    
    block: SessionBlock
    lane: int
    total_lanes: int
    conflicting: bool
    
    @property
    def entry(self) -> ViewEntry:
        return self.block.entry
    
    @property
    def session_index(self) -> int:
        return self.block.session_index
    
    @property
    def top(self) -> float:
        return self.block.top
    
    @property
    def bottom(self) -> float:
        return self.block.bottom


def _assign_lanes(blocks: list[SessionBlock]) -> list[int]:
    """Give each block the smallest lane unused by earlier overlapping blocks.
    
    Blocks must already be sorted by start.
    """
    lanes: list[int] = []
    for i, block in enumerate(blocks):
        taken = {lanes[j] for j in range(i) if blocks[j].overlaps(block)}
        lane = 0
        while lane in taken:
            lane += 1
        lanes.append(lane)
    return lanes


def _clusters(blocks: list[SessionBlock]) -> list[list[int]]:
    """Connected components of the overlap graph, as lists of indices."""
    neighbours: dict[int, list[int]] = defaultdict(list)
    for i in range(len(blocks)):
        for j in range(i + 1, len(blocks)):
            if blocks[i].overlaps(blocks[j]):
                neighbours[i].append(j)
                neighbours[j].append(i)
    
    seen: set[int] = set()
    components: list[list[int]] = []
    for start in range(len(blocks)):
        if start in seen:
            continue
        seen.add(start)
        component = []
        queue = deque([start])
        while queue:
            node = queue.popleft()
            component.append(node)
            for other in neighbours[node]:
                if other not in seen:
                    seen.add(other)
                    queue.append(other)
        components.append(sorted(component))
    return components


def layout_day(blocks: Iterable[SessionBlock]) -> list[LaidOutSession]:
    """Assign lanes to the session blocks of one day.
    
    Args:
        blocks: Blocks of a single day, in stable input order.
        
    Returns:
        Laid out sessions sorted by start; equal starts keep input order.
    """
    ordered = sorted(blocks, key=lambda b: b.top)
    lanes = _assign_lanes(ordered)
    
    total_lanes = [1] * len(ordered)
    conflicting = [False] * len(ordered)
    for component in _clusters(ordered):
        count = max(lanes[i] for i in component) + 1
        for i in component:
            total_lanes[i] = count
            conflicting[i] = len(component) > 1
    
    return [
        LaidOutSession(block, lanes[i], total_lanes[i], conflicting[i])
        for i, block in enumerate(ordered)
    ]


def session_blocks(entries: Iterable[ViewEntry], window: TimeWindow) -> list[SessionBlock]:
    """Position every session of every entry, course order then session order."""
    blocks = []
    for entry in entries:
        for index, session in enumerate(entry.course.sessions):
            blocks.append(SessionBlock(
                entry=entry,
                session_index=index,
                day_of_week=session.day_of_week,
                top=window.fraction(session.start_time),
                bottom=window.fraction(session.end_time),
            ))
    return blocks


def layout_week(
    entries: Iterable[ViewEntry],
    window: TimeWindow = TimeWindow()
) -> dict[int, list[LaidOutSession]]:
    """Lay out all sessions of a view, grouped by day of week.
    
    Args:
        entries: Persisted and preview entries to draw.
        window: Visible hours of the grid.
        
    Returns:
        Mapping of day of week to that day's laid out sessions. Days
        without sessions are absent.
    """
    by_day: dict[int, list[SessionBlock]] = defaultdict(list)
    for block in session_blocks(entries, window):
        by_day[block.day_of_week].append(block)
    
    return {day: layout_day(blocks) for day, blocks in by_day.items()}

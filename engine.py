# engine.py

"""
Page replacement simulation engine.

Replays a reference string against a fixed number of frames and records one
immutable step per reference. Four replacement policies are available:

    - FIFO:    evict the page that was loaded earliest
    - LRU:     evict the page whose last reference is oldest
    - OPTIMAL: evict the page whose next use is furthest away (Belady)
    - CLOCK:   second-chance sweep over per-frame reference bits
"""

import re
from collections import deque
from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Optional, Sequence, Tuple, Union


# =============================================================================
# ERRORS
# =============================================================================

class SimulationError(Exception):
    """Base class for every error raised by the engine."""


class ConfigError(SimulationError, ValueError):
    """Invalid frame count or unknown replacement policy."""


class InvariantViolation(SimulationError, RuntimeError):
    """Internal consistency check failed; indicates a logic bug."""


# =============================================================================
# POLICY SELECTOR
# =============================================================================

class ReplacementPolicy:
    """
    Enumeration of available page replacement algorithms.

    FIFO:    First-In-First-Out - replaces the oldest page in memory
    LRU:     Least Recently Used - replaces the page not used for longest time
    OPTIMAL: Belady's algorithm - replaces the page used furthest in the future
    CLOCK:   Second chance - sweeps reference bits, evicts the first 0 bit
    """
    FIFO = "FIFO"
    LRU = "LRU"
    OPTIMAL = "OPTIMAL"
    CLOCK = "CLOCK"

    ALL = (FIFO, LRU, OPTIMAL, CLOCK)

    @classmethod
    def normalize(cls, name: str) -> str:
        """Return the canonical policy name, or raise ConfigError."""
        if isinstance(name, str) and name.strip().upper() in cls.ALL:
            return name.strip().upper()
        raise ConfigError(f"Unknown replacement policy: {name!r}")


HIT = "HIT"
FAULT = "FAULT"


# =============================================================================
# INPUT PARSING
# =============================================================================

_INT_LITERAL = re.compile(r"[+-]?[0-9]+")


def parse_reference_string(text: str) -> Tuple[int, ...]:
    """
    Parse comma separated page numbers.

    Empty tokens, tokens that are not plain ASCII integer literals and negative
    numbers are dropped silently. Order and duplicates of the remaining pages
    are kept.
    """
    pages = []
    for token in (text or "").split(","):
        token = token.strip()
        if not _INT_LITERAL.fullmatch(token):
            continue
        page = int(token)
        if page >= 0:
            pages.append(page)
    return tuple(pages)


def _validate_frame_count(frame_count) -> int:
    # bool is an int subclass but never a meaningful frame count
    if isinstance(frame_count, bool) or not isinstance(frame_count, int):
        raise ConfigError(f"Frame count must be an integer, got {frame_count!r}")
    if frame_count < 1:
        raise ConfigError(f"Frame count must be at least 1, got {frame_count}")
    return frame_count


# =============================================================================
# FRAME TABLE
# =============================================================================

class FrameTable:
    """Fixed-size ordered array of resident pages (None marks a free frame)."""

    def __init__(self, frame_count: int):
        self.frames: List[Optional[int]] = [None] * frame_count

    def __len__(self):
        return len(self.frames)

    def contains(self, page: int) -> bool:
        return page in self.frames

    def index_of(self, page: int) -> Optional[int]:
        for i, resident in enumerate(self.frames):
            if resident == page:
                return i
        return None

    def first_empty_slot(self) -> Optional[int]:
        return self.index_of(None)

    def is_full(self) -> bool:
        return self.first_empty_slot() is None

    def place(self, index: int, page: int):
        """Overwrite slot `index`. Raises IndexError for an invalid index."""
        if index < 0:
            raise IndexError(f"Frame index out of range: {index}")
        self.frames[index] = page

    def snapshot(self) -> Tuple[Optional[int], ...]:
        return tuple(self.frames)


# =============================================================================
# RESULT TYPES
# =============================================================================

@dataclass(frozen=True)
class NoMetadata:
    """Steps of policies that expose no extra state."""


@dataclass(frozen=True)
class ClockMetadata:
    """CLOCK state at the end of a step."""
    pointer: int
    reference_bits: Tuple[int, ...]


StepMetadata = Union[NoMetadata, ClockMetadata]


@dataclass(frozen=True)
class SimulationStep:
    """
    One processed reference.

    Attributes:
        step_index (int): Position of the reference in the sequence
        requested_page (int): The page that was referenced
        frames (Tuple[Optional[int], ...]): Frame contents after the step
        status (str): HIT or FAULT
        replaced_page (Optional[int]): Evicted page, None if nothing was evicted
        explanation (str): Human readable rationale
        metadata (StepMetadata): Policy specific state (CLOCK pointer and bits)
    """
    step_index: int
    requested_page: int
    frames: Tuple[Optional[int], ...]
    status: str
    replaced_page: Optional[int]
    explanation: str
    metadata: StepMetadata = field(default_factory=NoMetadata)

    @property
    def is_hit(self) -> bool:
        return self.status == HIT

    @property
    def is_fault(self) -> bool:
        return self.status == FAULT


@dataclass(frozen=True)
class SimulationResult:
    """Full trace and totals of one policy over one reference sequence."""
    policy: str
    frame_count: int
    steps: Tuple[SimulationStep, ...]
    total_hits: int
    total_faults: int
    hit_ratio: float
    fault_ratio: float

    @property
    def total_refs(self) -> int:
        return len(self.steps)

    def frames_before(self, index: int) -> Tuple[Optional[int], ...]:
        """Frame contents right before step `index` was processed."""
        if index == 0:
            return (None,) * self.frame_count
        return self.steps[index - 1].frames

    def get_stats(self) -> Dict[str, float]:
        """
        Summary statistics in a display friendly shape.

        Returns:
            Dict[str, float]: hits, faults, hit_ratio, fault_rate, total_refs
        """
        return {
            "hits": self.total_hits,
            "faults": self.total_faults,
            "hit_ratio": round(self.hit_ratio, 4),
            "fault_rate": round(self.fault_ratio, 4),
            "total_refs": self.total_refs,
        }


# =============================================================================
# POLICY STATE MACHINES
# =============================================================================

class EvictionPolicy:
    """
    Bookkeeping and victim selection for one simulation run.

    The driver calls on_hit() for every hit, select_victim() when a fault finds
    no free frame, on_load() after a page is placed, and metadata() once per
    step. A policy instance belongs to exactly one run.
    """

    name = None

    def __init__(self, pages: Sequence[int], frame_count: int):
        self.pages = pages
        self.frame_count = frame_count

    def on_hit(self, step: int, slot: int, page: int) -> str:
        """Update bookkeeping for a hit; returns a note for the explanation."""
        return ""

    def on_load(self, step: int, slot: int, page: int, evicted: Optional[int]):
        """Record that `page` now lives in `slot` (`evicted` is None for a free frame)."""

    def select_victim(self, step: int, frames: Sequence[Optional[int]]) -> Tuple[int, str]:
        """Return (slot to evict, reason) for a full frame table."""
        raise NotImplementedError

    def metadata(self) -> StepMetadata:
        return NoMetadata()


class FIFOPolicy(EvictionPolicy):
    name = ReplacementPolicy.FIFO

    def __init__(self, pages, frame_count):
        super().__init__(pages, frame_count)
        self.queue: deque = deque()  # resident pages, oldest first

    def on_load(self, step, slot, page, evicted):
        self.queue.append(page)

    def select_victim(self, step, frames):
        if not self.queue:
            raise InvariantViolation("FIFO queue is empty while all frames are occupied")
        oldest = self.queue.popleft()
        slot = frames.index(oldest)
        return slot, "Oldest in FIFO queue"


class LRUPolicy(EvictionPolicy):
    name = ReplacementPolicy.LRU

    def __init__(self, pages, frame_count):
        super().__init__(pages, frame_count)
        self.last_used: Dict[int, int] = {}

    def on_hit(self, step, slot, page):
        self.last_used[page] = step
        return " Updated access time."

    def on_load(self, step, slot, page, evicted):
        self.last_used[page] = step

    def select_victim(self, step, frames):
        victim_slot = None
        min_last_used = None

        # Strict comparison keeps the first slot on ties
        for i, page in enumerate(frames):
            if page is None:
                continue
            last_used = self.last_used.get(page, -1)
            if min_last_used is None or last_used < min_last_used:
                min_last_used = last_used
                victim_slot = i

        if victim_slot is None:
            raise InvariantViolation("LRU found no resident page to evict")
        steps_ago = step - max(min_last_used, 0)
        return victim_slot, f"Least Recently Used, {steps_ago} steps ago"


class OptimalPolicy(EvictionPolicy):
    name = ReplacementPolicy.OPTIMAL

    def next_use(self, page: int, step: int) -> Optional[int]:
        """Index of the next reference to `page` after `step`, None if never."""
        for i in range(step + 1, len(self.pages)):
            if self.pages[i] == page:
                return i
        return None

    def select_victim(self, step, frames):
        victim_slot = None
        furthest = -1
        never_again = False

        for i, page in enumerate(frames):
            if page is None:
                continue
            next_index = self.next_use(page, step)
            if next_index is None:
                # First page never used again wins over every later candidate
                if not never_again:
                    never_again = True
                    victim_slot = i
            elif not never_again and next_index > furthest:
                furthest = next_index
                victim_slot = i

        if victim_slot is None:
            raise InvariantViolation("OPTIMAL found no resident page to evict")
        if never_again:
            return victim_slot, "Will not be used again"
        return victim_slot, "Longest distance to next use"


class ClockPolicy(EvictionPolicy):
    name = ReplacementPolicy.CLOCK

    def __init__(self, pages, frame_count):
        super().__init__(pages, frame_count)
        self.reference_bits: List[int] = [0] * frame_count
        self.pointer = 0

    def _advance(self):
        self.pointer = (self.pointer + 1) % self.frame_count

    def on_hit(self, step, slot, page):
        self.reference_bits[slot] = 1
        return " Set Reference Bit to 1."

    def on_load(self, step, slot, page, evicted):
        self.reference_bits[slot] = 1
        # A free-frame fill also advances the hand
        if evicted is None:
            self._advance()

    def select_victim(self, step, frames):
        for _ in range(3 * self.frame_count):
            slot = self.pointer
            self._advance()
            if self.reference_bits[slot] == 0:
                return slot, f"Ref Bit was 0 at Frame {slot + 1}"
            self.reference_bits[slot] = 0  # second chance

        raise InvariantViolation(
            f"CLOCK sweep exceeded {3 * self.frame_count} visits without a victim"
        )

    def metadata(self):
        return ClockMetadata(pointer=self.pointer, reference_bits=tuple(self.reference_bits))


POLICY_CLASSES = {
    ReplacementPolicy.FIFO: FIFOPolicy,
    ReplacementPolicy.LRU: LRUPolicy,
    ReplacementPolicy.OPTIMAL: OptimalPolicy,
    ReplacementPolicy.CLOCK: ClockPolicy,
}


def make_policy(name: str, pages: Sequence[int], frame_count: int) -> EvictionPolicy:
    """Create a fresh policy state machine for one run."""
    return POLICY_CLASSES[ReplacementPolicy.normalize(name)](pages, frame_count)


# =============================================================================
# SIMULATION DRIVER
# =============================================================================

class Simulator:
    """
    Runs one policy over one reference sequence.

    Attributes:
        pages (Tuple[int, ...]): The reference sequence, read-only
        frame_count (int): Number of frames
        policy (EvictionPolicy): Bookkeeping for the selected algorithm
        frame_table (FrameTable): Resident pages
        hits (int): Number of page hits so far
        faults (int): Number of page faults so far
        event_log (List[str]): Log of every hit, fault, eviction and load
    """

    def __init__(self, pages: Iterable[int], frame_count: int, policy: str):
        self.frame_count = _validate_frame_count(frame_count)
        self.pages: Tuple[int, ...] = tuple(pages)
        self.policy = make_policy(policy, self.pages, self.frame_count)
        self.frame_table = FrameTable(self.frame_count)
        self.hits = 0
        self.faults = 0
        self.steps: List[SimulationStep] = []
        self.event_log: List[str] = []

    def step(self) -> SimulationStep:
        """
        Process the next unprocessed reference and record it.

        Raises:
            IndexError: If every reference has already been processed
        """
        index = len(self.steps)
        if index >= len(self.pages):
            raise IndexError(f"All {len(self.pages)} references already processed")
        page = self.pages[index]
        replaced_page = None

        slot = self.frame_table.index_of(page)

        # ----- PAGE HIT -----
        if slot is not None:
            self.hits += 1
            status = HIT
            self.event_log.append(f"Hit: Page {page} in Frame {slot + 1}")
            note = self.policy.on_hit(index, slot, page)
            explanation = f"Page {page} is already in Frame {slot + 1}.{note}"

        # ----- PAGE FAULT -----
        else:
            self.faults += 1
            status = FAULT
            self.event_log.append(f"Fault: Page {page} not in memory")

            slot = self.frame_table.first_empty_slot()
            if slot is not None:
                self.frame_table.place(slot, page)
                self.policy.on_load(index, slot, page, evicted=None)
                self.event_log.append(f"Loaded: Page {page} -> Frame {slot + 1}")
                explanation = f"Page {page} loaded into empty Frame {slot + 1}."
            else:
                slot, reason = self.policy.select_victim(index, self.frame_table.snapshot())
                replaced_page = self.frame_table.frames[slot]
                if replaced_page is None:
                    raise InvariantViolation(
                        f"{self.policy.name} selected empty Frame {slot + 1} as victim"
                    )
                self.event_log.append(f"Evicting: Page {replaced_page} from Frame {slot + 1}")
                self.frame_table.place(slot, page)
                self.policy.on_load(index, slot, page, evicted=replaced_page)
                self.event_log.append(f"Loaded: Page {page} -> Frame {slot + 1} (replaced)")
                explanation = f"Page {replaced_page} replaced ({reason})."

        record = SimulationStep(
            step_index=index,
            requested_page=page,
            frames=self.frame_table.snapshot(),
            status=status,
            replaced_page=replaced_page,
            explanation=explanation,
            metadata=self.policy.metadata(),
        )
        self.steps.append(record)
        return record

    def run(self) -> SimulationResult:
        """Process every remaining reference and return the result."""
        while len(self.steps) < len(self.pages):
            self.step()
        return self.result()

    def result(self) -> SimulationResult:
        total = len(self.steps)
        return SimulationResult(
            policy=self.policy.name,
            frame_count=self.frame_count,
            steps=tuple(self.steps),
            total_hits=self.hits,
            total_faults=self.faults,
            hit_ratio=(self.hits / total) if total > 0 else 0.0,
            fault_ratio=(self.faults / total) if total > 0 else 0.0,
        )


def _as_pages(reference: Union[str, Iterable[int]]) -> Tuple[int, ...]:
    if isinstance(reference, str):
        return parse_reference_string(reference)
    return tuple(reference)


def run_simulation(reference: Union[str, Iterable[int]], frame_count: int,
                   policy: str) -> SimulationResult:
    """
    Simulate one policy.

    Args:
        reference: Raw comma separated text, or an already parsed sequence
        frame_count (int): Number of frames, must be >= 1
        policy (str): One of ReplacementPolicy.ALL

    Raises:
        ConfigError: If frame_count or policy is invalid
    """
    return Simulator(_as_pages(reference), frame_count, policy).run()


def run_all(reference: Union[str, Iterable[int]], frame_count: int,
            policies: Iterable[str] = ReplacementPolicy.ALL) -> Dict[str, SimulationResult]:
    """Simulate each policy independently over the same reference sequence."""
    pages = _as_pages(reference)
    results = {}
    for policy in policies:
        result = run_simulation(pages, frame_count, policy)
        results[result.policy] = result
    return results

"""
GenerationStats - Statistics for one thumbnail generation pass.
"""

import time
from dataclasses import dataclass, field
from enum import Enum
from typing import List


class PassState(Enum):
    """States of a generation pass."""
    IDLE = 'idle'
    SOURCE_READY = 'source_ready'
    DONE = 'done'
    FAILED = 'failed'


@dataclass
class GenerationStats:
    """
    Statistics for a generation pass over a set of profiles.

    Attributes:
        source_path: Source image the pass renders from
        total_profiles: Number of profiles in the pass
        generated: Profiles rendered in this pass
        skipped: Profiles skipped (artifact already present or no path)
        errors: Profiles that failed to render
        bytes_generated: Total bytes of thumbnails written
        start_time: Start timestamp
        state: Current pass state
        error_details: List of error messages
    """
    source_path: str = ''
    total_profiles: int = 0
    generated: int = 0
    skipped: int = 0
    errors: int = 0
    bytes_generated: int = 0
    start_time: float = field(default_factory=time.time)
    state: PassState = PassState.IDLE
    error_details: List[str] = field(default_factory=list)

    @property
    def elapsed_seconds(self) -> float:
        """Elapsed time in seconds."""
        return time.time() - self.start_time

    @property
    def completed_count(self) -> int:
        """Total completed (generated + skipped + errors)."""
        return self.generated + self.skipped + self.errors

    @property
    def succeeded(self) -> bool:
        """True once the pass finished with no failed profile."""
        return self.state == PassState.DONE and self.errors == 0

"""
Snapshot Service holding the operator-captured baseline.

The baseline is a copy of frames, never a view of the ingestion buffer,
which keeps evolving after a capture. Capturing stores the full frame
history; refining replaces it with the frames that moved.
"""
import os
import threading
import logging
from datetime import datetime
from typing import Iterable, List, Optional

from sniff_console.constants import BASELINE_PREFIX, FILE_TIMESTAMP_FORMAT
from sniff_console.models.can_frame import CanFrame
from sniff_console.services.comparison import CompareMode, Direction, classify
from sniff_console.services.frame_parser import format_frame
from sniff_backend import metrics

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from sniff_console.services.ingestion_service import IngestionService

logger = logging.getLogger(__name__)


class SnapshotService:
    """Stores the baseline frames and exports them to flat text files.
    
    Lock order: the ingestion buffer lock is always taken before this
    service's own lock.
    
    Attributes:
        export_dir: Directory baseline files are written to
        mode: Comparison granularity used by refine()
    """
    
    def __init__(self, export_dir: str = '.', mode: CompareMode = CompareMode.WHOLE):
        self.export_dir = export_dir
        self.mode = mode
        self._lock = threading.RLock()
        self._frames: List[CanFrame] = []
    
    def capture(self, ingestion: 'IngestionService') -> int:
        """Replace the baseline with a full copy of the ingestion buffer.
        
        Returns:
            Number of frames captured
        """
        with ingestion.locked() as frames:
            with self._lock:
                self._frames = list(frames)
                count = len(self._frames)
        logger.info(f"Captured {count} frame(s) as baseline")
        return count
    
    def replace(self, frames: Iterable[CanFrame]) -> None:
        with self._lock:
            self._frames = list(frames)
    
    def refine(self, ingestion: 'IngestionService', direction: Direction) -> List[CanFrame]:
        """Classify the current buffer against the baseline and keep the result.
        
        The classification result replaces the baseline.
        
        Returns:
            The new baseline frames
        """
        with ingestion.locked() as frames:
            with self._lock:
                result = classify(frames, self._frames, direction, self.mode)
                self._frames = result
        logger.info(f"Refined baseline ({direction.value}, {self.mode.value}): {len(result)} frame(s)")
        return list(result)
    
    def frames(self) -> List[CanFrame]:
        with self._lock:
            return list(self._frames)
    
    def __len__(self) -> int:
        with self._lock:
            return len(self._frames)
    
    def export_lines(self) -> List[str]:
        """Render the baseline as export lines, in stored order."""
        with self._lock:
            return [format_frame(frame) for frame in self._frames]
    
    def export(self, directory: Optional[str] = None, when: Optional[datetime] = None) -> str:
        """Write the baseline to a timestamped file.
        
        The filename format is: baseline_{YYYYMMDD}_{HHMMSS}_{mmm}.txt
        
        Args:
            directory: Target directory (defaults to export_dir)
            when: Timestamp for the filename (defaults to now)
            
        Returns:
            Path of the written file
        """
        directory = directory or self.export_dir
        when = when or datetime.now()
        os.makedirs(directory, exist_ok=True)
        filename = f"{BASELINE_PREFIX}_{when.strftime(FILE_TIMESTAMP_FORMAT)}_{when.microsecond // 1000:03d}.txt"
        path = os.path.join(directory, filename)
        
        lines = self.export_lines()
        with open(path, 'w', encoding='utf-8') as f:
            for line in lines:
                f.write(line + '\n')
        metrics.inc("baseline_exports")
        logger.info(f"Saved {len(lines)} frame(s) to {path}")
        return path

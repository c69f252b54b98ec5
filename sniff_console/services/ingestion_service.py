"""
Ingestion Service owning the rolling frame buffer and the live projections.

Two locks guard two independent units of state:
- the buffer lock covers the time-windowed frame buffer (append + eviction
  and every read of it);
- the projection lock covers the last-seen payload text per target address
  and the last decoded value per parameter, which the display reads.
"""
import threading
import logging
from collections import deque
from contextlib import contextmanager
from typing import Deque, Dict, Iterable, Iterator, List, Optional

from sniff_console.constants import WINDOW_MS_DEFAULT, TARGET_ADDRESSES_DEFAULT, PARAMETER_VALUE_FORMAT
from sniff_console.models.can_frame import CanFrame
from sniff_console.services.comparison import latest_per_id
from sniff_console.services.parameter_service import ParameterService
from sniff_console.utils.hex_text import normalize_address
from sniff_backend import metrics

logger = logging.getLogger(__name__)


class IngestionService:
    """Thread-safe owner of the ingestion buffer and last-seen projections.
    
    Frames are appended in arrival order. After each append every frame older
    than the newest frame's timestamp minus the window is trimmed from the
    front, so eviction depends only on frame timestamps and can be replayed.
    
    Attributes:
        window: Buffer window in seconds
        target_addresses: Identifiers tracked for the live display
        parameter_service: Parameter decoder (may be empty)
    """
    
    def __init__(self, window_ms: int = WINDOW_MS_DEFAULT,
                 target_addresses: Optional[Iterable[str]] = None,
                 parameter_service: Optional[ParameterService] = None):
        self.window = window_ms / 1000.0
        if target_addresses is None:
            target_addresses = TARGET_ADDRESSES_DEFAULT
        self.target_addresses: List[str] = [normalize_address(a, 'target_address') for a in target_addresses]
        self._targets = frozenset(self.target_addresses)
        self.parameter_service = parameter_service or ParameterService()
        
        self._buffer_lock = threading.Lock()
        self._frames: Deque[CanFrame] = deque()
        
        self._projection_lock = threading.Lock()
        self._last_payloads: Dict[str, str] = {}
        self._parameter_values: Dict[str, str] = {}
    
    def ingest(self, frame: CanFrame) -> int:
        """Append a frame, evict stale frames and update the projections.
        
        Args:
            frame: Newly parsed frame
            
        Returns:
            Number of frames evicted
        """
        threshold = frame.timestamp - self.window
        evicted = 0
        with self._buffer_lock:
            self._frames.append(frame)
            while self._frames and self._frames[0].timestamp < threshold:
                self._frames.popleft()
                evicted += 1
        metrics.inc("frames_ingested")
        if evicted:
            metrics.inc("frames_evicted", evicted)
        
        self._update_projections(frame)
        return evicted
    
    def _update_projections(self, frame: CanFrame) -> None:
        id_hex = frame.id_hex
        readings = self.parameter_service.decode_frame(frame) if self.parameter_service else []
        if id_hex not in self._targets and not readings:
            return
        with self._projection_lock:
            if id_hex in self._targets:
                self._last_payloads[id_hex] = frame.data_decimal
            for reading in readings:
                self._parameter_values[reading.name] = PARAMETER_VALUE_FORMAT.format(reading.value)
    
    @contextmanager
    def locked(self) -> Iterator[Deque[CanFrame]]:
        """Hold the buffer lock and yield the live buffer.
        
        Callers must not keep a reference to the yielded deque after the
        block ends, and must not mutate it.
        """
        with self._buffer_lock:
            yield self._frames
    
    def frames(self) -> List[CanFrame]:
        """Return a point-in-time copy of the buffer, oldest first."""
        with self._buffer_lock:
            return list(self._frames)
    
    def latest(self) -> Dict[int, CanFrame]:
        """Return the latest frame per identifier from the current buffer."""
        with self._buffer_lock:
            return latest_per_id(self._frames)
    
    def clear(self) -> None:
        with self._buffer_lock:
            self._frames.clear()
    
    def __len__(self) -> int:
        with self._buffer_lock:
            return len(self._frames)
    
    def last_payloads(self) -> Dict[str, str]:
        """Copy of target address -> last payload text (decimal bytes)."""
        with self._projection_lock:
            return dict(self._last_payloads)
    
    def parameter_values(self) -> Dict[str, str]:
        """Copy of parameter name -> last formatted scaled value."""
        with self._projection_lock:
            return dict(self._parameter_values)

"""
Link Service for managing the serial link and the ingestion worker thread.

The worker blocks on the transport waiting for the next line, transcribes
it, parses it and hands valid frames to the IngestionService. It checks the
cancellation event on every iteration; closing the transport unblocks a
pending read so the event is seen promptly.
"""
import threading
import time
import logging
from typing import Optional

from sniff_backend.adapters.interface import LineTransport, LinkStatus
from sniff_backend.adapters.sim import SimLineTransport
from sniff_backend.adapters.serial_line import SerialLineTransport
from sniff_backend.adapters.python_can_adapter import PythonCanLineTransport
from sniff_backend import metrics

from sniff_console.config import SerialSettings
from sniff_console.constants import TRANSIENT_PAUSE, WORKER_JOIN_TIMEOUT
from sniff_console.exceptions import TransportError
from sniff_console.services.frame_parser import try_parse_line
from sniff_console.services.ingestion_service import IngestionService
from sniff_console.services.raw_line_logger import RawLineLogger

logger = logging.getLogger(__name__)


def create_transport(settings: SerialSettings) -> LineTransport:
    """Instantiate (but do not open) the transport selected by the settings.
    
    Raises:
        ValueError: If the transport type is not supported
    """
    if settings.transport == 'serial':
        return SerialLineTransport(port=settings.port, baudrate=settings.baudrate,
                                   timeout=settings.read_timeout)
    if settings.transport == 'python-can':
        return PythonCanLineTransport(channel=settings.port, bitrate=settings.baudrate,
                                      interface=settings.interface, timeout=settings.read_timeout)
    if settings.transport == 'sim':
        return SimLineTransport()
    raise ValueError(f"Unknown transport type: {settings.transport}")


class IngestionWorker(threading.Thread):
    """Background thread that reads lines from the transport and ingests frames.
    
    Attributes:
        transport: Open line transport
        ingestion: IngestionService receiving parsed frames
        raw_logger: Optional transcript of every received line
        stop_event: Cooperative cancellation signal
    """
    
    def __init__(self, transport: LineTransport, ingestion: IngestionService,
                 raw_logger: Optional[RawLineLogger] = None,
                 stop_event: Optional[threading.Event] = None,
                 pause: float = TRANSIENT_PAUSE):
        super().__init__(name='IngestionWorker', daemon=True)
        self.transport = transport
        self.ingestion = ingestion
        self.raw_logger = raw_logger
        self.stop_event = stop_event or threading.Event()
        self.pause = pause
    
    def run(self):
        """Main thread loop: read, transcribe, parse and ingest until stopped."""
        logger.debug("IngestionWorker started")
        while not self.stop_event.is_set():
            try:
                self.step()
            except Exception as e:
                logger.error(f"IngestionWorker error in run loop: {e}", exc_info=True)
        logger.debug("IngestionWorker: stop signal received")
    
    def step(self) -> None:
        """Handle a single read from the transport."""
        result = self.transport.read_line()
        if result.status is LinkStatus.NO_DATA:
            time.sleep(self.pause)
            return
        if result.status is LinkStatus.FAILURE:
            logger.error(f"Serial read error: {result.error}")
            return
        
        line = result.line
        if self.raw_logger is not None:
            try:
                self.raw_logger.write_line(line)
            except OSError as e:
                logger.error(f"Failed to write raw line to transcript: {e}")
        
        frame = try_parse_line(line)
        if frame is not None:
            self.ingestion.ingest(frame)
    
    def stop(self):
        """Signal the worker to stop after the current read."""
        self.stop_event.set()


class LinkService:
    """Service for opening the link and running the ingestion worker.
    
    Attributes:
        settings: Serial link settings
        transport: Current transport (None until open)
        worker: Ingestion worker thread (None until started)
        stop_event: Cancellation signal shared with the worker
    """
    
    def __init__(self, settings: SerialSettings, ingestion: IngestionService,
                 raw_logger: Optional[RawLineLogger] = None,
                 transport: Optional[LineTransport] = None,
                 stop_event: Optional[threading.Event] = None):
        """Initialize the link service.
        
        Args:
            settings: Serial link settings used to build the transport
            ingestion: IngestionService receiving frames
            raw_logger: Optional transcript logger
            transport: Pre-built transport (overrides the settings)
            stop_event: Shared cancellation event (created if None)
        """
        self.settings = settings
        self.ingestion = ingestion
        self.raw_logger = raw_logger
        self.transport: Optional[LineTransport] = transport
        self.worker: Optional[IngestionWorker] = None
        self.stop_event = stop_event or threading.Event()
    
    def open(self) -> None:
        """Open the transport.
        
        Raises:
            TransportError: If the link cannot be opened (fatal at startup)
        """
        try:
            if self.transport is None:
                self.transport = create_transport(self.settings)
            self.transport.open()
        except Exception as e:
            raise TransportError(f"Failed to open {self.settings.transport} link {self.settings.port}: {e}",
                                 transport_type=self.settings.transport, operation='open',
                                 original_error=e) from e
        logger.info(f"Connected to {self.settings.port} at {self.settings.baudrate} baud "
                    f"({self.settings.transport})")
    
    def start(self) -> None:
        """Open the transport if needed and start the ingestion worker."""
        if self.worker is not None:
            logger.warning("Ingestion worker already running")
            return
        if self.transport is None or not getattr(self.transport, 'is_open', True):
            self.open()
        self.stop_event.clear()
        self.worker = IngestionWorker(self.transport, self.ingestion, self.raw_logger, self.stop_event)
        self.worker.start()
    
    def stop(self, timeout: float = WORKER_JOIN_TIMEOUT) -> None:
        """Stop the worker, closing the transport to unblock a pending read."""
        self.stop_event.set()
        if self.transport is not None:
            try:
                self.transport.close()
            except Exception as e:
                logger.warning(f"Error closing transport: {e}", exc_info=True)
        if self.worker is not None:
            self.worker.join(timeout=timeout)
            if self.worker.is_alive():
                logger.warning("Ingestion worker did not stop within timeout")
            self.worker = None
        logger.info(f"Link closed ({metrics.get('lines_read')} lines read)")
    
    def is_running(self) -> bool:
        return self.worker is not None and self.worker.is_alive()

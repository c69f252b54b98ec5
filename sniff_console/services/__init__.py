"""
Service layer for the CAN diff sniffer.

Services:
- IngestionService: Time-windowed frame buffer and live projections
- SnapshotService: Baseline capture, refinement and export
- ParameterService: Scaled parameter decoding
- RawLineLogger: Verbatim transcript of received lines
- LinkService: Transport management and the ingestion worker thread
- DisplayRefresher: Periodic live display redraw
"""

from sniff_console.services.ingestion_service import IngestionService
from sniff_console.services.snapshot_service import SnapshotService
from sniff_console.services.parameter_service import ParameterService
from sniff_console.services.raw_line_logger import RawLineLogger
from sniff_console.services.link_service import LinkService, IngestionWorker
from sniff_console.services.display_service import DisplayRefresher

__all__ = [
    'IngestionService',
    'SnapshotService',
    'ParameterService',
    'RawLineLogger',
    'LinkService',
    'IngestionWorker',
    'DisplayRefresher',
]

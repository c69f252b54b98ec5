"""
Display Service for the live key/value groups at the bottom of the terminal.

Only the projection lock of the IngestionService is taken here, so a
redraw never waits on classification work.
"""
import shutil
import sys
import threading
import logging
from typing import Callable, Dict, List, Optional, Sequence

from sniff_console.constants import NO_DATA_TEXT, REFRESH_INTERVAL
from sniff_console.services.ingestion_service import IngestionService

logger = logging.getLogger(__name__)

# ANSI: save cursor, move to row;col, clear line, restore cursor
_SAVE = '\x1b7'
_RESTORE = '\x1b8'
_CLEAR_LINE = '\x1b[2K'


def render_lines(target_addresses: Sequence[str], last_payloads: Dict[str, str],
                 parameter_names: Sequence[str] = (), parameter_values: Optional[Dict[str, str]] = None) -> List[str]:
    """Render the live display as text lines.
    
    One line per target address, in configured order, followed by one line
    per configured parameter.
    """
    lines = [f"{address}: {last_payloads.get(address, NO_DATA_TEXT)}" for address in target_addresses]
    values = parameter_values or {}
    lines.extend(f"{name}: {values.get(name, NO_DATA_TEXT)}" for name in parameter_names)
    return lines


class DisplayRefresher(threading.Thread):
    """Background thread redrawing the live display on a fixed interval.
    
    Attributes:
        ingestion: Source of the last-seen projections
        interval: Seconds between redraws
        write: Callable receiving the rendered text
    """
    
    def __init__(self, ingestion: IngestionService, interval: float = REFRESH_INTERVAL,
                 write: Optional[Callable[[str], None]] = None,
                 stop_event: Optional[threading.Event] = None):
        super().__init__(name='DisplayRefresher', daemon=True)
        self.ingestion = ingestion
        self.interval = interval
        self.write = write or self._write_stdout
        self.stop_event = stop_event or threading.Event()
    
    def render(self) -> List[str]:
        parameters = self.ingestion.parameter_service.names
        return render_lines(self.ingestion.target_addresses, self.ingestion.last_payloads(),
                            parameters, self.ingestion.parameter_values() if parameters else None)
    
    def redraw(self) -> None:
        lines = self.render()
        if not lines:
            return
        height = shutil.get_terminal_size().lines
        first_row = max(height - len(lines) + 1, 1)
        out = [_SAVE]
        for offset, line in enumerate(lines):
            out.append(f"\x1b[{first_row + offset};1H{_CLEAR_LINE}{line}")
        out.append(_RESTORE)
        self.write(''.join(out))
    
    def run(self):
        while not self.stop_event.wait(timeout=self.interval):
            try:
                self.redraw()
            except Exception as e:
                logger.error(f"Error refreshing display: {e}", exc_info=True)
    
    def stop(self):
        self.stop_event.set()
    
    @staticmethod
    def _write_stdout(text: str) -> None:
        sys.stdout.write(text)
        sys.stdout.flush()

"""
Raw Line Logger for transcribing every line received on the link.

Each line is written and flushed immediately so the transcript survives a
crash up to the last received line.
"""
import os
import threading
import logging
from datetime import datetime
from typing import Optional

from sniff_console.constants import RAW_LOG_PREFIX, FILE_TIMESTAMP_FORMAT

logger = logging.getLogger(__name__)


class RawLineLogger:
    """Thread-safe append-only transcript of raw link lines.
    
    Attributes:
        log_dir: Directory the transcript is created in
    """
    
    def __init__(self, log_dir: str = '.'):
        self.log_dir = log_dir
        self._lock = threading.Lock()
        self._log_file = None
        self._log_file_path: Optional[str] = None
        self._lines_logged = 0
    
    def start(self, when: Optional[datetime] = None) -> str:
        """Open a new transcript file: can_log_{YYYYMMDD}_{HHMMSS}.txt.
        
        Returns:
            Path to the transcript
            
        Raises:
            OSError: If the file cannot be created
        """
        with self._lock:
            if self._log_file is not None:
                logger.warning("Raw line logging already active, closing previous transcript")
                self._close_locked()
            
            when = when or datetime.now()
            os.makedirs(self.log_dir, exist_ok=True)
            filename = f"{RAW_LOG_PREFIX}_{when.strftime(FILE_TIMESTAMP_FORMAT)}.txt"
            self._log_file_path = os.path.join(self.log_dir, filename)
            # append mode, safer for crashes
            self._log_file = open(self._log_file_path, 'a', encoding='utf-8')
            self._lines_logged = 0
            logger.info(f"Raw line logging started: {self._log_file_path}")
            return self._log_file_path
    
    def write_line(self, line: str) -> None:
        """Append one raw line and flush it to disk."""
        with self._lock:
            if self._log_file is None:
                return
            self._log_file.write(line + '\n')
            self._log_file.flush()
            self._lines_logged += 1
    
    def stop(self) -> Optional[str]:
        """Close the transcript.
        
        Returns:
            Path to the transcript, or None if not logging
        """
        with self._lock:
            return self._close_locked()
    
    def _close_locked(self) -> Optional[str]:
        path = self._log_file_path
        if self._log_file is not None:
            try:
                self._log_file.close()
            except OSError as e:
                logger.error(f"Error closing raw line log {path}: {e}", exc_info=True)
            logger.info(f"Raw line logging stopped: {path} ({self._lines_logged} lines)")
        self._log_file = None
        self._log_file_path = None
        return path
    
    def is_logging(self) -> bool:
        with self._lock:
            return self._log_file is not None
    
    def get_log_path(self) -> Optional[str]:
        with self._lock:
            return self._log_file_path
    
    @property
    def lines_logged(self) -> int:
        with self._lock:
            return self._lines_logged

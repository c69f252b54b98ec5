"""
CAN diff sniffer - console tool for finding unknown CAN signals by stimulus.

Workflow:
1. Frames stream in from a serial sniffer; the last second is buffered.
2. Press 's' to capture the buffer as the baseline.
3. Apply a stimulus (press a button, turn a knob) and press 'i' or 'k' to
   keep only the IDs whose value increased or decreased.
4. Repeat step 3 to narrow the candidates; 'q' quits.

Every capture and refinement is exported to a baseline_*.txt file and every
received line is transcribed to a can_log_*.txt file.
"""
import argparse
import sys
import threading
import logging
from typing import Callable, List, Optional

from sniff_backend.adapters.interface import LineTransport
from sniff_backend import metrics

from sniff_console.config import ConfigManager, configure_logging
from sniff_console.constants import (
    KEY_CAPTURE, KEY_INCREASE, KEY_DECREASE, KEY_QUIT,
    TRANSPORT_TYPES, COMPARE_MODES,
)
from sniff_console.exceptions import TransportError
from sniff_console.services.comparison import CompareMode, Direction
from sniff_console.services.display_service import DisplayRefresher
from sniff_console.services.ingestion_service import IngestionService
from sniff_console.services.keyboard import KeyPoller
from sniff_console.services.link_service import LinkService
from sniff_console.services.parameter_service import ParameterService
from sniff_console.services.raw_line_logger import RawLineLogger
from sniff_console.services.snapshot_service import SnapshotService

logger = logging.getLogger(__name__)

HELP_TEXT = (f"Press '{KEY_CAPTURE}' to capture a baseline, '{KEY_INCREASE}' to keep increased values, "
             f"'{KEY_DECREASE}' to keep decreased values, '{KEY_QUIT}' to quit.")


class SnifferApp:
    """Wires the services together and runs the operator command loop.
    
    Attributes:
        config: Loaded configuration
        ingestion: Owner of the frame buffer and projections
        snapshots: Baseline store
        raw_logger: Transcript of received lines
        link: Transport and ingestion worker
        stop_event: Cancellation signal set by the quit command
    """
    
    def __init__(self, config: ConfigManager, transport: Optional[LineTransport] = None,
                 out: Optional[Callable[[str], None]] = None, show_display: bool = True):
        self.config = config
        capture = config.capture_settings
        self.parameter_service = ParameterService(config.parameters)
        self.ingestion = IngestionService(capture.window_ms, capture.target_addresses, self.parameter_service)
        self.snapshots = SnapshotService(capture.export_dir, CompareMode(capture.compare_mode))
        self.raw_logger = RawLineLogger(capture.log_dir)
        self.stop_event = threading.Event()
        self.link = LinkService(config.serial_settings, self.ingestion, self.raw_logger,
                                transport=transport, stop_event=self.stop_event)
        self.display: Optional[DisplayRefresher] = None
        self.show_display = show_display
        self.out = out or print
    
    def capture(self) -> str:
        """Copy the buffer into the baseline and export it."""
        count = self.snapshots.capture(self.ingestion)
        self.out(f"Copied {count} frames to the baseline")
        path = self.snapshots.export()
        self.out(f"Saved to {path}")
        return path
    
    def refine(self, direction: Direction) -> str:
        """Keep only the IDs that moved in `direction` and export the result."""
        frames = self.snapshots.refine(self.ingestion, direction)
        self.out(f"Baseline updated: {len(frames)} frames ({direction.value}d)")
        path = self.snapshots.export()
        self.out(f"Saved to {path}")
        return path
    
    def handle_key(self, key: str) -> bool:
        """Dispatch one operator key.
        
        Returns:
            False once the quit key was pressed, True otherwise
        """
        if key == KEY_CAPTURE:
            self.capture()
        elif key == KEY_INCREASE:
            self.refine(Direction.INCREASE)
        elif key == KEY_DECREASE:
            self.refine(Direction.DECREASE)
        elif key == KEY_QUIT:
            self.stop_event.set()
            return False
        return True
    
    def start(self) -> None:
        """Open the link and start the background threads.
        
        Raises:
            TransportError: If the link cannot be opened
        """
        self.link.open()
        self.raw_logger.start()
        self.link.start()
        if self.show_display:
            self.display = DisplayRefresher(self.ingestion, self.config.app_settings.refresh_interval)
            self.display.start()
    
    def shutdown(self) -> None:
        self.stop_event.set()
        if self.display is not None:
            self.display.stop()
            self.display.join(timeout=self.config.app_settings.refresh_interval * 2)
            self.display = None
        self.link.stop()
        self.raw_logger.stop()
        logger.info(f"Session metrics: {metrics.get_all()}")
    
    def run(self, key_poller: Optional[KeyPoller] = None) -> int:
        """Run until the quit key is pressed.
        
        Returns:
            Process exit code (1 when the link cannot be opened)
        """
        try:
            self.start()
        except TransportError as e:
            logger.error(f"Error opening port: {e}")
            self.out(f"Error opening port: {e}")
            return 1
        
        self.out(f"Logging raw lines to {self.raw_logger.get_log_path()}")
        self.out(HELP_TEXT)
        poll_interval = self.config.app_settings.poll_interval
        poller = key_poller or KeyPoller()
        try:
            with poller as keys:
                while not self.stop_event.is_set():
                    key = keys.poll()
                    if key is not None and not self.handle_key(key):
                        break
                    self.stop_event.wait(poll_interval)
        except KeyboardInterrupt:
            logger.info("Interrupted")
        finally:
            self.shutdown()
        return 0


def build_arg_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(prog='can-diff-sniffer',
                                description="Capture a CAN baseline and find IDs that increased or decreased.")
    p.add_argument("--config", default=None, help="JSON config file")
    p.add_argument("--port", default=None, help="serial port, pyserial URL or python-can channel")
    p.add_argument("--baudrate", type=int, default=None)
    p.add_argument("--transport", choices=TRANSPORT_TYPES, default=None)
    p.add_argument("--interface", default=None, help="python-can interface (with --transport python-can)")
    p.add_argument("--compare-mode", choices=COMPARE_MODES, default=None)
    p.add_argument("--log-level", default=None)
    p.add_argument("--log-dir", default=None, help="directory for raw line transcripts")
    p.add_argument("--export-dir", default=None, help="directory for baseline exports")
    p.add_argument("--no-display", action="store_true", help="disable the live display")
    return p


def load_config(args: argparse.Namespace) -> ConfigManager:
    """Load configuration and apply command line overrides."""
    config = ConfigManager(args.config)
    if args.port:
        config.serial_settings.port = args.port
    if args.baudrate:
        config.serial_settings.baudrate = args.baudrate
    if args.transport:
        config.serial_settings.transport = args.transport
    if args.interface:
        config.serial_settings.interface = args.interface
    if args.compare_mode:
        config.capture_settings.compare_mode = args.compare_mode
    if args.log_level:
        config.app_settings.log_level = args.log_level.upper()
    if args.log_dir:
        config.capture_settings.log_dir = args.log_dir
    if args.export_dir:
        config.capture_settings.export_dir = args.export_dir
    return config


def main(argv: Optional[List[str]] = None) -> int:
    args = build_arg_parser().parse_args(argv)
    configure_logging(args.log_level)
    config = load_config(args)
    configure_logging(config.app_settings.log_level)
    
    errors = config.validate()
    if errors:
        for error in errors:
            logger.error(f"Invalid configuration: {error}")
        return 2
    
    app = SnifferApp(config, show_display=not args.no_display)
    return app.run()


if __name__ == '__main__':
    sys.exit(main())

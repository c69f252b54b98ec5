"""
Configuration management for the CAN diff sniffer.

This module provides centralized configuration management, supporting:
- Loading from JSON config files
- Environment variable overrides
- Validation and type safety for all settings
- Parameter definitions for the optional decoding extension
- The single place where logging is configured
"""

import os
import json
import logging
from dataclasses import dataclass, field, asdict
from typing import Optional, Dict, Any, List
from pathlib import Path

from sniff_console.constants import (
    SERIAL_PORT_DEFAULT, SERIAL_BAUDRATE_DEFAULT, SERIAL_READ_TIMEOUT,
    TRANSPORT_DEFAULT, TRANSPORT_TYPES,
    WINDOW_MS_DEFAULT, TARGET_ADDRESSES_DEFAULT, COMPARE_MODE_WHOLE, COMPARE_MODES,
    POLL_INTERVAL, REFRESH_INTERVAL,
)
from sniff_console.exceptions import ConfigurationError
from sniff_console.models.parameter import Parameter
from sniff_console.utils.hex_text import normalize_address

logger = logging.getLogger(__name__)

LOG_FORMAT = '%(asctime)s %(levelname)-7s %(name)s: %(message)s'
VALID_LOG_LEVELS = {'DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL'}


def configure_logging(level: Optional[str] = None) -> None:
    """Configure the root logger.
    
    Args:
        level: Level name; defaults to the LOG_LEVEL env var, then INFO
    """
    level_name = (level or os.environ.get('LOG_LEVEL') or 'INFO').upper()
    if level_name not in VALID_LOG_LEVELS:
        level_name = 'INFO'
    logging.basicConfig(level=getattr(logging, level_name), format=LOG_FORMAT, force=True)


@dataclass
class SerialSettings:
    """Serial link configuration settings.
    
    Attributes:
        port: Serial port name or pyserial URL (e.g., 'COM11', '/dev/ttyUSB0', 'loop://')
        baudrate: Baud rate
        read_timeout: Read timeout in seconds for a single line
        transport: Transport type ('serial', 'python-can', 'sim')
        interface: python-can interface name when transport is 'python-can'
    """
    port: str = SERIAL_PORT_DEFAULT
    baudrate: int = SERIAL_BAUDRATE_DEFAULT
    read_timeout: float = SERIAL_READ_TIMEOUT
    transport: str = TRANSPORT_DEFAULT
    interface: Optional[str] = None
    
    def validate(self) -> List[str]:
        """Validate settings and return list of error messages (empty if valid)."""
        errors = []
        if not self.port or not isinstance(self.port, str):
            errors.append("Serial port must be a non-empty string")
        if not isinstance(self.baudrate, int) or self.baudrate <= 0:
            errors.append("Baud rate must be a positive integer")
        if not isinstance(self.read_timeout, (int, float)) or self.read_timeout <= 0:
            errors.append("Read timeout must be a positive number")
        if self.transport not in TRANSPORT_TYPES:
            errors.append(f"Transport must be one of {TRANSPORT_TYPES}")
        return errors


@dataclass
class CaptureSettings:
    """Ingestion and comparison settings.
    
    Attributes:
        window_ms: Ingestion buffer window in milliseconds
        compare_mode: 'whole' payload or adjacent byte 'pair' comparison
        target_addresses: IDs shown in the live display (hex text)
        log_dir: Directory for raw line transcripts
        export_dir: Directory for baseline exports
    """
    window_ms: int = WINDOW_MS_DEFAULT
    compare_mode: str = COMPARE_MODE_WHOLE
    target_addresses: List[str] = field(default_factory=lambda: list(TARGET_ADDRESSES_DEFAULT))
    log_dir: str = '.'
    export_dir: str = '.'
    
    def validate(self) -> List[str]:
        """Validate settings and return list of error messages (empty if valid)."""
        errors = []
        if not isinstance(self.window_ms, int) or self.window_ms <= 0:
            errors.append("Window must be a positive integer number of milliseconds")
        if self.compare_mode not in COMPARE_MODES:
            errors.append(f"Compare mode must be one of {COMPARE_MODES}")
        for address in self.target_addresses:
            try:
                normalize_address(address, 'target_address')
            except ConfigurationError as e:
                errors.append(str(e))
        return errors


@dataclass
class AppSettings:
    """Application-level configuration settings.
    
    Attributes:
        log_level: Logging level ('DEBUG', 'INFO', 'WARNING', 'ERROR')
        refresh_interval: Live display refresh interval in seconds
        poll_interval: Keyboard polling interval in seconds
    """
    log_level: str = 'INFO'
    refresh_interval: float = REFRESH_INTERVAL
    poll_interval: float = POLL_INTERVAL
    
    def validate(self) -> List[str]:
        """Validate settings and return list of error messages (empty if valid)."""
        errors = []
        if self.log_level.upper() not in VALID_LOG_LEVELS:
            errors.append(f"Log level must be one of {VALID_LOG_LEVELS}")
        if self.refresh_interval <= 0:
            errors.append("Refresh interval must be positive")
        if self.poll_interval <= 0:
            errors.append("Poll interval must be positive")
        return errors


class ConfigManager:
    """Centralized configuration manager for the CAN diff sniffer.
    
    Sources, by priority:
    1. JSON config file (highest priority)
    2. Environment variables
    3. Default values (lowest priority)
    
    Attributes:
        serial_settings: Serial link configuration
        capture_settings: Ingestion and comparison configuration
        app_settings: Application-level configuration
        parameters: Parameter definitions for the decoding extension
        _config_file: Path to JSON config file (if loaded)
    """
    
    USER_CONFIG_DIR = Path.home() / '.can_diff_sniffer'
    PROJECT_CONFIG_NAME = 'sniffer_config.json'
    
    def __init__(self, config_file: Optional[str] = None, load_defaults: bool = True):
        """Initialize ConfigManager.
        
        Args:
            config_file: Optional path to JSON config file. If None, will try:
                        - ~/.can_diff_sniffer/config.json (user config)
                        - ./sniffer_config.json (working directory)
            load_defaults: Whether to search the default locations when no
                        config_file is given
        """
        self.serial_settings = SerialSettings()
        self.capture_settings = CaptureSettings()
        self.app_settings = AppSettings()
        self.parameters: List[Parameter] = []
        self._config_file: Optional[str] = config_file
        
        self._load_from_environment()
        if config_file:
            self._load_from_file(config_file)
        elif load_defaults:
            self._load_from_default_locations()
        
        errors = self.validate()
        if errors:
            logger.warning(f"Configuration validation errors: {errors}")
    
    def _load_from_environment(self) -> None:
        """Load configuration from environment variables."""
        port = os.environ.get('SNIFF_PORT')
        if port:
            self.serial_settings.port = port
        
        baudrate = os.environ.get('SNIFF_BAUDRATE')
        if baudrate:
            try:
                self.serial_settings.baudrate = int(baudrate)
            except (ValueError, TypeError):
                logger.warning(f"Invalid SNIFF_BAUDRATE environment variable: {baudrate}")
        
        transport = os.environ.get('SNIFF_TRANSPORT')
        if transport:
            self.serial_settings.transport = transport
        
        compare_mode = os.environ.get('SNIFF_COMPARE_MODE')
        if compare_mode:
            self.capture_settings.compare_mode = compare_mode.lower()
        
        log_level = os.environ.get('LOG_LEVEL')
        if log_level:
            self.app_settings.log_level = log_level.upper()
    
    def _load_from_file(self, file_path: str) -> bool:
        """Load configuration from JSON file.
        
        Args:
            file_path: Path to JSON config file
            
        Returns:
            True if loaded successfully, False otherwise
        """
        if not os.path.exists(file_path):
            logger.debug(f"Config file not found: {file_path}")
            return False
        
        try:
            with open(file_path, 'r', encoding='utf-8') as f:
                data = json.load(f)
        except json.JSONDecodeError as e:
            logger.error(f"Failed to parse config file {file_path}: {e}")
            return False
        except OSError as e:
            logger.error(f"Failed to read config file {file_path}: {e}", exc_info=True)
            return False
        
        self.load_dict(data)
        self._config_file = file_path
        logger.info(f"Loaded configuration from {file_path}")
        return True
    
    def load_dict(self, data: Dict[str, Any]) -> None:
        """Apply a configuration dictionary (same layout as the JSON file)."""
        if 'serial_settings' in data:
            serial_data = data['serial_settings']
            if 'port' in serial_data:
                self.serial_settings.port = str(serial_data['port'])
            if 'baudrate' in serial_data:
                try:
                    self.serial_settings.baudrate = int(serial_data['baudrate'])
                except (ValueError, TypeError):
                    logger.warning(f"Invalid baudrate in config: {serial_data['baudrate']}")
            if 'read_timeout' in serial_data:
                try:
                    self.serial_settings.read_timeout = float(serial_data['read_timeout'])
                except (ValueError, TypeError):
                    logger.warning(f"Invalid read_timeout in config: {serial_data['read_timeout']}")
            if 'transport' in serial_data:
                self.serial_settings.transport = str(serial_data['transport'])
            if 'interface' in serial_data:
                self.serial_settings.interface = serial_data['interface']
        
        if 'capture_settings' in data:
            capture_data = data['capture_settings']
            if 'window_ms' in capture_data:
                try:
                    self.capture_settings.window_ms = int(capture_data['window_ms'])
                except (ValueError, TypeError):
                    logger.warning(f"Invalid window_ms in config: {capture_data['window_ms']}")
            if 'compare_mode' in capture_data:
                self.capture_settings.compare_mode = str(capture_data['compare_mode']).lower()
            if 'target_addresses' in capture_data:
                addresses = []
                for address in capture_data['target_addresses']:
                    try:
                        addresses.append(normalize_address(address, 'target_address'))
                    except ConfigurationError as e:
                        logger.warning(f"Ignoring target address: {e}")
                self.capture_settings.target_addresses = addresses
            if 'log_dir' in capture_data:
                self.capture_settings.log_dir = str(capture_data['log_dir'])
            if 'export_dir' in capture_data:
                self.capture_settings.export_dir = str(capture_data['export_dir'])
        
        if 'app_settings' in data:
            app_data = data['app_settings']
            if 'log_level' in app_data:
                self.app_settings.log_level = str(app_data['log_level']).upper()
            if 'refresh_interval' in app_data:
                try:
                    self.app_settings.refresh_interval = float(app_data['refresh_interval'])
                except (ValueError, TypeError):
                    logger.warning(f"Invalid refresh_interval in config: {app_data['refresh_interval']}")
            if 'poll_interval' in app_data:
                try:
                    self.app_settings.poll_interval = float(app_data['poll_interval'])
                except (ValueError, TypeError):
                    logger.warning(f"Invalid poll_interval in config: {app_data['poll_interval']}")
        
        if 'parameters' in data:
            parameters = []
            for entry in data['parameters'] or []:
                try:
                    parameters.append(Parameter.from_dict(entry))
                except ConfigurationError as e:
                    logger.warning(f"Ignoring parameter definition: {e}")
            self.parameters = parameters
    
    def _load_from_default_locations(self) -> None:
        """Try loading from default config file locations."""
        user_config_file = self.USER_CONFIG_DIR / 'config.json'
        if user_config_file.exists():
            self._load_from_file(str(user_config_file))
            return
        
        project_config_file = Path.cwd() / self.PROJECT_CONFIG_NAME
        if project_config_file.exists():
            self._load_from_file(str(project_config_file))
    
    def to_dict(self) -> Dict[str, Any]:
        data = {
            'serial_settings': asdict(self.serial_settings),
            'capture_settings': asdict(self.capture_settings),
            'app_settings': asdict(self.app_settings),
        }
        # Remove None values
        for section in data.values():
            for key in list(section.keys()):
                if section[key] is None:
                    del section[key]
        data['parameters'] = [p.to_dict() for p in self.parameters]
        return data
    
    def save_to_file(self, file_path: Optional[str] = None) -> bool:
        """Save current configuration to JSON file.
        
        Args:
            file_path: Optional path to save to. If None, uses _config_file or the user config.
            
        Returns:
            True if saved successfully, False otherwise
        """
        save_path = file_path or self._config_file
        if not save_path:
            self.USER_CONFIG_DIR.mkdir(exist_ok=True)
            save_path = str(self.USER_CONFIG_DIR / 'config.json')
        
        try:
            directory = os.path.dirname(save_path)
            if directory:
                os.makedirs(directory, exist_ok=True)
            with open(save_path, 'w', encoding='utf-8') as f:
                json.dump(self.to_dict(), f, indent=2)
            self._config_file = save_path
            logger.info(f"Saved configuration to {save_path}")
            return True
        except OSError as e:
            logger.error(f"Failed to save config file {save_path}: {e}", exc_info=True)
            return False
    
    def validate(self) -> List[str]:
        """Validate all configuration settings.
        
        Returns:
            List of error messages (empty if all valid)
        """
        errors = []
        errors.extend(self.serial_settings.validate())
        errors.extend(self.capture_settings.validate())
        errors.extend(self.app_settings.validate())
        return errors
    
    @property
    def config_file(self) -> Optional[str]:
        return self._config_file

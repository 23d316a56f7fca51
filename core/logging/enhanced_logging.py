# Enhanced structured logging with multi-channel support
import sys
import logging
import logging.handlers
from typing import Dict, Optional, Any
import structlog

from core.config.settings import Settings
from .channels import (
    LogChannel,
    get_channel_for_component,
    get_channel_config,
    create_log_directory_structure,
)

# Global logger manager instance
_logger_manager: Optional['EnhancedLoggerManager'] = None


def _record_channel(record: logging.LogRecord) -> Optional[str]:
    """Channel of a record, whether it came through structlog or plain stdlib."""
    msg = record.msg
    if isinstance(msg, dict) and "channel" in msg:
        return str(msg["channel"])
    ch = getattr(record, "channel", None)
    return str(ch) if ch is not None else None


class ChannelFilter(logging.Filter):
    """Filter that routes records to a handler only if they match a channel.

    Records without a channel are accepted when their logger name starts with
    one of `allowed_logger_prefixes` (e.g. uvicorn for the API channel).
    """

    def __init__(self, expected_channel: str, allowed_logger_prefixes: Optional[list[str]] = None):
        super().__init__()
        self.expected_channel = expected_channel
        self.allowed_logger_prefixes = allowed_logger_prefixes or []

    def filter(self, record: logging.LogRecord) -> bool:
        ch = _record_channel(record)
        if ch is not None:
            return ch == self.expected_channel
        name = getattr(record, "name", "")
        return any(name.startswith(prefix) for prefix in self.allowed_logger_prefixes)


def _foreign_pre_chain() -> list:
    return [
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="iso"),
    ]


class EnhancedLoggerManager:
    """Logging manager with multi-channel support and configurable formats."""

    def __init__(self, settings: Settings):
        self.settings = settings
        self.channel_handlers: Dict[LogChannel, logging.Handler] = {}

        self._setup_logging()

    @property
    def _level(self) -> int:
        return getattr(logging, self.settings.logging.level.upper(), logging.INFO)

    def _setup_logging(self) -> None:
        if self.settings.logging.file_enabled:
            create_log_directory_structure(self.settings.logs_dir)

        self._setup_console_logging()

        if self.settings.logging.file_enabled:
            self._setup_channel_logging()

        self._configure_structlog()

    def _setup_console_logging(self) -> None:
        """Setup console logging with configurable format."""
        root_logger = logging.getLogger()
        root_logger.setLevel(self._level)

        console_processor = (
            structlog.processors.JSONRenderer()
            if self.settings.logging.console_json_format
            else structlog.dev.ConsoleRenderer()
        )
        formatter = structlog.stdlib.ProcessorFormatter(
            processor=console_processor,
            foreign_pre_chain=_foreign_pre_chain(),
        )

        existing = [
            h for h in root_logger.handlers
            if isinstance(h, logging.StreamHandler) and getattr(h, "stream", None) is sys.stdout
        ]
        if not self.settings.logging.console_enabled:
            for handler in existing:
                root_logger.removeHandler(handler)
            return

        # Reconfigure a handler that is already there (e.g. set by uvicorn)
        if existing:
            for handler in existing:
                handler.setLevel(self._level)
                handler.setFormatter(formatter)
            return

        console_handler = logging.StreamHandler(sys.stdout)
        console_handler.setLevel(self._level)
        console_handler.setFormatter(formatter)
        root_logger.addHandler(console_handler)

    def _setup_channel_logging(self) -> None:
        """Setup one rotating file per channel."""
        for channel in LogChannel:
            self.channel_handlers[channel] = self._create_channel_handler(channel)

        # uvicorn/fastapi propagate to root; ChannelFilter sends them to the API file
        root_logger = logging.getLogger()
        for handler in self.channel_handlers.values():
            if handler not in root_logger.handlers:
                root_logger.addHandler(handler)

        # aiokafka is chatty; keep it at WARNING unless raised explicitly
        for name in ("aiokafka", "kafka"):
            lg = logging.getLogger(name)
            if lg.level == logging.NOTSET:
                lg.setLevel(logging.WARNING)

    def _create_channel_handler(self, channel: LogChannel) -> logging.Handler:
        """Create a file handler for a specific channel."""
        config = get_channel_config(channel)
        handler = logging.handlers.RotatingFileHandler(
            filename=config.get_file_path(self.settings.logs_dir),
            maxBytes=self._parse_size(self.settings.logging.file_max_size),
            backupCount=self.settings.logging.file_backup_count,
            encoding="utf-8"
        )
        handler.setLevel(getattr(logging, config.level))

        channel_processor = (
            structlog.processors.JSONRenderer()
            if self.settings.logging.json_format
            else structlog.processors.KeyValueRenderer(key_order=["event", "level", "timestamp"])
        )
        handler.setFormatter(
            structlog.stdlib.ProcessorFormatter(
                processor=channel_processor,
                foreign_pre_chain=_foreign_pre_chain(),
            )
        )

        # The error file collects ERROR+ from everywhere
        if channel != LogChannel.ERROR:
            allowed_prefixes = ["uvicorn", "fastapi", "starlette"] if channel == LogChannel.API else []
            handler.addFilter(ChannelFilter(expected_channel=channel.value, allowed_logger_prefixes=allowed_prefixes))

        return handler

    def _parse_size(self, size_str: str) -> int:
        """Parse size string (e.g., '100MB') to bytes."""
        size_str = size_str.upper()

        if size_str.endswith("B"):
            size_str = size_str[:-1]

        multipliers = {
            "K": 1024,
            "M": 1024 * 1024,
            "G": 1024 * 1024 * 1024,
        }

        for suffix, multiplier in multipliers.items():
            if size_str.endswith(suffix):
                return int(float(size_str[:-1]) * multiplier)

        return int(size_str)

    def _configure_structlog(self) -> None:
        """Configure structlog with appropriate processors."""

        def add_correlation_id(logger, name, event_dict):
            """Add correlation ID to log events if available"""
            from core.logging.correlation import CorrelationIdManager
            correlation_id = CorrelationIdManager.get_correlation_id()
            if correlation_id:
                event_dict.setdefault('correlation_id', correlation_id)
                request_id = CorrelationIdManager.get_correlation_context().get("request_id")
                if request_id:
                    event_dict.setdefault('request_id', request_id)
            return event_dict

        def add_standard_context(logger, name, event_dict):
            """Bind standard context fields once from settings."""
            event_dict.setdefault('env', self.settings.environment.value)
            event_dict.setdefault('service', self.settings.app_name)
            event_dict.setdefault('version', self.settings.version)
            return event_dict

        keys_to_redact = {k.lower() for k in self.settings.logging.redact_keys}

        def redact_sensitive(logger, name, event_dict):
            """Redact sensitive fields from event dict recursively."""
            def _redact(obj):
                if isinstance(obj, dict):
                    return {
                        k: ('[REDACTED]' if isinstance(k, str) and k.lower() in keys_to_redact else _redact(v))
                        for k, v in obj.items()
                    }
                if isinstance(obj, list):
                    return [_redact(v) for v in obj]
                return obj

            return _redact(event_dict)

        structlog.configure(
            processors=[
                add_correlation_id,
                add_standard_context,
                structlog.stdlib.add_log_level,
                structlog.stdlib.add_logger_name,
                structlog.stdlib.PositionalArgumentsFormatter(),
                structlog.processors.TimeStamper(fmt="iso"),
                structlog.processors.StackInfoRenderer(),
                structlog.processors.format_exc_info,
                structlog.processors.UnicodeDecoder(),
                redact_sensitive,
                # Defer final rendering to handlers via ProcessorFormatter
                structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
            ],
            logger_factory=structlog.stdlib.LoggerFactory(),
            wrapper_class=structlog.stdlib.BoundLogger,
            cache_logger_on_first_use=True,
        )


def configure_enhanced_logging(settings: Settings) -> None:
    """Configure the enhanced logging system once per process."""
    global _logger_manager

    if _logger_manager is not None:
        return

    _logger_manager = EnhancedLoggerManager(settings)


def reset_enhanced_logging() -> None:
    """Forget the configured manager so tests can reconfigure logging."""
    global _logger_manager

    if _logger_manager is not None:
        root_logger = logging.getLogger()
        for handler in _logger_manager.channel_handlers.values():
            root_logger.removeHandler(handler)
            handler.close()
    _logger_manager = None
    structlog.reset_defaults()


def get_enhanced_logger(name: str, component: Optional[str] = None):
    """Get a structured logger bound to the component's channel.

    Loggers are lazy proxies, so module-level loggers created before
    configure_enhanced_logging() still pick up the final configuration.
    """
    channel = get_channel_for_component(component)
    initial: Dict[str, Any] = {"channel": channel.value}
    if component:
        initial["component"] = component
    return structlog.get_logger(name, **initial)


def get_channel_logger(name: str, channel: LogChannel):
    """Get a logger for a specific channel."""
    return structlog.get_logger(name, channel=channel.value)


def get_api_logger_safe(name: str):
    """Get an API logger."""
    return get_channel_logger(name, LogChannel.API)


def get_streaming_logger_safe(name: str):
    """Get a streaming (producer/pipeline) logger."""
    return get_channel_logger(name, LogChannel.STREAMING)


def get_error_logger_safe(name: str):
    """Get an error logger."""
    return get_channel_logger(name, LogChannel.ERROR)

"""
Logging channel definitions and configuration.
Provides multi-channel logging with dedicated files for different components.
"""

from enum import Enum
from typing import Dict, Optional
from pathlib import Path
from dataclasses import dataclass


class LogChannel(str, Enum):
    """Logging channels for different components."""

    APPLICATION = "application"  # Startup, shutdown, configuration
    API = "api"                  # HTTP requests/responses
    STREAMING = "streaming"      # Producer and publish pipeline
    ERROR = "error"              # Error logs from every channel


@dataclass
class ChannelConfig:
    """Configuration for a logging channel.

    Rotation size and backup count come from LoggingSettings and apply to
    every channel file.
    """

    name: str
    filename: str
    level: str = "INFO"

    def get_file_path(self, logs_dir: str) -> Path:
        """Get the full file path for this channel."""
        return Path(logs_dir) / self.filename


CHANNEL_CONFIGS: Dict[LogChannel, ChannelConfig] = {
    LogChannel.APPLICATION: ChannelConfig(name="application", filename="application.log"),
    LogChannel.API: ChannelConfig(name="api", filename="api.log"),
    LogChannel.STREAMING: ChannelConfig(name="streaming", filename="streaming.log"),
    LogChannel.ERROR: ChannelConfig(name="error", filename="error.log", level="ERROR"),
}


def get_channel_for_component(component: Optional[str]) -> LogChannel:
    """Get the appropriate logging channel for a component."""
    component_mapping = {
        "api": LogChannel.API,
        "http": LogChannel.API,
        "streaming": LogChannel.STREAMING,
        "publisher": LogChannel.STREAMING,
        "pipeline": LogChannel.STREAMING,
        "error": LogChannel.ERROR,
    }

    return component_mapping.get(component or "", LogChannel.APPLICATION)


def get_channel_config(channel: LogChannel) -> ChannelConfig:
    """Get configuration for a specific channel."""
    return CHANNEL_CONFIGS[channel]


def create_log_directory_structure(logs_dir: str) -> None:
    """Create the logs directory."""
    Path(logs_dir).mkdir(parents=True, exist_ok=True)

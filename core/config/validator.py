"""
Configuration validation at application startup.

Validates that all critical configuration values are properly set before
the producer connects, providing clear error messages for missing or
invalid settings.
"""

import logging
import re
from collections import Counter
from typing import List, Dict, Any
from dataclasses import dataclass

from .settings import Settings

logger = logging.getLogger(__name__)

# Kafka topic names: ASCII alphanumerics, '.', '_' and '-', at most 249 chars
_TOPIC_RE = re.compile(r"^[A-Za-z0-9._-]{1,249}$")
_VALID_LEVELS = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}


@dataclass
class ValidationResult:
    """Result of a configuration validation check"""
    is_valid: bool
    component: str
    message: str
    severity: str = "error"  # "error", "warning", "info"


class ConfigurationValidator:
    """
    Configuration validator for startup checks.

    Validates the broker, HTTP, directory and logging sections before the
    service starts serving, providing clear feedback on what needs fixing.
    """

    def __init__(self, settings: Settings):
        self.settings = settings
        self.validation_results: List[ValidationResult] = []

    async def validate_all(self) -> bool:
        """
        Run all validation checks.

        Returns:
            bool: True if all critical validations pass
        """
        logger.info("🔍 Starting configuration validation...")

        self.validation_results = []
        self._validate_broker_settings()
        self._validate_api_settings()
        self._validate_directory()
        self._validate_logging_settings()

        errors = [r for r in self.validation_results if r.severity == "error"]
        warnings = [r for r in self.validation_results if r.severity == "warning"]

        if errors:
            logger.error(f"❌ Configuration validation failed: {len(errors)} errors, {len(warnings)} warnings")
            for result in errors:
                logger.error(f"   ERROR [{result.component}]: {result.message}")

        if warnings:
            for result in warnings:
                logger.warning(f"   WARNING [{result.component}]: {result.message}")

        if not errors and not warnings:
            logger.info("✅ All configuration validation checks passed")
        elif not errors:
            logger.info(f"✅ Configuration validation passed with {len(warnings)} warnings")

        return len(errors) == 0

    def _validate_broker_settings(self):
        """Validate broker address and topic"""
        redpanda = self.settings.redpanda
        servers = [s.strip() for s in redpanda.bootstrap_servers.split(",") if s.strip()]
        if not servers:
            self.validation_results.append(ValidationResult(
                is_valid=False,
                component="Broker",
                message="REDPANDA__BOOTSTRAP_SERVERS must contain at least one host:port",
                severity="error"
            ))
        for server in servers:
            host, sep, port = server.rpartition(":")
            if not sep or not host or not port.isdigit():
                self.validation_results.append(ValidationResult(
                    is_valid=False,
                    component="Broker",
                    message=f"Bootstrap server '{server}' is not in host:port form",
                    severity="error"
                ))

        if not _TOPIC_RE.match(redpanda.topic or "") or redpanda.topic in {".", ".."}:
            self.validation_results.append(ValidationResult(
                is_valid=False,
                component="Broker",
                message=f"Invalid topic name: '{redpanda.topic}'",
                severity="error"
            ))

        if redpanda.request_timeout_ms <= 0:
            self.validation_results.append(ValidationResult(
                is_valid=False,
                component="Broker",
                message="REDPANDA__REQUEST_TIMEOUT_MS must be positive",
                severity="error"
            ))

    def _validate_api_settings(self):
        """Validate HTTP listener"""
        port = self.settings.api.port
        if not 0 < port < 65536:
            self.validation_results.append(ValidationResult(
                is_valid=False,
                component="API",
                message=f"API__PORT out of range: {port}",
                severity="error"
            ))

    def _validate_directory(self):
        """Validate the party directory"""
        parties = self.settings.directory
        if not parties:
            self.validation_results.append(ValidationResult(
                is_valid=False,
                component="Directory",
                message="Directory is empty; every request would fail with not-found",
                severity="warning"
            ))
            return

        duplicates = [pid for pid, count in Counter(p.id for p in parties).items() if count > 1]
        if duplicates:
            self.validation_results.append(ValidationResult(
                is_valid=False,
                component="Directory",
                message=f"Duplicate party ids in directory: {sorted(duplicates)}",
                severity="error"
            ))

        unnamed = [p.id for p in parties if not p.name.strip()]
        if unnamed:
            self.validation_results.append(ValidationResult(
                is_valid=False,
                component="Directory",
                message=f"Parties without a name: {unnamed}",
                severity="warning"
            ))

    def _validate_logging_settings(self):
        """Validate logging configuration"""
        if self.settings.logging.level.upper() not in _VALID_LEVELS:
            self.validation_results.append(ValidationResult(
                is_valid=False,
                component="Logging",
                message=f"Invalid log level: {self.settings.logging.level}",
                severity="error"
            ))

    def get_validation_summary(self) -> Dict[str, Any]:
        """Get a summary of validation results"""
        errors = [r for r in self.validation_results if r.severity == "error"]
        warnings = [r for r in self.validation_results if r.severity == "warning"]

        return {
            "total_checks": len(self.validation_results),
            "errors": len(errors),
            "warnings": len(warnings),
            "is_valid": len(errors) == 0,
            "error_details": [{"component": r.component, "message": r.message} for r in errors],
            "warning_details": [{"component": r.component, "message": r.message} for r in warnings]
        }


async def validate_startup_configuration(settings: Settings) -> bool:
    """
    Convenience function to run startup configuration validation.

    Args:
        settings: Application settings to validate

    Returns:
        bool: True if validation passes (no critical errors)
    """
    validator = ConfigurationValidator(settings)
    return await validator.validate_all()

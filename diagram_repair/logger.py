"""
Logging module

Records skipped stream events, failed repair steps and unresolved connector
bindings, and forwards them to the package logger
"""
import logging
from typing import List, Dict, Any, Optional
from dataclasses import dataclass, field


@dataclass
class RepairWarning:
    """Warning raised while decoding or repairing a document"""
    warning_type: str  # 'skipped_event', 'step_failure', 'unresolved_binding'
    message: str
    details: Dict[str, Any] = field(default_factory=dict)


class RepairLogger:
    """Logger for the streaming/repair process"""

    def __init__(self, record_warnings: bool = True):
        """
        Args:
            record_warnings: Whether to keep warning records in memory
        """
        self.record_warnings = record_warnings
        self.warnings: List[RepairWarning] = []
        self.logger = logging.getLogger('diagram_repair')

        # Logger configuration (default)
        if not self.logger.handlers:
            handler = logging.StreamHandler()
            formatter = logging.Formatter(
                '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
            )
            handler.setFormatter(formatter)
            self.logger.addHandler(handler)
            self.logger.setLevel(logging.INFO)

    def _record(self, warning: RepairWarning) -> None:
        if self.record_warnings:
            self.warnings.append(warning)
        self.logger.warning(warning.message)

    def warn_skipped_event(self, raw_event: str, reason: str):
        """Record a stream unit that could not be decoded"""
        self._record(RepairWarning(
            warning_type='skipped_event',
            message=f"Skipped stream event: {reason}",
            details={'raw_event': raw_event, 'reason': reason}
        ))

    def warn_step_failure(self, step_name: str, error: Exception):
        """Record a repair step that raised and was treated as a no-op"""
        self._record(RepairWarning(
            warning_type='step_failure',
            message=f"Repair step {step_name} failed: {error}",
            details={'step': step_name, 'error': repr(error)}
        ))

    def warn_unresolved_binding(self, element_id: Optional[str], start_id: Optional[str], end_id: Optional[str]):
        """Record a connector whose start/end ids do not resolve to shapes"""
        self._record(RepairWarning(
            warning_type='unresolved_binding',
            message=f"[{element_id}] Connector binding not resolved: start={start_id}, end={end_id}",
            details={'element_id': element_id, 'start_id': start_id, 'end_id': end_id}
        ))

    def info(self, message: str):
        """Info log"""
        self.logger.info(message)

    def debug(self, message: str):
        """Debug log"""
        self.logger.debug(message)

    def get_warnings(self) -> List[RepairWarning]:
        """Get warning list"""
        return self.warnings


# Global logger instance
_default_logger = RepairLogger(record_warnings=False)


def get_logger() -> RepairLogger:
    """Get default logger"""
    return _default_logger

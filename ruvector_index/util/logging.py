"""
Structured logging for vector index operations.
"""

import logging
from typing import Any, Dict

from ..core.config import debug_enabled


class StructuredLogger:
    """Structured logger for index, vector and search operations."""

    def __init__(self, name: str = "ruvector_index"):
        self.logger = logging.getLogger(name)
        self.logger.setLevel(logging.DEBUG if debug_enabled() else logging.INFO)

        # Create handler if not already set
        if not self.logger.handlers:
            handler = logging.StreamHandler()
            formatter = logging.Formatter(
                '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
            )
            handler.setFormatter(formatter)
            self.logger.addHandler(handler)

    def log_operation(self, operation: str, status: str, details: Dict[str, Any] = None, level: int = logging.INFO):
        """Log a structured operation."""
        message = f"Operation: {operation}, Status: {status}"
        if details:
            message += f", Details: {details}"

        self.logger.log(level, message)

    def log_vector_operation(self, operation: str, record_id: str, details: Dict[str, Any] = None, status: str = "success"):
        """Log a vector operation."""
        log_details = {"record_id": record_id}
        if details:
            log_details.update(details)

        self.log_operation(f"vector.{operation}", status, log_details)

    def log_index_operation(self, index_name: str, operation: str, details: Dict[str, Any] = None, status: str = "success"):
        """Log an index-level operation (create, batch insert, clear)."""
        log_details = {"index": index_name}
        if details:
            log_details.update(details)

        level = logging.ERROR if status == "failed" else logging.INFO
        self.log_operation(f"index.{operation}", status, log_details, level=level)

    def log_search(self, index_name: str, k: int, returned: int, filtered: bool = False):
        """Log a search at debug level; searches are the hot path."""
        log_details = {
            "index": index_name,
            "k": k,
            "returned": returned,
            "filtered": filtered
        }
        self.log_operation("index.search", "success", log_details, level=logging.DEBUG)

    # Standard logging methods for compatibility
    def info(self, message: str) -> None:
        """Log an info message."""
        self.logger.info(message)

    def warning(self, message: str) -> None:
        """Log a warning message."""
        self.logger.warning(message)

    def error(self, message: str) -> None:
        """Log an error message."""
        self.logger.error(message)

    def debug(self, message: str) -> None:
        """Log a debug message."""
        self.logger.debug(message)


# Global logger instance
logger = StructuredLogger()

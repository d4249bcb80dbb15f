"""
Debug logging utility with timing support

Provides request-scoped debug lines with elapsed time since the request
started and consistent formatting across routes and services.
"""

import time
import os
from typing import Optional, Any


class DebugLogger:
    """Centralized debug logging with timing support"""

    def __init__(self):
        # Check if we're running in Lambda (production) or locally (development)
        is_lambda = os.getenv("AWS_LAMBDA_FUNCTION_NAME") is not None

        if is_lambda:
            self.debug_enabled = os.getenv("DEBUG_LOGGING_PROD", "false").lower() == "true"
        else:
            self.debug_enabled = os.getenv("DEBUG_LOGGING_DEV", "false").lower() == "true"

    def format(self,
               request_id: Optional[str],
               service: str,
               message: str,
               request: Optional[Any] = None,
               **kwargs) -> str:
        """
        Build a debug line

        Format: [DEBUG] [service] [elapsed] [request_id] message [key=value ...]
        """
        elapsed = None
        state = getattr(request, "state", None)
        if state is not None and hasattr(state, "start_time"):
            elapsed = f"{time.perf_counter() - state.start_time:.3f}s"

        timing_part = f" [{elapsed}]" if elapsed else ""
        context_part = f" [{request_id}]" if request_id else ""
        context_str = ""
        if kwargs:
            context_str = " " + " ".join(f"{k}={v}" for k, v in kwargs.items())

        return f"[DEBUG] [{service}]{timing_part}{context_part} {message}{context_str}"

    def log(self,
            request_id: Optional[str],
            service: str,
            message: str,
            request: Optional[Any] = None,
            **kwargs) -> None:
        """
        Log a debug message with optional timing information

        Args:
            request_id: Unique request identifier
            service: Service/component name (e.g., 'ROUTE', 'CHAT', 'BEDROCK')
            message: Debug message
            request: FastAPI request object for timing
            **kwargs: Additional context to include in log
        """
        if not self.debug_enabled:
            return
        print(self.format(request_id, service, message, request, **kwargs))

    def log_route(self, request_id: Optional[str], message: str, request: Optional[Any] = None, **kwargs):
        self.log(request_id, "ROUTE", message, request, **kwargs)

    def log_chat(self, request_id: Optional[str], message: str, request: Optional[Any] = None, **kwargs):
        self.log(request_id, "CHAT", message, request, **kwargs)

    def log_bedrock(self, request_id: Optional[str], message: str, request: Optional[Any] = None, **kwargs):
        self.log(request_id, "BEDROCK", message, request, **kwargs)

    def log_lex(self, request_id: Optional[str], message: str, request: Optional[Any] = None, **kwargs):
        self.log(request_id, "LEX", message, request, **kwargs)

    def log_mock(self, request_id: Optional[str], message: str, request: Optional[Any] = None, **kwargs):
        self.log(request_id, "MOCK", message, request, **kwargs)

    def log_timing(self, request_id: Optional[str], operation: str, duration_ms: float, **kwargs):
        """Log a specific timing measurement"""
        self.log(request_id, "TIMING", f"{operation} completed in {duration_ms:.3f}ms", **kwargs)


# Global debug logger instance
debug_logger = DebugLogger()

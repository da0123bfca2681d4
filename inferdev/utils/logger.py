"""Logging configuration for InferDev.

This module provides structured logging with different handlers for
development, test and production environments, including JSON formatting
for log aggregation.
"""

import logging
import logging.handlers
import sys
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, Optional

from pythonjsonlogger.json import JsonFormatter


class InferDevFormatter(JsonFormatter):
    """Custom JSON formatter for InferDev application logs."""

    def add_fields(self, log_record: Dict[str, Any], record: logging.LogRecord, message_dict: Dict[str, Any]) -> None:
        """Add custom fields to log record.

        Args:
            log_record: The log record dictionary to modify
            record: The original logging record
            message_dict: Additional message data
        """
        super().add_fields(log_record, record, message_dict)

        log_record['timestamp'] = datetime.now(timezone.utc).isoformat()
        log_record['level'] = record.levelname
        log_record['logger'] = record.name
        log_record['module'] = record.module
        log_record['function'] = record.funcName
        log_record['line'] = record.lineno

        log_record['application'] = 'inferdev'
        log_record['service'] = 'survey-api'

        request_id = getattr(record, 'request_id', None)
        if request_id:
            log_record['request_id'] = request_id

        if record.exc_info:
            log_record['exception'] = self.formatException(record.exc_info)


class ContextFilter(logging.Filter):
    """Filter to add contextual information to log records."""

    def __init__(self, context: Optional[Dict[str, Any]] = None):
        """Initialize context filter.

        Args:
            context: Additional context to add to all log records
        """
        super().__init__()
        self.context = context or {}

    def filter(self, record: logging.LogRecord) -> bool:
        for key, value in self.context.items():
            setattr(record, key, value)
        return True


class RequestContextFilter(logging.Filter):
    """Filter that stamps the current request id onto log records."""

    def filter(self, record: logging.LogRecord) -> bool:
        # Imported lazily; the middleware module imports this one.
        from inferdev.api.middleware.request_id import request_id_var

        request_id = request_id_var.get()
        if request_id and not hasattr(record, 'request_id'):
            record.request_id = request_id
        return True


class LoggerConfig:
    """Logger configuration manager."""

    # Component loggers
    COMPONENTS = {
        'api': 'inferdev.api',
        'survey': 'inferdev.survey',
        'scoring': 'inferdev.scoring',
        'client': 'inferdev.client',
        'catalog': 'inferdev.catalog',
    }

    def __init__(
        self,
        environment: str = 'development',
        log_level: str = 'INFO',
        format_type: str = 'text',
        log_file: Optional[str] = None,
        max_bytes: int = 10 * 1024 * 1024,
        backup_count: int = 5,
    ):
        """Initialize logger configuration.

        Args:
            environment: Environment name (development, test, staging, production)
            log_level: Default log level
            format_type: "json" or "text" console output
            log_file: Optional path of a rotating log file
            max_bytes: Rotation size of the log file
            backup_count: Number of rotated files to keep
        """
        self.environment = environment
        self.log_level = getattr(logging, log_level.upper())
        self.format_type = format_type
        self.log_file = Path(log_file) if log_file else None
        self.max_bytes = max_bytes
        self.backup_count = backup_count

        self._configure_root_logger()
        self._configure_component_loggers()

    def _configure_root_logger(self) -> None:
        """Configure the root logger."""
        root_logger = logging.getLogger()
        root_logger.setLevel(self.log_level)
        root_logger.handlers.clear()

        if self.environment == 'test':
            self._add_test_handlers(root_logger)
            return

        if self.environment == 'production' or self.format_type == 'json':
            formatter: logging.Formatter = InferDevFormatter(
                fmt='%(timestamp)s %(level)s %(logger)s %(message)s'
            )
        else:
            formatter = logging.Formatter(
                fmt='%(asctime)s | %(levelname)-8s | %(name)-20s | %(funcName)-15s:%(lineno)-3d | %(message)s',
                datefmt='%Y-%m-%d %H:%M:%S'
            )

        console_handler = logging.StreamHandler(sys.stdout)
        console_handler.setLevel(self.log_level)
        console_handler.setFormatter(formatter)
        console_handler.addFilter(RequestContextFilter())
        root_logger.addHandler(console_handler)

        if self.log_file:
            self.log_file.parent.mkdir(parents=True, exist_ok=True)
            file_handler = logging.handlers.RotatingFileHandler(
                filename=self.log_file,
                maxBytes=self.max_bytes,
                backupCount=self.backup_count,
                encoding='utf-8'
            )
            file_handler.setLevel(self.log_level)
            file_handler.setFormatter(formatter)
            file_handler.addFilter(RequestContextFilter())
            root_logger.addHandler(file_handler)

    def _add_test_handlers(self, logger: logging.Logger) -> None:
        """Only warnings and errors reach the console during tests."""
        console_handler = logging.StreamHandler(sys.stdout)
        console_handler.setLevel(logging.WARNING)
        console_handler.setFormatter(logging.Formatter(
            fmt='TEST | %(levelname)s | %(name)s | %(message)s'
        ))
        logger.addHandler(console_handler)

    def _configure_component_loggers(self) -> None:
        """Configure individual component loggers."""
        for component, logger_name in self.COMPONENTS.items():
            logger = logging.getLogger(logger_name)
            logger.setLevel(self.log_level)
            logger.filters.clear()
            logger.addFilter(ContextFilter({'component': component}))

    def get_logger(self, name: str) -> logging.Logger:
        return logging.getLogger(name)

    def get_component_logger(self, component: str) -> logging.Logger:
        """Get a component-specific logger.

        Args:
            component: Component name (api, survey, scoring, client, catalog)

        Returns:
            logging.Logger: Component logger

        Raises:
            ValueError: If component is not recognized
        """
        if component not in self.COMPONENTS:
            raise ValueError(f"Unknown component: {component}. Available: {list(self.COMPONENTS.keys())}")

        return logging.getLogger(self.COMPONENTS[component])


# Global logger configuration instance
_logger_config: Optional[LoggerConfig] = None


def setup_logging(
    environment: str = 'development',
    log_level: str = 'INFO',
    format_type: str = 'text',
    log_file: Optional[str] = None,
    max_bytes: int = 10 * 1024 * 1024,
    backup_count: int = 5,
) -> LoggerConfig:
    """Setup application logging.

    Returns:
        LoggerConfig: Configured logger instance
    """
    global _logger_config
    _logger_config = LoggerConfig(
        environment=environment,
        log_level=log_level,
        format_type=format_type,
        log_file=log_file,
        max_bytes=max_bytes,
        backup_count=backup_count,
    )
    return _logger_config


def get_logger(name: str = __name__) -> logging.Logger:
    """Get a logger instance.

    Args:
        name: Logger name, defaults to caller's module name

    Returns:
        logging.Logger: Logger instance
    """
    if _logger_config is None:
        setup_logging()

    return _logger_config.get_logger(name)


def get_component_logger(component: str) -> logging.Logger:
    if _logger_config is None:
        setup_logging()

    return _logger_config.get_component_logger(component)


def get_api_logger() -> logging.Logger:
    """Get API component logger."""
    return get_component_logger('api')


def get_survey_logger() -> logging.Logger:
    """Get survey flow logger."""
    return get_component_logger('survey')


def get_scoring_logger() -> logging.Logger:
    """Get scoring component logger."""
    return get_component_logger('scoring')


def get_client_logger() -> logging.Logger:
    """Get backend client logger."""
    return get_component_logger('client')


def get_catalog_logger() -> logging.Logger:
    """Get catalog component logger."""
    return get_component_logger('catalog')


def log_api_request(method: str, path: str, session_id: Optional[str] = None, logger: Optional[logging.Logger] = None) -> None:
    """Log API request.

    Args:
        method: HTTP method
        path: Request path
        session_id: Survey session ID if any
        logger: Logger instance
    """
    if logger is None:
        logger = get_api_logger()

    logger.info(f"{method} {path}", extra={
        'http_method': method,
        'request_path': path,
        'session_id': session_id,
        'event_type': 'api_request'
    })


def log_api_response(method: str, path: str, status_code: int, duration_ms: float, logger: Optional[logging.Logger] = None) -> None:
    """Log API response.

    Args:
        method: HTTP method
        path: Request path
        status_code: HTTP status code
        duration_ms: Request duration in milliseconds
        logger: Logger instance
    """
    if logger is None:
        logger = get_api_logger()

    level = logging.WARNING if status_code >= 400 else logging.INFO

    logger.log(level, f"{method} {path} - {status_code}", extra={
        'http_method': method,
        'request_path': path,
        'status_code': status_code,
        'duration_ms': duration_ms,
        'event_type': 'api_response'
    })


def log_external_call(method: str, path: str, status_code: Optional[int], duration_ms: float, logger: Optional[logging.Logger] = None) -> None:
    """Log a call to the recommendation backend.

    Args:
        method: HTTP method
        path: Backend path
        status_code: Response status, None when the transport failed
        duration_ms: Call duration in milliseconds
        logger: Logger instance
    """
    if logger is None:
        logger = get_client_logger()

    level = logging.WARNING if status_code is None or status_code >= 400 else logging.INFO

    logger.log(level, f"Backend {method} {path} - {status_code}", extra={
        'http_method': method,
        'backend_path': path,
        'status_code': status_code,
        'duration_ms': duration_ms,
        'event_type': 'external_call'
    })


class PerformanceLogger:
    """Context manager for performance logging."""

    def __init__(self, operation: str, logger: Optional[logging.Logger] = None, extra: Optional[Dict[str, Any]] = None):
        """Initialize performance logger.

        Args:
            operation: Operation name
            logger: Logger instance
            extra: Additional fields to log
        """
        self.operation = operation
        self.logger = logger or get_logger()
        self.extra = extra or {}
        self.start_time: Optional[datetime] = None

    def __enter__(self) -> 'PerformanceLogger':
        self.start_time = datetime.now(timezone.utc)
        self.logger.debug(f"Starting {self.operation}", extra={
            'operation': self.operation,
            'event_type': 'performance_start',
            **self.extra
        })
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        if self.start_time:
            duration = datetime.now(timezone.utc) - self.start_time
            duration_ms = duration.total_seconds() * 1000

            level = logging.WARNING if duration_ms > 5000 else logging.INFO

            self.logger.log(level, f"Completed {self.operation}", extra={
                'operation': self.operation,
                'duration_ms': duration_ms,
                'event_type': 'performance_end',
                'success': exc_type is None,
                **self.extra
            })

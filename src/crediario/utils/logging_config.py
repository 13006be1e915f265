"""
Centralized logging configuration for the Crediario identity core.
Provides component-specific loggers with separate log files.
"""

import logging
import logging.handlers
import sys
from pathlib import Path
from typing import Optional, Dict, Any
from datetime import datetime

from ..config import get_config


DETAILED_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - [%(filename)s:%(lineno)d] - %(funcName)s() - %(message)s'
SIMPLE_FORMAT = '%(asctime)s - %(levelname)s - %(message)s'


class ComponentLogger:
    """Manages component-specific logging with separate files."""

    _loggers: Dict[str, logging.Logger] = {}
    _initialized = False
    _log_dir: Optional[Path] = None
    _to_file = True
    _debug = False
    _unified_handler: Optional[logging.Handler] = None

    # Component definitions with their log levels
    COMPONENTS = {
        'api': {'level': logging.INFO, 'file': 'api.log'},
        'commands': {'level': logging.INFO, 'file': 'commands.log'},
        'events': {'level': logging.INFO, 'file': 'events.log'},
        'repositories': {'level': logging.INFO, 'file': 'repositories.log'},
        'database': {'level': logging.INFO, 'file': 'database.log'},
        'auth': {'level': logging.INFO, 'file': 'auth.log'},
        'main': {'level': logging.INFO, 'file': 'main.log'},
        'error': {'level': logging.ERROR, 'file': 'errors.log'},  # Centralized error log
    }

    @classmethod
    def initialize(cls, log_dir: Optional[str] = None, debug: Optional[bool] = None) -> None:
        """
        Initialize the logging system with component-specific loggers.

        Args:
            log_dir: Directory for log files. Defaults to config.app.log_dir
            debug: Enable debug logging for all components. Defaults to config.server.debug
        """
        if cls._initialized:
            return

        config = get_config()
        cls._debug = config.server.debug if debug is None else debug
        cls._to_file = config.app.log_to_file

        detailed_formatter = logging.Formatter(DETAILED_FORMAT, datefmt='%Y-%m-%d %H:%M:%S')
        simple_formatter = logging.Formatter(SIMPLE_FORMAT, datefmt='%H:%M:%S')

        session_dir = datetime.now().strftime("%Y%m%d_%H%M%S")
        if cls._to_file:
            cls._log_dir = Path(log_dir or config.app.log_dir) / session_dir
            cls._log_dir.mkdir(parents=True, exist_ok=True)

        root_level = logging.DEBUG if cls._debug else logging.INFO

        unified_handler = None
        if cls._to_file:
            unified_handler = logging.handlers.RotatingFileHandler(
                cls._log_dir / 'unified.log',
                maxBytes=20 * 1024 * 1024,  # 20MB
                backupCount=3,
                encoding='utf-8'
            )
            unified_handler.setLevel(root_level)
            unified_handler.setFormatter(detailed_formatter)

        for component_name, component_config in cls.COMPONENTS.items():
            level = logging.DEBUG if cls._debug else component_config['level']
            logger = cls._build_logger(component_name, level, component_config['file'], detailed_formatter)

            if unified_handler is not None:
                logger.addHandler(unified_handler)

            # Errors always reach the console
            if component_name in ['error', 'main']:
                console_handler = logging.StreamHandler(sys.stderr)
                console_handler.setLevel(logging.ERROR)
                console_handler.setFormatter(simple_formatter)
                logger.addHandler(console_handler)

        cls._unified_handler = unified_handler

        # Mark as initialized before logging to avoid recursion
        cls._initialized = True

        main_logger = cls._loggers['main']
        main_logger.info("Crediario logging initialized (session %s, to_file=%s, debug=%s)",
                         session_dir, cls._to_file, cls._debug)

    @classmethod
    def _build_logger(cls, component: str, level: int, file_name: str,
                      formatter: logging.Formatter) -> logging.Logger:
        """Create and register the logger for one component."""
        logger = logging.getLogger(f"crediario.{component}")
        logger.handlers.clear()
        logger.propagate = False
        logger.setLevel(level)

        if cls._to_file:
            file_handler = logging.handlers.RotatingFileHandler(
                cls._log_dir / file_name,
                maxBytes=10 * 1024 * 1024,  # 10MB
                backupCount=5,
                encoding='utf-8'
            )
            file_handler.setLevel(level)
            file_handler.setFormatter(formatter)
            logger.addHandler(file_handler)
        else:
            stream_handler = logging.StreamHandler(sys.stderr)
            stream_handler.setLevel(level)
            stream_handler.setFormatter(formatter)
            logger.addHandler(stream_handler)

        cls._loggers[component] = logger
        return logger

    @classmethod
    def resolve_component(cls, name: str) -> str:
        """Map a module path like 'crediario.commands.handlers' to a component."""
        if not name.startswith('crediario.'):
            return name

        parts = name.split('.')
        if parts[1] in ('db',):
            return 'database'
        if parts[1] in cls.COMPONENTS:
            return parts[1]
        return 'main'

    @classmethod
    def get_logger(cls, component: str) -> logging.Logger:
        """
        Get a logger for a specific component.

        Args:
            component: Component name (api, commands, events, ...) or a module
                       path such as 'crediario.commands.handlers'

        Returns:
            Logger instance for the component
        """
        if not cls._initialized:
            cls.initialize()

        component = cls.resolve_component(component)
        if component not in cls._loggers:
            level = logging.DEBUG if cls._debug else logging.INFO
            logger = cls._build_logger(
                component, level, f'{component}.log',
                logging.Formatter(DETAILED_FORMAT, datefmt='%Y-%m-%d %H:%M:%S'),
            )
            if cls._unified_handler is not None:
                logger.addHandler(cls._unified_handler)

        return cls._loggers[component]

    @classmethod
    def log_exception(cls, component: str, exc: Exception, context: Optional[Dict[str, Any]] = None) -> None:
        """
        Log an exception with context to both component and error logs.

        Args:
            component: Component where the exception occurred
            exc: The exception to log
            context: Additional context information
        """
        component_logger = cls.get_logger(component)
        error_logger = cls.get_logger('error')

        context_str = ""
        if context:
            context_str = " | Context: " + ", ".join(f"{k}={v}" for k, v in context.items())

        component_logger.error(f"Exception in {component}: {type(exc).__name__}: {exc}{context_str}", exc_info=exc)
        error_logger.error(f"[{component}] {type(exc).__name__}: {exc}{context_str}", exc_info=exc)

    @classmethod
    def get_log_directory(cls) -> Optional[Path]:
        """Get the current log directory path."""
        return cls._log_dir

    @classmethod
    def shutdown(cls) -> None:
        """Close all handlers and forget loggers so the next call reinitializes."""
        for logger in cls._loggers.values():
            for handler in list(logger.handlers):
                handler.close()
                logger.removeHandler(handler)
        cls._loggers = {}
        cls._unified_handler = None
        cls._log_dir = None
        cls._initialized = False


# Convenience functions
def get_logger(component: str) -> logging.Logger:
    """Get a logger for a specific component."""
    return ComponentLogger.get_logger(component)


def get_module_logger(module_name: str) -> logging.Logger:
    """
    Get a logger for a module using its __name__.

    Example:
        logger = get_module_logger(__name__)
    """
    return ComponentLogger.get_logger(module_name)


def initialize_logging(log_dir: Optional[str] = None, debug: Optional[bool] = None) -> None:
    """Initialize the logging system."""
    ComponentLogger.initialize(log_dir=log_dir, debug=debug)


def log_exception(component: str, exc: Exception, context: Optional[Dict[str, Any]] = None) -> None:
    """Log an exception with context."""
    ComponentLogger.log_exception(component, exc, context)


def get_log_directory() -> Optional[Path]:
    """Get the current log directory path."""
    return ComponentLogger.get_log_directory()

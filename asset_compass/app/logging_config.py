# app/logging_config.py
"""
Logging configuration for the application.
Console output always, rotating files unless LOG_TO_FILE is off.
"""

import logging
import logging.handlers
import sys
from pathlib import Path

FILE_FORMAT = '%(asctime)s | %(levelname)-8s | %(name)s | %(funcName)s:%(lineno)d | %(message)s'
CONSOLE_FORMAT = '%(levelname)-8s [%(asctime)s] %(name)s: %(message)s'
DATE_FORMAT = '%Y-%m-%d %H:%M:%S'


def setup_logging(app, app_name: str = 'asset_compass'):
    """
    Configure root logging from the Flask config.

    Args:
        app: Flask application carrying LOG_LEVEL, LOG_DIR and LOG_TO_FILE
        app_name: Base name for the log files
    """
    log_level = app.config.get('LOG_LEVEL', 'INFO')
    level = getattr(logging, str(log_level).upper(), logging.INFO)

    root_logger = logging.getLogger()
    root_logger.setLevel(level)
    root_logger.handlers.clear()

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(level)
    console_handler.setFormatter(logging.Formatter(fmt=CONSOLE_FORMAT, datefmt=DATE_FORMAT))
    root_logger.addHandler(console_handler)

    if app.config.get('LOG_TO_FILE'):
        log_dir = Path(app.config['LOG_DIR'])
        log_dir.mkdir(parents=True, exist_ok=True)
        file_format = logging.Formatter(fmt=FILE_FORMAT, datefmt=DATE_FORMAT)

        # Rotates at 10MB, keeps 5 backups
        file_handler = logging.handlers.RotatingFileHandler(
            log_dir / f'{app_name}.log',
            maxBytes=10 * 1024 * 1024,
            backupCount=5,
            encoding='utf-8'
        )
        file_handler.setLevel(level)
        file_handler.setFormatter(file_format)
        root_logger.addHandler(file_handler)

        error_handler = logging.handlers.RotatingFileHandler(
            log_dir / f'{app_name}_errors.log',
            maxBytes=10 * 1024 * 1024,
            backupCount=10,
            encoding='utf-8'
        )
        error_handler.setLevel(logging.ERROR)
        error_handler.setFormatter(file_format)
        root_logger.addHandler(error_handler)

    # Reduce noise from external libraries
    logging.getLogger('werkzeug').setLevel(logging.WARNING)
    logging.getLogger('sqlalchemy.engine').setLevel(logging.WARNING)

    logging.getLogger(__name__).info(
        "Logging initialized - Level: %s | File logging: %s",
        log_level, bool(app.config.get('LOG_TO_FILE'))
    )
    return root_logger

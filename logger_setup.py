import os
import logging
import sys
import traceback
from datetime import datetime


def setup_logger(name, log_prefix='drive_cleaner', log_dir='logs'):
    """
    Set up a robust logger with file and console handlers.
    File: logs/{prefix}_{timestamp}.log (DEBUG level)
    Console: stdout (INFO level)
    """
    os.makedirs(log_dir, exist_ok=True)

    # Includes [module:line] for easier tracing
    LOG_FORMAT = '%(asctime)s [%(levelname)s] [%(name)s:%(lineno)d] %(message)s'
    LOG_DATE_FORMAT = '%Y-%m-%d %H:%M:%S'

    timestamp = datetime.now().strftime('%Y%m%d_%H%M%S')
    log_filename = os.path.join(log_dir, f"{log_prefix}_{timestamp}.log")

    logger = logging.getLogger(name)
    logger.setLevel(logging.DEBUG)

    # Avoid duplicate handlers if already setup
    if not logger.handlers:
        try:
            file_handler = logging.FileHandler(log_filename, encoding='utf-8')
            file_handler.setLevel(logging.DEBUG)
            file_handler.setFormatter(logging.Formatter(LOG_FORMAT, LOG_DATE_FORMAT))
            logger.addHandler(file_handler)
        except OSError as e:
            print(f"Warning: Could not create log file {log_filename}: {e}")

        console_handler = logging.StreamHandler(sys.stdout)
        console_handler.setLevel(logging.INFO)
        console_handler.setFormatter(logging.Formatter(LOG_FORMAT, LOG_DATE_FORMAT))
        logger.addHandler(console_handler)

    return logger, log_filename


def format_api_error(e):
    """
    Format a Google API HttpError (or TransportError) for robust logging.
    Extracts the HTTP status, reason and request uri when present.
    """
    error_msg = f"API Error: {str(e)}"

    try:
        status = getattr(e, 'status_code', None) or getattr(e, 'status', None)
        if status is None and getattr(e, 'resp', None) is not None:
            status = getattr(e.resp, 'status', None)
        if status:
            error_msg += f"\n  - Status: {status}"

        reason = getattr(e, 'reason', None)
        if reason:
            error_msg += f"\n  - Reason: {reason}"

        uri = getattr(e, 'uri', None)
        if uri:
            error_msg += f"\n  - Request: {uri}"

        if status == 403:
            error_msg += "\n  - Type: Permission denied or rate limit"
        elif status == 404:
            error_msg += "\n  - Type: Not found"
    except Exception as formatting_err:
        error_msg += f" (Note: Error while formatting detailed error: {formatting_err})"

    return error_msg


def log_exception(logger, message, exc=None):
    """Helper to log an exception with full context."""
    if exc:
        logger.error(f"{message}: {str(exc)}")
        logger.debug(traceback.format_exc())
    else:
        logger.exception(message)

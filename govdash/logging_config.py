"""
Logging configuration for govdash.

Console output is one short line per record. With DECODER_DEBUG=1 the
decoder package additionally writes everything (including per-action
fallback decisions logged at DEBUG) to decoder_debug.log.
"""
import logging
import sys
import os
from pathlib import Path

DECODER_DEBUG = os.getenv('DECODER_DEBUG', '').lower() in ('1', 'true', 'yes')

DEBUG_LOG_PATH = Path(__file__).parent.parent / 'decoder_debug.log'

DECODER_LOGGER_NAME = 'govdash.services.decoders'
DEBUG_HANDLER_NAME = 'decoder_debug_file'

# Chatty HTTP / chain client libraries
NOISY_LOGGERS = ('urllib3', 'requests', 'charset_normalizer', 'web3')

_LEVEL_TAGS = {
    logging.DEBUG: ('D', '90'),
    logging.INFO: ('I', '32'),
    logging.WARNING: ('W', '33'),
    logging.ERROR: ('E', '31'),
    logging.CRITICAL: ('!', '31;1'),
}


class ConciseFormatter(logging.Formatter):
    """'[W] message' lines; the logger name is shown for DEBUG and ERROR+."""

    def __init__(self, color: bool = False):
        super().__init__()
        self.color = color

    def format(self, record):
        tag, code = _LEVEL_TAGS.get(record.levelno, _LEVEL_TAGS[logging.INFO])
        prefix = f"\033[{code}m[{tag}]\033[0m" if self.color else f"[{tag}]"
        message = record.getMessage()
        if record.levelno == logging.DEBUG or record.levelno >= logging.ERROR:
            message = f"{record.name}: {message}"
        if record.exc_info:
            message = f"{message}\n{self.formatException(record.exc_info)}"
        return f"{prefix} {message}"


def _verbose_formatter() -> logging.Formatter:
    return logging.Formatter(
        fmt='%(asctime)s [%(levelname)s] %(name)s: %(message)s',
        datefmt='%Y-%m-%d %H:%M:%S',
    )


def setup_logging(level=logging.INFO, debug: bool = DECODER_DEBUG, stream=None):
    """
    Configure the root logger for a govdash entry point.

    Colour is used only when the stream is a terminal, so piped reports stay
    plain. debug=True also attaches the decoder debug file.
    """
    for logger_name in NOISY_LOGGERS:
        logging.getLogger(logger_name).setLevel(logging.WARNING)

    stream = stream or sys.stdout
    handler = logging.StreamHandler(stream)
    handler.setFormatter(ConciseFormatter(color=hasattr(stream, 'isatty') and stream.isatty()))

    root = logging.getLogger()
    root.handlers.clear()
    root.addHandler(handler)
    root.setLevel(level)

    app_logger = logging.getLogger('govdash')
    app_logger.setLevel(level)

    if debug:
        setup_decoder_debug_logging()
        app_logger.info(f"DECODER_DEBUG enabled - verbose logs written to {DEBUG_LOG_PATH}")

    return app_logger


def setup_decoder_debug_logging(log_path: Path = DEBUG_LOG_PATH) -> logging.Logger:
    """Attach the verbose file handler to the decoder package logger (once)"""
    decoder_logger = logging.getLogger(DECODER_LOGGER_NAME)
    decoder_logger.setLevel(logging.DEBUG)

    if any(h.name == DEBUG_HANDLER_NAME for h in decoder_logger.handlers):
        return decoder_logger

    file_handler = logging.FileHandler(log_path, mode='w', encoding='utf-8')
    file_handler.setLevel(logging.DEBUG)
    file_handler.setFormatter(_verbose_formatter())
    file_handler.name = DEBUG_HANDLER_NAME
    decoder_logger.addHandler(file_handler)

    return decoder_logger


def get_logger(name: str) -> logging.Logger:
    """Logger under the govdash tree for scripts. Use: logger = get_logger('batch_decode')"""
    return logging.getLogger(f'govdash.{name}')

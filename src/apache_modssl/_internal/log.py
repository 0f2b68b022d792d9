"""Logging setup for apache-modssl runs.

Logging is configured in two steps because the options that decide where
messages go are only known once the command line has been parsed:

1. `pre_arg_parse_setup` shows only critical messages on stderr and keeps
   everything else in memory.
2. `post_arg_parse_setup` applies ``--quiet``/``-v`` to stderr and, when
   ``--logs-dir`` is set, replays the buffered records into a rotating log
   file that receives the rest of the run.

"""
import functools
import logging
import logging.handlers
import os
import sys
import traceback
from types import TracebackType
from typing import Any
from typing import IO
from typing import Optional
from typing import Tuple
from typing import Type

from apache_modssl import errors
from apache_modssl import util
from apache_modssl._internal import constants

CLI_FMT = "%(message)s"
FILE_FMT = "%(asctime)s:%(levelname)s:%(name)s:%(message)s"

# Size at which the debug log is rotated mid-run.
LOG_FILE_MAX_BYTES = 2 ** 20

logger = logging.getLogger(__name__)


def _install_except_hook(debug: bool, quiet: bool) -> None:
    sys.excepthook = functools.partial(except_hook, debug=debug, quiet=quiet)


def pre_arg_parse_setup() -> None:
    """Install the buffering and stderr handlers on the root logger.

    Also registers `logging.shutdown` to run at exit and installs
    `except_hook`, guessing ``--debug`` and ``--quiet`` from `sys.argv`.

    """
    buffer_handler = MemoryHandler()

    stderr_handler = ColoredStreamHandler()
    stderr_handler.setFormatter(logging.Formatter(CLI_FMT))
    stderr_handler.setLevel(constants.QUIET_LOGGING_LEVEL)

    root_logger = logging.getLogger()
    root_logger.setLevel(logging.DEBUG)
    root_logger.addHandler(buffer_handler)
    root_logger.addHandler(stderr_handler)

    util.atexit_register(logging.shutdown)
    argv = sys.argv
    _install_except_hook(debug='--debug' in argv,
                         quiet='--quiet' in argv or '-q' in argv)


def _stderr_level(config: Any) -> int:
    if config.quiet:
        return constants.QUIET_LOGGING_LEVEL
    return constants.DEFAULT_LOGGING_LEVEL - 10 * config.verbose_count


def post_arg_parse_setup(config: Any) -> None:
    """Finish logging setup from the parsed ``config``.

    Expects the root logger to still carry the handlers added by
    `pre_arg_parse_setup`.

    :param config: parsed command line arguments
    :type config: `argparse.Namespace`

    """
    root_logger = logging.getLogger()
    buffer_handler: Optional[MemoryHandler] = None
    stderr_handler: Optional[ColoredStreamHandler] = None
    for handler in root_logger.handlers:
        if isinstance(handler, MemoryHandler):
            buffer_handler = handler
        elif isinstance(handler, ColoredStreamHandler):
            stderr_handler = handler
    assert buffer_handler is not None and stderr_handler is not None, \
        'Logging handlers from pre_arg_parse_setup are missing'

    root_logger.removeHandler(buffer_handler)
    if config.logs_dir:
        file_handler, log_path = setup_log_file_handler(
            config, constants.LOG_FILE, FILE_FMT)
        root_logger.addHandler(file_handler)
        buffer_handler.setTarget(file_handler)
        buffer_handler.flush(force=True)
        logger.debug("Writing the debug log to %s", log_path)
    buffer_handler.close()

    level = _stderr_level(config)
    stderr_handler.setLevel(level)
    logger.debug('Terminal logging level is %d', level)

    _install_except_hook(debug=config.debug, quiet=config.quiet)


def setup_log_file_handler(config: Any, logfile: str,
                           fmt: str) -> Tuple[logging.Handler, str]:
    """Create the rotating debug log in ``config.logs_dir``.

    The previous log is rolled over to ``<logfile>.1`` on every run unless
    ``config.max_log_backups`` is 0.

    :returns: the handler and the path of the log file
    :rtype: tuple

    """
    log_path = os.path.join(config.logs_dir, logfile)
    try:
        util.make_or_verify_dir(config.logs_dir, 0o700)
        handler = logging.handlers.RotatingFileHandler(
            log_path, maxBytes=LOG_FILE_MAX_BYTES,
            backupCount=config.max_log_backups)
    except OSError as error:
        raise errors.Error(util.PERM_ERR_FMT.format(error))
    if config.max_log_backups:
        handler.doRollover()
    handler.setLevel(logging.DEBUG)
    handler.setFormatter(logging.Formatter(fmt=fmt))
    return handler, log_path


class ColoredStreamHandler(logging.StreamHandler):
    """Stream handler printing warnings and worse in red on a terminal.

    :ivar bool colored: whether the stream is a tty
    :ivar int red_level: lowest level printed in red

    """
    def __init__(self, stream: Optional[IO] = None) -> None:
        super().__init__(stream)
        self.colored = (stream or sys.stderr).isatty()
        self.red_level = logging.WARNING

    def format(self, record: logging.LogRecord) -> str:
        text = super().format(record)
        if not self.colored or record.levelno < self.red_level:
            return text
        return util.ANSI_SGR_RED + text + util.ANSI_SGR_RESET


class MemoryHandler(logging.handlers.MemoryHandler):
    """Keeps every record until ``flush(force=True)`` hands them on."""

    def __init__(self, target: Optional[logging.Handler] = None,
                 capacity: int = 10000) -> None:
        super().__init__(capacity, target=target)

    def flush(self, force: bool = False) -> None:  # pylint: disable=arguments-differ
        # Only post_arg_parse_setup decides where buffered records go.
        if force:
            super().flush()

    def shouldFlush(self, record: logging.LogRecord) -> bool:
        return False


def except_hook(exc_type: Type[BaseException], exc_value: BaseException,
                trace: TracebackType, debug: bool, quiet: bool) -> None:
    """Log an uncaught exception and exit with a failure status.

    An `errors.Error` is reported by its message alone, any other exception
    by its one line summary. The traceback reaches stderr only with
    ``debug``, otherwise it goes to the debug log.

    """
    exc_info = (exc_type, exc_value, trace)
    if exc_type is KeyboardInterrupt:
        logger.error('Exiting due to user request.')
        sys.exit(1)
    if debug or not issubclass(exc_type, Exception):
        logger.error('Exiting abnormally:', exc_info=exc_info)
    else:
        logger.debug('Exiting abnormally:', exc_info=exc_info)
        if issubclass(exc_type, errors.Error):
            logger.error(str(exc_value))
        else:
            logger.error('An unexpected error occurred:')
            summary = traceback.format_exception_only(exc_type, exc_value)
            logger.error(''.join(summary).rstrip())
    if quiet:
        sys.exit(1)
    sys.exit("Re-run apache-modssl with -v or --debug for more details.")

"""Tests for apache_modssl._internal.log."""
import io
import logging
import logging.handlers
import os
import sys
import unittest
from unittest import mock
from unittest.mock import MagicMock

import pytest

from apache_modssl import errors
from apache_modssl import util
from apache_modssl._internal import constants
from apache_modssl._internal.tests import util as test_util


def _config(logs_dir=None, quiet=False, verbose_count=0, debug=False, max_log_backups=10):
    return mock.MagicMock(logs_dir=logs_dir, quiet=quiet, verbose_count=verbose_count,
                          debug=debug, max_log_backups=max_log_backups)


class PreArgParseSetupTest(unittest.TestCase):
    """Tests for apache_modssl._internal.log.pre_arg_parse_setup."""

    @classmethod
    def _call(cls) -> None:
        from apache_modssl._internal.log import pre_arg_parse_setup
        return pre_arg_parse_setup()

    @mock.patch('apache_modssl._internal.log.sys')
    @mock.patch('apache_modssl._internal.log.except_hook')
    @mock.patch('apache_modssl._internal.log.logging.getLogger')
    @mock.patch('apache_modssl._internal.log.util.atexit_register')
    def test_it(self, mock_register: MagicMock, mock_get: MagicMock,
                mock_except_hook: MagicMock, mock_sys: MagicMock) -> None:
        from apache_modssl._internal.log import ColoredStreamHandler
        from apache_modssl._internal.log import MemoryHandler
        mock_sys.argv = ['apache-modssl', '--debug']
        self._call()

        mock_root_logger = mock_get()
        mock_root_logger.setLevel.assert_called_once_with(logging.DEBUG)
        handlers = [call[0][0] for call in mock_root_logger.addHandler.call_args_list]
        assert len(handlers) == 2
        assert isinstance(handlers[0], MemoryHandler)
        assert isinstance(handlers[1], ColoredStreamHandler)
        assert handlers[1].level == constants.QUIET_LOGGING_LEVEL

        mock_register.assert_called_once_with(logging.shutdown)
        mock_sys.excepthook(1, 2, 3)
        mock_except_hook.assert_called_once_with(1, 2, 3, debug=True, quiet=False)


class PostArgParseSetupTest(test_util.TempDirTestCase):
    """Tests for apache_modssl._internal.log.post_arg_parse_setup."""

    @classmethod
    def _call(cls, *args, **kwargs) -> None:
        from apache_modssl._internal.log import post_arg_parse_setup
        return post_arg_parse_setup(*args, **kwargs)

    def setUp(self) -> None:
        super().setUp()
        from apache_modssl._internal.log import ColoredStreamHandler
        from apache_modssl._internal.log import MemoryHandler
        self.stream_handler = ColoredStreamHandler(io.StringIO())
        self.memory_handler = MemoryHandler()
        self.root_logger = mock.MagicMock(
            handlers=[self.memory_handler, self.stream_handler])

    def tearDown(self) -> None:
        self.memory_handler.close()
        self.stream_handler.close()
        super().tearDown()

    def _run(self, config) -> MagicMock:
        with mock.patch('apache_modssl._internal.log.logging.getLogger') as mock_get_logger:
            mock_get_logger.return_value = self.root_logger
            with mock.patch('apache_modssl._internal.log.except_hook') as mock_except_hook:
                with mock.patch('apache_modssl._internal.log.sys') as mock_sys:
                    self._call(config)
        mock_sys.excepthook(1, 2, 3)
        mock_except_hook.assert_called_once_with(
            1, 2, 3, debug=config.debug, quiet=config.quiet)
        return mock_sys

    def test_without_log_file(self) -> None:
        self._run(_config())
        self.root_logger.removeHandler.assert_called_once_with(self.memory_handler)
        assert not self.root_logger.addHandler.called
        assert self.stream_handler.level == constants.DEFAULT_LOGGING_LEVEL

    def test_log_file(self) -> None:
        logs_dir = os.path.join(self.tempdir, 'logs')
        record = logging.LogRecord('test', logging.DEBUG, __file__, 1, 'buffered', None, None)
        self.memory_handler.handle(record)
        self._run(_config(logs_dir=logs_dir, max_log_backups=0))

        file_handler = self.root_logger.addHandler.call_args[0][0]
        file_handler.close()
        log_path = os.path.join(logs_dir, constants.LOG_FILE)
        with open(log_path) as log_file:
            assert 'buffered' in log_file.read()

    def test_verbose(self) -> None:
        self._run(_config(verbose_count=2))
        assert self.stream_handler.level == logging.DEBUG

    def test_quiet(self) -> None:
        self._run(_config(quiet=True, verbose_count=2))
        assert self.stream_handler.level == constants.QUIET_LOGGING_LEVEL

    def test_missing_handlers(self) -> None:
        self.root_logger.handlers = [self.stream_handler]
        with mock.patch('apache_modssl._internal.log.logging.getLogger') as mock_get_logger:
            mock_get_logger.return_value = self.root_logger
            with pytest.raises(AssertionError):
                self._call(_config())


class SetupLogFileHandlerTest(test_util.TempDirTestCase):
    """Tests for apache_modssl._internal.log.setup_log_file_handler."""

    @classmethod
    def _call(cls, *args, **kwargs):
        from apache_modssl._internal.log import setup_log_file_handler
        return setup_log_file_handler(*args, **kwargs)

    def setUp(self) -> None:
        super().setUp()
        self.config = _config(logs_dir=os.path.join(self.tempdir, 'logs'), max_log_backups=42)

    @mock.patch('apache_modssl._internal.log.logging.handlers.RotatingFileHandler')
    def test_failure(self, mock_handler: MagicMock) -> None:
        mock_handler.side_effect = IOError

        with pytest.raises(errors.Error) as excinfo:
            self._call(self.config, 'test.log', '%(message)s')
        assert '--logs-dir' in str(excinfo.value)

    def test_success_with_rollover(self) -> None:
        self._test_success_common(should_rollover=True)

    def test_success_without_rollover(self) -> None:
        self.config.max_log_backups = 0
        self._test_success_common(should_rollover=False)

    def _test_success_common(self, should_rollover: bool) -> None:
        log_file = 'test.log'
        handler, log_path = self._call(self.config, log_file, '%(message)s')
        handler.close()

        assert handler.level == logging.DEBUG
        assert log_path == os.path.join(self.config.logs_dir, log_file)
        assert util.check_permissions(self.config.logs_dir, 0o700)

        backup_path = os.path.join(self.config.logs_dir, log_file + '.1')
        assert os.path.exists(backup_path) == should_rollover

    @mock.patch('apache_modssl._internal.log.logging.handlers.RotatingFileHandler')
    def test_max_log_backups_used(self, mock_handler: MagicMock) -> None:
        self._call(self.config, 'test.log', '%(message)s')
        assert mock_handler.call_args[1]['backupCount'] == 42


class HandlersTest(unittest.TestCase):
    """The stderr and buffering handlers installed before arguments are parsed."""

    @classmethod
    def _record(cls, level: int, msg: str) -> logging.LogRecord:
        return logging.LogRecord('apache_modssl', level, __file__, 1, msg, None, None)

    def test_warnings_red_on_tty(self) -> None:
        from apache_modssl._internal.log import ColoredStreamHandler
        stream = io.StringIO()
        stream.isatty = lambda: True
        handler = ColoredStreamHandler(stream)
        handler.handle(self._record(logging.INFO, 'Writing ssl.conf'))
        handler.handle(self._record(logging.WARNING, 'mod_ssl.so is missing'))
        assert stream.getvalue().splitlines() == [
            'Writing ssl.conf',
            util.ANSI_SGR_RED + 'mod_ssl.so is missing' + util.ANSI_SGR_RESET,
        ]

    def test_plain_when_not_tty(self) -> None:
        from apache_modssl._internal.log import ColoredStreamHandler
        stream = io.StringIO()
        ColoredStreamHandler(stream).handle(self._record(logging.ERROR, 'reload failed'))
        assert stream.getvalue() == 'reload failed\n'

    def test_buffer_kept_until_forced(self) -> None:
        from apache_modssl._internal.log import MemoryHandler
        stream = io.StringIO()
        target = logging.StreamHandler(stream)
        handler = MemoryHandler(target)
        handler.handle(self._record(logging.CRITICAL, 'early failure'))
        handler.flush()
        assert stream.getvalue() == ''

        handler.flush(force=True)
        assert stream.getvalue() == 'early failure\n'
        handler.close()
        target.close()


class ExceptHookTest(unittest.TestCase):
    """Tests for apache_modssl._internal.log.except_hook."""

    @classmethod
    def _call(cls, *args, **kwargs) -> None:
        from apache_modssl._internal.log import except_hook
        return except_hook(*args, **kwargs)

    def _run(self, exc: BaseException, debug: bool = False, quiet: bool = False):
        with mock.patch('apache_modssl._internal.log.logger') as mock_logger:
            with pytest.raises(SystemExit) as excinfo:
                self._call(type(exc), exc, None, debug=debug, quiet=quiet)
        return mock_logger, excinfo.value.code

    def test_error(self) -> None:
        mock_logger, code = self._run(errors.ConfigurationError('Unable to find Apache version'))
        mock_logger.error.assert_called_once_with('Unable to find Apache version')
        assert 'apache-modssl' in code

    def test_unexpected(self) -> None:
        mock_logger, code = self._run(ValueError('bug'))
        messages = [call[0][0] for call in mock_logger.error.call_args_list]
        assert messages == ['An unexpected error occurred:', 'ValueError: bug']
        assert isinstance(code, str)

    def test_debug(self) -> None:
        mock_logger, _ = self._run(errors.Error('oops'), debug=True)
        assert mock_logger.error.call_args[1]['exc_info'][0] is errors.Error

    def test_quiet(self) -> None:
        _, code = self._run(errors.Error('oops'), quiet=True)
        assert code == 1

    def test_keyboard_interrupt(self) -> None:
        mock_logger, code = self._run(KeyboardInterrupt())
        mock_logger.error.assert_called_once_with('Exiting due to user request.')
        assert code == 1


if __name__ == '__main__':
    sys.exit(pytest.main(sys.argv[1:] + [__file__]))  # pragma: no cover

"""Tests for apache_modssl._internal.main."""
import io
import sys
import unittest
from unittest import mock

import pytest

from apache_modssl import errors
from apache_modssl._internal import cli
from apache_modssl._internal import platforms


def _config(*args):
    return cli.prepare_and_parse_args(list(args))


class GatherFactsTest(unittest.TestCase):
    """Tests for apache_modssl._internal.main.gather_facts."""

    @classmethod
    def _call(cls, config):
        from apache_modssl._internal.main import gather_facts
        return gather_facts(config)

    @mock.patch("apache_modssl._internal.main.apache_util")
    def test_all_given(self, mock_apache_util) -> None:
        facts = self._call(_config("--os-family", "SUSE", "--apache-version", "2.4.51",
                                   "--worker-mpm", "on"))
        assert facts == ("suse", platforms.SUSE, "2.4.51", True)
        assert not mock_apache_util.method_calls

    @mock.patch("apache_modssl._internal.main.apache_util")
    def test_detected(self, mock_apache_util) -> None:
        mock_apache_util.get_os_family.return_value = "suse"
        mock_apache_util.get_version.return_value = "2.4.51"
        mock_apache_util.uses_worker_mpm.return_value = True
        assert self._call(_config()) == ("suse", platforms.SUSE, "2.4.51", True)
        mock_apache_util.get_version.assert_called_once_with(["apachectl", "-v"])
        mock_apache_util.uses_worker_mpm.assert_called_once_with(["apachectl", "-V"])

    @mock.patch("apache_modssl._internal.main.apache_util")
    def test_mpm_only_detected_when_needed(self, mock_apache_util) -> None:
        mock_apache_util.get_version.return_value = "2.4.57"
        facts = self._call(_config("--os-family", "debian"))
        assert facts == ("debian", platforms.DEBIAN, "2.4.57", False)
        mock_apache_util.uses_worker_mpm.assert_not_called()

    @mock.patch("apache_modssl._internal.main.apache_util")
    def test_unsupported_family(self, mock_apache_util) -> None:
        mock_apache_util.get_version.return_value = "2.4.57"
        os_family, options, _, _ = self._call(_config("--os-family", "Solaris"))
        assert os_family == "solaris"
        assert options.family == "solaris"
        assert options.version_cmd == ["apache2ctl", "-v"]


class RunTest(unittest.TestCase):
    """Tests for apache_modssl._internal.main.run."""

    @classmethod
    def _call(cls, *args):
        from apache_modssl._internal.main import run
        with mock.patch("apache_modssl._internal.main.apache_util"):
            return run(_config("--os-family", "redhat", "--apache-version", "2.4.6", *args))

    @mock.patch("apache_modssl._internal.main.plan.apply")
    def test_render_only(self, mock_apply) -> None:
        stdout = io.StringIO()
        with mock.patch("apache_modssl._internal.main.sys.stdout", new=stdout):
            self._call("--render-only", "--ssl-mutex", "posixsem")
        assert "  Mutex posixsem\n" in stdout.getvalue()
        mock_apply.assert_not_called()

    @mock.patch("apache_modssl._internal.main.manager.SystemManager")
    @mock.patch("apache_modssl._internal.main.plan.apply")
    def test_apply(self, mock_apply, mock_manager) -> None:
        mock_apply.return_value = True
        self._call("--dry-run")
        mock_manager.assert_called_once_with(platforms.REDHAT, dry_run=True)
        config, manager = mock_apply.call_args[0]
        assert config.ssl_conf_path == "/etc/httpd/conf.d/ssl.conf"
        assert manager is mock_manager.return_value

    @mock.patch("apache_modssl._internal.main.plan.apply")
    def test_resolution_error(self, mock_apply) -> None:
        with pytest.raises(errors.UnsupportedPlatform):
            from apache_modssl._internal.main import run
            run(_config("--os-family", "solaris", "--apache-version", "2.4"))
        mock_apply.assert_not_called()


class MainTest(unittest.TestCase):
    """Tests for apache_modssl._internal.main.main."""

    def setUp(self) -> None:
        self.patches = [
            mock.patch("apache_modssl._internal.main.log.pre_arg_parse_setup"),
            mock.patch("apache_modssl._internal.main.log.post_arg_parse_setup"),
        ]
        for patch in self.patches:
            patch.start()

    def tearDown(self) -> None:
        for patch in self.patches:
            patch.stop()

    @classmethod
    def _call(cls, args):
        from apache_modssl._internal.main import main
        return main(args)

    @mock.patch("apache_modssl._internal.main.run")
    def test_success(self, mock_run) -> None:
        assert self._call(["--os-family", "debian"]) is None
        assert mock_run.call_args[0][0].os_family == "debian"

    @mock.patch("apache_modssl._internal.main.run")
    def test_error(self, mock_run) -> None:
        mock_run.side_effect = errors.UnsupportedPlatform("solaris", "ssl_mutex")
        assert self._call([]) == (
            "Unsupported osfamily solaris, please explicitly pass in ssl_mutex")

    @mock.patch("apache_modssl._internal.main.run")
    def test_unexpected_error_propagates(self, mock_run) -> None:
        mock_run.side_effect = ValueError("bug")
        with pytest.raises(ValueError):
            self._call([])

    @mock.patch("apache_modssl._internal.main.run")
    def test_public_entry_point(self, mock_run) -> None:
        from apache_modssl import main as public_main
        assert public_main.main(["-q"]) is None
        assert mock_run.call_args[0][0].quiet is True


class DunderMainTest(unittest.TestCase):
    """Tests for apache_modssl.__main__.main."""

    @mock.patch("apache_modssl.__main__.modssl_main.main")
    def test_exit_status(self, mock_main) -> None:
        from apache_modssl.__main__ import main
        mock_main.return_value = "Unable to find Apache version"
        with pytest.raises(SystemExit) as excinfo:
            main()
        assert excinfo.value.code == "Unable to find Apache version"

        mock_main.return_value = None
        with pytest.raises(SystemExit) as excinfo:
            main()
        assert excinfo.value.code is None


if __name__ == "__main__":
    sys.exit(pytest.main(sys.argv[1:] + [__file__]))  # pragma: no cover

"""Local system implementation of the package and file manager."""
import hashlib
import logging
import os
import shutil
import tempfile
from typing import Iterable
from typing import Optional

from apache_modssl import errors
from apache_modssl import util
from apache_modssl._internal import interfaces
from apache_modssl._internal import platforms

logger = logging.getLogger(__name__)


class SystemManager(interfaces.ResourceManager):
    """Manages packages and files on the local machine.

    :ivar options: OS family specificities (commands, paths)
    :type options: :class:`~apache_modssl._internal.platforms.OsOptions`

    :ivar bool dry_run: log intended changes instead of making them

    """

    def __init__(self, options: platforms.OsOptions, dry_run: bool = False) -> None:
        self.options = options
        self.dry_run = dry_run
        self._reload_pending = False

    @property
    def reload_pending(self) -> bool:
        return self._reload_pending

    def _changing(self, msg: str, *args: object) -> None:
        if self.dry_run:
            msg = "(dry run) " + msg
        logger.info(msg, *args)

    def ensure_package(self, name: Optional[str], lib_path: Optional[str] = None) -> bool:
        changed = False
        if name is None:
            logger.debug("mod_ssl ships with the Apache package on %s", self.options.family)
        elif not self._package_installed(name):
            self._changing("Installing package %s", name)
            if not self.dry_run:
                try:
                    util.run_script(self.options.package_install_cmd + [name])
                except errors.SubprocessError as err:
                    raise errors.PackageError(
                        "Unable to install {0}: {1}".format(name, err))
            changed = True

        if lib_path and not self.dry_run:
            library = os.path.join(lib_path, "mod_ssl.so")
            if not os.path.isfile(library):
                logger.warning("Expected the ssl module library at %s but it is missing",
                               library)
        return changed

    def _package_installed(self, name: str) -> bool:
        try:
            util.run_script(self.options.package_query_cmd + [name], log=logger.debug)
        except errors.SubprocessError:
            return False
        return True

    def enable_module(self, name: str) -> bool:
        if not self.options.handle_modules:
            logger.debug("Modules are loaded by the package configuration on %s, "
                         "not enabling %s", self.options.family, name)
            return False

        enabled_path = os.path.join(self.options.httpd_dir, "mods-enabled", name + ".load")
        if os.path.exists(enabled_path):
            return False

        self._changing("Enabling Apache %s module", name)
        if self.dry_run:
            return True
        if self.options.enmod is None or not util.exe_exists(self.options.enmod):
            raise errors.MisconfigurationError(
                "Unable to find a2enmod, please make sure it is installed "
                "and in the PATH.")
        try:
            util.run_script([self.options.enmod, name])
        except errors.SubprocessError as err:
            raise errors.MisconfigurationError(str(err))
        self._reload_pending = True
        return True

    def ensure_directory(self, path: str, mode: int = 0o755, purge: bool = False,
                         recurse: bool = False, keep: Iterable[str] = ()) -> bool:
        if not os.path.isdir(path):
            self._changing("Creating directory %s", path)
            if not self.dry_run:
                util.make_or_verify_dir(path, mode)
            # A new directory has nothing to purge.
            return True

        changed = False
        if purge:
            kept = set(keep)
            for entry in sorted(os.listdir(path)):
                if entry in kept:
                    continue
                entry_path = os.path.join(path, entry)
                is_dir = os.path.isdir(entry_path) and not os.path.islink(entry_path)
                if is_dir and not recurse:
                    continue
                self._changing("Removing unmanaged %s", entry_path)
                if not self.dry_run:
                    if is_dir:
                        shutil.rmtree(entry_path)
                    else:
                        os.remove(entry_path)
                changed = True
        return changed

    def ensure_file(self, path: str, content: Optional[str] = None,
                    source: Optional[str] = None, mode: int = 0o644,
                    notify: bool = False) -> bool:
        if (content is None) == (source is None):
            raise ValueError("Exactly one of content and source must be given")

        if source is not None:
            try:
                with open(source, "rb") as source_f:
                    data = source_f.read()
            except IOError as error:
                raise errors.Error("Unable to read {0}: {1}".format(source, error))
        else:
            assert content is not None
            data = content.encode("utf-8")

        exists = os.path.isfile(path)
        changed = False
        if not exists or util.sha256sum(path) != hashlib.sha256(data).hexdigest():
            self._changing("Writing %s", path)
            if not self.dry_run:
                self._write(path, data, mode)
            changed = True
        elif not util.check_permissions(path, mode):
            self._changing("Setting mode of %s to %s", path, oct(mode))
            if not self.dry_run:
                os.chmod(path, mode)
            changed = True

        if changed and notify:
            self._reload_pending = True
        return changed

    @staticmethod
    def _write(path: str, data: bytes, mode: int) -> None:
        """Atomically replace ``path`` with ``data``."""
        fd, temp_path = tempfile.mkstemp(dir=os.path.dirname(path) or ".",
                                         prefix=".apache-modssl-")
        try:
            with os.fdopen(fd, "wb") as temp_f:
                temp_f.write(data)
            os.chmod(temp_path, mode)
            os.replace(temp_path, path)
        except OSError:
            if os.path.exists(temp_path):
                os.remove(temp_path)
            raise

    def config_test(self) -> None:
        """Check the configuration of Apache for errors.

        :raises .errors.MisconfigurationError: If config_test fails

        """
        try:
            util.run_script(self.options.conftest_cmd)
        except errors.SubprocessError as err:
            raise errors.MisconfigurationError(str(err))

    def reload_service(self) -> None:
        """Runs a config test and reloads the Apache server.

        :raises .errors.MisconfigurationError: If either the config test
            or reload fails.

        """
        if self.dry_run:
            logger.info("(dry run) Reloading Apache using %s", " ".join(self.options.restart_cmd))
            self._reload_pending = False
            return
        self.config_test()
        self._reload()
        self._reload_pending = False
        logger.info("Reloaded Apache")

    def _reload(self) -> None:
        """Reloads the Apache server.

        :raises .errors.MisconfigurationError: If reload fails

        """
        try:
            util.run_script(self.options.restart_cmd)
        except errors.SubprocessError as err:
            logger.warning("Unable to restart apache using %s",
                           self.options.restart_cmd)
            if self.options.restart_cmd_alt:
                logger.debug("Trying alternative restart command: %s",
                             self.options.restart_cmd_alt)
                # There is an alternative restart command available
                # This usually is "restart" verb while original is "graceful"
                try:
                    util.run_script(self.options.restart_cmd_alt)
                    return
                except errors.SubprocessError as secerr:
                    error = str(secerr)
            else:
                error = str(err)
            raise errors.MisconfigurationError(error)

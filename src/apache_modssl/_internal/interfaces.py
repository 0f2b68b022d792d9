"""Interface of the package and file manager.

The apply step only talks to a `ResourceManager`. Each ``ensure_*`` call
declares a desired state and reports whether the system had to be changed to
reach it. Resources declared with ``notify=True`` schedule a reload of the
web server when they change; the reload itself is requested separately
through `ResourceManager.reload_service` so it happens once per run.

"""
import abc
from typing import Iterable
from typing import Optional


class ResourceManager(metaclass=abc.ABCMeta):
    """Ensures packages, modules, directories and files are present."""

    @property
    @abc.abstractmethod
    def reload_pending(self) -> bool:
        """True if a resource declared with ``notify=True`` has changed."""

    @abc.abstractmethod
    def ensure_package(self, name: Optional[str], lib_path: Optional[str] = None) -> bool:
        """Ensure the package providing mod_ssl is installed.

        :param name: package name, None when the module ships with the
            web server package
        :type name: str or None
        :param lib_path: directory the module library is loaded from
        :type lib_path: str or None

        :returns: True if the package had to be installed
        :rtype: bool

        :raises .errors.PackageError: if installation fails
        """

    @abc.abstractmethod
    def enable_module(self, name: str) -> bool:
        """Ensure an Apache module is enabled.

        :param str name: module name, eg 'ssl'

        :returns: True if the module had to be enabled
        :rtype: bool
        """

    @abc.abstractmethod
    def ensure_directory(self, path: str, mode: int = 0o755, purge: bool = False,
                         recurse: bool = False, keep: Iterable[str] = ()) -> bool:
        """Ensure a directory exists.

        :param str path: directory path
        :param int mode: directory mode
        :param bool purge: remove entries not listed in ``keep``
        :param bool recurse: also purge subdirectories
        :param keep: entry names to keep when purging

        :returns: True if the directory was created or purged
        :rtype: bool
        """

    @abc.abstractmethod
    def ensure_file(self, path: str, content: Optional[str] = None,
                    source: Optional[str] = None, mode: int = 0o644,
                    notify: bool = False) -> bool:
        """Ensure a file has the given content, or a copy of ``source``.

        Exactly one of ``content`` and ``source`` must be given.

        :param str path: file path
        :param content: desired text content
        :type content: str or None
        :param source: file to copy
        :type source: str or None
        :param int mode: file mode
        :param bool notify: schedule a reload if the file changes

        :returns: True if the file was written
        :rtype: bool
        """

    @abc.abstractmethod
    def reload_service(self) -> None:
        """Check the configuration and gracefully reload the web server.

        :raises .errors.MisconfigurationError: if either fails
        """

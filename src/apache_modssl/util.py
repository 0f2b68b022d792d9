"""Utilities for apache-modssl."""
import atexit
import errno
import hashlib
import itertools
import logging
import os
import platform
import re
import stat
import subprocess
from typing import Any
from typing import Callable
from typing import List
from typing import Tuple
from typing import Union

import distro

from apache_modssl import errors

logger = logging.getLogger(__name__)


# ANSI SGR escape codes
# Colors text red
ANSI_SGR_RED = "\033[31m"
# Resets output format
ANSI_SGR_RESET = "\033[0m"


PERM_ERR_FMT = os.linesep.join((
    "The following error was encountered:", "{0}",
    "Either run as root, or set --logs-dir to a writeable path."))


# Stores importing process ID to be used by atexit_register()
_INITIAL_PID = os.getpid()
_VERSION_COMPONENT_RE = re.compile(r'(\d+ | [a-z]+ | \.)', re.VERBOSE)


class LooseVersion:
    """A version with loose rules, i.e. any given string is a valid version number.

    Regular comparison is not supported. Instead, the `try_risky_comparison`
    method is provided, which raises an error if two LooseVersions are
    incomparable, for example when integer and string components are present
    in the same position. Trailing zeroes are not significant, so "2.4" and
    "2.4.0" are equal.
    """

    def __init__(self, version_string: str) -> None:
        """Parses a version string into its components.

        :param str version_string: version string
        """
        components: List[Union[int, str]]
        components = [x for x in _VERSION_COMPONENT_RE.split(version_string)
                      if x and x != '.']
        for i, obj in enumerate(components):
            try:
                components[i] = int(obj)
            except ValueError:
                pass

        self.version_components = components

    def try_risky_comparison(self, other: 'LooseVersion') -> int:
        """Compares the LooseVersion to another LooseVersion.

        Comparison is performed element-wise. Missing trailing components
        count as zero.

        Examples:
        - LooseVersion('2.4').try_risky_comparison(LooseVersion('2.4.0')) -> 0
        - LooseVersion('2.10').try_risky_comparison(LooseVersion('2.4')) -> 1
        - LooseVersion('2.2.34').try_risky_comparison(LooseVersion('2.4')) -> -1
        - LooseVersion('2a').try_risky_comparison(LooseVersion('2.4')) -> ValueError

        :returns: 0 if equal, 1 if self is greater, -1 if self is lesser
        :rtype: int

        :raises ValueError: if the versions cannot be compared

        """
        try:
            for self_vc, other_vc in itertools.zip_longest(self.version_components,
                                                           other.version_components,
                                                           fillvalue=0):
                if self_vc < other_vc:  # type: ignore
                    return -1
                elif self_vc > other_vc:  # type: ignore
                    return 1
            return 0
        except TypeError:
            raise ValueError("Cannot meaningfully compare LooseVersion {} with LooseVersion {} "
                             "due to comparison of version components with different types."
                             .format(self.version_components, other.version_components))


def versioncmp(version_a: str, version_b: str) -> int:
    """Compare two version strings semantically.

    :returns: -1, 0 or 1 as version_a is lower, equal or higher
    :rtype: int

    :raises .errors.ConfigurationError: if the versions cannot be compared

    """
    try:
        return LooseVersion(version_a).try_risky_comparison(LooseVersion(version_b))
    except ValueError as error:
        raise errors.ConfigurationError(
            "Invalid Apache version {0!r}: {1}".format(version_a, error))


def run_script(params: List[str], log: Callable[[str], None] = logger.error) -> Tuple[str, str]:
    """Run the script with the given params.

    :param list params: List of parameters to pass to subprocess.run
    :param callable log: Logger method to use for errors

    :returns: stdout and stderr of the command
    :rtype: tuple

    :raises .errors.SubprocessError: if the command can't be run or fails

    """
    try:
        proc = subprocess.run(params,
                              check=False,
                              stdout=subprocess.PIPE,
                              stderr=subprocess.PIPE,
                              universal_newlines=True)

    except (OSError, ValueError):
        msg = "Unable to run the command: %s" % " ".join(params)
        log(msg)
        raise errors.SubprocessError(msg)

    if proc.returncode != 0:
        msg = "Error while running %s.\n%s\n%s" % (
            " ".join(params), proc.stdout, proc.stderr)
        log(msg)
        raise errors.SubprocessError(msg)

    return proc.stdout, proc.stderr


def exe_exists(exe: str) -> bool:
    """Determine whether path/name refers to an executable.

    :param str exe: Executable path or name

    :returns: If exe is a valid executable
    :rtype: bool

    """
    def is_executable(path: str) -> bool:
        return os.path.isfile(path) and os.access(path, os.X_OK)

    path, _ = os.path.split(exe)
    if path:
        return is_executable(exe)
    for path in os.environ.get("PATH", "").split(os.pathsep):
        if is_executable(os.path.join(path, exe)):
            return True

    return False


def check_permissions(filepath: str, mode: int) -> bool:
    """Check file or directory permissions.

    :param str filepath: Path to the tested file (or directory).
    :param int mode: Expected file mode.

    :returns: True if the mode of the file matches
    :rtype: bool

    """
    return stat.S_IMODE(os.stat(filepath).st_mode) == mode


def make_or_verify_dir(directory: str, mode: int = 0o755, strict: bool = False) -> None:
    """Make sure directory exists with proper permissions.

    :param str directory: Path to a directory.
    :param int mode: Directory mode.
    :param bool strict: require directory to have exactly ``mode``

    :raises .errors.Error: if a directory already exists,
        but has wrong permissions

    :raises OSError: if invalid or inaccessible file names and
        paths, or other arguments that have the correct type,
        but are not accepted by the operating system.

    """
    try:
        os.makedirs(directory, mode)
    except OSError as exception:
        if exception.errno == errno.EEXIST:
            if strict and not check_permissions(directory, mode):
                raise errors.Error(
                    "%s exists, but it should have permissions %s" % (directory, oct(mode)))
        else:
            raise


def sha256sum(filename: str) -> str:
    """Compute a sha256sum of a file.

    :param str filename: path to the file whose hash will be computed

    :returns: sha256 digest of the file in hexadecimal
    :rtype: str
    """
    sha256 = hashlib.sha256()
    with open(filename, 'rb') as file_d:
        sha256.update(file_d.read())
    return sha256.hexdigest()


def get_os_info() -> Tuple[str, str]:
    """
    Get OS name and version

    :returns: (os_name, os_version)
    :rtype: `tuple` of `str`
    """
    os_type, os_ver, _ = platform.system_alias(
        platform.system(),
        platform.release(),
        platform.version()
    )
    os_type = os_type.lower()
    if os_type.startswith('linux'):
        distro_name, distro_version = distro.id(), distro.version()
        # On arch, these values are reportedly empty strings so handle it
        # defensively
        if distro_name:
            os_type = distro_name
        if distro_version:
            os_ver = distro_version
    elif os_type.startswith('freebsd'):
        # eg "9.3-RC3-p1"
        os_ver = os_ver.partition("-")[0]
        os_ver = os_ver.partition(".")[0]
    return os_type, os_ver


def get_systemd_os_like() -> List[str]:
    """
    Get a list of strings that indicate the distribution likeness to
    other distributions.

    :returns: List of distribution acronyms
    :rtype: `list` of `str`
    """
    return [like for like in distro.like().split(" ") if like]


def atexit_register(func: Callable, *args: Any, **kwargs: Any) -> None:
    """Sets func to be called before the program exits.

    Special care is taken to ensure func is only called when the process
    that first imports this module exits rather than any child processes.

    :param function func: function to be called in case of an error

    """
    atexit.register(_atexit_call, func, *args, **kwargs)


def _atexit_call(func: Callable, *args: Any, **kwargs: Any) -> None:
    if _INITIAL_PID == os.getpid():
        func(*args, **kwargs)

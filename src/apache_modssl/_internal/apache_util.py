""" Detection of the facts mod_ssl resolution depends on """
import logging
import re
from typing import List

from apache_modssl import errors
from apache_modssl import util
from apache_modssl._internal import platforms

logger = logging.getLogger(__name__)


def get_os_family() -> str:
    """Detect the OS family of the running system.

    :returns: OS family tag, or the lower-cased distribution name when it
        belongs to no known family
    :rtype: str

    """
    os_name, _ = util.get_os_info()
    family = platforms.family_for(os_name, util.get_systemd_os_like())
    logger.debug("Detected OS %s, family %s", os_name, family)
    return family


def get_version(version_cmd: List[str]) -> str:
    """Return version of Apache Server.

    :param list version_cmd: command printing the version, eg apachectl -v

    :returns: version, eg '2.4.7'
    :rtype: str

    :raises .errors.ConfigurationError: if unable to find Apache version

    """
    try:
        stdout, _ = util.run_script(version_cmd, log=logger.debug)
    except errors.SubprocessError:
        raise errors.ConfigurationError(
            "Unable to run %s, please explicitly pass in apache_version" %
            " ".join(version_cmd))

    regex = re.compile(r"Apache/([0-9\.]*)", re.IGNORECASE)
    matches = regex.findall(stdout)

    if len(matches) != 1:
        raise errors.ConfigurationError("Unable to find Apache version")

    return matches[0]


def uses_worker_mpm(mpm_cmd: List[str]) -> bool:
    """Whether Apache runs the worker MPM.

    Failing to run the command is not fatal, the prefork MPM is assumed.

    :param list mpm_cmd: command printing the compile settings, eg apachectl -V

    :rtype: bool

    """
    try:
        stdout, _ = util.run_script(mpm_cmd, log=logger.debug)
    except errors.SubprocessError:
        logger.debug("Unable to detect Apache MPM, assuming prefork")
        return False
    match = re.search(r"Server MPM:\s*(\w+)", stdout)
    return match is not None and match.group(1).lower() == "worker"

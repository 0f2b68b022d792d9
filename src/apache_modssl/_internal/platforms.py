"""Operating system family defaults.

Every supported OS family maps to an `OsOptions` record describing where
Apache keeps its files on that family, how mod_ssl is installed, which
defaults the resolver falls back to, and how the server is reloaded.
Families missing from `PLATFORMS` have no defaults at all.

"""
import posixpath
from typing import Dict
from typing import Iterable
from typing import List
from typing import Optional

from apache_modssl._internal import constants


class OsOptions:
    """
    Dedicated class to describe the OS specificities (eg. paths, binary names,
    cache locations) that mod_ssl management needs to be aware of.
    """
    def __init__(self,
                 family: str,
                 httpd_dir: str = "/etc/apache2",
                 mod_dir: str = "/etc/apache2/mods-available",
                 run_dir: str = "/var/run",
                 session_cache_dir: Optional[str] = None,
                 stapling_cache_dir: Optional[str] = None,
                 legacy_mutex: Optional[str] = None,
                 package_name: Optional[str] = None,
                 package_query_cmd: Optional[List[str]] = None,
                 package_install_cmd: Optional[List[str]] = None,
                 ctl: str = "apache2ctl",
                 restart_cmd_alt: Optional[List[str]] = None,
                 handle_modules: bool = False,
                 enmod: Optional[str] = None,
                 lib_path_worker: Optional[str] = None,
                 lib_path_prefork: Optional[str] = None,
                 ):
        self.family = family
        self.httpd_dir = httpd_dir
        self.mod_dir = mod_dir
        self.ssl_file = posixpath.join(mod_dir, "ssl.conf")
        self.managed_ssl_dir = posixpath.join(httpd_dir, constants.MANAGED_SSL_DIRNAME)
        self.session_cache = "{0}({1})".format(
            session_cache_dir or posixpath.join(run_dir, "ssl_scache"),
            constants.SESSION_CACHE_SIZE)
        self.stapling_cache = "{0}({1})".format(
            stapling_cache_dir or posixpath.join(run_dir, "ssl_stapling"),
            constants.STAPLING_CACHE_SIZE)
        self.mutex_default = constants.DEFAULT_MUTEX
        self.legacy_mutex = legacy_mutex
        self.package_name = package_name
        self.package_query_cmd = package_query_cmd or ["rpm", "-q"]
        self.package_install_cmd = package_install_cmd or ["yum", "install", "-y"]
        self.ctl = ctl
        self.version_cmd = [ctl, "-v"]
        self.mpm_cmd = [ctl, "-V"]
        self.restart_cmd = [ctl, "graceful"]
        self.restart_cmd_alt = restart_cmd_alt
        self.conftest_cmd = [ctl, "configtest"]
        self.handle_modules = handle_modules
        self.enmod = enmod
        self.lib_path_worker = lib_path_worker
        self.lib_path_prefork = lib_path_prefork

    def lib_path(self, worker_mpm: bool) -> Optional[str]:
        """Directory the ssl module library is loaded from, if the family pins one."""
        return self.lib_path_worker if worker_mpm else self.lib_path_prefork

    def __repr__(self) -> str:
        return f"OsOptions({self.family!r})"


DEBIAN = OsOptions(
    family="debian",
    run_dir="${APACHE_RUN_DIR}",
    stapling_cache_dir="${APACHE_RUN_DIR}/ocsp",
    legacy_mutex=constants.LEGACY_MUTEX,
    package_query_cmd=["dpkg", "-s"],
    package_install_cmd=["apt-get", "install", "-y"],
    handle_modules=True,
    enmod="a2enmod",
)

REDHAT = OsOptions(
    family="redhat",
    httpd_dir="/etc/httpd",
    mod_dir="/etc/httpd/conf.d",
    session_cache_dir="/var/cache/mod_ssl/scache",
    stapling_cache_dir="/run/httpd/ssl_stapling",
    package_name="mod_ssl",
    ctl="apachectl",
)

FREEBSD = OsOptions(
    family="freebsd",
    httpd_dir="/usr/local/etc/apache24",
    mod_dir="/usr/local/etc/apache24/Modules",
    package_query_cmd=["pkg", "info", "-e"],
    package_install_cmd=["pkg", "install", "-y"],
    ctl="apachectl",
)

GENTOO = OsOptions(
    family="gentoo",
    mod_dir="/etc/apache2/modules.d",
    package_query_cmd=["qlist", "-I"],
    package_install_cmd=["emerge", "--noreplace"],
    restart_cmd_alt=["apache2ctl", "restart"],
)

SUSE = OsOptions(
    family="suse",
    mod_dir="/etc/apache2/mod.d",
    run_dir="/var/lib/apache2",
    package_install_cmd=["zypper", "--non-interactive", "install"],
    ctl="apachectl",
    lib_path_worker="/usr/lib64/apache2-worker",
    lib_path_prefork="/usr/lib64/apache2-prefork",
)

PLATFORMS: Dict[str, OsOptions] = {
    options.family: options for options in (DEBIAN, REDHAT, FREEBSD, GENTOO, SUSE)
}
"""Supported OS families"""

OS_FAMILIES: Dict[str, str] = {
    "debian": "debian",
    "ubuntu": "debian",
    "linuxmint": "debian",
    "raspbian": "debian",
    "redhat": "redhat",
    "rhel": "redhat",
    "red hat enterprise linux server": "redhat",
    "centos": "redhat",
    "centos linux": "redhat",
    "fedora": "redhat",
    "rocky": "redhat",
    "almalinux": "redhat",
    "ol": "redhat",
    "oracle": "redhat",
    "amazon": "redhat",
    "cloudlinux": "redhat",
    "scientific": "redhat",
    "freebsd": "freebsd",
    "gentoo": "gentoo",
    "gentoo base system": "gentoo",
    "suse": "suse",
    "sles": "suse",
    "opensuse": "suse",
    "opensuse-leap": "suse",
    "opensuse-tumbleweed": "suse",
}
"""Distribution names, as reported by distro, mapped to an OS family"""


def normalize_family(os_family: str) -> str:
    """Lower-case an OS family fact, so 'RedHat' and 'Suse' match the table."""
    return os_family.strip().lower()


def get_options(os_family: str) -> Optional[OsOptions]:
    """Get the defaults for an OS family, or None when it is unsupported."""
    return PLATFORMS.get(normalize_family(os_family))


def family_for(os_name: str, os_like: Iterable[str] = ()) -> str:
    """Map a distribution name onto an OS family.

    Distributions not in `OS_FAMILIES` are matched through the names they
    declare themselves alike to. If nothing matches, the lower-cased name is
    returned unchanged, and resolution later fails on it.

    :param str os_name: distribution name
    :param os_like: names from the ``ID_LIKE`` field of os-release

    :returns: OS family tag
    :rtype: str

    """
    os_name = normalize_family(os_name)
    family = OS_FAMILIES.get(os_name)
    if family is None:
        for like in os_like:
            family = OS_FAMILIES.get(normalize_family(like))
            if family:
                break
    return family or os_name

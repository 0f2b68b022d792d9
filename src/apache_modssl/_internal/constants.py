"""apache-modssl constants."""
import logging
from typing import Any
from typing import Dict
from typing import Tuple


SSL_CIPHER = "HIGH:MEDIUM:!aNULL:!MD5:!RC4:!3DES"
"""Default SSLCipherSuite"""

SSL_PROTOCOL: Tuple[str, ...] = ("all", "-SSLv2", "-SSLv3")
"""Default SSLProtocol"""

SSL_OPTIONS: Tuple[str, ...] = ("StdEnvVars",)
"""Default SSLOptions"""

STAPLING_CACHE_SIZE = 32768
"""Size suffix of the default OCSP stapling caches"""

SESSION_CACHE_SIZE = 512000
"""Size suffix of the default session caches"""

MODERN_APACHE_VERSION = "2.4"
"""First Apache version using the generic Mutex directive and socache modules"""

LEGACY_MUTEX = "file:${APACHE_RUN_DIR}/ssl_mutex"
"""SSLMutex used on Debian with Apache older than 2.4"""

DEFAULT_MUTEX = "default"

SSL_MODULE_DEPS: Tuple[str, ...] = ("ssl", "mime")
"""Modules mod_ssl always needs enabled, in order"""

SOCACHE_MODULE = "socache_shmcb"
"""Shared object cache module required by Apache >= 2.4"""

MANAGED_SSL_DIRNAME = "managed_ssl"
"""Name of the directory of managed certificate copies under the httpd dir"""

README_NAME = "README.txt"
README_CONTENT = (
    "This directory contains managed copies of ssl files, so changes can be "
    "tracked and apache reloaded when they change.\n")

SSL_CONF_MODE = 0o644
SSL_COPY_MODE = 0o640

TEMPLATE_NAME = "ssl.conf.j2"

MANAGED_COMMENT = "DO NOT EDIT - Managed by apache-modssl"

QUIET_LOGGING_LEVEL = logging.ERROR
"""Logging level to use in quiet mode."""

DEFAULT_LOGGING_LEVEL = logging.WARNING
"""Default logging level to use when not in quiet mode."""

LOG_FILE = "apache-modssl.log"

CLI_DEFAULTS: Dict[str, Any] = {
    "config_files": ["/etc/apache-modssl/cli.ini"],
    "verbose_count": 0,
    "quiet": False,
    "debug": False,
    "logs_dir": None,
    "max_log_backups": 10,
    "dry_run": False,
    "render_only": False,
    "os_family": None,
    "apache_version": None,
    "worker_mpm": None,
}
"""Defaults for CLI flags and `.NamespaceConfig` attributes."""

ENV_PREFIX = "APACHE_MODSSL_"
"""Prefix of environment variables read by the CLI"""

"""Resolution of mod_ssl parameters into a concrete configuration.

The resolver is a pure function of the supplied `.SSLParams` and the ambient
facts it is constructed with (OS family, detected Apache version, MPM). It
reads nothing from the running system, so identical inputs always produce an
identical `.ResolvedConfig`.

"""
import logging
import posixpath
from typing import Any
from typing import Optional
from typing import Tuple

from apache_modssl import errors
from apache_modssl import util
from apache_modssl._internal import constants
from apache_modssl._internal import obj
from apache_modssl._internal import platforms

logger = logging.getLogger(__name__)


def normalize_honor_cipher_order(value: obj.HonorCipherOrder) -> bool:
    """Normalize an SSLHonorCipherOrder value to a boolean.

    Booleans pass through, 'on' and 'off' map to True and False, and
    anything else falls back to True.

    """
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        return {"on": True, "off": False}.get(value.lower(), True)
    return True


def flatten_path(path: str) -> str:
    """Name of the managed copy of ``path``: every '/' becomes '_'."""
    return path.replace("/", "_")


def _as_tuple(value: Any) -> Tuple[str, ...]:
    if value is None:
        return ()
    if isinstance(value, str):
        return (value,)
    return tuple(value)


class Resolver:
    """Resolves `.SSLParams` for one OS family and Apache version.

    :ivar str os_family: normalized OS family tag
    :ivar options: defaults of the OS family, None if unsupported
    :type options: `.OsOptions` or None
    :ivar str ambient_version: detected Apache version, if any
    :ivar bool worker_mpm: whether the worker MPM is configured

    """

    def __init__(self, os_family: str, apache_version: Optional[str] = None,
                 worker_mpm: bool = False) -> None:
        self.os_family = platforms.normalize_family(os_family)
        self.options = platforms.get_options(self.os_family)
        self.ambient_version = apache_version
        self.worker_mpm = worker_mpm

    def _require_options(self, param: str) -> platforms.OsOptions:
        if self.options is None:
            raise errors.UnsupportedPlatform(self.os_family, param)
        return self.options

    def apache_version(self, params: obj.SSLParams) -> str:
        """Explicit apache_version, else the ambient one."""
        version = params.apache_version
        if version is None:
            version = self.ambient_version
        if version is None:
            raise errors.ConfigurationError(
                "Unable to determine the Apache version, please explicitly "
                "pass in apache_version")
        if not version.strip():
            raise errors.ConfigurationError("Invalid Apache version {0!r}".format(version))
        return version

    def ssl_mutex(self, params: obj.SSLParams, modern: bool) -> str:
        """Explicit ssl_mutex verbatim, else the OS family rule."""
        if params.ssl_mutex is not None:
            return params.ssl_mutex
        options = self._require_options("ssl_mutex")
        if options.legacy_mutex and not modern:
            return options.legacy_mutex
        return options.mutex_default

    def stapling_cache(self, params: obj.SSLParams) -> str:
        """Explicit stapling_cache verbatim, else the OS family default."""
        if params.stapling_cache is not None:
            return params.stapling_cache
        return self._require_options("stapling_cache").stapling_cache

    def session_cache(self, params: obj.SSLParams) -> str:
        """Explicit ssl_sessioncache verbatim, else the OS family default."""
        if params.ssl_sessioncache is not None:
            return params.ssl_sessioncache
        return self._require_options("ssl_sessioncache").session_cache

    def paths(self, params: obj.SSLParams) -> Tuple[str, str, str]:
        """Location of ssl.conf, of its directory and of the managed copies.

        :returns: ssl.conf path, module directory, managed copy directory
        :rtype: tuple

        """
        if params.ssl_conf_path:
            mod_dir = posixpath.dirname(params.ssl_conf_path)
            if self.options is not None:
                managed_dir = self.options.managed_ssl_dir
            else:
                managed_dir = posixpath.join(
                    posixpath.dirname(mod_dir), constants.MANAGED_SSL_DIRNAME)
            return params.ssl_conf_path, mod_dir, managed_dir
        options = self._require_options("ssl_conf_path")
        return options.ssl_file, options.mod_dir, options.managed_ssl_dir

    def file_copies(self, params: obj.SSLParams,
                    managed_dir: str) -> Tuple[obj.ManagedCopy, ...]:
        """Managed copies of the cert, key and CA files, if reloading on change."""
        if not params.reload_on_change:
            return ()
        copies = []
        for source in (params.ssl_cert, params.ssl_key, params.ssl_ca):
            if source:
                name = flatten_path(source)
                copies.append(obj.ManagedCopy(
                    source=source, name=name, path=posixpath.join(managed_dir, name)))
        return tuple(copies)

    def lib_path(self) -> Optional[str]:
        """Library directory override, only SUSE pins one."""
        if self.options is None:
            return None
        return self.options.lib_path(self.worker_mpm)

    def resolve(self, params: obj.SSLParams) -> obj.ResolvedConfig:
        """Resolve every parameter to a concrete value.

        :param params: user supplied parameters
        :type params: `.SSLParams`

        :returns: the resolved configuration
        :rtype: `.ResolvedConfig`

        :raises .errors.UnsupportedPlatform: if a parameter without explicit
            value has no default for the OS family
        :raises .errors.ConfigurationError: if the Apache version is missing
            or cannot be compared

        """
        version = self.apache_version(params)
        modern = util.versioncmp(version, constants.MODERN_APACHE_VERSION) >= 0
        mutex = self.ssl_mutex(params, modern)
        stapling_cache = self.stapling_cache(params)
        session_cache = self.session_cache(params)
        ssl_conf_path, mod_dir, managed_dir = self.paths(params)

        package_name = params.package_name
        if package_name is None and self.options is not None:
            package_name = self.options.package_name

        modules = constants.SSL_MODULE_DEPS
        if modern:
            modules += (constants.SOCACHE_MODULE,)

        logger.debug("Resolved mod_ssl for %s with Apache %s: mutex %s",
                     self.os_family, version, mutex)

        return obj.ResolvedConfig(
            os_family=self.os_family,
            apache_version=version,
            modern_apache=modern,
            ssl_mutex=mutex,
            honor_cipher_order=normalize_honor_cipher_order(params.ssl_honorcipherorder),
            stapling_cache=stapling_cache,
            session_cache=session_cache,
            ssl_compression=params.ssl_compression,
            ssl_sessiontickets=params.ssl_sessiontickets,
            ssl_cryptodevice=params.ssl_cryptodevice,
            ssl_options=_as_tuple(params.ssl_options),
            ssl_openssl_conf_cmd=_as_tuple(params.ssl_openssl_conf_cmd),
            ssl_cert=params.ssl_cert,
            ssl_key=params.ssl_key,
            ssl_ca=params.ssl_ca,
            ssl_cipher=params.ssl_cipher,
            ssl_protocol=_as_tuple(params.ssl_protocol),
            ssl_proxy_protocol=_as_tuple(params.ssl_proxy_protocol),
            ssl_pass_phrase_dialog=params.ssl_pass_phrase_dialog,
            ssl_random_seed_bytes=params.ssl_random_seed_bytes,
            ssl_sessioncachetimeout=params.ssl_sessioncachetimeout,
            ssl_stapling=params.ssl_stapling,
            ssl_stapling_return_errors=params.ssl_stapling_return_errors,
            package_name=package_name,
            lib_path=self.lib_path(),
            modules=modules,
            reload_on_change=params.reload_on_change,
            ssl_conf_path=ssl_conf_path,
            mod_dir=mod_dir,
            managed_ssl_dir=managed_dir,
            file_copies=self.file_copies(params, managed_dir),
        )


def resolve(params: obj.SSLParams, os_family: str, apache_version: Optional[str] = None,
            worker_mpm: bool = False) -> obj.ResolvedConfig:
    """Resolve ``params`` for the given ambient facts.

    Shortcut for ``Resolver(os_family, apache_version, worker_mpm).resolve(params)``.

    """
    return Resolver(os_family, apache_version, worker_mpm).resolve(params)

"""Records passed between the resolver, the renderer and the manager."""
from typing import NamedTuple
from typing import Optional
from typing import Sequence
from typing import Tuple
from typing import Union

from apache_modssl._internal import constants

HonorCipherOrder = Union[bool, str]
"""Either a strict boolean or one of the strings 'on' and 'off'"""


class SSLParams(NamedTuple):
    """User supplied mod_ssl parameters.

    Parameters left as ``None`` are filled in by the resolver from the OS
    family defaults or the ambient facts.
    """
    ssl_compression: bool = False
    ssl_sessiontickets: Optional[bool] = None
    ssl_cryptodevice: str = "builtin"
    ssl_options: Sequence[str] = constants.SSL_OPTIONS
    ssl_openssl_conf_cmd: Sequence[str] = ()
    ssl_cert: Optional[str] = None
    ssl_key: Optional[str] = None
    ssl_ca: Optional[str] = None
    ssl_cipher: str = constants.SSL_CIPHER
    ssl_honorcipherorder: HonorCipherOrder = True
    ssl_protocol: Sequence[str] = constants.SSL_PROTOCOL
    ssl_proxy_protocol: Sequence[str] = ()
    ssl_pass_phrase_dialog: str = "builtin"
    ssl_random_seed_bytes: str = "512"
    ssl_sessioncache: Optional[str] = None
    ssl_sessioncachetimeout: str = "300"
    ssl_stapling: bool = False
    stapling_cache: Optional[str] = None
    ssl_stapling_return_errors: Optional[bool] = None
    ssl_mutex: Optional[str] = None
    apache_version: Optional[str] = None
    package_name: Optional[str] = None
    reload_on_change: bool = False
    ssl_conf_path: Optional[str] = None


class ManagedCopy(NamedTuple):
    """A tracked copy of a certificate, key or CA file.

    :ivar str source: file being tracked
    :ivar str name: flattened file name of the copy
    :ivar str path: where the copy is kept
    """
    source: str
    name: str
    path: str


class ResolvedConfig(NamedTuple):
    """Fully resolved mod_ssl configuration, with no field left to default."""
    os_family: str
    apache_version: str
    modern_apache: bool
    ssl_mutex: str
    honor_cipher_order: bool
    stapling_cache: str
    session_cache: str
    ssl_compression: bool
    ssl_sessiontickets: Optional[bool]
    ssl_cryptodevice: str
    ssl_options: Tuple[str, ...]
    ssl_openssl_conf_cmd: Tuple[str, ...]
    ssl_cert: Optional[str]
    ssl_key: Optional[str]
    ssl_ca: Optional[str]
    ssl_cipher: str
    ssl_protocol: Tuple[str, ...]
    ssl_proxy_protocol: Tuple[str, ...]
    ssl_pass_phrase_dialog: str
    ssl_random_seed_bytes: str
    ssl_sessioncachetimeout: str
    ssl_stapling: bool
    ssl_stapling_return_errors: Optional[bool]
    package_name: Optional[str]
    lib_path: Optional[str]
    modules: Tuple[str, ...]
    reload_on_change: bool
    ssl_conf_path: str
    mod_dir: str
    managed_ssl_dir: str
    file_copies: Tuple[ManagedCopy, ...]

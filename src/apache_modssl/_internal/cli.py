"""apache-modssl command line argument parser"""
import argparse
from typing import Any
from typing import Dict
from typing import List
from typing import Optional
from typing import Union

import configargparse

import apache_modssl
from apache_modssl._internal import constants
from apache_modssl._internal import obj

TRUE_VALUES = ("true", "yes", "y", "1", "on", "enabled")
FALSE_VALUES = ("false", "no", "n", "0", "off", "disabled")


def flag_default(name: str) -> Any:
    """Default value of a CLI flag"""
    return constants.CLI_DEFAULTS[name]


def on_off(value: str) -> bool:
    """Parse a boolean flag value such as 'on', 'off', 'true' or 'no'."""
    lowered = value.strip().lower()
    if lowered in TRUE_VALUES:
        return True
    if lowered in FALSE_VALUES:
        return False
    raise argparse.ArgumentTypeError("expected on or off, got {0!r}".format(value))


def honor_cipher_order(value: str) -> obj.HonorCipherOrder:
    """'true' and 'false' become booleans, other strings pass through."""
    lowered = value.strip().lower()
    if lowered in ("true", "false"):
        return lowered == "true"
    return lowered


def word_list(value: str) -> List[str]:
    """Split a whitespace separated directive argument list."""
    return value.split()


def _add_fact_arguments(parser: configargparse.ArgParser) -> None:
    group = parser.add_argument_group(
        "facts", "Detected from the running system unless given")
    group.add_argument(
        "--os-family", default=flag_default("os_family"),
        help="OS family: debian, redhat, freebsd, gentoo or suse")
    group.add_argument(
        "--apache-version", default=flag_default("apache_version"),
        help="Apache version to configure for, eg 2.4")
    group.add_argument(
        "--worker-mpm", type=on_off, default=flag_default("worker_mpm"), metavar="on|off",
        help="Whether Apache runs the worker MPM (selects the SUSE library path)")


def _add_ssl_arguments(parser: configargparse.ArgParser) -> None:
    group = parser.add_argument_group("ssl", "mod_ssl settings")
    group.add_argument(
        "--ssl-compression", action="store_true",
        help="Enable SSLCompression")
    group.add_argument(
        "--ssl-sessiontickets", type=on_off, metavar="on|off",
        help="Set SSLSessionTickets, left out by default")
    group.add_argument(
        "--ssl-cryptodevice", help="SSLCryptoDevice (default: builtin)")
    group.add_argument(
        "--ssl-options", type=word_list, metavar="OPTIONS",
        help="Space separated SSLOptions (default: StdEnvVars)")
    group.add_argument(
        "--ssl-openssl-conf-cmd", action="append", metavar="CMD",
        help="SSLOpenSSLConfCmd argument, may be given several times")
    group.add_argument("--ssl-cert", help="SSLCertificateFile path")
    group.add_argument("--ssl-key", help="SSLCertificateKeyFile path")
    group.add_argument("--ssl-ca", help="SSLCACertificateFile path")
    group.add_argument(
        "--ssl-cipher", help="SSLCipherSuite (default: {0})".format(constants.SSL_CIPHER))
    group.add_argument(
        "--ssl-honorcipherorder", type=honor_cipher_order, metavar="true|false|on|off",
        help="SSLHonorCipherOrder (default: on)")
    group.add_argument(
        "--ssl-protocol", type=word_list, metavar="PROTOCOLS",
        help="Space separated SSLProtocol (default: {0})".format(
            " ".join(constants.SSL_PROTOCOL)))
    group.add_argument(
        "--ssl-proxy-protocol", type=word_list, metavar="PROTOCOLS",
        help="Space separated SSLProxyProtocol, left out by default")
    group.add_argument(
        "--ssl-pass-phrase-dialog", help="SSLPassPhraseDialog (default: builtin)")
    group.add_argument(
        "--ssl-random-seed-bytes", help="Bytes read from /dev/urandom (default: 512)")
    group.add_argument(
        "--ssl-sessioncache", help="SSLSessionCache location (default: per OS family)")
    group.add_argument(
        "--ssl-sessioncachetimeout", help="SSLSessionCacheTimeout (default: 300)")
    group.add_argument(
        "--ssl-stapling", action="store_true", help="Enable SSLUseStapling")
    group.add_argument(
        "--stapling-cache", help="SSLStaplingCache location (default: per OS family)")
    group.add_argument(
        "--ssl-stapling-return-errors", type=on_off, metavar="on|off",
        help="Set SSLStaplingReturnResponderErrors, left out by default")
    group.add_argument(
        "--ssl-mutex", help="Mutex mechanism (default: per OS family and Apache version)")
    group.add_argument(
        "--package-name", help="Package providing mod_ssl (default: per OS family)")
    group.add_argument(
        "--reload-on-change", action="store_true",
        help="Track copies of the certificate, key and CA files and reload "
             "Apache when they change")
    group.add_argument(
        "--ssl-conf-path", help="Where to write ssl.conf (default: per OS family)")


def _add_run_arguments(parser: configargparse.ArgParser) -> None:
    group = parser.add_argument_group("run", "Execution and logging")
    group.add_argument(
        "--render-only", action="store_true", default=flag_default("render_only"),
        help="Print the rendered ssl.conf and exit without changing anything")
    group.add_argument(
        "--dry-run", action="store_true", default=flag_default("dry_run"),
        help="Log the changes that would be made without making them")
    group.add_argument(
        "-v", "--verbose", dest="verbose_count", action="count",
        default=flag_default("verbose_count"),
        help="This flag can be used multiple times to incrementally increase "
             "the verbosity of output, e.g. -vvv.")
    group.add_argument(
        "-q", "--quiet", dest="quiet", action="store_true", default=flag_default("quiet"),
        help="Silence all output except errors.")
    group.add_argument(
        "--debug", action="store_true", default=flag_default("debug"),
        help="Show tracebacks in case of errors")
    group.add_argument(
        "--logs-dir", default=flag_default("logs_dir"),
        help="Directory of the rotating debug log, no log file when unset")
    group.add_argument(
        "--max-log-backups", type=int, default=flag_default("max_log_backups"),
        help="Number of rotated log files to keep")


def get_parser() -> configargparse.ArgParser:
    """Build the argument parser."""
    parser = configargparse.ArgParser(
        prog="apache-modssl",
        description="Install and configure mod_ssl for the Apache HTTP Server.",
        args_for_setting_config_path=["-c", "--config"],
        default_config_files=flag_default("config_files"),
        config_arg_help_message="path to config file (default: {0})".format(
            " and ".join(flag_default("config_files"))),
        auto_env_var_prefix=constants.ENV_PREFIX,
    )
    parser.add_argument(
        "--version", action="version",
        version="%(prog)s {0}".format(apache_modssl.__version__))
    _add_fact_arguments(parser)
    _add_ssl_arguments(parser)
    _add_run_arguments(parser)
    return parser


def prepare_and_parse_args(args: List[str]) -> argparse.Namespace:
    """Parse command line arguments, config files and environment.

    :param list args: command line arguments, without the program name

    :returns: parsed arguments
    :rtype: argparse.Namespace

    """
    return get_parser().parse_args(args)


def params_from_config(config: argparse.Namespace) -> obj.SSLParams:
    """Build `.SSLParams` from parsed arguments.

    Arguments that were not given keep the `.SSLParams` defaults.

    """
    kwargs: Dict[str, Union[Optional[str], bool, List[str]]] = {}
    for field in obj.SSLParams._fields:
        value = getattr(config, field, None)
        if value is not None:
            kwargs[field] = value
    return obj.SSLParams(**kwargs)  # type: ignore

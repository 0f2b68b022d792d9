"""apache-modssl main entry point."""
import argparse
import logging
import sys
from typing import List
from typing import Optional
from typing import Tuple
from typing import Union

from apache_modssl import errors
from apache_modssl._internal import apache_util
from apache_modssl._internal import cli
from apache_modssl._internal import log
from apache_modssl._internal import manager
from apache_modssl._internal import plan
from apache_modssl._internal import platforms
from apache_modssl._internal import render
from apache_modssl._internal import resolver

logger = logging.getLogger(__name__)


def gather_facts(config: argparse.Namespace) -> Tuple[str, platforms.OsOptions, str, bool]:
    """Determine the ambient facts, preferring values given on the command line.

    :returns: OS family, its options, Apache version and whether the worker
        MPM is used
    :rtype: tuple

    """
    os_family = platforms.normalize_family(config.os_family or apache_util.get_os_family())
    # Unsupported families still get the generic commands, resolution
    # decides whether enough was given explicitly.
    options = platforms.get_options(os_family) or platforms.OsOptions(family=os_family)

    apache_version = config.apache_version or apache_util.get_version(options.version_cmd)

    worker_mpm = config.worker_mpm
    if worker_mpm is None:
        worker_mpm = (options.lib_path_worker is not None and
                      apache_util.uses_worker_mpm(options.mpm_cmd))
    return os_family, options, apache_version, worker_mpm


def run(config: argparse.Namespace) -> None:
    """Resolve the configuration and apply it, or print it with --render-only."""
    os_family, options, apache_version, worker_mpm = gather_facts(config)
    resolved = resolver.resolve(cli.params_from_config(config), os_family,
                                apache_version, worker_mpm)

    if config.render_only:
        sys.stdout.write(render.render(resolved))
        return

    reloaded = plan.apply(resolved, manager.SystemManager(options, dry_run=config.dry_run))
    if reloaded:
        logger.info("mod_ssl configuration in %s applied, Apache reloaded",
                    resolved.ssl_conf_path)
    else:
        logger.info("mod_ssl configuration in %s is up to date", resolved.ssl_conf_path)


def main(cli_args: Optional[List[str]] = None) -> Optional[Union[str, int]]:
    """Run apache-modssl.

    :param cli_args: command line arguments, defaults to ``sys.argv[1:]``
    :type cli_args: `list` of `str`

    :returns: value for `sys.exit` about the exit status
    :rtype: `str` or `int` or `None`

    """
    log.pre_arg_parse_setup()

    if cli_args is None:
        cli_args = sys.argv[1:]
    config = cli.prepare_and_parse_args(cli_args)
    log.post_arg_parse_setup(config)

    try:
        run(config)
    except errors.Error as error:
        logger.debug("Exiting due to error:", exc_info=True)
        return str(error)
    return None

"""Applies a resolved configuration through a resource manager."""
import logging
import posixpath

from apache_modssl._internal import constants
from apache_modssl._internal import interfaces
from apache_modssl._internal import obj
from apache_modssl._internal import render

logger = logging.getLogger(__name__)


def apply(config: obj.ResolvedConfig, manager: interfaces.ResourceManager) -> bool:
    """Bring the system in line with ``config``.

    Resources are ensured in a fixed order: the package, the modules, the
    managed copy directory (purged of anything untracked) with its README, the
    copies (only when reloading on change), the module directory and finally
    the rendered ssl.conf. The web server is reloaded once at the end if any
    notifying resource changed.

    :param config: resolved configuration
    :type config: `.ResolvedConfig`
    :param manager: manager making the changes
    :type manager: `.ResourceManager`

    :returns: True if Apache was reloaded
    :rtype: bool

    """
    manager.ensure_package(config.package_name, config.lib_path)
    for module in config.modules:
        manager.enable_module(module)

    # file_copies is empty without reload_on_change, so stale copies go.
    keep = [constants.README_NAME] + [copy.name for copy in config.file_copies]
    manager.ensure_directory(config.managed_ssl_dir, purge=True, recurse=True, keep=keep)
    manager.ensure_file(posixpath.join(config.managed_ssl_dir, constants.README_NAME),
                        content=constants.README_CONTENT)
    for copy in config.file_copies:
        manager.ensure_file(copy.path, source=copy.source,
                            mode=constants.SSL_COPY_MODE, notify=True)

    manager.ensure_directory(config.mod_dir)
    manager.ensure_file(config.ssl_conf_path, content=render.render(config),
                        mode=constants.SSL_CONF_MODE, notify=True)

    if manager.reload_pending:
        manager.reload_service()
        return True
    logger.debug("No changes to %s, Apache not reloaded", config.ssl_conf_path)
    return False

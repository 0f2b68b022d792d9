"""Rendering of the mod_ssl configuration file."""
import functools

import jinja2

from apache_modssl._internal import constants
from apache_modssl._internal import obj


def bool2httpd(value: bool) -> str:
    """Convert a boolean to the httpd On/Off spelling."""
    return "On" if value else "Off"


@functools.lru_cache(maxsize=None)
def _environment() -> jinja2.Environment:
    environment = jinja2.Environment(
        loader=jinja2.PackageLoader("apache_modssl", "_internal/templates"),
        undefined=jinja2.StrictUndefined,
        trim_blocks=True,
        lstrip_blocks=True,
        keep_trailing_newline=True,
        autoescape=False,
    )
    environment.filters["bool2httpd"] = bool2httpd
    return environment


def render(config: obj.ResolvedConfig) -> str:
    """Render the ssl.conf contents for a resolved configuration.

    :param config: resolved configuration
    :type config: `.ResolvedConfig`

    :returns: configuration file text
    :rtype: str

    """
    template = _environment().get_template(constants.TEMPLATE_NAME)
    return template.render(config=config, managed_comment=constants.MANAGED_COMMENT)

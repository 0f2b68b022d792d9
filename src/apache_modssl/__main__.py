"""Runs apache-modssl."""
import logging
import sys

from apache_modssl import main as modssl_main

logger = logging.getLogger(__name__)


def main() -> None:
    """Runs apache-modssl, logs any returned message, and calls sys.exit.

    If apache_modssl.main.main returns a non-empty string, it is passed to
    sys.exit causing a non-zero status code and the string to be
    printed to stderr.

    """
    err_string = modssl_main.main()
    if err_string:
        logger.debug('Exiting with message %s', err_string)
    sys.exit(err_string)


if __name__ == '__main__':
    main()

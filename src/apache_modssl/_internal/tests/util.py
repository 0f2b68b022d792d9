"""Common utilities for apache_modssl tests."""
import logging
import shutil
import tempfile
import unittest

from apache_modssl._internal import obj
from apache_modssl._internal import resolver


def get_resolved(os_family="debian", ambient_version="2.4.57", worker_mpm=False, **kwargs):
    """Resolve SSLParams built from kwargs for the given facts.

    ``ambient_version`` stands for the detected Apache version, an explicit
    one goes in ``kwargs`` like every other parameter.

    """
    return resolver.resolve(obj.SSLParams(**kwargs), os_family, ambient_version, worker_mpm)


class TempDirTestCase(unittest.TestCase):
    """Base test class which sets up and tears down a temporary directory"""

    def setUp(self):
        """Execute before test"""
        self.tempdir = tempfile.mkdtemp()

    def tearDown(self):
        """Execute after test"""
        # Remove logging handlers that have been closed so they won't be
        # accidentally used in future tests.
        logging.getLogger().handlers = []
        shutil.rmtree(self.tempdir)

"""apache-modssl errors."""


class Error(Exception):
    """Generic apache-modssl error."""


class SubprocessError(Error):
    """Subprocess handling error."""


class ConfigurationError(Error):
    """Configuration sanity error."""


class UnsupportedPlatform(Error):
    """No OS family default exists for a parameter that was not supplied.

    :ivar str os_family: the unrecognized OS family
    :ivar str param: name of the parameter the caller should pass in

    """
    def __init__(self, os_family: str, param: str) -> None:
        super().__init__(
            f"Unsupported osfamily {os_family}, please explicitly pass in {param}")
        self.os_family = os_family
        self.param = param


class PackageError(Error):
    """Package installation error."""


class MisconfigurationError(Error):
    """Apache rejected the configuration or could not be reloaded."""

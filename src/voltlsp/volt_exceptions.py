"""
This module contains the exceptions raised by the plugin.
"""


class VoltPluginException(Exception):
    def __init__(self, message: str, cause: Exception | None = None) -> None:
        """
        Initializes the exception with the given message.

        :param message: the message describing the exception
        :param cause: the original exception that caused this exception, if any.
            For failures of host queries, this is the exception raised by the host.
        """
        self.cause = cause
        super().__init__(message)

    def __str__(self) -> str:
        """
        Returns a string representation of the exception.
        """
        s = super().__str__()
        if self.cause:
            if "\n" in s:
                s += "\n"
            else:
                s += " "
            s += f"(caused by {self.cause})"
        return s


class ConfigurationError(VoltPluginException):
    """
    Raised when the explicitly configured server path cannot be interpreted as a URI.
    """


class PlatformUnsupported(VoltPluginException):
    """
    Raised when the host reports an operating system or architecture for which no
    artifact is published, or when querying either of them fails.
    """

    def __init__(self, message: str, raw_value: str | None = None, cause: Exception | None = None) -> None:
        self.raw_value = raw_value
        super().__init__(message, cause=cause)


class NetworkError(VoltPluginException):
    """
    Raised when the artifact download fails or its body cannot be read or decompressed.
    """


class FilesystemError(VoltPluginException):
    """
    Raised when writing, decompressing into, or removing a file in the install root fails.
    """

    def __init__(self, message: str, path: str, cause: Exception | None = None) -> None:
        self.path = path
        super().__init__(message, cause=cause)


class ProtocolError(VoltPluginException):
    """
    Raised when the host hands over a malformed initialization payload or install-root URI.
    """

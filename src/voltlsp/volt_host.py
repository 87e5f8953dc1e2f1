"""
The interface through which the plugin talks to the editor hosting it.

The host owns platform detection, network access, the diagnostic log sink and the
language server client; the plugin only ever sees the methods declared here.
"""

from abc import ABC, abstractmethod

from voltlsp.volt_launch import LaunchDescriptor


class HttpResponse(ABC):
    """
    The result of a blocking HTTP GET issued through the host.
    """

    @property
    @abstractmethod
    def status_code(self) -> int:
        pass

    @abstractmethod
    def read_all(self) -> bytes:
        """
        Reads the entire response body into memory.
        """


class BytesHttpResponse(HttpResponse):
    """
    An already materialised response.
    """

    def __init__(self, status_code: int, body: bytes) -> None:
        self._status_code = status_code
        self._body = body

    @property
    def status_code(self) -> int:
        return self._status_code

    def read_all(self) -> bytes:
        return self._body


class VoltHost(ABC):
    """
    Capabilities consumed from the host application.

    The platform queries may raise any exception to signal a query failure; the plugin
    translates such failures into its own error types.
    """

    @abstractmethod
    def operating_system(self) -> str:
        """
        :return: the host's identifier of the running operating system, e.g. "macos", "linux" or "windows"
        """

    @abstractmethod
    def architecture(self) -> str:
        """
        :return: the host's identifier of the CPU architecture, e.g. "x86_64" or "aarch64"
        """

    @abstractmethod
    def install_root_uri(self) -> str:
        """
        :return: the URI of the private storage location granted to this plugin instance
        """

    @abstractmethod
    def http_get(self, url: str) -> HttpResponse:
        pass

    @abstractmethod
    def log(self, message: str) -> None:
        """
        Writes a line to the operator-visible diagnostic sink. Must never raise.
        """

    @abstractmethod
    def start_lsp(self, descriptor: LaunchDescriptor) -> None:
        """
        Asks the host to launch a language server process. Ownership of the descriptor passes to the host.
        """

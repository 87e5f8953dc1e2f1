"""
A host implementation for running the plugin outside an editor, e.g. from the command line.
"""

import logging
import os
import platform
import subprocess
from urllib.parse import urlparse

import psutil
import requests
from overrides import override

from voltlsp.constants import DEFAULT_INSTALL_ROOT, DOWNLOAD_TIMEOUT_SECONDS
from voltlsp.util.logging import DiagnosticBuffer
from voltlsp.volt_config import PLACEHOLDER_URI_SCHEME
from voltlsp.volt_exceptions import FilesystemError, ProtocolError
from voltlsp.volt_host import HttpResponse, VoltHost
from voltlsp.volt_launch import LaunchDescriptor
from voltlsp.volt_utils import PathUtils

log = logging.getLogger(__name__)

_SYSTEM_MAP = {
    "darwin": "macos",
    "linux": "linux",
    "windows": "windows",
}

_MACHINE_MAP = {
    "x86_64": "x86_64",
    "amd64": "x86_64",
    "x64": "x86_64",
    "aarch64": "aarch64",
    "arm64": "aarch64",
}


class RequestsHttpResponse(HttpResponse):
    def __init__(self, response: requests.Response) -> None:
        self._response = response

    @property
    def status_code(self) -> int:
        return self._response.status_code

    @override
    def read_all(self) -> bytes:
        try:
            return self._response.content
        finally:
            self._response.close()


class LocalHost(VoltHost):
    """
    Provides the host capabilities from the local machine.

    Platform identifiers are normalised to the ones an editor host reports (unknown values are
    passed through verbatim), downloads go through `requests`, and diagnostic lines are kept in
    a bounded buffer. Launch requests are recorded and, if launching is enabled, the server is
    started as a child process which inherits this process's standard streams.
    """

    def __init__(
        self,
        install_root: str = DEFAULT_INSTALL_ROOT,
        launch: bool = False,
        download_timeout: float = DOWNLOAD_TIMEOUT_SECONDS,
    ) -> None:
        self.install_root = install_root
        self.launch = launch
        self.download_timeout = download_timeout
        self.diagnostics = DiagnosticBuffer()
        self.launched: list[LaunchDescriptor] = []
        self.processes: list[subprocess.Popen] = []

    @override
    def operating_system(self) -> str:
        system = platform.system().lower()
        return _SYSTEM_MAP.get(system, system)

    @override
    def architecture(self) -> str:
        machine = platform.machine().lower()
        return _MACHINE_MAP.get(machine, machine)

    @override
    def install_root_uri(self) -> str:
        try:
            os.makedirs(self.install_root, exist_ok=True)
        except OSError as e:
            raise FilesystemError(f"Could not create install root '{self.install_root}'", path=self.install_root, cause=e) from e
        return PathUtils.dir_to_uri(self.install_root)

    @override
    def http_get(self, url: str) -> HttpResponse:
        return RequestsHttpResponse(requests.get(url, stream=True, timeout=self.download_timeout))

    @override
    def log(self, message: str) -> None:
        self.diagnostics.append(message)
        log.info(f"[diagnostic] {message}")

    @staticmethod
    def server_command(descriptor: LaunchDescriptor) -> list[str]:
        """
        :return: the command line for the given descriptor; `urn:` locators denote bare paths
        """
        parsed = urlparse(descriptor.server_uri)
        if parsed.scheme == "file":
            executable = PathUtils.uri_to_path(descriptor.server_uri)
        elif parsed.scheme == PLACEHOLDER_URI_SCHEME:
            executable = descriptor.server_uri[len(PLACEHOLDER_URI_SCHEME) + 1 :]
        else:
            raise ProtocolError(f"Cannot launch a server from locator '{descriptor.server_uri}'")
        return [executable, *descriptor.server_args]

    @override
    def start_lsp(self, descriptor: LaunchDescriptor) -> None:
        self.launched.append(descriptor)
        if not self.launch:
            log.info(f"Launching disabled; recorded launch request {descriptor}")
            return
        cmd = self.server_command(descriptor)
        log.info(f"Starting language server process: {cmd}")
        self.processes.append(subprocess.Popen(cmd))

    def wait(self) -> int:
        """
        Waits for all launched processes to terminate.

        :return: the highest exit code among them (0 if none were launched)
        """
        return max((p.wait() for p in self.processes), default=0)

    def shutdown(self) -> None:
        """
        Terminates all launched processes together with their children.
        """
        for process in self.processes:
            try:
                parent = psutil.Process(process.pid)
            except psutil.NoSuchProcess:
                continue
            for child in parent.children(recursive=True):
                try:
                    child.terminate()
                except psutil.NoSuchProcess:
                    pass
            try:
                parent.terminate()
            except psutil.NoSuchProcess:
                pass
        self.processes = []

import gzip
import logging
from collections.abc import Callable
from pathlib import Path

import pytest
from sensai.util.logging import configure

from voltlsp.volt_host import BytesHttpResponse, HttpResponse, VoltHost
from voltlsp.volt_launch import LaunchDescriptor
from voltlsp.volt_utils import PathUtils

configure(level=logging.INFO)

log = logging.getLogger(__name__)

TAPLO_BINARY_CONTENT = b"\x7fELF fake taplo binary"


class RecordingHost(VoltHost):
    """
    A host which records all interactions and serves a configurable artifact instead of accessing the network.
    """

    def __init__(
        self,
        install_root: Path,
        os_name: str | Exception = "linux",
        arch: str | Exception = "x86_64",
        status_code: int = 200,
        body: bytes | Exception = gzip.compress(TAPLO_BINARY_CONTENT),
        install_root_uri: str | None = None,
    ) -> None:
        self.install_root = install_root
        self._os_name = os_name
        self._arch = arch
        self._status_code = status_code
        self._body = body
        self._install_root_uri = install_root_uri
        self.requested_urls: list[str] = []
        self.log_lines: list[str] = []
        self.launched: list[LaunchDescriptor] = []
        self.on_get: Callable[[str], None] | None = None

    @staticmethod
    def _answer(value: str | Exception) -> str:
        if isinstance(value, Exception):
            raise value
        return value

    def operating_system(self) -> str:
        return self._answer(self._os_name)

    def architecture(self) -> str:
        return self._answer(self._arch)

    def install_root_uri(self) -> str:
        if self._install_root_uri is not None:
            return self._install_root_uri
        return PathUtils.dir_to_uri(str(self.install_root))

    def http_get(self, url: str) -> HttpResponse:
        self.requested_urls.append(url)
        if self.on_get is not None:
            self.on_get(url)
        if isinstance(self._body, Exception):
            raise self._body
        return BytesHttpResponse(self._status_code, self._body)

    def log(self, message: str) -> None:
        self.log_lines.append(message)

    def start_lsp(self, descriptor: LaunchDescriptor) -> None:
        self.launched.append(descriptor)


@pytest.fixture
def host(tmp_path: Path) -> RecordingHost:
    return RecordingHost(tmp_path)


@pytest.fixture
def host_factory(tmp_path: Path) -> Callable[..., RecordingHost]:
    def create(**kwargs) -> RecordingHost:
        return RecordingHost(tmp_path, **kwargs)

    return create


@pytest.fixture
def taplo_binary_content() -> bytes:
    return TAPLO_BINARY_CONTENT

"""
Maps the host's platform identifiers to the tokens used in artifact names.
"""

import logging
from dataclasses import dataclass
from enum import Enum

from voltlsp.volt_exceptions import PlatformUnsupported
from voltlsp.volt_host import VoltHost

log = logging.getLogger(__name__)


class OperatingSystem(str, Enum):
    DARWIN = "darwin"
    LINUX = "linux"
    WINDOWS = "windows"

    def __str__(self) -> str:
        return self.value


class Architecture(str, Enum):
    X86_64 = "x86_64"
    AARCH64 = "aarch64"

    def __str__(self) -> str:
        return self.value


_HOST_OS_MAP = {
    "macos": OperatingSystem.DARWIN,
    "linux": OperatingSystem.LINUX,
    "windows": OperatingSystem.WINDOWS,
}

_HOST_ARCH_MAP = {
    "x86_64": Architecture.X86_64,
    "aarch64": Architecture.AARCH64,
}


@dataclass(frozen=True)
class Platform:
    os: OperatingSystem
    arch: Architecture

    def __str__(self) -> str:
        return f"{self.os}-{self.arch}"


def resolve_architecture(raw: str) -> Architecture:
    arch = _HOST_ARCH_MAP.get(raw)
    if arch is None:
        raise PlatformUnsupported(f"Unsupported ARCH: {raw}", raw_value=raw)
    return arch


def resolve_operating_system(raw: str) -> OperatingSystem:
    os_ = _HOST_OS_MAP.get(raw)
    if os_ is None:
        raise PlatformUnsupported(f"Unsupported OS: {raw}", raw_value=raw)
    return os_


class PlatformResolver:
    """
    Queries the host for its platform on every call; nothing is cached.
    """

    def __init__(self, host: VoltHost) -> None:
        self._host = host

    def resolve(self) -> Platform:
        try:
            raw_arch = self._host.architecture()
        except Exception as e:
            raise PlatformUnsupported("Error ARCH: could not query the architecture", cause=e) from e
        arch = resolve_architecture(raw_arch)

        try:
            raw_os = self._host.operating_system()
        except Exception as e:
            raise PlatformUnsupported("Error OS: could not query the operating system", cause=e) from e
        os_ = resolve_operating_system(raw_os)

        platform = Platform(os=os_, arch=arch)
        log.debug(f"Resolved platform {platform} from host identifiers {raw_os=}, {raw_arch=}")
        return platform

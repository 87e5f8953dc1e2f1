"""
The plugin object registered with the host, providing the taplo language server for TOML documents.

Initialization follows a fixed sequence: resolve the configuration; unless a server is
configured explicitly, resolve the platform and install the matching taplo build; finally
ask the host to launch the server. Any failure ends the attempt and is reported to the
host's diagnostic sink only.
"""

import logging
from collections.abc import Mapping
from dataclasses import dataclass
from enum import Enum
from typing import Any, Self

from voltlsp.volt_config import resolve_server_config
from voltlsp.volt_exceptions import ProtocolError
from voltlsp.volt_host import VoltHost
from voltlsp.volt_installer import ArtifactInstaller
from voltlsp.volt_launch import LaunchDispatcher
from voltlsp.volt_platform import PlatformResolver

log = logging.getLogger(__name__)


class HostRequestKind(Enum):
    """
    The requests the plugin reacts to. Everything else is mapped to UNKNOWN and ignored.
    """

    INITIALIZE = "initialize"
    UNKNOWN = None

    @classmethod
    def from_method(cls, method: str) -> Self:
        for kind in cls:
            if kind.value == method:
                return kind
        return cls.UNKNOWN


@dataclass
class InitializeParams:
    initialization_options: Mapping[str, Any] | None = None

    @classmethod
    def from_payload(cls, payload: Any) -> Self:
        if not isinstance(payload, Mapping):
            raise ProtocolError(f"Malformed initialize payload: expected an object, got {type(payload).__name__}")
        options = payload.get("initializationOptions")
        if options is not None and not isinstance(options, Mapping):
            raise ProtocolError(f"Malformed initializationOptions: expected an object, got {type(options).__name__}")
        return cls(initialization_options=options)


class TaploPlugin:
    def __init__(self, host: VoltHost) -> None:
        self._host = host

    def handle_request(self, request_id: int, method: str, params: Any) -> None:
        """
        Entry point for requests routed from the host. Never raises.
        """
        match HostRequestKind.from_method(method):
            case HostRequestKind.INITIALIZE:
                try:
                    self.initialize(InitializeParams.from_payload(params))
                except Exception as e:
                    log.error(f"Initialization (request {request_id}) failed: {e}")
                    self._host.log(f"plugin returned with error: {e}")
            case _:
                log.debug(f"Ignoring request {request_id} with unhandled method '{method}'")

    def initialize(self, params: InitializeParams) -> None:
        options = params.initialization_options
        config = resolve_server_config(options)

        if config.is_explicit():
            server_uri = config.server_uri
        else:
            platform = PlatformResolver(self._host).resolve()
            server_uri = ArtifactInstaller(self._host).install(platform).uri

        assert server_uri is not None
        LaunchDispatcher(self._host).dispatch(server_uri, config.server_args, options)


def register_plugin(host: VoltHost) -> TaploPlugin:
    """
    Creates the plugin instance for the given host. The host owns the instance's lifecycle.
    """
    return TaploPlugin(host)

"""
Assembly of the launch descriptor and its hand-over to the host.
"""

import logging
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

from sensai.util.string import ToStringMixin

from voltlsp.volt_config import DocumentSelector, default_document_selector

if TYPE_CHECKING:
    from voltlsp.volt_host import VoltHost

log = logging.getLogger(__name__)


@dataclass
class LaunchDescriptor(ToStringMixin):
    server_uri: str
    server_args: list[str]
    document_selector: DocumentSelector = field(default_factory=default_document_selector)
    options: Mapping[str, Any] | None = None
    """the initialization options exactly as received from the host"""

    def to_dict(self) -> dict[str, Any]:
        return {
            "serverUri": self.server_uri,
            "serverArgs": list(self.server_args),
            "documentSelector": [f.to_dict() for f in self.document_selector],
            "options": self.options,
        }


class LaunchDispatcher:
    def __init__(self, host: "VoltHost") -> None:
        self._host = host

    def dispatch(self, server_uri: str, server_args: list[str], options: Mapping[str, Any] | None) -> None:
        """
        Builds a fresh launch descriptor and submits it to the host. The host owns the process from here on;
        nothing is awaited.
        """
        descriptor = LaunchDescriptor(server_uri=server_uri, server_args=list(server_args), options=options)
        log.info(f"Requesting language server launch: {server_uri} {' '.join(descriptor.server_args)}")
        self._host.start_lsp(descriptor)

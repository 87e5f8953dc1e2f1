"""
Resolution of the language server configuration from the initialization options
supplied by the host.
"""

import json
import logging
import re
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any
from urllib.parse import urlsplit

from sensai.util.string import ToStringMixin

from voltlsp.volt_exceptions import ConfigurationError, ProtocolError

log = logging.getLogger(__name__)

TOOL_NAME = "taplo"
DOCUMENT_LANGUAGE = "toml"
DOCUMENT_EXTENSION = "toml"
DEFAULT_SERVER_ARGS = ("lsp", "stdio")

CONFIG_BLOCK_KEY = "volt"
SERVER_PATH_KEY = "serverPath"
SERVER_ARGS_KEY = "serverArgs"

PLACEHOLDER_URI_SCHEME = "urn"
"""Scheme given to server paths which carry no scheme of their own"""

_SCHEME_RE = re.compile(r"^([A-Za-z][A-Za-z0-9+.\-]*):")
_CONTROL_CHAR_RE = re.compile(r"[\x00-\x1f\x7f]")


@dataclass(frozen=True)
class DocumentFilter:
    language: str
    pattern: str

    def to_dict(self) -> dict[str, str]:
        return {"language": self.language, "pattern": self.pattern}


DocumentSelector = list[DocumentFilter]


def default_document_selector() -> DocumentSelector:
    """
    :return: the selector of the documents served by taplo; always a single filter
    """
    return [DocumentFilter(language=DOCUMENT_LANGUAGE, pattern=f"**/*.{DOCUMENT_EXTENSION}")]


@dataclass
class ResolvedServerConfig(ToStringMixin):
    server_uri: str | None = None
    """the locator of an explicitly configured server; None if the server is to be installed"""
    server_args: list[str] = field(default_factory=lambda: list(DEFAULT_SERVER_ARGS))

    def is_explicit(self) -> bool:
        return self.server_uri is not None


def parse_server_uri(server_path: str) -> str:
    """
    Interprets a configured server path as a URI.

    Values carrying a scheme are kept as they are; bare paths (including Windows drive
    paths such as ``C:\\tools\\taplo.exe``) are given the placeholder scheme.

    :param server_path: the non-empty configured path
    :return: the URI
    """
    if server_path.strip() == "" or _CONTROL_CHAR_RE.search(server_path):
        raise ConfigurationError(f"Invalid server path: {server_path!r}")
    m = _SCHEME_RE.match(server_path)
    if m is not None and len(m.group(1)) > 1:
        uri = server_path
    else:
        uri = f"{PLACEHOLDER_URI_SCHEME}:{server_path}"
    try:
        urlsplit(uri)
    except ValueError as e:
        raise ConfigurationError(f"Invalid server path: {server_path!r}", cause=e) from e
    return uri


def _arg_to_string(value: Any) -> str:
    if isinstance(value, str):
        return value
    return json.dumps(value, default=str)


def resolve_server_config(initialization_options: Mapping[str, Any] | None) -> ResolvedServerConfig:
    """
    Decides between an explicitly configured server and an auto-installed one.

    :param initialization_options: the options passed by the host; may be None
    :return: the resolved configuration
    """
    result = ResolvedServerConfig()
    if initialization_options is None:
        return result
    if not isinstance(initialization_options, Mapping):
        raise ProtocolError(f"Initialization options must be an object, got {type(initialization_options).__name__}")

    volt = initialization_options.get(CONFIG_BLOCK_KEY)
    if volt is None:
        return result
    if not isinstance(volt, Mapping):
        raise ProtocolError(f"Configuration block '{CONFIG_BLOCK_KEY}' must be an object, got {type(volt).__name__}")

    server_args = volt.get(SERVER_ARGS_KEY)
    if isinstance(server_args, list | tuple):
        result.server_args = [_arg_to_string(arg) for arg in server_args]

    server_path = volt.get(SERVER_PATH_KEY)
    if isinstance(server_path, str) and server_path != "":
        result.server_uri = parse_server_uri(server_path)
        log.info(f"Using configured language server at {result.server_uri}")

    return result

"""
Download and installation of the taplo executable into the plugin's install root.
"""

import logging
import os
from dataclasses import dataclass

from sensai.util.logging import LogTime

from voltlsp.volt_config import TOOL_NAME
from voltlsp.volt_exceptions import NetworkError, ProtocolError, VoltPluginException
from voltlsp.volt_host import VoltHost
from voltlsp.volt_platform import Platform
from voltlsp.volt_utils import FileUtils, PathUtils

log = logging.getLogger(__name__)

TAPLO_VERSION = "0.7.1"
TAPLO_DOWNLOAD_BASE = "https://github.com/panekj/taplo/releases/download"


@dataclass(frozen=True)
class ArtifactDescriptor:
    platform: Platform
    version: str = TAPLO_VERSION

    @property
    def archive_filename(self) -> str:
        return f"{TOOL_NAME}-full-{self.platform.os}-{self.platform.arch}.gz"

    @property
    def download_url(self) -> str:
        return f"{TAPLO_DOWNLOAD_BASE}/{self.version}/{self.archive_filename}"


@dataclass(frozen=True)
class InstalledExecutable:
    path: str
    """the local path of the decompressed executable"""
    uri: str
    """the install-root URI joined with the executable name"""


class ArtifactInstaller:
    """
    Fetches the compressed taplo artifact for a platform and installs it as `<install root>/taplo`.

    The transient archive is removed on every exit path and a partially decompressed
    executable is removed when decompression fails. Concurrent installs into the same
    install root are not coordinated; the last writer wins.
    """

    def __init__(self, host: VoltHost, executable_name: str = TOOL_NAME) -> None:
        self._host = host
        self._executable_name = executable_name

    def _install_root(self) -> tuple[str, str]:
        """
        :return: the pair (install root URI, install root path)
        """
        try:
            root_uri = self._host.install_root_uri()
        except VoltPluginException:
            raise
        except Exception as e:
            raise ProtocolError("Could not query the install root URI", cause=e) from e
        # hosts may report the install root without a trailing slash
        root_uri = PathUtils.as_directory_uri(root_uri)
        return root_uri, PathUtils.uri_to_path(root_uri)

    def _download(self, url: str) -> bytes:
        log.info(f"Downloading taplo from: {url}")
        try:
            response = self._host.http_get(url)
        except Exception as e:
            raise NetworkError(f"GET {url} failed", cause=e) from e
        self._host.log(f"STATUS_CODE: {response.status_code}")
        log.info(f"Received status code {response.status_code} for {url}")
        try:
            return response.read_all()
        except Exception as e:
            raise NetworkError(f"Could not read the response body of {url}", cause=e) from e

    def _discard_archive(self, archive_path: str) -> None:
        try:
            FileUtils.remove_if_exists(archive_path)
        except VoltPluginException as e:
            log.warning(f"Leaving stale archive behind: {e}")

    def install(self, platform: Platform) -> InstalledExecutable:
        artifact = ArtifactDescriptor(platform)
        root_uri, root_path = self._install_root()
        archive_path = os.path.join(root_path, artifact.archive_filename)
        executable_path = os.path.join(root_path, self._executable_name)

        with LogTime(f"Installation of taplo {artifact.version} for {platform}", logger=log):
            body = self._download(artifact.download_url)
            try:
                FileUtils.write_file(archive_path, body)
                FileUtils.gunzip_file(archive_path, executable_path)
                FileUtils.make_executable(executable_path)
            except VoltPluginException:
                self._discard_archive(archive_path)
                raise
            FileUtils.remove_if_exists(archive_path)

        executable_uri = PathUtils.join_uri(root_uri, self._executable_name)
        log.info(f"taplo installed successfully at: {executable_path}")
        return InstalledExecutable(path=executable_path, uri=executable_uri)

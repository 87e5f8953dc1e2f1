"""
This file contains various utility functions for handling URIs and the files in the install root.
"""

import gzip
import logging
import os
import shutil
import stat
import zlib
from pathlib import Path
from urllib.parse import SplitResult, unquote, urljoin, urlsplit, urlunsplit
from urllib.request import url2pathname

from voltlsp.volt_exceptions import FilesystemError, NetworkError, ProtocolError

log = logging.getLogger(__name__)


class PathUtils:
    """
    Utilities for platform-agnostic path and URI operations.
    """

    @staticmethod
    def parse_uri(uri: str) -> SplitResult:
        try:
            return urlsplit(uri)
        except ValueError as e:
            raise ProtocolError(f"Malformed URI: '{uri}'", cause=e) from e

    @staticmethod
    def uri_to_path(uri: str) -> str:
        """
        Converts a file URI to a file path. Works on both Linux and Windows.

        This method was obtained from https://stackoverflow.com/a/61922504
        """
        parsed = PathUtils.parse_uri(uri)
        if parsed.scheme != "file":
            raise ProtocolError(f"Expected a file URI, got '{uri}'")
        host = f"{os.path.sep}{os.path.sep}{parsed.netloc}{os.path.sep}"
        path = os.path.normpath(os.path.join(host, url2pathname(unquote(parsed.path))))
        return path

    @staticmethod
    def path_to_uri(path: str) -> str:
        """
        Converts a file path to a file URI (file:///...).
        """
        return str(Path(path).absolute().as_uri())

    @staticmethod
    def dir_to_uri(path: str) -> str:
        """
        Converts a directory path to a file URI ending in a slash, such that relative references
        are resolved inside the directory.
        """
        uri = PathUtils.path_to_uri(path)
        if not uri.endswith("/"):
            uri += "/"
        return uri

    @staticmethod
    def as_directory_uri(uri: str) -> str:
        """
        :return: the given URI with a trailing slash, such that joining resolves inside the directory it denotes
        """
        parsed = PathUtils.parse_uri(uri)
        if parsed.path.endswith("/"):
            return uri
        return urlunsplit(parsed._replace(path=parsed.path + "/"))

    @staticmethod
    def join_uri(base_uri: str, name: str) -> str:
        """
        Resolves the relative reference `name` against `base_uri` (RFC 3986).
        Like any URI join, the last segment of a base without trailing slash is replaced.
        """
        parsed = PathUtils.parse_uri(base_uri)
        if not parsed.scheme:
            raise ProtocolError(f"Malformed URI without scheme: '{base_uri}'")
        return urljoin(base_uri, name)


class FileUtils:
    """
    Utility functions for file operations in the install root.
    """

    @staticmethod
    def write_file(path: str, content: bytes) -> None:
        try:
            with open(path, "wb") as f:
                f.write(content)
        except OSError as e:
            raise FilesystemError(f"Could not write '{path}'", path=path, cause=e) from e

    @staticmethod
    def gunzip_file(archive_path: str, target_path: str) -> None:
        """
        Decompresses the single-member gzip stream at `archive_path` into `target_path`,
        replacing any existing file. A partially written target is removed on failure.
        """
        try:
            with gzip.open(archive_path, "rb") as f_in, open(target_path, "wb") as f_out:
                shutil.copyfileobj(f_in, f_out)
        except (gzip.BadGzipFile, EOFError, zlib.error) as e:
            FileUtils.remove_if_exists(target_path)
            raise NetworkError(f"Downloaded archive '{os.path.basename(archive_path)}' is not a valid gzip stream", cause=e) from e
        except OSError as e:
            FileUtils.remove_if_exists(target_path)
            raise FilesystemError(f"Could not decompress '{archive_path}' into '{target_path}'", path=target_path, cause=e) from e

    @staticmethod
    def make_executable(path: str) -> None:
        if os.name == "nt":
            return
        try:
            os.chmod(path, os.stat(path).st_mode | stat.S_IXUSR | stat.S_IXGRP | stat.S_IXOTH)
        except OSError as e:
            raise FilesystemError(f"Could not make '{path}' executable", path=path, cause=e) from e

    @staticmethod
    def remove_if_exists(path: str) -> None:
        if not os.path.exists(path):
            return
        try:
            os.remove(path)
        except OSError as e:
            raise FilesystemError(f"Could not remove '{path}'", path=path, cause=e) from e

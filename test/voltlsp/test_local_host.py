"""
Tests for the host implementation used outside an editor.
"""

import gzip
from unittest.mock import MagicMock, patch

import pytest

from voltlsp.local_host import LocalHost
from voltlsp.plugin import register_plugin
from voltlsp.volt_exceptions import FilesystemError, ProtocolError
from voltlsp.volt_launch import LaunchDescriptor


class TestPlatformIdentifiers:
    @pytest.mark.parametrize(
        "system, expected", [("Darwin", "macos"), ("Linux", "linux"), ("Windows", "windows"), ("FreeBSD", "freebsd")]
    )
    def test_operating_system(self, tmp_path, system: str, expected: str) -> None:
        with patch("voltlsp.local_host.platform.system", return_value=system):
            assert LocalHost(str(tmp_path)).operating_system() == expected

    @pytest.mark.parametrize(
        "machine, expected",
        [("x86_64", "x86_64"), ("AMD64", "x86_64"), ("arm64", "aarch64"), ("aarch64", "aarch64"), ("riscv64", "riscv64")],
    )
    def test_architecture(self, tmp_path, machine: str, expected: str) -> None:
        with patch("voltlsp.local_host.platform.machine", return_value=machine):
            assert LocalHost(str(tmp_path)).architecture() == expected


class TestInstallRoot:
    def test_install_root_is_created_and_reported_as_directory_uri(self, tmp_path) -> None:
        root = tmp_path / "plugins" / "taplo"

        uri = LocalHost(str(root)).install_root_uri()

        assert root.is_dir()
        assert uri == root.as_uri() + "/"

    def test_uncreatable_install_root_is_filesystem_error(self, tmp_path) -> None:
        blocker = tmp_path / "plugins"
        blocker.write_text("not a directory", encoding="utf-8")
        root = blocker / "taplo"

        with pytest.raises(FilesystemError) as exc_info:
            LocalHost(str(root)).install_root_uri()

        assert exc_info.value.path == str(root)
        assert isinstance(exc_info.value.cause, OSError)


class TestHttpGet:
    def test_uses_requests_with_timeout(self, tmp_path) -> None:
        response = MagicMock()
        response.status_code = 200
        response.content = b"payload"
        with patch("voltlsp.local_host.requests.get", return_value=response) as mock_get:
            result = LocalHost(str(tmp_path), download_timeout=5).http_get("https://example.com/a.gz")

            assert result.status_code == 200
            assert result.read_all() == b"payload"
        mock_get.assert_called_once_with("https://example.com/a.gz", stream=True, timeout=5)
        response.close.assert_called_once()


class TestDiagnostics:
    def test_log_lines_are_buffered(self, tmp_path) -> None:
        host = LocalHost(str(tmp_path))

        host.log("STATUS_CODE: 200")
        host.log("plugin returned with error: x")

        assert host.diagnostics.lines() == ["STATUS_CODE: 200", "plugin returned with error: x"]


class TestLaunch:
    def test_server_command_for_placeholder_uri(self) -> None:
        descriptor = LaunchDescriptor(server_uri="urn:/opt/bin/taplo", server_args=["lsp", "stdio"])

        assert LocalHost.server_command(descriptor) == ["/opt/bin/taplo", "lsp", "stdio"]

    def test_server_command_for_file_uri(self, tmp_path) -> None:
        executable = tmp_path / "taplo"
        descriptor = LaunchDescriptor(server_uri=executable.as_uri(), server_args=["lsp", "stdio"])

        assert LocalHost.server_command(descriptor) == [str(executable), "lsp", "stdio"]

    def test_server_command_for_unsupported_scheme(self) -> None:
        descriptor = LaunchDescriptor(server_uri="https://example.com/taplo", server_args=[])

        with pytest.raises(ProtocolError):
            LocalHost.server_command(descriptor)

    def test_launch_disabled_only_records(self, tmp_path) -> None:
        host = LocalHost(str(tmp_path), launch=False)
        descriptor = LaunchDescriptor(server_uri="urn:/opt/bin/taplo", server_args=["lsp", "stdio"])

        with patch("voltlsp.local_host.subprocess.Popen") as mock_popen:
            host.start_lsp(descriptor)

        mock_popen.assert_not_called()
        assert host.launched == [descriptor]
        assert host.wait() == 0

    def test_launch_enabled_spawns_process(self, tmp_path) -> None:
        host = LocalHost(str(tmp_path), launch=True)
        descriptor = LaunchDescriptor(server_uri="urn:/opt/bin/taplo", server_args=["lsp", "stdio"])

        with patch("voltlsp.local_host.subprocess.Popen") as mock_popen:
            mock_popen.return_value.wait.return_value = 3
            host.start_lsp(descriptor)

        mock_popen.assert_called_once_with(["/opt/bin/taplo", "lsp", "stdio"])
        assert host.wait() == 3

    def test_shutdown_terminates_process_tree(self, tmp_path) -> None:
        host = LocalHost(str(tmp_path), launch=True)
        host.processes = [MagicMock(pid=1234)]
        child = MagicMock()
        with patch("voltlsp.local_host.psutil.Process") as mock_process:
            mock_process.return_value.children.return_value = [child]
            host.shutdown()

        mock_process.assert_called_once_with(1234)
        child.terminate.assert_called_once()
        mock_process.return_value.terminate.assert_called_once()
        assert host.processes == []


class TestPluginWithLocalHost:
    def test_auto_install_through_requests(self, tmp_path) -> None:
        response = MagicMock()
        response.status_code = 200
        response.content = gzip.compress(b"binary")
        host = LocalHost(str(tmp_path / "root"))

        with patch("voltlsp.local_host.platform.system", return_value="Linux"), patch(
            "voltlsp.local_host.platform.machine", return_value="aarch64"
        ), patch("voltlsp.local_host.requests.get", return_value=response) as mock_get:
            register_plugin(host).handle_request(0, "initialize", {"initializationOptions": None})

        assert mock_get.call_args[0][0].endswith("/0.7.1/taplo-full-linux-aarch64.gz")
        assert (tmp_path / "root" / "taplo").read_bytes() == b"binary"
        assert host.diagnostics.lines() == ["STATUS_CODE: 200"]
        assert host.launched[0].server_uri == (tmp_path / "root" / "taplo").as_uri()

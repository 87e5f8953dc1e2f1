from pathlib import Path

VOLTLSP_MANAGED_DIR_NAME = ".voltlsp"

DEFAULT_INSTALL_ROOT = str(Path.home() / VOLTLSP_MANAGED_DIR_NAME / "plugins" / "taplo")
"""The install root used by the local host when none is given explicitly."""

VOLTLSP_FILE_ENCODING = "utf-8"
"""The encoding used for voltlsp's own files, such as initialization option files."""

DOWNLOAD_TIMEOUT_SECONDS = 120
"""Transport timeout applied by the local host to HTTP requests."""

DIAGNOSTIC_BUFFER_SIZE = 500

VOLT_LOG_FORMAT = "%(levelname)-5s %(asctime)-15s [%(threadName)s] %(name)s:%(funcName)s:%(lineno)d - %(message)s"

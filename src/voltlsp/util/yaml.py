import logging
from collections.abc import Mapping
from typing import Any

from ruamel.yaml import YAML

from voltlsp.constants import VOLTLSP_FILE_ENCODING

log = logging.getLogger(__name__)


def load_yaml(path: str) -> Any:
    """
    :param path: the path to the YAML file to load
    :return: the loaded document as plain Python objects
    """
    with open(path, encoding=VOLTLSP_FILE_ENCODING) as f:
        return YAML(typ="safe").load(f)


def load_initialization_options(path: str) -> Mapping[str, Any] | None:
    """
    Loads initialization options (e.g. the `volt` block with `serverPath` and `serverArgs`) from a YAML file.

    :param path: the path to the YAML file
    :return: the options; None for an empty document
    """
    data = load_yaml(path)
    if data is not None and not isinstance(data, Mapping):
        raise ValueError(f"Initialization options in {path} must be a mapping, got {type(data).__name__}")
    log.debug(f"Loaded initialization options from {path}: {data}")
    return data

from __future__ import annotations
import os
from dataclasses import dataclass, field, fields
from typing import Any, Dict, List, Optional

import yaml

from shorthand.shorthand_datatypes import ConfigError
from shorthand.shorthand_markdown import DEFAULT_EXTENSIONS

CONFIG_ENV = "SHORTHAND_CONFIG"
DEFAULT_CONFIG_FILE = ".shorthand.yaml"


@dataclass
class Config:
    """Settings for a VirtualMachine and the command line tool."""
    prompt: str = "=> "
    shell: str = "bash"
    shell_timeout: Optional[float] = None
    encoding: str = "utf-8"
    base_dir: Optional[str] = None
    markdown_extensions: List[str] = field(default_factory=lambda: list(DEFAULT_EXTENSIONS))
    post_process_markdown: bool = False

    @classmethod
    def from_mapping(cls, data: Optional[Dict[str, Any]]) -> "Config":
        """Build a Config from parsed YAML; keys may use '-' or '_'."""
        if data is None:
            return cls()
        if not isinstance(data, dict):
            raise ConfigError(f"configuration must be a mapping, not {type(data).__name__}")
        known = {f.name for f in fields(cls)}
        kwargs: Dict[str, Any] = {}
        for key, value in data.items():
            name = str(key).replace("-", "_")
            if name not in known:
                raise ConfigError(f"unknown configuration key {key!r}")
            kwargs[name] = value
        cfg = cls(**kwargs)
        cfg._check()
        return cfg

    def _check(self):
        if not isinstance(self.prompt, str):
            raise ConfigError("prompt must be a string")
        if not isinstance(self.shell, str) or not self.shell:
            raise ConfigError("shell must be a non-empty string")
        if self.shell_timeout is not None:
            if isinstance(self.shell_timeout, bool) or not isinstance(self.shell_timeout, (int, float)) or self.shell_timeout <= 0:
                raise ConfigError("shell-timeout must be a positive number of seconds")
        if not isinstance(self.markdown_extensions, list):
            raise ConfigError("markdown-extensions must be a list")
        if self.base_dir is not None:
            self.base_dir = os.path.expanduser(str(self.base_dir))


def load_config(path: Optional[str] = None) -> Config:
    """
    Load settings from YAML.

    Looks at `path`, then $SHORTHAND_CONFIG, then ./.shorthand.yaml; when
    none is given or present the defaults are returned.
    """
    if path is None:
        path = os.environ.get(CONFIG_ENV) or None
    if path is None:
        if not os.path.isfile(DEFAULT_CONFIG_FILE):
            return Config()
        path = DEFAULT_CONFIG_FILE
    try:
        with open(path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except OSError as e:
        raise ConfigError(f"cannot read configuration {path}: {e.strerror or e}") from e
    except yaml.YAMLError as e:
        raise ConfigError(f"invalid YAML in {path}: {e}") from e
    return Config.from_mapping(data)

import os
from dataclasses import dataclass
from typing import Optional

import yaml

DEFAULT_CONFIG_PATH = os.path.join(
    os.path.dirname(__file__), '..', '..', 'config.yaml')

DEFAULT_METHOD_CHANNEL = 'plugins.flutter.io/connectivity'
DEFAULT_EVENT_CHANNEL = 'plugins.flutter.io/connectivity_status'


def _resolve_path(path: str | None) -> str:
    cfg_path = path or os.environ.get(
        'CONNECTIVITY_CONFIG') or DEFAULT_CONFIG_PATH
    return os.path.abspath(os.path.expanduser(cfg_path))


def load_config(path: str | None = None) -> dict:
    cfg_path = _resolve_path(path)
    if not os.path.exists(cfg_path):
        return {}
    with open(cfg_path, 'r', encoding='utf-8') as fh:
        return yaml.safe_load(fh) or {}


@dataclass
class ConnectivitySettings:
    method_channel: str = DEFAULT_METHOD_CHANNEL
    event_channel: str = DEFAULT_EVENT_CHANNEL
    log_level: str = 'INFO'
    log_file: Optional[str] = None

    @classmethod
    def from_dict(cls, cfg: dict) -> 'ConnectivitySettings':
        channels = cfg.get('connectivity') or {}
        log_cfg = cfg.get('logging') or {}
        return cls(
            method_channel=channels.get('method_channel', DEFAULT_METHOD_CHANNEL),
            event_channel=channels.get('event_channel', DEFAULT_EVENT_CHANNEL),
            log_level=log_cfg.get('level', 'INFO'),
            log_file=log_cfg.get('file'),
        )


def load_settings(path: str | None = None) -> ConnectivitySettings:
    return ConnectivitySettings.from_dict(load_config(path))

"""YAML 설정 로더."""

from __future__ import annotations

from pathlib import Path
from typing import Any, Dict, Optional

import yaml


def merge_config(base: Dict[str, Any], override: Dict[str, Any]) -> Dict[str, Any]:
    """override 값을 base 위에 재귀적으로 덮어쓴 새 dict."""
    merged = dict(base)
    for key, value in override.items():
        if isinstance(value, dict) and isinstance(merged.get(key), dict):
            merged[key] = merge_config(merged[key], value)
        else:
            merged[key] = value
    return merged


def load_config(path: str, defaults: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
    config_path = Path(path)
    if not config_path.exists():
        raise FileNotFoundError(f"설정 파일을 찾을 수 없습니다: {config_path}")
    with config_path.open("r", encoding="utf-8") as f:
        data = yaml.safe_load(f) or {}
    if not isinstance(data, dict):
        raise ValueError(f"설정 파일 최상위는 매핑이어야 합니다: {config_path}")
    return merge_config(defaults or {}, data)


def section(cfg: Dict[str, Any], name: str) -> Dict[str, Any]:
    """하위 섹션을 dict로 꺼낸다. 비어 있거나(None) 없으면 빈 dict."""
    value = cfg.get(name)
    return value if isinstance(value, dict) else {}

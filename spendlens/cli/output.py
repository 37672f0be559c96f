"""Shared rendering helpers for CLI commands."""

import json
from typing import Any

import yaml
from pydantic import BaseModel
from rich.console import Console

console = Console()


def to_data(value: Any) -> Any:
    """Models (or lists of them) as JSON-ready camelCase dicts."""
    if isinstance(value, BaseModel):
        return value.model_dump(mode="json", by_alias=True)
    if isinstance(value, (list, tuple)):
        return [to_data(item) for item in value]
    return value


def emit(value: Any, output_format: str) -> bool:
    """Print ``value`` as json or yaml; False for table output."""
    if output_format == "json":
        console.print(json.dumps(to_data(value), indent=2, ensure_ascii=False),
                      markup=False, highlight=False, emoji=False, soft_wrap=True)
        return True
    if output_format == "yaml":
        console.print(yaml.dump(to_data(value), default_flow_style=False, allow_unicode=True),
                      markup=False, highlight=False, emoji=False, soft_wrap=True)
        return True
    return False


def trend_markup(trend: float) -> str:
    """Spend going up is red, going down green."""
    color = "red" if trend > 0 else "green" if trend < 0 else "dim"
    arrow = "↑" if trend > 0 else "↓" if trend < 0 else "→"
    return f"[{color}]{arrow} {abs(trend):.1f}%[/{color}]"


def fail(message: str) -> None:
    console.print(f"[red]Error:[/red] {message}")
    raise SystemExit(1)

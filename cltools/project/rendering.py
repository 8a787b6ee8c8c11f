"""Jinja2 rendering of generated project files."""

from __future__ import annotations

from functools import lru_cache
from pathlib import Path

from jinja2 import Environment, FileSystemLoader, StrictUndefined

TEMPLATES_DIR = Path(__file__).resolve().parent.parent / "templates"


@lru_cache(maxsize=None)
def _environment() -> Environment:
    env = Environment(
        loader=FileSystemLoader(str(TEMPLATES_DIR)),
        undefined=StrictUndefined,
        keep_trailing_newline=True,
        autoescape=False,
    )
    # TOML rejects the surrogate-pair escapes json emits for astral characters.
    env.policies["json.dumps_kwargs"] = {"ensure_ascii": False}
    return env


def render(template_name: str, **context: object) -> str:
    """Render ``template_name`` from the bundled templates directory."""
    return _environment().get_template(template_name).render(**context)


__all__ = ["TEMPLATES_DIR", "render"]

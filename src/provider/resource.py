"""Name and version resolution for Homebrew resources."""

import re
from typing import Any, List, Mapping

from .models import ResourceSpec

_URL_RE = re.compile(r"^https?://", re.IGNORECASE)


def is_url(name: str) -> bool:
    return bool(_URL_RE.match(name))


def resource_name(spec: ResourceSpec) -> str:
    """Return the name brew should see.

    Formulae referenced by URL are passed through untouched; catalog names are
    lowercased since brew's catalog is lowercase-only.
    """
    if is_url(spec.name):
        return spec.name
    return spec.name.lower()


def install_name(spec: ResourceSpec) -> str:
    """``resource_name`` for generic markers, ``name@version`` for explicit versions."""
    if spec.is_marker:
        return resource_name(spec)
    return f"{resource_name(spec)}@{str(spec.ensure).lower()}"


def _flatten(options: Any) -> List[str]:
    flat: List[str] = []
    if options is None:
        return flat
    if isinstance(options, str):
        return [options]
    if isinstance(options, Mapping):
        for key, value in options.items():
            flat.append(str(key) if value is None else f"{key}={value}")
        return flat
    if isinstance(options, (list, tuple)):
        for item in options:
            flat.extend(_flatten(item))
        return flat
    return [str(options)]


def install_options(spec: ResourceSpec) -> List[str]:
    """Install options flattened into argv tokens, order preserved."""
    return _flatten(spec.install_options)

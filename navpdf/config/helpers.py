"""Utility helpers shared by the navpdf configuration loader."""

from __future__ import annotations

import importlib
import re
import typing as typ
from pathlib import Path

from navpdf.naming import default_pdf_filename

from .models import DocMetadata, ExtraPath, Margins, SiteConfigError, VersionConfig

if typ.TYPE_CHECKING:
    from navpdf.naming import FileNameFunction


def _string_list(value: object, *, field: str) -> list[str]:
    """Normalize a scalar or sequence into a list of non-empty strings."""
    if value is None:
        return []
    if isinstance(value, str):
        return [value] if value.strip() else []
    if isinstance(value, list):
        normalized: list[str] = []
        for item in value:
            text = str(item).strip()
            if text:
                normalized.append(text)
        return normalized
    msg = f"Option '{field}' must be a string or a list of strings."
    raise SiteConfigError(msg)


def _boolean(value: object, *, field: str, default: bool) -> bool:
    """Return ``value`` as a flag, rejecting strings such as ``"false"``."""
    if value is None:
        return default
    if isinstance(value, bool):
        return value
    msg = f"Option '{field}' must be true or false, got {value!r}."
    raise SiteConfigError(msg)


def _optional_path(value: object | None, *, relative_to: Path) -> Path | None:
    """Return ``value`` as a path resolved against ``relative_to``, or None."""
    if value is None:
        return None
    text = str(value).strip()
    if not text:
        return None
    path = Path(text)
    if not path.is_absolute():
        path = relative_to / path
    return path


def _normalize_base_url(value: object | None) -> str:
    """Return a base URL that starts and ends with a slash."""
    text = str(value or "/").strip() or "/"
    if not text.startswith("/"):
        text = f"/{text}"
    if not text.endswith("/"):
        text = f"{text}/"
    return text


def _build_margins(
    payload: typ.Mapping[str, typ.Any] | None, base: Margins
) -> Margins:
    """Merge a margins mapping into ``base``."""
    if not payload:
        return base
    return Margins(
        top=str(payload.get("top", base.top)),
        right=str(payload.get("right", base.right)),
        bottom=str(payload.get("bottom", base.bottom)),
        left=str(payload.get("left", base.left)),
    )


def _compile_footer_parser(value: object | None) -> re.Pattern[str] | None:
    """Compile the configured header/footer delimiter pattern."""
    if value is None:
        return None
    try:
        return re.compile(str(value), re.MULTILINE)
    except re.error as exc:
        msg = f"Option 'footer_parser' is not a valid regular expression: {exc}"
        raise SiteConfigError(msg) from exc


def _load_callable(reference: str | None) -> FileNameFunction:
    """Import a ``module:attribute`` callable, defaulting to the id-based namer."""
    if not reference:
        return default_pdf_filename
    module_name, _, attr = reference.partition(":")
    if not module_name or not attr:
        msg = f"Option 'filename_function' must look like 'module:callable', got {reference!r}."
        raise SiteConfigError(msg)
    try:
        module = importlib.import_module(module_name)
    except ImportError as exc:
        msg = f"Cannot import filename function module '{module_name}': {exc}"
        raise SiteConfigError(msg) from exc
    target = getattr(module, attr, None)
    if not callable(target):
        msg = f"'{reference}' does not name a callable."
        raise SiteConfigError(msg)
    return typ.cast("FileNameFunction", target)


def _build_extra_paths(
    payload: object, *, relative_to: Path
) -> list[ExtraPath]:
    """Build extra served directories from a list of mappings."""
    if not payload:
        return []
    if not isinstance(payload, list):
        msg = "Option 'use_extra_paths' must be a list."
        raise SiteConfigError(msg)
    extra: list[ExtraPath] = []
    for entry in payload:
        match entry:
            case {"server_path": str() as server_path, "local_path": local_path}:
                path = _optional_path(local_path, relative_to=relative_to)
                if path is None:
                    continue
                extra.append(ExtraPath(server_path=server_path, local_path=path))
            case _:
                msg = "Entries of 'use_extra_paths' need 'server_path' and 'local_path'."
                raise SiteConfigError(msg)
    return extra


def _build_docs(payload: object, *, version: str) -> list[DocMetadata]:
    """Build document metadata entries for a version."""
    if not isinstance(payload, list):
        msg = f"Version '{version}' must define a 'docs' list."
        raise SiteConfigError(msg)
    docs: list[DocMetadata] = []
    for entry in payload:
        if not isinstance(entry, dict) or "id" not in entry or "permalink" not in entry:
            msg = f"Docs of version '{version}' need at least 'id' and 'permalink'."
            raise SiteConfigError(msg)
        doc_id = str(entry["id"])
        docs.append(
            DocMetadata(
                id=doc_id,
                title=str(entry.get("title") or doc_id),
                permalink=str(entry["permalink"]),
            )
        )
    return docs


def _build_version(payload: typ.Mapping[str, typ.Any]) -> VersionConfig:
    """Build a VersionConfig from a raw mapping."""
    name = payload.get("name")
    if not name:
        msg = "Every version needs a 'name'."
        raise SiteConfigError(msg)
    name = str(name)
    sidebars = payload.get("sidebars") or {}
    if not isinstance(sidebars, dict):
        msg = f"Version '{name}' must define 'sidebars' as a mapping."
        raise SiteConfigError(msg)
    path = str(payload.get("path") or "").strip("/")
    return VersionConfig(
        name=name,
        label=str(payload.get("label") or name),
        path=path,
        is_last=_boolean(payload.get("is_last"), field="is_last", default=not path),
        docs=_build_docs(payload.get("docs", []), version=name),
        sidebars={str(key): list(items or []) for key, items in sidebars.items()},
    )


__all__ = [
    "_boolean",
    "_build_docs",
    "_build_extra_paths",
    "_build_margins",
    "_build_version",
    "_compile_footer_parser",
    "_load_callable",
    "_normalize_base_url",
    "_optional_path",
    "_string_list",
]

"""Load site configuration YAML into typed dataclasses."""

from __future__ import annotations

import typing as typ
from pathlib import Path

from ruamel.yaml import YAML

from .helpers import (
    _boolean,
    _build_extra_paths,
    _build_margins,
    _build_version,
    _compile_footer_parser,
    _load_callable,
    _normalize_base_url,
    _optional_path,
    _string_list,
)
from .models import (
    DEFAULT_FOOTER_PARSER,
    Margins,
    PdfOptions,
    SiteConfig,
    SiteConfigError,
    VersionConfig,
)

_LIST_OPTIONS = (
    "sidebar_names",
    "versions",
    "subfolders",
    "product_titles",
    "ignore_docs",
    "stylesheets",
    "scripts",
    "ignore_css_selectors",
)


def load_site_config(path: Path, *, build_dir: Path | None = None) -> SiteConfig:
    """Load the YAML configuration describing the site and the PDFs to build.

    Parameters
    ----------
    path : Path
        Filesystem path to the YAML (or JSON) configuration file.
    build_dir : Path, optional
        Override for ``site.build_dir``; relative paths in the file resolve
        against the file's directory.

    Returns
    -------
    SiteConfig
        Parsed configuration including PDF options and every version with its
        documents and sidebars.

    Raises
    ------
    FileNotFoundError
        If the configuration file does not exist at ``path``.
    SiteConfigError
        If required sections or fields are missing or invalid.
    YAMLError
        If the YAML content cannot be parsed by the underlying loader.

    Examples
    --------
    >>> from pathlib import Path
    >>> from navpdf.config import load_site_config
    >>> config = load_site_config(Path("navpdf.yaml"))  # doctest: +SKIP
    >>> [version.name for version in config.versions]  # doctest: +SKIP
    ['current']
    """
    if not path.exists():
        msg = f"Configuration file '{path}' not found."
        raise FileNotFoundError(msg)

    loader = YAML(typ="safe")
    loader.version = (1, 2)
    with path.open("r", encoding="utf-8") as handle:
        loaded = loader.load(handle) or {}
    if not isinstance(loaded, dict):
        msg = "Top-level YAML structure must be a mapping."
        raise SiteConfigError(msg)
    raw: dict[str, typ.Any] = dict(loaded)
    config_dir = path.resolve().parent

    site_raw = raw.get("site") or {}
    if not isinstance(site_raw, dict):
        msg = "The 'site' section must be a mapping."
        raise SiteConfigError(msg)
    url = str(site_raw.get("url") or "").rstrip("/")
    if not url:
        msg = "The 'site.url' field is required."
        raise SiteConfigError(msg)

    resolved_build_dir = build_dir or _optional_path(
        site_raw.get("build_dir", "build"), relative_to=config_dir
    )
    if resolved_build_dir is None:  # pragma: no cover - empty string guard
        msg = "The 'site.build_dir' field must not be empty."
        raise SiteConfigError(msg)

    options = _build_options(raw.get("options") or {}, config_dir=config_dir)

    versions_raw = raw.get("versions") or []
    if not isinstance(versions_raw, list) or not versions_raw:
        msg = "No versions defined in configuration."
        raise SiteConfigError(msg)
    versions: list[VersionConfig] = []
    for payload in versions_raw:
        match payload:
            case dict():
                versions.append(_build_version(payload))
            case _:
                msg = "Each entry of 'versions' must be a mapping."
                raise SiteConfigError(msg)

    project_name = site_raw.get("project_name")
    return SiteConfig(
        url=url,
        project_name=str(project_name) if project_name else None,
        build_dir=resolved_build_dir,
        options=options,
        versions=versions,
        base_url=_normalize_base_url(site_raw.get("base_url")),
        route_base_path=str(site_raw.get("route_base_path", "docs")).strip("/"),
    )


def _build_options(
    payload: typ.Mapping[str, typ.Any], *, config_dir: Path
) -> PdfOptions:
    """Build PdfOptions from the ``options`` mapping, applying defaults."""
    if not isinstance(payload, dict):
        msg = "The 'options' section must be a mapping."
        raise SiteConfigError(msg)
    lists = {name: _string_list(payload.get(name), field=name) for name in _LIST_OPTIONS}
    base = PdfOptions(filename_function=_load_callable(None))
    footer_parser = _compile_footer_parser(payload.get("footer_parser"))

    return PdfOptions(
        filename_function=_load_callable(payload.get("filename_function")),
        sidebar_names=lists["sidebar_names"],
        versions=lists["versions"],
        subfolders=lists["subfolders"],
        product_titles=lists["product_titles"],
        product_version=str(payload.get("product_version") or ""),
        ignore_docs=lists["ignore_docs"],
        stylesheets=lists["stylesheets"],
        always_include_site_styles=_boolean(
            payload.get("always_include_site_styles"),
            field="always_include_site_styles",
            default=False,
        ),
        scripts=lists["scripts"],
        ignore_css_selectors=lists["ignore_css_selectors"],
        keep_debug_htmls=_boolean(
            payload.get("keep_debug_htmls"), field="keep_debug_htmls", default=False
        ),
        render_timeout=int(payload.get("render_timeout", base.render_timeout)),
        footer_parser=footer_parser or DEFAULT_FOOTER_PARSER,
        margins=_build_margins(payload.get("margins"), Margins()),
        cover_margins=_build_margins(payload.get("cover_margins"), base.cover_margins),
        author=str(payload.get("author") or ""),
        cover_page_header=str(payload.get("cover_page_header", base.cover_page_header)),
        cover_page_footer=str(payload.get("cover_page_footer", base.cover_page_footer)),
        cover_template=_optional_path(payload.get("cover_template"), relative_to=config_dir),
        header_template=_optional_path(payload.get("header_template"), relative_to=config_dir),
        footer_template=_optional_path(payload.get("footer_template"), relative_to=config_dir),
        use_extra_paths=_build_extra_paths(
            payload.get("use_extra_paths"), relative_to=config_dir
        ),
        pdf_dir=str(payload.get("pdf_dir") or base.pdf_dir).strip("/"),
        auto_build=_boolean(payload.get("auto_build"), field="auto_build", default=True),
    )


__all__ = ["load_site_config"]

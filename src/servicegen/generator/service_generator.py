"""Render request bindings and type declarations from a resolved model.

This module is the last stage of the pipeline. It takes an
:class:`~servicegen.models.OpenApiModel` and writes into the output
directory:

* ``typings.ts`` -- one ``interface`` per resolved type (``typings.js`` with
  JSDoc ``@typedef`` blocks when TypeScript output is off).
* ``<tag>.ts`` -- one file per tag group with an exported ``async`` function
  per API, importing the types it uses from ``./typings``.

The generation process:

1. The options are validated; nothing is fetched or rendered on failure.
2. The model is formatted through the registry's
   :class:`~servicegen.plugins.hooks.HookRunner` (a deep copy; the caller's
   model is left alone).
3. A Jinja2 environment is configured with the built-in templates plus any
   template contributed by a plugin.
4. Each file is rendered fully in memory and then written atomically; the
   tag groups are rendered and written concurrently.
"""

from __future__ import annotations

import asyncio
import json
import logging
import os
import re
import tempfile
from pathlib import Path
from typing import Callable, Optional

from jinja2 import (
    ChoiceLoader,
    Environment,
    FileSystemLoader,
    PrefixLoader,
    TemplateError,
    select_autoescape,
)

from servicegen import output
from servicegen.exceptions import ConfigError, RenderError
from servicegen.models import OpenApiModel, ServiceOptions, TagGroup, Type
from servicegen.parser.pipeline import group_by_tag
from servicegen.plugins.manager import PluginRegistry

logger = logging.getLogger(__name__)

TEMPLATE_DIR = Path(__file__).parent / "templates"
"""Path to the built-in Jinja2 templates (``generator/templates/``)."""

BUILTIN_TEMPLATES: dict[str, str] = {
    "axios": "axios.j2",
    "umi-request": "umi-request.j2",
}

TYPES_TEMPLATE = "typings.j2"
TYPES_MODULE = "typings"
DEFAULT_FILE_STEM = "default"

_PLUGIN_PREFIX = "plugin"
_IDENTIFIER_RE = re.compile(r"^[A-Za-z_$][\w$]*$")
_UNSAFE_FILENAME_RE = re.compile(r"[^\w.-]+")


def supported_templates(registry: Optional[PluginRegistry] = None) -> list[str]:
    """Names accepted as ``ServiceOptions.template``."""
    names = set(BUILTIN_TEMPLATES)
    if registry is not None:
        names.update(registry.template_overrides())
    return sorted(names)


def validate_options(
    options: ServiceOptions, registry: Optional[PluginRegistry] = None
) -> Path:
    """Check *options* before anything is loaded or rendered.

    Returns:
        The output directory.

    Raises:
        ConfigError: If no output directory is set or the template is unknown.
    """
    if options.output_dir is None:
        raise ConfigError("An output directory is required (set output_dir or --output)")

    available = supported_templates(registry)
    if options.template not in available:
        raise ConfigError(
            f"Unsupported template '{options.template}'. "
            f"Available: {', '.join(available)}"
        )
    return Path(options.output_dir)


async def generate_service(
    model: OpenApiModel,
    options: ServiceOptions,
    registry: Optional[PluginRegistry] = None,
) -> list[Path]:
    """Write the types file and one service file per tag into the output dir.

    Args:
        model: The resolved model. It is never mutated.
        options: Template, import header, TypeScript flag, output directory
            and an optional format hook.
        registry: Plugins whose format hooks and templates take part.

    Returns:
        The written paths, types file first, then groups in tag order.

    Raises:
        ConfigError: If *options* are invalid.
        RenderError: If any file failed to render or write. Every other file
            is still written before this is raised.
    """
    registry = registry if registry is not None else PluginRegistry()
    output_dir = validate_options(options, registry)
    try:
        output_dir.mkdir(parents=True, exist_ok=True)
    except OSError as exc:
        raise RenderError(f"Cannot create output directory {output_dir}: {exc}") from exc

    formatted = registry.get_hook_runner().run_format(model, options.format)
    groups = group_by_tag(formatted)
    env = _create_jinja_env(registry)
    service_template = _service_template_name(options.template, registry)
    ext = "ts" if options.typescript else "js"

    jobs: list[tuple[Path, Callable[[], str]]] = [
        (
            output_dir / f"{TYPES_MODULE}.{ext}",
            lambda: render_types(env, formatted.types, options),
        )
    ]
    for group, stem in zip(groups, assign_file_stems(groups)):
        jobs.append(
            (
                output_dir / f"{stem}.{ext}",
                _group_renderer(env, service_template, group, options),
            )
        )

    logger.debug("Emitting %d files into %s", len(jobs), output_dir)
    results = await asyncio.gather(
        *(_emit(path, render) for path, render in jobs),
        return_exceptions=True,
    )

    failures = [r for r in results if isinstance(r, BaseException)]
    for failure in failures:
        logger.debug("File generation failed: %s", failure)
    if failures:
        first = failures[0]
        if isinstance(first, RenderError) and len(failures) == 1:
            raise first
        raise RenderError(
            f"{len(failures)} of {len(jobs)} files failed to generate: {first}"
        ) from first

    return [path for path in results if isinstance(path, Path)]


def render_types(env: Environment, types: list[Type], options: ServiceOptions) -> str:
    """Render the shared type declarations file."""
    template = env.get_template(TYPES_TEMPLATE)
    return template.render(types=types, typescript=options.typescript)


def render_group(
    env: Environment, template_name: str, group: TagGroup, options: ServiceOptions
) -> str:
    """Render the request bindings for one tag group."""
    template = env.get_template(template_name)
    return template.render(
        tag=group.tag,
        apis=group.apis,
        deps=group.dependencies,
        import_text=options.import_text,
        typescript=options.typescript,
        types_module=TYPES_MODULE,
    )


def tag_file_stem(tag: str) -> str:
    """File name (without extension) used for a tag's service file."""
    stem = _UNSAFE_FILENAME_RE.sub("-", tag).strip("-.")
    return stem or DEFAULT_FILE_STEM


def assign_file_stems(groups: list[TagGroup]) -> list[str]:
    """One distinct file stem per group, in group order.

    The types module name is reserved. A stem already taken (compared
    case-insensitively) gets the first free ``-2``, ``-3``, ... suffix.
    """
    taken = {TYPES_MODULE.casefold()}
    stems: list[str] = []
    for group in groups:
        base = tag_file_stem(group.tag)
        stem = base
        n = 2
        while stem.casefold() in taken:
            stem = f"{base}-{n}"
            n += 1
        if stem != base:
            logger.warning("Tag %r written to %s instead of %s", group.tag, stem, base)
        taken.add(stem.casefold())
        stems.append(stem)
    return stems


def ts_key(name: str) -> str:
    """Quote a property name that is not a valid identifier."""
    if _IDENTIFIER_RE.match(name):
        return name
    return json.dumps(name, ensure_ascii=False)


def comment_text(text: str) -> str:
    """Make *text* safe to embed inside a ``/** ... */`` block on one line."""
    return " ".join(text.replace("*/", "*\\/").split())


def _group_renderer(
    env: Environment, template_name: str, group: TagGroup, options: ServiceOptions
) -> Callable[[], str]:
    return lambda: render_group(env, template_name, group, options)


async def _emit(path: Path, render: Callable[[], str]) -> Path:
    try:
        content = await asyncio.to_thread(render)
    except TemplateError as exc:
        raise RenderError(f"Failed to render {path.name}: {exc}") from exc

    try:
        await asyncio.to_thread(_atomic_write, path, content)
    except OSError as exc:
        raise RenderError(f"Failed to write {path}: {exc}") from exc

    output.report_file(path, content)
    return path


def _service_template_name(template: str, registry: PluginRegistry) -> str:
    overrides = registry.template_overrides()
    if template in overrides:
        return f"{_PLUGIN_PREFIX}/{template}/{overrides[template].name}"
    return BUILTIN_TEMPLATES[template]


def _create_jinja_env(registry: Optional[PluginRegistry] = None) -> Environment:
    """Create the Jinja2 environment for the built-in and plugin templates.

    Plugin templates are addressed as ``plugin/<name>/<file>`` so they never
    shadow a built-in file, while still being able to import the shared
    ``_macros.j2``. Autoescaping is off: the output is TypeScript, not HTML.
    """
    plugin_loaders = {}
    if registry is not None:
        plugin_loaders = {
            name: FileSystemLoader(str(Path(path).parent))
            for name, path in registry.template_overrides().items()
        }

    env = Environment(
        loader=ChoiceLoader(
            [
                FileSystemLoader(str(TEMPLATE_DIR)),
                PrefixLoader(
                    {_PLUGIN_PREFIX: PrefixLoader(plugin_loaders)},
                ),
            ]
        ),
        autoescape=select_autoescape(enabled_extensions=("html", "xml")),
        trim_blocks=True,
        lstrip_blocks=True,
        keep_trailing_newline=True,
    )
    env.filters["ts_key"] = ts_key
    env.filters["comment"] = comment_text
    return env


def _atomic_write(path: Path, data: str) -> None:
    """Write data to file atomically using temp file + rename.

    The temporary file is created in the same directory as *path* so that
    ``os.replace`` is an atomic rename on POSIX systems. On any failure the
    temp file is removed and the original *path* is left untouched.
    """
    fd = None
    tmp_path: Optional[str] = None
    try:
        fd = tempfile.NamedTemporaryFile(
            mode="w",
            dir=path.parent,
            prefix=f".{path.name}.",
            suffix=".tmp",
            delete=False,
            encoding="utf-8",
        )
        tmp_path = fd.name
        fd.write(data)
        fd.flush()
        os.fsync(fd.fileno())
        fd.close()
        fd = None
        os.replace(tmp_path, path)
    except BaseException:
        if fd is not None:
            fd.close()
        if tmp_path is not None:
            try:
                os.unlink(tmp_path)
            except OSError:
                pass
        raise

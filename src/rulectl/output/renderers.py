"""Operation-specific Rich renderers for ServiceResult.

Renderers are dispatched by ``result.op`` in :func:`render_result`.
Unknown ops fall through to a generic key-value renderer.
"""

from __future__ import annotations

import json
from collections.abc import Callable
from typing import TYPE_CHECKING, Any

from rich.table import Table
from rich.text import Text
from rich.tree import Tree

from rulectl.output.console import create_console, get_output

if TYPE_CHECKING:
    from rich.console import Console

    from rulectl.services.result import ServiceResult


# ── Public API ────────────────────────────────────────────────────────


def render_result(result: ServiceResult, *, verbose: bool = False) -> str:
    """Render a ServiceResult to a string via Rich."""
    console = create_console()

    if result.ok:
        renderer = _OP_RENDERERS.get(result.op, _render_generic)
        renderer(result, console)
        if verbose:
            _render_meta(console, result)
    else:
        _render_error(result, console, verbose=verbose)

    return get_output(console).rstrip("\n")


def render_quiet(result: ServiceResult) -> str:
    """Minimal output: written files, an encoded link, or library ids."""
    if not result.ok:
        msg = result.error.message if result.error else "Unknown error"
        return f"ERROR: {result.op} — {msg}"

    files = result.data.get("files")
    if isinstance(files, list) and files:
        return "\n".join(str(item) for item in files)
    if "value" in result.data:
        return str(result.data.get("url") or result.data["value"])
    libraries = result.data.get("libraries")
    if isinstance(libraries, list) and libraries:
        return "\n".join(str(item) for item in libraries)
    return f"OK: {result.op}"


# ── Helpers ───────────────────────────────────────────────────────────


def _status_line(console: Console, result: ServiceResult) -> None:
    console.print(Text("OK", style="rule.ok"), Text(f"  {result.op}", style="rule.op"), sep="")


def _field(console: Console, key: str, value: Any) -> None:
    k = Text(f"  {key}: ", style="rule.key")
    if key in ("output_dir", "output_file", "path"):
        v = Text(str(value), style="rule.path")
    elif isinstance(value, (dict, list)):
        v = Text(json.dumps(value, separators=(",", ":")))
    else:
        v = Text(str(value))
    console.print(k, v, sep="")


def _render_meta(console: Console, result: ServiceResult) -> None:
    if not result.meta:
        return
    console.print()
    console.print(Text("  meta:", style="dim"))
    for key, value in result.meta.items():
        if key == "telemetry":
            _render_span(console, value, indent=4)
        else:
            console.print(f"    {key}: {value}")


def _render_span(console: Console, span: dict[str, Any], indent: int) -> None:
    prefix = " " * indent
    line = f"{prefix}{span.get('duration_ms', 0.0):>8.2f}ms  {span.get('name', '?')}"
    annotations = span.get("annotations") or {}
    if annotations:
        line += "  (" + ", ".join(f"{k}={v}" for k, v in annotations.items()) + ")"
    console.print(Text(line, style="dim"))
    for child in span.get("children", []):
        _render_span(console, child, indent + 4)


def _id_list(console: Console, label: str, ids: list[str], style: str = "rule.id") -> None:
    if not ids:
        return
    console.print(
        Text(f"  {label}: ", style="rule.key"),
        Text(", ".join(ids), style=style),
        sep="",
    )


# ── Operation renderers ───────────────────────────────────────────────


def _render_generic(result: ServiceResult, console: Console) -> None:
    _status_line(console, result)
    for key, value in result.data.items():
        _field(console, key, value)


def _render_generate(result: ServiceResult, console: Console) -> None:
    _status_line(console, result)
    data = result.data
    _field(console, "strategy", data.get("strategy", ""))
    _id_list(console, "libraries", data.get("libraries", []))
    if "output_dir" in data:
        _field(console, "output_dir", data["output_dir"])

    table = Table(show_header=True, pad_edge=False, expand=False)
    table.add_column("File", style="rule.path", no_wrap=True)
    table.add_column("Label")
    table.add_column("Size", justify="right")
    for document in data.get("documents", []):
        table.add_row(document["fileName"], document["label"], str(len(document["markdown"])))
    console.print(table)


def _render_taxonomy(result: ServiceResult, console: Console) -> None:
    tree = Tree(Text(f"Taxonomy ({result.data.get('library_count', 0)} libraries)", style="bold"))
    for layer in result.data.get("layers", []):
        layer_node = tree.add(Text(f"{layer['name']} [{layer['id']}]", style="rule.layer"))
        for stack in layer["stacks"]:
            label = Text(f"{stack['name']} [{stack['id']}]", style="rule.stack")
            stack_node = layer_node.add(label)
            for library in stack["libraries"]:
                stack_node.add(Text(library, style="rule.id"))
    console.print(tree)


def _render_library(result: ServiceResult, console: Console) -> None:
    data = result.data
    console.print(Text(data["name"], style="bold"), Text(f"  [{data['id']}]", style="rule.id"))
    _field(console, "layer", data["layer"])
    _field(console, "stack", data["stack"])
    if data.get("packages"):
        _field(console, "packages", ", ".join(data["packages"]))
    console.print(Text("  rules:", style="rule.key"))
    for rule in data.get("rules", []):
        console.print(f"    - {rule}", markup=False)


def _render_encode(result: ServiceResult, console: Console) -> None:
    _status_line(console, result)
    _field(console, result.data.get("param", "libraries"), result.data.get("value", ""))
    if "url" in result.data:
        _field(console, "url", result.data["url"])


def _render_decode(result: ServiceResult, console: Console) -> None:
    _status_line(console, result)
    for layer, stacks in result.data.get("stacks_by_layer", {}).items():
        console.print(Text(f"  {layer}", style="rule.layer"))
        for stack in stacks:
            libraries = result.data.get("libraries_by_stack", {}).get(stack, [])
            console.print(
                Text(f"    {stack}: ", style="rule.stack"),
                Text(", ".join(libraries), style="rule.id"),
                sep="",
            )
    _id_list(console, "ignored", result.data.get("ignored", []), style="rule.warning")


def _render_diff(result: ServiceResult, console: Console) -> None:
    _status_line(console, result)
    dirty = result.data.get("dirty", False)
    console.print(
        Text("  dirty: ", style="rule.key"),
        Text("yes" if dirty else "no", style="rule.warning" if dirty else "rule.ok"),
        sep="",
    )
    _id_list(console, "added", result.data.get("added", []), style="rule.added")
    _id_list(console, "removed", result.data.get("removed", []), style="rule.removed")


def _render_detect(result: ServiceResult, console: Console) -> None:
    _status_line(console, result)
    if "path" in result.data:
        _field(console, "path", result.data["path"])
    _id_list(console, "libraries", result.data.get("libraries", []))
    _field(console, "packages", result.data.get("package_count", 0))
    _id_list(console, "unmatched", result.data.get("unmatched", []), style="dim")


# ── Error renderer ────────────────────────────────────────────────────


def _render_error(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    err = result.error
    msg = err.message if err else "Unknown error"
    console.print(
        Text("ERROR", style="rule.error"),
        Text(f"  {result.op}", style="rule.op"),
        Text(f" — {msg}"),
        sep="",
    )
    if verbose and err and err.detail:
        for key, value in err.detail.items():
            _field(console, key, value)


_OP_RENDERERS: dict[str, Callable[[ServiceResult, Console], None]] = {
    "generate_rules": _render_generate,
    "list_taxonomy": _render_taxonomy,
    "describe_library": _render_library,
    "encode_state": _render_encode,
    "decode_state": _render_decode,
    "diff_state": _render_diff,
    "detect_dependencies": _render_detect,
}

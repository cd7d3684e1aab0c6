"""Rich renderers for ServiceResult, one per operation.

Every renderer writes into a StringIO-backed Console; :func:`render_result`
picks one by ``result.op`` and falls back to a key/value dump.
"""

from __future__ import annotations

import json
from collections.abc import Callable
from typing import TYPE_CHECKING, Any

from rich.table import Table
from rich.text import Text

from periodctl.output.console import create_console, get_output, style_for_state

if TYPE_CHECKING:
    from rich.console import Console

    from periodctl.services.result import ServiceResult

Renderer = Callable[..., None]


def render_result(result: ServiceResult, *, verbose: bool = False) -> str:
    """Render a ServiceResult to text via Rich."""
    console = create_console()
    if result.ok:
        renderer = _OP_RENDERERS.get(result.op, _render_generic)
        renderer(result, console, verbose=verbose)
    else:
        _render_error(result, console, verbose=verbose)
    if verbose:
        _render_meta(console, result)
    return get_output(console).rstrip("\n")


def render_quiet(result: ServiceResult) -> str:
    """One line per item for ``--quiet``; a bare status otherwise."""
    if not result.ok:
        msg = result.error.message if result.error else "Unknown error"
        return f"ERROR: {result.op}: {msg}"

    items = result.data.get("items") or result.data.get("details")
    if items and isinstance(items, list):
        return "\n".join(str(item["id"]) for item in items if item.get("id") is not None)
    if "start" in result.data and "end" in result.data:
        return f"{result.data['start']} {result.data['end']}"
    if "action" in result.data:
        return str(result.data["action"])
    return f"OK: {result.op}"


# --- Helpers ------------------------------------------------------------


def _status_line(console: Console, result: ServiceResult) -> None:
    console.print(Text.assemble(("OK", "pc.ok"), (f"  {result.op}", "pc.op")))


def _field(console: Console, key: str, value: Any) -> None:
    k = Text(f"  {key}: ", style="pc.key")
    if key == "id" or key.endswith("_id"):
        v = Text(str(value), style="pc.id")
    elif key in ("label", "semantic_name"):
        v = Text(str(value), style="pc.label")
    elif key in ("range", "current", "suggested"):
        v = Text(str(value), style="pc.range")
    else:
        v = Text(str(value))
    console.print(Text.assemble(k, v))


def _render_meta(console: Console, result: ServiceResult) -> None:
    """Meta block including the telemetry span tree (verbose only)."""
    if not result.meta:
        return
    console.print()
    console.print(Text("  meta:", style="dim"))
    for key, value in result.meta.items():
        if key == "telemetry":
            _render_telemetry_tree(console, value, indent=4)
        else:
            console.print(f"    {key}: {value}")


def _render_telemetry_tree(console: Console, span: dict[str, Any], indent: int = 4) -> None:
    duration = span.get("duration_ms", 0.0)
    if duration > 1000:
        style = "bold red"
    elif duration > 100:
        style = "yellow"
    else:
        style = "dim"
    line = f"{' ' * indent}[{style}]{duration:>8.2f}ms[/{style}]  {span.get('name', '?')}"
    annotations = span.get("annotations") or {}
    if annotations:
        line += "  (" + ", ".join(f"{k}={v}" for k, v in annotations.items()) + ")"
    console.print(line)
    for child in span.get("children", []):
        _render_telemetry_tree(console, child, indent=indent + 4)


def _period_table(items: list[dict[str, Any]]) -> Table:
    table = Table(show_header=True, show_lines=False, pad_edge=False, expand=False)
    table.add_column("ID", style="pc.id", justify="right", no_wrap=True)
    table.add_column("Range", style="pc.range", no_wrap=True)
    table.add_column("Label", style="pc.label")
    table.add_column("Periodicity")
    table.add_column("State")
    table.add_column("#", justify="right")
    for item in items:
        state = str(item.get("state", ""))
        number = item.get("annual_ordinal_number")
        table.add_row(
            str(item.get("id", "")),
            f"{item.get('start_date') or '?'}..{item.get('end_date') or '?'}",
            str(item.get("label", "")),
            str(item.get("periodicity", "")),
            Text(state, style=style_for_state(state)),
            "" if number is None else str(number),
        )
    return table


def _render_gaps_overlaps(console: Console, data: dict[str, Any]) -> None:
    for gap in data.get("gaps", []):
        console.print(f"  [pc.warning]gap[/pc.warning]: {gap}")
    for overlap in data.get("overlaps", []):
        console.print(f"  [pc.critical]overlap[/pc.critical]: {overlap}")


# --- Error ---------------------------------------------------------------


def _render_error(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    err = result.error
    msg = err.message if err else "Unknown error"
    code = f" [{err.code}]" if err else ""
    console.print(
        Text.assemble(("ERROR", "pc.error"), (f"  {result.op}{code}", "pc.op"), f": {msg}")
    )
    # Failed integrity runs still carry the findings.
    if result.op == "verify_periods":
        _render_gaps_overlaps(console, result.data)
    elif result.op == "repair_periods":
        _render_gaps_overlaps(console, result.data.get("verification", {}))
        for line in result.data.get("correction", {}).get("errors", []):
            console.print(f"  [pc.error]error[/pc.error]: {line}")
    elif result.op == "correct_periods":
        for line in result.data.get("errors", []):
            console.print(f"  [pc.error]error[/pc.error]: {line}")
    if verbose and err and err.detail:
        console.print(Text("  detail:", style="dim"))
        for key, value in err.detail.items():
            console.print(f"    {key}: {value}")


# --- Calculation -----------------------------------------------------------


def _render_detect(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    d = result.data
    action = str(d.get("action", "?"))
    action_style = {"continue": "pc.ok", "conflict": "pc.warning", "create": "pc.op"}
    console.print(
        Text.assemble((action.upper(), action_style.get(action, "")), f"  {d['message']}")
    )
    period = d.get("period") or d.get("conflict")
    if period:
        _field(console, "id", period.get("id"))
        _field(console, "range", f"{period.get('start_date')}..{period.get('end_date')}")
        _field(console, "state", period.get("state"))
    info = d.get("info")
    if info:
        _field(console, "label", info.get("label"))
        _field(console, "day_count", info.get("day_count"))
        if info.get("ordinal_number") is not None:
            _field(console, "ordinal_number", info["ordinal_number"])
    if d.get("offline"):
        console.print("  [pc.warning]OFFLINE[/pc.warning] existing periods were not checked")


def _render_boundary(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    """next_period and current_period."""
    _status_line(console, result)
    d = result.data
    _field(console, "range", f"{d['start']}..{d['end']}")
    for key in ("label", "type_label", "day_count"):
        _field(console, key, d[key])
    if "reference_date" in d:
        _field(console, "reference_date", d["reference_date"])
    anchor = d.get("anchor")
    if anchor:
        _field(console, "after", f"#{anchor['id']} {anchor['range']}")
    elif "anchor" in d:
        console.print("  [dim]no previous period; starting fresh[/dim]")


def _render_suggest(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    d = result.data
    console.print(Text.assemble((str(d["action"]).upper(), "pc.op"), f"  {d['message']}"))
    if d.get("period"):
        console.print(_period_table([d["period"]]))
    suggested = d.get("suggested")
    if suggested:
        _field(console, "range", f"{suggested['start']}..{suggested['end']}")
        _field(console, "type_label", suggested["type_label"])


def _render_label(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    d = result.data
    console.print(Text(str(d.get("label") or d.get("type_label", "")), style="pc.label"))
    for key in ("start_date", "end_date", "day_count", "type_label", "ordinal_number"):
        if d.get(key) is not None:
            _field(console, key, d[key])
    if verbose and d.get("semantic_name"):
        _field(console, "semantic_name", d["semantic_name"])


# --- Registry --------------------------------------------------------------


def _render_create(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    _status_line(console, result)
    period = result.data["period"]
    for key in ("id", "label", "periodicity", "state", "annual_ordinal_number"):
        if period.get(key) is not None:
            _field(console, key, period[key])
    _field(console, "range", f"{period['start_date']}..{period['end_date']}")


def _render_list(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    items = result.data.get("items", [])
    if items:
        console.print(_period_table(items))
    console.print(f"\n{result.data.get('count', len(items))} periods")


def _render_init(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    _status_line(console, result)
    for key in ("root", "config_path", "db_path", "tenant_id", "periodicity"):
        if result.data.get(key) is not None:
            _field(console, key, result.data[key])


# --- Integrity ---------------------------------------------------------------


def _render_analyze(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    d = result.data
    details = d.get("details", [])
    if not details:
        console.print(f"[pc.ok]OK[/pc.ok]  {d.get('total', 0)} periods, all canonical.")
        return

    table = Table(show_header=True, show_lines=False, pad_edge=False, expand=False)
    table.add_column("ID", style="pc.id", justify="right")
    table.add_column("Current", style="pc.range")
    table.add_column("Suggested", style="pc.range")
    table.add_column("Defect")
    if verbose:
        table.add_column("Reason")
    for item in details:
        defect_style = "pc.critical" if item.get("critical") else "pc.irregular"
        row: list[Any] = [
            str(item.get("id", "")),
            str(item.get("current", "")),
            str(item.get("suggested") or "-"),
            Text(str(item.get("defect", "")), style=defect_style),
        ]
        if verbose:
            row.append(str(item.get("reason", "")))
        table.add_row(*row)
    console.print(table)
    critical = sum(1 for item in details if item.get("critical"))
    console.print(
        f"\n{d.get('incorrect', len(details))} of {d.get('total', 0)} periods incorrect "
        f"({critical} critical)"
    )


def _render_correct(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    _status_line(console, result)
    d = result.data
    _field(console, "corrected_count", d.get("corrected_count", 0))
    for item in d.get("corrected", []):
        console.print(
            f"  [pc.id]#{item['id']}[/pc.id] {item['from']} -> {item['to']}  ({item['defect']})"
        )
    if verbose:
        for item in d.get("skipped", []):
            console.print(f"  [dim]skipped #{item['id']}: {item['reason']}[/dim]")
    console.print(f"  {d.get('summary', '')}")


def _render_verify(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    console.print(f"[pc.ok]OK[/pc.ok]  {result.data.get('summary', '')}")


def _render_repair(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    _status_line(console, result)
    d = result.data
    analysis = d.get("analysis", {})
    _field(console, "analyzed", analysis.get("total", 0))
    _field(console, "incorrect", analysis.get("incorrect", 0))
    _field(console, "corrected", d.get("correction", {}).get("corrected_count", 0))
    _field(console, "consecutive", d.get("verification", {}).get("consecutive", False))
    if verbose:
        console.print(f"  {d.get('summary', '')}")


def _render_generic(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    _status_line(console, result)
    for key, value in result.data.items():
        if isinstance(value, (dict, list)):
            _field(console, key, json.dumps(value, separators=(",", ":")))
        else:
            _field(console, key, value)


_OP_RENDERERS: dict[str, Renderer] = {
    "detect": _render_detect,
    "next_period": _render_boundary,
    "current_period": _render_boundary,
    "suggest_period": _render_suggest,
    "label": _render_label,
    "create_period": _render_create,
    "list_periods": _render_list,
    "init": _render_init,
    "analyze_periods": _render_analyze,
    "correct_periods": _render_correct,
    "verify_periods": _render_verify,
    "repair_periods": _render_repair,
}

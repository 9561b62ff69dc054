"""Mermaid flowchart exporter for parameter trees."""

import re
from typing import Dict, List, Optional

from scanner.model import Module
from scanner.trace import ScanWarnings


def to_mermaid(
    module: Module,
    orientation: str = "LR",
    title: str = "/",
    warnings: Optional[ScanWarnings] = None,
) -> str:
    """
    Convert a parameter tree to Mermaid flowchart syntax.

    Modules and parameters become nodes linked to their parent module.
    With warnings, duplicated fields are linked to the field that was kept
    and skipped fields are shown as dashed nodes below their module.

    Args:
        module: Root module of the tree.
        orientation: Flowchart orientation (LR, TD, TB, RL, BT).
        title: Label of the root node.
        warnings: Optional scan warnings to draw.

    Returns:
        Mermaid flowchart string.
    """
    lines = [f"flowchart {orientation}"]
    ids = _IdMap()

    root_id = ids.get("", "root")
    lines.append(f'    {root_id}["{_escape_label(title)}"]')
    edges: List[str] = []
    _add_module(module, "", root_id, ids, lines, edges)

    if warnings is not None:
        _add_warnings(warnings, ids, lines, edges)

    if edges:
        lines.append("")
        lines.extend(edges)
    return "\n".join(lines)


def _add_module(
    module: Module,
    path: str,
    module_id: str,
    ids: "_IdMap",
    lines: List[str],
    edges: List[str],
) -> None:
    """Add node definitions and edges for the children of a module."""
    for child in module.modules():
        child_path = path + child.name
        child_id = ids.get(child_path, "m_" + child_path)
        lines.append(f'    {child_id}["{_escape_label(child.name)}/"]')
        edges.append(f"    {module_id} --> {child_id}")
        _add_module(child, child_path + "/", child_id, ids, lines, edges)

    for param in module.parameters():
        param_path = path + param.name
        param_id = ids.get(param_path, "p_" + param_path)
        label = _escape_label(f"{param.name} = {param}")
        lines.append(f'    {param_id}(["{label}"])')
        edges.append(f"    {module_id} --> {param_id}")


def _add_warnings(
    warnings: ScanWarnings,
    ids: "_IdMap",
    lines: List[str],
    edges: List[str],
) -> None:
    """Add dashed nodes for duplicated and skipped fields."""
    duplicated = set()
    if warnings.duplicates:
        lines.append("")
        lines.append("    %% Duplicate fields")
        for group in warnings.duplicates:
            first = group[0]
            for path in group[1:]:
                duplicated.add(path)
                dup_id = ids.get("dup:" + path, "d_" + path)
                lines.append(f'    {dup_id}["{_escape_label(path)} [DUPLICATE]"]')
                lines.append(f"    style {dup_id} stroke:#ff9900,stroke-dasharray: 5 5")
                if first in ids:
                    edges.append(f"    {dup_id} -.-> {ids.get(first)}")

    skipped = [path for path in warnings.skipped if path not in duplicated]
    if skipped:
        lines.append("")
        lines.append("    %% Skipped fields")
        for path in skipped:
            skip_id = ids.get("skip:" + path, "s_" + path)
            lines.append(f'    {skip_id}["{_escape_label(path)} [SKIPPED]"]')
            lines.append(f"    style {skip_id} stroke:#ff0000,stroke-dasharray: 5 5")
            parent = path.rpartition("/")[0]
            if parent in ids:
                edges.append(f"    {ids.get(parent)} -.-> {skip_id}")


class _IdMap:
    """Assigns unique Mermaid node IDs to tree paths."""

    def __init__(self):
        self._ids: Dict[str, str] = {}
        self._used: Dict[str, int] = {}

    def __contains__(self, path: str) -> bool:
        return path in self._ids

    def get(self, path: str, hint: Optional[str] = None) -> str:
        node_id = self._ids.get(path)
        if node_id is not None:
            return node_id
        node_id = _sanitize_id(hint if hint is not None else path)
        count = self._used.get(node_id, 0)
        self._used[node_id] = count + 1
        if count:
            node_id = f"{node_id}_{count}"
        self._ids[path] = node_id
        return node_id


def _sanitize_id(value: str) -> str:
    """Sanitize a string to be a valid Mermaid ID."""
    # Replace path separators and dots with underscores
    sanitized = re.sub(r"[/\\.\-]", "_", value)
    # Remove any remaining invalid characters
    sanitized = re.sub(r"[^a-zA-Z0-9_]", "", sanitized)
    # Ensure it starts with a letter
    if sanitized and not sanitized[0].isalpha():
        sanitized = "n_" + sanitized
    return sanitized or "unknown"


def _escape_label(text: str) -> str:
    return text.replace('"', "#quot;")

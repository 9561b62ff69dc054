"""JSON exporter for parameter trees (machine-friendly format)."""

import json
from typing import Any, Dict, Optional

from scanner.model import Module
from scanner.trace import ScanWarnings


def to_json(
    module: Module,
    warnings: Optional[ScanWarnings] = None,
    indent: int = 2,
) -> str:
    """
    Convert a parameter tree to JSON format.

    Args:
        module: Root module of the tree.
        warnings: Optional scan warnings, added under "warnings".
        indent: JSON indentation level.

    Returns:
        JSON string representation of the tree.
    """
    data = module_to_dict(module)
    if warnings is not None:
        data["warnings"] = {
            "duplicates": warnings.duplicates,
            "skipped": warnings.skipped,
        }
    return json.dumps(data, indent=indent)


def module_to_dict(module: Module) -> Dict[str, Any]:
    """Build a JSON-serializable dictionary of a module and its descendants."""
    return {
        "name": module.name,
        "tag": module.tag(),
        "modules": [module_to_dict(child) for child in module.modules()],
        "parameters": [
            {
                "name": param.name,
                "tag": param.tag(),
                "value": str(param),
                "bool_flag": param.is_bool_flag,
            }
            for param in module.parameters()
        ],
    }

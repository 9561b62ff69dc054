"""ASCII tree-style exporter for parameter trees."""

from typing import List, Tuple

from scanner.model import Module


# Unicode tree characters
UNICODE_BRANCH = "├── "
UNICODE_LAST = "└── "
UNICODE_VERTICAL = "│   "
UNICODE_SPACE = "    "

# ASCII fallback characters
ASCII_BRANCH = "|-- "
ASCII_LAST = "\\-- "
ASCII_VERTICAL = "|   "
ASCII_SPACE = "    "


def to_ascii(
    module: Module,
    title: str = "/",
    style: str = "tree",
    show_values: bool = True,
    show_tags: bool = False,
) -> str:
    """
    Convert a parameter tree to ASCII tree representation.

    Modules are listed before parameters, each in the order they were
    found, like Module.__str__ does.

    Args:
        module: Root module of the tree.
        title: Label of the root line.
        style: Output style - "tree" (Unicode) or "ascii" (pure ASCII).
        show_values: If True, print "name = value" for parameters.
        show_tags: If True, append non-empty field tags in brackets.

    Returns:
        ASCII tree string.
    """
    # Select character set based on style
    if style == "ascii":
        chars = (ASCII_BRANCH, ASCII_LAST, ASCII_VERTICAL, ASCII_SPACE)
    else:
        chars = (UNICODE_BRANCH, UNICODE_LAST, UNICODE_VERTICAL, UNICODE_SPACE)

    lines: List[str] = [title]
    _render_children(module, "", chars, lines, show_values, show_tags)
    return "\n".join(lines)


def _render_children(
    module: Module,
    prefix: str,
    chars: Tuple[str, str, str, str],
    lines: List[str],
    show_values: bool,
    show_tags: bool,
) -> None:
    """
    Recursively render the modules and parameters of a module.

    Args:
        module: Module whose children are rendered.
        prefix: Current line prefix for indentation.
        chars: Character set (branch, last, vertical, space).
        lines: Output lines list (modified in place).
        show_values: If True, print parameter values.
        show_tags: If True, print field tags.
    """
    branch, last, vertical, space = chars

    modules = module.modules()
    params = module.parameters()
    total_items = len(modules) + len(params)
    item_index = 0

    for child in modules:
        item_index += 1
        is_last = item_index == total_items
        connector = last if is_last else branch
        lines.append(f"{prefix}{connector}{child.name}/{_tag_suffix(child.tag(), show_tags)}")
        new_prefix = prefix + (space if is_last else vertical)
        _render_children(child, new_prefix, chars, lines, show_values, show_tags)

    for param in params:
        item_index += 1
        connector = last if item_index == total_items else branch
        label = param.name
        if show_values:
            label = f"{label} = {param}"
        lines.append(f"{prefix}{connector}{label}{_tag_suffix(param.tag(), show_tags)}")


def _tag_suffix(tag: str, show_tags: bool) -> str:
    if not show_tags or not tag:
        return ""
    return f" [{tag}]"

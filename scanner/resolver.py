"""Resolution of "module:attribute" scan targets."""

import dataclasses
import importlib
import logging
from typing import Any

from graph.model import Ref
from .errors import TargetError

logger = logging.getLogger(__name__)


def resolve_target(target: str) -> Any:
    """
    Import the object named by a target string.

    Args:
        target: "package.module:attribute"; the attribute may be dotted
               to reach nested objects, e.g. "app.settings:Config.defaults".

    Returns:
        The named object.

    Raises:
        TargetError: If the target is malformed, the module cannot be
                     imported or the attribute does not exist.
    """
    module_name, sep, attr_path = target.partition(":")
    if not sep or not module_name or not attr_path:
        raise TargetError(f"target must be 'module:attribute', got {target!r}")

    try:
        obj = importlib.import_module(module_name)
    except ImportError as e:
        raise TargetError(f"cannot import module {module_name!r}: {e}") from e

    for attr in attr_path.split("."):
        try:
            obj = getattr(obj, attr)
        except AttributeError as e:
            raise TargetError(f"{module_name!r} has no attribute {attr_path!r}") from e

    logger.debug("resolved %s to %r", target, obj)
    return obj


def as_root(obj: Any) -> Ref:
    """
    Turn a resolved target into the root of a scan.

    A Ref is used as is. A dataclass type or any other callable is called
    without arguments and its result wrapped in a new Ref; any other object
    is wrapped in a new Ref directly.

    Raises:
        TargetError: If calling the target fails.
    """
    if isinstance(obj, Ref):
        return obj
    if (dataclasses.is_dataclass(obj) and isinstance(obj, type)) or (
        callable(obj) and not dataclasses.is_dataclass(obj)
    ):
        try:
            obj = obj()
        except Exception as e:
            raise TargetError(f"cannot instantiate {obj!r}: {e}") from e
    return Ref.new(obj)


def load_root(target: str) -> Ref:
    """Resolve a target string and turn it into the root of a scan."""
    return as_root(resolve_target(target))

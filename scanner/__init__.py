"""Scanner module for parameter trees and configuration documents."""

from .builder import Guard, ScanStrategy, scan, scan_warn
from .discovery import expand_paths, iter_files
from .errors import NilRootError, RootTypeError, ScanError, TargetError
from .model import Field, Module, Parameter
from .parser import DocumentError, parse_file, parse_text
from .resolver import as_root, load_root, resolve_target
from .trace import ScanWarnings, Tracer

__all__ = [
    "Guard",
    "ScanStrategy",
    "scan",
    "scan_warn",
    "expand_paths",
    "iter_files",
    "NilRootError",
    "RootTypeError",
    "ScanError",
    "TargetError",
    "Field",
    "Module",
    "Parameter",
    "DocumentError",
    "parse_file",
    "parse_text",
    "as_root",
    "load_root",
    "resolve_target",
    "ScanWarnings",
    "Tracer",
]

"""Exceptions raised by scans and target resolution."""


class ScanError(ValueError):
    """The root of a scan cannot be scanned."""


class NilRootError(ScanError):
    """The root of a scan is None."""


class RootTypeError(ScanError, TypeError):
    """The root of a scan is not a Ref to a record."""


class TargetError(ScanError):
    """A scan target given as "module:attribute" cannot be resolved."""

"""Exceptions raised inside the package."""


class LumiError(Exception):
    """Base class for LUMI errors."""


class MalformedResponseError(LumiError):
    """The remote model answered with a payload we cannot read."""

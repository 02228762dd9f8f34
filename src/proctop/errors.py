"""Exceptions raised by proctop."""


class ProctopError(Exception):
    """Base class for proctop errors."""


class DataAcquisitionError(ProctopError):
    """A snapshot or username lookup failed.

    Always recovered locally with a sentinel value or the previous data.
    """


class TerminalSetupError(ProctopError):
    """The terminal could not be put into (or restored from) raw mode."""

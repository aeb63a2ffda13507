"""Exception hierarchy for the CSV test data generator.

Read errors are fatal to a run, configuration errors are recoverable while a
column is being configured, and store errors are absorbed by the template
store itself.
"""


class CSVGenError(Exception):
    """Base class for all errors raised by csvgen."""


# ============================================================================
# Source table errors
# ============================================================================


class ReadError(CSVGenError):
    """The source CSV could not be turned into a table."""


class SourceNotFoundError(ReadError, FileNotFoundError):
    """The source CSV file does not exist."""


class SourceParseError(ReadError):
    """The source CSV exists but could not be parsed."""


class SourceEmptyError(SourceParseError):
    """The source CSV parsed but contains no data records."""


# ============================================================================
# Configuration errors
# ============================================================================


class ConfigError(CSVGenError, ValueError):
    """A column configuration is invalid."""


class EmptyListError(ConfigError):
    """A list based strategy resolved to an empty list."""


class InvalidRangeError(ConfigError):
    """A numeric range has its minimum above its maximum."""


class InvalidRowCountError(ConfigError):
    """The requested number of rows is not a positive integer."""


class NoSourceValuesError(ConfigError):
    """The source column has no usable values for the chosen strategy.

    Callers recover by asking for a custom list instead.
    """


class InvalidLengthError(ConfigError):
    """A random string length is negative or not an integer."""


class InvalidNumberError(ConfigError):
    """A numeric parameter or list entry is not a finite number."""


class InvalidTextError(ConfigError):
    """A prefix or text list entry is not text."""


class DuplicateColumnError(ConfigError):
    """Two configurations in one set target the same column."""


class UnknownStrategyError(ConfigError):
    """A persisted configuration names a strategy that does not exist."""


# ============================================================================
# Template store errors
# ============================================================================


class StoreError(CSVGenError):
    """The template document could not be read or written."""

"""Column configuration builder.

Turns a user's strategy choice for one column into a validated
GeneratorConfig. List strategies can draw their values from the column's
value pool or from a custom list; when the pool has nothing usable the
builder raises NoSourceValuesError and the caller asks for a custom list.

Typical usage example:
    pool = extract_pool(table, 'status')
    try:
        config = build_config('status', pool, Strategy.CYCLIC_LIST, BuildParams(use_source=True))
    except NoSourceValuesError:
        values = parse_list_input(answer)
        config = build_config('status', pool, Strategy.CYCLIC_LIST, BuildParams(values=values))
"""

import math
import re
from dataclasses import dataclass
from enum import Enum
from typing import Any, List, Optional, Sequence, Union

from csvgen.errors import EmptyListError, InvalidNumberError, NoSourceValuesError
from csvgen.strategies import (
    AlphaFromList,
    CyclicList,
    GeneratorConfig,
    Number,
    NumericFromList,
    NumericRange,
    PrefixedRandomString,
    RandomString,
    SequentialNumeric,
)


class Strategy(Enum):
    """The eight generation choices offered for a column."""

    FROM_SOURCE = "from_source"
    NUMERIC_RANGE = "numeric_range"
    NUMERIC_FROM_LIST = "numeric_from_list"
    ALPHA_FROM_LIST = "alpha_from_list"
    RANDOM_STRING = "random_string"
    PREFIXED_RANDOM_STRING = "prefixed_random_string"
    SEQUENTIAL_NUMERIC = "sequential_numeric"
    CYCLIC_LIST = "cyclic_list"

    @property
    def label(self) -> str:
        return STRATEGY_LABELS[self]

    @property
    def uses_list(self) -> bool:
        return self in LIST_STRATEGIES

    @property
    def numeric(self) -> bool:
        return self is Strategy.NUMERIC_FROM_LIST


STRATEGY_LABELS = {
    Strategy.FROM_SOURCE: "Random alphanumeric (from source file)",
    Strategy.NUMERIC_RANGE: "Random numeric (range)",
    Strategy.NUMERIC_FROM_LIST: "Random numeric (from list)",
    Strategy.ALPHA_FROM_LIST: "Random alphanumeric (from list)",
    Strategy.RANDOM_STRING: "Random alphanumeric strings",
    Strategy.PREFIXED_RANDOM_STRING: "Random alphanumeric with prefix",
    Strategy.SEQUENTIAL_NUMERIC: "Sequential range numeric",
    Strategy.CYCLIC_LIST: "Values from list",
}

LIST_STRATEGIES = frozenset({
    Strategy.FROM_SOURCE,
    Strategy.NUMERIC_FROM_LIST,
    Strategy.ALPHA_FROM_LIST,
    Strategy.CYCLIC_LIST,
})

# Defaults offered when the user does not supply a value
DEFAULT_MIN = 0
DEFAULT_MAX = 100
DEFAULT_LENGTH = 10
DEFAULT_PREFIX = 'ID-'
DEFAULT_PREFIX_LENGTH = 6
DEFAULT_START = 1
DEFAULT_STEP = 1


@dataclass
class BuildParams:
    """Strategy-specific inputs for build_config.

    Attributes:
        use_source: Take list values from the column's value pool.
        values: Custom list values, used when use_source is False.
        min: Lower bound for NUMERIC_RANGE.
        max: Upper bound for NUMERIC_RANGE.
        length: Random segment length for the random string strategies.
        prefix: Literal prefix for PREFIXED_RANDOM_STRING.
        start: First value for SEQUENTIAL_NUMERIC.
        step: Increment for SEQUENTIAL_NUMERIC.
    """

    use_source: bool = False
    values: Optional[Sequence[Any]] = None
    min: Optional[Number] = None
    max: Optional[Number] = None
    length: Optional[int] = None
    prefix: Optional[str] = None
    start: Optional[Number] = None
    step: Optional[Number] = None


_DECIMAL = re.compile(r'^[+-]?(\d+\.?\d*|\.\d+)([eE][+-]?\d+)?$')
_RADIX = re.compile(r'^0([xX][0-9a-fA-F]+|[oO][0-7]+|[bB][01]+)$')


def parse_number(text: Any) -> Optional[Number]:
    """Parse a decimal number the way the source data is expected to hold it.

    Integers become ``int`` and other finite decimals ``float``. Unsigned
    hex, octal and binary literals (``0x1F``, ``0o17``, ``0b101``) are read as
    integers. Surrounding whitespace is ignored. Blank text, NaN and
    infinities are rejected.

    Args:
        text: Value to parse; numbers are returned unchanged if finite.

    Returns:
        The parsed number, or None if the value is not a finite number.
    """
    if isinstance(text, bool):
        return None
    if isinstance(text, (int, float)):
        return text if math.isfinite(text) else None
    if not isinstance(text, str):
        return None

    text = text.strip()
    if _RADIX.match(text):
        return int(text, 0)
    if not _DECIMAL.match(text):
        return None

    try:
        return int(text)
    except ValueError:
        value = float(text)
        return value if math.isfinite(value) else None


def parse_list_input(text: str, numeric: bool = False) -> List[Any]:
    """Split comma-separated user input into list values.

    Entries are trimmed and blank entries dropped.

    Args:
        text: Raw user input such as ``"a, b, c"``.
        numeric: Parse every entry as a number.

    Returns:
        List of strings, or numbers when ``numeric`` is set.

    Raises:
        InvalidNumberError: If ``numeric`` is set and an entry is not a number.
    """
    entries = [entry.strip() for entry in text.split(',')]
    entries = [entry for entry in entries if entry]

    if not numeric:
        return entries

    numbers = []
    for entry in entries:
        number = parse_number(entry)
        if number is None:
            raise InvalidNumberError(f"Not a number: {entry!r}")
        numbers.append(number)
    return numbers


def numeric_pool(pool: Sequence[str]) -> List[Number]:
    """Keep the pool entries that parse as numbers, converted, in order.

    Distinct spellings of one number ("1", "1.0", "01") each keep their own
    entry, so the random pick stays weighted like the source column.
    """
    numbers = []
    for value in pool:
        number = parse_number(value)
        if number is not None:
            numbers.append(number)
    return numbers


def _resolve_values(
    column_name: str,
    pool: Sequence[str],
    choice: Strategy,
    params: BuildParams
) -> List[Any]:
    """Pick the list for a list strategy from the pool or the custom values."""
    if choice is Strategy.FROM_SOURCE or params.use_source:
        values: List[Any] = numeric_pool(pool) if choice.numeric else list(pool)
        if not values:
            kind = "numeric values" if choice.numeric else "values"
            raise NoSourceValuesError(f"No valid {kind} found in column '{column_name}'")
        return values

    values = list(params.values or [])
    if choice.numeric:
        parsed = []
        for value in values:
            number = parse_number(value)
            if number is None:
                raise InvalidNumberError(f"Column '{column_name}': not a number: {value!r}")
            parsed.append(number)
        values = parsed
    else:
        values = [str(value) for value in values]

    if not values:
        raise EmptyListError(f"Column '{column_name}': value list is empty")
    return values


def _default(value: Any, fallback: Any) -> Any:
    return fallback if value is None else value


def build_config(
    column_name: str,
    pool: Sequence[str],
    choice: Union[Strategy, str],
    params: Optional[BuildParams] = None
) -> GeneratorConfig:
    """Build the GeneratorConfig for one column.

    Args:
        column_name: Column the configuration targets.
        pool: Value pool extracted from the source column.
        choice: Strategy (or its value string) chosen for the column.
        params: Strategy inputs; missing scalars fall back to defaults.

    Returns:
        A validated GeneratorConfig.

    Raises:
        NoSourceValuesError: Source values were requested but none are usable.
        EmptyListError: The resolved list is empty.
        InvalidRangeError: NUMERIC_RANGE with min greater than max.
        InvalidNumberError: A custom numeric entry is not a number.
        InvalidLengthError: A random string length is negative.
    """
    choice = Strategy(choice)
    params = params or BuildParams()

    if choice.uses_list:
        values = _resolve_values(column_name, pool, choice, params)
        if choice is Strategy.NUMERIC_FROM_LIST:
            return NumericFromList(header=column_name, values=tuple(values))
        if choice is Strategy.CYCLIC_LIST:
            return CyclicList(header=column_name, values=tuple(values))
        return AlphaFromList(header=column_name, values=tuple(values))

    if choice is Strategy.NUMERIC_RANGE:
        return NumericRange(
            header=column_name,
            min=_default(params.min, DEFAULT_MIN),
            max=_default(params.max, DEFAULT_MAX),
        )

    if choice is Strategy.RANDOM_STRING:
        return RandomString(header=column_name, length=_default(params.length, DEFAULT_LENGTH))

    if choice is Strategy.PREFIXED_RANDOM_STRING:
        return PrefixedRandomString(
            header=column_name,
            prefix=_default(params.prefix, DEFAULT_PREFIX),
            length=_default(params.length, DEFAULT_PREFIX_LENGTH),
        )

    return SequentialNumeric(
        header=column_name,
        start=_default(params.start, DEFAULT_START),
        step=_default(params.step, DEFAULT_STEP),
    )

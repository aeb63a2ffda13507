"""Generator strategy model - how a single column's values are synthesized.

Each strategy is a frozen dataclass carrying the owning column name in
``header`` together with its parameters. Parameters are validated when the
dataclass is constructed, so a config that exists is always usable by the
record synthesizer.

Typical usage example:
    config = NumericRange(header='age', min=18, max=65)
    value = config.generate(row_index=0, rng=random.random)

    data = config.to_dict()
    same = config_from_dict(data)
"""

import math
import string
from dataclasses import dataclass, fields
from typing import Any, Callable, ClassVar, Dict, Tuple, Type, Union

from csvgen.errors import (
    EmptyListError,
    InvalidLengthError,
    InvalidNumberError,
    InvalidRangeError,
    InvalidTextError,
    UnknownStrategyError,
)


Number = Union[int, float]
RNG = Callable[[], float]

# 26 upper + 26 lower + 10 digits
ALPHABET = string.ascii_uppercase + string.ascii_lowercase + string.digits


def _pick_index(rng: RNG, size: int) -> int:
    """Map one rng draw in [0, 1) onto an index in [0, size)."""
    return min(int(math.floor(rng() * size)), size - 1)


def random_string(length: int, rng: RNG) -> str:
    """Draw ``length`` characters uniformly from the alphanumeric alphabet.

    Args:
        length: Number of characters to draw.
        rng: Zero-argument callable returning floats in [0, 1).

    Returns:
        Random string of exactly ``length`` characters.
    """
    return ''.join(ALPHABET[_pick_index(rng, len(ALPHABET))] for _ in range(length))


def _check_length(header: str, length: Any) -> None:
    if isinstance(length, bool) or not isinstance(length, int) or length < 0:
        raise InvalidLengthError(
            f"Column '{header}': length must be a non-negative integer, got {length!r}"
        )


def _check_values(header: str, values: Tuple[Any, ...]) -> None:
    if not values:
        raise EmptyListError(f"Column '{header}': value list is empty")


def _is_number(value: Any) -> bool:
    return (
        isinstance(value, (int, float))
        and not isinstance(value, bool)
        and math.isfinite(value)
    )


def _check_number(header: str, field_name: str, value: Any) -> None:
    if not _is_number(value):
        raise InvalidNumberError(
            f"Column '{header}': {field_name} must be a finite number, got {value!r}"
        )


def _check_numbers(header: str, values: Tuple[Any, ...]) -> None:
    for value in values:
        _check_number(header, 'list entry', value)


def _check_texts(header: str, values: Tuple[Any, ...]) -> None:
    # numbers are allowed, they are written as text
    for value in values:
        if not (isinstance(value, str) or _is_number(value)):
            raise InvalidTextError(f"Column '{header}': list entry {value!r} is not text")


@dataclass(frozen=True)
class GeneratorConfig:
    """Base class for all column strategies.

    Attributes:
        header: Name of the column this strategy fills.
    """

    header: str

    tag: ClassVar[str] = ''
    legacy_tag: ClassVar[str] = ''

    def generate(self, row_index: int, rng: RNG) -> Any:
        """Produce the value for one row.

        Args:
            row_index: Zero-based index of the row being generated.
            rng: Zero-argument callable returning floats in [0, 1).

        Returns:
            The generated value.
        """
        raise NotImplementedError

    def to_dict(self) -> Dict[str, Any]:
        """Convert the config to a JSON-ready dictionary.

        Returns:
            Dictionary with a ``type`` tag, the ``header`` and the parameters.
        """
        result: Dict[str, Any] = {'type': self.tag}
        for f in fields(self):
            value = getattr(self, f.name)
            result[f.name] = list(value) if isinstance(value, tuple) else value
        return result


@dataclass(frozen=True)
class NumericRange(GeneratorConfig):
    """Uniform random number between ``min`` and ``max`` inclusive."""

    min: Number = 0
    max: Number = 100

    tag: ClassVar[str] = 'numeric_range'
    legacy_tag: ClassVar[str] = '1'

    def __post_init__(self) -> None:
        _check_number(self.header, 'min', self.min)
        _check_number(self.header, 'max', self.max)
        if self.min > self.max:
            raise InvalidRangeError(
                f"Column '{self.header}': minimum {self.min} is greater than maximum {self.max}"
            )

    def generate(self, row_index: int, rng: RNG) -> Number:
        # floor() keeps fractional spans from stepping past max
        span = math.floor(self.max - self.min) + 1
        return math.floor(rng() * span) + self.min


@dataclass(frozen=True)
class NumericFromList(GeneratorConfig):
    """Random pick from a list of numbers, drawn independently per row."""

    values: Tuple[Number, ...] = ()

    tag: ClassVar[str] = 'numeric_from_list'
    legacy_tag: ClassVar[str] = '2'

    def __post_init__(self) -> None:
        object.__setattr__(self, 'values', tuple(self.values))
        _check_values(self.header, self.values)
        _check_numbers(self.header, self.values)

    def generate(self, row_index: int, rng: RNG) -> Number:
        return self.values[_pick_index(rng, len(self.values))]


@dataclass(frozen=True)
class AlphaFromList(GeneratorConfig):
    """Random pick from a list of strings, drawn independently per row."""

    values: Tuple[str, ...] = ()

    tag: ClassVar[str] = 'alpha_from_list'
    legacy_tag: ClassVar[str] = '3'

    def __post_init__(self) -> None:
        object.__setattr__(self, 'values', tuple(self.values))
        _check_values(self.header, self.values)
        _check_texts(self.header, self.values)

    def generate(self, row_index: int, rng: RNG) -> str:
        return self.values[_pick_index(rng, len(self.values))]


@dataclass(frozen=True)
class RandomString(GeneratorConfig):
    """Random alphanumeric string of a fixed length."""

    length: int = 10

    tag: ClassVar[str] = 'random_string'
    legacy_tag: ClassVar[str] = '4'

    def __post_init__(self) -> None:
        _check_length(self.header, self.length)

    def generate(self, row_index: int, rng: RNG) -> str:
        return random_string(self.length, rng)


@dataclass(frozen=True)
class SequentialNumeric(GeneratorConfig):
    """Deterministic sequence ``start + row_index * step``."""

    start: Number = 1
    step: Number = 1

    tag: ClassVar[str] = 'sequential_numeric'
    legacy_tag: ClassVar[str] = '5'

    def __post_init__(self) -> None:
        _check_number(self.header, 'start', self.start)
        _check_number(self.header, 'step', self.step)

    def generate(self, row_index: int, rng: RNG) -> Number:
        return self.start + row_index * self.step


@dataclass(frozen=True)
class CyclicList(GeneratorConfig):
    """Values taken from a list in order, wrapping around at the end."""

    values: Tuple[str, ...] = ()

    tag: ClassVar[str] = 'cyclic_list'
    legacy_tag: ClassVar[str] = '6'

    def __post_init__(self) -> None:
        object.__setattr__(self, 'values', tuple(self.values))
        _check_values(self.header, self.values)
        _check_texts(self.header, self.values)

    def generate(self, row_index: int, rng: RNG) -> str:
        return self.values[row_index % len(self.values)]


@dataclass(frozen=True)
class PrefixedRandomString(GeneratorConfig):
    """Literal prefix followed by a random alphanumeric string."""

    prefix: str = 'ID-'
    length: int = 6

    tag: ClassVar[str] = 'prefixed_random_string'
    legacy_tag: ClassVar[str] = '7'

    def __post_init__(self) -> None:
        if not isinstance(self.prefix, str):
            raise InvalidTextError(
                f"Column '{self.header}': prefix must be text, got {self.prefix!r}"
            )
        _check_length(self.header, self.length)

    def generate(self, row_index: int, rng: RNG) -> str:
        return self.prefix + random_string(self.length, rng)


STRATEGY_TYPES: Tuple[Type[GeneratorConfig], ...] = (
    NumericRange,
    NumericFromList,
    AlphaFromList,
    RandomString,
    SequentialNumeric,
    CyclicList,
    PrefixedRandomString,
)

_BY_TAG: Dict[str, Type[GeneratorConfig]] = {}
for _cls in STRATEGY_TYPES:
    _BY_TAG[_cls.tag] = _cls
    _BY_TAG[_cls.legacy_tag] = _cls


def generate_value(config: GeneratorConfig, row_index: int, rng: RNG) -> Any:
    """Generate one value for ``config`` at ``row_index``."""
    return config.generate(row_index, rng)


def config_from_dict(data: Dict[str, Any]) -> GeneratorConfig:
    """Rebuild a GeneratorConfig from its dictionary form.

    Accepts both the current shape (named ``type`` tags, ``values`` field) and
    documents written by the earlier JavaScript tool (tags ``'1'`` to ``'7'``,
    ``list`` field).

    Args:
        data: Dictionary as produced by ``GeneratorConfig.to_dict``.

    Returns:
        The matching GeneratorConfig instance.

    Raises:
        UnknownStrategyError: If the tag is missing or not recognised.
        ConfigError: If the parameters fail validation.
    """
    if not isinstance(data, dict):
        raise UnknownStrategyError(f"Strategy entry is not a mapping: {data!r}")

    tag = str(data.get('type', ''))
    cls = _BY_TAG.get(tag)
    if cls is None:
        raise UnknownStrategyError(f"Unknown strategy type: {tag!r}")

    if 'header' not in data:
        raise UnknownStrategyError(f"Strategy {tag!r} has no column header")

    params = dict(data)
    params.pop('type')
    if 'list' in params and 'values' not in params:
        params['values'] = params.pop('list')

    names = {f.name for f in fields(cls)}
    kwargs = {key: value for key, value in params.items() if key in names}
    return cls(**kwargs)

"""Record synthesizer - builds the output table from column configurations.

Typical usage example:
    configs = [
        SequentialNumeric(header='id', start=1, step=1),
        CyclicList(header='status', values=('open', 'closed')),
    ]
    records = synthesize(configs, row_count=100, rng=make_rng(42))
"""

import random
from typing import Any, Dict, List, Optional, Sequence

from csvgen.errors import DuplicateColumnError, InvalidRowCountError
from csvgen.logsetup import get_logger
from csvgen.strategies import RNG, GeneratorConfig, generate_value


logger = get_logger(__name__)


def make_rng(seed: Optional[int] = None) -> RNG:
    """Return an rng callable, seeded when ``seed`` is given.

    Args:
        seed: Random seed for reproducible output (default: None).

    Returns:
        Zero-argument callable returning floats in [0, 1).
    """
    if seed is None:
        return random.random
    return random.Random(seed).random


def validate_configs(configs: Sequence[GeneratorConfig]) -> None:
    """Check that every configuration targets a distinct column.

    Raises:
        DuplicateColumnError: If two configurations share a header.
    """
    seen = set()
    for config in configs:
        if config.header in seen:
            raise DuplicateColumnError(f"Column '{config.header}' is configured more than once")
        seen.add(config.header)


def column_names(configs: Sequence[GeneratorConfig]) -> List[str]:
    """Output column order for a configuration list."""
    return [config.header for config in configs]


def synthesize(
    configs: Sequence[GeneratorConfig],
    row_count: int,
    rng: Optional[RNG] = None
) -> List[Dict[str, Any]]:
    """Generate ``row_count`` records from the column configurations.

    Each record holds one value per configuration, in configuration order,
    regardless of the column order of any source table.

    Args:
        configs: Ordered column configurations.
        row_count: Number of records to generate.
        rng: Zero-argument callable returning floats in [0, 1); defaults to
            the unseeded module-level generator.

    Returns:
        List of records mapping column name to generated value.

    Raises:
        InvalidRowCountError: If row_count is not a positive integer.
        DuplicateColumnError: If two configurations share a header.
    """
    if isinstance(row_count, bool) or not isinstance(row_count, int) or row_count <= 0:
        raise InvalidRowCountError(f"Row count must be a positive integer, got {row_count!r}")

    validate_configs(configs)
    rng = rng or random.random

    logger.debug("Synthesizing %d records across %d columns", row_count, len(configs))

    records = []
    for row_index in range(row_count):
        record = {}
        for config in configs:
            record[config.header] = generate_value(config, row_index, rng)
        records.append(record)

    return records

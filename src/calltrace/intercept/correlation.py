"""Process-wide correlation id allocator.

Ids only disambiguate interleaved log lines; they carry no ordering
guarantee beyond allocation order.
"""

from __future__ import annotations

import itertools

# next() on itertools.count is atomic under the GIL
_counter = itertools.count()


def next_correlation_id() -> int:
    """Allocate the next id (0, 1, 2, ...). Never reset."""
    return next(_counter)

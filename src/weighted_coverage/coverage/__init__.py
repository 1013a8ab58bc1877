"""Coverage report adapters.

Both supported formats normalize to the same ``CoverageTable``; nothing
downstream of the adapters branches on the original format.
"""

from ..environment import normalize_path
from .base import CoverageAdapter
from .covdir import CovdirAdapter
from .coveralls import CoverallsAdapter

COVERAGE_FORMATS = ("coveralls", "covdir")


def get_adapter(name: str) -> CoverageAdapter:
    """Get a coverage adapter by format name.

    Args:
        name: One of "coveralls", "covdir"

    Returns:
        Adapter instance

    Raises:
        ValueError: If name is not recognized
    """
    adapters = {
        "coveralls": CoverallsAdapter,
        "covdir": CovdirAdapter,
    }
    cls = adapters.get(name)
    if cls is None:
        raise ValueError(
            f"Unknown coverage format: {name!r}. Choose from: {', '.join(sorted(adapters))}"
        )
    return cls()


__all__ = [
    "COVERAGE_FORMATS",
    "CoverageAdapter",
    "CoverallsAdapter",
    "CovdirAdapter",
    "get_adapter",
    "normalize_path",
]

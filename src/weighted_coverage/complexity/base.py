"""Base interface for complexity providers."""

from abc import ABC, abstractmethod
from pathlib import PurePosixPath
from typing import List, Tuple

from ..models import CodeSpace


class ComplexityProvider(ABC):
    """Turns the source text of one file into its code spaces."""

    name: str = ""
    extensions: Tuple[str, ...] = ()

    def supports(self, path: str) -> bool:
        return PurePosixPath(path).suffix.lower() in self.extensions

    @abstractmethod
    def extract(self, path: str, source: str) -> List[CodeSpace]:
        """Return the code spaces of ``source``, outermost first.

        Raises:
            PerFileError: If the source cannot be analyzed
        """

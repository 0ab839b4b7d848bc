"""
Global trace id assembly.
"""

from typing import Iterable, Optional, Union


class TraceIdAccumulator:
    """Joins the parts of the first global trace id seen in a segment."""

    SEPARATOR = '.'

    def __init__(self):
        self._trace_id: Optional[str] = None

    @property
    def trace_id(self) -> Optional[str]:
        return self._trace_id

    def accept(self, id_parts: Iterable[Union[int, str]]) -> Optional[str]:
        """
        Record a global trace id unless one has already been recorded.

        Args:
            id_parts: Ordered identifier parts, e.g. [1, 2, 3]

        Returns:
            The trace id in effect after the call
        """
        if self._trace_id is None:
            self._trace_id = self.SEPARATOR.join(str(part) for part in id_parts)
        return self._trace_id

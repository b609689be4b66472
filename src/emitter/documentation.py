"""
Leading comment lookup used to re-attach documentation to definitions.

Comments are recorded by the parser as byte spans whose end includes the line
terminator. A definition rendered at indentation ``n`` is documented by the
comment that ends exactly ``2 * n`` bytes before the definition starts; earlier
comments belong to the same block while they are separated only by that same
indentation.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Dict, List, Sequence, Union

from .context import INDENT_UNIT

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Comment:
    begin: int
    end: int


class DocumentationContext:
    def __init__(
        self,
        comments: Sequence[Comment],
        source: Union[str, bytes],
        *,
        exclude_method_body: bool = False,
    ) -> None:
        self._comments: List[Comment] = sorted(comments, key=lambda c: c.begin)
        self._source = source.encode("utf-8") if isinstance(source, str) else source
        self._exclude_method_body = exclude_method_body
        self._index_by_end: Dict[int, int] = {
            comment.end: index for index, comment in enumerate(self._comments)
        }

    @property
    def method_body_excluded(self) -> bool:
        return self._exclude_method_body

    def leading_comments(self, indent: int, node_begin: int) -> List[Comment]:
        """Return the contiguous comment block that ends right before ``node_begin``."""
        offset = len(INDENT_UNIT) * indent
        last = self._index_by_end.get(node_begin - offset)
        if last is None:
            return []
        first = last
        while True:
            previous = self._index_by_end.get(self._comments[first].begin - offset)
            if previous is None or previous >= first:
                break
            first = previous
        return self._comments[first : last + 1]

    def write_documentation(self, sink, indent: int, node_begin: int) -> int:
        """
        Write the leading comments of a node, each followed by the indentation.

        Returns the number of comments written.
        """
        comments = self.leading_comments(indent, node_begin)
        padding = INDENT_UNIT * indent
        for comment in comments:
            text = self._source[comment.begin : comment.end].decode("utf-8")
            sink.write(text)
            if not text.endswith("\n"):
                sink.write("\n")
            sink.write(padding)
        if comments:
            logger.debug("Attached %d comment(s) at offset %d", len(comments), node_begin)
        return len(comments)


__all__ = ["Comment", "DocumentationContext"]

"""Tag stream cursor with one-record lookahead."""

from __future__ import annotations

import io
from typing import Iterator, List, Optional

from ezdxf.lldxf.const import DXFStructureError
from ezdxf.lldxf.tagger import ascii_tags_loader
from ezdxf.lldxf.types import DXFTag

from dxf_cad_editor.errors import FormatError


def load_tags(text: str) -> List[DXFTag]:
    """
    Split DXF text into (group code, value) tags.

    Line endings are normalized first. Record names (code 0) are stripped of
    the padding some writers put around them; every other value is kept as
    written, since leading and trailing spaces in text are content. Numeric
    values tolerate padding when they are converted.

    Raises:
        FormatError: a group code line is not an integer
    """
    text = text.replace("\r\n", "\n").replace("\r", "\n")
    try:
        return [
            DXFTag(tag.code, tag.value.strip()) if tag.code == 0 else tag
            for tag in ascii_tags_loader(io.StringIO(text))
        ]
    except DXFStructureError as exc:
        raise FormatError(str(exc)) from exc


class TagCursor:
    """
    Position over a tag list.

    Code 0 both ends the current record and starts the next one, so readers
    consume attributes until they meet a code-0 tag and push it back with
    ``unread`` for the caller that owns record boundaries.
    """

    def __init__(self, tags: List[DXFTag]):
        self._tags = tags
        self._pos = 0

    @classmethod
    def from_text(cls, text: str) -> "TagCursor":
        return cls(load_tags(text))

    @property
    def at_end(self) -> bool:
        return self._pos >= len(self._tags)

    @property
    def position(self) -> int:
        return self._pos

    def next(self) -> DXFTag:
        if self.at_end:
            raise FormatError("unexpected end of DXF stream")
        tag = self._tags[self._pos]
        self._pos += 1
        return tag

    def peek(self) -> Optional[DXFTag]:
        if self.at_end:
            return None
        return self._tags[self._pos]

    def unread(self) -> None:
        if self._pos == 0:
            raise FormatError("cannot unread before the first tag")
        self._pos -= 1

    def attributes(self) -> Iterator[DXFTag]:
        """Yield the non-zero tags of the current record, leaving the next code-0 tag unread."""
        while not self.at_end:
            tag = self.next()
            if tag.code == 0:
                self.unread()
                return
            yield tag

    def skip_record(self) -> None:
        for _ in self.attributes():
            pass

    def expect_record(self) -> str:
        """Value of the next code-0 tag; end of stream is a structural error."""
        tag = self.next()
        if tag.code != 0:
            raise FormatError(f"expected a record start at tag {self._pos}, got code {tag.code}")
        return tag.value

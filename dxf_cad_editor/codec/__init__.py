"""DXF text codec: tag cursor, reader and writer."""

from dxf_cad_editor.codec.tags import TagCursor, load_tags
from dxf_cad_editor.codec.reader import decode, read_file
from dxf_cad_editor.codec.writer import encode, write_file

__all__ = [
    "TagCursor",
    "load_tags",
    "decode",
    "read_file",
    "encode",
    "write_file",
]

"""Drawing inspection and summarization."""

from dxf_cad_editor.inspect.summary import (
    summarize_drawing,
    write_summary_json,
)

__all__ = [
    "summarize_drawing",
    "write_summary_json",
]

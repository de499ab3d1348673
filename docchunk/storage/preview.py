"""Static HTML page for eyeballing a chunk set."""

from html import escape

from docchunk.models.chunk import Chunk, ChunksOutput

_STYLE = """
body { font-family: sans-serif; max-width: 1100px; margin: 0 auto; padding: 20px; background: #f5f5f5; }
header { background: #2c3e50; color: #fff; padding: 16px; border-radius: 6px; }
.chunk { background: #fff; border-radius: 6px; margin: 12px 0; box-shadow: 0 1px 3px rgba(0,0,0,.1); }
.chunk.figure-caption { border-left: 4px solid #e74c3c; }
.chunk-header { background: #ecf0f1; padding: 8px 12px; font-size: 13px; }
.breadcrumb { color: #7f8c8d; padding: 6px 12px 0; font-size: 13px; }
.content { white-space: pre-wrap; padding: 8px 12px 12px; }
.figures { padding: 0 12px 10px; font-size: 13px; color: #2980b9; }
"""


def render_preview(output: ChunksOutput) -> str:
    """Render every chunk with its id, pages, tokens, breadcrumb and text."""
    body = "\n".join(_render_chunk(chunk) for chunk in output.chunks)
    title = escape(output.document_id)
    return (
        "<!DOCTYPE html>\n"
        '<html lang="en">\n<head>\n<meta charset="UTF-8">\n'
        f"<title>Chunk Preview - {title}</title>\n<style>{_STYLE}</style>\n</head>\n<body>\n"
        f"<header><h1>{title}</h1>"
        f"<div>{output.total_chunks} chunks, generated {escape(output.generated_at.isoformat())}"
        "</div></header>\n"
        f"{body}\n</body>\n</html>\n"
    )


def _render_chunk(chunk: Chunk) -> str:
    classes = "chunk figure-caption" if chunk.is_figure_caption else "chunk"
    pages = ", ".join(str(p) for p in chunk.page_numbers)
    meta = f"pages {pages} | {chunk.token_count} tokens"
    if chunk.overlap_tokens:
        meta += f" | overlap {chunk.overlap_tokens}"
    figures = ""
    if chunk.figure_references:
        figures = '<div class="figures">' + ", ".join(
            escape(ref.figure_id) for ref in chunk.figure_references
        ) + "</div>"
    return (
        f'<div class="{classes}" id="{escape(chunk.chunk_id)}">'
        f'<div class="chunk-header"><strong>{escape(chunk.chunk_id)}</strong> | {meta}</div>'
        f'<div class="breadcrumb">{escape(" > ".join(chunk.breadcrumb))}</div>'
        f'<div class="content">{escape(chunk.content)}</div>'
        f"{figures}</div>"
    )

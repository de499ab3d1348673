"""Loading pipeline inputs and writing its outputs."""

from docchunk.storage.files import load_document, load_figure_map, write_outputs

__all__ = ["load_document", "load_figure_map", "write_outputs"]

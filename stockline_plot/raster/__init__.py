from .canvas import RGBA, new_canvas
from .draw_fill import fill_polygon_gradient, polygon_mask
from .draw_lines import draw_polyline
from .draw_markers import draw_disc
from .draw_text import draw_text, text_size
from .layers import DirtyState

__all__ = [
    "DirtyState",
    "RGBA",
    "draw_disc",
    "draw_polyline",
    "draw_text",
    "fill_polygon_gradient",
    "new_canvas",
    "polygon_mask",
    "text_size",
]

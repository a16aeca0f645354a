"""
SVG geometry for the heatmap.

Turns a HeatmapLayout into plain positions and colors that the
templates draw.
"""

from git_heatmap.colors import palette_for
from git_heatmap.layout import DAYS_PER_WEEK, HeatmapLayout

BLOCK_SIZE = 12
BLOCK_GAP = 2
MARGIN_X = 25
MARGIN_Y = 20
STEP = BLOCK_SIZE + BLOCK_GAP


def render_svg_model(layout: HeatmapLayout, theme: str = "light") -> dict:
    """
    Compute the drawable model of a heatmap.

    Args:
        layout: Grid to draw
        theme: "light" or "dark"; chosen once for the whole render

    Returns:
        Dictionary with width, height, offset, rects, weekday_labels,
        month_labels and legend
    """
    colors = palette_for(theme)

    width = layout.total_weeks * STEP + MARGIN_X * 2
    height = DAYS_PER_WEEK * STEP + MARGIN_Y + 25

    rects = []
    for (row, col), cell in sorted(layout.cells.items(), key=lambda item: item[1].date):
        rects.append({
            "row": row,
            "col": col,
            "x": col * STEP,
            "y": row * STEP,
            "fill": colors[cell.level],
            "level": cell.level,
            "date": cell.date_str,
            "count": cell.count,
            "tooltip": cell.tooltip,
        })

    weekday_labels = [
        {"text": text, "x": -5, "y": row * STEP + BLOCK_SIZE - 2}
        for row, text in sorted(layout.weekday_labels.items())
    ]
    month_labels = [
        {"text": label.text, "x": label.col * STEP, "y": -6}
        for label in layout.month_labels
    ]

    legend_width = len(colors) * STEP + 60
    legend_x = width - MARGIN_X - legend_width + 20
    legend_y = height - 5
    legend = {
        "less": {"text": "Less", "x": legend_x + 15, "y": legend_y - 3},
        "more": {"text": "More", "x": legend_x + 20 + len(colors) * STEP + 5, "y": legend_y - 3},
        "swatches": [
            {"x": legend_x + 20 + i * STEP, "y": legend_y - BLOCK_SIZE, "fill": color}
            for i, color in enumerate(colors)
        ],
    }

    return {
        "theme": theme,
        "width": width,
        "height": height,
        "offset_x": MARGIN_X,
        "offset_y": MARGIN_Y,
        "block_size": BLOCK_SIZE,
        "rects": rects,
        "weekday_labels": weekday_labels,
        "month_labels": month_labels,
        "legend": legend,
    }

"""
Map daily commit counts to heatmap intensity levels and colors.
"""

# GitHub-style green ramp, level 0 through 4
PALETTE = {
    "light": ["#ebedf0", "#9be9a8", "#40c463", "#30a14e", "#216e39"],
    "dark": ["#161b22", "#0e4429", "#006d32", "#26a641", "#39d353"],
}

LEVEL_COUNT = 5


def color_level(count: int) -> int:
    """
    Calculate intensity level for heatmap coloring.

    Args:
        count: Number of commits for the day

    Returns:
        Level from 0-4:
            0: No commits
            1: 1-3 commits
            2: 4-6 commits
            3: 7-10 commits
            4: 11+ commits
    """
    if count <= 0:
        return 0
    elif count <= 3:
        return 1
    elif count <= 6:
        return 2
    elif count <= 10:
        return 3
    else:
        return 4


def palette_for(theme: str) -> list[str]:
    """Return the five-color palette for a theme name."""
    try:
        return PALETTE[theme]
    except KeyError:
        raise ValueError(f"Unknown theme: {theme!r}")


def color_for(count: int, theme: str = "light") -> str:
    return palette_for(theme)[color_level(count)]

"""
git-heatmap: a commit-activity heatmap for local git history.
"""

__version__ = "0.1.0"

"""Color scheme and constants for rules.d CLI."""

# Color scheme
COLORS = {
    "primary": "#10b981",      # Emerald green - headings
    "dim": "#6b7280",          # Gray - secondary text
    "id": "cyan",              # Rule ids in tables
    "error": "red",
    "warning": "yellow",
}

# Priority column colors, most severe first
PRIORITY_COLORS = {
    "critical": "bold red",
    "high": "#f97316",         # Orange
    "medium": "#fbbf24",       # Amber
    "low": "#6b7280",          # Gray
}

# Maximum title length in tables
MAX_TITLE_LENGTH = 60

# Rule ids shown per bundle in the bundles overview
MAX_BUNDLE_IDS = 5

"""Centralized symbols for consistent log and prompt output."""


class LogSymbols:
    """Unicode symbols for log messages and prompts."""
    
    SUCCESS = "✓"
    ERROR = "✗"
    ERROR_BOLD = "❌"     # U+274C - Cross mark (bold error for dialogs)
    WARNING = "⚠️"
    INSTALLED = "✓"
    MIGRATED = "↑"
    
    # List and formatting
    BULLET = "•"         # U+2022 - Bullet point for lists
    TREE_BRANCH = "├─"   # Catalog tree rendering
    TREE_LAST = "└─"

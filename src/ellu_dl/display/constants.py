"""Constants for the Rich display and log output."""

# Emoji shown next to book fields, progress bars and results
EMOJI_MAP = {
    "book": "📚",
    "author": "👤",
    "catalog": "🔖",
    "chapters": "📥",
    "images": "🖼️",
    "success": "✓",
    "error": "✗",
}

# Console records carry only the message; RichHandler adds time and level
LOG_FORMAT = "%(message)s"
FILE_LOG_FORMAT = "[%(asctime)s] %(levelname)s %(name)s: %(message)s"
DATE_FORMAT = "%d/%b/%Y %H:%M:%S"

PROGRESS_COLORS = {
    "complete": "green",
    "finished": "bright_green",
}

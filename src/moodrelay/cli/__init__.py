"""CLI frontend for moodrelay.

Operator commands for checking and querying the analysis backend.

Commands:
    moodrelay check     Validate configuration and backend health
    moodrelay analyze   Analyze a single message
    moodrelay stats     Show today's team mood statistics
    moodrelay trends    Show historical mood trends

Example:
    $ export BACKEND_API_URL=https://mood-backend.example.com
    $ moodrelay check
    $ moodrelay analyze "I'm feeling overwhelmed with work"
    $ moodrelay trends --days 14 --json
"""

from moodrelay.cli.main import main

__all__ = ["main"]

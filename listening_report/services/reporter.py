"""Console rendering of leaderboards"""
import sys
from typing import Callable, Optional, Sequence, TextIO

from listening_report.models.report import LeaderboardRow, Summary

# ANSI escape codes for terminal display
STYLE_CODES = {
    "gold": "33",    # Yellow
    "silver": "37",  # White
    "bronze": "31",  # Red
    "title": "1",    # Bold
    "plain": None,
}

UNKNOWN_LABEL = "Unknown"

RowFormatter = Callable[[int, LeaderboardRow], str]


def rank_style(rank: int) -> str:
    """Style token for a 1-based rank"""
    return {1: "gold", 2: "silver", 3: "bronze"}.get(rank, "plain")


def format_row(rank: int, metric, label, secondary: Optional[str] = None) -> str:
    """
    Format a leaderboard line as '<rank>. <metric> - <label>[ by <secondary>]'.
    A missing label (the group of events without a track, artist or album) prints as 'Unknown'.
    """
    line = f"{rank}. {metric} - {label or UNKNOWN_LABEL}"
    if secondary:
        line += f" by {secondary}"
    return line


def _time_formatter(rank: int, row: LeaderboardRow) -> str:
    return format_row(rank, f"{row.minutes} mins ({row.hours} hrs)", row.key)

def _count_formatter(rank: int, row: LeaderboardRow) -> str:
    return format_row(rank, f"{row.count} plays", row.key)

def _track_time_formatter(rank: int, row: LeaderboardRow) -> str:
    return format_row(rank, f"{row.minutes} mins ({row.hours} hrs)", row.track_name, row.artist_name)

def _track_count_formatter(rank: int, row: LeaderboardRow) -> str:
    return format_row(rank, f"{row.count} plays", row.track_name, row.artist_name)

def _album_time_formatter(rank: int, row: LeaderboardRow) -> str:
    return format_row(rank, f"{row.minutes} mins ({row.hours} hrs)", row.key, row.artist_name)

def _album_count_formatter(rank: int, row: LeaderboardRow) -> str:
    return format_row(rank, f"{row.count} track plays", row.key, row.artist_name)


LEADERBOARD_FORMATTERS = {
    'Top Tracks by Time': _track_time_formatter,
    'Top Tracks by Count': _track_count_formatter,
    'Top Artists by Time': _time_formatter,
    'Top Artists by Count': _count_formatter,
    'Top Albums by Time': _album_time_formatter,
    'Top Albums by Count': _album_count_formatter,
    'Top Days by Time': _time_formatter,
    'Top Days by Count': _count_formatter,
}


class Reporter:
    """Writes the summary line and ranked leaderboards to a text stream"""

    def __init__(self, stream: Optional[TextIO] = None, color: bool = True):
        self.stream = stream or sys.stdout
        self.color = color

    def _write(self, line: str = "") -> None:
        self.stream.write(line + "\n")

    def styled(self, text: str, style: str) -> str:
        code = STYLE_CODES.get(style)
        if not self.color or code is None:
            return text
        return f"\033[{code}m{text}\033[0m"

    def print_summary(self, summary: Optional[Summary], unique_tracks: Optional[int]) -> None:
        """Leading line; absent results print as zero"""
        minutes = summary.minutes if summary else 0
        tracks = unique_tracks or 0
        self._write(f"You listened to {minutes} minutes of music across {tracks} unique tracks.")
        self._write()

    def print_leaderboard(self, title: str, rows: Sequence[LeaderboardRow],
                          formatter: Optional[RowFormatter] = None) -> None:
        """Title banner, rows in the order given, then a blank separator"""
        formatter = formatter or LEADERBOARD_FORMATTERS.get(title, _time_formatter)
        banner = f"===== {title} ====="
        self._write(self.styled(banner, "title"))
        for rank, row in enumerate(rows, start=1):
            self._write(self.styled(formatter(rank, row), rank_style(rank)))
        self._write()

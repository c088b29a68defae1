#!/usr/bin/env python3
"""
MLB Free Game Schedule Scraper

Fetches the MLB.TV "Free Game of the Day" page and extracts the listed
broadcasts into Game records.

The page has no API behind it, so everything here leans on the markup:
- Schedule regions are <div data-slug="..."> blocks
- Each date is a bolded label inside a <p> ("October 1")
- The <div> right after that <p> holds "Orioles vs. Rays, 7:35 p.m."

The markup is not under our control. Anything that doesn't match is skipped
and logged rather than raised, so one odd entry never costs the whole feed.

Usage:
    python scraper.py            # print the parsed games
"""

import logging
import re
import urllib.request
from dataclasses import dataclass
from datetime import date, datetime, timedelta
from typing import Optional
from zoneinfo import ZoneInfo

from bs4 import BeautifulSoup, Tag

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)

# Times on the page are US Eastern; everything we emit is UTC
EASTERN = ZoneInfo("America/New_York")
UTC = ZoneInfo("UTC")

MLB_URL = "https://www.mlb.com/live-stream-games/free-game-of-the-day"
FETCH_TIMEOUT = 30
GAME_DURATION_HOURS = 3

# data-slug values of the two schedule sections on the page
SCHEDULE_SECTIONS = [
    'mlb-tv-fgod-next-five-games',
    'mlbtv-free-game-schedule-accordion',
]

MONTHS = {
    'jan': 1, 'feb': 2, 'mar': 3, 'apr': 4, 'may': 5, 'jun': 6,
    'jul': 7, 'aug': 8, 'sep': 9, 'oct': 10, 'nov': 11, 'dec': 12
}

# "October 1", "Oct. 1", "Wednesday, October 1"
DATE_LABEL_RE = re.compile(r'^(?:[A-Za-z]+,\s*)?([A-Za-z]+)\.?\s+(\d{1,2})(?:st|nd|rd|th)?\b')
# "Orioles vs. Rays", "Red Sox vs. Blue Jays" - one or two words a side
TEAMS_RE = re.compile(r'([A-Za-z]\w*(?:\s+[A-Za-z]\w*)?)\s*vs\.\s*([A-Za-z]\w*(?:\s+[A-Za-z]\w*)?)')
# "7:35 p.m.", "7:35pm", "12:10 P.M."
TIME_RE = re.compile(r'(\d{1,2}):(\d{2})\s*([ap])\.?\s*m\b\.?', re.IGNORECASE)


@dataclass(frozen=True)
class Game:
    summary: str
    start: datetime
    home_team: str
    away_team: str
    duration_hours: int = GAME_DURATION_HOURS

    @property
    def end(self) -> datetime:
        return self.start + timedelta(hours=self.duration_hours)


def clean(s: str) -> str:
    """Collapse whitespace runs into single spaces."""
    return " ".join(s.split())


def fetch_url(url: str, headers: dict = None) -> str:
    """Fetch a URL and return its body, or "" if anything goes wrong."""
    default_headers = {
        'User-Agent': 'Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36'
    }
    if headers:
        default_headers.update(headers)

    req = urllib.request.Request(url, headers=default_headers)
    try:
        with urllib.request.urlopen(req, timeout=FETCH_TIMEOUT) as response:
            charset = response.headers.get_content_charset() or 'utf-8'
            return response.read().decode(charset, errors='replace')
    except Exception as e:
        logger.error(f"Failed to fetch {url}: {e}")
        return ""


def parse_html(markup: str) -> BeautifulSoup:
    return BeautifulSoup(markup, 'html.parser')


def select_nodes(node: Tag, selector: str) -> list[Tag]:
    """Return the nodes under `node` matching a CSS selector, in document order."""
    return list(node.select(selector))


def find_schedule_entries(soup: BeautifulSoup) -> list[tuple[str, str]]:
    """Pair each date label with the text of the game block that follows it.

    Walks the schedule sections in the order of SCHEDULE_SECTIONS. Within a
    section, every <b> directly inside a <p> is taken as a date label, and the
    element immediately after that <p> must be a <div> holding the game text.
    Labels with no such <div> are dropped.
    """
    entries = []
    for slug in SCHEDULE_SECTIONS:
        sections = select_nodes(soup, f'div[data-slug="{slug}"]')
        if not sections:
            logger.debug(f"No schedule section found for {slug}")

        for section in sections:
            for label_node in select_nodes(section, 'p > b'):
                label = clean(label_node.get_text())
                paragraph = label_node.find_parent('p')
                block = None
                if paragraph is not None:
                    block = next((s for s in paragraph.next_siblings if isinstance(s, Tag)), None)

                if block is None or block.name != 'div':
                    logger.debug(f"No game block after date label '{label}'")
                    continue

                entries.append((label, clean(block.get_text())))

    return entries


def parse_date_label(label: str, year: int) -> Optional[date]:
    """Parse a "Month Day" label (no year on the page) into a date in `year`.

    Accepts full or abbreviated month names, a trailing period after the
    abbreviation, and a leading weekday: "October 1", "Sept. 30",
    "Wednesday, Oct. 1".
    """
    match = DATE_LABEL_RE.match(label.strip())
    if not match:
        return None

    month = MONTHS.get(match.group(1).lower()[:3])
    if month is None:
        return None

    try:
        return date(year, month, int(match.group(2)))
    except ValueError:
        return None


def parse_teams(text: str) -> Optional[tuple[str, str]]:
    """Find the "Team vs. Team" pair in a game block's text."""
    match = TEAMS_RE.search(text)
    if not match:
        return None
    return match.group(1).strip(), match.group(2).strip()


def parse_game_time(text: str) -> Optional[tuple[int, int]]:
    """Find a 12-hour clock time ("7:35 p.m.") and return it as (hour, minute) on a 24-hour clock."""
    match = TIME_RE.search(text)
    if not match:
        return None

    hour, minute = int(match.group(1)), int(match.group(2))
    if not 1 <= hour <= 12 or minute > 59:
        return None

    meridiem = match.group(3).lower()
    if meridiem == 'p' and hour != 12:
        hour += 12
    elif meridiem == 'a' and hour == 12:
        hour = 0
    return hour, minute


def build_game(label: str, text: str, year: int) -> Optional[Game]:
    """Turn one date label plus game block text into a Game, or None if it doesn't fit."""
    teams = parse_teams(text)
    game_time = parse_game_time(text)
    if not teams or not game_time:
        logger.debug(f"Skipping '{label}': no teams/time in '{text}'")
        return None

    game_date = parse_date_label(label, year)
    if game_date is None:
        logger.warning(f"Could not parse date label: '{label}' ({year})")
        return None

    home, away = teams
    hour, minute = game_time
    local_start = datetime(game_date.year, game_date.month, game_date.day,
                           hour, minute, tzinfo=EASTERN)

    logger.debug(f"Found game: {label} {home} vs {away} at {hour:02d}:{minute:02d} ET")
    return Game(
        summary=f"MLB Free Game: {home} vs. {away}",
        start=local_start.astimezone(UTC),
        home_team=home,
        away_team=away,
    )


def extract_games(markup: str, year: int = None) -> list[Game]:
    """Extract games from the page markup, in the order they appear.

    The page never prints a year, so `year` defaults to the current one.
    """
    if not markup:
        return []
    if year is None:
        year = datetime.now(EASTERN).year

    soup = parse_html(markup)
    games = []
    for label, text in find_schedule_entries(soup):
        game = build_game(label, text, year)
        if game:
            games.append(game)

    logger.info(f"Successfully parsed {len(games)} games.")
    return games


def get_mlb_schedule(url: str = MLB_URL, year: int = None) -> list[Game]:
    """Fetch the free game page and parse it. Returns [] on any failure."""
    try:
        return extract_games(fetch_url(url), year=year)
    except Exception:
        logger.exception("Error fetching or parsing MLB schedule")
        return []


if __name__ == '__main__':
    for g in get_mlb_schedule():
        print(f"{g.start.astimezone(EASTERN).strftime('%b %d %I:%M%p')} ET  {g.home_team} vs. {g.away_team}")

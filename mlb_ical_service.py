#!/usr/bin/env python3
"""
MLB Free Game iCal Subscription Service

A self-contained service that:
1. Scrapes the MLB.TV Free Game of the Day schedule from mlb.com
2. Generates an iCal file
3. Serves it via HTTP for calendar subscription

Every request for the feed re-fetches the page, so the calendar is always
as current as mlb.com. Nothing is cached between requests.

Requirements:
    pip install -e .

Usage:
    # Run the service (port 3000, or $PORT)
    python mlb_ical_service.py

    # Optional JSON config (source_url, calendar_name, host, port, public_url)
    python mlb_ical_service.py --config config.json

    # Scrape once and print the ICS to stdout
    python mlb_ical_service.py --once

    # Subscribe in your calendar app to:
    # http://YOUR_IP:3000/mlb-free-games.ics
"""

import argparse
import json
import logging
import os
import socket
import sys
from datetime import datetime

from flask import Flask, Response
from icalendar import Calendar, Event

from scraper import MLB_URL, UTC, Game, get_mlb_schedule

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)

FEED_PATH = '/mlb-free-games.ics'
CALENDAR_NAME = 'MLB.TV Free Game of the Day (Live)'
EVENT_DESCRIPTION = 'MLB.TV Free Game of the Day. Schedule is subject to change. Watch live on MLB.TV.'

DEFAULT_CONFIG = {
    'source_url': MLB_URL,
    'calendar_name': CALENDAR_NAME,
    'host': '0.0.0.0',
    'port': 3000,
    'public_url': '',
}


def load_config(path: str = None) -> dict:
    """Build the service config: defaults, then the JSON file, then environment."""
    config = DEFAULT_CONFIG.copy()

    if path:
        with open(path) as f:
            config.update(json.load(f))

    if os.environ.get('PORT'):
        config['port'] = int(os.environ['PORT'])
    if os.environ.get('MLB_URL'):
        config['source_url'] = os.environ['MLB_URL']
    if os.environ.get('PUBLIC_URL'):
        config['public_url'] = os.environ['PUBLIC_URL']

    config['port'] = int(config['port'])
    return config


def make_uid(game: Game) -> str:
    """Stable UID: same game, same UID, no matter when the feed is built."""
    day = game.start.astimezone(UTC).strftime('%Y%m%d')
    home = ''.join(game.home_team.split())
    away = ''.join(game.away_team.split())
    return f'{day}-{home}-{away}@mlb.free.game'


def generate_ical(games: list[Game], calendar_name: str = CALENDAR_NAME) -> bytes:
    """Generate iCalendar content."""
    cal = Calendar()
    cal.add('prodid', '-//MLB Free Game Calendar//mlb-ical//EN')
    cal.add('version', '2.0')
    cal.add('calscale', 'GREGORIAN')
    cal.add('method', 'PUBLISH')
    cal.add('x-wr-calname', calendar_name)
    cal.add('x-wr-timezone', 'UTC')

    stamp = datetime.now(UTC).replace(microsecond=0)

    for game in games:
        event = Event()
        event.add('dtstamp', stamp)
        event.add('uid', make_uid(game))
        event.add('dtstart', game.start.astimezone(UTC))
        event.add('dtend', game.end.astimezone(UTC))
        event.add('summary', game.summary)
        event.add('description', EVENT_DESCRIPTION)
        cal.add_component(event)

    return cal.to_ical()


def create_app(config: dict):
    """Create Flask app."""
    app = Flask(__name__)

    @app.route('/')
    def index():
        feed_url = f"{config.get('public_url', '').rstrip('/')}{FEED_PATH}"
        return f"""
        <html>
        <head><title>MLB Calendar Feed Server</title></head>
        <body style="font-family: sans-serif; max-width: 600px; margin: 40px auto; padding: 20px;">
            <h1>MLB Calendar Feed Server</h1>
            <p>To subscribe to the feed, use the URL: <strong>{feed_url}</strong></p>

            <h3>Instructions:</h3>
            <ul>
                <li><strong>Google Calendar:</strong> Other calendars (+) &rarr; From URL</li>
                <li><strong>Apple Calendar:</strong> File &rarr; New Calendar Subscription</li>
                <li><strong>Outlook:</strong> Add calendar &rarr; Subscribe from web</li>
            </ul>
        </body>
        </html>
        """

    @app.route(FEED_PATH)
    def serve_calendar():
        logger.info("Received request for calendar feed.")

        games = get_mlb_schedule(config.get('source_url', MLB_URL))
        if not games:
            return Response(
                "Could not fetch MLB schedule at this time.",
                status=503,
                mimetype='text/plain'
            )

        return Response(
            generate_ical(games, config.get('calendar_name', CALENDAR_NAME)),
            mimetype='text/calendar',
            headers={
                'Content-Disposition': 'attachment; filename=mlb-schedule.ics',
                'Cache-Control': 'no-cache, no-store, must-revalidate',
            }
        )

    return app


def main(argv: list[str] = None) -> int:
    parser = argparse.ArgumentParser(description='MLB Free Game iCal Subscription Service')
    parser.add_argument('--config', '-c', help='Config file (JSON)')
    parser.add_argument('--port', '-p', type=int, help='HTTP port (default: $PORT or 3000)')
    parser.add_argument('--host', help='Bind address (default: 0.0.0.0)')
    parser.add_argument('--once', action='store_true', help='Scrape once and output ICS to stdout')

    args = parser.parse_args(argv)

    config = load_config(args.config)
    if args.port:
        config['port'] = args.port
    if args.host:
        config['host'] = args.host

    # One-shot mode
    if args.once:
        games = get_mlb_schedule(config['source_url'])
        if not games:
            logger.warning("No games found")
            return 1
        sys.stdout.write(generate_ical(games, config['calendar_name']).decode('utf-8'))
        return 0

    # Get local IP
    hostname = socket.gethostname()
    try:
        local_ip = socket.gethostbyname(hostname)
    except Exception:
        local_ip = "localhost"

    print(f"\nMLB Free Game iCal Subscription Service")
    print(f"   Source: {config['source_url']}")
    print(f"\nServer starting...")
    print(f"   Subscribe URL: http://{local_ip}:{config['port']}{FEED_PATH}")
    print(f"\n   Add this URL to:")
    print(f"   - Google Calendar: Other calendars (+) -> From URL")
    print(f"   - Apple Calendar: File -> New Calendar Subscription")
    print(f"   - Outlook: Add calendar -> Subscribe from web")
    print(f"\n   Press Ctrl+C to stop\n")

    app = create_app(config)
    logger.info(f"Server is listening on port {config['port']}")
    try:
        app.run(host=config['host'], port=config['port'], debug=False, threaded=True)
    except KeyboardInterrupt:
        print("\nService stopped.")
    return 0


if __name__ == '__main__':
    sys.exit(main())

import pytest


def schedule_page(*sections):
    """Wrap (slug, [(date_label, block_text), ...]) sections in a minimal page."""
    parts = ['<html><body>', '<div class="header"><p><b>Not a date</b></p><div>Yankees vs. Mets, 1:05 p.m.</div></div>']
    for slug, entries in sections:
        parts.append(f'<div data-slug="{slug}">')
        for label, text in entries:
            parts.append(f'<p><b>{label}</b></p>\n<div>  {text} </div>')
        parts.append('</div>')
    parts.append('</body></html>')
    return '\n'.join(parts)


@pytest.fixture
def make_page():
    return schedule_page


@pytest.fixture
def one_game_page():
    return schedule_page(
        ('mlb-tv-fgod-next-five-games', [('October 1', 'Orioles vs. Rays , 7:35 p.m.')]),
    )

import re
from bs4 import BeautifulSoup

HIDDEN_STYLE = re.compile(r'display:\s*none|visibility:\s*hidden')
WHITESPACE = re.compile(r'\s+')


def extract_visible_text(html: str) -> str:
    """Return the text a user would see, collapsed to single spaces."""
    soup = BeautifulSoup(html, 'html.parser')

    # Non-rendered content
    for elem in soup(['script', 'style', 'noscript', 'template', 'head']):
        elem.decompose()

    # Hidden elements (hidden attribute, inline display:none / visibility:hidden)
    for elem in soup.find_all(attrs={'hidden': True}):
        elem.decompose()
    for elem in soup.find_all(style=HIDDEN_STYLE):
        elem.decompose()

    return WHITESPACE.sub(' ', soup.get_text(' ')).strip()


def contains_text(html: str, pattern: str) -> bool:
    """Case-insensitive substring match against the visible text of html."""
    needle = WHITESPACE.sub(' ', pattern).strip().lower()
    if not needle:
        return False
    return needle in extract_visible_text(html).lower()

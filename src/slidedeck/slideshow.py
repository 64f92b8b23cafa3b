"""Split a Markdown token stream into slides.

Thematic breaks (``---``, ``***``, ``___``) act as slide separators. The
:class:`Slideshow` iterator consumes block tokens from the parser and wraps
each run between breaks in a ``<section class="slide">`` container:

    >>> tokens = [{'type': 'paragraph'}, {'type': 'thematic_break'}, {'type': 'paragraph'}]
    >>> [t.get('raw', t['type']) for t in Slideshow(tokens)]
    ['<section class="slide">', 'paragraph', '</section>',
     '<section class="slide">', 'paragraph']

The last slide is left open; templates close it themselves.
"""

import logging
from collections import deque
from typing import Any, Deque, Dict, Iterable, Iterator, List

logger = logging.getLogger(__name__)

Token = Dict[str, Any]

SLIDE_OPEN = '<section class="slide">'
SLIDE_CLOSE = '</section>'

THEMATIC_BREAK = 'thematic_break'


def slide_marker(html: str) -> Token:
    """Build a raw HTML block token carrying a slide marker."""
    return {'type': 'block_html', 'raw': html}


def is_slide_marker(token: Token) -> bool:
    return token.get('type') == 'block_html' and token.get('raw') in (SLIDE_OPEN, SLIDE_CLOSE)


def contains_break(token: Token) -> bool:
    """Whether a thematic break occurs anywhere below a container token."""
    children = token.get('children')
    if not isinstance(children, list):
        return False
    return any(
        child.get('type') == THEMATIC_BREAK or contains_break(child)
        for child in children
    )


class Slideshow:
    """Lazy token transformer inserting slide boundaries.

    Thematic breaks nested in block quotes or list items split slides too:
    the container is copied with its break replaced by the slide markers,
    as with a flat event stream. Tokens whose subtree holds no break are
    forwarded as the same objects. The iterator makes a single pass over
    its input.
    """

    def __init__(self, tokens: Iterable[Token]):
        self._tokens: Iterator[Token] = iter(tokens)
        self._pending: Deque[Token] = deque()
        self.in_slide = False
        self.slide_count = 0
        self._pending.extend(self.start_slide())

    def start_slide(self) -> List[Token]:
        self.in_slide = True
        self.slide_count += 1
        return [slide_marker(SLIDE_OPEN)]

    def end_slide(self) -> List[Token]:
        self.in_slide = False
        return [slide_marker(SLIDE_CLOSE)]

    def boundary(self) -> List[Token]:
        """Markers replacing one thematic break."""
        markers = self.end_slide() if self.in_slide else []
        markers += self.start_slide()
        logger.debug(f"Starting slide {self.slide_count}")
        return markers

    def _rewrite_children(self, token: Token) -> Token:
        children: List[Token] = []
        for child in token['children']:
            if child.get('type') == THEMATIC_BREAK:
                children.extend(self.boundary())
            elif contains_break(child):
                children.append(self._rewrite_children(child))
            else:
                children.append(child)
        return dict(token, children=children)

    def transform(self, token: Token) -> None:
        """Queue the output for one upstream token."""
        if token.get('type') == THEMATIC_BREAK:
            self._pending.extend(self.boundary())
        elif contains_break(token):
            self._pending.append(self._rewrite_children(token))
        else:
            self._pending.append(token)

    def __iter__(self) -> "Slideshow":
        return self

    def __next__(self) -> Token:
        while not self._pending:
            # StopIteration from the upstream ends this iterator too
            self.transform(next(self._tokens))
        return self._pending.popleft()


def segment_slides(tokens: Iterable[Token]) -> Slideshow:
    """Wrap a token stream so that it yields slide-delimited tokens."""
    return Slideshow(tokens)

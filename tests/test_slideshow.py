"""
Tests for slide segmentation
"""

import pytest

from slidedeck.slideshow import (
    SLIDE_CLOSE,
    SLIDE_OPEN,
    Slideshow,
    is_slide_marker,
    segment_slides,
)


def para(text):
    return {"type": "paragraph", "children": [{"type": "text", "raw": text}]}


BREAK = {"type": "thematic_break"}


def count_markers(tokens):
    opens = sum(1 for t in tokens if t.get("raw") == SLIDE_OPEN)
    closes = sum(1 for t in tokens if t.get("raw") == SLIDE_CLOSE)
    return opens, closes


class TestSlideMarkers:
    """Tests for marker placement."""

    def test_empty_input_opens_one_slide(self):
        """An empty document still starts inside a slide."""
        out = list(Slideshow([]))
        assert [t["raw"] for t in out] == [SLIDE_OPEN]

    def test_no_breaks_wraps_in_one_unclosed_slide(self):
        """Without breaks the input is prefixed by one open marker only."""
        tokens = [para("a"), {"type": "blank_line"}, para("b")]
        out = list(Slideshow(tokens))
        assert out[0]["raw"] == SLIDE_OPEN
        assert out[1:] == tokens
        assert count_markers(out) == (1, 0)

    @pytest.mark.parametrize("k", [1, 2, 5])
    def test_k_breaks_give_k_plus_one_opens_and_k_closes(self, k):
        """Each break closes the current slide and opens the next."""
        tokens = []
        for i in range(k):
            tokens += [para(str(i)), BREAK]
        tokens.append(para("last"))
        out = list(segment_slides(tokens))
        assert count_markers(out) == (k + 1, k)
        assert len(out) == len(tokens) - k + 2 * k + 1

    def test_break_replaced_by_close_then_open(self):
        """A break becomes a close marker immediately followed by an open marker."""
        out = list(Slideshow([para("one"), BREAK, para("two")]))
        assert [t.get("raw", t["type"]) for t in out] == [
            SLIDE_OPEN, "paragraph", SLIDE_CLOSE, SLIDE_OPEN, "paragraph",
        ]

    def test_leading_break_yields_empty_first_slide(self):
        """A document starting with a break has an empty first slide."""
        out = list(Slideshow([BREAK, para("x")]))
        assert [t.get("raw", t["type"]) for t in out] == [
            SLIDE_OPEN, SLIDE_CLOSE, SLIDE_OPEN, "paragraph",
        ]

    def test_trailing_break_leaves_final_slide_open(self):
        """The slide opened by a trailing break is never closed."""
        out = list(Slideshow([para("x"), BREAK]))
        assert out[-1]["raw"] == SLIDE_OPEN
        assert count_markers(out) == (2, 1)

    def test_consecutive_breaks(self):
        out = list(Slideshow([BREAK, BREAK]))
        assert count_markers(out) == (3, 2)


class TestForwarding:
    """Tests for pass-through of non-break tokens."""

    def test_breaks_never_forwarded(self):
        out = list(Slideshow([para("a"), BREAK, BREAK, para("b"), BREAK]))
        assert all(t["type"] != "thematic_break" for t in out)

    def test_other_tokens_unchanged_and_in_order(self):
        """Non-break tokens are the same objects in the same order."""
        tokens = [para("a"), {"type": "heading", "attrs": {"level": 1}}, BREAK, {"type": "table"}]
        out = [t for t in Slideshow(tokens) if not is_slide_marker(t)]
        assert out == [tokens[0], tokens[1], tokens[3]]
        assert out[0] is tokens[0]

    def test_nested_break_in_quote_splits(self):
        """A break inside a container is replaced by markers in its children."""
        quote = {"type": "block_quote", "children": [para("a"), BREAK, para("b")]}
        out = list(Slideshow([quote]))
        assert out[0]["raw"] == SLIDE_OPEN
        rewritten = out[1]
        assert rewritten["type"] == "block_quote"
        assert [t.get("raw", t["type"]) for t in rewritten["children"]] == [
            "paragraph", SLIDE_CLOSE, SLIDE_OPEN, "paragraph",
        ]
        assert quote["children"][1] is BREAK

    def test_deeply_nested_break_counts(self):
        item = {"type": "list_item", "children": [para("a"), BREAK]}
        tokens = [{"type": "list", "children": [item]}, BREAK, para("c")]
        slideshow = Slideshow(tokens)
        out = list(slideshow)
        assert slideshow.slide_count == 3
        flat = []

        def walk(ts):
            for t in ts:
                flat.append(t)
                walk(t.get("children", []))

        walk(out)
        assert count_markers(flat) == (3, 2)
        assert all(t["type"] != "thematic_break" for t in flat)

    def test_container_without_break_forwarded_as_is(self):
        quote = {"type": "block_quote", "children": [para("q")]}
        out = list(Slideshow([quote]))
        assert out[1] is quote


class TestLaziness:
    """Tests for pull-based iteration."""

    def test_pulls_upstream_on_demand(self):
        """Only as many upstream tokens are consumed as needed."""
        pulled = []

        def source():
            for token in [para("a"), BREAK, para("b")]:
                pulled.append(token)
                yield token

        slideshow = Slideshow(source())
        assert next(slideshow)["raw"] == SLIDE_OPEN
        assert pulled == []
        assert next(slideshow)["type"] == "paragraph"
        assert len(pulled) == 1

    def test_single_pass(self):
        slideshow = Slideshow([para("a")])
        assert len(list(slideshow)) == 2
        assert list(slideshow) == []

    def test_slide_count(self):
        slideshow = Slideshow([para("a"), BREAK, para("b"), BREAK])
        list(slideshow)
        assert slideshow.slide_count == 3
        assert slideshow.in_slide

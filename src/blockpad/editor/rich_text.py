"""Rich text helpers for block content.

Block content is a tuple of RichTextSpan. All offsets here are plain-text
character offsets into the concatenation of the span texts.
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from dataclasses import replace

from .blocks_models import InlineStyle, RichTextSpan

RichText = tuple[RichTextSpan, ...]


def plain_text(spans: Iterable[RichTextSpan]) -> str:
    """Strip formatting and return the text alone."""
    return "".join(span.text for span in spans)


def text(value: str) -> RichText:
    """Unformatted content holding `value` (empty content for "")."""
    return (RichTextSpan(value),) if value else ()


def styled(value: str, style: InlineStyle) -> RichTextSpan:
    return RichTextSpan(value, **{style.value: True})


def normalize(spans: Iterable[RichTextSpan]) -> RichText:
    """Drop empty spans and merge neighbours with identical formatting."""
    result: list[RichTextSpan] = []
    for span in spans:
        if not span.text:
            continue
        if result and result[-1].same_format(span):
            result[-1] = replace(result[-1], text=result[-1].text + span.text)
        else:
            result.append(span)
    return tuple(result)


def split_at(spans: Sequence[RichTextSpan], offset: int) -> tuple[RichText, RichText]:
    """Split content into the parts before and after `offset`."""
    left: list[RichTextSpan] = []
    right: list[RichTextSpan] = []
    pos = 0
    for span in spans:
        end = pos + len(span.text)
        if end <= offset:
            left.append(span)
        elif pos >= offset:
            right.append(span)
        else:
            cut = offset - pos
            left.append(replace(span, text=span.text[:cut]))
            right.append(replace(span, text=span.text[cut:]))
        pos = end
    return tuple(left), tuple(right)


def _clamp_range(spans: Sequence[RichTextSpan], start: int, end: int) -> tuple[int, int]:
    length = len(plain_text(spans))
    start = max(0, min(start, length))
    end = max(start, min(end, length))
    return start, end


def replace_range(
    spans: Sequence[RichTextSpan],
    start: int,
    end: int,
    fragment: Iterable[RichTextSpan],
) -> RichText:
    """Replace the text in [start, end) with `fragment`.

    Formatting outside the range is preserved. Out-of-range offsets are
    clamped to the content.
    """
    start, end = _clamp_range(spans, start, end)
    left, _ = split_at(spans, start)
    _, right = split_at(spans, end)
    return normalize((*left, *fragment, *right))


def apply_style(
    spans: Sequence[RichTextSpan],
    start: int,
    end: int,
    style: InlineStyle,
) -> RichText:
    """Toggle `style` over [start, end).

    If every character in the range already carries the style it is
    removed, otherwise it is added to the whole range. Collapsed ranges
    leave the content unchanged.
    """
    start, end = _clamp_range(spans, start, end)
    if start == end:
        return tuple(spans)

    left, rest = split_at(spans, start)
    middle, right = split_at(rest, end - start)
    enable = not all(span.has_style(style) for span in middle)
    middle = tuple(replace(span, **{style.value: enable}) for span in middle)
    return normalize((*left, *middle, *right))


def text_run_before(spans: Sequence[RichTextSpan], offset: int) -> tuple[int, str]:
    """Return the text of the run the cursor sits in, up to the cursor.

    The run is the span containing `offset`; at a span boundary it is the
    span that ends there, which is the one receiving typed characters.
    Returns (run_start, text) where run_start is the offset of the run.
    """
    pos = 0
    for span in spans:
        end = pos + len(span.text)
        if pos < offset <= end:
            return pos, span.text[: offset - pos]
        pos = end
    return min(offset, pos), ""

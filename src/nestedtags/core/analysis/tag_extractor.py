from __future__ import annotations

"""
Tag Annotation Extractor.

Scans document text for tag annotations of the form

    <!-- @nested-tags: project/frontend, todo -->

and returns the raw tag strings declared in it. Trimming and hierarchy
parsing are left to the tag index.
"""

from typing import Set

DEFAULT_MARKER = "@nested-tags:"
DEFAULT_TERMINATOR = "-->"
DEFAULT_SEPARATOR = ","


def extract_tags(
        text: str,
        marker: str = DEFAULT_MARKER,
        terminator: str = DEFAULT_TERMINATOR,
        separator: str = DEFAULT_SEPARATOR,
) -> Set[str]:
    """
    Collect the raw tags declared in a document.

    Lines are split on line feeds only, so other Unicode line breaks stay
    part of a tag. Every line containing the marker contributes the text
    following the last marker occurrence, cut at the first terminator and
    split on the separator.

    Args:
        text: Full document text.
        marker: Annotation opening marker.
        terminator: Annotation closing marker.
        separator: Separator between tags.

    Returns:
        Set[str]: Raw, untrimmed tag strings.
    """
    tags: Set[str] = set()
    if not text or not marker:
        return tags

    for line in text.split("\n"):
        if marker not in line:
            continue
        body = line.rsplit(marker, 1)[-1]
        if terminator:
            body = body.split(terminator, 1)[0]
        tags.update(body.split(separator) if separator else [body])

    return tags

"""Splitting product table rows across pages."""

from __future__ import annotations

from typing import List, Sequence


def paginate_rows(
    row_heights: Sequence[float],
    first_page_space: float,
    page_space: float,
    trailer_height: float = 0.0,
) -> List[List[int]]:
    """Group row indexes into pages.

    ``first_page_space`` is the table height available under the invoice
    header, ``page_space`` the height on continuation pages. When the first
    row does not fit under the header, the table starts on the next page and
    the first page holds no rows. A row taller than a whole page still gets a
    page of its own.

    The last page must also fit ``trailer_height`` (the totals block). When it
    does not, the last row moves to a fresh page so the totals follow it. A
    lone last row that cannot share any page with the totals leaves them on an
    otherwise empty page.
    """
    pages: List[List[int]] = [[]]
    space = first_page_space
    for index, height in enumerate(row_heights):
        starts_late = len(pages) == 1 and height <= page_space
        if height > space and (pages[-1] or starts_late):
            pages.append([])
            space = page_space
        pages[-1].append(index)
        space -= height

    if trailer_height > 0 and trailer_height > space:
        last = pages[-1]
        if len(last) > 1:
            pages[-1] = last[:-1]
            pages.append(last[-1:])
        elif len(pages) == 1 and len(last) == 1 and row_heights[last[0]] + trailer_height <= page_space:
            pages = [[], last]
        else:
            pages.append([])
    return pages

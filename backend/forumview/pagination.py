import math


def page_count(total: int, page_size: int) -> int:
    if total <= 0:
        return 0
    return math.ceil(total / page_size)


def paginate(current_page: int, page_count: int, window_size: int) -> list[int]:
    """Page numbers to show as links around ``current_page``.

    Every page is listed while there are fewer pages than ``window_size``.
    Otherwise the window is centred on the current page and slid back inside
    ``[1, page_count]`` at both ends.
    """
    if page_count < window_size:
        return list(range(1, page_count + 1))

    first = current_page - window_size // 2
    first = max(first, 1)
    if first + window_size - 1 > page_count:
        first = page_count - window_size + 1
    return list(range(first, first + window_size))

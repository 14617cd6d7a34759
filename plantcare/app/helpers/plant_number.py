from typing import Iterable, Optional


def next_plant_number(used_numbers: Iterable[Optional[int]]) -> int:
    """
    Return the lowest positive plant number not already in use.

    Existing numbers are sorted ascending and scanned from 1 upward; the first
    integer missing from the list wins. With no gap this is max + 1, so
    numbers freed by deletions are reused before the sequence grows.
    """
    used = sorted({n for n in used_numbers if n is not None and n > 0})
    candidate = 1
    for number in used:
        if number != candidate:
            break
        candidate += 1
    return candidate

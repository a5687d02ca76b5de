"""Pagination planning: which pages to request, and in what order."""

from __future__ import annotations

from typing import List, Mapping

from eswil.models import FetchTask

# The dictionary's alphabet, in the site's own order.
LETTERS = "ABCĆDEFGHIJKLŁMNOÓPQRSŚTUVWXYZŹŻ"
PAGE_SIZE = 200


def page_count(total: int, page_size: int = PAGE_SIZE) -> int:
    """Return how many pages of *page_size* entries cover *total* entries."""
    if total < 0:
        raise ValueError(f"negative entry count: {total}")
    return -(-total // page_size)


def count_tasks(alphabet: str = LETTERS) -> List[FetchTask]:
    """One first-page request per letter; its summary holds the letter's total."""
    return [FetchTask(letter=letter) for letter in dict.fromkeys(alphabet)]


def page_tasks(
    counts: Mapping[str, int],
    page_size: int = PAGE_SIZE,
    alphabet: str = LETTERS,
) -> List[FetchTask]:
    """Return the page walk for every letter in *counts*.

    Letters are walked in *alphabet* order (letters outside it last, sorted)
    and pages in ascending order, so the same counts always produce the same
    task sequence.  The last page of a letter is requested at full size.
    """
    def position(letter: str) -> tuple:
        index = alphabet.find(letter)
        return (index if index >= 0 else len(alphabet), letter)

    tasks: List[FetchTask] = []
    for letter in sorted(counts, key=position):
        for page in range(page_count(counts[letter], page_size)):
            tasks.append(FetchTask(letter=letter, page=page))
    return tasks

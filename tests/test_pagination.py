"""Tests for count-discovery and page-walk planning."""

from __future__ import annotations

import pytest

from eswil.models import FetchTask
from eswil.scraper.pagination import LETTERS, PAGE_SIZE, count_tasks, page_count, page_tasks


class TestPageCount:
    @pytest.mark.parametrize(
        "total, expected",
        [(0, 0), (1, 1), (199, 1), (200, 1), (201, 2), (250, 2), (400, 2), (401, 3)],
    )
    def test_ceiling_division(self, total: int, expected: int) -> None:
        assert page_count(total, 200) == expected

    def test_negative_total_rejected(self) -> None:
        with pytest.raises(ValueError):
            page_count(-1)


class TestCountTasks:
    def test_one_task_per_letter_of_the_alphabet(self) -> None:
        tasks = count_tasks()
        assert len(LETTERS) == 32
        assert len(tasks) == 32
        assert [t.letter for t in tasks] == list(LETTERS)
        assert all(t.page == 0 and t.word_id is None for t in tasks)

    def test_duplicate_letters_requested_once(self) -> None:
        assert count_tasks("ABA") == [FetchTask("A"), FetchTask("B")]


class TestPageTasks:
    def test_two_letter_scenario(self) -> None:
        tasks = page_tasks({"A": 250, "B": 50}, PAGE_SIZE, alphabet="AB")
        assert tasks == [
            FetchTask(letter="A", page=0),
            FetchTask(letter="A", page=1),
            FetchTask(letter="B", page=0),
        ]

    def test_walks_letters_in_alphabet_order(self) -> None:
        tasks = page_tasks({"Ż": 1, "Ł": 1, "A": 1})
        assert [t.letter for t in tasks] == ["A", "Ł", "Ż"]

    def test_letters_outside_alphabet_come_last(self) -> None:
        tasks = page_tasks({"Q": 1, "?": 1, "A": 1}, alphabet="AQ")
        assert [t.letter for t in tasks] == ["A", "Q", "?"]

    def test_empty_letter_has_no_pages(self) -> None:
        assert page_tasks({"A": 0, "B": 1}, alphabet="AB") == [FetchTask(letter="B", page=0)]

    def test_task_count_matches_ceiling(self) -> None:
        counts = {"A": 4711, "B": 200, "C": 1}
        tasks = page_tasks(counts, 200, alphabet="ABC")
        assert len(tasks) == sum(page_count(t, 200) for t in counts.values())
        assert [t.page for t in tasks if t.letter == "A"] == list(range(24))

"""Tests for console helpers and prompts."""

from datetime import datetime, timedelta, timezone
from unittest.mock import patch

import pytest

from makr.exceptions import PromptCancelledError
from makr.prompts import Choice, Prompter
from makr.ui import format_relative_date

NOW = datetime(2026, 3, 20, 12, 0, tzinfo=timezone.utc)


class TestFormatRelativeDate:
    """Tests for format_relative_date."""

    @pytest.mark.parametrize(
        "delta, expected",
        [
            (timedelta(hours=3), "Today"),
            (timedelta(days=1, hours=2), "Yesterday"),
            (timedelta(days=4), "4 days ago"),
            (timedelta(days=7), "1 week ago"),
            (timedelta(days=20), "2 weeks ago"),
        ],
    )
    def test_recent_dates(self, delta: timedelta, expected: str) -> None:
        assert format_relative_date(NOW - delta, now=NOW) == expected

    def test_old_dates_are_absolute(self) -> None:
        moment = NOW - timedelta(days=90)
        assert format_relative_date(moment, now=NOW) == moment.astimezone().strftime("%Y-%m-%d")

    def test_naive_datetimes_are_utc(self) -> None:
        naive = (NOW - timedelta(days=2)).replace(tzinfo=None)
        assert format_relative_date(naive, now=NOW) == "2 days ago"


class TestPrompter:
    """Tests for Prompter."""

    def test_text_reasks_until_valid(self) -> None:
        prompter = Prompter()
        answers = iter(["bad name", "good-name"])

        with patch("makr.prompts.Prompt.ask", side_effect=lambda *a, **k: next(answers)):
            value = prompter.text(
                "Name:", validate=lambda v: None if " " not in v else "No spaces"
            )

        assert value == "good-name"

    def test_select_returns_choice_value(self) -> None:
        prompter = Prompter()
        choices = [Choice(value="py", label="Python"), Choice(value="go", label="Go")]

        with patch("makr.prompts.Prompt.ask", return_value="2"):
            assert prompter.select("Language:", choices) == "go"

    @pytest.mark.parametrize("interrupt", [KeyboardInterrupt, EOFError])
    def test_cancel_raises(self, interrupt) -> None:
        prompter = Prompter()
        with patch("makr.prompts.Confirm.ask", side_effect=interrupt):
            with pytest.raises(PromptCancelledError):
                prompter.confirm("Continue?")

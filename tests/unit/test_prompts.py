"""Unit tests for retool_cli.prompts."""

from unittest.mock import MagicMock, patch

import pytest

from retool_cli.errors import UserCancelledError
from retool_cli.prompts import ask_for_cookies, collect_app_name


@pytest.fixture
def questionary():
    with patch("retool_cli.prompts.questionary") as mocked:
        yield mocked


def answers(*values):
    prompt = MagicMock()
    prompt.ask.side_effect = list(values)
    return prompt


class TestAskForCookies:
    def test_prompts_for_everything_by_default(self, questionary):
        questionary.text.return_value = answers(" my-org.retool.com ", "xsrf-1")
        questionary.password.return_value = answers("token-1")

        record = ask_for_cookies()

        assert (record.domain, record.session_token, record.access_token) == (
            "my-org.retool.com",
            "xsrf-1",
            "token-1",
        )
        assert questionary.text.call_count == 2

    def test_only_missing_values_are_prompted(self, questionary):
        questionary.text.return_value = answers("xsrf-1")

        record = ask_for_cookies(domain="my-org.retool.com", access_token="token-1")

        questionary.text.assert_called_once()
        questionary.password.assert_not_called()
        assert record.session_token == "xsrf-1"
        assert record.domain == "my-org.retool.com"

    def test_nothing_prompted_when_all_given(self, questionary):
        ask_for_cookies(domain="my-org.retool.com", xsrf="xsrf-1", access_token="token-1")

        questionary.text.assert_not_called()
        questionary.password.assert_not_called()

    def test_cancel(self, questionary):
        questionary.text.return_value = answers(None)

        with pytest.raises(UserCancelledError):
            ask_for_cookies(xsrf="xsrf-1", access_token="token-1")


class TestCollectAppName:
    def test_whitespace_becomes_underscores(self, questionary):
        questionary.text.return_value = answers("  Orders  admin ")

        assert collect_app_name() == "Orders_admin"

"""Tests for CLI functionality."""

from unittest.mock import MagicMock

import pytest
from pytest_mock import MockerFixture

from classitag.ui.cli import CommandProcessor, main


@pytest.fixture
def mock_command(mocker: MockerFixture) -> MagicMock:
    """Patch argument processing and the extract command."""

    _ = mocker.patch("classitag.ui.cli.cli.ArgumentParser.process_args")
    return mocker.patch("classitag.ui.cli.cli.ExtractCommand")


def test_exit_code_comes_from_command(mock_command: MagicMock) -> None:
    mock_command.return_value.execute.return_value = 0

    assert CommandProcessor.process_command(["extract", "--dir", "album"]) == 0
    mock_command.return_value.execute.assert_called_once()


def test_keyboard_interrupt_returns_130(mock_command: MagicMock) -> None:
    mock_command.return_value.execute.side_effect = KeyboardInterrupt

    assert CommandProcessor.process_command(["extract", "--dir", "album"]) == 130


def test_unexpected_error_returns_one(mock_command: MagicMock) -> None:
    mock_command.return_value.execute.side_effect = RuntimeError("boom")

    assert main(["extract", "--dir", "album"]) == 1

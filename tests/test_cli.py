"""Tests for the CLI interface."""

from datetime import date, timedelta

import pytest
from typer.testing import CliRunner

from lendinglib.cli import app


@pytest.fixture(autouse=True)
def setup_store(store_env):
    """Point every CLI test at temporary store files."""
    yield store_env


@pytest.fixture
def runner():
    """Create a CLI test runner."""
    return CliRunner()


@pytest.fixture
def stocked_cli(runner: CliRunner):
    """Store with members M1-M3 and book B1."""
    for args in (
        ["add-member", "M1", "Asha Rao", "student"],
        ["add-member", "M2", "Ben Okafor", "staff"],
        ["add-member", "M3", "Chen Li", "student"],
        ["add-book", "B1", "Dune", "Frank Herbert"],
    ):
        assert runner.invoke(app, args).exit_code == 0
    return runner


class TestCLIBasics:
    """Tests for basic CLI functionality."""

    def test_help(self, runner: CliRunner):
        """Test that help command works."""
        result = runner.invoke(app, ["--help"])
        assert result.exit_code == 0
        assert "waitlists" in result.output

    def test_version(self, runner: CliRunner):
        """Test version command."""
        result = runner.invoke(app, ["version"])
        assert result.exit_code == 0
        assert "0.1.0" in result.output


class TestAddCommands:
    """Tests for add-member and add-book."""

    def test_add_member(self, runner: CliRunner, setup_store):
        """Test adding a member writes the store."""
        result = runner.invoke(app, ["add-member", "M1", "Asha Rao", "student"])

        assert result.exit_code == 0
        assert "User added" in result.output
        assert (setup_store / "users.csv").read_text() == "M1,Asha Rao,student,0\n"

    def test_add_book(self, runner: CliRunner, setup_store):
        """Test adding a book writes the store."""
        result = runner.invoke(app, ["add-book", "B1", "Dune", "Frank Herbert"])

        assert result.exit_code == 0
        assert (setup_store / "books.csv").read_text() == "B1,Dune,Frank Herbert,false,,,\n"

    def test_add_invalid_member(self, runner: CliRunner, setup_store):
        """Test invalid input is reported without writing."""
        result = runner.invoke(app, ["add-member", "M,1", "Asha", "student"])

        assert result.exit_code == 1
        assert "Error" in result.output
        assert not (setup_store / "users.csv").exists()


class TestLendingCommands:
    """Tests for borrow and return."""

    def test_borrow(self, stocked_cli: CliRunner):
        """Test borrowing prints the due date."""
        result = stocked_cli.invoke(app, ["borrow", "M1", "B1"])

        due = (date.today() + timedelta(days=7)).isoformat()
        assert result.exit_code == 0
        assert f"until {due}" in result.output

    def test_borrow_waitlist(self, stocked_cli: CliRunner, setup_store):
        """Test a second borrower joins the waitlist."""
        stocked_cli.invoke(app, ["borrow", "M1", "B1"])
        result = stocked_cli.invoke(app, ["borrow", "M2", "B1"])

        assert result.exit_code == 0
        assert "Added to waitlist" in result.output
        assert (setup_store / "books.csv").read_text().rstrip("\n").endswith(",M2")

    def test_borrow_unknown_member(self, stocked_cli: CliRunner):
        """Test an unknown member is an error."""
        result = stocked_cli.invoke(app, ["borrow", "M9", "B1"])

        assert result.exit_code == 1
        assert "User not found" in result.output

    def test_return_with_promotion(self, stocked_cli: CliRunner):
        """Test returning hands the book to the next member."""
        stocked_cli.invoke(app, ["borrow", "M1", "B1"])
        stocked_cli.invoke(app, ["borrow", "M2", "B1"])
        result = stocked_cli.invoke(app, ["return", "M1", "B1"])

        assert result.exit_code == 0
        assert "auto-assigned to waitlisted user: M2" in result.output
        assert "returned successfully" in result.output
        assert "Overdue" not in result.output

    def test_return_wrong_member(self, stocked_cli: CliRunner):
        """Test returning someone else's book is an error."""
        stocked_cli.invoke(app, ["borrow", "M1", "B1"])
        result = stocked_cli.invoke(app, ["return", "M3", "B1"])

        assert result.exit_code == 1
        assert "not borrowed by this user" in result.output

    def test_overdue_return_charges_fine(self, runner: CliRunner, setup_store):
        """Test a late return from stored state charges the fine."""
        due = (date.today() - timedelta(days=3)).isoformat()
        (setup_store / "users.csv").write_text("M1,Asha,student,0\n")
        (setup_store / "books.csv").write_text(f"B1,Dune,Frank Herbert,true,M1,{due},\n")

        result = runner.invoke(app, ["return", "M1", "B1"])

        assert result.exit_code == 0
        assert "Overdue! Fine Rs6" in result.output
        assert result.output.index("Overdue!") < result.output.index("Book returned successfully.")
        assert (setup_store / "users.csv").read_text() == "M1,Asha,student,6\n"


class TestListCommands:
    """Tests for listing commands."""

    def test_members_empty(self, runner: CliRunner):
        """Test listing with no members."""
        result = runner.invoke(app, ["members"])
        assert result.exit_code == 0
        assert "No members found" in result.output

    def test_members(self, stocked_cli: CliRunner):
        """Test the members table."""
        result = stocked_cli.invoke(app, ["members"])

        assert result.exit_code == 0
        assert "Asha Rao" in result.output
        assert "Rs0" in result.output

    def test_books(self, stocked_cli: CliRunner):
        """Test the books table."""
        stocked_cli.invoke(app, ["borrow", "M1", "B1"])
        result = stocked_cli.invoke(app, ["books"])

        assert result.exit_code == 0
        assert "Dune" in result.output
        assert "BORROWED" in result.output

    def test_overdue_none(self, stocked_cli: CliRunner):
        """Test the overdue report with nothing overdue."""
        result = stocked_cli.invoke(app, ["overdue"])
        assert result.exit_code == 0
        assert "No overdue books" in result.output

    def test_stats(self, stocked_cli: CliRunner):
        """Test the statistics output."""
        result = stocked_cli.invoke(app, ["stats"])

        assert result.exit_code == 0
        assert "Members:" in result.output
        assert "3" in result.output


class TestStoreErrors:
    """Tests for storage failures."""

    def test_malformed_store(self, runner: CliRunner, setup_store):
        """Test a malformed store stops the command."""
        (setup_store / "users.csv").write_text("M1,Asha,student,lots\n")

        result = runner.invoke(app, ["members"])

        assert result.exit_code == 1
        assert "Malformed record" in result.output

"""Command-line interface for lendinglib.

Built with Typer for commands and Rich for output. Each command calls the
lending manager and renders what it returns.
"""

import logging

import typer
from pydantic import ValidationError
from rich.console import Console
from rich.table import Table

from . import __version__
from .config import get_config
from .db.schemas import BookCreate, MemberCreate
from .db.store import StoreError
from .lending import LendingManager

# Create the main app
app = typer.Typer(
    name="lendinglib",
    help="Lend books to members with waitlists and overdue fines.",
    no_args_is_help=True,
)

# Rich console for pretty output
console = Console()


# ============================================================================
# Helper Functions
# ============================================================================


def print_error(message: str) -> None:
    """Print an error message."""
    console.print(f"[bold red]Error:[/bold red] {message}")


def print_success(message: str) -> None:
    """Print a success message."""
    console.print(f"[bold green]Success:[/bold green] {message}")


def print_info(message: str) -> None:
    """Print an info message."""
    console.print(f"[dim]{message}[/dim]")


def get_manager() -> LendingManager:
    """Create a lending manager over the configured store."""
    config = get_config()
    logging.basicConfig(level=config.log_level, format="%(levelname)s %(name)s: %(message)s")

    errors = config.validate()
    if errors:
        for error in errors:
            print_error(error)
        raise typer.Exit(1)

    try:
        return LendingManager(config=config)
    except StoreError as e:
        print_error(str(e))
        raise typer.Exit(1)


def format_validation_error(e: ValidationError) -> str:
    """Flatten a pydantic error into one line."""
    return "; ".join(
        f"{'.'.join(str(p) for p in err['loc'])}: {err['msg']}" for err in e.errors()
    )


# ============================================================================
# Commands
# ============================================================================


@app.command("add-member")
def add_member(
    member_id: str = typer.Argument(..., help="Member ID"),
    name: str = typer.Argument(..., help="Member name"),
    role: str = typer.Argument(..., help="Member role"),
) -> None:
    """Add a new member."""
    manager = get_manager()
    try:
        member = manager.add_member(MemberCreate(id=member_id, name=name, role=role))
    except ValidationError as e:
        print_error(format_validation_error(e))
        raise typer.Exit(1)
    except StoreError as e:
        print_error(str(e))
        raise typer.Exit(1)
    print_success(f"User added: {member.id} ({member.name})")


@app.command("add-book")
def add_book(
    book_id: str = typer.Argument(..., help="Book ID"),
    title: str = typer.Argument(..., help="Book title"),
    author: str = typer.Argument(..., help="Book author"),
) -> None:
    """Add a new book."""
    manager = get_manager()
    try:
        book = manager.add_book(BookCreate(id=book_id, title=title, author=author))
    except ValidationError as e:
        print_error(format_validation_error(e))
        raise typer.Exit(1)
    except StoreError as e:
        print_error(str(e))
        raise typer.Exit(1)
    print_success(f"Book added: {book.id} ({book.title})")


@app.command()
def borrow(
    member_id: str = typer.Argument(..., help="Borrowing member ID"),
    book_id: str = typer.Argument(..., help="Book ID"),
) -> None:
    """Borrow a book, or join its waitlist."""
    manager = get_manager()
    try:
        result = manager.borrow(member_id, book_id)
    except StoreError as e:
        print_error(str(e))
        raise typer.Exit(1)

    if not result.ok:
        print_error(result.message)
        raise typer.Exit(1)
    print_success(result.message)


@app.command("return")
def return_book(
    member_id: str = typer.Argument(..., help="Returning member ID"),
    book_id: str = typer.Argument(..., help="Book ID"),
) -> None:
    """Return a borrowed book."""
    manager = get_manager()
    try:
        result = manager.return_book(member_id, book_id)
    except StoreError as e:
        print_error(str(e))
        raise typer.Exit(1)

    if not result.ok:
        print_error(result.message)
        raise typer.Exit(1)
    print_success(result.message)


@app.command()
def members() -> None:
    """List all members."""
    manager = get_manager()
    rows = manager.list_members()

    if not rows:
        print_info("No members found")
        return

    table = Table(title="Members", show_header=True, header_style="bold magenta")
    table.add_column("ID", style="dim")
    table.add_column("Name", style="cyan")
    table.add_column("Role")
    table.add_column("Fine", justify="right")

    for member in rows:
        fine_style = "red" if member.fine else "green"
        table.add_row(
            member.id,
            member.name,
            member.role,
            f"[{fine_style}]{member.fine_text()}[/{fine_style}]",
        )

    console.print(table)


@app.command()
def books() -> None:
    """List all books with loan status and waitlist."""
    manager = get_manager()
    rows = manager.list_books()

    if not rows:
        print_info("No books found")
        return

    table = Table(title="Books", show_header=True, header_style="bold magenta")
    table.add_column("ID", style="dim")
    table.add_column("Title", style="cyan", max_width=40)
    table.add_column("Author", style="green", max_width=25)
    table.add_column("Status")
    table.add_column("Waitlist")

    for book in rows:
        status = book.status_text()
        status = f"[yellow]{status}[/yellow]" if book.borrowed else f"[green]{status}[/green]"
        table.add_row(book.id, book.title, book.author, status, ", ".join(book.waitlist))

    console.print(table)


@app.command()
def overdue() -> None:
    """Show overdue loans and projected fines."""
    manager = get_manager()
    report = manager.get_overdue_books()

    if not report.entries:
        print_info("No overdue books")
        return

    table = Table(title=f"Overdue as of {report.as_of}", show_header=True, header_style="bold red")
    table.add_column("Book", style="cyan")
    table.add_column("Member")
    table.add_column("Due")
    table.add_column("Days", justify="right")
    table.add_column("Fine", justify="right")

    for entry in report.entries:
        table.add_row(
            f"{entry.book_id} {entry.book_title}",
            entry.member_name or entry.member_id,
            entry.due_date.isoformat(),
            str(entry.days_overdue),
            f"Rs{entry.projected_fine}",
        )

    console.print(table)
    console.print(
        f"\n[bold]{report.total_overdue}[/bold] overdue, "
        f"oldest {report.oldest_overdue_days} days, "
        f"Rs{report.total_projected_fines} in projected fines"
    )


@app.command()
def stats() -> None:
    """Show lending statistics."""
    manager = get_manager()
    s = manager.get_stats()

    console.print("[bold]Lending Statistics[/bold]\n")
    console.print(f"  Members:           {s.total_members}")
    console.print(f"  Books:             {s.total_books}")
    console.print(f"  Borrowed:          {s.borrowed}")
    console.print(f"  Available:         {s.available}")
    console.print(f"  Overdue:           {s.overdue}")
    console.print(f"  Waitlist entries:  {s.waitlisted}")
    console.print(f"  Outstanding fines: Rs{s.outstanding_fines}")


@app.command()
def version() -> None:
    """Show version information."""
    console.print(f"lendinglib version {__version__}")


if __name__ == "__main__":
    app()

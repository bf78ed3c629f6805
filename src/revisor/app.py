"""Interactive CLI application."""
from datetime import date

from rich.console import Console
from rich.panel import Panel
from rich.prompt import Prompt, IntPrompt
from rich.table import Table

from revisor.clock import SystemClock
from revisor.config import get_settings
from revisor.dashboard import (
    effort_by_area, focus_themes, get_retention_color, get_retention_label,
    get_study_stats, retention_delta,
)
from revisor.errors import RevisorError
from revisor.load import get_load_color
from revisor.log import setup_logging
from revisor.kernel import RevisionKernel
from revisor.models import QuestionResult, SelfEvaluation, StudyMode, Theme
from revisor.store import SqliteStore

console = Console()

TIER_COLORS = {"easy": "green", "medium": "dark_orange", "hard": "red"}


def show_welcome():
    console.print(Panel(
        "[bold]Revisor[/bold]\n[dim]Spaced revision planner[/dim]",
        title="Welcome", border_style="blue",
    ))


def show_menu():
    console.print("\n[bold]Commands:[/bold]")
    commands = [
        ("today", "Reviews due today + tomorrow"),
        ("add", "Add a studied theme"),
        ("review", "Log a review session"),
        ("undo", "Undo today's last review of a theme"),
        ("master", "Mark a theme as mastered"),
        ("history", "Review history of a theme"),
        ("dashboard", "Load, accuracy and focus themes"),
        ("quit", "Exit"),
    ]
    for cmd, desc in commands:
        console.print(f"  [cyan]{cmd:<14}[/cyan] {desc}")


def ask_performance(mode: StudyMode):
    if mode is StudyMode.QUANTITATIVE:
        total = IntPrompt.ask("Questions answered")
        correct = IntPrompt.ask("Correct answers")
        return QuestionResult(total=total, correct=correct)
    choice = Prompt.ask(
        "How did it go?", choices=[e.value for e in SelfEvaluation],
    )
    return SelfEvaluation(choice)


def ask_mode() -> StudyMode:
    return StudyMode(Prompt.ask("Study mode", choices=[m.value for m in StudyMode], default="quantitative"))


def theme_table(title: str, themes: list[Theme], today: date) -> Table:
    table = Table(title=title)
    table.add_column("ID", justify="right")
    table.add_column("Theme", style="cyan")
    table.add_column("Tier")
    table.add_column("Level", justify="right")
    table.add_column("Retention", justify="right")
    table.add_column("Due")
    for t in themes:
        color = TIER_COLORS[t.difficulty_tier.value]
        due = t.next_review_date.isoformat() if t.next_review_date else "-"
        if t.is_overdue(today):
            due = f"[red]{due} (overdue)[/red]"
        table.add_row(
            str(t.id), t.name, f"[{color}]{t.difficulty_tier.value}[/{color}]",
            str(t.progression_level), f"{t.retention_rate}%", due,
        )
    return table


def cmd_today(kernel: RevisionKernel):
    today = kernel.clock.today()
    progress = kernel.daily_progress(today)
    console.print(Panel(
        f"{progress.completed}/{progress.total} reviewed ({progress.percentage}%)",
        title="Today's Progress", border_style="blue",
    ))
    due = kernel.list_due(today)
    if due:
        console.print(theme_table("Due Today", due, today))
    else:
        console.print("[green]No reviews due today![/green]")
    tomorrow = kernel.list_due_tomorrow(today)
    if tomorrow:
        console.print(theme_table("Tomorrow", tomorrow, today))


def cmd_add(kernel: RevisionKernel):
    name = Prompt.ask("Theme name")
    specialty = Prompt.ask("Specialty", default="")
    area = Prompt.ask("Area", default="")
    study_date = Prompt.ask("Study date (YYYY-MM-DD)", default=kernel.clock.today().isoformat())
    mode = ask_mode()
    performance = ask_performance(mode)
    theme = kernel.add_theme(name, study_date, performance, mode, specialty=specialty, area=area)
    color = TIER_COLORS[theme.difficulty_tier.value]
    console.print(
        f"[green]Added {theme.name}[/green] → [{color}]{theme.difficulty_tier.value}[/{color}], "
        f"first review on [bold]{theme.next_review_date}[/bold]"
    )


def cmd_review(kernel: RevisionKernel):
    theme_id = IntPrompt.ask("Theme ID")
    mode = ask_mode()
    performance = ask_performance(mode)
    theme = kernel.complete_review(theme_id, kernel.clock.today(), performance, mode)
    console.print(
        f"[green]Review saved.[/green] Retention {theme.retention_rate}%, "
        f"level {theme.progression_level}, next review on [bold]{theme.next_review_date}[/bold]"
    )


def cmd_undo(kernel: RevisionKernel):
    theme_id = IntPrompt.ask("Theme ID")
    theme = kernel.undo_last_review(theme_id)
    console.print(f"[yellow]Review undone.[/yellow] {theme.name} is due again today.")


def cmd_master(kernel: RevisionKernel):
    theme_id = IntPrompt.ask("Theme ID")
    if Prompt.ask("Mark as mastered?", choices=["y", "n"], default="n") != "y":
        return
    theme = kernel.mark_mastered(theme_id)
    console.print(f"[green]{theme.name} mastered.[/green] Next check on {theme.next_review_date}.")


def cmd_history(kernel: RevisionKernel):
    theme_id = IntPrompt.ask("Theme ID")
    theme = kernel.get_theme(theme_id)
    history = kernel.review_history(theme_id)
    if not history:
        console.print("[yellow]No reviews logged yet.[/yellow]")
        return
    table = Table(title=f"History: {theme.name}")
    table.add_column("Date")
    table.add_column("Questions", justify="right")
    table.add_column("Accuracy", justify="right")
    table.add_column("Tier")
    for entry in history:
        questions = f"{entry.questions_correct}/{entry.questions_answered}" if entry.questions_answered else "-"
        color = TIER_COLORS[entry.result_tier.value]
        table.add_row(
            entry.completed_date.isoformat(), questions, f"{entry.session_accuracy}%",
            f"[{color}]{entry.result_tier.value}[/{color}]",
        )
    console.print(table)
    delta = retention_delta(theme, history)
    if delta is not None:
        sign = "+" if delta >= 0 else ""
        console.print(f"  Retention change from last review: [bold]{sign}{delta}%[/bold]")


def cmd_dashboard(kernel: RevisionKernel):
    today = kernel.clock.today()
    signal = kernel.estimate_daily_load(today)
    color = get_load_color(signal.label)
    bar_filled = int(signal.percentage / 5)
    bar = f"[{color}]{'█' * bar_filled}{'░' * (20 - bar_filled)}[/{color}]"
    console.print(Panel(
        f"Daily load: {bar} [{color}]{signal.label.value.upper()}[/{color}] "
        f"({signal.percentage}% of capacity {signal.capacity})",
        title="Dashboard", border_style="blue",
    ))

    themes = kernel.list_themes()
    stats = get_study_stats(themes)
    accuracy = stats["general_accuracy"]
    if accuracy is not None:
        acc_color = get_retention_color(accuracy)
        console.print(
            f"\n  General accuracy: [{acc_color}]{accuracy}% {get_retention_label(accuracy)}[/{acc_color}]"
        )
    console.print(f"  Themes: [bold]{stats['themes']}[/bold]  |  "
                  f"Mastered: [bold]{stats['mastered']}[/bold]  |  "
                  f"Questions: [bold]{stats['questions_answered']}[/bold]")

    focus = focus_themes(themes)
    if focus:
        console.print(theme_table("Focus Themes", focus, today))

    areas = effort_by_area(themes)
    if areas:
        table = Table(title="Effort by Area")
        table.add_column("Area", style="cyan")
        table.add_column("Questions", justify="right")
        table.add_column("Share", justify="right")
        for a in areas:
            table.add_row(a["area"], str(a["questions"]), f"{a['percentage']}%")
        console.print(table)


COMMANDS = {
    "today": cmd_today,
    "add": cmd_add,
    "review": cmd_review,
    "undo": cmd_undo,
    "master": cmd_master,
    "history": cmd_history,
    "dashboard": cmd_dashboard,
}


def run_command(kernel: RevisionKernel, choice: str) -> bool:
    """Run one menu command; returns False when the user quits."""
    if choice in ("quit", "exit", "q"):
        console.print("[dim]See you at the next review![/dim]")
        return False
    handler = COMMANDS.get(choice)
    if handler is None:
        console.print("[red]Unknown command. Try again.[/red]")
        return True
    try:
        handler(kernel)
    except RevisorError as e:
        console.print(f"[red]Error: {e}[/red]")
    return True


def main():
    settings = get_settings()
    setup_logging(settings.log_level)
    kernel = RevisionKernel(SqliteStore(settings.db_path), SystemClock(), settings)

    show_welcome()

    while True:
        show_menu()
        choice = Prompt.ask("\n[bold]>[/bold]", default="today").strip().lower()
        try:
            if not run_command(kernel, choice):
                break
        except KeyboardInterrupt:
            console.print("\n[dim]Use 'quit' to exit.[/dim]")


if __name__ == "__main__":
    main()

"""Interactive CLI application."""
import logging
import os
import time

from rich.console import Console, Group
from rich.live import Live
from rich.logging import RichHandler
from rich.panel import Panel
from rich.progress_bar import ProgressBar
from rich.prompt import Prompt
from rich.table import Table

from study_tracker import store
from study_tracker.db import DEFAULT_DB_PATH, init_db
from study_tracker.errors import StudyTrackerError, ValidationError
from study_tracker.identity import LocalIdentityProvider
from study_tracker.models import DEFAULT_COLOR, PRIORITIES, STUDY_MODES
from study_tracker.navigation import CHAPTERS, SUBJECTS, TOPICS, ViewController, top_level_view
from study_tracker.notify import ConsoleNotifier, Notification, send
from study_tracker.pomodoro import CountdownCycle
from study_tracker.seed import is_seeded
from study_tracker.settings import (
    LONG_BREAK_CHOICES, SHORT_BREAK_CHOICES, WORK_CHOICES, PomodoroSettings,
    get_sound_enabled, load_pomodoro_settings, save_pomodoro_settings, set_sound_enabled,
)
from study_tracker.stats import (
    calculate_stats, chapter_progress, format_minutes, subject_progress, subject_time_spent,
)
from study_tracker.stopwatch import IDLE, RUNNING, SUBJECTS as FOCUS_SUBJECTS, Stopwatch, format_duration
from study_tracker.ticker import Ticker

console = Console()
notifier = ConsoleNotifier(console)


class FormCancelled(Exception):
    """Raised when user types 'q' or 'menu' during a form."""


def form_prompt(prompt: str, **kwargs) -> str:
    """Prompt.ask wrapper that raises FormCancelled on 'q' or 'menu'."""
    result = Prompt.ask(prompt, **kwargs)
    if result is not None and result.strip().lower() in ("q", "menu"):
        raise FormCancelled()
    return result


def form_int_prompt(prompt: str, choices: list[str] | None = None, **kwargs) -> int:
    result = form_prompt(prompt, choices=choices, **kwargs)
    try:
        return int(result)
    except ValueError:
        raise ValidationError(f"Expected a whole number, got {result!r}") from None


def setup_logging() -> None:
    level = logging.INFO if os.environ.get("STUDY_TRACKER_DEBUG") else logging.WARNING
    logging.basicConfig(
        level=level, format="%(message)s", datefmt="[%X]",
        handlers=[RichHandler(console=console, show_path=False)],
    )


def show_welcome():
    console.print(Panel(
        "[bold]B.Tech Study Tracker[/bold]\n[dim]Master your academics with organized study planning[/dim]",
        title="Welcome", border_style="blue",
    ))


def show_menu(nav: ViewController):
    console.print("\n[bold]Commands:[/bold]")
    commands = [("open", "Open a subject or chapter"), ("add", f"Add a {_level_noun(nav)}")]
    if nav.view == TOPICS:
        commands += [
            ("complete", "Mark a topic complete"),
            ("revise", "Log a revision"),
            ("edit", "Edit notes / time spent"),
        ]
    if nav.view != SUBJECTS:
        commands += [("up", "Back one level"), ("home", "Back to subjects")]
    commands += [
        ("stats", "Study statistics"),
        ("pomodoro", "Pomodoro timer"),
        ("stopwatch", "Focus stopwatch"),
        ("settings", "Timer settings"),
        ("reset", "Restore sample data"),
        ("logout", "Sign out"),
        ("quit", "Exit"),
    ]
    for cmd, desc in commands:
        console.print(f"  [cyan]{cmd:<14}[/cyan] {desc}")


def _level_noun(nav: ViewController) -> str:
    return {SUBJECTS: "subject", CHAPTERS: "chapter", TOPICS: "topic"}[nav.view]


def _bar(percent: float, color: str = "green") -> ProgressBar:
    return ProgressBar(total=100, completed=percent, width=20, complete_style=color, finished_style=color)


def render_view(nav: ViewController):
    console.print("\n[bold]" + " › ".join(nav.breadcrumb()) + "[/bold]")
    if nav.view == SUBJECTS:
        render_stats_line(nav)
        table = Table(title="Subjects")
        table.add_column("#", justify="right")
        table.add_column("Subject", style="cyan")
        table.add_column("Chapters", justify="right")
        table.add_column("Time", justify="right")
        table.add_column("Progress")
        table.add_column("%", justify="right")
        for i, s in enumerate(nav.data.subjects, 1):
            pct = subject_progress(s)
            table.add_row(
                str(i), f"[{s.color}]■[/] {s.name}", str(len(s.chapters)),
                format_minutes(subject_time_spent(s)), _bar(pct), f"{pct:.0f}%",
            )
        if not nav.data.subjects:
            console.print("[yellow]No subjects yet. Use 'add' to start tracking your studies![/yellow]")
            return
    elif nav.view == CHAPTERS:
        subject = nav.current_subject
        table = Table(title=subject.name)
        table.add_column("#", justify="right")
        table.add_column("Chapter", style="cyan")
        table.add_column("Topics", justify="right")
        table.add_column("Progress")
        table.add_column("%", justify="right")
        for i, c in enumerate(subject.chapters, 1):
            pct = chapter_progress(c)
            done = " [green]✓ Complete[/green]" if pct == 100 else ""
            table.add_row(str(i), c.name, str(len(c.topics)), _bar(pct), f"{pct:.0f}%{done}")
        if not subject.chapters:
            console.print(f"[yellow]No chapters yet. Add chapters to organize your {subject.name} studies![/yellow]")
            return
    else:
        chapter = nav.current_chapter
        table = Table(title=chapter.name)
        table.add_column("#", justify="right")
        table.add_column("Topic", style="cyan")
        table.add_column("Status")
        table.add_column("Priority")
        table.add_column("Difficulty")
        table.add_column("Mode")
        table.add_column("Revisions", justify="right")
        table.add_column("Time", justify="right")
        priority_colors = {"High": "red", "Medium": "yellow", "Low": "green"}
        for i, t in enumerate(chapter.topics, 1):
            status = f"[green]✓ {t.completed_date}[/green]" if t.completed else "[dim]pending[/dim]"
            color = priority_colors.get(t.priority, "white")
            table.add_row(
                str(i), t.name, status, f"[{color}]{t.priority}[/{color}]",
                "★" * t.difficulty + "☆" * (5 - t.difficulty), t.study_mode,
                str(len(t.revisions)), format_minutes(t.time_spent),
            )
        if not chapter.topics:
            console.print(f"[yellow]No topics yet. Add topics to start studying {chapter.name}![/yellow]")
            return
    console.print(table)


def render_stats_line(nav: ViewController):
    stats = calculate_stats(nav.data)
    console.print(
        f"  Topics Completed: [bold]{stats['topics_completed']}[/bold]  |  "
        f"Study Time: [bold]{format_minutes(stats['total_study_time'])}[/bold]  |  "
        f"Streak: [bold]{stats['current_streak']} days[/bold]  |  "
        f"Revisions: [bold]{stats['total_revisions']}[/bold]"
    )


def choose(items: list, label: str):
    if not items:
        console.print(f"[yellow]No {label}s to choose from.[/yellow]")
        return None
    for i, item in enumerate(items, 1):
        console.print(f"  [cyan]{i}[/cyan]) {item.name}")
    index = form_int_prompt(f"Select {label}", choices=[str(i) for i in range(1, len(items) + 1)])
    return items[index - 1]


def cmd_open(nav: ViewController):
    if nav.view == TOPICS:
        console.print("[yellow]Topics are the deepest level. Use 'up' or 'home'.[/yellow]")
        return
    item = choose(nav.items(), _level_noun(nav))
    if item is None:
        return
    if nav.view == SUBJECTS:
        nav.select_subject(item.id)
    else:
        nav.select_chapter(item.id)


def cmd_add(db_path: str, nav: ViewController):
    if nav.view == SUBJECTS:
        name = form_prompt("Subject name")
        color = form_prompt("Subject color", default=DEFAULT_COLOR)
        subject = store.add_subject(db_path, name, color)
        send(notifier, Notification("Subject Added", f"{subject.name} has been added to your study plan!"))
    elif nav.view == CHAPTERS:
        name = form_prompt("Chapter name")
        chapter = store.add_chapter(db_path, nav.subject_id, name)
        send(notifier, Notification("Chapter Added", f"{chapter.name} has been added!"))
    else:
        name = form_prompt("Topic name")
        notes = form_prompt("Notes", default="")
        priority = form_prompt("Priority", choices=list(PRIORITIES), default="Medium")
        difficulty = form_int_prompt("Difficulty (1-5 stars)", choices=["1", "2", "3", "4", "5"], default="3")
        study_mode = form_prompt("Study mode", choices=list(STUDY_MODES), default="Theory")
        topic = store.add_topic(
            db_path, nav.subject_id, nav.chapter_id, name,
            notes=notes, priority=priority, difficulty=difficulty, study_mode=study_mode,
        )
        send(notifier, Notification("Topic Added", f"{topic.name} has been added to your study list!"))
    nav.refresh()


def cmd_complete(db_path: str, nav: ViewController):
    topic = choose(nav.items(), "topic")
    if topic is None:
        return
    store.mark_topic_complete(db_path, nav.subject_id, nav.chapter_id, topic.id)
    nav.refresh()
    send(notifier, Notification("Topic Completed!", "Great job! Keep up the momentum!"))


def cmd_revise(db_path: str, nav: ViewController):
    topic = choose(nav.items(), "topic")
    if topic is None:
        return
    store.add_revision(db_path, nav.subject_id, nav.chapter_id, topic.id)
    nav.refresh()
    send(notifier, Notification("Revision Added", "Consistent revision leads to mastery!"))


def cmd_edit(db_path: str, nav: ViewController):
    topic = choose(nav.items(), "topic")
    if topic is None:
        return
    notes = form_prompt("Notes", default=topic.notes)
    time_spent = form_int_prompt("Time spent (minutes)", default=str(topic.time_spent))
    store.update_topic(db_path, nav.subject_id, nav.chapter_id, topic.id, notes=notes, time_spent=time_spent)
    nav.refresh()
    console.print("[green]Topic updated.[/green]")


def cmd_stats(nav: ViewController):
    stats = calculate_stats(nav.data)
    overall = Table.grid(padding=(0, 1))
    overall.add_row("Overall Progress:", _bar(stats["overall_progress"]), f"[bold]{stats['overall_progress']}%[/bold]")
    summary = Group(
        f"Topics Completed: [bold]{stats['topics_completed']}[/bold] of {stats['total_topics']}",
        overall,
        f"Study Time: [bold]{format_minutes(stats['total_study_time'])}[/bold]\n"
        f"Study Streak: [bold]{stats['current_streak']} days[/bold]\n"
        f"Revisions: [bold]{stats['total_revisions']}[/bold]",
    )
    console.print(Panel(summary, title="Study Statistics", border_style="blue"))
    table = Table(title="By Subject")
    table.add_column("Subject", style="cyan")
    table.add_column("Progress", justify="right")
    table.add_column("Time", justify="right")
    for s in nav.data.subjects:
        table.add_row(s.name, f"{subject_progress(s):.0f}%", format_minutes(subject_time_spent(s)))
    console.print(table)


def render_pomodoro(cycle: CountdownCycle):
    dots = "".join(
        "●" if i < cycle.completed_sessions % cycle.settings.sessions_until_long_break else "○"
        for i in range(cycle.settings.sessions_until_long_break)
    )
    state = "[green]running[/green]" if cycle.running else "[yellow]paused[/yellow]"
    return Panel(Group(
        f"[bold]{cycle.title}[/bold]  {state}",
        f"[bold]{cycle.format_time()}[/bold]",
        ProgressBar(total=100, completed=cycle.progress() * 100, width=40),
        f"Sessions Completed: {cycle.completed_sessions}  {dots}",
    ), title="Pomodoro Timer", border_style="blue")


def watch(render, target, refresh: float):
    """Show a live view of target until Ctrl+C."""
    console.print("[dim]Ctrl+C to return to the timer menu[/dim]")
    with Live(render(target), console=console, auto_refresh=False) as live:
        with Ticker(refresh, lambda: live.update(render(target), refresh=True)):
            try:
                while True:
                    time.sleep(refresh)
            except KeyboardInterrupt:
                pass


def cmd_pomodoro(db_path: str):
    cycle = CountdownCycle(
        load_pomodoro_settings(db_path), notify=notifier, sound_enabled=get_sound_enabled(db_path),
    )
    with cycle:
        while True:
            console.print(render_pomodoro(cycle))
            action = Prompt.ask(
                "Timer", choices=["toggle", "reset", "watch", "back"], default="toggle" if not cycle.running else "watch",
            )
            if action == "toggle":
                cycle.toggle()
            elif action == "reset":
                cycle.reset()
            elif action == "watch":
                watch(render_pomodoro, cycle, 0.5)
            else:
                break


def render_stopwatch(sw: Stopwatch):
    lines = [
        f"Subject: [bold]{sw.subject}[/bold]  ({sw.state})",
        f"[bold]{sw.display()}[/bold]",
        f"Today: [bold]{format_duration(sw.today_focus_time())}[/bold]  |  "
        f"Sessions: [bold]{len(sw.todays_sessions())}[/bold]",
    ]
    recent = sw.recent_sessions()
    if recent:
        lines.append("[dim]Recent:[/dim] " + ", ".join(f"{s.subject} {format_duration(s.duration)}" for s in recent))
    return Panel(Group(*lines), title="Focus Stopwatch", border_style="green")


def cmd_stopwatch(db_path: str):
    with Stopwatch(db_path, notify=notifier) as sw:
        while True:
            console.print(render_stopwatch(sw))
            if sw.state == IDLE:
                choices = ["start", "subject", "totals", "back"]
            elif sw.state == RUNNING:
                choices = ["pause", "stop", "reset", "watch", "back"]
            else:
                choices = ["start", "stop", "reset", "back"]
            action = Prompt.ask("Stopwatch", choices=choices, default=choices[0])
            if action == "start":
                sw.start()
            elif action == "pause":
                sw.pause()
            elif action == "stop":
                sw.stop()
            elif action == "reset":
                sw.reset()
            elif action == "watch":
                watch(render_stopwatch, sw, 0.1)
            elif action == "subject":
                sw.set_subject(Prompt.ask("Subject", choices=list(FOCUS_SUBJECTS), default=sw.subject))
            elif action == "totals":
                table = Table(title="Focus Time by Subject")
                table.add_column("Subject", style="cyan")
                table.add_column("Time", justify="right")
                for subject in FOCUS_SUBJECTS:
                    table.add_row(subject, format_duration(sw.subject_time(subject)))
                console.print(table)
            else:
                if sw.state != IDLE:
                    sw.stop()
                break


def cmd_settings(db_path: str):
    current = load_pomodoro_settings(db_path)
    settings = PomodoroSettings(
        work_duration=form_int_prompt(
            "Work (min)", choices=[str(c) for c in WORK_CHOICES], default=str(current.work_duration)),
        short_break_duration=form_int_prompt(
            "Short break (min)", choices=[str(c) for c in SHORT_BREAK_CHOICES],
            default=str(current.short_break_duration)),
        long_break_duration=form_int_prompt(
            "Long break (min)", choices=[str(c) for c in LONG_BREAK_CHOICES],
            default=str(current.long_break_duration)),
        sessions_until_long_break=form_int_prompt(
            "Sessions until long break", default=str(current.sessions_until_long_break)),
    )
    save_pomodoro_settings(db_path, settings)
    sound = form_prompt("Sound", choices=["on", "off"], default="on" if get_sound_enabled(db_path) else "off")
    set_sound_enabled(db_path, sound == "on")
    console.print("[green]Settings saved.[/green]")


def auth_screen(identity: LocalIdentityProvider) -> bool:
    """Credential form. Returns False when the user chooses to quit."""
    mode = Prompt.ask("\n[bold]Account[/bold]", choices=["signin", "signup", "quit"], default="signin")
    if mode == "quit":
        return False
    try:
        if mode == "signin":
            email = form_prompt("Email")
            password = form_prompt("Password", password=True)
            user = identity.sign_in(email, password)
            console.print(f"[green]Welcome back, {user.name}![/green]")
        else:
            name = form_prompt("Full name")
            email = form_prompt("Email")
            password = form_prompt("Password", password=True)
            confirm = form_prompt("Confirm password", password=True)
            user = identity.sign_up(email, password, name, confirm=confirm)
            console.print(f"[green]Account created. Welcome, {user.name}![/green]")
    except FormCancelled:
        pass
    except StudyTrackerError as e:
        console.print(f"[red]{e}[/red]")
    return True


def dispatch(choice: str, db_path: str, nav: ViewController, identity: LocalIdentityProvider) -> bool:
    """Run one tracker command. Returns False to exit."""
    if choice == "open":
        cmd_open(nav)
    elif choice == "add":
        cmd_add(db_path, nav)
    elif choice == "complete" and nav.view == TOPICS:
        cmd_complete(db_path, nav)
    elif choice == "revise" and nav.view == TOPICS:
        cmd_revise(db_path, nav)
    elif choice == "edit" and nav.view == TOPICS:
        cmd_edit(db_path, nav)
    elif choice == "up":
        nav.go_up()
    elif choice == "home":
        nav.go_home()
    elif choice == "stats":
        cmd_stats(nav)
    elif choice == "pomodoro":
        cmd_pomodoro(db_path)
    elif choice == "stopwatch":
        cmd_stopwatch(db_path)
    elif choice == "settings":
        cmd_settings(db_path)
    elif choice == "reset":
        if Prompt.ask("Replace all subjects with the sample data?", choices=["yes", "no"], default="no") == "yes":
            store.reset_data(db_path)
            nav.go_home()
            nav.refresh()
    elif choice == "logout":
        identity.sign_out()
        nav.go_home()
    elif choice in ("quit", "exit", "q"):
        console.print("[dim]Keep up the good work![/dim]")
        return False
    else:
        console.print("[red]Unknown command. Try again.[/red]")
    return True


def main():
    setup_logging()
    db_path = DEFAULT_DB_PATH
    init_db(db_path)
    if not is_seeded(db_path):
        console.print("[dim]Setting up for first use...[/dim]")

    show_welcome()
    identity = LocalIdentityProvider(db_path)
    identity.load()
    nav = None

    while True:
        gate = top_level_view(identity.state)
        if gate == "loading":
            console.print("[dim]Loading...[/dim]")
            identity.load()
            continue
        if gate == "auth":
            nav = None
            if not auth_screen(identity):
                break
            continue
        if nav is None:
            nav = ViewController(db_path)
        nav.refresh()
        render_view(nav)
        show_menu(nav)
        choice = Prompt.ask("\n[bold]>[/bold]", default="open").strip().lower()
        try:
            if not dispatch(choice, db_path, nav, identity):
                break
        except FormCancelled:
            console.print("[dim]Cancelled.[/dim]")
        except KeyboardInterrupt:
            console.print("\n[dim]Use 'quit' to exit.[/dim]")
        except StudyTrackerError as e:
            console.print(f"[red]{e}[/red]")


if __name__ == "__main__":
    main()

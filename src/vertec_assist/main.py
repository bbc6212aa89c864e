import argparse
import asyncio
import logging
import sys
from pathlib import Path


def main():
    parser = argparse.ArgumentParser(
        description="Vertec Assist - completion and model tools for Vertec Python scripts",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  vertec-assist complete script.py 12 17     Completions at line 12, column 17
  vertec-assist hover script.py 12 10        Documentation for the word under the cursor
  vertec-assist browse                       List all classes
  vertec-assist browse Projekt               Members and associations of a class
  vertec-assist reload model                 Refetch the model from the API
  vertec-assist translate class Projekt --to en
  vertec-assist stubs ./typings              Generate .pyi stubs for type checkers
  vertec-assist settings                     Show current configuration

Lines and columns are 0-based.
""",
    )
    parser.add_argument(
        "--verbose", "-v", action="store_true", help="Enable debug logging"
    )
    subparsers = parser.add_subparsers(dest="command", help="Commands")

    complete_parser = subparsers.add_parser("complete", help="List completions at a position")
    _add_position_arguments(complete_parser)
    complete_parser.add_argument(
        "--filter", "-f", action="store_true",
        help="Only show items matching the partially typed name"
    )

    hover_parser = subparsers.add_parser("hover", help="Show documentation at a position")
    _add_position_arguments(hover_parser)

    browse_parser = subparsers.add_parser("browse", help="Browse the Vertec model")
    browse_parser.add_argument("class_name", nargs="?", help="Class name (German or English)")

    reload_parser = subparsers.add_parser("reload", help="Refresh cached data")
    reload_parser.add_argument("dataset", choices=["model", "translations"])

    translate_parser = subparsers.add_parser("translate", help="Translate a Vertec label")
    translate_parser.add_argument("kind", choices=["class", "member", "text"])
    translate_parser.add_argument("term", help="German or English label")
    translate_parser.add_argument(
        "--to", "-t", default="en", help="Target language: de or en (default: en)"
    )

    stubs_parser = subparsers.add_parser("stubs", help="Generate type stubs")
    stubs_parser.add_argument("output_dir", help="Directory to write the stubs to")

    subparsers.add_parser("settings", help="Show current configuration")

    args = parser.parse_args()

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        stream=sys.stderr,
    )

    if args.command is None:
        parser.print_help()
        sys.exit(0)
    elif args.command == "complete":
        asyncio.run(run_complete(args.file, args.line, args.column, args.filter))
    elif args.command == "hover":
        asyncio.run(run_hover(args.file, args.line, args.column))
    elif args.command == "browse":
        asyncio.run(run_browse(args.class_name))
    elif args.command == "reload":
        asyncio.run(run_reload(args.dataset))
    elif args.command == "translate":
        run_translate(args.kind, args.term, args.to)
    elif args.command == "stubs":
        asyncio.run(run_stubs(args.output_dir))
    elif args.command == "settings":
        run_settings()
    else:
        parser.print_help()


def _add_position_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("file", help="Path to the Python script")
    parser.add_argument("line", type=int, help="Line (0-based)")
    parser.add_argument("column", type=int, help="Column (0-based)")


def _cache_context():
    from vertec_assist.config import get_settings
    from vertec_assist.core import CacheContext, JsonFileStore

    settings = get_settings()
    context = CacheContext(lifetime_days=settings.cache_lifetime_days)
    context.initialize(JsonFileStore(settings.cache_dir))
    return context


def _schema_provider():
    from vertec_assist.core import Dataset
    from vertec_assist.data import SchemaProvider

    return SchemaProvider(_cache_context().cache(Dataset.MODEL))


async def _load_schema(console, provider):
    from vertec_assist.core import VertecAssistError

    try:
        return await provider.fetch_schema()
    except VertecAssistError as e:
        console.print(f"[red]Error: {e}[/red]")
        console.print("[yellow]Check VERTEC_MODEL_URL and the API availability.[/yellow]")
        sys.exit(1)


def _read_script(console, path: str) -> str:
    file_path = Path(path)
    if not file_path.is_file():
        console.print(f"[red]Error: File does not exist: {file_path}[/red]")
        sys.exit(1)
    return file_path.read_text(encoding="utf-8")


async def run_complete(path: str, line: int, column: int, filter_prefix: bool = False):
    from rich.console import Console
    from rich.table import Table

    from vertec_assist.providers import CompletionProvider
    from vertec_assist.resolution import ChainResolver, Position

    console = Console()
    text = _read_script(console, path)
    provider = _schema_provider()
    await _load_schema(console, provider)

    completions = CompletionProvider(ChainResolver(provider.current))
    items = completions.provide_completions(text, Position(line, column), filter_prefix)

    if not items:
        console.print("[yellow]No completions.[/yellow]")
        return

    table = Table(title=f"Completions at {line}:{column}")
    table.add_column("Name", style="cyan")
    table.add_column("Alt", style="cyan")
    table.add_column("Kind", style="magenta", width=12)
    table.add_column("Detail", style="green")
    table.add_column("From", style="dim")

    for item in items:
        table.add_row(
            item.label,
            item.label_alt or "",
            item.kind.value,
            item.detail,
            item.source_class if item.is_inherited else "",
        )

    console.print(table)


async def run_hover(path: str, line: int, column: int):
    from rich.console import Console
    from rich.markdown import Markdown
    from rich.panel import Panel

    from vertec_assist.providers import HoverProvider
    from vertec_assist.resolution import ChainResolver, Position

    console = Console()
    text = _read_script(console, path)
    provider = _schema_provider()
    await _load_schema(console, provider)

    hover = HoverProvider(ChainResolver(provider.current)).provide_hover(
        text, Position(line, column)
    )
    if hover is None:
        console.print("[yellow]Nothing to show.[/yellow]")
        return

    word = text.splitlines()[line][hover.start:hover.end]
    console.print(Panel(Markdown(hover.contents), title=word, border_style="green"))


async def run_browse(class_name: str | None = None):
    from rich.console import Console
    from rich.table import Table

    console = Console()
    provider = _schema_provider()
    classes = await _load_schema(console, provider)

    if class_name:
        cls = classes.find(class_name)
        if cls is None:
            console.print(f"[red]Class '{class_name}' not found.[/red]")
            sys.exit(1)
        _print_class(console, cls, classes)
        return

    if not len(classes):
        console.print("[yellow]No classes found.[/yellow]")
        return

    table = Table(title="Vertec Classes")
    table.add_column("Name", style="cyan")
    table.add_column("ID", style="dim", justify="right")
    table.add_column("DB", style="green")
    table.add_column("Parent", style="magenta")
    table.add_column("Persistent", justify="center")

    for cls in classes:
        table.add_row(
            f"{cls.name} | {cls.name_alt}",
            str(cls.class_id),
            cls.table_mapping,
            cls.superclass.name if cls.superclass else "",
            "Yes" if cls.is_persistent else "No",
        )

    console.print(table)


def _print_class(console, cls, classes):
    from rich.panel import Panel
    from rich.table import Table

    from vertec_assist.browser import describe_class

    description = describe_class(cls, classes)
    console.print(
        Panel(
            f"[cyan]ID:[/cyan] {cls.class_id}\n"
            f"[cyan]DB:[/cyan] {cls.table_mapping or '-/-'}\n"
            f"[cyan]Parent:[/cyan] {cls.superclass.name if cls.superclass else '-/-'}\n"
            f"[cyan]Persistent:[/cyan] {'Yes' if cls.is_persistent else 'No'}\n"
            f"{cls.description}",
            title=f"{cls.name} | {cls.name_alt}",
            border_style="cyan",
        )
    )

    if description.is_empty:
        console.print("[yellow]Class has no members or associations.[/yellow]")
        return

    for title, members in (
        ("Own members", description.own_members),
        ("Inherited members", description.inherited_members),
    ):
        if not members:
            continue
        table = Table(title=title)
        table.add_column("Name", style="cyan")
        table.add_column("Type", style="green")
        table.add_column("Length", justify="right")
        table.add_column("From", style="dim")
        for member in members:
            table.add_row(
                f"{member.name} | {member.name_alt}",
                member.member_type,
                str(member.length or ""),
                member.source_class if member.is_inherited_by(cls) else "",
            )
        console.print(table)

    for title, views in (
        ("Own associations", description.own_associations),
        ("Inherited associations", description.inherited_associations),
    ):
        if not views:
            continue
        table = Table(title=title)
        table.add_column("Name", style="cyan")
        table.add_column("Target", style="green")
        table.add_column("Multi", justify="center")
        table.add_column("From", style="dim")
        for view in views:
            association = view.association
            table.add_row(
                f"{association.perceived_name} | {association.perceived_name_alt or '-/-'}",
                f"→ {view.target_name or '-/-'} | {view.target_name_alt or '-/-'}",
                "Yes" if view.is_multi else "No",
                association.source_class if association.is_inherited_by(cls) else "",
            )
        console.print(table)


async def run_reload(dataset: str):
    from rich.console import Console

    from vertec_assist.core import Dataset, VertecAssistError
    from vertec_assist.translations import Translator

    console = Console()
    context = _cache_context()

    try:
        if dataset == Dataset.MODEL.value:
            from vertec_assist.data import SchemaProvider

            classes = await SchemaProvider(context.cache(Dataset.MODEL)).reload()
            console.print(f"[green]Reloaded {len(classes)} classes.[/green]")
        else:
            tables = Translator(context.cache(Dataset.TRANSLATIONS)).reload()
            total = sum(len(entries) for entries in tables.values())
            console.print(f"[green]Reloaded {total} translations.[/green]")
    except VertecAssistError as e:
        console.print(f"[red]Error: {e}[/red]")
        sys.exit(1)


def run_translate(kind: str, term: str, target: str = "en"):
    from rich.console import Console
    from rich.table import Table

    from vertec_assist.core import Dataset, Language, TranslationKind, VertecAssistError
    from vertec_assist.translations import Translator

    console = Console()
    language = Language.from_label(target)
    if language is None:
        console.print(f"[red]Unknown language '{target}', use de or en.[/red]")
        sys.exit(1)

    translator = Translator(_cache_context().cache(Dataset.TRANSLATIONS))
    translation_kind = TranslationKind(kind)

    try:
        translation = translator.translate(translation_kind, term, language)
        if translation is not None:
            console.print(translation)
            return
        candidates = translator.search(translation_kind, term)
    except VertecAssistError as e:
        console.print(f"[red]Error: {e}[/red]")
        sys.exit(1)

    if not candidates:
        console.print(f"[yellow]No translation found for '{term}'.[/yellow]")
        sys.exit(1)

    table = Table(title=f"Candidates for '{term}'")
    table.add_column("Deutsch", style="cyan")
    table.add_column("English", style="green")
    table.add_column("Detail", style="dim")
    for entry in candidates:
        table.add_row(entry.german, entry.english, entry.detail)
    console.print(table)


async def run_stubs(output_dir: str):
    from rich.console import Console

    from vertec_assist.stubs import generate_stubs

    console = Console()
    provider = _schema_provider()
    classes = await _load_schema(console, provider)

    if not len(classes):
        console.print("[red]No model data available.[/red]")
        sys.exit(1)

    written = generate_stubs(classes, Path(output_dir))
    console.print(f"[green]Generated {len(written)} stub files in {output_dir}.[/green]")


def run_settings():
    from rich.console import Console
    from rich.table import Table

    from vertec_assist.config import get_settings

    console = Console()
    settings = get_settings()

    api_table = Table(title="Model API Configuration", show_header=False)
    api_table.add_column("Setting", style="cyan")
    api_table.add_column("Value", style="green")

    api_table.add_row("Model URL", settings.model_url or "[red]not set[/red]")
    api_table.add_row("Model URL (English)", settings.model_url_alt or "[dim]not set[/dim]")
    api_table.add_row("Request Timeout", f"{settings.request_timeout}s")
    api_table.add_row("Page Limit", str(settings.api.vertec_page_limit))

    console.print(api_table)
    console.print()

    cache_table = Table(title="Cache Configuration", show_header=False)
    cache_table.add_column("Setting", style="cyan")
    cache_table.add_column("Value", style="green")

    cache_table.add_row("Lifetime", f"{settings.cache_lifetime_days} days")
    cache_table.add_row("Directory", str(settings.cache_dir))

    console.print(cache_table)
    console.print()

    tr_table = Table(title="Translation Files", show_header=False)
    tr_table.add_column("Setting", style="cyan")
    tr_table.add_column("Value", style="green")

    tr_table.add_row(
        "Classes/Members", str(settings.classes_members_path or "[dim]not set[/dim]")
    )
    tr_table.add_row("Texts", str(settings.translations_path or "[dim]not set[/dim]"))

    console.print(tr_table)


if __name__ == "__main__":
    main()

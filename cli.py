# cli.py - interactive catalog client
import os
import sys
from datetime import datetime
from typing import List, Dict, Any, Optional

from rich.console import Console
from rich.table import Table
from rich.panel import Panel
from rich.prompt import Confirm, Prompt
from rich.progress import Progress, SpinnerColumn, TextColumn
from rich import box

from prompt_toolkit import prompt
from prompt_toolkit.completion import WordCompleter, PathCompleter
from prompt_toolkit.styles import Style as PromptStyle

from sdk.catalog_client import CatalogClient

console = Console()
c = CatalogClient(base_url=os.getenv("CATALOG_URL", "http://127.0.0.1:5000"))


# Global state for status messages and caching
status_message = "Ready"
category_cache: List[str] = []
product_cache: Dict[str, List[Dict[str, Any]]] = {}

custom_style = PromptStyle.from_dict({
    'completion-menu.completion': 'bg:#008888 #ffffff',
    'completion-menu.completion.current': 'bg:#00aaaa #000000',
    'scrollbar.background': 'bg:#88aaaa',
    'scrollbar.button': 'bg:#222222',
})


# ---------------------------
# Display helpers
# ---------------------------
def show_products(category: str, products: List[Dict[str, Any]]):
    if not products:
        console.print(f"[italic yellow]No products in '{category}'[/italic yellow]")
        return

    table = Table(
        title=f"📦 {category}",
        box=box.ROUNDED,
        header_style="bold cyan",
        title_style="bold magenta",
        show_lines=True
    )
    table.add_column("ID", style="dim", width=36)
    table.add_column("Name", style="bold", width=20)
    table.add_column("Price", justify="right", width=10)
    table.add_column("Volume", justify="right", width=8)
    table.add_column("Image", width=30)

    for p in products:
        table.add_row(
            p.get("id", "N/A"),
            p.get("name", "N/A"),
            str(p.get("price", "")),
            str(p.get("volume", 0)),
            p.get("image") or "[dim]-[/dim]",
        )
    console.print(table)


def show_status(message: str, is_success: bool = True):
    style = "green" if is_success else "red"
    return Panel.fit(f"[{style}]{message}[/{style}]", title="Status")


def try_api(fn, *args, success_msg: Optional[str] = None, **kwargs):
    """
    Calls fn(*args, **kwargs) behind a spinner.
    Errors are reported in the status panel and None is returned.
    """
    global status_message
    try:
        with Progress(
            SpinnerColumn(),
            TextColumn("[progress.description]{task.description}"),
            transient=True,
        ) as progress:
            progress.add_task(description="Processing...", total=None)
            result = fn(*args, **kwargs)

        if success_msg:
            status_message = success_msg
            console.print(show_status(success_msg, True))
        return result
    except Exception as e:
        status_message = f"Error: {e}"
        console.print(show_status(f"Error: {e}", False))
        return None


# ---------------------------
# Autocompletion helpers
# ---------------------------
def refresh_categories():
    global category_cache
    info = try_api(c.info) or {}
    category_cache = info.get("categories", [])


def get_category_completer():
    return WordCompleter(category_cache, ignore_case=True)


def get_product_completer(category: str):
    products = product_cache.get(category)
    if products is None:
        products = try_api(c.list_products, category) or []
        product_cache[category] = products
    return WordCompleter([p.get("id", "") for p in products if p.get("id")], ignore_case=True)


def create_header():
    header = Table(show_header=False, box=box.ROUNDED)
    header.add_column("left", width=30)
    header.add_column("center", width=40)
    header.add_column("right", width=30)

    now = datetime.now().strftime("%Y-%m-%d %H:%M:%S")
    header.add_row(
        "🧴 Catalog",
        f"[bold blue]{c.base_url}[/bold blue]",
        f"[dim]{now}[/dim]"
    )
    return Panel(header, style="bold blue")


def prompt_with_autocomplete(message: str, completer=None, default: str = ""):
    return prompt(f"{message} ", completer=completer, style=custom_style, default=default)


# ---------------------------
# Main menu
# ---------------------------
def menu():
    global status_message

    console.clear()
    console.print(create_header())
    refresh_categories()

    while True:
        if status_message:
            console.print(show_status(status_message, "Error" not in status_message))

        menu_table = Table.grid(padding=(0, 2))
        menu_table.add_column("Key", style="bold cyan", width=4)
        menu_table.add_column("Option", width=30)
        options = [
            ("1", "📦 List category"),
            ("2", "➕ Create product"),
            ("3", "🗑️ Delete product"),
            ("4", "💓 Health"),
            ("q", "👋 Quit"),
        ]
        for row in options:
            menu_table.add_row(*row)
        console.print(Panel(menu_table, title="📋 Menu", border_style="yellow"))

        choice = prompt_with_autocomplete(
            "\nChoose an option",
            completer=WordCompleter(["1", "2", "3", "4", "q", "quit", "exit"])
        ).strip()

        if choice == "1":
            category = prompt_with_autocomplete("Category", completer=get_category_completer()).strip()
            products = try_api(c.list_products, category, success_msg=f"Loaded '{category}'")
            if products is not None:
                product_cache[category] = products
                show_products(category, products)
                refresh_categories()

        elif choice == "2":
            category = prompt_with_autocomplete("Category", completer=get_category_completer()).strip()
            name = prompt_with_autocomplete("Product name").strip()
            price = Prompt.ask("💰 Price")
            volume = Prompt.ask("🧪 Volume", default="0")
            image_path = prompt_with_autocomplete("🖼️ Image path (blank for none)", completer=PathCompleter()).strip()
            resp = try_api(
                c.create_product, category, name, price, volume, image_path or None,
                success_msg=f"Product '{name}' created in '{category}'"
            )
            if resp:
                console.print(Panel(f"Created product: [green]{resp['id']}[/green]"))
                product_cache.pop(category, None)
                refresh_categories()

        elif choice == "3":
            category = prompt_with_autocomplete("Category", completer=get_category_completer()).strip()
            pid = prompt_with_autocomplete("Product ID", completer=get_product_completer(category)).strip()
            if Confirm.ask(f"[red]Delete {pid} from '{category}'?[/red]"):
                resp = try_api(c.delete_product, category, pid, success_msg=f"Product {pid} deleted")
                if resp:
                    show_products(category, [resp])
                    product_cache.pop(category, None)

        elif choice == "4":
            resp = try_api(c.health, success_msg="Service is up")
            if resp:
                console.print(resp)

        elif choice.lower() in ("q", "quit", "exit"):
            if Confirm.ask("Are you sure you want to quit?"):
                console.print(Panel.fit("[bold green]Bye! 👋[/bold green]", title="Goodbye"))
                sys.exit(0)

        console.print()
        console.rule(style="dim")


if __name__ == "__main__":
    try:
        menu()
    except KeyboardInterrupt:
        console.print("\n\n[bold red]Interrupted by user[/bold red]")
        sys.exit(1)
    except Exception as e:
        console.print(f"\n\n[bold red]Unexpected error: {e}[/bold red]")
        sys.exit(1)

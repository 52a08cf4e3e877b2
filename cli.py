# cli.py
import asyncio
import sys
from datetime import datetime
from typing import Any, List, Optional

from rich.console import Console
from rich.table import Table
from rich.panel import Panel
from rich.prompt import IntPrompt, Confirm, Prompt
from rich.progress import Progress, SpinnerColumn, TextColumn
from rich.text import Text
from rich import box

from prompt_toolkit import prompt
from prompt_toolkit.completion import WordCompleter
from prompt_toolkit.styles import Style as PromptStyle

from sdk.dripclient import StoreClient
from storefront.cart_store import CartStore
from storefront.catalog import category_badge
from storefront.config import get_settings
from storefront.errors import StorefrontError
from storefront.events import EventBus
from storefront.models import CustomerInfo, PageControl
from storefront.session import DetailPage, ListingPage
from storefront.storage import FileStorage

console = Console()

status_message = "Ready"

custom_style = PromptStyle.from_dict({
    'completion-menu.completion': 'bg:#008888 #ffffff',
    'completion-menu.completion.current': 'bg:#00aaaa #000000',
    'scrollbar.background': 'bg:#88aaaa',
    'scrollbar.button': 'bg:#222222',
})

DEFAULT_CUSTOMER = CustomerInfo(name="POC 測試用戶", email="customer@example.com")


def format_price(value: int) -> str:
    return f"NT${value:,}"


# ---------------------------
# Display helpers
# ---------------------------
def show_products(page: ListingPage):
    if page.state.loading:
        console.print(f"[italic]{page.text('loading')}[/italic]")
        return
    if page.state.error:
        console.print(Panel.fit(f"[red]{page.state.error}[/red]", title="Error"))
        return

    items = page.visible_items()
    if not items:
        console.print(f"[italic yellow]{page.text('no_results')}[/italic yellow]")
        return

    filters = page.state.filters
    title = "☕ Drip & Brew"
    if filters.keyword.strip():
        title += f" · '{filters.keyword.strip()}'"
    if filters.category_id != "all":
        title += f" · {filters.category_id}"

    table = Table(
        title=title,
        box=box.ROUNDED,
        header_style="bold cyan",
        title_style="bold magenta",
        show_lines=True
    )
    table.add_column("ID", style="dim", width=24)
    table.add_column("Name", style="bold", width=28)
    table.add_column("Price", justify="right", width=10)
    table.add_column("Category", width=16)
    table.add_column("Highlights", width=30)

    for p in items:
        table.add_row(
            p.id,
            p.name,
            format_price(p.price),
            category_badge(p, page.settings.locale),
            "\n".join(f"• {h}" for h in p.highlights)
        )
    console.print(table)
    show_pagination(page.page_controls())


def show_pagination(controls: List[PageControl]):
    if not controls:
        return
    text = Text()
    for control in controls:
        if control.active:
            text.append(f"[{control.label}]", style="bold reverse")
        elif control.disabled:
            text.append(f" {control.label} ", style="dim")
        else:
            text.append(f" {control.label} ", style="cyan")
        text.append(" ")
    console.print(text)


def show_categories(page: ListingPage):
    table = Table(box=box.SIMPLE, header_style="bold yellow")
    table.add_column("ID", style="bold cyan")
    table.add_column("Category")
    table.add_column("Count", justify="right")
    for category in page.category_options():
        marker = " ✓" if category.id == page.state.filters.category_id else ""
        table.add_row(category.id, category.display_label + marker, str(category.count))
    console.print(table)


def show_product_detail(detail: DetailPage):
    if detail.product is None:
        console.print(Panel.fit(f"[red]{detail.state.error or detail.text('product_not_found')}[/red]", title="❌ Product"))
        return

    p = detail.product
    body = Text()
    body.append(f"{p.name}\n", style="bold")
    body.append(f"{category_badge(p, detail.settings.locale)}\n", style="magenta")
    body.append(f"{format_price(p.price)}\n\n", style="bold green")
    if p.description:
        body.append(f"{p.description}\n")
    if p.highlights:
        body.append("\n")
        for h in p.highlights:
            body.append(f"• {h}\n")
    images = p.images
    if images:
        body.append(f"\n🖼  {len(images)} image(s): {images[0]}", style="dim")
    console.print(Panel(body, title=f"ℹ️ {p.id}", border_style="cyan"))


def show_cart(page: ListingPage):
    items = page.cart
    title = Text()
    title.append("🛒 Cart", style="bold")
    title.append(f" ({page.cart_item_count()})", style="bold cyan")
    title.append(f" - Total: {format_price(page.cart_total())}", style="bold green")

    if not items:
        console.print(Panel(page.text("empty_cart"), title=title, style="blue"))
        return

    table = Table(box=box.ROUNDED, header_style="bold blue", show_lines=True)
    table.add_column("ID", style="dim", width=24)
    table.add_column("Product", style="bold", width=28)
    table.add_column("Qty", justify="right", width=6)
    table.add_column("Subtotal", justify="right", width=12)

    for it in items:
        table.add_row(it.id, it.name, str(it.quantity), format_price(it.line_total))

    console.print(Panel(table, title=title, border_style="blue"))


def show_status(message: str, is_success: bool = True):
    style = "green" if is_success else "red"
    return Panel.fit(f"[{style}]{message}[/{style}]", title="Status")


# ---------------------------
# Action wrapper: runs coroutines with a spinner, reports StorefrontError
# ---------------------------
def try_action(page, fn, *args, success_msg: Optional[str] = None, **kwargs) -> Any:
    global status_message
    try:
        with Progress(
            SpinnerColumn(),
            TextColumn("[progress.description]{task.description}"),
            transient=True,
        ) as progress:
            progress.add_task(description="Processing...", total=None)
            result = fn(*args, **kwargs)
            if asyncio.iscoroutine(result):
                result = asyncio.run(result)

        if success_msg:
            status_message = success_msg
            console.print(show_status(success_msg, True))
        return result
    except StorefrontError as e:
        message = page.text(e.message_key)
        status_message = f"Error: {message}"
        console.print(show_status(f"{message} ({e})", False))
        return None


# ---------------------------
# Autocompletion helpers
# ---------------------------
def get_product_completer(page: ListingPage):
    words = [p.id for p in page.state.products] + [p.name for p in page.state.products]
    return WordCompleter([w for w in words if w], ignore_case=True)


def get_cart_completer(page: ListingPage):
    return WordCompleter([item.id for item in page.cart], ignore_case=True)


def get_category_completer(page: ListingPage):
    return WordCompleter([c.id for c in page.category_options()], ignore_case=True)


def resolve_product_id(page: ListingPage, raw: str) -> str:
    raw = raw.strip()
    for p in page.state.products:
        if raw == p.name:
            return p.id
    return raw


# ---------------------------
# Layout and Header
# ---------------------------
def create_header(page: ListingPage):
    header = Table(show_header=False, box=box.ROUNDED)
    header.add_column("left", width=30)
    header.add_column("center", width=40)
    header.add_column("right", width=30)

    now = datetime.now().strftime("%Y-%m-%d %H:%M:%S")
    header.add_row(
        "☕ Drip & Brew",
        f"[bold blue]Storefront CLI[/bold blue]  🛒 {page.cart_item_count()}",
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

    settings = get_settings()
    client = StoreClient(base_url=settings.api_url, timeout=settings.timeout)
    store = CartStore(FileStorage(settings.storage_dir))
    bus = EventBus()
    listing = ListingPage(client, store, bus, settings)
    detail = DetailPage(client, store, bus, settings)

    console.clear()
    console.print(create_header(listing))

    try_action(listing, listing.load_catalog)
    show_products(listing)

    while True:
        if status_message:
            console.print(show_status(status_message, "Error" not in status_message))

        menu_table = Table.grid(padding=(0, 2))
        menu_table.add_column("Key", style="bold cyan", width=4)
        menu_table.add_column("Option", width=30)
        menu_table.add_column("Key", style="bold cyan", width=4)
        menu_table.add_column("Option", width=30)

        options = [
            ("1", "📦 Show current page", "7", "🛒 View cart"),
            ("2", "🔍 Search keyword", "8", "➕ Increase quantity"),
            ("3", "🏷️ Filter by category", "9", "➖ Decrease quantity"),
            ("4", "📄 Go to page (n/p)", "10", "🗑️ Remove from cart"),
            ("5", "ℹ️ Product detail", "11", "✅ Checkout"),
            ("6", "🛒 Add to cart", "12", "🔄 Reload catalog"),
            ("", "", "q", "👋 Quit")
        ]

        for row in options:
            menu_table.add_row(*row)

        console.print(Panel(menu_table, title=f"📋 Menu  (🛒 {listing.cart_item_count()})", border_style="yellow"))

        choice = prompt_with_autocomplete(
            "\nChoose an option",
            completer=WordCompleter([str(i) for i in range(1, 13)] + ["n", "p", "q", "quit", "exit"])
        ).strip()

        if choice == "1":
            show_products(listing)

        elif choice == "2":
            term = prompt_with_autocomplete("Keyword (empty to clear)", default=listing.state.filters.keyword)
            listing.set_keyword(term)
            status_message = f"Filtered by '{term.strip()}'" if term.strip() else "Keyword cleared"
            show_products(listing)

        elif choice == "3":
            show_categories(listing)
            category_id = prompt_with_autocomplete("Category ID", completer=get_category_completer(listing)).strip()
            if listing.set_category(category_id):
                status_message = f"Category {category_id}"
            show_products(listing)

        elif choice in ("4", "n", "p"):
            current = listing.state.pagination.current_page
            if choice == "n":
                target = current + 1
            elif choice == "p":
                target = current - 1
            else:
                target = Prompt.ask("Page", default=str(current))
            if listing.goto_page(target):
                show_products(listing)
            else:
                console.print("[dim]Already on that page[/dim]")

        elif choice == "5":
            pid = resolve_product_id(listing, prompt_with_autocomplete("Product ID", completer=get_product_completer(listing)))
            try_action(detail, detail.load_product, pid)
            show_product_detail(detail)
            if detail.product is not None and Confirm.ask("Add to cart?", default=False):
                raw_qty = Prompt.ask("Quantity", default="1")
                feedback = detail.add_selected(raw_qty)
                if feedback:
                    status_message = feedback
                    show_cart(listing)

        elif choice == "6":
            pid = resolve_product_id(listing, prompt_with_autocomplete("Product ID", completer=get_product_completer(listing)))
            qty = IntPrompt.ask("Quantity", default=1)
            if listing.add_to_cart(pid, qty):
                status_message = f"Added {qty} of {pid}"
                show_cart(listing)
            else:
                console.print(show_status(f"Cannot add '{pid}'", False))

        elif choice == "7":
            show_cart(listing)

        elif choice in ("8", "9", "10"):
            pid = prompt_with_autocomplete("Cart item ID", completer=get_cart_completer(listing)).strip()
            action = {"8": listing.increment, "9": listing.decrement, "10": listing.remove_item}[choice]
            if not action(pid):
                console.print(f"[yellow]'{pid}' is not in the cart[/yellow]")
            show_cart(listing)

        elif choice == "11":
            show_cart(listing)
            if listing.cart and not Confirm.ask("Place order?", default=True):
                continue
            receipt = try_action(listing, listing.checkout, DEFAULT_CUSTOMER)
            if receipt is not None:
                message = listing.text("order_created", order_id=receipt.order.id)
                status_message = message
                console.print(Panel.fit(
                    f"[green]{message}[/green]\n"
                    f"Created: [bold]{receipt.order.created_at}[/bold]",
                    title="✅ Order Confirmation"
                ))

        elif choice == "12":
            if try_action(listing, listing.load_catalog):
                status_message = f"Catalog reloaded ({len(listing.state.products)} products)"
            show_products(listing)

        elif choice.lower() in ("q", "quit", "exit"):
            if Confirm.ask("Are you sure you want to quit?"):
                listing.close()
                detail.close()
                console.print(Panel.fit("[bold green]Thanks for visiting Drip & Brew! 👋[/bold green]", title="Goodbye"))
                sys.exit(0)

        console.print()
        console.rule(style="dim")


if __name__ == "__main__":
    try:
        menu()
    except KeyboardInterrupt:
        console.print("\n\n[bold red]Interrupted by user[/bold red]")
        sys.exit(1)

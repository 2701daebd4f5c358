from rich.console import Console

console = Console(color_system=None)
error_console = Console(stderr=True, color_system=None)


def section(title, newline=True):
    if newline:
        console.print()
    console.rule("── " + title, align="left")
    console.print()


def message(text):
    console.print(text, highlight=False)


def data(text):
    # Numeric output is consumed by scripts: never wrap nor interpret markup
    console.print(text, soft_wrap=True, highlight=False, markup=False)

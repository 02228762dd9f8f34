"""Color palettes for the process table."""

from dataclasses import dataclass


@dataclass(slots=True, frozen=True)
class Palette:
    """A named set of rich styles used to theme the table."""

    name: str
    title: str
    header: str
    columns: tuple[str, ...]  # Cycled across the table columns
    selected: str
    scrollbar: str


PALETTES: tuple[Palette, ...] = (
    Palette(
        name="classic",
        title="black on blue",
        header="black on white",
        columns=("black on green", "black on magenta", "black on yellow"),
        selected="bold white on dark_blue",
        scrollbar="blue",
    ),
    Palette(
        name="ocean",
        title="bold white on dark_blue",
        header="bold cyan",
        columns=("cyan", "bright_blue", "turquoise2"),
        selected="black on cyan",
        scrollbar="cyan",
    ),
    Palette(
        name="ember",
        title="bold black on dark_orange",
        header="bold red",
        columns=("yellow", "dark_orange", "red"),
        selected="black on yellow",
        scrollbar="dark_orange",
    ),
    Palette(
        name="mono",
        title="bold reverse",
        header="bold underline",
        columns=("default",),
        selected="reverse",
        scrollbar="white",
    ),
)


def palette_index(name: str) -> int:
    """
    Index of the palette called name.

    Raises:
        ValueError: No palette has that name.
    """
    for i, palette in enumerate(PALETTES):
        if palette.name == name:
            return i
    names = ", ".join(p.name for p in PALETTES)
    raise ValueError(f"unknown palette {name!r} (choose from {names})")

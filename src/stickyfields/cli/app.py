import typer

from stickyfields.cli.check import check

app = typer.Typer(
    name="stickyfields",
    help="Find Go converter functions that leak fields.",
    no_args_is_help=True,
    context_settings={"help_option_names": ["-h", "--help"]},
)

app.command("check")(check)


@app.callback()
def _root() -> None:
    """Find Go converter functions that leak fields."""


def main() -> None:
    app()

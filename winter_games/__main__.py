from __future__ import annotations

import sys
from pathlib import Path


def _ensure_repo_root_on_path() -> None:
    """Put the repository root (parent of this package) on ``sys.path``.

    Lets ``python winter_games/__main__.py`` resolve the package imports the
    same way ``python -m winter_games`` does.
    """
    pkg_dir = Path(__file__).resolve().parent
    repo_root_str = str(pkg_dir.parent)
    if repo_root_str not in sys.path:
        sys.path.insert(0, repo_root_str)


try:
    from .app import run  # type: ignore[attr-defined]
    from .tournament import MAX_PLAYERS
except ImportError:
    # Executed as a plain script.
    _ensure_repo_root_on_path()
    from winter_games.app import run  # type: ignore[attr-defined]
    from winter_games.tournament import MAX_PLAYERS


def parse_players(args: list[str]) -> tuple[list[str], list[str]]:
    """Split ``Name`` or ``Name:Country`` arguments into parallel lists.

    A missing country is left empty; the roster fills it with "?".
    """
    names: list[str] = []
    countries: list[str] = []
    for arg in args:
        name, _, country = arg.partition(":")
        names.append(name.strip())
        countries.append(country.strip())
    return names, countries


def main(argv: list[str] | None = None) -> int:
    """Start a tournament; positional arguments are ``Name[:Country]`` per player."""
    names, countries = parse_players(list(sys.argv[1:] if argv is None else argv))
    if len(names) > MAX_PLAYERS:
        print(f"winter-games: at most {MAX_PLAYERS} players, got {len(names)}", file=sys.stderr)
        return 2
    return run(player_names=names or None, player_countries=countries or None)


if __name__ == "__main__":
    raise SystemExit(main())

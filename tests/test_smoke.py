"""Smoke tests for the pygame shell.

The SDL dummy drivers let the main loop initialise and run a few frames
headlessly. Rendering correctness is not checked; these tests only make sure
menus, the shooting range and the scoreboard can be reached without raising.
"""

from __future__ import annotations

import os

# Use the dummy drivers before importing pygame or the application
os.environ.setdefault("SDL_VIDEODRIVER", "dummy")
os.environ.setdefault("SDL_AUDIODRIVER", "dummy")
os.environ.setdefault("PYGAME_HIDE_SUPPORT_PROMPT", "1")


def _key(key: int) -> None:
    import pygame

    pygame.event.post(pygame.event.Event(pygame.KEYDOWN, {"key": key, "unicode": ""}))


def test_app_runs_headless() -> None:
    from winter_games.app import run

    assert run(max_frames=3) == 0


def test_navigate_to_biathlon_and_shoot() -> None:
    import pygame

    from winter_games.app import run

    script = {
        1: pygame.K_RETURN,  # Main -> Events
        2: pygame.K_RETURN,  # Events -> Biathlon
        3: pygame.K_SPACE,  # fire
        5: pygame.K_r,  # restart the attempt
        6: pygame.K_ESCAPE,  # back to Events
        7: pygame.K_DOWN,
        8: pygame.K_RETURN,  # Ski Jump -> "Coming soon"
        10: pygame.K_ESCAPE,
        11: pygame.K_ESCAPE,  # back to Main
        12: pygame.K_DOWN,
        13: pygame.K_RETURN,  # Scoreboard
        14: pygame.K_RIGHT,  # Biathlon results tab
        16: pygame.K_ESCAPE,
    }

    def inject(frame: int) -> None:
        key = script.get(frame)
        if key is not None:
            _key(key)

    assert run(max_frames=20, event_injector=inject, player_names=["Ana", "Bo"]) == 0


def test_escape_on_main_menu_quits() -> None:
    import pygame

    from winter_games.app import run

    def inject(frame: int) -> None:
        if frame == 1:
            _key(pygame.K_ESCAPE)

    # Loop exits on its own well before max_frames.
    assert run(max_frames=500, event_injector=inject) == 0


def test_practice_from_main_menu_leaves_tournament_untouched() -> None:
    import pygame

    from winter_games.app import run
    from winter_games.tournament import Tournament

    tournament = Tournament.new(["Ana", "Bo"], ["Norway", "Canada"])
    script = {
        1: pygame.K_DOWN,
        2: pygame.K_DOWN,
        3: pygame.K_RETURN,  # Main -> Practice
        4: pygame.K_SPACE,  # fire
        6: pygame.K_ESCAPE,  # back to Main
    }

    def inject(frame: int) -> None:
        key = script.get(frame)
        if key is not None:
            _key(key)

    assert run(max_frames=12, event_injector=inject, tournament=tournament) == 0
    for player in range(tournament.ledger.player_count):
        assert tournament.ledger.total_score(player) == 0
        assert tournament.ledger.attempts_of(player, 0) == 0


def test_scoreboard_tabs_cycle_through_events() -> None:
    import pygame

    from winter_games.app import ScoreboardScreen
    from winter_games.events import EVENTS
    from winter_games.tournament import Tournament

    class _Stack:
        popped = 0

        def pop(self) -> None:
            self.popped += 1

    pygame.init()
    try:
        tournament = Tournament.new(["Ana", "Bo"], ["Norway", "Canada"])
        tournament.ledger.record_result(0, 0, 410)
        tournament.ledger.record_result(1, 0, 380)
        stack = _Stack()
        screen = ScoreboardScreen(stack, tournament=tournament)  # type: ignore[arg-type]
        surface = pygame.Surface((960, 540))

        assert screen.tab == 0
        screen.render(surface)
        screen.handle_event(pygame.event.Event(pygame.KEYDOWN, {"key": pygame.K_RIGHT, "unicode": ""}))
        assert screen.tab == 1
        screen.render(surface)
        screen.handle_event(pygame.event.Event(pygame.KEYDOWN, {"key": pygame.K_RIGHT, "unicode": ""}))
        assert screen.tab == 2
        screen.render(surface)

        screen.handle_event(pygame.event.Event(pygame.KEYDOWN, {"key": pygame.K_LEFT, "unicode": ""}))
        screen.handle_event(pygame.event.Event(pygame.KEYDOWN, {"key": pygame.K_LEFT, "unicode": ""}))
        screen.handle_event(pygame.event.Event(pygame.KEYDOWN, {"key": pygame.K_LEFT, "unicode": ""}))
        assert screen.tab == len(EVENTS)

        screen.handle_event(pygame.event.Event(pygame.KEYDOWN, {"key": pygame.K_ESCAPE, "unicode": ""}))
        assert stack.popped == 1
    finally:
        pygame.quit()

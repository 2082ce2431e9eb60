"""Pygame UI shell for Winter Games.

Menus, the biathlon shooting range and the scoreboard. Deterministic
scoring/RNG/state lives in winter_games/* (core modules); this file only turns
input into AngularSamples, shows snapshots and pushes screens.
"""

from __future__ import annotations

import logging
import os
import random
from collections.abc import Callable
from dataclasses import dataclass
from typing import Protocol

import pygame

from .driver import RealClock, SessionDriver
from .events import EVENTS, EventKind, UnsupportedEventError, is_implemented
from .game_core import AngularSample, EventSnapshot, Phase
from .ranking import event_results, podium, standings
from .tournament import Tournament

logger = logging.getLogger(__name__)

WINDOW_SIZE = (960, 540)
TARGET_FPS = 60

LOG_LEVEL_ENV = "WINTER_GAMES_LOG_LEVEL"
SEED_ENV = "WINTER_GAMES_SEED"

# Keyboard aiming: angular rate reported while an arrow key is held.
KEY_RATE = 0.5
# Mouse aiming: angular rate per pixel of relative motion in one frame.
MOUSE_RATE = 0.05

RING_COLORS = (
    (250, 250, 250),
    (30, 30, 30),
    (40, 110, 220),
    (220, 60, 50),
    (250, 210, 40),
)


class Screen(Protocol):
    def handle_event(self, event: pygame.event.Event) -> None: ...
    def render(self, surface: pygame.Surface) -> None: ...


@dataclass(frozen=True, slots=True)
class MenuItem:
    label: str
    action: Callable[[], None]


class App:
    def __init__(self, surface: pygame.Surface, font: pygame.font.Font) -> None:
        self._surface = surface
        self._font = font
        self._screens: list[Screen] = []
        self._running = True

    @property
    def running(self) -> bool:
        return self._running

    @property
    def font(self) -> pygame.font.Font:
        return self._font

    def push(self, screen: Screen) -> None:
        self._screens.append(screen)

    def pop(self) -> None:
        # Never pop the root screen; it handles its own quit/back behavior.
        if len(self._screens) > 1:
            self._screens.pop()

    def quit(self) -> None:
        self._running = False

    def handle_event(self, event: pygame.event.Event) -> None:
        if event.type == pygame.QUIT:
            self.quit()
            return
        if not self._screens:
            return
        self._screens[-1].handle_event(event)

    def render(self) -> None:
        if not self._screens:
            return
        self._screens[-1].render(self._surface)


class MessageScreen:
    def __init__(self, app: App, title: str, lines: list[str]) -> None:
        self._app = app
        self._title = title
        self._lines = lines

    def handle_event(self, event: pygame.event.Event) -> None:
        if event.type == pygame.KEYDOWN and event.key in (pygame.K_ESCAPE, pygame.K_BACKSPACE, pygame.K_RETURN):
            self._app.pop()

    def render(self, surface: pygame.Surface) -> None:
        surface.fill((10, 14, 30))
        surface.blit(self._app.font.render(self._title, True, (235, 240, 250)), (40, 40))
        y = 100
        for line in [*self._lines, "", "Press Esc to go back."]:
            surface.blit(self._app.font.render(line, True, (180, 190, 210)), (40, y))
            y += 36


class MenuScreen:
    def __init__(
        self,
        app: App,
        title: str,
        items: list[MenuItem] | Callable[[], list[MenuItem]],
        *,
        is_root: bool = False,
    ) -> None:
        self._app = app
        self._title = title
        self._items_source = items
        self._selected = 0
        self._is_root = is_root
        self._title_font = pygame.font.Font(None, 42)
        self._item_font = pygame.font.Font(None, 30)
        self._hint_font = pygame.font.Font(None, 22)

    def _items(self) -> list[MenuItem]:
        # Menus built from a callable relabel themselves every frame (event status).
        if callable(self._items_source):
            return self._items_source()
        return self._items_source

    def handle_event(self, event: pygame.event.Event) -> None:
        if event.type != pygame.KEYDOWN:
            return
        items = self._items()
        if event.key in (pygame.K_UP, pygame.K_w) and items:
            self._selected = (self._selected - 1) % len(items)
        elif event.key in (pygame.K_DOWN, pygame.K_s) and items:
            self._selected = (self._selected + 1) % len(items)
        elif event.key in (pygame.K_RETURN, pygame.K_KP_ENTER, pygame.K_SPACE) and items:
            items[self._selected % len(items)].action()
        elif event.key in (pygame.K_ESCAPE, pygame.K_BACKSPACE):
            if self._is_root:
                self._app.quit()
            else:
                self._app.pop()

    def render(self, surface: pygame.Surface) -> None:
        w, _ = surface.get_size()
        surface.fill((8, 18, 60))
        title = self._title_font.render(self._title, True, (238, 245, 255))
        surface.blit(title, title.get_rect(midtop=(w // 2, 28)))

        y = 96
        for idx, item in enumerate(self._items()):
            selected = idx == self._selected
            row = pygame.Rect(80, y, w - 160, 32)
            if selected:
                pygame.draw.rect(surface, (244, 248, 255), row)
            color = (14, 26, 74) if selected else (226, 234, 250)
            text = self._item_font.render(item.label, True, color)
            surface.blit(text, (row.x + 10, row.y + (row.h - text.get_height()) // 2))
            y += 38

        foot = self._hint_font.render("Enter: Select  |  Esc: Back", True, (186, 200, 224))
        surface.blit(foot, foot.get_rect(midbottom=(w // 2, surface.get_height() - 12)))


class BiathlonScreen:
    """Shooting range. Hot-seat: every roster seat shoots in turn."""

    def __init__(self, app: App, *, driver: SessionDriver) -> None:
        self._app = app
        self._driver = driver
        self._small_font = pygame.font.Font(None, 26)
        self._big_font = pygame.font.Font(None, 48)
        self._mouse_dx = 0
        self._mouse_dy = 0
        self._finished = not self._driver.begin_next()

    def handle_event(self, event: pygame.event.Event) -> None:
        if event.type == pygame.MOUSEMOTION:
            dx, dy = event.rel
            self._mouse_dx += int(dx)
            self._mouse_dy += int(dy)
            return
        if event.type == pygame.MOUSEBUTTONDOWN and event.button == 1:
            self._driver.fire()
            return
        if event.type != pygame.KEYDOWN:
            return

        if event.key in (pygame.K_ESCAPE, pygame.K_BACKSPACE):
            self._app.pop()
        elif event.key == pygame.K_SPACE:
            self._driver.fire()
        elif event.key == pygame.K_r:
            self._driver.restart()
        elif event.key in (pygame.K_RETURN, pygame.K_KP_ENTER):
            session = self._driver.session
            if session is None or session.is_complete():
                self._finished = not self._driver.begin_next()

    def _feed_input(self) -> None:
        pressed = pygame.key.get_pressed()
        kx = (1 if pressed[pygame.K_RIGHT] else 0) - (1 if pressed[pygame.K_LEFT] else 0)
        ky = (1 if pressed[pygame.K_DOWN] else 0) - (1 if pressed[pygame.K_UP] else 0)
        rate_x = kx * KEY_RATE + self._mouse_dx * MOUSE_RATE
        rate_y = ky * KEY_RATE + self._mouse_dy * MOUSE_RATE
        self._mouse_dx = 0
        self._mouse_dy = 0
        self._driver.on_sample(AngularSample(x=rate_x, y=rate_y))

    def render(self, surface: pygame.Surface) -> None:
        self._feed_input()
        self._driver.tick()

        w, h = surface.get_size()
        surface.fill((135, 206, 235))
        pygame.draw.rect(surface, (245, 248, 252), pygame.Rect(0, int(h * 0.6), w, h))

        session = self._driver.session
        if self._finished or session is None:
            self._render_summary(surface)
            return

        snap = session.snapshot()
        field = pygame.Rect(w // 2 - h // 2 + 40, 60, h - 80, h - 120)
        pygame.draw.rect(surface, (60, 90, 60), field)
        pygame.draw.rect(surface, (20, 30, 20), field, 2)

        if snap.target is not None:
            cx = field.x + int(snap.target.x * field.w)
            cy = field.y + int(snap.target.y * field.h)
            outer = max(4, int(snap.target.radius * field.w))
            for i, color in enumerate(RING_COLORS):
                r = max(1, int(outer * (1.0 - i * 0.2)))
                pygame.draw.circle(surface, color, (cx, cy), r)

        if snap.aim is not None and snap.phase is Phase.AIMING:
            ax = field.x + int(snap.aim.x * field.w)
            ay = field.y + int(snap.aim.y * field.h)
            color = (40, 220, 90) if snap.is_stable else (230, 60, 60)
            pygame.draw.circle(surface, color, (ax, ay), 12, 2)
            pygame.draw.line(surface, color, (ax - 18, ay), (ax + 18, ay), 2)
            pygame.draw.line(surface, color, (ax, ay - 18), (ax, ay + 18), 2)

        self._render_hud(surface, snap, session.player_index)

    def _render_hud(self, surface: pygame.Surface, snap: EventSnapshot, player: int) -> None:
        w, h = surface.get_size()
        name = self._driver.tournament.roster.name_of(player)
        header = f"{name}  |  Target {min(snap.target_index + 1, snap.target_count)}/{snap.target_count}"
        surface.blit(self._small_font.render(header, True, (10, 20, 40)), (20, 16))
        surface.blit(self._small_font.render(f"Score: {snap.score}", True, (10, 20, 40)), (w - 160, 16))

        bar = pygame.Rect(20, h - 44, 220, 18)
        pygame.draw.rect(surface, (40, 40, 50), bar)
        fill = bar.copy()
        fill.w = int(bar.w * snap.stability)
        pygame.draw.rect(surface, (40, 220, 90) if snap.is_stable else (230, 160, 40), fill)
        surface.blit(self._small_font.render("Stability", True, (10, 20, 40)), (20, h - 70))

        prompt = self._small_font.render(snap.prompt, True, (10, 20, 40))
        surface.blit(prompt, prompt.get_rect(midbottom=(w // 2, h - 40)))
        if snap.phase is Phase.COMPLETE:
            label = "Enter: results" if self._driver.is_practice else "Enter: next shooter"
            nxt = self._small_font.render(label, True, (10, 20, 40))
            surface.blit(nxt, nxt.get_rect(midbottom=(w // 2, h - 70)))
        hint = self._small_font.render(snap.input_hint, True, (60, 70, 90))
        surface.blit(hint, hint.get_rect(midbottom=(w // 2, h - 12)))

    def _render_summary(self, surface: pygame.Surface) -> None:
        tournament = self._driver.tournament
        heading = "Practice results" if self._driver.is_practice else "Biathlon results"
        title = self._big_font.render(heading, True, (10, 20, 40))
        surface.blit(title, (40, 30))
        y = 100
        results = event_results(
            tournament.ledger,
            self._driver.event_index,
            tournament.ledger.player_count,
            tournament.roster,
        )
        for place, result in enumerate(results, start=1):
            line = f"{place}. {result.name} ({result.country})  {result.score} pts  [{result.attempts} tries]"
            surface.blit(self._small_font.render(line, True, (10, 20, 40)), (60, y))
            y += 32
        hint = self._small_font.render("Esc: back to events", True, (60, 70, 90))
        surface.blit(hint, (60, y + 20))


class ScoreboardScreen:
    """Overall standings plus one results tab per event (Left/Right to switch)."""

    def __init__(self, app: App, *, tournament: Tournament) -> None:
        self._app = app
        self._tournament = tournament
        self._tab = 0
        self._font = pygame.font.Font(None, 28)
        self._title_font = pygame.font.Font(None, 44)

    @property
    def tab(self) -> int:
        """0 is the overall table; ``n`` is event ``n - 1``."""
        return self._tab

    def handle_event(self, event: pygame.event.Event) -> None:
        if event.type != pygame.KEYDOWN:
            return
        tabs = len(EVENTS) + 1
        if event.key in (pygame.K_RIGHT, pygame.K_TAB):
            self._tab = (self._tab + 1) % tabs
        elif event.key == pygame.K_LEFT:
            self._tab = (self._tab - 1) % tabs
        elif event.key in (pygame.K_ESCAPE, pygame.K_BACKSPACE, pygame.K_RETURN):
            self._app.pop()

    def render(self, surface: pygame.Surface) -> None:
        surface.fill((12, 16, 40))
        if self._tab == 0:
            self._render_overall(surface)
        else:
            self._render_event(surface, self._tab - 1)
        foot = self._font.render("Left/Right: switch table  |  Esc: Back", True, (150, 160, 190))
        surface.blit(foot, foot.get_rect(midbottom=(surface.get_width() // 2, surface.get_height() - 12)))

    def _render_overall(self, surface: pygame.Surface) -> None:
        surface.blit(self._title_font.render("Standings", True, (240, 240, 250)), (40, 28))
        ledger = self._tournament.ledger
        rows = standings(ledger, ledger.player_count, ledger.event_count, self._tournament.roster)
        y = 90
        header = "#   Player                Country          Total   G  S  B   Events"
        surface.blit(self._font.render(header, True, (170, 180, 210)), (40, y))
        y += 34
        for place, r in enumerate(rows, start=1):
            line = (
                f"{place:<3} {r.name[:20]:<21} {r.country[:15]:<16} {r.total_score:>5}"
                f"   {r.gold}  {r.silver}  {r.bronze}   {r.events_completed}"
            )
            surface.blit(self._font.render(line, True, (235, 238, 250)), (40, y))
            y += 30

    def _render_event(self, surface: pygame.Surface, event_index: int) -> None:
        info = EVENTS[event_index]
        ledger = self._tournament.ledger
        status = ledger.event_status(event_index, implemented=is_implemented(info.kind))
        title = f"{info.name}  [{status.value}]"
        surface.blit(self._title_font.render(title, True, (240, 240, 250)), (40, 28))
        results = event_results(ledger, event_index, ledger.player_count, self._tournament.roster)
        y = 90
        if not results:
            surface.blit(self._font.render("No results yet.", True, (170, 180, 210)), (40, y))
            return
        medals = ("Gold", "Silver", "Bronze")
        winners = podium(ledger, event_index, ledger.player_count)
        for place, r in enumerate(results, start=1):
            medal = medals[winners.index(r.player_index)] if r.player_index in winners else ""
            line = f"{place:<3} {r.name[:20]:<21} {r.country[:15]:<16} {r.score:>5}   x{r.attempts}   {medal}"
            surface.blit(self._font.render(line, True, (235, 238, 250)), (40, y))
            y += 30


def _seed_from_env() -> int | None:
    raw = os.environ.get(SEED_ENV, "").strip()
    if raw == "":
        return None
    try:
        return int(raw)
    except ValueError:
        logger.warning("Ignoring non-integer %s=%r", SEED_ENV, raw)
        return None


def _new_seed() -> int:
    return random.SystemRandom().randint(1, 2**31 - 1)


def run(
    *,
    max_frames: int | None = None,
    event_injector: Callable[[int], None] | None = None,
    player_names: list[str] | None = None,
    player_countries: list[str] | None = None,
    tournament: Tournament | None = None,
) -> int:
    logging.basicConfig(
        level=os.environ.get(LOG_LEVEL_ENV, "WARNING").upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    pygame.init()
    pygame.display.set_caption("Winter Games")
    surface = pygame.display.set_mode(WINDOW_SIZE, pygame.RESIZABLE)

    font = pygame.font.Font(None, 32)
    clock = pygame.time.Clock()

    app = App(surface=surface, font=font)

    if tournament is None:
        tournament = Tournament.new(player_names or ["Player 1"], player_countries)
    pinned_seed = _seed_from_env()
    real_clock = RealClock()

    def open_event(kind: EventKind) -> None:
        seed = pinned_seed if pinned_seed is not None else _new_seed()
        driver = SessionDriver(tournament=tournament, kind=kind, clock=real_clock, seed=seed)
        try:
            screen = BiathlonScreen(app, driver=driver)
        except UnsupportedEventError as exc:
            app.push(MessageScreen(app, "Coming soon", [str(exc)]))
            return
        app.push(screen)

    def open_practice() -> None:
        seed = pinned_seed if pinned_seed is not None else _new_seed()
        driver = SessionDriver.practice(kind=EventKind.BIATHLON, clock=real_clock, seed=seed)
        app.push(BiathlonScreen(app, driver=driver))

    def event_items() -> list[MenuItem]:
        items: list[MenuItem] = []
        for index, info in enumerate(EVENTS):
            status = tournament.ledger.event_status(index, implemented=is_implemented(info.kind))
            items.append(
                MenuItem(f"{info.name}  [{status.value}]", lambda kind=info.kind: open_event(kind))
            )
        items.append(MenuItem("Back", app.pop))
        return items

    events_menu = MenuScreen(app, "Events", event_items)
    scoreboard = ScoreboardScreen(app, tournament=tournament)

    main_items = [
        MenuItem("Events", lambda: app.push(events_menu)),
        MenuItem("Scoreboard", lambda: app.push(scoreboard)),
        MenuItem("Practice", open_practice),
        MenuItem("Quit", app.quit),
    ]
    app.push(MenuScreen(app, "Winter Games", main_items, is_root=True))

    frame = 0
    try:
        while app.running:
            if event_injector is not None:
                event_injector(frame)

            for event in pygame.event.get():
                app.handle_event(event)

            app.render()

            pygame.display.flip()

            frame += 1
            if max_frames is not None and frame >= max_frames:
                break

            clock.tick(TARGET_FPS)
    finally:
        pygame.quit()

    return 0

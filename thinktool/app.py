"""Pygame UI shell for thinktool.

The drill screen shows the current question with an answer box underneath.
Pressing ` moves focus to the command line at the bottom, which offers
suggestions as you type (Tab accepts the first one). All drill state, timing
and grading live in ``thinktool.drill`` and the core modules; this module
only draws what the core pushes through the ``Display`` interface and
forwards keystrokes.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Sequence
from dataclasses import dataclass
from typing import Protocol

import pygame

from .clock import Clock, RealClock
from .commands import CommandSpec
from .config import Settings
from .drill import Drill

logger = logging.getLogger(__name__)

APP_VERSION = "1.0"
WINDOW_SIZE = (960, 540)
TARGET_FPS = 60
FADE_MS = 600
MAX_ANSWER_CHARS = 24
MAX_COMMAND_CHARS = 64

BG = (250, 250, 248)
TEXT_MAIN = (24, 24, 28)
TEXT_MUTED = (150, 150, 154)
TEXT_ERROR = (200, 40, 40)
TEXT_GOOD = (30, 150, 60)
BOX_BORDER = (200, 200, 204)


class Screen(Protocol):
    def handle_event(self, event: pygame.event.Event) -> None: ...
    def render(self, surface: pygame.Surface) -> None: ...


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


@dataclass(slots=True)
class _Fade:
    text: str
    color: tuple[int, int, int]
    born_ms: int


class DrillScreen:
    """Main (and only) screen. Implements ``thinktool.display.Display``."""

    def __init__(self, app: App, *, settings: Settings, clock: Clock) -> None:
        self._app = app
        self._question_font = pygame.font.Font(None, 96)
        self._input_font = pygame.font.Font(None, 52)
        self._small_font = pygame.font.Font(None, 26)
        self._help_title_font = pygame.font.Font(None, 40)

        self._question = ""
        self._time_left: int | None = None
        self._answer = ""
        self._command = ""
        self._command_focus = False
        self._suggestions: list[str] = []
        self._help: list[CommandSpec] | None = None
        self._messages: list[_Fade] = []
        self._feedback: list[_Fade] = []

        self._drill = Drill.from_settings(settings, display=self, clock=clock)
        self._drill.begin()

    # -- Display ------------------------------------------------------------
    def show_transient(self, text: str, is_error: bool) -> None:
        color = TEXT_ERROR if is_error else TEXT_MUTED
        self._messages.append(_Fade(f"> {text}", color, pygame.time.get_ticks()))

    def show_help(self, catalogue: Sequence[CommandSpec]) -> None:
        self._help = list(catalogue)

    def show_question(self, text: str) -> None:
        self._question = text

    def show_trial_time(self, seconds_left: int | None) -> None:
        self._time_left = seconds_left

    def show_feedback(self, question_text: str, correct: bool) -> None:
        color = TEXT_GOOD if correct else TEXT_ERROR
        self._feedback.append(_Fade(question_text, color, pygame.time.get_ticks()))

    # -- Input --------------------------------------------------------------
    def handle_event(self, event: pygame.event.Event) -> None:
        if self._help is not None:
            if event.type in (pygame.KEYDOWN, pygame.MOUSEBUTTONDOWN):
                self._help = None
            return

        if event.type != pygame.KEYDOWN:
            return

        key = event.key
        ch = getattr(event, "unicode", "")

        if key == pygame.K_BACKQUOTE or ch == "`":
            self._command_focus = True
            return

        if key == pygame.K_ESCAPE:
            if self._command_focus:
                self._command_focus = False
                self._suggestions = []
            else:
                self._app.quit()
            return

        if self._command_focus:
            self._handle_command_key(key, ch)
        else:
            self._handle_answer_key(key, ch)

    def _handle_answer_key(self, key: int, ch: str) -> None:
        if key in (pygame.K_RETURN, pygame.K_KP_ENTER):
            self._drill.submit_answer(self._answer)
            self._answer = ""
            return
        if key == pygame.K_BACKSPACE:
            self._answer = self._answer[:-1]
            return
        if len(self._answer) >= MAX_ANSWER_CHARS:
            return
        if ch and (ch.isdigit() or ch == "." or (ch == "-" and self._answer == "")):
            self._answer += ch

    def _handle_command_key(self, key: int, ch: str) -> None:
        if key in (pygame.K_RETURN, pygame.K_KP_ENTER):
            self._drill.execute_command(self._command)
            self._command = ""
            self._suggestions = []
            self._command_focus = False
            return
        if key == pygame.K_TAB:
            if self._suggestions:
                self._command = self._suggestions[0]
                self._suggestions = self._drill.suggest(self._command)
            return
        if key == pygame.K_BACKSPACE:
            self._command = self._command[:-1]
        elif ch and ch.isprintable() and len(self._command) < MAX_COMMAND_CHARS:
            self._command += ch
        else:
            return
        self._suggestions = self._drill.suggest(self._command)

    # -- Rendering ----------------------------------------------------------
    def render(self, surface: pygame.Surface) -> None:
        self._drill.update()
        now_ms = pygame.time.get_ticks()
        self._messages = [m for m in self._messages if now_ms - m.born_ms < FADE_MS]
        self._feedback = [f for f in self._feedback if now_ms - f.born_ms < FADE_MS]

        w, h = surface.get_size()
        surface.fill(BG)

        question_y = int(h * 0.34)
        for fade in self._feedback:
            self._blit_fade(surface, self._question_font, fade, now_ms, (w // 2, question_y - 70))

        q = self._question_font.render(self._question, True, TEXT_MAIN)
        surface.blit(q, q.get_rect(center=(w // 2, question_y)))

        box_w = max(220, min(380, int(w * 0.42)))
        box = pygame.Rect((w - box_w) // 2, int(h * 0.50), box_w, 60)
        pygame.draw.rect(surface, BOX_BORDER, box, 2)
        caret = "|" if not self._command_focus and (now_ms // 500) % 2 == 0 else ""
        entry = self._input_font.render(self._answer + caret, True, TEXT_MAIN)
        surface.blit(entry, (box.x + 12, box.y + max(2, (box.h - entry.get_height()) // 2)))

        if self._time_left is not None:
            timer = self._app.font.render(f"{self._time_left}s", True, TEXT_MUTED)
            surface.blit(timer, timer.get_rect(midtop=(w // 2, box.bottom + 12)))

        self._render_command_line(surface, now_ms)

        if self._help is not None:
            self._render_help(surface, self._help)

    def _render_command_line(self, surface: pygame.Surface, now_ms: int) -> None:
        w, h = surface.get_size()
        line_y = h - 34

        for i, fade in enumerate(reversed(self._messages)):
            surf = self._small_font.render(fade.text, True, fade.color)
            surf.set_alpha(_fade_alpha(now_ms - fade.born_ms))
            surface.blit(surf, (10, line_y - 30 - i * 24))

        if not self._command_focus:
            hint = self._small_font.render("press ` for commands", True, TEXT_MUTED)
            surface.blit(hint, (10, line_y))
            return

        caret = "|" if (now_ms // 500) % 2 == 0 else ""
        prompt = self._small_font.render(f"> {self._command}{caret}", True, TEXT_MAIN)
        surface.blit(prompt, (10, line_y))

        if not self._suggestions:
            return
        row_h = 24
        box = pygame.Rect(8, line_y - 8 - row_h * len(self._suggestions), min(320, w - 16), row_h * len(self._suggestions))
        pygame.draw.rect(surface, (240, 240, 238), box)
        pygame.draw.rect(surface, BOX_BORDER, box, 1)
        for i, suggestion in enumerate(self._suggestions):
            color = TEXT_MAIN if i == 0 else TEXT_MUTED
            surf = self._small_font.render(suggestion, True, color)
            surface.blit(surf, (box.x + 8, box.y + i * row_h + 3))

    def _render_help(self, surface: pygame.Surface, catalogue: list[CommandSpec]) -> None:
        w, h = surface.get_size()
        shade = pygame.Surface((w, h), pygame.SRCALPHA)
        shade.fill((0, 0, 0, 90))
        surface.blit(shade, (0, 0))

        panel = pygame.Rect(w // 6, h // 10, w * 2 // 3, h * 4 // 5)
        pygame.draw.rect(surface, BG, panel)
        pygame.draw.rect(surface, BOX_BORDER, panel, 2)

        y = panel.y + 16
        title = self._help_title_font.render(f"thinktool v{APP_VERSION}", True, TEXT_MAIN)
        surface.blit(title, (panel.x + 20, y))
        y += 44
        sub = self._small_font.render("available commands:", True, TEXT_MUTED)
        surface.blit(sub, (panel.x + 20, y))
        y += 30
        for spec in catalogue:
            line = self._small_font.render(f"{spec.name} - {spec.description}", True, TEXT_MAIN)
            surface.blit(line, (panel.x + 28, y))
            y += 22
            usage = self._small_font.render(f"usage: {spec.usage}", True, TEXT_MUTED)
            surface.blit(usage, (panel.x + 44, y))
            y += 26

        close = self._small_font.render("press any key to close", True, TEXT_MUTED)
        surface.blit(close, close.get_rect(midbottom=(panel.centerx, panel.bottom - 12)))

    @staticmethod
    def _blit_fade(
        surface: pygame.Surface,
        font: pygame.font.Font,
        fade: _Fade,
        now_ms: int,
        center: tuple[int, int],
    ) -> None:
        surf = font.render(fade.text, True, fade.color)
        surf.set_alpha(_fade_alpha(now_ms - fade.born_ms))
        surface.blit(surf, surf.get_rect(center=center))


def _fade_alpha(age_ms: int) -> int:
    if age_ms <= 0:
        return 255
    if age_ms >= FADE_MS:
        return 0
    return int(255 * (1.0 - age_ms / FADE_MS))


def run(
    *,
    max_frames: int | None = None,
    event_injector: Callable[[int], None] | None = None,
    settings: Settings | None = None,
) -> int:
    if settings is None:
        settings = Settings.from_env()
    logging.basicConfig(
        level=settings.log_level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    pygame.init()
    pygame.key.set_repeat(400, 40)

    pygame.display.set_caption("thinktool")
    surface = pygame.display.set_mode(WINDOW_SIZE, pygame.RESIZABLE)

    font = pygame.font.Font(None, 36)
    clock = pygame.time.Clock()

    app = App(surface=surface, font=font)
    app.push(DrillScreen(app, settings=settings, clock=RealClock()))
    logger.debug("window %sx%s ready", *WINDOW_SIZE)

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

"""Pygame UI shell for the trivia game.

Main menu -> Play (setup, questions, result) / Leaderboard.

Deterministic selection/scoring/ranking/state lives in trivia_game/* (core modules).
"""

from __future__ import annotations

import logging
import math
import os
import random
from array import array
from collections.abc import Callable
from dataclasses import dataclass
from typing import Protocol

import pygame

from .clock import RealClock
from .config import TriviaConfig
from .leaderboard import LeaderboardStore, ScoreEntry
from .logging_config import configure_logging
from .persistence import storage_for_path
from .question_bank import DEFAULT_QUESTION_BANK, load_question_bank
from .quiz_core import (
    AnswerOutcome,
    Category,
    Difficulty,
    Phase,
    PhaseChanged,
    Question,
    SeededRng,
    SessionEvent,
    ValidationNotice,
    points_for,
)
from .results import session_result_from_session
from .session import TriviaSession

logger = logging.getLogger(__name__)

WINDOW_SIZE = (960, 540)
TARGET_FPS = 60
TOAST_DURATION_MS = 2600
NAME_MAX_LEN = 24

BG = (3, 9, 78)
PANEL_BG = (8, 18, 104)
HEADER_BG = (18, 30, 118)
BORDER = (226, 236, 255)
TEXT_MAIN = (238, 245, 255)
TEXT_MUTED = (186, 200, 224)
ACTIVE_BG = (244, 248, 255)
ACTIVE_TEXT = (14, 26, 74)
CORRECT_BG = (34, 128, 74)
WRONG_BG = (160, 42, 52)
HIGHLIGHT_BG = (40, 62, 150)


class Screen(Protocol):
    def handle_event(self, event: pygame.event.Event) -> None: ...
    def render(self, surface: pygame.Surface) -> None: ...


@dataclass(frozen=True, slots=True)
class MenuItem:
    label: str | Callable[[], str]
    action: Callable[[], None]

    def text(self) -> str:
        return self.label() if callable(self.label) else self.label


@dataclass(frozen=True, slots=True)
class Toast:
    title: str
    message: str
    expires_at_ms: int
    tone: str = "info"  # "info" | "good" | "bad"


class _GameSounds:
    """Fire-and-forget synthesized sound effects.

    Silent when the mixer cannot start (no audio device, dummy driver) or
    when sound is switched off. Never affects game state.
    """

    _sample_rate = 22050
    _amp = 32767

    def __init__(self, *, enabled: bool) -> None:
        self.enabled = enabled
        self._available = False
        self._sounds: dict[str, pygame.mixer.Sound] = {}

        if os.environ.get("SDL_AUDIODRIVER", "").strip().lower() == "dummy":
            # Keep automated/headless runs silent and stable.
            return
        try:
            if pygame.mixer.get_init() is None:
                pygame.mixer.init(frequency=self._sample_rate, size=-16, channels=1, buffer=512)
            self._sounds = {
                "click": self._build_sound(((420.0, 0.08),), gain=0.20),
                "correct": self._build_sound(((660.0, 0.08), (0.0, 0.01), (880.0, 0.12)), gain=0.22),
                "wrong": self._build_sound(((200.0, 0.12), (0.0, 0.0), (160.0, 0.12)), gain=0.24, square=True),
                "level_up": self._build_sound(
                    ((523.25, 0.08), (0.0, 0.01), (659.25, 0.08), (0.0, 0.01), (783.99, 0.12)),
                    gain=0.18,
                    square=True,
                ),
            }
            self._available = True
        except pygame.error as exc:
            logger.info("Sound effects unavailable: %s", exc)
            self._available = False

    def play(self, name: str) -> None:
        if not (self.enabled and self._available):
            return
        sound = self._sounds.get(name)
        if sound is not None:
            sound.play()

    def _build_sound(
        self,
        parts: tuple[tuple[float, float], ...],
        *,
        gain: float,
        square: bool = False,
    ) -> pygame.mixer.Sound:
        pcm = array("h")
        for freq, duration_s in parts:
            if freq <= 0.0:
                pcm.extend(self._render_silence_pcm(duration_s))
            else:
                pcm.extend(self._render_tone_pcm(freq, duration_s, gain=gain, square=square))
        return pygame.mixer.Sound(buffer=pcm.tobytes())

    def _render_tone_pcm(self, frequency_hz: float, duration_s: float, *, gain: float, square: bool) -> array[int]:
        sample_count = max(1, int(self._sample_rate * duration_s))
        fade_n = max(1, int(self._sample_rate * 0.008))
        out = array("h")
        for idx in range(sample_count):
            envelope = 1.0
            if idx < fade_n:
                envelope = idx / float(fade_n)
            tail = sample_count - idx - 1
            if tail < fade_n:
                envelope = min(envelope, tail / float(fade_n))
            wave = math.sin((2.0 * math.pi * float(frequency_hz) * idx) / float(self._sample_rate))
            if square:
                wave = 1.0 if wave >= 0.0 else -1.0
            sample = wave * gain * max(0.0, envelope)
            out.append(int(max(-1.0, min(1.0, sample)) * self._amp))
        return out

    def _render_silence_pcm(self, duration_s: float) -> array[int]:
        sample_count = max(0, int(self._sample_rate * duration_s))
        return array("h", [0] * sample_count)


class App:
    def __init__(
        self,
        surface: pygame.Surface,
        *,
        sounds: _GameSounds,
    ) -> None:
        self._surface = surface
        self._screens: list[Screen] = []
        self._running = True
        self._sounds = sounds
        self._toast: Toast | None = None
        self._toast_title_font = pygame.font.Font(None, 30)
        self._toast_font = pygame.font.Font(None, 24)

    @property
    def running(self) -> bool:
        return self._running

    @property
    def sounds(self) -> _GameSounds:
        return self._sounds

    def push(self, screen: Screen) -> None:
        self._screens.append(screen)

    def pop(self) -> None:
        # Never pop the last/root screen; root handles its own quit/back behavior.
        if len(self._screens) > 1:
            self._screens.pop()

    def quit(self) -> None:
        self._running = False

    def show_toast(self, title: str, message: str, *, tone: str = "info") -> None:
        self._toast = Toast(
            title=title,
            message=message,
            expires_at_ms=pygame.time.get_ticks() + TOAST_DURATION_MS,
            tone=tone,
        )

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
        self._render_toast(self._surface)

    def _render_toast(self, surface: pygame.Surface) -> None:
        toast = self._toast
        if toast is None:
            return
        if pygame.time.get_ticks() >= toast.expires_at_ms:
            self._toast = None
            return

        w, h = surface.get_size()
        fill = {"good": CORRECT_BG, "bad": WRONG_BG}.get(toast.tone, HEADER_BG)
        message = _fit_label(self._toast_font, toast.message, min(560, w - 80) - 24)
        box_w = min(560, w - 80)
        box = pygame.Rect(w - box_w - 30, h - 110, box_w, 80)
        pygame.draw.rect(surface, fill, box)
        pygame.draw.rect(surface, BORDER, box, 2)
        surface.blit(self._toast_title_font.render(toast.title, True, TEXT_MAIN), (box.x + 12, box.y + 10))
        surface.blit(self._toast_font.render(message, True, TEXT_MAIN), (box.x + 12, box.y + 44))


def _fit_label(font: pygame.font.Font, label: str, max_width: int) -> str:
    if max_width <= 0:
        return ""
    if font.size(label)[0] <= max_width:
        return label
    clipped = label
    while clipped and font.size(f"{clipped}...")[0] > max_width:
        clipped = clipped[:-1]
    return f"{clipped}..." if clipped else "..."


def _wrap_text(font: pygame.font.Font, text: str, max_width: int) -> list[str]:
    lines: list[str] = []
    current = ""
    for word in text.split():
        candidate = word if current == "" else f"{current} {word}"
        if font.size(candidate)[0] <= max_width or current == "":
            current = candidate
        else:
            lines.append(current)
            current = word
    if current:
        lines.append(current)
    return lines


def _draw_frame(
    surface: pygame.Surface,
    *,
    title: str,
    tag: str,
    title_font: pygame.font.Font,
    hint_font: pygame.font.Font,
) -> pygame.Rect:
    """Draw the shared window chrome and return the content rect below the header."""

    w, h = surface.get_size()
    surface.fill(BG)

    frame_margin = max(10, min(26, w // 34))
    frame = pygame.Rect(
        frame_margin,
        frame_margin,
        max(260, w - frame_margin * 2),
        max(220, h - frame_margin * 2),
    )
    pygame.draw.rect(surface, PANEL_BG, frame)
    pygame.draw.rect(surface, BORDER, frame, 2)

    header_h = max(34, min(52, h // 8))
    header = pygame.Rect(frame.x + 2, frame.y + 2, frame.w - 4, header_h)
    pygame.draw.rect(surface, HEADER_BG, header)
    pygame.draw.line(surface, BORDER, (header.x, header.bottom), (header.right, header.bottom), 1)

    tag_img = hint_font.render(tag, True, TEXT_MUTED)
    surface.blit(tag_img, (header.x + 12, header.y + (header.h - tag_img.get_height()) // 2))
    title_img = title_font.render(title, True, TEXT_MAIN)
    surface.blit(title_img, title_img.get_rect(center=(frame.centerx, header.centery)))

    return pygame.Rect(frame.x + 16, header.bottom + 14, frame.w - 32, frame.bottom - header.bottom - 28)


def _draw_leaderboard(
    surface: pygame.Surface,
    rect: pygame.Rect,
    entries: list[ScoreEntry],
    *,
    font: pygame.font.Font,
    highlight_name: str | None = None,
    highlight_entry_id: str | None = None,
) -> None:
    pygame.draw.rect(surface, (6, 13, 92), rect)
    pygame.draw.rect(surface, (78, 102, 170), rect, 1)
    if not entries:
        empty = font.render("No scores yet. Be the first!", True, TEXT_MUTED)
        surface.blit(empty, (rect.x + 12, rect.y + 10))
        return

    row_h = max(20, min(30, rect.h // max(1, len(entries))))
    y = rect.y + 4
    for idx, entry in enumerate(entries):
        if y + row_h > rect.bottom:
            break
        row = pygame.Rect(rect.x + 4, y, rect.w - 8, row_h - 2)
        if entry.entry_id == highlight_entry_id:
            pygame.draw.rect(surface, ACTIVE_BG, row)
            color = ACTIVE_TEXT
        elif highlight_name is not None and entry.name == highlight_name:
            pygame.draw.rect(surface, HIGHLIGHT_BG, row)
            color = TEXT_MAIN
        else:
            color = TEXT_MAIN
        place = font.render(f"{idx + 1:>2}", True, color)
        name = font.render(_fit_label(font, entry.name, row.w - 200), True, color)
        pts = font.render(f"{entry.score} pts", True, color)
        surface.blit(place, (row.x + 8, row.y + (row.h - place.get_height()) // 2))
        surface.blit(name, (row.x + 48, row.y + (row.h - name.get_height()) // 2))
        surface.blit(pts, (row.right - pts.get_width() - 10, row.y + (row.h - pts.get_height()) // 2))
        y += row_h


class MenuScreen:
    def __init__(self, app: App, title: str, items: list[MenuItem], *, is_root: bool = False) -> None:
        self._app = app
        self._title = title
        self._items = items
        self._selected = 0
        self._is_root = is_root
        self._title_font = pygame.font.Font(None, 42)
        self._item_font = pygame.font.Font(None, 32)
        self._hint_font = pygame.font.Font(None, 22)

    def handle_event(self, event: pygame.event.Event) -> None:
        if event.type != pygame.KEYDOWN:
            return
        key = event.key
        if key in (pygame.K_UP, pygame.K_w):
            self._move(-1)
        elif key in (pygame.K_DOWN, pygame.K_s):
            self._move(1)
        elif key in (pygame.K_RETURN, pygame.K_KP_ENTER, pygame.K_SPACE):
            self._activate()
        elif key in (pygame.K_ESCAPE, pygame.K_BACKSPACE):
            self._back()

    def _move(self, delta: int) -> None:
        if not self._items:
            return
        self._selected = (self._selected + delta) % len(self._items)

    def _activate(self) -> None:
        if not self._items:
            return
        self._app.sounds.play("click")
        self._items[self._selected].action()

    def _back(self) -> None:
        if self._is_root:
            self._app.quit()
        else:
            self._app.pop()

    def render(self, surface: pygame.Surface) -> None:
        content = _draw_frame(
            surface,
            title=self._title,
            tag="MENU",
            title_font=self._title_font,
            hint_font=self._hint_font,
        )
        list_rect = pygame.Rect(content.x, content.y, content.w, content.h - 30)
        pygame.draw.rect(surface, (6, 13, 92), list_rect)
        pygame.draw.rect(surface, (78, 102, 170), list_rect, 1)

        item_count = max(1, len(self._items))
        gap = max(4, min(10, list_rect.h // max(10, item_count * 3)))
        row_h = max(30, min(44, (list_rect.h - gap * (item_count + 1)) // item_count))
        total_h = row_h * item_count + gap * (item_count - 1)
        y = list_rect.y + max(8, (list_rect.h - total_h) // 2)

        for idx, item in enumerate(self._items):
            row = pygame.Rect(list_rect.x + 12, y, list_rect.w - 24, row_h)
            selected = idx == self._selected
            if selected:
                pygame.draw.rect(surface, ACTIVE_BG, row)
                pygame.draw.rect(surface, (120, 142, 196), row, 2)
            else:
                pygame.draw.rect(surface, (9, 20, 106), row)
                pygame.draw.rect(surface, (62, 84, 152), row, 1)

            color = ACTIVE_TEXT if selected else TEXT_MAIN
            label = _fit_label(self._item_font, item.text(), row.w - 20)
            text = self._item_font.render(label, True, color)
            surface.blit(text, (row.x + 10, row.y + (row.h - text.get_height()) // 2))
            y += row_h + gap

        footer = "Up/Down: Move  |  Enter/Space: Select  |  Esc: Back"
        foot = self._hint_font.render(footer, True, TEXT_MUTED)
        surface.blit(foot, foot.get_rect(midbottom=(content.centerx, content.bottom + 6)))


class LeaderboardScreen:
    def __init__(self, app: App, *, store: LeaderboardStore, limit: int) -> None:
        self._app = app
        self._store = store
        self._limit = limit
        self._entries = store.list(limit)
        self._title_font = pygame.font.Font(None, 42)
        self._row_font = pygame.font.Font(None, 28)
        self._hint_font = pygame.font.Font(None, 22)

    def handle_event(self, event: pygame.event.Event) -> None:
        if event.type != pygame.KEYDOWN:
            return
        if event.key in (pygame.K_ESCAPE, pygame.K_BACKSPACE, pygame.K_RETURN, pygame.K_KP_ENTER):
            self._app.sounds.play("click")
            self._app.pop()

    def render(self, surface: pygame.Surface) -> None:
        content = _draw_frame(
            surface,
            title="Leaderboard",
            tag=f"TOP {self._limit}",
            title_font=self._title_font,
            hint_font=self._hint_font,
        )
        board = pygame.Rect(content.x, content.y, content.w, content.h - 30)
        _draw_leaderboard(surface, board, self._entries, font=self._row_font)
        foot = self._hint_font.render("Esc/Enter: Back", True, TEXT_MUTED)
        surface.blit(foot, foot.get_rect(midbottom=(content.centerx, content.bottom + 6)))


_CATEGORY_CHOICES: tuple[Category | None, ...] = (*Category, None)
_DIFFICULTY_CHOICES: tuple[Difficulty, ...] = tuple(Difficulty)


class TriviaScreen:
    """One trivia session; renders whichever phase the session is in."""

    _SETUP_ROWS = ("name", "category", "difficulty", "start")

    def __init__(self, app: App, *, session: TriviaSession, leaderboard_limit: int) -> None:
        self._app = app
        self._session = session
        self._leaderboard_limit = leaderboard_limit

        self._name_input = session.player_name
        self._category_idx = _CATEGORY_CHOICES.index(session.category)
        self._difficulty_idx = _DIFFICULTY_CHOICES.index(session.difficulty)
        self._setup_row = 0
        self._option_cursor = 0
        self._option_hitboxes: list[tuple[pygame.Rect, int]] = []
        self._board: list[ScoreEntry] = []

        self._title_font = pygame.font.Font(None, 42)
        self._mid_font = pygame.font.Font(None, 34)
        self._body_font = pygame.font.Font(None, 28)
        self._small_font = pygame.font.Font(None, 24)
        self._hint_font = pygame.font.Font(None, 22)
        self._rank_font = pygame.font.Font(None, 72)

        self._unsubscribe = session.subscribe(self._on_session_event)

    def _on_session_event(self, event: SessionEvent) -> None:
        if isinstance(event, AnswerOutcome):
            self._app.sounds.play("correct" if event.is_correct else "wrong")
            self._app.show_toast(event.title, event.message, tone="good" if event.is_correct else "bad")
        elif isinstance(event, ValidationNotice):
            self._app.show_toast(event.title, event.message)
        elif isinstance(event, PhaseChanged):
            if event.current is not Phase.SETUP:
                self._app.sounds.play("level_up")
            if event.current is Phase.RESULT:
                self._board = self._session.leaderboard_snapshot(self._leaderboard_limit)
            self._option_cursor = 0

    def _close(self) -> None:
        self._unsubscribe()
        self._app.pop()

    # -- events --------------------------------------------------------------

    def handle_event(self, event: pygame.event.Event) -> None:
        phase = self._session.phase
        if event.type == pygame.MOUSEBUTTONDOWN and getattr(event, "button", 0) == 1:
            if phase is Phase.PLAYING:
                pos = getattr(event, "pos", None)
                for rect, option in self._option_hitboxes:
                    if pos is not None and rect.collidepoint(pos):
                        self._option_cursor = option
                        self._session.submit_answer(option)
                        return
            return

        if event.type != pygame.KEYDOWN:
            return
        if phase is Phase.SETUP:
            self._handle_setup_key(event)
        elif phase is Phase.PLAYING:
            self._handle_playing_key(event)
        else:
            self._handle_result_key(event)

    def _handle_setup_key(self, event: pygame.event.Event) -> None:
        key = event.key
        row = self._SETUP_ROWS[self._setup_row]

        if key == pygame.K_ESCAPE:
            self._close()
            return
        if key in (pygame.K_RETURN, pygame.K_KP_ENTER):
            self._apply_setup()
            self._app.sounds.play("click")
            self._session.start_session()
            return
        shift = bool(getattr(event, "mod", 0) & pygame.KMOD_SHIFT)
        if key == pygame.K_UP or (key == pygame.K_TAB and shift):
            self._setup_row = (self._setup_row - 1) % len(self._SETUP_ROWS)
            return
        if key in (pygame.K_DOWN, pygame.K_TAB):
            self._setup_row = (self._setup_row + 1) % len(self._SETUP_ROWS)
            return
        if key in (pygame.K_LEFT, pygame.K_RIGHT) and row in ("category", "difficulty"):
            delta = -1 if key == pygame.K_LEFT else 1
            if row == "category":
                self._category_idx = (self._category_idx + delta) % len(_CATEGORY_CHOICES)
            else:
                self._difficulty_idx = (self._difficulty_idx + delta) % len(_DIFFICULTY_CHOICES)
            self._apply_setup()
            return
        if row != "name":
            return
        if key == pygame.K_BACKSPACE:
            self._name_input = self._name_input[:-1]
            self._apply_setup()
            return
        ch = getattr(event, "unicode", "")
        if ch and ch.isprintable() and len(self._name_input) < NAME_MAX_LEN:
            self._name_input += ch
            self._apply_setup()

    def _apply_setup(self) -> None:
        self._session.configure_session(
            self._name_input,
            _DIFFICULTY_CHOICES[self._difficulty_idx],
            _CATEGORY_CHOICES[self._category_idx],
        )

    def _handle_playing_key(self, event: pygame.event.Event) -> None:
        key = event.key
        question = self._session.current_question
        if question is None:
            return
        if key == pygame.K_ESCAPE:
            self._close()
            return
        if key in (pygame.K_UP, pygame.K_w):
            self._option_cursor = (self._option_cursor - 1) % len(question.options)
            return
        if key in (pygame.K_DOWN, pygame.K_s):
            self._option_cursor = (self._option_cursor + 1) % len(question.options)
            return
        if key in (pygame.K_RETURN, pygame.K_KP_ENTER, pygame.K_SPACE):
            if self._session.selected_option is None:
                self._session.submit_answer(self._option_cursor)
            else:
                self._app.sounds.play("click")
                self._session.advance()
                self._option_cursor = 0
            return
        if key in (pygame.K_n, pygame.K_RIGHT):
            self._app.sounds.play("click")
            self._session.advance()
            self._option_cursor = 0
            return
        ch = getattr(event, "unicode", "")
        if ch and ch.isdigit():
            choice = int(ch) - 1
            if 0 <= choice < len(question.options):
                self._option_cursor = choice
                self._session.submit_answer(choice)

    def _handle_result_key(self, event: pygame.event.Event) -> None:
        key = event.key
        if key in (pygame.K_RETURN, pygame.K_KP_ENTER, pygame.K_SPACE, pygame.K_r):
            self._app.sounds.play("click")
            self._session.restart_session()
            self._setup_row = 0
            return
        if key in (pygame.K_ESCAPE, pygame.K_BACKSPACE):
            self._close()

    # -- rendering -----------------------------------------------------------

    def render(self, surface: pygame.Surface) -> None:
        phase = self._session.phase
        if phase is Phase.SETUP:
            self._render_setup(surface)
        elif phase is Phase.PLAYING:
            self._render_playing(surface)
        else:
            self._render_result(surface)

    def _render_setup(self, surface: pygame.Surface) -> None:
        content = _draw_frame(
            surface,
            title="Get Ready",
            tag="SETUP",
            title_font=self._title_font,
            hint_font=self._hint_font,
        )
        category = _CATEGORY_CHOICES[self._category_idx]
        difficulty = _DIFFICULTY_CHOICES[self._difficulty_idx]
        values = {
            "name": ("Player name", self._name_input or "e.g., Ada"),
            "category": ("Category", "< All categories >" if category is None else f"< {category.value} >"),
            "difficulty": ("Difficulty", f"< {difficulty.value.capitalize()} >"),
            "start": ("", "Start game"),
        }

        y = content.y + 10
        for idx, row_key in enumerate(self._SETUP_ROWS):
            label, value = values[row_key]
            row = pygame.Rect(content.x + 20, y, content.w - 40, 42)
            selected = idx == self._setup_row
            pygame.draw.rect(surface, ACTIVE_BG if selected else (9, 20, 106), row)
            pygame.draw.rect(surface, (62, 84, 152), row, 1)
            color = ACTIVE_TEXT if selected else TEXT_MAIN
            if label:
                surface.blit(self._body_font.render(label, True, color), (row.x + 12, row.y + 11))
            muted = row_key == "name" and not self._name_input
            value_img = self._body_font.render(value, True, TEXT_MUTED if muted and not selected else color)
            surface.blit(value_img, (row.x + 220, row.y + 11))
            y += 52

        total = len(self._session.batch)
        info = f"{total} questions  |  {points_for(difficulty)} pts each"
        surface.blit(self._small_font.render(info, True, TEXT_MUTED), (content.x + 20, y + 10))

        how = (
            "Choose a category and difficulty to adjust challenge and points.",
            "At the end, your score is saved to the local leaderboard.",
        )
        yy = y + 44
        for line in how:
            surface.blit(self._small_font.render(line, True, TEXT_MUTED), (content.x + 20, yy))
            yy += 26

        foot = self._hint_font.render(
            "Type name  |  Up/Down: Field  |  Left/Right: Change  |  Enter: Start  |  Esc: Menu",
            True,
            TEXT_MUTED,
        )
        surface.blit(foot, foot.get_rect(midbottom=(content.centerx, content.bottom + 6)))

    def _render_playing(self, surface: pygame.Surface) -> None:
        snap = self._session.snapshot()
        question: Question | None = snap.question
        content = _draw_frame(
            surface,
            title=f"Question {snap.question_number} of {snap.total_questions}",
            tag="PLAY",
            title_font=self._title_font,
            hint_font=self._hint_font,
        )
        if question is None:
            return

        tag = f"{question.category.value}  |  {snap.difficulty.value.upper()}"
        tag_img = self._small_font.render(tag, True, TEXT_MUTED)
        surface.blit(tag_img, (content.right - tag_img.get_width(), content.y))

        bar = pygame.Rect(content.x, content.y + 26, content.w, 10)
        pygame.draw.rect(surface, (6, 13, 92), bar)
        fill = bar.copy()
        fill.w = int(bar.w * snap.progress_percent / 100)
        pygame.draw.rect(surface, ACTIVE_BG, fill)
        pygame.draw.rect(surface, (78, 102, 170), bar, 1)

        y = bar.bottom + 16
        for line in _wrap_text(self._mid_font, question.text, content.w):
            surface.blit(self._mid_font.render(line, True, TEXT_MAIN), (content.x, y))
            y += 34
        y += 10

        answered = snap.selected_option is not None
        self._option_hitboxes = []
        for idx, option in enumerate(question.options):
            row = pygame.Rect(content.x, y, content.w, 40)
            if answered and idx == question.answer_index:
                fill_color, color = CORRECT_BG, TEXT_MAIN
            elif answered and idx == snap.selected_option:
                fill_color, color = WRONG_BG, TEXT_MAIN
            elif not answered and idx == self._option_cursor:
                fill_color, color = ACTIVE_BG, ACTIVE_TEXT
            else:
                fill_color, color = (9, 20, 106), TEXT_MAIN
            pygame.draw.rect(surface, fill_color, row)
            pygame.draw.rect(surface, (62, 84, 152), row, 1)
            label = _fit_label(self._body_font, f"{idx + 1}. {option}", row.w - 20)
            surface.blit(self._body_font.render(label, True, color), (row.x + 10, row.y + 10))
            self._option_hitboxes.append((row, idx))
            y += 48

        score_img = self._body_font.render(f"Score: {snap.score}", True, TEXT_MUTED)
        surface.blit(score_img, (content.x, content.bottom - 24))
        next_label = "Finish" if snap.is_last_question else "Next"
        hint = f"1-{len(question.options)}/Enter: Answer  |  N/Right: {next_label}  |  Esc: Menu"
        hint_img = self._hint_font.render(hint, True, TEXT_MUTED)
        surface.blit(hint_img, (content.right - hint_img.get_width(), content.bottom - 20))

    def _render_result(self, surface: pygame.Surface) -> None:
        result = session_result_from_session(self._session)
        content = _draw_frame(
            surface,
            title=f"Great job, {result.player_name}!",
            tag="RESULT",
            title_font=self._title_font,
            hint_font=self._hint_font,
        )

        left = pygame.Rect(content.x, content.y, content.w // 3, content.h - 30)
        pygame.draw.rect(surface, (6, 13, 92), left)
        pygame.draw.rect(surface, (78, 102, 170), left, 1)
        surface.blit(self._small_font.render("Your placement", True, TEXT_MUTED), (left.x + 12, left.y + 10))
        rank_text = "#-" if result.rank is None else f"#{result.rank}"
        rank_img = self._rank_font.render(rank_text, True, TEXT_MAIN)
        surface.blit(rank_img, rank_img.get_rect(center=(left.centerx, left.y + 90)))
        lines = (
            f"Final score: {result.score} / {result.max_score}",
            f"Correct: {result.correct} of {result.total_questions}",
            f"Accuracy: {int(round(result.accuracy * 100))}%",
        )
        y = left.y + 140
        for line in lines:
            surface.blit(self._small_font.render(line, True, TEXT_MAIN), (left.x + 12, y))
            y += 26

        board = pygame.Rect(left.right + 16, content.y, content.w - left.w - 16, content.h - 30)
        entry = self._session.last_entry
        _draw_leaderboard(
            surface,
            board,
            self._board,
            font=self._small_font,
            highlight_name=result.player_name,
            highlight_entry_id=None if entry is None else entry.entry_id,
        )

        foot = self._hint_font.render("Enter: Play again  |  Esc: Menu", True, TEXT_MUTED)
        surface.blit(foot, foot.get_rect(midbottom=(content.centerx, content.bottom + 6)))


def _new_seed() -> int:
    return random.SystemRandom().randint(1, 2**31 - 1)


def run(
    *,
    max_frames: int | None = None,
    event_injector: Callable[[int], None] | None = None,
    config: TriviaConfig | None = None,
) -> int:
    configure_logging()
    cfg = config or TriviaConfig.from_env()

    bank = DEFAULT_QUESTION_BANK
    if cfg.question_bank_path is not None:
        bank = load_question_bank(cfg.question_bank_path)

    leaderboard = LeaderboardStore(
        storage_for_path(cfg.resolved_leaderboard_path()),
        key=cfg.leaderboard_key,
        capacity=cfg.leaderboard_capacity,
    )

    pygame.init()
    pygame.display.set_caption("HIV & Reproductive Health Trivia")
    surface = pygame.display.set_mode(WINDOW_SIZE, pygame.RESIZABLE)

    clock = pygame.time.Clock()

    app = App(surface=surface, sounds=_GameSounds(enabled=cfg.sound_enabled))
    real_clock = RealClock()

    def open_play() -> None:
        session = TriviaSession(
            bank=bank,
            leaderboard=leaderboard,
            clock=real_clock,
            rng=SeededRng(_new_seed()),
            batch_size=cfg.batch_size,
        )
        app.push(TriviaScreen(app, session=session, leaderboard_limit=cfg.leaderboard_display_limit))

    def open_leaderboard() -> None:
        app.push(LeaderboardScreen(app, store=leaderboard, limit=cfg.leaderboard_display_limit))

    def toggle_sound() -> None:
        app.sounds.enabled = not app.sounds.enabled

    def reset_leaderboard() -> None:
        leaderboard.clear()
        app.show_toast("Leaderboard cleared", "All saved scores were removed.")

    main_items = [
        MenuItem("Play", open_play),
        MenuItem("Leaderboard", open_leaderboard),
        MenuItem(lambda: "Sound: On" if app.sounds.enabled else "Sound: Off", toggle_sound),
        MenuItem("Reset leaderboard", reset_leaderboard),
        MenuItem("Quit", app.quit),
    ]

    app.push(MenuScreen(app, "HIV & Reproductive Health Trivia", main_items, is_root=True))

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

"""A single-line text field with a fixed byte capacity."""

from __future__ import annotations

import logging
from typing import Any, Callable, Optional

import pygame

TEXT_INPUT_CAPACITY = 32
HOVER_OUTLINE = (0, 255, 0, 255)
TEXT_OFFSET = (20, 12)

log = logging.getLogger(__name__)


def _fits(text: str) -> bool:
    # One byte is kept for the terminator, as on the wire.
    return len(text.encode("utf-8")) < TEXT_INPUT_CAPACITY


def _truncate(text: str) -> str:
    while not _fits(text):
        text = text[:-1]
    return text


class TextInput:
    """Editable text inside a coloured rectangle."""

    def __init__(
        self,
        text: str,
        rect: Any,
        background_color: Any = (255, 255, 255),
        text_color: Any = (0, 0, 0),
        font: Optional[pygame.font.Font] = None,
        font_size: int = 0,
        on_return: Optional[Callable[[], Any]] = None,
    ) -> None:
        if not _fits(text):
            log.error("Creating TextInput with an initial text too long")
            text = _truncate(text)
        self.text = text
        self.rect = pygame.Rect(rect)
        self.background_color = pygame.Color(background_color)
        self.text_color = pygame.Color(text_color)
        self.font = font
        self.font_size = font_size
        self.on_return = on_return
        self.hovered = False

    def add_text(self, text: Optional[str]) -> bool:
        """Append typed text if it fits; return whether it was added."""
        if not text or not _fits(self.text + text):
            return False
        self.text += text
        return True

    def backspace(self) -> None:
        """Remove the last character, if any."""
        self.text = self.text[:-1]

    def submit(self) -> Any:
        """Run the return callback, if any, and return what it returned."""
        if self.on_return is None:
            return None
        return self.on_return()

    def update(self, mouse_pos: tuple[int, int], left_pressed: bool = False) -> bool:
        """Track hovering; return True when the field is being clicked."""
        x, y = mouse_pos
        r = self.rect
        self.hovered = r.left <= x <= r.right and r.top <= y <= r.bottom
        return self.hovered and bool(left_pressed)

    def draw(self, surface: pygame.Surface) -> None:
        """Paint the field, its hover outline and its text."""
        surface.fill(self.background_color, self.rect)
        if self.hovered:
            pygame.draw.rect(surface, HOVER_OUTLINE, self.rect, 1)
        if self.font is None or not self.text:
            return
        label = self.font.render(self.text, True, self.text_color, self.background_color)
        surface.blit(label, (self.rect.x + TEXT_OFFSET[0], self.rect.y + TEXT_OFFSET[1]))
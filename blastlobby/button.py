"""A clickable, hover-highlighted button."""

from __future__ import annotations

from typing import Any, Callable, Optional

import pygame

BACKGROUND = (0x3D, 0x6A, 0xBB, 0xFF)
HOVER_BOOST = 40
FOREGROUND = (0xFF, 0xFF, 0xFF, 0xFF)


class Button:
    """A rectangle with centred text that runs a callback when clicked."""

    def __init__(
        self,
        rect: Any,
        on_click: Optional[Callable[[], Any]] = None,
        text: str = "",
        font: Optional[pygame.font.Font] = None,
    ) -> None:
        self.rect = pygame.Rect(rect)
        self.on_click = on_click
        self.text = text
        self.font = font
        self.hovered = False

    def update(self, mouse_pos: tuple[int, int]) -> bool:
        """Track whether the mouse is over the button (edges included)."""
        x, y = mouse_pos
        r = self.rect
        self.hovered = r.left <= x <= r.right and r.top <= y <= r.bottom
        return self.hovered

    def background_color(self) -> pygame.Color:
        """The fill colour, lightened while hovered."""
        if self.hovered:
            r, g, b, a = BACKGROUND
            return pygame.Color(
                min(r + HOVER_BOOST, 255),
                min(g + HOVER_BOOST, 255),
                min(b + HOVER_BOOST, 255),
                a,
            )
        return pygame.Color(*BACKGROUND)

    def click(self) -> Any:
        """Run the callback, if any, and return what it returned."""
        if self.on_click is None:
            return None
        return self.on_click()

    def draw(self, surface: pygame.Surface) -> None:
        """Paint the button and its centred label."""
        bg = self.background_color()
        surface.fill(bg, self.rect)
        if self.font is None or not self.text:
            return
        label = self.font.render(self.text, True, pygame.Color(*FOREGROUND), bg)
        dest = label.get_rect(center=self.rect.center)
        surface.blit(label, dest)
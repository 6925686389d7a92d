"""Owner of the on-screen buttons and text fields, and of keyboard focus."""

from __future__ import annotations

from typing import Any, Callable, Optional

import pygame

from blastlobby.button import Button
from blastlobby.text_input import TextInput

MAX_TEXT_INPUTS = 4
LEFT_MOUSE_BUTTON = 1


class GuiError(Exception):
    """Raised when a widget cannot be created or found."""


def _swap_remove(items: list, item: Any, what: str) -> None:
    for index, candidate in enumerate(items):
        if candidate is item:
            last = items.pop()
            if index < len(items):
                items[index] = last
            return
    raise GuiError(f"{what} is not part of this gui")


class Gui:
    """Buttons and text inputs of the current screen."""

    def __init__(self) -> None:
        self.buttons: list[Button] = []
        self.text_inputs: list[TextInput] = []
        self.focused: Optional[TextInput] = None

    def update(self, mouse_pos: tuple[int, int], left_pressed: bool = False) -> None:
        """Refresh hover states; a clicked text input takes the focus."""
        for button in self.buttons:
            button.update(mouse_pos)
        for text_input in self.text_inputs:
            if text_input.update(mouse_pos, left_pressed):
                self.focused = text_input

    def draw(self, surface: pygame.Surface) -> None:
        for button in self.buttons:
            button.draw(surface)
        for text_input in self.text_inputs:
            text_input.draw(surface)

    def create_button(
        self,
        rect: Any,
        on_click: Optional[Callable[[], Any]] = None,
        text: str = "",
        font: Optional[pygame.font.Font] = None,
    ) -> Button:
        button = Button(rect, on_click, text, font)
        self.buttons.append(button)
        return button

    def destroy_button(self, button: Button) -> None:
        """Remove a button; the last button takes its place."""
        _swap_remove(self.buttons, button, "button")

    def create_text_input(
        self,
        text: str,
        rect: Any,
        background_color: Any = (255, 255, 255),
        text_color: Any = (0, 0, 0),
        font: Optional[pygame.font.Font] = None,
        font_size: int = 0,
    ) -> TextInput:
        if len(self.text_inputs) >= MAX_TEXT_INPUTS:
            raise GuiError("Cannot create TextInput: max capacity is reached")
        text_input = TextInput(text, rect, background_color, text_color, font, font_size)
        self.text_inputs.append(text_input)
        return text_input

    def destroy_text_input(self, text_input: TextInput) -> None:
        """Remove a text input; the last one takes its place."""
        _swap_remove(self.text_inputs, text_input, "text input")
        if self.focused is text_input:
            self.focused = None

    def handle_text_input(self, text: str) -> bool:
        """Type text into the focused field; return whether it was taken."""
        if self.focused is None:
            return False
        return self.focused.add_text(text)

    def handle_key(self, key: int) -> None:
        """Backspace edits the focused field; Return submits it and drops focus."""
        if self.focused is None:
            return
        if key == pygame.K_BACKSPACE:
            self.focused.backspace()
        elif key == pygame.K_RETURN:
            focused = self.focused
            self.focused = None
            focused.submit()

    def handle_mouse_up(self, button: int) -> int:
        """On a left release, click every hovered button; return how many."""
        if button != LEFT_MOUSE_BUTTON:
            return 0
        clicked = 0
        for widget in list(self.buttons):
            if widget.hovered:
                widget.click()
                clicked += 1
        return clicked

    def clear(self) -> None:
        """Delete all widgets."""
        self.buttons.clear()
        self.text_inputs.clear()
        self.focused = None

    def focus(self, text_input: Optional[TextInput]) -> None:
        self.focused = text_input
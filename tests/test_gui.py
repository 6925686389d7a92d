import pygame
import pytest

from blastlobby.button import BACKGROUND
from blastlobby.gui import MAX_TEXT_INPUTS, Gui, GuiError


def test_create_button_registers_it():
    gui = Gui()
    button = gui.create_button((0, 0, 10, 10), text="Play")
    assert gui.buttons == [button]
    assert button.text == "Play"


def test_destroy_button_moves_last_into_gap():
    gui = Gui()
    a = gui.create_button((0, 0, 1, 1))
    b = gui.create_button((0, 0, 1, 1))
    c = gui.create_button((0, 0, 1, 1))
    gui.destroy_button(a)
    assert gui.buttons == [c, b]


def test_destroy_unknown_button_raises():
    gui = Gui()
    other = Gui().create_button((0, 0, 1, 1))
    with pytest.raises(GuiError):
        gui.destroy_button(other)


def test_text_input_capacity():
    gui = Gui()
    for _ in range(MAX_TEXT_INPUTS):
        gui.create_text_input("", (0, 0, 10, 10))
    with pytest.raises(GuiError):
        gui.create_text_input("", (0, 0, 10, 10))
    assert len(gui.text_inputs) == MAX_TEXT_INPUTS


def test_destroy_text_input_clears_focus():
    gui = Gui()
    field = gui.create_text_input("a", (0, 0, 10, 10))
    gui.focus(field)
    gui.destroy_text_input(field)
    assert gui.text_inputs == []
    assert gui.focused is None


def test_update_focuses_clicked_input():
    gui = Gui()
    first = gui.create_text_input("", (0, 0, 10, 10))
    second = gui.create_text_input("", (50, 0, 10, 10))
    gui.update((55, 5), True)
    assert gui.focused is second
    gui.update((5, 5), False)
    assert gui.focused is second
    assert first.hovered is True


def test_text_goes_to_focused_input():
    gui = Gui()
    field = gui.create_text_input("ab", (0, 0, 10, 10))
    assert gui.handle_text_input("c") is False
    gui.focus(field)
    assert gui.handle_text_input("c") is True
    assert field.text == "abc"


def test_backspace_key_edits_focused():
    gui = Gui()
    field = gui.create_text_input("ab", (0, 0, 10, 10))
    gui.focus(field)
    gui.handle_key(pygame.K_BACKSPACE)
    assert field.text == "a"
    assert gui.focused is field


def test_return_key_submits_and_unfocuses():
    gui = Gui()
    field = gui.create_text_input("ab", (0, 0, 10, 10))
    submitted = []
    field.on_return = lambda: submitted.append(field.text)
    gui.focus(field)
    gui.handle_key(pygame.K_RETURN)
    assert submitted == ["ab"]
    assert gui.focused is None


def test_mouse_up_clicks_only_hovered_buttons():
    gui = Gui()
    hits = []
    gui.create_button((0, 0, 10, 10), on_click=lambda: hits.append("a"))
    gui.create_button((50, 50, 10, 10), on_click=lambda: hits.append("b"))
    gui.update((5, 5))
    assert gui.handle_mouse_up(1) == 1
    assert hits == ["a"]


def test_mouse_up_other_button_ignored():
    gui = Gui()
    hits = []
    gui.create_button((0, 0, 10, 10), on_click=lambda: hits.append("a"))
    gui.update((5, 5))
    assert gui.handle_mouse_up(3) == 0
    assert hits == []


def test_callback_may_clear_gui():
    gui = Gui()
    gui.create_button((0, 0, 10, 10), on_click=gui.clear)
    gui.create_button((0, 0, 10, 10), on_click=gui.clear)
    gui.update((5, 5))
    assert gui.handle_mouse_up(1) == 2
    assert gui.buttons == []


def test_clear_removes_everything():
    gui = Gui()
    gui.create_button((0, 0, 1, 1))
    gui.focus(gui.create_text_input("", (0, 0, 1, 1)))
    gui.clear()
    assert gui.buttons == []
    assert gui.text_inputs == []
    assert gui.focused is None


def test_draw_paints_widgets():
    gui = Gui()
    gui.create_button((0, 0, 10, 10))
    gui.create_text_input("", (20, 0, 10, 10), background_color=(10, 20, 30))
    surface = pygame.Surface((40, 20))
    gui.draw(surface)
    assert tuple(surface.get_at((5, 5))) == BACKGROUND
    assert tuple(surface.get_at((25, 5))) == (10, 20, 30, 255)
"""Tests for Rich Console factory and theme."""

from io import StringIO

from texflat.output.console import (
    TEXFLAT_THEME,
    create_console,
    get_output,
    style_for_kind,
)


class TestCreateConsole:
    def test_returns_console_with_stringio(self) -> None:
        console = create_console()
        assert isinstance(console.file, StringIO)

    def test_no_color_disables_ansi(self) -> None:
        console = create_console(no_color=True)
        console.print("[bold red]hello[/bold red]")
        output = get_output(console)
        assert "\x1b" not in output
        assert "hello" in output

    def test_custom_width(self) -> None:
        assert create_console(width=80).width == 80

    def test_default_width(self) -> None:
        assert create_console().width == 120


class TestGetOutput:
    def test_extracts_printed_text(self) -> None:
        console = create_console(no_color=True)
        console.print("hello world")
        assert "hello world" in get_output(console)

    def test_empty_console(self) -> None:
        assert get_output(create_console()) == ""


class TestTheme:
    def test_kind_styles_are_themed(self) -> None:
        for document in (True, False):
            assert style_for_kind(document) in TEXFLAT_THEME.styles

    def test_document_and_binary_differ(self) -> None:
        assert style_for_kind(True) != style_for_kind(False)

# topmark:header:start
#
#   project      : DiagFrame
#   file         : test_renderer.py
#   file_relpath : tests/rendering/test_renderer.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Tests for `diagframe.rendering.renderer`: complete plain-text reports."""

from __future__ import annotations

import pytest

from diagframe.diagnostic.level import Level
from diagframe.diagnostic.model import AnnotationKind, Group, Origin, Padding, Patch, Snippet
from diagframe.errors import EmptyReportError, SpanOutOfBoundsError
from diagframe.export.ansi import strip_ansi
from diagframe.rendering.renderer import Renderer, max_line_number, newline_count
from diagframe.rendering.styles import Style
from diagframe.rendering.theme import OutputTheme

MAIN_RS = 'fn main() {\n    let x: u32 = "a";\n}\n'


def _mismatched_types() -> list[Group]:
    return [
        Group.with_title(Level.ERROR.title("mismatched types").with_id("E0308")).element(
            Snippet(MAIN_RS, path="src/main.rs").annotation(
                AnnotationKind.PRIMARY.span(29, 32).with_label("expected `u32`")
            )
        )
    ]


def _bad_let() -> list[Group]:
    snippet = Snippet("let x = 1;").annotation(AnnotationKind.PRIMARY.span(4, 5).with_label("x"))
    return [Group.with_title(Level.ERROR.title("bad")).element(snippet)]


def test_render_primary_annotation_with_path() -> None:
    """A titled snippet prints the location, the source line and the underline."""
    expected = (
        "error[E0308]: mismatched types\n"
        " --> src/main.rs:2:18\n"
        "  |\n"
        '2 |     let x: u32 = "a";\n'
        "  |                  ^^^ expected `u32`"
    )
    assert Renderer.plain().render(_mismatched_types()) == expected


def test_render_snippet_without_path() -> None:
    """Without a path the location line is replaced by a bare separator."""
    expected = "error: bad\n  |\n1 | let x = 1;\n  |     ^ x"
    assert Renderer.plain().render(_bad_let()) == expected


def test_render_note_after_snippet() -> None:
    """A message following a snippet hangs off the gutter as ``= note:``."""
    report = [_bad_let()[0].element(Level.NOTE.message("integers are `i32` by default"))]
    expected = (
        "error: bad\n"
        "  |\n"
        "1 | let x = 1;\n"
        "  |     ^ x\n"
        "  |\n"
        "  = note: integers are `i32` by default"
    )
    assert Renderer.plain().render(report) == expected


def test_render_message_with_renamed_and_hidden_levels() -> None:
    group = _bad_let()[0]
    report = [
        group.element(Level.HELP.with_name("try").message("one")).element(
            Level.NOTE.no_name().message("two")
        )
    ]
    lines = Renderer.plain().render(report).split("\n")
    assert "  = try: one" in lines
    assert lines[-1] == "  = two"


def test_render_anonymized_line_numbers() -> None:
    expected = "error: bad\n   |\nLL | let x = 1;\n   |     ^ x"
    renderer = Renderer.plain().with_anonymized_line_numbers(True)
    assert renderer.render(_bad_let()) == expected


def test_render_closes_window_before_next_group() -> None:
    """The first group ends with a separator line when more groups follow."""
    report = [*_bad_let(), Group.with_title(Level.HELP.title("consider a cast"))]
    expected = "error: bad\n  |\n1 | let x = 1;\n  |     ^ x\n  |\nhelp: consider a cast"
    assert Renderer.plain().render(report) == expected


def test_render_expands_tabs() -> None:
    report = [
        Group.with_title(Level.WARNING.title("tab")).element(
            Snippet("\tx").annotation(AnnotationKind.PRIMARY.span(1, 2))
        )
    ]
    lines = Renderer.plain().render(report).split("\n")
    assert lines[0] == "warning: tab"
    assert lines[2] == "1 |     x"
    assert lines[3] == "  |     ^"


def test_render_secondary_annotation_uses_dashes() -> None:
    report = [
        Group.with_title(Level.ERROR.title("mismatched types")).element(
            Snippet(MAIN_RS, path="src/main.rs")
            .annotation(AnnotationKind.CONTEXT.span(23, 26).with_label("expected due to this"))
            .annotation(AnnotationKind.PRIMARY.span(29, 32).with_label("expected `u32`"))
        )
    ]
    text = Renderer.plain().render(report)
    assert "---" in text
    assert "^^^ expected `u32`" in text
    assert "expected due to this" in text
    assert " --> src/main.rs:2:18" in text


def test_render_origin_and_padding() -> None:
    report = [
        Group.with_title(Level.ERROR.title("linker failed")).elements_of(
            [
                Origin(path="build/out.o", primary=True).with_line(3).with_char_column(7),
                Level.NOTE.message("see the build log"),
                Padding(),
            ]
        )
    ]
    text = Renderer.plain().render(report)
    assert text.split("\n")[0] == "error: linker failed"
    assert "--> build/out.o:3:7" in text
    assert "= note: see the build log" in text


def test_render_suggestion_shows_removed_and_added_lines() -> None:
    """A destructive replacement is shown as a `-`/`+` diff in a second window."""
    source = 'let x: u32 = "a";'
    report = [
        Group.with_title(Level.ERROR.title("mismatched types")).element(
            Snippet(source, path="src/main.rs").annotation(
                AnnotationKind.PRIMARY.span(13, 16).with_label("expected `u32`")
            )
        ),
        Group.with_title(Level.HELP.title("use an integer literal")).element(
            Snippet(source, path="src/main.rs").patch(Patch.of(13, 16, "1"))
        ),
    ]
    expected = (
        "error: mismatched types\n"
        " --> src/main.rs:1:14\n"
        "  |\n"
        '1 | let x: u32 = "a";\n'
        "  |              ^^^ expected `u32`\n"
        "  |\n"
        "help: use an integer literal\n"
        "  |\n"
        '1 - let x: u32 = "a";\n'
        "1 + let x: u32 = 1;\n"
        "  |"
    )
    assert Renderer.plain().render(report) == expected


def test_render_unicode_theme() -> None:
    text = Renderer.plain().with_theme(OutputTheme.UNICODE).render(_mismatched_types())
    assert "╭▸ src/main.rs:2:18" in text
    assert "│" in text


def test_styled_render_strips_to_plain() -> None:
    styled = Renderer.styled().render(_mismatched_types())
    assert "\x1b[" in styled
    assert strip_ansi(styled) == Renderer.plain().render(_mismatched_types())


def test_title_url_is_a_hyperlink() -> None:
    report = [
        Group.with_title(
            Level.ERROR.title("mismatched types").with_id("E0308", "https://example.com/E0308")
        )
    ]
    text = Renderer.plain().render(report)
    assert "\x1b]8;;https://example.com/E0308\x1b\\E0308\x1b]8;;\x1b\\" in text
    assert strip_ansi(text) == "error[E0308]: mismatched types"


def test_multiline_title_is_indented() -> None:
    report = [Group.with_title(Level.ERROR.title("first\nsecond"))]
    assert Renderer.plain().render(report) == "error: first\n       second"


def test_render_lines_matches_render() -> None:
    renderer = Renderer.styled()
    lines = renderer.render_lines(_mismatched_types())
    text = "\n".join("".join(chunk for chunk, _ in line) for line in lines)
    assert text == Renderer.plain().render(_mismatched_types())
    # The level label carries the error style.
    assert lines[0][0] == ("error[E0308]", renderer.stylesheet.error)


def test_short_message() -> None:
    expected = "src/main.rs:2:18: error[E0308]: mismatched types: expected `u32`"
    assert Renderer.plain().with_short_message(True).render(_mismatched_types()) == expected
    assert Renderer.plain().render_short_message(_mismatched_types()) == expected


def test_render_short_message_ignores_the_short_message_setting() -> None:
    """The one-line form is the same whether or not the renderer was built for it."""
    report = _mismatched_types()
    styled = Renderer.styled()
    one_line = styled.render_short_message(report)
    assert one_line == styled.with_short_message(True).render(report)
    assert not strip_ansi(one_line).startswith("-->")
    assert not styled.short_message


def test_short_message_requires_a_title() -> None:
    report = [Group.with_level(Level.ERROR).element(Snippet("x"))]
    with pytest.raises(EmptyReportError):
        Renderer.plain().with_short_message(True).render(report)


def test_empty_report_is_an_error() -> None:
    with pytest.raises(EmptyReportError):
        Renderer.plain().render([])


def test_span_out_of_bounds() -> None:
    report = [
        Group.with_title(Level.ERROR.title("oops")).element(
            Snippet("abc").annotation(AnnotationKind.PRIMARY.span(0, 10))
        )
    ]
    with pytest.raises(SpanOutOfBoundsError) as exc_info:
        Renderer.plain().render(report)
    assert exc_info.value.source_len == 3
    assert "beyond the end of buffer `3`" in str(exc_info.value)


def test_with_term_width_rejects_negative() -> None:
    with pytest.raises(ValueError, match="non-negative"):
        Renderer.plain().with_term_width(-1)


def test_with_style_changes_a_single_role() -> None:
    renderer = Renderer.plain().with_style("line_num", Style(fg="blue"))
    assert renderer.stylesheet.line_num == Style(fg="blue")
    assert renderer.stylesheet.error == Style()
    with pytest.raises(ValueError, match="Unknown stylesheet field"):
        renderer.with_style("bogus", Style())


def test_newline_count() -> None:
    assert newline_count("") == 0
    assert newline_count("a") == 0
    assert newline_count("a\nb\n") == 1
    assert newline_count("a\r\nb\r\nc") == 2


def test_max_line_number_respects_folding() -> None:
    annotated = Snippet("a\nb\nc\n", line_start=10).annotation(AnnotationKind.PRIMARY.span(0, 1))
    folded = [Group.with_level(Level.ERROR).element(annotated)]
    unfolded = [Group.with_level(Level.ERROR).element(annotated.with_fold(False))]
    assert max_line_number(folded) == 10
    assert max_line_number(unfolded) == 12
    assert max_line_number([Group()]) == 1

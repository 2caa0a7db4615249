# topmark:header:start
#
#   project      : DiagFrame
#   file         : test_render_layout.py
#   file_relpath : tests/rendering/test_render_layout.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Exact-output tests for the layout of rendered snippets.

Covers multi-line span connectors, horizontal cutting of long lines, the
bridging of gaps between annotated lines, and a few reports taken from
real-world compiler and package-manager errors.
"""

from __future__ import annotations

from diagframe.diagnostic.level import Level
from diagframe.diagnostic.model import AnnotationKind, Group, Snippet
from diagframe.rendering.renderer import Renderer

FN_FOO = "fn foo() {\n    bar();\n}\n"


def _render(report: list[Group]) -> str:
    return Renderer.plain().render(report)


# ---- Multi-line spans ----


def test_multiline_span_draws_connectors() -> None:
    """A span opening mid-line is joined to its end by `_` and `|` connectors."""
    report = [
        Group.with_title(Level.ERROR.title("unclosed")).element(
            Snippet(FN_FOO, path="lib.rs").annotation(
                AnnotationKind.PRIMARY.span(9, 23).with_label("body")
            )
        )
    ]
    expected = (
        "error: unclosed\n"
        " --> lib.rs:1:10\n"
        "  |\n"
        "1 |   fn foo() {\n"
        "  |  __________^\n"
        "2 | |     bar();\n"
        "3 | | }\n"
        "  | |_^ body"
    )
    assert _render(report) == expected


def test_multiline_span_from_line_start_uses_slash() -> None:
    """A span opening at the first non-blank column starts with `/` in the gutter."""
    report = [
        Group.with_title(Level.ERROR.title("unclosed")).element(
            Snippet(FN_FOO, path="lib.rs").annotation(
                AnnotationKind.PRIMARY.span(0, 23).with_label("body")
            )
        )
    ]
    expected = (
        "error: unclosed\n"
        " --> lib.rs:1:1\n"
        "  |\n"
        "1 | / fn foo() {\n"
        "2 | |     bar();\n"
        "3 | | }\n"
        "  | |_^ body"
    )
    assert _render(report) == expected


def test_identical_multiline_spans_share_one_gutter() -> None:
    """Two annotations over the same lines are drawn with a single `/`...`|_` connector."""
    report = [
        Group.with_title(Level.ERROR.title("unclosed")).element(
            Snippet(FN_FOO, path="lib.rs")
            .annotation(AnnotationKind.PRIMARY.span(0, 23).with_label("body"))
            .annotation(AnnotationKind.CONTEXT.span(0, 23))
        )
    ]
    expected = (
        "error: unclosed\n"
        " --> lib.rs:1:1\n"
        "  |\n"
        "1 | / fn foo() {\n"
        "2 | |     bar();\n"
        "3 | | }\n"
        "  | | ^ body\n"
        "  | |_|\n"
        "  |"
    )
    assert _render(report) == expected


# ---- Horizontal margins ----


def test_long_line_is_cut_on_both_sides() -> None:
    """Code far from the annotation is replaced by `...` on the left and the right."""
    report = [
        Group.with_title(Level.ERROR.title("long line")).element(
            Snippet("0123456789" * 10).annotation(
                AnnotationKind.PRIMARY.span(50, 52).with_label("here")
            )
        )
    ]
    expected = (
        "error: long line\n"
        "  |\n"
        "1 | ...901234567890123456789012345678...\n"
        "  |               ^^ here"
    )
    assert Renderer.plain().with_term_width(40).render(report) == expected


def test_wide_span_is_elided_in_the_middle() -> None:
    """A span wider than twice the available width keeps only both of its ends."""
    report = [
        Group.with_title(Level.ERROR.title("wide")).element(
            Snippet("abcdefghij" * 6).annotation(AnnotationKind.PRIMARY.span(5, 55))
        )
    ]
    expected = (
        "error: wide\n"
        "  |\n"
        "1 | abcdefghij...hijabcdefghij\n"
        "  |      ^^^^^...^^^^^^^^"
    )
    assert Renderer.plain().with_term_width(20).render(report) == expected


def test_leading_whitespace_is_trimmed() -> None:
    """Deep indentation is cut down to a short run after a `...` marker."""
    source = " " * 180 + "let _: () = 42ñ"
    report = [
        Group.with_title(Level.ERROR.title("mismatched types").with_id("E0308")).element(
            Snippet(source, path="$DIR/whitespace-trimming.rs", line_start=4).annotation(
                AnnotationKind.PRIMARY.span(192, 194).with_label("expected (), found integer")
            )
        )
    ]
    expected = (
        "error[E0308]: mismatched types\n"
        "  --> $DIR/whitespace-trimming.rs:4:193\n"
        "   |\n"
        "LL | ...                   let _: () = 42ñ\n"
        "   |                                   ^^ expected (), found integer"
    )
    renderer = Renderer.plain().with_anonymized_line_numbers(True)
    assert renderer.render(report) == expected


# ---- Gaps between annotated lines ----


def test_gaps_between_annotated_lines() -> None:
    """One hidden line is printed as is; longer gaps collapse to `...`."""
    source = "".join(f"l{n} = {n}\n" for n in range(1, 7))
    report = [
        Group.with_title(Level.ERROR.title("gaps")).element(
            Snippet(source).annotations_of(
                [
                    AnnotationKind.PRIMARY.span(0, 2).with_label("first"),
                    AnnotationKind.CONTEXT.span(14, 16).with_label("third"),
                    AnnotationKind.CONTEXT.span(35, 37).with_label("sixth"),
                ]
            )
        )
    ]
    expected = (
        "error: gaps\n"
        "  |\n"
        "1 | l1 = 1\n"
        "  | ^^ first\n"
        "2 | l2 = 2\n"
        "3 | l3 = 3\n"
        "  | -- third\n"
        "...\n"
        "6 | l6 = 6\n"
        "  | -- sixth"
    )
    assert _render(report) == expected


# ---- Reports from the field ----


def test_unfolded_snippet_with_several_annotations() -> None:
    source = (
        "fn add_title_line(result: &mut Vec<String>, main_annotation: Option<&Annotation>) {\n"
        "    if let Some(annotation) = main_annotation {\n"
        "        result.push(format_title_line(\n"
        "            &annotation.annotation_type,\n"
        "            None,\n"
        "            &annotation.label,\n"
        "        ));\n"
        "    }\n"
        "}\n"
    )
    report = [
        Group.with_title(Level.ERROR.title("")).element(
            Snippet(source, line_start=96, fold=False).annotations_of(
                [
                    AnnotationKind.PRIMARY.span(100, 110).with_label("Variable defined here"),
                    AnnotationKind.PRIMARY.span(184, 194).with_label("Referenced here"),
                    AnnotationKind.PRIMARY.span(243, 253).with_label("Referenced again here"),
                ]
            )
        )
    ]
    expected = (
        "error: \n"
        "    |\n"
        " 96 | fn add_title_line(result: &mut Vec<String>, main_annotation: "
        "Option<&Annotation>) {\n"
        " 97 |     if let Some(annotation) = main_annotation {\n"
        "    |                 ^^^^^^^^^^ Variable defined here\n"
        " 98 |         result.push(format_title_line(\n"
        " 99 |             &annotation.annotation_type,\n"
        "    |              ^^^^^^^^^^ Referenced here\n"
        "100 |             None,\n"
        "101 |             &annotation.label,\n"
        "    |              ^^^^^^^^^^ Referenced again here\n"
        "102 |         ));\n"
        "103 |     }\n"
        "104 | }"
    )
    assert _render(report) == expected


def test_wide_characters_are_underlined_by_width() -> None:
    """An emoji takes two cells, so its underline takes two carets."""
    title = (
        "invalid character ` ` in package name: `haha this isn't a valid name 🐛`, "
        "characters must be Unicode XID characters (numbers, `-`, `_`, or most letters)"
    )
    source = '"haha this isn\'t a valid name 🐛" = { package = "libc", version = "0.1" }\n'
    report = [
        Group.with_title(Level.ERROR.title(title)).element(
            Snippet(source, path="<file>", line_start=7).annotation(
                AnnotationKind.PRIMARY.span(0, 35).with_label("")
            )
        )
    ]
    expected = (
        f"error: {title}\n"
        " --> <file>:7:1\n"
        "  |\n"
        '7 | "haha this isn\'t a valid name 🐛" = { package = "libc", version = "0.1" }\n'
        "  | " + "^" * 33
    )
    assert _render(report) == expected


def test_snippets_without_paths_in_one_window() -> None:
    """Later snippets without a path share the window of the first one."""
    report = [
        Group.with_title(
            Level.ERROR.title("expected one of `.`, `;`, `?`, or an operator, found `for`")
        ).elements_of(
            [
                Snippet(
                    "let x = vec![1];",
                    path="/code/rust/src/test/ui/annotate-snippet/suggestion.rs",
                    line_start=4,
                ).annotation(
                    AnnotationKind.CONTEXT.span(4, 5).with_label(
                        "move occurs because `x` has type `std::vec::Vec<i32>`, "
                        "which does not implement the `Copy` trait"
                    )
                ),
                Snippet("let y = x;", line_start=7).annotation(
                    AnnotationKind.CONTEXT.span(8, 9).with_label("value moved here")
                ),
                Snippet("x;", line_start=9).annotation(
                    AnnotationKind.PRIMARY.span(0, 1).with_label("value used here after move")
                ),
            ]
        )
    ]
    expected = (
        "error: expected one of `.`, `;`, `?`, or an operator, found `for`\n"
        "  |\n"
        " ::: /code/rust/src/test/ui/annotate-snippet/suggestion.rs:4:5\n"
        "  |\n"
        "4 | let x = vec![1];\n"
        "  |     - move occurs because `x` has type `std::vec::Vec<i32>`, "
        "which does not implement the `Copy` trait\n"
        "  |\n"
        "7 | let y = x;\n"
        "  |         - value moved here\n"
        "  |\n"
        " ::: \n"
        "9 | x;\n"
        "  | ^ value used here after move"
    )
    assert _render(report) == expected

from __future__ import annotations

from phixiv.pixiv.caption import extract_inner_text, fix_jump_links


def test_fix_jump_links_unwraps_redirector() -> None:
    raw = '<a href="/jump.php?https%3A%2F%2Fexample.com%2Fa%3Fb%3D1" target="_blank">x</a>'
    assert fix_jump_links(raw) == '<a href="https://example.com/a?b=1" target="_blank">x</a>'


def test_fix_jump_links_leaves_other_links() -> None:
    raw = '<a href="https://www.pixiv.net/users/1">user</a>'
    assert fix_jump_links(raw) == raw


def test_extract_inner_text_plain() -> None:
    assert extract_inner_text("  hello  ") == "hello"
    assert extract_inner_text("") == ""


def test_extract_inner_text_breaks_become_newlines() -> None:
    assert extract_inner_text("a<br />b<br>c<br >d") == "a\nb\nc\nd"


def test_extract_inner_text_keeps_text_that_looks_like_tags() -> None:
    assert extract_inner_text("1 <3 you<NOT A TAG>") == "1 <3 you<NOT A TAG>"


def test_extract_inner_text_full_caption() -> None:
    caption = (
        "    Caption:"
        '<a href="/jump.php?https%3A%2F%2Fexample.com%2F" target="_blank">https://example.com/</a>'
        "a<NOT A TAG><br />b"
        '<span style="color:#fff;">_</span >'
        "<strong>STRONG</strong  >"
        "<i>  I<x>I  </i>"
        "<br >"
        "<s>S0<br>S1</s>"
        "<empty></empty    >"
        "<br  /><a>https://example.com/</a><br  />"
        "<strong>A<i> More </i>Com<>ple<x> <s>One</s></strong>"
        "    "
    )
    expected = (
        "Caption: https://example.com/ a<NOT A TAG>\n"
        "b_STRONG  I<x>I\n"
        "S0\n"
        "S1\n"
        "https://example.com/\n"
        "A More Com<>ple<x> One"
    )
    assert extract_inner_text(fix_jump_links(caption)) == expected

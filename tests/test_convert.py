import pytest

from RteCore.convert import (
    html_to_markdown,
    markdown_to_markup,
    markup_to_markdown,
    plain_text,
)


def test_alignment_round_trip():
    markup = markdown_to_markup("{>}# Title")
    assert markup == '<h1 style="text-align: right">Title</h1>'
    assert markup_to_markdown(markup) == "{>}# Title"


def test_underline_dialect():
    assert html_to_markdown("<u>hi</u>") == "==hi=="
    assert markdown_to_markup("==hi==") == "<p><u>hi</u></p>"


def test_inline_markup_to_markdown():
    markup = '<p><strong>B</strong> <em>I</em> <a href="https://x.org">link</a> <img src="a.png" alt="pic"></p>'
    assert markup_to_markdown(markup) == "**B** *I* [link](https://x.org) ![pic](a.png)"


def test_inline_markdown_to_markup():
    markdown = "**B** *I* [link](https://x.org) ![pic](a.png)"
    assert markdown_to_markup(markdown) == (
        '<p><strong>B</strong> <em>I</em> <a href="https://x.org">link</a> <img src="a.png" alt="pic" /></p>'
    )
    assert markdown_to_markup("__b__ and _i_") == "<p><strong>b</strong> and <em>i</em></p>"


def test_blocks_are_separated_by_one_blank_line():
    markup = "<h1>T</h1><p>x</p><ul><li>a</li><li>b</li></ul><ol><li>c</li></ol>"
    assert markup_to_markdown(markup) == "# T\n\nx\n\n- a\n- b\n\n1. c"


def test_markdown_blocks_to_markup():
    assert markdown_to_markup("### Three") == "<h3>Three</h3>"
    assert markdown_to_markup("first\n\nsecond") == "<p>first</p><p>second</p>"
    assert markdown_to_markup("a\nb") == "<p>a<br>b</p>"
    assert markdown_to_markup("- a\n- b") == "<ul><li>a</li><li>b</li></ul>"
    assert markdown_to_markup("{^}centered\n\n{=}just") == (
        '<p style="text-align: center">centered</p><p style="text-align: justify">just</p>'
    )


def test_ordered_list_keeps_input_order():
    assert markdown_to_markup("1. a\n2. b") == "<ol><li>a</li><li>b</li></ol>"
    assert markdown_to_markup("7. a\n3. b") == "<ol><li>a</li><li>b</li></ol>"


def test_only_basic_entities_are_decoded():
    markup = "<p>a &amp; b &lt;tag&gt; &quot;q&quot;&nbsp;x &copy;</p>"
    assert markup_to_markdown(markup) == 'a & b <tag> "q" x &copy;'


def test_literal_markdown_characters_survive():
    markdown = markup_to_markdown("<p>5 * 3 and snake_case</p>")
    assert markdown == "5 \\* 3 and snake_case"
    assert markdown_to_markup(markdown) == "<p>5 * 3 and snake_case</p>"


def test_text_is_escaped_in_markup():
    assert markdown_to_markup("a <b> & c") == "<p>a &lt;b&gt; &amp; c</p>"


def test_unknown_blocks_are_not_fatal():
    assert markup_to_markdown("<section><p>inside</p></section>") == "inside"
    assert markup_to_markdown("<table><tr><td>a</td><td>b</td></tr></table>") == "a\n\nb"


def test_malformed_input_is_deterministic():
    first = markup_to_markdown("<p>unterminated")
    assert first == "unterminated"
    assert markup_to_markdown("<p>unterminated") == first
    assert markup_to_markdown("<p>a <b c</p>") == "a <b c"


def test_empty_input():
    assert markup_to_markdown("") == ""
    assert markup_to_markdown(None) == ""
    assert markdown_to_markup("") == ""
    assert markdown_to_markup(None) == ""
    assert plain_text(None) == ""


def test_plain_text():
    assert plain_text("<p>A&nbsp;B</p>") == "A B"
    assert plain_text("<h1>T</h1><p>x &amp; <em>y</em></p>") == "Tx & y"


@pytest.mark.parametrize(
    "markup",
    [
        "<h1>Title</h1><p>Some <strong>bold</strong> and <em>italic</em> text.</p>",
        '<p style="text-align: center">Centered <u>under</u></p><ul><li>one</li><li>two</li></ul>',
        "<ol><li>first</li><li>second</li></ol><p>a<br>b</p>",
        '<p><a href="https://example.com">link</a> and <img src="pic.png" alt="Pic"></p>',
        '<h3 style="text-align: justify">J</h3><p>5 * 3 = 15 and snake_case_name</p>',
        "<p>- not a list<br>1. nor this</p>",
        "<p><b>a</b><b>b</b></p>",
        "<h1>a #</h1>",
        "<p>foo<strong>(bar)</strong></p>",
        "<p>&lt;http://x.com&gt;</p>",
        "<p>{&gt;} not align</p>",
        "<p>a==b==c and [x](y)</p>",
        "<p>a<em>b</em><strong>c</strong> <u>(d)</u></p>",
    ],
)
def test_markdown_reserialization_is_idempotent(markup):
    markdown = markup_to_markdown(markup)
    assert markup_to_markdown(markdown_to_markup(markdown)) == markdown


def test_literal_alignment_marker_is_escaped():
    markdown = markup_to_markdown("<p>{&gt;} not align</p>")
    assert markdown == "\\{>} not align"
    assert markdown_to_markup(markdown) == "<p>{&gt;} not align</p>"


def test_literal_angle_brackets_do_not_become_links():
    markdown = markup_to_markdown("<p>&lt;http://x.com&gt;</p>")
    assert markdown == "<http://x.com>"
    assert markdown_to_markup(markdown) == "<p>&lt;http://x.com&gt;</p>"


def test_heading_trailing_hashes_are_kept():
    markdown = markup_to_markdown("<h1>a #</h1>")
    assert markdown == "# a \\#"
    assert markdown_to_markup(markdown) == "<h1>a #</h1>"


def test_split_formatting_runs_are_merged():
    assert markup_to_markdown("<p><b>a</b><b>b</b></p>") == "**ab**"


def test_emphasis_that_cannot_pair_is_written_plain():
    assert markup_to_markdown("<p>foo<strong>(bar)</strong></p>") == "foo(bar)"
    assert markup_to_markdown("<p>a <strong>(bar)</strong></p>") == "a **(bar)**"


def test_literal_link_and_underline_syntax_is_escaped():
    markdown = markup_to_markdown("<p>a==b==c and [x](y)</p>")
    assert markdown == "a\\=\\=b\\=\\=c and \\[x\\](y)"
    assert markdown_to_markup(markdown) == "<p>a==b==c and [x](y)</p>"

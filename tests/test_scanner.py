from RteCore.markup_scanner import EntitySpan, TagSpan, TextSpan, decode_entity, scan_markup


def test_scan_classifies_spans():
    spans = list(scan_markup('<p class="lead">A&amp;B</p>'))
    assert [type(span) for span in spans] == [TagSpan, TextSpan, EntitySpan, TextSpan, TagSpan]
    opening, _, entity, _, closing = spans
    assert opening.name == "p" and opening.attributes == {"class": "lead"} and not opening.closing
    assert entity.name == "amp"
    assert closing.name == "p" and closing.closing


def test_scan_keeps_angle_brackets_in_quoted_attributes():
    spans = list(scan_markup("<a title=\"a>b\" href='x.html'>t</a>"))
    assert spans[0].attributes == {"title": "a>b", "href": "x.html"}
    assert spans[1] == TextSpan("t")


def test_scan_treats_malformed_tags_as_text():
    assert list(scan_markup("a <b c")) == [TextSpan("a <b c")]
    assert list(scan_markup("1 < 2 & 3")) == [TextSpan("1 < 2 & 3")]


def test_scan_self_closing_and_comments():
    spans = list(scan_markup('<br><img src="a.png"/><!-- note -->x'))
    assert spans[0].name == "br" and spans[0].self_closing
    assert spans[1].name == "img" and spans[1].self_closing and spans[1].attributes == {"src": "a.png"}
    assert spans[2].name == "!--"
    assert spans[3] == TextSpan("x")


def test_scan_raw_round_trip():
    markup = '<h1 style="text-align: right">T&nbsp;1</h1><p>x < y<br/>'
    assert "".join(span.raw for span in scan_markup(markup)) == markup


def test_decode_entity_maps_nbsp_to_space():
    assert decode_entity(EntitySpan(name="nbsp", raw="&nbsp;")) == " "
    assert decode_entity(EntitySpan(name="#169", raw="&#169;")) == "©"

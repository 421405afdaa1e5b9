import pytest

from wikigen.content import convert_markdown, page_layout, page_title, parse_front_matter
from wikigen.errors import ParseError


def test_front_matter_is_split_from_body():
    meta, body = parse_front_matter("---\ntitle: Hello\nlayout: wide\ntags: [a, b]\n---\n# Body\n")
    assert meta == {"title": "Hello", "layout": "wide", "tags": ["a", "b"]}
    assert body.strip() == "# Body"


def test_document_without_front_matter():
    meta, body = parse_front_matter("# Just a heading\n")
    assert meta == {}
    assert body == "# Just a heading\n"


def test_bom_before_front_matter_is_ignored():
    meta, _ = parse_front_matter("\ufeff---\ntitle: x\n---\nbody")
    assert meta["title"] == "x"


def test_unterminated_front_matter_fails():
    with pytest.raises(ParseError):
        parse_front_matter("---\ntitle: Hello\n# Body\n")


def test_invalid_yaml_front_matter_fails():
    with pytest.raises(ParseError):
        parse_front_matter("---\ntitle: [unclosed\n---\nbody\n")


def test_non_mapping_front_matter_fails():
    with pytest.raises(ParseError):
        parse_front_matter("---\n- a\n- b\n---\nbody\n")


def test_empty_front_matter_gives_empty_metadata():
    meta, body = parse_front_matter("---\n---\ntext\n")
    assert meta == {}
    assert body == "text"


def test_convert_supports_tables_and_fenced_code():
    source = (
        b"# Title\n\n"
        b"| a | b |\n|---|---|\n| 1 | 2 |\n\n"
        b"```python\nprint('hi')\n```\n"
    )
    html, meta = convert_markdown(source)
    assert meta == {}
    assert "<h1>Title</h1>" in html
    assert "<table>" in html
    assert "<td>1</td>" in html
    assert 'class="language-python"' in html


def test_convert_list_directly_after_paragraph():
    html, _ = convert_markdown("Intro line\n- one\n- two\n")
    assert "<ul>" in html
    assert "<li>one</li>" in html


def test_convert_rejects_invalid_utf8():
    with pytest.raises(ParseError):
        convert_markdown(b"\xff\xfe\xfa")


def test_unrecognized_keys_are_preserved():
    _, meta = convert_markdown("---\ntitle: T\nauthor: someone\n---\nbody\n")
    assert meta["author"] == "someone"


def test_layout_defaults_to_base():
    assert page_layout({}) == "base"
    assert page_layout({"layout": 3}) == "base"
    assert page_layout({"layout": ""}) == "base"
    assert page_layout({"layout": "wide"}) == "wide"


def test_title_defaults_to_empty():
    assert page_title({}) == ""
    assert page_title({"title": 42}) == ""
    assert page_title({"title": "Foo"}) == "Foo"


def test_dates_in_front_matter_stay_strings():
    _, meta = convert_markdown("---\ntitle: 2024-01-01\nupdated: 2024-01-01 10:30:00\n---\nx\n")
    assert page_title(meta) == "2024-01-01"
    assert meta["updated"] == "2024-01-01 10:30:00"


def test_other_scalars_keep_their_types():
    meta, _ = parse_front_matter("---\ndraft: true\norder: 3\n---\n")
    assert meta == {"draft": True, "order": 3}

"""Tests for document parsing and serialization."""

from retroboard.parser import parse_document, serialize_document


def test_parse_front_matter():
    body, meta = parse_document("---\ntopic: happy\nhearts: 2\n---\nGreat sprint\n")
    assert body == "Great sprint"
    assert meta == {"topic": "happy", "hearts": 2}


def test_parse_without_front_matter():
    body, meta = parse_document("Just text\n")
    assert body == "Just text"
    assert meta == {}


def test_parse_empty_front_matter():
    body, meta = parse_document("---\n---\nBody\n")
    assert body == "Body"
    assert meta == {}


def test_parse_crlf():
    body, meta = parse_document("---\r\nhearts: 1\r\n---\r\nLine one\r\nLine two\r\n")
    assert body == "Line one\r\nLine two"
    assert meta == {"hearts": 1}


def test_crlf_body_round_trip():
    """Line endings inside a message are stored and read back unchanged."""
    text = serialize_document("Line one\r\nLine two", {"hearts": 0})
    body, meta = parse_document(text)
    assert body == "Line one\r\nLine two"
    assert meta == {"hearts": 0}


def test_parse_non_dict_front_matter():
    """A YAML list or scalar is not metadata."""
    body, meta = parse_document("---\n- a\n- b\n---\nBody\n")
    assert meta == {}
    assert body == "Body"


def test_parse_invalid_yaml():
    body, meta = parse_document("---\nkey: [unclosed\n---\nBody\n")
    assert meta == {}
    assert body == "Body"


def test_serialize_document():
    text = serialize_document("Ship it", {"assignee": "sam", "completed": False})
    assert text == "---\nassignee: sam\ncompleted: false\n---\nShip it\n"


def test_serialize_empty_meta():
    assert serialize_document("Body") == "---\n{}\n---\nBody\n"


def test_body_that_looks_like_front_matter():
    """Bodies starting with --- survive a round trip."""
    text = serialize_document("---\nnot: meta\n---", {"hearts": 0})
    body, meta = parse_document(text)
    assert body == "---\nnot: meta\n---"
    assert meta == {"hearts": 0}


def test_multiline_body_preserved():
    text = serialize_document("first\n\nsecond", {"topic": "unhappy"})
    body, meta = parse_document(text)
    assert body == "first\n\nsecond"
    assert meta["topic"] == "unhappy"

import pytest

from rsskit import (
    MalformedXMLError,
    MissingFieldError,
    ParseError,
    UnexpectedEOFError,
    parse,
)


def test_missing_description():
    xml = '<rss version="2.0"><channel><title>T</title><link>http://example.com/</link></channel></rss>'
    with pytest.raises(MissingFieldError) as excinfo:
        parse(xml)
    assert excinfo.value.field == "description"
    assert "description" in str(excinfo.value)


def test_missing_title_reported_first():
    xml = '<rss version="2.0"><channel><description>D</description></channel></rss>'
    with pytest.raises(MissingFieldError) as excinfo:
        parse(xml)
    assert excinfo.value.field == "title"


def test_rss_without_channel():
    with pytest.raises(UnexpectedEOFError):
        parse('<rss version="2.0"></rss>')


def test_truncated_document():
    xml = '<rss version="2.0"><channel><title>T</title><link>http://example.com/</link>'
    with pytest.raises(UnexpectedEOFError):
        parse(xml)


def test_truncated_inside_item():
    xml = (
        '<rss version="2.0"><channel><title>T</title>'
        "<link>http://example.com/</link><description>D</description>"
        "<item><title>half"
    )
    with pytest.raises(UnexpectedEOFError):
        parse(xml)


def test_truncated_document_with_undeclared_prefix():
    xml = (
        '<rss version="2.0"><channel><title>T</title>'
        "<link>http://example.com/</link><description>D</description>"
        "<foo:bar>x</foo:bar><item><title>half"
    )
    with pytest.raises(UnexpectedEOFError):
        parse(xml)


def test_mismatched_tags_are_malformed():
    xml = '<rss version="2.0"><channel><title>T</link></channel></rss>'
    with pytest.raises(MalformedXMLError):
        parse(xml)


def test_mismatched_tags_with_undeclared_prefix_are_malformed():
    xml = (
        '<rss version="2.0"><channel><foo:bar>x</foo:bar>'
        "<title>T</link><link>http://example.com/</link><description>D</description>"
        "</channel></rss>"
    )
    with pytest.raises(MalformedXMLError):
        parse(xml)


def test_not_xml():
    with pytest.raises(ParseError):
        parse("this is not xml at all")


def test_errors_are_value_errors():
    with pytest.raises(ValueError):
        parse('<rss version="2.0"><channel></channel></rss>')


def test_content_after_channel_is_not_read():
    xml = (
        '<rss version="2.0"><channel><title>T</title>'
        "<link>http://example.com/</link><description>D</description>"
        "</channel><trailing>"
    )
    channel = parse(xml)
    assert channel.title == "T"

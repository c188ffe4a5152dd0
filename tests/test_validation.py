import pytest

from rsskit import (
    Category,
    Channel,
    Cloud,
    DublinCoreExtension,
    Enclosure,
    Image,
    Item,
    SyndicationExtension,
    ValidationError,
    parse,
    validate,
)


def _channel(**kwargs):
    return Channel(
        title="Title",
        link="http://example.com/",
        description="Description",
        **kwargs,
    )


def test_valid_channel_passes():
    channel = _channel(
        pub_date="Mon, 01 Jan 2024 00:00:00 GMT",
        ttl="60",
        skip_hours=["0", "23"],
        skip_days=["Monday"],
        cloud=Cloud(domain="rpc.example.com", port="80", path="/RPC2",
                    register_procedure="ping", protocol="xml-rpc"),
        image=Image(url="http://example.com/a.png", title="A", link="http://example.com/",
                    width="144", height="400"),
        syndication_ext=SyndicationExtension(),
        dublin_core_ext=DublinCoreExtension(dates=["2024-01-01T10:00:00+02:00"]),
        items=[
            Item(
                link="http://example.com/1",
                pub_date="Tue, 02 Jan 2024 10:00:00 +0000",
                enclosure=Enclosure(url="http://example.com/1.mp3", length="0",
                                    mime_type="audio/mpeg"),
            )
        ],
    )
    validate(channel)


def test_parsed_feed_validates():
    xml = (
        '<rss version="2.0"><channel><title>T</title>'
        "<link>https://example.com/</link><description>D</description>"
        "<item><link>https://example.com/1</link></item>"
        "</channel></rss>"
    )
    validate(parse(xml))


@pytest.mark.parametrize(
    "kwargs",
    [
        {"link": "not a url"},
        {"link": "example.com/no-scheme"},
        {"docs": "http://"},
        {"pub_date": "yesterday"},
        {"last_build_date": "2024-01-01"},
        {"ttl": "0"},
        {"ttl": "soon"},
        {"skip_hours": ["24"]},
        {"skip_days": ["Someday"]},
        {"categories": [Category(name="c", domain="no scheme")]},
        {"cloud": Cloud(domain="rpc.example.com", port="0", protocol="soap")},
        {"cloud": Cloud(domain="rpc.example.com", port="80", protocol="carrier-pigeon")},
        {"image": Image(url="http://example.com/a.png", link="http://example.com/", width="145")},
        {"image": Image(url="http://example.com/a.png", link="http://example.com/", height="401")},
        {"syndication_ext": SyndicationExtension(base="whenever")},
        {"dublin_core_ext": DublinCoreExtension(dates=["01/02/2024"])},
    ],
)
def test_invalid_channel_values(kwargs):
    fields = {"title": "Title", "link": "http://example.com/", "description": "D"}
    fields.update(kwargs)
    with pytest.raises(ValidationError):
        validate(Channel(**fields))


@pytest.mark.parametrize(
    "item",
    [
        Item(link="nope"),
        Item(comments="nope"),
        Item(pub_date="32 Foo 2024"),
        Item(enclosure=Enclosure(url="http://example.com/a", length="-1", mime_type="audio/mpeg")),
        Item(enclosure=Enclosure(url="http://example.com/a", length="1", mime_type="audio")),
        Item(enclosure=Enclosure(url="http://example.com/a", length="big", mime_type="audio/mpeg")),
    ],
)
def test_invalid_item_values(item):
    with pytest.raises(ValidationError):
        validate(_channel(items=[item]))


def test_validation_error_is_value_error():
    with pytest.raises(ValueError):
        validate(_channel(ttl="-5"))

import io
import logging

from lxml import etree

from rsskit import (
    AtomExtension,
    AtomLink,
    Channel,
    DublinCoreExtension,
    Enclosure,
    ExtensionNode,
    Guid,
    ITunesChannelExtension,
    ITunesItemExtension,
    Item,
    SyndicationExtension,
    parse,
    write,
)
from rsskit.namespaces import ITUNES_NAMESPACE


def _channel(**kwargs):
    return Channel(
        title="Title",
        link="http://example.com/",
        description="Description",
        **kwargs,
    )


def test_minimal_channel_exact_bytes():
    channel = _channel(items=[Item()], namespaces={"ext": "http://example.com/"})
    assert write(channel) == (
        b'<?xml version="1.0" encoding="utf-8"?>\n'
        b'<rss version="2.0" xmlns:ext="http://example.com/">'
        b"<channel><title>Title</title><link>http://example.com/</link>"
        b"<description>Description</description><item/></channel></rss>"
    )


def test_write_to_sink():
    sink = io.BytesIO()
    channel = _channel()
    assert write(channel, sink) is None
    assert sink.getvalue() == write(channel)
    assert channel.to_bytes() == sink.getvalue()


def test_text_is_escaped():
    output = write(Channel(title="My <feed>", link="http://example.com/?a=1&b=2", description=""))
    assert b"<title>My &lt;feed&gt;</title>" in output
    assert b"<link>http://example.com/?a=1&amp;b=2</link>" in output
    assert b"<description/>" in output
    assert parse(output).title == "My <feed>"


def test_guid_and_enclosure_attributes():
    item = Item(
        guid=Guid(value="id-1", permalink=False),
        enclosure=Enclosure(url="http://example.com/a.mp3", length="10", mime_type="audio/mpeg"),
    )
    output = write(_channel(items=[item]))
    assert b'<guid isPermaLink="false">id-1</guid>' in output
    assert b'<enclosure url="http://example.com/a.mp3" length="10" type="audio/mpeg"/>' in output


def test_content_namespace_declared_for_item_content():
    output = write(_channel(items=[Item(content="<p>Body</p>")]))
    assert b'xmlns:content="http://purl.org/rss/1.0/modules/content/"' in output
    assert b"<content:encoded>&lt;p&gt;Body&lt;/p&gt;</content:encoded>" in output


def test_typed_namespaces_declared_only_when_written():
    channel = _channel(
        itunes_ext=ITunesChannelExtension(),
        items=[Item(dublin_core_ext=DublinCoreExtension(creators=["Alice"]))],
    )
    output = write(channel)
    assert b"xmlns:itunes" not in output
    assert b'xmlns:dc="http://purl.org/dc/elements/1.1/"' in output
    assert b"<dc:creator>Alice</dc:creator>" in output


def test_itunes_item_namespace_declared_on_root():
    channel = _channel(items=[Item(itunes_ext=ITunesItemExtension(duration="10:00"))])
    output = write(channel)
    assert f'xmlns:itunes="{ITUNES_NAMESPACE}"'.encode() in output
    assert b"<itunes:duration>10:00</itunes:duration>" in output


def test_syndication_defaults_are_written():
    output = write(_channel(syndication_ext=SyndicationExtension()))
    assert b'xmlns:sy="http://purl.org/rss/1.0/modules/syndication/"' in output
    assert (
        b"<sy:updatePeriod>daily</sy:updatePeriod>"
        b"<sy:updateFrequency>1</sy:updateFrequency>"
        b"<sy:updateBase>1970-01-01T00:00+00:00</sy:updateBase>"
    ) in output


def test_atom_link_written():
    channel = _channel(atom_ext=AtomExtension(links=[AtomLink(href="http://example.com/rss", rel="self")]))
    output = write(channel)
    assert b'xmlns:atom="http://www.w3.org/2005/Atom"' in output
    assert b'<atom:link href="http://example.com/rss" rel="self"/>' in output


def test_prefix_collision_moves_registry_prefix(caplog):
    channel = _channel(
        namespaces={"itunes": "http://example.com/not-itunes"},
        itunes_ext=ITunesChannelExtension(author="Host"),
        extensions={"itunes": {"rating": [ExtensionNode(name="itunes:rating", value="5")]}},
    )
    with caplog.at_level(logging.WARNING, logger="rsskit.writer"):
        output = write(channel)
    assert f'xmlns:itunes="{ITUNES_NAMESPACE}"'.encode() in output
    assert b'xmlns:itunes1="http://example.com/not-itunes"' in output
    assert b"<itunes:author>Host</itunes:author>" in output
    assert b"<itunes1:rating>5</itunes1:rating>" in output
    assert "itunes1" in caplog.text


def test_prefix_collision_keeps_generic_data_on_round_trip():
    xml = f"""<rss version="2.0"
         xmlns:itunes="http://example.com/not-itunes"
         xmlns:pod="{ITUNES_NAMESPACE}">
      <channel>
        <title>Title</title>
        <link>http://example.com/</link>
        <description>Description</description>
        <itunes:author scope="local">generic</itunes:author>
        <pod:author>typed</pod:author>
      </channel>
    </rss>"""
    channel = parse(xml)
    assert channel.extensions["itunes"]["author"][0].value == "generic"

    output = write(channel)
    etree.fromstring(output)
    reparsed = parse(output)
    assert reparsed.itunes_ext.author == "typed"
    node = reparsed.extensions["itunes1"]["author"][0]
    assert node.name == "itunes1:author"
    assert node.value == "generic"
    assert node.attrs == {"scope": "local"}
    assert reparsed.namespaces["itunes1"] == "http://example.com/not-itunes"
    assert "itunes" not in reparsed.extensions
    assert write(reparsed) == output


def test_nested_namespace_declarations_are_written_on_root():
    xml = """<rss version="2.0" xmlns:ext="http://example.com/ext">
      <channel>
        <title>Title</title>
        <link>http://example.com/</link>
        <description>Description</description>
        <item>
          <ext:parent>
            <sub:child xmlns:sub="http://example.com/sub"
                       xmlns:a="http://example.com/a" a:flag="1">v</sub:child>
          </ext:parent>
        </item>
      </channel>
    </rss>"""
    channel = parse(xml)
    assert channel.namespaces["sub"] == "http://example.com/sub"
    assert channel.namespaces["a"] == "http://example.com/a"
    child = channel.items[0].extensions["ext"]["parent"][0].children["child"][0]
    assert child.attrs == {"a:flag": "1"}

    output = write(channel)
    root = etree.fromstring(output)
    assert root.nsmap["sub"] == "http://example.com/sub"
    assert parse(output) == channel


def test_case_variant_itunes_uri_is_kept():
    variant = "http://www.itunes.com/DTDs/Podcast-1.0.dtd"
    channel = _channel(
        namespaces={"itunes": variant},
        itunes_ext=ITunesChannelExtension(author="Host"),
    )
    output = write(channel)
    assert f'xmlns:itunes="{variant}"'.encode() in output


def test_generic_extension_written_with_children():
    node = ExtensionNode(
        name="media:group",
        children={
            "content": [
                ExtensionNode(name="media:content", attrs={"url": "a.jpg"}),
                ExtensionNode(name="media:content", attrs={"url": "b.jpg"}),
            ]
        },
    )
    channel = _channel(
        namespaces={"media": "http://search.yahoo.com/mrss/"},
        extensions={"media": {"group": [node]}},
    )
    output = write(channel)
    assert (
        b'<media:group><media:content url="a.jpg"/><media:content url="b.jpg"/></media:group>'
        in output
    )


ROUND_TRIP_FEED = f"""<?xml version="1.0" encoding="utf-8"?>
<rss version="2.0"
     xmlns:itunes="{ITUNES_NAMESPACE}"
     xmlns:dc="http://purl.org/dc/elements/1.1/"
     xmlns:sy="http://purl.org/rss/1.0/modules/syndication/"
     xmlns:atom="http://www.w3.org/2005/Atom"
     xmlns:content="http://purl.org/rss/1.0/modules/content/"
     xmlns:media="http://search.yahoo.com/mrss/">
  <channel>
    <title>Round trip</title>
    <link>http://example.com/</link>
    <description>Everything at once</description>
    <language>en</language>
    <cloud domain="rpc.example.com" port="80" path="/RPC2" registerProcedure="ping" protocol="xml-rpc"/>
    <ttl>30</ttl>
    <image><url>http://example.com/i.png</url><title>I</title><link>http://example.com/</link></image>
    <textInput><title>S</title><description>D</description><name>q</name><link>http://example.com/s</link></textInput>
    <skipHours><hour>3</hour></skipHours>
    <skipDays><day>Monday</day></skipDays>
    <category domain="http://example.com/cat">c</category>
    <itunes:author>Host</itunes:author>
    <itunes:category text="Arts"><itunes:category text="Design"/></itunes:category>
    <itunes:owner><itunes:name>Owner</itunes:name></itunes:owner>
    <itunes:mystery>kept</itunes:mystery>
    <dc:creator>Alice</dc:creator>
    <sy:updatePeriod>weekly</sy:updatePeriod>
    <atom:link href="http://example.com/rss" rel="self" type="application/rss+xml"/>
    <media:rating scheme="urn:simple">nonadult</media:rating>
    <item>
      <title>Item &amp; more</title>
      <guid isPermaLink="false">one</guid>
      <enclosure url="http://example.com/1.mp3" length="5" type="audio/mpeg"/>
      <source url="http://example.com/src">Src</source>
      <content:encoded><![CDATA[<b>bold</b>]]></content:encoded>
      <itunes:episode>1</itunes:episode>
      <dc:subject>s</dc:subject>
      <media:group><media:content url="a.jpg"/><media:content url="b.jpg"/></media:group>
    </item>
    <item><title>Two</title></item>
  </channel>
</rss>
"""


def test_round_trip_is_stable():
    channel = parse(ROUND_TRIP_FEED)
    output = write(channel)
    assert parse(output) == channel
    assert write(parse(output)) == output


def test_round_trip_keeps_extension_data():
    channel = parse(write(parse(ROUND_TRIP_FEED)))
    assert channel.itunes_ext.author == "Host"
    assert channel.itunes_ext.categories[0].subcategory.text == "Design"
    assert channel.extensions["itunes"]["mystery"][0].value == "kept"
    assert channel.extensions["media"]["rating"][0].attrs == {"scheme": "urn:simple"}
    assert channel.syndication_ext.period.value == "weekly"
    assert channel.atom_ext.links[0].rel == "self"
    item = channel.items[0]
    assert item.title == "Item & more"
    assert item.content == "<b>bold</b>"
    assert item.itunes_ext.episode == "1"
    assert item.dublin_core_ext.subjects == ["s"]
    assert len(item.extensions["media"]["group"][0].children["content"]) == 2

import time

from rsskit import parse, write

ITEM_COUNTS = [10, 100, 1000, 10000]
ROUNDS = 5


def build_feed(item_count):
    items = []
    for i in range(item_count):
        items.append(
            f"<item>"
            f"<title>Episode {i}</title>"
            f"<link>https://example.com/episodes/{i}</link>"
            f"<description>Notes for episode {i} &amp; friends</description>"
            f"<guid isPermaLink=\"false\">episode-{i}</guid>"
            f"<pubDate>Mon, 01 Jan 2024 00:00:00 GMT</pubDate>"
            f"<enclosure url=\"https://example.com/{i}.mp3\" length=\"{i * 1000}\" type=\"audio/mpeg\"/>"
            f"<itunes:duration>00:{i % 60:02d}:00</itunes:duration>"
            f"<dc:creator>Host {i % 3}</dc:creator>"
            f"<media:content url=\"https://example.com/{i}.jpg\" medium=\"image\"/>"
            f"</item>"
        )
    return (
        '<?xml version="1.0" encoding="utf-8"?>'
        '<rss version="2.0"'
        ' xmlns:itunes="http://www.itunes.com/dtds/podcast-1.0.dtd"'
        ' xmlns:dc="http://purl.org/dc/elements/1.1/"'
        ' xmlns:media="http://search.yahoo.com/mrss/">'
        "<channel>"
        "<title>Benchmark</title>"
        "<link>https://example.com/</link>"
        "<description>Generated feed</description>"
        "<itunes:author>Example</itunes:author>"
        + "".join(items)
        + "</channel></rss>"
    ).encode("utf-8")


def run_benchmark():
    print("Benchmarking rsskit...")
    print("-" * 50)

    for item_count in ITEM_COUNTS:
        content = build_feed(item_count)
        print(f"\n{item_count} items, {len(content) / 1024:.1f} KiB")

        total_parse_time = 0
        total_write_time = 0
        for _ in range(ROUNDS):
            start_time = time.time()
            channel = parse(content)
            total_parse_time += time.time() - start_time

            start_time = time.time()
            write(channel)
            total_write_time += time.time() - start_time

        print(f"Parse: {len(channel.items)} items in {total_parse_time / ROUNDS:.4f}s")
        print(f"Write: {total_write_time / ROUNDS:.4f}s")


if __name__ == "__main__":
    run_benchmark()

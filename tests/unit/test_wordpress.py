"""测试WordPress导出"""

import pytest

from helpcenter_export.exceptions import UnresolvedLinkError
from helpcenter_export.graph import build_graph
from helpcenter_export.models import Category, FeedItem
from helpcenter_export.wordpress import (
    WordPressExporter, cdata, included_categories, render_item
)


@pytest.fixture
def graph(config, en_data):
    return build_graph(en_data, config.wordpress_scheme())


@pytest.fixture
def exporter(config, graph):
    return WordPressExporter(config, graph)


class TestIncludedCategories:
    """测试分类排除"""

    def test_first_and_last(self):
        categories = [Category(id=i, position=i) for i in range(4)]
        assert [c.id for c in included_categories(categories, [0, -1])] == [1, 2]

    def test_nothing_excluded(self):
        categories = [Category(id=i, position=i) for i in range(3)]
        assert [c.id for c in included_categories(categories, [])] == [0, 1, 2]

    def test_out_of_range_ignored(self):
        categories = [Category(id=1)]
        assert included_categories(categories, [5, -3]) == categories

    def test_empty(self):
        assert included_categories([], [0, -1]) == []


class TestFeedItems:
    """测试条目生成"""

    def test_items_skip_excluded_categories(self, exporter):
        items = exporter.items()

        assert [item.title for item in items] == [
            "Requirements", "Setting up eBlocker", "Fritzbox 7490 - The WiFi is very slow.",
        ]

    def test_item_fields(self, exporter):
        item = exporter.items()[2]

        assert item.date == "2021-02-03 08:15:00"
        assert item.slug == "fritzbox-7490-the-wifi-is-very-slow"
        assert item.permalink == "https://eblocker.org/en/docs/fritzbox-7490-the-wifi-is-very-slow"
        assert item.category == "Troubleshooting"
        assert item.category_slug == "troubleshooting"
        assert item.tag == "WiFi"
        assert item.tag_slug == "wifi"

    def test_body_rewritten(self, exporter):
        setup, wifi = exporter.items()[1:]

        assert 'href="https://eblocker.org/en/docs/requirements"' in setup.body
        assert 'src="https://eblocker.org/wp-content/uploads/docs/30-screenshot.png"' in setup.body
        assert 'href="https://eblocker.org/wp-content/uploads/docs/30-manual.pdf"' in setup.body
        assert 'href="https://eblocker.org/en/docs/category/troubleshooting"' in wifi.body
        assert 'href="https://avm.de/fritzbox"' in wifi.body

    def test_unresolved_link_aborts(self, config, graph):
        # 不排除任何分类时，破产FAQ中指向已删除文章的链接会导致失败
        config.wordpress_excluded_positions = []

        with pytest.raises(UnresolvedLinkError) as exc_info:
            WordPressExporter(config, graph).items()
        assert exc_info.value.entity_id == 999


class TestRender:
    """测试RSS输出"""

    def test_cdata_splits_terminator(self):
        assert cdata("a]]>b") == "<![CDATA[a]]]]><![CDATA[>b]]>"

    def test_render_item(self):
        item = FeedItem(
            title="Q & A", date="2021-01-01 10:00:00", slug="q-a",
            permalink="https://eblocker.org/en/docs/q-a", body="<p>x</p>",
            category="Getting Started", category_slug="getting-started",
            tag="FAQ", tag_slug="faq",
        )
        text = render_item(item)

        assert "<title>Q &amp; A</title>" in text
        assert "<wp:post_date>2021-01-01 10:00:00</wp:post_date>" in text
        assert "<wp:post_name>q-a</wp:post_name>" in text
        assert "<content:encoded><![CDATA[<p>x</p>]]></content:encoded>" in text
        assert 'nicename="getting-started"><![CDATA[Getting Started]]></category>' in text
        assert 'domain="post_tag" nicename="faq"><![CDATA[FAQ]]></category>' in text

    def test_placeholder_in_category_not_expanded(self):
        item = FeedItem(
            title="Tips", date="2021-01-01 10:00:00", slug="tips",
            permalink="https://eblocker.org/en/docs/tips", body="<p>BODY</p>",
            category="Tips {body}", category_slug="tips-body",
            tag="{title}", tag_slug="title",
        )
        text = render_item(item)

        assert 'nicename="tips-body"><![CDATA[Tips {body}]]></category>' in text
        assert 'nicename="title"><![CDATA[{title}]]></category>' in text
        assert text.count("<p>BODY</p>") == 1
        assert text.count("]]>") == 4

    def test_placeholder_in_site_title_not_expanded(self, config, exporter):
        config.translations['en-us']['site_title'] = "Help {items}"

        feed = exporter.render()

        assert "<title>Help {items}</title>" in feed
        assert feed.count("<item>") == 3

    def test_render_feed(self, exporter):
        feed = exporter.render()

        assert feed.startswith('<?xml version="1.0" encoding="UTF-8"?>')
        assert "<title>eBlocker Help</title>" in feed
        assert "<language>en</language>" in feed
        assert feed.count("<item>") == 3
        assert "{items}" not in feed
        assert feed.index("Requirements") < feed.index("Setting up eBlocker")

    def test_custom_template(self, config, graph, temp_dir):
        template = temp_dir / "feed.xml"
        template.write_text("<rss>{items}</rss>", encoding='utf-8')

        feed = WordPressExporter(config, graph, template=template).render()

        assert feed.startswith("<rss>    <item>")
        assert feed.endswith("</item></rss>")

    def test_export_writes_file(self, exporter, config):
        output = exporter.export()

        assert output == config.wordpress_output
        assert output.read_text(encoding='utf-8').count("<item>") == 3

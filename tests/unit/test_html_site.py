"""测试静态站点生成"""

import pytest

from helpcenter_export.exceptions import MissingTranslationError
from helpcenter_export.html_site import HTMLSiteGenerator, render_page, switch_language


@pytest.fixture
def generator(config, site_graphs, attachment_index):
    return HTMLSiteGenerator(config, site_graphs, attachment_index)


@pytest.fixture
def site(generator, config):
    """生成完整站点，返回docs目录"""
    generator.generate()
    return config.output_dir


def read(site, rel_path):
    return (site / rel_path).read_text(encoding='utf-8')


class TestRenderPage:
    """测试页面骨架"""

    def test_root_page(self):
        page = render_page("Titel", "<p>x</p>")

        assert page.startswith("<!DOCTYPE html>")
        assert '<meta charset="utf-8">' in page
        assert '<link rel="stylesheet" href="style.css">' in page
        assert 'http-equiv="refresh"' not in page
        assert "<body>\n<p>x</p>\n</body>" in page

    def test_depth_and_redirect(self):
        page = render_page("Titel", "", depth=1, lang="en-us", redirect="https://eblocker.org/en/docs")

        assert '<link rel="stylesheet" href="../style.css">' in page
        assert '<meta http-equiv="refresh" content="0; url=https://eblocker.org/en/docs">' in page
        assert '<html lang="en-us">' in page

    def test_title_escaped(self):
        assert "<title>A &amp; B</title>" in render_page("A & B", "")

    def test_placeholder_in_title_not_expanded(self):
        page = render_page("Using {content} in templates", "<p>BODY</p>")

        assert "<title>Using {content} in templates</title>" in page
        assert page.count("<p>BODY</p>") == 1


class TestSwitchLanguage:
    """测试语言切换链接"""

    def test_substitutes_language_segment(self):
        assert switch_language("de/12.html", "de", "en-us") == "../en-us/12.html"
        assert switch_language("en-us/index.html", "en-us", "de") == "../de/index.html"


class TestSiteLayout:
    """测试输出目录结构"""

    def test_files(self, site):
        for rel_path in [
            "index.html", "style.css",
            "de/index.html", "de/1.html", "de/2.html", "de/30.html",
            "en-us/index.html", "en-us/10.html", "en-us/20.html", "en-us/30.html", "en-us/32.html",
        ]:
            assert (site / rel_path).exists(), rel_path

    def test_orphans_not_rendered(self, site):
        assert not (site / "en-us" / "24.html").exists()
        assert not (site / "en-us" / "34.html").exists()

    def test_root_index(self, site):
        page = read(site, "index.html")

        assert '<a href="de/index.html">Deutsch</a>' in page
        assert '<a href="en-us/index.html">English</a>' in page
        assert 'http-equiv="refresh"' not in page

    def test_category_listing_in_position_order(self, site):
        page = read(site, "en-us/index.html")
        positions = [page.index(f'href="{cid}.html"') for cid in (10, 11, 12, 13)]
        assert positions == sorted(positions)

    def test_section_lists_articles_in_position_order(self, site):
        page = read(site, "en-us/20.html")
        assert page.index('href="31.html"') < page.index('href="30.html"')


class TestArticlePage:
    """测试文章页面"""

    def test_language_bar(self, site):
        de_page = read(site, "de/30.html")
        en_page = read(site, "en-us/30.html")

        assert '<span class="current">Deutsch</span>' in de_page
        assert '<a href="../en-us/30.html">English</a>' in de_page
        assert '<span class="current">English</span>' in en_page
        assert '<a href="../de/30.html">Deutsch</a>' in en_page

    def test_breadcrumbs(self, site):
        page = read(site, "en-us/30.html")

        assert (
            '<nav class="breadcrumbs"><a href="index.html">Home</a> &gt; '
            '<a href="11.html">Getting Started</a> &gt; '
            '<a href="20.html">Installation</a> &gt; '
            '<span>Setting up eBlocker</span></nav>'
        ) in page

    def test_body_links_rewritten(self, site):
        page = read(site, "en-us/30.html")

        assert 'href="31.html"' in page
        assert 'src="../attachments/30-screenshot.png"' in page
        assert 'href="../attachments/30-manual.pdf"' in page
        assert "support.eblocker.com" not in page

    def test_updated_timestamp(self, site):
        assert "Updated: 2021-01-01 10:00:00" in read(site, "en-us/30.html")
        assert "Aktualisiert: 2021-01-01 10:00:00" in read(site, "de/30.html")

    def test_attachments_section(self, site):
        page = read(site, "en-us/30.html")

        assert page.count('<section class="attachments">') == 1
        assert "<h2>Attachments</h2>" in page
        # 内嵌图片不列入附件
        assert '>screenshot.png</a>' not in page
        assert '<a href="../attachments/30-manual.pdf">manual.pdf</a>' in page

    def test_attachments_listed_in_fetch_order(self, site):
        page = read(site, "en-us/30.html")
        start = page.index('<section class="attachments">')
        section = page[start:page.index("</section>", start)]

        assert section.count("<li>") == 2
        assert section.index("wiring.pdf") < section.index("manual.pdf")
        assert "screenshot.png" not in section

    def test_no_attachments_section(self, site):
        assert '<section class="attachments">' not in read(site, "en-us/32.html")

    def test_attachments_per_language(self, site):
        page = read(site, "de/30.html")
        assert "<h2>Anhänge</h2>" in page
        assert "anleitung.pdf" in page
        assert "manual.pdf" not in page


class TestRedirects:
    """测试跳转"""

    def test_non_de_pages_redirect(self, site):
        article = read(site, "en-us/30.html")
        category = read(site, "en-us/12.html")
        index = read(site, "en-us/index.html")

        assert 'content="0; url=https://eblocker.org/en/docs/setting-up-eblocker"' in article
        assert 'content="0; url=https://eblocker.org/en/docs/category/troubleshooting"' in category
        assert 'content="0; url=https://eblocker.org/en/docs"' in index

    def test_de_pages_never_redirect(self, site):
        for rel_path in ["de/index.html", "de/1.html", "de/2.html", "de/30.html"]:
            assert 'http-equiv="refresh"' not in read(site, rel_path)

    def test_exempt_languages_configurable(self, config, site_graphs, attachment_index):
        config.no_redirect_languages = ["de", "en-us"]
        HTMLSiteGenerator(config, site_graphs, attachment_index).generate()

        assert 'http-equiv="refresh"' not in read(config.output_dir, "en-us/30.html")


class TestTranslations:
    """测试界面文字"""

    def test_missing_translation_aborts(self, config, site_graphs, attachment_index):
        del config.translations['en-us']['attachments']
        generator = HTMLSiteGenerator(config, site_graphs, attachment_index)

        with pytest.raises(MissingTranslationError):
            generator.generate()

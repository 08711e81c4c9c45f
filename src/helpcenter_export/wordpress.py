"""WordPress RSS（WXR）导出"""

import logging
from html import escape
from pathlib import Path
from typing import Iterable, List, Optional

from .config import ExportConfig, short_language
from .graph import ContentGraph
from .models import Category, FeedItem
from .rewriter import WORDPRESS_MODE, UrlRewriter
from .utils import fill_template, format_timestamp, save_text, shortname

logger = logging.getLogger(__name__)

ITEM_TEMPLATE = '''    <item>
        <title>{title}</title>
        <link>{permalink}</link>
        <dc:creator><![CDATA[admin]]></dc:creator>
        <content:encoded>{body}</content:encoded>
        <wp:post_date>{date}</wp:post_date>
        <wp:post_name>{slug}</wp:post_name>
        <wp:status>publish</wp:status>
        <wp:post_type>post</wp:post_type>
        <category domain="category" nicename="{category_slug}">{category}</category>
        <category domain="post_tag" nicename="{tag_slug}">{tag}</category>
    </item>'''


def cdata(text: str) -> str:
    """包装为CDATA，正文中的 ]]> 需要拆开"""
    return "<![CDATA[" + text.replace("]]>", "]]]]><![CDATA[>") + "]]>"


def included_categories(categories: List[Category], excluded_positions: Iterable[int]) -> List[Category]:
    """按排序后的位置去掉被排除的顶级分类，负数从末尾数起"""
    count = len(categories)
    excluded = {pos % count for pos in excluded_positions if -count <= pos < count} if count else set()
    return [category for i, category in enumerate(categories) if i not in excluded]


def render_item(item: FeedItem) -> str:
    return fill_template(ITEM_TEMPLATE, {
        'title': escape(item.title),
        'permalink': escape(item.permalink),
        'date': escape(item.date),
        'slug': escape(item.slug),
        'category_slug': escape(item.category_slug),
        'category': cdata(item.category),
        'tag_slug': escape(item.tag_slug),
        'tag': cdata(item.tag),
        'body': cdata(item.body),
    })


class WordPressExporter:
    """把一种语言的内容树展平为WordPress可导入的RSS"""

    def __init__(self, config: ExportConfig, graph: ContentGraph, template: Optional[Path] = None):
        self.config = config
        self.graph = graph
        self.template = Path(template or config.wordpress_template)
        self.rewriter = UrlRewriter(
            WORDPRESS_MODE,
            config.hosts,
            id_to_path=graph.id_to_path,
            uploads_base=config.wordpress_uploads_base,
        )

    def items(self) -> List[FeedItem]:
        """按遍历顺序生成所有条目，链接无法解析时直接报错"""
        categories = included_categories(self.graph.categories, self.config.wordpress_excluded_positions)
        skipped = [c.name for c in self.graph.categories if c not in categories]
        if skipped:
            logger.info(f"跳过分类: {', '.join(skipped)}")

        items = []
        for category, section, article in self.graph.walk(categories):
            items.append(FeedItem(
                title=article.title,
                date=format_timestamp(article.updated_at),
                slug=shortname(article.name),
                permalink=self.graph.id_to_path[article.id],
                body=self.rewriter.rewrite_body(article.id, article.body),
                category=category.name,
                category_slug=shortname(category.name),
                tag=section.name,
                tag_slug=shortname(section.name),
            ))
        return items

    def render(self) -> str:
        """把所有条目代入feed模板"""
        items = self.items()
        feed = self.template.read_text(encoding='utf-8')
        logger.info(f"WordPress导出: {len(items)} 篇文章")
        return fill_template(feed, {
            'title': escape(self.config.translate(self.graph.language, 'site_title')),
            'link': escape(self.config.wordpress_permalink_base),
            'language': escape(short_language(self.graph.language)),
            'items': "\n".join(render_item(item) for item in items),
        })

    def export(self, output: Optional[Path] = None) -> Path:
        output = Path(output or self.config.wordpress_output)
        save_text(self.render(), output)
        logger.info(f"RSS已生成: {output}")
        return output

"""静态HTML站点生成器"""

import html
import logging
import shutil
from pathlib import Path
from typing import Dict, List, Optional, Tuple
from urllib.parse import quote

from .config import TEMPLATE_DIR, ExportConfig
from .graph import AttachmentIndex, ContentGraph
from .models import Article, Attachment, Category, Section
from .rewriter import HTML_MODE, UrlRewriter
from .utils import fill_template, format_timestamp, make_progress, save_text

logger = logging.getLogger(__name__)

# 面包屑：从根到当前节点的 (显示名, 相对链接)
Breadcrumbs = List[Tuple[str, str]]

PAGE_TEMPLATE = '''<!DOCTYPE html>
<html lang="{lang}">
<head>
<meta charset="utf-8">
<title>{title}</title>
<link rel="stylesheet" href="{css_path}">
{redirect}</head>
<body>
{content}
</body>
</html>
'''


def render_page(title: str, content: str, depth: int = 0, lang: str = "", redirect: Optional[str] = None) -> str:
    """所有页面共用的HTML骨架，depth为页面相对docs根目录的层级"""
    css_path = "../" * depth + "style.css"
    redirect_meta = ""
    if redirect:
        redirect_meta = f'<meta http-equiv="refresh" content="0; url={html.escape(redirect)}">\n'

    return fill_template(PAGE_TEMPLATE, {
        'lang': html.escape(lang),
        'title': html.escape(title),
        'css_path': css_path,
        'redirect': redirect_meta,
        'content': content,
    })


def switch_language(rel_path: str, current: str, target: str) -> str:
    """把相对路径中的语言段替换为目标语言，返回从当前页面出发的相对链接"""
    parts = rel_path.split('/')
    parts = [target if part == current else part for part in parts]
    return "../" * (len(parts) - 1) + "/".join(parts)


class HTMLSiteGenerator:
    """把各语言的内容图写成互相链接的静态页面"""

    def __init__(self, config: ExportConfig, graphs: Dict[str, ContentGraph], attachments: AttachmentIndex):
        self.config = config
        self.graphs = graphs
        self.attachments = attachments
        self.output_dir = Path(config.output_dir)
        self.rewriter = UrlRewriter(HTML_MODE, config.hosts)
        self.pages_written = 0

    def generate(self) -> Path:
        """生成整个站点，返回根索引页路径"""
        self.output_dir.mkdir(parents=True, exist_ok=True)
        self._copy_css_file()
        index_file = self._generate_root_index()

        for language in self.config.languages:
            self.generate_language(language)

        logger.info(f"共生成 {self.pages_written} 个页面: {self.output_dir}")
        return index_file

    def _copy_css_file(self) -> None:
        """复制样式表到输出目录"""
        shutil.copy2(TEMPLATE_DIR / "style.css", self.output_dir / "style.css")

    def _write(self, rel_path: str, page: str) -> Path:
        target = self.output_dir / rel_path
        save_text(page, target)
        self.pages_written += 1
        return target

    def _generate_root_index(self) -> Path:
        """docs/index.html：语言选择页，不做跳转"""
        items = []
        for language in self.config.languages:
            name = self.config.translate(language, 'language_name')
            items.append(f'<li><a href="{language}/index.html">{html.escape(name)}</a></li>')

        title = self.config.translate(self.config.languages[0], 'site_title')
        content = f"<h1>{html.escape(title)}</h1>\n<ul class=\"languages\">\n" + "\n".join(items) + "\n</ul>"
        return self._write("index.html", render_page(title, content))

    def _language_bar(self, language: str, rel_path: str) -> str:
        entries = []
        for other in self.config.languages:
            name = html.escape(self.config.translate(other, 'language_name'))
            if other == language:
                entries.append(f'<span class="current">{name}</span>')
            else:
                href = switch_language(rel_path, language, other)
                entries.append(f'<a href="{href}">{name}</a>')
        return '<nav class="languages">' + " | ".join(entries) + '</nav>'

    @staticmethod
    def _breadcrumbs(trail: Breadcrumbs) -> str:
        entries = []
        for i, (name, href) in enumerate(trail):
            if i == len(trail) - 1:
                entries.append(f'<span>{html.escape(name)}</span>')
            else:
                entries.append(f'<a href="{href}">{html.escape(name)}</a>')
        return '<nav class="breadcrumbs">' + " &gt; ".join(entries) + '</nav>'

    def _redirect(self, language: str, entity_id: Optional[int] = None) -> Optional[str]:
        """非豁免语言的页面跳转到外部的新位置"""
        if language in self.config.no_redirect_languages:
            return None
        if entity_id is None:
            return self.config.language_redirect_base(language)
        return self.graphs[language].id_to_path.get(entity_id)

    def _page(self, language: str, rel_path: str, title: str, trail: Breadcrumbs, body: str,
              entity_id: Optional[int] = None) -> Path:
        content = "\n".join([
            self._language_bar(language, rel_path),
            self._breadcrumbs(trail),
            f'<h1>{html.escape(title)}</h1>',
            body,
        ])
        page = render_page(title, content, depth=1, lang=language, redirect=self._redirect(language, entity_id))
        return self._write(rel_path, page)

    @staticmethod
    def _listing(entries: List[Tuple[str, int]]) -> str:
        items = [f'<li><a href="{entity_id}.html">{html.escape(name)}</a></li>' for name, entity_id in entries]
        return '<ul>\n' + "\n".join(items) + '\n</ul>'

    def generate_language(self, language: str) -> None:
        """先序遍历一种语言的内容树并写出页面"""
        graph = self.graphs[language]
        title = self.config.translate(language, 'site_title')
        trail: Breadcrumbs = [(self.config.translate(language, 'home'), "index.html")]

        self._page(
            language, f"{language}/index.html", title, trail,
            self._listing([(c.name, c.id) for c in graph.categories]),
        )

        with make_progress(graph.article_count, f"生成页面 ({language}):") as progress:
            for category in graph.categories:
                self._generate_category(graph, category, trail, progress)

    def _generate_category(self, graph: ContentGraph, category: Category, trail: Breadcrumbs, progress) -> None:
        trail = trail + [(category.name, f"{category.id}.html")]
        sections = graph.sections_for(category)
        self._page(
            graph.language, f"{graph.language}/{category.id}.html", category.name, trail,
            self._listing([(s.name, s.id) for s in sections]), category.id,
        )
        for section in sections:
            self._generate_section(graph, section, trail, progress)

    def _generate_section(self, graph: ContentGraph, section: Section, trail: Breadcrumbs, progress) -> None:
        trail = trail + [(section.name, f"{section.id}.html")]
        articles = graph.articles_for(section)
        self._page(
            graph.language, f"{graph.language}/{section.id}.html", section.name, trail,
            self._listing([(a.title, a.id) for a in articles]), section.id,
        )
        for article in articles:
            self._generate_article(graph, article, trail)
            progress.update()

    def _generate_article(self, graph: ContentGraph, article: Article, trail: Breadcrumbs) -> Path:
        trail = trail + [(article.title, f"{article.id}.html")]
        parts = []
        if article.updated_at:
            updated = html.escape(self.config.translate(graph.language, 'updated'))
            parts.append(f'<p class="updated">{updated}: {format_timestamp(article.updated_at)}</p>')
        parts.append(f'<div class="article-body">\n{self.rewriter.rewrite_body(article.id, article.body)}\n</div>')

        attachments = self.attachments.for_article(graph.language, article.id)
        if attachments:
            parts.append(self._attachments_section(graph.language, attachments))

        return self._page(
            graph.language, f"{graph.language}/{article.id}.html", article.title, trail,
            "\n".join(parts), article.id,
        )

    def _attachments_section(self, language: str, attachments: List[Attachment]) -> str:
        heading = html.escape(self.config.translate(language, 'attachments'))
        items = [
            f'<li><a href="../attachments/{quote(a.local_name)}">{html.escape(a.file_name)}</a></li>'
            for a in attachments
        ]
        return f'<section class="attachments">\n<h2>{heading}</h2>\n<ul>\n' + "\n".join(items) + '\n</ul>\n</section>'

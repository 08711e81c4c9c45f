"""内容图：排序后的分类/章节/文章树，以及ID到输出路径的映射"""

import logging
from dataclasses import dataclass, field
from typing import Dict, Iterable, Iterator, List, Optional, Tuple, TypeVar

from .config import PathScheme
from .models import Article, Attachment, Category, LanguageData, Section
from .utils import shortname

logger = logging.getLogger(__name__)

T = TypeVar('T', Category, Section, Article)


def sort_by_position(items: Iterable[T]) -> List[T]:
    """按position升序排列，相同position保持抓取顺序"""
    return sorted(items, key=lambda item: item.position)


def path_for(scheme: PathScheme, kind: str, name: str) -> str:
    """生成 前缀/slug 形式的输出路径"""
    prefix = scheme.prefix_for(kind).rstrip('/')
    slug = shortname(name)
    return f"{prefix}/{slug}" if prefix else slug


def build_id_to_path(
    categories: Iterable[Category],
    sections: Iterable[Section],
    articles: Iterable[Article],
    scheme: PathScheme,
) -> Dict[int, str]:
    """为一种语言的每个分类、章节、文章生成唯一一条路径

    不同ID得到相同路径时只记录警告，各ID仍保留自己的条目。
    """
    id_to_path: Dict[int, str] = {}
    owners: Dict[str, int] = {}

    entries: List[Tuple[str, int, str]] = []
    entries.extend(('category', c.id, c.name) for c in categories)
    entries.extend(('section', s.id, s.name) for s in sections)
    entries.extend(('article', a.id, a.name) for a in articles)

    for kind, entity_id, name in entries:
        path = path_for(scheme, kind, name)
        owner = owners.get(path)
        if owner is not None and owner != entity_id:
            logger.warning(f"路径冲突: {entity_id} 与 {owner} 都映射到 {path}")
        owners[path] = entity_id
        id_to_path[entity_id] = path

    return id_to_path


class AttachmentIndex:
    """(语言, 文章ID) -> 非内嵌附件列表，所有语言共用一份"""

    def __init__(self):
        self._index: Dict[Tuple[str, int], List[Attachment]] = {}

    @classmethod
    def build(cls, languages: Iterable[LanguageData]) -> 'AttachmentIndex':
        index = cls()
        for data in languages:
            for attachment in data.attachments:
                if attachment.inline:
                    continue
                index._index.setdefault((data.language, attachment.article_id), []).append(attachment)
        return index

    def for_article(self, language: str, article_id: int) -> List[Attachment]:
        return list(self._index.get((language, article_id), []))

    def __len__(self) -> int:
        return sum(len(items) for items in self._index.values())


@dataclass
class ContentGraph:
    """某一语言的内容树"""
    language: str
    categories: List[Category] = field(default_factory=list)
    id_to_path: Dict[int, str] = field(default_factory=dict)
    _sections: Dict[int, List[Section]] = field(default_factory=dict)
    _articles: Dict[int, List[Article]] = field(default_factory=dict)

    def sections_for(self, category: Category) -> List[Section]:
        return self._sections.get(category.id, [])

    def articles_for(self, section: Section) -> List[Article]:
        return self._articles.get(section.id, [])

    def walk(self, categories: Optional[List[Category]] = None) -> Iterator[Tuple[Category, Section, Article]]:
        """深度优先先序遍历，依次产出 (分类, 章节, 文章)"""
        for category in categories if categories is not None else self.categories:
            for section in self.sections_for(category):
                for article in self.articles_for(section):
                    yield category, section, article

    @property
    def article_count(self) -> int:
        return sum(1 for _ in self.walk())


def build_graph(data: LanguageData, scheme: PathScheme) -> ContentGraph:
    """根据一种语言的缓存数据构建内容图

    父ID不存在的章节/文章不会出现在任何列表中。
    """
    sections: Dict[int, List[Section]] = {}
    for section in sort_by_position(data.sections):
        sections.setdefault(section.category_id, []).append(section)

    articles: Dict[int, List[Article]] = {}
    for article in sort_by_position(data.articles):
        articles.setdefault(article.section_id, []).append(article)

    graph = ContentGraph(
        language=data.language,
        categories=sort_by_position(data.categories),
        id_to_path=build_id_to_path(data.categories, data.sections, data.articles, scheme),
        _sections=sections,
        _articles=articles,
    )
    logger.info(
        f"{data.language}: {len(graph.categories)} 个分类, "
        f"{len(data.sections)} 个章节, {graph.article_count} 篇可见文章"
    )
    return graph

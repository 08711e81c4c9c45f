"""数据模型"""

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List

logger = logging.getLogger(__name__)


def parse_position(value: Any, entity: str = "") -> int:
    """把position转换为整数，"2.0" 这类字符串按数值截断，缺失或非数字时视为0"""
    if isinstance(value, bool):
        value = None
    try:
        if isinstance(value, str):
            return int(float(value))
        return int(value)
    except (TypeError, ValueError, OverflowError):
        logger.warning(f"{entity} 的position无效 ({value!r})，按0处理")
        return 0


@dataclass
class Category:
    """分类数据模型"""
    id: int
    name: str = ""
    position: int = 0

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'Category':
        """从字典创建实例"""
        return cls(
            id=int(data['id']),
            name=data.get('name') or '',
            position=parse_position(data.get('position'), f"分类 {data['id']}"),
        )


@dataclass
class Section:
    """章节数据模型"""
    id: int
    category_id: int
    name: str = ""
    position: int = 0

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'Section':
        """从字典创建实例"""
        return cls(
            id=int(data['id']),
            category_id=int(data['category_id']),
            name=data.get('name') or '',
            position=parse_position(data.get('position'), f"章节 {data['id']}"),
        )


@dataclass
class Article:
    """文章数据模型"""
    id: int
    section_id: int
    title: str = ""
    name: str = ""
    position: int = 0
    body: str = ""
    updated_at: str = ""

    def __post_init__(self):
        """API里name和title通常一致，缺一个时互相补全"""
        if not self.name:
            self.name = self.title
        if not self.title:
            self.title = self.name

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'Article':
        """从字典创建实例"""
        return cls(
            id=int(data['id']),
            section_id=int(data['section_id']),
            title=data.get('title') or '',
            name=data.get('name') or '',
            position=parse_position(data.get('position'), f"文章 {data['id']}"),
            body=data.get('body') or '',
            updated_at=data.get('updated_at') or '',
        )


@dataclass
class Attachment:
    """附件数据模型"""
    article_id: int
    file_name: str
    content_url: str
    id: int = 0
    inline: bool = False

    @property
    def local_name(self) -> str:
        """本地文件名：<文章ID>-<文件名>"""
        return f"{self.article_id}-{self.file_name}"

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'Attachment':
        """从字典创建实例"""
        return cls(
            article_id=int(data['article_id']),
            file_name=data['file_name'],
            content_url=data['content_url'],
            id=int(data.get('id') or 0),
            inline=bool(data.get('inline', False)),
        )


@dataclass
class LanguageData:
    """某一语言的全部缓存数据"""
    language: str
    categories: List[Category] = field(default_factory=list)
    sections: List[Section] = field(default_factory=list)
    articles: List[Article] = field(default_factory=list)
    attachments: List[Attachment] = field(default_factory=list)

    @classmethod
    def from_dict(cls, language: str, data: Dict[str, List[Dict[str, Any]]]) -> 'LanguageData':
        """从 {kind: [原始记录]} 创建实例"""
        return cls(
            language=language,
            categories=[Category.from_dict(item) for item in data.get('categories', [])],
            sections=[Section.from_dict(item) for item in data.get('sections', [])],
            articles=[Article.from_dict(item) for item in data.get('articles', [])],
            attachments=[Attachment.from_dict(item) for item in data.get('article_attachments', [])],
        )


@dataclass
class FeedItem:
    """WordPress RSS中的一项"""
    title: str
    date: str
    slug: str
    permalink: str
    body: str
    category: str
    category_slug: str
    tag: str
    tag_slug: str

"""文章正文中的链接改写

帮助中心自身域名下的链接分三类：
- 附件  .../hc/article_attachments/<数字>/<文件名>
- 交叉链接  .../hc/<语言>/(articles|categories|sections)/<数字>
- 其他链接原样保留，并记录警告便于事后检查

附件规则必须先于交叉链接规则匹配，因为附件也在 /hc/ 路径下。
"""

import logging
import re
from dataclasses import dataclass
from typing import Callable, Dict, Iterable, List, Optional, Tuple, Union
from urllib.parse import urlparse

from bs4 import BeautifulSoup

from .exceptions import UnresolvedLinkError

logger = logging.getLogger(__name__)

HTML_MODE = 'html'
WORDPRESS_MODE = 'wordpress'

URL_ATTRIBUTES = ('href', 'src')


@dataclass(frozen=True)
class AttachmentRef:
    article_id: int
    filename: str


@dataclass(frozen=True)
class CrossLink:
    entity_id: int


@dataclass(frozen=True)
class Passthrough:
    url: str


LinkTarget = Union[AttachmentRef, CrossLink, Passthrough]

ATTACHMENT_PATTERN = re.compile(r'^/hc/(?:[^/]+/)?article_attachments/\d+/(?P<filename>[^/?#]+)')
CROSS_LINK_PATTERN = re.compile(r'^/hc/[^/]+/(?:articles|categories|sections)/(?P<id>\d+)(?:[-/]|$)')

Rule = Tuple[re.Pattern, Callable[[re.Match, int], LinkTarget]]

RULES: List[Rule] = [
    (ATTACHMENT_PATTERN, lambda m, article_id: AttachmentRef(article_id, m.group('filename'))),
    (CROSS_LINK_PATTERN, lambda m, article_id: CrossLink(int(m.group('id')))),
]


def classify(url: str, article_id: int, hosts: Iterable[str]) -> LinkTarget:
    """按规则顺序判断链接类型"""
    parsed = urlparse(url.strip())
    if parsed.scheme not in ('http', 'https') or parsed.hostname not in set(hosts):
        return Passthrough(url)

    for pattern, handler in RULES:
        match = pattern.match(parsed.path)
        if match:
            return handler(match, article_id)
    return Passthrough(url)


class UrlRewriter:
    """把正文中的链接改写为静态站点或WordPress中的目标"""

    def __init__(
        self,
        mode: str,
        hosts: Iterable[str],
        id_to_path: Optional[Dict[int, str]] = None,
        uploads_base: str = "",
    ):
        if mode not in (HTML_MODE, WORDPRESS_MODE):
            raise ValueError(f"未知的导出模式: {mode}")
        self.mode = mode
        self.hosts = set(hosts)
        self.id_to_path = id_to_path or {}
        self.uploads_base = uploads_base.rstrip('/')

    def resolve(self, target: LinkTarget, url: str) -> str:
        if isinstance(target, AttachmentRef):
            local_name = f"{target.article_id}-{target.filename}"
            if self.mode == HTML_MODE:
                return f"../attachments/{local_name}"
            return f"{self.uploads_base}/{local_name}"

        if isinstance(target, CrossLink):
            if self.mode == HTML_MODE:
                return f"{target.entity_id}.html"
            try:
                return self.id_to_path[target.entity_id]
            except KeyError:
                raise UnresolvedLinkError(target.entity_id, url) from None

        return target.url

    def rewrite_url(self, article_id: int, url: str) -> str:
        """改写单个链接，不访问网络或文件系统"""
        target = classify(url, article_id, self.hosts)
        if isinstance(target, Passthrough):
            logger.warning(f"文章 {article_id} 中的链接未改写: {url}")
        return self.resolve(target, url)

    def rewrite_body(self, article_id: int, body: str) -> str:
        """改写正文中所有 href/src 属性"""
        if not body:
            return body

        soup = BeautifulSoup(body, 'html.parser')
        for attribute in URL_ATTRIBUTES:
            for tag in soup.find_all(attrs={attribute: True}):
                url = tag[attribute]
                if not url.strip():
                    continue
                tag[attribute] = self.rewrite_url(article_id, url)
        return str(soup)

"""帮助中心API抓取与本地缓存"""

import logging
from pathlib import Path
from typing import Any, Dict, List, Optional

import requests

from .config import DEFAULT_HEADERS, ExportConfig
from .exceptions import CacheError, FetchError
from .models import Attachment, LanguageData
from .utils import load_json, make_progress, save_json

logger = logging.getLogger(__name__)

COLLECTIONS = ['categories', 'sections', 'articles']


class HelpCenterClient:
    """帮助中心API客户端

    每一页原始JSON都缓存到 <cache_dir>/<语言>/ 下，已缓存的页面不再请求，
    因此中断后重新运行只会补齐缺失的部分。
    """

    def __init__(self, config: ExportConfig):
        self.config = config
        self.cache_dir = Path(config.cache_dir)

        # 创建session
        self.session = requests.Session()
        self.session.headers.update(DEFAULT_HEADERS)
        self.session.max_redirects = config.max_redirects

    def _url(self, path: str) -> str:
        return f"{self.config.base_url}/api/v2/help_center/{path.lstrip('/')}"

    def collection_url(self, language: str, kind: str) -> str:
        return self._url(f"{language}/{kind}.json")

    def attachments_url(self, language: str, article_id: int) -> str:
        return self._url(f"{language}/articles/{article_id}/attachments.json")

    def _get(self, url: str, **kwargs) -> requests.Response:
        try:
            logger.info(f"访问: {url}")
            response = self.session.get(url, timeout=self.config.request_timeout, **kwargs)
            response.raise_for_status()
            return response
        except requests.TooManyRedirects as e:
            raise FetchError(f"重定向次数过多 {url}: {e}") from e
        except requests.RequestException as e:
            raise FetchError(f"请求失败 {url}: {e}") from e

    def _get_json(self, url: str) -> Dict[str, Any]:
        response = self._get(url)
        try:
            return response.json()
        except ValueError as e:
            raise FetchError(f"响应不是有效的JSON {url}: {e}") from e

    def fetch_collection(self, language: str, kind: str, url: str, cache_name: Optional[str] = None) -> List[Dict[str, Any]]:
        """按next_page分页拉取一个集合，返回全部原始记录"""
        cache_name = cache_name or kind
        items: List[Dict[str, Any]] = []
        page = 1
        next_url: Optional[str] = url

        while next_url:
            cache_file = self.cache_dir / language / f"{cache_name}-{page}.json"
            data = load_json(cache_file)
            if data is None:
                data = self._get_json(next_url)
                save_json(data, cache_file)
            else:
                logger.debug(f"使用缓存: {cache_file}")

            if not isinstance(data, dict) or not isinstance(data.get(kind), list):
                raise CacheError(f"缓存文件缺少 '{kind}' 列表: {cache_file}")

            items.extend(data[kind])
            next_url = data.get('next_page')
            page += 1

        return items

    def fetch_language(self, language: str, with_attachments: bool = True) -> LanguageData:
        """拉取某一语言的分类、章节、文章，with_attachments为False时不请求附件列表"""
        logger.info(f"开始获取语言 {language} 的数据")
        raw: Dict[str, List[Dict[str, Any]]] = {}
        for kind in COLLECTIONS:
            raw[kind] = self.fetch_collection(language, kind, self.collection_url(language, kind))
            logger.info(f"{language}: {len(raw[kind])} 个 {kind}")

        if not with_attachments:
            raw['article_attachments'] = []
            return LanguageData.from_dict(language, raw)

        attachments: List[Dict[str, Any]] = []
        with make_progress(len(raw['articles']), f"获取附件列表 ({language}):") as progress:
            for article in raw['articles']:
                article_id = article['id']
                attachments.extend(self.fetch_collection(
                    language,
                    'article_attachments',
                    self.attachments_url(language, article_id),
                    cache_name=f"attachments/{article_id}",
                ))
                progress.update()
        raw['article_attachments'] = attachments

        return LanguageData.from_dict(language, raw)

    def download_attachment(self, attachment: Attachment, target_dir: Path) -> Path:
        """下载附件到 target_dir/<文章ID>-<文件名>，已存在则跳过"""
        target = Path(target_dir) / attachment.local_name
        if target.exists():
            logger.debug(f"附件已存在，跳过: {target.name}")
            return target

        target.parent.mkdir(parents=True, exist_ok=True)
        response = self._get(attachment.content_url, stream=True)
        partial = target.with_name(target.name + '.part')
        with open(partial, 'wb') as f:
            for chunk in response.iter_content(chunk_size=8192):
                if chunk:
                    f.write(chunk)
        partial.replace(target)

        logger.debug(f"附件保存成功: {target.name}")
        return target

    def download_attachments(self, attachments: List[Attachment], target_dir: Path) -> int:
        """下载一组附件，返回数量"""
        with make_progress(len(attachments), "下载附件:") as progress:
            for attachment in attachments:
                self.download_attachment(attachment, target_dir)
                progress.update()
        return len(attachments)

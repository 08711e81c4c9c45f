"""导出流程：抓取 -> 构建内容图 -> 生成输出"""

import logging
from pathlib import Path
from typing import Dict, List

from .config import ExportConfig
from .fetcher import HelpCenterClient
from .graph import AttachmentIndex, ContentGraph, build_graph
from .html_site import HTMLSiteGenerator
from .models import Attachment, LanguageData
from .wordpress import WordPressExporter

logger = logging.getLogger(__name__)

PACKAGE_LOGGER = "helpcenter_export"
LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'


def setup_logging(config: ExportConfig) -> logging.Logger:
    """设置日志：写入 <cache_dir>/export.log 并输出到控制台"""
    package_logger = logging.getLogger(PACKAGE_LOGGER)
    package_logger.setLevel(config.log_level.upper())
    if package_logger.handlers:
        return package_logger

    formatter = logging.Formatter(LOG_FORMAT)

    # 文件处理器
    log_file = Path(config.cache_dir) / "export.log"
    log_file.parent.mkdir(parents=True, exist_ok=True)
    file_handler = logging.FileHandler(log_file, encoding='utf-8')
    file_handler.setFormatter(formatter)

    # 控制台处理器
    console_handler = logging.StreamHandler()
    console_handler.setFormatter(formatter)

    package_logger.addHandler(file_handler)
    package_logger.addHandler(console_handler)
    package_logger.propagate = False
    return package_logger


class HelpCenterExporter:
    """帮助中心导出器"""

    def __init__(self, config: ExportConfig, client: HelpCenterClient = None):
        self.config = config
        self.client = client or HelpCenterClient(config)

    def fetch(self, languages: List[str]) -> Dict[str, LanguageData]:
        """依次抓取（或从缓存读取）各语言的数据"""
        return {language: self.client.fetch_language(language) for language in languages}

    def build_site_graphs(self, data: Dict[str, LanguageData]) -> Dict[str, ContentGraph]:
        """每种语言单独构建，ID映射不可跨语言复用"""
        return {
            language: build_graph(language_data, self.config.site_scheme(language))
            for language, language_data in data.items()
        }

    def export_html(self) -> Path:
        """导出多语言静态站点"""
        logger.info("=" * 60)
        logger.info("开始导出静态站点")
        logger.info("=" * 60)

        data = self.fetch(self.config.languages)
        attachments = AttachmentIndex.build(data.values())
        graphs = self.build_site_graphs(data)

        # 正文里的内嵌图片同样指向 attachments/，因此全部下载
        all_attachments: List[Attachment] = [a for d in data.values() for a in d.attachments]
        self.client.download_attachments(all_attachments, Path(self.config.output_dir) / "attachments")

        index_file = HTMLSiteGenerator(self.config, graphs, attachments).generate()
        logger.info(f"静态站点已生成: {index_file}")
        return index_file

    def export_wordpress(self) -> Path:
        """导出单一语言的WordPress RSS"""
        language = self.config.wordpress_language
        logger.info("=" * 60)
        logger.info(f"开始导出WordPress RSS ({language})")
        logger.info("=" * 60)

        # 正文中的附件链接只依赖URL本身，不需要附件列表
        data = self.client.fetch_language(language, with_attachments=False)
        graph = build_graph(data, self.config.wordpress_scheme())
        return WordPressExporter(self.config, graph).export()

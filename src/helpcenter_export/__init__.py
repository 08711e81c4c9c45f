"""
helpcenter-export: 帮助中心知识库导出器

抓取帮助中心的分类、章节、文章和附件，生成静态HTML站点或WordPress RSS
"""

__version__ = "0.1.0"

from .config import ExportConfig
from .exporter import HelpCenterExporter
from .graph import AttachmentIndex, ContentGraph, build_graph
from .models import Article, Attachment, Category, Section

__all__ = [
    "ExportConfig", "HelpCenterExporter", "AttachmentIndex", "ContentGraph",
    "build_graph", "Article", "Attachment", "Category", "Section",
]

"""配置文件"""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional

from .exceptions import MissingTranslationError

# 基础配置
BASE_URL = "https://eblocker.zendesk.com"
REQUEST_TIMEOUT = 30
MAX_REDIRECTS = 10

# 帮助中心自身的域名，只有这些域名下的链接会被改写
HELPCENTER_HOSTS = [
    "eblocker.zendesk.com",
    "support.eblocker.com",
]

# 需要抓取的语言（第一个为默认语言）
LANGUAGES = ["de", "en-us"]

# 用户代理
USER_AGENT = "helpcenter-export/0.1"

# 请求头
DEFAULT_HEADERS = {
    'User-Agent': USER_AGENT,
    'Accept': 'application/json',
}

# 输出配置
DEFAULT_CONFIG_FILE = Path("config/helpcenter_export.toml")
DEFAULT_CACHE_DIR = Path("data")
DEFAULT_OUTPUT_DIR = Path("docs")
TEMPLATE_DIR = Path(__file__).parent / "templates"

# 静态站点：非德语页面跳转到新站点
REDIRECT_BASE = "https://eblocker.org"
NO_REDIRECT_LANGUAGES = ["de"]

# WordPress导出
WORDPRESS_LANGUAGE = "en-us"
WORDPRESS_PERMALINK_BASE = "https://eblocker.org/en/docs"
WORDPRESS_UPLOADS_BASE = "https://eblocker.org/wp-content/uploads/docs"
WORDPRESS_OUTPUT_FILE = Path("wordpress.xml")
# 按排序后的位置跳过的顶级分类（首个：破产FAQ，末个：发布说明）
WORDPRESS_EXCLUDED_CATEGORY_POSITIONS = [0, -1]

# 页面文字
TRANSLATIONS: Dict[str, Dict[str, str]] = {
    'de': {
        'language_name': 'Deutsch',
        'site_title': 'eBlocker Hilfe',
        'home': 'Startseite',
        'attachments': 'Anhänge',
        'updated': 'Aktualisiert',
    },
    'en-us': {
        'language_name': 'English',
        'site_title': 'eBlocker Help',
        'home': 'Home',
        'attachments': 'Attachments',
        'updated': 'Updated',
    },
}


def short_language(language: str) -> str:
    """语言代码的主部分，如 en-us -> en"""
    return language.split('-')[0]


@dataclass
class PathScheme:
    """实体ID到输出路径的前缀规则"""
    category_prefix: str = ""
    section_prefix: str = ""
    article_prefix: str = ""

    def prefix_for(self, kind: str) -> str:
        return {
            'category': self.category_prefix,
            'section': self.section_prefix,
            'article': self.article_prefix,
        }[kind]


def _load_toml(path: Path) -> Dict[str, Any]:
    if not path.exists():
        return {}
    try:
        import tomllib  # Python 3.11+
    except ImportError:  # pragma: no cover
        import tomli as tomllib  # type: ignore
    return tomllib.loads(path.read_text(encoding="utf-8"))


@dataclass
class ExportConfig:
    """一次导出运行的全部配置，构建一次后显式传递"""
    base_url: str = BASE_URL
    hosts: List[str] = field(default_factory=lambda: list(HELPCENTER_HOSTS))
    languages: List[str] = field(default_factory=lambda: list(LANGUAGES))
    cache_dir: Path = DEFAULT_CACHE_DIR
    output_dir: Path = DEFAULT_OUTPUT_DIR
    request_timeout: int = REQUEST_TIMEOUT
    max_redirects: int = MAX_REDIRECTS
    log_level: str = "INFO"
    redirect_base: str = REDIRECT_BASE
    no_redirect_languages: List[str] = field(default_factory=lambda: list(NO_REDIRECT_LANGUAGES))
    wordpress_language: str = WORDPRESS_LANGUAGE
    wordpress_permalink_base: str = WORDPRESS_PERMALINK_BASE
    wordpress_uploads_base: str = WORDPRESS_UPLOADS_BASE
    wordpress_template: Path = TEMPLATE_DIR / "wordpress_feed.xml"
    wordpress_output: Path = WORDPRESS_OUTPUT_FILE
    wordpress_excluded_positions: List[int] = field(
        default_factory=lambda: list(WORDPRESS_EXCLUDED_CATEGORY_POSITIONS)
    )
    translations: Dict[str, Dict[str, str]] = field(
        default_factory=lambda: {lang: dict(texts) for lang, texts in TRANSLATIONS.items()}
    )

    @classmethod
    def load(cls, path: Optional[Path] = None) -> "ExportConfig":
        """读取TOML配置文件，再用环境变量覆盖"""
        data = _load_toml(path or DEFAULT_CONFIG_FILE)
        helpcenter = data.get("helpcenter", {})
        site = data.get("site", {})
        wordpress = data.get("wordpress", {})

        config = cls()
        config.base_url = helpcenter.get("base_url", config.base_url)
        config.hosts = list(helpcenter.get("hosts", config.hosts))
        config.languages = list(helpcenter.get("languages", config.languages))
        config.cache_dir = Path(helpcenter.get("cache_dir", config.cache_dir))
        config.request_timeout = int(helpcenter.get("request_timeout", config.request_timeout))
        config.max_redirects = int(helpcenter.get("max_redirects", config.max_redirects))

        config.output_dir = Path(site.get("output_dir", config.output_dir))
        config.redirect_base = site.get("redirect_base", config.redirect_base)
        config.no_redirect_languages = list(site.get("no_redirect_languages", config.no_redirect_languages))

        config.wordpress_language = wordpress.get("language", config.wordpress_language)
        config.wordpress_permalink_base = wordpress.get("permalink_base", config.wordpress_permalink_base)
        config.wordpress_uploads_base = wordpress.get("uploads_base", config.wordpress_uploads_base)
        config.wordpress_template = Path(wordpress.get("template", config.wordpress_template))
        config.wordpress_output = Path(wordpress.get("output", config.wordpress_output))
        config.wordpress_excluded_positions = [
            int(pos) for pos in wordpress.get("excluded_category_positions", config.wordpress_excluded_positions)
        ]

        for lang, texts in data.get("translations", {}).items():
            config.translations.setdefault(lang, {}).update(texts)

        config.log_level = data.get("logging", {}).get("level", config.log_level)

        # Allow env overrides
        if os.getenv("HC_EXPORT_BASE_URL"):
            config.base_url = os.environ["HC_EXPORT_BASE_URL"]
        if os.getenv("HC_EXPORT_CACHE_DIR"):
            config.cache_dir = Path(os.environ["HC_EXPORT_CACHE_DIR"])
        if os.getenv("HC_EXPORT_OUTPUT_DIR"):
            config.output_dir = Path(os.environ["HC_EXPORT_OUTPUT_DIR"])
        if os.getenv("HC_EXPORT_LOG_LEVEL"):
            config.log_level = os.environ["HC_EXPORT_LOG_LEVEL"]

        config.base_url = config.base_url.rstrip("/")
        return config

    def translate(self, language: str, key: str) -> str:
        """取界面文字，缺失时直接报错"""
        try:
            return self.translations[language][key]
        except KeyError:
            raise MissingTranslationError(language, key) from None

    def site_scheme(self, language: str) -> PathScheme:
        """静态站点跳转目标的路径规则"""
        base = self.language_redirect_base(language)
        return PathScheme(
            category_prefix=f"{base}/category",
            section_prefix=f"{base}/tag",
            article_prefix=base,
        )

    def language_redirect_base(self, language: str) -> str:
        return f"{self.redirect_base.rstrip('/')}/{short_language(language)}/docs"

    def wordpress_scheme(self) -> PathScheme:
        """WordPress固定链接的路径规则"""
        base = self.wordpress_permalink_base.rstrip("/")
        return PathScheme(
            category_prefix=f"{base}/category",
            section_prefix=f"{base}/tag",
            article_prefix=base,
        )

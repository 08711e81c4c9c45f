"""导出过程中的致命错误"""


class ExportError(RuntimeError):
    """导出中止"""


class FetchError(ExportError):
    """API请求失败（包括重定向次数过多）"""


class CacheError(ExportError):
    """缓存的JSON文件无法读取或格式错误"""


class UnresolvedLinkError(ExportError):
    """WordPress导出时交叉链接指向未知的ID"""

    def __init__(self, entity_id: int, url: str):
        self.entity_id = entity_id
        self.url = url
        super().__init__(f"无法解析链接目标 ID {entity_id}: {url}")


class MissingTranslationError(ExportError):
    """请求的语言/键没有对应文字"""

    def __init__(self, language: str, key: str):
        self.language = language
        self.key = key
        super().__init__(f"缺少翻译: {language}/{key}")

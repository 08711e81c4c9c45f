"""工具函数"""

import json
import re
from pathlib import Path
from typing import Any, Dict

from rich.console import Console
from rich.progress import (
    BarColumn, Progress, SpinnerColumn, TaskProgressColumn, TextColumn,
    TimeElapsedColumn,
)

from .exceptions import CacheError

_NON_WORD = re.compile(r'\W+')
_PLACEHOLDER = re.compile(r'\{(\w+)\}')


def save_json(data: Any, filepath: Path) -> None:
    """保存JSON文件"""
    filepath.parent.mkdir(parents=True, exist_ok=True)
    with open(filepath, 'w', encoding='utf-8') as f:
        json.dump(data, f, ensure_ascii=False, indent=2)


def load_json(filepath: Path) -> Any:
    """加载JSON文件，文件不存在时返回None，损坏时报错"""
    if not filepath.exists():
        return None

    try:
        with open(filepath, 'r', encoding='utf-8') as f:
            return json.load(f)
    except (json.JSONDecodeError, UnicodeDecodeError, OSError) as e:
        raise CacheError(f"缓存文件无法读取 {filepath}: {e}") from e


def save_text(content: str, filepath: Path) -> None:
    """保存文本文件"""
    filepath.parent.mkdir(parents=True, exist_ok=True)
    with open(filepath, 'w', encoding='utf-8') as f:
        f.write(content)


def shortname(name: str) -> str:
    """
    生成slug：去掉首尾空白，按非单词字符切分，小写后用-连接

    例如 "Fritzbox 7490 - The WiFi is very slow." -> "fritzbox-7490-the-wifi-is-very-slow"
    """
    tokens = _NON_WORD.split(name.strip())
    return '-'.join(token.lower() for token in tokens if token)


def fill_template(template: str, values: Dict[str, str]) -> str:
    """一次性替换模板中的 {name} 占位符，代入的值不会再被扫描；未知占位符保持原样"""
    return _PLACEHOLDER.sub(lambda m: values.get(m.group(1), m.group(0)), template)


def format_timestamp(timestamp: str) -> str:
    """ISO时间转为WordPress格式：2021-01-01T10:00:00Z -> 2021-01-01 10:00:00"""
    return timestamp.replace('T', ' ').replace('Z', '')


class ProgressTracker:
    """基于rich的进度条"""

    def __init__(self, total: int, description: str = ""):
        self.total = total
        self.description = description or "进度"
        self.current = 0
        self._progress = Progress(
            SpinnerColumn(style="cyan"),
            TextColumn("[bold blue]{task.description}"),
            BarColumn(bar_width=None),
            TaskProgressColumn(),
            TextColumn("{task.completed}/{task.total}"),
            TimeElapsedColumn(),
            console=Console(stderr=True),
            transient=True,
        )
        self._progress.start()
        self._task_id = self._progress.add_task(self.description, total=self.total)

    def update(self, increment: int = 1) -> None:
        """更新进度"""
        self.current += increment
        self._progress.update(self._task_id, advance=increment)

    def finish(self) -> None:
        """结束进度条"""
        self.current = self.total
        self._progress.update(self._task_id, completed=self.total)
        self._progress.stop()

    def __enter__(self) -> 'ProgressTracker':
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        # 出错时也要停止，否则下一个进度条无法启动
        self._progress.stop()


def make_progress(total: int, description: str = "") -> ProgressTracker:
    """返回一个进度条实例
    用法：with make_progress(n, "生成页面:") as tracker: tracker.update()
    """
    return ProgressTracker(total, description)

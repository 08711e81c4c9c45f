"""pytest配置文件"""

import pytest
import tempfile
from pathlib import Path

from helpcenter_export.graph import AttachmentIndex, build_graph
from tests.fixtures.sample_data import create_language_data, create_sample_config


@pytest.fixture
def temp_dir():
    """临时目录fixture"""
    with tempfile.TemporaryDirectory() as temp_dir:
        yield Path(temp_dir)


@pytest.fixture
def config(temp_dir):
    """指向临时目录的配置"""
    return create_sample_config(temp_dir)


@pytest.fixture
def en_data():
    """英文示例数据"""
    return create_language_data('en-us')


@pytest.fixture
def de_data():
    """德文示例数据"""
    return create_language_data('de')


@pytest.fixture
def site_graphs(config, en_data, de_data):
    """静态站点用的内容图"""
    return {
        'de': build_graph(de_data, config.site_scheme('de')),
        'en-us': build_graph(en_data, config.site_scheme('en-us')),
    }


@pytest.fixture
def attachment_index(en_data, de_data):
    """所有语言共用的附件索引"""
    return AttachmentIndex.build([de_data, en_data])


# pytest标记定义
def pytest_configure(config):
    """配置pytest标记"""
    config.addinivalue_line(
        "markers", "integration: marks tests as integration tests"
    )
    config.addinivalue_line(
        "markers", "unit: marks tests as unit tests"
    )


# 测试收集钩子
def pytest_collection_modifyitems(config, items):
    """修改测试收集"""
    for item in items:
        # 自动添加标记
        if "unit" in str(item.path):
            item.add_marker(pytest.mark.unit)
        elif "integration" in str(item.path):
            item.add_marker(pytest.mark.integration)

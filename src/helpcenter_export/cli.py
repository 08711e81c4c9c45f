"""命令行接口"""

import click

from .config import ExportConfig
from .exceptions import ExportError
from .exporter import HelpCenterExporter, setup_logging


@click.command()
@click.option(
    '--wordpress',
    is_flag=True,
    help='导出WordPress可导入的RSS，而不是静态HTML站点'
)
def main(wordpress: bool) -> None:
    """
    帮助中心导出器

    从帮助中心API抓取分类、章节、文章和附件并缓存到本地，
    默认生成多语言静态HTML站点，使用 --wordpress 生成RSS。

    示例:

        # 生成静态站点 (docs/)
        helpcenter-export

        # 生成WordPress RSS
        helpcenter-export --wordpress
    """
    config = ExportConfig.load()
    setup_logging(config)
    exporter = HelpCenterExporter(config)

    try:
        if wordpress:
            output = exporter.export_wordpress()
        else:
            output = exporter.export_html()
    except ExportError as e:
        click.echo(f"❌ 导出失败: {e}", err=True)
        raise click.Abort()

    click.echo(f"🎉 导出完成: {output.absolute()}")


if __name__ == '__main__':
    main()

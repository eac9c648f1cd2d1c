# === FILE: site_harvest/cli.py ===
#!/usr/bin/env python3
"""
Точка входа командной строки SiteHarvest.

Команды:
  crawl URL     Обход сайта в ширину начиная с URL
  sitemap URL   Загрузка страниц, перечисленных в sitemap (или sitemap index)
  config        Показать действующую конфигурацию

Общие опции:
  --config PATH       YAML/JSON-конфиг (default: configs/default.yaml, если есть)
  --concurrency INT   Число одновременных загрузок (override concurrency)
  --log-level LEVEL   Уровень логирования (DEBUG, INFO, ...)
  --log-file PATH     Файл для логов (только stderr, если не указан)

Опции crawl / sitemap:
  --max-pages INT     Лимит страниц
  --json PATH         Сохранить результат в JSON-файл
  --pretty            Отступ 2 при выводе JSON
  --scan-timeout SEC  Общий дедлайн обхода (секунд)

Пример:
  site-harvest crawl example.com --max-pages 20 --pretty
"""
import asyncio
import json
import sys
from pathlib import Path

import click

from site_harvest import __version__
from site_harvest.aggregator import SITE_FAILURE, SITEMAP_FAILURE, error_payload
from site_harvest.config import load_config
from site_harvest.engine import crawl_site, crawl_sitemap
from site_harvest.errors import CrawlError
from site_harvest.logger import init_logging, logger
from site_harvest.report.json_report import render_json

CONTEXT_SETTINGS = dict(help_option_names=["--help"])


def print_error(payload: dict):
    click.secho(json.dumps(payload, ensure_ascii=False), fg='red', err=True)
    sys.exit(1)


@click.group(context_settings=CONTEXT_SETTINGS)
@click.version_option(__version__, '--version', '-v', message='SiteHarvest, version %(version)s')
@click.option(
    '--config', '-c', 'config_path',
    default=None,
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    help='Путь к файлу конфигурации YAML/JSON.'
)
@click.option(
    '--concurrency', 'concurrency',
    type=click.IntRange(min=1),
    default=None,
    help='Число одновременных загрузок (override concurrency)'
)
@click.option(
    '--log-level', 'log_level',
    default='WARNING', show_default=True,
    type=click.Choice(['DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL']),
    help='Уровень логирования'
)
@click.option(
    '--log-file', 'log_file',
    default=None,
    type=click.Path(writable=True, dir_okay=False, path_type=Path),
    help='Путь к файлу логов'
)
@click.pass_context
def cli(ctx, config_path, concurrency, log_level, log_file):
    """Группа команд SiteHarvest CLI."""
    init_logging(level=log_level, log_file=str(log_file) if log_file else None)
    try:
        cfg = load_config(config_path)
    except Exception as e:
        print_error({'error': 'Failed to load configuration', 'message': str(e)})
    if concurrency is not None:
        cfg = cfg.model_copy(update={'concurrency': concurrency})
    ctx.ensure_object(dict)
    ctx.obj['config'] = cfg


def _crawl_options(func):
    func = click.option(
        '--scan-timeout', 'scan_timeout',
        type=click.FloatRange(min=0, min_open=True),
        default=None,
        help='Общий дедлайн обхода (секунд), по истечении выводятся собранные страницы'
    )(func)
    func = click.option('--pretty', is_flag=True, help='Отступ 2 при выводе JSON')(func)
    func = click.option(
        '--json', '-j', 'json_output',
        default=None,
        type=click.Path(writable=True, dir_okay=False, path_type=Path),
        help='Сохранить результат в JSON-файл'
    )(func)
    func = click.option(
        '--max-pages', '-n', 'max_pages',
        type=click.IntRange(min=1),
        default=None,
        help='Лимит страниц'
    )(func)
    return func


def _progress(page, count):
    logger.info('Crawled page %d: %s', count, page.url)


def _run(ctx, coro_factory, failure, url, max_pages, json_output, pretty, scan_timeout):
    cfg = ctx.obj['config']
    if scan_timeout is not None:
        cfg = cfg.model_copy(update={'scan_timeout': scan_timeout})
    try:
        result = asyncio.run(coro_factory(url, max_pages, cfg, _progress))
    except CrawlError as e:
        print_error(error_payload(e))
    except Exception as e:
        logger.exception('Crawl failed: %s', e)
        print_error(error_payload(e, failure))

    if json_output:
        try:
            saved = render_json(result, json_output)
        except OSError as e:
            print_error({'error': 'Failed to save JSON', 'message': str(e)})
        click.echo(f'JSON report: {saved}')
        return

    click.echo(result.json(pretty=pretty))


@cli.command('crawl', context_settings=CONTEXT_SETTINGS)
@click.argument('url')
@_crawl_options
@click.pass_context
def crawl(ctx, url, max_pages, json_output, pretty, scan_timeout):
    """Обойти сайт в ширину начиная с URL."""
    _run(ctx, crawl_site, SITE_FAILURE, url, max_pages, json_output, pretty, scan_timeout)


@cli.command('sitemap', context_settings=CONTEXT_SETTINGS)
@click.argument('sitemap_url')
@_crawl_options
@click.pass_context
def sitemap(ctx, sitemap_url, max_pages, json_output, pretty, scan_timeout):
    """Загрузить страницы из sitemap или sitemap index."""
    _run(ctx, crawl_sitemap, SITEMAP_FAILURE, sitemap_url, max_pages, json_output, pretty, scan_timeout)


@cli.command('config', context_settings=CONTEXT_SETTINGS)
@click.pass_context
def show_config(ctx):
    """Показать текущую конфигурацию в JSON."""
    cfg = ctx.obj['config']
    click.echo(cfg.model_dump_json(indent=2))


if __name__ == "__main__":
    cli()

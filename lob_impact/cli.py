#!filepath: lob_impact/cli.py
from pathlib import Path
from typing import NoReturn, Optional

import pandas as pd
import pyarrow.parquet as pq
import typer
from rich import print
from rich.markup import escape
from rich.table import Table

from lob_impact import __version__
from lob_impact.config.app_config import AppConfig
from lob_impact.dataloader.event_loader import EventTableLoader
from lob_impact.engines.trade_impact_engine import TradeImpactEngine
from lob_impact.engines.trade_match_engine import TradeMatchEngine
from lob_impact.report.impact_report import summarize_impacts
from lob_impact.utils.errors import LobImpactError, UserInputError
from lob_impact.utils.logger import init_logging
from lob_impact.utils.parquet_utils import ParquetAtomicWriter
from lob_impact.workflows.offline_trade_pipeline import build_offline_trade_pipeline

app = typer.Typer(help="LOB trade reconstruction / impact CLI")


def _load_config(config: Optional[Path]) -> AppConfig:
    cfg = AppConfig.load(str(config) if config else None)
    init_logging(cfg.log)
    return cfg


def _fail(exc: Exception) -> NoReturn:
    print(f"[red]{escape(str(exc))}[/red]")
    raise typer.Exit(code=1)


def _fmt(value) -> str:
    if value is None:
        return "-"
    if isinstance(value, float):
        return f"{value:.4g}"
    return str(value)


@app.command()
def version():
    print(f"v{__version__}")


@app.command()
def trades(
    events: Path,
    out: Optional[Path] = typer.Option(None, help="默认 <events>.trades.parquet"),
    config: Optional[Path] = typer.Option(None, help="YAML 配置文件"),
):
    """
    已匹配事件文件 → trades.parquet
    """
    cfg = _load_config(config)
    out = out or events.with_name(f"{events.stem}.trades.parquet")

    engine = TradeMatchEngine(
        jump_threshold=cfg.trade.jump_threshold,
        correct_jumps=cfg.trade.correct_jumps,
    )
    try:
        result = engine.execute(EventTableLoader().load(events))
    except (LobImpactError, FileNotFoundError) as exc:
        _fail(exc)

    ParquetAtomicWriter.write_table(result.trades, out)

    print(f"[green]trades={result.trades.num_rows} → {out}[/green]")
    if result.diagnostics.flagged:
        print(f"[yellow]{result.diagnostics.message}[/yellow]")


@app.command()
def impacts(
    trades_file: Path,
    out: Optional[Path] = typer.Option(None, help="默认 <trades>.impacts.parquet"),
    config: Optional[Path] = typer.Option(None, help="YAML 配置文件"),
):
    """
    trades.parquet → impacts.parquet
    """
    cfg = _load_config(config)
    if not trades_file.exists():
        _fail(FileNotFoundError(f"trades file not found: {trades_file}"))

    out = out or trades_file.with_name(f"{trades_file.stem}.impacts.parquet")

    try:
        table = TradeImpactEngine(vwap_decimals=cfg.trade.vwap_decimals).execute(
            pq.read_table(trades_file)
        )
    except LobImpactError as exc:
        _fail(exc)
    ParquetAtomicWriter.write_table(table, out)
    print(f"[green]impacts={table.num_rows} → {out}[/green]")


@app.command()
def summary(
    impacts_file: Path,
    direction: Optional[str] = typer.Option(None, help="buy / sell"),
):
    """
    impacts.parquet 的 bps 分布摘要
    """
    if not impacts_file.exists():
        _fail(FileNotFoundError(f"impacts file not found: {impacts_file}"))

    try:
        s = summarize_impacts(pq.read_table(impacts_file), direction=direction)
    except UserInputError as exc:
        _fail(exc)

    table = Table(title=f"Impacts ({direction or 'all'})")
    table.add_column("metric")
    table.add_column("value", justify="right")
    for key, value in s.to_dict().items():
        table.add_row(key, _fmt(value))
    print(table)


@app.command()
def run(date: str, config: Optional[Path] = typer.Option(None, help="YAML 配置文件")):
    """
    运行指定日期的 trade pipeline
    """
    cfg = _load_config(config)
    print(f"[green]Running trade pipeline for {date}[/green]")

    pipeline = build_offline_trade_pipeline(cfg)
    ctx = pipeline.run(date)
    if ctx.abort_pipeline:
        print(f"[yellow]{ctx.abort_reason}[/yellow]")


@app.command(name="range")
def date_range(start: str, end: str, config: Optional[Path] = typer.Option(None)):
    """
    连续运行多个日期（YYYY-MM-DD）
    """
    cfg = _load_config(config)
    pipeline = build_offline_trade_pipeline(cfg)

    print(f"[blue]Running trade pipeline for range {start} -> {end}[/blue]")

    for d in pd.date_range(start, end):
        pipeline.run(d.strftime("%Y-%m-%d"))


if __name__ == "__main__":
    app()

# python -m lob_impact.cli run 2015-05-01

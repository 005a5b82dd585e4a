from __future__ import annotations
import dataclasses
import json
from pathlib import Path
from typing import List, Optional
import typer
from loguru import logger
from rich.console import Console
from rich.progress import Progress, BarColumn, TimeElapsedColumn, SpinnerColumn, TextColumn
from rich.table import Table
from rich.panel import Panel

from .adapter import TextFileAdapter
from .config import load_config
from .converter import configure_engine
from .detector import DetectorSettings, ScriptDetector
from .logger_setup import setup_logger
from .session import ReadingSession, state_message, toggle_target

console = Console()
err_console = Console(stderr=True)
app = typer.Typer(add_completion=False, help="简繁中文检测与转换工具 (基于 OpenCC)")

TEXT_EXTS = {".txt", ".text", ".md"}
SCRIPT_NAMES = {True: "繁体", False: "简体"}


def _collect_files(paths: List[Path]) -> List[Path]:
    files: List[Path] = []
    for p in paths:
        if p.is_dir():
            files.extend(sorted(f for f in p.rglob('*') if f.is_file() and f.suffix.lower() in TEXT_EXTS))
        elif p.suffix.lower() in TEXT_EXTS:
            files.append(p)
        else:
            logger.warning(f"跳过非文本文件: {p}")
    return files


def _build_detector(config: Optional[Path], threshold: Optional[float], sample_size: Optional[int]) -> ScriptDetector:
    cfg = load_config(config)
    if config is not None:
        configure_engine(cfg["engine"]["s2t"], cfg["engine"]["t2s"])
    settings = DetectorSettings.from_config(cfg)
    overrides = {}
    if threshold is not None:
        overrides["threshold"] = max(0.0, min(1.0, threshold))
    if sample_size is not None:
        overrides["sample_size"] = max(1, sample_size)
    if overrides:
        settings = dataclasses.replace(settings, **overrides)
    return ScriptDetector(settings)


def _detect_file(detector: ScriptDetector, path: Path) -> dict:
    adapter = TextFileAdapter(path)
    text = adapter.extract_text()
    if not text:
        # 没有可检测的内容时默认繁体
        return {"path": str(path), "script": "traditional", "traditional": True,
                "method": "default", "reason": "no_content", "text_length": 0}
    info = detector.analyze(text).to_dict()
    info["path"] = str(path)
    info["text_length"] = len(text)
    return info


@app.callback()
def main_cb(
    verbose: bool = typer.Option(False, "-v", "--verbose", help="输出调试日志"),
    log_dir: Path = typer.Option(None, "--log-dir", help="日志文件根目录 (指定后写入文件)"),
):
    """简繁中文检测与转换工具。使用命令:

    jianfan detect <文本文件或文件夹...>
    jianfan convert <文本文件> --to traditional|simplified|auto
    jianfan toggle <文本文件> --times N
    """
    if verbose or log_dir is not None:
        log_file = setup_logger(
            console_level="DEBUG" if verbose else "INFO",
            project_root=log_dir,
            file_output=log_dir is not None,
        )
        if log_file:
            err_console.print(f"日志文件: [bold]{log_file}[/]")


@app.command("detect")
def detect_cmd(
    paths: List[Path] = typer.Argument(..., exists=True, readable=True, resolve_path=True, help="文本文件或目录，可多个"),
    output: Path = typer.Option(None, "-o", "--output", help="结果写出 JSON 文件"),
    raw: bool = typer.Option(False, "--raw", help="只输出 JSON，不显示表格/额外文字"),
    threshold: float = typer.Option(None, "--threshold", help="统计检测判定阈值 (0-1)"),
    sample_size: int = typer.Option(None, "--sample-size", help="统计检测取样字符数"),
    config: Path = typer.Option(None, "--config", exists=True, dir_okay=False, help="JSON 配置文件"),
):
    files = _collect_files(paths)
    if not files:
        if not raw:
            console.print("[red]未找到文本文件[/]")
        raise typer.Exit(code=1)
    detector = _build_detector(config, threshold, sample_size)

    results = []
    if not raw:
        console.print(Panel(f"共找到 [bold]{len(files)}[/] 个文本文件，开始检测", title="Jianfan"))
        progress = Progress(
            SpinnerColumn(),
            TextColumn("[progress.description]{task.description}"),
            BarColumn(bar_width=None),
            TextColumn("{task.completed}/{task.total}"),
            TimeElapsedColumn(),
            transient=True,
            console=console,
        )
        with progress:
            task_id = progress.add_task("检测", total=len(files))
            for f in files:
                results.append(_detect_file(detector, f))
                progress.update(task_id, advance=1)

        table = Table(title="检测结果", show_lines=False)
        table.add_column("#", justify="right", style="cyan", no_wrap=True)
        table.add_column("文件")
        table.add_column("字形", style="magenta")
        table.add_column("方式")
        table.add_column("s2t差异", justify="right")
        table.add_column("t2s差异", justify="right")
        table.add_column("长度", justify="right")
        for i, info in enumerate(results, 1):
            color = "green" if info["traditional"] else "yellow"
            s2t = info.get("s2t_diff")
            t2s = info.get("t2s_diff")
            table.add_row(
                str(i),
                Path(info["path"]).name,
                f"[{color}]{SCRIPT_NAMES[info['traditional']]}[/]",
                info["method"] + (f" ({info['reason']})" if info.get("reason") else ""),
                "-" if s2t is None else f"{s2t:.3f}",
                "-" if t2s is None else f"{t2s:.3f}",
                str(info.get("text_length", 0)),
            )
        console.print(table)
    else:
        results = [_detect_file(detector, f) for f in files]

    if output:
        try:
            output.write_text(json.dumps(results, ensure_ascii=False, indent=2), encoding="utf-8")
            if not raw:
                console.print(f"结果已写入: [bold]{output}[/]")
        except Exception as e:  # noqa: BLE001
            logger.error(f"写出 JSON 失败 {output}: {e}")
    typer.echo(json.dumps(results, ensure_ascii=False, indent=2))


@app.command("convert")
def convert_cmd(
    path: Path = typer.Argument(..., exists=True, dir_okay=False, readable=True, resolve_path=True, help="文本文件"),
    to: str = typer.Option("auto", "--to", help="目标字形: traditional|simplified|auto (auto 为检测结果的反向)", case_sensitive=False),
    output: Path = typer.Option(None, "-o", "--output", help="输出文件；为目录时按标题命名"),
    copy: bool = typer.Option(False, "--copy", help="将结果复制到剪贴板"),
    config: Path = typer.Option(None, "--config", exists=True, dir_okay=False, help="JSON 配置文件"),
):
    target_name = to.lower()
    if target_name not in {"traditional", "simplified", "auto"}:
        console.print(f"[red]未知的目标字形: {to}[/]")
        raise typer.Exit(code=2)

    session = ReadingSession(TextFileAdapter(path), detector=_build_detector(config, None, None))
    state = session.load()
    if not session.sections:
        console.print("[red]未找到正文内容[/]")
        raise typer.Exit(code=1)

    if target_name == "auto":
        target = toggle_target(state)
    else:
        target = target_name == "traditional"
    session.convert_to(target)
    text = session.export_text()

    if output:
        out_path = output / session.export_filename() if output.is_dir() else output
        out_path.write_text(text, encoding="utf-8")
        console.print(f"[green]{state_message(target)}[/]，已写入: [bold]{out_path}[/]")
    else:
        typer.echo(text)

    if copy:
        try:
            import pyperclip  # type: ignore
            pyperclip.copy(text)
            console.print("[green]文本已复制到剪贴板！[/]")
        except Exception as e:  # noqa: BLE001
            logger.warning(f"复制到剪贴板失败: {e}")
            console.print("[yellow]复制失败，请手动复制[/]")


@app.command("toggle")
def toggle_cmd(
    path: Path = typer.Argument(..., exists=True, dir_okay=False, readable=True, resolve_path=True, help="文本文件"),
    times: int = typer.Option(2, "--times", min=1, help="切换次数"),
    raw: bool = typer.Option(False, "--raw", help="只输出 JSON"),
):
    session = ReadingSession(TextFileAdapter(path))
    session.load()
    # 每一步记录切换后的状态与此时按钮上显示的下一次切换方向
    steps = [{"step": 0, "state": session.script_state.value, "label": session.label, "title": session.title}]
    for i in range(1, times + 1):
        new_state = session.toggle()
        steps.append({
            "step": i,
            "state": session.script_state.value,
            "label": session.label,
            "message": state_message(new_state),
            "title": session.title,
        })

    if raw:
        typer.echo(json.dumps(steps, ensure_ascii=False, indent=2))
        return
    table = Table(title=f"切换记录: {session.title}")
    table.add_column("#", justify="right", style="cyan")
    table.add_column("按钮")
    table.add_column("状态", style="magenta")
    table.add_column("标题")
    for s in steps:
        table.add_row(str(s["step"]), s["label"], SCRIPT_NAMES[s["state"] == "traditional"], s["title"])
    console.print(table)


def main():  # 供入口点
    setup_logger(console_level="WARNING", file_output=False)
    app()


if __name__ == "__main__":
    main()

from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape
from rich.table import Table

from .config import ConfigError, ToonframeConfig, resolve_config
from .digest import state_digest
from .engine.renderer import Renderer
from .presets import CAMERA_PRESETS, preset_keyframes
from .schema import Timeline
from .timeline import (
    TimelineError,
    export_timeline_jsonschema,
    load_audio_segments,
    load_timeline,
    with_audio,
)
from .validate import validate_timeline

app = typer.Typer(add_completion=False, no_args_is_help=True)
console = Console()


@app.callback()
def main(verbose: bool = typer.Option(False, "--verbose", "-v", help="Debug logging")):
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        handlers=[RichHandler(console=Console(stderr=True), show_path=False)],
        force=True,
    )


def _load(
    timeline_path: Path,
    audio: Optional[Path],
    config_path: Optional[Path],
) -> tuple[Timeline, ToonframeConfig]:
    try:
        config = resolve_config(config_path)
    except ConfigError as e:
        console.print(f"[bold red]Config error:[/bold red] {escape(str(e))}")
        raise typer.Exit(code=1) from e
    try:
        timeline = load_timeline(timeline_path)
        if audio is not None:
            timeline = with_audio(timeline, load_audio_segments(audio))
    except TimelineError as e:
        console.print(f"[bold red]Invalid timeline:[/bold red] {escape(str(e))}")
        raise typer.Exit(code=2) from e
    return timeline, config


def _frame_range(renderer: Renderer, start: int, end: Optional[int]) -> range:
    return range(start, renderer.total_frames if end is None else end)


@app.command()
def validate(
    timeline_path: Path = typer.Argument(..., exists=True, dir_okay=False),
    assets_dir: Optional[Path] = typer.Option(None, "--assets-dir", help="Check asset files exist"),
    strict_assets: bool = typer.Option(False, "--strict-assets", help="Fail on missing assets"),
    config_path: Optional[Path] = typer.Option(None, "--config"),
):
    try:
        config = resolve_config(config_path)
    except ConfigError as e:
        console.print(f"[bold red]Config error:[/bold red] {escape(str(e))}")
        raise typer.Exit(code=1) from e
    res = validate_timeline(
        timeline_path,
        assets_dir=assets_dir,
        allow_missing_assets=not strict_assets,
        settings=config.engine,
    )
    if res.errors:
        console.print("[bold red]Errors[/bold red]")
        for e in res.errors:
            console.print(f"- {escape(e)}")
    if res.warnings:
        console.print("[bold yellow]Warnings[/bold yellow]")
        for w in res.warnings:
            console.print(f"- {escape(w)}")
    if res.missing_files:
        console.print("[bold yellow]Missing asset files[/bold yellow]")
        for m in res.missing_files:
            console.print(f"- {escape(m)}")
    if res.ok:
        console.print("[bold green]OK[/bold green]")
        raise typer.Exit(code=0)
    raise typer.Exit(code=2 if res.errors else 1)


@app.command()
def state(
    timeline_path: Path = typer.Argument(..., exists=True, dir_okay=False),
    frame: int = typer.Argument(..., min=0),
    audio: Optional[Path] = typer.Option(None, "--audio", exists=True, dir_okay=False),
    config_path: Optional[Path] = typer.Option(None, "--config"),
):
    """Print the resolved state of one frame as JSON."""
    timeline, config = _load(timeline_path, audio, config_path)
    renderer = Renderer(timeline, config.engine)
    console.print_json(renderer.render(frame).model_dump_json())


@app.command()
def debug(
    timeline_path: Path = typer.Argument(..., exists=True, dir_okay=False),
    start: int = typer.Option(0, "--start", min=0),
    end: Optional[int] = typer.Option(None, "--end", min=0),
    step: int = typer.Option(1, "--step", min=1),
    audio: Optional[Path] = typer.Option(None, "--audio", exists=True, dir_okay=False),
    config_path: Optional[Path] = typer.Option(None, "--config"),
):
    timeline, config = _load(timeline_path, audio, config_path)
    renderer = Renderer(timeline, config.engine)

    table = Table(title=f"{timeline.title or timeline_path.name} ({renderer.total_frames} frames)")
    table.add_column("Frame", justify="right")
    table.add_column("Camera")
    table.add_column("Transition")
    table.add_column("State")
    for f in _frame_range(renderer, start, end)[::step]:
        s = renderer.render(f)
        cam = s.camera
        table.add_row(
            str(f),
            f"{cam.x:.1f}, {cam.y:.1f} @ {cam.zoom:.2f}",
            f"{s.transition.kind} {s.transition.progress:.2f}",
            escape(renderer.debug_dump(f)),
        )
    console.print(table)

    for w in renderer.warnings:
        console.print(f"[yellow]warning:[/yellow] {escape(w)}")


@app.command()
def digest(
    timeline_path: Path = typer.Argument(..., exists=True, dir_okay=False),
    start: int = typer.Option(0, "--start", min=0),
    end: Optional[int] = typer.Option(None, "--end", min=0),
    full: bool = typer.Option(False, "--full", help="Print full SHA-256"),
    audio: Optional[Path] = typer.Option(None, "--audio", exists=True, dir_okay=False),
    config_path: Optional[Path] = typer.Option(None, "--config"),
):
    """Per-frame fingerprints of the resolved state."""
    timeline, config = _load(timeline_path, audio, config_path)
    renderer = Renderer(timeline, config.engine)
    for f in _frame_range(renderer, start, end):
        h = state_digest(renderer.render(f))
        console.print(f"{f}\t{h.value if full else h.short()}", highlight=False)


@app.command()
def render(
    timeline_path: Path = typer.Argument(..., exists=True, dir_okay=False),
    out_dir: Optional[Path] = typer.Option(None, "--out-dir", "-o"),
    start: int = typer.Option(0, "--start", min=0),
    end: Optional[int] = typer.Option(None, "--end", min=0),
    strict: bool = typer.Option(False, "--strict", help="Fail on missing assets"),
    audio: Optional[Path] = typer.Option(None, "--audio", exists=True, dir_okay=False),
    config_path: Optional[Path] = typer.Option(None, "--config"),
):
    """Rasterise frames to PNG (requires Pillow)."""
    from .render.compositor import CompositorError
    from .render.frames import render_frames_from_timeline

    timeline, config = _load(timeline_path, audio, config_path)
    if out_dir is None:
        out_dir = timeline_path.parent / "renders" / "frames"
    try:
        paths = render_frames_from_timeline(
            timeline,
            config.render.assets_dir,
            out_dir,
            start=start,
            end=end,
            settings=config.engine,
            background_color=config.render.background_color,
            strict=strict,
        )
    except (CompositorError, RuntimeError) as e:
        console.print(f"[bold red]Render failed:[/bold red] {escape(str(e))}")
        raise typer.Exit(code=1) from e
    console.print(f"[bold green]Rendered[/bold green] {len(paths)} frames to {out_dir}")


@app.command()
def presets(duration: int = typer.Option(90, "--duration", min=1, help="Scene length in frames")):
    table = Table(title=f"Camera presets ({duration} frames)")
    table.add_column("Preset")
    table.add_column("Keyframes (frame: x, y, zoom)")
    for name in CAMERA_PRESETS:
        kfs = preset_keyframes(name, duration)
        table.add_row(
            name,
            "  ".join(f"{k.frame_offset:g}: {k.x:g}, {k.y:g}, {k.zoom:g}" for k in kfs),
        )
    console.print(table)


@app.command("export-jsonschema")
def export_jsonschema(out_dir: Path = typer.Option(Path("docs/jsonschema"), "--out-dir")):
    out_path = export_timeline_jsonschema(out_dir / "timeline.schema.json")
    console.print(f"Wrote {out_path}")


if __name__ == "__main__":
    app()

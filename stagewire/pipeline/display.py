"""Rich console rendering of a built pipeline."""

from __future__ import annotations

from rich.console import Console
from rich.table import Table

from stagewire.pipeline.pipeline import Pipeline


def pipeline_table(pipeline: Pipeline) -> Table:
    """Return a table with one row per stage, in insertion order."""
    table = Table(title=f"Pipeline: {pipeline.name}")
    table.add_column("Stage", style="cyan")
    table.add_column("Inputs")
    table.add_column("Output")
    table.add_column("Parents")
    table.add_column("Properties")

    graph = pipeline.graph
    for stage in graph.ordered_nodes:
        inputs = ", ".join(str(t) for t in stage.input_types) or "(none)"
        output = str(stage.output_type) if stage.output_type is not None else "(none)"
        parents = ", ".join(p.id for p in graph.ordered_parents(stage)) or "(none)"
        props = pipeline.properties_for(stage)
        props_str = ", ".join(f"{k}={v}" for k, v in props.items()) or "(none)"
        stage_label = stage.id if stage.deployable else f"{stage.id} [dim](placeholder)[/dim]"
        table.add_row(stage_label, inputs, output, parents, props_str)
    return table


def render_pipeline(pipeline: Pipeline, console: Console | None = None) -> None:
    """Print a summary header and the stage table."""
    console = console or Console()
    props = pipeline.properties
    checkpointing = (
        f"every {props.checkpointing}ms ({props.checkpointing_mode})"
        if props.checkpointing_enabled
        else "disabled"
    )
    console.print(
        f"[bold]{pipeline.name}[/bold]: {len(pipeline.graph.nodes)} stages, "
        f"{len(pipeline.graph.edges)} edges | buffer: {props.buffer_type} | "
        f"checkpointing: {checkpointing} | restart: {props.restart_strategy.summary()}"
    )
    console.print(pipeline_table(pipeline))

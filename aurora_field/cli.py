"""Command line entry points for the aurora probability field.

Usage examples:

- Render the northern hemisphere from the live NOAA feed:
    python -m aurora_field render --out aurora.png

- Render a saved feed for the south with a smaller budget:
    python -m aurora_field render --feed ovation.json --hemisphere south --target-count 5000 --out s.png

- Export the downsampled field to CSV:
    python -m aurora_field export --feed ovation.json --out field.csv

- Print per-hemisphere statistics:
    python -m aurora_field summary --feed ovation.json

Defaults come from the YAML files in ``config/`` via :mod:`aurora_field.config`.
"""

from __future__ import annotations

import argparse
import sys

from aurora_field.config import load_settings
from aurora_field.debug_utils import enable_numba_logging
from aurora_field.field.analysis import summarize
from aurora_field.field.downsample import compute_field
from aurora_field.field.types import DownsampledField, Hemisphere
from aurora_field.io.export import write_field_csv
from aurora_field.io.feed import FeedError, load_forecast
from aurora_field.render.figure import render_field_image
from aurora_field.render.renderer import FieldRenderer


def _load_field(args: argparse.Namespace, pipeline) -> DownsampledField:
    forecast = load_forecast(args.feed)
    target_count = args.target_count if args.target_count is not None else pipeline.target_count
    min_probability = (
        args.min_probability if args.min_probability is not None else pipeline.min_probability
    )
    field = compute_field(
        forecast.coordinates,
        target_count,
        min_probability=min_probability,
        **pipeline.compute_kwargs(),
    )
    if field is None:
        raise RuntimeError("field computation was cancelled")
    return field


def _cmd_render(args: argparse.Namespace) -> None:
    pipeline, render = load_settings()
    field = _load_field(args, pipeline)
    hemisphere = Hemisphere.parse(args.hemisphere)
    renderer = FieldRenderer.from_settings(render, boost=False if args.no_boost else None)
    drawn = render_field_image(
        field,
        args.out,
        hemisphere=hemisphere,
        renderer=renderer,
        width_px=args.width or render.width_px,
        height_px=args.height or render.height_px,
        background=render.background,
    )
    print(
        f"Wrote {hemisphere.value.lower()} hemisphere ({drawn} circles of "
        f"{len(field.for_hemisphere(hemisphere))} samples) to {args.out}"
    )


def _cmd_export(args: argparse.Namespace) -> None:
    pipeline, render = load_settings()
    field = _load_field(args, pipeline)
    rows = write_field_csv(
        field,
        args.out,
        stops=FieldRenderer.from_settings(render).stops,
        base_radius_m=render.base_radius_m,
        radius_span_m=render.radius_span_m,
    )
    print(f"Wrote {rows} samples to {args.out}")


def _cmd_summary(args: argparse.Namespace) -> None:
    pipeline, _ = load_settings()
    field = _load_field(args, pipeline)
    threshold = args.threshold if args.threshold is not None else pipeline.visibility_threshold

    print(f"Target count per hemisphere: {field.target_count}")
    for hemisphere in (Hemisphere.NORTH, Hemisphere.SOUTH):
        summary = summarize(field.for_hemisphere(hemisphere), hemisphere, threshold)
        if summary.visibility_latitude is None:
            visible = "not expected"
        else:
            visible = f"down to {summary.visibility_latitude} deg"
        print(
            f"  {hemisphere.value}: {summary.count} samples, "
            f"max {summary.max_probability:.0f}%, "
            f"visible (>= {threshold:.0f}%) {visible}"
        )


def _cmd_view(args: argparse.Namespace) -> None:
    from aurora_field.gui.controllers import launch_gui

    launch_gui(feed=args.feed)


def _add_field_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--feed",
        default=None,
        help="OVATION JSON file or http(s) URL (default: latest NOAA SWPC forecast)",
    )
    parser.add_argument(
        "--target-count",
        type=int,
        default=None,
        help="Maximum samples kept per hemisphere (default from config)",
    )
    parser.add_argument(
        "--min-probability",
        type=float,
        default=None,
        help="Drop samples below this probability in percent (default from config)",
    )


def _build_parser() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(description="Aurora probability field tools.")
    subparsers = ap.add_subparsers(dest="command")

    render_parser = subparsers.add_parser(
        "render", help="Render one hemisphere of the field to an image."
    )
    _add_field_arguments(render_parser)
    render_parser.add_argument("--out", required=True, help="Output image path (e.g., aurora.png)")
    render_parser.add_argument(
        "--hemisphere", default="north", help="Hemisphere to draw: north or south"
    )
    render_parser.add_argument("--width", type=int, default=None, help="Image width (pixels)")
    render_parser.add_argument("--height", type=int, default=None, help="Image height (pixels)")
    render_parser.add_argument(
        "--no-boost",
        action="store_true",
        help="Use the plain opacity model instead of boosting faint circles",
    )
    render_parser.set_defaults(func=_cmd_render)

    export_parser = subparsers.add_parser(
        "export", help="Write the downsampled field to a CSV table."
    )
    _add_field_arguments(export_parser)
    export_parser.add_argument("--out", required=True, help="Output CSV path")
    export_parser.set_defaults(func=_cmd_export)

    summary_parser = subparsers.add_parser(
        "summary", help="Print per-hemisphere counts, peak probability and visibility latitude."
    )
    _add_field_arguments(summary_parser)
    summary_parser.add_argument(
        "--threshold",
        type=float,
        default=None,
        help="Probability in percent that counts as visible (default from config)",
    )
    summary_parser.set_defaults(func=_cmd_summary)

    view_parser = subparsers.add_parser("view", help="Open the interactive viewer.")
    view_parser.add_argument(
        "--feed",
        default=None,
        help="OVATION JSON file or http(s) URL (default: latest NOAA SWPC forecast)",
    )
    view_parser.set_defaults(func=_cmd_view)

    return ap


def main(argv: list[str] | None = None) -> int:
    argv = list(sys.argv[1:] if argv is None else argv)
    ap = _build_parser()
    args = ap.parse_args(argv)

    handler = getattr(args, "func", None)
    if handler is None:
        ap.print_help()
        return 0

    enable_numba_logging()
    try:
        handler(args)
    except FeedError as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":  # pragma: no cover
    sys.exit(main())

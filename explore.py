import importlib.util
import os
import shutil
import sys
import time
import warnings
from argparse import ArgumentParser, ArgumentTypeError

_VERBOSE_FLAGS = {"--verbose", "-v"}
_cli_verbose = any(arg in _VERBOSE_FLAGS for arg in sys.argv[1:])
_env_log_level = os.environ.get("TF_CPP_MIN_LOG_LEVEL")
_suppress_messages = (not _cli_verbose) and _env_log_level != "0"

# TensorFlow start-up chatter would scribble over the curses screen.
if _suppress_messages and _env_log_level is None:
    os.environ["TF_CPP_MIN_LOG_LEVEL"] = "3"

if _suppress_messages:
    warnings.filterwarnings(
        "ignore",
        message=r"Protobuf gencode version .* is exactly one major version older than the runtime version .*",
        category=UserWarning,
        module="google.protobuf",
    )

VERBOSE = _cli_verbose


def log(message, *args, **kwargs):
    if VERBOSE:
        kwargs.setdefault("file", sys.stderr)
        print(message, *args, **kwargs)


from asciibrot import (
    ENGINES,
    EscapeParameters,
    GridSize,
    InteractiveViewer,
    Navigator,
    StartupError,
    Viewport,
    ViewerError,
    frame_rows,
    render_frame,
)
from asciibrot.renderer import DEFAULT_VIEWPORT


def parse_size(value: str) -> GridSize:
    """Parse a ``WIDTHxHEIGHT`` grid size such as ``80x24``."""

    try:
        width_text, height_text = value.lower().split("x")
        return GridSize(width=int(width_text), height=int(height_text))
    except ValueError as exc:
        raise ArgumentTypeError(f"invalid size '{value}': expected WIDTHxHEIGHT with positive integers") from exc


def build_parser():
    parser = ArgumentParser(description="Explore the Mandelbrot set in the terminal.")

    parser.add_argument('--max-iterations', type=int,
                        dest='max_iterations', help='iterations after which a point counts as bounded',
                        metavar='MAX_ITERATIONS', default=900)

    parser.add_argument('--escape-threshold', type=float,
                        dest='escape_threshold_sq', help='squared magnitude above which a point has escaped',
                        metavar='THRESHOLD_SQ', default=10.0)

    parser.add_argument('--x-min', type=float,
                        dest='x_min', help='left edge of the initial viewport in the complex plane',
                        metavar='X_MIN', default=DEFAULT_VIEWPORT.x_min)

    parser.add_argument('--width', type=float,
                        dest='width', help='width of the initial viewport in the complex plane',
                        metavar='WIDTH', default=DEFAULT_VIEWPORT.width)

    parser.add_argument('--y-min', type=float,
                        dest='y_min', help='top edge of the initial viewport in the complex plane',
                        metavar='Y_MIN', default=DEFAULT_VIEWPORT.y_min)

    parser.add_argument('--height', type=float,
                        dest='height', help='height of the initial viewport in the complex plane',
                        metavar='HEIGHT', default=DEFAULT_VIEWPORT.height)

    parser.add_argument('--pan-step', type=float,
                        dest='pan_step', help='fraction of the viewport an arrow key moves',
                        metavar='PAN_STEP', default=0.1)

    parser.add_argument('--zoom-in', type=float,
                        dest='zoom_in', help='scale factor applied by the left mouse button',
                        metavar='FACTOR', default=0.5)

    parser.add_argument('--zoom-out', type=float,
                        dest='zoom_out', help='scale factor applied by any other mouse button',
                        metavar='FACTOR', default=1.5)

    parser.add_argument('--engine', choices=ENGINES, default='numpy',
                        help='escape-time implementation used to render frames.')

    parser.add_argument('--device', type=str, default=None,
                        help='TensorFlow device for the tensorflow engine, e.g. "/GPU:0".')

    parser.add_argument('--quit-key', type=str, dest='quit_key', default='q',
                        help='character that ends the interactive session.')

    parser.add_argument('--track-resize', action='store_true', dest='track_resize',
                        help='re-read the terminal size before every frame.')

    parser.add_argument('--once', action='store_true',
                        help='render a single frame to stdout and exit.')

    parser.add_argument('--size', type=parse_size, default=None, metavar='WxH',
                        help='grid size for --once. Default: the current terminal size.')

    parser.add_argument('-v', '--verbose', action='store_true',
                        help='Log viewport changes and render timings to stderr.')

    return parser


def resolve_settings(opt, parser: ArgumentParser):
    """Build the render, navigation and viewport settings, reporting bad values through ``parser``."""

    if opt.size is not None and not opt.once:
        parser.error("--size is only valid with --once.")
    if opt.device is not None and opt.engine != "tensorflow":
        parser.error("--device requires --engine tensorflow.")
    if len(opt.quit_key) != 1:
        parser.error("--quit-key must be a single character.")
    if opt.engine == "tensorflow" and importlib.util.find_spec("tensorflow") is None:
        parser.error("--engine tensorflow requires TensorFlow; install the tensorflow extra.")

    try:
        params = EscapeParameters(
            max_iterations=opt.max_iterations,
            escape_threshold_sq=opt.escape_threshold_sq,
        )
        navigator = Navigator(pan_step=opt.pan_step, zoom_in=opt.zoom_in, zoom_out=opt.zoom_out)
        viewport = Viewport(x_min=opt.x_min, width=opt.width, y_min=opt.y_min, height=opt.height)
    except ValueError as exc:
        parser.error(str(exc))

    return params, navigator, viewport


def render_once(opt, params: EscapeParameters, viewport: Viewport, out=None) -> str:
    out = out if out is not None else sys.stdout
    grid = opt.size
    if grid is None:
        columns, rows = shutil.get_terminal_size()
        try:
            grid = GridSize(width=columns, height=rows)
        except ValueError as exc:
            raise StartupError(f"unusable terminal size: {exc}") from exc
    log("engine: %s" % opt.engine)
    log("grid: %dx%d" % (grid.width, grid.height))
    log("viewport: %s" % viewport.describe())

    started = time.perf_counter()
    frame = render_frame(grid, viewport, params, engine=opt.engine, device=opt.device)
    log("rendered in %.3fs" % (time.perf_counter() - started))

    out.write("\n".join(frame_rows(frame, grid)))
    out.write("\n")
    return frame


def run_interactive(opt, params: EscapeParameters, navigator: Navigator, viewport: Viewport) -> Viewport:
    from asciibrot.terminal import CursesDisplay, CursesInput, terminal_grid, terminal_session

    log("engine: %s" % opt.engine)
    with terminal_session() as screen:
        viewer = InteractiveViewer(
            CursesInput(screen, quit_key=opt.quit_key),
            CursesDisplay(screen),
            lambda: terminal_grid(screen),
            navigator=navigator,
            params=params,
            viewport=viewport,
            engine=opt.engine,
            device=opt.device,
            track_resize=bool(opt.track_resize),
            log=log,
        )
        final_viewport = viewer.run()
    log("final viewport: %s" % final_viewport.describe())
    return final_viewport


def main(argv=None):
    parser = build_parser()
    opt = parser.parse_args(argv)

    global VERBOSE
    VERBOSE = bool(opt.verbose)

    params, navigator, viewport = resolve_settings(opt, parser)

    try:
        if opt.once:
            render_once(opt, params, viewport)
        else:
            run_interactive(opt, params, navigator, viewport)
    except ViewerError as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 1
    return 0


if __name__ == '__main__':
    sys.exit(main())

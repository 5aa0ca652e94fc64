from __future__ import annotations

import argparse
import math
import sys
import time
from typing import List

from .config import RENDERER_KINDS, ConfigError, SimulatorConfig, apply_config, load_config
from .graph import bellman_ford, shortest_path
from .labels import format_distance
from .logger import log_event
from .renderers import load_renderer
from .sample import SAMPLE_GRAPH
from .session import SimulatorSession


def build_arg_parser() -> argparse.ArgumentParser:
    common = argparse.ArgumentParser(add_help=False)
    common.add_argument("--config", help="Path to a JSON config file")

    p = argparse.ArgumentParser(prog="bellman-ford-sim", description="Step-by-step Bellman-Ford simulator")
    sub = p.add_subparsers(dest="cmd", required=True)

    sub.add_parser("graph", parents=[common], help="Show the sample graph")

    run = sub.add_parser("run", parents=[common], help="Step the sample graph to completion")
    run.add_argument("--renderer", choices=RENDERER_KINDS, help="How to display each step (default from config)")
    run.add_argument("--tick", type=float, help="Seconds to wait between steps (default from config)")
    run.add_argument("--max-steps", type=int, default=None, help="Stop after this many steps")

    sub.add_parser("solve", parents=[common], help="Run the batch reference solver on the sample graph")

    return p


def _load(args: argparse.Namespace) -> SimulatorConfig:
    cfg = load_config(args.config)
    apply_config(cfg)
    return cfg


def cmd_graph(args: argparse.Namespace) -> int:
    g = SAMPLE_GRAPH
    out = sys.stdout
    out.write(f"nodes: {' '.join(g.nodes)} (source {g.source})\n")
    for i, e in enumerate(g.edges):
        out.write(f"  #{i} {e.src} -> {e.dst}  w={e.weight}\n")
    return 0


def cmd_run(args: argparse.Namespace, cfg: SimulatorConfig) -> int:
    renderer = load_renderer(args.renderer or cfg.renderer)
    tick = cfg.tick_seconds if args.tick is None else args.tick
    if not math.isfinite(tick) or tick < 0:
        raise ConfigError("--tick must be a finite number >= 0")

    session = SimulatorSession(SAMPLE_GRAPH)
    view = session.start()
    renderer.render(view)
    taken = 0
    while view.can_next:
        if args.max_steps is not None and taken >= args.max_steps:
            log_event("run_stopped", session=session.session_id, steps=taken)
            return 0
        if tick > 0:
            time.sleep(tick)
        view = session.next()
        renderer.render(view)
        taken += 1
    return 0


def cmd_solve(args: argparse.Namespace) -> int:
    g = SAMPLE_GRAPH
    dist, pred, has_neg = bellman_ford(g)
    paths = {} if has_neg else {n: shortest_path(pred, g.source, n) for n in g.nodes}
    log_event("solve", source=g.source, has_negative_cycle=has_neg,
              distances={n: format_distance(d) for n, d in dist.items()}, paths=paths)
    return 0


def main(argv: List[str] | None = None) -> int:
    p = build_arg_parser()
    args = p.parse_args(argv)
    try:
        cfg = _load(args)
        if args.cmd == "graph":
            return cmd_graph(args)
        if args.cmd == "run":
            return cmd_run(args, cfg)
        if args.cmd == "solve":
            return cmd_solve(args)
    except ConfigError as exc:
        log_event("error", action=args.cmd, error=str(exc))
        return 2
    return 0


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())

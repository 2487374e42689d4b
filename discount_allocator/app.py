import argparse
import json
import os
from pathlib import Path
from typing import Any, Dict, Optional

from . import __version__
from .audit import prune_audit_records, write_audit_record
from .batch import run_batch
from .chart import render_chart
from .config import DEFAULT_HOST, DEFAULT_PORT, audit_dir_from_env, load_config, resolve_weights
from .engine import allocate
from .env import load_env
from .errors import AllocationError, ConfigError
from .logger import get_logger
from .schema import collect_agent_errors, collect_input_errors
from .scoring import STRATEGIES, Scorer, get_scorer


def _read_json(path_str: str) -> Any:
    path = Path(path_str)
    if not path.exists():
        raise SystemExit(f"Input file not found: {path}")
    with path.open("r", encoding="utf-8") as f:
        try:
            return json.load(f)
        except json.JSONDecodeError as e:
            raise SystemExit(f"Input file {path} is not valid JSON: {e}")


def _config(args: argparse.Namespace) -> Dict[str, Any]:
    try:
        return load_config(Path(args.config) if args.config else None)
    except ConfigError as e:
        raise SystemExit(str(e))


def _scorer(args: argparse.Namespace) -> Optional[Scorer]:
    name = getattr(args, "strategy", None)
    if name is None:
        return None
    try:
        return get_scorer(name)
    except ConfigError as e:
        raise SystemExit(str(e))


def _audit_dir(args: argparse.Namespace) -> Optional[Path]:
    if getattr(args, "no_audit", False):
        return None
    return audit_dir_from_env()


def cmd_run(args: argparse.Namespace) -> None:
    logger = get_logger()
    data = _read_json(args.input)
    config = _config(args)
    scorer = _scorer(args)

    logger.record_run_attempt("cli")
    try:
        result = allocate(data, config, scorer)
    except AllocationError as e:
        logger.record_run_failure("cli", type(e).__name__)
        print(f"Error: {e}")
        raise SystemExit(2)
    logger.record_run_success("cli")

    if args.json:
        print(json.dumps(result.to_dict(), indent=2))
    else:
        print(render_chart(result.allocations))
        print("Allocations:", json.dumps([a.to_dict() for a in result.allocations], indent=2))
        print("Summary:", json.dumps(result.summary.to_dict()))

    audit_dir = _audit_dir(args)
    if audit_dir is not None:
        write_audit_record(data, config, result, audit_dir)


def cmd_validate(args: argparse.Namespace) -> None:
    data = _read_json(args.input)
    config = _config(args)
    errors = collect_input_errors(data, config)
    if not errors:
        errors = collect_agent_errors(list(data["salesAgents"]), list(resolve_weights(config).keys()))
    if errors:
        print("Invalid:")
        for e in errors:
            print(f" - {e}")
        raise SystemExit(2)
    print("Valid")


def cmd_simulate(args: argparse.Namespace) -> None:
    from .simulate import Simulation, SimulationSession

    data = _read_json(args.input)
    config = _config(args)
    if not isinstance(data, dict):
        raise SystemExit("Input file must contain a JSON object")
    session = SimulationSession.from_input(data, config)
    try:
        Simulation(session, scorer=_scorer(args)).run()
    except AllocationError as e:
        print(f"Error: {e}")
        raise SystemExit(2)
    finally:
        get_logger().log_metrics_summary()
    print("Simulation ended.")


def cmd_batch(args: argparse.Namespace) -> None:
    folder = Path(args.dir)
    if not folder.is_dir():
        raise SystemExit(f"Batch folder not found: {folder}")
    report = run_batch(folder, _config(args), _scorer(args), audit_dir=_audit_dir(args))
    get_logger().log_metrics_summary()
    print(f"Done. total={report.processed} ok={report.succeeded} failed={report.failed}")


def cmd_serve(args: argparse.Namespace) -> None:
    from .service import create_app

    config = _config(args)
    app = create_app(config, _scorer(args))
    get_logger().info(f"API ready at http://{args.host}:{args.port}/allocate")
    app.run(host=args.host, port=args.port)


def cmd_prune_audit(args: argparse.Namespace) -> None:
    audit_dir = audit_dir_from_env()
    before, after = prune_audit_records(audit_dir, days=args.days)
    print(f"Audit records: {before} before, {after} after ({before - after} removed)")


def cmd_strategies(args: argparse.Namespace) -> None:
    print("Scoring strategies:")
    for name in sorted(STRATEGIES):
        print(f" - {name}")


def _add_common(p: argparse.ArgumentParser, strategy: bool = True) -> None:
    p.add_argument("--config", help="Path to config JSON (weights, minPerAgent, maxPerAgent)")
    if strategy:
        p.add_argument("--strategy", choices=sorted(STRATEGIES), help="Scoring strategy (default: weighted)")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="discount-allocator", description="Distribute a discount kitty across sales agents")
    parser.add_argument("--version", action="store_true", help="Show version")

    subparsers = parser.add_subparsers(dest="command")
    run = subparsers.add_parser("run", help="Allocate the kitty for one input file")
    run.add_argument("--input", required=True, help="Path to input JSON (siteKitty, salesAgents)")
    _add_common(run)
    run.add_argument("--json", action="store_true", help="Print the result as JSON only")
    run.add_argument("--no-audit", action="store_true", help="Do not write an audit record")
    run.set_defaults(func=cmd_run)

    val = subparsers.add_parser("validate", help="Check an input file without allocating")
    val.add_argument("--input", required=True, help="Path to input JSON")
    _add_common(val, strategy=False)
    val.set_defaults(func=cmd_validate)

    sim = subparsers.add_parser("simulate", help="Interactive what-if editing of weights and agent values")
    sim.add_argument("--input", required=True, help="Path to input JSON")
    _add_common(sim)
    sim.set_defaults(func=cmd_simulate)

    bat = subparsers.add_parser("batch", help="Allocate every *.json scenario in a folder")
    bat.add_argument("--dir", required=True, help="Folder of input JSON files")
    _add_common(bat)
    bat.add_argument("--no-audit", action="store_true", help="Do not write audit records")
    bat.set_defaults(func=cmd_batch)

    srv = subparsers.add_parser("serve", help="Run the HTTP API (POST /allocate)")
    srv.add_argument("--host", default=os.getenv("ALLOCATOR_HOST", DEFAULT_HOST), help="Bind host (or set ALLOCATOR_HOST)")
    srv.add_argument("--port", type=int, default=int(os.getenv("ALLOCATOR_PORT", DEFAULT_PORT)), help="Bind port (or set ALLOCATOR_PORT)")
    _add_common(srv)
    srv.set_defaults(func=cmd_serve)

    prn = subparsers.add_parser("prune-audit", help="Delete audit records older than N days")
    prn.add_argument("--days", type=int, default=30, help="Keep records newer than this many days (default: 30)")
    prn.set_defaults(func=cmd_prune_audit)

    lst = subparsers.add_parser("strategies", help="List scoring strategies")
    lst.set_defaults(func=cmd_strategies)

    return parser


def main(argv=None):
    # Load .env if present (MIN_PER_AGENT, MAX_PER_AGENT, WEIGHTS, etc.)
    load_env()
    get_logger(level=os.getenv("ALLOCATOR_LOG_LEVEL", "INFO"))
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.version:
        print(__version__)
        return

    if hasattr(args, "func"):
        args.func(args)
        return

    parser.print_help()


if __name__ == "__main__":
    main()

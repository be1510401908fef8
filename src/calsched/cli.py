from __future__ import annotations

import argparse
import json
import sys
from typing import Any, Dict, List

from pydantic import ValidationError

from calsched.errors import CalschedError
from calsched.io.csv_loader import load_constraints
from calsched.models.validated import SolveRequest
from calsched.solver.engine import solve_with
from calsched.solver.validation import brute_force_solve, validate_schedule
from calsched.utils.logging_setup import init_logging
from calsched.utils.structured_logging import bind_context, clear_context

EXIT_SOLVED = 0
EXIT_NO_SOLUTION = 1
EXIT_BAD_INPUT = 2


def _build_cfg(args: argparse.Namespace) -> Dict[str, Any]:
    cfg: Dict[str, Any] = {"backend": args.backend}
    if args.time_limit is not None:
        cfg["time_limit_seconds"] = int(args.time_limit)
    if args.no_reverse_check:
        cfg["check_reverse"] = False
    return cfg


def _log_level(verbose: int) -> str:
    return "DEBUG" if verbose >= 2 else ("INFO" if verbose == 1 else "WARNING")


def _gather_constraints(args: argparse.Namespace) -> List[Any]:
    constraints: List[Any] = []
    if args.constraints:
        constraints.extend(load_constraints(args.constraints))
    constraints.extend(args.constraint or [])
    return constraints


def main(argv: list[str] | None = None) -> int:
    p = argparse.ArgumentParser(prog="calsched", description="Schedule meetings under date constraints")
    p.add_argument("--meetings", type=int, required=True, help="Number of meetings (indexed from 0)")
    p.add_argument("--start", required=True, help="First allowed day, YYYY-MM-DD")
    p.add_argument("--end", required=True, help="Last allowed day, YYYY-MM-DD")
    p.add_argument("--constraints", help="CSV file with columns left,op,right[,offset_days]")
    p.add_argument("-c", "--constraint", action="append", help='Constraint expression, e.g. "0 < 1" (repeatable)')
    p.add_argument("--backend", choices=["backtracking", "cpsat"], default="backtracking")
    p.add_argument("--time-limit", type=int, default=None, help="CP-SAT time limit in seconds")
    p.add_argument("--no-reverse-check", action="store_true", help="Skip the reverse-constraint self check")
    p.add_argument("--verify", action="store_true", help="Cross-check against exhaustive enumeration (small queries only)")
    p.add_argument("--json", dest="json_out", action="store_true", help="JSON output")
    p.add_argument("--log-file", default=None)
    p.add_argument("-v", "--verbose", action="count", default=0)
    args = p.parse_args(argv)

    cfg = _build_cfg(args)
    init_logging(level=_log_level(args.verbose), log_file=args.log_file)

    try:
        request = SolveRequest(
            n_meetings=args.meetings,
            range_start=args.start,
            range_end=args.end,
            constraints=_gather_constraints(args),
            config=cfg,
        )
        query = request.to_query()
        bind_context(window=f"{request.range_start}..{request.range_end}")
        result = solve_with(*query, config=request.config.to_dataclass())
    except (ValidationError, CalschedError, ValueError, OSError) as e:
        print(f"Invalid input: {e}", file=sys.stderr)
        return EXIT_BAD_INPUT
    finally:
        clear_context()

    report: Dict[str, Any] = {
        "status": result.status.value,
        "schedule": [d.isoformat() for d in result.dates] if result.dates is not None else None,
        "stats": result.summary()["stats"],
    }
    if args.verify:
        oracle = brute_force_solve(*query)
        report["verified"] = (oracle is None) == (result.dates is None) and (
            result.dates is None or validate_schedule(result.dates, *query).is_valid
        )

    if args.json_out:
        print(json.dumps(report, indent=2))
    elif result.dates is None:
        print("No solution.")
    else:
        for i, d in enumerate(result.dates):
            print(f"m{i}: {d.isoformat()} ({d.strftime('%a')})")
    if args.verify and not args.json_out:
        print(f"Verified: {report['verified']}")

    return EXIT_SOLVED if result.is_success else EXIT_NO_SOLUTION


if __name__ == "__main__":
    raise SystemExit(main())

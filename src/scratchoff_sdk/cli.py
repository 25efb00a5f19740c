from __future__ import annotations

import argparse
import json
import logging
from typing import Any

from .config import ConfigError, load_config
from .exceptions import ApiError, RefreshCancelledError
from .logging import configure_logging, log_json
from .models import DashboardSnapshot
from .session import ApiSession

logger = logging.getLogger(__name__)


def _print(payload: Any) -> None:
    print(json.dumps(payload, indent=2, default=str))


def _session(args: argparse.Namespace) -> ApiSession:
    return ApiSession(load_config(args.env_file))


def render_snapshot(snapshot: DashboardSnapshot, include_cards: bool = True) -> dict[str, Any]:
    payload: dict[str, Any] = {
        "store_id": snapshot.store_id,
        "refreshed_at": snapshot.refreshed_at.isoformat(),
        "stats": snapshot.stats.model_dump(mode="json"),
        "fault_count": snapshot.fault_count,
    }
    if include_cards:
        payload["cards"] = [
            {
                **card.model_dump(mode="json"),
                "sold_percentage": round(card.sold_percentage, 1),
            }
            for card in snapshot.cards
        ]
    return payload


def cmd_dashboard(args: argparse.Namespace) -> None:
    service = _session(args).dashboard_service()
    snapshot = service.refresh(args.store_id)
    log_json(logger, "dashboard_summary", store_id=args.store_id, cards=len(snapshot.cards))
    _print(render_snapshot(snapshot, include_cards=not args.stats_only))


def render_games(snapshot: DashboardSnapshot) -> dict[str, Any]:
    return {
        "store_id": snapshot.store_id,
        "tiers": snapshot.tiers.model_dump(mode="json"),
        "games": [game.model_dump(mode="json") for game in snapshot.games],
    }


def cmd_games(args: argparse.Namespace) -> None:
    snapshot = _session(args).dashboard_service().refresh(args.store_id)
    _print(render_games(snapshot))


def cmd_daily_report(args: argparse.Namespace) -> None:
    report = _session(args).reports_client().get_daily_report(args.store_id, args.date)
    _print(report.model_dump(mode="json"))


def cmd_set_token(args: argparse.Namespace) -> None:
    _session(args).establish(args.token)
    _print({"status": "stored"})


def cmd_logout(args: argparse.Namespace) -> None:
    _session(args).clear()
    _print({"status": "cleared"})


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="scratchoff", description="Scratch-off inventory dashboard client")
    parser.add_argument("--env-file", default=None)
    parser.add_argument("--verbose", action="store_true")
    subparsers = parser.add_subparsers(dest="command", required=True)

    dashboard_parser = subparsers.add_parser("dashboard", help="Reconcile catalog and inventory for a store")
    dashboard_parser.add_argument("--store-id", type=int, required=True)
    dashboard_parser.add_argument("--stats-only", action="store_true")
    dashboard_parser.set_defaults(func=cmd_dashboard)

    games_parser = subparsers.add_parser("games", help="Which catalog games have an active book")
    games_parser.add_argument("--store-id", type=int, required=True)
    games_parser.set_defaults(func=cmd_games)

    report_parser = subparsers.add_parser("daily-report", help="Daily sales report for a store")
    report_parser.add_argument("--store-id", type=int, required=True)
    report_parser.add_argument("--date", required=True, help="YYYY-MM-DD")
    report_parser.set_defaults(func=cmd_daily_report)

    token_parser = subparsers.add_parser("set-token", help="Store a bearer token for later commands")
    token_parser.add_argument("token")
    token_parser.set_defaults(func=cmd_set_token)

    logout_parser = subparsers.add_parser("logout", help="Forget the stored bearer token")
    logout_parser.set_defaults(func=cmd_logout)
    return parser


def main(argv: list[str] | None = None) -> None:
    args = build_parser().parse_args(argv)
    configure_logging(args.verbose)
    try:
        args.func(args)
    except ApiError as exc:
        _print({"error": exc.code, "kind": exc.kind.value, "message": exc.message})
        raise SystemExit(1) from exc
    except RefreshCancelledError as exc:
        _print({"error": "REFRESH_CANCELLED", "message": str(exc)})
        raise SystemExit(1) from exc
    except ConfigError as exc:
        _print({"error": "CONFIG_ERROR", "message": str(exc)})
        raise SystemExit(2) from exc


if __name__ == "__main__":
    main()

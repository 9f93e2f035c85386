#!/usr/bin/env python3
"""
Agency OS CLI - operate the agency snapshot from a terminal.

Commands:
  init                 Set the CEO and team access phrases
  status               KPIs, badges and onboarding summary
  roster [--status S]  Client roster with computed health
  sprint CLIENT_ID     Generate the 7-task sprint for a client
  serve                Run the API server
"""

import argparse
import getpass
import sys

from agency_os import config
from agency_os.agency_snapshot import AgencySnapshotGenerator
from agency_os.contracts import get_thresholds
from agency_os.observability import configure_logging
from agency_os.persistence import PersistenceBridge, RemoteStore
from agency_os.security import AccessSetupError, initialize_access
from agency_os.state_store import StateStore, init_store
from api.server import main as run_server


def print_header(text: str):
    """Print a section header."""
    print(f"\n{'═' * 50}")
    print(f"  {text}")
    print(f"{'═' * 50}")


def print_table(headers: list, rows: list, widths: list = None):
    """Print a simple table."""
    if not widths:
        widths = [max(len(str(row[i])) for row in [headers] + rows) for i in range(len(headers))]

    header_str = " │ ".join(str(h).ljust(w) for h, w in zip(headers, widths))
    print(header_str)
    print("─" * len(header_str))

    for row in rows:
        print(" │ ".join(str(c)[:w].ljust(w) for c, w in zip(row, widths)))


def health_color(label: str) -> str:
    """Return ANSI color code for a health label."""
    if label == "critical":
        return "\033[91m"  # Red
    if label == "at-risk":
        return "\033[93m"  # Yellow
    return "\033[0m"


def open_store(bridge: PersistenceBridge | None = None) -> StateStore:
    """Load the snapshot through the bridge and install the process store."""
    if bridge is None:
        remote = RemoteStore() if config.remote_configured() else None
        bridge = PersistenceBridge(remote=remote)
    snapshot = bridge.startup()
    return init_store(snapshot, on_change=bridge.save, thresholds=get_thresholds())


def cmd_init(args, store: StateStore) -> int:
    if store.snapshot.settings.initialized and not args.force:
        print("Access phrases already configured. Use --force to replace them.")
        return 1
    elevated = args.elevated or getpass.getpass("CEO access phrase: ")
    standard = args.standard or getpass.getpass("Team access phrase: ")
    try:
        elevated_hash, standard_hash = initialize_access(elevated, standard)
    except AccessSetupError as e:
        print(f"Setup failed: {e}")
        return 1
    store.initialize_access(elevated_hash, standard_hash)
    print("✓ Access phrases saved")
    return 0


def cmd_status(args, store: StateStore) -> int:
    gen = AgencySnapshotGenerator(store.snapshot, thresholds=store.thresholds)

    print_header("AGENCY STATUS")
    kpis = gen.dashboard_kpis()
    print(f"  Cash collected:   {kpis['cashCollected']:,.0f}")
    print(f"  Active sprints:   {kpis['activeSprints']}")
    print(f"  Pipeline leads:   {kpis['pipelineLeads']}")
    print(f"  Friction alerts:  {kpis['frictionAlerts']}")
    print(f"  Open tasks:       {kpis['openTasks']}")
    if kpis["tierDistribution"]:
        tiers = ", ".join(f"{k}: {v}" for k, v in sorted(kpis["tierDistribution"].items()))
        print(f"  Tiers:            {tiers}")

    print("\n  BADGES")
    for name, count in gen.badge_counts().items():
        print(f"    {name:<12} {count}")

    onboarding = gen.onboarding_summary()
    print("\n  ONBOARDING")
    print(
        f"    {onboarding['total']} total, {onboarding['blocked']} blocked, "
        f"{onboarding['completed']} completed, avg progress {onboarding['averageProgress']}/10"
    )

    health = gen.health_summary()
    print("\n  HEALTH")
    print(f"    {health['healthy']} healthy, {health['at-risk']} at-risk, {health['critical']} critical")
    return 0


def cmd_roster(args, store: StateStore) -> int:
    rows = AgencySnapshotGenerator(store.snapshot, thresholds=store.thresholds).roster(args.status, args.query)

    print_header("CLIENT ROSTER")
    if not rows:
        print("No clients match.")
        return 0

    reset = "\033[0m"
    print_table(
        ["ID", "Client", "Status", "Health", "Overdue", "Last activity"],
        [
            [
                r["id"],
                r["name"][:28],
                r["status"],
                f"{health_color(r['health'])}{r['health']}{reset}",
                r["overdueCount"],
                r["lastActivity"],
            ]
            for r in rows
        ],
        widths=[4, 28, 14, 20, 7, 14],
    )
    return 0


def cmd_sprint(args, store: StateStore) -> int:
    client = store.snapshot.client(args.client_id)
    if client is None:
        print(f"Client {args.client_id} not found.")
        return 1
    ids = store.generate_sprint_tasks(args.client_id)
    print(f"✓ Generated {len(ids)} sprint tasks for {client.name} (ids {ids[0]}-{ids[-1]})")
    return 0


def cmd_serve(args, store: StateStore | None) -> int:
    run_server(host=args.host, port=args.port)
    return 0


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(prog="agency-os", description="Agency OS command line")
    p.add_argument("--log-level", default=config.LOG_LEVEL)
    sub = p.add_subparsers(dest="cmd", required=True)

    i = sub.add_parser("init", help="Set access phrases")
    i.add_argument("--elevated", help="CEO access phrase (prompted when omitted)")
    i.add_argument("--standard", help="Team access phrase (prompted when omitted)")
    i.add_argument("--force", action="store_true", help="Replace existing phrases")
    i.set_defaults(func=cmd_init)

    sub.add_parser("status", help="KPIs and badges").set_defaults(func=cmd_status)

    r = sub.add_parser("roster", help="Client roster with health")
    r.add_argument("--status", default=None, help="Filter by client status")
    r.add_argument("--query", default="", help="Search name, niche or contact")
    r.set_defaults(func=cmd_roster)

    s = sub.add_parser("sprint", help="Generate sprint tasks for a client")
    s.add_argument("client_id", type=int)
    s.set_defaults(func=cmd_sprint)

    v = sub.add_parser("serve", help="Run the API server")
    v.add_argument("--host", default="127.0.0.1")
    v.add_argument("--port", type=int, default=8420)
    v.set_defaults(func=cmd_serve)
    return p


def main(argv: list[str] | None = None, bridge: PersistenceBridge | None = None) -> int:
    """Main entry point."""
    args = build_parser().parse_args(argv)
    configure_logging(args.log_level, json_format=False)
    store = None if args.cmd == "serve" else open_store(bridge)
    return args.func(args, store)


if __name__ == "__main__":
    sys.exit(main())

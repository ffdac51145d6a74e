# ============================================================================
# CONNECTIVITY PINGER - MAIN ENTRY POINT
# ============================================================================
# STATUS: Core - Daemon entry point
# PURPOSE: Wire configuration, collaborators, the cycle loop and /metrics
# ============================================================================
"""
Connectivity Pinger Main

Runs on every node of the cluster:
1. Loads configuration from the environment, overlaid with CLI flags
2. Builds the sink, inventory, echo client and the check registry
3. Starts the metrics server (continuous mode)
4. Runs the cycle loop until one-shot completion or SIGTERM/SIGINT

Usage:
    pinger --mode continuous --interval 5
    pinger --mode one-shot --dns kubernetes.default
"""

import argparse
import asyncio
import os
import signal
import sys
from typing import List, Optional

from __version__ import __version__, BUILD_DATE
from core.config import PingerConfig
from core.contracts import RunMode
from core.errors import ConfigError, InventoryLookupError
from core.logging import configure_logging, get_logger
from health.checks import build_default_registry
from health.executor import HealthCheckRunner
from inventory.kubernetes import KubernetesInventory
from metrics.server import start_metrics_server
from metrics.sink import PrometheusSink
from orchestrator.loop import CycleLoop
from probe.echo import PingCommandEchoClient

logger = get_logger(__name__)


# ============================================================================
# CLI
# ============================================================================

def _mode_arg(value: str) -> RunMode:
    try:
        return RunMode.parse(value)
    except ValueError:
        raise argparse.ArgumentTypeError(
            f"invalid mode {value!r} (choose one-shot, continuous, job or server)"
        )


def build_argparser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="pinger",
        description="Probe node, pod and DNS connectivity from this node and export the results",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  %(prog)s --mode continuous --interval 5
  %(prog)s --mode job --dns kubernetes.default --json-logs
  %(prog)s --selector app=kube-ovn-pinger --no-metrics-server
        """,
    )
    parser.add_argument(
        "--mode", "-m",
        type=_mode_arg,
        help="one-shot (alias: job) or continuous (alias: server); env PINGER_MODE",
    )
    parser.add_argument(
        "--interval", "-i",
        type=int,
        help="Seconds between cycles in continuous mode (default: 5)",
    )
    parser.add_argument("--dns", help="Name to resolve each cycle (default: kubernetes.default)")
    parser.add_argument("--ds-namespace", help="Namespace of the peer daemon workload")
    parser.add_argument("--ds-name", help="Name of the peer daemon workload")
    parser.add_argument("--selector", help="Label selector for peer pods (overrides --ds-name)")
    parser.add_argument("--port", "-p", type=int, help="Metrics server port (default: 8080)")
    parser.add_argument(
        "--log-level",
        default=None,
        help="DEBUG, INFO, WARNING or ERROR (default: env PINGER_LOG_LEVEL or INFO)",
    )
    parser.add_argument("--json-logs", action="store_true", help="Emit JSON log lines")
    parser.add_argument(
        "--no-metrics-server",
        action="store_true",
        help="Do not serve /metrics and /livez",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    return parser


def config_from_args(args: argparse.Namespace, base: Optional[PingerConfig] = None) -> PingerConfig:
    """Overlay parsed CLI flags on the environment configuration."""
    config = base or PingerConfig.from_env()
    config = config.with_overrides(
        mode=args.mode,
        interval_seconds=args.interval,
        dns_target=args.dns,
        peer_namespace=args.ds_namespace,
        peer_workload=args.ds_name,
        peer_selector=args.selector,
        metrics_port=args.port,
    )
    if args.no_metrics_server:
        config = config.with_overrides(serve_metrics=False)
    return config.validate()


# ============================================================================
# MAIN
# ============================================================================

async def main(config: PingerConfig) -> int:
    """Run the daemon. Returns the process exit code."""
    logger.info("=" * 60)
    logger.info(f"Connectivity Pinger Starting v{__version__} (Build {BUILD_DATE})")
    logger.info("=" * 60)
    logger.info(f"Mode: {config.mode.value}, interval: {config.interval_seconds}s")
    logger.info(f"Reporter: node={config.node_name or '-'} pod={config.pod_name or '-'}")

    sink = PrometheusSink()

    inventory = None
    if config.enable_node_ping or config.enable_pod_ping:
        try:
            inventory = KubernetesInventory.from_in_cluster()
        except InventoryLookupError as e:
            logger.error(f"failed to build kubernetes client: {e}")
            return 1

    echo_client = PingCommandEchoClient(
        binary=config.probe.ping_binary,
        interval_seconds=config.probe.echo_interval_seconds,
        reply_timeout_seconds=config.probe.echo_timeout_seconds,
    )
    registry = build_default_registry(config, inventory, echo_client)
    logger.info(f"Checks: {registry.names()}")

    runner = HealthCheckRunner(registry, sink, config.reporter)
    loop = CycleLoop(runner, mode=config.mode, interval_seconds=config.interval_seconds)

    event_loop = asyncio.get_running_loop()
    for sig in (signal.SIGTERM, signal.SIGINT):
        try:
            event_loop.add_signal_handler(sig, loop.stop)
        except NotImplementedError:
            pass  # Windows

    metrics_runner = None
    if config.serve_metrics and config.mode == RunMode.CONTINUOUS:
        metrics_runner = await start_metrics_server(
            sink, port=config.metrics_port, status_fn=loop.status
        )

    try:
        await loop.run()
    finally:
        if metrics_runner is not None:
            await metrics_runner.cleanup()
        if inventory is not None:
            await inventory.close()

    logger.info("Connectivity Pinger stopped")
    return 0


def cli(argv: Optional[List[str]] = None) -> None:
    """Synchronous entry point."""
    args = build_argparser().parse_args(argv)

    configure_logging(
        level=args.log_level or os.getenv("PINGER_LOG_LEVEL", "INFO"),
        json_output=args.json_logs,
    )

    try:
        config = config_from_args(args)
    except ConfigError as e:
        logger.error(f"Invalid configuration: {e}")
        sys.exit(1)

    sys.exit(asyncio.run(main(config)))


if __name__ == "__main__":
    cli()

"""
Interactive command shell and process entry point for the simulator.

    python -m dvsim topology.txt -s
"""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import Callable, Dict, List, Optional

from .config import LOG_LEVELS, SimulatorConfig, load_config
from .dijkstra_engine import tables_match_shortest_paths
from .errors import ConfigError, DVSimError, NoRoute
from .rendering import render_no_route, render_route
from .simulation import RoutingEngine
from .topology_builder import load_topology

LOGGER = logging.getLogger(__name__)

HELP_TEXT = """Available Commands:
vt <name> : view the routing table for node <name>
vta: view all routing tables
vl: view the links of every node
e: cause an exchange (an iteration of the distance-vector protocol)
r: run the protocol until changes temporarily stop (note the network may not yet be in a consistent state)
cl -n n1 n2 newCost: change the link cost from n1-n2 to newCost right now
cl n1 n2 newCost round: schedule the link n1-n2 to change cost after round
dl -n n1 n2: destroy the link between n1 and n2 now
dl n1 n2 round: schedule the link n1-n2 to fail after round
tr n1 n2: show the current best route from n1 to n2, if one exists
sp: check the routing tables against shortest-path costs
h or help: bring up this help message
q or quit: exit the simulator
"""

DL_USAGE = """Usage to destroy link: dl [options] n1 n2 round
 Options:
-n: destroy the link now. If this is chosen the round can be omitted
Round is the round after which the link should fail."""

CL_USAGE = """Usage to change link cost: cl [options] n1 n2 newCost round
 Options:
-n: change the link cost now. If this is chosen the round can be omitted
Round is the round after which the link should change cost."""


class CliShell:
    def __init__(self, engine: RoutingEngine, max_rounds: Optional[int] = None) -> None:
        self.engine = engine
        self.max_rounds = max_rounds
        self._running = True
        self._commands: Dict[str, Callable[[List[str]], None]] = {
            "vt": self._cmd_view_table,
            "vta": self._cmd_view_all,
            "vl": self._cmd_view_links,
            "e": self._cmd_exchange,
            "r": self._cmd_run,
            "dl": self._cmd_destroy_link,
            "cl": self._cmd_change_cost,
            "tr": self._cmd_trace,
            "sp": self._cmd_shortest_paths,
            "h": self._cmd_help,
            "help": self._cmd_help,
            "q": self._cmd_quit,
            "quit": self._cmd_quit,
        }

    @property
    def running(self) -> bool:
        return self._running

    def run(self) -> None:
        while self._running:
            try:
                line = input()
            except EOFError:
                break
            self.execute(line)

    def execute(self, line: str) -> None:
        tokens = line.split()
        if not tokens:
            return
        handler = self._commands.get(tokens[0])
        if handler is None:
            print("No such command. Enter 'h' or 'help' for the list of valid commands")
            return
        try:
            handler(tokens[1:])
        except DVSimError as exc:
            print(exc)
        except ValueError as exc:
            LOGGER.debug("bad command %r: %s", line, exc)
            print("Poorly formatted or illegal command. Please try again.")

    # ----------------------------------------------------------------- commands
    def _cmd_view_table(self, args: List[str]) -> None:
        if not args:
            print("Usage view table: vt <nodename>")
            return
        print(self.engine.render_table(args[0]))

    def _cmd_view_all(self, _: List[str]) -> None:
        print(self.engine.render_tables())

    def _cmd_view_links(self, _: List[str]) -> None:
        print(self.engine.render_links())

    def _cmd_exchange(self, _: List[str]) -> None:
        changed = self.engine.exchange()
        self._report_events()
        print(f"Network Updated:\nCompleted {self.engine.current_round} rounds.")
        print(f"Change?: {'Yes' if changed else 'No'}")

    def _cmd_run(self, _: List[str]) -> None:
        print("Running")
        try:
            rounds = self.engine.run_until_stable(self.max_rounds)
        finally:
            self._report_events()
        print(f"Changes Stopped. Total Rounds: {rounds}")

    def _report_events(self) -> None:
        for event in self.engine.take_applied_events():
            print(event.describe())

    def _cmd_destroy_link(self, args: List[str]) -> None:
        if len(args) == 3 and args[0] == "-n":
            if not self.engine.destroy_link(args[1], args[2]):
                print(f"No link between {args[1]} and {args[2]}.")
        elif len(args) == 3:
            self.engine.schedule_failure(args[0], args[1], int(args[2]))
        else:
            print(DL_USAGE)

    def _cmd_change_cost(self, args: List[str]) -> None:
        if len(args) == 4 and args[0] == "-n":
            if not self.engine.change_link_cost(args[1], args[2], int(args[3])):
                print(f"No link between {args[1]} and {args[2]}.")
        elif len(args) == 4:
            self.engine.schedule_cost_change(args[0], args[1], int(args[3]), int(args[2]))
        else:
            print(CL_USAGE)

    def _cmd_trace(self, args: List[str]) -> None:
        if len(args) != 2:
            print("Usage of traceroute: tr n1 n2")
            return
        try:
            route = self.engine.trace_route(args[0], args[1])
        except NoRoute:
            print(render_no_route(args[0], args[1]))
        else:
            print(render_route(route))

    def _cmd_shortest_paths(self, _: List[str]) -> None:
        if tables_match_shortest_paths(self.engine.topology):
            print("Routing tables match shortest-path costs.")
        else:
            print("Routing tables do not match shortest-path costs yet.")

    def _cmd_help(self, _: List[str]) -> None:
        print(HELP_TEXT)

    def _cmd_quit(self, _: List[str]) -> None:
        print("System exiting.")
        self._running = False


# --------------------------------------------------------------------- process
def parse_args(argv: List[str]) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="dvsim",
        description="Distance-vector routing simulator.",
    )
    parser.add_argument("topology", help="Topology file: node names, link lines, blank line, comments")
    parser.add_argument(
        "-s", "--split-horizon", action="store_true", default=None, help="Engage split horizon on the network"
    )
    parser.add_argument("--config", help="Simulator settings file (YAML)")
    parser.add_argument("--workers", type=int, help="Threads used to relax nodes within a round")
    parser.add_argument("--log-level", choices=LOG_LEVELS)
    return parser.parse_args(argv)


def setup_logging(level_name: str) -> None:
    logging.basicConfig(
        level=getattr(logging, level_name.upper(), logging.WARNING),
        format="%(asctime)s %(levelname)-5s %(name)s: %(message)s",
    )


def main(argv: Optional[List[str]] = None) -> int:
    args = parse_args(sys.argv[1:] if argv is None else argv)
    try:
        config = load_config(Path(args.config)) if args.config else SimulatorConfig()
        config = config.override(
            split_horizon=args.split_horizon,
            workers=args.workers,
            log_level=args.log_level,
        )
        setup_logging(config.log_level)
        topology = load_topology(args.topology)
    except FileNotFoundError as exc:
        print(f"Input file '{exc.filename}' not found", file=sys.stderr)
        return 1
    except ConfigError as exc:
        print(f"Invalid configuration: {exc}", file=sys.stderr)
        return 1
    except DVSimError as exc:
        print(f"Input file is not in an acceptable format: {exc}", file=sys.stderr)
        return 1

    engine = RoutingEngine(topology, split_horizon=config.split_horizon, workers=config.workers)
    LOGGER.info("loaded %d nodes, split horizon %s", len(topology), config.split_horizon)

    print("Running Distance Vector Simulator")
    shell = CliShell(engine, max_rounds=config.max_rounds)
    shell.execute("help")
    try:
        shell.run()
    except KeyboardInterrupt:
        LOGGER.warning("interrupt received, shutting down")
    finally:
        engine.close()
    return 0

#!/usr/bin/env python3
"""
MediAI Pro - Main Entry Point
=============================

This is the main entry point for MediAI Pro.
It provides a command-line interface for running the assistant
in various modes.

Usage:
    python main.py --web              # Start web UI
    python main.py --tui              # Start terminal UI
    python main.py --ask "question"   # Answer one question
    python main.py --rules            # Show the rule table
    python main.py --status           # Check system status
    python main.py --help             # Show help
"""

import sys
import argparse
from pathlib import Path

# Add parent directory to path for imports
sys.path.insert(0, str(Path(__file__).parent))

from core.config import load_config, create_default_config, Config
from core.logging import setup_logging, get_logger
from core.exceptions import MediAIError

logger = get_logger("main")


def parse_args(argv=None) -> argparse.Namespace:
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(
        description="MediAI Pro - Keyword-driven medical assistant",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  python main.py --web                      Start web UI on default port
  python main.py --web --port 9000          Start web UI on port 9000
  python main.py --tui                      Start terminal UI
  python main.py --ask "I have a headache"  Answer one question
  python main.py --rules                    Show rules in evaluation order
  python main.py --export-rules rules.yaml  Write the rule table to YAML
  python main.py --setup                    Create a default configuration
        """
    )

    # Mode selection (mutually exclusive)
    mode_group = parser.add_mutually_exclusive_group()
    mode_group.add_argument(
        "--web",
        action="store_true",
        help="Start web UI server"
    )
    mode_group.add_argument(
        "--tui",
        action="store_true",
        help="Start terminal UI"
    )
    mode_group.add_argument(
        "--status",
        action="store_true",
        help="Check system status"
    )
    mode_group.add_argument(
        "--ask",
        type=str,
        metavar="MESSAGE",
        help="Answer a single question and exit"
    )
    mode_group.add_argument(
        "--rules",
        action="store_true",
        help="List response rules in evaluation order"
    )
    mode_group.add_argument(
        "--export-rules",
        type=str,
        metavar="PATH",
        help="Write the active rule table to a YAML file"
    )
    mode_group.add_argument(
        "--setup",
        action="store_true",
        help="Create a default configuration"
    )

    # Optional arguments
    parser.add_argument(
        "--config",
        type=str,
        metavar="PATH",
        help="Path to configuration file"
    )
    parser.add_argument(
        "--port",
        type=int,
        default=None,
        help="Port for web UI (default: from config, 8080)"
    )
    parser.add_argument(
        "--host",
        type=str,
        default=None,
        help="Host for web UI (default: from config, 127.0.0.1)"
    )
    parser.add_argument(
        "--debug",
        action="store_true",
        help="Enable debug mode"
    )

    return parser.parse_args(argv)


def check_dependencies() -> bool:
    """
    Check if all required dependencies are installed.

    Returns:
        True if all dependencies are available
    """
    missing = []

    try:
        import yaml  # noqa: F401
    except ImportError:
        missing.append("pyyaml")

    try:
        import fastapi  # noqa: F401
    except ImportError:
        missing.append("fastapi")

    try:
        import uvicorn  # noqa: F401
    except ImportError:
        missing.append("uvicorn")

    try:
        import jinja2  # noqa: F401
    except ImportError:
        missing.append("jinja2")

    if missing:
        print(f"Missing dependencies: {', '.join(missing)}")
        print("Install with: pip install " + " ".join(missing))
        return False

    return True


def run_setup(config_dir=None, config_path=None) -> None:
    """Write a default configuration and print where it went."""
    print("\n" + "=" * 50)
    print("MediAI Pro Setup")
    print("=" * 50 + "\n")

    config = create_default_config(config_dir, config_path)

    print(f"Configuration file: {config_path or Path(config.config_dir) / 'config.yaml'}")
    print("✓ Created default configuration")
    print("\nTo customize responses, export the rule table to")
    print(f"  {Path(config.config_dir) / 'rules.yaml'}")
    print("and edit it; it is picked up on the next start.")

    print("\nTo start the assistant:")
    print("  Web UI:    python main.py --web")
    print("  Terminal:  python main.py --tui")


def run_status_check(config: Config) -> None:
    """Check and display system status."""
    from services.responder import ResponseSelector

    print("\n" + "=" * 50)
    print(f"{config.app_name} - System Status")
    print("=" * 50 + "\n")

    print("Configuration")
    print("-" * 30)
    print(f"  Version: {config.version}")
    print(f"  Config dir: {config.config_dir or 'N/A'}")
    print(f"  Log dir: {config.log_dir or 'N/A'}")
    print(f"  Sample patients: {'Enabled' if config.store.seed_sample_patients else 'Disabled'}")

    print("\nAssistant")
    print("-" * 30)
    selector = ResponseSelector.from_config(config)
    rules_path = config.rules_path
    print(f"  Provider: {selector.provider}")
    print(f"  Rules: {len(selector.rules_engine.rules)}")
    print(f"  Source: {rules_path if rules_path else 'built-in'}")

    print("\nWeb UI")
    print("-" * 30)
    print(f"  Address: http://{config.ui.web_host}:{config.ui.web_port}")

    print("\n" + "=" * 50 + "\n")


def run_ask(config: Config, message: str) -> None:
    """Answer one question on the console."""
    from services.responder import ResponseSelector

    selector = ResponseSelector.from_config(config)
    reply = selector.select_response(message)

    print(f"\nQuestion: {message}")
    print("-" * 50)
    print(f"Rule: {reply.rule}")
    print(f"Provider: {reply.provider}")
    print(f"\n{reply.response}\n")


def run_list_rules(config: Config) -> None:
    """Print rules in evaluation order."""
    from services.responder import ResponseSelector

    engine = ResponseSelector.from_config(config).rules_engine

    print("\nResponse rules (first match wins)")
    print("-" * 50)
    for position, rule in enumerate(engine.get_all_rules(), start=1):
        joiner = " + " if rule.match_type.value == "all_keywords" else ", "
        print(f"  {position}. {rule.name:<20} {joiner.join(rule.patterns)}")
    print(f"     {'fallback':<20} {engine.fallback.name or 'custom text'}\n")


def run_export_rules(config: Config, path: str) -> None:
    """Write the active rule table to YAML."""
    from services.responder import ResponseSelector

    engine = ResponseSelector.from_config(config).rules_engine
    engine.save_rules(path)
    print(f"✓ Rules written to {path}")


def run_web_ui(config: Config, host: str, port: int, debug: bool) -> None:
    """Run the web UI server."""
    from ui.web.app import run_app

    print(f"\nStarting Web UI on http://{host}:{port}")
    print("Press Ctrl+C to stop\n")

    run_app(host=host, port=port, debug=debug, config=config)


def run_terminal_ui(config: Config) -> None:
    """Run the terminal UI."""
    from ui.terminal.app import run_tui

    print("\nStarting Terminal UI...")
    print("Press Ctrl+Q to exit\n")

    run_tui(config=config)


def main(argv=None) -> int:
    """Main entry point."""
    args = parse_args(argv)

    # Check dependencies
    if not check_dependencies():
        return 1

    try:
        if args.setup:
            config_dir = str(Path(args.config).parent) if args.config else None
            run_setup(config_dir, args.config)
            return 0

        config = load_config(args.config)

        # Apply command-line overrides
        if args.debug:
            config.debug = True

        # Setup logging
        setup_logging(
            log_dir=config.log_dir or None,
            log_level="DEBUG" if config.debug else "INFO",
            console_output=args.web or args.debug
        )

        # Route to appropriate mode
        if args.web:
            host = args.host or config.ui.web_host
            port = args.port or config.ui.web_port
            run_web_ui(config, host, port, config.debug or config.ui.web_debug)
        elif args.tui:
            run_terminal_ui(config)
        elif args.status:
            run_status_check(config)
        elif args.ask is not None:
            run_ask(config, args.ask)
        elif args.rules:
            run_list_rules(config)
        elif args.export_rules:
            run_export_rules(config, args.export_rules)
        else:
            # Default: show status and usage
            run_status_check(config)
            print("No mode specified. Use --web, --tui, --ask, or --help")
            print("\nQuick start:")
            print("  python main.py --web    # Start web UI")
            print("  python main.py --tui    # Start terminal UI")

        return 0

    except MediAIError as e:
        print(f"\nError: {e}")
        return 1
    except KeyboardInterrupt:
        print("\nInterrupted")
        return 0
    except Exception as e:
        print(f"\nUnexpected error: {e}")
        if args.debug:
            import traceback
            traceback.print_exc()
        return 1


if __name__ == "__main__":
    sys.exit(main())

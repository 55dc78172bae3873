"""
conversation-cli — CLI tool for the Conversation v1 API
"""

import argparse
import json
import sys

from conversation_cli import config
from conversation_cli.commands import (
    cmd_call,
    cmd_counterexamples,
    cmd_examples,
    cmd_intent,
    cmd_intents,
    cmd_message,
    cmd_operations,
    cmd_status,
    cmd_workspace,
    cmd_workspaces,
)
from conversation_cli.exceptions import CliError

HELP_TEXT = """\
Usage: conversation-cli <command> [args...]

Global flags:
  --format table          Output as readable text instead of JSON (default: json)
  --quiet, -q             Suppress warnings
  --verbose, -v           Enable HTTP request logging
  --version               Show version number

Commands:
  message <workspace_id> [text] - Send a user utterance and show the response
    --context <json>        Context object from the previous turn
    --alternate-intents     Include lower-confidence intents
  workspaces              - List workspaces
  workspace <id>          - Show a workspace
    --export                Include all intents, entities and dialog nodes
  status <id>             - Show workspace training status
  intents <id>            - List intents of a workspace
    --export                Include examples
  intent <id> <intent>    - Show one intent
  examples <id> <intent>  - List examples of an intent
  counterexamples <id>    - List counterexamples of a workspace
  call <operation> [json] - Run any operation, e.g.
                            call deleteExample '{"workspace_id": "ws1",
                            "intent": "greet", "text": "hi there"}'
  operations              - List every supported operation
  version                 - Show version number

Paging flags (workspaces, intents, examples, counterexamples):
  --page-limit <n>  --sort <field>  --cursor <token>  --include-count

Configuration (.env or environment):
  CONVERSATION_USERNAME, CONVERSATION_PASSWORD, CONVERSATION_VERSION_DATE,
  CONVERSATION_URL (optional)
"""


def _extract_global_flags(argv):
    """Extract global flags from anywhere in argv.
    Returns (fmt, quiet, verbose, remaining_args)."""
    fmt = "json"
    quiet = False
    verbose = False
    remaining = []
    i = 0
    while i < len(argv):
        if argv[i] == "--version":
            print(f"conversation-cli {config.VERSION}")
            sys.exit(0)
        elif argv[i] in ("--quiet", "-q"):
            quiet = True
        elif argv[i] in ("--verbose", "-v"):
            verbose = True
        elif argv[i] == "--format" and i + 1 < len(argv):
            fmt = argv[i + 1]
            if fmt not in ("json", "table"):
                raise CliError(f"[ERROR] Invalid format '{fmt}'. Use: json, table")
            i += 2
            continue
        else:
            remaining.append(argv[i])
        i += 1
    if quiet and verbose:
        raise CliError("[ERROR] --quiet and --verbose are mutually exclusive.")
    return fmt, quiet, verbose, remaining


# ---------------------------------------------------------------------------
# Argument parser
# ---------------------------------------------------------------------------


class _SubcommandParser(argparse.ArgumentParser):
    """Subparser that raises CliError instead of printing full help text."""

    def error(self, message):
        raise CliError(f"[ERROR] {message}")


def _positive_int(value):
    try:
        parsed = int(value)
    except ValueError as exc:
        raise argparse.ArgumentTypeError("must be a positive integer") from exc
    if parsed <= 0:
        raise argparse.ArgumentTypeError("must be a positive integer")
    return parsed


def _add_paging(p):
    p.add_argument("--page-limit", type=_positive_int, dest="page_limit")
    p.add_argument("--sort")
    p.add_argument("--cursor")
    p.add_argument("--include-count", action="store_true", dest="include_count")


def build_parser():
    parser = _SubcommandParser(
        prog="conversation-cli",
        description="CLI tool for the Conversation v1 API",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        add_help=False,
    )
    parser.add_argument("--help", "-h", action="store_true", dest="show_help")
    sub = parser.add_subparsers(dest="command", parser_class=_SubcommandParser)

    # --- message ---
    p = sub.add_parser("message")
    p.add_argument("workspace_id")
    p.add_argument("text", nargs="?")
    p.add_argument("--context")
    p.add_argument("--alternate-intents", action="store_true", dest="alternate_intents")
    p.set_defaults(func=cmd_message)

    # --- workspaces ---
    p = sub.add_parser("workspaces")
    _add_paging(p)
    p.set_defaults(func=cmd_workspaces)

    # --- workspace / status ---
    p = sub.add_parser("workspace")
    p.add_argument("workspace_id")
    p.add_argument("--export", action="store_true")
    p.set_defaults(func=cmd_workspace)
    p = sub.add_parser("status")
    p.add_argument("workspace_id")
    p.set_defaults(func=cmd_status)

    # --- intents / intent ---
    p = sub.add_parser("intents")
    p.add_argument("workspace_id")
    p.add_argument("--export", action="store_true")
    _add_paging(p)
    p.set_defaults(func=cmd_intents)
    p = sub.add_parser("intent")
    p.add_argument("workspace_id")
    p.add_argument("intent")
    p.add_argument("--export", action="store_true")
    p.set_defaults(func=cmd_intent)

    # --- examples / counterexamples ---
    p = sub.add_parser("examples")
    p.add_argument("workspace_id")
    p.add_argument("intent")
    _add_paging(p)
    p.set_defaults(func=cmd_examples)
    p = sub.add_parser("counterexamples")
    p.add_argument("workspace_id")
    _add_paging(p)
    p.set_defaults(func=cmd_counterexamples)

    # --- call ---
    p = sub.add_parser("call")
    p.add_argument("operation")
    p.add_argument("json_params", nargs="?")
    p.set_defaults(func=cmd_call)

    # --- operations ---
    sub.add_parser("operations").set_defaults(func=cmd_operations)

    # --- version (bare word) ---
    sub.add_parser("version").set_defaults(func=None)

    return parser


# ---------------------------------------------------------------------------
# Command dispatch
# ---------------------------------------------------------------------------


def _error_type_from_message(message):
    if message.startswith("[TOKEN_EXPIRED]") or "\n[TOKEN_EXPIRED]" in message:
        return "token_expired"
    if message.startswith("[SETUP_NEEDED]"):
        return "setup_needed"
    if message.startswith("[ERROR]"):
        return "error"
    return "cli_error"


def _emit_cli_error(err, fmt):
    msg = str(err)
    if fmt == "json":
        payload = {
            "ok": False,
            "schema_version": config.CONTRACT_SCHEMA_VERSION,
            "error": {
                "type": _error_type_from_message(msg),
                "message": msg,
                "exit_code": getattr(err, "exit_code", 1),
            },
        }
        status = getattr(err, "code", None)
        if isinstance(status, int):
            payload["error"]["status"] = status
        print(json.dumps(payload, ensure_ascii=False), file=sys.stderr)
        return
    print(msg, file=sys.stderr)


def main(argv=None):
    if hasattr(sys.stdout, "reconfigure"):
        sys.stdout.reconfigure(encoding="utf-8", errors="replace")

    argv = sys.argv[1:] if argv is None else argv
    if not argv:
        print(HELP_TEXT)
        sys.exit(0)

    fmt = "json"
    try:
        fmt, quiet, verbose, remaining_argv = _extract_global_flags(argv)
        config.RUNTIME_QUIET = quiet
        if verbose:
            config.HTTP_LOG_ENABLED = True

        if not remaining_argv:
            print(HELP_TEXT)
            sys.exit(0)

        parser = build_parser()
        ns = parser.parse_args(remaining_argv)
        ns.format = fmt  # inject global format flag

        if ns.show_help or not ns.command:
            print(HELP_TEXT)
            sys.exit(0)

        if ns.command == "version":
            print(f"conversation-cli {config.VERSION}")
            sys.exit(0)

        handler = getattr(ns, "func", None)
        if handler:
            handler(ns)
        else:
            raise CliError(f"[ERROR] Unknown command: {ns.command}")

    except CliError as e:
        _emit_cli_error(e, fmt)
        sys.exit(e.exit_code)


if __name__ == "__main__":
    main()

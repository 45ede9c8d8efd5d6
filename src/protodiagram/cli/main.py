# Copyright 2026 ProtoDiagram Contributors
# SPDX-License-Identifier: Apache-2.0

"""Entry point for the protodiagram command-line interface."""

import argparse
import logging
import sys
from pathlib import Path

from protodiagram.api import DiagramGenerationError, ProtoDiagram
from protodiagram.config.settings import CONFIG_FILE_NAME, IMAGE_TYPES, ConfigError, DiagramConfig, load_config
from protodiagram.views.encoder import Encoding, EncodingError, decode

# ###############
# Public Interface
# ###############


def main() -> None:
    """Run the protodiagram CLI."""
    parser = argparse.ArgumentParser(
        prog="protodiagram",
        description="protodiagram - Protocol Buffer definitions to PlantUML diagrams",
    )
    parser.add_argument(
        "--config",
        default=None,
        help=f"Path to a configuration file (default: ./{CONFIG_FILE_NAME} when present)",
    )
    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Log debug details to stderr",
    )
    subparsers = parser.add_subparsers(dest="command", metavar="COMMAND")

    # plantuml subcommand
    plantuml_parser = subparsers.add_parser(
        "plantuml",
        help="Print the PlantUML diagram for a .proto file",
        description="Generate PlantUML object diagram text from a .proto file.",
    )
    plantuml_parser.add_argument("file", help="Path to the .proto file ('-' reads standard input)")

    # url subcommand
    url_parser = subparsers.add_parser(
        "url",
        help="Print the rendering URL for a .proto file",
        description="Generate the PlantUML server URL that renders the diagram of a .proto file.",
    )
    url_parser.add_argument("file", help="Path to the .proto file ('-' reads standard input)")
    url_parser.add_argument(
        "--type",
        dest="image_type",
        choices=IMAGE_TYPES,
        default=None,
        help="Image type requested from the server (default: from configuration)",
    )
    url_parser.add_argument(
        "--server",
        default=None,
        help="PlantUML server base URL (default: from configuration)",
    )

    # decode subcommand
    decode_parser = subparsers.add_parser(
        "decode",
        help="Decode a PlantUML URL token back into diagram text",
        description="Decode a token produced by the url command.",
    )
    decode_parser.add_argument("token", help="The encoded token (a leading '~h' selects hex)")
    decode_parser.add_argument(
        "--hex",
        action="store_true",
        help="Treat the token as hex encoded",
    )

    # serve subcommand
    serve_parser = subparsers.add_parser(
        "serve",
        help="Launch the interactive diagram viewer",
        description="Launch a web-based UI that renders diagrams for pasted proto definitions.",
    )
    serve_parser.add_argument(
        "--port",
        type=int,
        default=8050,
        help="Port to run the server on (default: 8050)",
    )
    serve_parser.add_argument(
        "--host",
        default="127.0.0.1",
        help="Host to bind the server to (default: 127.0.0.1)",
    )

    args = parser.parse_args()
    if args.command is None:
        parser.print_help()
        sys.exit(0)

    if args.verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(levelname)s %(name)s: %(message)s")

    sys.exit(_dispatch(args))


# ################
# Implementation
# ################


def _dispatch(args: argparse.Namespace) -> int:
    """Dispatch to the appropriate subcommand handler."""
    if args.command == "decode":
        return _cmd_decode(args)

    try:
        config = _load_config(args.config)
    except ConfigError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1

    if args.command == "plantuml":
        return _cmd_plantuml(args, config)
    if args.command == "url":
        return _cmd_url(args, config)
    if args.command == "serve":
        return _cmd_serve(args, config)
    return 0


def _load_config(path: str | None) -> DiagramConfig:
    """Load the configuration named on the command line or found in the working directory."""
    if path is not None:
        return load_config(Path(path))
    default_file = Path.cwd() / CONFIG_FILE_NAME
    if default_file.exists():
        return load_config(default_file)
    return DiagramConfig()


def _read_source(file_arg: str) -> str | None:
    """Return the proto source named by *file_arg*, or None after reporting an error."""
    if file_arg == "-":
        return sys.stdin.read()
    path = Path(file_arg)
    if not path.exists():
        print(f"Error: file '{path}' does not exist.", file=sys.stderr)
        return None
    try:
        return path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        print(f"Error: cannot read '{path}': {exc}", file=sys.stderr)
        return None


def _cmd_plantuml(args: argparse.Namespace, config: DiagramConfig) -> int:
    """Handle the plantuml subcommand."""
    source = _read_source(args.file)
    if source is None:
        return 1
    try:
        print(ProtoDiagram(config).generate_plantuml_code(source))
    except DiagramGenerationError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1
    return 0


def _cmd_url(args: argparse.Namespace, config: DiagramConfig) -> int:
    """Handle the url subcommand."""
    source = _read_source(args.file)
    if source is None:
        return 1
    try:
        result = ProtoDiagram(config).generate_diagram_url(
            source,
            image_type=args.image_type,
            server_url=args.server,
        )
    except DiagramGenerationError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1
    if result.encoding is Encoding.HEX:
        print("Warning: compression disabled, URL uses hex encoding.", file=sys.stderr)
    print(result.image_url)
    return 0


def _cmd_decode(args: argparse.Namespace) -> int:
    """Handle the decode subcommand."""
    try:
        text = decode(args.token, Encoding.HEX if args.hex else None)
    except EncodingError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1
    print(text)
    return 0


def _cmd_serve(args: argparse.Namespace, config: DiagramConfig) -> int:
    """Handle the serve subcommand."""
    from protodiagram.webui.app import create_app

    print(f"Serving diagram viewer at http://{args.host}:{args.port}/")
    app = create_app(config=config)
    app.run(host=args.host, port=args.port, debug=False)
    return 0

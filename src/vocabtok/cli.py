"""Command-line front end for vocabtok."""

import argparse
import json
import logging
import os
import sys
from typing import Any, Final

from . import __version__
from ._sanitise import render_token
from .errors import VocabTokError
from .service import TokenizerRequest, TokenizerResponse, TokenizerService
from .strategy import list_strategies

DEFAULT_CONFIG_PATH: Final[str] = os.path.join("tokenizer", "tokenizer.json")
CONFIG_ENV_VAR: Final[str] = "VOCABTOK_CONFIG"

log = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="vocabtok",
        description="Tokenize, encode and decode text with a JSON vocabulary.",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    parser.add_argument(
        "--config",
        default=os.environ.get(CONFIG_ENV_VAR, DEFAULT_CONFIG_PATH),
        help=f"tokenizer JSON config (default: ${CONFIG_ENV_VAR} or {DEFAULT_CONFIG_PATH})",
    )
    parser.add_argument(
        "--strategy",
        choices=list_strategies(),
        default="auto",
        help="tokenization strategy (default: auto)",
    )
    parser.add_argument(
        "--log-level",
        default="WARNING",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
    )

    sub = parser.add_subparsers(dest="command", required=True)

    for mode in ("tokenize", "encode"):
        p = sub.add_parser(mode, help=f"{mode} text (reads stdin when TEXT is omitted)")
        p.add_argument("text", nargs="?")

    p = sub.add_parser("decode", help="decode token ids")
    p.add_argument("token_ids", nargs="+", type=int, metavar="ID")

    sub.add_parser("stats", help="show tokenizer summary")

    p = sub.add_parser("top", help="list the lowest-id tokens")
    p.add_argument("n", nargs="?", type=int, default=20)

    p = sub.add_parser("prefix", help="list tokens starting with PREFIX")
    p.add_argument("prefix")

    p = sub.add_parser("lookup", help="show the token for an id")
    p.add_argument("token_id", type=int, metavar="ID")

    return parser


def _emit(body: Any) -> None:
    print(json.dumps(body, ensure_ascii=False, indent=2))


def _run_request(service: TokenizerService, args: argparse.Namespace) -> TokenizerResponse:
    if args.command == "decode":
        request = TokenizerRequest(mode="decode", token_ids=tuple(args.token_ids))
    else:
        text = args.text if args.text is not None else sys.stdin.read()
        request = TokenizerRequest(mode=args.command, text=text)
    return service.handle(request)


def _run_introspection(service: TokenizerService, args: argparse.Namespace) -> Any:
    tokenizer = service.tokenizer
    match args.command:
        case "stats":
            tokenizer.log_stats()
            stats = tokenizer.stats()
            return {
                "model_name": stats.model_name,
                "model_type": stats.model_type,
                "vocab_size": stats.vocab_size,
                "special_tokens": stats.special_tokens,
                "max_tokens": stats.max_tokens,
                "merge_count": stats.merge_count,
                "top_tokens": [render_token(tok) for tok in stats.top_tokens],
            }
        case "top":
            return [render_token(tok) for tok in tokenizer.top_tokens(args.n)]
        case "prefix":
            return sorted(tokenizer.find_tokens_by_prefix(args.prefix))
        case "lookup":
            return {"id": args.token_id, "token": tokenizer.find_token_by_id(args.token_id)}


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)

    logging.basicConfig(
        level=getattr(logging, args.log_level),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        datefmt="%H:%M:%S",
    )

    service = TokenizerService.from_config_path(args.config, strategy=args.strategy)

    if args.command in ("tokenize", "encode", "decode"):
        response = _run_request(service, args)
        _emit(response.to_dict())
        return 0 if response.success else 1

    try:
        _emit(_run_introspection(service, args))
    except VocabTokError as e:
        _emit(TokenizerResponse.failure(e).to_dict())
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())

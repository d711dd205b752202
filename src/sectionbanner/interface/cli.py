"""CLI commands for managing and testing section banners."""

import argparse
import json
import sys
from pathlib import Path

from ..models.requests import ContentItem, RawRequest
from ..services.admin_service import BannerValidationError
from ..wiring import build_admin_service, build_banner_service
from .validation import validate_banners


def load_banners_from_file(path: Path) -> list[dict]:
    """Load a banner list from a JSON file. Exits on missing file or invalid JSON."""
    if not path.exists():
        print(f"Error: banners file not found: {path}", file=sys.stderr)
        sys.exit(1)
    with open(path, encoding="utf-8") as f:
        try:
            raw = json.load(f)
        except json.JSONDecodeError as e:
            print(f"Error: invalid JSON in {path}: {e}", file=sys.stderr)
            sys.exit(1)
    if not isinstance(raw, list):
        print("Error: JSON file must contain a list of banner objects.", file=sys.stderr)
        sys.exit(1)
    return raw


def _request_from_args(args: argparse.Namespace) -> RawRequest:
    node = ContentItem(id=args.node_id or "", bundle=args.bundle) if args.bundle else None
    return RawRequest(
        path=args.path,
        route_name=args.route,
        alias=args.alias,
        node=node,
        language=args.lang,
        content_language=args.lang,
    )


def _add_request_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("--path", required=True, help="Internal path, e.g. /node/5")
    parser.add_argument("--route", default=None, help="Route id, e.g. entity.node.canonical")
    parser.add_argument("--bundle", default=None, help="Content type of the routed content item")
    parser.add_argument("--node-id", default=None, help="Id of the routed content item")
    parser.add_argument("--alias", default=None, help="Path alias (looked up when omitted)")
    parser.add_argument("--lang", default=None, help="Interface and content language")


def main():
    parser = argparse.ArgumentParser(description="Manage section banners")
    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    list_parser = subparsers.add_parser("list", help="List stored banners")
    list_parser.add_argument("--lang", default=None, help="Language used for labels")

    show_parser = subparsers.add_parser("show", help="Show one banner with all translations")
    show_parser.add_argument("index", type=int)

    import_parser = subparsers.add_parser("import", help="Replace all banners from a JSON file")
    import_parser.add_argument("--file", type=Path, required=True, help="Path to JSON file with banners")

    subparsers.add_parser("export", help="Print all banners as JSON")

    delete_parser = subparsers.add_parser("delete", help="Delete one banner")
    delete_parser.add_argument("index", type=int)

    render_parser = subparsers.add_parser("render", help="Render the banner selected for a request")
    _add_request_arguments(render_parser)

    explain_parser = subparsers.add_parser("explain", help="Explain banner selection for a request")
    _add_request_arguments(explain_parser)

    subparsers.add_parser("validate", help="Validate the target patterns of every stored banner")

    args = parser.parse_args()

    if args.command == "list":
        svc = build_admin_service()
        lang = svc.resolve_editing_language(args.lang)
        banners = svc.list_banners()
        if not banners:
            print("No banners configured.")
        for i, banner in enumerate(banners):
            if banner is None:
                print(f"{i}: (unreadable row)")
                continue
            label = banner.label(lang) or "(untitled)"
            print(f"{i}: {label}  [{', '.join(banner.targets)}]")
    elif args.command == "show":
        banner = build_admin_service().get_banner(args.index)
        if banner is None:
            print(f"Error: no banner at index {args.index}", file=sys.stderr)
            sys.exit(1)
        print(json.dumps(banner.model_dump(mode="json"), indent=2))
    elif args.command == "import":
        raw = load_banners_from_file(args.file)
        try:
            count = build_admin_service().replace_all(raw)
        except BannerValidationError as e:
            print(f"Error: {e}", file=sys.stderr)
            sys.exit(1)
        print(f"Imported {count} banners from {args.file}.")
    elif args.command == "export":
        print(json.dumps(build_admin_service().export_rows(), indent=2))
    elif args.command == "delete":
        if not build_admin_service().delete_banner(args.index):
            print(f"Error: no banner at index {args.index}", file=sys.stderr)
            sys.exit(1)
        print(f"Deleted banner {args.index}.")
    elif args.command == "render":
        render = build_banner_service().render(_request_from_args(args))
        if render is None:
            print("No banner matches this request.")
        else:
            print(json.dumps(render.model_dump(mode="json"), indent=2))
    elif args.command == "explain":
        trace = build_banner_service().explain(_request_from_args(args))
        print(json.dumps(trace, indent=2))
    elif args.command == "validate":
        report = validate_banners(build_admin_service().list_banners())
        print(json.dumps(report, indent=2))
        if any(not entry["valid"] for entry in report.values()):
            sys.exit(1)
    else:
        parser.print_help()


if __name__ == "__main__":
    main()

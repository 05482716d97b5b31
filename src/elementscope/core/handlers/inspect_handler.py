# src/elementscope/core/handlers/inspect_handler.py
import argparse
import asyncio
import json
import logging
from pathlib import Path
from typing import Any, Dict, List

from tqdm import tqdm

from analyzer.dom.builder import DocumentLoader
from elementscope.core.managers.config_manager import config_manager
from inspector.session import InspectionSession, is_restricted_url
from inspector.transport import MAX_RETRY_ATTEMPTS, RETRY_DELAY, ServerLink

logger = logging.getLogger(__name__)

inspect_help_text = """
  inspect <file> (--css <selector> | --xpath <xpath>) [--url <url>] [--all] [--send [<ws-url>]]
                      Analyzes the target element of an HTML document and prints
                      the 'elementSelected' payload as JSON. --all analyzes every
                      match of --css. --send pushes the payload(s) to a relay server.
""".strip()


def _inspect_targets(targets: List[Any], url: str, show_progress: bool) -> List[Dict[str, Any]]:
    """Runs one inspection session per target: start, hover, select."""
    payloads: List[Dict[str, Any]] = []
    session = InspectionSession(on_selected=payloads.append)
    for target in tqdm(targets, desc="Analyzing", unit="el", disable=not show_progress):
        if not session.start(url):
            break
        session.hover(target)
        session.select(target)
    return payloads


async def _send_payloads(server_url: str, payloads: List[Dict[str, Any]]) -> int:
    link = ServerLink(
        server_url,
        max_retry_attempts=config_manager.get_int("transport.max_retry_attempts", MAX_RETRY_ATTEMPTS),
        retry_delay=config_manager.get_float("transport.retry_delay", RETRY_DELAY),
    )
    sent = 0
    try:
        if not await link.connect():
            return 0
        for payload in payloads:
            if await link.send_element_selected(payload):
                sent += 1
    finally:
        await link.close()
    return sent


def handle_inspect(args: List[str]) -> int:
    parser = argparse.ArgumentParser(prog="inspect", description="Analyze an element of an HTML document.")
    parser.add_argument("file", help="HTML file to load")
    target = parser.add_mutually_exclusive_group(required=True)
    target.add_argument("--css", help="CSS selector of the target element")
    target.add_argument("--xpath", help="XPath (as produced by the analyzer) of the target element")
    parser.add_argument("--url", default=None, help="Page URL recorded with the selection (default: file URI)")
    parser.add_argument("--all", action="store_true", help="Analyze every element matching --css")
    parser.add_argument("--send", nargs="?", const="", default=None,
                        help="Send the payload(s) to a relay server (default URL from settings)")

    try:
        parsed = parser.parse_args(args)
    except SystemExit:
        return 1

    path = Path(parsed.file)
    try:
        html = path.read_text(encoding="utf-8", errors="replace")
    except OSError as e:
        print(f"❌ Error: could not read {path}: {e}")
        return 1

    loader = DocumentLoader()
    document = loader.load(html)
    if parsed.all and parsed.css:
        targets = loader.select(document, parsed.css)
    else:
        found = loader.find_target(document, css=parsed.css, xpath=parsed.xpath)
        targets = [found] if found is not None else []

    if not targets:
        print("🤷 No element matches the given selector.")
        return 1

    url = parsed.url or path.resolve().as_uri()
    if is_restricted_url(url):
        print(f"🚫 Cannot inspect restricted page: {url}")
        return 1

    payloads = _inspect_targets(targets, url, show_progress=len(targets) > 1)
    if not payloads:
        print("🤷 No element could be inspected.")
        return 1
    output: Any = payloads if parsed.all else payloads[0]
    print(json.dumps(output, indent=2, ensure_ascii=False))

    if parsed.send is not None:
        server_url = parsed.send or config_manager.get_nested("transport.server_url", "ws://localhost:3000")
        sent = asyncio.run(_send_payloads(server_url, payloads))
        if sent != len(payloads):
            logger.error(f"Sent {sent} of {len(payloads)} payloads to {server_url}")
            return 1
        logger.info(f"Sent {sent} payload(s) to {server_url}")

    return 0

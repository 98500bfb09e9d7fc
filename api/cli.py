"""
CLI Client for the Tool-Augmented Chat API

A command-line chat window: send a single message, or start an interactive
session that keeps prompting until EOF or "exit".
"""

import argparse
import sys
from typing import Optional

import httpx

# Default API URL
DEFAULT_API_URL = "http://localhost:8000"
EXIT_COMMANDS = {"exit", "quit"}


def send_message(message: str, api_url: str = DEFAULT_API_URL, timeout: float = 120.0) -> dict:
    """
    Send a message to the /chat endpoint.

    Args:
        message: User message text
        api_url: API base URL
        timeout: Request timeout in seconds

    Returns:
        Response body: {"reply": ...} on success, {"error": ...} otherwise

    Raises:
        httpx.HTTPError: On transport failure
    """
    response = httpx.post(
        f"{api_url}/chat",
        json={"message": message},
        timeout=timeout
    )

    try:
        return response.json()
    except ValueError:
        return {"error": f"HTTP {response.status_code}: {response.text}"}


def format_reply(body: dict) -> str:
    if "reply" in body:
        return f"AI: {body['reply']}"
    return f"Error: {body.get('error', 'Unknown error')}"


def chat_once(message: str, api_url: str, timeout: float) -> int:
    """Send one message and print the reply. Returns a process exit code."""
    try:
        body = send_message(message, api_url, timeout)
    except httpx.HTTPError as e:
        print(f"Error sending message: {e}")
        return 1

    print(format_reply(body))
    return 0 if "reply" in body else 1


def interactive(api_url: str, timeout: float, input_fn=input) -> int:
    """Prompt for messages until EOF or an exit command"""
    print(f"Chatting with {api_url} (type 'exit' to quit)")

    while True:
        try:
            message = input_fn("You: ")
        except (EOFError, KeyboardInterrupt):
            print()
            return 0

        if not message.strip():
            continue
        if message.strip().lower() in EXIT_COMMANDS:
            return 0

        chat_once(message, api_url, timeout)


def main(argv: Optional[list] = None) -> int:
    """Main CLI entry point"""
    parser = argparse.ArgumentParser(
        description="CLI client for the Tool-Augmented Chat API"
    )

    parser.add_argument(
        "message",
        nargs="?",
        help="Message to send (omit for an interactive session)"
    )

    parser.add_argument(
        "--api-url",
        default=DEFAULT_API_URL,
        help=f"API base URL (default: {DEFAULT_API_URL})"
    )

    parser.add_argument(
        "--timeout",
        type=float,
        default=120.0,
        help="Request timeout in seconds (default: 120)"
    )

    args = parser.parse_args(argv)

    if args.message is not None:
        if not args.message.strip():
            print("Error: message must not be empty")
            return 1
        return chat_once(args.message, args.api_url, args.timeout)

    return interactive(args.api_url, args.timeout)


if __name__ == "__main__":
    sys.exit(main())

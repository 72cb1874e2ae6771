#!/usr/bin/env python3
"""Console entry point for the Twenty-One client"""

import asyncio
import logging
import sys

from .client import TwentyOneClient
from .config import ClientConfig
from .models import ClientState
from .serialization import render_view

logger = logging.getLogger(__name__)

HELP = "Commands: rooms | create | join <roomId> | leave | hit | stand | rematch | quit"


class ConsolePresenter:
    """Prints a compact text frame for every snapshot."""

    def __init__(self, out=None):
        self.out = out or sys.stdout
        self.last_lines = None

    def __call__(self, state: ClientState):
        lines = self.render(state)
        if lines == self.last_lines:
            return
        self.last_lines = lines
        self.out.write("\n".join(lines) + "\n")
        self.out.flush()

    def render(self, state: ClientState):
        view = render_view(state)
        lines = [f"♠ Twenty-One  [{view['status']}]"]
        if view["screen"] == "lobby":
            if not view["rooms"]:
                lines.append("No rooms yet")
            for room in view["rooms"]:
                lines.append(f"{room['label']}  Players: {', '.join(room['players'])}  Mode: {room['mode']}")
            return lines

        lines.append(view["health_line"])
        opponent_cards = " ".join(rank or "▒" for rank in view["opponent_hand"])
        lines.append(f"{view['opponent_line']}   [{opponent_cards}]")
        your_cards = " ".join(rank or "▒" for rank in view["your_hand"])
        lines.append(f"You: {view['your_value']}   [{your_cards}]")
        if view["winner"]:
            lines.append(view["winner"])
        if view["can_rematch"]:
            lines.append("Rematch available")
        if view["countdown_text"]:
            lines.append(view["countdown_text"])
        return lines


def handle_command(client: TwentyOneClient, line: str) -> bool:
    """Run one console command. Returns False when the user wants to quit."""
    parts = line.strip().split()
    if not parts:
        return True
    command, args = parts[0].lower(), parts[1:]

    if command == "quit":
        return False
    if command == "rooms":
        client.refresh_rooms()
    elif command == "create":
        client.create_room()
    elif command == "join" and len(args) == 1 and args[0].isdigit():
        client.join_room(int(args[0]))
    elif command == "leave":
        client.leave_room()
    elif command == "hit":
        client.hit()
    elif command == "stand":
        client.stand()
    elif command == "rematch":
        client.rematch()
    else:
        print(HELP)
    return True


async def read_commands(client: TwentyOneClient):
    loop = asyncio.get_running_loop()
    while True:
        line = await loop.run_in_executor(None, sys.stdin.readline)
        if not line or not handle_command(client, line):
            break
    await client.close()


async def run(config: ClientConfig):
    client = TwentyOneClient(config, presenter=ConsolePresenter())
    print(HELP)
    reader = asyncio.create_task(read_commands(client))
    try:
        await client.run()
    finally:
        reader.cancel()


def main():
    config = ClientConfig.from_env()
    logging.basicConfig(level=getattr(logging, config.log_level))

    print(f"🃏 Starting Twenty-One client against {config.server_url}")
    try:
        asyncio.run(run(config))
    except KeyboardInterrupt:
        logger.info("Interrupted")


if __name__ == "__main__":
    main()

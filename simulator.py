"""Interactive CLI chat simulator — talk to the bot without WhatsApp."""

import asyncio
import itertools

from site_bot.container import build_container
from site_bot.database.engine import init_db
from site_bot.services.whatsapp import Button, ListSection, MediaContent, MessagingTransport
from site_bot.webhook.schemas import InboundMessage

BLUE = "\033[94m"
GREEN = "\033[92m"
YELLOW = "\033[93m"
CYAN = "\033[96m"
DIM = "\033[2m"
BOLD = "\033[1m"
RESET = "\033[0m"


class ConsoleTransport(MessagingTransport):
    """Prints outbound messages instead of calling the Cloud API."""

    async def send_text(self, to: str, body: str) -> bool:
        print(f"{GREEN}{BOLD}Bot:{RESET} {body}\n")
        return True

    async def send_buttons(self, to: str, body: str, buttons: list[Button]) -> bool:
        print(f"{GREEN}{BOLD}Bot:{RESET} {body}")
        for b in buttons:
            print(f"   {CYAN}[{b.id}]{RESET} {b.title}")
        print()
        return True

    async def send_list(
        self, to: str, body: str, button_label: str, sections: list[ListSection]
    ) -> bool:
        print(f"{GREEN}{BOLD}Bot:{RESET} {body}  {DIM}({button_label}){RESET}")
        for section in sections:
            print(f"   {BOLD}{section.title}{RESET}")
            for row in section.rows:
                suffix = f" {DIM}- {row.description}{RESET}" if row.description else ""
                print(f"   {CYAN}[{row.id}]{RESET} {row.title}{suffix}")
        print()
        return True

    async def mark_read(self, message_id: str) -> bool:
        return True

    async def fetch_media(self, media_id: str) -> MediaContent | None:
        return None


async def main() -> None:
    print(f"\n{BOLD}{'=' * 52}")
    print("  🤖  Site Bot — Chat Simulator")
    print(f"{'=' * 52}{RESET}\n")

    await init_db()
    container = build_container(transport=ConsoleTransport())

    print(f"{DIM}Tip: run 'python seed.py <phone>' first to simulate an employee{RESET}")
    print(f"{DIM}     Type 'quit' to exit, 'switch' to change phone number{RESET}")
    print(f"{DIM}     Type the [id] shown next to a button or list row to tap it{RESET}\n")

    phone = input(f"{YELLOW}Enter phone number to simulate: {RESET}").strip()
    if not phone:
        phone = "9999999999"
    print(f"{DIM}Simulating as {phone}{RESET}\n")

    counter = itertools.count(1)
    while True:
        try:
            user_input = input(f"{BLUE}{BOLD}You:{RESET} ").strip()
        except (KeyboardInterrupt, EOFError):
            print(f"\n{DIM}Goodbye!{RESET}")
            break

        if not user_input:
            continue

        if user_input.lower() == "quit":
            print(f"{DIM}Goodbye!{RESET}")
            break

        if user_input.lower() == "switch":
            phone = input(f"{YELLOW}New phone number: {RESET}").strip()
            print(f"{DIM}Switched to {phone}{RESET}\n")
            continue

        message = InboundMessage.model_validate(
            {
                "id": f"sim-{next(counter)}",
                "from": phone,
                "type": "text",
                "text": {"body": user_input},
            }
        )
        await container.dispatcher.dispatch(message)


if __name__ == "__main__":
    asyncio.run(main())

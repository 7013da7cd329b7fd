#!/usr/bin/env python3
"""Interactive chat CLI for the Spur support chat service."""

import sys

import httpx
from rich.console import Console
from rich.markdown import Markdown
from rich.panel import Panel
from rich.prompt import Prompt


class ChatCLI:
    """Interactive chat interface for the support chat service."""

    def __init__(self, base_url: str = "http://localhost:3001", session_id: str | None = None):
        """Initialize chat CLI."""
        self.base_url = base_url
        self.session_id = session_id
        self.console = Console()
        self.client = httpx.Client(timeout=60.0)

    def start(self) -> None:
        """Start the interactive chat session."""
        self.console.print(
            Panel.fit(
                "[bold blue]Spur Customer Support - Interactive Chat[/bold blue]\n"
                "Type your messages to chat with the support assistant.\n"
                "Commands: /help, /history, /clear, /quit",
                border_style="blue",
            )
        )

        if not self._test_connection():
            self.console.print(f"[red]Cannot connect to the service at {self.base_url}.[/red]")
            return

        self.console.print("[green]Connected to support chat service[/green]\n")

        if self.session_id:
            self._show_history(self.load_history())

        try:
            while True:
                user_input = Prompt.ask("\n[bold cyan]You[/bold cyan]")

                if user_input.lower() in ["/quit", "/exit", "quit", "exit"]:
                    break
                elif user_input.lower() == "/help":
                    self._show_help()
                    continue
                elif user_input.lower() == "/history":
                    self._show_history(self.load_history())
                    continue
                elif user_input.lower() == "/clear":
                    self.session_id = None
                    self.console.print("[yellow]Session cleared[/yellow]")
                    continue
                elif user_input.strip() == "":
                    continue

                response = self._send_message(user_input)
                if response:
                    self._display_response(response)

        except KeyboardInterrupt:
            pass
        finally:
            self.console.print("\n[yellow]Goodbye![/yellow]")
            self.client.close()

    def _test_connection(self) -> bool:
        """Test connection to the service."""
        try:
            response = self.client.get(f"{self.base_url}/health")
            return response.status_code == 200
        except httpx.HTTPError:
            return False

    def load_history(self) -> list[dict]:
        """Fetch the current conversation's messages.

        History is best-effort: an unknown session or any transport error
        yields an empty list instead of interrupting the chat.
        """
        if not self.session_id:
            return []
        try:
            response = self.client.get(f"{self.base_url}/chat/{self.session_id}")
        except httpx.HTTPError:
            return []

        if response.status_code == 404:
            # Stale session id, start fresh on the next message
            self.session_id = None
            return []
        if response.status_code != 200:
            return []
        return response.json().get("messages", [])

    def _send_message(self, message: str) -> dict | None:
        """Send message to the chat service."""
        try:
            payload = {"message": message}
            if self.session_id:
                payload["sessionId"] = self.session_id

            self.console.print("[dim]Thinking...[/dim]", end="")

            response = self.client.post(
                f"{self.base_url}/chat/message", json=payload, headers={"Content-Type": "application/json"}
            )

            # Clear the "thinking" message
            self.console.print("\r" + " " * 20 + "\r", end="\n")

            if response.status_code == 200:
                data = response.json()
                self.session_id = data.get("sessionId")
                return data

            try:
                error = response.json().get("error", response.text)
            except ValueError:
                error = response.text
            self.console.print(f"[red]Error {response.status_code}: {error}[/red]")
            if response.status_code in (503, 504):
                self.console.print("[dim]Your message was saved. Send it again to retry.[/dim]")
            return None

        except httpx.HTTPError as e:
            self.console.print(f"[red]Connection error: {e}[/red]")
            return None

    def _display_response(self, response: dict) -> None:
        """Display assistant reply with nice formatting."""
        self.console.print(
            Panel(
                Markdown(response.get("reply", "No response")),
                title="[bold green]Spur Support[/bold green]",
                border_style="green",
                padding=(1, 2),
            )
        )

    def _show_history(self, messages: list[dict]) -> None:
        """Show previous messages of the conversation."""
        if not messages:
            self.console.print("[dim]No previous messages[/dim]")
            return

        for message in messages:
            if message.get("sender") == "user":
                self.console.print(f"[bold cyan]You:[/bold cyan] {message.get('text', '')}")
            else:
                self.console.print(f"[bold green]Spur Support:[/bold green] {message.get('text', '')}")

    def _show_help(self) -> None:
        """Show help information."""
        help_text = """
[bold]Available Commands:[/bold]
• /help - Show this help message
• /history - Show the messages of the current conversation
• /clear - Clear session and start over
• /quit or /exit - Exit the chat

[bold]Things to ask:[/bold]
1. "What is your return policy?"
2. "How long does express shipping take?"
3. "Do you accept Apple Pay?"
        """

        self.console.print(Panel(help_text.strip(), title="[cyan]Help[/cyan]", border_style="cyan"))


def main():
    """Main entry point for the chat CLI."""
    base_url = sys.argv[1] if len(sys.argv) > 1 else "http://localhost:3001"
    session_id = sys.argv[2] if len(sys.argv) > 2 else None

    chat = ChatCLI(base_url, session_id)
    chat.start()


if __name__ == "__main__":
    main()

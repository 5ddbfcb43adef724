"""Async client for the mentor proxy, plus a small command line tool."""

from __future__ import annotations

import argparse
import asyncio
import json
import logging
import random
import re
import time
from datetime import datetime, timezone
from typing import Any, Iterable, Sequence

import httpx

from mentor_proxy import prompts
from mentor_proxy.exceptions import MentorClientError
from mentor_proxy.models import ChatMessage, InvocationResponse, Roadmap, Task

logger = logging.getLogger(__name__)

DEFAULT_URL = "http://127.0.0.1:8000/ai-mentor"

CHAT_FALLBACK = "I apologize, but I cannot provide a response right now. Please try again."
QUOTE_FALLBACK = "Every expert was once a beginner. Keep learning, keep growing! 🚀"
PROGRESS_FALLBACK = "You're making great progress! Keep up the excellent work."

DEFAULT_NEXT_STEPS = (
    "Review your completed tasks and identify knowledge gaps",
    "Set a specific learning goal for this week",
    "Find a practice project to apply your skills",
)

OFFLINE_QUOTES = (
    "Your future is created by what you do today, not tomorrow.",
    "Success is not final, failure is not fatal: it is the courage to continue that counts.",
    "The only way to do great work is to love what you do.",
    "Don't be afraid to give up the good to go for the great.",
    "Your skills are your most valuable asset. Keep sharpening them.",
    "Every expert was once a beginner. Every pro was once an amateur.",
    "The journey of a thousand miles begins with a single step.",
    "Growth begins at the end of your comfort zone.",
    "Your potential is endless. Go do what you were created to do.",
    "Today's accomplishments were yesterday's impossibilities.",
)

CHAT_HISTORY_LIMIT = 5

_CODE_FENCE = re.compile(r"^```[a-zA-Z]*\s*(.*?)\s*```$", re.DOTALL)


def random_fallback_quote() -> str:
    """Pick one of the built-in quotes for when the mentor is unreachable."""

    return random.choice(OFFLINE_QUOTES)


def _strip_code_fence(text: str) -> str:
    text = text.strip()
    match = _CODE_FENCE.match(text)
    return match.group(1) if match else text


class MentorClient:
    """Builds mentoring prompts and sends them through the proxy."""

    def __init__(
        self,
        client: httpx.AsyncClient,
        url: str = DEFAULT_URL,
        auth_token: str | None = None,
    ) -> None:
        self._client = client
        self._url = url
        self._auth_token = auth_token

    async def invoke(self, prompt: str, context: Any = None) -> InvocationResponse:
        """Send a single prompt to the proxy."""

        headers = {"Content-Type": "application/json"}
        if self._auth_token:
            headers["Authorization"] = f"Bearer {self._auth_token}"
            headers["apikey"] = self._auth_token

        try:
            response = await self._client.post(
                self._url,
                headers=headers,
                json={"prompt": prompt, "context": context},
            )
            response.raise_for_status()
        except httpx.HTTPStatusError as exc:
            logger.error(
                "Mentor proxy returned an error",
                extra={
                    "status_code": exc.response.status_code,
                    "response_text": exc.response.text,
                },
            )
            raise MentorClientError(
                "Failed to get AI response", status_code=exc.response.status_code
            ) from exc
        except httpx.HTTPError as exc:
            logger.exception("Mentor proxy request failed")
            raise MentorClientError("Failed to connect to AI service") from exc

        try:
            return InvocationResponse.model_validate_json(response.content)
        except ValueError as exc:
            logger.error("Malformed mentor response", extra={"response_text": response.text})
            raise MentorClientError("Invalid mentor response payload") from exc

    async def get_chat_response(
        self, message: str, history: Sequence[ChatMessage] = ()
    ) -> str:
        context = {
            "type": "chat",
            "history": [
                item.model_dump(mode="json", by_alias=True)
                for item in list(history)[-CHAT_HISTORY_LIMIT:]
            ],
            "timestamp": datetime.now(timezone.utc).isoformat(),
        }
        response = await self.invoke(prompts.chat_prompt(message), context)
        return response.content or CHAT_FALLBACK

    async def generate_roadmap(self, skill: str, level: str = "beginner") -> Roadmap:
        """Ask the mentor for a roadmap and parse its JSON answer."""

        response = await self.invoke(prompts.roadmap_prompt(skill, level))
        try:
            data = json.loads(_strip_code_fence(response.content))
            if not isinstance(data, dict):
                raise ValueError("Roadmap payload is not a JSON object")
            return Roadmap.model_validate(
                {
                    "id": f"roadmap_{int(time.time() * 1000)}",
                    **data,
                    "status": "not-started",
                    "progress": 0,
                }
            )
        except ValueError as exc:
            logger.error("Failed to parse roadmap", extra={"skill": skill}, exc_info=exc)
            raise MentorClientError("Failed to generate roadmap") from exc

    async def generate_motivational_quote(self) -> str:
        response = await self.invoke(prompts.QUOTE_PROMPT)
        return response.content or QUOTE_FALLBACK

    async def analyze_progress(self, tasks: Iterable[Task], streak_days: int) -> str:
        response = await self.invoke(prompts.progress_prompt(tasks, streak_days))
        return response.content or PROGRESS_FALLBACK

    async def suggest_next_steps(
        self, roadmaps: Iterable[str], completed_tasks: Sequence[Task]
    ) -> list[str]:
        """Return the mentor's suggested steps, or a fixed default list."""

        response = await self.invoke(
            prompts.next_steps_prompt(roadmaps, len(completed_tasks))
        )
        try:
            steps = json.loads(_strip_code_fence(response.content))
        except ValueError:
            return list(DEFAULT_NEXT_STEPS)

        if not isinstance(steps, list) or not all(isinstance(step, str) for step in steps):
            return list(DEFAULT_NEXT_STEPS)
        return steps


async def run_client(args: argparse.Namespace) -> str:
    """Execute one CLI command against the proxy and return the text to print."""

    async with httpx.AsyncClient(timeout=args.timeout) as http_client:
        mentor = MentorClient(http_client, url=args.url, auth_token=args.token)

        if args.command == "ask":
            return (await mentor.invoke(args.prompt)).content
        if args.command == "chat":
            return await mentor.get_chat_response(args.message)
        if args.command == "quote":
            try:
                return await mentor.generate_motivational_quote()
            except MentorClientError:
                logger.warning("Falling back to an offline quote")
                return random_fallback_quote()
        if args.command == "roadmap":
            roadmap = await mentor.generate_roadmap(args.skill, args.level)
            return roadmap.model_dump_json(by_alias=True, indent=2)

    raise ValueError(f"Unknown command: {args.command}")


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Command line client for the mentor proxy.")
    parser.add_argument("--url", default=DEFAULT_URL, help="Proxy URL (default: %(default)s)")
    parser.add_argument("--token", help="Optional bearer token sent to the proxy.")
    parser.add_argument(
        "--timeout", type=float, default=60.0, help="Seconds to wait for the mentor to answer."
    )
    parser.add_argument("--log-level", default="WARNING", help="Logging level.")

    commands = parser.add_subparsers(dest="command", required=True)
    ask = commands.add_parser("ask", help="Send a raw prompt.")
    ask.add_argument("prompt")
    chat = commands.add_parser("chat", help="Ask the career mentor a question.")
    chat.add_argument("message")
    commands.add_parser("quote", help="Get a motivational quote.")
    roadmap = commands.add_parser("roadmap", help="Generate a learning roadmap.")
    roadmap.add_argument("skill")
    roadmap.add_argument(
        "--level", choices=("beginner", "intermediate", "advanced"), default="beginner"
    )
    return parser.parse_args(argv)


def main(argv: list[str] | None = None) -> None:
    args = parse_args(argv)
    logging.basicConfig(level=getattr(logging, args.log_level.upper(), logging.INFO))
    try:
        output = asyncio.run(run_client(args))
    except MentorClientError as exc:
        logger.error("Mentor request failed: %s", exc.message)
        raise SystemExit(1) from exc
    except KeyboardInterrupt:  # pragma: no cover - manual usage only
        return
    print(output)


if __name__ == "__main__":  # pragma: no cover
    main()

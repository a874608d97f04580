import argparse
import asyncio
import sys
import uuid

import uvicorn
from dotenv import load_dotenv
from loguru import logger

from websearch_chatbot.agent import Agent
from websearch_chatbot.app_config import load_json_config, parse_app_config, resolve_runtime_env
from websearch_chatbot.bootstrap import AppRuntime, bootstrap_runtime
from websearch_chatbot.errors import UpstreamApiError
from websearch_chatbot.server import create_app

_LINE_PREFIX = "assistant> "
_USER_PROMPT = "you> "


def _parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(prog="websearch_chatbot")
    sub = parser.add_subparsers(dest="command")
    sub.add_parser("serve", help="run the HTTP server (default)")
    sub.add_parser("chat", help="interactive chat in the terminal")
    ask = sub.add_parser("ask", help="ask one question and print the answer")
    ask.add_argument("question")
    args = parser.parse_args(argv)
    if args.command is None:
        args.command = "serve"
    return args


async def _interactive(agent: Agent) -> None:
    session_id = uuid.uuid4().hex
    print("websearch-chatbot (type 'exit' to quit)")
    while True:
        try:
            user_input = input(_USER_PROMPT)
        except (EOFError, KeyboardInterrupt):
            break

        trimmed = user_input.strip()
        if trimmed in ("exit", "quit"):
            break
        if not trimmed:
            continue

        try:
            reply = await agent.chat(trimmed, session_id)
        except UpstreamApiError as ex:
            logger.error(f"Unhandled error: {ex}")
            continue
        print(f"{_LINE_PREFIX}{reply}\n")


def _print_banner(runtime: AppRuntime, model: str) -> None:
    print(f"Model: {model}")
    print("Tools:")
    for t in runtime.tools:
        print(f"  - {t.name}")
    if runtime.log_descriptions:
        print(f"Logging: {', '.join(runtime.log_descriptions)}")
    print()


def main(argv: list[str] | None = None) -> None:
    args = _parse_args(argv)
    load_dotenv()

    app_config = parse_app_config(load_json_config())
    env = resolve_runtime_env(app_config.provider_name)
    if not env.provider_api_key:
        logger.error(f"{env.provider_env_var} environment variable is required.")
        sys.exit(1)
    if not env.tavily_api_key:
        logger.error("TAVILY_API_KEY environment variable is required.")
        sys.exit(1)

    runtime = bootstrap_runtime(app_config, env)

    if args.command == "ask":
        try:
            answer = asyncio.run(runtime.agent.chat(args.question, uuid.uuid4().hex))
        except UpstreamApiError as ex:
            logger.error(str(ex))
            sys.exit(1)
        print(answer)
        return

    _print_banner(runtime, app_config.model)

    if args.command == "chat":
        asyncio.run(_interactive(runtime.agent))
        return

    logger.info(f"Server is running on http://{app_config.host}:{app_config.port}")
    uvicorn.run(create_app(runtime.agent), host=app_config.host, port=app_config.port)


if __name__ == "__main__":
    main()

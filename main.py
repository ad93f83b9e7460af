# =============================================================================
# main.py  —  Console host for the Gemini tool server
# =============================================================================
#
# HOW TO RUN:
#   uv run python main.py                          (interactive)
#   uv run python main.py "find ramen near 48.85,2.35"   (one question, then exit)
#
# WHAT HAPPENS:
#   1. Creates the Google ADK agent (agent/gemini_agent.py)
#   2. The agent spawns the FastMCP tool server (tools/mcp_server.py) over stdio
#   3. Each question goes to the agent, which picks a Gemini tool
#   4. Tool calls are echoed as they happen; the final answer is printed
#
# REQUIREMENTS:
#   GEMINI_API_KEY must be set (environment or .env).  Both the agent's own
#   model and the tool server's GeminiClient use it.
# =============================================================================

import asyncio
import sys

from dotenv import load_dotenv

# The tool server subprocess inherits this environment, so the .env file is
# read once here for both processes.
load_dotenv()

from google.adk.runners import Runner
from google.adk.sessions import InMemorySessionService
from google.genai import types

from agent.gemini_agent import create_agent

APP_NAME = "gemini_tools"
USER_ID = "console_user"
QUIT_WORDS = ("quit", "exit", "q")
RULE = "-" * 70


async def start_session():
    """Build the agent, its runner and a fresh in-memory session."""
    session_service = InMemorySessionService()
    runner = Runner(agent=create_agent(), app_name=APP_NAME, session_service=session_service)
    session = await session_service.create_session(app_name=APP_NAME, user_id=USER_ID)
    return runner, session.id


async def ask(runner: Runner, session_id: str, question: str) -> str:
    """Send one question and return the agent's last text part.

    Earlier text parts are the agent narrating between tool calls; each
    tool call is echoed as it streams past.
    """
    message = types.Content(role="user", parts=[types.Part(text=question)])
    answer = ""
    async for event in runner.run_async(user_id=USER_ID, session_id=session_id, new_message=message):
        if not (event.content and event.content.parts):
            continue
        for part in event.content.parts:
            if part.function_call:
                print(f"  🔧 {part.function_call.name}({_short_args(part.function_call.args)})")
            if part.text:
                answer = part.text
    return answer


def _short_args(args) -> str:
    if not args:
        return ""
    return ", ".join(f"{key}={str(value)[:40]!r}" for key, value in args.items())


def print_answer(answer: str) -> None:
    print(RULE)
    if answer:
        print(f"\n🤖 Agent:\n\n{answer}")
    else:
        print("\n⚠️  No response generated. Check the [MCP] log lines above for a tool error.")


async def run_once(question: str) -> None:
    runner, session_id = await start_session()
    print_answer(await ask(runner, session_id, question))


async def run_console() -> None:
    """Interactive loop until the user quits."""
    print("=" * 70)
    print("  GEMINI TOOL HOST  ·  Google ADK + FastMCP + Gemini")
    print("=" * 70)
    print("\n🔧 Starting agent and tool server...")
    runner, session_id = await start_session()
    print("✅ Ready. Try a web search, a map query, some maths or an image.")
    print(f"   (Type {' / '.join(QUIT_WORDS)} to exit)\n")

    while True:
        try:
            question = input("\n🧑 You: ").strip()
        except (EOFError, KeyboardInterrupt):
            print("\n\n👋 Goodbye!")
            return

        if question.lower() in QUIT_WORDS:
            print("\n👋 Goodbye!")
            return
        if not question:
            continue

        print(RULE)
        print_answer(await ask(runner, session_id, question))


if __name__ == "__main__":
    if len(sys.argv) > 1:
        asyncio.run(run_once(" ".join(sys.argv[1:])))
    else:
        asyncio.run(run_console())

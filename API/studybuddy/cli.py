"""
StudyBuddy command line.

  studybuddy serve                  run the API with uvicorn
  studybuddy register --name ...    create the learner profile
  studybuddy quiz                   take the learning-style quiz
  studybuddy chat                   chat with the tutor (registers first if needed)
"""
from __future__ import annotations

import argparse
import asyncio
import sys

import httpx
from pydantic import ValidationError

from studybuddy.agents.learning_style import LearningStyleQuiz
from studybuddy.client.profile_store import ProfileNotFoundError, ProfileStore
from studybuddy.client.registration import form_errors, register
from studybuddy.client.render import render_message, render_plain
from studybuddy.client.session import TutorSession
from studybuddy.core.logging import configure_logging
from studybuddy.core.settings import settings


def _register_interactive(store: ProfileStore) -> None:
    print("Student Registration")
    while True:
        name = input("Child's name: ")
        age = input("Age: ")
        style = input("Learning style (visual/auditory/kinesthetic/reading): ")
        try:
            profile = register(store, name=name, age=age, learning_style=style)
        except ValidationError as exc:
            for field, message in form_errors(exc).items():
                print(f"  {field}: {message}")
            continue
        print(f"Welcome, {profile.name}!")
        return


def cmd_register(args: argparse.Namespace) -> int:
    store = ProfileStore(args.data_dir)
    if args.name is None:
        _register_interactive(store)
        return 0
    try:
        profile = register(store, name=args.name, age=args.age, learning_style=args.style)
    except ValidationError as exc:
        for field, message in form_errors(exc).items():
            print(f"{field}: {message}", file=sys.stderr)
        return 2
    print(f"Registered {profile.name} ({profile.age}, {profile.learning_style.value} learner)")
    return 0


def cmd_quiz(args: argparse.Namespace) -> int:
    store = ProfileStore(args.data_dir)
    quiz = LearningStyleQuiz()
    while not quiz.finished:
        question = quiz.question
        print(f"\nQuestion {quiz.current + 1} of {len(quiz.questions)}: {question['question']}")
        for number, option in enumerate(question["options"], start=1):
            print(f"  {number}. {option['label']}")
        choice = input("Choose 1-4 (b = back): ").strip().lower()
        if choice == "b":
            quiz.previous()
            continue
        if choice not in {"1", "2", "3", "4"}:
            continue
        quiz.answer(question["options"][int(choice) - 1]["value"])
        quiz.next()

    style = quiz.result["learning_style"]
    if style is None:
        print("No answers given.")
        return 1
    print(f"\nYour child is a {style.value} learner. {quiz.result['description']}")
    if store.update_learning_style(style) is None:
        print("No registered profile yet; register first to save this result.")
    return 0


async def _chat(store: ProfileStore, base_url: str) -> None:
    async with httpx.AsyncClient(base_url=base_url, timeout=None) as http:
        try:
            session = TutorSession.from_store(store, http)
        except ProfileNotFoundError:
            _register_interactive(store)
            session = TutorSession.from_store(store, http)

        printed = 0

        def _stream_text(message) -> None:
            nonlocal printed
            # Only the plain-text part streams; images are shown once the turn ends.
            if message.images:
                return
            print(message.content[printed:], end="", flush=True)
            printed = len(message.content)

        print(f"Welcome, {session.profile.name}! Ask anything (empty line to quit).")
        while True:
            text = input("\nMe: ")
            if not text.strip():
                return
            printed = 0
            print("AI: ", end="", flush=True)
            reply = await session.send(text, on_update=_stream_text)
            if reply is None:
                print("(the tutor is unavailable right now)")
            elif reply.images:
                # Text already streamed; show the pictures that follow it.
                print("\n" + render_plain(render_message(reply)[1:]))


def cmd_chat(args: argparse.Namespace) -> int:
    asyncio.run(_chat(ProfileStore(args.data_dir), args.base_url))
    return 0


def cmd_serve(args: argparse.Namespace) -> int:
    import uvicorn

    uvicorn.run("studybuddy.main:app", host=args.host, port=args.port)
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="studybuddy", description=__doc__, formatter_class=argparse.RawDescriptionHelpFormatter)
    parser.add_argument("--data-dir", default=settings.client_data_dir, help="Where the learner profile is kept")
    sub = parser.add_subparsers(dest="command", required=True)

    serve = sub.add_parser("serve", help="Run the API server")
    serve.add_argument("--host", default=settings.app_host)
    serve.add_argument("--port", type=int, default=settings.app_port)
    serve.set_defaults(func=cmd_serve)

    reg = sub.add_parser("register", help="Create the learner profile")
    reg.add_argument("--name")
    reg.add_argument("--age")
    reg.add_argument("--style", choices=["visual", "auditory", "kinesthetic", "reading"])
    reg.set_defaults(func=cmd_register)

    quiz = sub.add_parser("quiz", help="Take the learning-style quiz")
    quiz.set_defaults(func=cmd_quiz)

    chat = sub.add_parser("chat", help="Chat with the tutor")
    chat.add_argument("--base-url", default=settings.api_base_url)
    chat.set_defaults(func=cmd_chat)
    return parser


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    configure_logging(settings.log_level)
    return args.func(args)


if __name__ == "__main__":
    sys.exit(main())

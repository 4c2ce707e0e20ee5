import asyncio
import sys
import threading
import time

from dotenv import load_dotenv

# Load environment variables first
load_dotenv()

from config.config import Config
from models.search_query import SearchQuery
from orchestrator.engine import SearchBoxEngine
from orchestrator.factory import EngineFactory


def show_loading_animation(stop_event: threading.Event) -> None:
    """
    Show a loading animation in the console.

    Args:
        stop_event: A threading.Event that will be set to stop the animation
    """
    while not stop_event.is_set():
        for char in '|/-\\':
            if stop_event.is_set():
                break
            sys.stdout.write(f'\r\033[93mSuggesting {char}\033[0m')
            sys.stdout.flush()
            time.sleep(0.1)

    sys.stdout.write('\r' + ' ' * 20 + '\r')
    sys.stdout.flush()


def run_with_animation(loop: asyncio.AbstractEventLoop, coro):
    stop_animation = threading.Event()
    loading_thread = threading.Thread(target=show_loading_animation, args=(stop_animation,))
    loading_thread.daemon = True
    loading_thread.start()
    try:
        return loop.run_until_complete(coro)
    finally:
        stop_animation.set()
        loading_thread.join()


def print_suggestions(engine: SearchBoxEngine) -> None:
    state = engine.state
    if state.error_message:
        print(f"\n\033[91m{state.error_message}\033[0m  (type 'dismiss' to hide)")

    groups = engine.suggestion_groups
    if not groups:
        print("\n(no suggestions)\n")
        return

    for group in groups:
        print(f"\n{group.group_name}")
        for item in group.items:
            suggestion = item.suggestion
            line = f"  [{item.index}] {suggestion.plain_text}"
            if suggestion.is_person and suggestion.person_fields:
                line += f"  - {suggestion.person_fields}"
            if suggestion.is_link:
                line += f"  -> {suggestion.target_url}"
            print(line)
    print()


def on_search(query: SearchQuery) -> None:
    if not query.raw_input_value:
        return
    print(f"\n\033[92mSearching for: {query.effective_query}\033[0m")
    if query.enhanced_query and query.enhanced_query != query.raw_input_value:
        print(f"(raw input: {query.raw_input_value})")
    print()


def print_help() -> None:
    print("\n=== Available Commands ===")
    print("<text>      - Type into the search box and show suggestions")
    print(":<n>        - Select suggestion number n")
    print("/<text>     - Search for text (empty searches the current input)")
    print("clear       - Clear the search box")
    print("dismiss     - Dismiss the current error")
    print("state       - Show the engine state")
    print("help        - Show this help message")
    print("exit/quit   - Exit the program\n")


def main():
    config = Config()
    if not config.validate():
        sys.exit(1)

    try:
        factory = EngineFactory.from_config(config)
    except ValueError as e:
        print(f"Error: {e}")
        sys.exit(1)

    loop = asyncio.new_event_loop()
    engine = factory.create(on_search=on_search)

    try:
        run_with_animation(loop, engine.mount())

        print("\n=== Search Box ===")
        print("Type to get suggestions, 'help' for commands\n")
        print_suggestions(engine)

        while True:
            try:
                user_input = input(f"Search [{engine.state.search_input_value}]: ").rstrip("\n")
                command = user_input.strip().lower()

                if command in ('exit', 'quit'):
                    print("\nGoodbye!")
                    break

                if command == 'help':
                    print_help()
                    continue

                if command == 'state':
                    for key, value in engine.state.to_dict().items():
                        if not isinstance(value, list):
                            print(f"  {key}: {value}")
                    print()
                    continue

                if command == 'dismiss':
                    engine.dismiss_error()
                    continue

                if command == 'clear':
                    loop.run_until_complete(engine.change_input_now(""))
                    loop.run_until_complete(engine.submit("", is_reset=True))
                    print_suggestions(engine)
                    continue

                if user_input.startswith(':'):
                    try:
                        index = int(user_input[1:])
                        loop.run_until_complete(engine.select_index(index))
                    except (ValueError, IndexError) as e:
                        print(f"Invalid selection: {e}\n")
                    continue

                if user_input.startswith('/'):
                    text = user_input[1:].strip() or engine.state.search_input_value
                    run_with_animation(loop, engine.submit(text))
                    continue

                run_with_animation(loop, engine.change_input_now(user_input))
                print_suggestions(engine)

            except KeyboardInterrupt:
                print("\nExiting...")
                break
            except EOFError:
                break
    finally:
        loop.run_until_complete(engine.unmount())
        loop.close()


if __name__ == "__main__":
    main()

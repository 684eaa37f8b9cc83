from typing import List
import argparse
import asyncio

from social.graze.skylink.app.config import (
    ConfigStore,
    FallbackBehavior,
    Settings,
)
from social.graze.skylink.app.orchestrator import ResolutionOrchestrator
from social.graze.skylink.resolve.http import create_client_session


async def realMain() -> None:
    parser = argparse.ArgumentParser(
        prog="resolve", description="Resolve bsky.app permalinks"
    )
    parser.add_argument("permalink", nargs="+", help="The permalink(s) to resolve.")
    parser.add_argument(
        "--direct",
        action="store_true",
        help="Resolve the PDS URL without checking the bridge.",
    )
    parser.add_argument(
        "--fallback",
        choices=[behavior.value for behavior in FallbackBehavior],
        default=None,
        help="What to do when the authority is not bridged.",
    )

    args = vars(parser.parse_args())

    settings = Settings()
    config = ConfigStore.from_settings(settings)
    if args.get("fallback") is not None:
        config.update({"fallbackBehavior": args.get("fallback")})

    permalinks: List[str] = args.get("permalink", [])

    async with create_client_session(settings.http_timeout) as session:
        orchestrator = ResolutionOrchestrator(session, config)
        for permalink in permalinks:
            result = await orchestrator.handle(
                permalink, lambda _: None, direct=args.get("direct", False)
            )
            if result.url is None:
                print(f"{permalink} noop")
            elif result.bridged:
                print(f"{permalink} bridged {result.url}")
            else:
                print(f"{permalink} pds {result.url}")


def main() -> None:
    asyncio.run(realMain())


if __name__ == "__main__":
    from social.graze.skylink.app.cli import invoke

    invoke()

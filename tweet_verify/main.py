"""Main script for running the tweet fact-checker.

``python -m tweet_verify.main`` starts an interactive loop that checks posts
in-process. ``python -m tweet_verify.main serve`` runs the HTTP API instead.
"""

import asyncio
import os
import sys

from dotenv import load_dotenv

from .domain.models.fact_check_result import FactCheckResult, FactCheckStatus
from .domain.services.fact_checking_service import generate_request_id
from .domain.services.text_acquisition import TextAcquisitionError
from .infrastructure.config import AppSettings
from .infrastructure.dependencies import ServiceContainer


def serve() -> None:
    """Run the FastAPI application with uvicorn."""
    import uvicorn

    uvicorn.run(
        "tweet_verify.api.app:app",
        host=os.getenv("HOST", "0.0.0.0"),
        port=int(os.getenv("PORT", "8000")),
    )


def print_result(result: FactCheckResult) -> None:
    """Print a terminal record in a readable form."""
    if result.status is FactCheckStatus.ERROR:
        print(f"\nFact-check failed: {result.error}")
        return

    print("\nResults:")
    for i, claim_result in enumerate(result.claim_results, 1):
        verdict = claim_result.verdict
        print(f"\n{i}. {claim_result.claim}")
        print(f"   Verdict: {verdict.label.value} ({verdict.confidence.value} confidence)")
        print(f"   {verdict.explanation}")
        for url in claim_result.sources:
            print(f"   - {url}")

    print(f"\nOverall: {result.overall_assessment}")


async def main():
    """Run the interactive fact-checker."""
    print("Tweet Verify - AI-powered fact checking for social media posts")
    print("---------------------------------------------------------------")

    # Results only need to live for this session
    settings = AppSettings.from_env().model_copy(update={"kv_store": None})
    container = ServiceContainer(settings)
    await container.startup()

    resolver = container.get_text_resolver()
    service = container.get_fact_checking_service()

    try:
        while True:
            entry = input("\nEnter post text or URL to fact-check (or 'quit' to exit): ").strip()
            if entry.lower() in ('quit', 'exit', 'q'):
                break

            is_url = entry.startswith(("http://", "https://"))
            print("\nChecking facts...")
            try:
                tweet_text = await resolver.resolve(
                    tweet_text=None if is_url else entry,
                    tweet_url=entry if is_url else None,
                )
                tweet_text = service.validate_text(tweet_text)
            except (TextAcquisitionError, ValueError) as e:
                print(f"\nCould not check this post: {e}")
                continue

            record = FactCheckResult.processing(
                generate_request_id(), tweet_text, entry if is_url else None
            )
            result = await service.run_pipeline(record, base_url="http://localhost")
            print_result(result)

    finally:
        # Clean up
        await container.shutdown()


if __name__ == "__main__":
    load_dotenv()
    if len(sys.argv) > 1 and sys.argv[1] == "serve":
        serve()
    else:
        asyncio.run(main())

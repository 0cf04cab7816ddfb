#!/usr/bin/env python3
"""
Sign in to a running proxy, submit a solution file and poll for the verdict.

Usage:
    LC_COOKIE='csrftoken=...; LEETCODE_SESSION=...' \
        python scripts/submit_and_poll.py two-sum python3 solution.py
"""

import argparse
import asyncio
import os
import sys
from pathlib import Path

import httpx

from lcp.clients.status_poller import SubmissionPoller

BASE_URL = os.environ.get("LCP_BASE_URL", "http://localhost:8787")


async def run(slug: str, lang: str, source: Path, domain: str, interval: float) -> int:
    cookie = os.environ.get("LC_COOKIE", "")
    if not cookie:
        print("❌ Set LC_COOKIE to the Cookie header copied from the browser")
        return 2

    async with httpx.AsyncClient(base_url=BASE_URL, timeout=None) as client:
        try:
            response = await client.post(
                "/api/auth/cookie", json={"cookie": cookie, "domain": domain}
            )
        except httpx.HTTPError as e:
            print(f"❌ Proxy is not reachable at {BASE_URL}: {e}")
            print("   Start with: uvicorn lcp.server:app --port 8787")
            return 1

        if response.status_code != 200:
            print(f"❌ Sign-in failed: {response.json().get('error')}")
            return 1
        signed_in = response.json()
        print(f"✅ Signed in as {signed_in['user'].get('name')}")
        if signed_in.get("emailNotVerified"):
            print("   ⚠️  Account email is not verified; the judge may refuse submissions")

        response = await client.post(
            "/api/submit",
            json={"slug": slug, "lang": lang, "code": source.read_text(encoding="utf-8")},
        )
        if response.status_code != 200:
            print(f"❌ Submit failed: {response.json()}")
            return 1
        submission_id = response.json()["submissionId"]
        print(f"✅ Submitted #{submission_id}, polling every {interval}s")

        async def check():
            resp = await client.get(
                f"/api/submission/{submission_id}/check", params={"slug": slug}
            )
            resp.raise_for_status()
            snapshot = resp.json().get("submission") or {}
            print(f"   state={snapshot.get('state')}")
            return snapshot

        poller = SubmissionPoller(check, interval=interval)
        try:
            result = await poller.wait()
        except asyncio.CancelledError:
            print("Polling cancelled")
            return 130

    print("=" * 60)
    print(f"Status:  {result.get('status_msg')}")
    print(f"Runtime: {result.get('status_runtime')}")
    print(f"Memory:  {result.get('status_memory')}")
    print(f"Passed:  {result.get('total_correct')}/{result.get('total_testcases')}")
    print("=" * 60)
    return 0 if result.get("status_msg") == "Accepted" else 1


def main() -> None:
    parser = argparse.ArgumentParser(description=__doc__.splitlines()[1])
    parser.add_argument("slug")
    parser.add_argument("lang")
    parser.add_argument("source", type=Path)
    parser.add_argument("--domain", default="leetcode.com")
    parser.add_argument("--interval", type=float, default=1.0)
    args = parser.parse_args()

    sys.exit(asyncio.run(run(args.slug, args.lang, args.source, args.domain, args.interval)))


if __name__ == "__main__":
    main()

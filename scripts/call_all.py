#!/usr/bin/env python3
"""Upload a CSV of businesses and/or start a bulk call run against a running server."""

import argparse
import os
import sys

import httpx
from dotenv import load_dotenv


def main():
    load_dotenv()

    parser = argparse.ArgumentParser(description="Valor discount caller admin client")
    parser.add_argument("--csv", help="CSV file to upload before calling")
    parser.add_argument("--no-call", action="store_true", help="Only upload, do not place calls")
    parser.add_argument("--base-url", default=os.environ.get("API_BASE_URL", "http://localhost:8000"))
    parser.add_argument("--token", default=os.environ.get("API_TOKEN", ""), help="Supabase access token")
    args = parser.parse_args()

    headers = {"Authorization": f"Bearer {args.token}"} if args.token else {}

    with httpx.Client(base_url=args.base_url, headers=headers, timeout=120.0) as client:
        if args.csv:
            print(f"Uploading: {args.csv}")
            with open(args.csv, "rb") as f:
                response = client.post("/api/upload-csv", files={"file": (os.path.basename(args.csv), f, "text/csv")})
            response.raise_for_status()
            data = response.json()
            print(f"[UPLOAD] {data['message']}: {data['recordsProcessed']} inserted, {data['skipped']} skipped")
            for error in data["errors"]:
                print(f"  {error}")

        if args.no_call:
            return

        print("-" * 50)
        response = client.post("/api/call-all")
        response.raise_for_status()
        data = response.json()
        print(f"[CALLS] {data['message']} (total {data['total']}, batch {data['batch_id']})")

        if data["failed"]:
            sys.exit(1)


if __name__ == "__main__":
    main()

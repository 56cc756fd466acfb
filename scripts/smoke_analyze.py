"""
Smoke test for a running instance: posts a small batch to /api/analyze and
prints the per-item outcome.

Usage:
    TEST_USER_ID=user_123 python scripts/smoke_analyze.py
    LOCAL_API_URL=http://localhost:8000 python scripts/smoke_analyze.py
"""

import os
import sys

import requests
from dotenv import load_dotenv

load_dotenv(".env.local")

API_URL = os.getenv("LOCAL_API_URL", "http://localhost:8000").rstrip("/")
USER_ID = os.getenv("TEST_USER_ID")

SAMPLE_ITEMS = [
    {
        "text": "The product quality is excellent and shipping was fast!",
        "rating": 5,
        "source": "website",
        "productId": "prod_001",
        "username": "john_doe",
    },
    {
        "text": "Customer service was slow to respond. Waited 3 days for a reply.",
        "rating": 2,
        "source": "email",
        "productId": "prod_002",
        "username": "jane_smith",
    },
    {
        "text": "Good value for money, but the packaging could be better.",
        "rating": 4,
        "source": "app",
        "productId": "prod_001",
    },
]

if not USER_ID:
    print("❌ TEST_USER_ID is not set")
    sys.exit(1)

print(f"🚀 POST {API_URL}/api/analyze ({len(SAMPLE_ITEMS)} items, user={USER_ID})")

try:
    response = requests.post(
        f"{API_URL}/api/analyze",
        json={"items": SAMPLE_ITEMS},
        headers={"X-User-Id": USER_ID},
        timeout=120,
    )
except requests.RequestException as e:
    print(f"❌ Request failed: {e}")
    sys.exit(1)

body = response.json()
if response.status_code != 200:
    print(f"❌ {response.status_code}: {body.get('error', body)}")
    sys.exit(1)

data = body["data"]
print(f"✅ {data['message']}")
if data.get("warning"):
    print(f"⚠️ {data['warning']}")

for item in data["results"]:
    if not item["success"]:
        print(f"  [{item['index']}] ❌ {item.get('error')}")
        continue
    analysis = item["analysis"]
    score = analysis.get("sentiment_score")
    print(
        f"  [{item['index']}] {analysis['sentiment']}"
        f"{f' ({score:.2f})' if score is not None else ''}"
        f" topics={', '.join(analysis['topics']) or '-'}"
    )
    print(f"      summary: {analysis['summary']}")
    print(f"      recommendation: {analysis['recommendation']}")

sys.exit(0 if data["failed"] == 0 else 2)

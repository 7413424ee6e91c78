"""
Order Simulation Script

Fires a burst of random orders with per-instance options at the API, then
prints the kitchen totals so they can be compared against a rebuild.
Run from project root: python scripts/simulate.py

Version: 1.0.0
"""

import argparse
import asyncio
import random
import sys
import time
from datetime import datetime
from typing import Any

import httpx

# Configuration
API_BASE_URL = "http://localhost:8001"
TOTAL_ORDERS = 50

# Sample data for random orders
FIRST_NAMES = ["John", "Jane", "Mike", "Sarah", "Tom", "Emma", "David", "Lisa", "Chris", "Amy"]
LAST_NAMES = ["Smith", "Johnson", "Williams", "Brown", "Jones", "Garcia", "Miller", "Davis", "Wilson", "Taylor"]
DELIVERY_MODES = ["pickup", "delivery", "office drop-off"]


def generate_random_customer() -> dict[str, str]:
    """Generate random customer info."""
    first = random.choice(FIRST_NAMES)
    last = random.choice(LAST_NAMES)
    return {
        "name": f"{first} {last}",
        "phone": f"555-{random.randint(100, 999)}-{random.randint(1000, 9999)}",
        "delivery": random.choice(DELIVERY_MODES),
        "email": f"{first.lower()}.{last.lower()}@example.com",
    }


def generate_random_items(menu: list[dict[str, Any]]) -> list[dict[str, Any]]:
    """Generate random items with one option pick per group per instance."""
    items = []
    for item in random.sample(menu, k=random.randint(1, min(3, len(menu)))):
        qty = random.randint(1, 3)
        groups = [g.split("/") for g in item["options"].split("|")] if item.get("options") else []
        instances = [
            {"options": [random.choice(choices).strip() for choices in groups]}
            for _ in range(qty)
        ]
        items.append({
            "name": item["name"],
            "qty": qty,
            "price": item["price"],
            "instances": instances,
        })
    return items


def generate_order_payload(menu: list[dict[str, Any]]) -> dict[str, Any]:
    """Generate payload for /api/orders endpoint."""
    customer = generate_random_customer()
    return {
        **customer,
        "buddy": random.choice([None, "", "Sam"]),
        "comments": random.choice([None, "Extra napkins", "Call on arrival"]),
        "items": generate_random_items(menu),
    }


async def send_order(
    client: httpx.AsyncClient,
    menu: list[dict[str, Any]],
    order_num: int,
) -> dict[str, Any]:
    """Send one order."""
    payload = generate_order_payload(menu)
    start_time = time.time()

    try:
        response = await client.post(f"{API_BASE_URL}/api/orders", json=payload, timeout=30.0)
        elapsed = round(time.time() - start_time, 3)

        if response.status_code == 200:
            data = response.json()
            return {
                "order_num": order_num,
                "success": True,
                "entry_id": data.get("entry_id"),
                "projected": data.get("projected"),
                "time": elapsed,
            }
        return {
            "order_num": order_num,
            "success": False,
            "error": response.text[:100],
            "time": elapsed,
        }
    except httpx.HTTPError as e:
        elapsed = round(time.time() - start_time, 3)
        return {
            "order_num": order_num,
            "success": False,
            "error": str(e)[:100],
            "time": elapsed,
        }


async def run_simulation(num_orders: int = TOTAL_ORDERS) -> dict[str, Any]:
    """
    Run the simulation.

    Args:
        num_orders: Number of orders to send
    """
    print("=" * 70)
    print("🔥 ORDER SIMULATION")
    print("=" * 70)
    print(f"📋 Total Orders: {num_orders}")
    print(f"🎯 Target: {API_BASE_URL}")
    print(f"⏰ Started: {datetime.now().strftime('%H:%M:%S')}")
    print("=" * 70)

    start_time = time.time()

    async with httpx.AsyncClient() as client:
        menu_response = await client.get(f"{API_BASE_URL}/api/menu")
        menu_response.raise_for_status()
        menu = menu_response.json()["menu"]
        if not menu:
            print("\n❌ The menu is empty, nothing to order.")
            return {"total": num_orders, "successful": 0, "failed": num_orders}

        tasks = [send_order(client, menu, i + 1) for i in range(num_orders)]
        results = await asyncio.gather(*tasks)

        projection = (await client.get(f"{API_BASE_URL}/api/projection")).json()

    total_time = round(time.time() - start_time, 2)

    successful = [r for r in results if r["success"]]
    failed = [r for r in results if not r["success"]]
    unprojected = [r for r in successful if not r.get("projected")]

    print("\n" + "=" * 70)
    print("📊 SIMULATION RESULTS")
    print("=" * 70)
    print(f"\n✅ Accepted Orders: {len(successful)}/{num_orders}")
    print(f"❌ Failed Orders: {len(failed)}/{num_orders}")
    print(f"⚠️  Journaled but not projected: {len(unprojected)}")
    print(f"⏱️  Total Time: {total_time}s")

    if successful:
        avg_time = round(sum(r["time"] for r in successful) / len(successful), 3)
        print(f"\n📈 Average Response: {avg_time}s")

    if failed:
        print("\n⚠️  Failed Order Details (showing first 5):")
        for f in failed[:5]:
            print(f"   Order #{f['order_num']}: {f.get('error', 'Unknown error')}")

    print("\n🍳 KITCHEN")
    print("-" * 70)
    for line in projection.get("kitchen", []):
        print(f"   {line['item']:<25} {line['count']:>4}  {line['options']}")

    print("\n" + "=" * 70)
    print("🔍 VERIFICATION STEPS")
    print("=" * 70)
    print("1. Run: python scripts/verify.py")
    print("2. Run: python scripts/rebuild.py and compare the kitchen totals")
    print("=" * 70)

    return {
        "total": num_orders,
        "successful": len(successful),
        "failed": len(failed),
        "total_time": total_time,
        "results": results,
    }


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="Order Simulation Script")
    parser.add_argument("--orders", type=int, default=TOTAL_ORDERS, help="Number of orders")
    parser.add_argument("--url", default=API_BASE_URL, help="API base URL")
    args = parser.parse_args()

    API_BASE_URL = args.url
    summary = asyncio.run(run_simulation(args.orders))
    sys.exit(0 if summary["failed"] == 0 else 1)

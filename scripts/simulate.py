"""
Order Load Simulation Script

Registers a throwaway customer, reads the live menu, then fires many
concurrent orders at a running API and reports timings.
Run from project root: python scripts/simulate.py --base-url http://localhost:5000
"""

import argparse
import asyncio
import random
import sys
import time
from datetime import datetime
from typing import Any, Optional

import httpx

# Windows event loop fix
if sys.platform == "win32":
    asyncio.set_event_loop_policy(asyncio.WindowsSelectorEventLoopPolicy())

API_BASE_URL = "http://localhost:5000"
TOTAL_ORDERS = 50

STREETS = ["MG Road", "Park Street", "Linking Road", "Brigade Road", "FC Road", "Anna Salai"]
PAYMENT_METHODS = ["cash", "card", "upi"]
INSTRUCTIONS = [None, "Extra napkins", "Ring doorbell", "Leave at door", "Less spicy"]


def generate_customer() -> dict[str, str]:
    """Random registration payload with a unique-enough mobile number."""
    return {
        "fullName": f"Load Tester {random.randint(1000, 9999)}",
        "mobileNumber": f"9{random.randint(100000000, 999999999)}",
        "password": "loadtest123",
    }


def generate_order_payload(menu: list[dict], contact: str) -> dict[str, Any]:
    """Random order drawn from the available menu items."""
    lines = random.sample(menu, k=min(len(menu), random.randint(1, 4)))
    return {
        "items": [
            {"menuItem": item["id"], "quantity": random.randint(1, 3)}
            for item in lines
        ],
        "deliveryAddress": f"{random.randint(1, 999)} {random.choice(STREETS)}",
        "contactNumber": contact,
        "paymentMethod": random.choice(PAYMENT_METHODS),
        "specialInstructions": random.choice(INSTRUCTIONS),
    }


async def register_customer(client: httpx.AsyncClient) -> tuple[str, str]:
    """Create a customer and return (token, mobile number)."""
    customer = generate_customer()
    response = await client.post(f"{API_BASE_URL}/api/auth/register", json=customer)
    response.raise_for_status()
    return response.json()["data"]["token"], customer["mobileNumber"]


async def fetch_menu(client: httpx.AsyncClient) -> list[dict]:
    response = await client.get(f"{API_BASE_URL}/api/menu")
    response.raise_for_status()
    return [item for item in response.json()["data"] if item["isAvailable"]]


async def send_order(
    client: httpx.AsyncClient,
    order_num: int,
    token: str,
    menu: list[dict],
    contact: str,
) -> dict[str, Any]:
    """Place one order and time the round trip."""
    payload = generate_order_payload(menu, contact)
    start_time = time.time()

    try:
        response = await client.post(
            f"{API_BASE_URL}/api/orders",
            json=payload,
            headers={"Authorization": f"Bearer {token}"},
            timeout=30.0,
        )
        elapsed = round(time.time() - start_time, 3)

        if response.status_code == 201:
            data = response.json()["data"]
            return {
                "order_num": order_num,
                "success": True,
                "order_id": data.get("id"),
                "total": data.get("totalAmount"),
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


async def run_simulation(num_orders: int = TOTAL_ORDERS) -> Optional[dict[str, Any]]:
    """
    Fire concurrent orders and print a summary.
    """
    print("=" * 70)
    print("ORDER LOAD SIMULATION")
    print("=" * 70)
    print(f"Total Orders: {num_orders}")
    print(f"Target: {API_BASE_URL}")
    print(f"Started: {datetime.now().strftime('%H:%M:%S')}")
    print("=" * 70)

    async with httpx.AsyncClient() as client:
        token, contact = await register_customer(client)
        menu = await fetch_menu(client)
        if not menu:
            print("\nNo available menu items. Add some as admin first.")
            return None

        start_time = time.time()
        tasks = [send_order(client, i + 1, token, menu, contact) for i in range(num_orders)]
        results = await asyncio.gather(*tasks)

    total_time = round(time.time() - start_time, 2)

    successful = [r for r in results if r["success"]]
    failed = [r for r in results if not r["success"]]

    print("\n" + "=" * 70)
    print("SIMULATION RESULTS")
    print("=" * 70)
    print(f"\nSuccessful Orders: {len(successful)}/{num_orders}")
    print(f"Failed Orders: {len(failed)}/{num_orders}")
    print(f"Total Time: {total_time}s")

    if successful:
        avg_time = round(sum(r["time"] for r in successful) / len(successful), 3)
        total_value = sum(r.get("total") or 0 for r in successful)

        print("\nPerformance Metrics:")
        print(f"   Average Response: {avg_time}s")
        print(f"   Fastest: {min(r['time'] for r in successful)}s")
        print(f"   Slowest: {max(r['time'] for r in successful)}s")
        print(f"   Total Order Value: {total_value:.2f}")

    if failed:
        print("\nFailed Order Details (showing first 5):")
        for f in failed[:5]:
            print(f"   Order #{f['order_num']}: {f.get('error', 'Unknown error')}")

    print("=" * 70)

    return {
        "total": num_orders,
        "successful": len(successful),
        "failed": len(failed),
        "total_time": total_time,
        "results": results,
    }


async def check_health() -> bool:
    async with httpx.AsyncClient() as client:
        try:
            response = await client.get(f"{API_BASE_URL}/health")
        except httpx.HTTPError as e:
            print(f"Health check failed: {e}")
            return False

    if response.status_code != 200:
        print(f"Health check failed: {response.text}")
        return False

    data = response.json()
    print(f"Status: {data.get('status')} (database: {data.get('database')})")
    return data.get("status") == "operational"


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="Order Load Simulation Script")
    parser.add_argument("--orders", type=int, default=TOTAL_ORDERS, help="Number of orders")
    parser.add_argument("--base-url", default=API_BASE_URL, help="API base URL")
    parser.add_argument("--skip-health", action="store_true", help="Skip the health pre-check")
    args = parser.parse_args()

    API_BASE_URL = args.base_url.rstrip("/")

    if not args.skip_health and not asyncio.run(check_health()):
        print("\nPre-flight health check failed. Fix issues before running simulation.")
        sys.exit(1)

    asyncio.run(run_simulation(args.orders))

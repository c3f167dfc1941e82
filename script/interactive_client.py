# interactive_client.py
import json
import os
from typing import Any, Dict, Optional

import requests

BASE_URL = os.getenv("CARDWISE_BASE_URL", "http://localhost:8000")


def pretty_print_json(data: Any) -> None:
    print(json.dumps(data, ensure_ascii=False, indent=2))


def call_post(
    path: str,
    json_body: Any = None,
    headers: Optional[Dict[str, str]] = None,
    quiet: bool = False,
) -> Optional[Dict[str, Any]]:
    url = f"{BASE_URL}{path}"
    try:
        resp = requests.post(url, json=json_body, headers=headers, timeout=60)
        print(f"\n[POST] {url}  →  {resp.status_code}")
        if resp.headers.get("content-type", "").startswith("application/json"):
            data = resp.json()
            if not quiet:
                pretty_print_json(data)
            return data
        else:
            print(resp.text)
            return None
    except requests.RequestException as e:
        print(f"Request failed: {e}")
        return None


def call_get(path: str, quiet: bool = False) -> Optional[Dict[str, Any]]:
    url = f"{BASE_URL}{path}"
    try:
        resp = requests.get(url, timeout=30)
        print(f"\n[GET] {url}  →  {resp.status_code}")
        if resp.headers.get("content-type", "").startswith("application/json"):
            data = resp.json()
            if not quiet:
                pretty_print_json(data)
            return data
        else:
            print(resp.text)
            return None
    except requests.RequestException as e:
        print(f"Request failed: {e}")
        return None


def print_search_result(data: Dict[str, Any]) -> None:
    if data.get("status") == "ignored":
        print("\nEmpty query, nothing searched.\n")
        return

    if "detail" in data and "rows" not in data:
        print(f"\n[ERROR] {data['detail']}\n")
        return

    rows = data.get("rows") or []
    print(f"\n----- Best cards for: {data.get('display_query', '')} ({data.get('source', '?')} ranking) -----")
    if not rows:
        print(data.get("empty_message") or "No results.")
        print("------------------------------------------------\n")
        return

    for rank, row in enumerate(rows, start=1):
        print(f"{rank}. {row['name']}")
        print(f"   Best benefit : {row['best_benefit_label']}")
        print(f"   About        : {row['description']}")
        print(f"   Why          : {row['reason']}")

    if data.get("reasoning"):
        print(f"\n[Reasoning] {data['reasoning']}")
    print("------------------------------------------------\n")


def menu_search() -> None:
    print("\n=== Find the best card ===")
    print('Examples: "I shop a lot on Flipkart", "Dining", "airport lounge and travel"')
    query = input("\nQuery:\n> ").strip()
    if not query:
        print("Empty input.")
        return

    data = call_post("/search", json_body={"query": query}, quiet=True)
    if data:
        print_search_result(data)


def menu_popular() -> None:
    data = call_get("/categories", quiet=True)
    if not data:
        return
    popular = data.get("popular_queries") or []
    for idx, label in enumerate(popular, start=1):
        print(f"{idx}. {label}")
    choice = input("Pick a category number: ").strip()
    if not choice.isdigit() or not 1 <= int(choice) <= len(popular):
        print("Invalid choice.")
        return
    result = call_post("/search", json_body={"query": popular[int(choice) - 1]}, quiet=True)
    if result:
        print_search_result(result)


def menu_list_cards() -> None:
    data = call_get("/cards", quiet=True)
    if not data:
        return
    print(f"\n{data.get('total', 0)} card(s)")
    for card in data.get("cards", []):
        print(f"- [{card['id']}] {card['name']} ({card['bankName']}, {card['cardType']})")


def menu_card_detail() -> None:
    card_id = input("Card id (e.g. flipkart-axis-bank-credit-card): ").strip()
    if not card_id:
        print("Empty input.")
        return
    call_get(f"/cards/{card_id}")


def main():
    print("=== Cardwise interactive client ===")
    print(f"BASE_URL: {BASE_URL}")
    print("Start the server first (python main.py or uvicorn main:app --reload)")

    while True:
        print(
            """
---------------- Menu ----------------
1. Search for the best card (/search)
2. Search a popular category (/categories, /search)
3. List the catalog (/cards)
4. Card detail (/cards/{card_id})
5. Service status (/health)
0. Quit
--------------------------------------
"""
        )
        choice = input("Choose: ").strip()

        if choice == "1":
            menu_search()
        elif choice == "2":
            menu_popular()
        elif choice == "3":
            menu_list_cards()
        elif choice == "4":
            menu_card_detail()
        elif choice == "5":
            call_get("/health")
        elif choice == "0":
            print("Bye.")
            break
        else:
            print("Invalid input. Choose 0-5.")


if __name__ == "__main__":
    main()

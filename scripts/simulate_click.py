"""Send signed Click webhook calls to a running server.

Usage:
    python -m scripts.simulate_click prepare --order demo-order-1 --amount 5000
    python -m scripts.simulate_click complete --order demo-order-1 --amount 5000 \
        --prepare-id 1700000000000 [--error -1]

The signature is computed with CLICK_SECRET_KEY from the environment/.env.
"""
import argparse
import logging
import sys
import time
from pathlib import Path

import requests

CURRENT_DIR = Path(__file__).resolve().parent
sys.path.append(str(CURRENT_DIR.parent))

from config.settings import settings  # type: ignore
from core.click_sign import SignatureVerifier  # type: ignore
from core.enums import ClickAction  # type: ignore

logging.basicConfig(level=logging.INFO, format="[%(levelname)s] %(message)s")
logger = logging.getLogger("simulate_click")

def build_payload(args: argparse.Namespace, verifier: SignatureVerifier) -> dict:
    action = ClickAction.Prepare if args.phase == "prepare" else ClickAction.Complete
    payload = {
        "click_trans_id": args.click_trans_id,
        "service_id": args.service_id,
        "click_paydoc_id": args.click_trans_id,
        "merchant_trans_id": args.order,
        "amount": args.amount,
        "action": str(int(action)),
        "error": str(args.error),
        "error_note": "Success" if args.error >= 0 else "Payment failed",
        "sign_time": time.strftime("%Y-%m-%d %H:%M:%S"),
    }
    if args.phase == "complete":
        payload["merchant_prepare_id"] = args.prepare_id
    payload["sign_string"] = verifier.build(
        click_trans_id=payload["click_trans_id"],
        service_id=payload["service_id"],
        merchant_trans_id=payload["merchant_trans_id"],
        merchant_prepare_id=payload.get("merchant_prepare_id"),
        amount=payload["amount"],
        action=payload["action"],
        sign_time=payload["sign_time"],
    )
    return payload

def parse_args(argv=None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Simulate Click prepare/complete webhooks")
    parser.add_argument("phase", choices=["prepare", "complete"])
    parser.add_argument("--base-url", default=f"http://localhost:{settings.PORT}")
    parser.add_argument("--order", required=True, help="merchant_trans_id (order id)")
    parser.add_argument("--amount", required=True)
    parser.add_argument("--click-trans-id", default=str(int(time.time())))
    parser.add_argument("--service-id", default=settings.CLICK_SERVICE_ID or "1")
    parser.add_argument("--prepare-id", help="merchant_prepare_id returned by prepare")
    parser.add_argument("--error", type=int, default=0, help="upstream status, negative cancels")
    args = parser.parse_args(argv)
    if args.phase == "complete" and not args.prepare_id:
        parser.error("--prepare-id is required for complete")
    return args

def main(argv=None) -> int:
    args = parse_args(argv)
    if not settings.CLICK_SECRET_KEY:
        logger.error("CLICK_SECRET_KEY is not set")
        return 1
    payload = build_payload(args, SignatureVerifier(settings.CLICK_SECRET_KEY))
    url = f"{args.base_url}/click/{args.phase}"
    try:
        resp = requests.post(url, data=payload, timeout=20)
    except requests.RequestException as e:
        logger.error("Cannot reach backend at %s: %s", args.base_url, e)
        return 1
    print(f"{resp.status_code} {resp.text}")
    return 0 if resp.ok else 1

if __name__ == "__main__":
    sys.exit(main())

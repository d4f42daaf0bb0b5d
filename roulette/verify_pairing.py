"""Smoke check against a running server: pair two clients and relay an offer.

    python -m roulette.verify_pairing ws://localhost:8000/ws
"""
import asyncio
import json
import sys

import websockets


async def recv_type(ws, expected: str) -> dict:
    msg = json.loads(await ws.recv())
    if msg.get("type") != expected:
        raise AssertionError(f"expected {expected!r}, got {msg}")
    return msg


async def verify(uri: str) -> bool:
    async with websockets.connect(uri) as ws_a, websockets.connect(uri) as ws_b:
        await recv_type(ws_a, "welcome")
        await recv_type(ws_b, "welcome")

        # 1. A waits, B arrives and becomes the initiator
        await ws_a.send(json.dumps({"type": "join"}))
        await ws_b.send(json.dumps({"type": "join"}))
        paired_a = await recv_type(ws_a, "paired")
        paired_b = await recv_type(ws_b, "paired")
        print(f"A: {paired_a}")
        print(f"B: {paired_b}")

        room = paired_a["room"]
        if paired_b["room"] != room or not paired_b["isInitiator"] or paired_a["isInitiator"]:
            print("FAILED: pairing did not agree on room/initiator")
            return False

        # 2. Relay
        offer = {"type": "offer", "sdp": "v=0"}
        await ws_b.send(json.dumps({"type": "signal.offer", "offer": offer, "room": room}))
        relayed = await recv_type(ws_a, "signal.offer")
        if relayed["offer"] != offer:
            print(f"FAILED: offer mismatch, got {relayed}")
            return False
        print("SUCCESS: join -> paired -> signal.offer works!")

        # 3. Skip tears the room down for the partner
        await ws_b.send(json.dumps({"type": "skip"}))
        await recv_type(ws_a, "partnerLeft")
        print("SUCCESS: skip -> partnerLeft works!")
        return True


if __name__ == "__main__":
    uri = sys.argv[1] if len(sys.argv) > 1 else "ws://localhost:8000/ws"
    ok = asyncio.run(verify(uri))
    sys.exit(0 if ok else 1)

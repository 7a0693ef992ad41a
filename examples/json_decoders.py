"""Compare JSON decoding strategies over a few rounds, with a progress bar.

Run with:
    python examples/json_decoders.py
"""

import json

import msgspec

from perfbench import BenchSuite, ProgressEventHandler

PAYLOAD = msgspec.json.encode(
    {
        "e": "bookTicker",
        "u": 400900217,
        "s": "BTCUSDT",
        "b": "25.35190000",
        "B": "31.21000000",
        "a": "25.36520000",
        "A": "40.66000000",
    }
)


class BookTicker(msgspec.Struct):
    e: str
    u: int
    s: str
    b: str
    B: str
    a: str
    A: str


typed_decoder = msgspec.json.Decoder(type=BookTicker)
untyped_decoder = msgspec.json.Decoder()


def stdlib_json(payload):
    return json.loads(payload)["s"]


def msgspec_untyped(payload):
    return untyped_decoder.decode(payload)["s"]


def msgspec_typed(payload):
    return typed_decoder.decode(payload).s


def main(rounds: int = 3) -> None:
    suite = BenchSuite(
        options={"maxCount": 20_000, "filterWarmupAverage": True, "parameters": PAYLOAD},
        event_handler=ProgressEventHandler(width=60),
    )
    suite.register(stdlib_json).register(msgspec_untyped).register(msgspec_typed, "msgspec typed")

    for round_number in range(1, rounds + 1):
        suite.log(f"Round {round_number}:")
        suite.run().show(show_warmup_info=True)

    suite.log("")
    suite.show_totals()
    suite.log("")
    suite.show_placements()


if __name__ == "__main__":
    main()

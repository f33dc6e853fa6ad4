"""
Quickstart example for the Minechain hint engine.

This script demonstrates basic usage of the engine, both in-process and
across the message boundary.
"""

from minechain import HintClient, ProbabilityFacade, RequestKind
from minechain.analysis import format_hints, summarize_forest

# 5x5 board with four mines; clues[y][x]
CLUES = [
    [1, 1, 1, 0, 0],
    [1, "M", 2, 1, 1],
    [2, 2, 2, "M", 1],
    ["M", 1, 2, 2, 2],
    [1, 1, 1, "M", 1],
]
MINES = 4


def main():
    print("=" * 60)
    print("Minechain Hint Engine - Quickstart Example")
    print("=" * 60)

    # Example 1: Drive the engine directly
    print("\n1. Revealing cells one batch at a time...")
    print("-" * 60)

    facade = ProbabilityFacade(CLUES, MINES)
    for batch in ([(0, 0)], [(1, 0)], [(3, 0), (4, 0)]):
        facade.add_squares(batch)
        print(f"Revealed {batch}")
        print(f"  safe:   {sorted(facade.safe)}")
        print(f"  flag:   {sorted(facade.flag)}")
        print(f"  lowest: {sorted(facade.lowest)}")

    # Example 2: Show the hint overlay
    print("\n2. Hint overlay (F = mine, S = safe, L = lowest probability):")
    print("-" * 60)
    print(format_hints(facade))

    # Example 3: Inspect the constraint forest
    print("\n3. Forest statistics:")
    print("-" * 60)
    for key, value in summarize_forest(facade.manager).items():
        print(f"{key:16s} {value:8.2f}")

    # Example 4: Ask through the message boundary
    print("\n4. Requesting hints from the background engine...")
    print("-" * 60)

    client = HintClient()
    try:
        client.init(CLUES, MINES)
        client.reveal([(0, 0), (1, 0)])
        for kind in RequestKind:
            client.request(kind)
            client.engine.join(timeout=10)
            response = client.poll(timeout=1.0)
            cells = list(response.cells) if response is not None else []
            print(f"{kind.value:8s} {cells}")
    finally:
        client.close()

    print("\n" + "=" * 60)
    print("Done!")
    print("=" * 60)


if __name__ == "__main__":
    main()
